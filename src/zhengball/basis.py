"""Zheng-Ball blending functions over multi-sided control nets.

For a parameter ``u`` (one component per side) every control point gets a
blending weight:

* boundary index ``l`` with ``l[i] == 0``, neighbours ``im = i - 1`` and
  ``ip = i + 1``, ``k = l[im]``::

      B = C(m, k) u[im]**k u[ip]**(m - k) * prod_{j not in {im, i, ip}} u[j]**m

  multiplied by ``1 - u[i] f`` for triangles (``f`` depends on which half of
  the side ``k`` falls into) and by ``1 - m c(n) prod_j u[j]`` otherwise;
* interior index ``l`` with smallest component at ``i``::

      B = C(m, l[im]) C(m, l[i]) prod_j u[j]**l[j]

  after shifting ``(im, i)`` one step forward when ``l[im] > l[ip]``.

The weights do not sum to one; the excess ``S = sum(B) - 1`` is removed in
equal shares from the interior control points.
"""

from __future__ import annotations

from typing import Dict, Iterable, Sequence, Tuple

import numpy as np

from zhengball.controlnet import (
    ControlNet,
    MultiIndex,
    is_boundary,
    load_controlnet,
    num_control_points,
)
from zhengball.errors import UnsupportedSidesError

_SIDE_COEFFICIENTS = {3: 2.0, 5: 1.0, 6: 2.0}


def binomial(n: int, k: int) -> int:
    """Return ``C(n, k)``, or 0 when ``k > n``."""

    if k > n:
        return 0
    result = 1
    for d in range(1, k + 1):
        result = result * n // d
        n -= 1
    return result


def side_coefficient(sides: int) -> float:
    """Return the constant of the boundary correction factor for ``sides``."""

    try:
        return _SIDE_COEFFICIENTS[sides]
    except KeyError:
        raise UnsupportedSidesError(sides) from None


def _boundary_weight(index: MultiIndex, u: Tuple[float, ...], degree: int) -> float:
    n, m = len(index), degree
    i = index.index(0)
    im, ip = (i - 1) % n, (i + 1) % n
    k = index[im]
    weight = binomial(m, k) * u[im] ** k * u[ip] ** (m - k)
    for j in range(n):
        if j not in (im, i, ip):
            weight *= u[j] ** m

    if n == 3:
        if m - k <= k:
            f = (m - k) + (2 * k - m) * u[ip]
        else:
            f = k + (m - 2 * k) * u[im]
        return weight * (1 - u[i] * f)

    prod = 1.0
    for value in u:
        prod *= value
    return weight * (1 - m * side_coefficient(n) * prod)


def _interior_weight(index: MultiIndex, u: Tuple[float, ...], degree: int) -> float:
    n = len(index)
    i = index.index(min(index))
    im, ip = (i - 1) % n, (i + 1) % n
    if index[im] > index[ip]:
        im, i = i, ip
    weight = float(binomial(degree, index[im]) * binomial(degree, index[i]))
    for value, exponent in zip(u, index):
        weight *= value ** exponent
    return weight


def blend_weight(index: Sequence[int], u: Sequence[float], degree: int) -> float:
    """Return the uncorrected blending weight of ``index`` at ``u``."""

    index = tuple(index)
    u = tuple(float(x) for x in u)
    if is_boundary(index):
        return _boundary_weight(index, u, degree)
    return _interior_weight(index, u, degree)


class ZhengBall:
    """An n-sided Zheng-Ball patch defined by a :class:`ControlNet`."""

    def __init__(self, net: ControlNet):
        side_coefficient(net.sides)
        self.net = net
        self._interior = frozenset(net.interior_indices())

    @classmethod
    def load(cls, path_or_file) -> "ZhengBall":
        """Create a patch from a ``.zhb`` control-net file."""
        return cls(load_controlnet(path_or_file))

    @property
    def sides(self) -> int:
        return self.net.sides

    @property
    def degree(self) -> int:
        return self.net.degree

    def _parameter(self, u: Iterable[float]) -> Tuple[float, ...]:
        values = tuple(float(x) for x in u)
        if len(values) != self.sides:
            raise ValueError(f"expected {self.sides} parameter components, got {len(values)}")
        return values

    def _raw_weights(self, u: Tuple[float, ...]) -> Dict[MultiIndex, float]:
        weights = {}
        for index in self.net:
            if index in self._interior:
                weights[index] = _interior_weight(index, u, self.degree)
            else:
                weights[index] = _boundary_weight(index, u, self.degree)
        return weights

    def _correction(self, raw: Dict[MultiIndex, float]) -> float:
        excess = sum(raw.values()) - 1
        count = num_control_points(self.sides, self.degree, only_interior=True)
        return excess / count if count else 0.0

    def weights(self, u: Iterable[float]) -> Dict[MultiIndex, float]:
        """Return the corrected weight of every control point at ``u``.

        The values sum to one up to rounding.
        """

        raw = self._raw_weights(self._parameter(u))
        share = self._correction(raw)
        return {index: w - share if index in self._interior else w
                for index, w in raw.items()}

    def eval(self, u: Iterable[float]) -> np.ndarray:
        """Evaluate the surface point at parameter ``u``."""

        raw = self._raw_weights(self._parameter(u))
        result = np.zeros(3)
        for index, weight in raw.items():
            result += self.net[index] * weight

        share = self._correction(raw)
        for index in self.net:
            if index in self._interior:
                result -= self.net[index] * share
        return result


__all__ = [
    "binomial",
    "side_coefficient",
    "blend_weight",
    "ZhengBall",
]
