"""Projection of domain samples onto the patch's implicit parameter surface.

Raw lattice points from :mod:`zhengball.domain` only approximate the
parameter surface of the patch.  Each point is moved onto the surface by
minimizing a squared residual with SciPy's derivative-free Powell method,
refined by several sequential runs, then clamped to non-negative values.

The residuals, per side count:

* 3 sides: ``(x0 + x1 + x2 - 2 x0 x1 x2 - 1)**2``
* 5 sides: ``sum_i (1 - x[i] - x[i+2] x[i+3])**2``
* 6 sides: ``sum_i (xp**2 (1 - xm xi)(1 - 2 xm xi)
  + xp (2 xm - 3 xm**2 xi + xm xi**2) + xm**2 - 1)**2`` with
  ``xm, xi, xp = x[i-1], x[i], x[i+1]``

Indices are cyclic.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Tuple

import numpy as np
from scipy.optimize import minimize

from zhengball.domain import sample_domain, triangulate_domain
from zhengball.errors import check_sides

logger = logging.getLogger(__name__)

Objective = Callable[[np.ndarray], float]

_BARRIER = sys.float_info.max


@dataclass(frozen=True)
class ProjectionSettings:
    """Budget of the projection optimizer.

    ``iterations``, ``step``, ``line_search`` and ``tolerance`` apply to each
    optimizer run; ``refinements`` is the number of sequential runs, each
    starting where the previous one stopped.  With ``barrier`` enabled the
    objective rejects points with a negative component; by default it does
    not and only the final clamp keeps the result non-negative.
    """

    iterations: int = 50
    step: float = 0.2
    line_search: int = 20
    tolerance: float = 1e-8
    refinements: int = 5
    barrier: bool = False

    def __post_init__(self):
        if self.iterations < 1 or self.line_search < 1:
            raise ValueError("iterations and line_search must be >= 1")
        if self.step <= 0 or self.tolerance <= 0:
            raise ValueError("step and tolerance must be positive")
        if self.refinements < 0:
            raise ValueError("refinements must be >= 0")


DEFAULT_SETTINGS = ProjectionSettings()


def _residual_3(x: np.ndarray) -> float:
    return float((x[0] + x[1] + x[2] - 2 * x[0] * x[1] * x[2] - 1) ** 2)


def _residual_5(x: np.ndarray) -> float:
    terms = 1 - x - np.roll(x, -2) * np.roll(x, -3)
    return float(np.sum(terms * terms))


def _residual_6(x: np.ndarray) -> float:
    xm = np.roll(x, 1)
    xp = np.roll(x, -1)
    terms = (xp * xp * (1 - xm * x) * (1 - 2 * xm * x)
             + xp * (2 * xm - 3 * xm * xm * x + xm * x * x)
             + xm * xm - 1)
    return float(np.sum(terms * terms))


_RESIDUALS = {
    3: _residual_3,
    5: _residual_5,
    6: _residual_6,
}


def residual(sides: int, x: Iterable[float]) -> float:
    """Return the squared residual of the ``sides``-sided patch equation at ``x``.

    The value is zero exactly on the parameter surface.
    """

    check_sides(sides)
    arr = np.asarray(x, dtype=float)
    if arr.shape != (sides,):
        raise ValueError(f"expected {sides} parameter components, got {arr.shape}")
    return _RESIDUALS[sides](arr)


def objective(sides: int, settings: ProjectionSettings = DEFAULT_SETTINGS) -> Objective:
    """Return the function minimized when projecting ``sides``-sided points."""

    check_sides(sides)
    base = _RESIDUALS[sides]
    if not settings.barrier:
        return base

    def barrier_objective(x: np.ndarray) -> float:
        if np.any(x < 0):
            return _BARRIER
        return base(x)

    return barrier_objective


def _optimize(f: Objective, x: np.ndarray, settings: ProjectionSettings) -> np.ndarray:
    dim = len(x)
    result = minimize(
        f,
        x,
        method="Powell",
        options={
            "maxiter": settings.iterations,
            "maxfev": settings.iterations * dim * settings.line_search,
            "xtol": settings.tolerance,
            "ftol": settings.tolerance,
            "direc": settings.step * np.eye(dim),
        },
    )
    return np.asarray(result.x, dtype=float)


def project(sides: int, point: Iterable[float],
            settings: ProjectionSettings = DEFAULT_SETTINGS) -> np.ndarray:
    """Project a raw domain sample onto the parameter surface.

    The optimizer runs ``settings.refinements`` times in sequence; negative
    components of the final result are clamped to 0.
    """

    f = objective(sides, settings)
    x = np.array(point, dtype=float)
    if x.shape != (sides,):
        raise ValueError(f"expected {sides} parameter components, got {x.shape}")

    for _ in range(settings.refinements):
        x = _optimize(f, x, settings)

    return np.where(x < 0, 0.0, x)


def project_all(sides: int, points: Iterable[Iterable[float]],
                settings: ProjectionSettings = DEFAULT_SETTINGS) -> np.ndarray:
    """Project every row of ``points``; see :func:`project`."""

    projected = np.array([project(sides, p, settings) for p in points], dtype=float)
    projected = projected.reshape(-1, sides)
    if len(projected):
        worst = max(_RESIDUALS[sides](p) for p in projected)
        logger.info("projected %d parameters, largest residual %.3g", len(projected), worst)
    return projected


def projected_domain(sides: int, resolution: int,
                     settings: Optional[ProjectionSettings] = None
                     ) -> Tuple[np.ndarray, np.ndarray]:
    """Return ``(parameters, triangles)`` for the projected domain lattice."""

    settings = settings or DEFAULT_SETTINGS
    params = project_all(sides, sample_domain(sides, resolution), settings)
    return params, triangulate_domain(sides, resolution)


__all__ = [
    "ProjectionSettings",
    "DEFAULT_SETTINGS",
    "residual",
    "objective",
    "project",
    "project_all",
    "projected_domain",
]
