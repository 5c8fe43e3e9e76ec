"""Parameter lattices over the n-sided patch domain.

Two functions build the lattice: :func:`sample_domain` produces the
parameter points and :func:`triangulate_domain` produces triangles whose
vertex indices refer to that same ordering.

* **3 sides** - the domain is the barycentric triangle.  Rows run from the
  vertex ``(0, 0, 1)`` towards the opposite side, row ``j`` holding ``j + 1``
  points, so ``(r + 1)(r + 2) / 2`` points and ``r**2`` triangles.
* **5/6 sides** - the lattice is a set of concentric rings around the
  domain center.  Ring ``j`` holds ``n * j`` points, walked side by side, so
  there are ``1 + n r (r + 1) / 2`` points and ``n r**2`` triangles.
"""

from __future__ import annotations

import logging
from math import sqrt
from typing import List, Tuple

import numpy as np

from zhengball.errors import check_sides

logger = logging.getLogger(__name__)

Triangle = Tuple[int, int, int]

_TRIANGLE_CORNERS = np.eye(3)


def domain_size(sides: int, resolution: int) -> int:
    """Return the number of lattice points for ``(sides, resolution)``."""

    check_sides(sides)
    if sides == 3:
        return (resolution + 1) * (resolution + 2) // 2
    return 1 + sides * resolution * (resolution + 1) // 2


def triangle_count(sides: int, resolution: int) -> int:
    """Return the number of lattice triangles for ``(sides, resolution)``."""

    check_sides(sides)
    if sides == 3:
        return resolution * resolution
    return sides * resolution * resolution


def domain_center(sides: int) -> np.ndarray:
    """Return the center of the 5- or 6-sided domain.

    Every component equals ``(sqrt(5) - 1) / 2`` for pentagons and
    ``1 / sqrt(2)`` for hexagons; both satisfy the patch equations exactly.
    """

    if sides == 5:
        value = (sqrt(5) - 1) / 2
    elif sides == 6:
        value = 1 / sqrt(2)
    else:
        check_sides(sides)
        raise ValueError("the 3-sided domain has no ring center")
    return np.full(sides, value)


def domain_corners(sides: int) -> List[np.ndarray]:
    """Return the corner parameters of the 5- or 6-sided domain.

    Corner ``i`` is all ones except for zeros at ``i`` and ``i + 1``.
    """

    corners = []
    for i in range(sides):
        corner = np.ones(sides)
        corner[i] = 0.0
        corner[(i + 1) % sides] = 0.0
        corners.append(corner)
    return corners


def _affine(a: np.ndarray, x: float, b: np.ndarray) -> np.ndarray:
    return a * (1 - x) + b * x


def sample_domain(sides: int, resolution: int) -> np.ndarray:
    """Return the lattice points as an array of shape ``(count, sides)``.

    The output is deterministic: equal arguments give bit-identical arrays.
    """

    check_sides(sides)
    if resolution < 0:
        raise ValueError("resolution must be >= 0")

    if sides == 3:
        params = _sample_triangle(resolution)
    else:
        params = _sample_rings(sides, resolution)

    result = np.array(params, dtype=float).reshape(-1, sides)
    logger.debug("sampled %d parameters for %d sides at resolution %d",
                 len(result), sides, resolution)
    return result


def _sample_triangle(resolution: int) -> List[np.ndarray]:
    v0, v1, v2 = _TRIANGLE_CORNERS
    params: List[np.ndarray] = []
    for j in range(resolution + 1):
        # a zero resolution leaves only the (0, 0, 1) corner
        u = j / resolution if resolution else 0.0
        p = v0 * u + v2 * (1 - u)
        q = v1 * u + v2 * (1 - u)
        for k in range(j + 1):
            v = k / j if j else 1.0
            params.append(p * (1 - v) + q * v)
    return params


def _sample_rings(sides: int, resolution: int) -> List[np.ndarray]:
    corners = domain_corners(sides)
    center = domain_center(sides)
    params: List[np.ndarray] = [center]
    for j in range(1, resolution + 1):
        u = j / resolution
        for k in range(sides):
            for i in range(j):
                edge_point = _affine(corners[k - 1], i / j, corners[k])
                params.append(_affine(center, u, edge_point))
    return params


def triangulate_domain(sides: int, resolution: int) -> np.ndarray:
    """Return lattice triangles as an integer array of shape ``(count, 3)``.

    Indices are 0-based and refer to the ordering of :func:`sample_domain`.
    """

    check_sides(sides)
    if resolution < 0:
        raise ValueError("resolution must be >= 0")

    if sides == 3:
        triangles = _triangulate_triangle(resolution)
    else:
        triangles = _triangulate_rings(sides, resolution)
    return np.array(triangles, dtype=np.int64).reshape(-1, 3)


def _triangulate_triangle(resolution: int) -> List[Triangle]:
    triangles: List[Triangle] = []
    prev, current = 0, 1
    for i in range(resolution):
        for j in range(i):
            triangles.append((current + j, current + j + 1, prev + j))
            triangles.append((current + j + 1, prev + j + 1, prev + j))
        triangles.append((current + i, current + i + 1, prev + i))
        prev = current
        current += i + 2
    return triangles


def _triangulate_rings(sides: int, resolution: int) -> List[Triangle]:
    triangles: List[Triangle] = []
    inner_start, outer_vert = 0, 1
    for layer in range(1, resolution + 1):
        inner_vert, outer_start = inner_start, outer_vert
        for side in range(sides):
            last_side = side == sides - 1
            for vert in range(layer):
                # the final triangles of a ring close back onto its first vertex
                next_vert = outer_start if last_side and vert == layer - 1 else outer_vert + 1
                triangles.append((inner_vert, outer_vert, next_vert))
                outer_vert += 1
                if vert == layer - 1:
                    break
                inner_next = inner_start if last_side and vert == layer - 2 else inner_vert + 1
                triangles.append((inner_vert, next_vert, inner_next))
                inner_vert = inner_next
        inner_start = outer_start
    return triangles


__all__ = [
    "domain_size",
    "triangle_count",
    "domain_center",
    "domain_corners",
    "sample_domain",
    "triangulate_domain",
]
