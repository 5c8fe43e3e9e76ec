"""Indexed triangle meshes built by the tessellator."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

Face = Tuple[int, int, int]


class TriMesh:
    """3D points plus triangles that refer to them by 0-based index.

    The mesh owns copies of its points; triangles never alias point data.
    """

    def __init__(self, points: Optional[Iterable[Sequence[float]]] = None,
                 triangles: Optional[Iterable[Sequence[int]]] = None):
        self._points: List[np.ndarray] = []
        self._triangles: List[Face] = []
        if points is not None:
            for p in points:
                self.add_point(p)
        if triangles is not None:
            for tri in triangles:
                self.add_triangle(*tri)

    def __len__(self) -> int:
        return len(self._points)

    def __getitem__(self, i: int) -> np.ndarray:
        return self._points[i]

    @property
    def points(self) -> np.ndarray:
        return np.array(self._points, dtype=float).reshape(-1, 3)

    @property
    def triangles(self) -> List[Face]:
        return list(self._triangles)

    def add_point(self, value: Sequence[float]) -> int:
        self._points.append(_as_point(value))
        return len(self._points) - 1

    def add_triangle(self, a: int, b: int, c: int) -> None:
        self._triangles.append((int(a), int(b), int(c)))

    def validate(self) -> None:
        """Raise ``ValueError`` if a triangle refers to a missing point."""

        count = len(self._points)
        for tri in self._triangles:
            if any(i < 0 or i >= count for i in tri):
                raise ValueError(f"triangle {tri} refers to a point outside 0..{count - 1}")


def _as_point(value: Sequence[float]) -> np.ndarray:
    arr = np.array(value, dtype=float)
    if arr.shape != (3,):
        raise ValueError("mesh points must have three coordinates")
    return arr


__all__ = ["TriMesh"]
