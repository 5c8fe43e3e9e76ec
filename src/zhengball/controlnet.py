"""Control nets of Zheng-Ball patches and the ``.zhb`` file format.

A control net maps multi-indices (one non-negative integer per side) to 3D
control points.  An index with a zero component lies on that side of the
domain and is a *boundary* index; all other indices are *interior*.

The ``.zhb`` layout is plain whitespace-separated text::

    n m
    l_0 ... l_{n-1} x y z      (one line per control point)

with exactly :func:`num_control_points` entries after the header.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Mapping, Sequence, Tuple, Union

import numpy as np

from zhengball.errors import ControlNetFormatError, check_sides
from zhengball.io.obj import format_float

logger = logging.getLogger(__name__)

MultiIndex = Tuple[int, ...]
PathOrFile = Union[str, Path, io.TextIOBase]


def num_control_points(sides: int, degree: int, only_interior: bool = False) -> int:
    """Return the control point count of a degree ``degree`` net.

    With ``only_interior`` the ``sides * degree`` boundary points are left out.
    """

    if degree % 2 == 0:
        interior = sides * (degree - 2) * degree // 4 + 1
    else:
        interior = sides * (degree - 1) * (degree - 1) // 4
    return interior if only_interior else interior + sides * degree


def is_boundary(index: Sequence[int]) -> bool:
    """Return ``True`` if ``index`` lies on a side of the domain."""

    return 0 in index


@dataclass(frozen=True, eq=False)
class ControlNet:
    """Read-only mapping of multi-indices to control points."""

    sides: int
    degree: int
    points: Mapping[MultiIndex, np.ndarray] = field(repr=False)

    def __post_init__(self):
        check_sides(self.sides)
        if self.degree < 1:
            raise ValueError("degree must be >= 1")

        points: Dict[MultiIndex, np.ndarray] = {}
        for index, cpt in self.points.items():
            key = tuple(int(i) for i in index)
            if len(key) != self.sides:
                raise ValueError(f"multi-index {key} does not have {self.sides} components")
            if any(i < 0 or i > self.degree for i in key):
                raise ValueError(f"multi-index {key} is outside 0..{self.degree}")
            value = np.array(cpt, dtype=float)
            if value.shape != (3,):
                raise ValueError(f"control point {key} is not a 3D point")
            value.setflags(write=False)
            points[key] = value

        expected = num_control_points(self.sides, self.degree)
        if len(points) != expected:
            raise ValueError(f"a {self.sides}-sided degree {self.degree} net needs "
                             f"{expected} control points, got {len(points)}")
        object.__setattr__(self, "points", points)

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[MultiIndex]:
        return iter(self.points)

    def __getitem__(self, index: Sequence[int]) -> np.ndarray:
        return self.points[tuple(index)]

    def items(self):
        return self.points.items()

    def boundary_indices(self) -> List[MultiIndex]:
        return [index for index in self.points if is_boundary(index)]

    def interior_indices(self) -> List[MultiIndex]:
        return [index for index in self.points if not is_boundary(index)]


def _read_text(path_or_file: PathOrFile) -> Tuple[str, str]:
    if hasattr(path_or_file, "read"):
        return path_or_file.read(), getattr(path_or_file, "name", "<stream>")
    path = Path(path_or_file)
    return path.read_text(encoding="utf-8"), str(path)


def _take_int(tokens: List[str], pos: int, name: str, what: str) -> int:
    try:
        value = int(tokens[pos])
    except IndexError:
        raise ControlNetFormatError(f"unexpected end of file while reading {what}", path=name) from None
    except ValueError:
        raise ControlNetFormatError(f"expected an integer for {what}, got {tokens[pos]!r}", path=name) from None
    if value < 0:
        raise ControlNetFormatError(f"negative value in {what}", path=name)
    return value


def _take_float(tokens: List[str], pos: int, name: str, what: str) -> float:
    try:
        return float(tokens[pos])
    except IndexError:
        raise ControlNetFormatError(f"unexpected end of file while reading {what}", path=name) from None
    except ValueError:
        raise ControlNetFormatError(f"expected a number for {what}, got {tokens[pos]!r}", path=name) from None


def load_controlnet(path_or_file: PathOrFile) -> ControlNet:
    """Load a ``.zhb`` control net.

    ``path_or_file`` can be a filesystem path or an open text stream.  Any
    deviation from the layout, including a wrong number of entries for the
    declared sides and degree, raises :class:`ControlNetFormatError`.
    """

    text, name = _read_text(path_or_file)
    tokens = text.split()

    sides = _take_int(tokens, 0, name, "the side count")
    degree = _take_int(tokens, 1, name, "the degree")
    check_sides(sides)
    if degree < 1:
        raise ControlNetFormatError("degree must be >= 1", path=name)

    count = num_control_points(sides, degree)
    width = sides + 3
    expected = 2 + count * width
    if len(tokens) < expected:
        raise ControlNetFormatError(
            f"truncated control net: {count} entries expected, "
            f"found {(len(tokens) - 2) // width}", path=name)
    if len(tokens) > expected:
        raise ControlNetFormatError(
            f"trailing data after {count} control points", path=name)

    points: Dict[MultiIndex, np.ndarray] = {}
    pos = 2
    for entry in range(count):
        what = f"control point {entry + 1}"
        index = tuple(_take_int(tokens, pos + j, name, what) for j in range(sides))
        cpt = [_take_float(tokens, pos + sides + j, name, what) for j in range(3)]
        pos += width
        if any(i > degree for i in index):
            raise ControlNetFormatError(f"multi-index {index} exceeds degree {degree}", path=name)
        if index in points:
            raise ControlNetFormatError(f"duplicate multi-index {index}", path=name)
        points[index] = np.array(cpt)

    net = ControlNet(sides, degree, points)
    logger.info("loaded %d-sided degree %d control net from %s (%d points)",
                sides, degree, name, len(net))
    return net


def write_controlnet(net: ControlNet, path_or_file: PathOrFile) -> None:
    """Write ``net`` in ``.zhb`` layout, preserving its iteration order."""

    close_when_done = False
    if hasattr(path_or_file, "write"):
        stream = path_or_file
    else:
        stream = open(path_or_file, "w", encoding="utf-8")
        close_when_done = True

    try:
        print(f"{net.sides} {net.degree}", file=stream)
        for index, cpt in net.items():
            labels = " ".join(str(i) for i in index)
            coords = " ".join(format_float(c) for c in cpt)
            print(f"{labels} {coords}", file=stream)
    finally:
        if close_when_done:
            stream.close()


__all__ = [
    "MultiIndex",
    "ControlNet",
    "num_control_points",
    "is_boundary",
    "load_controlnet",
    "write_controlnet",
]
