"""Conversion of legacy ``.gbp`` control nets into ``.zhb`` files.

A ``.gbp`` file stores ``n d``, a center point (meaningful only for even
``d``) and then the remaining control points without labels, in the order
of a walk over sides, rows and columns.  Conversion recomputes the
multi-index of each point from its walk position; coordinates pass through
unchanged.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterator, List, Tuple

import numpy as np

from zhengball.controlnet import ControlNet, MultiIndex, write_controlnet
from zhengball.errors import ControlNetFormatError, check_sides

logger = logging.getLogger(__name__)

WalkPosition = Tuple[int, int, int]


def legacy_point_count(sides: int, degree: int) -> int:
    """Return the number of points a ``.gbp`` file stores, center included."""

    return sides * (1 + degree // 2) * ((degree + 1) // 2) + 1


def legacy_walk(sides: int, degree: int) -> Iterator[WalkPosition]:
    """Yield ``(side, row, col)`` for each point following the center."""

    side = row = col = 0
    for _ in range(legacy_point_count(sides, degree) - 1):
        if col >= degree - row:
            side += 1
            if side >= sides:
                side = 0
                row += 1
            col = row
        yield side, row, col
        col += 1


def legacy_multi_index(sides: int, degree: int, side: int, row: int, col: int) -> MultiIndex:
    """Return the multi-index of the point at walk position ``(side, row, col)``."""

    n, d = sides, degree
    a, la = side, row
    b, lb = (side + n - 1) % n, col
    if col > d // 2:
        b, lb = a, la
        a, la = (side + 1) % n, d - col

    labels = [d - min(la, lb)] * n
    labels[a] = la
    labels[b] = lb
    labels[(a + 1) % n] = d - lb
    labels[(b + n - 1) % n] = d - la
    return tuple(labels)


def _read_tokens(path_or_file) -> Tuple[List[str], str]:
    if hasattr(path_or_file, 'read'):
        return path_or_file.read().split(), getattr(path_or_file, 'name', '<stream>')
    path = Path(path_or_file)
    return path.read_text(encoding='utf-8').split(), str(path)


def read_gbp(path_or_file) -> ControlNet:
    """Load a legacy ``.gbp`` file as a :class:`ControlNet`.

    For even degrees the center point becomes the control point with every
    label equal to ``d / 2``; for odd degrees it is dropped.
    """

    tokens, name = _read_tokens(path_or_file)
    try:
        sides, degree = int(tokens[0]), int(tokens[1])
        values = [float(t) for t in tokens[2:]]
    except IndexError:
        raise ControlNetFormatError("missing header", path=name) from None
    except ValueError as exc:
        raise ControlNetFormatError(str(exc), path=name) from None
    check_sides(sides)
    if degree < 1:
        raise ControlNetFormatError("degree must be >= 1", path=name)

    count = legacy_point_count(sides, degree)
    if len(values) < 3 * count:
        raise ControlNetFormatError(
            f"truncated file: {count} points expected, found {len(values) // 3}", path=name)
    if len(values) > 3 * count:
        logger.warning("%s: ignoring %d values after the last control point",
                       name, len(values) - 3 * count)

    coords = np.array(values[:3 * count]).reshape(count, 3)
    points: Dict[MultiIndex, np.ndarray] = {}
    if degree % 2 == 0:
        points[(degree // 2,) * sides] = coords[0]
    for cpt, (side, row, col) in zip(coords[1:], legacy_walk(sides, degree)):
        index = legacy_multi_index(sides, degree, side, row, col)
        if index in points:
            raise ControlNetFormatError(f"walk produced duplicate multi-index {index}", path=name)
        points[index] = cpt

    try:
        return ControlNet(sides, degree, points)
    except ValueError as exc:
        raise ControlNetFormatError(str(exc), path=name) from None


def convert_gbp(source, target) -> ControlNet:
    """Convert the ``.gbp`` file ``source`` into the ``.zhb`` file ``target``."""

    net = read_gbp(source)
    write_controlnet(net, target)
    logger.info("converted %d control points to %s", len(net), getattr(target, 'name', target))
    return net


__all__ = [
    "legacy_point_count",
    "legacy_walk",
    "legacy_multi_index",
    "read_gbp",
    "convert_gbp",
]
