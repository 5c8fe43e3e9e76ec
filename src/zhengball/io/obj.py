"""Wavefront OBJ reading and writing.

Meshes are written as ``v x y z`` and ``f i j k`` lines with 1-based
indices.  Parameter files reuse the syntax but their ``v`` lines hold one
value per patch side; :func:`read_obj_records` accepts any arity and leaves
the checking to the caller.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Sequence, TextIO, Tuple

from zhengball.errors import ParameterFileError
from zhengball.mesh import TriMesh

logger = logging.getLogger(__name__)


def format_float(value: float) -> str:
    """Format ``value`` with 15 significant digits unless that loses precision."""

    value = float(value)
    text = '%.15g' % value
    return text if float(text) == value else repr(value)


Record = Tuple[float, ...]
Face = Tuple[int, int, int]


def write_obj(mesh: TriMesh, path_or_file) -> None:
    """Write ``mesh`` as an OBJ file."""

    mesh.validate()
    _write(mesh.points, mesh.triangles, path_or_file)


def write_parameters(params: Iterable[Sequence[float]], triangles: Iterable[Sequence[int]],
                     path_or_file) -> None:
    """Write parameter rows and 0-based ``triangles`` as an OBJ-style file."""

    _write(params, triangles, path_or_file)


def _write(rows: Iterable[Sequence[float]], triangles: Iterable[Sequence[int]], path_or_file) -> None:
    close_when_done = False
    if hasattr(path_or_file, 'write'):
        stream = path_or_file
    else:
        stream = open(path_or_file, 'w', encoding='utf-8')
        close_when_done = True

    try:
        for row in rows:
            print('v ' + ' '.join(format_float(x) for x in row), file=stream)
        for a, b, c in triangles:
            print(f"f {a + 1} {b + 1} {c + 1}", file=stream)
    finally:
        if close_when_done:
            stream.close()
    logger.debug("wrote %s", getattr(path_or_file, 'name', path_or_file))


def _vertex_index(token: str, name: str, lineno: int) -> int:
    # "7", "7/2" and "7/2/5" all refer to vertex 7
    head = token.split('/', 1)[0]
    try:
        index = int(head)
    except ValueError:
        raise ParameterFileError(f"bad face index {token!r}", path=name, line=lineno) from None
    if index < 1:
        raise ParameterFileError(f"face indices must be >= 1, got {index}", path=name, line=lineno)
    return index - 1


def _parse(stream: TextIO, name: str) -> Tuple[List[Record], List[Face]]:
    vertices: List[Record] = []
    faces: List[Face] = []
    for lineno, line in enumerate(stream, start=1):
        tokens = line.split()
        if not tokens:
            continue
        tag = tokens[0]
        if tag == 'v':
            try:
                vertices.append(tuple(float(t) for t in tokens[1:]))
            except ValueError:
                raise ParameterFileError("bad vertex record", path=name, line=lineno) from None
        elif tag == 'f':
            if len(tokens) != 4:
                raise ParameterFileError(
                    f"only triangular faces are supported, got {len(tokens) - 1} indices",
                    path=name, line=lineno)
            faces.append(tuple(_vertex_index(t, name, lineno) for t in tokens[1:]))
        # vt, vn, comments, groups and materials carry nothing we use
    return vertices, faces


def read_obj_records(path_or_file) -> Tuple[List[Record], List[Face]]:
    """Return the ``v`` records and 0-based ``f`` triples of an OBJ file."""

    if hasattr(path_or_file, 'read'):
        return _parse(path_or_file, getattr(path_or_file, 'name', '<stream>'))
    path = Path(path_or_file)
    with open(path, 'r', encoding='utf-8') as stream:
        return _parse(stream, str(path))


__all__ = ['format_float', 'write_obj', 'write_parameters', 'read_obj_records']
