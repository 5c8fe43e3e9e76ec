import io

import pytest

from zhengball.errors import ParameterFileError
from zhengball.io import read_obj_records, write_obj, write_parameters
from zhengball.mesh import TriMesh


def _mesh():
    return TriMesh(
        [(0, 0, 0), (1, 0, 0), (0, 1, 0), (2, 0, 0)],
        [(0, 1, 2), (0, 1, 3)],  # the second one is degenerate
    )


def test_write_obj():
    buf = io.StringIO()
    write_obj(_mesh(), buf)
    lines = buf.getvalue().splitlines()
    assert lines[:2] == ['v 0 0 0', 'v 1 0 0']
    assert lines[4:] == ['f 1 2 3', 'f 1 2 4']


def test_write_obj_rejects_dangling_triangles():
    mesh = TriMesh([(0, 0, 0)], [(0, 1, 2)])
    with pytest.raises(ValueError):
        write_obj(mesh, io.StringIO())


def test_write_parameters_keeps_precision(tmp_path):
    path = tmp_path / 'params.obj'
    row = (0.1, 1 / 3, 0.7071067811865476, 0.0, 1.0)
    write_parameters([row], [], path)
    params, tris = read_obj_records(path)
    assert tris == []
    assert params[0] == row


def test_read_rejects_polygons():
    with pytest.raises(ParameterFileError, match='triangular'):
        read_obj_records(io.StringIO("v 0 0 0\nf 1 1 1 1\n"))
    with pytest.raises(ParameterFileError, match='>= 1'):
        read_obj_records(io.StringIO("v 0 0 0\nf 0 1 1\n"))

