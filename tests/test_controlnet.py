import io

import numpy as np
import pytest

from zhengball.controlnet import (
    ControlNet,
    is_boundary,
    load_controlnet,
    num_control_points,
    write_controlnet,
)
from zhengball.errors import ControlNetFormatError, UnsupportedSidesError

TRIANGLE_NET = """3 2
1 1 1  0.3 0.3 1.0
0 2 0  0 5 0
0 2 1  0 2.5 0.2
0 0 2  0 0 6
1 0 2  2 0 3
2 0 0  4 0 0
2 1 0  2 2.5 0
"""


def _entries(text):
    return text.strip().splitlines()[1:]


def test_num_control_points():
    assert num_control_points(3, 2) == 7
    assert num_control_points(3, 2, only_interior=True) == 1
    assert num_control_points(3, 3) == 12
    assert num_control_points(3, 3, only_interior=True) == 3
    assert num_control_points(5, 4) == 31
    assert num_control_points(6, 2) == 13
    assert num_control_points(6, 4, only_interior=True) == 13
    assert num_control_points(5, 5) == 5 * 16 // 4 + 25


def test_is_boundary():
    assert is_boundary((0, 2, 1))
    assert is_boundary((2, 2, 2, 2, 0))
    assert not is_boundary((1, 1, 1))


def test_load_triangle_net():
    net = load_controlnet(io.StringIO(TRIANGLE_NET))
    assert (net.sides, net.degree) == (3, 2)
    assert len(net) == 7
    assert len(net.boundary_indices()) == 6
    assert net.interior_indices() == [(1, 1, 1)]
    assert net[(2, 0, 0)].tolist() == [4.0, 0.0, 0.0]
    assert list(net)[0] == (1, 1, 1)


def test_load_from_path(tmp_path):
    path = tmp_path / 'tri.zhb'
    path.write_text(TRIANGLE_NET)
    net = load_controlnet(path)
    assert net[[0, 0, 2]].tolist() == [0.0, 0.0, 6.0]


def test_points_are_read_only():
    net = load_controlnet(io.StringIO(TRIANGLE_NET))
    with pytest.raises(ValueError):
        net[(1, 1, 1)][0] = 7.0


def test_truncated_file():
    text = "3 2\n" + "\n".join(_entries(TRIANGLE_NET)[:-1]) + "\n2 1 0 2 2.5"
    with pytest.raises(ControlNetFormatError, match='truncated'):
        load_controlnet(io.StringIO(text))


def test_trailing_data():
    with pytest.raises(ControlNetFormatError, match='trailing'):
        load_controlnet(io.StringIO(TRIANGLE_NET + "1 1 1 0 0 0\n"))


def test_malformed_entry():
    bad = TRIANGLE_NET.replace("0 0 2  0 0 6", "0 x 2  0 0 6")
    with pytest.raises(ControlNetFormatError, match='integer'):
        load_controlnet(io.StringIO(bad))
    bad = TRIANGLE_NET.replace("0 0 2  0 0 6", "0 0 2  0 zero 6")
    with pytest.raises(ControlNetFormatError, match='number'):
        load_controlnet(io.StringIO(bad))


def test_duplicate_and_out_of_range_indices():
    dup = TRIANGLE_NET.replace("2 1 0  2 2.5 0", "2 0 0  2 2.5 0")
    with pytest.raises(ControlNetFormatError, match='duplicate'):
        load_controlnet(io.StringIO(dup))
    big = TRIANGLE_NET.replace("2 1 0  2 2.5 0", "3 1 0  2 2.5 0")
    with pytest.raises(ControlNetFormatError, match='exceeds'):
        load_controlnet(io.StringIO(big))


def test_unsupported_sides():
    with pytest.raises(UnsupportedSidesError):
        load_controlnet(io.StringIO("4 2\n"))


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_controlnet(tmp_path / 'missing.zhb')


def test_controlnet_requires_full_net():
    with pytest.raises(ValueError):
        ControlNet(3, 2, {(1, 1, 1): np.zeros(3)})


def test_write_preserves_order_and_values(tmp_path):
    net = load_controlnet(io.StringIO(TRIANGLE_NET))
    path = tmp_path / 'copy.zhb'
    write_controlnet(net, path)

    lines = path.read_text().splitlines()
    assert lines[0] == '3 2'
    assert lines[1] == '1 1 1 0.3 0.3 1'
    reloaded = load_controlnet(path)
    assert list(reloaded) == list(net)
    for index in net:
        assert np.array_equal(reloaded[index], net[index])
