import pytest

from zhengball.cli import main, main_3sided, main_gbp2zhb, main_nsided, main_tessellate
from zhengball.controlnet import load_controlnet
from zhengball.io import read_obj_records

TRIANGLE_GBP = """3 2
0.3 0.3 1.0
0 5 0
0 2.5 0.2
0 0 6
2 0 3
4 0 0
2 2.5 0
"""


def _records(path):
    return read_obj_records(path)


def test_usage_error_exits_with_one(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main_3sided([])
    assert excinfo.value.code == 1
    assert 'usage: zb-3sided' in capsys.readouterr().err

    with pytest.raises(SystemExit) as excinfo:
        main_nsided(['5', '2', 'a.obj', 'extra'])
    assert excinfo.value.code == 1

    with pytest.raises(SystemExit) as excinfo:
        main_3sided(['two'])
    assert excinfo.value.code == 1


def test_three_sided_tool(tmp_path):
    out = tmp_path / 'tri.obj'
    assert main_3sided(['2', str(out)]) == 0
    params, tris = _records(out)
    assert len(params) == 6
    assert len(tris) == 4
    for x, y, z in params:
        assert abs(x + y + z - 2 * x * y * z - 1) < 1e-6


def test_three_sided_default_name(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert main_3sided(['1']) == 0
    assert (tmp_path / '3sided.obj').exists()


def test_nsided_tool(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert main_nsided(['5', '1']) == 0
    params, tris = _records(tmp_path / '5sided.obj')
    assert len(params) == 6
    assert all(len(p) == 5 for p in params)
    assert len(tris) == 5


def test_nsided_rejects_other_side_counts(tmp_path, capsys):
    assert main_nsided(['4', '2', str(tmp_path / 'x.obj')]) == 1
    assert 'Error: unsupported side count 4' in capsys.readouterr().err
    assert main_nsided(['3', '2', str(tmp_path / 'x.obj')]) == 1
    assert not (tmp_path / 'x.obj').exists()


def test_convert_then_tessellate(tmp_path):
    gbp = tmp_path / 'tri.gbp'
    zhb = tmp_path / 'tri.zhb'
    params = tmp_path / 'params.obj'
    gbp.write_text(TRIANGLE_GBP)

    assert main_gbp2zhb([str(gbp), str(zhb)]) == 0
    assert len(load_controlnet(zhb)) == 7

    params.write_text("v 1 0 0\nv 0 1 0\nv 0 0 1\nf 1 2 3\n")
    out = tmp_path / 'patch.obj'
    assert main_tessellate([str(zhb), str(out), str(params)]) == 0
    points, tris = _records(out)
    assert tris == [(0, 1, 2)]
    assert points[0] == pytest.approx((4.0, 0.0, 0.0))

    # the output is OBJ whatever the file extension
    other = tmp_path / 'patch.stl'
    assert main(['tessellate', str(zhb), str(other), str(params)]) == 0
    assert other.read_text() == out.read_text()


def test_missing_input_reports_error(tmp_path, capsys):
    assert main_tessellate([str(tmp_path / 'none.zhb'), str(tmp_path / 'out.obj')]) == 1
    assert capsys.readouterr().err.startswith('Error:')


def test_dispatcher_usage(capsys):
    assert main([]) == 1
    assert main(['unknown']) == 1
    assert 'Usage' in capsys.readouterr().err
