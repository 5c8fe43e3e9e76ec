"""Tessellation of a patch over a precomputed parameter mesh."""

from __future__ import annotations

import logging
from typing import List, Tuple

from zhengball.basis import ZhengBall
from zhengball.errors import ParameterFileError
from zhengball.io.obj import read_obj_records
from zhengball.mesh import TriMesh

logger = logging.getLogger(__name__)

Parameter = Tuple[float, ...]


def default_parameter_file(sides: int) -> str:
    """Return the file name the domain generators write by default."""

    return f"{sides}sided.obj"


def load_parameters(path_or_file) -> Tuple[List[Parameter], List[Tuple[int, int, int]]]:
    """Read parameters and 0-based triangles from a parameter/topology file.

    Every triangle must refer to an existing parameter.
    """

    params, triangles = read_obj_records(path_or_file)
    name = str(getattr(path_or_file, 'name', path_or_file))
    for tri in triangles:
        if max(tri) >= len(params):
            raise ParameterFileError(
                f"triangle {tuple(i + 1 for i in tri)} refers to a missing parameter "
                f"(file has {len(params)})", path=name)
    return params, triangles


def tessellate(surface: ZhengBall, parameters=None) -> TriMesh:
    """Evaluate ``surface`` at every parameter of a parameter/topology file.

    ``parameters`` is a path or open stream; by default ``<n>sided.obj`` in
    the working directory is used.  The triangles are copied unchanged.
    """

    if parameters is None:
        parameters = default_parameter_file(surface.sides)
    params, triangles = load_parameters(parameters)
    name = str(getattr(parameters, 'name', parameters))

    mesh = TriMesh()
    for lineno, u in enumerate(params, start=1):
        if len(u) != surface.sides:
            raise ParameterFileError(
                f"parameter {lineno} has {len(u)} components, expected {surface.sides}",
                path=name)
        mesh.add_point(surface.eval(u))
    for tri in triangles:
        mesh.add_triangle(*tri)

    logger.info("tessellated %d points and %d triangles from %s",
                len(mesh), len(triangles), name)
    return mesh


__all__ = ["default_parameter_file", "load_parameters", "tessellate"]
