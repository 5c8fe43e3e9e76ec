#!/usr/bin/env python3
"""
Command-line tools for generating and tessellating Zheng-Ball patches.

Usage:
    zb-3sided <resolution> [filename]
    zb-nsided <sides> <resolution> [filename]
    zb-tessellate <input.zhb> <output.obj> [parameters.obj]
    zb-gbp2zhb <input.gbp> <output.zhb>

The same tools run as ``python -m zhengball.cli TOOL ARGS...``.

Examples:
    # Projected parameter lattice of a hexagonal patch, written to 6sided.obj
    zb-nsided 6 20

    # Evaluate a control net over it
    zb-tessellate patch.zhb patch.obj 6sided.obj
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, Dict, List, Optional, Sequence

from zhengball.basis import ZhengBall
from zhengball.errors import UnsupportedSidesError, ZhengBallError
from zhengball.io import write_obj, write_parameters
from zhengball.legacy import convert_gbp
from zhengball.logging_config import setup_logging
from zhengball.mesh import TriMesh
from zhengball.projection import projected_domain
from zhengball.tessellate import default_parameter_file, tessellate


class UsageParser(argparse.ArgumentParser):
    """Argument parser that reports usage errors with exit status 1."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def _count(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0: {value}")
    return number


def _parser(prog: str, description: str) -> UsageParser:
    return UsageParser(prog=prog, description=description, add_help=False)


def _run(action: Callable[[argparse.Namespace], None], parser: UsageParser,
         argv: Optional[Sequence[str]]) -> int:
    args = parser.parse_args(argv)
    setup_logging(logging.WARNING)
    try:
        action(args)
    except (ZhengBallError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def _three_sided(args: argparse.Namespace) -> None:
    params, triangles = projected_domain(3, args.resolution)
    write_obj(TriMesh(params, triangles), args.filename or default_parameter_file(3))


def _n_sided(args: argparse.Namespace) -> None:
    if args.sides not in (5, 6):
        raise UnsupportedSidesError(args.sides, supported=(5, 6))
    params, triangles = projected_domain(args.sides, args.resolution)
    write_parameters(params, triangles, args.filename or default_parameter_file(args.sides))


def _tessellate(args: argparse.Namespace) -> None:
    mesh = tessellate(ZhengBall.load(args.input), args.parameters)
    write_obj(mesh, args.output)


def _gbp2zhb(args: argparse.Namespace) -> None:
    convert_gbp(args.input, args.output)


def main_3sided(argv: Optional[Sequence[str]] = None) -> int:
    parser = _parser("zb-3sided", "Projected parameter mesh of a 3-sided patch.")
    parser.add_argument("resolution", type=_count)
    parser.add_argument("filename", nargs="?")
    return _run(_three_sided, parser, argv)


def main_nsided(argv: Optional[Sequence[str]] = None) -> int:
    parser = _parser("zb-nsided", "Projected parameter mesh of a 5- or 6-sided patch.")
    parser.add_argument("sides", type=_count)
    parser.add_argument("resolution", type=_count)
    parser.add_argument("filename", nargs="?")
    return _run(_n_sided, parser, argv)


def main_tessellate(argv: Optional[Sequence[str]] = None) -> int:
    parser = _parser("zb-tessellate", "Evaluate a control net over a parameter mesh.")
    parser.add_argument("input")
    parser.add_argument("output")
    parser.add_argument("parameters", nargs="?")
    return _run(_tessellate, parser, argv)


def main_gbp2zhb(argv: Optional[Sequence[str]] = None) -> int:
    parser = _parser("zb-gbp2zhb", "Convert a legacy .gbp control net to .zhb.")
    parser.add_argument("input")
    parser.add_argument("output")
    return _run(_gbp2zhb, parser, argv)


TOOLS: Dict[str, Callable[[Optional[Sequence[str]]], int]] = {
    "3sided": main_3sided,
    "nsided": main_nsided,
    "tessellate": main_tessellate,
    "gbp2zhb": main_gbp2zhb,
}


def main(argv: Optional[List[str]] = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv or argv[0] not in TOOLS:
        print(f"Usage: python -m zhengball.cli {{{','.join(TOOLS)}}} ARGS...", file=sys.stderr)
        return 1
    return TOOLS[argv[0]](argv[1:])


if __name__ == '__main__':
    sys.exit(main())
