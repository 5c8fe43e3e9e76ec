"""Exceptions raised by the patch tools.

Everything derives from :class:`ZhengBallError`; the concrete classes also
derive from :class:`ValueError` so callers that only care about bad input can
catch that.
"""

from __future__ import annotations

from typing import Optional, Sequence

SUPPORTED_SIDES = (3, 5, 6)


class ZhengBallError(Exception):
    """Base class for all patch errors."""


class UnsupportedSidesError(ZhengBallError, ValueError):
    """Raised for side counts a tool or routine does not implement."""

    def __init__(self, sides: int, supported: Sequence[int] = SUPPORTED_SIDES):
        allowed = ", ".join(str(s) for s in supported)
        super().__init__(f"unsupported side count {sides} (supported: {allowed})")
        self.sides = sides
        self.supported = tuple(supported)


class _FileFormatError(ZhengBallError, ValueError):

    def __init__(self, message: str, *, path: Optional[str] = None, line: Optional[int] = None):
        location = ""
        if path is not None:
            location = f"{path}:{line}: " if line is not None else f"{path}: "
        super().__init__(location + message)
        self.path = path
        self.line = line


class ControlNetFormatError(_FileFormatError):
    """A control-net file is truncated, malformed or has the wrong size."""


class ParameterFileError(_FileFormatError):
    """A parameter/topology file cannot be used for tessellation."""


def check_sides(sides: int) -> int:
    """Return ``sides`` unchanged or raise :class:`UnsupportedSidesError`."""

    if sides not in SUPPORTED_SIDES:
        raise UnsupportedSidesError(sides)
    return sides


__all__ = [
    "SUPPORTED_SIDES",
    "ZhengBallError",
    "UnsupportedSidesError",
    "ControlNetFormatError",
    "ParameterFileError",
    "check_sides",
]
