# -*- coding: utf-8 -*-
"""Triangulated approximations of multi-sided Zheng-Ball surface patches."""

from importlib.metadata import PackageNotFoundError, version

from zhengball.errors import SUPPORTED_SIDES

try:
    __version__ = version("zhengball")
except PackageNotFoundError:  # pragma: no cover - handled when package not installed
    __version__ = "unknown"

__all__ = ["SUPPORTED_SIDES", "__version__"]
