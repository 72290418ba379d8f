"""Installed version of the completion-gateway distribution."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

# Source checkouts without installed metadata report this instead.
__fallback_version__ = "0.1.0"

try:
    __version__ = _pkg_version("completion-gateway")
except PackageNotFoundError:
    __version__ = __fallback_version__

__all__ = ["__version__"]
