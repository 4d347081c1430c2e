"""gocopycat: re-export the public surface of a Go package through forwarding stubs."""

from __future__ import annotations

from . import errors
from .copycat import CopycatOptions, copy_packages
from .parser.scan import parse_dir
from .resolve import resolve_import_path, resolve_module_import_path, short_pkg_name

__all__ = [
    "CopycatOptions",
    "copy_packages",
    "errors",
    "parse_dir",
    "resolve_import_path",
    "resolve_module_import_path",
    "short_pkg_name",
]
