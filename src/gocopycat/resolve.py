from __future__ import annotations

import re
from pathlib import Path

from .errors import ResolutionError

_MODULE_RE = re.compile(r'^\s*module\s+"?([^\s"]+)"?', re.MULTILINE)


def resolve_import_path(source_dir: Path, root: Path) -> str:
    """Derive the import path of `source_dir` relative to a GOPATH-style root.

    `<root>/example.org/pkg` yields `example.org/pkg`. The path is always
    slash-delimited, whatever the host separator.
    """
    source_dir = Path(source_dir)
    if not source_dir.is_dir():
        raise ResolutionError(f"source directory not found: {source_dir}")
    source_dir = source_dir.resolve()
    root = Path(root).resolve()
    try:
        rel = source_dir.relative_to(root)
    except ValueError as e:
        raise ResolutionError(f"{source_dir} is not under workspace root {root}") from e
    if not rel.parts:
        raise ResolutionError(f"{source_dir} is the workspace root itself, not a package under it")
    return "/".join(rel.parts)


def resolve_module_import_path(source_dir: Path) -> str:
    """Derive the import path of `source_dir` from the nearest enclosing go.mod.

    A subdirectory of a module maps to `<module path>/<subdir>`.
    """
    source_dir = Path(source_dir)
    if not source_dir.is_dir():
        raise ResolutionError(f"source directory not found: {source_dir}")
    source_dir = source_dir.resolve()

    for module_dir in (source_dir, *source_dir.parents):
        go_mod = module_dir / "go.mod"
        if go_mod.is_file():
            break
    else:
        raise ResolutionError(f"go.mod not found in {source_dir} or any parent directory")

    m = _MODULE_RE.search(go_mod.read_text(encoding="utf-8"))
    if m is None:
        raise ResolutionError(f"failed to parse module path from {go_mod}")
    rel = source_dir.relative_to(module_dir)
    return "/".join([m.group(1), *rel.parts])


def short_pkg_name(import_path: str) -> str:
    """Return the last element of an import path (`robpike.io/ivy` -> `ivy`)."""
    return import_path.rstrip("/").rsplit("/", 1)[-1]
