from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path


def default_go_src_root(env: Mapping[str, str] | None = None) -> Path:
    """Return the GOPATH-style workspace root used to derive import paths.

    Uses the first entry of `GOPATH` joined with `src`; falls back to Go's
    own default GOPATH (`~/go`).
    """
    if env is None:
        env = os.environ
    gopath = env.get("GOPATH")
    if gopath:
        first = gopath.split(os.pathsep)[0]
        if first:
            return Path(first) / "src"
    return Path(os.path.expanduser("~")) / "go" / "src"
