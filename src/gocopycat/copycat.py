from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import IO

from .emit import join_sections, render_blocks, render_header, write_file, write_stream
from .parser.scan import parse_dir
from .rewrite import UNNAMED_SYNTHESIZE, RewriteOptions, rewrite_file


@dataclass(frozen=True)
class CopycatOptions:
    source_dir: Path
    package: str | None = None  # None or "" = every package found
    dest_dir: Path | None = None  # None = stream mode
    qualifier: str | None = None  # default: the parsed package name
    import_path: str | None = None
    package_clause: str | None = None  # "" = reuse the source package name
    comments: bool = True
    include_tests: bool = False
    unnamed: str = UNNAMED_SYNTHESIZE
    spread_variadic: bool = False
    return_results: bool = False

    def rewrite_options(self) -> RewriteOptions:
        return RewriteOptions(
            comments=self.comments,
            unnamed=self.unnamed,
            spread_variadic=self.spread_variadic,
            return_results=self.return_results,
        )


def copy_packages(
    options: CopycatOptions,
    *,
    out: IO[str] | None = None,
    env: dict[str, str] | None = None,
) -> list[Path]:
    """Emit the facade of every matching package in `options.source_dir`.

    Stream mode (no `dest_dir`) writes everything to `out` (default stdout) and
    returns an empty list. File mode writes one file per source file, with the
    same base name, into `dest_dir` and returns the written paths.

    The first error aborts the run. Files already written are left in place.
    """
    packages = parse_dir(options.source_dir, include_tests=options.include_tests, env=env)
    ropts = options.rewrite_options()
    if out is None:
        out = sys.stdout

    written: list[Path] = []
    wrote_any = False
    for pkg in packages:
        if options.package and pkg.name != options.package:
            continue
        qualifier = options.qualifier or pkg.name

        clause = options.package_clause
        if clause == "":
            clause = pkg.name

        for pf in pkg.files:
            body = render_blocks(rewrite_file(pf, qualifier, ropts))
            if options.dest_dir is None:
                write_stream(body, out, separate=wrote_any)
                wrote_any = wrote_any or bool(body)
                continue
            # A file with nothing to forward must not import the source package.
            header = render_header(
                package_clause=clause,
                import_path=options.import_path if body else None,
                qualifier=qualifier,
            )
            written.append(write_file(options.dest_dir, pf.path, join_sections(header, body)))
    return written
