from __future__ import annotations

import argparse
import importlib.metadata
from pathlib import Path

from .errors import GoCopycatError


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gocopycat")
    sub = parser.add_subparsers(dest="cmd", required=True)

    sub.add_parser("version", help="Print gocopycat version.")

    p_copy = sub.add_parser(
        "copy",
        help="Emit type aliases and forwarding stubs for the exported surface of a Go package.",
    )
    p_copy.add_argument("--dir", "--from", dest="dir", required=True, help="Go source directory to parse.")
    p_copy.add_argument("--pkg", default="", help="Only copy declarations of this package (default: all).")
    p_copy.add_argument("--to", default=None, help="Destination directory (default: write to stdout).")
    p_copy.add_argument(
        "--qualifier",
        default=None,
        help="Qualifier used in aliases and forwarding calls (default: source package name).",
    )
    where = p_copy.add_mutually_exclusive_group()
    where.add_argument("--import-path", default=None, help="Import path of the source package.")
    where.add_argument(
        "--resolve",
        choices=["gopath", "module"],
        default=None,
        help="Derive the import path from a GOPATH-style root or from the enclosing go.mod.",
    )
    p_copy.add_argument(
        "--root",
        default=None,
        help="Workspace root for --resolve gopath (default: $GOPATH/src, or ~/go/src).",
    )
    p_copy.add_argument(
        "--package-clause",
        nargs="?",
        const="",
        default=None,
        help="Emit a package clause in each output file (bare flag: reuse the source package name).",
    )
    p_copy.add_argument("--no-comments", action="store_true", help="Drop doc and line comments.")
    p_copy.add_argument("--tests", action="store_true", help="Include _test.go files.")
    p_copy.add_argument(
        "--unnamed",
        choices=["synthesize", "reject"],
        default="synthesize",
        help="How to handle functions with unnamed parameters (default: synthesize p0, p1, ...).",
    )
    p_copy.add_argument(
        "--spread-variadic",
        action="store_true",
        help="Forward a variadic last parameter with `...`.",
    )
    p_copy.add_argument(
        "--return-results",
        action="store_true",
        help="Return the forwarded call's results from stubs that declare results.",
    )

    p_resolve = sub.add_parser("resolve", help="Print the import path and short name of a Go source directory.")
    p_resolve.add_argument("--dir", "--from", dest="dir", required=True, help="Go source directory.")
    how = p_resolve.add_mutually_exclusive_group()
    how.add_argument("--root", default=None, help="Workspace root (default: $GOPATH/src, or ~/go/src).")
    how.add_argument("--module", action="store_true", help="Resolve from the enclosing go.mod instead.")
    return parser


def _import_path(args: argparse.Namespace) -> str | None:
    from .paths import default_go_src_root
    from .resolve import resolve_import_path, resolve_module_import_path

    if args.import_path:
        return args.import_path
    if args.resolve == "module":
        return resolve_module_import_path(Path(args.dir))
    if args.resolve == "gopath":
        root = Path(args.root) if args.root else default_go_src_root()
        return resolve_import_path(Path(args.dir), root)
    return None


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.cmd == "version":
        try:
            print(importlib.metadata.version("gocopycat"))
        except importlib.metadata.PackageNotFoundError:
            # Source checkouts that were never installed.
            print("0.0.0")
        return

    try:
        _run(args)
    except GoCopycatError as e:
        raise SystemExit(f"gocopycat: {e}") from e


def _run(args: argparse.Namespace) -> None:
    if args.cmd == "copy":
        from .copycat import CopycatOptions, copy_packages

        options = CopycatOptions(
            source_dir=Path(args.dir),
            package=args.pkg,
            dest_dir=Path(args.to) if args.to else None,
            qualifier=args.qualifier,
            import_path=_import_path(args),
            package_clause=args.package_clause,
            comments=not args.no_comments,
            include_tests=bool(args.tests),
            unnamed=args.unnamed,
            spread_variadic=bool(args.spread_variadic),
            return_results=bool(args.return_results),
        )
        for path in copy_packages(options):
            print(f"wrote: {path}")
        return

    if args.cmd == "resolve":
        from .paths import default_go_src_root
        from .resolve import resolve_import_path, resolve_module_import_path, short_pkg_name

        if args.module:
            import_path = resolve_module_import_path(Path(args.dir))
        else:
            root = Path(args.root) if args.root else default_go_src_root()
            import_path = resolve_import_path(Path(args.dir), root)
        print(import_path)
        print(short_pkg_name(import_path))
        return
