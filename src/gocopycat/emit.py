from __future__ import annotations

from pathlib import Path
from typing import IO, Iterable

from .errors import CreateError
from .parser.symbols import Field
from .resolve import short_pkg_name
from .rewrite import AliasLine, RewrittenDeclaration, StubFunction


def render_fields(fields: Iterable[Field]) -> str:
    parts: list[str] = []
    for f in fields:
        if f.names:
            parts.append(f"{', '.join(f.names)} {f.type}")
        else:
            parts.append(f.type)
    return ", ".join(parts)


def render_results(results: tuple[Field, ...]) -> str:
    if not results:
        return ""
    if len(results) == 1 and not results[0].names:
        return f" {results[0].type}"
    return f" ({render_fields(results)})"


def _type_params(fields: tuple[Field, ...]) -> str:
    if not fields:
        return ""
    return f"[{render_fields(fields)}]"


def _type_args(fields: tuple[Field, ...]) -> str:
    names = [n for f in fields for n in f.names]
    if not names:
        return ""
    return f"[{', '.join(names)}]"


def render_alias(a: AliasLine) -> str:
    line = f"type {a.name}{_type_params(a.type_params)} = {a.qualifier}.{a.name}{_type_args(a.type_params)}"
    if a.comment:
        line = f"{line} {' '.join(a.comment)}"
    return "\n".join([*a.doc, line]) + "\n"


def render_stub(s: StubFunction) -> str:
    args = list(s.args)
    if s.spread_variadic and args and s.params and s.params[-1].variadic:
        args[-1] = f"{args[-1]}..."
    call = f"{s.qualifier}.{s.name}{_type_args(s.type_params)}({', '.join(args)})"
    if s.return_results:
        call = f"return {call}"
    sig = f"func {s.name}{_type_params(s.type_params)}({render_fields(s.params)}){render_results(s.results)}"
    return "\n".join([*s.doc, f"{sig} {{", f"\t{call}", "}"]) + "\n"


def render(decl: RewrittenDeclaration) -> str:
    if isinstance(decl, AliasLine):
        return render_alias(decl)
    if isinstance(decl, StubFunction):
        return render_stub(decl)
    raise TypeError(f"cannot render {type(decl).__name__}")


def render_blocks(decls: Iterable[RewrittenDeclaration]) -> str:
    """Render declarations in order, one blank line between blocks."""
    return "\n".join(render(d) for d in decls)


def render_header(*, package_clause: str | None, import_path: str | None, qualifier: str) -> str:
    """Render the optional `package` clause and import of the source package.

    The import is named when `qualifier` differs from the import path's last
    element.
    """
    parts: list[str] = []
    if package_clause:
        parts.append(f"package {package_clause}\n")
    if import_path:
        if short_pkg_name(import_path) == qualifier:
            parts.append(f'import "{import_path}"\n')
        else:
            parts.append(f'import {qualifier} "{import_path}"\n')
    return "\n".join(parts)


def join_sections(*sections: str) -> str:
    return "\n".join(s for s in sections if s)


def write_stream(text: str, out: IO[str], *, separate: bool = False) -> None:
    if not text:
        return
    if separate:
        out.write("\n")
    out.write(text)


def write_file(dest_dir: Path, source_path: Path, text: str) -> Path:
    """Write `text` to `<dest_dir>/<basename of source_path>`, replacing any existing file."""
    dest = Path(dest_dir) / Path(source_path).name
    try:
        f = dest.open("w", encoding="utf-8")
    except OSError as e:
        raise CreateError(f"failed to create {dest}: {e}") from e
    with f:
        f.write(text)
    return dest
