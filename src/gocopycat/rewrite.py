"""Declaration filter and rewriter.

Exported type specs become alias lines and exported free functions become
stubs that forward to the source package. Methods are left out: an aliased
type already carries its methods.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .errors import UnsupportedSignatureError
from .parser.symbols import Declaration, Field, FuncDecl, ParsedFile, TypeDecl, TypeSpec

EXPORTED_FUNC = "exported_func"
TYPE_GROUP = "type_group"
IGNORED = "ignored"

UNNAMED_SYNTHESIZE = "synthesize"
UNNAMED_REJECT = "reject"


@dataclass(frozen=True)
class RewriteOptions:
    comments: bool = True
    unnamed: str = UNNAMED_SYNTHESIZE
    spread_variadic: bool = False
    return_results: bool = False


@dataclass(frozen=True)
class AliasLine:
    name: str
    qualifier: str
    type_params: tuple[Field, ...] = ()
    doc: tuple[str, ...] = ()
    comment: tuple[str, ...] = ()


@dataclass(frozen=True)
class StubFunction:
    name: str
    qualifier: str
    type_params: tuple[Field, ...] = ()
    params: tuple[Field, ...] = ()
    results: tuple[Field, ...] = ()
    args: tuple[str, ...] = ()
    doc: tuple[str, ...] = ()
    spread_variadic: bool = False
    return_results: bool = False


RewrittenDeclaration = Union[AliasLine, StubFunction]


def classify(decl: Declaration) -> str:
    if isinstance(decl, TypeDecl):
        return TYPE_GROUP
    if isinstance(decl, FuncDecl) and decl.exported and not decl.is_method:
        return EXPORTED_FUNC
    return IGNORED


def exported_type_specs(decl: TypeDecl) -> list[TypeSpec]:
    return [s for s in decl.specs if s.exported]


def rewrite_type_spec(
    spec: TypeSpec,
    qualifier: str,
    *,
    doc: tuple[str, ...] = (),
    comments: bool = True,
) -> AliasLine:
    """Alias `spec` to the same-named type in `qualifier`.

    `doc` is the comment block to place above the alias; pass the type spec's own
    doc, or the enclosing declaration's doc for an ungrouped `type T ...`.
    """
    return AliasLine(
        name=spec.name,
        qualifier=qualifier,
        type_params=spec.type_params,
        doc=doc if comments else (),
        comment=spec.comment if comments else (),
    )


def rewrite_type_decl(decl: TypeDecl, qualifier: str, *, comments: bool = True) -> list[AliasLine]:
    out: list[AliasLine] = []
    for i, spec in enumerate(exported_type_specs(decl)):
        doc = spec.doc
        if not decl.grouped:
            doc = decl.doc + spec.doc
        elif i == 0 and decl.doc:
            # The group's own doc precedes its first exported alias.
            doc = decl.doc + spec.doc
        out.append(rewrite_type_spec(spec, qualifier, doc=doc, comments=comments))
    return out


def rewrite_func(decl: FuncDecl, qualifier: str, opts: RewriteOptions | None = None) -> StubFunction:
    """Build a stub with `decl`'s signature whose body calls `qualifier.Name(...)`.

    Unnamed and blank parameters, and parameters named like `qualifier`, are
    renamed positionally (`p0`, `p1`, ...) or rejected, per `opts.unnamed`.
    """
    if opts is None:
        opts = RewriteOptions()
    params = _named_params(decl, qualifier, opts)
    return StubFunction(
        name=decl.name,
        qualifier=qualifier,
        type_params=decl.type_params,
        params=params,
        results=decl.results,
        args=forward_args(params),
        doc=decl.doc if opts.comments else (),
        spread_variadic=opts.spread_variadic,
        return_results=opts.return_results and bool(decl.results),
    )


def forward_args(params: tuple[Field, ...]) -> tuple[str, ...]:
    """Flatten a parameter list into the identifiers to pass, in declared order.

    `(a, b int, c string)` yields `a, b, c`. Type-only fields contribute nothing.
    """
    return tuple(n for f in params for n in f.names)


def rewrite_file(pf: ParsedFile, qualifier: str, opts: RewriteOptions | None = None) -> list[RewrittenDeclaration]:
    if opts is None:
        opts = RewriteOptions()
    out: list[RewrittenDeclaration] = []
    for decl in pf.decls:
        kind = classify(decl)
        if kind == TYPE_GROUP:
            assert isinstance(decl, TypeDecl)
            out.extend(rewrite_type_decl(decl, qualifier, comments=opts.comments))
        elif kind == EXPORTED_FUNC:
            assert isinstance(decl, FuncDecl)
            out.append(rewrite_func(decl, qualifier, opts))
    return out


def _named_params(decl: FuncDecl, qualifier: str, opts: RewriteOptions) -> tuple[Field, ...]:
    # `_` cannot be passed on, and a parameter named like the qualifier would
    # shadow the source package inside the stub body.
    def _needs_rename(name: str) -> bool:
        return name == "_" or name == qualifier

    unnamed = any(not f.names or any(_needs_rename(n) for n in f.names) for f in decl.params)
    if not unnamed:
        return decl.params
    if opts.unnamed == UNNAMED_REJECT:
        raise UnsupportedSignatureError(
            f"func {decl.name}: unnamed, blank or {qualifier!r}-shadowing parameters cannot be forwarded by name"
        )
    if opts.unnamed != UNNAMED_SYNTHESIZE:
        raise ValueError(f"unknown unnamed-parameter policy: {opts.unnamed!r}")

    taken = {n for f in decl.params for n in f.names if not _needs_rename(n)}
    taken.update(n for f in decl.type_params for n in f.names)
    taken.update(n for f in decl.results for n in f.names)
    taken.add(qualifier)

    def fresh(i: int) -> str:
        name = f"p{i}"
        while name in taken:
            name = "_" + name
        taken.add(name)
        return name

    out: list[Field] = []
    i = 0
    for f in decl.params:
        if not f.names:
            out.append(Field(names=(fresh(i),), type=f.type))
            i += 1
            continue
        names: list[str] = []
        for n in f.names:
            names.append(fresh(i) if _needs_rename(n) else n)
            i += 1
        out.append(Field(names=tuple(names), type=f.type))
    return tuple(out)
