from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Union


def is_exported(name: str) -> bool:
    """Report whether `name` is visible outside its package (upper-case first letter)."""
    return bool(name) and name[0].isupper()


@dataclass(frozen=True)
class Field:
    """One entry of a Go field list: `a, b int`, `...string`, or a bare type."""

    names: tuple[str, ...]
    type: str

    @property
    def variadic(self) -> bool:
        return self.type.startswith("...")


@dataclass(frozen=True)
class TypeSpec:
    name: str
    doc: tuple[str, ...] = ()
    comment: tuple[str, ...] = ()  # trailing line comment
    type_params: tuple[Field, ...] = ()

    @property
    def exported(self) -> bool:
        return is_exported(self.name)


@dataclass(frozen=True)
class TypeDecl:
    specs: tuple[TypeSpec, ...]
    doc: tuple[str, ...] = ()
    grouped: bool = False  # `type ( ... )`


@dataclass(frozen=True)
class FuncDecl:
    name: str
    recv: str | None = None  # receiver type text for methods
    type_params: tuple[Field, ...] = ()
    params: tuple[Field, ...] = ()
    results: tuple[Field, ...] = ()
    doc: tuple[str, ...] = ()

    @property
    def exported(self) -> bool:
        return is_exported(self.name)

    @property
    def is_method(self) -> bool:
        return self.recv is not None


@dataclass(frozen=True)
class OtherDecl:
    token: str  # import, const or var


Declaration = Union[TypeDecl, FuncDecl, OtherDecl]


@dataclass(frozen=True)
class ParsedFile:
    path: Path
    package: str
    decls: tuple[Declaration, ...] = ()


@dataclass(frozen=True)
class ParsedPackage:
    name: str
    files: tuple[ParsedFile, ...] = field(default_factory=tuple)
