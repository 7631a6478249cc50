"""Statements produced by the translator.

Each statement is one renderable declaration. They are built once per
top-level entity and never modified afterwards.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from ..config import DEFAULT_DERIVES, Ownership
from ..translator.availability import Availability
from ..translator.expr import Expr
from ..translator.macros import UnexposedMacro
from ..translator.method import Method
from ..translator.types import Ty


@dataclass(frozen=True, slots=True)
class Derives:
    """Comma-joined capability list rendered as a derive attribute."""

    value: str = DEFAULT_DERIVES

    def __str__(self) -> str:
        if not self.value:
            return ""
        return f"#[derive({self.value})]"


@dataclass(frozen=True, slots=True)
class ClassDefReference:
    name: str
    generics: Tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ClassDecl:
    """``@interface Name : Super <Protocols>``"""

    ty: ClassDefReference
    availability: Availability
    superclasses: Tuple[ClassDefReference, ...]
    designated_initializers: Tuple[str, ...] = ()
    derives: Derives = Derives()
    ownership: Ownership = Ownership.SHARED


@dataclass(frozen=True, slots=True)
class Methods:
    """Methods of a class body or of a category (``@interface Name (Category)``)."""

    ty: ClassDefReference
    availability: Availability
    methods: Tuple[Method, ...]
    category_name: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ProtocolDecl:
    name: str
    availability: Availability
    protocols: Tuple[str, ...]
    methods: Tuple[Method, ...]


@dataclass(frozen=True, slots=True)
class ProtocolImpl:
    ty: ClassDefReference
    availability: Availability
    protocol: str


@dataclass(frozen=True, slots=True)
class StructDecl:
    name: str
    boxable: bool
    fields: Tuple[Tuple[str, Ty], ...]


@dataclass(frozen=True, slots=True)
class EnumDecl:
    name: Optional[str]
    ty: Ty
    kind: Optional[UnexposedMacro]
    variants: Tuple[Tuple[str, Expr], ...]


@dataclass(frozen=True, slots=True)
class VarDecl:
    name: str
    ty: Ty
    value: Optional[Expr] = None


@dataclass(frozen=True, slots=True)
class FnDecl:
    name: str
    arguments: Tuple[Tuple[str, Ty], ...]
    result_type: Ty
    has_body: bool = False


@dataclass(frozen=True, slots=True)
class AliasDecl:
    name: str
    ty: Ty
    kind: Optional[UnexposedMacro] = None


Stmt = Union[
    ClassDecl,
    Methods,
    ProtocolDecl,
    ProtocolImpl,
    StructDecl,
    EnumDecl,
    VarDecl,
    FnDecl,
    AliasDecl,
]


def statement_name(stmt: Stmt) -> str:
    if isinstance(stmt, (ClassDecl, Methods, ProtocolImpl)):
        return stmt.ty.name
    if isinstance(stmt, EnumDecl):
        return stmt.name or "<anonymous>"
    return stmt.name
