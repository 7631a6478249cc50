"""Foreign type to host type signature mapping."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..models.entity import Nullability, TypeKind, TypeRef
from .errors import MalformedEntityError

PRIMITIVES = {
    TypeKind.VOID: "c_void",
    TypeKind.BOOL: "bool",
    TypeKind.CHAR: "c_char",
    TypeKind.SCHAR: "c_schar",
    TypeKind.UCHAR: "c_uchar",
    TypeKind.SHORT: "c_short",
    TypeKind.USHORT: "c_ushort",
    TypeKind.INT: "c_int",
    TypeKind.UINT: "c_uint",
    TypeKind.LONG: "c_long",
    TypeKind.ULONG: "c_ulong",
    TypeKind.LONGLONG: "c_longlong",
    TypeKind.ULONGLONG: "c_ulonglong",
    TypeKind.FLOAT: "c_float",
    TypeKind.DOUBLE: "c_double",
}

RENAMED_TYPEDEFS = {
    "BOOL": "Bool",
    "instancetype": "Self",
}


class TypeContext(str, Enum):
    STRUCT_FIELD = "struct_field"
    FN_ARGUMENT = "fn_argument"
    FN_RETURN = "fn_return"
    STATIC = "static"
    TYPEDEF = "typedef"
    ENUM = "enum"
    METHOD_ARGUMENT = "method_argument"
    METHOD_RETURN = "method_return"

    @property
    def is_argument(self) -> bool:
        return self in (TypeContext.FN_ARGUMENT, TypeContext.METHOD_ARGUMENT)

    @property
    def is_return(self) -> bool:
        return self in (TypeContext.FN_RETURN, TypeContext.METHOD_RETURN)


@dataclass(frozen=True, slots=True)
class Ty:
    """A rendered host type signature."""

    text: str
    is_void: bool = False
    is_object: bool = False

    def __str__(self) -> str:
        return self.text

    def as_return(self) -> str:
        if self.is_void:
            return ""
        return f" -> {self.text}"

    @classmethod
    def parse_struct_field(cls, ty: TypeRef) -> Ty:
        return _map(ty, TypeContext.STRUCT_FIELD)

    @classmethod
    def parse_function_argument(cls, ty: TypeRef) -> Ty:
        return _map(ty, TypeContext.FN_ARGUMENT)

    @classmethod
    def parse_function_return(cls, ty: TypeRef) -> Ty:
        return _map(ty, TypeContext.FN_RETURN)

    @classmethod
    def parse_static(cls, ty: TypeRef) -> Ty:
        return _map(ty, TypeContext.STATIC)

    @classmethod
    def parse_enum(cls, ty: TypeRef) -> Ty:
        return _map(ty, TypeContext.ENUM)

    @classmethod
    def parse_method_argument(cls, ty: TypeRef) -> Ty:
        return _map(ty, TypeContext.METHOD_ARGUMENT)

    @classmethod
    def parse_method_return(cls, ty: TypeRef) -> Ty:
        return _map(ty, TypeContext.METHOD_RETURN)

    @classmethod
    def parse_typedef(cls, ty: TypeRef, name: str) -> Optional[Ty]:
        """Map the target of ``typedef ty name``; ``None`` means do not emit it."""
        if ty.kind in (TypeKind.BLOCK_POINTER, TypeKind.FUNCTION_PROTO):
            return None
        if ty.kind == TypeKind.POINTER and ty.pointee is not None:
            if ty.pointee.kind == TypeKind.FUNCTION_PROTO:
                return None
        if ty.kind in (TypeKind.RECORD, TypeKind.ENUM) and ty.name == name:
            return None
        return _map(ty, TypeContext.TYPEDEF)


def _map(ty: TypeRef, context: TypeContext) -> Ty:
    if ty.kind == TypeKind.VOID and context.is_return:
        return Ty("()", is_void=True)
    if ty.kind == TypeKind.OBJC_OBJECT_POINTER:
        return _object_pointer(ty, context)
    return Ty(_render(ty, context))


def _object_pointer(ty: TypeRef, context: TypeContext) -> Ty:
    inner = _object_name(ty)
    nullable = ty.nullability != Nullability.NONNULL
    if context.is_argument:
        text = f"&{inner}"
        return Ty(f"Option<{text}>" if nullable else text)
    if context.is_return:
        text = f"Id<{inner}, Shared>"
        return Ty(f"Option<{text}>" if nullable else text, is_object=True)
    if context == TypeContext.STATIC:
        text = f"&'static {inner}"
        return Ty(f"Option<{text}>" if nullable else text)
    if context == TypeContext.TYPEDEF:
        return Ty(inner)
    return Ty(f"*mut {inner}")


def _object_name(ty: TypeRef) -> str:
    # `id` and `id<Protocol>` have no class name
    name = ty.name or "Object"
    if ty.generics:
        args = ", ".join(_object_name(generic) for generic in ty.generics)
        return f"{name}<{args}>"
    return name


def _render(ty: TypeRef, context: TypeContext) -> str:
    kind = ty.kind
    if kind in PRIMITIVES:
        return PRIMITIVES[kind]
    if kind in (TypeKind.TYPEDEF, TypeKind.RECORD, TypeKind.ENUM):
        if not ty.name:
            raise MalformedEntityError(f"{kind.value} type without a name")
        return RENAMED_TYPEDEFS.get(ty.name, ty.name)
    if kind == TypeKind.OBJC_OBJECT_POINTER:
        return f"*mut {_object_name(ty)}"
    if kind == TypeKind.OBJC_CLASS:
        if context.is_argument:
            return "&Class"
        if context == TypeContext.STRUCT_FIELD:
            return "*const Class"
        return "&'static Class"
    if kind == TypeKind.OBJC_SEL:
        return "Sel"
    if kind == TypeKind.BLOCK_POINTER:
        return "TodoBlock"
    if kind == TypeKind.FUNCTION_PROTO:
        return "TodoFunction"
    if kind == TypeKind.POINTER:
        pointee = _require(ty.pointee, "pointee", kind)
        if pointee.kind == TypeKind.FUNCTION_PROTO:
            return "TodoFunction"
        qualifier = "*const" if pointee.is_const else "*mut"
        return f"{qualifier} {_render(pointee, TypeContext.STRUCT_FIELD)}"
    if kind == TypeKind.CONSTANT_ARRAY:
        element = _require(ty.element, "element", kind)
        inner = _render(element, TypeContext.STRUCT_FIELD)
        if context == TypeContext.STRUCT_FIELD:
            return f"[{inner}; {ty.size}]"
        return f"*mut {inner}"
    if kind == TypeKind.INCOMPLETE_ARRAY:
        element = _require(ty.element, "element", kind)
        return f"*mut {_render(element, TypeContext.STRUCT_FIELD)}"
    raise MalformedEntityError(f"unhandled type kind {kind.value}")


def _require(value: Optional[TypeRef], what: str, kind: TypeKind) -> TypeRef:
    if value is None:
        raise MalformedEntityError(f"{kind.value} type without its {what}")
    return value
