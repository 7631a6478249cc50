"""Render statements to binding source text.

Rendering is a pure function of one statement. Availability is carried on the
statements but not emitted yet.
"""
from __future__ import annotations

from typing import List, Sequence

from ..models.statements import (
    AliasDecl,
    ClassDecl,
    ClassDefReference,
    EnumDecl,
    FnDecl,
    Methods,
    ProtocolDecl,
    ProtocolImpl,
    Stmt,
    StructDecl,
    VarDecl,
)
from .errors import InvalidMacroKindError, MalformedEntityError
from .macros import UnexposedMacro
from .method import handle_reserved

ENUM_MACROS = {
    None: "extern_enum",
    UnexposedMacro.ENUM: "ns_enum",
    UnexposedMacro.OPTIONS: "ns_options",
    UnexposedMacro.CLOSED_ENUM: "ns_closed_enum",
    UnexposedMacro.ERROR_ENUM: "ns_error_enum",
}


def generic_ty(ty: ClassDefReference) -> str:
    """``Name<T, TOwnership>`` as used at a use site."""
    if not ty.generics:
        return ty.name
    params = [*ty.generics, *(f"{generic}Ownership" for generic in ty.generics)]
    return f"{ty.name}<{', '.join(params)}>"


def generic_params(generics: Sequence[str]) -> str:
    """Bounds for an ``impl`` block over a generic class."""
    if not generics:
        return ""
    params = [
        *(f"{generic}: Message" for generic in generics),
        *(f"{generic}Ownership: Ownership" for generic in generics),
    ]
    return f"<{', '.join(params)}>"


def render_statement(stmt: Stmt) -> str:
    if isinstance(stmt, ClassDecl):
        return _class_decl(stmt)
    if isinstance(stmt, Methods):
        return _methods(stmt)
    if isinstance(stmt, ProtocolImpl):
        return ""
    if isinstance(stmt, ProtocolDecl):
        return _protocol_decl(stmt)
    if isinstance(stmt, StructDecl):
        return _struct_decl(stmt)
    if isinstance(stmt, EnumDecl):
        return _enum_decl(stmt)
    if isinstance(stmt, VarDecl):
        return _var_decl(stmt)
    if isinstance(stmt, FnDecl):
        return _fn_decl(stmt)
    if isinstance(stmt, AliasDecl):
        return _alias_decl(stmt)
    raise TypeError(f"not a statement: {stmt!r}")


def render_statements(statements: Sequence[Stmt]) -> str:
    """Join renderings, one blank line between non-empty ones."""
    rendered = [render_statement(stmt) for stmt in statements]
    return "\n".join(text for text in rendered if text)


def _class_decl(stmt: ClassDecl) -> str:
    ty = stmt.ty
    if not stmt.superclasses:
        raise MalformedEntityError(f"class {ty.name} has no superclass")
    superclass, rest = stmt.superclasses[0], stmt.superclasses[1:]

    lines: List[str] = ["extern_class!(" if not ty.generics else "__inner_extern_class!("]
    derives = str(stmt.derives)
    if derives:
        lines.append(f"    {derives}")
    if not ty.generics:
        lines.append(f"    pub struct {ty.name};")
    else:
        params = [
            *(f"{generic}: Message = Object" for generic in ty.generics),
            *(f"{generic}Ownership: Ownership = Shared" for generic in ty.generics),
        ]
        lines.append(f"    pub struct {ty.name}<{', '.join(params)}> {{")
        for index, generic in enumerate(ty.generics):
            # invariant over the generic
            lines.append(f"        _inner{index}: PhantomData<*mut ({generic}, {generic}Ownership)>,")
        lines.append("        notunwindsafe: PhantomData<&'static mut ()>,")
        lines.append("    }")
    lines.append("")
    lines.append(
        f"    unsafe impl{generic_params(ty.generics)} ClassType for {generic_ty(ty)} {{"
    )
    if rest:
        lines.append(f"        #[inherits({', '.join(generic_ty(parent) for parent in rest)})]")
    lines.append(f"        type Super = {generic_ty(superclass)};")
    lines.append("    }")
    lines.append(");")
    return "\n".join(lines) + "\n"


def _methods(stmt: Methods) -> str:
    lines = ["extern_methods!("]
    if stmt.description:
        lines.append(f"    /// {stmt.description}")
        if stmt.category_name:
            lines.append("    ///")
    if stmt.category_name:
        lines.append(f"    /// {stmt.category_name}")
    lines.append(f"    unsafe impl{generic_params(stmt.ty.generics)} {generic_ty(stmt.ty)} {{")
    lines.extend(str(method) for method in stmt.methods)
    lines.append("    }")
    lines.append(");")
    return "\n".join(lines) + "\n"


def _protocol_decl(stmt: ProtocolDecl) -> str:
    lines = [
        "extern_protocol!(",
        f"    pub struct {stmt.name};",
        "",
        f"    unsafe impl ProtocolType for {stmt.name} {{",
    ]
    lines.extend(str(method) for method in stmt.methods)
    lines.append("    }")
    lines.append(");")
    return "\n".join(lines) + "\n"


def _struct_decl(stmt: StructDecl) -> str:
    lines = ["extern_struct!(", f"    pub struct {stmt.name} {{"]
    for name, ty in stmt.fields:
        visibility = "" if name.startswith("_") else "pub "
        lines.append(f"        {visibility}{name}: {ty},")
    lines.append("    }")
    lines.append(");")
    return "\n".join(lines) + "\n"


def _enum_decl(stmt: EnumDecl) -> str:
    if stmt.kind not in ENUM_MACROS:
        raise InvalidMacroKindError(
            f"invalid enum kind {stmt.kind.value} for enum {stmt.name or '<anonymous>'}"
        )
    header = f"    pub enum {stmt.name} {{" if stmt.name else "    pub enum {"
    lines = [f"{ENUM_MACROS[stmt.kind]}!(", f"    #[underlying({stmt.ty})]", header]
    lines.extend(f"        {name} = {expr}," for name, expr in stmt.variants)
    lines.append("    }")
    lines.append(");")
    return "\n".join(lines) + "\n"


def _var_decl(stmt: VarDecl) -> str:
    if stmt.value is None:
        return f"extern_static!({stmt.name}: {stmt.ty});\n"
    return f"extern_static!({stmt.name}: {stmt.ty} = {stmt.value});\n"


def _fn_decl(stmt: FnDecl) -> str:
    arguments = "".join(f"{handle_reserved(name)}: {ty}," for name, ty in stmt.arguments)
    signature = f"    pub unsafe fn {stmt.name}({arguments}){stmt.result_type.as_return()}"
    if not stmt.has_body:
        return "\n".join(["extern_fn!(", f"{signature};", ");"]) + "\n"
    # bodies are never translated
    return "\n".join(["inline_fn!(", f"{signature} {{", "        todo!()", "    }", ");"]) + "\n"


def _alias_decl(stmt: AliasDecl) -> str:
    if stmt.kind == UnexposedMacro.TYPED_ENUM:
        return f"typed_enum!(pub type {stmt.name} = {stmt.ty};);\n"
    if stmt.kind == UnexposedMacro.TYPED_EXTENSIBLE_ENUM:
        return f"typed_extensible_enum!(pub type {stmt.name} = {stmt.ty};);\n"
    if stmt.kind is None or stmt.kind == UnexposedMacro.BRIDGED_TYPEDEF:
        return f"pub type {stmt.name} = {stmt.ty};\n"
    raise InvalidMacroKindError(f"invalid alias kind {stmt.kind.value} for typedef {stmt.name}")
