"""Top-level entity to statement dispatch.

``parse_statements`` is the single entry point: it looks at the kind of one
top-level entity and returns the statements it produces, in order. An entity
kind without a rule here means the header uses a construct the translator was
never taught about, which is fatal.
"""
from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Tuple

from ..models.entity import Entity, EntityKind
from ..models.statements import (
    AliasDecl,
    ClassDecl,
    ClassDefReference,
    Derives,
    EnumDecl,
    FnDecl,
    Methods,
    ProtocolDecl,
    ProtocolImpl,
    Stmt,
    StructDecl,
    VarDecl,
)
from .availability import Availability
from .context import Context
from .declarations import DeclMode, parse_objc_decl, parse_struct, superclass_chain
from .errors import (
    ConflictingMacroError,
    DuplicateInitializerError,
    MalformedEntityError,
    UnknownEntityError,
)
from .expr import Expr
from .macros import UnexposedMacro
from .types import Ty

logger = logging.getLogger(__name__)

Handler = Callable[[Entity, Context], List[Stmt]]


def parse_statements(entity: Entity, context: Context) -> List[Stmt]:
    logger.debug("stmt %s", entity.describe())
    handler = HANDLERS.get(entity.kind)
    if handler is None:
        raise UnknownEntityError(f"unknown top-level declaration: {entity.describe()}")
    return handler(entity, context)


def _references(entity: Entity, context: Context) -> List[Stmt]:
    # Imports are resolved differently; class and protocol references carry
    # nothing of their own.
    return []


def _union(entity: Entity, context: Context) -> List[Stmt]:
    logger.debug("skipping union %s", entity.name or "<anonymous>")
    return []


def _interface(entity: Entity, context: Context) -> List[Stmt]:
    name = entity.require_name("class name")
    data = context.config.class_(name)
    if data.skipped:
        return []

    availability = Availability.parse(entity.availability)
    parsed = parse_objc_decl(entity, DeclMode.CLASS, data)
    ty = ClassDefReference(name, tuple(parsed.generics))
    superclasses = superclass_chain(entity)

    methods = Methods(
        ty=ty,
        availability=availability,
        methods=tuple(parsed.methods),
        category_name=None,
        description=None,
    )
    if data.definition_skipped:
        return [methods]

    statements: List[Stmt] = [
        ClassDecl(
            ty=ty,
            availability=availability,
            superclasses=tuple(superclasses),
            designated_initializers=tuple(parsed.designated_initializers),
            derives=Derives(data.derives),
            ownership=data.ownership,
        )
    ]
    statements.extend(
        ProtocolImpl(ty=ty, availability=availability, protocol=protocol)
        for protocol in parsed.protocols
    )
    statements.append(methods)
    return statements


def _category_class_name(entity: Entity) -> str:
    class_refs = [child for child in entity.children if child.kind == EntityKind.OBJC_CLASS_REF]
    if len(class_refs) != 1:
        raise MalformedEntityError(
            f"could not find unique category class in {entity.describe()} "
            f"({len(class_refs)} class references)"
        )
    return class_refs[0].require_name("category class name")


def _category(entity: Entity, context: Context) -> List[Stmt]:
    category_name = entity.name
    availability = Availability.parse(entity.availability)
    class_name = _category_class_name(entity)
    data = context.config.class_(class_name)
    if data.skipped:
        return []

    parsed = parse_objc_decl(entity, DeclMode.CATEGORY, data)
    if parsed.designated_initializers:
        logger.warning(
            "designated initializer in category %s(%s): %s",
            class_name,
            category_name or "",
            parsed.designated_initializers,
        )

    ty = ClassDefReference(class_name, tuple(parsed.generics))
    statements: List[Stmt] = [
        Methods(
            ty=ty,
            availability=availability,
            methods=tuple(parsed.methods),
            category_name=category_name,
            description=None,
        )
    ]
    statements.extend(
        ProtocolImpl(ty=ty, availability=availability, protocol=protocol)
        for protocol in parsed.protocols
    )
    return statements


def _protocol(entity: Entity, context: Context) -> List[Stmt]:
    name = entity.require_name("protocol name")
    data = context.config.protocol(name)
    if data.skipped:
        return []

    availability = Availability.parse(entity.availability)
    parsed = parse_objc_decl(entity, DeclMode.PROTOCOL, data)
    if parsed.designated_initializers:
        logger.warning(
            "designated initializer in protocol %s: %s",
            name,
            parsed.designated_initializers,
        )
    return [
        ProtocolDecl(
            name=name,
            availability=availability,
            protocols=tuple(parsed.protocols),
            methods=tuple(parsed.methods),
        )
    ]


def _merge_macro(
    current: Optional[UnexposedMacro], macro: UnexposedMacro, owner: str
) -> UnexposedMacro:
    if current is not None and current != macro:
        raise ConflictingMacroError(
            f"got differing macro kinds in {owner}: {current.value} and {macro.value}"
        )
    return macro


def _is_private_name(name: Optional[str]) -> bool:
    return name is None or name.startswith("_")


def _typedef(entity: Entity, context: Context) -> List[Stmt]:
    name = entity.require_name("typedef name")
    struct: Optional[Tuple[bool, list]] = None
    skip_struct = False
    kind: Optional[UnexposedMacro] = None

    for child in entity.children:
        if child.kind == EntityKind.UNEXPOSED_ATTR:
            macro = UnexposedMacro.parse(child)
            if macro is not None:
                kind = _merge_macro(kind, macro, f"typedef {name}")
        elif child.kind == EntityKind.STRUCT_DECL:
            if context.config.struct(name).skipped:
                skip_struct = True
            elif _is_private_name(child.name):
                # Anonymous or privately named struct: declared under the
                # typedef's name.
                struct = parse_struct(child, name)
            else:
                skip_struct = True
        elif child.kind in (
            EntityKind.OBJC_CLASS_REF,
            EntityKind.OBJC_PROTOCOL_REF,
            EntityKind.TYPE_REF,
            EntityKind.PARM_DECL,
        ):
            continue
        else:
            logger.warning("unknown child %s in typedef %s", child.kind.value, name)

    if struct is not None:
        if kind is not None:
            raise ConflictingMacroError(
                f"struct typedef {name} unexpectedly carries macro kind {kind.value}"
            )
        boxable, fields = struct
        return [StructDecl(name=name, boxable=boxable, fields=tuple(fields))]

    if skip_struct:
        return []
    if context.config.typedef(name).skipped:
        return []

    if entity.underlying_type is None:
        raise MalformedEntityError(f"typedef {name} has no underlying type")
    ty = Ty.parse_typedef(entity.underlying_type, name)
    if ty is None:
        logger.debug("typedef %s has no host type", name)
        return []
    return [AliasDecl(name=name, ty=ty, kind=kind)]


def _struct(entity: Entity, context: Context) -> List[Stmt]:
    name = entity.name
    if name is None:
        return []
    if context.config.struct(name).skipped:
        return []
    # forward declarations carry no fields
    if not entity.is_definition:
        return []
    if _is_private_name(name):
        return []
    boxable, fields = parse_struct(entity, name)
    return [StructDecl(name=name, boxable=boxable, fields=tuple(fields))]


def _enum(entity: Entity, context: Context) -> List[Stmt]:
    # Front ends report enums twice; only the defining node is used.
    if not entity.is_definition:
        return []

    name = entity.name
    data = context.config.enum(name)
    if data.skipped:
        return []

    owner = f"enum {name or '<anonymous>'}"
    if entity.underlying_type is None:
        raise MalformedEntityError(f"{owner} has no underlying type")
    is_signed = entity.underlying_type.is_signed_integer
    ty = Ty.parse_enum(entity.underlying_type)
    kind: Optional[UnexposedMacro] = None
    variants = []

    for child in entity.children:
        if child.kind == EntityKind.ENUM_CONSTANT_DECL:
            constant = child.require_name("enum constant name")
            if data.constant(constant).skipped:
                continue
            if child.enum_value is None:
                raise MalformedEntityError(f"enum constant {constant} in {owner} has no value")
            value = Expr.from_val(child.enum_value, is_signed, context.pointer_width)
            if data.use_value:
                expr = value
            else:
                expr = Expr.parse_enum_constant(child) or value
            variants.append((constant, expr))
        elif child.kind == EntityKind.UNEXPOSED_ATTR:
            macro = UnexposedMacro.parse(child)
            if macro is not None:
                kind = _merge_macro(kind, macro, owner)
        elif child.kind == EntityKind.FLAG_ENUM:
            kind = _merge_macro(kind, UnexposedMacro.OPTIONS, owner)
        else:
            logger.warning("unknown child %s in %s", child.kind.value, owner)

    if name is None and not variants:
        return []
    return [EnumDecl(name=name, ty=ty, kind=kind, variants=tuple(variants))]


def _var(entity: Entity, context: Context) -> List[Stmt]:
    name = entity.require_name("variable name")
    if context.config.static(name).skipped:
        return []
    if entity.type is None:
        raise MalformedEntityError(f"variable {name} has no type")
    ty = Ty.parse_static(entity.type)

    initializer: Optional[Entity] = None
    for child in entity.children:
        if child.kind == EntityKind.UNEXPOSED_ATTR:
            macro = UnexposedMacro.parse(child)
            if macro is not None:
                logger.warning("unexpected attribute %s on variable %s", macro.value, name)
        elif child.kind in (
            EntityKind.VISIBILITY_ATTR,
            EntityKind.OBJC_CLASS_REF,
            EntityKind.TYPE_REF,
        ):
            continue
        elif child.kind.is_expression:
            if initializer is not None:
                raise DuplicateInitializerError(f"got variable value twice in {name}")
            initializer = child
        else:
            logger.warning("unknown child %s in variable %s", child.kind.value, name)

    value = None
    if initializer is not None:
        value = Expr.parse_var(initializer)
        if value is None:
            logger.warning("skipped static %s: unsupported initializer", name)
            return []
    return [VarDecl(name=name, ty=ty, value=value)]


def _function(entity: Entity, context: Context) -> List[Stmt]:
    name = entity.require_name("function name")
    if context.config.fn(name).skipped:
        return []
    if entity.is_variadic:
        logger.warning("can't handle variadic function %s", name)
        return []
    if entity.is_static_method:
        logger.warning("unexpected static method %s", name)
    if entity.result_type is None:
        raise MalformedEntityError(f"function {name} has no result type")
    result_type = Ty.parse_function_return(entity.result_type)

    arguments = []
    has_body = entity.is_inline
    for child in entity.children:
        if child.kind == EntityKind.PARM_DECL:
            argument = child.name or "_"
            if child.type is None:
                raise MalformedEntityError(f"argument {argument} of {name} has no type")
            arguments.append((argument, Ty.parse_function_argument(child.type)))
        elif child.kind == EntityKind.COMPOUND_STMT:
            has_body = True
        elif child.kind == EntityKind.UNEXPOSED_ATTR:
            macro = UnexposedMacro.parse(child)
            if macro is not None:
                logger.warning("unknown macro %s on function %s", macro.value, name)
        elif child.kind in (
            EntityKind.OBJC_CLASS_REF,
            EntityKind.TYPE_REF,
            EntityKind.VISIBILITY_ATTR,
        ):
            continue
        else:
            logger.warning("unknown child %s in function %s", child.kind.value, name)

    return [
        FnDecl(
            name=name,
            arguments=tuple(arguments),
            result_type=result_type,
            has_body=has_body,
        )
    ]


HANDLERS: Dict[EntityKind, Handler] = {
    EntityKind.OBJC_CLASS_REF: _references,
    EntityKind.OBJC_PROTOCOL_REF: _references,
    EntityKind.OBJC_INTERFACE_DECL: _interface,
    EntityKind.OBJC_CATEGORY_DECL: _category,
    EntityKind.OBJC_PROTOCOL_DECL: _protocol,
    EntityKind.TYPEDEF_DECL: _typedef,
    EntityKind.STRUCT_DECL: _struct,
    EntityKind.ENUM_DECL: _enum,
    EntityKind.VAR_DECL: _var,
    EntityKind.FUNCTION_DECL: _function,
    EntityKind.UNION_DECL: _union,
}
