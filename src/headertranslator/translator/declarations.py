"""Structural parsing of class-like bodies, superclass references and structs."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple

from ..config import DEFAULT_CLASS, ClassData
from ..models.entity import Entity, EntityKind
from ..models.statements import ClassDefReference
from .errors import DuplicatePropertyError, MalformedEntityError, UnsoundBitfieldError
from .macros import UnexposedMacro
from .method import Method, partial_method, partial_property
from .types import Ty

logger = logging.getLogger(__name__)

# Property accessors known to have no matching method declaration.
TOLERATED_LEFTOVER_PROPERTIES = {(False, "setDisplayName")}


class DeclMode:
    """Which kind of body the merge engine is walking."""

    CLASS = "class"
    CATEGORY = "category"
    PROTOCOL = "protocol"


@dataclass(slots=True)
class ParsedDecl:
    protocols: List[str] = field(default_factory=list)
    methods: List[Method] = field(default_factory=list)
    designated_initializers: List[str] = field(default_factory=list)
    generics: List[str] = field(default_factory=list)


def parse_superclass(entity: Entity) -> Optional[Tuple[Entity, ClassDefReference]]:
    """Return the superclass declaration and its use-site reference, if any."""
    superclass: Optional[Entity] = None
    generics: List[str] = []

    for child in entity.children:
        if child.kind == EntityKind.OBJC_SUPER_CLASS_REF:
            superclass = child
        elif child.kind == EntityKind.TYPE_REF:
            generics.append(child.require_name("type reference name"))

    if superclass is None:
        return None
    name = superclass.require_name("superclass name")
    if superclass.reference is None:
        raise MalformedEntityError(
            f"superclass reference {name} of {entity.describe()} does not point at a declaration"
        )
    return superclass.reference, ClassDefReference(name, tuple(generics))


def superclass_chain(entity: Entity) -> List[ClassDefReference]:
    """Follow superclass references until a root class, immediate superclass first."""
    chain: List[ClassDefReference] = []
    seen = {entity.name}
    current = entity
    while True:
        resolved = parse_superclass(current)
        if resolved is None:
            return chain
        current, reference = resolved
        if reference.name in seen:
            raise MalformedEntityError(
                f"cyclic superclass chain through {reference.name} in {entity.describe()}"
            )
        seen.add(reference.name)
        chain.append(reference)


def parse_objc_decl(
    entity: Entity,
    mode: str,
    data: Optional[ClassData],
) -> ParsedDecl:
    """Walk the immediate children of a class, category or protocol once.

    Accessors the compiler synthesizes for a property show up as plain
    method children after the property; those are dropped in favour of the
    getter/setter produced from the property itself.
    """
    parsed = ParsedDecl()
    is_class = mode == DeclMode.CLASS
    has_generics = mode in (DeclMode.CLASS, DeclMode.CATEGORY)
    owner = entity.name or "<anonymous>"
    overrides = data or DEFAULT_CLASS

    # (is_class_method, fn_name) of accessors declared through properties
    properties: Set[Tuple[bool, str]] = set()

    for child in entity.children:
        kind = child.kind
        if kind == EntityKind.OBJC_EXPLICIT_PROTOCOL_IMPL and mode == DeclMode.PROTOCOL:
            # TODO: honour NS_PROTOCOL_REQUIRES_EXPLICIT_IMPLEMENTATION
            continue
        if kind in (EntityKind.OBJC_IVAR_DECL, EntityKind.OBJC_EXCEPTION) and is_class:
            continue
        if kind in (EntityKind.OBJC_SUPER_CLASS_REF, EntityKind.TYPE_REF) and is_class:
            # handled by parse_superclass
            continue
        if kind == EntityKind.OBJC_ROOT_CLASS:
            logger.debug("parsing root class %s", owner)
        elif kind == EntityKind.OBJC_CLASS_REF and has_generics:
            continue
        elif kind == EntityKind.TEMPLATE_TYPE_PARAMETER:
            if has_generics:
                parsed.generics.append(child.display_name or child.require_name("generic name"))
            else:
                logger.error("unsupported generics in %s", owner)
        elif kind == EntityKind.OBJC_PROTOCOL_REF:
            parsed.protocols.append(child.require_name("protocol reference name"))
        elif kind in (EntityKind.OBJC_INSTANCE_METHOD_DECL, EntityKind.OBJC_CLASS_METHOD_DECL):
            partial = partial_method(child)
            key = (partial.is_class, partial.fn_name)
            if key in properties:
                properties.remove(key)
                continue
            result = partial.parse(overrides.method(partial.fn_name))
            if result is None:
                continue
            designated_initializer, method = result
            if designated_initializer:
                parsed.designated_initializers.append(method.fn_name)
            parsed.methods.append(method)
        elif kind == EntityKind.OBJC_PROPERTY_DECL:
            partial = partial_property(child)
            _record_accessor(properties, (partial.is_class, partial.getter_name), owner)
            if partial.setter_name is not None:
                _record_accessor(properties, (partial.is_class, partial.setter_name), owner)

            getter_data = overrides.method(partial.getter_name)
            setter_data = overrides.method(partial.setter_name) if partial.setter_name else None
            getter, setter = partial.parse(getter_data, setter_data)
            if getter is not None:
                parsed.methods.append(getter)
            if setter is not None:
                parsed.methods.append(setter)
        elif kind == EntityKind.VISIBILITY_ATTR:
            continue
        elif kind == EntityKind.UNEXPOSED_ATTR:
            macro = UnexposedMacro.parse(child)
            if macro is not None:
                logger.warning("unknown macro %s on %s", macro.value, owner)
        else:
            logger.warning("unknown child %s in %s", kind.value, owner)

    if properties and properties != TOLERATED_LEFTOVER_PROPERTIES:
        logger.error(
            "did not properly add methods to properties in %s: %s",
            owner,
            sorted(properties),
        )
    return parsed


def _record_accessor(properties: Set[Tuple[bool, str]], key: Tuple[bool, str], owner: str) -> None:
    if key in properties:
        raise DuplicatePropertyError(
            f"already existing property accessor {key[1]} in {owner}"
        )
    properties.add(key)


def parse_struct(entity: Entity, name: str) -> Tuple[bool, List[Tuple[str, Ty]]]:
    """Return ``(boxable, fields)`` of a struct definition."""
    boxable = False
    fields: List[Tuple[str, Ty]] = []

    for child in entity.children:
        kind = child.kind
        if kind == EntityKind.UNEXPOSED_ATTR:
            macro = UnexposedMacro.parse(child)
            if macro is not None:
                logger.warning("unknown macro %s on struct %s", macro.value, name)
        elif kind == EntityKind.FIELD_DECL:
            field_name = child.require_name("struct field name")
            logger.debug("field %s of %s", field_name, name)
            if child.is_bit_field:
                raise UnsoundBitfieldError(f"unsound struct bitfield {field_name} in {name}")
            if child.type is None:
                raise MalformedEntityError(f"struct field {field_name} in {name} has no type")
            fields.append((field_name, Ty.parse_struct_field(child.type)))
        elif kind == EntityKind.OBJC_BOXABLE:
            boxable = True
        else:
            logger.warning("unknown child %s in struct %s", kind.value, name)

    return boxable, fields
