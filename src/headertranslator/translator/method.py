"""Method and property descriptors for class-like bodies."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from ..config import MethodData
from ..models.entity import Entity, EntityKind, TypeKind, TypeRef
from .availability import Availability
from .macros import UnexposedMacro
from .types import Ty

logger = logging.getLogger(__name__)

RESERVED_NAMES = {
    "as", "async", "await", "box", "break", "const", "continue", "crate",
    "dyn", "else", "enum", "extern", "false", "fn", "for", "if", "impl",
    "in", "let", "loop", "match", "mod", "move", "mut", "pub", "ref",
    "return", "self", "Self", "static", "struct", "super", "trait", "true",
    "type", "unsafe", "use", "where", "while", "abstract", "become",
    "final", "macro", "override", "priv", "typeof", "unsized", "virtual",
    "yield", "try",
}

METHOD_CHILD_KINDS = {
    EntityKind.TYPE_REF,
    EntityKind.OBJC_CLASS_REF,
    EntityKind.OBJC_PROTOCOL_REF,
    EntityKind.VISIBILITY_ATTR,
}

VOID = TypeRef(kind=TypeKind.VOID)


def handle_reserved(name: str) -> str:
    if name in RESERVED_NAMES:
        return f"{name}_"
    return name


def selector_to_fn_name(selector: str) -> str:
    return selector.rstrip(":").replace(":", "_")


@dataclass(frozen=True, slots=True)
class Method:
    selector: str
    fn_name: str
    availability: Availability
    is_class: bool
    result_type: Ty
    arguments: Tuple[Tuple[str, Ty], ...] = ()
    is_optional: bool = False
    is_init: bool = False
    safe: bool = False

    def __str__(self) -> str:
        lines = []
        if self.is_optional:
            lines.append("        #[optional]")
        attribute = "method_id" if self.result_type.is_object else "method"
        lines.append(f"        #[{attribute}({self.selector})]")

        params = []
        if self.is_init:
            params.append("this: Option<Allocated<Self>>")
        elif not self.is_class:
            params.append("&self")
        params.extend(f"{handle_reserved(name)}: {ty}" for name, ty in self.arguments)

        qualifier = "pub fn" if self.safe else "pub unsafe fn"
        lines.append(
            f"        {qualifier} {self.fn_name}({', '.join(params)})"
            f"{self.result_type.as_return()};"
        )
        return "\n".join(lines)


def _is_init_family(selector: str) -> bool:
    if not selector.startswith("init"):
        return False
    rest = selector[len("init"):]
    return not rest or not rest[0].islower()


@dataclass(slots=True)
class PartialMethod:
    entity: Entity
    selector: str
    fn_name: str
    is_class: bool

    def parse(self, data: MethodData) -> Optional[Tuple[bool, Method]]:
        """Return ``(is_designated_initializer, method)``, or ``None`` when skipped."""
        if data.skipped:
            return None

        designated_initializer = False
        arguments = []
        for child in self.entity.children:
            kind = child.kind
            if kind == EntityKind.PARM_DECL:
                name = child.name or "_"
                if child.type is None:
                    logger.warning("argument %s of %s has no type", name, self.selector)
                    return None
                arguments.append((name, Ty.parse_method_argument(child.type)))
            elif kind == EntityKind.OBJC_DESIGNATED_INITIALIZER:
                designated_initializer = True
            elif kind == EntityKind.UNEXPOSED_ATTR:
                if child.macro == "NS_DESIGNATED_INITIALIZER":
                    designated_initializer = True
                    continue
                macro = UnexposedMacro.parse(child)
                if macro is not None:
                    logger.warning("unexpected macro %s on %s", macro.value, self.selector)
            elif kind not in METHOD_CHILD_KINDS:
                logger.warning("unknown method child %s in %s", kind.value, self.selector)

        result_type = Ty.parse_method_return(self.entity.result_type or VOID)
        method = Method(
            selector=self.selector,
            fn_name=self.fn_name,
            availability=Availability.parse(self.entity.availability),
            is_class=self.is_class,
            result_type=result_type,
            arguments=tuple(arguments),
            is_optional=self.entity.is_optional,
            is_init=not self.is_class and _is_init_family(self.selector),
            safe=not data.unsafe,
        )
        return designated_initializer, method


@dataclass(slots=True)
class PartialProperty:
    entity: Entity
    name: str
    getter_name: str
    setter_name: Optional[str]
    setter_selector: Optional[str]
    is_class: bool

    def parse(
        self,
        getter_data: MethodData,
        setter_data: Optional[MethodData],
    ) -> Tuple[Optional[Method], Optional[Method]]:
        ty = self.entity.type
        if ty is None:
            logger.warning("property %s has no type", self.name)
            return None, None
        availability = Availability.parse(self.entity.availability)

        getter = None
        if not getter_data.skipped:
            getter = Method(
                selector=self.getter_name,
                fn_name=self.getter_name,
                availability=availability,
                is_class=self.is_class,
                result_type=Ty.parse_method_return(ty),
                is_optional=self.entity.is_optional,
                safe=not getter_data.unsafe,
            )

        setter = None
        if self.setter_selector and setter_data is not None and not setter_data.skipped:
            setter = Method(
                selector=self.setter_selector,
                fn_name=self.setter_name,
                availability=availability,
                is_class=self.is_class,
                result_type=Ty.parse_method_return(VOID),
                arguments=((self.name, Ty.parse_method_argument(ty)),),
                is_optional=self.entity.is_optional,
                safe=not setter_data.unsafe,
            )
        return getter, setter


def partial_method(entity: Entity) -> PartialMethod:
    selector = entity.require_name("selector")
    return PartialMethod(
        entity=entity,
        selector=selector,
        fn_name=selector_to_fn_name(selector),
        is_class=entity.kind == EntityKind.OBJC_CLASS_METHOD_DECL,
    )


def partial_property(entity: Entity) -> PartialProperty:
    name = entity.require_name("property name")
    getter_name = entity.getter_name or name
    setter_selector = None
    if not entity.is_readonly:
        setter_selector = entity.setter_name or f"set{name[:1].upper()}{name[1:]}:"
    return PartialProperty(
        entity=entity,
        name=name,
        getter_name=getter_name,
        setter_name=selector_to_fn_name(setter_selector) if setter_selector else None,
        setter_selector=setter_selector,
        is_class=entity.is_class_property,
    )
