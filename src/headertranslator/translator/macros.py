from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from ..models.entity import Entity

logger = logging.getLogger(__name__)


class UnexposedMacro(str, Enum):
    """Macro-kind tag that selects how an enum or typedef is rendered."""

    ENUM = "enum"
    OPTIONS = "options"
    CLOSED_ENUM = "closed_enum"
    ERROR_ENUM = "error_enum"
    TYPED_ENUM = "typed_enum"
    TYPED_EXTENSIBLE_ENUM = "typed_extensible_enum"
    BRIDGED_TYPEDEF = "bridged_typedef"

    @classmethod
    def parse(cls, entity: Entity) -> Optional[UnexposedMacro]:
        name = entity.macro
        if not name:
            return None
        macro = MACRO_KINDS.get(name)
        if macro is not None:
            return macro
        if name not in IGNORED_MACROS:
            logger.warning("unknown macro %s", name)
        return None


MACRO_KINDS = {
    "NS_ENUM": UnexposedMacro.ENUM,
    "CF_ENUM": UnexposedMacro.ENUM,
    "NS_OPTIONS": UnexposedMacro.OPTIONS,
    "CF_OPTIONS": UnexposedMacro.OPTIONS,
    "NS_CLOSED_ENUM": UnexposedMacro.CLOSED_ENUM,
    "CF_CLOSED_ENUM": UnexposedMacro.CLOSED_ENUM,
    "NS_ERROR_ENUM": UnexposedMacro.ERROR_ENUM,
    "CF_ERROR_ENUM": UnexposedMacro.ERROR_ENUM,
    "NS_TYPED_ENUM": UnexposedMacro.TYPED_ENUM,
    "NS_STRING_ENUM": UnexposedMacro.TYPED_ENUM,
    "CF_TYPED_ENUM": UnexposedMacro.TYPED_ENUM,
    "NS_TYPED_EXTENSIBLE_ENUM": UnexposedMacro.TYPED_EXTENSIBLE_ENUM,
    "NS_EXTENSIBLE_STRING_ENUM": UnexposedMacro.TYPED_EXTENSIBLE_ENUM,
    "CF_TYPED_EXTENSIBLE_ENUM": UnexposedMacro.TYPED_EXTENSIBLE_ENUM,
    "NS_SWIFT_BRIDGED_TYPEDEF": UnexposedMacro.BRIDGED_TYPEDEF,
    "CF_SWIFT_BRIDGED_TYPEDEF": UnexposedMacro.BRIDGED_TYPEDEF,
}

# Annotations that carry no information for the generated bindings.
IGNORED_MACROS = {
    "NS_SWIFT_NAME",
    "NS_SWIFT_UNAVAILABLE",
    "NS_SWIFT_SENDABLE",
    "NS_SWIFT_NONSENDABLE",
    "NS_SWIFT_UI_ACTOR",
    "NS_SWIFT_ASYNC",
    "NS_SWIFT_NOTHROW",
    "NS_REFINED_FOR_SWIFT",
    "NS_REQUIRES_SUPER",
    "NS_DESIGNATED_INITIALIZER",
    "NS_UNAVAILABLE",
    "NS_AUTOMATED_REFCOUNT_UNAVAILABLE",
    "NS_RETURNS_RETAINED",
    "NS_RETURNS_NOT_RETAINED",
    "NS_RETURNS_INNER_POINTER",
    "NS_NOESCAPE",
    "NS_FORMAT_FUNCTION",
    "NS_FORMAT_ARGUMENT",
    "NS_REQUIRES_NIL_TERMINATION",
    "NS_ROOT_CLASS",
    "NS_HEADER_AUDIT_BEGIN",
    "CF_RETURNS_RETAINED",
    "CF_RETURNS_NOT_RETAINED",
    "CF_CONSUMED",
    "CF_SWIFT_NAME",
    "CF_REFINED_FOR_SWIFT",
    "CF_NOESCAPE",
    "API_AVAILABLE",
    "API_UNAVAILABLE",
    "API_DEPRECATED",
    "API_DEPRECATED_WITH_REPLACEMENT",
    "NS_AVAILABLE",
    "NS_AVAILABLE_MAC",
    "NS_AVAILABLE_IOS",
    "NS_DEPRECATED",
    "NS_DEPRECATED_MAC",
    "NS_DEPRECATED_IOS",
    "NS_ENUM_AVAILABLE",
    "NS_ENUM_DEPRECATED",
    "NS_CLASS_AVAILABLE",
    "NS_CLASS_DEPRECATED",
    "__attribute__",
}
