"""Literal expressions for enum constants and variable initializers.

Initializer source text is parsed with tree-sitter's C grammar and rendered
back as a host-language expression. Anything that is not a plain constant
expression is declined so the caller can fall back or skip.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from tree_sitter import Language, Node, Parser
from tree_sitter_c import language as c_language

from ..models.entity import Entity

logger = logging.getLogger(__name__)

INTEGER_RE = re.compile(r"^(?P<sign>[-+]?)(?P<digits>0[xX][0-9a-fA-F]+|0[bB][01]+|\d+)(?P<suffix>[uUlL]*)$")
OCTAL_RE = re.compile(r"^0[0-7]+$")
FLOAT_RE = re.compile(r"^(?P<sign>[-+]?)(?P<digits>(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?)[fFlL]?$")

UNARY_OPERATORS = {"-": "-", "+": "", "!": "!", "~": "!"}
BINARY_OPERATORS = {
    "+", "-", "*", "/", "%",
    "<<", ">>", "&", "|", "^",
    "==", "!=", "<", ">", "<=", ">=",
    "&&", "||",
}
CAST_AMBIGUOUS_OPERATORS = {"-", "+", "&", "*"}


@dataclass(frozen=True, slots=True)
class Expr:
    text: str

    def __str__(self) -> str:
        return self.text

    @classmethod
    def from_val(cls, value: int, is_signed: bool, pointer_width: int) -> Expr:
        unsigned = value % (1 << 64)
        if not is_signed and unsigned == (1 << pointer_width) - 1:
            return cls("NSUIntegerMax as _")
        if value == (1 << (pointer_width - 1)) - 1:
            return cls("NSIntegerMax as _")
        if is_signed:
            return cls(str(value))
        return cls(str(unsigned))

    @classmethod
    def parse(cls, source: str) -> Optional[Expr]:
        return _initializer_parser().parse(source)

    @classmethod
    def parse_enum_constant(cls, entity: Entity) -> Optional[Expr]:
        for child in entity.children:
            if child.kind.is_expression:
                return cls._parse_child(child)
        return None

    @classmethod
    def parse_var(cls, entity: Entity) -> Optional[Expr]:
        return cls._parse_child(entity)

    @classmethod
    def _parse_child(cls, entity: Entity) -> Optional[Expr]:
        if not entity.source:
            logger.debug("expression %s has no source text", entity.kind.value)
            return None
        return cls.parse(entity.source)


class InitializerParser:
    def __init__(self) -> None:
        self._language = Language(c_language())
        self._parser = Parser(self._language)

    def parse(self, source: str) -> Optional[Expr]:
        source_bytes = f"long long __value = {source};\n".encode("utf-8")
        tree = self._parser.parse(source_bytes)
        root = tree.root_node
        if root.has_error:
            logger.debug("could not parse initializer %r", source)
            return None
        value = self._initializer_value(root)
        if value is None:
            return None
        rendered = self._render(value, source_bytes)
        if rendered is None:
            logger.debug("declined initializer %r", source)
            return None
        return Expr(rendered)

    def _initializer_value(self, root: Node) -> Optional[Node]:
        for declaration in root.named_children:
            if declaration.type != "declaration":
                continue
            declarator = declaration.child_by_field_name("declarator")
            if declarator is not None and declarator.type == "init_declarator":
                return declarator.child_by_field_name("value")
        return None

    def _text(self, node: Node, source_bytes: bytes) -> str:
        return source_bytes[node.start_byte : node.end_byte].decode("utf-8")

    def _render(self, node: Node, source_bytes: bytes) -> Optional[str]:
        kind = node.type
        if kind == "number_literal":
            return _number(self._text(node, source_bytes))
        if kind in {"identifier", "true", "false"}:
            return self._text(node, source_bytes)
        if kind == "parenthesized_expression":
            if len(node.named_children) != 1:
                return None
            inner = self._render(node.named_children[0], source_bytes)
            return f"({inner})" if inner is not None else None
        if kind == "unary_expression":
            operator = node.child_by_field_name("operator")
            argument = node.child_by_field_name("argument")
            if operator is None or argument is None:
                return None
            op = UNARY_OPERATORS.get(operator.type)
            inner = self._render(argument, source_bytes)
            if op is None or inner is None:
                return None
            return f"{op}{inner}"
        if kind == "binary_expression":
            left = node.child_by_field_name("left")
            operator = node.child_by_field_name("operator")
            right = node.child_by_field_name("right")
            if left is None or operator is None or right is None:
                return None
            if operator.type not in BINARY_OPERATORS:
                return None
            if operator.type in CAST_AMBIGUOUS_OPERATORS and _is_parenthesized_name(left):
                # `(NSInteger)-1` has no typedef information, so it reads as `(x) - 1`
                return None
            lhs = self._render(left, source_bytes)
            rhs = self._render(right, source_bytes)
            if lhs is None or rhs is None:
                return None
            return f"{lhs} {operator.type} {rhs}"
        if kind == "cast_expression":
            value = node.child_by_field_name("value")
            return self._render(value, source_bytes) if value is not None else None
        return None


def _is_parenthesized_name(node: Node) -> bool:
    return (
        node.type == "parenthesized_expression"
        and len(node.named_children) == 1
        and node.named_children[0].type == "identifier"
    )


def _number(text: str) -> Optional[str]:
    # the grammar folds a leading sign into the literal
    match = INTEGER_RE.match(text)
    if match:
        sign = match.group("sign").replace("+", "")
        digits = match.group("digits")
        if OCTAL_RE.match(digits):
            return f"{sign}0o{digits[1:]}"
        return f"{sign}{digits}"
    match = FLOAT_RE.match(text)
    if match:
        return match.group("sign").replace("+", "") + match.group("digits")
    return None


@lru_cache(maxsize=1)
def _initializer_parser() -> InitializerParser:
    return InitializerParser()
