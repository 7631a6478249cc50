"""Statement comparison for baseline checks."""
from __future__ import annotations

import logging
from typing import Callable, Sequence, TypeVar

from ..models.statements import Methods, Stmt
from .errors import StatementMismatchError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def compare_slice(
    expected: Sequence[T],
    actual: Sequence[T],
    compare: Callable[[int, T, T], None],
) -> None:
    """Call ``compare`` on each pair, then fail if the lengths differ."""
    for index, (left, right) in enumerate(zip(expected, actual)):
        compare(index, left, right)
    if len(expected) != len(actual):
        raise StatementMismatchError(
            f"length mismatch: expected {len(expected)} items, got {len(actual)}"
        )


def compare_statements(expected: Stmt, actual: Stmt) -> None:
    if expected == actual:
        return

    if isinstance(expected, Methods) and isinstance(actual, Methods):
        owner = expected.ty.name

        def _compare_method(index, left, right) -> None:
            if left != right:
                raise StatementMismatchError(
                    f"methods of {owner} were not equal at index {index}:\n{left!r}\n{right!r}"
                )

        compare_slice(expected.methods, actual.methods, _compare_method)

    raise StatementMismatchError(f"statements were not equal:\n{expected!r}\n{actual!r}")


def compare_statement_lists(expected: Sequence[Stmt], actual: Sequence[Stmt]) -> None:
    def _compare(index: int, left: Stmt, right: Stmt) -> None:
        logger.debug("comparing statement %d", index)
        compare_statements(left, right)

    compare_slice(expected, actual, _compare)
