"""Equality and ordering predicates."""

from __future__ import annotations

import operator
from typing import Any, Callable, Iterator

from cmdassert.predicates.base import Parameter, Predicate, _display

_OPS: dict[str, Callable[[Any, Any], bool]] = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


class OrdPredicate(Predicate):
    """Compare the variable against a constant: ``var <op> constant``."""

    def __init__(self, constant: Any, op: str):
        if op not in _OPS:
            raise ValueError(f"Unknown comparison operator '{op}'")
        self.constant = constant
        self.op = op
        # Text constants make this a text predicate, so byte streams get decoded.
        self.item_type = str if isinstance(constant, str) else None

    def eval(self, variable: Any) -> bool:
        try:
            return bool(_OPS[self.op](variable, self.constant))
        except TypeError:
            # Unorderable pairs (e.g. bytes < int) simply do not match.
            return False

    def parameters(self) -> Iterator[Parameter]:
        yield Parameter("constant", self.constant)

    def __str__(self) -> str:
        return f"var {self.op} {_display(self.constant)}"


def eq(constant: Any) -> OrdPredicate:
    """Passes when the variable equals ``constant``."""
    return OrdPredicate(constant, "==")


def ne(constant: Any) -> OrdPredicate:
    return OrdPredicate(constant, "!=")


def lt(constant: Any) -> OrdPredicate:
    return OrdPredicate(constant, "<")


def le(constant: Any) -> OrdPredicate:
    return OrdPredicate(constant, "<=")


def gt(constant: Any) -> OrdPredicate:
    return OrdPredicate(constant, ">")


def ge(constant: Any) -> OrdPredicate:
    return OrdPredicate(constant, ">=")
