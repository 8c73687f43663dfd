"""Membership predicates."""

from __future__ import annotations

from typing import Any, Iterable, Iterator

from cmdassert.predicates.base import Parameter, Predicate


class InPredicate(Predicate):
    """Passes when the variable is a member of a fixed collection."""

    def __init__(self, items: Iterable[Any]):
        self.items = tuple(items)
        try:
            self._lookup: frozenset | None = frozenset(self.items)
        except TypeError:
            self._lookup = None
        if self.items and all(isinstance(item, str) for item in self.items):
            self.item_type = str

    def eval(self, variable: Any) -> bool:
        if self._lookup is not None:
            try:
                return variable in self._lookup
            except TypeError:
                return False
        return variable in self.items

    def parameters(self) -> Iterator[Parameter]:
        yield Parameter("values", list(self.items))

    def __str__(self) -> str:
        return f"var in {list(self.items)!r}"


def in_iter(items: Iterable[Any]) -> InPredicate:
    """Passes when the variable equals any member of ``items``."""
    return InPredicate(items)
