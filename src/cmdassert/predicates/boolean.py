"""Constant, function and combinator predicates."""

from __future__ import annotations

from typing import Any, Callable, Iterator

from cmdassert.predicates.base import Case, Predicate


def _shared_item_type(*preds: Predicate) -> type | None:
    types = {p.item_type for p in preds}
    if len(types) == 1:
        return types.pop()
    # Mixed text and byte sides: each side is adapted on its own.
    return None


class BooleanPredicate(Predicate):
    """Always evaluates to a fixed value."""

    def __init__(self, value: bool):
        self.value = value

    def eval(self, variable: Any) -> bool:
        return self.value

    def __str__(self) -> str:
        return "true" if self.value else "false"


class FnPredicate(Predicate):
    """Wrap a plain callable as a predicate."""

    def __init__(self, fn: Callable[[Any], bool], name: str | None = None):
        self.fn = fn
        self._name = name or getattr(fn, "__name__", "fn")

    def eval(self, variable: Any) -> bool:
        return bool(self.fn(variable))

    def __str__(self) -> str:
        return f"{self._name}(var)"


class NamePredicate(Predicate):
    """Relabel a predicate for friendlier failure output."""

    def __init__(self, inner: Predicate, label: str):
        self.inner = inner
        self.label = label
        self.item_type = inner.item_type

    def eval(self, variable: Any) -> bool:
        return self.inner.eval(variable)

    def find_case(self, expected: bool, variable: Any) -> Case | None:
        child = self.inner.find_case(expected, variable)
        if child is None:
            return None
        return Case(self, expected, children=[child])

    def children(self) -> Iterator[Predicate]:
        yield self.inner

    def __str__(self) -> str:
        return self.label


class AndPredicate(Predicate):
    def __init__(self, left: Predicate, right: Predicate):
        self.left = left
        self.right = right
        self.item_type = _shared_item_type(left, right)

    def eval(self, variable: Any) -> bool:
        return self.left.eval(variable) and self.right.eval(variable)

    def find_case(self, expected: bool, variable: Any) -> Case | None:
        left_case = self.left.find_case(expected, variable)
        if expected:
            # Both sides must hold; report both.
            if left_case is None:
                return None
            right_case = self.right.find_case(expected, variable)
            if right_case is None:
                return None
            return Case(self, True, children=[left_case, right_case])
        # First failing side explains the failure.
        if left_case is not None:
            return Case(self, False, children=[left_case])
        right_case = self.right.find_case(expected, variable)
        if right_case is not None:
            return Case(self, False, children=[right_case])
        return None

    def children(self) -> Iterator[Predicate]:
        yield self.left
        yield self.right

    def __str__(self) -> str:
        return f"({self.left} && {self.right})"


class OrPredicate(Predicate):
    def __init__(self, left: Predicate, right: Predicate):
        self.left = left
        self.right = right
        self.item_type = _shared_item_type(left, right)

    def eval(self, variable: Any) -> bool:
        return self.left.eval(variable) or self.right.eval(variable)

    def find_case(self, expected: bool, variable: Any) -> Case | None:
        left_case = self.left.find_case(expected, variable)
        if not expected:
            # Neither side held; report both.
            if left_case is None:
                return None
            right_case = self.right.find_case(expected, variable)
            if right_case is None:
                return None
            return Case(self, False, children=[left_case, right_case])
        if left_case is not None:
            return Case(self, True, children=[left_case])
        right_case = self.right.find_case(expected, variable)
        if right_case is not None:
            return Case(self, True, children=[right_case])
        return None

    def children(self) -> Iterator[Predicate]:
        yield self.left
        yield self.right

    def __str__(self) -> str:
        return f"({self.left} || {self.right})"


class NotPredicate(Predicate):
    def __init__(self, inner: Predicate):
        self.inner = inner
        self.item_type = inner.item_type

    def eval(self, variable: Any) -> bool:
        return not self.inner.eval(variable)

    def find_case(self, expected: bool, variable: Any) -> Case | None:
        child = self.inner.find_case(not expected, variable)
        if child is None:
            return None
        return Case(self, expected, children=[child])

    def children(self) -> Iterator[Predicate]:
        yield self.inner

    def __str__(self) -> str:
        return f"(! {self.inner})"


def always() -> BooleanPredicate:
    return BooleanPredicate(True)


def never() -> BooleanPredicate:
    return BooleanPredicate(False)


def function(fn: Callable[[Any], bool], name: str | None = None) -> FnPredicate:
    """Use ``fn`` as a predicate; ``name`` labels it in failure output."""
    return FnPredicate(fn, name)
