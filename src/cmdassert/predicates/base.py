"""Core predicate protocol and explanation tree types."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Iterator


@dataclass(frozen=True)
class Parameter:
    """A named compile-time value of a predicate (e.g. the expected constant)."""

    name: str
    value: Any

    def __str__(self) -> str:
        return f"{self.name}: {_display(self.value)}"


@dataclass(frozen=True)
class Product:
    """A named value produced while evaluating a predicate.

    ``literal`` products are rendered verbatim (no quoting), with multi-line
    values starting on their own line.
    """

    name: str
    value: Any
    literal: bool = False

    def __str__(self) -> str:
        if not self.literal:
            return f"{self.name}: {_display(self.value)}"
        text = str(self.value)
        if "\n" in text:
            body = text.rstrip("\n")
            return f"{self.name}:\n{body}"
        return f"{self.name}: {text}"


@dataclass
class Case:
    """Explanation of why a predicate evaluated the way it did.

    Attributes:
        predicate: The predicate this case describes, or None for a synthetic node.
        result: What the predicate evaluated to.
        products: Values observed during evaluation (actual value, diff, errors).
        children: Sub-cases from nested predicates that decided the result.
    """

    predicate: Predicate | None
    result: bool
    products: list[Product] = field(default_factory=list)
    children: list[Case] = field(default_factory=list)

    def add_product(self, product: Product) -> Case:
        self.products.append(product)
        return self

    def add_child(self, child: Case) -> Case:
        self.children.append(child)
        return self

    def tree(self) -> str:
        from cmdassert.predicates.tree import render_case

        return render_case(self)


def _display(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return repr(bytes(value))
    if isinstance(value, str):
        return repr(value)
    return str(value)


class Predicate(ABC):
    """A stateless boolean test with a renderable explanation.

    ``item_type`` advertises the domain a predicate expects when that matters
    for coercion: text predicates set it to ``str`` so byte streams get decoded
    before evaluation. ``None`` means the predicate takes the value as given.
    """

    item_type: type | None = None

    @abstractmethod
    def eval(self, variable: Any) -> bool:
        """Evaluate the predicate against ``variable``."""

    def find_case(self, expected: bool, variable: Any) -> Case | None:
        """Return a Case when ``eval(variable) == expected``, else None."""
        result = self.eval(variable)
        if result == expected:
            return Case(self, result, [Product("var", variable)])
        return None

    def parameters(self) -> Iterator[Parameter]:
        return iter(())

    def children(self) -> Iterator[Predicate]:
        return iter(())

    def name(self, name: str) -> Predicate:
        from cmdassert.predicates.boolean import NamePredicate

        return NamePredicate(self, name)

    def __and__(self, other: Predicate) -> Predicate:
        from cmdassert.predicates.boolean import AndPredicate

        return AndPredicate(self, other)

    def __or__(self, other: Predicate) -> Predicate:
        from cmdassert.predicates.boolean import OrPredicate

        return OrPredicate(self, other)

    def __invert__(self) -> Predicate:
        from cmdassert.predicates.boolean import NotPredicate

        return NotPredicate(self)

    def __call__(self, variable: Any) -> bool:
        return self.eval(variable)

    def __str__(self) -> str:
        return type(self).__name__

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self}>"
