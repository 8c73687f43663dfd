"""Predicates: boolean tests that can explain why they failed."""

from cmdassert.predicates import text
from cmdassert.predicates.base import Case, Parameter, Predicate, Product
from cmdassert.predicates.boolean import always, function, never
from cmdassert.predicates.collection import in_iter
from cmdassert.predicates.compare import eq, ge, gt, le, lt, ne
from cmdassert.predicates.tree import render_case

__all__ = [
    "Case",
    "Parameter",
    "Predicate",
    "Product",
    "always",
    "eq",
    "function",
    "ge",
    "gt",
    "in_iter",
    "le",
    "lt",
    "ne",
    "never",
    "render_case",
    "text",
]
