"""Predicates over text, and the adapters that apply them to raw bytes."""

from __future__ import annotations

import difflib
import re
from typing import Any, Iterator

from cmdassert.predicates.base import Case, Parameter, Predicate, Product


class TextPredicate(Predicate):
    """Base for predicates that evaluate ``str`` values."""

    item_type = str


def _unified_diff(expected: str, actual: str) -> str:
    """Line diff of two texts, marking a missing trailing newline like git does."""
    lines = []
    diff = difflib.unified_diff(
        expected.splitlines(keepends=True),
        actual.splitlines(keepends=True),
        fromfile="expected",
        tofile="actual",
        lineterm="",
    )
    for index, line in enumerate(diff):
        if index < 2 or line.startswith("@@"):
            lines.append(line)
        elif line.endswith("\n"):
            lines.append(line[:-1])
        else:
            lines.append(line)
            lines.append("\\ No newline at end of file")
    return "\n".join(lines)


class DifferencePredicate(TextPredicate):
    """Exact text equality that explains mismatches with a line diff."""

    def __init__(self, orig: str):
        self.orig = orig

    def eval(self, variable: Any) -> bool:
        return variable == self.orig

    def find_case(self, expected: bool, variable: Any) -> Case | None:
        result = self.eval(variable)
        if result != expected:
            return None
        case = Case(self, result, [Product("var", variable)])
        if not result and isinstance(variable, str):
            diff = _unified_diff(self.orig, variable)
            if diff:
                case.add_product(Product("diff", diff, literal=True))
        return case

    def parameters(self) -> Iterator[Parameter]:
        yield Parameter("original", self.orig)

    def __str__(self) -> str:
        return f"var == {self.orig!r}"


class ContainsPredicate(TextPredicate):
    """Substring search, optionally requiring an exact number of occurrences."""

    def __init__(self, pattern: str, count: int | None = None):
        self.pattern = pattern
        self._count = count

    def count(self, count: int) -> ContainsPredicate:
        return ContainsPredicate(self.pattern, count)

    def eval(self, variable: Any) -> bool:
        if not isinstance(variable, str):
            return False
        if self._count is None:
            return self.pattern in variable
        return variable.count(self.pattern) == self._count

    def find_case(self, expected: bool, variable: Any) -> Case | None:
        case = super().find_case(expected, variable)
        if case is not None and self._count is not None and isinstance(variable, str):
            case.add_product(Product("actual count", variable.count(self.pattern)))
        return case

    def parameters(self) -> Iterator[Parameter]:
        yield Parameter("pattern", self.pattern)
        if self._count is not None:
            yield Parameter("count", self._count)

    def __str__(self) -> str:
        if self._count is None:
            return f"var.contains({self.pattern!r})"
        return f"var.contains({self.pattern!r}) == {self._count}"


class StartsWithPredicate(TextPredicate):
    def __init__(self, pattern: str):
        self.pattern = pattern

    def eval(self, variable: Any) -> bool:
        return isinstance(variable, str) and variable.startswith(self.pattern)

    def __str__(self) -> str:
        return f"var.starts_with({self.pattern!r})"


class EndsWithPredicate(TextPredicate):
    def __init__(self, pattern: str):
        self.pattern = pattern

    def eval(self, variable: Any) -> bool:
        return isinstance(variable, str) and variable.endswith(self.pattern)

    def __str__(self) -> str:
        return f"var.ends_with({self.pattern!r})"


class IsEmptyPredicate(TextPredicate):
    def eval(self, variable: Any) -> bool:
        return variable == ""

    def __str__(self) -> str:
        return "var.is_empty()"


class RegexPredicate(TextPredicate):
    """Regex search (``re.search`` semantics, multiline)."""

    def __init__(self, pattern: str, count: int | None = None):
        self.regex = re.compile(pattern, re.MULTILINE)
        self._count = count

    def count(self, count: int) -> RegexPredicate:
        return RegexPredicate(self.regex.pattern, count)

    def eval(self, variable: Any) -> bool:
        if not isinstance(variable, str):
            return False
        if self._count is None:
            return self.regex.search(variable) is not None
        return len(self.regex.findall(variable)) == self._count

    def find_case(self, expected: bool, variable: Any) -> Case | None:
        case = super().find_case(expected, variable)
        if case is not None and self._count is not None and isinstance(variable, str):
            case.add_product(Product("actual count", len(self.regex.findall(variable))))
        return case

    def parameters(self) -> Iterator[Parameter]:
        yield Parameter("pattern", self.regex.pattern)

    def __str__(self) -> str:
        if self._count is None:
            return f"var.is_match({self.regex.pattern!r})"
        return f"var.is_match({self.regex.pattern!r}).count() == {self._count}"


class TrimPredicate(TextPredicate):
    """Strip surrounding whitespace before applying the inner predicate."""

    def __init__(self, inner: Predicate):
        self.inner = inner

    def eval(self, variable: Any) -> bool:
        return isinstance(variable, str) and self.inner.eval(variable.strip())

    def find_case(self, expected: bool, variable: Any) -> Case | None:
        if not isinstance(variable, str):
            return None if expected else Case(self, False, [Product("var", variable)])
        child = self.inner.find_case(expected, variable.strip())
        if child is None:
            return None
        return Case(self, expected, children=[child])

    def children(self) -> Iterator[Predicate]:
        yield self.inner

    def __str__(self) -> str:
        return f"{self.inner} (trimmed)"


class NormalizedPredicate(TextPredicate):
    """Convert ``\\r\\n`` line endings to ``\\n`` before applying the inner predicate."""

    def __init__(self, inner: Predicate):
        self.inner = inner

    @staticmethod
    def _normalize(text: str) -> str:
        return text.replace("\r\n", "\n")

    def eval(self, variable: Any) -> bool:
        return isinstance(variable, str) and self.inner.eval(self._normalize(variable))

    def find_case(self, expected: bool, variable: Any) -> Case | None:
        if not isinstance(variable, str):
            return None if expected else Case(self, False, [Product("var", variable)])
        child = self.inner.find_case(expected, self._normalize(variable))
        if child is None:
            return None
        return Case(self, expected, children=[child])

    def children(self) -> Iterator[Predicate]:
        yield self.inner

    def __str__(self) -> str:
        return f"{self.inner} (normalized newlines)"


class Utf8Predicate(Predicate):
    """Decode bytes as UTF-8, then apply a text predicate.

    Bytes that fail to decode never match; the failure case carries the
    decode error instead of a child case.
    """

    def __init__(self, inner: Predicate):
        self.inner = inner

    @staticmethod
    def _decode(variable: Any) -> str:
        if isinstance(variable, str):
            return variable
        return bytes(variable).decode("utf-8")

    def eval(self, variable: Any) -> bool:
        try:
            text = self._decode(variable)
        except UnicodeDecodeError:
            return False
        return self.inner.eval(text)

    def find_case(self, expected: bool, variable: Any) -> Case | None:
        try:
            text = self._decode(variable)
        except UnicodeDecodeError as exc:
            if expected:
                return None
            return Case(self, False, [Product("error", exc)])
        return self.inner.find_case(expected, text)

    def children(self) -> Iterator[Predicate]:
        yield self.inner

    def __str__(self) -> str:
        return str(self.inner)


def similar(orig: str) -> DifferencePredicate:
    """Passes when the text equals ``orig``; failures include a unified diff."""
    return DifferencePredicate(orig)


def contains(pattern: str) -> ContainsPredicate:
    return ContainsPredicate(pattern)


def starts_with(pattern: str) -> StartsWithPredicate:
    return StartsWithPredicate(pattern)


def ends_with(pattern: str) -> EndsWithPredicate:
    return EndsWithPredicate(pattern)


def is_empty() -> IsEmptyPredicate:
    return IsEmptyPredicate()


def is_match(pattern: str) -> RegexPredicate:
    """Passes when ``pattern`` matches anywhere in the text.

    Raises:
        re.error: If ``pattern`` is not a valid regular expression.
    """
    return RegexPredicate(pattern)


def trim(inner: Predicate) -> TrimPredicate:
    return TrimPredicate(inner)


def normalize_newlines(inner: Predicate) -> NormalizedPredicate:
    return NormalizedPredicate(inner)


def from_utf8(inner: Predicate) -> Utf8Predicate:
    """Adapt a text predicate so it can be evaluated against bytes."""
    return Utf8Predicate(inner)
