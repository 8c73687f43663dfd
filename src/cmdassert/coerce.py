"""Turn convenient literals into predicates for exit-code and output checks.

``Assert.code`` and ``Assert.stdout``/``Assert.stderr`` accept either a
predicate or a shorthand. The shorthands are normalized here; only the two
``into_*`` functions are public, the wrapper classes are not part of the API.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Callable, Iterator, Union

from cmdassert.predicates.base import Case, Parameter, Predicate
from cmdassert.predicates.boolean import (
    AndPredicate,
    FnPredicate,
    NamePredicate,
    NotPredicate,
    OrPredicate,
)
from cmdassert.predicates.collection import InPredicate
from cmdassert.predicates.compare import OrdPredicate
from cmdassert.predicates.text import DifferencePredicate, Utf8Predicate

CodeLike = Union[Predicate, int, Iterable[int], Callable[[int], bool]]
OutputLike = Union[Predicate, bytes, bytearray, memoryview, str, Callable[[bytes], bool]]


class _WrappedPredicate(Predicate):
    """Delegate everything to an inner predicate."""

    def __init__(self, inner: Predicate):
        self._inner = inner

    def eval(self, variable: Any) -> bool:
        return self._inner.eval(variable)

    def find_case(self, expected: bool, variable: Any) -> Case | None:
        return self._inner.find_case(expected, variable)

    def parameters(self) -> Iterator[Parameter]:
        return self._inner.parameters()

    def children(self) -> Iterator[Predicate]:
        return self._inner.children()

    def __str__(self) -> str:
        return str(self._inner)


class _EqCodePredicate(_WrappedPredicate):
    def __init__(self, code: int):
        super().__init__(OrdPredicate(code, "=="))


class _InCodePredicate(_WrappedPredicate):
    def __init__(self, codes: Iterable[int]):
        super().__init__(InPredicate(codes))


class _BytesContentOutputPredicate(_WrappedPredicate):
    def __init__(self, expected: bytes):
        super().__init__(OrdPredicate(bytes(expected), "=="))


class _StrContentOutputPredicate(_WrappedPredicate):
    def __init__(self, expected: str):
        super().__init__(Utf8Predicate(DifferencePredicate(expected)))


class _StrOutputPredicate(_WrappedPredicate):
    def __init__(self, pred: Predicate):
        super().__init__(Utf8Predicate(pred))


def _adapt_to_bytes(pred: Predicate) -> Predicate:
    """Decode for the text parts of ``pred`` only; byte parts see raw output."""
    if pred.item_type is str:
        return _StrOutputPredicate(pred)
    if isinstance(pred, (AndPredicate, OrPredicate)):
        return type(pred)(_adapt_to_bytes(pred.left), _adapt_to_bytes(pred.right))
    if isinstance(pred, NotPredicate):
        return NotPredicate(_adapt_to_bytes(pred.inner))
    if isinstance(pred, NamePredicate):
        return NamePredicate(_adapt_to_bytes(pred.inner), pred.label)
    return pred


def into_code_predicate(value: CodeLike) -> Predicate:
    """Convert ``value`` into a predicate over exit codes.

    - a Predicate is used as-is
    - an int matches exactly that code
    - an iterable of ints matches any of its members
    - a plain callable is called with the code

    Raises:
        TypeError: If ``value`` is none of the above.
    """
    if isinstance(value, Predicate):
        return value
    if isinstance(value, bool):
        raise TypeError("Exit code must be an int, not bool")
    if isinstance(value, int):
        return _EqCodePredicate(value)
    if isinstance(value, (str, bytes)):
        raise TypeError(f"Cannot use {type(value).__name__} as an exit code predicate")
    if isinstance(value, Iterable):
        codes = list(value)
        bad = [c for c in codes if isinstance(c, bool) or not isinstance(c, int)]
        if bad:
            raise TypeError(f"Exit codes must be ints, got {bad!r}")
        return _InCodePredicate(codes)
    if callable(value):
        return FnPredicate(value)
    raise TypeError(f"Cannot use {type(value).__name__} as an exit code predicate")


def into_output_predicate(value: OutputLike) -> Predicate:
    """Convert ``value`` into a predicate over captured output bytes.

    - a text Predicate is applied to the output decoded as UTF-8
    - any other Predicate is applied to the raw bytes; in a combination of
      text and byte predicates each side gets the form it expects
    - bytes must match byte-for-byte
    - a str must match the UTF-8 decoded output exactly
    - a plain callable is called with the raw bytes

    Raises:
        TypeError: If ``value`` is none of the above.
    """
    if isinstance(value, Predicate):
        return _adapt_to_bytes(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return _BytesContentOutputPredicate(bytes(value))
    if isinstance(value, str):
        return _StrContentOutputPredicate(value)
    if callable(value):
        return FnPredicate(value)
    raise TypeError(f"Cannot use {type(value).__name__} as an output predicate")
