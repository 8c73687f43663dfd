"""Tests for literal-to-predicate coercion."""

import pytest

from cmdassert.coerce import into_code_predicate, into_output_predicate
from cmdassert.predicates import Predicate, eq, in_iter, text


# --- into_code_predicate ---


def test_code_from_predicate_is_unchanged():
    pred = eq(10)
    assert into_code_predicate(pred) is pred


@pytest.mark.parametrize("n", [0, 1, 10, 255, -1])
def test_code_from_int_matches_exactly(n):
    pred = into_code_predicate(n)
    assert isinstance(pred, Predicate)
    assert pred.eval(n)
    assert not pred.eval(n + 1)
    assert not pred.eval(n - 1)


@pytest.mark.parametrize(
    "codes",
    [[3, 10], (3, 10), {3, 10}, frozenset({3, 10}), range(3, 11, 7)],
)
def test_code_from_collection_matches_members(codes):
    pred = into_code_predicate(codes)
    assert pred.eval(3)
    assert pred.eval(10)
    assert not pred.eval(4)
    assert not pred.eval(0)


def test_code_from_empty_collection_matches_nothing():
    pred = into_code_predicate([])
    assert not pred.eval(0)


def test_code_from_callable():
    pred = into_code_predicate(lambda code: code > 100)
    assert pred.eval(101)
    assert not pred.eval(1)


def test_code_display_hides_wrapper():
    assert str(into_code_predicate(7)) == "var == 7"
    assert str(into_code_predicate([2, 42])) == "var in [2, 42]"


@pytest.mark.parametrize("bad", [True, "0", b"0", 1.5, None, ["1"], [True]])
def test_code_rejects_other_shapes(bad):
    with pytest.raises(TypeError):
        into_code_predicate(bad)


# --- into_output_predicate ---


def test_output_from_bytes_predicate_is_unchanged():
    pred = eq(b"Hello")
    converted = into_output_predicate(pred)
    assert converted is pred
    assert converted.eval(b"Hello")


@pytest.mark.parametrize("literal", [b"Hello", bytearray(b"Hello"), memoryview(b"Hello")])
def test_output_from_bytes_is_exact(literal):
    pred = into_output_predicate(literal)
    assert pred.eval(b"Hello")
    assert not pred.eval(b"Hello\n")
    assert not pred.eval(b"hello")


def test_output_from_str_decodes_and_compares():
    pred = into_output_predicate("Hello")
    assert pred.eval(b"Hello")
    assert not pred.eval(b"Hello\n")
    assert not pred.eval(b"\xffHello")


def test_output_from_str_failure_explains_with_diff():
    case = into_output_predicate("hello\n").find_case(False, b"world\n")
    assert case is not None
    assert "diff" in [p.name for p in case.products]


def test_output_from_str_decode_failure_explains_error():
    case = into_output_predicate("hello").find_case(False, b"\xff")
    assert case is not None
    assert case.products[0].name == "error"


def test_output_from_text_predicate_decodes_first():
    pred = into_output_predicate(text.similar("Hello\n"))
    assert pred.eval(b"Hello\n")
    assert not pred.eval(b"Hello")

    pred = into_output_predicate(text.contains("ell") & text.ends_with("\n"))
    assert pred.eval(b"Hello\n")


def test_output_from_text_eq_decodes_first():
    pred = into_output_predicate(eq("Hello"))
    assert pred.eval(b"Hello")


def test_output_from_text_membership_decodes_first():
    pred = into_output_predicate(in_iter(["a\n", "b\n"]))
    assert pred.eval(b"b\n")


def test_output_from_callable_receives_bytes():
    seen = []

    def check(data):
        seen.append(data)
        return len(data) == 3

    assert into_output_predicate(check).eval(b"abc")
    assert seen == [b"abc"]


def test_output_mixed_combination_adapts_each_side():
    pred = into_output_predicate(eq(b"hello\n") | text.contains("zzz"))
    assert pred.eval(b"hello\n")
    assert pred.find_case(False, b"hello\n") is None

    pred = into_output_predicate(text.starts_with("he") & ~eq(b"help\n"))
    assert pred.eval(b"hello\n")
    assert not pred.eval(b"help\n")


def test_output_mixed_combination_failure_shows_raw_and_decoded():
    pred = into_output_predicate((eq(b"bye\n") | text.contains("zzz")).name("greeting"))
    tree = pred.find_case(False, b"hello\n").tree()
    assert "var: b'hello\\n'" in tree
    assert "var: 'hello\\n'" in tree


@pytest.mark.parametrize("bad", [1, None, 2.0, ["a"]])
def test_output_rejects_other_shapes(bad):
    with pytest.raises(TypeError):
        into_output_predicate(bad)
