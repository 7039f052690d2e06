"""Unit tests for operator orders and parenthesization."""

from __future__ import annotations

import pytest

from Blockduino.transpile.order import (
    ORDER_OVERRIDES,
    Order,
    adjusted_expression,
    adjusted_index,
    format_number,
    is_number,
    is_override,
    needs_parentheses,
)


def test_tighter_inner_needs_no_parentheses() -> None:
    assert not needs_parentheses(Order.ADDITION, Order.MULTIPLICATION)
    assert not needs_parentheses(Order.NONE, Order.ADDITION)
    assert not needs_parentheses(Order.RELATIONAL, Order.ATOMIC)


def test_looser_inner_is_wrapped() -> None:
    assert needs_parentheses(Order.MULTIPLICATION, Order.ADDITION)
    assert adjusted_expression("a + b", Order.ADDITION, Order.MULTIPLICATION) == "(a + b)"
    assert adjusted_expression("a || b", Order.LOGICAL_OR, Order.LOGICAL_NOT) == "(a || b)"


def test_same_tier_is_wrapped_unless_overridden() -> None:
    assert needs_parentheses(Order.SUBTRACTION, Order.SUBTRACTION)
    assert needs_parentheses(Order.SUBTRACTION, Order.ADDITION)
    assert not needs_parentheses(Order.ADDITION, Order.ADDITION)
    assert not needs_parentheses(Order.LOGICAL_AND, Order.LOGICAL_AND)


def test_atomic_and_none_pairs_never_wrap() -> None:
    assert not needs_parentheses(Order.ATOMIC, Order.ATOMIC)
    assert not needs_parentheses(Order.NONE, Order.NONE)


def test_override_pairs_match_exactly_or_by_tier() -> None:
    assert (Order.FUNCTION_CALL, Order.MEMBER) in ORDER_OVERRIDES
    assert is_override(Order.MEMBER, Order.FUNCTION_CALL)
    assert is_override(Order.LOGICAL_OR, Order.LOGICAL_OR)
    assert not is_override(Order.MULTIPLICATION, Order.DIVISION)


def test_custom_override_table() -> None:
    overrides = frozenset({(Order.SUBTRACTION, Order.SUBTRACTION)})
    assert not needs_parentheses(Order.SUBTRACTION, Order.SUBTRACTION, overrides)
    assert needs_parentheses(Order.ADDITION, Order.ADDITION, overrides)


def test_empty_code_stays_empty() -> None:
    assert adjusted_expression("", Order.ADDITION, Order.MULTIPLICATION) == ""


@pytest.mark.parametrize(
    "text, expected",
    [("3", True), ("-1.5", True), (" 42 ", True), ("x", False), ("1e5", False), ("", False)],
)
def test_is_number(text: str, expected: bool) -> None:
    assert is_number(text) is expected


def test_format_number_drops_integral_fraction() -> None:
    assert format_number(3.0) == "3"
    assert format_number(-2) == "-2"
    assert format_number(0.5) == "0.5"


def test_literal_index_is_folded() -> None:
    assert adjusted_index("3", -1) == "2"
    assert adjusted_index("3", 1) == "4"
    assert adjusted_index("3", -1, negate=True) == "-2"
    assert adjusted_index("0", 0, negate=True) == "0"


def test_dynamic_index_spells_out_arithmetic() -> None:
    assert adjusted_index("x", -1) == "x - 1"
    assert adjusted_index("x", 2) == "x + 2"
    assert adjusted_index("x", 0, negate=True) == "-x"
    assert adjusted_index("x", 1, negate=True) == "-(x + 1)"
    assert adjusted_index("x") == "x"


def test_dynamic_index_parenthesized_against_context() -> None:
    # Looser context: no parentheses.
    assert adjusted_index("x", -1, order=Order.RELATIONAL) == "x - 1"
    # Tighter context: parentheses.
    assert adjusted_index("x", -1, order=Order.MULTIPLICATION) == "(x - 1)"
    assert adjusted_index("x", 1, order=Order.SUBTRACTION) == "(x + 1)"
    assert adjusted_index("x", 0, negate=True, order=Order.MEMBER) == "(-x)"
