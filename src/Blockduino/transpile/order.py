"""Operator binding strengths and the parenthesization rules built on them."""

from __future__ import annotations

import re
from typing import FrozenSet, Tuple


class Order:
    """Binding strength of C operators; lower values bind tighter.

    Fractional values separate operators that share a precedence tier so
    that override pairs can name them individually.
    """

    ATOMIC = 0
    NEW = 1.1
    MEMBER = 1.2
    FUNCTION_CALL = 2
    INCREMENT = 3
    DECREMENT = 3
    BITWISE_NOT = 4.1
    UNARY_PLUS = 4.2
    UNARY_NEGATION = 4.3
    LOGICAL_NOT = 4.4
    TYPEOF = 4.5
    VOID = 4.6
    DELETE = 4.7
    AWAIT = 4.8
    EXPONENTIATION = 5.0
    MULTIPLICATION = 5.1
    DIVISION = 5.2
    MODULUS = 5.3
    SUBTRACTION = 6.1
    ADDITION = 6.2
    BITWISE_SHIFT = 7
    RELATIONAL = 8
    EQUALITY = 9
    BITWISE_AND = 10
    BITWISE_XOR = 11
    BITWISE_OR = 12
    LOGICAL_AND = 13
    LOGICAL_OR = 14
    CONDITIONAL = 15
    ASSIGNMENT = 16
    YIELD = 17
    COMMA = 18
    NONE = 99


OrderPair = Tuple[float, float]

# (outer, inner) pairs that never need parentheses.
ORDER_OVERRIDES: FrozenSet[OrderPair] = frozenset(
    {
        # foo().bar, foo()[0]
        (Order.FUNCTION_CALL, Order.MEMBER),
        # foo()()
        (Order.FUNCTION_CALL, Order.FUNCTION_CALL),
        # foo.bar.baz, foo[0][1]
        (Order.MEMBER, Order.MEMBER),
        # foo.bar(), foo[0]()
        (Order.MEMBER, Order.FUNCTION_CALL),
        # !!foo
        (Order.LOGICAL_NOT, Order.LOGICAL_NOT),
        # a * b * c
        (Order.MULTIPLICATION, Order.MULTIPLICATION),
        # a + b + c
        (Order.ADDITION, Order.ADDITION),
        # a && b && c
        (Order.LOGICAL_AND, Order.LOGICAL_AND),
        # a || b || c
        (Order.LOGICAL_OR, Order.LOGICAL_OR),
    }
)

_NUMBER_RE = re.compile(r"^\s*-?\d+(\.\d+)?\s*$")


def _tier(order: float) -> int:
    return int(order)


def is_override(
    outer: float, inner: float, overrides: FrozenSet[OrderPair] = ORDER_OVERRIDES
) -> bool:
    """Return ``True`` when ``(outer, inner)`` is listed, exactly or by tier."""

    if (outer, inner) in overrides:
        return True
    return (_tier(outer), _tier(inner)) in overrides


def needs_parentheses(
    outer: float, inner: float, overrides: FrozenSet[OrderPair] = ORDER_OVERRIDES
) -> bool:
    """Decide whether an ``inner`` expression must be wrapped inside ``outer``.

    Parentheses are required whenever the inner tier does not bind tighter
    than the tier demanded by the surrounding position.  Two atomic or two
    unordered expressions never need them, and neither do override pairs.
    """

    outer_tier = _tier(outer)
    inner_tier = _tier(inner)
    if outer_tier > inner_tier:
        return False
    if outer_tier == inner_tier and outer_tier in (_tier(Order.ATOMIC), _tier(Order.NONE)):
        return False
    return not is_override(outer, inner, overrides)


def adjusted_expression(
    code: str,
    inner: float,
    outer: float,
    overrides: FrozenSet[OrderPair] = ORDER_OVERRIDES,
) -> str:
    """Return ``code`` ready to be embedded where ``outer`` is required."""

    if not code:
        return ""
    if needs_parentheses(outer, inner, overrides):
        return f"({code})"
    return code


def is_number(text: object) -> bool:
    """Return ``True`` for a plain decimal literal such as ``"3"`` or ``"-1.5"``."""

    return isinstance(text, (str, int, float)) and bool(_NUMBER_RE.match(str(text)))


def format_number(value: float) -> str:
    """Render ``value`` the way a literal would be written in source."""

    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def adjusted_index(
    at: str,
    delta: float = 0,
    negate: bool = False,
    order: float = Order.NONE,
) -> str:
    """Shift and/or negate an index expression.

    Literal indices are folded right away.  Dynamic ones get the arithmetic
    spelled out and are parenthesized against ``order`` with the same rule as
    :func:`needs_parentheses`.
    """

    if is_number(at):
        value = float(at) + delta
        if negate:
            value = -value
        return format_number(value)

    code = str(at)
    inner = None
    if delta > 0:
        code = f"{code} + {format_number(delta)}"
        inner = Order.ADDITION
    elif delta < 0:
        code = f"{code} - {format_number(-delta)}"
        inner = Order.SUBTRACTION
    if negate:
        code = f"-({code})" if delta else f"-{code}"
        inner = Order.UNARY_NEGATION
    if inner is not None and needs_parentheses(order, inner):
        code = f"({code})"
    return code
