"""Boolean reporters of the Blockly logic category."""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict

from ..ast import Expression, Node, UnsupportedBlockError
from ..order import Order
from ..registry import HandlerRegistry

if TYPE_CHECKING:
    from ..emitter import GenerationSession

registry = HandlerRegistry()

COMPARE_OPERATORS: Dict[str, str] = {
    "EQ": "==",
    "NEQ": "!=",
    "LT": "<",
    "LTE": "<=",
    "GT": ">",
    "GTE": ">=",
}


@registry.register("logic_compare")
def logic_compare(node: Node, session: "GenerationSession") -> Expression:
    op = node.field_value("OP")
    operator = COMPARE_OPERATORS.get(str(op))
    if operator is None:
        raise UnsupportedBlockError.for_node(node, "Unknown comparison operator")
    order = Order.EQUALITY if op in ("EQ", "NEQ") else Order.RELATIONAL
    left = session.value_to_code(node, "A", order) or "0"
    right = session.value_to_code(node, "B", order) or "0"
    return Expression(f"{left} {operator} {right}", order)


@registry.register("logic_operation")
def logic_operation(node: Node, session: "GenerationSession") -> Expression:
    op = node.field_value("OP")
    if op == "AND":
        operator, order = "&&", Order.LOGICAL_AND
    elif op == "OR":
        operator, order = "||", Order.LOGICAL_OR
    else:
        raise UnsupportedBlockError.for_node(node, "Unknown logic operator")
    left = session.value_to_code(node, "A", order)
    right = session.value_to_code(node, "B", order)
    if not left and not right:
        left = right = "false"
    else:
        # A missing operand must not change the other one's result.
        default = "true" if op == "AND" else "false"
        left = left or default
        right = right or default
    return Expression(f"{left} {operator} {right}", order)


@registry.register("logic_negate")
def logic_negate(node: Node, session: "GenerationSession") -> Expression:
    operand = session.value_to_code(node, "BOOL", Order.LOGICAL_NOT) or "true"
    return Expression(f"!{operand}", Order.LOGICAL_NOT)


@registry.register("logic_boolean")
def logic_boolean(node: Node, session: "GenerationSession") -> Expression:
    value = node.field_value("BOOL")
    if value == "TRUE":
        return Expression("true", Order.ATOMIC)
    if value == "FALSE":
        return Expression("false", Order.ATOMIC)
    raise UnsupportedBlockError.for_node(node, "Unknown boolean literal")


@registry.register("logic_null")
def logic_null(node: Node, session: "GenerationSession") -> Expression:
    return Expression("NULL", Order.ATOMIC)


@registry.register("logic_ternary")
def logic_ternary(node: Node, session: "GenerationSession") -> Expression:
    condition = session.value_to_code(node, "IF", Order.CONDITIONAL) or "false"
    then = session.value_to_code(node, "THEN", Order.CONDITIONAL) or "0"
    otherwise = session.value_to_code(node, "ELSE", Order.CONDITIONAL) or "0"
    return Expression(f"{condition} ? {then} : {otherwise}", Order.CONDITIONAL)
