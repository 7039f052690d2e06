"""Scratch-style operator reporters."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Dict, Tuple

from .._util import trim_quote
from ..ast import Expression, Node, UnsupportedBlockError
from ..order import Order
from ..registry import HandlerRegistry

if TYPE_CHECKING:
    from ..emitter import GenerationSession

registry = HandlerRegistry()

_BINARY: Dict[str, Tuple[str, float]] = {
    "operator_add": (" + ", Order.ADDITION),
    "operator_subtract": (" - ", Order.SUBTRACTION),
    "operator_multiply": (" * ", Order.MULTIPLICATION),
    "operator_divide": (" / ", Order.DIVISION),
}

_COMPARISONS: Dict[str, Tuple[str, float]] = {
    "operator_lt": (" < ", Order.RELATIONAL),
    "operator_gt": (" > ", Order.RELATIONAL),
    "operator_equals": (" == ", Order.EQUALITY),
}

_LOGICAL: Dict[str, Tuple[str, float]] = {
    "operator_and": (" && ", Order.LOGICAL_AND),
    "operator_or": (" || ", Order.LOGICAL_OR),
}

MATHOP_FUNCTIONS = {
    "abs": "math_abs",
    "floor": "math_floor",
    "ceiling": "math_ceiling",
    "sqrt": "math_sqrt",
    "sin": "math_sin",
    "cos": "math_cos",
    "tan": "math_tan",
    "asin": "math_asin",
    "acos": "math_acos",
    "atan": "math_atan",
    "ln": "math_ln",
    "log": "math_log",
    "e ^": "math_exp",
    "10 ^": "math_pow10",
}


def _binary(operator: str, order: float) -> Callable[[Node, "GenerationSession"], Expression]:
    def handler(node: Node, session: "GenerationSession") -> Expression:
        left = session.value_to_code(node, "NUM1", order) or "0"
        right = session.value_to_code(node, "NUM2", order) or "0"
        return Expression(f"{left}{operator}{right}", order)

    return handler


def _comparison(operator: str, order: float) -> Callable[[Node, "GenerationSession"], Expression]:
    # Text literals compare as their bare contents.
    def handler(node: Node, session: "GenerationSession") -> Expression:
        left = trim_quote(session.value_to_code(node, "OPERAND1", order)) or "0"
        right = trim_quote(session.value_to_code(node, "OPERAND2", order)) or "0"
        return Expression(f"{left}{operator}{right}", order)

    return handler


def _logical(operator: str, order: float) -> Callable[[Node, "GenerationSession"], Expression]:
    def handler(node: Node, session: "GenerationSession") -> Expression:
        left = session.value_to_code(node, "OPERAND1", order) or "false"
        right = session.value_to_code(node, "OPERAND2", order) or "false"
        return Expression(f"{left}{operator}{right}", order)

    return handler


for _kind, (_operator, _order) in _BINARY.items():
    registry.add(_kind, _binary(_operator, _order))
for _kind, (_operator, _order) in _COMPARISONS.items():
    registry.add(_kind, _comparison(_operator, _order))
for _kind, (_operator, _order) in _LOGICAL.items():
    registry.add(_kind, _logical(_operator, _order))


@registry.register("operator_not")
def operator_not(node: Node, session: "GenerationSession") -> Expression:
    operand = session.value_to_code(node, "OPERAND", Order.LOGICAL_NOT) or "false"
    return Expression(f"!{operand}", Order.LOGICAL_NOT)


@registry.register("operator_random")
def operator_random(node: Node, session: "GenerationSession") -> Expression:
    low = session.value_to_code(node, "FROM", Order.COMMA) or "0"
    high = session.value_to_code(node, "TO", Order.COMMA) or "0"
    return Expression(f"random({low}, {high})", Order.FUNCTION_CALL)


@registry.register("operator_mod")
def operator_mod(node: Node, session: "GenerationSession") -> Expression:
    dividend = session.value_to_code(node, "NUM1", Order.COMMA) or "0"
    divisor = session.value_to_code(node, "NUM2", Order.COMMA) or "0"
    return Expression(f"math_modulus({dividend}, {divisor})", Order.FUNCTION_CALL)


@registry.register("operator_round")
def operator_round(node: Node, session: "GenerationSession") -> Expression:
    value = session.value_to_code(node, "NUM", Order.NONE) or "0"
    return Expression(f"math_round({value})", Order.FUNCTION_CALL)


@registry.register("operator_mathop")
def operator_mathop(node: Node, session: "GenerationSession") -> Expression:
    function = MATHOP_FUNCTIONS.get(str(node.field_value("OPERATOR")))
    if function is None:
        raise UnsupportedBlockError.for_node(node, "Unknown math operator")
    value = session.value_to_code(node, "NUM", Order.NONE) or "0"
    return Expression(f"{function}( {value} )", Order.FUNCTION_CALL)
