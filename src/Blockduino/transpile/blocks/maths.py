"""Number literals and math reporters."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Dict, Tuple

from ..ast import Expression, Node, Statement, UnsupportedBlockError
from ..helpers import FUNCTION_NAME_PLACEHOLDER
from ..order import Order, format_number
from ..registry import HandlerRegistry

if TYPE_CHECKING:
    from ..emitter import GenerationSession

registry = HandlerRegistry()

NUMBER_KINDS = (
    "math_number",
    "math_whole_number",
    "math_positive_number",
    "math_decimal",
    "math_decimal_whole",
    "math_decimal_0_60s",
    "math_decimal_m100_p100",
    "math_decimal_0_100",
    "math_decimal_m150_p150",
    "math_decimal_1_30",
    "math_decimal_1_60",
    "math_decimal_0_60",
    "math_decimal_0_180",
    "math_decimal_0_100k",
    "math_decimal_0_255",
    "math_decimal_0_9999",
)

_ARITHMETIC: Dict[str, Tuple[str, float]] = {
    "ADD": (" + ", Order.ADDITION),
    "MINUS": (" - ", Order.SUBTRACTION),
    "MULTIPLY": (" * ", Order.MULTIPLICATION),
    "DIVIDE": (" / ", Order.DIVISION),
}

_CALL_FUNCTIONS = {
    "ABS": "fabs({})",
    "ROOT": "sqrt({})",
    "LN": "log({})",
    "EXP": "exp({})",
    "POW10": "pow(10, {})",
    "ROUND": "round({})",
    "ROUNDUP": "ceil({})",
    "ROUNDDOWN": "floor({})",
    "LOG10": "log10({})",
    "SIN": "sin({} / 180 * M_PI)",
    "COS": "cos({} / 180 * M_PI)",
    "TAN": "tan({} / 180 * M_PI)",
}

_DEGREE_FUNCTIONS = {
    "ASIN": "asin({}) / M_PI * 180",
    "ACOS": "acos({}) / M_PI * 180",
    "ATAN": "atan({}) / M_PI * 180",
}

CONSTANTS: Dict[str, Tuple[str, float]] = {
    "PI": ("M_PI", Order.ATOMIC),
    "E": ("M_E", Order.ATOMIC),
    "GOLDEN_RATIO": ("(1 + sqrt(5)) / 2", Order.DIVISION),
    "SQRT2": ("M_SQRT2", Order.ATOMIC),
    "SQRT1_2": ("M_SQRT1_2", Order.ATOMIC),
    "INFINITY": ("INFINITY", Order.ATOMIC),
}

RANDOM_INT_TEMPLATE = (
    f"int {FUNCTION_NAME_PLACEHOLDER}(int a, int b) {{",
    "  if (a > b) {",
    "    // Swap a and b to ensure a is smaller.",
    "    int c = a;",
    "    a = b;",
    "    b = c;",
    "  }",
    "  return rand() % (b - a + 1) + a;",
    "}",
)

IS_PRIME_TEMPLATE = (
    f"bool {FUNCTION_NAME_PLACEHOLDER}(float n) {{",
    "  if (n == 2 || n == 3) {",
    "    return true;",
    "  }",
    "  // False if n is negative, is 1, or not whole.",
    "  // And false if n is divisible by 2 or 3.",
    "  if (n <= 1 || fmod(n, 1) != 0 || fmod(n, 2) == 0 || fmod(n, 3) == 0) {",
    "    return false;",
    "  }",
    "  // Check all the numbers of form 6k +/- 1, up to sqrt(n).",
    "  for (int x = 6; x <= sqrt(n) + 1; x += 6) {",
    "    if (fmod(n, x - 1) == 0 || fmod(n, x + 1) == 0) {",
    "      return false;",
    "    }",
    "  }",
    "  return true;",
    "}",
)


def number_literal(node: Node, field: str) -> Expression:
    """Render a numeric field; negative literals bind like unary minus."""

    raw = node.field_value(field, 0)
    if raw in (None, ""):
        raw = 0
    try:
        value = float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise UnsupportedBlockError.for_node(node, "Invalid number literal") from None
    if not math.isfinite(value):
        raise UnsupportedBlockError.for_node(node, "Invalid number literal")
    order = Order.ATOMIC if value >= 0 else Order.UNARY_NEGATION
    return Expression(format_number(value), order)


@registry.register(*NUMBER_KINDS)
def math_number(node: Node, session: "GenerationSession") -> Expression:
    return number_literal(node, "NUM")


@registry.register("math_arithmetic")
def math_arithmetic(node: Node, session: "GenerationSession") -> Expression:
    op = node.field_value("OP")
    if op == "POWER":
        base = session.value_to_code(node, "A", Order.COMMA) or "0"
        exponent = session.value_to_code(node, "B", Order.COMMA) or "0"
        return Expression(f"pow({base}, {exponent})", Order.FUNCTION_CALL)
    entry = _ARITHMETIC.get(str(op))
    if entry is None:
        raise UnsupportedBlockError.for_node(node, "Unknown arithmetic operator")
    operator, order = entry
    left = session.value_to_code(node, "A", order) or "0"
    right = session.value_to_code(node, "B", order) or "0"
    return Expression(f"{left}{operator}{right}", order)


@registry.register("math_single", "math_round", "math_trig")
def math_single(node: Node, session: "GenerationSession") -> Expression:
    """Single-operand math functions, trig in degrees."""

    op = str(node.field_value("OP"))
    if op == "NEG":
        arg = session.value_to_code(node, "NUM", Order.UNARY_NEGATION) or "0"
        if arg.startswith("-"):
            # --3 would parse as a decrement.
            arg = " " + arg
        return Expression(f"-{arg}", Order.UNARY_NEGATION)

    if op in ("SIN", "COS", "TAN"):
        arg = session.value_to_code(node, "NUM", Order.DIVISION) or "0"
    else:
        arg = session.value_to_code(node, "NUM", Order.NONE) or "0"

    if op in _CALL_FUNCTIONS:
        return Expression(_CALL_FUNCTIONS[op].format(arg), Order.FUNCTION_CALL)
    if op in _DEGREE_FUNCTIONS:
        return Expression(_DEGREE_FUNCTIONS[op].format(arg), Order.DIVISION)
    raise UnsupportedBlockError.for_node(node, "Unknown math operator")


@registry.register("math_constant")
def math_constant(node: Node, session: "GenerationSession") -> Expression:
    entry = CONSTANTS.get(str(node.field_value("CONSTANT")))
    if entry is None:
        raise UnsupportedBlockError.for_node(node, "Unknown math constant")
    return Expression(*entry)


@registry.register("math_number_property")
def math_number_property(node: Node, session: "GenerationSession") -> Expression:
    number = session.value_to_code(node, "NUMBER_TO_CHECK", Order.MODULUS) or "0"
    prop = node.field_value("PROPERTY")
    if prop == "PRIME":
        function = session.provide_function("mathIsPrime", IS_PRIME_TEMPLATE)
        return Expression(f"{function}({number})", Order.FUNCTION_CALL)
    if prop == "EVEN":
        return Expression(f"fmod({number}, 2) == 0", Order.EQUALITY)
    if prop == "ODD":
        return Expression(f"fmod({number}, 2) == 1", Order.EQUALITY)
    if prop == "WHOLE":
        return Expression(f"fmod({number}, 1) == 0", Order.EQUALITY)
    if prop == "POSITIVE":
        return Expression(f"{number} > 0", Order.RELATIONAL)
    if prop == "NEGATIVE":
        return Expression(f"{number} < 0", Order.RELATIONAL)
    if prop == "DIVISIBLE_BY":
        divisor = session.value_to_code(node, "DIVISOR", Order.COMMA) or "0"
        return Expression(f"fmod({number}, {divisor}) == 0", Order.EQUALITY)
    raise UnsupportedBlockError.for_node(node, "Unknown number property")


@registry.register("math_change")
def math_change(node: Node, session: "GenerationSession") -> Statement:
    delta = session.value_to_code(node, "DELTA", Order.ADDITION) or "0"
    variable = session.variable_name(node.field_value("VAR"))
    return Statement(f"{variable} += {delta};\n")


@registry.register("math_modulo")
def math_modulo(node: Node, session: "GenerationSession") -> Expression:
    dividend = session.value_to_code(node, "DIVIDEND", Order.COMMA) or "0"
    divisor = session.value_to_code(node, "DIVISOR", Order.COMMA) or "0"
    return Expression(f"fmod({dividend}, {divisor})", Order.FUNCTION_CALL)


@registry.register("math_constrain")
def math_constrain(node: Node, session: "GenerationSession") -> Expression:
    value = session.value_to_code(node, "VALUE", Order.COMMA) or "0"
    low = session.value_to_code(node, "LOW", Order.COMMA) or "0"
    high = session.value_to_code(node, "HIGH", Order.COMMA) or "INFINITY"
    return Expression(f"fmin(fmax({value}, {low}), {high})", Order.FUNCTION_CALL)


@registry.register("math_random_int")
def math_random_int(node: Node, session: "GenerationSession") -> Expression:
    low = session.value_to_code(node, "FROM", Order.COMMA) or "0"
    high = session.value_to_code(node, "TO", Order.COMMA) or "0"
    function = session.provide_function("mathRandomInt", RANDOM_INT_TEMPLATE)
    return Expression(f"{function}({low}, {high})", Order.FUNCTION_CALL)


@registry.register("math_random_float")
def math_random_float(node: Node, session: "GenerationSession") -> Expression:
    return Expression("(float)rand() / RAND_MAX", Order.DIVISION)


@registry.register("math_atan2")
def math_atan2(node: Node, session: "GenerationSession") -> Expression:
    x = session.value_to_code(node, "X", Order.COMMA) or "0"
    y = session.value_to_code(node, "Y", Order.COMMA) or "0"
    return Expression(f"atan2({y}, {x}) / M_PI * 180", Order.DIVISION)
