"""Displays, lights and the buzzer."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Tuple

from .._util import matrix_convert
from ..ast import Expression, Node, Statement
from ..order import Order, format_number
from ..registry import HandlerRegistry
from ._common import call_statement, field_code

if TYPE_CHECKING:
    from ..emitter import GenerationSession

registry = HandlerRegistry()


@registry.register("looks_set_emotion")
def set_emotion(node: Node, session: "GenerationSession") -> Statement:
    emotion = session.value_to_code(node, "EMOTION_ID", Order.NONE) or "1"
    left = field_code(node, "LEFT_PORT")
    right = field_code(node, "RIGHT_PORT")
    return call_statement("set_emotion", emotion, left, right)


@registry.register("looks_off_emotion")
def off_emotion(node: Node, session: "GenerationSession") -> Statement:
    left = field_code(node, "LEFT_PORT")
    right = field_code(node, "RIGHT_PORT")
    return call_statement("off_emotion", left, right)


@registry.register("looks_set_symbol")
def set_symbol(node: Node, session: "GenerationSession") -> Statement:
    symbol = session.value_to_code(node, "SYMBOL", Order.NONE) or "1"
    return call_statement("set_symbol", symbol, field_code(node, "PORT"))


@registry.register("looks_custom_led_matrix")
def custom_led_matrix(node: Node, session: "GenerationSession") -> Statement:
    rows = ",".join(str(row) for row in matrix_convert(node.field_value("MATRIX")))
    matrix = f"(LedMaritx){{{{{rows}}}}}"
    return call_statement("set_symbol_cust", matrix, field_code(node, "PORT"))


@registry.register("looks_off_led_matrix")
def off_led_matrix(node: Node, session: "GenerationSession") -> Statement:
    return call_statement("off_led_matrix", field_code(node, "PORT"))


@registry.register("looks_set_digital_tube")
def set_digital_tube(node: Node, session: "GenerationSession") -> Statement:
    value = session.value_to_code(node, "VALUE", Order.NONE) or "0"
    return call_statement("set_digital_tube", field_code(node, "PORT"), value)


@registry.register("looks_clear_digital_tube")
def clear_digital_tube(node: Node, session: "GenerationSession") -> Statement:
    return call_statement("clear_digital_tube", field_code(node, "PORT"))


def _rgb(node: Node, session: "GenerationSession") -> Tuple[str, ...]:
    return tuple(
        session.value_to_code(node, channel, Order.NONE) or "0" for channel in ("R", "G", "B")
    )


@registry.register("looks_set_led_light_rgb")
def set_led_light_rgb(node: Node, session: "GenerationSession") -> Statement:
    return call_statement("set_led_light_rgb", field_code(node, "PORT"), *_rgb(node, session))


@registry.register("looks_set_led_light_color")
def set_led_light_color(node: Node, session: "GenerationSession") -> Statement:
    port = field_code(node, "PORT")
    return call_statement("set_led_light_color", port, field_code(node, "COLOR"))


@registry.register("looks_off_led_light")
def off_led_light(node: Node, session: "GenerationSession") -> Statement:
    return call_statement("off_led_light", field_code(node, "PORT"))


@registry.register("looks_integrated_led", "looks_integrated_led_m6")
def integrated_led(node: Node, session: "GenerationSession") -> Statement:
    port = field_code(node, "PORT")
    led = field_code(node, "LED_ID")
    return call_statement("set_rgb_led_module", port, led, *_rgb(node, session))


@registry.register("looks_led_strip", "looks_led_strip_m6")
def led_strip(node: Node, session: "GenerationSession") -> Statement:
    port = field_code(node, "PORT")
    led = session.value_to_code(node, "LED_ID", Order.NONE) or "1"
    return call_statement("set_rgb_led_strip", port, led, *_rgb(node, session))


@registry.register("looks_beep")
def beep(node: Node, session: "GenerationSession") -> Statement:
    return call_statement("beep_play", field_code(node, "PITCH"), field_code(node, "LEN"))


def _menu_number(node: Node, name: str) -> Expression:
    try:
        value = float(node.field_value(name, 0))  # type: ignore[arg-type]
    except (TypeError, ValueError):
        value = 0.0
    if math.isnan(value):
        value = 0.0
    order = Order.ATOMIC if value >= 0 else Order.UNARY_NEGATION
    return Expression(format_number(value), order)


@registry.register("matrix_symble")
def matrix_symbol(node: Node, session: "GenerationSession") -> Expression:
    return _menu_number(node, "SYMBLE")


@registry.register("matrix_emotion")
def matrix_emotion(node: Node, session: "GenerationSession") -> Expression:
    return _menu_number(node, "EMOTION")


@registry.register("matrix_symble_image")
def matrix_symbol_image(node: Node, session: "GenerationSession") -> Expression:
    return Expression(session.value_to_code(node, "SYMBLE", Order.NONE) or "0", Order.NONE)


@registry.register("matrix_emotion_image")
def matrix_emotion_image(node: Node, session: "GenerationSession") -> Expression:
    return Expression(session.value_to_code(node, "EMOTION", Order.NONE) or "0", Order.NONE)
