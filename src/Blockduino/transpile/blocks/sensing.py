"""Sensor readers; almost all of them take just a port."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Dict

from ..ast import Expression, Node, Statement
from ..order import Order
from ..registry import HandlerRegistry
from ._common import field_code

if TYPE_CHECKING:
    from ..emitter import GenerationSession

registry = HandlerRegistry()

# node kind -> runtime function reading one port
PORT_READERS: Dict[str, str] = {
    "sensing_gray_value": "gray_value",
    "sensing_integrated_gray_value": "integrated_gray_value",
    "sensing_integrated_gray_value_v2": "integrated_gray_value",
    "sensing_flame_value": "flame_value",
    "sensing_temperature_value": "temperature_value",
    "sensing_humidity_value": "humidity_value",
    "sensing_volume_value": "volume_value",
    "sensing_ambient_light_value": "ambient_light_value",
    "sensing_ultrasonic_detection_distance": "ultrasonic_detection_distance",
    "sensing_gas_pressure": "gas_pressure",
    "sensing_infrared_receiver": "infrared_receiver",
    "sensing_infrared_receiver_m6": "infrared_receiver",
    "sensing_infrared": "infrared_value",
    "sensing_infrared_human": "human_infrared_value",
    "sensing_potentiometer": "potentiometer",
    "sensing_limit_switch": "limit_switch",
    "sensing_water_temperature": "water_temperature",
    "sensing_analog_input": "analog_input",
    "sensing_analog_input_m6": "analog_input",
}


def port_reader(function: str) -> Callable[[Node, "GenerationSession"], Expression]:
    def handler(node: Node, session: "GenerationSession") -> Expression:
        return Expression(f"{function}({field_code(node, 'PORT')})", Order.FUNCTION_CALL)

    return handler


for _kind, _function in PORT_READERS.items():
    registry.add(_kind, port_reader(_function))


def _two_field_reader(
    function: str, second: str
) -> Callable[[Node, "GenerationSession"], Expression]:
    def handler(node: Node, session: "GenerationSession") -> Expression:
        port = field_code(node, "PORT")
        return Expression(
            f"{function}( {port}, {field_code(node, second)} )", Order.FUNCTION_CALL
        )

    return handler


registry.add("sensing_gray_detected_line", _two_field_reader("gray_detected_line", "LINE"))
registry.add("sensing_jointed_arm", _two_field_reader("jointed_arm", "AXIS"))
registry.add("sensing_key_button", _two_field_reader("key_button", "KEY"))
registry.add("sensing_gyroscope", _two_field_reader("gyroscope", "AXIS"))


@registry.register("sensing_touch_button", "sensing_touch_switch")
def touch_button(node: Node, session: "GenerationSession") -> Expression:
    return Expression(f"touch_button( {field_code(node, 'PORT')} )", Order.FUNCTION_CALL)


@registry.register("sensing_bluetooth_receiver")
def bluetooth_receiver(node: Node, session: "GenerationSession") -> Expression:
    return Expression("bluetooth_receiver()", Order.FUNCTION_CALL)


@registry.register("sensing_bluetooth_stick")
def bluetooth_stick(node: Node, session: "GenerationSession") -> Expression:
    return Expression(f"bluetooth_stick({field_code(node, 'KEY')})", Order.FUNCTION_CALL)


@registry.register("sensing_timer_value")
def timer_value(node: Node, session: "GenerationSession") -> Expression:
    return Expression("time_value()", Order.FUNCTION_CALL)


@registry.register("sensing_reset_timer")
def reset_timer(node: Node, session: "GenerationSession") -> Statement:
    return Statement("reset_time_value();\n")


@registry.register("sensing_ai_face_value")
def ai_face_value(node: Node, session: "GenerationSession") -> Expression:
    first = session.value_to_code(node, "MODEL_1", Order.NONE) or "0"
    second = session.value_to_code(node, "MODEL_2", Order.NONE) or "0"
    return Expression(f"ai_face_value( {first}, {second} )", Order.FUNCTION_CALL)


@registry.register("sensing_ai_face_num")
def ai_face_num(node: Node, session: "GenerationSession") -> Expression:
    model = session.value_to_code(node, "MODEL_ID", Order.NONE) or "0"
    return Expression(f"ai_face_count( {model} )", Order.FUNCTION_CALL)


@registry.register("sensing_ai_product_value")
def ai_product_value(node: Node, session: "GenerationSession") -> Expression:
    first = session.value_to_code(node, "MODEL_1", Order.NONE) or "0"
    second = session.value_to_code(node, "MODEL_2", Order.NONE) or "0"
    return Expression(f"ai_product_value( {first}, {second} )", Order.FUNCTION_CALL)
