"""Motors, servos and digital outputs."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..ast import Node, Statement
from ..order import Order
from ..registry import HandlerRegistry
from ._common import call_statement, field_code

if TYPE_CHECKING:
    from ..emitter import GenerationSession

registry = HandlerRegistry()


@registry.register("motion_set_encoder_motor")
def set_encoder_motor(node: Node, session: "GenerationSession") -> Statement:
    power = session.value_to_code(node, "POWER", Order.NONE) or "0"
    motor = field_code(node, "MOTOR_ID")
    return call_statement("set_encoder_motor", motor, field_code(node, "PORT"), power)


@registry.register("motion_set_dc_motor")
def set_dc_motor(node: Node, session: "GenerationSession") -> Statement:
    power = session.value_to_code(node, "POWER", Order.NONE) or "0"
    motor = field_code(node, "MOTOR_ID")
    return call_statement("set_dc_motor", motor, field_code(node, "PORT"), power)


@registry.register("motion_smart_servo_angle", "motion_smart_servo_angle_m6")
def smart_servo_angle(node: Node, session: "GenerationSession") -> Statement:
    servo = session.value_to_code(node, "SERVO_ID", Order.NONE) or "1"
    speed = session.value_to_code(node, "SPEED", Order.NONE) or "0"
    angle = session.value_to_code(node, "ANGLE", Order.NONE) or "0"
    return call_statement("set_smart_servo_angle", servo, speed, angle)


@registry.register("motion_smart_servo", "motion_smart_servo_m6")
def smart_servo(node: Node, session: "GenerationSession") -> Statement:
    servo = session.value_to_code(node, "SERVO_ID", Order.NONE) or "1"
    speed = session.value_to_code(node, "SPEED", Order.NONE) or "0"
    return call_statement("set_smart_servo", servo, speed)


@registry.register("motion_set_smart_servo_id", "motion_set_smart_servo_id_m6")
def set_smart_servo_id(node: Node, session: "GenerationSession") -> Statement:
    servo = session.value_to_code(node, "SERVO_ID", Order.NONE) or "1"
    new_id = session.value_to_code(node, "NEW_ID", Order.NONE) or "1"
    return call_statement("set_smart_servo_id", servo, new_id)


@registry.register("motion_servo", "motion_servo_m6")
def servo(node: Node, session: "GenerationSession") -> Statement:
    speed = session.value_to_code(node, "SPEED", Order.NONE) or "0"
    angle = session.value_to_code(node, "ANGLE", Order.NONE) or "0"
    return call_statement("set_servo", field_code(node, "SERVO_PORT"), speed, angle)


@registry.register("motion_step_motor")
def step_motor(node: Node, session: "GenerationSession") -> Statement:
    """Start a stepper run; the device loop keeps it ticking."""

    port = field_code(node, "PORT")
    power = session.value_to_code(node, "POWER", Order.NONE) or "0"
    steps = session.value_to_code(node, "STEPS", Order.NONE) or "0"
    session.add_loop_maintenance(f"step_motor_loop({port});")
    return call_statement("set_step_motor", port, power, steps)


@registry.register("motion_set_electromagnet")
def set_electromagnet(node: Node, session: "GenerationSession") -> Statement:
    port = field_code(node, "PORT")
    return call_statement("set_electromagnet", port, field_code(node, "STATUS"))


@registry.register("motion_set_digital_output", "motion_set_digital_output_m6")
def set_digital_output(node: Node, session: "GenerationSession") -> Statement:
    port = field_code(node, "PORT")
    return call_statement("set_digital_output", port, field_code(node, "STATUS"))
