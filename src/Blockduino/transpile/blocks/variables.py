"""Getters and setters for user variables."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .._util import trim_quote
from ..ast import Expression, Node, Statement
from ..order import Order
from ..registry import HandlerRegistry

if TYPE_CHECKING:
    from ..emitter import GenerationSession

registry = HandlerRegistry()


@registry.register("variables_get")
def variables_get(node: Node, session: "GenerationSession") -> Expression:
    return Expression(session.variable_name(node.field_value("VAR")), Order.ATOMIC)


@registry.register("variables_set")
def variables_set(node: Node, session: "GenerationSession") -> Statement:
    value = session.value_to_code(node, "VALUE", Order.ASSIGNMENT) or "0"
    variable = session.variable_name(node.field_value("VAR"))
    return Statement(f"{variable} = {value};\n")


@registry.register("data_variable")
def data_variable(node: Node, session: "GenerationSession") -> Expression:
    return Expression(session.variable_name(node.field_value("VARIABLE")), Order.ATOMIC)


@registry.register("data_setvariableto")
def data_setvariableto(node: Node, session: "GenerationSession") -> Statement:
    # Text shadows carry quoted numbers; variables are always float.
    value = trim_quote(session.value_to_code(node, "VALUE", Order.ASSIGNMENT)) or "0"
    variable = session.variable_name(node.field_value("VARIABLE"))
    return Statement(f"{variable} = {value};\n")


@registry.register("data_changevariableby")
def data_changevariableby(node: Node, session: "GenerationSession") -> Statement:
    value = trim_quote(session.value_to_code(node, "VALUE", Order.ADDITION)) or "0"
    variable = session.variable_name(node.field_value("VARIABLE"))
    return Statement(f"{variable} += {value};\n")
