"""List blocks over fixed-size C arrays.

Arrays cannot grow or shrink, so only reading and overwriting elements is
translated; removing or inserting raises :class:`UnsupportedBlockError`.
User variables are plain ``float`` values, so the list operand must be an
array literal built by ``lists_create_with``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..ast import Expression, Node, Statement, UnsupportedBlockError
from ..order import Order
from ..registry import HandlerRegistry

if TYPE_CHECKING:
    from ..emitter import GenerationSession

registry = HandlerRegistry()


def array_length(array: str) -> str:
    return f"sizeof({array}) / sizeof(({array})[0])"


def _array(node: Node, session: "GenerationSession", socket: str, order: float) -> str:
    target = node.input_target(socket)
    if target is None:
        return ""
    if target.kind != "lists_create_with":
        raise UnsupportedBlockError.for_node(node, "Only array literals can be used as lists")
    return session.value_to_code(node, socket, order)


def _element_index(node: Node, session: "GenerationSession", array: str) -> str:
    where = node.field_value("WHERE", "FROM_START")
    if where == "FIRST":
        return "0"
    if where == "LAST":
        return f"{array_length(array)} - 1"
    if where == "FROM_START":
        return session.get_adjusted(node, "AT")
    if where == "FROM_END":
        at = session.get_adjusted(node, "AT", 1, order=Order.SUBTRACTION)
        return f"{array_length(array)} - {at}"
    if where == "RANDOM":
        return f"rand() % ({array_length(array)})"
    raise UnsupportedBlockError.for_node(node, "Unknown list position")


@registry.register("lists_create_with")
def lists_create_with(node: Node, session: "GenerationSession") -> Expression:
    count = int(node.mutation.get("items", 0) or 0)
    elements = [
        session.value_to_code(node, f"ADD{index}", Order.COMMA) or "0"
        for index in range(count)
    ]
    if not elements:
        raise UnsupportedBlockError.for_node(node, "Empty arrays are not supported")
    return Expression(f"(float[]){{{', '.join(elements)}}}", Order.ATOMIC)


@registry.register("lists_length")
def lists_length(node: Node, session: "GenerationSession") -> Expression:
    array = _array(node, session, "VALUE", Order.NONE)
    if not array:
        return Expression("0", Order.ATOMIC)
    return Expression(array_length(array), Order.DIVISION)


@registry.register("lists_getIndex")
def lists_get_index(node: Node, session: "GenerationSession") -> Expression:
    mode = node.field_value("MODE", "GET")
    if mode != "GET":
        raise UnsupportedBlockError.for_node(node, "Arrays cannot remove elements")
    array = _array(node, session, "VALUE", Order.MEMBER)
    if not array:
        raise UnsupportedBlockError.for_node(node, "List block without a list")
    index = _element_index(node, session, array)
    return Expression(f"{array}[{index}]", Order.MEMBER)


@registry.register("lists_setIndex")
def lists_set_index(node: Node, session: "GenerationSession") -> Statement:
    mode = node.field_value("MODE", "SET")
    if mode != "SET":
        raise UnsupportedBlockError.for_node(node, "Arrays cannot insert elements")
    array = _array(node, session, "LIST", Order.MEMBER)
    if not array:
        raise UnsupportedBlockError.for_node(node, "List block without a list")
    value = session.value_to_code(node, "TO", Order.ASSIGNMENT) or "0"
    index = _element_index(node, session, array)
    return Statement(f"{array}[{index}] = {value};\n")
