"""User-defined procedures: definitions, calls and argument reporters.

Two families are supported.  The Scratch-style ``procedures_definition`` /
``procedures_call`` pair describes its prototype through a ``proccode``
mutation; the Blockly-style ``procedures_def*`` / ``procedures_call*`` kinds
name the procedure in a ``NAME`` field and list parameters in the
``params`` mutation.  Every definition is stored once in the declaration
table through the helper cache, so calls and definitions always agree on
the emitted identifier.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, List, Optional

from .._util import prefix_lines, trim_quote
from ..ast import Expression, Node, Statement, UnsupportedBlockError
from ..helpers import FUNCTION_NAME_PLACEHOLDER
from ..names import safe_name
from ..order import Order
from ..registry import HandlerRegistry

if TYPE_CHECKING:
    from ..emitter import GenerationSession

registry = HandlerRegistry()

PROTOTYPE_SOCKET = "custom_block"

# User procedures live apart from the built-in helpers in the helper cache.
USER_PROCEDURE_PREFIX = "proc:"


def mutation_list(node: Node, key: str) -> List[str]:
    """Read a list-valued mutation entry, JSON encoded or already decoded."""

    raw = node.mutation.get(key)
    if raw in (None, ""):
        return []
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            raise UnsupportedBlockError.for_node(node, f"Malformed '{key}' mutation") from None
    if not isinstance(raw, list):
        raise UnsupportedBlockError.for_node(node, f"Malformed '{key}' mutation")
    values: List[str] = []
    for item in raw:
        if isinstance(item, dict):
            item = item.get("name", "")
        values.append(str(item))
    return values


def procedure_key(name: object) -> str:
    """Helper-cache key of a user procedure (a proccode or a Blockly name)."""

    return USER_PROCEDURE_PREFIX + str(name or "")


def procedure_name(proccode: object) -> str:
    """Preferred identifier of a Scratch-style procedure: ``func_`` + first word.

    Prototypes sharing a first word (``move %s``, ``move fast %s``) keep
    distinct keys, so the second one is emitted as ``func_move2``.
    """

    words = str(proccode or "").split(" ")
    return "func_" + safe_name(words[0]) if words[0] else "func_"


def _prototype(node: Node) -> Node:
    prototype = node.input_target(PROTOTYPE_SOCKET)
    if prototype is None:
        raise UnsupportedBlockError.for_node(node, "Procedure definition without a prototype")
    return prototype


def _body(node: Node, session: "GenerationSession", start: Optional[Node]) -> str:
    code = session.sequence(start)
    if not code:
        return ""
    return prefix_lines(code, session.indent)


@registry.register("procedures_definition")
def procedures_definition(node: Node, session: "GenerationSession") -> None:
    prototype = _prototype(node)
    proccode = prototype.mutation.get("proccode")
    params = [
        "float " + session.parameter_name(name)
        for name in mutation_list(prototype, "argumentnames")
    ]
    body = _body(node, session, node.next)
    template = f"void {FUNCTION_NAME_PLACEHOLDER}({', '.join(params)}){{\n{body}}}"
    session.provide_function(
        procedure_key(proccode), template, name_hint=procedure_name(proccode), reindent=False
    )
    return None


@registry.register("procedures_call")
def procedures_call(node: Node, session: "GenerationSession") -> Statement:
    proccode = node.mutation.get("proccode")
    name = session.helpers.reserve(procedure_key(proccode), procedure_name(proccode))
    args: List[str] = []
    for argument_id in mutation_list(node, "argumentids"):
        value = trim_quote(session.value_to_code(node, argument_id, Order.NONE))
        args.append(value or "0")
    return Statement(f"{name}({', '.join(args)});\n")


@registry.register("argument_reporter_boolean", "argument_reporter_string_number")
def argument_reporter(node: Node, session: "GenerationSession") -> Expression:
    return Expression(session.parameter_name(node.field_value("VALUE")), Order.ATOMIC)


@registry.register("procedures_defreturn", "procedures_defnoreturn")
def procedures_defreturn(node: Node, session: "GenerationSession") -> None:
    name_field = node.field_value("NAME")
    args = ["float " + session.variable_name(param) for param in mutation_list(node, "params")]
    branch = session.statement_to_code(node, "STACK")
    return_value = ""
    return_type = "void"
    if node.kind == "procedures_defreturn":
        return_type = "float"
        value = session.value_to_code(node, "RETURN", Order.NONE) or "0"
        return_value = f"{session.indent}return {value};\n"
    code = (
        f"{return_type} {FUNCTION_NAME_PLACEHOLDER}({', '.join(args)}) {{\n"
        f"{branch}{return_value}}}"
    )
    code = session.scrub(node, code, this_only=True)
    name = str(name_field or "")
    session.provide_function(procedure_key(name), code, name_hint=name, reindent=False)
    return None


def _call_code(node: Node, session: "GenerationSession") -> str:
    raw = str(node.field_value("NAME") or "")
    name = session.helpers.reserve(procedure_key(raw), raw)
    args = [
        session.value_to_code(node, f"ARG{index}", Order.COMMA) or "0"
        for index in range(len(mutation_list(node, "params")))
    ]
    return f"{name}({', '.join(args)})"


@registry.register("procedures_callreturn")
def procedures_callreturn(node: Node, session: "GenerationSession") -> Expression:
    return Expression(_call_code(node, session), Order.FUNCTION_CALL)


@registry.register("procedures_callnoreturn")
def procedures_callnoreturn(node: Node, session: "GenerationSession") -> Statement:
    return Statement(_call_code(node, session) + ";\n")


@registry.register("procedures_ifreturn")
def procedures_ifreturn(node: Node, session: "GenerationSession") -> Statement:
    condition = session.value_to_code(node, "CONDITION", Order.NONE) or "false"
    code = f"if ({condition}) {{\n"
    if str(node.mutation.get("value", "0")).lower() in ("1", "true"):
        value = session.value_to_code(node, "VALUE", Order.NONE) or "0"
        code += f"{session.indent}return {value};\n"
    else:
        code += f"{session.indent}return;\n"
    return Statement(code + "}\n")
