"""Waits, branches and loops."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, List

from ..ast import Node, Statement, UnsupportedBlockError
from ..order import Order, is_number
from ..registry import HandlerRegistry

if TYPE_CHECKING:
    from ..emitter import GenerationSession

registry = HandlerRegistry()

_SIMPLE_OPERAND_RE = re.compile(r"^\w+$")


@registry.register("control_wait")
def control_wait(node: Node, session: "GenerationSession") -> Statement:
    times = session.value_to_code(node, "DURATION", Order.RELATIONAL) or "0"
    return Statement(f"delay_sec({times});\n")


@registry.register("control_wait_m6")
def control_wait_m6(node: Node, session: "GenerationSession") -> Statement:
    times = session.value_to_code(node, "DURATION", Order.RELATIONAL) or "0"
    return Statement(f"wait({times});\n")


@registry.register("control_forever")
def control_forever(node: Node, session: "GenerationSession") -> Statement:
    branch = session.statement_to_code(node, "SUBSTACK")
    return Statement(f"while (true) {{\n{branch}}}\n")


@registry.register("control_repeat")
def control_repeat(node: Node, session: "GenerationSession") -> Statement:
    """``for`` loop with a fresh counter; dynamic counts are read once."""

    times = session.value_to_code(node, "TIMES", Order.RELATIONAL) or "0"
    branch = session.statement_to_code(node, "SUBSTACK")
    counter = session.names.fresh_temporary("i")
    code = ""
    limit = times
    if not is_number(times) and not _SIMPLE_OPERAND_RE.match(times):
        limit = session.names.fresh_temporary("repeat_end")
        code += f"float {limit} = {times};\n"
    code += f"for (int {counter} = 0; {counter} < {limit}; {counter}++) {{\n{branch}}}\n"
    return Statement(code)


@registry.register("control_if")
def control_if(node: Node, session: "GenerationSession") -> Statement:
    condition = session.value_to_code(node, "CONDITION", Order.NONE) or "false"
    branch = session.statement_to_code(node, "SUBSTACK")
    return Statement(f"if ({condition}) {{\n{branch}}}\n")


@registry.register("control_if_else")
def control_if_else(node: Node, session: "GenerationSession") -> Statement:
    condition = session.value_to_code(node, "CONDITION", Order.NONE) or "false"
    branch = session.statement_to_code(node, "SUBSTACK")
    other = session.statement_to_code(node, "SUBSTACK2")
    return Statement(f"if ({condition}) {{\n{branch}}} else {{\n{other}}}\n")


@registry.register("control_wait_until", "control_wait_until_m6")
def control_wait_until(node: Node, session: "GenerationSession") -> Statement:
    condition = session.value_to_code(node, "CONDITION", Order.LOGICAL_NOT) or "true"
    return Statement(f"while (!{condition}) {{\n}}\n")


@registry.register("control_repeat_until")
def control_repeat_until(node: Node, session: "GenerationSession") -> Statement:
    condition = session.value_to_code(node, "CONDITION", Order.LOGICAL_NOT) or "true"
    branch = session.statement_to_code(node, "SUBSTACK")
    return Statement(f"while (!{condition}) {{\n{branch}}}\n")


@registry.register("control_while")
def control_while(node: Node, session: "GenerationSession") -> Statement:
    condition = session.value_to_code(node, "CONDITION", Order.NONE) or "true"
    branch = session.statement_to_code(node, "SUBSTACK")
    return Statement(f"while ({condition}) {{\n{branch}}}\n")


@registry.register("controls_if")
def controls_if(node: Node, session: "GenerationSession") -> Statement:
    """``if`` / ``else if`` / ``else`` chain sized by the node's mutation."""

    else_if_count = int(node.mutation.get("elseif", 0) or 0)
    has_else = bool(node.mutation.get("else", False))
    parts: List[str] = []
    for index in range(else_if_count + 1):
        condition = session.value_to_code(node, f"IF{index}", Order.NONE) or "false"
        branch = session.statement_to_code(node, f"DO{index}")
        keyword = "if" if index == 0 else " else if"
        parts.append(f"{keyword} ({condition}) {{\n{branch}}}")
    if has_else or "ELSE" in node.statements:
        branch = session.statement_to_code(node, "ELSE")
        parts.append(f" else {{\n{branch}}}")
    return Statement("".join(parts) + "\n")


registry.alias("controls_ifelse", "controls_if")


@registry.register("controls_repeat_ext", "controls_repeat")
def controls_repeat(node: Node, session: "GenerationSession") -> Statement:
    if "TIMES" in node.inputs:
        repeats = session.value_to_code(node, "TIMES", Order.ASSIGNMENT) or "0"
    else:
        repeats = str(node.field_value("TIMES", 0))
    branch = session.statement_to_code(node, "DO")
    counter = session.names.fresh_temporary("count")
    code = ""
    limit = repeats
    if not is_number(repeats) and not _SIMPLE_OPERAND_RE.match(repeats):
        limit = session.names.fresh_temporary("repeat_end")
        code += f"float {limit} = {repeats};\n"
    code += f"for (int {counter} = 0; {counter} < {limit}; {counter}++) {{\n{branch}}}\n"
    return Statement(code)


@registry.register("controls_whileUntil")
def controls_while_until(node: Node, session: "GenerationSession") -> Statement:
    mode = node.field_value("MODE", "WHILE")
    if mode == "WHILE":
        condition = session.value_to_code(node, "BOOL", Order.NONE) or "false"
    elif mode == "UNTIL":
        condition = session.value_to_code(node, "BOOL", Order.LOGICAL_NOT) or "false"
        condition = f"!{condition}"
    else:
        raise UnsupportedBlockError.for_node(node, "Unknown loop mode")
    branch = session.statement_to_code(node, "DO")
    return Statement(f"while ({condition}) {{\n{branch}}}\n")


@registry.register("controls_for")
def controls_for(node: Node, session: "GenerationSession") -> Statement:
    """Counting loop; non-trivial bounds are cached in fresh temporaries."""

    variable = session.variable_name(node.field_value("VAR"))
    start = session.value_to_code(node, "FROM", Order.ASSIGNMENT) or "0"
    end = session.value_to_code(node, "TO", Order.ASSIGNMENT) or "0"
    step = session.value_to_code(node, "BY", Order.ASSIGNMENT) or "1"
    branch = session.statement_to_code(node, "DO")

    if is_number(start) and is_number(end) and is_number(step):
        up = float(start) <= float(end)
        code = f"for ({variable} = {start}; {variable}{' <= ' if up else ' >= '}{end}; {variable}"
        amount = abs(float(step))
        if amount == 1:
            code += "++" if up else "--"
        else:
            code += f"{' += ' if up else ' -= '}{amount:g}"
        return Statement(code + f") {{\n{branch}}}\n")

    code = ""
    start_var = start
    if not _SIMPLE_OPERAND_RE.match(start) and not is_number(start):
        start_var = session.names.fresh_temporary(f"{variable}_start")
        code += f"float {start_var} = {start};\n"
    end_var = end
    if not _SIMPLE_OPERAND_RE.match(end) and not is_number(end):
        end_var = session.names.fresh_temporary(f"{variable}_end")
        code += f"float {end_var} = {end};\n"
    inc_var = session.names.fresh_temporary(f"{variable}_inc")
    code += f"float {inc_var} = "
    if is_number(step):
        code += f"{abs(float(step)):g};\n"
    else:
        code += f"fabs({step});\n"
    code += f"if ({start_var} > {end_var}) {{\n{session.indent}{inc_var} = -{inc_var};\n}}\n"
    code += (
        f"for ({variable} = {start_var}; "
        f"{inc_var} >= 0 ? {variable} <= {end_var} : {variable} >= {end_var}; "
        f"{variable} += {inc_var}) {{\n{branch}}}\n"
    )
    return Statement(code)


@registry.register("controls_flow_statements")
def controls_flow_statements(node: Node, session: "GenerationSession") -> Statement:
    flow = node.field_value("FLOW")
    if flow == "BREAK":
        return Statement("break;\n")
    if flow == "CONTINUE":
        return Statement("continue;\n")
    raise UnsupportedBlockError.for_node(node, "Unknown flow statement")
