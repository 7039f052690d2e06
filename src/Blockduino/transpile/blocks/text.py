"""Text literals and printing."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, List

from .._util import quote
from ..ast import Expression, Node, Statement, UnsupportedBlockError
from ..order import Order
from ..registry import HandlerRegistry

if TYPE_CHECKING:
    from ..emitter import GenerationSession

registry = HandlerRegistry()

_STRING_LITERAL_RE = re.compile(r'^"(?:[^"\\]|\\.)*"$')


def is_string_literal(code: str) -> bool:
    return bool(_STRING_LITERAL_RE.match(code))


@registry.register("text", "text_multiline")
def text(node: Node, session: "GenerationSession") -> Expression:
    return Expression(quote(str(node.field_value("TEXT", "") or "")), Order.ATOMIC)


@registry.register("text_join")
def text_join(node: Node, session: "GenerationSession") -> Expression:
    """Join literal pieces into one literal; C has no runtime concatenation."""

    count = int(node.mutation.get("items", 0) or 0)
    pieces: List[str] = []
    for index in range(count):
        element = session.value_to_code(node, f"ADD{index}", Order.NONE) or '""'
        if not is_string_literal(element):
            raise UnsupportedBlockError.for_node(node, "Only text literals can be joined")
        pieces.append(element[1:-1])
    return Expression(f'"{"".join(pieces)}"', Order.ATOMIC)


@registry.register("text_print")
def text_print(node: Node, session: "GenerationSession") -> Statement:
    message = session.value_to_code(node, "TEXT", Order.NONE) or '""'
    if is_string_literal(message):
        return Statement(f'printf("%s\\n", {message});\n')
    return Statement(f'printf("%g\\n", (double)({message}));\n')
