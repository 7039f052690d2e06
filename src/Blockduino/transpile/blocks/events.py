"""Entry-point blocks: program start and the recurring device loop."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..ast import Node, Statement
from ..registry import HandlerRegistry

if TYPE_CHECKING:
    from ..emitter import GenerationSession

registry = HandlerRegistry()


@registry.register("event_when_wobot_started")
def when_started(node: Node, session: "GenerationSession") -> Statement:
    # The stack below the hat block is appended by the scrubber.
    return Statement("")


@registry.register("event_when_wobot_loop")
def when_loop(node: Node, session: "GenerationSession") -> Statement:
    """Route the stack below the hat block into the ``_loop`` body."""

    code = session.sequence(node.next)
    if code:
        session.add_loop_fragment(code)
    return Statement("")
