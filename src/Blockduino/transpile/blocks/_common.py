"""Shared shapes of the peripheral blocks."""

from __future__ import annotations

from ..ast import Node, Statement


def field_code(node: Node, name: str, default: str = "0") -> str:
    """Dropdown values (ports, ids) are pasted into the call as-is."""

    value = node.field_value(name)
    return default if value in (None, "") else str(value)


def call_statement(name: str, *args: str) -> Statement:
    return Statement(f"{name}({', '.join(args)});\n")
