"""Load a serialized block workspace into :class:`Workspace` objects.

The loader understands the JSON shape the editor exports::

    {
        "variables": [{"id": "k1", "name": "speed"}],
        "developerVariables": ["a"],
        "options": {"oneBasedIndex": true},
        "blocks": [
            {"type": "event_when_wobot_started", "next": {"block": {...}}}
        ]
    }

``"blocks"`` may also be nested one level (``{"blocks": {"blocks": [...]}}``)
as Blockly's own serializer writes it.  Socket entries may hold a ``block``,
a ``shadow`` or both; a real block wins over its shadow.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Optional, Union

from .ast import Node, Variable, Workspace

Source = Union[str, bytes, Mapping[str, Any]]


def _fail(path: str, message: str) -> ValueError:
    return ValueError(f"{path}: {message}")


def _field_value(raw: Any) -> object:
    # Scratch writes [value, id]; Blockly writes {"id": ...} for variables.
    if isinstance(raw, list):
        return raw[0] if raw else None
    if isinstance(raw, dict):
        if "id" in raw:
            return raw["id"]
        return raw.get("value", raw.get("name"))
    return raw


def _unwrap(entry: Any, path: str) -> Optional[Dict[str, Any]]:
    """Return the node dict held by a socket entry, preferring real blocks."""

    if entry is None:
        return None
    if not isinstance(entry, dict):
        raise _fail(path, "expected an object")
    if "type" in entry:
        return entry
    block = entry.get("block")
    if block is None:
        block = entry.get("shadow")
    if block is not None and not isinstance(block, dict):
        raise _fail(path, "expected an object")
    return block


def _comment(data: Mapping[str, Any]) -> Optional[str]:
    comment = data.get("comment")
    if isinstance(comment, dict):
        comment = comment.get("text")
    if comment is None:
        icons = data.get("icons")
        if isinstance(icons, dict) and isinstance(icons.get("comment"), dict):
            comment = icons["comment"].get("text")
    if comment is None:
        return None
    return str(comment)


def _sockets(data: Mapping[str, Any], key: str, path: str) -> Dict[str, Node]:
    raw = data.get(key) or {}
    if not isinstance(raw, dict):
        raise _fail(f"{path}.{key}", "expected an object")
    sockets: Dict[str, Node] = {}
    for name, entry in raw.items():
        child_path = f"{path}.{key}.{name}"
        child = _unwrap(entry, child_path)
        if child is not None:
            sockets[name] = parse_node(child, child_path)
    return sockets


def _node_parts(data: Any, path: str) -> Dict[str, Any]:
    """Validate one serialized block and collect everything but ``next``."""

    if not isinstance(data, dict):
        raise _fail(path, "expected an object")
    kind = data.get("type")
    if not isinstance(kind, str) or not kind:
        raise _fail(path, "missing block type")

    fields = data.get("fields") or {}
    if not isinstance(fields, dict):
        raise _fail(f"{path}.fields", "expected an object")
    mutation = data.get("mutation") or data.get("extraState") or {}
    if not isinstance(mutation, dict):
        raise _fail(f"{path}.mutation", "expected an object")

    return {
        "kind": kind,
        "fields": {name: _field_value(value) for name, value in fields.items()},
        "inputs": _sockets(data, "inputs", path),
        "statements": _sockets(data, "statements", path),
        "comment": _comment(data),
        "output": bool(data.get("output", False)),
        "disabled": bool(data.get("disabled", False)) or data.get("enabled") is False,
        "mutation": dict(mutation),
        "id": data.get("id"),
    }


def parse_node(data: Mapping[str, Any], path: str = "block") -> Node:
    """Build a :class:`Node` tree from one serialized block.

    The ``next`` chain of a stack is walked in a loop, so long stacks do not
    grow the call stack.
    """

    chain: List[Dict[str, Any]] = []
    current: Optional[Mapping[str, Any]] = data
    while current is not None:
        chain.append(_node_parts(current, path))
        current = _unwrap(current.get("next"), f"{path}.next")
        path = f"{path}.next"

    node = Node(**chain.pop())
    for parts in reversed(chain):
        node = Node(next=node, **parts)
    return node


def _variables(raw: Any) -> List[Variable]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise _fail("variables", "expected a list")
    variables: List[Variable] = []
    for index, item in enumerate(raw):
        if not isinstance(item, dict) or "id" not in item:
            raise _fail(f"variables[{index}]", "expected an object with an id")
        variables.append(Variable(id=str(item["id"]), name=str(item.get("name", item["id"]))))
    return variables


def parse(source: Source) -> Workspace:
    """Parse JSON text (or an already decoded mapping) into a :class:`Workspace`."""

    if isinstance(source, (str, bytes)):
        try:
            data = json.loads(source)
        except ValueError as exc:
            raise ValueError(f"Workspace is not valid JSON: {exc}") from exc
        except RecursionError as exc:
            raise ValueError("Workspace is nested too deeply to load") from exc
    else:
        data = source
    if not isinstance(data, dict):
        raise _fail("workspace", "expected an object")

    blocks = data.get("blocks", [])
    if isinstance(blocks, dict):
        blocks = blocks.get("blocks", [])
    if not isinstance(blocks, list):
        raise _fail("blocks", "expected a list")

    developer = data.get("developerVariables") or []
    if not isinstance(developer, list):
        raise _fail("developerVariables", "expected a list")

    options = data.get("options") or {}
    if not isinstance(options, dict):
        raise _fail("options", "expected an object")

    return Workspace(
        top_nodes=[parse_node(block, f"blocks[{index}]") for index, block in enumerate(blocks)],
        variables=_variables(data.get("variables")),
        developer_variables=[str(name) for name in developer],
        one_based_index=bool(options.get("oneBasedIndex", True)),
    )
