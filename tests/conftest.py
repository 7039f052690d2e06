"""Shared pytest fixtures and helpers."""

import re
import textwrap

import pytest

from Blockduino.transpile.ast import Node, Variable, Workspace


def deindent(code: str) -> str:
    """Remove common indentation and leading/trailing blank lines."""

    return textwrap.dedent(code).strip("\n")


def normalize_ws(text: str) -> str:
    """Collapse runs of whitespace for resilient textual comparisons."""

    lines = [re.sub(r"\s+", " ", ln).strip() for ln in text.strip().splitlines()]
    return "\n".join(line for line in lines if line)


def link(*nodes: Node) -> Node:
    """Chain ``nodes`` into one statement stack and return its first node."""

    for current, following in zip(nodes, nodes[1:]):
        current.next = following
        following.parent = current
    return nodes[0]


def program(*tops: Node, variables=(), developer=(), one_based: bool = True) -> Workspace:
    return Workspace(
        top_nodes=list(tops),
        variables=[Variable(id=var_id, name=name) for var_id, name in variables],
        developer_variables=list(developer),
        one_based_index=one_based,
    )


@pytest.fixture
def src():
    """Return a helper that normalises indentation in code snippets."""

    return deindent


@pytest.fixture
def norm():
    """Return a helper that normalises whitespace in generated code."""

    return normalize_ws


@pytest.fixture
def stack():
    """Return a helper that links nodes into a statement stack."""

    return link


@pytest.fixture
def started():
    """Return a helper that hangs a statement stack under a start event."""

    def build(*nodes: Node) -> Node:
        return link(Node("event_when_wobot_started"), *nodes)

    return build


@pytest.fixture
def workspace():
    """Return a helper that wraps top-level stacks into a :class:`Workspace`."""

    return program


@pytest.fixture
def num():
    """Return a helper building a ``math_number`` literal node."""

    def build(value) -> Node:
        return Node("math_number", fields={"NUM": value}, output=True)

    return build
