"""Node and fragment definitions shared by the loader, handlers and emitter."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Mapping, Optional, Union


@dataclass
class Node:
    """One block of the visual program.

    ``inputs`` holds value sockets (expression children) and ``statements``
    holds the first node of each nested statement stack.  ``next`` links the
    following sibling in a stack.  Parent links are filled in on construction
    so that a node knows whether it is plugged into a value socket.
    """

    kind: str
    fields: Dict[str, object] = field(default_factory=dict)
    inputs: Dict[str, "Node"] = field(default_factory=dict)
    statements: Dict[str, "Node"] = field(default_factory=dict)
    next: Optional["Node"] = None
    comment: Optional[str] = None
    output: bool = False
    disabled: bool = False
    mutation: Dict[str, object] = field(default_factory=dict)
    id: Optional[str] = None
    parent: Optional["Node"] = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        for child in self.children():
            child.parent = self

    def children(self) -> Iterator["Node"]:
        """Yield every directly attached node, ``next`` included."""

        yield from self.inputs.values()
        yield from self.statements.values()
        if self.next is not None:
            yield self.next

    def descendants(self) -> Iterator["Node"]:
        """Yield this node followed by every node below it."""

        pending = [self]
        while pending:
            node = pending.pop()
            yield node
            pending.extend(reversed(list(node.children())))

    def field_value(self, name: str, default: object = None) -> object:
        return self.fields.get(name, default)

    def input_target(self, socket: str) -> Optional["Node"]:
        return self.inputs.get(socket)

    def statement_target(self, socket: str) -> Optional["Node"]:
        return self.statements.get(socket)

    @property
    def is_inline(self) -> bool:
        """``True`` when this node feeds a value into its parent."""

        if self.parent is None:
            return False
        return any(child is self for child in self.parent.inputs.values())


@dataclass
class Variable:
    """A user variable declared in the editor."""

    id: str
    name: str


@dataclass
class Workspace:
    """Container for the top-level stacks handed over by the editor."""

    top_nodes: List[Node] = field(default_factory=list)
    variables: List[Variable] = field(default_factory=list)
    developer_variables: List[str] = field(default_factory=list)
    one_based_index: bool = True

    def variable_map(self) -> Dict[str, str]:
        return {var.id: var.name for var in self.variables}

    def used_variables(self) -> List[Variable]:
        """Return the declared variables referenced by at least one node."""

        referenced = set()
        for top in self.top_nodes:
            for node in top.descendants():
                for key in ("VAR", "VARIABLE"):
                    value = node.fields.get(key)
                    if isinstance(value, str):
                        referenced.add(value)
        return [
            var for var in self.variables if var.id in referenced or var.name in referenced
        ]


@dataclass(frozen=True)
class Statement:
    """A terminated statement fragment."""

    text: str


@dataclass(frozen=True)
class Expression:
    """An expression fragment together with its binding strength."""

    text: str
    order: float


Fragment = Union[Statement, Expression]


@dataclass(frozen=True)
class UnsupportedInput:
    """Structured description of a node the handlers cannot translate."""

    kind: str
    fields: Mapping[str, object]
    reason: str

    def describe(self) -> str:
        values = ", ".join(f"{key}={value!r}" for key, value in sorted(self.fields.items()))
        detail = f" ({values})" if values else ""
        return f"{self.reason}: {self.kind}{detail}"


class UnsupportedBlockError(ValueError):
    """Raised when a node carries a kind or field combination with no translation."""

    def __init__(
        self,
        kind: str,
        fields: Optional[Mapping[str, object]] = None,
        reason: str = "Unhandled combination",
    ) -> None:
        self.failure = UnsupportedInput(kind=kind, fields=dict(fields or {}), reason=reason)
        super().__init__(self.failure.describe())

    @classmethod
    def for_node(cls, node: Node, reason: str = "Unhandled combination") -> "UnsupportedBlockError":
        return cls(node.kind, node.fields, reason)


@dataclass
class GenerationResult:
    """Outcome of one generation pass: either ``code`` or ``error`` is set."""

    code: Optional[str] = None
    error: Optional[UnsupportedInput] = None

    @property
    def ok(self) -> bool:
        return self.error is None
