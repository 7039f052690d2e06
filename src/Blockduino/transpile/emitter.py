"""Translate a workspace of blocks into WhalesBot-flavoured C source."""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple, Union, cast

from ._util import prefix_lines, wrap_comment
from .ast import (
    Expression,
    Fragment,
    GenerationResult,
    Node,
    Statement,
    UnsupportedBlockError,
    UnsupportedInput,
    Workspace,
)
from .helpers import DeclarationTable, HelperCache
from .loop import LoopAggregator
from .names import DEVELOPER_VARIABLE, PARAMETER, RESERVED_WORDS, VARIABLE, NameManager
from .order import Order, adjusted_expression, adjusted_index
from .registry import HandlerRegistry

logger = logging.getLogger(__name__)

INCLUDES = ('#include "whalesbot.h"',)
SETUP_PRELUDE = ("void setup() {", "  board_init();", "}")
SETUP_START = "void _setup(){\n"
MAIN_START = "void user_main(){\n"
FUNCTION_END = "\n}"

PROCEDURE_KINDS = ("procedures_definition", "procedures_defreturn", "procedures_defnoreturn")
LOOP_EVENT = "event_when_wobot_loop"
START_EVENT = "event_when_wobot_started"


@dataclass(frozen=True)
class DeviceProfile:
    """Textual skeleton the generated program is wrapped in."""

    name: str
    includes: Tuple[str, ...]
    entry_start: str
    prelude: Tuple[str, ...] = ()
    has_loop: bool = True


DEVICE_PROFILES: Dict[str, DeviceProfile] = {
    "WOBOT": DeviceProfile(
        name="WOBOT",
        includes=INCLUDES,
        entry_start=SETUP_START,
        prelude=SETUP_PRELUDE,
        has_loop=True,
    ),
    "WOBOT_M6": DeviceProfile(
        name="WOBOT_M6",
        includes=INCLUDES,
        entry_start=MAIN_START,
        has_loop=False,
    ),
}

DEFAULT_DEVICE = "WOBOT"


def device_profile(device: str) -> DeviceProfile:
    """Return the profile registered for ``device``."""

    profile = DEVICE_PROFILES.get(device)
    if profile is None:
        supported = ", ".join(sorted(DEVICE_PROFILES))
        raise ValueError(f"Unsupported device profile '{device}'. Supported profiles: {supported}.")
    return profile


@dataclass(frozen=True)
class GeneratorOptions:
    """Knobs for one generation pass."""

    indent: str = "  "
    comment_wrap: int = 60
    # ``None`` follows the workspace setting.
    one_based_index: Optional[bool] = None
    extra_reserved_words: Tuple[str, ...] = ()


class SessionState(enum.Enum):
    IDLE = "idle"
    GENERATING = "generating"


_LEADING_BLANK_RE = re.compile(r"\A\s+\n")
_TRAILING_BLANK_RE = re.compile(r"\n\s+\Z")
_TRAILING_SPACE_RE = re.compile(r"[ \t]+\n")


def normalize_whitespace(code: str) -> str:
    """Drop blank leading/trailing lines and trailing spaces before newlines."""

    code = _LEADING_BLANK_RE.sub("", code)
    code = _TRAILING_BLANK_RE.sub("\n", code)
    return _TRAILING_SPACE_RE.sub("\n", code)


def scrub_naked_value(line: str) -> str:
    """Terminate a top-level expression so it forms a legal statement."""

    return line + ";\n"


class GenerationSession:
    """State for exactly one generation pass.

    ``begin`` resets every table and seeds the variable names, ``run`` walks
    the entry points, and ``finish`` assembles the program text and returns
    the session to idle.  Handlers receive the session and call back into it
    to render child expressions and nested statement stacks.
    """

    def __init__(
        self,
        registry: Optional[HandlerRegistry] = None,
        options: Optional[GeneratorOptions] = None,
    ) -> None:
        if registry is None:
            from .blocks import default_registry

            registry = default_registry()
        self.registry = registry
        self.options = options or GeneratorOptions()
        self.names = NameManager(RESERVED_WORDS | set(self.options.extra_reserved_words))
        self.definitions = DeclarationTable()
        self.helpers = HelperCache(self.names, self.definitions, self.options.indent)
        self.loop = LoopAggregator()
        self.state = SessionState.IDLE
        self.workspace: Optional[Workspace] = None
        self.one_based_index = True
        self._variable_ids: Dict[str, str] = {}
        self._setup_code = ""

    @property
    def indent(self) -> str:
        return self.options.indent

    def reset(self) -> None:
        self.names.reset()
        self.definitions.reset()
        self.helpers.reset()
        self.loop.reset()
        self.workspace = None
        self._variable_ids = {}
        self._setup_code = ""
        self.state = SessionState.IDLE

    # -- pipeline -----------------------------------------------------------

    def begin(self, workspace: Workspace) -> None:
        if self.state is SessionState.GENERATING:
            raise RuntimeError("A generation pass is already in progress; call finish() first.")
        self.reset()
        self.state = SessionState.GENERATING
        self.workspace = workspace
        if self.options.one_based_index is None:
            self.one_based_index = workspace.one_based_index
        else:
            self.one_based_index = self.options.one_based_index

        self.names.set_variable_map(workspace.variable_map())
        self._variable_ids = {var.name: var.id for var in workspace.variables}
        for var in workspace.variables:
            self._variable_ids[var.id] = var.id

        declared: List[str] = []
        for name in workspace.developer_variables:
            declared.append(self.names.assign(DEVELOPER_VARIABLE, name))
        for var in workspace.used_variables():
            declared.append(self.names.assign(VARIABLE, var.id))
        if declared:
            self.definitions.set("variables", "float " + " = 0.0, ".join(declared) + " = 0.0;")
        logger.debug("Pass started with %d declared variable(s)", len(declared))

    def run(self) -> str:
        """Sequence procedures, then loop events, then start events."""

        top_nodes = self._require_workspace().top_nodes
        procedures = [node for node in top_nodes if node.kind in PROCEDURE_KINDS]
        loops = [node for node in top_nodes if node.kind == LOOP_EVENT]
        starts = [node for node in top_nodes if node.kind == START_EVENT]
        logger.debug(
            "Entry points: %d procedure(s), %d loop event(s), %d start event(s)",
            len(procedures),
            len(loops),
            len(starts),
        )

        for node in procedures:
            self.block_to_code(node, this_only=True)
        for node in loops:
            self.block_to_code(node, this_only=True)

        code: List[str] = []
        for node in starts:
            fragment = self.block_to_code(node)
            if fragment is None:
                continue
            line = fragment.text
            if isinstance(fragment, Expression) and node.output:
                line = scrub_naked_value(line)
            if line:
                code.append(line)
        self._setup_code = "\n".join(code)
        return self._setup_code

    def finish(self, device: str = DEFAULT_DEVICE) -> str:
        """Assemble the program for ``device`` and return to idle."""

        self._require_generating()
        try:
            profile = device_profile(device)
            code = self._assemble(profile)
        finally:
            self.reset()
        return normalize_whitespace(code)

    def abort(self) -> None:
        """Discard the current pass without rendering anything."""

        self.reset()

    def _require_generating(self) -> None:
        if self.state is not SessionState.GENERATING:
            raise RuntimeError("No generation pass in progress; call begin() first.")

    def _require_workspace(self) -> Workspace:
        self._require_generating()
        if self.workspace is None:
            raise RuntimeError("No workspace loaded; call begin() first.")
        return self.workspace

    def _assemble(self, profile: DeviceProfile) -> str:
        body = self._setup_code.rstrip("\n")
        if body:
            body = prefix_lines(body, self.indent)
        entry = f"{profile.entry_start}{body}{FUNCTION_END}"

        sections: List[str] = ["\n".join(profile.includes)]
        if profile.prelude:
            sections.append("\n".join(profile.prelude))
        declarations = self.definitions.render()
        if declarations:
            sections.append(declarations)
        sections.append(entry)
        if profile.has_loop:
            sections.append(self.loop.render(self.indent))
        elif not self.loop.is_empty:
            logger.warning(
                "Device profile %s has no recurring body; %d loop fragment(s) dropped",
                profile.name,
                len(self.loop.entries) + len(self.loop.maintenance),
            )
        return "\n\n".join(sections) + "\n"

    # -- sequencing ---------------------------------------------------------

    def block_to_code(self, node: Optional[Node], this_only: bool = False) -> Optional[Fragment]:
        """Generate ``node`` (and, unless ``this_only``, the stack after it).

        The stack is walked iteratively, so arbitrarily long scripts do not
        grow the Python call stack.
        """

        while node is not None and node.disabled:
            if this_only:
                return None
            node = node.next
        if node is None:
            return None

        fragment = self._translate(node)
        if fragment is None or this_only:
            return fragment
        text = fragment.text + self._following(node)
        if isinstance(fragment, Expression):
            return Expression(text, fragment.order)
        return Statement(text)

    def _translate(self, node: Node) -> Optional[Fragment]:
        """Run the handler for ``node`` alone and attach its comments."""

        handler = self.registry.get(node.kind)
        if handler is None:
            raise UnsupportedBlockError.for_node(node, "No handler registered for node kind")

        fragment = handler(node, self)
        if fragment is None:
            return None
        if isinstance(fragment, Expression):
            return Expression(self.scrub(node, fragment.text, this_only=True), fragment.order)
        if isinstance(fragment, Statement):
            return Statement(self.scrub(node, fragment.text, this_only=True))
        raise TypeError(
            f"Handler for '{node.kind}' returned {type(fragment).__name__}; "
            "expected Statement, Expression or None."
        )

    def _following(self, node: Node) -> str:
        """Statement text of every sibling after ``node``.

        A handler that produces nothing ends the stack.
        """

        parts: List[str] = []
        sibling = node.next
        while sibling is not None:
            if not sibling.disabled:
                fragment = self._translate(sibling)
                if fragment is None:
                    break
                parts.append(fragment.text)
            sibling = sibling.next
        return "".join(parts)

    def sequence(self, node: Optional[Node], this_only: bool = False) -> str:
        """Return the flattened statement text starting at ``node``."""

        fragment = self.block_to_code(node, this_only)
        if fragment is None:
            return ""
        return fragment.text

    def scrub(self, node: Node, code: str, this_only: bool = False) -> str:
        """Attach comments to ``code`` and append the following statements.

        Comments are collected for the node and for everything plugged into
        its value sockets, but not for nested statement stacks: those are
        picked up when the stack itself is sequenced.
        """

        comment_code = ""
        if not node.is_inline:
            if node.comment:
                comment = wrap_comment(node.comment, self.options.comment_wrap - 3)
                comment_code += prefix_lines(comment + "\n", "// ")
            for child in node.inputs.values():
                nested = self._nested_comments(child)
                if nested:
                    comment_code += prefix_lines(nested, "// ")
        next_code = "" if this_only else self._following(node)
        return comment_code + code + next_code

    @staticmethod
    def _nested_comments(node: Node) -> str:
        comments = [child.comment for child in node.descendants() if child.comment]
        if not comments:
            return ""
        return "\n".join(comments) + "\n"

    def value_to_code(self, node: Node, socket: str, order: float) -> str:
        """Render the expression plugged into ``socket`` for an ``order`` position.

        Returns an empty string when the socket is empty so callers can fall
        back to a literal default.
        """

        target = node.input_target(socket)
        if target is None:
            return ""
        fragment = self.block_to_code(target)
        if fragment is None:
            return ""
        if not isinstance(fragment, Expression):
            raise UnsupportedBlockError.for_node(
                target, f"Statement block plugged into value socket '{socket}' of {node.kind}"
            )
        return adjusted_expression(fragment.text, fragment.order, order)

    def statement_to_code(self, node: Node, socket: str) -> str:
        """Render the statement stack in ``socket``, indented one level."""

        target = node.statement_target(socket)
        if target is None:
            return ""
        fragment = self.block_to_code(target)
        if fragment is None:
            return ""
        if not isinstance(fragment, Statement):
            raise UnsupportedBlockError.for_node(
                target, f"Value block plugged into statement socket '{socket}' of {node.kind}"
            )
        if not fragment.text:
            return ""
        return prefix_lines(fragment.text, self.indent)

    def get_adjusted(
        self,
        node: Node,
        socket: str,
        delta: float = 0,
        negate: bool = False,
        order: float = Order.NONE,
    ) -> str:
        """Render an index socket shifted to zero-based, optionally offset/negated."""

        if self.one_based_index:
            delta -= 1
        default = "1" if self.one_based_index else "0"
        if delta > 0:
            at = self.value_to_code(node, socket, Order.ADDITION) or default
        elif delta < 0:
            at = self.value_to_code(node, socket, Order.SUBTRACTION) or default
        elif negate:
            at = self.value_to_code(node, socket, Order.UNARY_NEGATION) or default
        else:
            at = self.value_to_code(node, socket, order) or default
        return adjusted_index(at, delta, negate, order)

    # -- names and helpers --------------------------------------------------

    def variable_name(self, raw: object) -> str:
        """Identifier for a variable referenced by id or by display name."""

        key = str(raw) if raw is not None else ""
        return self.names.assign(VARIABLE, self._variable_ids.get(key, key))

    def parameter_name(self, raw: object) -> str:
        return self.names.assign(PARAMETER, f"p_{raw}" if raw else "p_")

    def provide_function(
        self,
        key: str,
        template: Union[str, Sequence[str]],
        *,
        name_hint: Optional[str] = None,
        reindent: bool = True,
    ) -> str:
        return self.helpers.provide(key, template, name_hint=name_hint, reindent=reindent)

    def add_loop_fragment(self, fragment: Union[str, Sequence[str]]) -> None:
        logger.debug("Queued loop fragment: %r", fragment)
        self.loop.append(fragment)

    def add_loop_maintenance(self, statement: str) -> None:
        self.loop.add_maintenance(statement)


def generate(
    workspace: Workspace,
    device: str = DEFAULT_DEVICE,
    *,
    registry: Optional[HandlerRegistry] = None,
    options: Optional[GeneratorOptions] = None,
) -> GenerationResult:
    """Run one complete pass and report either the code or the failure."""

    profile = device_profile(device)
    session = GenerationSession(registry=registry, options=options)
    session.begin(workspace)
    failure: Optional[UnsupportedInput] = None
    try:
        session.run()
    except UnsupportedBlockError as exc:
        failure = exc.failure
        logger.debug("Generation aborted: %s", exc)
    finally:
        code = session.finish(profile.name)
    if failure is not None:
        return GenerationResult(error=failure)
    return GenerationResult(code=code)


def emit(
    workspace: Workspace,
    device: str = DEFAULT_DEVICE,
    *,
    registry: Optional[HandlerRegistry] = None,
    options: Optional[GeneratorOptions] = None,
) -> str:
    """Return the generated program, raising :class:`UnsupportedBlockError` on failure."""

    result = generate(workspace, device, registry=registry, options=options)
    if result.error is not None:
        raise UnsupportedBlockError(result.error.kind, result.error.fields, result.error.reason)
    return cast(str, result.code)
