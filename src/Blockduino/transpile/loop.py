"""Collect the statements that make up the recurring ``_loop`` body."""

from __future__ import annotations

import logging
from typing import Dict, List, Sequence, Union

from ._util import prefix_lines

logger = logging.getLogger(__name__)

LOOP_START = "void _loop(){\n"
LOOP_END = "\n}"

LoopEntry = Union[str, List[str]]


class LoopAggregator:
    """Maintenance calls plus ordered body fragments for the device loop.

    Maintenance statements (per-tick refresh calls for peripherals) are kept
    once each and rendered first; body entries follow in the order they
    were appended.
    """

    def __init__(self) -> None:
        self._maintenance: Dict[str, None] = {}
        self._entries: List[LoopEntry] = []

    def reset(self) -> None:
        self._maintenance.clear()
        self._entries.clear()

    def add_maintenance(self, statement: str) -> None:
        if statement not in self._maintenance:
            logger.debug("Loop maintenance added: %s", statement)
        self._maintenance.setdefault(statement, None)

    def append(self, entry: Union[str, Sequence[str]]) -> None:
        if isinstance(entry, str):
            self._entries.append(entry)
        else:
            self._entries.append(list(entry))

    @property
    def maintenance(self) -> List[str]:
        return list(self._maintenance)

    @property
    def entries(self) -> List[LoopEntry]:
        return list(self._entries)

    @property
    def is_empty(self) -> bool:
        return not self._maintenance and not self._entries

    def _body_lines(self) -> List[str]:
        lines: List[str] = []
        for entry in self._entries:
            parts = [entry] if isinstance(entry, str) else entry
            for part in parts:
                text = part.rstrip("\n")
                if text:
                    lines.append(text)
        return lines

    def render(self, indent: str = "  ") -> str:
        sections: List[str] = []
        if self._maintenance:
            sections.append("\n".join(self._maintenance))
        body = self._body_lines()
        if body:
            sections.append("\n".join(body))
        code = "\n\n".join(prefix_lines(section, indent) for section in sections)
        return f"{LOOP_START}{code}{LOOP_END}"
