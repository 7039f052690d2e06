"""Small text helpers shared by the emitter and the block handlers."""

from __future__ import annotations

import re
import textwrap
from typing import List, Optional

_INNER_NEWLINE_RE = re.compile(r"\n(?!$)")


def prefix_lines(text: str, prefix: str) -> str:
    """Prepend ``prefix`` to every line of ``text``.

    A trailing newline does not open a new (prefixed) line.
    """

    return prefix + _INNER_NEWLINE_RE.sub("\n" + prefix, text)


def wrap_comment(text: str, width: int) -> str:
    """Re-flow ``text`` to ``width`` columns, keeping explicit line breaks."""

    lines: List[str] = []
    for paragraph in text.split("\n"):
        lines.extend(textwrap.wrap(paragraph, width=max(width, 1)) or [""])
    return "\n".join(lines)


def quote(text: str) -> str:
    """Encode ``text`` as a double-quoted C string literal."""

    escaped = (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\t", "\\t")
    )
    return f'"{escaped}"'


def trim_quote(text: Optional[str]) -> str:
    """Strip one pair of matching single or double quotes."""

    if not text:
        return text or ""
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "'\"":
        return text[1:-1]
    return text


def matrix_convert(matrix: object) -> List[int]:
    """Pack an 8x8 ``"0"``/``"1"`` string into eight row bytes.

    Short input is padded with ``"0"``; the leftmost column is the most
    significant bit of each row.
    """

    bits = matrix if isinstance(matrix, str) else ""
    bits = bits.ljust(64, "0")[:64]
    rows: List[int] = []
    for start in range(0, 64, 8):
        row = bits[start:start + 8]
        value = 0
        for char in row:
            value = (value << 1) | (0 if char == "0" else 1)
        rows.append(value)
    return rows
