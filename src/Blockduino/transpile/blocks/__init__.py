"""Built-in handler catalogue, one registry per block family."""

from __future__ import annotations

from typing import Optional

from ..registry import HandlerRegistry, merge
from . import (
    control,
    events,
    lists,
    logic,
    looks,
    maths,
    motion,
    operators,
    procedures,
    sensing,
    text,
    variables,
)

FAMILIES = (
    events,
    control,
    operators,
    maths,
    logic,
    variables,
    procedures,
    lists,
    text,
    motion,
    looks,
    sensing,
)

_DEFAULT: Optional[HandlerRegistry] = None


def default_registry() -> HandlerRegistry:
    """Return a fresh copy of the built-in catalogue.

    Callers may register extra kinds on the copy without affecting other
    sessions.
    """

    global _DEFAULT
    if _DEFAULT is None:
        _DEFAULT = merge(family.registry for family in FAMILIES)
    return _DEFAULT.copy()


__all__ = ["FAMILIES", "default_registry"]
