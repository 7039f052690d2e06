"""Map node kinds to the handlers that translate them."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Dict, Iterable, List, Optional

from .ast import Fragment, Node

if TYPE_CHECKING:
    from .emitter import GenerationSession

Handler = Callable[[Node, "GenerationSession"], Optional[Fragment]]


class HandlerRegistry:
    """Registry of per-kind handlers.

    A handler receives the node and the running session and returns a
    :class:`Statement`, an :class:`Expression`, or ``None`` when it produced
    no code of its own.
    """

    def __init__(self, handlers: Optional[Dict[str, Handler]] = None) -> None:
        self._handlers: Dict[str, Handler] = dict(handlers or {})

    def register(self, *kinds: str, replace: bool = False) -> Callable[[Handler], Handler]:
        if not kinds:
            raise ValueError("register() needs at least one node kind")

        def decorator(handler: Handler) -> Handler:
            for kind in kinds:
                self.add(kind, handler, replace=replace)
            return handler

        return decorator

    def add(self, kind: str, handler: Handler, *, replace: bool = False) -> None:
        if kind in self._handlers and not replace:
            raise ValueError(f"A handler for node kind '{kind}' is already registered.")
        self._handlers[kind] = handler

    def alias(self, kind: str, existing: str) -> None:
        """Register ``kind`` with the handler already bound to ``existing``."""

        self.add(kind, self._handlers[existing])

    def get(self, kind: str) -> Optional[Handler]:
        return self._handlers.get(kind)

    def __contains__(self, kind: object) -> bool:
        return kind in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

    def kinds(self) -> List[str]:
        return sorted(self._handlers)

    def copy(self) -> "HandlerRegistry":
        return HandlerRegistry(self._handlers)

    def update(self, other: "HandlerRegistry", *, replace: bool = False) -> None:
        for kind in other.kinds():
            handler = other.get(kind)
            if handler is not None:
                self.add(kind, handler, replace=replace)


def merge(registries: Iterable[HandlerRegistry]) -> HandlerRegistry:
    combined = HandlerRegistry()
    for registry in registries:
        combined.update(registry)
    return combined
