"""Block workspace to WhalesBot C translation."""

from .ast import (
    GenerationResult,
    Node,
    UnsupportedBlockError,
    UnsupportedInput,
    Variable,
    Workspace,
)
from .emitter import DEFAULT_DEVICE, GenerationSession, GeneratorOptions, emit, generate
from .parser import parse
from .registry import HandlerRegistry

__all__ = [
    "DEFAULT_DEVICE",
    "GenerationResult",
    "GenerationSession",
    "GeneratorOptions",
    "HandlerRegistry",
    "Node",
    "UnsupportedBlockError",
    "UnsupportedInput",
    "Variable",
    "Workspace",
    "emit",
    "generate",
    "parse",
]
