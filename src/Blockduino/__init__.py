"""User-facing helpers for the Blockduino code generator."""

from __future__ import annotations

__all__ = ["generate_file", "emit", "generate", "parse"]
__version__ = "0.1.0"

import logging
import pathlib
from typing import Optional, Union

from Blockduino.transpile.emitter import DEFAULT_DEVICE, GeneratorOptions, emit, generate
from Blockduino.transpile.parser import parse

logger = logging.getLogger(__name__)


def generate_file(
    path: Union[str, pathlib.Path],
    device: str = DEFAULT_DEVICE,
    *,
    output: Optional[Union[str, pathlib.Path]] = None,
    options: Optional[GeneratorOptions] = None,
) -> str:
    """Translate the workspace stored at ``path`` into controller source.

    Parameters
    ----------
    path:
        JSON file exported by the block editor.
    device:
        Device profile id, ``"WOBOT"`` or ``"WOBOT_M6"``.
    output:
        When given, the generated program is also written to this file.
    options:
        Generator knobs; the workspace's own index setting is used when
        ``options.one_based_index`` is left as ``None``.

    Raises ``UnsupportedBlockError`` when a block cannot be translated and
    ``ValueError`` when the file does not hold a workspace.
    """

    source = pathlib.Path(path).read_text(encoding="utf-8")
    code = emit(parse(source), device, options=options)
    if output is not None:
        pathlib.Path(output).write_text(code, encoding="utf-8")
        logger.info("Program written to %s", output)
    return code
