"""Command line entry point: ``python -m Blockduino WORKSPACE.json``."""

from __future__ import annotations

import argparse
import logging
import pathlib
import sys
from typing import List, Optional, cast

from Blockduino import __version__
from Blockduino.transpile.emitter import (
    DEFAULT_DEVICE,
    DEVICE_PROFILES,
    GeneratorOptions,
    generate,
)
from Blockduino.transpile.parser import parse

EXIT_OK = 0
EXIT_UNSUPPORTED = 1
EXIT_UNREADABLE = 2

_console_handler: Optional[logging.Handler] = None


def setup_logging(debug_mode: bool = False) -> None:
    """Send log records to stderr, DEBUG and up when ``debug_mode`` is set."""

    global _console_handler
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if debug_mode else logging.INFO)

    if _console_handler is not None:
        root_logger.removeHandler(_console_handler)
    _console_handler = logging.StreamHandler()
    _console_handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    root_logger.addHandler(_console_handler)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="Blockduino",
        description="Generate WhalesBot controller source from a block workspace",
    )
    parser.add_argument("file", help="Workspace JSON exported by the block editor")
    parser.add_argument(
        "-d",
        "--device",
        default=DEFAULT_DEVICE,
        choices=sorted(DEVICE_PROFILES),
        help="Device profile (default: %(default)s)",
    )
    parser.add_argument("-o", "--output", help="Output file (default: stdout)")
    parser.add_argument(
        "--zero-based",
        action="store_true",
        help="Treat list indices as zero-based regardless of the workspace option",
    )
    parser.add_argument("--debug", action="store_true", help="Debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.debug)
    logging.debug(args)

    path = pathlib.Path(args.file)
    try:
        workspace = parse(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logging.error("File not found: %s", path)
        return EXIT_UNREADABLE
    except (OSError, ValueError) as exc:
        logging.error("Cannot read workspace %s: %s", path, exc)
        return EXIT_UNREADABLE

    options = GeneratorOptions(one_based_index=False if args.zero_based else None)
    result = generate(workspace, args.device, options=options)
    if result.error is not None:
        logging.error("Generation failed: %s", result.error.describe())
        return EXIT_UNSUPPORTED

    code = cast(str, result.code)
    if args.output:
        try:
            pathlib.Path(args.output).write_text(code, encoding="utf-8")
        except OSError as exc:
            logging.error("Failed to write %s: %s", args.output, exc)
            return EXIT_UNREADABLE
        logging.info("Program written to %s", args.output)
    else:
        sys.stdout.write(code)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
