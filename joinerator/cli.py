"""Joinerator command line.

Usage:
    joinerator [options] [INPUT ...]

Reads text from stdin (or the INPUT values with ``--input args``, or the
clipboard with ``--input clipboard``), adds
combining glyphs and writes the result to stdout. Diagnostics go to
stderr.
"""

from __future__ import annotations

import argparse
import logging
import sys

import numpy as np
import structlog

from .content import (
    Clipboard,
    ClipboardConsumer,
    ClipboardProvider,
    NullConsumer,
    StdinProvider,
    StdoutConsumer,
    StringProvider,
    run_loop,
)
from .engine import Joinerator
from .options import GeneratorOptions, build_options, parse_frequency
from .repertoire import Category, Repertoire, build_index, load_repertoire, select_repertoire
from .transform import TRANSFORMERS

logger = structlog.get_logger(__name__)

# Per-category defaults: (frequency, stacking)
CATEGORY_DEFAULTS: dict[Category, tuple[str, int]] = {
    Category.ABOVE: ("60%", 1),
    Category.BELOW: ("60%", 0),
    Category.THROUGH: ("60%", 0),
}


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError("Length provided is not an integer.")
    if number <= 0:
        raise argparse.ArgumentTypeError("Length provided is not a positive integer.")
    return number


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"'{value}' is not an integer.")
    if number < 0:
        raise argparse.ArgumentTypeError(f"'{value}' must not be negative.")
    return number


def _stderr_logger(*args) -> structlog.PrintLogger:
    return structlog.PrintLogger(sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="joinerator",
        description="Adds Unicode combining glyphs to text.",
    )
    parser.add_argument(
        "-z", "--repertoire", default="default", metavar="NAME",
        help="Character repertoire to use (default: default)",
    )
    parser.add_argument(
        "--repertoire-file", action="append", default=[], metavar="PATH",
        help="Load an extra repertoire from a JSON file (repeatable)",
    )
    parser.add_argument(
        "-l", "--length", type=_positive_int, default=None, metavar="LENGTH",
        help="Enforce a maximum string length",
    )
    parser.add_argument(
        "--list-repertoires", action="store_true",
        help="List the available character repertoires",
    )
    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress non-essential messages")
    parser.add_argument(
        "-W", "--watch", action="store_true",
        help="Watch for changes over time (mutable input sources)",
    )
    parser.add_argument(
        "-i", "--input", default="stdin", choices=["stdin", "args", "arguments", "clipboard"],
        metavar="TYPE", help="Input source: stdin, args, clipboard (default: stdin)",
    )
    parser.add_argument(
        "-o", "--output", default="stdout", choices=["stdout", "null", "clipboard"],
        metavar="TYPE", help="Output destination: stdout, null, clipboard (default: stdout)",
    )
    parser.add_argument(
        "-t", "--transform", action="append", default=[], choices=sorted(TRANSFORMERS),
        metavar="NAME", help="Transform text before adding glyphs (repeatable, applied in order)",
    )
    parser.add_argument(
        "--allow-unreadable", action="store_true",
        help="Attach glyphs regardless of the base character",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible output")

    for category, (frequency, stacking) in CATEGORY_DEFAULTS.items():
        name = category.value.lower()
        parser.add_argument(
            f"--{name}-frequency", default=frequency, metavar="FREQ",
            help=f"Characters marked {name} per pass, as a percentage or a count (default: {frequency})",
        )
        parser.add_argument(
            f"--{name}-stacking", type=_non_negative_int, default=stacking, metavar="N",
            help=f"Passes for {name} marks; 0 disables them (default: {stacking})",
        )

    parser.add_argument("values", nargs="*", metavar="INPUT")
    return parser


def _generator_from_args(args: argparse.Namespace) -> list[GeneratorOptions]:
    generator = []
    for category in CATEGORY_DEFAULTS:
        name = category.value.lower()
        generator.append(
            GeneratorOptions(
                category=category,
                frequency=parse_frequency(getattr(args, f"{name}_frequency")),
                stacking=getattr(args, f"{name}_stacking"),
            )
        )
    return generator


def load_repertoire_files(paths: list[str]) -> dict[str, Repertoire]:
    """Build the repertoire index from the built-ins and JSON files.

    Raises:
        ValueError: If a file is malformed or reuses a repertoire name.
        OSError: If a file cannot be read.
    """
    extra = []
    for path in paths:
        with open(path, encoding="utf-8") as f:
            extra.append(load_repertoire(f.read()))
    return build_index(*extra)


def list_repertoires(index: dict[str, Repertoire]) -> None:
    print("Repertoires:")
    for rep in index.values():
        print(f"{rep.name:<16} -- {rep.description}")


def print_error(error: BaseException) -> None:
    """Print the chain of causes of an error."""
    print("Trace:", file=sys.stderr)
    cause: BaseException | None = error
    while cause is not None:
        print(f" - {type(cause).__name__} {cause}", file=sys.stderr)
        cause = cause.__cause__ or cause.__context__


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    structlog.configure(
        processors=[structlog.dev.ConsoleRenderer()],
        wrapper_class=structlog.make_filtering_bound_logger(logging.INFO),
        logger_factory=_stderr_logger,
    )

    try:
        index = load_repertoire_files(args.repertoire_file)
    except (OSError, ValueError) as e:
        parser.error(str(e))

    if args.list_repertoires:
        list_repertoires(index)
        return 0

    if args.input in ("args", "arguments") and not args.values:
        parser.error("--input args requires at least one INPUT value")

    try:
        options = build_options(
            select_repertoire(args.repertoire, index),
            _generator_from_args(args),
            allow_unreadable=args.allow_unreadable,
            limit=args.length,
        )
    except ValueError as e:
        parser.error(str(e))

    engine = Joinerator(options, np.random.default_rng(args.seed))
    clipboard = Clipboard() if "clipboard" in (args.input, args.output) else None

    if args.input == "clipboard":
        provider = ClipboardProvider(clipboard)
    elif args.input == "stdin":
        provider = StdinProvider()
    else:
        provider = StringProvider(args.values)

    if args.output == "clipboard":
        consumer = ClipboardConsumer(clipboard)
    elif args.output == "null":
        consumer = NullConsumer()
    else:
        consumer = StdoutConsumer()

    try:
        run_loop(
            engine,
            provider,
            consumer,
            transformers=args.transform,
            verbose=not args.quiet,
            watch=args.watch,
        )
    except KeyboardInterrupt:
        return 130
    except Exception as e:
        logger.error("run_failed", error=str(e))
        print_error(e)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
