"""Command line entry point.

Usage:
    jarcheck com.acme.Main app.jar lib/dep.jar [--format rich]

Prints `true` when the archives contain every class the entry class
transitively needs, `false` otherwise.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from dataclasses import replace
from pathlib import Path

from jarcheck import __version__
from jarcheck.application.discovery.settings import load_config
from jarcheck.application.reporters import (
    BaseReporter,
    ConsoleReporter,
    JSONReporter,
    PlainTextReporter,
    format_verdict,
)
from jarcheck.application.services.dependency_checker import DependencyChecker
from jarcheck.domain.exceptions.archive import ArchiveUnreadableError
from jarcheck.domain.model.configuration import CheckerConfig

EXIT_RESOLVED = 0
EXIT_UNRESOLVED = 1
EXIT_USAGE = 2

_FORMATS = ("plain", "json", "rich")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="jarcheck",
        description=(
            "Check that a set of jar archives contains every class an entry class "
            "transitively references (JDK classes excluded)."
        ),
    )
    parser.add_argument("entry", metavar="MAIN_CLASS", help="fully qualified entry class name")
    parser.add_argument(
        "archives",
        metavar="JAR",
        nargs="+",
        help="archives to search, in class path order",
    )
    parser.add_argument(
        "--format",
        choices=_FORMATS,
        default="plain",
        help="output format (default: plain true/false)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="worker threads for the traversal (default: executor default)",
    )
    parser.add_argument(
        "--fail-fast",
        action="store_true",
        default=None,
        help="stop scheduling after the first unresolved class (report may be partial)",
    )
    parser.add_argument(
        "--exclude",
        metavar="PREFIX",
        action="append",
        default=[],
        help="additional runtime package prefix to skip, e.g. com.sun. (repeatable)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="TOML file with a [tool.jarcheck] table",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="log progress to stderr (-vv for per-class detail)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI.

    Args:
        argv: Arguments without the program name (default: sys.argv[1:])

    Returns:
        Process exit code
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        config = _resolve_config(args)
    except (FileNotFoundError, ValueError) as e:
        print(f"jarcheck: {e}", file=sys.stderr)
        return EXIT_USAGE

    checker = DependencyChecker(config=config)
    try:
        result = checker.check(args.entry, args.archives)
    except ArchiveUnreadableError as e:
        print(f"Error analyzing class dependencies: {e}", file=sys.stderr)
        print(format_verdict(False))
        return EXIT_UNRESOLVED
    except ValueError as e:
        # Entry class name that does not normalize to a type
        print(f"jarcheck: {e}", file=sys.stderr)
        return EXIT_USAGE

    _make_reporter(args.format).report(result)
    return EXIT_RESOLVED if result.resolved else EXIT_UNRESOLVED


def _resolve_config(args: argparse.Namespace) -> CheckerConfig:
    """Config file first, then command line overrides."""
    config = load_config(args.config) if args.config is not None else CheckerConfig()

    if args.exclude:
        config = config.with_runtime_prefixes(*args.exclude)
    if args.workers is not None:
        config = replace(config, max_workers=args.workers)
    if args.fail_fast is not None:
        config = replace(config, fail_fast=args.fail_fast)
    return config


def _make_reporter(output_format: str) -> BaseReporter:
    match output_format:
        case "json":
            return JSONReporter()
        case "rich":
            return ConsoleReporter()
        case _:
            return PlainTextReporter()


def _configure_logging(verbosity: int) -> None:
    if verbosity <= 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
