"""Command line interface."""

from jarcheck.presentation.cli.main import build_parser, main

__all__ = [
    "build_parser",
    "main",
]
