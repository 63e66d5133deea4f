"""Plain text reporter.

Prints the verdict as `true` / `false`, the contract shell scripts rely on.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TextIO

from jarcheck.application.reporters._base import BaseReporter

if TYPE_CHECKING:
    from jarcheck.domain.model.check_result import CheckResult


def format_verdict(resolved: bool) -> str:
    """Lowercase boolean, as printed on stdout."""
    return "true" if resolved else "false"


class PlainTextReporter(BaseReporter):
    """Verdict line, optionally followed by one line per failure."""

    def __init__(self, output: TextIO | None = None, *, show_failures: bool = False) -> None:
        """Initialize reporter.

        Args:
            output: Output stream (default: sys.stdout)
            show_failures: Also list unresolved classes after the verdict
        """
        super().__init__(output)
        self._show_failures = show_failures

    def render(self, result: CheckResult) -> str:
        lines = [format_verdict(result.resolved)]
        if self._show_failures:
            lines.extend(f"  {failure}" for failure in result.failures)
        return "".join(f"{line}\n" for line in lines)
