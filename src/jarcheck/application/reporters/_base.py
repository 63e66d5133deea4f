"""Reporter base: render a CheckResult to text, write it to a stream."""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from jarcheck.domain.model.check_result import CheckResult


class BaseReporter(ABC):
    """Formats check results and writes them to one output stream.

    Subclasses implement render(); report() writes its text unchanged, so
    render() output must carry its own trailing newline.

    Example:
        class MissingCountReporter(BaseReporter):
            def render(self, result: CheckResult) -> str:
                return f"{len(result.missing)}\\n"
    """

    def __init__(self, output: TextIO | None = None) -> None:
        """Initialize reporter.

        Args:
            output: Output stream (default: sys.stdout, resolved at report time)
        """
        self._output = output

    @abstractmethod
    def render(self, result: CheckResult) -> str:
        """Format a check result as text."""

    def report(self, result: CheckResult) -> None:
        """Write the rendered result to the output stream."""
        output = self._output if self._output is not None else sys.stdout
        output.write(self.render(result))
