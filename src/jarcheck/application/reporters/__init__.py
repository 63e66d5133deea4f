"""Reporters for dependency check results.

PlainTextReporter and JSONReporter use stdlib only;
ConsoleReporter renders with rich.
"""

from jarcheck.application.reporters._base import BaseReporter
from jarcheck.application.reporters.console import ConsoleConfig, ConsoleReporter
from jarcheck.application.reporters.json_reporter import JSONReporter
from jarcheck.application.reporters.plain_text import PlainTextReporter, format_verdict

__all__ = [
    "BaseReporter",
    "ConsoleConfig",
    "ConsoleReporter",
    "JSONReporter",
    "PlainTextReporter",
    "format_verdict",
]
