"""JSON reporter for machine-readable output.

Stdlib-only reporter for JSON output.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, TextIO

from jarcheck.application.reporters._base import BaseReporter

if TYPE_CHECKING:
    from jarcheck.domain.model.check_result import CheckResult
    from jarcheck.domain.model.node_failure import NodeFailure


class JSONReporter(BaseReporter):
    """JSON reporter for machine-readable output.

    Outputs check results as JSON for CI/CD integration.
    All collections are sorted so output is stable between runs.
    """

    def __init__(
        self,
        output: TextIO | None = None,
        *,
        indent: int | None = 2,
    ) -> None:
        """Initialize reporter.

        Args:
            output: Output stream (default: sys.stdout)
            indent: JSON indentation (default: 2, None for compact)
        """
        super().__init__(output)
        self._indent = indent

    def render(self, result: CheckResult) -> str:
        """Check result as one JSON document plus a trailing newline."""
        return json.dumps(self._result_to_dict(result), indent=self._indent) + "\n"

    def _result_to_dict(self, result: CheckResult) -> dict[str, object]:
        """Convert CheckResult to JSON-serializable dict.

        Args:
            result: Check result to convert

        Returns:
            Dictionary suitable for json.dumps()
        """
        return {
            "resolved": result.resolved,
            "entry": result.entry,
            "archives": list(result.archives),
            "summary": {
                "visited_count": result.visited_count,
                "dependency_count": result.dependency_count,
                "failure_count": len(result.failures),
                "elapsed_seconds": round(result.elapsed, 6),
            },
            "dependencies": sorted(result.dependencies),
            "references": {
                owner: sorted(refs) for owner, refs in sorted(result.references.items())
            },
            "failures": [self._failure_to_dict(f) for f in result.failures],
        }

    def _failure_to_dict(self, failure: NodeFailure) -> dict[str, str]:
        """Convert NodeFailure to dict."""
        return {
            "type_name": failure.type_name,
            "kind": failure.kind.name,
            "reason": failure.reason,
        }
