"""Check result aggregate for class-path analysis."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from jarcheck.domain.model.node_failure import FailureKind, NodeFailure


@dataclass(frozen=True, slots=True)
class CheckResult:
    """Result of one dependency check.

    Immutable aggregate. Used by reporters.

    Attributes:
        entry: Normalized entry class name
        archives: Archive locations in search order
        resolved: Verdict, True if every reachable class was found
        visited: Classes dispatched for exploration
        dependencies: Non-runtime classes referenced by explored classes
        references: Explored class → its direct non-runtime references
        failures: Classes that could not be resolved
        elapsed: Wall-clock seconds spent in the check
    """

    entry: str
    archives: tuple[str, ...]
    resolved: bool
    visited: frozenset[str]
    dependencies: frozenset[str]
    references: Mapping[str, frozenset[str]]
    failures: tuple[NodeFailure, ...]
    elapsed: float = 0.0

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if not self.entry:
            raise ValueError("entry must not be empty")
        if not self.archives:
            raise ValueError("archives must not be empty")
        if self.elapsed < 0:
            raise ValueError(f"elapsed must be >= 0, got {self.elapsed}")

    @property
    def missing(self) -> frozenset[str]:
        """Classes absent from every archive."""
        return self._failed_with(FailureKind.NOT_FOUND)

    @property
    def malformed(self) -> frozenset[str]:
        """Classes whose bytes could not be parsed."""
        return self._failed_with(FailureKind.MALFORMED_CLASS)

    @property
    def dependency_count(self) -> int:
        """Number of distinct dependencies."""
        return len(self.dependencies)

    @property
    def visited_count(self) -> int:
        """Number of explored classes."""
        return len(self.visited)

    def _failed_with(self, kind: FailureKind) -> frozenset[str]:
        return frozenset(f.type_name for f in self.failures if f.kind is kind)

    @classmethod
    def runtime_only(cls, entry: str, archives: tuple[str, ...]) -> CheckResult:
        """Result for an entry class the runtime provides (nothing explored)."""
        return cls(
            entry=entry,
            archives=archives,
            resolved=True,
            visited=frozenset(),
            dependencies=frozenset(),
            references=MappingProxyType({}),
            failures=(),
        )
