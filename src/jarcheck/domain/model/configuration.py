"""Checker configuration.

None = use the default, value = explicit override.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from jarcheck.domain.predicates.runtime import DEFAULT_RUNTIME_PREFIXES, RuntimeFilter


@dataclass(frozen=True, slots=True)
class CheckerConfig:
    """Configuration DTO for DependencyChecker.

    Immutable configuration object with FAIL-FIRST validation.

    Attributes:
        runtime_prefixes: Namespaces assumed always available.
        max_workers: Worker threads for the traversal. None = executor default.
        fail_fast: Cancel queued work once the verdict is false; running
            tasks still finish. The verdict is unchanged, the report may
            be partial.
        index_archives: Cache archive entry indexes between lookups.
    """

    runtime_prefixes: tuple[str, ...] = DEFAULT_RUNTIME_PREFIXES
    max_workers: int | None = None
    fail_fast: bool = False
    index_archives: bool = True

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if isinstance(self.runtime_prefixes, str):
            raise TypeError("runtime_prefixes must be a tuple of strings, not a string")
        if any(not prefix for prefix in self.runtime_prefixes):
            raise ValueError("runtime_prefixes must not contain empty strings")

        # max_workers must be >= 1 if set
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")

    @property
    def runtime_filter(self) -> RuntimeFilter:
        """Runtime predicate built from runtime_prefixes."""
        return RuntimeFilter(self.runtime_prefixes)

    def with_runtime_prefixes(self, *prefixes: str) -> CheckerConfig:
        """Copy with additional runtime prefixes (duplicates dropped)."""
        merged = tuple(dict.fromkeys((*self.runtime_prefixes, *prefixes)))
        return replace(self, runtime_prefixes=merged)
