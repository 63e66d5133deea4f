"""Shared traversal state for one dependency check."""

from __future__ import annotations

import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from jarcheck.domain.model.node_failure import NodeFailure


@dataclass(frozen=True, slots=True)
class FrozenVisitTable:
    """Immutable snapshot of VisitTable.

    Created by VisitTable.freeze().

    Attributes:
        visited: Every class dispatched for exploration
        dependencies: Every non-runtime class referenced by an explored class
        references: Explored class → its direct non-runtime references
        failures: Classes that could not be resolved
    """

    visited: frozenset[str]
    dependencies: frozenset[str]
    references: Mapping[str, frozenset[str]]
    failures: tuple[NodeFailure, ...]

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        unvisited = self.references.keys() - self.visited
        if unvisited:
            raise ValueError(f"references recorded for unvisited classes: {sorted(unvisited)}")


@dataclass(slots=True)
class VisitTable:
    """Thread-safe mutable node-dedup table.

    Lives for exactly one top-level check and is passed explicitly to every
    task. NOT frozen because it's a mutable collector.
    Thread-safety via Lock.
    """

    _visited: set[str] = field(default_factory=set)
    _dependencies: set[str] = field(default_factory=set)
    _references: dict[str, frozenset[str]] = field(default_factory=dict)
    _failures: list[NodeFailure] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def claim(self, type_name: str) -> bool:
        """Atomically insert type_name if absent. Thread-safe.

        Only the caller that receives True may dispatch the class.

        Args:
            type_name: Dotted class name

        Returns:
            True if this call inserted the name, False if already visited
        """
        with self._lock:
            if type_name in self._visited:
                return False
            self._visited.add(type_name)
            return True

    def add_references(self, owner: str, references: Iterable[str]) -> None:
        """Record owner's direct references and merge them into dependencies.

        Args:
            owner: Explored class
            references: Non-runtime classes it references
        """
        refs = frozenset(references)
        with self._lock:
            self._references[owner] = refs
            self._dependencies.update(refs)

    def record_failure(self, failure: NodeFailure) -> None:
        """Record a failed class. Thread-safe."""
        with self._lock:
            self._failures.append(failure)

    def freeze(self) -> FrozenVisitTable:
        """Create immutable snapshot. Thread-safe.

        Failures are sorted by name so snapshots do not depend on
        task completion order.
        """
        with self._lock:
            return FrozenVisitTable(
                visited=frozenset(self._visited),
                dependencies=frozenset(self._dependencies),
                references=MappingProxyType(dict(self._references)),
                failures=tuple(
                    sorted(self._failures, key=lambda f: (f.type_name, f.kind.name))
                ),
            )
