"""Per-class traversal failures."""

from dataclasses import dataclass
from enum import Enum, auto


class FailureKind(Enum):
    """Why a class node ended in the failed state."""

    NOT_FOUND = auto()  # absent from every archive
    MALFORMED_CLASS = auto()  # found, but not a parseable class file
    SCHEDULING = auto()  # executor could not run the node's task


@dataclass(frozen=True, slots=True)
class NodeFailure:
    """A class that could not be resolved.

    Attributes:
        type_name: Dotted name of the failed class
        kind: Failure classification
        reason: Human-readable detail
    """

    type_name: str
    kind: FailureKind
    reason: str

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if not self.type_name:
            raise ValueError("type_name must not be empty")
        if not self.reason:
            raise ValueError("reason must not be empty")

    def __str__(self) -> str:
        """Format as name (KIND): reason."""
        return f"{self.type_name} ({self.kind.name}): {self.reason}"
