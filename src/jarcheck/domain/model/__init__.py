"""Domain model entities."""

from jarcheck.domain.model.check_result import CheckResult
from jarcheck.domain.model.configuration import CheckerConfig
from jarcheck.domain.model.node_failure import FailureKind, NodeFailure
from jarcheck.domain.model.type_name import class_entry_path, normalize_type_name
from jarcheck.domain.model.visit_table import FrozenVisitTable, VisitTable

__all__ = [
    # Enums
    "FailureKind",
    # Value objects
    "NodeFailure",
    "CheckerConfig",
    # Aggregates
    "CheckResult",
    # Traversal state
    "VisitTable",
    "FrozenVisitTable",
    # Functions
    "normalize_type_name",
    "class_entry_path",
]
