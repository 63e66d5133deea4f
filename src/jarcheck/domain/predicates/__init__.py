"""Type name predicates."""

from jarcheck.domain.predicates.runtime import (
    DEFAULT_RUNTIME_FILTER,
    DEFAULT_RUNTIME_PREFIXES,
    RuntimeFilter,
    is_excluded,
    is_primitive,
)

__all__ = [
    "DEFAULT_RUNTIME_FILTER",
    "DEFAULT_RUNTIME_PREFIXES",
    "RuntimeFilter",
    "is_excluded",
    "is_primitive",
]
