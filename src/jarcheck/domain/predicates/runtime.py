"""Platform runtime classification for type names."""

from __future__ import annotations

from dataclasses import dataclass

# Namespaces always supplied by the JVM, never looked up in archives
DEFAULT_RUNTIME_PREFIXES: tuple[str, ...] = ("java.", "javax.", "jdk.", "sun.")

# Descriptor codes for primitive types (V only appears in method descriptors)
PRIMITIVE_TOKENS = frozenset("ZBCSIFDJV")


def is_primitive(type_name: str) -> bool:
    """Check if name is a single-character primitive descriptor token."""
    return len(type_name) == 1 and type_name in PRIMITIVE_TOKENS


@dataclass(frozen=True, slots=True)
class RuntimeFilter:
    """Predicate: True for type names the platform runtime provides.

    Stateless and immutable, safe to share between worker threads.

    Attributes:
        prefixes: Dotted namespace prefixes treated as runtime classes
    """

    prefixes: tuple[str, ...] = DEFAULT_RUNTIME_PREFIXES

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if isinstance(self.prefixes, str):
            raise TypeError("prefixes must be a tuple of strings, not a string")
        for prefix in self.prefixes:
            if not prefix:
                raise ValueError("runtime prefix must not be empty")

    def __call__(self, type_name: str) -> bool:
        """Check if type_name is excluded from the dependency graph."""
        return type_name.startswith(self.prefixes) or is_primitive(type_name)

    def extended(self, *prefixes: str) -> RuntimeFilter:
        """Create filter with additional prefixes (duplicates dropped)."""
        merged = tuple(dict.fromkeys((*self.prefixes, *prefixes)))
        return RuntimeFilter(merged)


DEFAULT_RUNTIME_FILTER = RuntimeFilter()


def is_excluded(type_name: str) -> bool:
    """Check if type_name belongs to the platform runtime or is primitive.

    Args:
        type_name: Dotted type name (already normalized)

    Returns:
        True if the name must not be explored or reported
    """
    return DEFAULT_RUNTIME_FILTER(type_name)
