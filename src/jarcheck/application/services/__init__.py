"""Application services for class-path analysis.

DependencyChecker is the main facade for running dependency checks.
"""

from jarcheck.application.services.dependency_checker import (
    DependencyChecker,
    check_dependencies,
)

__all__ = [
    "DependencyChecker",
    "check_dependencies",
]
