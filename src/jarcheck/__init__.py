"""jarcheck - verify that jar archives satisfy a Java entry class's dependencies."""

__version__ = "0.1.0"

from jarcheck.application.services.dependency_checker import (  # noqa: E402
    DependencyChecker,
    check_dependencies,
)
from jarcheck.domain.exceptions import (  # noqa: E402
    ArchiveUnreadableError,
    JarCheckError,
    MalformedClassError,
)
from jarcheck.domain.model.check_result import CheckResult  # noqa: E402
from jarcheck.domain.model.configuration import CheckerConfig  # noqa: E402

__all__ = [
    "ArchiveUnreadableError",
    "CheckResult",
    "CheckerConfig",
    "DependencyChecker",
    "JarCheckError",
    "MalformedClassError",
    "__version__",
    "check_dependencies",
]
