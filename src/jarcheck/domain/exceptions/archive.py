"""Archive access exceptions."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from jarcheck.domain.exceptions.base import JarCheckError

if TYPE_CHECKING:
    from pathlib import Path


class ArchiveUnreadableError(JarCheckError, OSError):
    """Archive could not be opened or read at all.

    Distinct from a class being absent: the class path itself is unusable.
    Inherits OSError so callers handling I/O failures see it too.

    Attributes:
        path: Archive that failed to open
        reason: Why the archive is unusable
    """

    def __init__(self, path: str | Path, reason: str) -> None:
        # FAIL-FIRST: validate required parameters
        if path is None:
            raise TypeError("path must not be None")
        if not reason:
            raise ValueError("reason must be non-empty string")

        self.path = os.fspath(path)
        self.reason = reason
        super().__init__(f"Cannot read archive {self.path}: {reason}")

    def __str__(self) -> str:
        """Format without OSError's errno decoration."""
        return f"Cannot read archive {self.path}: {self.reason}"
