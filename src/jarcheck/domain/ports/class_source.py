"""Class source port (interface)."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from collections.abc import Sequence


class ClassSourcePort(ABC):
    """Port for locating compiled class bytes.

    Infrastructure layer must provide implementation.
    Implementations are called from worker threads and must be thread-safe.
    """

    @abstractmethod
    def locate(
        self,
        type_name: str,
        archives: Sequence[str | os.PathLike[str]],
    ) -> bytes | None:
        """Find a class in the first archive that contains it.

        Args:
            type_name: Dotted class name
            archives: Archive locations, searched in order

        Returns:
            Class file bytes, or None if no archive contains the class

        Raises:
            ValueError: If archives is empty
            ArchiveUnreadableError: If an archive cannot be opened or read
        """
        ...
