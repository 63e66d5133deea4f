"""Indexed jar class source.

Caches each archive's entry index so archives without the requested
class are skipped without being reopened.
"""

from __future__ import annotations

import os
import threading
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from jarcheck.domain.exceptions.archive import ArchiveUnreadableError
from jarcheck.domain.model.type_name import class_entry_path
from jarcheck.domain.ports.class_source import ClassSourcePort
from jarcheck.infrastructure.archives.jar_source import list_entries, read_entry

# (mtime_ns, size): archive identity for cache invalidation
_StatKey = tuple[int, int]


@dataclass
class IndexedClassSource(ClassSourcePort):
    """Jar class source with an in-memory entry index per archive.

    Returns exactly what JarClassSource returns. Index entries are
    invalidated when an archive's mtime or size changes.

    Cache is in-memory only - no persistence between runs.
    Thread-safe.

    Attributes:
        _indexes: Path → (stat key, entry names) mapping
    """

    _indexes: dict[Path, tuple[_StatKey, frozenset[str]]] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def locate(
        self,
        type_name: str,
        archives: Sequence[str | os.PathLike[str]],
    ) -> bytes | None:
        """Find a class in the first archive whose index lists it.

        Args:
            type_name: Dotted class name
            archives: Archive locations, searched in order

        Returns:
            Class file bytes, or None if no archive contains the class

        Raises:
            ValueError: If archives is empty
            ArchiveUnreadableError: If an archive cannot be opened or read
        """
        if not archives:
            raise ValueError("archives must not be empty")

        entry = class_entry_path(type_name)
        for archive in archives:
            path = Path(archive)
            if entry not in self.entries(path):
                continue
            data = read_entry(path, entry)
            # None only if the archive was rewritten after indexing
            if data is not None:
                return data
        return None

    def entries(self, archive: Path) -> frozenset[str]:
        """Entry names of archive, from cache when unchanged.

        Raises:
            ArchiveUnreadableError: If the archive cannot be stat'ed or opened
        """
        key = _stat_key(archive)
        with self._lock:
            cached = self._indexes.get(archive)
        if cached is not None and cached[0] == key:
            return cached[1]

        names = list_entries(archive)
        with self._lock:
            self._indexes[archive] = (key, names)
        return names


def _stat_key(archive: Path) -> _StatKey:
    try:
        stat = archive.stat()
    except FileNotFoundError as e:
        raise ArchiveUnreadableError(archive, "file not found") from e
    except PermissionError as e:
        raise ArchiveUnreadableError(archive, "permission denied") from e
    except OSError as e:
        raise ArchiveUnreadableError(archive, e.strerror or str(e)) from e
    return (stat.st_mtime_ns, stat.st_size)
