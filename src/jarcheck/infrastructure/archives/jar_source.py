"""Jar archive class source.

Implements ClassSourcePort with stdlib zipfile.
Each archive is opened and closed per lookup.
"""

from __future__ import annotations

import os
import zipfile
import zlib
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path

from jarcheck.domain.exceptions.archive import ArchiveUnreadableError
from jarcheck.domain.model.type_name import class_entry_path
from jarcheck.domain.ports.class_source import ClassSourcePort


class JarClassSource(ClassSourcePort):
    """Locates class files in jar (zip) archives.

    Stateless: no handles kept between locate() calls.
    First-match-wins over the archive order.

    FAIL-FIRST: raises ArchiveUnreadableError on any archive I/O issue.
    """

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
        if not archives:
            raise ValueError("archives must not be empty")

        entry = class_entry_path(type_name)
        for archive in archives:
            data = read_entry(archive, entry)
            if data is not None:
                return data
        return None


@contextmanager
def open_archive(archive: str | os.PathLike[str]) -> Iterator[zipfile.ZipFile]:
    """Open a zip archive, mapping every I/O failure to ArchiveUnreadableError.

    Errors raised while the archive is in use (corrupt entries) are mapped too.
    """
    path = Path(archive)
    try:
        with zipfile.ZipFile(path) as jar:
            yield jar
    except FileNotFoundError as e:
        raise ArchiveUnreadableError(path, "file not found") from e
    except IsADirectoryError as e:
        raise ArchiveUnreadableError(path, "is a directory") from e
    except PermissionError as e:
        raise ArchiveUnreadableError(path, "permission denied") from e
    except zipfile.BadZipFile as e:
        raise ArchiveUnreadableError(path, f"corrupt archive: {e}") from e
    except (zlib.error, EOFError) as e:
        raise ArchiveUnreadableError(path, f"corrupt entry: {e}") from e
    except OSError as e:
        raise ArchiveUnreadableError(path, e.strerror or str(e)) from e


def read_entry(archive: str | os.PathLike[str], entry: str) -> bytes | None:
    """Read one entry from a zip archive.

    Args:
        archive: Archive path
        entry: Entry path inside the archive (com/acme/Foo.class)

    Returns:
        Entry bytes, or None if the archive has no such entry

    Raises:
        ArchiveUnreadableError: If the archive or the entry cannot be read
    """
    with open_archive(archive) as jar:
        try:
            info = jar.getinfo(entry)
        except KeyError:
            return None
        return jar.read(info)


def list_entries(archive: str | os.PathLike[str]) -> frozenset[str]:
    """All entry names of a zip archive.

    Raises:
        ArchiveUnreadableError: If the archive cannot be opened
    """
    with open_archive(archive) as jar:
        return frozenset(jar.namelist())
