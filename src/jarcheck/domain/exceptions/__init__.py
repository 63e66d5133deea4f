"""Domain exceptions."""

from jarcheck.domain.exceptions.archive import ArchiveUnreadableError
from jarcheck.domain.exceptions.base import JarCheckError
from jarcheck.domain.exceptions.classfile import MalformedClassError

__all__ = [
    "JarCheckError",
    "ArchiveUnreadableError",
    "MalformedClassError",
]
