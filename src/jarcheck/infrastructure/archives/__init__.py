"""Archive access adapters."""

from jarcheck.infrastructure.archives.indexed_source import IndexedClassSource
from jarcheck.infrastructure.archives.jar_source import JarClassSource

__all__ = [
    "IndexedClassSource",
    "JarClassSource",
]
