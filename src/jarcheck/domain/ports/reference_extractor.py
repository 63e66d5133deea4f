"""Reference extractor port (interface)."""

from abc import ABC, abstractmethod


class ReferenceExtractorPort(ABC):
    """Port for reading type references out of one compiled class.

    Implementations must be stateless between extract() calls.
    """

    @abstractmethod
    def extract(self, class_bytes: bytes) -> frozenset[str]:
        """Collect the dotted names of classes referenced by method bodies.

        Args:
            class_bytes: Contents of a .class file

        Returns:
            Referenced type names, excluding the class itself

        Raises:
            MalformedClassError: If bytes are not a valid class file
        """
        ...
