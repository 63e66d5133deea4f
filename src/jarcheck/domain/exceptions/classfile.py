"""Class file parsing exceptions."""

from jarcheck.domain.exceptions.base import JarCheckError


class MalformedClassError(JarCheckError, ValueError):
    """Bytes were found but are not a valid compiled class.

    Recovered at the node level by the traversal (the node fails),
    never raised past DependencyChecker.

    Attributes:
        reason: What is wrong with the class file
    """

    def __init__(self, reason: str) -> None:
        # FAIL-FIRST: validate required parameters
        if not reason:
            raise ValueError("reason must be non-empty string")

        self.reason = reason
        super().__init__(f"Malformed class file: {reason}")
