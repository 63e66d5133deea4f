"""Tests for domain/exceptions/base.py."""

import pytest

from jarcheck.domain.exceptions import (
    ArchiveUnreadableError,
    JarCheckError,
    MalformedClassError,
)


class TestJarCheckError:
    """Tests for JarCheckError base exception."""

    def test_is_exception(self) -> None:
        """JarCheckError inherits from Exception."""
        assert issubclass(JarCheckError, Exception)

    def test_can_raise_and_catch(self) -> None:
        """Can raise and catch JarCheckError."""
        with pytest.raises(JarCheckError):
            raise JarCheckError("test error")

    def test_catches_all_library_errors(self) -> None:
        """One except clause covers archive and class file errors."""
        for error in (ArchiveUnreadableError("a.jar", "gone"), MalformedClassError("bad")):
            with pytest.raises(JarCheckError):
                raise error
