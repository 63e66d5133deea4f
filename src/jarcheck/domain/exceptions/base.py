"""Base exceptions for jarcheck domain."""


class JarCheckError(Exception):
    """Root exception for all jarcheck errors.

    All domain exceptions inherit from this.
    Allows catching all jarcheck-specific errors.
    """
