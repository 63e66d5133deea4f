"""Type names from descriptors and class operands."""

from __future__ import annotations

from jarcheck.domain.exceptions.classfile import MalformedClassError
from jarcheck.domain.predicates.runtime import PRIMITIVE_TOKENS


def field_type(descriptor: str) -> str | None:
    """Class referenced by a field descriptor.

    Array dimensions are dropped: [[Lcom/acme/Foo; → com.acme.Foo.

    Returns:
        Dotted class name, or None for primitive (and primitive array) types

    Raises:
        MalformedClassError: If descriptor is not a field descriptor
    """
    element = descriptor.lstrip("[")
    if len(element) == 1 and element in PRIMITIVE_TOKENS:
        return None
    if len(element) > 2 and element.startswith("L") and element.endswith(";"):
        return element[1:-1].replace("/", ".")
    raise MalformedClassError(f"invalid field descriptor {descriptor!r}")


def class_operand(internal_name: str) -> str | None:
    """Class referenced by a CONSTANT_Class operand.

    Operands are internal names (com/acme/Foo) or, for array classes,
    array descriptors ([Lcom/acme/Foo; or [I).

    Returns:
        Dotted class name, or None for primitive arrays
    """
    if not internal_name:
        raise MalformedClassError("empty class name in constant pool")
    if internal_name.startswith("["):
        return field_type(internal_name)
    return internal_name.replace("/", ".")
