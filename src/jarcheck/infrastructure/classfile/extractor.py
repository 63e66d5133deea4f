"""Bytecode reference extractor."""

from __future__ import annotations

import logging

from jarcheck.domain.ports.reference_extractor import ReferenceExtractorPort
from jarcheck.domain.predicates.runtime import DEFAULT_RUNTIME_FILTER, RuntimeFilter
from jarcheck.infrastructure.classfile.constant_pool import (
    METHOD_REF_TAGS,
    ConstantPool,
    ConstantTag,
)
from jarcheck.infrastructure.classfile.descriptors import class_operand, field_type
from jarcheck.infrastructure.classfile.opcodes import (
    FIELD_INSNS,
    METHOD_INSNS,
    TYPE_INSNS,
    iter_instructions,
)
from jarcheck.infrastructure.classfile.reader import read_class

logger = logging.getLogger(__name__)


class BytecodeReferenceExtractor(ReferenceExtractorPort):
    """Extracts referenced types from method bodies.

    Single linear scan per method: every instruction is matched against
    three categories (method call, field access, type operand) and the
    operand's constant pool entry resolved to a type name.

    Stateless between extract() calls, safe to share between threads.
    """

    def __init__(self, runtime_filter: RuntimeFilter = DEFAULT_RUNTIME_FILTER) -> None:
        """Initialize extractor.

        Args:
            runtime_filter: Names to drop from the result (runtime classes)
        """
        if runtime_filter is None:
            raise TypeError("runtime_filter must not be None")
        self._filter = runtime_filter

    def extract(self, class_bytes: bytes) -> frozenset[str]:
        """Collect non-runtime types referenced by the class's method bodies.

        Args:
            class_bytes: Contents of a .class file

        Returns:
            Dotted type names, without the class itself

        Raises:
            MalformedClassError: If bytes are not a valid class file
        """
        classfile = read_class(class_bytes)
        pool = classfile.constant_pool

        found: set[str] = set()
        for code in classfile.method_bodies:
            found.update(_scan_code(code, pool))

        found.discard(classfile.name)
        references = frozenset(name for name in found if not self._filter(name))
        logger.debug("%s references %d classes", classfile.name, len(references))
        return references


def _scan_code(code: bytes, pool: ConstantPool) -> set[str]:
    """Raw type references of one method body."""
    found: set[str | None] = set()

    for pc, opcode in iter_instructions(code):
        if opcode in METHOD_INSNS:
            ref = pool.member_ref(_u2(code, pc + 1), *METHOD_REF_TAGS)
            found.add(class_operand(ref.owner))
        elif opcode in FIELD_INSNS:
            ref = pool.member_ref(_u2(code, pc + 1), ConstantTag.FIELDREF)
            found.add(class_operand(ref.owner))
            found.add(field_type(ref.descriptor))
        elif opcode in TYPE_INSNS:
            found.add(class_operand(pool.class_name(_u2(code, pc + 1))))

    # None marks primitive element types
    return {name for name in found if name is not None}


def _u2(code: bytes, offset: int) -> int:
    return (code[offset] << 8) | code[offset + 1]


def extract_references(
    class_bytes: bytes,
    runtime_filter: RuntimeFilter = DEFAULT_RUNTIME_FILTER,
) -> frozenset[str]:
    """Referenced non-runtime types of one compiled class.

    Convenience wrapper around BytecodeReferenceExtractor.
    """
    return BytecodeReferenceExtractor(runtime_filter).extract(class_bytes)
