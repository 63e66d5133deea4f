"""Class file parsing and reference extraction."""

from jarcheck.infrastructure.classfile.extractor import (
    BytecodeReferenceExtractor,
    extract_references,
)
from jarcheck.infrastructure.classfile.reader import ClassFile, MemberInfo, read_class

__all__ = [
    "BytecodeReferenceExtractor",
    "ClassFile",
    "MemberInfo",
    "extract_references",
    "read_class",
]
