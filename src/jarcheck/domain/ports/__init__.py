"""Domain ports (interfaces)."""

from jarcheck.domain.ports.class_source import ClassSourcePort
from jarcheck.domain.ports.reference_extractor import ReferenceExtractorPort

__all__ = [
    "ClassSourcePort",
    "ReferenceExtractorPort",
]
