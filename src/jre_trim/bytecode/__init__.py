"""Java class-file parsing and type-reference extraction."""

from .collector import DependencyCollector, ExtractedClass, extract_dependencies
from .descriptors import (
    element_class_name,
    field_descriptor_types,
    method_descriptor_types,
    signature_class_references,
)
from .reader import ClassReader
from .visitor import ClassVisitor, InstructionVisitor

__all__ = [
    "ClassReader",
    "ClassVisitor",
    "DependencyCollector",
    "ExtractedClass",
    "InstructionVisitor",
    "element_class_name",
    "extract_dependencies",
    "field_descriptor_types",
    "method_descriptor_types",
    "signature_class_references",
]
