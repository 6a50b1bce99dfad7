"""Class-level dependency collection.

``DependencyCollector`` gathers every type a class refers to from its
declarations, generic signatures, inner-class table and method bodies, and
reports them as dotted names.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from ..exceptions import ClassFormatError
from .constant_pool import ClassConstant, LoadableConstant
from .descriptors import (
    element_class_name,
    field_descriptor_types,
    method_descriptor_types,
    signature_class_references,
)
from .reader import ClassReader
from .visitor import ClassVisitor, InstructionVisitor

EXCLUDED_TYPES = frozenset(
    {"byte", "short", "int", "long", "float", "double", "boolean", "char", "void",
     "java.lang.Object"}
)


@dataclass(frozen=True)
class ExtractedClass:
    """Dotted class name and the dotted names of the types it references."""

    name: str
    dependencies: frozenset[str]


class _BodyCollector(InstructionVisitor):
    def __init__(self, owner: DependencyCollector):
        self._owner = owner

    def visit_type(self, opcode: int, internal_name: str) -> None:
        self._owner.add_internal_name(internal_name)

    def visit_field(self, opcode: int, owner: str, name: str, descriptor: str) -> None:
        self._owner.add_internal_name(owner)
        self._owner.add_all(field_descriptor_types(descriptor))

    def visit_method(
        self, opcode: int, owner: str, name: str, descriptor: str, is_interface: bool
    ) -> None:
        self._owner.add_internal_name(owner)
        self._owner.add_all(method_descriptor_types(descriptor))

    def visit_invoke_dynamic(self, name: str, descriptor: str) -> None:
        self._owner.add_all(method_descriptor_types(descriptor))

    def visit_constant(self, opcode: int, value: LoadableConstant) -> None:
        if isinstance(value, ClassConstant):
            self._owner.add_internal_name(value.internal_name)

    def visit_try_catch_block(self, catch_type: Optional[str]) -> None:
        if catch_type is not None:
            self._owner.add_internal_name(catch_type)

    def visit_local_variable(
        self, name: str, descriptor: Optional[str], signature: Optional[str]
    ) -> None:
        if descriptor is not None:
            self._owner.add_all(field_descriptor_types(descriptor))
        if signature is not None:
            self._owner.add_all(signature_class_references(signature))


class DependencyCollector(ClassVisitor):
    """Accumulates the dotted names of all types a class references.

    Primitives and ``java.lang.Object`` are never recorded, and the visited
    class is removed from its own dependency set.
    """

    def __init__(self) -> None:
        self.class_name: Optional[str] = None
        self._dependencies: set[str] = set()
        self._body = _BodyCollector(self)

    # ── Recording ─────────────────────────────────────────────────

    def add_internal_name(self, internal_name: Optional[str]) -> None:
        if not internal_name:
            return
        element = element_class_name(internal_name)
        if element is None:
            return
        dotted = element.replace("/", ".")
        if dotted not in EXCLUDED_TYPES:
            self._dependencies.add(dotted)

    def add_all(self, internal_names: Iterable[str]) -> None:
        for internal_name in internal_names:
            self.add_internal_name(internal_name)

    @property
    def dependencies(self) -> frozenset[str]:
        own = self.class_name.replace("/", ".") if self.class_name else None
        return frozenset(d for d in self._dependencies if d != own)

    # ── ClassVisitor ──────────────────────────────────────────────

    def visit_class(
        self,
        version: int,
        access: int,
        name: str,
        signature: Optional[str],
        super_name: Optional[str],
        interfaces: Sequence[str],
    ) -> None:
        self.class_name = name
        self.add_internal_name(super_name)
        self.add_all(interfaces)
        if signature is not None:
            self.add_all(signature_class_references(signature))

    def visit_field(
        self, access: int, name: str, descriptor: str, signature: Optional[str]
    ) -> None:
        self.add_all(field_descriptor_types(descriptor))
        if signature is not None:
            self.add_all(signature_class_references(signature))

    def visit_method(
        self,
        access: int,
        name: str,
        descriptor: str,
        signature: Optional[str],
        exceptions: Sequence[str],
    ) -> InstructionVisitor:
        self.add_all(method_descriptor_types(descriptor))
        if signature is not None:
            self.add_all(signature_class_references(signature))
        self.add_all(exceptions)
        return self._body

    def visit_inner_class(
        self, name: str, outer_name: Optional[str], inner_name: Optional[str], access: int
    ) -> None:
        self.add_internal_name(name)


def extract_dependencies(class_bytes: bytes, entry_name: str = "") -> ExtractedClass:
    """Parse one class file and collect its type references.

    Raises:
        ClassFormatError: If the bytes are not a well-formed class file
    """
    try:
        reader = ClassReader(class_bytes)
        collector = DependencyCollector()
        reader.accept(collector)
    except ClassFormatError as e:
        if entry_name and not e.entry_name:
            raise e.for_entry(entry_name) from e
        raise
    return ExtractedClass(name=reader.dotted_name, dependencies=collector.dependencies)
