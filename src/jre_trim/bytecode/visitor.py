"""Visitor protocols driven by :class:`~jre_trim.bytecode.reader.ClassReader`.

Subclasses override only the callbacks they care about; the defaults do
nothing.
"""

from __future__ import annotations

from typing import Optional, Sequence

from .constant_pool import LoadableConstant


class InstructionVisitor:
    """Receives the type-bearing parts of one method body."""

    def visit_type(self, opcode: int, internal_name: str) -> None:
        """``new``, ``anewarray``, ``checkcast``, ``instanceof``, ``multianewarray``."""

    def visit_field(self, opcode: int, owner: str, name: str, descriptor: str) -> None:
        """``getfield``, ``putfield``, ``getstatic``, ``putstatic``."""

    def visit_method(
        self, opcode: int, owner: str, name: str, descriptor: str, is_interface: bool
    ) -> None:
        """``invokevirtual``, ``invokespecial``, ``invokestatic``, ``invokeinterface``."""

    def visit_invoke_dynamic(self, name: str, descriptor: str) -> None:
        """``invokedynamic`` call site (lambda and string-concat bootstraps)."""

    def visit_constant(self, opcode: int, value: LoadableConstant) -> None:
        """``ldc``, ``ldc_w``, ``ldc2_w``."""

    def visit_try_catch_block(self, catch_type: Optional[str]) -> None:
        """One exception-table entry; None for ``finally`` handlers."""

    def visit_local_variable(
        self, name: str, descriptor: Optional[str], signature: Optional[str]
    ) -> None:
        """One LocalVariableTable or LocalVariableTypeTable entry."""


class ClassVisitor:
    """Receives the declarations of one class file."""

    def visit_class(
        self,
        version: int,
        access: int,
        name: str,
        signature: Optional[str],
        super_name: Optional[str],
        interfaces: Sequence[str],
    ) -> None:
        pass

    def visit_field(
        self, access: int, name: str, descriptor: str, signature: Optional[str]
    ) -> None:
        pass

    def visit_method(
        self,
        access: int,
        name: str,
        descriptor: str,
        signature: Optional[str],
        exceptions: Sequence[str],
    ) -> Optional[InstructionVisitor]:
        """Return a visitor for the method body, or None to skip it."""
        return None

    def visit_inner_class(
        self, name: str, outer_name: Optional[str], inner_name: Optional[str], access: int
    ) -> None:
        pass

    def visit_end(self) -> None:
        pass
