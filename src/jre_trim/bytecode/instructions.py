"""Bytecode instruction walker.

Decodes a ``Code`` attribute's instruction array just far enough to find
the constant-pool operands that name types, fields, methods and constants.
"""

from __future__ import annotations

from . import opcodes as op
from ..exceptions import ClassFormatError
from .constant_pool import ByteReader, ConstantPool
from .visitor import InstructionVisitor


def walk_instructions(code: bytes, pool: ConstantPool, visitor: InstructionVisitor) -> None:
    """Dispatch every type-bearing instruction in ``code`` to ``visitor``.

    Raises:
        ClassFormatError: On an unknown opcode or truncated operands
    """
    reader = ByteReader(code)
    end = len(code)

    while reader.offset < end:
        start = reader.offset
        opcode = reader.u1()
        if opcode > op.MAX_OPCODE:
            raise ClassFormatError(f"invalid opcode {opcode:#x}", offset=start)

        if opcode in op.TYPE_OPCODES:
            visitor.visit_type(opcode, pool.class_name(reader.u2()))
        elif opcode == op.MULTIANEWARRAY:
            visitor.visit_type(opcode, pool.class_name(reader.u2()))
            reader.skip(1)
        elif opcode in op.FIELD_OPCODES:
            owner, name, descriptor, _ = pool.member_ref(reader.u2())
            visitor.visit_field(opcode, owner, name, descriptor)
        elif opcode in op.METHOD_OPCODES:
            owner, name, descriptor, is_interface = pool.member_ref(reader.u2())
            visitor.visit_method(opcode, owner, name, descriptor, is_interface)
            if opcode == op.INVOKEINTERFACE:
                # count, 0
                reader.skip(2)
        elif opcode == op.INVOKEDYNAMIC:
            name, descriptor = pool.invoke_dynamic(reader.u2())
            visitor.visit_invoke_dynamic(name, descriptor)
            reader.skip(2)
        elif opcode == op.LDC:
            visitor.visit_constant(opcode, pool.loadable(reader.u1()))
        elif opcode in (op.LDC_W, op.LDC2_W):
            visitor.visit_constant(opcode, pool.loadable(reader.u2()))
        elif opcode == op.TABLESWITCH:
            _skip_padding(reader, start)
            reader.skip(4)  # default
            low = reader.s4()
            high = reader.s4()
            if high < low:
                raise ClassFormatError("tableswitch high < low", offset=start)
            reader.skip(4 * (high - low + 1))
        elif opcode == op.LOOKUPSWITCH:
            _skip_padding(reader, start)
            reader.skip(4)  # default
            npairs = reader.s4()
            if npairs < 0:
                raise ClassFormatError("lookupswitch npairs < 0", offset=start)
            reader.skip(8 * npairs)
        elif opcode == op.WIDE:
            modified = reader.u1()
            reader.skip(4 if modified == op.IINC else 2)
        else:
            reader.skip(op.OPERAND_LENGTHS[opcode])


def _skip_padding(reader: ByteReader, instruction_start: int) -> None:
    # Operands start at the next 4-byte boundary relative to the code array
    reader.skip((4 - (instruction_start + 1) % 4) % 4)
