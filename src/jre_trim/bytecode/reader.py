"""Class-file reader.

``ClassReader`` parses the structure once and replays it into a
:class:`~jre_trim.bytecode.visitor.ClassVisitor`. Attributes that carry no
type references (line numbers, stack maps, annotations) are skipped.
"""

from __future__ import annotations

from typing import Optional

from ..exceptions import ClassFormatError
from .constant_pool import ByteReader, ConstantPool
from .instructions import walk_instructions
from .visitor import ClassVisitor, InstructionVisitor

MAGIC = 0xCAFEBABE

ATTR_CODE = "Code"
ATTR_EXCEPTIONS = "Exceptions"
ATTR_SIGNATURE = "Signature"
ATTR_INNER_CLASSES = "InnerClasses"
ATTR_LOCAL_VARIABLE_TABLE = "LocalVariableTable"
ATTR_LOCAL_VARIABLE_TYPE_TABLE = "LocalVariableTypeTable"


class ClassReader:
    """Parsed header of one class file.

    Args:
        data: Raw class-file bytes

    Raises:
        ClassFormatError: If the magic number, constant pool or header is invalid
    """

    def __init__(self, data: bytes):
        self.data = data
        reader = ByteReader(data)
        if len(data) < 10 or reader.u4() != MAGIC:
            raise ClassFormatError("bad magic number", offset=0)
        self.minor_version = reader.u2()
        self.major_version = reader.u2()
        self.pool = ConstantPool.parse(reader)
        self.access = reader.u2()
        self.class_name = self.pool.class_name(reader.u2())
        self.super_name = self.pool.optional_class_name(reader.u2())
        self.interfaces = tuple(self.pool.class_name(reader.u2()) for _ in range(reader.u2()))
        self._body_offset = reader.offset

    @property
    def dotted_name(self) -> str:
        return self.class_name.replace("/", ".")

    def accept(self, visitor: ClassVisitor) -> None:
        """Replay the class structure into ``visitor``."""
        reader = ByteReader(self.data, self._body_offset)
        pool = self.pool

        fields = [self._read_member(reader) for _ in range(reader.u2())]
        methods = [self._read_member(reader) for _ in range(reader.u2())]
        class_attributes = self._read_attributes(reader)

        signature = self._signature(class_attributes)
        visitor.visit_class(
            self.major_version,
            self.access,
            self.class_name,
            signature,
            self.super_name,
            self.interfaces,
        )

        for access, name, descriptor, attributes in fields:
            visitor.visit_field(access, name, descriptor, self._signature(attributes))

        for access, name, descriptor, attributes in methods:
            exceptions: tuple[str, ...] = ()
            if ATTR_EXCEPTIONS in attributes:
                body = ByteReader(attributes[ATTR_EXCEPTIONS])
                exceptions = tuple(pool.class_name(body.u2()) for _ in range(body.u2()))
            method_visitor = visitor.visit_method(
                access, name, descriptor, self._signature(attributes), exceptions
            )
            if method_visitor is not None and ATTR_CODE in attributes:
                self._accept_code(attributes[ATTR_CODE], method_visitor)

        if ATTR_INNER_CLASSES in class_attributes:
            body = ByteReader(class_attributes[ATTR_INNER_CLASSES])
            for _ in range(body.u2()):
                inner = pool.class_name(body.u2())
                outer = pool.optional_class_name(body.u2())
                simple = pool.optional_utf8(body.u2())
                visitor.visit_inner_class(inner, outer, simple, body.u2())

        visitor.visit_end()

    def _read_member(self, reader: ByteReader) -> tuple[int, str, str, dict[str, bytes]]:
        access = reader.u2()
        name = self.pool.utf8(reader.u2())
        descriptor = self.pool.utf8(reader.u2())
        return access, name, descriptor, self._read_attributes(reader)

    def _read_attributes(self, reader: ByteReader) -> dict[str, bytes]:
        attributes: dict[str, bytes] = {}
        for _ in range(reader.u2()):
            name = self.pool.utf8(reader.u2())
            length = reader.u4()
            attributes[name] = reader.read(length)
        return attributes

    def _signature(self, attributes: dict[str, bytes]) -> Optional[str]:
        raw = attributes.get(ATTR_SIGNATURE)
        if raw is None:
            return None
        return self.pool.utf8(ByteReader(raw).u2())

    def _accept_code(self, raw: bytes, visitor: InstructionVisitor) -> None:
        pool = self.pool
        reader = ByteReader(raw)
        reader.skip(4)  # max_stack, max_locals
        code = reader.read(reader.u4())
        walk_instructions(code, pool, visitor)

        for _ in range(reader.u2()):
            reader.skip(6)  # start_pc, end_pc, handler_pc
            visitor.visit_try_catch_block(pool.optional_class_name(reader.u2()))

        attributes = self._read_attributes(reader)
        if ATTR_LOCAL_VARIABLE_TABLE in attributes:
            table = ByteReader(attributes[ATTR_LOCAL_VARIABLE_TABLE])
            for _ in range(table.u2()):
                table.skip(4)  # start_pc, length
                name = pool.utf8(table.u2())
                descriptor = pool.utf8(table.u2())
                table.skip(2)  # index
                visitor.visit_local_variable(name, descriptor, None)
        if ATTR_LOCAL_VARIABLE_TYPE_TABLE in attributes:
            table = ByteReader(attributes[ATTR_LOCAL_VARIABLE_TYPE_TABLE])
            for _ in range(table.u2()):
                table.skip(4)
                name = pool.utf8(table.u2())
                signature = pool.utf8(table.u2())
                table.skip(2)
                visitor.visit_local_variable(name, None, signature)
