"""Class-file byte reader and constant pool.

Layout follows JVMS chapter 4. ``Long`` and ``Double`` entries occupy two
pool slots; the slot after them is unusable.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Any, Optional, Union

from ..exceptions import ClassFormatError

CONSTANT_UTF8 = 1
CONSTANT_INTEGER = 3
CONSTANT_FLOAT = 4
CONSTANT_LONG = 5
CONSTANT_DOUBLE = 6
CONSTANT_CLASS = 7
CONSTANT_STRING = 8
CONSTANT_FIELDREF = 9
CONSTANT_METHODREF = 10
CONSTANT_INTERFACE_METHODREF = 11
CONSTANT_NAME_AND_TYPE = 12
CONSTANT_METHOD_HANDLE = 15
CONSTANT_METHOD_TYPE = 16
CONSTANT_DYNAMIC = 17
CONSTANT_INVOKE_DYNAMIC = 18
CONSTANT_MODULE = 19
CONSTANT_PACKAGE = 20

_U2 = struct.Struct(">H")
_S2 = struct.Struct(">h")
_U4 = struct.Struct(">I")
_S4 = struct.Struct(">i")
_S8 = struct.Struct(">q")
_F4 = struct.Struct(">f")
_F8 = struct.Struct(">d")


class ByteReader:
    """Big-endian cursor over a bytes buffer.

    Every read checks bounds and raises ClassFormatError on truncation.
    """

    __slots__ = ("data", "offset")

    def __init__(self, data: bytes, offset: int = 0):
        self.data = data
        self.offset = offset

    def _require(self, count: int) -> int:
        start = self.offset
        if count < 0 or start + count > len(self.data):
            raise ClassFormatError(
                f"unexpected end of data reading {count} bytes", offset=start
            )
        self.offset = start + count
        return start

    @property
    def remaining(self) -> int:
        return len(self.data) - self.offset

    def u1(self) -> int:
        return self.data[self._require(1)]

    def s1(self) -> int:
        value = self.u1()
        return value - 256 if value > 127 else value

    def u2(self) -> int:
        return _U2.unpack_from(self.data, self._require(2))[0]

    def s2(self) -> int:
        return _S2.unpack_from(self.data, self._require(2))[0]

    def u4(self) -> int:
        return _U4.unpack_from(self.data, self._require(4))[0]

    def s4(self) -> int:
        return _S4.unpack_from(self.data, self._require(4))[0]

    def s8(self) -> int:
        return _S8.unpack_from(self.data, self._require(8))[0]

    def f4(self) -> float:
        return _F4.unpack_from(self.data, self._require(4))[0]

    def f8(self) -> float:
        return _F8.unpack_from(self.data, self._require(8))[0]

    def read(self, count: int) -> bytes:
        start = self._require(count)
        return self.data[start : start + count]

    def skip(self, count: int) -> None:
        self._require(count)


def decode_modified_utf8(raw: bytes) -> str:
    """Decode the JVM's modified UTF-8.

    Differs from standard UTF-8 in encoding NUL as ``C0 80`` and supplementary
    characters as surrogate pairs of three bytes each.
    """
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        pass
    try:
        text = raw.replace(b"\xc0\x80", b"\x00").decode("utf-8", "surrogatepass")
        # Recombine surrogate pairs
        return text.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "surrogatepass")
    except UnicodeError as e:
        raise ClassFormatError(f"invalid modified UTF-8 constant: {e}")


@dataclass(frozen=True)
class ClassConstant:
    """A class literal loaded by ``ldc``; the name may be an array descriptor."""

    internal_name: str


@dataclass(frozen=True)
class MethodTypeConstant:
    descriptor: str


@dataclass(frozen=True)
class OpaqueConstant:
    """A loadable constant whose contents carry no type reference we track."""

    tag: int


LoadableConstant = Union[int, float, str, ClassConstant, MethodTypeConstant, OpaqueConstant]


class ConstantPool:
    """Parsed constant pool with typed accessors.

    Entries are stored as ``(tag, payload)``; index 0 and the second slot of
    wide entries hold None.
    """

    def __init__(self, entries: list[Optional[tuple[int, Any]]]):
        self._entries = entries

    def __len__(self) -> int:
        return len(self._entries)

    @classmethod
    def parse(cls, reader: ByteReader) -> ConstantPool:
        count = reader.u2()
        entries: list[Optional[tuple[int, Any]]] = [None] * max(count, 1)
        index = 1
        while index < count:
            tag = reader.u1()
            if tag == CONSTANT_UTF8:
                length = reader.u2()
                entries[index] = (tag, decode_modified_utf8(reader.read(length)))
            elif tag == CONSTANT_INTEGER:
                entries[index] = (tag, reader.s4())
            elif tag == CONSTANT_FLOAT:
                entries[index] = (tag, reader.f4())
            elif tag in (CONSTANT_LONG, CONSTANT_DOUBLE):
                value = reader.s8() if tag == CONSTANT_LONG else reader.f8()
                entries[index] = (tag, value)
                index += 1
            elif tag in (CONSTANT_CLASS, CONSTANT_STRING, CONSTANT_METHOD_TYPE,
                         CONSTANT_MODULE, CONSTANT_PACKAGE):
                entries[index] = (tag, reader.u2())
            elif tag in (CONSTANT_FIELDREF, CONSTANT_METHODREF, CONSTANT_INTERFACE_METHODREF,
                         CONSTANT_NAME_AND_TYPE, CONSTANT_DYNAMIC, CONSTANT_INVOKE_DYNAMIC):
                entries[index] = (tag, (reader.u2(), reader.u2()))
            elif tag == CONSTANT_METHOD_HANDLE:
                entries[index] = (tag, (reader.u1(), reader.u2()))
            else:
                raise ClassFormatError(
                    f"unknown constant pool tag {tag} at index {index}",
                    offset=reader.offset - 1,
                )
            index += 1
        return cls(entries)

    def _entry(self, index: int, *expected: int) -> tuple[int, Any]:
        if not 0 < index < len(self._entries) or self._entries[index] is None:
            raise ClassFormatError(f"invalid constant pool index {index}")
        entry = self._entries[index]
        if expected and entry[0] not in expected:
            raise ClassFormatError(
                f"constant pool index {index} has tag {entry[0]}, expected {expected}"
            )
        return entry

    def tag(self, index: int) -> int:
        return self._entry(index)[0]

    def utf8(self, index: int) -> str:
        return self._entry(index, CONSTANT_UTF8)[1]

    def optional_utf8(self, index: int) -> Optional[str]:
        return self.utf8(index) if index else None

    def class_name(self, index: int) -> str:
        """Internal name of a ``Class`` entry (may be an array descriptor)."""
        return self.utf8(self._entry(index, CONSTANT_CLASS)[1])

    def optional_class_name(self, index: int) -> Optional[str]:
        return self.class_name(index) if index else None

    def name_and_type(self, index: int) -> tuple[str, str]:
        name_index, descriptor_index = self._entry(index, CONSTANT_NAME_AND_TYPE)[1]
        return self.utf8(name_index), self.utf8(descriptor_index)

    def member_ref(self, index: int) -> tuple[str, str, str, bool]:
        """``(owner, name, descriptor, is_interface)`` of a field or method ref."""
        tag, (class_index, nat_index) = self._entry(
            index, CONSTANT_FIELDREF, CONSTANT_METHODREF, CONSTANT_INTERFACE_METHODREF
        )
        name, descriptor = self.name_and_type(nat_index)
        return self.class_name(class_index), name, descriptor, tag == CONSTANT_INTERFACE_METHODREF

    def invoke_dynamic(self, index: int) -> tuple[str, str]:
        _, (_, nat_index) = self._entry(index, CONSTANT_INVOKE_DYNAMIC)
        return self.name_and_type(nat_index)

    def loadable(self, index: int) -> LoadableConstant:
        """Value pushed by ``ldc``, ``ldc_w`` or ``ldc2_w``."""
        tag, payload = self._entry(index)
        if tag in (CONSTANT_INTEGER, CONSTANT_FLOAT, CONSTANT_LONG, CONSTANT_DOUBLE):
            return payload
        if tag == CONSTANT_STRING:
            return self.utf8(payload)
        if tag == CONSTANT_CLASS:
            return ClassConstant(self.utf8(payload))
        if tag == CONSTANT_METHOD_TYPE:
            return MethodTypeConstant(self.utf8(payload))
        if tag in (CONSTANT_METHOD_HANDLE, CONSTANT_DYNAMIC):
            return OpaqueConstant(tag)
        raise ClassFormatError(f"constant pool index {index} (tag {tag}) is not loadable")
