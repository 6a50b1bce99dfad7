"""Tests for the byte reader and constant pool."""

import pytest

from jre_trim.bytecode.constant_pool import (
    ByteReader,
    ClassConstant,
    ConstantPool,
    decode_modified_utf8,
)
from jre_trim.exceptions import ClassFormatError


def _pool_bytes(*entries):
    count = len(entries) + 1
    for entry in entries:
        if entry[0] in (5, 6):
            count += 1
    return count.to_bytes(2, "big") + b"".join(entries)


def _utf8(text):
    raw = text.encode("utf-8")
    return bytes([1]) + len(raw).to_bytes(2, "big") + raw


class TestByteReader:
    def test_unsigned_and_signed(self):
        reader = ByteReader(b"\xff\xfe\xff\xff\xff\xfe")
        assert reader.u1() == 0xFF
        assert reader.s1() == -2
        assert reader.s4() == -2

    def test_truncation_raises(self):
        reader = ByteReader(b"\x00")
        with pytest.raises(ClassFormatError):
            reader.u2()

    def test_remaining(self):
        reader = ByteReader(b"\x00\x01\x02")
        reader.skip(1)
        assert reader.remaining == 2


class TestModifiedUtf8:
    def test_plain_ascii(self):
        assert decode_modified_utf8(b"java/lang/String") == "java/lang/String"

    def test_encoded_nul(self):
        assert decode_modified_utf8(b"a\xc0\x80b") == "a\x00b"

    def test_supplementary_character_as_surrogate_pair(self):
        # U+1F600 encoded as two three-byte surrogates
        raw = "\ud83d\ude00".encode("utf-8", "surrogatepass")
        assert decode_modified_utf8(raw) == "\U0001F600"


class TestConstantPool:
    def test_class_entry(self):
        data = _pool_bytes(_utf8("java/sql/Driver"), bytes([7, 0, 1]))
        pool = ConstantPool.parse(ByteReader(data))
        assert pool.class_name(2) == "java/sql/Driver"

    def test_long_takes_two_slots(self):
        data = _pool_bytes(
            bytes([5]) + (42).to_bytes(8, "big"),
            _utf8("after"),
        )
        pool = ConstantPool.parse(ByteReader(data))
        assert pool.loadable(1) == 42
        assert pool.utf8(3) == "after"
        with pytest.raises(ClassFormatError):
            pool.utf8(2)

    def test_ldc_class_constant(self):
        data = _pool_bytes(_utf8("[Ljava/lang/String;"), bytes([7, 0, 1]))
        pool = ConstantPool.parse(ByteReader(data))
        assert pool.loadable(2) == ClassConstant("[Ljava/lang/String;")

    def test_wrong_tag_rejected(self):
        data = _pool_bytes(_utf8("x"))
        pool = ConstantPool.parse(ByteReader(data))
        with pytest.raises(ClassFormatError):
            pool.class_name(1)

    def test_index_out_of_range(self):
        pool = ConstantPool.parse(ByteReader(_pool_bytes(_utf8("x"))))
        with pytest.raises(ClassFormatError):
            pool.utf8(7)

    def test_unknown_tag(self):
        with pytest.raises(ClassFormatError):
            ConstantPool.parse(ByteReader(_pool_bytes(bytes([2, 0, 0]))))
