"""Descriptor and generic-signature decoding.

Both return internal (slash-separated) class names. Array types are reduced
to their element type and primitives are dropped.
"""

from __future__ import annotations

from typing import Optional

from ..exceptions import ClassFormatError

PRIMITIVE_DESCRIPTORS = frozenset("BCDFIJSZV")

# Deepest type-argument nesting accepted in a generic signature
MAX_SIGNATURE_DEPTH = 64


def _read_type(descriptor: str, pos: int, out: list[str]) -> int:
    """Decode one field type starting at ``pos``; return the next position."""
    length = len(descriptor)
    while pos < length and descriptor[pos] == "[":
        pos += 1
    if pos >= length:
        raise ClassFormatError(f"truncated descriptor {descriptor!r}")
    char = descriptor[pos]
    if char in PRIMITIVE_DESCRIPTORS:
        return pos + 1
    if char == "L":
        end = descriptor.find(";", pos)
        if end < 0:
            raise ClassFormatError(f"unterminated class type in descriptor {descriptor!r}")
        out.append(descriptor[pos + 1 : end])
        return end + 1
    raise ClassFormatError(f"unexpected {char!r} in descriptor {descriptor!r}")


def field_descriptor_types(descriptor: str) -> list[str]:
    """Class names in a field descriptor such as ``[Ljava/util/List;``."""
    out: list[str] = []
    end = _read_type(descriptor, 0, out)
    if end != len(descriptor):
        raise ClassFormatError(f"trailing data in field descriptor {descriptor!r}")
    return out


def method_descriptor_types(descriptor: str) -> list[str]:
    """Class names among the parameters and return type of a method descriptor."""
    if not descriptor.startswith("("):
        raise ClassFormatError(f"method descriptor must start with '(': {descriptor!r}")
    out: list[str] = []
    pos = 1
    while pos < len(descriptor) and descriptor[pos] != ")":
        pos = _read_type(descriptor, pos, out)
    if pos >= len(descriptor):
        raise ClassFormatError(f"unterminated parameter list in {descriptor!r}")
    end = _read_type(descriptor, pos + 1, out)
    if end != len(descriptor):
        raise ClassFormatError(f"trailing data in method descriptor {descriptor!r}")
    return out


def element_class_name(internal_name: str) -> Optional[str]:
    """Strip array dimensions from a class-constant name.

    ``[[Ljava/lang/String;`` -> ``java/lang/String``; ``[I`` -> None; plain
    names pass through.
    """
    if not internal_name.startswith("["):
        return internal_name
    out: list[str] = []
    _read_type(internal_name, 0, out)
    return out[0] if out else None


class _SignatureScanner:
    """Recursive-descent walk over a generic signature (JVMS 4.7.9.1).

    Handles class, method and field signatures alike. Each class type is
    reported by its binary name, so ``Lcom/a/Outer<TT;>.Inner;`` yields both
    ``com/a/Outer`` and ``com/a/Outer$Inner``.
    """

    def __init__(self, signature: str):
        self.sig = signature
        self.pos = 0
        self.found: list[str] = []
        self.depth = 0

    def fail(self, reason: str) -> ClassFormatError:
        return ClassFormatError(f"{reason} at position {self.pos} in signature {self.sig!r}")

    def peek(self) -> str:
        if self.pos >= len(self.sig):
            raise self.fail("unexpected end")
        return self.sig[self.pos]

    def expect(self, char: str) -> None:
        if self.peek() != char:
            raise self.fail(f"expected {char!r}")
        self.pos += 1

    def identifier(self, stops: str) -> str:
        start = self.pos
        while self.pos < len(self.sig) and self.sig[self.pos] not in stops:
            self.pos += 1
        if self.pos == start:
            raise self.fail("empty identifier")
        return self.sig[start : self.pos]

    def scan(self) -> list[str]:
        if self.sig.startswith("<"):
            self.type_parameters()
        if self.pos < len(self.sig) and self.sig[self.pos] == "(":
            self.pos += 1
            while self.peek() != ")":
                self.java_type()
            self.pos += 1
            self.java_type()
            while self.pos < len(self.sig):
                self.expect("^")
                self.java_type()
        else:
            while self.pos < len(self.sig):
                self.java_type()
        return self.found

    def type_parameters(self) -> None:
        self.expect("<")
        while self.peek() != ">":
            self.identifier(":")
            # Class bound (may be empty) then interface bounds
            self.expect(":")
            if self.peek() not in ":>":
                self.java_type()
            while self.peek() == ":":
                self.pos += 1
                self.java_type()
        self.pos += 1

    def java_type(self) -> None:
        while self.peek() == "[":
            self.pos += 1
        char = self.peek()
        if char in PRIMITIVE_DESCRIPTORS:
            self.pos += 1
        elif char == "T":
            self.pos += 1
            self.identifier(";")
            self.expect(";")
        elif char == "L":
            self.class_type()
        else:
            raise self.fail(f"unexpected {char!r}")

    def class_type(self) -> None:
        self.expect("L")
        name = self.identifier("<.;")
        self.found.append(name)
        if self.peek() == "<":
            self.type_arguments()
        while self.peek() == ".":
            self.pos += 1
            name = f"{name}${self.identifier('<.;')}"
            self.found.append(name)
            if self.peek() == "<":
                self.type_arguments()
        self.expect(";")

    def type_arguments(self) -> None:
        self.expect("<")
        self.depth += 1
        if self.depth > MAX_SIGNATURE_DEPTH:
            raise self.fail(f"type arguments nested deeper than {MAX_SIGNATURE_DEPTH}")
        while self.peek() != ">":
            char = self.peek()
            if char == "*":
                self.pos += 1
                continue
            if char in "+-":
                self.pos += 1
            self.java_type()
        self.pos += 1
        self.depth -= 1


def signature_class_references(signature: str) -> list[str]:
    """Every class named anywhere in a generic signature, type arguments included."""
    return _SignatureScanner(signature).scan()
