"""JVM opcode numbers and fixed operand lengths."""

from __future__ import annotations

# Type instructions
NEW = 187
ANEWARRAY = 189
CHECKCAST = 192
INSTANCEOF = 193
MULTIANEWARRAY = 197

# Field instructions
GETSTATIC = 178
PUTSTATIC = 179
GETFIELD = 180
PUTFIELD = 181

# Method instructions
INVOKEVIRTUAL = 182
INVOKESPECIAL = 183
INVOKESTATIC = 184
INVOKEINTERFACE = 185
INVOKEDYNAMIC = 186

# Constant loads
LDC = 18
LDC_W = 19
LDC2_W = 20

# Variable-length
TABLESWITCH = 170
LOOKUPSWITCH = 171
WIDE = 196
IINC = 132

MAX_OPCODE = 201

TYPE_OPCODES = frozenset({NEW, ANEWARRAY, CHECKCAST, INSTANCEOF})
FIELD_OPCODES = frozenset({GETSTATIC, PUTSTATIC, GETFIELD, PUTFIELD})
METHOD_OPCODES = frozenset({INVOKEVIRTUAL, INVOKESPECIAL, INVOKESTATIC, INVOKEINTERFACE})
LDC_OPCODES = frozenset({LDC, LDC_W, LDC2_W})


def _operand_lengths() -> tuple[int, ...]:
    lengths = [0] * (MAX_OPCODE + 1)
    one = [16, LDC, 21, 22, 23, 24, 25, 54, 55, 56, 57, 58, 169, 188]
    two = [17, LDC_W, LDC2_W, IINC, *range(153, 169), 198, 199,
           *range(GETSTATIC, INVOKESTATIC + 1), NEW, ANEWARRAY, CHECKCAST, INSTANCEOF]
    four = [INVOKEINTERFACE, INVOKEDYNAMIC, 200, 201]
    for op in one:
        lengths[op] = 1
    for op in two:
        lengths[op] = 2
    for op in four:
        lengths[op] = 4
    lengths[MULTIANEWARRAY] = 3
    for op in (TABLESWITCH, LOOKUPSWITCH, WIDE):
        lengths[op] = -1
    return tuple(lengths)


# Operand byte count per opcode; -1 marks variable-length instructions
OPERAND_LENGTHS = _operand_lengths()
