"""JVM instruction set: lengths and the opcodes that reference types."""

from __future__ import annotations

from collections.abc import Iterator
from enum import IntEnum

from jarcheck.domain.exceptions.classfile import MalformedClassError


class Opcode(IntEnum):
    """Opcodes the reference scan cares about."""

    TABLESWITCH = 0xAA
    LOOKUPSWITCH = 0xAB
    GETSTATIC = 0xB2
    PUTSTATIC = 0xB3
    GETFIELD = 0xB4
    PUTFIELD = 0xB5
    INVOKEVIRTUAL = 0xB6
    INVOKESPECIAL = 0xB7
    INVOKESTATIC = 0xB8
    INVOKEINTERFACE = 0xB9
    INVOKEDYNAMIC = 0xBA
    NEW = 0xBB
    ANEWARRAY = 0xBD
    CHECKCAST = 0xC0
    INSTANCEOF = 0xC1
    WIDE = 0xC4
    MULTIANEWARRAY = 0xC5


IINC = 0x84
LAST_OPCODE = 0xC9  # jsr_w

METHOD_INSNS = frozenset(
    {Opcode.INVOKEVIRTUAL, Opcode.INVOKESPECIAL, Opcode.INVOKESTATIC, Opcode.INVOKEINTERFACE}
)
FIELD_INSNS = frozenset({Opcode.GETSTATIC, Opcode.PUTSTATIC, Opcode.GETFIELD, Opcode.PUTFIELD})
TYPE_INSNS = frozenset(
    {Opcode.NEW, Opcode.ANEWARRAY, Opcode.CHECKCAST, Opcode.INSTANCEOF, Opcode.MULTIANEWARRAY}
)


def _length_table() -> tuple[int, ...]:
    """Fixed instruction lengths (opcode + operands); 0 = variable."""
    lengths = [1] * (LAST_OPCODE + 1)

    def span(first: int, last: int, length: int) -> None:
        for op in range(first, last + 1):
            lengths[op] = length

    lengths[0x10] = 2  # bipush
    lengths[0x11] = 3  # sipush
    lengths[0x12] = 2  # ldc
    span(0x13, 0x14, 3)  # ldc_w, ldc2_w
    span(0x15, 0x19, 2)  # iload..aload
    span(0x36, 0x3A, 2)  # istore..astore
    lengths[IINC] = 3
    span(0x99, 0xA8, 3)  # if<cond>, goto, jsr
    lengths[0xA9] = 2  # ret
    lengths[Opcode.TABLESWITCH] = 0
    lengths[Opcode.LOOKUPSWITCH] = 0
    span(0xB2, 0xB8, 3)  # field access, invokevirtual/special/static
    lengths[Opcode.INVOKEINTERFACE] = 5
    lengths[Opcode.INVOKEDYNAMIC] = 5
    lengths[Opcode.NEW] = 3
    lengths[0xBC] = 2  # newarray
    lengths[Opcode.ANEWARRAY] = 3
    span(0xC0, 0xC1, 3)  # checkcast, instanceof
    lengths[Opcode.WIDE] = 0
    lengths[Opcode.MULTIANEWARRAY] = 4
    span(0xC6, 0xC7, 3)  # ifnull, ifnonnull
    span(0xC8, 0xC9, 5)  # goto_w, jsr_w
    return tuple(lengths)


_LENGTHS = _length_table()


def _s4(code: bytes, offset: int) -> int:
    return int.from_bytes(code[offset : offset + 4], "big", signed=True)


def instruction_length(code: bytes, pc: int) -> int:
    """Length in bytes of the instruction starting at pc.

    Switch padding is relative to the start of the code array.

    Raises:
        MalformedClassError: On undefined opcodes or truncated operands
    """
    opcode = code[pc]
    if opcode > LAST_OPCODE:
        raise MalformedClassError(f"invalid opcode 0x{opcode:02X} at pc {pc}")

    length = _LENGTHS[opcode]
    if length:
        return length

    if opcode == Opcode.WIDE:
        if pc + 1 >= len(code):
            raise MalformedClassError(f"truncated wide instruction at pc {pc}")
        return 6 if code[pc + 1] == IINC else 4

    # tableswitch / lookupswitch: pad to 4-byte boundary, then s4 operands
    base = pc + 1 + (-(pc + 1) % 4)
    if opcode == Opcode.TABLESWITCH:
        _require(code, pc, base + 12)
        low, high = _s4(code, base + 4), _s4(code, base + 8)
        if high < low:
            raise MalformedClassError(f"tableswitch at pc {pc} has high {high} < low {low}")
        return base + 12 + 4 * (high - low + 1) - pc

    _require(code, pc, base + 8)
    npairs = _s4(code, base + 4)
    if npairs < 0:
        raise MalformedClassError(f"lookupswitch at pc {pc} has negative npairs {npairs}")
    return base + 8 + 8 * npairs - pc


def _require(code: bytes, pc: int, end: int) -> None:
    if end > len(code):
        raise MalformedClassError(f"truncated switch at pc {pc}")


def iter_instructions(code: bytes) -> Iterator[tuple[int, int]]:
    """Yield (pc, opcode) for every instruction in a Code attribute.

    Guarantees every yielded instruction fits inside code.

    Raises:
        MalformedClassError: If the stream is not well-formed
    """
    pc = 0
    end = len(code)
    while pc < end:
        length = instruction_length(code, pc)
        if pc + length > end:
            raise MalformedClassError(f"instruction at pc {pc} runs past end of code")
        yield pc, code[pc]
        pc += length
