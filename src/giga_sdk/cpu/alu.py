"""
Giga-ALU Arithmetic Logic Unit
==============================

Pure 4-bit ALU operations. Every operation masks its inputs to 4 bits and
returns the 4-bit result together with four flags:

- zero: result is 0
- carry: ADD carry out of bit 3; SUB no-borrow; SHL/SHR the bit shifted out;
  always 0 for logic operations
- negative: bit 3 of the result
- overflow: two's complement overflow for ADD/SUB, 0 otherwise
"""

from dataclasses import dataclass

from giga_sdk.cpu.isa import NIBBLE_MASK


@dataclass(frozen=True)
class AluResult:
    """Result and flags of one ALU operation."""
    result: int
    zero: bool
    carry: bool
    negative: bool
    overflow: bool


def _sign(value: int) -> int:
    return (value >> 3) & 1


def _result(value: int, carry: bool = False, overflow: bool = False) -> AluResult:
    value &= NIBBLE_MASK
    return AluResult(
        result=value,
        zero=value == 0,
        carry=carry,
        negative=bool(_sign(value)),
        overflow=overflow,
    )


def alu_add(a: int, b: int) -> AluResult:
    """4-bit add; carry is the fifth bit of the raw sum."""
    a &= NIBBLE_MASK
    b &= NIBBLE_MASK
    raw = a + b
    value = raw & NIBBLE_MASK
    overflow = _sign(a) == _sign(b) and _sign(a) != _sign(value)
    return _result(value, carry=bool(raw & 0x10), overflow=overflow)


def alu_sub(a: int, b: int) -> AluResult:
    """4-bit subtract a - b; carry is set when no borrow occurred."""
    a &= NIBBLE_MASK
    b &= NIBBLE_MASK
    value = (a - b) & NIBBLE_MASK
    overflow = _sign(a) != _sign(b) and _sign(a) != _sign(value)
    return _result(value, carry=a >= b, overflow=overflow)


def alu_and(a: int, b: int) -> AluResult:
    return _result((a & NIBBLE_MASK) & (b & NIBBLE_MASK))


def alu_or(a: int, b: int) -> AluResult:
    return _result((a & NIBBLE_MASK) | (b & NIBBLE_MASK))


def alu_xor(a: int, b: int) -> AluResult:
    return _result((a & NIBBLE_MASK) ^ (b & NIBBLE_MASK))


def alu_not(a: int) -> AluResult:
    return _result(~a & NIBBLE_MASK)


def alu_shl(a: int) -> AluResult:
    """Logical shift left by one; carry holds the old bit 3."""
    a &= NIBBLE_MASK
    return _result(a << 1, carry=bool(_sign(a)))


def alu_shr(a: int) -> AluResult:
    """Logical shift right by one; carry holds the old bit 0."""
    a &= NIBBLE_MASK
    return _result(a >> 1, carry=bool(a & 1))
