"""
Giga-ALU Instruction Set Definitions
====================================

This module defines the instruction set of the Giga-ALU, a minimal 4-bit CPU
with eight general-purpose registers and a fixed 16-bit instruction word. It
is shared by the assembler (which encodes instructions) and the disassembler
and virtual machine (which decode them).

Instruction Word Layout
-----------------------
```
 15    12 11     8 7      4 3      0
+--------+--------+--------+--------+
| opcode |  dest  |  src   |  imm4  |
+--------+--------+--------+--------+
```

The three low nibbles are reused with different meanings per opcode:

| Opcode          | dest         | src          | imm4         |
|-----------------|--------------|--------------|--------------|
| NOP, HALT       | 0            | 0            | 0            |
| MOVI            | register     | 0            | immediate    |
| MOV, ADD .. XOR | register     | register     | 0            |
| NOT, SHL, SHR   | register     | 0            | 0            |
| LD              | register     | addr[7:4]    | addr[3:0]    |
| ST              | addr[7:4]    | register     | addr[3:0]    |
| JMP             | target[11:8] | target[7:4]  | target[3:0]  |

Decoding is purely structural: an opcode nibble with no assigned instruction
(0xE) still decodes into its four fields.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


# =============================================================================
# Machine Limits
# =============================================================================

REGISTER_COUNT = 8           # R0-R7
MEMORY_SIZE = 256            # VM memory in bytes
MAX_PROGRAM_WORDS = 128      # Instruction words per assembled program
MAX_OPERANDS = 3             # Operands per instruction statement

NIBBLE_MASK = 0x0F
WORD_MASK = 0xFFFF
MAX_IMMEDIATE = 0x0F         # 4-bit immediate
MAX_MEMORY_ADDRESS = 0xFF    # 8-bit byte address
MAX_JUMP_TARGET = 0x0FFF     # 12-bit word address


# =============================================================================
# Opcodes
# =============================================================================

class Opcode(IntEnum):
    """Opcode values (the high nibble of an instruction word)."""
    NOP = 0x0
    MOV = 0x1    # MOV dest, src
    MOVI = 0x2   # MOVI dest, imm4
    ADD = 0x3    # ADD dest, src
    SUB = 0x4    # SUB dest, src
    AND = 0x5    # AND dest, src
    OR = 0x6     # OR dest, src
    XOR = 0x7    # XOR dest, src
    NOT = 0x8    # NOT dest
    SHL = 0x9    # SHL dest
    SHR = 0xA    # SHR dest
    LD = 0xB     # LD dest, [addr]
    ST = 0xC     # ST [addr], src
    JMP = 0xD    # JMP target
    HALT = 0xF


# Mnemonic lookup is exact and case-sensitive.
MNEMONIC_TABLE: dict[str, Opcode] = {op.name: op for op in Opcode}

MNEMONICS = frozenset(MNEMONIC_TABLE)

# Opcode families sharing one operand shape
NO_OPERAND_OPCODES = frozenset({Opcode.NOP, Opcode.HALT})
REGISTER_PAIR_OPCODES = frozenset({
    Opcode.MOV, Opcode.ADD, Opcode.SUB, Opcode.AND, Opcode.OR, Opcode.XOR,
})
SINGLE_REGISTER_OPCODES = frozenset({Opcode.NOT, Opcode.SHL, Opcode.SHR})


def lookup_opcode(mnemonic: str) -> Optional[Opcode]:
    """Return the opcode for an exact mnemonic, or None if unknown."""
    return MNEMONIC_TABLE.get(mnemonic)


# =============================================================================
# Instruction Codec
# =============================================================================

@dataclass(frozen=True)
class DecodedInstruction:
    """
    Field view of a single 16-bit instruction word.

    Attributes:
        raw: The raw 16-bit word
        opcode: High nibble (bits 15-12), not validated
        dest: Bits 11-8
        src: Bits 7-4
        imm4: Bits 3-0
    """
    raw: int
    opcode: int
    dest: int
    src: int
    imm4: int

    @property
    def op(self) -> Optional[Opcode]:
        """The Opcode member for this word, or None for an unassigned nibble."""
        try:
            return Opcode(self.opcode)
        except ValueError:
            return None

    @property
    def memory_address(self) -> int:
        """8-bit memory address for LD (src:imm4) or ST (dest:imm4)."""
        high = self.dest if self.opcode == Opcode.ST else self.src
        return (high << 4) | self.imm4

    @property
    def jump_target(self) -> int:
        """12-bit word address spread across dest:src:imm4."""
        return (self.dest << 8) | (self.src << 4) | self.imm4


def encode_instruction(opcode: int, dest: int = 0, src: int = 0, imm4: int = 0) -> int:
    """
    Pack four nibbles into one instruction word.

    Args:
        opcode: Opcode nibble
        dest: Destination field
        src: Source field
        imm4: Immediate/extra field

    Returns:
        The 16-bit word ``opcode<<12 | dest<<8 | src<<4 | imm4``

    Raises:
        ValueError: If any field does not fit in 4 bits
    """
    for name, value in (("opcode", opcode), ("dest", dest), ("src", src), ("imm4", imm4)):
        if not 0 <= value <= NIBBLE_MASK:
            raise ValueError(f"{name} field {value} does not fit in 4 bits")
    return (int(opcode) << 12) | (dest << 8) | (src << 4) | imm4


def decode_instruction(word: int) -> DecodedInstruction:
    """Split a 16-bit word into opcode, dest, src and imm4 fields."""
    word &= WORD_MASK
    return DecodedInstruction(
        raw=word,
        opcode=(word >> 12) & NIBBLE_MASK,
        dest=(word >> 8) & NIBBLE_MASK,
        src=(word >> 4) & NIBBLE_MASK,
        imm4=word & NIBBLE_MASK,
    )


def split_address(address: int) -> tuple[int, int]:
    """Split an 8-bit memory address into (high nibble, low nibble)."""
    return (address >> 4) & NIBBLE_MASK, address & NIBBLE_MASK


def split_jump_target(target: int) -> tuple[int, int, int]:
    """
    Split a 12-bit jump target into (dest, src, imm4), most significant first.

    Raises:
        ValueError: If the target does not fit in 12 bits
    """
    if not 0 <= target <= MAX_JUMP_TARGET:
        raise ValueError(f"jump target {target} does not fit in 12 bits")
    return (target >> 8) & NIBBLE_MASK, (target >> 4) & NIBBLE_MASK, target & NIBBLE_MASK
