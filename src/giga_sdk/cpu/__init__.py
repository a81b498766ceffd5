"""
Giga SDK CPU Package
====================

This package contains CPU architecture definitions used by multiple tools
in the Giga SDK, including the assembler, disassembler, and virtual machine.

Modules:
    isa: Opcodes, machine limits, mnemonic table and the instruction codec
         (encode/decode of the 16-bit instruction word).
    alu: 4-bit arithmetic and logic operations with flag computation.

Both the assembler (which encodes instructions) and the disassembler
(which decodes them) use the same definitions, so the bit layout lives in
exactly one place.

Usage:
    from giga_sdk.cpu import (
        Opcode,
        encode_instruction,
        decode_instruction,
    )
"""

from giga_sdk.cpu.isa import (
    # Machine limits
    REGISTER_COUNT,
    MEMORY_SIZE,
    MAX_PROGRAM_WORDS,
    MAX_OPERANDS,
    MAX_IMMEDIATE,
    MAX_MEMORY_ADDRESS,
    MAX_JUMP_TARGET,
    # Opcodes
    Opcode,
    MNEMONIC_TABLE,
    MNEMONICS,
    NO_OPERAND_OPCODES,
    REGISTER_PAIR_OPCODES,
    SINGLE_REGISTER_OPCODES,
    lookup_opcode,
    # Codec
    DecodedInstruction,
    encode_instruction,
    decode_instruction,
    split_address,
    split_jump_target,
)
from giga_sdk.cpu.alu import (
    AluResult,
    alu_add,
    alu_sub,
    alu_and,
    alu_or,
    alu_xor,
    alu_not,
    alu_shl,
    alu_shr,
)

__all__ = [
    # Machine limits
    "REGISTER_COUNT",
    "MEMORY_SIZE",
    "MAX_PROGRAM_WORDS",
    "MAX_OPERANDS",
    "MAX_IMMEDIATE",
    "MAX_MEMORY_ADDRESS",
    "MAX_JUMP_TARGET",
    # Opcodes
    "Opcode",
    "MNEMONIC_TABLE",
    "MNEMONICS",
    "NO_OPERAND_OPCODES",
    "REGISTER_PAIR_OPCODES",
    "SINGLE_REGISTER_OPCODES",
    "lookup_opcode",
    # Codec
    "DecodedInstruction",
    "encode_instruction",
    "decode_instruction",
    "split_address",
    "split_jump_target",
    # ALU
    "AluResult",
    "alu_add",
    "alu_sub",
    "alu_and",
    "alu_or",
    "alu_xor",
    "alu_not",
    "alu_shl",
    "alu_shr",
]
