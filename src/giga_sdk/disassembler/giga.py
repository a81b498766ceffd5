"""
Giga-ALU Disassembler
=====================

Disassembles Giga-ALU instruction words into assembly language. This is the
inverse of the assembler's code generation and uses the same instruction
codec from ``giga_sdk.cpu``.

Every canonical encoding (unused fields zero, register fields below 8) is
rendered as text that assembles back to the same word:

    2105  ->  MOVI R1, 5
    B014  ->  LD R0, [20]
    C114  ->  ST [20], R1
    D012  ->  JMP 0x12

JMP targets above 15 are shown in hex but only a label can express them in
source, since numeric operands are 4-bit immediates. Anything else, including
the unassigned opcode 0xE, is shown as a ``.word`` directive.

Usage:
    disasm = GigaDisassembler()

    # Disassemble a word sequence
    for instr in disasm.disassemble(words):
        print(instr)

    # Disassemble a little-endian binary
    instructions = disasm.disassemble_bytes(Path("prog.bin").read_bytes())
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from giga_sdk.cpu import (
    REGISTER_COUNT,
    NO_OPERAND_OPCODES,
    REGISTER_PAIR_OPCODES,
    SINGLE_REGISTER_OPCODES,
    DecodedInstruction,
    Opcode,
    decode_instruction,
)


# =============================================================================
# Data Structures
# =============================================================================

@dataclass
class DisassembledInstruction:
    """
    A single disassembled Giga-ALU instruction.

    Attributes:
        address: Word address of the instruction
        word: The raw 16-bit instruction word
        mnemonic: Instruction mnemonic, or ".word" for data
        operand_str: Formatted operands (may be empty)
        comment: Optional annotation, e.g. the label at a jump target
    """
    address: int
    word: int
    mnemonic: str
    operand_str: str
    comment: str = ""

    @property
    def text(self) -> str:
        """The instruction as assembly source."""
        if self.operand_str:
            return f"{self.mnemonic} {self.operand_str}"
        return self.mnemonic

    def __str__(self) -> str:
        """Format as listing line: ADDRESS: WORD  MNEMONIC OPERANDS"""
        line = f"{self.address:02X}: {self.word:04X}  {self.text}"
        if self.comment:
            return f"{line:<28} ; {self.comment}"
        return line


# =============================================================================
# Giga-ALU Disassembler
# =============================================================================

class GigaDisassembler:
    """
    Disassembler for Giga-ALU instruction words.

    Attributes:
        _symbol_table: Maps word addresses to label names for annotating
                       jump targets
    """

    def __init__(self, symbol_table: Optional[dict[int, str]] = None):
        """
        Initialize the disassembler.

        Args:
            symbol_table: Optional dict mapping word addresses to label names
        """
        self._symbol_table = symbol_table or {}

    def disassemble_word(self, word: int, address: int = 0) -> DisassembledInstruction:
        """
        Disassemble a single instruction word.

        Args:
            word: 16-bit instruction word
            address: Word address of the instruction (for display)

        Returns:
            DisassembledInstruction for the word
        """
        decoded = decode_instruction(word)
        rendered = self._render(decoded)

        if rendered is None:
            return DisassembledInstruction(
                address=address,
                word=decoded.raw,
                mnemonic=".word",
                operand_str=f"0x{decoded.raw:04X}",
            )

        mnemonic, operand_str = rendered
        comment = ""
        if decoded.opcode == Opcode.JMP:
            comment = self._symbol_table.get(decoded.jump_target, "")

        return DisassembledInstruction(
            address=address,
            word=decoded.raw,
            mnemonic=mnemonic,
            operand_str=operand_str,
            comment=comment,
        )

    def disassemble(
        self,
        words: Iterable[int],
        start_address: int = 0,
        count: Optional[int] = None,
    ) -> list[DisassembledInstruction]:
        """
        Disassemble a sequence of instruction words.

        Args:
            words: Instruction words in program order
            start_address: Word address of the first word
            count: Maximum number of instructions (None = all)

        Returns:
            List of DisassembledInstruction objects
        """
        result = []
        for offset, word in enumerate(words):
            if count is not None and offset >= count:
                break
            result.append(self.disassemble_word(word, start_address + offset))
        return result

    def disassemble_bytes(
        self,
        data: bytes,
        start_address: int = 0,
        count: Optional[int] = None,
    ) -> list[DisassembledInstruction]:
        """
        Disassemble a little-endian binary image.

        A trailing odd byte is ignored.
        """
        words = [data[i] | (data[i + 1] << 8) for i in range(0, len(data) - 1, 2)]
        return self.disassemble(words, start_address, count)

    def disassemble_to_text(
        self,
        words: Iterable[int],
        start_address: int = 0,
        count: Optional[int] = None,
    ) -> str:
        """Disassemble and return a multi-line listing."""
        instructions = self.disassemble(words, start_address, count)
        return "\n".join(str(instr) for instr in instructions)

    def add_symbols(self, symbols: dict[int, str]) -> None:
        """
        Add labels for jump target annotation.

        Args:
            symbols: Dictionary mapping word addresses to names
        """
        self._symbol_table.update(symbols)

    # =========================================================================
    # Operand Formatting
    # =========================================================================

    def _render(self, decoded: DecodedInstruction) -> Optional[tuple[str, str]]:
        """
        Return (mnemonic, operands) for a canonical encoding, else None.
        """
        op = decoded.op
        if op is None:
            return None

        dest, src, imm4 = decoded.dest, decoded.src, decoded.imm4

        if op in NO_OPERAND_OPCODES:
            if dest or src or imm4:
                return None
            return op.name, ""

        if op == Opcode.MOVI:
            if not _is_register(dest) or src:
                return None
            return op.name, f"R{dest}, {imm4}"

        if op in REGISTER_PAIR_OPCODES:
            if not (_is_register(dest) and _is_register(src)) or imm4:
                return None
            return op.name, f"R{dest}, R{src}"

        if op in SINGLE_REGISTER_OPCODES:
            if not _is_register(dest) or src or imm4:
                return None
            return op.name, f"R{dest}"

        if op == Opcode.LD:
            if not _is_register(dest):
                return None
            return op.name, f"R{dest}, [{decoded.memory_address}]"

        if op == Opcode.ST:
            if not _is_register(src):
                return None
            return op.name, f"[{decoded.memory_address}], R{src}"

        # JMP: every field combination is a valid target
        return op.name, f"0x{decoded.jump_target:X}"


def _is_register(field: int) -> bool:
    return field < REGISTER_COUNT
