"""
Giga-ALU Virtual Machine State
==============================

Machine state for the Giga-ALU: eight 4-bit registers, four condition flags,
a program counter and 256 bytes of byte-addressed memory.

Programs are loaded as 16-bit words stored little-endian, low byte at the
even address and high byte at the following odd address:

    word 0 -> memory[0], memory[1]
    word 1 -> memory[2], memory[3]
    ...

The VM exposes fetch and decode of the word at the program counter. It does
not dispatch or execute instructions.

Example:
    >>> vm = GigaVM()
    >>> vm.load_program([0x2105, 0xF000])
    >>> hex(vm.fetch_word())
    '0x2105'
    >>> vm.decode_current().dest
    1
"""

from dataclasses import dataclass, field
from enum import IntFlag
from typing import Iterable
import logging

from giga_sdk.cpu import (
    MEMORY_SIZE,
    REGISTER_COUNT,
    AluResult,
    DecodedInstruction,
    decode_instruction,
)
from giga_sdk.cpu.isa import NIBBLE_MASK
from giga_sdk.errors import FetchError, ProgramTooLargeError


logger = logging.getLogger(__name__)


class Flags(IntFlag):
    """Condition flags, in the order the ALU reports them."""
    Z = 0x01  # Zero
    C = 0x02  # Carry / no borrow / bit shifted out
    N = 0x04  # Negative (bit 3 of result)
    V = 0x08  # Two's complement overflow


@dataclass
class VMState:
    """
    Complete VM state.

    Registers hold values in their low nibble; memory is byte addressed.
    """
    registers: list[int] = field(default_factory=lambda: [0] * REGISTER_COUNT)
    flags: Flags = Flags(0)
    program_counter: int = 0
    memory: bytearray = field(default_factory=lambda: bytearray(MEMORY_SIZE))
    loaded_program_words: int = 0


class GigaVM:
    """
    Giga-ALU virtual machine boundary: program load and word fetch.

    Attributes:
        state: The VMState, cleared by reset()
    """

    def __init__(self):
        self.state = VMState()

    # ========================================
    # State Access
    # ========================================

    @property
    def registers(self) -> list[int]:
        return self.state.registers

    @property
    def program_counter(self) -> int:
        return self.state.program_counter

    @program_counter.setter
    def program_counter(self, value: int) -> None:
        self.state.program_counter = value & 0xFFFF

    @property
    def memory(self) -> bytearray:
        return self.state.memory

    @property
    def loaded_program_words(self) -> int:
        return self.state.loaded_program_words

    @property
    def flag_z(self) -> bool:
        return bool(self.state.flags & Flags.Z)

    @property
    def flag_c(self) -> bool:
        return bool(self.state.flags & Flags.C)

    @property
    def flag_n(self) -> bool:
        return bool(self.state.flags & Flags.N)

    @property
    def flag_v(self) -> bool:
        return bool(self.state.flags & Flags.V)

    def set_register(self, index: int, value: int) -> None:
        """Store the low nibble of ``value`` in register ``index``."""
        self.state.registers[index] = value & NIBBLE_MASK

    def apply_alu_result(self, dest: int, result: AluResult) -> None:
        """Write an ALU result into a register and copy its flags."""
        self.set_register(dest, result.result)
        flags = Flags(0)
        if result.zero:
            flags |= Flags.Z
        if result.carry:
            flags |= Flags.C
        if result.negative:
            flags |= Flags.N
        if result.overflow:
            flags |= Flags.V
        self.state.flags = flags

    # ========================================
    # Program Load and Fetch
    # ========================================

    def reset(self) -> None:
        """Clear registers, flags, program counter and memory."""
        self.state = VMState()

    def load_program(self, words: Iterable[int]) -> None:
        """
        Copy instruction words into memory as little-endian byte pairs.

        Memory beyond the program is left untouched. The program counter is
        reset to 0.

        Args:
            words: 16-bit instruction words in program order

        Raises:
            ProgramTooLargeError: If the program needs more than 256 bytes
        """
        words = list(words)
        if len(words) * 2 > MEMORY_SIZE:
            raise ProgramTooLargeError(len(words), MEMORY_SIZE)

        memory = self.state.memory
        for index, word in enumerate(words):
            address = index * 2
            memory[address] = word & 0xFF
            memory[address + 1] = (word >> 8) & 0xFF

        self.state.loaded_program_words = len(words)
        self.state.program_counter = 0
        logger.debug(f"Loaded {len(words)} words ({len(words) * 2} bytes)")

    def fetch_word(self) -> int:
        """
        Read the instruction word at the program counter.

        The program counter is not advanced.

        Raises:
            FetchError: If the program counter is at or past the loaded words
        """
        pc = self.state.program_counter
        if pc >= self.state.loaded_program_words:
            raise FetchError(pc, self.state.loaded_program_words)

        address = pc * 2
        low = self.state.memory[address]
        high = self.state.memory[address + 1]
        return (high << 8) | low

    def decode_current(self) -> DecodedInstruction:
        """Fetch and decode the word at the program counter."""
        return decode_instruction(self.fetch_word())
