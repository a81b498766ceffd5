"""
Giga SDK - Toolchain for the Giga-ALU 4-bit CPU
===============================================

This package provides an assembler, disassembler and virtual machine
boundary for the Giga-ALU, a minimal 4-bit CPU with eight registers, a
256-byte memory and a fixed 16-bit instruction word.

Main Components
---------------
- **assembler**: Giga-ALU assembler (gigaasm)
    Converts assembly source (.asm) into little-endian bytecode (.bin)

- **cpu**: Instruction set definitions, instruction codec and ALU

- **disassembler**: Giga-ALU disassembler (gigadisasm)

- **emulator**: VM state with program load and instruction fetch

Quick Start
-----------
Assemble a program:
    >>> from giga_sdk import Assembler
    >>> result = Assembler().assemble_file("prog.asm")
    >>> if result.ok:
    ...     data = result.bytecode.to_bytes()

Load it into the VM:
    >>> from giga_sdk import GigaVM
    >>> vm = GigaVM()
    >>> vm.load_program(result.bytecode.words)
    >>> vm.decode_current()

Or use the command-line tools:
    $ gigaasm prog.asm -o prog.bin
    $ gigadisasm prog.bin
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from giga_sdk.assembler import Assembler, AssemblyResult, assemble
from giga_sdk.disassembler import GigaDisassembler
from giga_sdk.emulator import GigaVM
from giga_sdk.errors import (
    GigaError,
    SourceLocation,
    AssemblerError,
    AssemblySyntaxError,
    UnknownMnemonicError,
    OperandError,
    UndefinedSymbolError,
    DuplicateSymbolError,
    EmptyProgramError,
    ProgramSizeError,
    PassMismatchError,
    VMError,
    ProgramTooLargeError,
    FetchError,
)

__all__ = [
    "__version__",
    # Main classes
    "Assembler",
    "AssemblyResult",
    "assemble",
    "GigaDisassembler",
    "GigaVM",
    # Errors
    "GigaError",
    "SourceLocation",
    "AssemblerError",
    "AssemblySyntaxError",
    "UnknownMnemonicError",
    "OperandError",
    "UndefinedSymbolError",
    "DuplicateSymbolError",
    "EmptyProgramError",
    "ProgramSizeError",
    "PassMismatchError",
    "VMError",
    "ProgramTooLargeError",
    "FetchError",
]
