"""
Giga SDK Error Hierarchy
========================

This module defines the exception hierarchy for the entire Giga SDK.
All exceptions inherit from GigaError, allowing callers to catch all
SDK-related errors with a single except clause if desired.

Exception Hierarchy
-------------------
GigaError (base)
├── AssemblerError (assembler-related)
│   ├── AssemblySyntaxError - syntax errors in source
│   ├── UnknownMnemonicError - mnemonic not in the instruction table
│   ├── OperandError - wrong operand count or kind for an opcode
│   ├── UndefinedSymbolError - reference to undefined label
│   ├── DuplicateSymbolError - label defined multiple times
│   ├── ProgramSizeError - more instruction words than the program store holds
│   ├── EmptyProgramError - no statements to assemble
│   └── PassMismatchError - pass 1 and pass 2 disagree on instruction count
└── VMError (virtual machine boundary)
    ├── ProgramTooLargeError - program does not fit in VM memory
    └── FetchError - program counter outside the loaded program

Error messages follow this format:
    filename:line:column: error: description
    source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional

from giga_sdk.cpu.isa import MNEMONIC_TABLE


# =============================================================================
# Base Exception Class
# =============================================================================

class GigaError(Exception):
    """
    Base exception for all Giga SDK errors.

    All exceptions in the SDK inherit from this class, allowing callers
    to catch all SDK-related errors with a single except clause:

        try:
            parse_source(source)
        except GigaError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(GigaError):
    """
    Base exception for all assembler-related errors.

    Attributes:
        message: The static error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The actual source text at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    @property
    def line(self) -> int:
        """1-based source line, or 0 when the error has no location."""
        return self.location.line if self.location else 0

    @property
    def column(self) -> int:
        """1-based source column, or 0 when the error has no location."""
        return self.location.column if self.location else 0

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            loop.asm:3:5: error: undefined label 'LOOPP'
                JMP LOOPP
                ^
            hint: did you mean 'LOOP'?
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class AssemblySyntaxError(AssemblerError):
    """
    Syntax error in assembly source code.

    Raised by the parser when the token stream does not form a valid
    statement.

    Examples:
        - Statement starting with ',' or '['
        - Label name not followed by ':'
        - Missing or extra operands on an instruction line
        - Immediate value wider than 4 bits
    """
    pass


class UnknownMnemonicError(AssemblerError):
    """
    Instruction mnemonic not found in the instruction table.

    Mnemonics are case-sensitive: 'add' lexes as an identifier but is
    not the same instruction as 'ADD'.
    """

    def __init__(
        self,
        mnemonic: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.mnemonic = mnemonic

        hint = None
        if mnemonic.upper() != mnemonic and mnemonic.upper() in MNEMONIC_TABLE:
            hint = f"mnemonics are upper-case; did you mean '{mnemonic.upper()}'?"

        super().__init__(
            "unknown mnemonic",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class OperandError(AssemblerError):
    """
    Operand shape does not match the opcode.

    Raised during pass 2 when an instruction has the wrong number of
    operands or an operand of the wrong kind.

    Example:
        MOVI R0, R1   ; Error: MOVI second operand must be immediate
    """

    def __init__(
        self,
        mnemonic: str,
        message: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        expected: Optional[str] = None,
    ):
        self.mnemonic = mnemonic
        self.expected = expected

        hint = f"usage: {mnemonic} {expected}".rstrip() if expected is not None else None

        super().__init__(
            message,
            location=location,
            hint=hint,
            source_line=source_line,
        )


class UndefinedSymbolError(AssemblerError):
    """
    Reference to an undefined label.

    Raised during the second pass when a JMP target cannot be resolved
    because no label with that exact name was defined. Similar names are
    suggested to help catch typos.
    """

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
        similar_symbols: Optional[list[str]] = None,
    ):
        self.symbol = symbol
        self.similar_symbols = similar_symbols or []

        if not hint and self.similar_symbols:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_symbols[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"undefined label '{symbol}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class DuplicateSymbolError(AssemblerError):
    """
    Label defined multiple times.

    Includes information about the original definition location.
    """

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        original_location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.symbol = symbol
        self.original_location = original_location

        hint = None
        if original_location:
            hint = f"'{symbol}' was first defined at {original_location}"

        super().__init__(
            f"duplicate label '{symbol}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class ProgramSizeError(AssemblerError):
    """
    Program has more instruction words than the program store holds.

    The location points at the first instruction that does not fit.
    """

    def __init__(
        self,
        max_words: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.max_words = max_words
        super().__init__(
            "program too large",
            location=location,
            hint=f"at most {max_words} instruction words are supported",
            source_line=source_line,
        )


class EmptyProgramError(AssemblerError):
    """Source holds no statements at all (only blank lines or comments)."""

    def __init__(self):
        super().__init__(
            "no statements to assemble",
            hint="the program needs at least one instruction, label or directive",
        )


class PassMismatchError(AssemblerError):
    """
    Pass 1 and pass 2 counted a different number of instructions.

    This indicates an internal assembler bug rather than a source error.
    """

    def __init__(self, pass1_count: int, pass2_count: int):
        self.pass1_count = pass1_count
        self.pass2_count = pass2_count
        super().__init__(
            f"pass 1 counted {pass1_count} instructions but pass 2 emitted {pass2_count}"
        )


# =============================================================================
# Virtual Machine Exceptions
# =============================================================================

class VMError(GigaError):
    """Base exception for virtual machine boundary errors."""
    pass


class ProgramTooLargeError(VMError):
    """
    Program does not fit in VM memory.

    Each instruction word occupies two bytes of the 256-byte memory.
    """

    def __init__(self, word_count: int, memory_size: int):
        self.word_count = word_count
        self.memory_size = memory_size
        super().__init__(
            f"program of {word_count} words needs {word_count * 2} bytes, "
            f"memory holds {memory_size}"
        )


class FetchError(VMError):
    """
    Program counter is at or beyond the loaded program.
    """

    def __init__(self, program_counter: int, loaded_words: int):
        self.program_counter = program_counter
        self.loaded_words = loaded_words
        super().__init__(
            f"program counter {program_counter} outside loaded program "
            f"({loaded_words} words)"
        )
