"""
Giga-ALU Assembly Language Parser
=================================

This module implements a recursive-descent parser for Giga-ALU assembly. It
pulls tokens from the lexer with one token of lookahead and builds an ordered
list of statements that the code generator processes.

Statement Types
---------------
1. **LabelDef**: Label definition, always followed by a colon
   ```asm
   loop:
   ```

2. **Instruction**: Mnemonic with up to three operands, commas optional
   ```asm
   MOVI R0, 5
   ADD R0, R1
   LD R2, [0x20]
   JMP loop
   ```

3. **Directive**: ``.name`` and the rest of its line; recorded but has no
   effect on addressing or encoding
   ```asm
   .text
   ```

Operand Forms
-------------
Each operand is tried in a fixed order and the first form that matches wins:

| Syntax       | Operand          | Range     |
|--------------|------------------|-----------|
| ``[n]``      | MemoryOperand    | 0-255     |
| ``[Rn]``     | MemoryOperand    | n         |
| ``Rn``       | RegisterOperand  | R0-R7     |
| ``n``        | ImmediateOperand | 0-15      |
| ``name``     | LabelOperand     | any name  |

``R8`` or ``r0`` is not a register; like any other identifier in operand
position it becomes a label reference.

Parsing stops at the first error, which is raised as an AssemblySyntaxError
carrying the line and column of the offending token.
"""

from dataclasses import dataclass, field
from typing import Optional, Union

from giga_sdk.errors import AssemblySyntaxError, SourceLocation
from giga_sdk.assembler.lexer import Lexer, Span, Token, TokenType
from giga_sdk.cpu import (
    MAX_OPERANDS,
    MAX_IMMEDIATE,
    MAX_MEMORY_ADDRESS,
    REGISTER_COUNT,
)


# =============================================================================
# Operand Data Classes
# =============================================================================

@dataclass(frozen=True)
class RegisterOperand:
    """General-purpose register R0-R7."""
    index: int

    kind = "register"

    def __str__(self) -> str:
        return f"R{self.index}"


@dataclass(frozen=True)
class ImmediateOperand:
    """4-bit literal value."""
    value: int

    kind = "immediate"

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class MemoryOperand:
    """8-bit byte address written in brackets."""
    address: int

    kind = "memory address"

    def __str__(self) -> str:
        return f"[{self.address}]"


@dataclass(frozen=True)
class LabelOperand:
    """Reference to a label, resolved by the code generator."""
    span: Span

    kind = "label"

    @property
    def name(self) -> str:
        return self.span.text

    def __str__(self) -> str:
        return f"'{self.name}'"


Operand = Union[RegisterOperand, ImmediateOperand, MemoryOperand, LabelOperand]


# =============================================================================
# Statement Data Classes
# =============================================================================

@dataclass
class Statement:
    """
    Base class for all parsed statements.

    Every statement has a source location for error reporting.
    """
    location: SourceLocation


@dataclass
class LabelDef(Statement):
    """
    Label definition statement.

    The label's address is the number of instructions that precede it.
    """
    span: Span

    @property
    def name(self) -> str:
        return self.span.text


@dataclass
class Instruction(Statement):
    """
    Machine instruction statement.

    Attributes:
        mnemonic_span: The mnemonic exactly as written (not case folded)
        operands: Up to MAX_OPERANDS operands in source order
    """
    mnemonic_span: Span
    operands: tuple[Operand, ...] = field(default_factory=tuple)

    @property
    def mnemonic(self) -> str:
        return self.mnemonic_span.text


@dataclass
class Directive(Statement):
    """
    Directive statement (``.name ...``).

    Only the name is kept; the rest of the line is discarded.
    """
    span: Span

    @property
    def name(self) -> str:
        return self.span.text


# =============================================================================
# Parser Implementation
# =============================================================================

class Parser:
    """
    Parses Giga-ALU assembly into statements.

    The parser holds two tokens at a time: ``current`` and ``lookahead``.
    The lookahead is what tells a label (``name:``) from an instruction.

    Usage:
        parser = Parser(Lexer(source, filename))
        statements = parser.parse()
    """

    def __init__(self, lexer: Lexer):
        """
        Initialize the parser and prime both token slots.

        Args:
            lexer: Lexer positioned at the start of the source
        """
        self._lexer = lexer
        self._source_lines: Optional[list[str]] = None
        self._statements: list[Statement] = []

        self._current = Token(TokenType.EOF, Span(lexer.source, 0, 0), 1, 1, lexer.filename)
        self._lookahead = lexer.next_token()
        self._advance()

    @property
    def statements(self) -> list[Statement]:
        """Statements parsed so far."""
        return self._statements

    def parse(self) -> list[Statement]:
        """
        Parse all tokens into statements.

        Returns:
            List of Statement objects in program order

        Raises:
            AssemblySyntaxError: At the first syntax error
        """
        while not self._check(TokenType.EOF):
            # Skip blank lines
            if self._match(TokenType.NEWLINE):
                continue

            if self._check(TokenType.DIRECTIVE):
                self._parse_directive()
            elif self._check(TokenType.IDENTIFIER):
                if self._lookahead.type == TokenType.COLON:
                    self._parse_label()
                else:
                    self._parse_instruction()
            else:
                raise self._error("unexpected token at start of statement")

        return self._statements

    # =========================================================================
    # Token Navigation
    # =========================================================================

    def _advance(self) -> Token:
        """Consume and return the current token."""
        token = self._current
        self._current = self._lookahead
        self._lookahead = self._lexer.next_token()
        return token

    def _check(self, *types: TokenType) -> bool:
        """Check if the current token is one of the given types."""
        return self._current.type in types

    def _match(self, *types: TokenType) -> Optional[Token]:
        """Match and consume if the current token is one of the types."""
        if self._check(*types):
            return self._advance()
        return None

    def _expect(self, token_type: TokenType, message: str) -> Token:
        """Expect a specific token type, raise error if not found."""
        if not self._check(token_type):
            raise self._error(message)
        return self._advance()

    def _check_symbol(self, symbol: str) -> bool:
        """Check for a single-character UNKNOWN token such as '['."""
        return self._current.type == TokenType.UNKNOWN and self._current.text == symbol

    def _error(self, message: str, token: Optional[Token] = None) -> AssemblySyntaxError:
        token = token or self._current
        return AssemblySyntaxError(
            message,
            token.location,
            source_line=self._source_line(token.line),
        )

    def _source_line(self, line: int) -> Optional[str]:
        if self._source_lines is None:
            self._source_lines = self._lexer.source.split("\n")
        if 1 <= line <= len(self._source_lines):
            return self._source_lines[line - 1].rstrip("\r")
        return None

    # =========================================================================
    # Statement Parsing
    # =========================================================================

    def _parse_directive(self) -> None:
        """Record a directive and discard the rest of its line."""
        token = self._advance()
        self._statements.append(Directive(location=token.location, span=token.span))

        while not self._check(TokenType.NEWLINE, TokenType.EOF):
            self._advance()
        self._match(TokenType.NEWLINE)

    def _parse_label(self) -> None:
        """Parse ``name:`` with an optional trailing newline."""
        token = self._advance()
        self._statements.append(LabelDef(location=token.location, span=token.span))

        self._expect(TokenType.COLON, "expected ':' after label")
        self._match(TokenType.NEWLINE)

    def _parse_instruction(self) -> None:
        """Parse a mnemonic and its operands up to the end of the line."""
        mnemonic_token = self._advance()
        operands: list[Operand] = []

        while not self._check(TokenType.NEWLINE, TokenType.EOF):
            self._match(TokenType.COMMA)

            if len(operands) >= MAX_OPERANDS:
                raise self._error("too many operands")

            operand = self._parse_operand()
            if operand is None:
                raise self._error("expected operand")
            operands.append(operand)

        self._match(TokenType.NEWLINE)

        self._statements.append(
            Instruction(
                location=mnemonic_token.location,
                mnemonic_span=mnemonic_token.span,
                operands=tuple(operands),
            )
        )

    # =========================================================================
    # Operand Parsing
    # =========================================================================

    def _parse_operand(self) -> Optional[Operand]:
        """Try each operand form in precedence order."""
        return (
            self._parse_memory_operand()
            or self._parse_register()
            or self._parse_immediate()
            or self._parse_label_reference()
        )

    def _parse_memory_operand(self) -> Optional[MemoryOperand]:
        """Parse ``[number]`` or ``[Rn]``."""
        if not self._check_symbol("["):
            return None
        self._advance()

        if self._check(TokenType.NUMBER):
            address = self._parse_number(MAX_MEMORY_ADDRESS, "memory address exceeds 8 bits (max 255)")
        else:
            register = self._parse_register()
            if register is None:
                raise self._error("expected number or register in memory address")
            address = register.index

        if not self._check_symbol("]"):
            raise self._error("expected ']' to close memory address")
        self._advance()

        return MemoryOperand(address)

    def _parse_register(self) -> Optional[RegisterOperand]:
        """Parse ``R0``-``R7``; anything else is not a register."""
        if not self._check(TokenType.IDENTIFIER):
            return None

        text = self._current.text
        if len(text) != 2 or text[0] != "R" or not text[1].isdigit():
            return None
        index = int(text[1])
        if index >= REGISTER_COUNT:
            return None

        self._advance()
        return RegisterOperand(index)

    def _parse_immediate(self) -> Optional[ImmediateOperand]:
        if not self._check(TokenType.NUMBER):
            return None
        return ImmediateOperand(
            self._parse_number(MAX_IMMEDIATE, "immediate value exceeds 4 bits (max 15)")
        )

    def _parse_label_reference(self) -> Optional[LabelOperand]:
        if not self._check(TokenType.IDENTIFIER):
            return None
        return LabelOperand(self._advance().span)

    def _parse_number(self, maximum: int, range_message: str) -> int:
        """
        Convert the current NUMBER token and check it against ``maximum``.

        The full value is checked, so 256 is rejected rather than wrapping.
        """
        token = self._current
        text = token.text

        if text[:2] in ("0x", "0X"):
            digits = text[2:]
            if not digits:
                raise self._error("expected hexadecimal digits after '0x'")
            try:
                value = int(digits, 16)
            except ValueError:
                raise self._error("invalid hex digit") from None
        else:
            if not text.isdigit():
                raise self._error("invalid decimal digit")
            # int() refuses very long decimal strings, so reject by width first
            significant = text.lstrip("0")
            if len(significant) > len(str(maximum)):
                raise self._error(range_message)
            value = int(significant or "0")

        if value > maximum:
            raise self._error(range_message)

        self._advance()
        return value


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_source(source: str | bytes, filename: str = "<input>") -> list[Statement]:
    """
    Convenience function to tokenize and parse assembly source.

    Args:
        source: Assembly source text or raw bytes
        filename: Source filename for error messages

    Returns:
        List of parsed statements

    Raises:
        AssemblySyntaxError: At the first syntax error
    """
    return Parser(Lexer(source, filename)).parse()
