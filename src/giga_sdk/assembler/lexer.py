"""
Giga-ALU Assembly Language Lexer
================================

This module implements a lexer (tokenizer) for Giga-ALU assembly language.
It converts a source buffer into a lazy stream of positioned tokens that the
parser consumes one at a time.

Token Types
-----------
- IDENTIFIER: Mnemonics, register names, label names (``[A-Za-z_][A-Za-z0-9_]*``)
- NUMBER: Decimal (``12``) or hexadecimal (``0xC``) literal
- DIRECTIVE: ``.`` followed by identifier characters (``.org``)
- COMMA, COLON: Dedicated punctuation
- NEWLINE: End of line (statement separator, never skipped)
- UNKNOWN: Any other single character, e.g. ``[`` and ``]``
- EOF: End of input

Whitespace other than newline (space, tab, CR, form feed, vertical tab) and
``;`` comments are skipped before every token. Identifiers are not case
folded; range checking of numbers is left to the parser.

Tokens do not copy their text. Each token holds a Span (start offset and
length) into the lexer's source string, and ``token.text`` slices it on
demand.

Example
-------
>>> from giga_sdk.assembler.lexer import Lexer
>>> lexer = Lexer("MOV R0, 5\\nHALT")
>>> for token in lexer.tokenize():
...     print(token)
Token(IDENTIFIER, 'MOV', 1:1)
Token(IDENTIFIER, 'R0', 1:5)
Token(COMMA, ',', 1:7)
Token(NUMBER, '5', 1:9)
Token(NEWLINE, '\\n', 1:10)
Token(IDENTIFIER, 'HALT', 2:1)
Token(EOF, 2:5)
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator
import string

from giga_sdk.errors import SourceLocation


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """Token kinds of the Giga-ALU assembly language."""
    EOF = auto()
    IDENTIFIER = auto()
    NUMBER = auto()
    COMMA = auto()
    COLON = auto()
    NEWLINE = auto()
    DIRECTIVE = auto()
    UNKNOWN = auto()


# =============================================================================
# Source Spans and Tokens
# =============================================================================

@dataclass(frozen=True)
class Span:
    """
    A view of ``length`` characters of ``source`` starting at ``start``.

    The span keeps a reference to the source string instead of a copy of
    the text; the text is materialised only when ``text`` is read.
    """
    source: str
    start: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length

    @property
    def text(self) -> str:
        return self.source[self.start:self.end]

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"Span({self.text!r}, {self.start}+{self.length})"


@dataclass(frozen=True)
class Token:
    """
    A single token from the source.

    Attributes:
        type: The TokenType classification
        span: Location of the token text in the source buffer
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        filename: Name of the source file
    """
    type: TokenType
    span: Span
    line: int
    column: int
    filename: str = "<input>"

    @property
    def text(self) -> str:
        return self.span.text

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    def __repr__(self) -> str:
        if self.span.length:
            return f"Token({self.type.name}, {self.text!r}, {self.line}:{self.column})"
        return f"Token({self.type.name}, {self.line}:{self.column})"


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes Giga-ALU assembly source.

    The lexer keeps a byte cursor plus 1-based line and column counters.
    ``next_token()`` produces one token per call; once the end of input is
    reached every further call returns another EOF token.

    A source given as ``bytes`` is decoded as Latin-1, so every byte maps to
    exactly one character and columns count bytes. A NUL character ends the
    input early.

    Usage:
        lexer = Lexer(source_text, filename)
        tokens = list(lexer.tokenize())

    Attributes:
        source: The decoded source being tokenized
        filename: Name of the source file (for error reporting)
    """

    IDENT_START = string.ascii_letters + "_"
    IDENT_CHARS = string.ascii_letters + string.digits + "_"
    HEX_DIGITS = string.hexdigits

    # Horizontal whitespace; "\n" is a token, not whitespace
    WHITESPACE = " \t\r\f\v"

    SINGLE_CHAR_TOKENS = {
        ",": TokenType.COMMA,
        ":": TokenType.COLON,
        "\n": TokenType.NEWLINE,
    }

    def __init__(self, source: str | bytes, filename: str = "<input>"):
        """
        Initialize the lexer with source code.

        Args:
            source: The assembly source (text or raw bytes)
            filename: Name of the source file (for error messages)
        """
        if isinstance(source, (bytes, bytearray, memoryview)):
            source = bytes(source).decode("latin-1")
        self.source = source
        self.filename = filename

        self._pos = 0
        self._line = 1
        self._column = 1

    @property
    def position(self) -> int:
        """Current offset of the cursor in the source."""
        return self._pos

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens up to and including the first EOF token.

        Yields:
            Token objects representing each lexical element
        """
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                return

    def next_token(self) -> Token:
        """Scan and return the next token, advancing the cursor."""
        self._skip_whitespace_and_comments()

        start = self._pos
        start_line = self._line
        start_column = self._column

        char = self._peek()
        if not char:
            return self._make_token(TokenType.EOF, start, start_line, start_column)

        if char in self.SINGLE_CHAR_TOKENS:
            self._advance()
            return self._make_token(
                self.SINGLE_CHAR_TOKENS[char], start, start_line, start_column
            )

        if char == ".":
            self._advance()
            self._advance_while(self.IDENT_CHARS)
            return self._make_token(TokenType.DIRECTIVE, start, start_line, start_column)

        if char in string.digits:
            self._scan_number()
            return self._make_token(TokenType.NUMBER, start, start_line, start_column)

        if char in self.IDENT_START:
            self._advance_while(self.IDENT_CHARS)
            return self._make_token(TokenType.IDENTIFIER, start, start_line, start_column)

        # Anything else is a single unclassified character ("[", "]", ...)
        self._advance()
        return self._make_token(TokenType.UNKNOWN, start, start_line, start_column)

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _peek(self, offset: int = 0) -> str:
        """
        Look at the character at cursor + offset without advancing.

        Returns an empty string past the end of the source or at a NUL.
        """
        pos = self._pos + offset
        if pos >= len(self.source) or self.source[pos] == "\0":
            return ""
        return self.source[pos]

    def _advance(self) -> str:
        """Consume one character, updating line and column tracking."""
        char = self._peek()
        if not char:
            return ""

        self._pos += 1
        if char == "\n":
            self._line += 1
            self._column = 1
        else:
            self._column += 1
        return char

    def _advance_while(self, charset: str) -> None:
        # '' in charset is True, so test for end of input first
        while self._peek() and self._peek() in charset:
            self._advance()

    def _make_token(
        self,
        token_type: TokenType,
        start: int,
        start_line: int,
        start_column: int,
    ) -> Token:
        return Token(
            type=token_type,
            span=Span(self.source, start, self._pos - start),
            line=start_line,
            column=start_column,
            filename=self.filename,
        )

    # =========================================================================
    # Whitespace and Comment Handling
    # =========================================================================

    def _skip_whitespace_and_comments(self) -> None:
        """
        Skip horizontal whitespace and ';' comments, in a loop.

        The newline that ends a comment is left for the next token.
        """
        while True:
            self._advance_while(self.WHITESPACE)
            if self._peek() != ";":
                return
            while self._peek() and self._peek() != "\n":
                self._advance()

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_number(self) -> None:
        """
        Consume a decimal literal, or a hex literal when it starts with 0x/0X.

        Only a literal whose first digit is exactly '0' can switch to hex;
        "10x" is the number 10 followed by the identifier "x".
        """
        first = self._advance()
        if first == "0" and self._peek() in ("x", "X"):
            self._advance()
            self._advance_while(self.HEX_DIGITS)
            return
        self._advance_while(string.digits)
