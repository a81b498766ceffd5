"""
Giga-ALU Assembler - Main Interface
===================================

This module provides the Assembler class, the primary interface for turning
Giga-ALU assembly source into bytecode. It coordinates the lexer, parser and
code generator, and reports the outcome as an explicit AssemblyResult rather
than letting exceptions escape.

Example Usage
-------------
>>> from giga_sdk.assembler import Assembler
>>>
>>> asm = Assembler()
>>> result = asm.assemble_string('''
... start:
...     MOVI R0, 1
...     ADD R1, R0
...     JMP start
... ''')
>>> result.ok
True
>>> [f"{w:04X}" for w in result.bytecode.words]
['2001', '3100', 'D000']

On failure the result carries the first error and its position:

>>> result = asm.assemble_string("MOVI R0, 16")
>>> result.ok, result.error_line, result.error_column
(False, 1, 10)
>>> result.error_message
'immediate value exceeds 4 bits (max 15)'

Command-Line Usage
------------------
    $ gigaasm program.asm -o program.bin
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import logging

from giga_sdk.assembler.parser import Statement, parse_source
from giga_sdk.assembler.codegen import Bytecode, CodeGenerator
from giga_sdk.errors import GigaError


logger = logging.getLogger(__name__)


# =============================================================================
# Assembly Result
# =============================================================================

@dataclass
class AssemblyResult:
    """
    Outcome of one assembly run.

    Exactly one of ``bytecode`` and ``error`` is set.

    Attributes:
        bytecode: The assembled program on success
        error: The first error raised by the pipeline on failure
        statements: Parsed statements (None if parsing failed)
    """
    bytecode: Optional[Bytecode] = None
    error: Optional[GigaError] = None
    statements: Optional[list[Statement]] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def error_message(self) -> str:
        """Static message of the error, without location or hint."""
        if self.error is None:
            return ""
        return getattr(self.error, "message", str(self.error))

    @property
    def error_line(self) -> int:
        """1-based line of the error, 0 on success or when unknown."""
        return getattr(self.error, "line", 0)

    @property
    def error_column(self) -> int:
        """1-based column of the error, 0 on success or when unknown."""
        return getattr(self.error, "column", 0)

    def raise_for_error(self) -> Bytecode:
        """
        Return the bytecode, or re-raise the recorded error.

        Raises:
            GigaError: The error captured during assembly
        """
        if self.error is not None:
            raise self.error
        return self.bytecode


# =============================================================================
# Assembler
# =============================================================================

class Assembler:
    """
    Main Giga-ALU assembler class.

    Each call to ``assemble_string`` or ``assemble_file`` is an independent
    run with its own label table; an Assembler can be reused freely.

    Attributes:
        verbose: If True, log progress at INFO level instead of DEBUG
        allow_duplicate_labels: If True, a redefined label takes the later
                                address instead of failing assembly
    """

    def __init__(self, verbose: bool = False, allow_duplicate_labels: bool = False):
        """
        Initialize the assembler.

        Args:
            verbose: Enable progress messages
            allow_duplicate_labels: Let the last definition of a label win
        """
        self.verbose = verbose
        self.allow_duplicate_labels = allow_duplicate_labels
        self._codegen = CodeGenerator(allow_duplicate_labels=allow_duplicate_labels)
        self._last_result: Optional[AssemblyResult] = None

    def _log(self, message: str) -> None:
        logger.log(logging.INFO if self.verbose else logging.DEBUG, message)

    # =========================================================================
    # Assembly Methods
    # =========================================================================

    def assemble_string(self, source: str | bytes, filename: str = "<input>") -> AssemblyResult:
        """
        Assemble source code from a string or raw bytes.

        The pipeline is:
        1. Parse source into statements (lexer -> parser)
        2. Generate words (two-pass code generator)

        Args:
            source: Assembly source code
            filename: Virtual filename for error messages

        Returns:
            AssemblyResult; check ``ok`` before using ``bytecode``
        """
        result = AssemblyResult()
        self._last_result = result

        try:
            result.statements = parse_source(source, filename)
            self._log(f"Parsed {len(result.statements)} statements from {filename}")

            result.bytecode = self._codegen.generate(result.statements)
            self._log(
                f"Generated {result.bytecode.word_count} words, "
                f"{len(result.bytecode.labels)} labels"
            )
        except GigaError as e:
            logger.debug(f"Assembly of {filename} failed: {e}")
            result.error = e
            result.bytecode = None

        return result

    def assemble_file(self, filepath: str | Path) -> AssemblyResult:
        """
        Assemble source code from a file.

        The file is read as bytes, so any single-byte encoding is accepted.

        Args:
            filepath: Path to assembly source file

        Returns:
            AssemblyResult for the file

        Raises:
            FileNotFoundError: If the source file does not exist
        """
        filepath = Path(filepath)
        self._log(f"Assembling {filepath}...")
        return self.assemble_string(filepath.read_bytes(), str(filepath))

    # =========================================================================
    # Output Methods
    # =========================================================================

    def get_words(self) -> tuple[int, ...]:
        """Instruction words of the last successful run (empty otherwise)."""
        if self._last_result is None or self._last_result.bytecode is None:
            return ()
        return self._last_result.bytecode.words

    def get_labels(self) -> dict[str, int]:
        """Label table of the last successful run."""
        if self._last_result is None or self._last_result.bytecode is None:
            return {}
        return dict(self._last_result.bytecode.labels)

    def write_binary(self, filepath: str | Path) -> None:
        """
        Write the last program as little-endian byte pairs.

        Args:
            filepath: Output file path

        Raises:
            GigaError: If the last run failed
            RuntimeError: If nothing has been assembled yet
        """
        if self._last_result is None:
            raise RuntimeError("no program has been assembled")
        data = self._last_result.raise_for_error().to_bytes()
        Path(filepath).write_bytes(data)
        self._log(f"Wrote {len(data)} bytes to {filepath}")


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str | bytes, filename: str = "<input>") -> AssemblyResult:
    """
    Convenience function to assemble source code.

    Args:
        source: Assembly source code
        filename: Virtual filename for errors

    Returns:
        AssemblyResult for the source
    """
    return Assembler().assemble_string(source, filename)


def assemble_file(filepath: str | Path) -> AssemblyResult:
    """
    Convenience function to assemble a file.

    Args:
        filepath: Path to source file

    Returns:
        AssemblyResult for the file
    """
    return Assembler().assemble_file(filepath)
