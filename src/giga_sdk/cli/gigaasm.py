"""
gigaasm - Giga-ALU Assembler Command-Line Interface
===================================================

This module implements the command-line interface for the Giga-ALU
assembler. Besides assembling, it can dump the token stream or the parsed
statements of a source file, which is useful when debugging the syntax of a
program.

Usage Examples
--------------
Basic assembly (writes program.bin):
    $ gigaasm program.asm

With output file:
    $ gigaasm program.asm -o out.bin

Hex listing instead of a binary:
    $ gigaasm program.asm --hex

Dump tokens or statements:
    $ gigaasm program.asm --tokens
    $ gigaasm program.asm --statements

Dump Formats
------------
Tokens, one per line, then a final ``EOF``:

    1:1  IDENT       'MOVI'
    1:5  NEWLINE     '\\n'

Statements:

    1:1  LABEL     'loop':
    2:5  INSTR     'ADD' R0 R1
    3:1  DIRECTIVE '.text'
"""

import logging
from pathlib import Path
from typing import Optional

import click

from giga_sdk import __version__
from giga_sdk.assembler import (
    Assembler,
    Directive,
    Instruction,
    LabelDef,
    Lexer,
    Statement,
    Token,
    TokenType,
    parse_source,
)
from giga_sdk.cli.errors import handle_cli_exception


# Token kind names used in dumps
TOKEN_KIND_NAMES = {
    TokenType.EOF: "EOF",
    TokenType.IDENTIFIER: "IDENT",
    TokenType.NUMBER: "NUMBER",
    TokenType.COMMA: "COMMA",
    TokenType.COLON: "COLON",
    TokenType.NEWLINE: "NEWLINE",
    TokenType.DIRECTIVE: "DIRECTIVE",
    TokenType.UNKNOWN: "UNKNOWN",
}


# =============================================================================
# Dump Formatting
# =============================================================================

def format_token(token: Token) -> str:
    """Format one token as ``line:col  KIND  'text'`` (EOF as ``EOF``)."""
    if token.type == TokenType.EOF:
        return "EOF"
    text = token.text.replace("\n", "\\n").replace("\t", "\\t")
    return f"{token.line}:{token.column}  {TOKEN_KIND_NAMES[token.type]:<10}  '{text}'"


def format_statement(stmt: Statement) -> str:
    """Format one statement for the ``--statements`` dump."""
    position = f"{stmt.location.line}:{stmt.location.column}"

    if isinstance(stmt, LabelDef):
        return f"{position}  LABEL     '{stmt.name}':"

    if isinstance(stmt, Instruction):
        line = f"{position}  INSTR     '{stmt.mnemonic}'"
        for operand in stmt.operands:
            line += f" {operand}"
        return line

    if isinstance(stmt, Directive):
        return f"{position}  DIRECTIVE '{stmt.name}'"

    raise TypeError(f"unexpected statement type {type(stmt).__name__}")


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output binary file (default: input.bin)",
)
@click.option(
    "--hex",
    "show_hex",
    is_flag=True,
    help="Print a hex listing of the words instead of writing a binary",
)
@click.option(
    "--tokens",
    is_flag=True,
    help="Dump the token stream and exit",
)
@click.option(
    "--statements",
    is_flag=True,
    help="Dump the parsed statements and exit",
)
@click.option(
    "--allow-duplicate-labels",
    is_flag=True,
    help="Let a redefined label take its last address instead of failing",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="gigaasm")
def main(
    input_file: Path,
    output: Optional[Path],
    show_hex: bool,
    tokens: bool,
    statements: bool,
    allow_duplicate_labels: bool,
    verbose: bool,
) -> None:
    """
    Assemble Giga-ALU source code.

    INPUT_FILE is the assembly source file (.asm) to assemble.

    The output is a flat binary of 16-bit words stored little-endian, the
    layout the Giga-ALU VM loads.

    \b
    Examples:
        gigaasm prog.asm              # Outputs prog.bin
        gigaasm prog.asm -o out.bin   # Specify output file
        gigaasm prog.asm --hex        # Print words as hex
        gigaasm prog.asm --tokens     # Dump tokens
    """
    if tokens and statements:
        raise click.UsageError("--tokens and --statements are mutually exclusive")

    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    try:
        source = input_file.read_bytes()

        if tokens:
            for token in Lexer(source, str(input_file)).tokenize():
                click.echo(format_token(token))
            return

        if statements:
            for stmt in parse_source(source, str(input_file)):
                click.echo(format_statement(stmt))
            return

        asm = Assembler(verbose=verbose, allow_duplicate_labels=allow_duplicate_labels)

        if verbose:
            click.echo(f"Assembling {input_file}...")

        result = asm.assemble_string(source, str(input_file))
        bytecode = result.raise_for_error()

        if show_hex:
            for address, word in enumerate(bytecode.words):
                click.echo(f"{address:02X}: {word:04X}")
        else:
            output_file = output if output is not None else input_file.with_suffix(".bin")
            output_file.write_bytes(bytecode.to_bytes())
            if verbose:
                click.echo(f"Wrote {bytecode.word_count * 2} bytes to {output_file}")

        if verbose:
            click.echo(f"Assembly complete: {bytecode.word_count} words")
            click.echo(f"Defined {len(bytecode.labels)} labels")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Assembly")


if __name__ == "__main__":
    main()
