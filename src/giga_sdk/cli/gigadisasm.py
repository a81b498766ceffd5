"""
gigadisasm - Giga-ALU Disassembler Command-Line Interface
=========================================================

This module implements the command-line interface for the Giga-ALU
disassembler. It reads a flat binary of little-endian 16-bit words, as
written by gigaasm, and prints one instruction per line.

Usage Examples
--------------
Disassemble a binary:
    $ gigadisasm program.bin

Limit number of instructions:
    $ gigadisasm program.bin --count 20

Output to file:
    $ gigadisasm program.bin -o listing.asm
"""

from pathlib import Path
from typing import Optional

import click

from giga_sdk import __version__
from giga_sdk.cli.errors import ExitCode, handle_cli_exception
from giga_sdk.disassembler import GigaDisassembler


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
    help="Output file (default: stdout)",
)
@click.option(
    "-c", "--count",
    type=click.IntRange(min=0),
    default=None,
    help="Maximum number of instructions to disassemble (default: all)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="gigadisasm")
def main(
    input_file: Path,
    output: Optional[Path],
    count: Optional[int],
    verbose: bool,
) -> None:
    """
    Disassemble Giga-ALU bytecode.

    INPUT_FILE is the binary file to disassemble.

    \b
    Examples:
        gigadisasm prog.bin
        gigadisasm prog.bin --count 8 -o listing.asm
    """
    try:
        data = input_file.read_bytes()

        if not data:
            click.echo(f"Error: {input_file} is empty", err=True)
            raise SystemExit(ExitCode.INVALID_ARGS)

        if verbose:
            click.echo(f"Input file: {input_file} ({len(data)} bytes)", err=True)
            if len(data) % 2:
                click.echo("Warning: odd byte count, last byte ignored", err=True)

        instructions = GigaDisassembler().disassemble_bytes(data, count=count)

        output_lines = [f"; Disassembly of {input_file.name}", ""]
        output_lines.extend(str(instr) for instr in instructions)
        result = "\n".join(output_lines) + "\n"

        if output:
            output.write_text(result, encoding="utf-8")
            if verbose:
                click.echo(f"Output written to: {output}", err=True)
        else:
            click.echo(result, nl=False)

        if verbose:
            click.echo(f"Instructions disassembled: {len(instructions)}", err=True)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose)


if __name__ == "__main__":
    main()
