# =============================================================================
# test_cli.py - Command-Line Interface Tests
# =============================================================================
# Tests for the gigaasm and gigadisasm commands and shared error handling.
# =============================================================================

import pytest

from giga_sdk.cli.errors import ExitCode


@pytest.fixture
def program(tmp_path):
    source = tmp_path / "prog.asm"
    source.write_text("start:\n    MOVI R1, 5\n    JMP start\n")
    return source


# =============================================================================
# gigaasm Tests
# =============================================================================

class TestGigaAsm:
    """Test the assembler command."""

    def test_help(self):
        """Help text describes the tool."""
        from click.testing import CliRunner
        from giga_sdk.cli.gigaasm import main

        runner = CliRunner()
        result = runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        assert "Assemble Giga-ALU source code" in result.output

    def test_version(self):
        from click.testing import CliRunner
        from giga_sdk.cli.gigaasm import main

        runner = CliRunner()
        result = runner.invoke(main, ["--version"])

        assert result.exit_code == 0
        assert "1.0.0" in result.output

    def test_default_output(self, program):
        """Output defaults to the input name with .bin."""
        from click.testing import CliRunner
        from giga_sdk.cli.gigaasm import main

        runner = CliRunner()
        result = runner.invoke(main, [str(program)])

        assert result.exit_code == 0
        output = program.with_suffix(".bin")
        assert output.read_bytes() == bytes([0x05, 0x21, 0x00, 0xD0])

    def test_explicit_output(self, program, tmp_path):
        from click.testing import CliRunner
        from giga_sdk.cli.gigaasm import main

        out = tmp_path / "custom.bin"
        runner = CliRunner()
        result = runner.invoke(main, [str(program), "-o", str(out)])

        assert result.exit_code == 0
        assert out.exists()
        assert not program.with_suffix(".bin").exists()

    def test_hex_listing(self, program):
        from click.testing import CliRunner
        from giga_sdk.cli.gigaasm import main

        runner = CliRunner()
        result = runner.invoke(main, [str(program), "--hex"])

        assert result.exit_code == 0
        assert result.output.splitlines() == ["00: 2105", "01: D000"]

    def test_tokens_dump(self, tmp_path):
        from click.testing import CliRunner
        from giga_sdk.cli.gigaasm import main

        source = tmp_path / "t.asm"
        source.write_text("MOV R0, 5\nHALT")
        runner = CliRunner()
        result = runner.invoke(main, [str(source), "--tokens"])

        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "1:1  IDENT       'MOV'",
            "1:5  IDENT       'R0'",
            "1:7  COMMA       ','",
            "1:9  NUMBER      '5'",
            "1:10  NEWLINE     '\\n'",
            "2:1  IDENT       'HALT'",
            "EOF",
        ]

    def test_statements_dump(self, tmp_path):
        from click.testing import CliRunner
        from giga_sdk.cli.gigaasm import main

        source = tmp_path / "s.asm"
        source.write_text(".text\nloop:\n  LD R2, [20]\n  JMP loop\n")
        runner = CliRunner()
        result = runner.invoke(main, [str(source), "--statements"])

        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "1:1  DIRECTIVE '.text'",
            "2:1  LABEL     'loop':",
            "3:3  INSTR     'LD' R2 [20]",
            "4:3  INSTR     'JMP' 'loop'",
        ]

    def test_tokens_and_statements_exclusive(self, program):
        from click.testing import CliRunner
        from giga_sdk.cli.gigaasm import main

        runner = CliRunner()
        result = runner.invoke(main, [str(program), "--tokens", "--statements"])

        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_assembly_error(self, tmp_path):
        """Errors print with position and exit with BUILD_ERROR."""
        from click.testing import CliRunner
        from giga_sdk.cli.gigaasm import main

        source = tmp_path / "bad.asm"
        source.write_text("NOP\nJMP nowhere\n")
        runner = CliRunner()
        result = runner.invoke(main, [str(source)])

        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "2:1: error: undefined label 'nowhere'" in result.output
        assert not source.with_suffix(".bin").exists()

    def test_duplicate_labels_flag(self, tmp_path):
        from click.testing import CliRunner
        from giga_sdk.cli.gigaasm import main

        source = tmp_path / "dup.asm"
        source.write_text("x: NOP\nx: JMP x\n")
        runner = CliRunner()

        rejected = runner.invoke(main, [str(source), "--hex"])
        assert rejected.exit_code == ExitCode.BUILD_ERROR

        accepted = runner.invoke(main, [str(source), "--hex", "--allow-duplicate-labels"])
        assert accepted.exit_code == 0
        assert accepted.output.splitlines()[-1] == "01: D001"

    def test_missing_input(self, tmp_path):
        from click.testing import CliRunner
        from giga_sdk.cli.gigaasm import main

        runner = CliRunner()
        result = runner.invoke(main, [str(tmp_path / "missing.asm")])

        assert result.exit_code == 2

    def test_empty_source(self, tmp_path):
        from click.testing import CliRunner
        from giga_sdk.cli.gigaasm import main

        source = tmp_path / "empty.asm"
        source.write_text("; nothing here\n")
        runner = CliRunner()
        result = runner.invoke(main, [str(source)])

        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "no statements to assemble" in result.output

    def test_verbose(self, program):
        from click.testing import CliRunner
        from giga_sdk.cli.gigaasm import main

        runner = CliRunner()
        result = runner.invoke(main, [str(program), "-v"])

        assert result.exit_code == 0
        assert "Assembly complete: 2 words" in result.output
        assert "Defined 1 labels" in result.output


# =============================================================================
# gigadisasm Tests
# =============================================================================

class TestGigaDisasm:
    """Test the disassembler command."""

    def test_help(self):
        from click.testing import CliRunner
        from giga_sdk.cli.gigadisasm import main

        runner = CliRunner()
        result = runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        assert "Disassemble Giga-ALU bytecode" in result.output

    def test_basic_disassembly(self, tmp_path):
        from click.testing import CliRunner
        from giga_sdk.cli.gigadisasm import main

        binary = tmp_path / "prog.bin"
        binary.write_bytes(bytes([0x05, 0x21, 0x00, 0xF0]))
        runner = CliRunner()
        result = runner.invoke(main, [str(binary)])

        assert result.exit_code == 0
        assert "00: 2105  MOVI R1, 5" in result.output
        assert "01: F000  HALT" in result.output

    def test_count(self, tmp_path):
        from click.testing import CliRunner
        from giga_sdk.cli.gigadisasm import main

        binary = tmp_path / "prog.bin"
        binary.write_bytes(bytes(8))
        runner = CliRunner()
        result = runner.invoke(main, [str(binary), "-c", "2"])

        assert result.exit_code == 0
        assert result.output.count("NOP") == 2

    def test_output_file(self, tmp_path):
        from click.testing import CliRunner
        from giga_sdk.cli.gigadisasm import main

        binary = tmp_path / "prog.bin"
        binary.write_bytes(bytes([0x00, 0xF0]))
        listing = tmp_path / "prog.lst"
        runner = CliRunner()
        result = runner.invoke(main, [str(binary), "-o", str(listing)])

        assert result.exit_code == 0
        assert "HALT" in listing.read_text()

    def test_empty_file(self, tmp_path):
        from click.testing import CliRunner
        from giga_sdk.cli.gigadisasm import main

        binary = tmp_path / "empty.bin"
        binary.write_bytes(b"")
        runner = CliRunner()
        result = runner.invoke(main, [str(binary)])

        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_assemble_then_disassemble(self, program):
        from click.testing import CliRunner
        from giga_sdk.cli.gigaasm import main as gigaasm
        from giga_sdk.cli.gigadisasm import main as gigadisasm

        runner = CliRunner()
        assert runner.invoke(gigaasm, [str(program)]).exit_code == 0
        result = runner.invoke(gigadisasm, [str(program.with_suffix(".bin"))])

        assert "MOVI R1, 5" in result.output
        assert "JMP 0x0" in result.output


# =============================================================================
# Error Handler Tests
# =============================================================================

class TestHandleCliException:
    """Test exit codes chosen by the shared handler."""

    def test_giga_error(self):
        from giga_sdk.cli.errors import handle_cli_exception
        from giga_sdk.errors import FetchError

        with pytest.raises(SystemExit) as exc_info:
            handle_cli_exception(FetchError(0, 0))
        assert exc_info.value.code == ExitCode.BUILD_ERROR

    def test_file_not_found(self):
        from giga_sdk.cli.errors import handle_cli_exception

        with pytest.raises(SystemExit) as exc_info:
            handle_cli_exception(FileNotFoundError("x.asm"))
        assert exc_info.value.code == ExitCode.INVALID_ARGS

    def test_internal_error(self):
        from giga_sdk.cli.errors import handle_cli_exception

        with pytest.raises(SystemExit) as exc_info:
            handle_cli_exception(RuntimeError("boom"))
        assert exc_info.value.code == ExitCode.INTERNAL_ERROR
