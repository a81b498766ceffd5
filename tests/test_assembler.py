# =============================================================================
# test_assembler.py - Full Assembler Integration Tests
# =============================================================================
# End-to-end tests for the Giga-ALU assembler facade.
#
# Test coverage includes:
#   - Complete program assembly
#   - Explicit success/failure results with error positions
#   - File input
#   - Round trip through the instruction decoder
# =============================================================================

import pytest

from giga_sdk.assembler import Assembler, AssemblyResult, assemble, assemble_file
from giga_sdk.cpu import Opcode, decode_instruction
from giga_sdk.errors import (
    AssemblySyntaxError,
    DuplicateSymbolError,
    EmptyProgramError,
    GigaError,
    ProgramSizeError,
    UndefinedSymbolError,
)


# =============================================================================
# Full Assembly Pipeline Tests
# =============================================================================

class TestFullPipeline:
    """Test the complete pipeline from source to words."""

    def test_minimal_program(self):
        result = assemble("HALT")
        assert result.ok
        assert result.bytecode.words == (0xF000,)
        assert result.error is None
        assert result.error_message == ""
        assert (result.error_line, result.error_column) == (0, 0)

    def test_counter_program(self):
        source = """
        ; count R0 up forever
        .text
        start:
            MOVI R0, 0
            MOVI R1, 1
        loop:
            ADD R0, R1
            ST [0x10], R0
            JMP loop
        """
        result = assemble(source)
        assert result.ok
        assert result.bytecode.words == (0x2000, 0x2101, 0x3010, 0xC100, 0xD002)
        assert result.bytecode.labels == {"start": 0, "loop": 2}

    def test_statements_recorded(self):
        result = assemble("a: NOP")
        assert len(result.statements) == 2

    def test_round_trip_through_decoder(self):
        """Decoding every emitted word reproduces the encoded fields."""
        source = "MOVI R3, 9\nLD R4, [0xA7]\nST [33], R2\nXOR R6, R7\nend: JMP end"
        expected = [
            (Opcode.MOVI, 3, 0, 9),
            (Opcode.LD, 4, 0xA, 7),
            (Opcode.ST, 2, 2, 1),
            (Opcode.XOR, 6, 7, 0),
            (Opcode.JMP, 0, 0, 4),
        ]
        result = assemble(source)
        decoded = [decode_instruction(w) for w in result.bytecode]
        assert [(d.opcode, d.dest, d.src, d.imm4) for d in decoded] == expected

    @pytest.mark.parametrize("mnemonic", ["ADD", "SUB", "AND", "OR", "XOR"])
    def test_all_register_pairs_round_trip(self, mnemonic):
        for dest in range(8):
            for src in range(8):
                result = assemble(f"{mnemonic} R{dest}, R{src}")
                decoded = decode_instruction(result.bytecode.words[0])
                assert decoded.op == Opcode[mnemonic]
                assert (decoded.dest, decoded.src) == (dest, src)


# =============================================================================
# Error Result Tests
# =============================================================================

class TestErrorResults:
    """Test that failures are reported through AssemblyResult."""

    def test_syntax_error_result(self):
        result = assemble("MOVI R0, 16")
        assert not result.ok
        assert result.bytecode is None
        assert isinstance(result.error, AssemblySyntaxError)
        assert result.error_message == "immediate value exceeds 4 bits (max 15)"
        assert (result.error_line, result.error_column) == (1, 10)

    def test_missing_colon_never_reached_for_instruction(self):
        """An identifier without ':' is an instruction, not a bad label."""
        result = assemble("loop\n")
        assert not result.ok
        assert result.error_message == "unknown mnemonic"

    def test_undefined_label_result(self):
        result = assemble("NOP\nNOP\n   JMP nowhere")
        assert isinstance(result.error, UndefinedSymbolError)
        assert (result.error_line, result.error_column) == (3, 4)

    def test_huge_literal_result(self):
        """Overlong decimal literals fail through the result, not as ValueError."""
        result = assemble("MOVI R0, " + "1" * 5000)
        assert not result.ok
        assert isinstance(result.error, AssemblySyntaxError)
        assert (result.error_line, result.error_column) == (1, 10)

        result = assemble("LD R0, [" + "9" * 5000 + "]")
        assert result.error_message == "memory address exceeds 8 bits (max 255)"

    def test_empty_source_result(self):
        result = assemble("; comments only\n\n")
        assert not result.ok
        assert isinstance(result.error, EmptyProgramError)
        assert (result.error_line, result.error_column) == (0, 0)

    def test_program_too_large_result(self):
        result = assemble("NOP\n" * 129)
        assert isinstance(result.error, ProgramSizeError)
        assert result.error_line == 129

    def test_raise_for_error(self):
        result = assemble("x: NOP\nx: NOP")
        with pytest.raises(DuplicateSymbolError):
            result.raise_for_error()

    def test_raise_for_error_success(self):
        result = assemble("NOP")
        assert result.raise_for_error().words == (0,)

    def test_result_is_dataclass(self):
        assert isinstance(assemble("NOP"), AssemblyResult)


# =============================================================================
# Assembler Configuration Tests
# =============================================================================

class TestAssemblerOptions:
    """Test constructor options and reuse."""

    def test_duplicate_labels_option(self):
        asm = Assembler(allow_duplicate_labels=True)
        result = asm.assemble_string("x: NOP\nx: HALT\nJMP x")
        assert result.ok
        assert asm.get_labels() == {"x": 1}

    def test_reuse_does_not_leak_labels(self):
        asm = Assembler()
        assert asm.assemble_string("first: NOP").ok
        result = asm.assemble_string("JMP first")
        assert isinstance(result.error, UndefinedSymbolError)
        assert asm.get_words() == ()
        assert asm.get_labels() == {}

    def test_get_words(self):
        asm = Assembler()
        asm.assemble_string("NOP\nHALT")
        assert asm.get_words() == (0x0000, 0xF000)

    def test_verbose_logs(self, caplog):
        asm = Assembler(verbose=True)
        with caplog.at_level("INFO", logger="giga_sdk"):
            asm.assemble_string("NOP", "prog.asm")
        assert "Parsed 1 statements from prog.asm" in caplog.text


# =============================================================================
# File Input Tests
# =============================================================================

class TestFileInput:
    """Test assembling from files."""

    def test_assemble_file(self, tmp_path):
        source = tmp_path / "prog.asm"
        source.write_text("MOVI R1, 5\nHALT\n")
        result = assemble_file(source)
        assert result.ok
        assert result.bytecode.words == (0x2105, 0xF000)

    def test_error_carries_filename(self, tmp_path):
        source = tmp_path / "bad.asm"
        source.write_text("NOP\nFOO\n")
        result = assemble_file(source)
        assert result.error.location.filename == str(source)
        assert str(result.error).startswith(f"{source}:2:1: error: unknown mnemonic")

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            assemble_file(tmp_path / "missing.asm")

    def test_write_binary(self, tmp_path):
        asm = Assembler()
        asm.assemble_string("MOVI R0, 15\nHALT")
        out = tmp_path / "out.bin"
        asm.write_binary(out)
        assert out.read_bytes() == bytes([0x0F, 0x20, 0x00, 0xF0])

    def test_write_binary_after_failure(self, tmp_path):
        asm = Assembler()
        asm.assemble_string("BAD")
        with pytest.raises(GigaError):
            asm.write_binary(tmp_path / "out.bin")

    def test_latin1_comment_bytes(self, tmp_path):
        source = tmp_path / "prog.asm"
        source.write_bytes(b"; caf\xe9\nHALT\n")
        assert assemble_file(source).ok
