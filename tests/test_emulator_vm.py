# =============================================================================
# test_emulator_vm.py - VM Boundary Tests
# =============================================================================
# Tests for VM state, program loading and instruction fetch.
# =============================================================================

import pytest

from giga_sdk.assembler import assemble
from giga_sdk.cpu import Opcode, alu_add
from giga_sdk.emulator import Flags, GigaVM
from giga_sdk.errors import FetchError, ProgramTooLargeError


@pytest.fixture
def vm():
    return GigaVM()


class TestInitialState:
    """Test a freshly created or reset VM."""

    def test_cleared(self, vm):
        assert vm.registers == [0] * 8
        assert vm.state.flags == Flags(0)
        assert vm.program_counter == 0
        assert vm.memory == bytearray(256)
        assert vm.loaded_program_words == 0

    def test_reset_clears_everything(self, vm):
        vm.load_program([0x1234])
        vm.set_register(3, 9)
        vm.program_counter = 1
        vm.reset()
        assert vm.registers[3] == 0
        assert vm.memory[0] == 0
        assert vm.program_counter == 0
        assert vm.loaded_program_words == 0


class TestLoadProgram:
    """Test little-endian program loading."""

    def test_little_endian_layout(self, vm):
        vm.load_program([0x2105, 0xF000])
        assert list(vm.memory[:4]) == [0x05, 0x21, 0x00, 0xF0]
        assert vm.loaded_program_words == 2

    def test_load_resets_program_counter(self, vm):
        vm.load_program([0, 0])
        vm.program_counter = 1
        vm.load_program([0])
        assert vm.program_counter == 0

    def test_full_memory(self, vm):
        vm.load_program([0xFFFF] * 128)
        assert vm.memory == bytearray([0xFF] * 256)

    def test_too_large(self, vm):
        with pytest.raises(ProgramTooLargeError) as exc_info:
            vm.load_program([0] * 129)
        assert exc_info.value.word_count == 129
        assert vm.loaded_program_words == 0

    def test_load_assembled_bytecode(self, vm):
        result = assemble("MOVI R1, 5\nHALT")
        vm.load_program(result.bytecode.words)
        assert bytes(vm.memory[:4]) == result.bytecode.to_bytes()


class TestFetch:
    """Test fetch and decode at the program counter."""

    def test_fetch_first_word(self, vm):
        vm.load_program([0x2105, 0xF000])
        assert vm.fetch_word() == 0x2105

    def test_fetch_does_not_advance(self, vm):
        vm.load_program([0x2105, 0xF000])
        vm.fetch_word()
        assert vm.program_counter == 0

    def test_fetch_at_program_counter(self, vm):
        vm.load_program([0x2105, 0xF000])
        vm.program_counter = 1
        assert vm.fetch_word() == 0xF000

    def test_fetch_past_end(self, vm):
        vm.load_program([0x2105])
        vm.program_counter = 1
        with pytest.raises(FetchError):
            vm.fetch_word()

    def test_fetch_empty(self, vm):
        with pytest.raises(FetchError):
            vm.fetch_word()

    def test_decode_current(self, vm):
        vm.load_program([0xB214])
        decoded = vm.decode_current()
        assert decoded.op is Opcode.LD
        assert decoded.dest == 2
        assert decoded.memory_address == 0x14


class TestAluResults:
    """Test copying ALU results into registers and flags."""

    def test_apply_alu_result(self, vm):
        vm.apply_alu_result(2, alu_add(0xF, 1))
        assert vm.registers[2] == 0
        assert vm.flag_z
        assert vm.flag_c
        assert not vm.flag_n
        assert not vm.flag_v

    def test_set_register_masks(self, vm):
        vm.set_register(0, 0x1F)
        assert vm.registers[0] == 0xF
