"""
Giga-ALU Virtual Machine
========================

VM state and the program load/fetch boundary consumed by anything that wants
to run assembled Giga-ALU bytecode.

Usage:
    from giga_sdk.emulator import GigaVM

    vm = GigaVM()
    vm.load_program(bytecode.words)
    instruction = vm.decode_current()
"""

from giga_sdk.emulator.vm import Flags, GigaVM, VMState

__all__ = [
    "Flags",
    "GigaVM",
    "VMState",
]
