"""
Giga SDK Disassembler Module
============================

Turns Giga-ALU instruction words back into assembly language, for inspecting
assembled binaries and for checking that assembly round-trips.

Usage:
    from giga_sdk.disassembler import GigaDisassembler

    disasm = GigaDisassembler()
    print(disasm.disassemble_to_text(words))
"""

from .giga import GigaDisassembler, DisassembledInstruction

__all__ = [
    "GigaDisassembler",
    "DisassembledInstruction",
]
