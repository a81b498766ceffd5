#!/usr/bin/env python3
"""
Giga-ALU Toolchain Demo
=======================

This script demonstrates how to use the Giga SDK to:
1. Assemble a source file
2. Inspect the label table and instruction words
3. Load the program into the VM and decode it word by word
4. Disassemble the bytecode back into source

Usage:
    python examples/assemble_demo.py [file.asm]
"""

import sys
from pathlib import Path

from giga_sdk import Assembler, GigaDisassembler, GigaVM
from giga_sdk.errors import FetchError


def main():
    source_file = Path(sys.argv[1]) if len(sys.argv) > 1 else Path(__file__).with_name("counter.asm")

    # ==========================================================================
    # 1. Assemble
    # ==========================================================================
    print(f"Assembling {source_file}...")
    result = Assembler().assemble_file(source_file)

    if not result.ok:
        print(result.error)
        return 1

    bytecode = result.bytecode
    print(f"  {bytecode.word_count} words, {len(bytecode.to_bytes())} bytes")

    # ==========================================================================
    # 2. Labels and words
    # ==========================================================================
    print("\nLabels:")
    for name, address in bytecode.labels.items():
        print(f"  {name:<10} {address:3d}")

    # ==========================================================================
    # 3. Load into the VM and walk the program
    # ==========================================================================
    vm = GigaVM()
    vm.load_program(bytecode.words)

    print("\nDecoded from VM memory:")
    while True:
        try:
            decoded = vm.decode_current()
        except FetchError:
            break
        name = decoded.op.name if decoded.op is not None else "?"
        print(
            f"  pc={vm.program_counter:02d} {decoded.raw:04X}  {name:<5}"
            f" dest={decoded.dest:X} src={decoded.src:X} imm4={decoded.imm4:X}"
        )
        vm.program_counter += 1

    # ==========================================================================
    # 4. Disassemble
    # ==========================================================================
    disasm = GigaDisassembler({address: name for name, address in bytecode.labels.items()})
    print("\nDisassembly:")
    print(disasm.disassemble_to_text(bytecode.words))
    return 0


if __name__ == "__main__":
    sys.exit(main())
