"""
Giga SDK Command-Line Interface
===============================

This package provides command-line tools for the Giga SDK:

- **gigaasm**: Giga-ALU assembler (also dumps tokens and statements)
- **gigadisasm**: Giga-ALU disassembler

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["gigaasm", "gigadisasm"]
