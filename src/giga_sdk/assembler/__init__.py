"""
Giga-ALU Assembler
==================

This package provides a complete assembler for the Giga-ALU, a minimal 4-bit
CPU with eight registers and a fixed 16-bit instruction word.

Main Components
---------------
- **Assembler**: Main assembler class that orchestrates the assembly process
- **Lexer**: Tokenizes assembly source into positioned tokens
- **Parser**: Parses tokens into statements (labels, instructions, directives)
- **CodeGenerator**: Two-pass generator producing instruction words

Assembly Process
----------------
1. **Parsing (Lexer + Parser)**:
   - Tokenize source into tokens with line/column positions
   - Parse tokens into statements with up to three typed operands

2. **Code Generation (CodeGenerator)** (two-pass):
   - Pass 1: Bind labels to word addresses, enforce the 128-word limit
   - Pass 2: Validate operands per opcode, resolve labels, encode words

Example Usage
-------------
>>> from giga_sdk.assembler import assemble
>>> result = assemble('''
... loop:
...     ADD R0, R1
...     JMP loop
... ''')
>>> result.bytecode.words
(12304, 53248)
"""

from giga_sdk.assembler.assembler import (
    Assembler,
    AssemblyResult,
    assemble,
    assemble_file,
)
from giga_sdk.assembler.lexer import Lexer, Span, Token, TokenType
from giga_sdk.assembler.parser import (
    Parser,
    Statement,
    LabelDef,
    Instruction,
    Directive,
    Operand,
    RegisterOperand,
    ImmediateOperand,
    MemoryOperand,
    LabelOperand,
    parse_source,
)
from giga_sdk.assembler.codegen import Bytecode, CodeGenerator

__all__ = [
    # Main class and functions
    "Assembler",
    "AssemblyResult",
    "assemble",
    "assemble_file",
    # Lexer
    "Lexer",
    "Span",
    "Token",
    "TokenType",
    # Parser
    "Parser",
    "Statement",
    "LabelDef",
    "Instruction",
    "Directive",
    "Operand",
    "RegisterOperand",
    "ImmediateOperand",
    "MemoryOperand",
    "LabelOperand",
    "parse_source",
    # Code generator
    "Bytecode",
    "CodeGenerator",
]
