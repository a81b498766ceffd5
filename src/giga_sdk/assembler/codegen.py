"""
Giga-ALU Code Generator
=======================

This module turns parsed statements into 16-bit Giga-ALU instruction words.
It implements a two-pass assembly process:

Pass 1 (Address Resolution)
---------------------------
- Walk statements in program order with a word counter starting at 0
- Bind each label to the current counter value
- Count instruction statements, stopping at the 129th instruction
- Directives do not move the counter

Pass 2 (Encoding)
-----------------
- Resolve each mnemonic against the instruction table
- Validate operand count and kind for the opcode
- Resolve JMP label operands through the label table
- Pack opcode, dest, src and imm4 into one word

The label table is created inside each ``generate()`` call and handed back
with the result, so two generators (or two runs of one generator) never see
each other's labels.

Operand Shapes
--------------
| Opcode family               | Operands        | Fields                     |
|-----------------------------|-----------------|----------------------------|
| NOP, HALT                   | none            | all 0                      |
| MOVI                        | Rd, imm         | dest=Rd, imm4=imm          |
| MOV, ADD, SUB, AND, OR, XOR | Rd, Rs          | dest=Rd, src=Rs            |
| NOT, SHL, SHR               | Rd              | dest=Rd                    |
| LD                          | Rd, [addr]      | dest=Rd, src:imm4=addr     |
| ST                          | [addr], Rs      | dest:imm4=addr, src=Rs     |
| JMP                         | label or imm    | dest:src:imm4=target       |
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional
import difflib
import logging

from giga_sdk.errors import (
    DuplicateSymbolError,
    EmptyProgramError,
    OperandError,
    PassMismatchError,
    ProgramSizeError,
    SourceLocation,
    UndefinedSymbolError,
    UnknownMnemonicError,
)
from giga_sdk.assembler.lexer import Span
from giga_sdk.assembler.parser import (
    Statement,
    LabelDef,
    Instruction,
    Directive,
    Operand,
    RegisterOperand,
    ImmediateOperand,
    MemoryOperand,
    LabelOperand,
)
from giga_sdk.cpu import (
    MAX_PROGRAM_WORDS,
    NO_OPERAND_OPCODES,
    REGISTER_PAIR_OPCODES,
    SINGLE_REGISTER_OPCODES,
    Opcode,
    encode_instruction,
    lookup_opcode,
    split_address,
    split_jump_target,
)


logger = logging.getLogger(__name__)


# Operand syntax shown in "usage:" hints
OPERAND_USAGE: dict[Opcode, str] = {
    Opcode.NOP: "",
    Opcode.HALT: "",
    Opcode.MOVI: "Rd, imm",
    Opcode.NOT: "Rd",
    Opcode.SHL: "Rd",
    Opcode.SHR: "Rd",
    Opcode.LD: "Rd, [addr]",
    Opcode.ST: "[addr], Rs",
    Opcode.JMP: "label",
    **{op: "Rd, Rs" for op in REGISTER_PAIR_OPCODES},
}


# =============================================================================
# Bytecode Container
# =============================================================================

@dataclass(frozen=True)
class Bytecode:
    """
    Assembled program.

    Attributes:
        words: Instruction words in emission order (at most 128)
        labels: Label name -> word address table built by pass 1
    """
    words: tuple[int, ...]
    labels: dict[str, int] = field(default_factory=dict, compare=False)

    @property
    def word_count(self) -> int:
        return len(self.words)

    def to_bytes(self) -> bytes:
        """
        Serialize as little-endian byte pairs, the layout the VM loads.

        Returns:
            ``2 * word_count`` bytes, low byte first for every word
        """
        data = bytearray()
        for word in self.words:
            data.append(word & 0xFF)
            data.append((word >> 8) & 0xFF)
        return bytes(data)

    def __iter__(self) -> Iterator[int]:
        return iter(self.words)

    def __len__(self) -> int:
        return len(self.words)


# =============================================================================
# Code Generator
# =============================================================================

class CodeGenerator:
    """
    Two-pass code generator for Giga-ALU statements.

    Usage:
        codegen = CodeGenerator()
        bytecode = codegen.generate(statements)
        words = bytecode.words
        labels = bytecode.labels

    Errors are raised at the first failing statement; there is no partial
    result.
    """

    def __init__(self, allow_duplicate_labels: bool = False):
        """
        Initialize the code generator.

        Args:
            allow_duplicate_labels: If True, a label defined again silently
                                    rebinds to the later address instead of
                                    raising DuplicateSymbolError.
        """
        self._allow_duplicate_labels = allow_duplicate_labels
        self._last_labels: dict[str, int] = {}

    # =========================================================================
    # Public Interface
    # =========================================================================

    def generate(self, statements: list[Statement]) -> Bytecode:
        """
        Assemble statements into instruction words.

        Args:
            statements: Parsed statements in program order

        Returns:
            Bytecode holding the words and the label table

        Raises:
            AssemblerError: At the first error in either pass
        """
        if not statements:
            raise EmptyProgramError()

        labels, instruction_count = self._pass1(statements)
        logger.debug(f"Pass 1: {instruction_count} instructions, {len(labels)} labels")
        for name, address in labels.items():
            logger.debug(f"  {name} = {address}")

        words = self._pass2(statements, labels)
        if len(words) != instruction_count:
            raise PassMismatchError(instruction_count, len(words))
        logger.debug(f"Pass 2: emitted {len(words)} words")

        self._last_labels = dict(labels)
        return Bytecode(words=tuple(words), labels=labels)

    def get_labels(self) -> dict[str, int]:
        """Return a copy of the label table from the most recent generate()."""
        return dict(self._last_labels)

    # =========================================================================
    # Pass 1: Address Resolution
    # =========================================================================

    def _pass1(self, statements: list[Statement]) -> tuple[dict[str, int], int]:
        """
        Bind labels to word addresses and count instructions.

        Returns:
            (label table, number of instruction statements)
        """
        labels: dict[str, int] = {}
        definitions: dict[str, SourceLocation] = {}
        address = 0

        for stmt in statements:
            if isinstance(stmt, LabelDef):
                name = stmt.name
                if name in definitions and not self._allow_duplicate_labels:
                    raise DuplicateSymbolError(
                        name,
                        location=stmt.location,
                        original_location=definitions[name],
                        source_line=_source_line(stmt.span, stmt.location),
                    )
                definitions.setdefault(name, stmt.location)
                labels[name] = address

            elif isinstance(stmt, Instruction):
                address += 1
                if address > MAX_PROGRAM_WORDS:
                    raise ProgramSizeError(
                        MAX_PROGRAM_WORDS,
                        location=stmt.location,
                        source_line=_source_line(stmt.mnemonic_span, stmt.location),
                    )

            elif isinstance(stmt, Directive):
                continue

            else:
                raise TypeError(f"unexpected statement type {type(stmt).__name__}")

        return labels, address

    # =========================================================================
    # Pass 2: Encoding
    # =========================================================================

    def _pass2(self, statements: list[Statement], labels: dict[str, int]) -> list[int]:
        words: list[int] = []
        for stmt in statements:
            if isinstance(stmt, Instruction):
                words.append(self._encode(stmt, labels))
            elif not isinstance(stmt, (LabelDef, Directive)):
                raise TypeError(f"unexpected statement type {type(stmt).__name__}")
        return words

    def _encode(self, inst: Instruction, labels: dict[str, int]) -> int:
        """Validate one instruction's operands and pack it into a word."""
        opcode = lookup_opcode(inst.mnemonic)
        if opcode is None:
            raise UnknownMnemonicError(
                inst.mnemonic,
                location=inst.location,
                source_line=_source_line(inst.mnemonic_span, inst.location),
            )

        ops = inst.operands

        if opcode in NO_OPERAND_OPCODES:
            self._require_count(inst, opcode, 0)
            return encode_instruction(opcode)

        if opcode == Opcode.MOVI:
            self._require_count(inst, opcode, 2)
            dest = self._require(inst, opcode, ops[0], RegisterOperand, "first operand must be register")
            imm = self._require(inst, opcode, ops[1], ImmediateOperand, "second operand must be immediate")
            return encode_instruction(opcode, dest=dest.index, imm4=imm.value)

        if opcode in REGISTER_PAIR_OPCODES:
            self._require_count(inst, opcode, 2)
            dest = self._require(inst, opcode, ops[0], RegisterOperand, "operands must be registers")
            src = self._require(inst, opcode, ops[1], RegisterOperand, "operands must be registers")
            return encode_instruction(opcode, dest=dest.index, src=src.index)

        if opcode in SINGLE_REGISTER_OPCODES:
            self._require_count(inst, opcode, 1)
            dest = self._require(inst, opcode, ops[0], RegisterOperand, "operand must be register")
            return encode_instruction(opcode, dest=dest.index)

        if opcode == Opcode.LD:
            self._require_count(inst, opcode, 2)
            dest = self._require(inst, opcode, ops[0], RegisterOperand, "first operand must be register")
            mem = self._require(inst, opcode, ops[1], MemoryOperand, "second operand must be memory address")
            high, low = split_address(mem.address)
            return encode_instruction(opcode, dest=dest.index, src=high, imm4=low)

        if opcode == Opcode.ST:
            self._require_count(inst, opcode, 2)
            mem = self._require(inst, opcode, ops[0], MemoryOperand, "first operand must be memory address")
            src = self._require(inst, opcode, ops[1], RegisterOperand, "second operand must be register")
            high, low = split_address(mem.address)
            return encode_instruction(opcode, dest=high, src=src.index, imm4=low)

        if opcode == Opcode.JMP:
            self._require_count(inst, opcode, 1)
            target = self._jump_target(inst, opcode, ops[0], labels)
            dest, src, imm4 = split_jump_target(target)
            return encode_instruction(opcode, dest=dest, src=src, imm4=imm4)

        raise AssertionError(f"no encoding for opcode {opcode.name}")

    def _jump_target(
        self,
        inst: Instruction,
        opcode: Opcode,
        operand: Operand,
        labels: dict[str, int],
    ) -> int:
        if isinstance(operand, ImmediateOperand):
            return operand.value

        if isinstance(operand, LabelOperand):
            name = operand.name
            if name not in labels:
                raise UndefinedSymbolError(
                    name,
                    location=inst.location,
                    source_line=_source_line(inst.mnemonic_span, inst.location),
                    similar_symbols=difflib.get_close_matches(name, list(labels), n=3),
                )
            return labels[name]

        raise self._operand_error(inst, opcode, "operand must be label or immediate")

    # =========================================================================
    # Operand Validation Helpers
    # =========================================================================

    def _require_count(self, inst: Instruction, opcode: Opcode, count: int) -> None:
        if len(inst.operands) == count:
            return
        if count == 0:
            message = "takes no operands"
        elif count == 1:
            message = "requires 1 operand"
        else:
            message = f"requires {count} operands"
        raise self._operand_error(inst, opcode, message)

    def _require(self, inst: Instruction, opcode: Opcode, operand: Operand, kind: type, message: str):
        if not isinstance(operand, kind):
            raise self._operand_error(inst, opcode, message)
        return operand

    def _operand_error(self, inst: Instruction, opcode: Opcode, message: str) -> OperandError:
        return OperandError(
            opcode.name,
            f"{opcode.name} {message}",
            location=inst.location,
            source_line=_source_line(inst.mnemonic_span, inst.location),
            expected=OPERAND_USAGE[opcode],
        )


def _source_line(span: Span, location: SourceLocation) -> Optional[str]:
    """Return the text of the source line a statement starts on."""
    lines = span.source.split("\n")
    if 1 <= location.line <= len(lines):
        return lines[location.line - 1].rstrip("\r")
    return None
