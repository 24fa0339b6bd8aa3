"""
LC-3 Code Generator
===================

Second pass of the assembler: encode each raw instruction into 16-bit
machine words, using the symbol table built by the linker.

PC-Relative Addressing
----------------------
Branches, JSR and the LD/LDI/LEA/ST/STI family address their target
relative to the *incremented* program counter, i.e. the address of the word
after the instruction being encoded::

    offset = address(label) - (address(instruction) + 1)

The generator therefore tracks a "next PC" cursor: ``.ORIG value`` sets it
to ``value + 1``, ``.END`` clears it, and every other instruction advances it
by its word footprint.

Two's-Complement Fields
-----------------------
A signed value ``v`` fits a ``b``-bit field when
``-2**(b-1) <= v <= 2**(b-1) - 1``; the stored pattern is ``v`` masked to
``b`` bits. Field widths:

| Field      | Bits | Range            |
|------------|------|------------------|
| imm5       | 5    | -16 .. 15        |
| offset6    | 6    | -32 .. 31        |
| PCoffset9  | 9    | -256 .. 255      |
| PCoffset11 | 11   | -1024 .. 1023    |
| .FILL      | 16   | -32768 .. 32767  |

The TRAP vector is the exception: it is truncated to 8 bits without a range
check.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, Optional
import logging

from visual_lc3.errors import (
    CodegenError,
    FieldRangeError,
    SourceLocation,
    UndefinedSymbolError,
)
from visual_lc3.assembler.lexer import Token, TokenType
from visual_lc3.assembler.linker import SymbolTable, outside_region_message, word_footprint
from visual_lc3.assembler.opcodes import (
    BRANCH_INSTRUCTIONS,
    Mnemonic,
    condition_codes,
    get_instruction_info,
)
from visual_lc3.assembler.parser import RawInstruction

logger = logging.getLogger(__name__)

# Register implied by RET (JMP R7)
RETURN_REGISTER = 7


# =============================================================================
# Field Encoding
# =============================================================================

def encode_twos_complement(
    value: int,
    bits: int,
    location: Optional[SourceLocation] = None,
) -> int:
    """
    Encode a signed value into a ``bits``-wide two's-complement field.

    Raises:
        FieldRangeError: If the value does not fit

    >>> encode_twos_complement(-1, 5)
    31
    """
    lower = -(1 << (bits - 1))
    upper = (1 << (bits - 1)) - 1
    if value < lower or value > upper:
        raise FieldRangeError(value, bits, location)
    return value & ((1 << bits) - 1)


def _opcode(mnemonic: Mnemonic) -> int:
    """Return the opcode already shifted into bits 15-12."""
    return get_instruction_info(mnemonic).opcode << 12


# =============================================================================
# Code Block
# =============================================================================

@dataclass(frozen=True)
class CodeBlock:
    """
    The words produced by one instruction.

    Attributes:
        address: Address of the first word
        instruction: The instruction that produced the words
        words: Encoded words (empty for ``.BLKW 0``)
    """
    address: int
    instruction: RawInstruction
    words: tuple[int, ...]


# =============================================================================
# Code Generator
# =============================================================================

Encoder = Callable[[RawInstruction, int], list[int]]


class CodeGenerator:
    """
    Generates LC-3 machine words from raw instructions.

    The generator only holds the (read-only) symbol table; the program
    counter lives in ``generate`` so the same instance can encode any
    number of instruction lists.

    Usage:
        symbols = resolve_symbols(instructions)
        words = CodeGenerator(symbols).generate(instructions)
    """

    def __init__(self, symbols: SymbolTable):
        self._symbols = symbols

        # One encoder per mnemonic that can reach this pass. Trap aliases are
        # rewritten by the parser and .ORIG/.END only steer the cursor.
        self._encoders: dict[Mnemonic, Encoder] = {
            Mnemonic.ADD: self._encode_operate,
            Mnemonic.AND: self._encode_operate,
            Mnemonic.NOT: self._encode_not,
            Mnemonic.JMP: self._encode_jmp,
            Mnemonic.JSR: self._encode_jsr,
            Mnemonic.JSRR: self._encode_jsrr,
            Mnemonic.RET: self._encode_ret,
            Mnemonic.RTI: self._encode_rti,
            Mnemonic.TRAP: self._encode_trap,
            Mnemonic.LD: self._encode_pc_relative,
            Mnemonic.LDI: self._encode_pc_relative,
            Mnemonic.LEA: self._encode_pc_relative,
            Mnemonic.ST: self._encode_pc_relative,
            Mnemonic.STI: self._encode_pc_relative,
            Mnemonic.LDR: self._encode_base_offset,
            Mnemonic.STR: self._encode_base_offset,
            Mnemonic.FILL: self._encode_fill,
            Mnemonic.BLKW: self._encode_blkw,
            Mnemonic.STRINGZ: self._encode_stringz,
        }
        for branch in BRANCH_INSTRUCTIONS:
            self._encoders[branch] = self._encode_branch

    @property
    def supported_mnemonics(self) -> frozenset[Mnemonic]:
        """Mnemonics this generator can encode (besides .ORIG and .END)."""
        return frozenset(self._encoders)

    def generate(self, instructions: Iterable[RawInstruction]) -> list[int]:
        """
        Encode raw instructions into machine words.

        Args:
            instructions: Raw instructions from the parser

        Returns:
            16-bit words in source order

        Raises:
            CodegenError: If an instruction lies outside an .ORIG/.END region
                          or has no encoding
            UndefinedSymbolError: If a label reference cannot be resolved
            FieldRangeError: If a value does not fit its field
        """
        words = [word for block in self.generate_blocks(instructions) for word in block.words]
        logger.debug(f"Generated {len(words)} words")
        return words

    def generate_blocks(self, instructions: Iterable[RawInstruction]) -> list[CodeBlock]:
        """
        Encode raw instructions, keeping the address of each instruction.

        Raises the same errors as ``generate``.
        """
        blocks: list[CodeBlock] = []
        next_pc: Optional[int] = None

        for instruction in instructions:
            if instruction.operator is Mnemonic.ORIG:
                next_pc = instruction.operands[0].as_immediate() + 1
                continue
            if instruction.operator is Mnemonic.END:
                next_pc = None
                continue

            if next_pc is None:
                raise CodegenError(
                    outside_region_message(instruction),
                    instruction.location,
                    hint="place code between .ORIG and .END",
                )

            words = self.encode(instruction, next_pc)
            blocks.append(CodeBlock(next_pc - 1, instruction, tuple(words)))
            next_pc += word_footprint(instruction)

        return blocks

    def encode(self, instruction: RawInstruction, next_pc: int) -> list[int]:
        """
        Encode one instruction.

        Args:
            instruction: The instruction to encode
            next_pc: Address of the word following the instruction

        Returns:
            The words the instruction occupies
        """
        encoder = self._encoders.get(instruction.operator)
        if encoder is None:
            raise CodegenError(
                f"no encoding for operator '{instruction.operator}'",
                instruction.location,
            )
        return encoder(instruction, next_pc)

    # =========================================================================
    # Operand Helpers
    # =========================================================================

    def _resolve_label(self, token: Token) -> int:
        """Look up a label reference."""
        name = token.as_label()
        symbol = self._symbols.get_symbol(name)
        if symbol is None:
            raise UndefinedSymbolError(
                name,
                location=token.location,
                similar_symbols=self._symbols.find_similar(name),
            )
        return symbol.address

    def _pc_offset(self, token: Token, next_pc: int, bits: int) -> int:
        """Encode the distance from ``next_pc`` to a label."""
        offset = self._resolve_label(token) - next_pc
        return encode_twos_complement(offset, bits, token.location)

    # =========================================================================
    # Instruction Encoders
    # =========================================================================

    def _encode_operate(self, instruction: RawInstruction, next_pc: int) -> list[int]:
        """ADD/AND in register or immediate mode."""
        dr, sr1, op2 = instruction.operands
        word = (
            _opcode(instruction.operator)
            | dr.as_register_id() << 9
            | sr1.as_register_id() << 6
        )

        if op2.kind == TokenType.IMMEDIATE:
            word |= 1 << 5
            word |= encode_twos_complement(op2.as_immediate(), 5, op2.location)
        else:
            word |= op2.as_register_id()

        return [word]

    def _encode_not(self, instruction: RawInstruction, next_pc: int) -> list[int]:
        dr, sr = instruction.operands
        return [_opcode(Mnemonic.NOT) | dr.as_register_id() << 9 | sr.as_register_id() << 6 | 0b111111]

    def _encode_branch(self, instruction: RawInstruction, next_pc: int) -> list[int]:
        (label,) = instruction.operands
        cc = condition_codes(instruction.operator)
        return [_opcode(instruction.operator) | cc << 9 | self._pc_offset(label, next_pc, 9)]

    def _encode_jmp(self, instruction: RawInstruction, next_pc: int) -> list[int]:
        (base,) = instruction.operands
        return [_opcode(Mnemonic.JMP) | base.as_register_id() << 6]

    def _encode_ret(self, instruction: RawInstruction, next_pc: int) -> list[int]:
        return [_opcode(Mnemonic.RET) | RETURN_REGISTER << 6]

    def _encode_jsr(self, instruction: RawInstruction, next_pc: int) -> list[int]:
        (label,) = instruction.operands
        return [_opcode(Mnemonic.JSR) | 1 << 11 | self._pc_offset(label, next_pc, 11)]

    def _encode_jsrr(self, instruction: RawInstruction, next_pc: int) -> list[int]:
        (base,) = instruction.operands
        return [_opcode(Mnemonic.JSRR) | base.as_register_id() << 6]

    def _encode_rti(self, instruction: RawInstruction, next_pc: int) -> list[int]:
        return [_opcode(Mnemonic.RTI)]

    def _encode_trap(self, instruction: RawInstruction, next_pc: int) -> list[int]:
        (vector,) = instruction.operands
        return [_opcode(Mnemonic.TRAP) | vector.as_immediate() & 0xFF]

    def _encode_pc_relative(self, instruction: RawInstruction, next_pc: int) -> list[int]:
        """LD, LDI, LEA, ST and STI: register plus PCoffset9."""
        register, label = instruction.operands
        return [
            _opcode(instruction.operator)
            | register.as_register_id() << 9
            | self._pc_offset(label, next_pc, 9)
        ]

    def _encode_base_offset(self, instruction: RawInstruction, next_pc: int) -> list[int]:
        """LDR and STR: register, base register plus offset6."""
        register, base, offset = instruction.operands
        return [
            _opcode(instruction.operator)
            | register.as_register_id() << 9
            | base.as_register_id() << 6
            | encode_twos_complement(offset.as_immediate(), 6, offset.location)
        ]

    # =========================================================================
    # Data Encoders
    # =========================================================================

    def _encode_fill(self, instruction: RawInstruction, next_pc: int) -> list[int]:
        (value,) = instruction.operands
        return [encode_twos_complement(value.as_immediate(), 16, value.location)]

    def _encode_blkw(self, instruction: RawInstruction, next_pc: int) -> list[int]:
        return [0] * word_footprint(instruction)

    def _encode_stringz(self, instruction: RawInstruction, next_pc: int) -> list[int]:
        (text,) = instruction.operands
        words = []
        for char in text.as_string_content():
            code = ord(char)
            if code > 0xFFFF:
                raise CodegenError(
                    f"character U+{code:X} does not fit in a 16-bit word",
                    text.location,
                )
            words.append(code)
        words.append(0)
        return words


# =============================================================================
# Convenience Function
# =============================================================================

def generate(instructions: Iterable[RawInstruction], symbols: SymbolTable) -> list[int]:
    """Encode raw instructions using a completed symbol table."""
    return CodeGenerator(symbols).generate(instructions)
