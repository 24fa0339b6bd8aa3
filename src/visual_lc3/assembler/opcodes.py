"""
LC-3 Instruction Set Definition
===============================

This module defines the LC-3 mnemonics recognized by the assembler and the
tables keyed by them: the operand signature each mnemonic expects, the
4-bit opcode it encodes to, the trap vectors behind the trap aliases and the
condition-code bits of the branch family.

Instruction Format
------------------
Every LC-3 instruction is one 16-bit word. Bits 15-12 hold the opcode and
bits 11-0 hold the operand fields:

| Mnemonic | Opcode | Bits 11-0                              |
|----------|--------|----------------------------------------|
| ADD      | 0001   | DR SR1 0 00 SR2  /  DR SR1 1 imm5      |
| AND      | 0101   | DR SR1 0 00 SR2  /  DR SR1 1 imm5      |
| BR       | 0000   | n z p PCoffset9                        |
| JMP      | 1100   | 000 BaseR 000000                       |
| JSR      | 0100   | 1 PCoffset11                           |
| JSRR     | 0100   | 0 00 BaseR 000000                      |
| LD       | 0010   | DR PCoffset9                           |
| LDI      | 1010   | DR PCoffset9                           |
| LDR      | 0110   | DR BaseR offset6                       |
| LEA      | 1110   | DR PCoffset9                           |
| NOT      | 1001   | DR SR 111111                           |
| RET      | 1100   | 000 111 000000                         |
| RTI      | 1000   | 000000000000                           |
| ST       | 0011   | SR PCoffset9                           |
| STI      | 1011   | SR PCoffset9                           |
| STR      | 0111   | SR BaseR offset6                       |
| TRAP     | 1111   | 0000 trapvect8                         |

Pseudo-operations (.ORIG, .END, .FILL, .BLKW, .STRINGZ) have no opcode;
they steer the location counter or emit raw data words.

Trap Aliases
------------
GETC, OUT, PUTS, IN, PUTSP and HALT are shorthand for TRAP with a fixed
vector. The parser rewrites them, so the code generator only sees TRAP.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


# =============================================================================
# Mnemonics
# =============================================================================

class Mnemonic(Enum):
    """
    Every operator the assembler accepts.

    The value is the canonical (upper-case) spelling used in source text.
    """

    # Pseudo-operations
    ORIG = ".ORIG"
    END = ".END"
    FILL = ".FILL"
    BLKW = ".BLKW"
    STRINGZ = ".STRINGZ"

    # Operate instructions
    ADD = "ADD"
    AND = "AND"
    NOT = "NOT"

    # Branches (plain BR is the unconditional form)
    BR = "BR"
    BRN = "BRN"
    BRZ = "BRZ"
    BRP = "BRP"
    BRNZ = "BRNZ"
    BRZP = "BRZP"
    BRNP = "BRNP"
    BRNZP = "BRNZP"

    # Control transfer
    JMP = "JMP"
    JSR = "JSR"
    JSRR = "JSRR"
    RET = "RET"
    RTI = "RTI"
    TRAP = "TRAP"

    # Data movement
    LD = "LD"
    LDI = "LDI"
    LDR = "LDR"
    LEA = "LEA"
    ST = "ST"
    STI = "STI"
    STR = "STR"

    # Trap aliases
    GETC = "GETC"
    OUT = "OUT"
    PUTS = "PUTS"
    IN = "IN"
    PUTSP = "PUTSP"
    HALT = "HALT"

    def __str__(self) -> str:
        return self.value

    @property
    def is_pseudo(self) -> bool:
        """True for the dot-prefixed pseudo-operations."""
        return self.value.startswith(".")


class OperandKind(Enum):
    """
    Grammar slot for one operand of an instruction.

    REGISTER_OR_IMMEDIATE is the third operand of ADD/AND, which selects
    between register and immediate mode.
    """
    REGISTER = auto()
    IMMEDIATE = auto()
    REGISTER_OR_IMMEDIATE = auto()
    NUMBER = auto()
    LABEL = auto()
    STRING = auto()

    def __str__(self) -> str:
        """Return human-readable name for error messages."""
        return {
            OperandKind.REGISTER: "register",
            OperandKind.IMMEDIATE: "immediate",
            OperandKind.REGISTER_OR_IMMEDIATE: "register or immediate",
            OperandKind.NUMBER: "number",
            OperandKind.LABEL: "label",
            OperandKind.STRING: "string",
        }[self]


# =============================================================================
# Instruction Information
# =============================================================================

@dataclass(frozen=True)
class InstructionInfo:
    """
    Static facts about one mnemonic.

    Attributes:
        operands: Operand kinds the parser must find, in order
        opcode: Value of bits 15-12, or None for pseudo-operations and
                trap aliases (which are rewritten to TRAP)
    """
    operands: tuple[OperandKind, ...]
    opcode: Optional[int] = None

    def __repr__(self) -> str:
        kinds = ", ".join(str(k) for k in self.operands)
        if self.opcode is None:
            return f"InstructionInfo([{kinds}])"
        return f"InstructionInfo([{kinds}], opcode={self.opcode:04b})"


_R = OperandKind.REGISTER
_I = OperandKind.IMMEDIATE
_A = OperandKind.REGISTER_OR_IMMEDIATE
_N = OperandKind.NUMBER
_L = OperandKind.LABEL
_S = OperandKind.STRING

_BRANCH = InstructionInfo((_L,), 0b0000)

OPCODE_TABLE: dict[Mnemonic, InstructionInfo] = {
    Mnemonic.ORIG: InstructionInfo((_I,)),
    Mnemonic.END: InstructionInfo(()),
    Mnemonic.FILL: InstructionInfo((_I,)),
    Mnemonic.BLKW: InstructionInfo((_N,)),
    Mnemonic.STRINGZ: InstructionInfo((_S,)),

    Mnemonic.ADD: InstructionInfo((_R, _R, _A), 0b0001),
    Mnemonic.AND: InstructionInfo((_R, _R, _A), 0b0101),
    Mnemonic.NOT: InstructionInfo((_R, _R), 0b1001),

    Mnemonic.BR: _BRANCH,
    Mnemonic.BRN: _BRANCH,
    Mnemonic.BRZ: _BRANCH,
    Mnemonic.BRP: _BRANCH,
    Mnemonic.BRNZ: _BRANCH,
    Mnemonic.BRZP: _BRANCH,
    Mnemonic.BRNP: _BRANCH,
    Mnemonic.BRNZP: _BRANCH,

    Mnemonic.JMP: InstructionInfo((_R,), 0b1100),
    Mnemonic.JSR: InstructionInfo((_L,), 0b0100),
    Mnemonic.JSRR: InstructionInfo((_R,), 0b0100),
    Mnemonic.RET: InstructionInfo((), 0b1100),
    Mnemonic.RTI: InstructionInfo((), 0b1000),
    Mnemonic.TRAP: InstructionInfo((_I,), 0b1111),

    Mnemonic.LD: InstructionInfo((_R, _L), 0b0010),
    Mnemonic.LDI: InstructionInfo((_R, _L), 0b1010),
    Mnemonic.LDR: InstructionInfo((_R, _R, _I), 0b0110),
    Mnemonic.LEA: InstructionInfo((_R, _L), 0b1110),
    Mnemonic.ST: InstructionInfo((_R, _L), 0b0011),
    Mnemonic.STI: InstructionInfo((_R, _L), 0b1011),
    Mnemonic.STR: InstructionInfo((_R, _R, _I), 0b0111),

    Mnemonic.GETC: InstructionInfo(()),
    Mnemonic.OUT: InstructionInfo(()),
    Mnemonic.PUTS: InstructionInfo(()),
    Mnemonic.IN: InstructionInfo(()),
    Mnemonic.PUTSP: InstructionInfo(()),
    Mnemonic.HALT: InstructionInfo(()),
}

# Trap alias -> trap vector
TRAP_ALIASES: dict[Mnemonic, int] = {
    Mnemonic.GETC: 0x20,
    Mnemonic.OUT: 0x21,
    Mnemonic.PUTS: 0x22,
    Mnemonic.IN: 0x23,
    Mnemonic.PUTSP: 0x24,
    Mnemonic.HALT: 0x25,
}

BRANCH_INSTRUCTIONS = frozenset({
    Mnemonic.BR, Mnemonic.BRN, Mnemonic.BRZ, Mnemonic.BRP,
    Mnemonic.BRNZ, Mnemonic.BRZP, Mnemonic.BRNP, Mnemonic.BRNZP,
})

# All accepted spellings, upper-case
MNEMONICS = frozenset(m.value for m in Mnemonic)


# =============================================================================
# Lookup Functions
# =============================================================================

def lookup_mnemonic(spelling: str) -> Optional[Mnemonic]:
    """
    Find the mnemonic for a source spelling, ignoring case.

    Returns:
        The Mnemonic, or None if the spelling is not an operator
    """
    upper = spelling.upper()
    if upper not in MNEMONICS:
        return None
    return Mnemonic(upper)


def get_instruction_info(mnemonic: Mnemonic) -> InstructionInfo:
    """Return the static information for a mnemonic."""
    return OPCODE_TABLE[mnemonic]


def condition_codes(mnemonic: Mnemonic) -> int:
    """
    Return the n/z/p bits (as a 3-bit value) of a branch mnemonic.

    The flags are the letters after "BR"; plain BR tests all three.

    >>> condition_codes(Mnemonic.BRZP)
    3
    >>> condition_codes(Mnemonic.BR)
    7
    """
    if mnemonic not in BRANCH_INSTRUCTIONS:
        raise ValueError(f"'{mnemonic}' is not a branch instruction")

    flags = mnemonic.value[2:] or "NZP"
    cc = 0
    if "N" in flags:
        cc |= 0b100
    if "Z" in flags:
        cc |= 0b010
    if "P" in flags:
        cc |= 0b001
    return cc
