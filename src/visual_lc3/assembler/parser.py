"""
LC-3 Assembly Language Parser
=============================

This module implements a parser for LC-3 assembly language. It converts
the token stream from the lexer into a list of raw instructions: an
operator, its operand tokens and the labels attached to it.

Grammar
-------
The source is a sequence of instructions, each of the form::

    LABEL* OPERATOR operand*

The number and kind of operands are fixed per operator by the operand
signature table in ``opcodes.OPCODE_TABLE``:

| Operator                    | Operands                          |
|-----------------------------|-----------------------------------|
| .ORIG .FILL TRAP            | immediate                         |
| .BLKW                       | number                            |
| .STRINGZ                    | string                            |
| .END RET RTI GETC ... HALT  | (none)                            |
| ADD AND                     | register, register, reg-or-imm    |
| BR BRn ... BRnzp JSR        | label                             |
| JMP JSRR                    | register                          |
| LD LDI LEA ST STI           | register, label                   |
| LDR STR                     | register, register, immediate     |
| NOT                         | register, register                |

Since line breaks are not tokens, ``LABEL`` tokens always belong to the
next operator, whether they are on the same line or not.

Trap Aliases
------------
GETC, OUT, PUTS, IN, PUTSP and HALT are replaced by a TRAP instruction
with the matching vector, keeping the labels of the alias::

    DONE HALT   ->   [DONE] <TRAP> I:x25
"""

from dataclasses import dataclass, field
from typing import Optional
import logging

from visual_lc3.errors import ParseError, SourceLocation
from visual_lc3.assembler.lexer import Token, TokenType
from visual_lc3.assembler.opcodes import (
    Mnemonic,
    OperandKind,
    TRAP_ALIASES,
    get_instruction_info,
    lookup_mnemonic,
)

logger = logging.getLogger(__name__)


# Token types each operand slot accepts
ACCEPTED_TYPES: dict[OperandKind, frozenset[TokenType]] = {
    OperandKind.REGISTER: frozenset({TokenType.REGISTER}),
    OperandKind.IMMEDIATE: frozenset({TokenType.IMMEDIATE}),
    OperandKind.REGISTER_OR_IMMEDIATE: frozenset({TokenType.REGISTER, TokenType.IMMEDIATE}),
    OperandKind.NUMBER: frozenset({TokenType.NUMBER}),
    OperandKind.LABEL: frozenset({TokenType.LABEL}),
    OperandKind.STRING: frozenset({TokenType.STRING}),
}


# =============================================================================
# Raw Instruction
# =============================================================================

@dataclass(frozen=True)
class RawInstruction:
    """
    One parsed instruction, before addresses are known.

    Attributes:
        labels: Labels attached to the instruction, in source order
                without repeats; all name the same address
        operator: The canonical mnemonic (trap aliases already rewritten)
        operands: Operand tokens, checked against the operand signature
        location: Position of the operator token (not part of equality)
    """
    labels: tuple[str, ...]
    operator: Mnemonic
    operands: tuple[Token, ...] = ()
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def format(self) -> str:
        """
        Render for display, e.g. ``[LOOP] <ADD> R:R1, R:R1, I:#-1``.

        The label list and the operand list are left out when empty.
        """
        parts = []
        if self.labels:
            parts.append(f"[{', '.join(self.labels)}]")
        parts.append(f"<{self.operator.value}>")
        if self.operands:
            parts.append(", ".join(operand.format() for operand in self.operands))
        return " ".join(parts)


# =============================================================================
# Parser Implementation
# =============================================================================

class Parser:
    """
    Parses LC-3 tokens into raw instructions.

    Usage:
        tokens = tokenize(source, filename)
        parser = Parser(tokens, filename)
        instructions = parser.parse()
    """

    def __init__(self, tokens: list[Token], filename: str = "<input>"):
        """
        Initialize the parser.

        Args:
            tokens: List of tokens from lexer
            filename: Source filename for error reporting
        """
        self._tokens = tokens
        self._filename = filename
        self._pos = 0

    def parse(self) -> list[RawInstruction]:
        """
        Parse all tokens into raw instructions.

        Returns:
            List of RawInstruction objects in source order

        Raises:
            ParseError: If the tokens do not follow the operand grammar
        """
        instructions: list[RawInstruction] = []

        while not self._at_end():
            labels = self._collect_labels()

            # Labels with nothing after them define nothing
            if self._at_end():
                logger.debug(f"Ignoring trailing labels: {', '.join(labels)}")
                break

            instructions.append(self._parse_instruction(labels))

        return instructions

    # =========================================================================
    # Token Navigation
    # =========================================================================

    def _at_end(self) -> bool:
        """Check if at end of token stream."""
        return self._pos >= len(self._tokens)

    def _check(self, *types: TokenType) -> bool:
        """Check if current token is one of the given types."""
        return not self._at_end() and self._tokens[self._pos].kind in types

    def _advance(self) -> Token:
        """Consume and return current token."""
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    # =========================================================================
    # Instruction Parsing
    # =========================================================================

    def _collect_labels(self) -> tuple[str, ...]:
        """Consume the labels in front of an operator."""
        names = []
        while self._check(TokenType.LABEL):
            names.append(self._advance().content)
        return tuple(dict.fromkeys(names))

    def _parse_instruction(self, labels: tuple[str, ...]) -> RawInstruction:
        """Parse an operator and its operands."""
        token = self._advance()
        if token.kind != TokenType.OPERATOR:
            raise ParseError(
                f"expected an operator, got {token.kind.name.lower()} '{token.content}'",
                token.location,
            )

        mnemonic = lookup_mnemonic(token.content)
        if mnemonic is None:
            raise ParseError(f"unknown operator '{token.content}'", token.location)

        info = get_instruction_info(mnemonic)
        operands = tuple(
            self._parse_operand(mnemonic, kind, index, token)
            for index, kind in enumerate(info.operands, start=1)
        )

        vector = TRAP_ALIASES.get(mnemonic)
        if vector is not None:
            trap_vector = Token(
                TokenType.IMMEDIATE,
                f"x{vector:x}",
                token.line,
                token.column,
                token.filename,
            )
            return RawInstruction(labels, Mnemonic.TRAP, (trap_vector,), token.location)

        return RawInstruction(labels, mnemonic, operands, token.location)

    def _parse_operand(
        self,
        mnemonic: Mnemonic,
        kind: OperandKind,
        index: int,
        operator_token: Token,
    ) -> Token:
        """Consume one operand and check it against its grammar slot."""
        if self._at_end():
            count = len(get_instruction_info(mnemonic).operands)
            raise ParseError(
                f"'{mnemonic}' expects {count} operand(s), but the input ended",
                operator_token.location,
                hint=f"operand {index} should be a {kind}",
            )

        token = self._advance()
        if token.kind not in ACCEPTED_TYPES[kind]:
            raise ParseError(
                f"operand {index} of '{mnemonic}' must be a {kind}, "
                f"got {token.kind.name.lower()} '{token.content}'",
                token.location,
            )
        return token


# =============================================================================
# Convenience Function
# =============================================================================

def parse(tokens: list[Token], filename: str = "<input>") -> list[RawInstruction]:
    """
    Parse a token list into raw instructions.

    Raises:
        ParseError: If the tokens do not follow the operand grammar
    """
    instructions = Parser(tokens, filename).parse()
    logger.debug(f"Parsed {len(instructions)} instructions")
    return instructions
