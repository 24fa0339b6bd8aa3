# =============================================================================
# test_parser.py - Parser Unit Tests
# =============================================================================
# Tests for the LC-3 assembler parser.
#
# Test coverage includes:
#   - Operand signatures of every operator
#   - Label attachment (same line and preceding lines)
#   - Trap alias expansion
#   - Intermediate instruction rendering
#   - Error conditions
# =============================================================================

import pytest
from visual_lc3.assembler.lexer import Token, TokenType, tokenize
from visual_lc3.assembler.opcodes import Mnemonic
from visual_lc3.assembler.parser import Parser, RawInstruction, parse
from visual_lc3.errors import ParseError


def parse_source(source: str) -> list:
    """Helper to tokenize and parse source."""
    return parse(tokenize(source))


def reg(name: str) -> Token:
    return Token(TokenType.REGISTER, name)


def imm(content: str) -> Token:
    return Token(TokenType.IMMEDIATE, content)


def lbl(name: str) -> Token:
    return Token(TokenType.LABEL, name)


# =============================================================================
# Operand Signature Tests
# =============================================================================

class TestSignatures:
    """Test that every operator is parsed with its operands."""

    def test_every_operator(self):
        source = '''
        .ORIG x1234
        ADD R0, R1, R2
        AND R3, R4, xa
        BR TAG
        JMP R6
        JSR TAG
        JSRR R6
        LD R0, TAG
        LDI R0, TAG
        LDR R0, R1, x2
        LEA R0, TAG
        NOT R3, R6
        RET
        RTI
        ST R0, TAG
        STI R0, TAG
        STR R0, R1, x2
        TRAP x25
        TAG .FILL x8
        .BLKW 99
        .STRINGZ "ciallo, world"
        GETC
        OUT
        PUTS
        IN
        PUTSP
        HALT
        .END
        '''
        assert parse_source(source) == [
            RawInstruction((), Mnemonic.ORIG, (imm("x1234"),)),
            RawInstruction((), Mnemonic.ADD, (reg("R0"), reg("R1"), reg("R2"))),
            RawInstruction((), Mnemonic.AND, (reg("R3"), reg("R4"), imm("xa"))),
            RawInstruction((), Mnemonic.BR, (lbl("TAG"),)),
            RawInstruction((), Mnemonic.JMP, (reg("R6"),)),
            RawInstruction((), Mnemonic.JSR, (lbl("TAG"),)),
            RawInstruction((), Mnemonic.JSRR, (reg("R6"),)),
            RawInstruction((), Mnemonic.LD, (reg("R0"), lbl("TAG"))),
            RawInstruction((), Mnemonic.LDI, (reg("R0"), lbl("TAG"))),
            RawInstruction((), Mnemonic.LDR, (reg("R0"), reg("R1"), imm("x2"))),
            RawInstruction((), Mnemonic.LEA, (reg("R0"), lbl("TAG"))),
            RawInstruction((), Mnemonic.NOT, (reg("R3"), reg("R6"))),
            RawInstruction((), Mnemonic.RET),
            RawInstruction((), Mnemonic.RTI),
            RawInstruction((), Mnemonic.ST, (reg("R0"), lbl("TAG"))),
            RawInstruction((), Mnemonic.STI, (reg("R0"), lbl("TAG"))),
            RawInstruction((), Mnemonic.STR, (reg("R0"), reg("R1"), imm("x2"))),
            RawInstruction((), Mnemonic.TRAP, (imm("x25"),)),
            RawInstruction(("TAG",), Mnemonic.FILL, (imm("x8"),)),
            RawInstruction((), Mnemonic.BLKW, (Token(TokenType.NUMBER, "99"),)),
            RawInstruction((), Mnemonic.STRINGZ, (Token(TokenType.STRING, '"ciallo, world"'),)),
            RawInstruction((), Mnemonic.TRAP, (imm("x20"),)),
            RawInstruction((), Mnemonic.TRAP, (imm("x21"),)),
            RawInstruction((), Mnemonic.TRAP, (imm("x22"),)),
            RawInstruction((), Mnemonic.TRAP, (imm("x23"),)),
            RawInstruction((), Mnemonic.TRAP, (imm("x24"),)),
            RawInstruction((), Mnemonic.TRAP, (imm("x25"),)),
            RawInstruction((), Mnemonic.END),
        ]

    def test_add_accepts_immediate_mode(self):
        (instr,) = parse_source("ADD R1, R1, #-1")
        assert instr.operands[2] == imm("#-1")

    def test_lowercase_operator_is_canonical(self):
        (instr,) = parse_source("brnz LOOP")
        assert instr.operator is Mnemonic.BRNZ

    def test_instructions_span_lines(self):
        """Operands may continue on the next line."""
        (instr,) = parse_source("ADD R0,\nR1\n, R2")
        assert instr.operands == (reg("R0"), reg("R1"), reg("R2"))


# =============================================================================
# Label Tests
# =============================================================================

class TestLabels:
    """Test label attachment."""

    def test_labels_on_preceding_lines(self):
        (instr,) = parse_source("FIRST\nSECOND\nTHIRD HALT")
        assert instr.labels == ("FIRST", "SECOND", "THIRD")

    def test_repeated_label_collapses(self):
        (instr,) = parse_source("A B A HALT")
        assert instr.labels == ("A", "B")

    def test_trailing_labels_are_dropped(self):
        instructions = parse_source("HALT DANGLING OTHER")
        assert instructions == [RawInstruction((), Mnemonic.TRAP, (imm("x25"),))]

    def test_trap_alias_keeps_labels(self):
        (instr,) = parse_source("DONE HALT")
        assert instr == RawInstruction(("DONE",), Mnemonic.TRAP, (imm("x25"),))

    def test_location_is_operator_position(self):
        (instr,) = parse(tokenize("LOOP\n  ADD R0, R0, R0", "main.asm"))
        assert str(instr.location) == "main.asm:2:3"


# =============================================================================
# Rendering Tests
# =============================================================================

class TestFormat:
    """Test the intermediate instruction rendering."""

    def test_full_instruction(self):
        (instr,) = parse_source("LOOP NEXT ADD R1, R1, #-1")
        assert instr.format() == "[LOOP, NEXT] <ADD> R:R1, R:R1, I:#-1"

    def test_no_labels(self):
        (instr,) = parse_source("LEA R0, TEXT")
        assert instr.format() == "<LEA> R:R0, L:TEXT"

    def test_no_operands(self):
        (instr,) = parse_source("END .END")
        assert instr.format() == "[END] <.END>"

    def test_trap_alias(self):
        (instr,) = parse_source("PUTS")
        assert instr.format() == "<TRAP> I:x22"

    def test_string_operand(self):
        (instr,) = parse_source('.STRINGZ "hi"')
        assert instr.format() == '<.STRINGZ> S:"hi"'


# =============================================================================
# Error Tests
# =============================================================================

class TestErrors:
    """Test parse error conditions."""

    def test_operand_where_operator_expected(self):
        with pytest.raises(ParseError) as exc_info:
            parse_source("R0 ADD R0, R0, R0")
        assert "expected an operator" in str(exc_info.value)
        assert "'R0'" in str(exc_info.value)

    def test_wrong_operand_kind(self):
        with pytest.raises(ParseError) as exc_info:
            parse_source("ADD R0, R1, LOOP")
        message = str(exc_info.value)
        assert "operand 3 of 'ADD' must be a register or immediate" in message
        assert "label 'LOOP'" in message

    def test_number_is_not_an_immediate(self):
        with pytest.raises(ParseError):
            parse_source("ADD R0, R0, 5")

    def test_immediate_is_not_a_blkw_count(self):
        with pytest.raises(ParseError):
            parse_source(".BLKW #5")

    def test_missing_operand_at_end(self):
        with pytest.raises(ParseError) as exc_info:
            parse_source("LD R0")
        assert "'LD' expects 2 operand(s)" in str(exc_info.value)
        assert exc_info.value.hint == "operand 2 should be a label"

    def test_operator_consumed_as_operand(self):
        """Line breaks do not end an instruction."""
        with pytest.raises(ParseError) as exc_info:
            parse_source("LD R0\nHALT")
        assert "got operator 'HALT'" in str(exc_info.value)

    def test_parser_class(self):
        tokens = tokenize(".ORIG x3000 .END")
        assert len(Parser(tokens).parse()) == 2
