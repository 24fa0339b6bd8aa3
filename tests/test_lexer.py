# =============================================================================
# test_lexer.py - Lexer Unit Tests
# =============================================================================
# Tests for the LC-3 assembler lexer/tokenizer.
#
# Test coverage includes:
#   - Word classification: operators, registers, immediates, numbers, labels
#   - String literals with escape sequences
#   - Separators (whitespace, commas) and semicolon comments
#   - Token value conversions and display format
#   - Position tracking
#   - Error conditions
# =============================================================================

import pytest
from visual_lc3.assembler.lexer import Lexer, Token, TokenType, tokenize
from visual_lc3.errors import LexError


def tokens_of(kind: TokenType, *contents: str) -> list:
    """Build a list of tokens of one kind."""
    return [Token(kind, content) for content in contents]


# =============================================================================
# Whole-Source Tests
# =============================================================================

class TestSources:
    """Tokenize complete snippets and compare the full token list."""

    def test_every_token_kind(self):
        """Every operator, register, immediate, number and string form."""
        source = r'''
ADD AND BRN BRZ BRP BRNZ BRNP BRZP BRNZP BR JMP JSR JSRR
LD LDI LDR LEA NOT RET RTI ST STI STR TRAP .ORIG .END .FILL
.BLKW .STRINGZ GETC OUT IN PUTS PUTSP HALT
R0 R1 R2 R3 R4 R5 R6 R7 R8 R9
MY_LABEL SPECIAL/LABEL NOT-ADD-LABEL LOOP,LABEL
X123a,X456b,x789c,xd0ef,x-55aa
#1234, #5678, #9000, #-0721, #-1145
0 -1 42 ; 8888
"ciallo, world" "Escaped \" Quote"
'''
        expected = (
            tokens_of(
                TokenType.OPERATOR,
                "ADD", "AND", "BRN", "BRZ", "BRP", "BRNZ", "BRNP",
                "BRZP", "BRNZP", "BR", "JMP", "JSR", "JSRR", "LD", "LDI",
                "LDR", "LEA", "NOT", "RET", "RTI", "ST", "STI", "STR", "TRAP",
                ".ORIG", ".END", ".FILL", ".BLKW", ".STRINGZ", "GETC", "OUT", "IN",
                "PUTS", "PUTSP", "HALT",
            )
            + tokens_of(TokenType.REGISTER, "R0", "R1", "R2", "R3", "R4", "R5", "R6", "R7")
            + tokens_of(
                TokenType.LABEL,
                "R8", "R9", "MY_LABEL", "SPECIAL/LABEL", "NOT-ADD-LABEL", "LOOP", "LABEL",
            )
            + tokens_of(
                TokenType.IMMEDIATE,
                "X123a", "X456b", "x789c", "xd0ef", "x-55aa",
                "#1234", "#5678", "#9000", "#-0721", "#-1145",
            )
            + tokens_of(TokenType.NUMBER, "0", "-1", "42")
            + tokens_of(TokenType.STRING, '"ciallo, world"', '"Escaped " Quote"')
        )
        assert tokenize(source) == expected

    def test_formatted_program(self):
        """A conventionally laid out program with comments and escapes."""
        source = r'''.ORIG x3000
LABEL AND R0, R1, R2 ; Comment
LABEL_2 HALT
.STRINGZ "ciallo, world\n"
.END'''
        assert tokenize(source) == [
            Token(TokenType.OPERATOR, ".ORIG"),
            Token(TokenType.IMMEDIATE, "x3000"),
            Token(TokenType.LABEL, "LABEL"),
            Token(TokenType.OPERATOR, "AND"),
            Token(TokenType.REGISTER, "R0"),
            Token(TokenType.REGISTER, "R1"),
            Token(TokenType.REGISTER, "R2"),
            Token(TokenType.LABEL, "LABEL_2"),
            Token(TokenType.OPERATOR, "HALT"),
            Token(TokenType.OPERATOR, ".STRINGZ"),
            Token(TokenType.STRING, '"ciallo, world\n"'),
            Token(TokenType.OPERATOR, ".END"),
        ]

    def test_tight_source(self):
        """Commas and comments end words without surrounding spaces."""
        source = "ADDR0 BRnz MY-LABEL,R9;Comment\nMY-LABEL .BLKW 5"
        assert tokenize(source) == [
            Token(TokenType.LABEL, "ADDR0"),
            Token(TokenType.OPERATOR, "BRnz"),
            Token(TokenType.LABEL, "MY-LABEL"),
            Token(TokenType.LABEL, "R9"),
            Token(TokenType.LABEL, "MY-LABEL"),
            Token(TokenType.OPERATOR, ".BLKW"),
            Token(TokenType.NUMBER, "5"),
        ]

    def test_empty_source(self):
        assert tokenize("") == []

    def test_only_separators_and_comments(self):
        """Whitespace, commas and comments produce no tokens."""
        assert tokenize(" ,\t\n; nothing here\n,,  ; more\n") == []

    def test_lexer_is_lazy(self):
        """Lexer.tokenize yields tokens one at a time."""
        stream = Lexer("HALT HALT").tokenize()
        assert next(stream) == Token(TokenType.OPERATOR, "HALT")


# =============================================================================
# Classification Tests
# =============================================================================

class TestClassification:
    """Test how single words are classified."""

    @pytest.mark.parametrize("word", ["r0", "R7", "r3"])
    def test_registers_ignore_case(self, word):
        assert Lexer.classify(word) == TokenType.REGISTER

    @pytest.mark.parametrize("word", ["R8", "R10", "RR1"])
    def test_register_lookalikes_are_labels(self, word):
        assert Lexer.classify(word) == TokenType.LABEL

    @pytest.mark.parametrize("word", ["add", "Halt", "brNZP", ".orig", ".StringZ"])
    def test_operators_ignore_case(self, word):
        assert Lexer.classify(word) == TokenType.OPERATOR

    @pytest.mark.parametrize("word", ["x10", "X1F", "x+7", "#10", "#+3", "#-16"])
    def test_immediates(self, word):
        assert Lexer.classify(word) == TokenType.IMMEDIATE

    @pytest.mark.parametrize("word", ["xG1", "#x10", "#", "x"])
    def test_malformed_immediates_are_labels(self, word):
        assert Lexer.classify(word) == TokenType.LABEL

    @pytest.mark.parametrize("word", ["0", "+12", "-3"])
    def test_numbers(self, word):
        assert Lexer.classify(word) == TokenType.NUMBER

    def test_labels_are_catch_all(self):
        assert Lexer.classify("a.b/c-d") == TokenType.LABEL


# =============================================================================
# String Literal Tests
# =============================================================================

class TestStrings:
    """Test string literal scanning and escapes."""

    def test_quotes_are_kept(self):
        (token,) = tokenize('"hi"')
        assert token.content == '"hi"'
        assert token.as_string_content() == "hi"

    @pytest.mark.parametrize("source,expected", [
        (r'"a\nb"', "a\nb"),
        (r'"a\tb"', "a\tb"),
        (r'"a\bb"', "a\bb"),
        (r'"a\"b"', 'a"b'),
        (r'"a\\b"', "a\\b"),
        (r'"a\qb"', "aqb"),
    ])
    def test_escapes(self, source, expected):
        (token,) = tokenize(source)
        assert token.as_string_content() == expected

    def test_string_keeps_separators_and_semicolons(self):
        (token,) = tokenize('"a, b; c"')
        assert token.as_string_content() == "a, b; c"

    def test_string_directly_followed_by_word(self):
        assert tokenize('"a"HALT') == [
            Token(TokenType.STRING, '"a"'),
            Token(TokenType.OPERATOR, "HALT"),
        ]

    def test_unterminated_string(self):
        with pytest.raises(LexError) as exc_info:
            tokenize('.STRINGZ "open')
        assert "unterminated string" in str(exc_info.value)
        assert exc_info.value.location.column == 10

    def test_trailing_backslash_is_unterminated(self):
        with pytest.raises(LexError):
            tokenize('"abc\\')


# =============================================================================
# Token Tests
# =============================================================================

class TestToken:
    """Test Token conversions and rendering."""

    def test_register_id(self):
        assert Token(TokenType.REGISTER, "r5").as_register_id() == 5

    @pytest.mark.parametrize("content,value", [
        ("x3000", 0x3000),
        ("X1f", 0x1F),
        ("x-55aa", -0x55AA),
        ("#-0721", -721),
        ("#+7", 7),
        ("#10", 10),
    ])
    def test_immediate_values(self, content, value):
        assert Token(TokenType.IMMEDIATE, content).as_immediate() == value

    def test_number_value(self):
        assert Token(TokenType.NUMBER, "-3").as_number() == -3

    def test_wrong_kind_conversion(self):
        with pytest.raises(ValueError):
            Token(TokenType.LABEL, "LOOP").as_immediate()

    def test_equality_ignores_position(self):
        assert Token(TokenType.LABEL, "A", 1, 1) == Token(TokenType.LABEL, "A", 9, 4)

    @pytest.mark.parametrize("kind,tag", [
        (TokenType.OPERATOR, "O"),
        (TokenType.REGISTER, "R"),
        (TokenType.LABEL, "L"),
        (TokenType.IMMEDIATE, "I"),
        (TokenType.NUMBER, "N"),
        (TokenType.STRING, "S"),
    ])
    def test_format(self, kind, tag):
        assert Token(kind, "v").format() == f"{tag}:v"


# =============================================================================
# Position Tracking Tests
# =============================================================================

class TestPositions:
    """Test line and column tracking."""

    def test_line_and_column(self):
        tokens = list(Lexer("  HALT\n\tADD R1", "prog.asm").tokenize())
        assert (tokens[0].line, tokens[0].column) == (1, 3)
        assert (tokens[1].line, tokens[1].column) == (2, 2)
        assert (tokens[2].line, tokens[2].column) == (2, 6)
        assert str(tokens[2].location) == "prog.asm:2:6"
