"""
LC-3 Assembly Language Lexer
============================

This module implements a lexer (tokenizer) for LC-3 assembly language.
It converts source text into a flat stream of tokens that the parser can
process. Line breaks carry no meaning: instructions are delimited purely
by the operand grammar, so newlines are treated like any other whitespace.

Token Types
-----------
- OPERATOR: Instruction mnemonics and pseudo-operations (ADD, BRnz, .ORIG)
- REGISTER: R0 to R7
- IMMEDIATE: Prefixed numbers, hexadecimal (x3000, x-1F) or decimal (#-5)
- NUMBER: Bare decimal numbers, used only as .BLKW counts
- STRING: Double-quoted strings ("hello\\n")
- LABEL: Anything else that is a word

Scanning Order
--------------
At every position the lexer tries, in this order:

1. a double-quoted string
2. a run of whitespace and commas (discarded)
3. a ``;`` comment up to the end of the line (discarded)
4. a word: the longest run of characters that are not whitespace,
   commas or semicolons

Words are classified case-insensitively in the order REGISTER, IMMEDIATE,
NUMBER, OPERATOR, LABEL. Because LABEL is the catch-all, label names may
contain characters such as ``/`` and ``-``.

Example
-------
>>> from visual_lc3.assembler.lexer import Lexer
>>> for token in Lexer("LOOP ADD R1, R1, #-1 ; count down").tokenize():
...     print(token)
Token(LABEL, 'LOOP', 1:1)
Token(OPERATOR, 'ADD', 1:6)
Token(REGISTER, 'R1', 1:10)
Token(REGISTER, 'R1', 1:14)
Token(IMMEDIATE, '#-1', 1:18)
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterator, Optional
import logging
import re

from visual_lc3.errors import LexError, SourceLocation
from visual_lc3.assembler.opcodes import MNEMONICS

logger = logging.getLogger(__name__)


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """Token types for LC-3 assembly language."""

    OPERATOR = auto()   # Mnemonics and pseudo-operations
    REGISTER = auto()   # R0-R7
    LABEL = auto()      # Label definitions and references
    IMMEDIATE = auto()  # x-prefixed hex or #-prefixed decimal
    NUMBER = auto()     # Bare decimal (.BLKW count)
    STRING = auto()     # Double-quoted string


# Short tags used when rendering tokens for display
_TYPE_TAGS = {
    TokenType.OPERATOR: "O",
    TokenType.REGISTER: "R",
    TokenType.LABEL: "L",
    TokenType.IMMEDIATE: "I",
    TokenType.NUMBER: "N",
    TokenType.STRING: "S",
}


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    Represents a single token from the source code.

    Two tokens are equal when their kind and content are equal; the
    position fields only serve error reporting.

    Attributes:
        kind: The TokenType classification
        content: The lexeme as written. Immediates keep their prefix and
                 strings keep their quotes (escape sequences resolved).
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
        filename: Name of the source file
    """
    kind: TokenType
    content: str
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)
    filename: str = field(default="<input>", compare=False)

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.content!r}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    # =========================================================================
    # Value Conversions
    # =========================================================================

    def _require(self, kind: TokenType) -> None:
        if self.kind != kind:
            raise ValueError(f"expected a {kind.name} token, got {self!r}")

    def as_register_id(self) -> int:
        """Return the register number (0-7)."""
        self._require(TokenType.REGISTER)
        return int(self.content[1])

    def as_immediate(self) -> int:
        """
        Return the numeric value of an immediate, ignoring field widths.

        ``x``/``X`` selects base 16 and ``#`` selects base 10; the sign,
        when present, follows the prefix (``x-1F``, ``#+7``).
        """
        self._require(TokenType.IMMEDIATE)
        base = 16 if self.content[0] in "xX" else 10
        return int(self.content[1:], base)

    def as_number(self) -> int:
        """Return the value of a bare decimal number."""
        self._require(TokenType.NUMBER)
        return int(self.content)

    def as_label(self) -> str:
        """Return the label name."""
        self._require(TokenType.LABEL)
        return self.content

    def as_string_content(self) -> str:
        """Return the string contents without the surrounding quotes."""
        self._require(TokenType.STRING)
        return self.content[1:-1]

    def format(self) -> str:
        """Render as ``K:content`` where K tags the token kind."""
        return f"{_TYPE_TAGS[self.kind]}:{self.content}"


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes LC-3 assembly source code.

    Usage:
        lexer = Lexer(source_text, filename)
        tokens = list(lexer.tokenize())

    Attributes:
        source: The source code being tokenized
        filename: Name of the source file (for error reporting)
    """

    # Characters that end a word besides whitespace
    WORD_TERMINATORS = ",;"

    # Escape sequences in strings; any other escaped character stands for itself
    ESCAPE_SEQUENCES = {
        "n": "\n",      # Newline
        "t": "\t",      # Tab
        "b": "\b",      # Backspace
    }

    # Word classification, tried in order before the mnemonic lookup
    REGISTER_PATTERN = re.compile(r"R[0-7]", re.IGNORECASE)
    IMMEDIATE_PATTERN = re.compile(r"x[+-]?[0-9A-F]+|#[+-]?[0-9]+", re.IGNORECASE)
    NUMBER_PATTERN = re.compile(r"[+-]?[0-9]+")

    def __init__(self, source: str, filename: str = "<input>"):
        """
        Initialize the lexer with source code.

        Args:
            source: The assembly source code to tokenize
            filename: Name of the source file (for error messages)
        """
        self.source = source
        self.filename = filename

        self._pos = 0
        self._line = 1
        self._column = 1

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens from the source code.

        Yields:
            Token objects representing each lexical element

        Raises:
            LexError: If no scanner can make progress at some position
        """
        scanners = (
            self._scan_string,
            self._skip_separators,
            self._skip_comment,
            self._scan_word,
        )

        while not self._at_end():
            start = self._pos
            for scan in scanners:
                token = scan()
                if self._pos != start:
                    if token is not None:
                        yield token
                    break
            else:
                raise self._error(f"unrecognized character {self._peek()!r}")

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        """Check if we've reached the end of source."""
        return self._pos >= len(self.source)

    def _peek(self) -> str:
        """Look at the current character without advancing ("" at end)."""
        if self._at_end():
            return ""
        return self.source[self._pos]

    def _advance(self) -> str:
        """
        Consume and return the current character, advancing position.

        Updates line and column tracking.
        """
        char = self.source[self._pos]
        self._pos += 1

        if char == "\n":
            self._line += 1
            self._column = 1
        else:
            self._column += 1

        return char

    def _is_separator(self, char: str) -> bool:
        return char.isspace() or char == ","

    # =========================================================================
    # Token Creation
    # =========================================================================

    def _make_token(
        self,
        token_type: TokenType,
        content: str,
        start_line: int,
        start_column: int,
    ) -> Token:
        return Token(
            kind=token_type,
            content=content,
            line=start_line,
            column=start_column,
            filename=self.filename,
        )

    def _error(
        self,
        message: str,
        pos: Optional[int] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> LexError:
        """
        Create a lex error at the current (or given) position.

        Returns:
            LexError with location and the offending source line
        """
        if pos is None:
            pos = self._pos
        location = SourceLocation(
            self.filename,
            line or self._line,
            column or self._column,
        )

        line_start = self.source.rfind("\n", 0, pos) + 1
        line_end = self.source.find("\n", pos)
        if line_end == -1:
            line_end = len(self.source)
        source_line = self.source[line_start:line_end]

        return LexError(message, location, source_line=source_line)

    # =========================================================================
    # Scanners
    # =========================================================================
    # Each scanner either leaves the cursor where it was (no match) or
    # consumes input and optionally returns a token.

    def _scan_string(self) -> Optional[Token]:
        """Scan a double-quoted string literal, keeping both quotes."""
        if self._peek() != '"':
            return None

        start_pos = self._pos
        start_line = self._line
        start_column = self._column

        chars = [self._advance()]  # opening quote
        while not self._at_end():
            char = self._advance()

            if char == "\\":
                if self._at_end():
                    break
                escaped = self._advance()
                chars.append(self.ESCAPE_SEQUENCES.get(escaped, escaped))
                continue

            chars.append(char)
            if char == '"':
                return self._make_token(
                    TokenType.STRING,
                    "".join(chars),
                    start_line,
                    start_column,
                )

        raise self._error(
            "unterminated string literal",
            pos=start_pos,
            line=start_line,
            column=start_column,
        )

    def _skip_separators(self) -> None:
        """Skip a run of whitespace (including newlines) and commas."""
        while self._peek() and self._is_separator(self._peek()):
            self._advance()

    def _skip_comment(self) -> None:
        """Skip a semicolon comment up to (not including) the newline."""
        if self._peek() != ";":
            return
        while self._peek() and self._peek() != "\n":
            self._advance()

    def _scan_word(self) -> Optional[Token]:
        """Scan a word and classify it."""
        start_line = self._line
        start_column = self._column

        chars = []
        while self._peek():
            char = self._peek()
            if char.isspace() or char in self.WORD_TERMINATORS:
                break
            chars.append(self._advance())

        if not chars:
            return None

        word = "".join(chars)
        return self._make_token(self.classify(word), word, start_line, start_column)

    @classmethod
    def classify(cls, word: str) -> TokenType:
        """
        Determine the token type of a word.

        The order matters: ``x10`` is an immediate even though it could be
        a label, and ``R8`` falls through to LABEL.
        """
        if cls.REGISTER_PATTERN.fullmatch(word):
            return TokenType.REGISTER
        if cls.IMMEDIATE_PATTERN.fullmatch(word):
            return TokenType.IMMEDIATE
        if cls.NUMBER_PATTERN.fullmatch(word):
            return TokenType.NUMBER
        if word.upper() in MNEMONICS:
            return TokenType.OPERATOR
        return TokenType.LABEL


# =============================================================================
# Convenience Function
# =============================================================================

def tokenize(source: str, filename: str = "<input>") -> list[Token]:
    """
    Tokenize source text.

    Args:
        source: Assembly source code
        filename: Virtual filename for error messages

    Returns:
        List of tokens in source order

    Raises:
        LexError: If the source cannot be tokenized
    """
    tokens = list(Lexer(source, filename).tokenize())
    logger.debug(f"Tokenized {filename}: {len(tokens)} tokens")
    return tokens
