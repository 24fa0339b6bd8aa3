"""
Visual LC-3 Error Hierarchy
===========================

This module defines the exception hierarchy for the whole package.
All exceptions inherit from LC3Error, allowing callers to catch every
package error with a single except clause if desired.

Exception Hierarchy
-------------------
LC3Error (base)
└── AssemblyError (assembler pipeline)
    ├── LexError - character that starts no token
    ├── ParseError - unknown mnemonic, wrong operand kind, missing operand
    ├── LinkError - symbol resolution failure
    │   ├── AddressRangeError - program counter outside the address space
    │   └── DuplicateSymbolError - label defined more than once
    └── CodegenError - encoding failure
        ├── UndefinedSymbolError - reference to an undefined label
        └── FieldRangeError - value does not fit its instruction field

Each pipeline stage raises exactly one error and stops; there is no
error collection and no partial output.

Error messages follow this format:
    filename:line:column: error: description
    source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class LC3Error(Exception):
    """
    Base exception for all Visual LC-3 errors.

        try:
            assemble(source)
        except LC3Error as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblyError(LC3Error):
    """
    Base exception for every failure of the assembler pipeline.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The actual source text at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            hello.asm:3:5: error: undefined label 'TXET'
                LEA R0, TXET
                    ^
            hint: did you mean 'TEXT'?
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        # Source context with caret pointer
        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class LexError(AssemblyError):
    """
    Source text that cannot be split into tokens.

    Examples:
        - A character that starts no token
        - A string literal missing its closing quote
    """
    pass


class ParseError(AssemblyError):
    """
    Token stream that does not match the operand grammar.

    Examples:
        - A register where an operator is expected
        - ``ADD R0, R1, LOOP`` (label where register/immediate is required)
        - ``LD R0`` at the end of input (missing operand)
    """
    pass


class LinkError(AssemblyError):
    """
    Failure while assigning addresses to labels.

    Raised directly for an instruction outside any ``.ORIG``/``.END``
    region; the subclasses cover the remaining cases.
    """
    pass


class AddressRangeError(LinkError):
    """
    Program counter outside the 16-bit address space.

    The LC-3 addresses 65536 words; any instruction placed below x0000 or
    above xFFFF cannot be assembled.
    """

    def __init__(
        self,
        address: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.address = address
        super().__init__(
            f"cannot place an instruction at address {address}",
            location=location,
            hint="addresses must lie between x0000 and xFFFF",
            source_line=source_line,
        )


class DuplicateSymbolError(LinkError):
    """
    Label defined more than once.

    Includes the location of the first definition when available.
    """

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        original_location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.symbol = symbol
        self.original_location = original_location

        hint = None
        if original_location:
            hint = f"'{symbol}' was first defined at {original_location}"

        super().__init__(
            f"duplicate label '{symbol}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class CodegenError(AssemblyError):
    """
    Failure while encoding instructions into machine words.

    Raised directly for an instruction outside any ``.ORIG``/``.END``
    region and for an operator that has no encoder.
    """
    pass


class UndefinedSymbolError(CodegenError):
    """
    Reference to a label that was never defined.

    The code generator suggests similarly-named labels when this error
    occurs, helping to catch typos.
    """

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
        similar_symbols: Optional[list[str]] = None,
    ):
        self.symbol = symbol
        self.similar_symbols = similar_symbols or []

        if not hint and self.similar_symbols:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_symbols[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"undefined label '{symbol}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class FieldRangeError(CodegenError):
    """
    Value does not fit the signed width of its instruction field.

    A b-bit two's-complement field holds -2^(b-1) to 2^(b-1)-1. For a
    PC-relative field the value is the distance from the address after the
    instruction to the target label.

    Example:
        ADD R0, R0, #16  ; imm5 only holds -16 to 15
    """

    def __init__(
        self,
        value: int,
        bits: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.value = value
        self.bits = bits
        self.minimum = -(1 << (bits - 1))
        self.maximum = (1 << (bits - 1)) - 1

        super().__init__(
            f"cannot encode {value} in {bits} bits",
            location=location,
            hint=f"a {bits}-bit field holds {self.minimum} to {self.maximum}",
            source_line=source_line,
        )
