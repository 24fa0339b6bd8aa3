"""
Visual LC-3 - Assembler for the LC-3 Educational Computer
=========================================================

This package translates assembly source for the LC-3, a 16-bit
instructional computer architecture, into 16-bit machine words.

Main Components
---------------
- **assembler**: LC-3 assembler pipeline (lexer, parser, linker, code
  generator) and its textual renderings
- **cli**: The ``lc3asm`` command-line tool

Quick Start
-----------
Assemble a program:
    >>> from visual_lc3 import Assembler
    >>> result = Assembler().assemble_string(".ORIG x3000 HALT .END")
    >>> print(result.format_words())
    1111000000100101

Or use the command-line tool:
    $ lc3asm hello.asm -i -s hello.sym

Reference Documentation
-----------------------
- Patt & Patel, Introduction to Computing Systems, Appendix A (LC-3 ISA)
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from visual_lc3.assembler import (
    Assembler,
    AssemblyResult,
    assemble,
    assemble_file,
)
from visual_lc3.errors import (
    LC3Error,
    AssemblyError,
    LexError,
    ParseError,
    LinkError,
    AddressRangeError,
    DuplicateSymbolError,
    CodegenError,
    UndefinedSymbolError,
    FieldRangeError,
    SourceLocation,
)

__all__ = [
    # Version info
    "__version__",
    # Assembler
    "Assembler",
    "AssemblyResult",
    "assemble",
    "assemble_file",
    # Exception hierarchy
    "LC3Error",
    "AssemblyError",
    "LexError",
    "ParseError",
    "LinkError",
    "AddressRangeError",
    "DuplicateSymbolError",
    "CodegenError",
    "UndefinedSymbolError",
    "FieldRangeError",
    "SourceLocation",
]
