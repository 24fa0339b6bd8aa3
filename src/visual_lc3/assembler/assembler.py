"""
LC-3 Assembler - Main Interface
===============================

This module provides the Assembler class, the primary interface for
assembling LC-3 source code. It chains the four pipeline stages and
collects their results:

1. **Lexer**: source text -> tokens
2. **Parser**: tokens -> raw instructions (trap aliases expanded)
3. **Linker**: raw instructions -> symbol table
4. **CodeGenerator**: raw instructions + symbol table -> 16-bit words

Every call runs the whole pipeline from scratch and stops at the first
error; nothing is cached between calls.

Example Usage
-------------
>>> from visual_lc3.assembler import Assembler
>>> result = Assembler().assemble_string('''
...     .ORIG x3000
...     LEA R0, TEXT
...     PUTS
...     HALT
... TEXT .STRINGZ "hi"
...     .END
... ''')
>>> print(result.format_words())
1110000000000010
1111000000100010
1111000000100101
0000000001101000
0000000001101001
0000000000000000

Textual Renderings
------------------
- ``format_instructions``: one ``[labels] <OP> K:operand, ...`` line per
  raw instruction
- ``format_words``: one 16-digit binary line per word
- ``format_symbols``: one ``NAME xADDR`` line per label
- ``format_listing``: addresses, words and instructions side by side
"""

from dataclasses import dataclass
from pathlib import Path
import logging

from visual_lc3.assembler.lexer import tokenize
from visual_lc3.assembler.parser import RawInstruction, parse
from visual_lc3.assembler.linker import SymbolTable, resolve_symbols
from visual_lc3.assembler.codegen import CodeBlock, CodeGenerator

logger = logging.getLogger(__name__)


# =============================================================================
# Rendering Helpers
# =============================================================================

def format_word(word: int) -> str:
    """Render a word as 16 binary digits, most significant bit first."""
    return f"{word & 0xFFFF:016b}"


def format_instructions(instructions: list[RawInstruction]) -> str:
    return "\n".join(instruction.format() for instruction in instructions)


def format_words(words: list[int]) -> str:
    return "\n".join(format_word(word) for word in words)


def format_symbols(symbols: SymbolTable) -> str:
    """
    Render a symbol table, sorted by address.

    Format: name address (one per line)
    """
    lines = ["; Symbol table"]
    entries = sorted(symbols.to_dict().items(), key=lambda item: (item[1], item[0]))
    for name, address in entries:
        lines.append(f"{name} x{address:04X}")
    return "\n".join(lines)


# =============================================================================
# Assembly Result
# =============================================================================

@dataclass(frozen=True)
class AssemblyResult:
    """
    Everything one assembly run produced.

    Attributes:
        instructions: Raw instructions from the parser
        symbols: Symbol table from the linker
        blocks: Encoded words grouped per instruction, with addresses
    """
    instructions: tuple[RawInstruction, ...]
    symbols: SymbolTable
    blocks: tuple[CodeBlock, ...]

    @property
    def words(self) -> list[int]:
        """All machine words in source order."""
        return [word for block in self.blocks for word in block.words]

    def format_instructions(self) -> str:
        return format_instructions(list(self.instructions))

    def format_words(self) -> str:
        return format_words(self.words)

    def format_symbols(self) -> str:
        return format_symbols(self.symbols)

    def format_listing(self) -> str:
        """
        Get the assembly listing as a string.

        Returns:
            The listing showing addresses, words and instructions, followed
            by the symbol table
        """
        lines = []
        lines.append("; Visual LC-3 listing")
        lines.append("Addr   Word   Binary            Instruction")
        lines.append("-" * 60)

        for block in self.blocks:
            source = block.instruction.format()
            if not block.words:
                lines.append(f"x{block.address:04X}  {'':5}  {'':16}  {source}")
                continue
            for offset, word in enumerate(block.words):
                address = (block.address + offset) & 0xFFFF
                text = source if offset == 0 else ""
                lines.append(f"x{address:04X}  x{word:04X}  {format_word(word)}  {text}".rstrip())

        lines.append("")
        lines.append(self.format_symbols())
        return "\n".join(lines)


# =============================================================================
# Assembler
# =============================================================================

class Assembler:
    """
    Main LC-3 assembler class.

    The assembler itself holds configuration only; each call returns a new
    AssemblyResult.

    Attributes:
        verbose: If True, log a summary of each stage at INFO level
    """

    def __init__(self, verbose: bool = False):
        """
        Initialize the assembler.

        Args:
            verbose: Log stage summaries at INFO instead of DEBUG level
        """
        self._verbose = verbose

    def _report(self, message: str) -> None:
        logger.log(logging.INFO if self._verbose else logging.DEBUG, message)

    def assemble_string(self, source: str, filename: str = "<input>") -> AssemblyResult:
        """
        Assemble source code from a string.

        Args:
            source: Assembly source code
            filename: Virtual filename for error messages

        Returns:
            The instructions, symbols and words of the program

        Raises:
            AssemblyError: If any stage fails
        """
        tokens = tokenize(source, filename)
        instructions = parse(tokens, filename)
        self._report(f"Parsed {len(instructions)} instructions from {len(tokens)} tokens")

        symbols = resolve_symbols(instructions)
        self._report(f"Defined {len(symbols)} symbols")

        blocks = CodeGenerator(symbols).generate_blocks(instructions)
        result = AssemblyResult(tuple(instructions), symbols, tuple(blocks))
        self._report(f"Generated {len(result.words)} words")

        return result

    def assemble_file(self, filepath: str | Path) -> AssemblyResult:
        """
        Assemble source code from a file.

        Raises:
            AssemblyError: If assembly fails
            FileNotFoundError: If source file not found
        """
        filepath = Path(filepath)
        self._report(f"Assembling {filepath}...")
        source = filepath.read_text()
        return self.assemble_string(source, str(filepath))


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, filename: str = "<input>") -> list[int]:
    """
    Assemble source code into machine words.

    Raises:
        AssemblyError: If assembly fails
    """
    return Assembler().assemble_string(source, filename).words


def assemble_file(filepath: str | Path) -> list[int]:
    """
    Assemble a source file into machine words.

    Raises:
        AssemblyError: If assembly fails
    """
    return Assembler().assemble_file(filepath).words
