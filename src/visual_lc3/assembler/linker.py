"""
LC-3 Symbol Resolution
======================

First pass of the assembler: walk the raw instructions, simulate the
location counter and record the address of every label.

Location Counter
----------------
The counter only exists inside an ``.ORIG`` ... ``.END`` region:

- ``.ORIG value`` starts a region at ``value``
- ``.END`` closes it
- any other instruction must lie inside a region; its labels are bound to
  the current address, then the counter advances by the instruction's
  word footprint

| Instruction   | Words                                 |
|---------------|---------------------------------------|
| .STRINGZ "s"  | len(s) + 1 (null terminator)          |
| .BLKW n       | n, or 0 when n is negative            |
| anything else | 1                                     |

Labels attached to ``.ORIG`` or ``.END`` themselves are not bound.
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional
import logging

from visual_lc3.errors import (
    AddressRangeError,
    DuplicateSymbolError,
    LinkError,
    SourceLocation,
)
from visual_lc3.assembler.opcodes import Mnemonic
from visual_lc3.assembler.parser import RawInstruction

logger = logging.getLogger(__name__)

# Highest LC-3 memory address
MAX_ADDRESS = 0xFFFF


# =============================================================================
# Symbol Table
# =============================================================================

@dataclass(frozen=True)
class Symbol:
    """
    Symbol table entry.

    Attributes:
        name: Label name (case-sensitive)
        address: Absolute address of the labelled instruction
        location: Where the label was defined
    """
    name: str
    address: int
    location: Optional[SourceLocation] = None


class SymbolTable:
    """
    Mapping from label name to absolute address.

    Filled once by ``resolve_symbols`` and only read afterwards. Indexing
    returns the address; ``get_symbol`` returns the full entry.
    """

    def __init__(self) -> None:
        self._symbols: dict[str, Symbol] = {}

    def define(self, name: str, address: int, location: Optional[SourceLocation] = None) -> None:
        """
        Add a label.

        Raises:
            DuplicateSymbolError: If the label is already defined
        """
        existing = self._symbols.get(name)
        if existing is not None:
            raise DuplicateSymbolError(
                name,
                location=location,
                original_location=existing.location,
            )
        self._symbols[name] = Symbol(name, address, location)

    def get_symbol(self, name: str) -> Optional[Symbol]:
        return self._symbols.get(name)

    def __getitem__(self, name: str) -> int:
        return self._symbols[name].address

    def __contains__(self, name: object) -> bool:
        return name in self._symbols

    def __iter__(self) -> Iterator[str]:
        return iter(self._symbols)

    def __len__(self) -> int:
        return len(self._symbols)

    def __repr__(self) -> str:
        entries = ", ".join(f"{name}=x{address:04X}" for name, address in self.to_dict().items())
        return f"SymbolTable({entries})"

    def to_dict(self) -> dict[str, int]:
        """Return a plain ``{name: address}`` copy in definition order."""
        return {name: sym.address for name, sym in self._symbols.items()}

    def find_similar(self, name: str) -> list[str]:
        """
        Find labels with names close to ``name`` for error hints.

        Uses a simple edit distance heuristic.
        """
        name_lower = name.lower()
        similar = []

        for sym in self._symbols:
            sym_lower = sym.lower()
            if (
                sym_lower == name_lower or
                abs(len(sym) - len(name)) <= 1 and
                _edit_distance(name_lower, sym_lower) <= 2
            ):
                similar.append(sym)

        return similar[:3]


def _edit_distance(s1: str, s2: str) -> int:
    """Calculate Levenshtein edit distance between two strings."""
    if len(s1) < len(s2):
        s1, s2 = s2, s1

    distances = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1):
        new_distances = [i + 1]
        for j, c2 in enumerate(s2):
            if c1 == c2:
                new_distances.append(distances[j])
            else:
                new_distances.append(1 + min(distances[j], distances[j + 1], new_distances[-1]))
        distances = new_distances
    return distances[-1]


# =============================================================================
# Address Calculation
# =============================================================================

def word_footprint(instruction: RawInstruction) -> int:
    """Return how many memory words an instruction occupies."""
    if instruction.operator is Mnemonic.STRINGZ:
        return len(instruction.operands[0].as_string_content()) + 1
    if instruction.operator is Mnemonic.BLKW:
        return max(instruction.operands[0].as_number(), 0)
    return 1


def outside_region_message(instruction: RawInstruction) -> str:
    return f"'{instruction.format()}' is not inside an .ORIG/.END region"


def resolve_symbols(instructions: Iterable[RawInstruction]) -> SymbolTable:
    """
    Compute the address of every label.

    Args:
        instructions: Raw instructions from the parser

    Returns:
        The completed symbol table

    Raises:
        LinkError: If an instruction lies outside an .ORIG/.END region
        AddressRangeError: If an instruction lies outside x0000-xFFFF
        DuplicateSymbolError: If a label is defined twice
    """
    symbols = SymbolTable()
    pc: Optional[int] = None

    for instruction in instructions:
        if instruction.operator is Mnemonic.ORIG:
            pc = instruction.operands[0].as_immediate()
            continue
        if instruction.operator is Mnemonic.END:
            pc = None
            continue

        if pc is None:
            raise LinkError(
                outside_region_message(instruction),
                instruction.location,
                hint="place code between .ORIG and .END",
            )
        if not 0 <= pc <= MAX_ADDRESS:
            raise AddressRangeError(pc, instruction.location)

        for label in instruction.labels:
            symbols.define(label, pc, instruction.location)

        pc += word_footprint(instruction)

    logger.debug(f"Resolved {len(symbols)} symbols")
    return symbols
