"""
LC-3 Assembler
==============

This module provides an assembler for the LC-3, a 16-bit instructional
computer architecture. It translates LC-3 assembly source into a list of
16-bit machine words.

Main Components
---------------
- **Assembler**: Facade that runs the whole pipeline
- **Lexer**: Tokenizes assembly source into tokens
- **Parser**: Groups tokens into raw instructions, expanding trap aliases
- **resolve_symbols**: Computes the address of every label (first pass)
- **CodeGenerator**: Encodes raw instructions into words (second pass)

Assembly Process
----------------
1. **Lexing**: classify words as operators, registers, immediates, numbers,
   strings or labels
2. **Parsing**: match each operator against its operand signature
3. **Linking**: simulate the location counter inside .ORIG/.END regions
   and bind labels to addresses
4. **Code Generation**: encode each instruction, resolving PC-relative
   offsets and checking two's-complement field ranges

Example Usage
-------------
>>> from visual_lc3.assembler import assemble
>>> [f"{word:016b}" for word in assemble(".ORIG x3000 HALT .END")]
['1111000000100101']

Supported Features
------------------
- Full LC-3 instruction set: ADD AND BR(nzp) JMP JSR JSRR LD LDI LDR LEA
  NOT RET RTI ST STI STR TRAP
- Trap aliases: GETC OUT PUTS IN PUTSP HALT
- Pseudo-operations: .ORIG .END .FILL .BLKW .STRINGZ
- Hexadecimal (x) and decimal (#) immediates
- String escapes (\\n, \\t, \\b, \\", \\\\)
- Intermediate instruction, binary, symbol table and listing renderings
"""

from visual_lc3.assembler.assembler import (
    Assembler,
    AssemblyResult,
    assemble,
    assemble_file,
    format_instructions,
    format_symbols,
    format_word,
    format_words,
)
from visual_lc3.assembler.lexer import Lexer, Token, TokenType, tokenize
from visual_lc3.assembler.parser import Parser, RawInstruction, parse
from visual_lc3.assembler.linker import Symbol, SymbolTable, resolve_symbols, word_footprint
from visual_lc3.assembler.codegen import (
    CodeBlock,
    CodeGenerator,
    encode_twos_complement,
    generate,
)
from visual_lc3.assembler.opcodes import (
    BRANCH_INSTRUCTIONS,
    InstructionInfo,
    MNEMONICS,
    Mnemonic,
    OPCODE_TABLE,
    OperandKind,
    TRAP_ALIASES,
)

__all__ = [
    # Main class and functions
    "Assembler",
    "AssemblyResult",
    "assemble",
    "assemble_file",
    # Rendering
    "format_instructions",
    "format_symbols",
    "format_word",
    "format_words",
    # Lexer
    "Lexer",
    "Token",
    "TokenType",
    "tokenize",
    # Parser
    "Parser",
    "RawInstruction",
    "parse",
    # Linker
    "Symbol",
    "SymbolTable",
    "resolve_symbols",
    "word_footprint",
    # Code generator
    "CodeBlock",
    "CodeGenerator",
    "encode_twos_complement",
    "generate",
    # Opcodes
    "BRANCH_INSTRUCTIONS",
    "InstructionInfo",
    "MNEMONICS",
    "Mnemonic",
    "OPCODE_TABLE",
    "OperandKind",
    "TRAP_ALIASES",
]
