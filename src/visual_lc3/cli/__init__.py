"""
Visual LC-3 Command-Line Interface
==================================

- **lc3asm**: LC-3 assembler

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["lc3asm"]
