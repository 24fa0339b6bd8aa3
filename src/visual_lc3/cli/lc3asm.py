"""
lc3asm - LC-3 Assembler Command-Line Interface
==============================================

Assembles an LC-3 source file and prints the machine words as 16-digit
binary lines, one word per line.

Usage Examples
--------------
Print the words:
    $ lc3asm hello.asm

Also show the intermediate instructions:
    $ lc3asm -i hello.asm

Write words, symbols and a listing to files:
    $ lc3asm hello.asm -o hello.bin.txt -s hello.sym -l hello.lst

Verbose mode:
    $ lc3asm -v hello.asm
"""

import logging
from pathlib import Path
from typing import Optional

import click

from visual_lc3 import __version__
from visual_lc3.assembler import Assembler
from visual_lc3.cli.errors import handle_cli_exception

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


def write_text(path: Path, text: str) -> None:
    """Write a rendering to a file, ending with a newline when non-empty."""
    path.write_text(text + "\n" if text else "")


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the binary words to FILE instead of standard output",
)
@click.option(
    "-i", "--intermediate",
    is_flag=True,
    help="Print the parsed instructions before the words",
)
@click.option(
    "-s", "--symbols",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate symbol file",
)
@click.option(
    "-l", "--listing",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate listing file",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="lc3asm")
def main(
    input_file: Path,
    output: Optional[Path],
    intermediate: bool,
    symbols: Optional[Path],
    listing: Optional[Path],
    verbose: bool,
) -> None:
    """
    Assemble LC-3 source code into 16-bit machine words.

    INPUT_FILE is the assembly source file (.asm) to assemble.

    \b
    Examples:
        lc3asm hello.asm               # Print words to stdout
        lc3asm -i hello.asm            # Also print instructions
        lc3asm hello.asm -o out.txt    # Write words to a file
        lc3asm hello.asm -s hello.sym  # Write the symbol table
    """
    setup_logging(verbose)
    asm = Assembler(verbose=verbose)

    try:
        result = asm.assemble_file(input_file)

        if intermediate:
            for instruction in result.instructions:
                click.echo(instruction.format())

        if output is not None:
            write_text(output, result.format_words())
            logger.info(f"Wrote {len(result.words)} words to {output}")
        else:
            for word_line in result.format_words().splitlines():
                click.echo(word_line)

        if symbols:
            write_text(symbols, result.format_symbols())
            logger.info(f"Wrote symbols to {symbols}")

        if listing:
            write_text(listing, result.format_listing())
            logger.info(f"Wrote listing to {listing}")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Assembly")


if __name__ == "__main__":
    main()
