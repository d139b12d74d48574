"""
hackasm - Hack Assembler Command-Line Interface
===============================================

This module implements the command-line interface for the Hack assembler.

Usage Examples
--------------
Basic assembly (writes Max.hack next to Max.asm):
    $ hackasm Max.asm

With output file:
    $ hackasm Max.asm -o out.hack

Generate all output files:
    $ hackasm Max.asm -o Max.hack -l Max.lst -s Max.sym

Wrap oversized literals instead of rejecting them:
    $ hackasm --overflow wrap Big.asm

Verbose mode:
    $ hackasm -v Max.asm
"""

from pathlib import Path
from typing import Optional
import logging

import click

from hackasm import __version__
from hackasm.assembler import Assembler
from hackasm.cli.errors import handle_cli_exception
from hackasm.config import OVERFLOW_POLICIES, AssemblerConfig


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
    help="Output .hack file (default: input.hack)",
)
@click.option(
    "-l", "--listing",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate listing file",
)
@click.option(
    "-s", "--symbols",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate symbol file",
)
@click.option(
    "--overflow",
    type=click.Choice(OVERFLOW_POLICIES, case_sensitive=False),
    default=None,
    help="What to do with @n when n > 32767: 'error' rejects it, "
         "'wrap' keeps the low 15 bits. Default: error "
         "(or HACKASM_LITERAL_OVERFLOW).",
)
@click.option(
    "--strict-identifiers",
    is_flag=True,
    help="Reject labels and variables longer than the identifier limit "
         "instead of truncating them",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="hackasm")
def main(
    input_file: Path,
    output: Optional[Path],
    listing: Optional[Path],
    symbols: Optional[Path],
    overflow: Optional[str],
    strict_identifiers: bool,
    verbose: bool,
) -> None:
    """
    Assemble Hack assembly source into Hack machine code.

    INPUT_FILE is the assembly source file (.asm) to assemble.

    The output has one line per instruction, each made of sixteen
    '0'/'1' characters. Nothing is written if assembly fails.

    \b
    Examples:
        hackasm Max.asm              # Outputs Max.hack
        hackasm Max.asm -o out.hack  # Specify output file
        hackasm -l Max.lst Max.asm   # Also write a listing
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    output_file = output if output is not None else input_file.with_suffix(".hack")

    try:
        config = AssemblerConfig.from_env()
        if overflow is not None:
            config.literal_overflow = overflow.lower()
        if strict_identifiers:
            config.strict_identifiers = True

        asm = Assembler(config, verbose=verbose)

        if verbose:
            click.echo(f"Assembling {input_file}...")
            click.echo(f"Literal overflow policy: {config.literal_overflow}")

        words = asm.assemble_file(input_file)

        asm.write_hack(output_file)
        if verbose:
            click.echo(f"Wrote {len(words)} instructions to {output_file}")

        if listing:
            asm.write_listing(listing)
            if verbose:
                click.echo(f"Wrote listing to {listing}")

        if symbols:
            asm.write_symbols(symbols)
            if verbose:
                click.echo(f"Wrote symbols to {symbols}")

        if verbose:
            click.echo(f"Assembly complete: {len(words)} instructions")
            click.echo(f"Defined {len(asm.get_symbols())} symbols")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Assembly")


if __name__ == "__main__":
    main()
