"""
masm - MARIE Assembler Command-Line Interface
=============================================

Usage Examples
--------------
Basic assembly (writes sum.hex):
    $ masm sum.mas

With output file:
    $ masm sum.mas -o out.hex

Generate all output files:
    $ masm sum.mas -o sum.hex -l sum.lst -s sum.sym

Verbose mode:
    $ masm -v sum.mas
"""

from pathlib import Path
from typing import Optional

import click

from marie_sdk import __version__
from marie_sdk.assembler import Assembler
from marie_sdk.cli.errors import handle_cli_exception, setup_logging


@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output memory image (default: input.hex)",
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
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="masm")
def main(
    input_file: Path,
    output: Optional[Path],
    listing: Optional[Path],
    symbols: Optional[Path],
    verbose: bool,
) -> None:
    """
    Assemble MARIE source code into a memory image.

    INPUT_FILE is the assembly source file (.mas) to assemble.

    \b
    Examples:
        masm sum.mas               # Outputs sum.hex
        masm sum.mas -o out.hex    # Specify output file
        masm sum.mas -l sum.lst    # Also write a listing
    """
    setup_logging(verbose)
    output_file = output if output is not None else input_file.with_suffix(".hex")

    asm = Assembler()

    try:
        image = asm.assemble_file(input_file)
        asm.write_image(output_file)
        if verbose:
            click.echo(f"Wrote {len(image)} words to {output_file}")

        if listing:
            asm.write_listing(listing)
            if verbose:
                click.echo(f"Wrote listing to {listing}")

        if symbols:
            asm.write_symbols(symbols)
            if verbose:
                click.echo(f"Wrote symbols to {symbols}")

        if verbose:
            click.echo(
                f"Assembly complete: {len(image)} words, "
                f"{len(asm.get_symbols())} symbols"
            )

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Assembly")


if __name__ == "__main__":
    main()
