"""
mrun - MARIE Simulator Command-Line Interface
=============================================

Runs a MARIE program to completion. Input values are read from stdin as
hex numbers, one per line; Output values are printed to stdout as four
hex digits.

Usage Examples
--------------
Run a memory image:
    $ mrun sum.hex

Assemble and run a source file in one go:
    $ mrun sum.mas

Bound a runaway program and show the final registers:
    $ mrun loop.hex --max-steps 100000 --registers

Trace every instruction:
    $ mrun sum.hex --trace

Environment variables MARIE_MAX_STEPS, MARIE_INPUT_PROMPT, MARIE_TRACE and
MARIE_DUMP provide defaults; command-line options override them.
"""

import dataclasses
import sys
from pathlib import Path
from typing import Optional

import click

from marie_sdk import __version__
from marie_sdk.cli.errors import ExitCode, handle_cli_exception, setup_logging
from marie_sdk.emulator import BreakReason, Emulator, EmulatorConfig


class ClickConsole:
    """Console backed by click: prompts go to stderr, output to stdout."""

    def read_line(self, prompt: str) -> Optional[str]:
        if prompt:
            click.echo(prompt, nl=False, err=True)
        line = sys.stdin.readline()
        if line == "":
            return None
        return line.rstrip("\r\n")

    def write_line(self, text: str) -> None:
        click.echo(text)


@click.command()
@click.argument(
    "program",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--max-steps",
    type=click.IntRange(min=1),
    default=None,
    help="Stop after N instructions (exit code 4)",
)
@click.option(
    "--trace",
    is_flag=True,
    help="Log every executed instruction to stderr",
)
@click.option(
    "--no-dump",
    is_flag=True,
    help="Treat the Dump instruction as a fault",
)
@click.option(
    "--registers",
    is_flag=True,
    help="Print the final register values",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="mrun")
def main(
    program: Path,
    max_steps: Optional[int],
    trace: bool,
    no_dump: bool,
    registers: bool,
    verbose: bool,
) -> None:
    """
    Run a MARIE program.

    PROGRAM is a memory image (.hex, .img) or assembly source (.mas).

    \b
    Exit codes:
        0  program halted
        1  assembly error, bad image, or runtime fault
        2  invalid arguments
        3  internal error
        4  step limit reached
    """
    config = EmulatorConfig.from_env()
    overrides = {}
    if max_steps is not None:
        overrides["max_steps"] = max_steps
    if trace:
        overrides["trace"] = True
    if no_dump:
        overrides["dump_enabled"] = False
    config = dataclasses.replace(config, **overrides)

    setup_logging(verbose or config.trace)

    try:
        emu = Emulator(config=config, console=ClickConsole())
        image = emu.load_file(program)
        if verbose:
            click.echo(f"Loaded {len(image)} words from {program}", err=True)

        event = emu.run()
    except Exception as e:
        handle_cli_exception(e, verbose=verbose)

    if registers:
        for name, value in emu.registers.items():
            click.echo(f"{name:<3s} = {value:04X}")

    match event.reason:
        case BreakReason.HALTED:
            if verbose:
                click.echo(f"{event} after {event.steps} steps", err=True)
            sys.exit(ExitCode.SUCCESS)
        case BreakReason.FAULT:
            click.echo(f"Runtime error: {event.message}", err=True)
            sys.exit(ExitCode.BUILD_ERROR)
        case BreakReason.MAX_STEPS:
            click.echo(f"Stopped: {event.message}", err=True)
            sys.exit(ExitCode.STEP_LIMIT)
        case _:
            click.echo(f"Internal error: unexpected stop ({event})", err=True)
            sys.exit(ExitCode.INTERNAL_ERROR)


if __name__ == "__main__":
    main()
