"""
MARIE Emulator - Main Orchestrator
==================================

This module provides the main `Emulator` class that ties the CPU, memory
and console together behind a small API for running and testing programs.

The Emulator class:
- Loads programs from source text, source files or memory images
- Runs to completion or single-steps
- Reports termination as a BreakEvent instead of exiting the process
- Exposes registers and memory for inspection after the run

Example usage:
    >>> from marie_sdk.emulator import Emulator, ScriptedConsole
    >>> emu = Emulator(console=ScriptedConsole())
    >>> emu.load_source('''
    ...         Load X
    ...         Output
    ...         Halt
    ... X,      HEX 2A
    ... ''')
    >>> event = emu.run()
    >>> event.reason
    <BreakReason.HALTED: 1>
    >>> emu.console.output
    ['002A']
"""

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from marie_sdk.assembler import Assembler
from marie_sdk.cpu import MEMORY_SIZE, disassemble_word
from marie_sdk.emulator.console import ConsoleProtocol, StreamConsole
from marie_sdk.emulator.cpu import MarieCPU, CPUState
from marie_sdk.emulator.events import BreakEvent, BreakReason
from marie_sdk.emulator.memory import Memory
from marie_sdk.errors import MachineError
from marie_sdk.image import MemoryImage

logger = logging.getLogger(__name__)

# Files with these suffixes are memory images; anything else is assembled
IMAGE_SUFFIXES = frozenset({".hex", ".img"})

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


@dataclass(frozen=True)
class EmulatorConfig:
    """
    Configuration for emulator initialization.

    Attributes:
        max_steps: Stop a run after this many instructions (None = unbounded)
        input_prompt: Prompt shown by the Input instruction
        trace: Log every executed instruction at DEBUG level
        dump_enabled: Allow the Dump instruction (a fault otherwise)

    Example:
        >>> config = EmulatorConfig(max_steps=10_000, trace=True)
    """
    max_steps: Optional[int] = None
    input_prompt: str = "Input: "
    trace: bool = False
    dump_enabled: bool = True

    @classmethod
    def from_env(cls) -> "EmulatorConfig":
        """
        Create EmulatorConfig from environment variables.

        Environment variables (all optional):
            MARIE_MAX_STEPS: Step limit (positive integer)
            MARIE_INPUT_PROMPT: Prompt text for Input
            MARIE_TRACE: Enable tracing (1/true/yes/on)
            MARIE_DUMP: Disable Dump with 0/false/no/off

        Invalid values are ignored with a warning.
        """
        kwargs = {}

        if max_steps := os.environ.get("MARIE_MAX_STEPS"):
            try:
                value = int(max_steps)
                if value <= 0:
                    raise ValueError(max_steps)
                kwargs["max_steps"] = value
            except ValueError:
                logger.warning(f"Ignoring invalid MARIE_MAX_STEPS={max_steps!r}")

        if (prompt := os.environ.get("MARIE_INPUT_PROMPT")) is not None:
            kwargs["input_prompt"] = prompt

        if trace := os.environ.get("MARIE_TRACE"):
            kwargs["trace"] = trace.strip().lower() in _TRUE_VALUES

        if dump := os.environ.get("MARIE_DUMP"):
            kwargs["dump_enabled"] = dump.strip().lower() not in _FALSE_VALUES

        return cls(**kwargs)


class Emulator:
    """
    MARIE emulator with a single machine (registers + 4096-word memory).

    Attributes:
        config: The EmulatorConfig used to initialize this instance
        memory: Machine memory
        cpu: The CPU (accessible for low-level control)
        console: Collaborator used for Input/Output/Dump

    Example:
        >>> emu = Emulator()
        >>> emu.load_file("sum.mas")
        >>> event = emu.run()
        >>> print(emu.registers)
    """

    def __init__(self, config: Optional[EmulatorConfig] = None,
                 console: Optional[ConsoleProtocol] = None):
        """
        Initialize the emulator.

        Args:
            config: EmulatorConfig; defaults to EmulatorConfig()
            console: Console collaborator; defaults to stdin/stdout
        """
        self.config = config or EmulatorConfig()
        self.console = console or StreamConsole(sys.stdin, sys.stdout)
        self.memory = Memory(MEMORY_SIZE)
        self.cpu = MarieCPU(
            self.memory,
            self.console,
            input_prompt=self.config.input_prompt,
            dump_enabled=self.config.dump_enabled,
        )
        if self.config.trace:
            self.cpu.on_instruction = self._trace_hook

        self._image: Optional[MemoryImage] = None
        self._steps = 0
        self._halted = False

    def _trace_hook(self, address: int, ir: int) -> None:
        logger.debug(f"{address:03X}  {ir:04X}  {disassemble_word(ir):<22s} AC={self.cpu.ac:04X}")

    # =========================================================================
    # Program Loading
    # =========================================================================

    def load_image(self, image: MemoryImage) -> None:
        """
        Reset the machine and load an image at address 0.

        Memory beyond the image is zero.
        """
        self._image = image
        self.reset()

    def load_source(self, source: str, filename: str = "<input>") -> MemoryImage:
        """
        Assemble source and load the result.

        Raises:
            AssemblerError: If assembly fails; the machine is left unchanged
        """
        image = Assembler().assemble_string(source, filename)
        self.load_image(image)
        return image

    def load_file(self, path: Union[str, Path]) -> MemoryImage:
        """
        Load a program file: .hex/.img is read as a memory image, anything
        else (normally .mas) is assembled.

        Raises:
            FileNotFoundError: If the file does not exist
            AssemblerError: If a source file fails to assemble
            ImageFormatError: If an image file is malformed
        """
        path = Path(path)
        if path.suffix.lower() in IMAGE_SUFFIXES:
            image = MemoryImage.read(path)
        else:
            image = Assembler().assemble_file(path)
        self.load_image(image)
        return image

    def reset(self) -> None:
        """Clear registers and memory, then reload the current image."""
        self.memory.clear()
        if self._image is not None:
            self.memory.load(self._image)
        self.cpu.reset()
        self._steps = 0
        self._halted = False

    # =========================================================================
    # Execution
    # =========================================================================

    def step(self) -> BreakEvent:
        """
        Execute a single instruction.

        Returns:
            BreakEvent with reason STEP, or HALTED/FAULT if the instruction
            ended the program. Once halted, nothing executes and HALTED is
            returned again until the machine is reset or reloaded.
        """
        event = self._execute_one()
        return event or BreakEvent(
            BreakReason.STEP,
            address=self.cpu.pc,
            steps=1,
        )

    def run(self, max_steps: Optional[int] = None) -> BreakEvent:
        """
        Run until Halt, a fatal condition, or the step limit.

        A halted machine stays halted: running it again executes nothing
        and returns HALTED with zero steps. Call reset() to start over.

        Args:
            max_steps: Step limit for this run; defaults to config.max_steps

        Returns:
            BreakEvent describing why execution stopped
        """
        limit = max_steps if max_steps is not None else self.config.max_steps
        start = self._steps

        while limit is None or self._steps - start < limit:
            event = self._execute_one()
            if event is not None:
                event.steps = self._steps - start
                self._log_termination(event)
                return event

        event = BreakEvent(
            BreakReason.MAX_STEPS,
            address=self.cpu.pc,
            steps=self._steps - start,
            message=f"Reached max steps ({limit})",
        )
        self._log_termination(event)
        return event

    def _execute_one(self) -> Optional[BreakEvent]:
        """Run one instruction; return an event only if it ended the program."""
        if self._halted:
            return self._halted_event(steps=0)
        try:
            halted = self.cpu.step()
        except MachineError as e:
            self._steps += 1
            return BreakEvent(
                BreakReason.FAULT,
                address=self.cpu.instruction_address,
                value=self.cpu.ir,
                steps=1,
                message=str(e),
            )

        self._steps += 1
        if halted:
            self._halted = True
            return self._halted_event(steps=1)
        return None

    def _halted_event(self, steps: int) -> BreakEvent:
        return BreakEvent(
            BreakReason.HALTED,
            address=self.cpu.instruction_address,
            steps=steps,
            message=f"Halted at {self.cpu.instruction_address:03X}",
        )

    def _log_termination(self, event: BreakEvent) -> None:
        if event.reason == BreakReason.FAULT:
            logger.error(f"Fault after {event.steps} steps: {event}")
        else:
            logger.info(f"{event} after {event.steps} steps")

    # =========================================================================
    # Inspection
    # =========================================================================

    def read_word(self, address: int) -> int:
        """Read a memory word."""
        return self.memory.read(address)

    def write_word(self, address: int, value: int) -> None:
        """Write a memory word (wrapped to 16 bits)."""
        self.memory.write(address, value)

    def dump(self, last_address: int) -> str:
        """Registers plus a hex listing of addresses 0..last_address."""
        return "\n".join(self.cpu.dump_lines(last_address))

    @property
    def registers(self) -> dict:
        """All register values keyed by register name."""
        s: CPUState = self.cpu.state
        return {
            "AC": s.ac,
            "PC": s.pc,
            "MAR": s.mar,
            "MBR": s.mbr,
            "IR": s.ir,
            "IN": s.in_,
            "OUT": s.out,
        }

    @property
    def steps_executed(self) -> int:
        """Instructions executed since the last reset."""
        return self._steps

    @property
    def image(self) -> Optional[MemoryImage]:
        """The currently loaded image, if any."""
        return self._image

    def __repr__(self) -> str:
        return f"Emulator({self.cpu.format_registers()}, steps={self._steps})"
