"""
MARIE CPU Emulator
==================

Implements the MARIE fetch-decode-execute cycle and the full instruction
set. Register transfers follow the textbook description, so MAR and MBR
show the same values a learner would trace by hand.

Registers (all 16-bit words):
- AC: Accumulator
- PC: Program counter
- MAR: Memory address register
- MBR: Memory buffer register
- IR: Instruction register
- IN / OUT: Input and output registers

Cycle::

    MAR <- PC; MBR <- M[MAR]; IR <- MBR; PC <- PC + 1
    opcode <- IR[15..12]; operand <- IR[11..0]
    execute(opcode, operand)

Registers hold 16-bit patterns. AC is compared as a signed value by
Skipcond; Add and Subt wrap modulo 2^16.

Halt is not machine state: step() reports it to the caller. Fatal
conditions raise MachineError for the caller to handle.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from marie_sdk.assembler.lexer import NUMBER_PATTERN
from marie_sdk.cpu import (
    SKIP_IF_NEGATIVE,
    SKIP_IF_POSITIVE,
    SKIP_IF_ZERO,
    WORD_MASK,
    WORD_MAX,
    WORD_MIN,
    Opcode,
    decode_instruction,
    to_signed,
)
from marie_sdk.emulator.console import ConsoleProtocol
from marie_sdk.emulator.memory import Memory
from marie_sdk.errors import MachineFault

logger = logging.getLogger(__name__)

INPUT_BASE = 16


@dataclass
class CPUState:
    """
    Complete register state.

    All values are 16-bit patterns (0..0xFFFF).
    """
    ac: int = 0
    pc: int = 0
    mar: int = 0
    mbr: int = 0
    ir: int = 0
    in_: int = 0
    out: int = 0


class MarieCPU:
    """
    MARIE CPU with instrumentation support.

    Example:
        >>> cpu = MarieCPU(Memory(), ScriptedConsole())
        >>> cpu.memory.load([0x7000])
        1
        >>> cpu.step()
        True
        >>> cpu.pc
        1

    Attributes:
        memory: Word memory shared by code and data
        console: Collaborator used by Input, Output and Dump
        state: Register values
        on_instruction: Optional hook called as (address, ir) after each
                        fetch, before the instruction executes
    """

    def __init__(self, memory: Memory, console: ConsoleProtocol,
                 input_prompt: str = "Input: ", dump_enabled: bool = True):
        self.memory = memory
        self.console = console
        self.input_prompt = input_prompt
        self.dump_enabled = dump_enabled
        self.state = CPUState()

        # Address of the instruction currently executing
        self.instruction_address = 0

        self.on_instruction: Optional[Callable[[int, int], None]] = None

    # ========================================
    # Register Properties
    # ========================================

    @property
    def ac(self) -> int:
        """Accumulator."""
        return self.state.ac

    @ac.setter
    def ac(self, value: int) -> None:
        self.state.ac = value & WORD_MASK

    @property
    def ac_signed(self) -> int:
        """Accumulator read as two's complement."""
        return to_signed(self.state.ac)

    @property
    def pc(self) -> int:
        """Program counter."""
        return self.state.pc

    @pc.setter
    def pc(self, value: int) -> None:
        self.state.pc = value & WORD_MASK

    @property
    def mar(self) -> int:
        """Memory address register."""
        return self.state.mar

    @mar.setter
    def mar(self, value: int) -> None:
        self.state.mar = value & WORD_MASK

    @property
    def mbr(self) -> int:
        """Memory buffer register."""
        return self.state.mbr

    @mbr.setter
    def mbr(self, value: int) -> None:
        self.state.mbr = value & WORD_MASK

    @property
    def ir(self) -> int:
        """Instruction register."""
        return self.state.ir

    @ir.setter
    def ir(self, value: int) -> None:
        self.state.ir = value & WORD_MASK

    @property
    def in_(self) -> int:
        """Input register."""
        return self.state.in_

    @in_.setter
    def in_(self, value: int) -> None:
        self.state.in_ = value & WORD_MASK

    @property
    def out(self) -> int:
        """Output register."""
        return self.state.out

    @out.setter
    def out(self, value: int) -> None:
        self.state.out = value & WORD_MASK

    # ========================================
    # Control
    # ========================================

    def reset(self) -> None:
        """Clear all registers. Memory is left untouched."""
        self.state = CPUState()
        self.instruction_address = 0

    def step(self) -> bool:
        """
        Fetch, decode and execute one instruction.

        Returns:
            True if the instruction was Halt, False otherwise

        Raises:
            MachineFault: For fatal runtime conditions
            MemoryFault: For accesses outside memory
        """
        self.instruction_address = self.pc

        # Fetch
        self.mar = self.pc
        self.mbr = self.memory.read(self.mar)
        self.ir = self.mbr
        self.pc = self.pc + 1

        # Decode
        opcode, operand = decode_instruction(self.ir)

        if self.on_instruction:
            self.on_instruction(self.instruction_address, self.ir)

        return self._execute(opcode, operand)

    def _execute(self, opcode: int, operand: int) -> bool:
        """Dispatch one decoded instruction."""
        try:
            op = Opcode(opcode)
        except ValueError:
            raise self._fault(f"unknown opcode {opcode:X}") from None

        match op:
            case Opcode.JNS:
                self._jns(operand)
            case Opcode.LOAD:
                self._load(operand)
            case Opcode.STORE:
                self._store(operand)
            case Opcode.ADD:
                self._add(operand)
            case Opcode.SUBT:
                self._subt(operand)
            case Opcode.INPUT:
                self._input()
            case Opcode.OUTPUT:
                self._output()
            case Opcode.HALT:
                return True
            case Opcode.SKIPCOND:
                self._skipcond(operand)
            case Opcode.JUMP:
                self.pc = operand
            case Opcode.CLEAR:
                self.ac = 0
            case Opcode.ADDI:
                self._add(self._indirect(operand))
            case Opcode.JUMPI:
                self.pc = self._indirect(operand)
            case Opcode.LOADI:
                self._load(self._indirect(operand))
            case Opcode.STOREI:
                self._store(self._indirect(operand))
            case Opcode.DUMP:
                self._dump(operand)
        return False

    def _fault(self, message: str) -> MachineFault:
        return MachineFault(message, ir=self.ir, address=self.instruction_address)

    # ========================================
    # Memory Reference Instructions
    # ========================================

    def _read(self, address: int) -> int:
        """MAR <- address; MBR <- M[MAR]."""
        self.mar = address
        self.mbr = self.memory.read(self.mar)
        return self.mbr

    def _indirect(self, address: int) -> int:
        """Fetch the effective address stored at address."""
        return self._read(address)

    def _load(self, address: int) -> None:
        self.ac = self._read(address)

    def _store(self, address: int) -> None:
        self.mar = address
        self.mbr = self.ac
        self.memory.write(self.mar, self.mbr)

    def _add(self, address: int) -> None:
        self.ac = self.ac + self._read(address)

    def _subt(self, address: int) -> None:
        self.ac = self.ac - self._read(address)

    def _jns(self, address: int) -> None:
        """Store the return address at address, continue at address + 1."""
        self.mbr = self.pc
        self.mar = address
        self.memory.write(self.mar, self.mbr)
        self.pc = address + 1

    # ========================================
    # Control Instructions
    # ========================================

    def _skipcond(self, operand: int) -> None:
        condition = (operand >> 10) & 3
        ac = self.ac_signed
        if condition == SKIP_IF_NEGATIVE:
            skip = ac < 0
        elif condition == SKIP_IF_ZERO:
            skip = ac == 0
        elif condition == SKIP_IF_POSITIVE:
            skip = ac > 0
        else:
            raise self._fault("invalid condition field in Skipcond")
        if skip:
            self.pc = self.pc + 1

    # ========================================
    # I/O Instructions
    # ========================================

    def _input(self) -> None:
        """Read a signed hex value, re-prompting until it is valid."""
        while True:
            line = self.console.read_line(self.input_prompt)
            if line is None:
                raise self._fault("input exhausted")
            text = line.strip()
            if not NUMBER_PATTERN.fullmatch(text):
                logger.warning(f"Input: '{text}' is not a hex number, try again")
                continue
            value = int(text, INPUT_BASE)
            if not WORD_MIN <= value <= WORD_MAX:
                logger.warning(f"Input: {text} does not fit a 16-bit signed word, try again")
                continue
            break

        self.in_ = value
        self.ac = self.in_

    def _output(self) -> None:
        self.out = self.ac
        self.console.write_line(f"{self.out:04X}")

    def _dump(self, last_address: int) -> None:
        if not self.dump_enabled:
            raise self._fault("Dump is disabled")
        for line in self.dump_lines(last_address):
            self.console.write_line(line)

    def format_registers(self) -> str:
        """Format all registers on one line."""
        s = self.state
        return (
            f"AC={s.ac:04X} PC={s.pc:04X} MAR={s.mar:04X} MBR={s.mbr:04X} "
            f"IR={s.ir:04X} IN={s.in_:04X} OUT={s.out:04X}"
        )

    def dump_lines(self, last_address: int) -> list[str]:
        """Registers followed by a hex listing of addresses 0..last_address."""
        return [self.format_registers(), *self.memory.hex_dump(0, last_address)]
