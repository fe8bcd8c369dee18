"""
Execution Outcomes for the MARIE Emulator
=========================================

The run loop never exits the process and never lets a runtime fault
escape. Instead it returns a BreakEvent describing why execution
stopped, leaving registers and memory intact for inspection.

Example usage:

    >>> event = emu.run()
    >>> if event.reason == BreakReason.FAULT:
    ...     print(f"Fault at {event.address:03X}: {event.message}")
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


class BreakReason(Enum):
    """
    Enumeration of reasons why execution stopped.

    Used in BreakEvent to indicate what ended a run or step.
    """
    HALTED = auto()     # Halt instruction executed
    FAULT = auto()      # Fatal runtime condition
    MAX_STEPS = auto()  # Step limit reached (watchdog)
    STEP = auto()       # Single step completed normally


@dataclass
class BreakEvent:
    """
    Information about why execution stopped.

    Attributes:
        reason: Why execution stopped
        address: Address of the last instruction executed (if applicable)
        value: Instruction register value for faults (if applicable)
        steps: Instructions executed by the run that produced this event
        message: Human-readable description
    """
    reason: BreakReason
    address: Optional[int] = None
    value: Optional[int] = None
    steps: int = 0
    message: str = ""

    @property
    def halted(self) -> bool:
        """True if the program ended with Halt."""
        return self.reason == BreakReason.HALTED

    @property
    def faulted(self) -> bool:
        """True if the program ended with a fatal runtime condition."""
        return self.reason == BreakReason.FAULT

    def __str__(self) -> str:
        """Return human-readable description."""
        if self.message:
            return self.message
        match self.reason:
            case BreakReason.HALTED:
                return f"Halted at {self.address:03X}" if self.address is not None else "Halted"
            case BreakReason.FAULT:
                return "Runtime fault"
            case BreakReason.MAX_STEPS:
                return "Maximum steps reached"
            case BreakReason.STEP:
                return "Single step"
            case _:
                return "Unknown"
