"""
Console Collaborators
=====================

The Input, Output and Dump instructions talk to the outside world through
a console object. The emulator only needs two capabilities:

- read one line of text (None once input is exhausted)
- write one line of text

Anything with those two methods can be plugged in: the CLI supplies a
click-backed console, tests use ScriptedConsole.
"""

from collections import deque
from typing import Iterable, Optional, Protocol, TextIO


class ConsoleProtocol(Protocol):
    """Protocol defining the console interface used by the CPU."""

    def read_line(self, prompt: str) -> Optional[str]:
        """Read one line of input, or None at end of input."""
        ...

    def write_line(self, text: str) -> None:
        """Write one line of output."""
        ...


class StreamConsole:
    """
    Console over text streams.

    Args:
        input_stream: Stream to read lines from
        output_stream: Stream output lines are written to
        prompt_stream: Stream prompts are written to (defaults to output)
    """

    def __init__(self, input_stream: TextIO, output_stream: TextIO,
                 prompt_stream: Optional[TextIO] = None):
        self._input = input_stream
        self._output = output_stream
        self._prompt = prompt_stream or output_stream

    def read_line(self, prompt: str) -> Optional[str]:
        if prompt:
            self._prompt.write(prompt)
            self._prompt.flush()
        line = self._input.readline()
        if line == "":
            return None
        return line.rstrip("\r\n")

    def write_line(self, text: str) -> None:
        self._output.write(text + "\n")
        self._output.flush()


class ScriptedConsole:
    """
    Console fed from a list of input lines that records all output.

    Used by tests and by embedding code that drives programs
    non-interactively.

    Example:
        >>> console = ScriptedConsole(["1F", "2"])
        >>> console.read_line("Input: ")
        '1F'
        >>> console.write_line("0021")
        >>> console.output
        ['0021']
    """

    def __init__(self, inputs: Iterable[str] = ()):
        self._inputs = deque(inputs)
        self.output: list[str] = []
        self.prompts: list[str] = []

    def feed(self, *lines: str) -> None:
        """Queue more input lines."""
        self._inputs.extend(lines)

    def read_line(self, prompt: str) -> Optional[str]:
        self.prompts.append(prompt)
        if not self._inputs:
            return None
        return self._inputs.popleft()

    def write_line(self, text: str) -> None:
        self.output.append(text)

    @property
    def pending_input(self) -> int:
        """Number of queued input lines not yet consumed."""
        return len(self._inputs)
