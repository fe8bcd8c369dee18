"""
Console Tests
=============

Tests for the stream-backed console used by default and the scripted
console used to drive programs non-interactively.
"""

import io

import pytest

from marie_sdk.emulator import Emulator, ScriptedConsole, StreamConsole


@pytest.fixture
def streams():
    """Input, output and prompt streams."""
    return io.StringIO("1F\r\n\n2a"), io.StringIO(), io.StringIO()


class TestStreamConsole:
    """Test the console over text streams."""

    def test_read_line_strips_terminator(self, streams):
        console = StreamConsole(*streams)
        assert console.read_line("") == "1F"
        assert console.read_line("") == ""
        assert console.read_line("") == "2a"

    def test_end_of_input_returns_none(self, streams):
        console = StreamConsole(*streams)
        for _ in range(3):
            console.read_line("")
        assert console.read_line("") is None
        assert console.read_line("") is None

    def test_empty_input(self):
        console = StreamConsole(io.StringIO(), io.StringIO())
        assert console.read_line("? ") is None

    def test_prompt_goes_to_prompt_stream(self, streams):
        _, output, prompts = streams
        console = StreamConsole(*streams)
        console.read_line("Input: ")
        console.read_line("")
        assert prompts.getvalue() == "Input: "
        assert output.getvalue() == ""

    def test_prompt_defaults_to_output(self):
        output = io.StringIO()
        console = StreamConsole(io.StringIO("5\n"), output)
        console.read_line("> ")
        console.write_line("0005")
        assert output.getvalue() == "> 0005\n"

    def test_write_line(self):
        output = io.StringIO()
        console = StreamConsole(io.StringIO(), output)
        console.write_line("0021")
        console.write_line("FFFF")
        assert output.getvalue() == "0021\nFFFF\n"

    def test_drives_a_program(self):
        output = io.StringIO()
        emu = Emulator(console=StreamConsole(io.StringIO("2a\n"), output, io.StringIO()))
        emu.load_source("Input\nOutput\nInput\nHalt")
        event = emu.run()
        assert output.getvalue() == "002A\n"
        assert "input exhausted" in event.message


class TestScriptedConsole:
    """Test the list-fed console."""

    def test_inputs_in_order(self):
        console = ScriptedConsole(["1", "2"])
        assert console.read_line("a") == "1"
        assert console.read_line("b") == "2"
        assert console.read_line("c") is None
        assert console.prompts == ["a", "b", "c"]

    def test_feed(self):
        console = ScriptedConsole()
        console.feed("7", "8")
        assert console.pending_input == 2
        console.read_line("")
        assert console.pending_input == 1

    def test_output_recorded(self):
        console = ScriptedConsole()
        console.write_line("0001")
        assert console.output == ["0001"]
