# =============================================================================
# test_cli.py - Command-Line Interface Tests
# =============================================================================
# Tests for the masm and mrun command-line tools using click's CliRunner.
#
# Test coverage includes:
#   - Output file generation
#   - Exit codes for success, errors and step limits
#   - Error messages with file and line information
#   - Environment variable defaults
# =============================================================================

import pytest
from click.testing import CliRunner

from marie_sdk.cli.errors import ExitCode
from marie_sdk.cli.masm import main as masm
from marie_sdk.cli.mrun import main as mrun
from marie_sdk.image import MemoryImage


SUM_SOURCE = """\
        Load X
        Add Y
        Store Z
        Output
        Halt
X,      DEC 2
Y,      DEC 3
Z,      DEC 0
"""

ECHO_SOURCE = """\
        Input
        Output
        Halt
"""


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def sum_file(tmp_path):
    path = tmp_path / "sum.mas"
    path.write_text(SUM_SOURCE)
    return path


def write_source(tmp_path, name: str, source: str):
    path = tmp_path / name
    path.write_text(source)
    return path


# =============================================================================
# masm Tests
# =============================================================================

class TestMasm:
    """Test the assembler CLI."""

    def test_default_output(self, runner, sum_file):
        result = runner.invoke(masm, [str(sum_file)])
        assert result.exit_code == ExitCode.SUCCESS
        image = MemoryImage.read(sum_file.with_suffix(".hex"))
        assert list(image) == [0x1005, 0x3006, 0x2007, 0x6000, 0x7000, 2, 3, 0]

    def test_explicit_output(self, runner, sum_file, tmp_path):
        out = tmp_path / "out.hex"
        result = runner.invoke(masm, [str(sum_file), "-o", str(out)])
        assert result.exit_code == 0
        assert out.exists()
        assert not sum_file.with_suffix(".hex").exists()

    def test_listing_and_symbols(self, runner, sum_file, tmp_path):
        lst = tmp_path / "sum.lst"
        sym = tmp_path / "sum.sym"
        result = runner.invoke(masm, [str(sum_file), "-l", str(lst), "-s", str(sym)])
        assert result.exit_code == 0
        assert "Load 005" in lst.read_text()
        assert "Z 007" in sym.read_text()

    def test_verbose(self, runner, sum_file):
        result = runner.invoke(masm, ["-v", str(sum_file)])
        assert result.exit_code == 0
        assert "Assembly complete: 8 words, 3 symbols" in result.output

    def test_assembly_error(self, runner, tmp_path):
        src = write_source(tmp_path, "bad.mas", "Halt\nLoad Nowhere\n")
        result = runner.invoke(masm, [str(src)])
        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "bad.mas:2:6: error: undefined symbol 'Nowhere'" in result.output
        assert not src.with_suffix(".hex").exists()

    def test_missing_input(self, runner, tmp_path):
        result = runner.invoke(masm, [str(tmp_path / "missing.mas")])
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_version(self, runner):
        result = runner.invoke(masm, ["--version"])
        assert result.exit_code == 0
        assert "masm" in result.output


# =============================================================================
# mrun Tests
# =============================================================================

class TestMrun:
    """Test the simulator CLI."""

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for name in ("MARIE_MAX_STEPS", "MARIE_INPUT_PROMPT", "MARIE_TRACE", "MARIE_DUMP"):
            monkeypatch.delenv(name, raising=False)

    def test_run_source(self, runner, sum_file):
        result = runner.invoke(mrun, [str(sum_file)])
        assert result.exit_code == ExitCode.SUCCESS
        assert "0005" in result.output

    def test_run_image(self, runner, sum_file):
        runner.invoke(masm, [str(sum_file)])
        result = runner.invoke(mrun, [str(sum_file.with_suffix(".hex"))])
        assert result.exit_code == 0
        assert "0005" in result.output

    def test_input_from_stdin(self, runner, tmp_path):
        src = write_source(tmp_path, "echo.mas", ECHO_SOURCE)
        result = runner.invoke(mrun, [str(src)], input="2a\n")
        assert result.exit_code == 0
        assert "002A" in result.output

    def test_input_exhausted(self, runner, tmp_path):
        src = write_source(tmp_path, "echo.mas", ECHO_SOURCE)
        result = runner.invoke(mrun, [str(src)], input="")
        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "Runtime error: input exhausted" in result.output

    def test_registers(self, runner, tmp_path):
        src = write_source(tmp_path, "halt.mas", "Halt\n")
        result = runner.invoke(mrun, [str(src), "--registers"])
        assert result.exit_code == 0
        assert "PC  = 0001" in result.output
        assert "IR  = 7000" in result.output

    def test_runtime_fault(self, runner, tmp_path):
        src = write_source(tmp_path, "fault.mas", "Skipcond C00\nHalt\n")
        result = runner.invoke(mrun, [str(src)])
        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "invalid condition field in Skipcond" in result.output

    def test_max_steps(self, runner, tmp_path):
        src = write_source(tmp_path, "loop.mas", "Top, Jump Top\n")
        result = runner.invoke(mrun, [str(src), "--max-steps", "50"])
        assert result.exit_code == ExitCode.STEP_LIMIT
        assert "Reached max steps (50)" in result.output

    def test_max_steps_from_env(self, runner, tmp_path, monkeypatch):
        monkeypatch.setenv("MARIE_MAX_STEPS", "20")
        src = write_source(tmp_path, "loop.mas", "Top, Jump Top\n")
        result = runner.invoke(mrun, [str(src)])
        assert result.exit_code == ExitCode.STEP_LIMIT

    def test_invalid_max_steps(self, runner, sum_file):
        result = runner.invoke(mrun, [str(sum_file), "--max-steps", "0"])
        assert result.exit_code == 2

    def test_no_dump(self, runner, tmp_path):
        src = write_source(tmp_path, "dump.mas", "Dump 0\nHalt\n")
        assert runner.invoke(mrun, [str(src)]).exit_code == 0
        result = runner.invoke(mrun, [str(src), "--no-dump"])
        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "Dump is disabled" in result.output

    def test_assembly_error(self, runner, tmp_path):
        src = write_source(tmp_path, "bad.mas", "Load\n")
        result = runner.invoke(mrun, [str(src)])
        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "requires an address operand" in result.output

    def test_bad_image(self, runner, tmp_path):
        img = write_source(tmp_path, "bad.hex", "7000\n12\n")
        result = runner.invoke(mrun, [str(img)])
        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "line 2" in result.output
