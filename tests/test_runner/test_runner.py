"""
Tests for crowbar.runner - compiling and running a program.

subprocess.run is replaced by a stub, so these tests do not need rustc.

Coverage targets:
- Compiler command line from the config
- Build failures (diagnostics or non-zero exit)
- Program output capture
- Timeouts and missing executables
"""
from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from crowbar.config import CrowbarConfig
from crowbar.exceptions import ExecutionError
from crowbar.runner import ExecutionResult, execute

PROGRAM = 'fn main() { println!("hi"); }\n'


class FakeSubprocess:
    """Stand-in for subprocess.run returning queued results in order."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls: list[list[str]] = []
        self.sources: list[str] = []

    def __call__(self, cmd, **kwargs):
        self.calls.append(list(cmd))
        if len(self.calls) == 1:
            # the source file only exists while execute() runs
            self.sources.append(Path(cmd[-3]).read_text())
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


def completed(returncode: int = 0, stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


@pytest.fixture
def fake_run(monkeypatch: pytest.MonkeyPatch):
    def install(*outcomes) -> FakeSubprocess:
        fake = FakeSubprocess(*outcomes)
        monkeypatch.setattr(subprocess, "run", fake)
        return fake

    return install


# =============================================================================
# ExecutionResult
# =============================================================================

class TestExecutionResult:
    """Tests for ExecutionResult."""

    def test_not_compiled_by_default(self):
        assert ExecutionResult(diagnostics="error").compiled is False

    def test_compiled_with_exit_status(self):
        assert ExecutionResult(output="x", exit_status=1).compiled is True


# =============================================================================
# execute()
# =============================================================================

class TestExecute:
    """Tests for execute()."""

    def test_success(self, fake_run):
        fake = fake_run(completed(), completed(stdout="hi\n", stderr="warn\n", returncode=3))

        result = execute(PROGRAM, CrowbarConfig())

        assert result == ExecutionResult(output="hi\n", errors="warn\n", exit_status=3)
        assert fake.sources == [PROGRAM]

    def test_compile_command(self, fake_run):
        fake = fake_run(completed(), completed())
        config = CrowbarConfig(compiler="rustc-custom", compiler_args=["--edition", "2021"])

        execute(PROGRAM, config)

        compile_cmd, run_cmd = fake.calls
        assert compile_cmd[:3] == ["rustc-custom", "--edition", "2021"]
        assert compile_cmd[3].endswith("main.rs")
        assert compile_cmd[4] == "-o"
        assert run_cmd == [compile_cmd[5]]

    def test_diagnostics_fail_build(self, fake_run):
        """
        Any compiler stderr counts as a failed build, even with exit code 0.
        """
        fake = fake_run(completed(stderr="warning: unused variable"))

        result = execute(PROGRAM, CrowbarConfig())

        assert result.compiled is False
        assert result.diagnostics == "warning: unused variable"
        assert len(fake.calls) == 1

    def test_non_zero_exit_fails_build(self, fake_run):
        fake_run(completed(returncode=1))

        result = execute(PROGRAM, CrowbarConfig())

        assert result.compiled is False

    def test_compiler_missing(self, fake_run):
        fake_run(FileNotFoundError("rustc"))

        with pytest.raises(ExecutionError, match="Failed to compile"):
            execute(PROGRAM, CrowbarConfig())

    def test_compile_timeout(self, fake_run):
        fake_run(subprocess.TimeoutExpired(cmd="rustc", timeout=60))

        with pytest.raises(ExecutionError, match="Compilation timed out after 60s"):
            execute(PROGRAM, CrowbarConfig())

    def test_program_timeout(self, fake_run):
        fake_run(completed(), subprocess.TimeoutExpired(cmd="main", timeout=0.5))

        with pytest.raises(ExecutionError, match="Program timed out after 0.5s"):
            execute(PROGRAM, CrowbarConfig(run_timeout=0.5))

    def test_program_cannot_start(self, fake_run):
        fake_run(completed(), PermissionError("denied"))

        with pytest.raises(ExecutionError, match="Failed to run"):
            execute(PROGRAM, CrowbarConfig())
