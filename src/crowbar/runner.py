"""Compile a source buffer with rustc and run the result."""
from __future__ import annotations

import logging
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from crowbar.exceptions import ExecutionError

if TYPE_CHECKING:
    from crowbar.config import CrowbarConfig

logger = logging.getLogger(__name__)

SOURCE_NAME = "main.rs"
BINARY_NAME = "main"


@dataclass
class ExecutionResult:
    """Output of one compile-and-run cycle.

    Attributes
    ----------
    diagnostics : str
        Compiler stderr, verbatim.
    output : str
        Program stdout, verbatim. Empty if compilation failed.
    errors : str
        Program stderr, verbatim.
    exit_status : int | None
        Program exit code, or None if it never ran.
    """

    diagnostics: str = ""
    output: str = ""
    errors: str = ""
    exit_status: int | None = None

    @property
    def compiled(self) -> bool:
        """True if the program was built and run."""
        return self.exit_status is not None


def execute(code: str, config: CrowbarConfig) -> ExecutionResult:
    """Compile ``code`` and run the produced binary.

    Any compiler diagnostics count as a failed build, as they do in the
    editor this library backs; the program is then not run.

    Parameters
    ----------
    code : str
        Complete Rust program.
    config : CrowbarConfig
        Compiler command and timeouts.

    Returns
    -------
    ExecutionResult
        Diagnostics on a failed build, otherwise the program's output.

    Raises
    ------
    ExecutionError
        If the compiler or the program cannot be started or times out.
    """
    with tempfile.TemporaryDirectory(prefix="crowbar-") as workdir:
        source_path = Path(workdir) / SOURCE_NAME
        binary_path = Path(workdir) / BINARY_NAME
        try:
            source_path.write_text(code, encoding="utf-8")
        except OSError as e:
            raise ExecutionError(f"Failed to write code to file: {e}") from e

        compile_cmd = [config.compiler, *config.compiler_args, str(source_path), "-o", str(binary_path)]
        logger.info("Compiling: %s", " ".join(compile_cmd))
        try:
            build = subprocess.run(
                compile_cmd,
                capture_output=True,
                text=True,
                timeout=config.compile_timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise ExecutionError(f"Compilation timed out after {config.compile_timeout:g}s") from e
        except OSError as e:
            raise ExecutionError(f"Failed to compile the code: {e}") from e

        if build.stderr or build.returncode != 0:
            logger.info("Compilation failed with exit code %d", build.returncode)
            return ExecutionResult(diagnostics=build.stderr)

        try:
            run = subprocess.run(
                [str(binary_path)],
                capture_output=True,
                text=True,
                timeout=config.run_timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise ExecutionError(f"Program timed out after {config.run_timeout:g}s") from e
        except OSError as e:
            raise ExecutionError(f"Failed to run the code: {e}") from e

        logger.info("Program exited with %d", run.returncode)
        return ExecutionResult(output=run.stdout, errors=run.stderr, exit_status=run.returncode)
