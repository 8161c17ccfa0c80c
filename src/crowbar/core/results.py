"""Outcome objects returned by every Crowbar session operation.

- Result - what happened, plus the new source, variables or run output
- ErrorResult - a failed operation and the exception behind it
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass
class Result:
    """Outcome of a session operation.

    A Result is truthy when the operation worked, so callers can write
    ``if not cb.inject_values(): ...``.

    Attributes
    ----------
    success : bool
        Whether the operation worked.
    message : str
        Summary for display, e.g. ``"Found 6 variables"``. For ``run()`` it
        is the program's stdout.
    files_changed : list[Path]
        Source files written by ``save()``.
    data : Any
        Operation payload: the SyntaxTree, the variable list, the rewritten
        source or an ExecutionResult.
    diff : str | None
        Unified diff of the buffer change, if the operation rewrites source.
    """

    success: bool
    message: str
    files_changed: list[Path] = field(default_factory=list)
    data: Any = None
    diff: str | None = None

    def __bool__(self) -> bool:
        return self.success

    def is_error(self) -> bool:
        return not self.success


@dataclass
class ErrorResult(Result):
    """A failed session operation.

    The buffer and the variable list are left as they were before the
    operation.

    Attributes
    ----------
    exception : Exception | None
        The ParseError, ExecutionError or other error that stopped the
        operation, if there was one.
    operation : str
        Name of the failed operation (``"parse"``, ``"rename"``, ``"run"``...).
    """

    success: bool = field(default=False, init=False)
    exception: Exception | None = None
    operation: str = ""

    def raise_if_error(self) -> None:
        """Raise the stored exception, or a RuntimeError with the message."""
        if self.exception:
            raise self.exception
        raise RuntimeError(self.message)
