"""Exception types raised by the low-level layers.

The :class:`~crowbar.core.crowbar.Crowbar` facade catches all of these and
turns them into :class:`~crowbar.core.results.ErrorResult` objects, so code
that only uses the facade never has to handle them.
"""
from __future__ import annotations


class CrowbarError(Exception):
    """Base class for all Crowbar errors."""


class ParseError(CrowbarError):
    """Source text does not match the Rust grammar.

    Attributes
    ----------
    message : str
        Description of the problem.
    line : int
        1-indexed line of the first error node.
    column : int
        0-indexed column of the first error node.
    """

    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(f"{message} at line {line}, column {column}")
        self.message = message
        self.line = line
        self.column = column


class MalformedDeclarationError(CrowbarError):
    """A matched ``let`` prefix has no terminating ``;``."""

    def __init__(self, name: str, offset: int) -> None:
        super().__init__(
            f"Declaration of '{name}' at byte {offset} has no terminating ';'"
        )
        self.name = name
        self.offset = offset


class ExecutionError(CrowbarError):
    """The compiler or the produced binary could not be run."""


class ConfigError(CrowbarError):
    """Invalid configuration value."""
