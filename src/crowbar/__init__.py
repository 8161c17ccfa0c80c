"""
Crowbar - edit the literal values of a Rust program and run it.

Loads Rust source, discovers the explicitly typed local variables, lets the
caller change their initial values, writes the edits back into the source
text and hands the result to rustc. Identifiers can be renamed throughout
the program.

Example
-------
>>> from crowbar import Crowbar
>>>
>>> cb = Crowbar()
>>> cb.load("src/main.rs")
>>> for variable in cb.variables:
...     print(variable.name, variable.declared_type, variable.value)
>>>
>>> # Edit a value and write it back
>>> cb.set_value("greeting", "hello")
>>> cb.inject_values()
>>>
>>> # Rename everywhere, then compile and run
>>> cb.rename("greeting", "message")
>>> result = cb.run()
>>> print(result.data.output if result else result.message)

Classes
-------
Crowbar
    Session over one source buffer. Operations never raise; they return
    Result objects.

Result
    Result class for all operations. Contains success status, message,
    payload and diff.

ErrorResult
    Result class for failed operations.

CrowbarConfig
    Compiler command, timeouts and rewriting options.

DiscoveredVariable
    A typed ``let`` binding and its current value.

SemanticType
    Integer, float, boolean, text or unsupported.

Functions
---------
parse / unparse
    Rust source text to SyntaxTree and back.

discover
    Find the typed local variables of a tree.

inject
    Write edited values back into source text.

rename
    Rename an identifier throughout a tree.
"""
from __future__ import annotations

import logging

from crowbar.config import CrowbarConfig, load_config
from crowbar.core import Crowbar, ErrorResult, Result
from crowbar.exceptions import (
    ConfigError,
    CrowbarError,
    ExecutionError,
    MalformedDeclarationError,
    ParseError,
)
from crowbar.runner import ExecutionResult, execute
from crowbar.syntax import SyntaxTree, parse, unparse
from crowbar.transformers import RenameIdentifier, rename
from crowbar.variables import DiscoveredVariable, SemanticType, discover, inject

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "Crowbar",
    "CrowbarConfig",
    "CrowbarError",
    "DiscoveredVariable",
    "ErrorResult",
    "ExecutionError",
    "ExecutionResult",
    "MalformedDeclarationError",
    "ParseError",
    "RenameIdentifier",
    "Result",
    "SemanticType",
    "SyntaxTree",
    "discover",
    "execute",
    "inject",
    "load_config",
    "parse",
    "rename",
    "unparse",
]
