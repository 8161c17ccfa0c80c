"""
Core module.

Example
-------
>>> from crowbar import Crowbar
>>>
>>> cb = Crowbar()
>>> cb.load("src/main.rs")
>>> cb.set_value("retries", 5)
>>> cb.inject_values()
"""
from __future__ import annotations

from .crowbar import Crowbar
from .results import ErrorResult, Result

__all__ = [
    "Crowbar",
    "ErrorResult",
    "Result",
]
