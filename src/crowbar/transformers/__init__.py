"""
Tree rewriting transformers.

This package contains the Transformer subclasses that rewrite a parsed
Rust program.
"""
from __future__ import annotations

from .rename_identifier import RenameIdentifier, rename

__all__ = [
    "RenameIdentifier",
    "rename",
]
