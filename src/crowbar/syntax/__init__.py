"""
Rust grammar front-end.

Wraps tree-sitter and tree-sitter-rust: parsing to a SyntaxTree, unparsing
back to text, and the Visitor/Transformer traversal bases used by the
variable discovery and the identifier renamer.
"""
from __future__ import annotations

from .parser import RUST_LANGUAGE, parse, parse_source, unparse
from .tree import SyntaxTree
from .visitor import Transformer, Visitor

__all__ = [
    "RUST_LANGUAGE",
    "SyntaxTree",
    "Transformer",
    "Visitor",
    "parse",
    "parse_source",
    "unparse",
]
