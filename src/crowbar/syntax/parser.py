"""Rust grammar front-end backed by tree-sitter.

Provides:
- parse() - source text to SyntaxTree, raising ParseError on invalid input
- parse_source() - bytes to SyntaxTree without validation
- unparse() - SyntaxTree back to source text
"""
from __future__ import annotations

from typing import TYPE_CHECKING

import tree_sitter_rust as tsrust
from tree_sitter import Language, Parser

from crowbar.exceptions import ParseError
from crowbar.syntax.tree import SyntaxTree

if TYPE_CHECKING:
    from tree_sitter import Node

RUST_LANGUAGE = Language(tsrust.language())
_parser = Parser(RUST_LANGUAGE)


def parse_source(source: bytes) -> SyntaxTree:
    """Parse UTF-8 bytes into a tree, keeping any error nodes.

    Parameters
    ----------
    source : bytes
        Rust source code.

    Returns
    -------
    SyntaxTree
        The parsed tree. Check ``has_errors`` before trusting it.
    """
    return SyntaxTree(source, _parser.parse(source))


def parse(text: str) -> SyntaxTree:
    """Parse Rust source text.

    Parameters
    ----------
    text : str
        Rust source code.

    Returns
    -------
    SyntaxTree
        A tree without error nodes.

    Raises
    ------
    ParseError
        If the text does not match the grammar. The location points at the
        first error or missing node in document order.

    Examples
    --------
    >>> parse("fn main() { let x: i32 = 1; }").has_errors
    False
    """
    tree = parse_source(text.encode("utf-8"))
    if tree.has_errors:
        node = _first_error(tree.root)
        if node is None:
            raise ParseError("Invalid syntax", 1, 0)
        line, column = node.start_point[0] + 1, node.start_point[1]
        if node.is_missing:
            raise ParseError(f"Missing '{node.type}'", line, column)
        snippet = tree.node_text(node).strip().splitlines()
        token = snippet[0][:40] if snippet else ""
        raise ParseError(f"Unexpected '{token}'", line, column)
    return tree


def unparse(tree: SyntaxTree) -> str:
    """Regenerate source text from a tree."""
    return tree.unparse()


def _first_error(root: Node) -> Node | None:
    """Find the first ERROR or MISSING node, descending only into damaged subtrees."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node
        stack.extend(child for child in reversed(node.children) if child.has_error or child.is_missing)
    return None
