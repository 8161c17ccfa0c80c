"""Depth-first traversals over a SyntaxTree.

Visitor and Transformer dispatch on the tree-sitter node type, in the same
spirit as LibCST's CSTVisitor/CSTTransformer:

- ``visit_<type>(node)`` runs before the children; returning ``False``
  skips them.
- ``leave_<type>(node)`` runs after the children.

A Transformer's ``leave_<type>`` may return replacement text for the node.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from crowbar.syntax.parser import parse_source

if TYPE_CHECKING:
    from tree_sitter import Node

    from crowbar.syntax.tree import SyntaxTree


class Visitor:
    """Read-only depth-first traversal.

    Examples
    --------
    >>> class CountLets(Visitor):
    ...     def __init__(self):
    ...         super().__init__()
    ...         self.count = 0
    ...     def visit_let_declaration(self, node):
    ...         self.count += 1
    >>> counter = CountLets()
    >>> counter.walk(parse("fn f() { let a = 1; { let b = 2; } }"))
    >>> counter.count
    2
    """

    def __init__(self) -> None:
        self.tree: SyntaxTree | None = None

    def text(self, node: Node) -> str:
        """Source text of ``node`` in the tree being walked."""
        assert self.tree is not None
        return self.tree.node_text(node)

    def walk(self, tree: SyntaxTree) -> None:
        """Traverse ``tree`` in pre-order, calling the visit/leave hooks.

        Iterative, so deeply nested sources do not hit the recursion limit.
        """
        self.tree = tree
        stack: list[tuple[Node, bool]] = [(tree.root, False)]
        while stack:
            node, leaving = stack.pop()
            if leaving:
                self.on_leave(node)
                continue
            descend = self.on_visit(node)
            stack.append((node, True))
            if descend:
                stack.extend((child, False) for child in reversed(node.children))

    def on_visit(self, node: Node) -> bool:
        method = getattr(self, f"visit_{node.type}", None)
        if method is None:
            return True
        return method(node) is not False

    def on_leave(self, node: Node) -> None:
        method = getattr(self, f"leave_{node.type}", None)
        if method is not None:
            method(node)


class Transformer(Visitor):
    """Rewriting depth-first traversal.

    Replacements returned from ``leave_<type>`` hooks are collected as byte
    spans; ``transform`` splices them into the source and parses the result
    into a new tree. A replacement for a node discards any replacements
    already recorded inside it.
    """

    def __init__(self) -> None:
        super().__init__()
        self._replacements: list[tuple[int, int, bytes]] = []

    def on_leave(self, node: Node) -> None:
        method = getattr(self, f"leave_{node.type}", None)
        if method is None:
            return
        replacement = method(node)
        if replacement is None or replacement == self.text(node):
            return
        start, end = node.start_byte, node.end_byte
        self._replacements = [
            r for r in self._replacements if not (start <= r[0] and r[1] <= end)
        ]
        self._replacements.append((start, end, replacement.encode("utf-8")))

    def transform(self, tree: SyntaxTree) -> SyntaxTree:
        """Walk ``tree`` and return the rewritten tree.

        The returned tree is not validated; callers decide whether a result
        with syntax errors is acceptable.
        """
        self._replacements = []
        self.walk(tree)
        if not self._replacements:
            return tree

        source = tree.source
        pieces: list[bytes] = []
        cursor = 0
        for start, end, replacement in sorted(self._replacements):
            pieces.append(source[cursor:start])
            pieces.append(replacement)
            cursor = end
        pieces.append(source[cursor:])
        return parse_source(b"".join(pieces))
