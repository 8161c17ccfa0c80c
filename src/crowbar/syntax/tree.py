"""SyntaxTree - a parsed Rust source buffer."""
from __future__ import annotations

from typing import TYPE_CHECKING, Iterator

if TYPE_CHECKING:
    from tree_sitter import Node, Tree


class SyntaxTree:
    """A tree-sitter tree together with the bytes it was parsed from.

    tree-sitter nodes only carry byte offsets, so every text lookup goes
    through the source held here. Trees are never mutated: rewriting
    traversals (see :class:`crowbar.syntax.visitor.Transformer`) splice the
    source and parse the result into a new ``SyntaxTree``.

    Parameters
    ----------
    source : bytes
        UTF-8 encoded source text.
    tree : tree_sitter.Tree
        The tree parsed from ``source``.

    Examples
    --------
    >>> tree = parse("fn main() { let x: i32 = 1; }")
    >>> [tree.node_text(n) for n in tree.walk() if n.type == "identifier"]
    ['main', 'x']
    """

    def __init__(self, source: bytes, tree: Tree) -> None:
        self._source = source
        self._tree = tree

    def __repr__(self) -> str:
        return f"SyntaxTree({len(self._source)} bytes)"

    @property
    def source(self) -> bytes:
        """UTF-8 source bytes."""
        return self._source

    @property
    def root(self) -> Node:
        """The ``source_file`` root node."""
        return self._tree.root_node

    @property
    def has_errors(self) -> bool:
        """True if tree-sitter had to recover from a syntax error."""
        return self.root.has_error

    def node_text(self, node: Node) -> str:
        """Source text covered by ``node``."""
        return self._source[node.start_byte : node.end_byte].decode("utf-8")

    def walk(self) -> Iterator[Node]:
        """Yield every node in pre-order (document order)."""
        stack = [self.root]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def unparse(self) -> str:
        """Regenerate source text from this tree."""
        return self._source.decode("utf-8")
