"""Discovery of typed local variables."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from crowbar.syntax.visitor import Visitor
from crowbar.variables.literals import extract_literal
from crowbar.variables.models import DeclarationSite, DiscoveredVariable
from crowbar.variables.types import classify_type, normalize_type_text

if TYPE_CHECKING:
    from tree_sitter import Node

    from crowbar.syntax.tree import SyntaxTree

logger = logging.getLogger(__name__)


class VariableDiscoveryVisitor(Visitor):
    """Collect ``let`` bindings that carry an explicit type annotation.

    Only plain identifier patterns are considered (``let x: T`` and
    ``let mut x: T``). Declarations without an annotation, and destructuring
    patterns, are skipped entirely. Nested blocks, closures, loops and
    initializer expressions are all entered, so the result is in pre-order.

    Attributes
    ----------
    variables : list[DiscoveredVariable]
        Variables found so far, in declaration order.
    """

    def __init__(self) -> None:
        super().__init__()
        self.variables: list[DiscoveredVariable] = []

    def visit_let_declaration(self, node: Node) -> bool:
        variable = self._read_declaration(node)
        if variable is not None:
            self.variables.append(variable)
        return True

    def _read_declaration(self, node: Node) -> DiscoveredVariable | None:
        tree = self.tree
        assert tree is not None

        pattern = node.child_by_field_name("pattern")
        type_node = node.child_by_field_name("type")
        if pattern is None or type_node is None or pattern.type != "identifier":
            return None

        semantic_type = classify_type(type_node, tree)
        value = semantic_type.default
        has_literal = False

        initializer = node.child_by_field_name("value")
        if initializer is not None and semantic_type.editable:
            found, literal = extract_literal(initializer, tree, semantic_type)
            if found:
                value, has_literal = literal, True

        prefix_end = initializer.start_byte if initializer is not None else node.end_byte
        site = DeclarationSite(
            start=node.start_byte,
            prefix=tree.source[node.start_byte : prefix_end],
            value_start=initializer.start_byte if initializer is not None else None,
            value_end=initializer.end_byte if initializer is not None else None,
            initializer=(
                tree.source[initializer.start_byte : initializer.end_byte]
                if initializer is not None
                else None
            ),
            line=node.start_point[0] + 1,
        )

        variable = DiscoveredVariable(
            name=tree.node_text(pattern),
            semantic_type=semantic_type,
            declared_type=normalize_type_text(tree.node_text(type_node)),
            value=value,
            mutable=any(child.type == "mutable_specifier" for child in node.children),
            has_literal=has_literal,
            site=site,
        )
        logger.debug(
            "Found %s: %s (%s) = %r at line %d",
            variable.name,
            variable.declared_type,
            semantic_type.value,
            value,
            site.line,
        )
        return variable


def discover(tree: SyntaxTree) -> list[DiscoveredVariable]:
    """Find the typed local variables of a parsed program.

    Parameters
    ----------
    tree : SyntaxTree
        Parsed Rust source.

    Returns
    -------
    list[DiscoveredVariable]
        One entry per annotated ``let`` binding, in pre-order. Values are
        read from literal initializers where possible and otherwise hold
        the default for their type.

    Examples
    --------
    >>> tree = parse('''
    ... fn main() {
    ...     let count: i32 = 3;
    ...     let mut label: String = String::from("hi");
    ...     let inferred = 1.5;
    ... }''')
    >>> [(v.name, v.value) for v in discover(tree)]
    [('count', 3), ('label', 'hi')]
    """
    visitor = VariableDiscoveryVisitor()
    visitor.walk(tree)
    return visitor.variables
