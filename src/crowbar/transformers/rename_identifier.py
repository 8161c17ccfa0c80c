"""Transformer to rename identifiers throughout a program."""
from __future__ import annotations

from typing import TYPE_CHECKING

from crowbar.syntax.visitor import Transformer

if TYPE_CHECKING:
    from tree_sitter import Node

    from crowbar.syntax.tree import SyntaxTree


class RenameIdentifier(Transformer):
    """Replace every identifier token whose text is exactly ``old_name``.

    The rename is by textual identity, not by scope: bindings, references,
    field names, type names and path segments are all rewritten, including
    unrelated bindings in inner scopes that happen to share the name.

    Parameters
    ----------
    old_name : str
        Identifier text to replace.
    new_name : str
        Replacement text. It is not validated.
    skip_macro_bodies : bool
        If True (the default), token trees of macro invocations, macro
        definitions and attributes are left untouched. The macro's own name
        is still renamed. Uses inside skipped bodies, such as the arguments
        of ``println!``, keep the old name, so the renamed program may no
        longer compile.

    Attributes
    ----------
    replaced_count : int
        Number of replacements made.

    Examples
    --------
    >>> tree = parse("fn f() { let a: i32 = 1; { let b: i32 = a + 1; } }")
    >>> transformer = RenameIdentifier("a", "z")
    >>> transformer.transform(tree).unparse()
    'fn f() { let z: i32 = 1; { let b: i32 = z + 1; } }'
    >>> transformer.replaced_count
    2
    """

    def __init__(self, old_name: str, new_name: str, skip_macro_bodies: bool = True):
        super().__init__()
        self.old_name = old_name
        self.new_name = new_name
        self.skip_macro_bodies = skip_macro_bodies
        self.replaced_count = 0

    def transform(self, tree: SyntaxTree) -> SyntaxTree:
        self.replaced_count = 0
        return super().transform(tree)

    def visit_token_tree(self, node: Node) -> bool:
        return not self.skip_macro_bodies

    def _rename(self, node: Node) -> str | None:
        if self.text(node) != self.old_name:
            return None
        self.replaced_count += 1
        return self.new_name

    leave_identifier = _rename
    leave_field_identifier = _rename
    leave_type_identifier = _rename
    leave_shorthand_field_identifier = _rename
    leave_primitive_type = _rename


def rename(
    tree: SyntaxTree,
    old_name: str,
    new_name: str,
    skip_macro_bodies: bool = True,
) -> SyntaxTree:
    """Rename ``old_name`` to ``new_name`` everywhere in ``tree``.

    Returns a new tree; use ``unparse`` for the rewritten source text.
    """
    return RenameIdentifier(old_name, new_name, skip_macro_bodies).transform(tree)
