"""
Tests for crowbar.syntax.visitor - Visitor and Transformer bases.

Coverage targets:
- visit/leave dispatch by node type and order
- Skipping children by returning False
- Transformer splicing and nested replacements
"""
from __future__ import annotations

from crowbar.syntax import Transformer, Visitor, parse


class RecordingVisitor(Visitor):
    """Records the order of let_declaration visits and leaves."""

    def __init__(self):
        super().__init__()
        self.events: list[str] = []

    def visit_let_declaration(self, node):
        self.events.append("visit " + self.text(node.child_by_field_name("pattern")))

    def leave_let_declaration(self, node):
        self.events.append("leave " + self.text(node.child_by_field_name("pattern")))


class TestVisitor:
    """Tests for the read-only Visitor."""

    def test_preorder_with_nesting(self):
        """
        Outer declarations are visited before the ones nested in their
        initializer, and left after them.
        """
        tree = parse("fn f() { let a = { let b = 1; b }; let c = 2; }")
        visitor = RecordingVisitor()
        visitor.walk(tree)

        assert visitor.events == [
            "visit a",
            "visit b",
            "leave b",
            "leave a",
            "visit c",
            "leave c",
        ]

    def test_returning_false_skips_children(self):
        """
        visit_<type> returning False prevents descent into that node.
        """

        class SkipFunctions(RecordingVisitor):
            def visit_function_item(self, node):
                return self.text(node.child_by_field_name("name")) != "skipped"

        tree = parse("fn skipped() { let a = 1; }\nfn kept() { let b = 2; }")
        visitor = SkipFunctions()
        visitor.walk(tree)

        assert visitor.events == ["visit b", "leave b"]

    def test_deep_nesting_does_not_recurse(self):
        """
        Deeply nested blocks are walked without hitting the recursion limit.
        """
        depth = 600
        code = "fn f() { " + "{ " * depth + "let x: i32 = 1;" + " }" * depth + " }"
        visitor = RecordingVisitor()
        visitor.walk(parse(code))

        assert visitor.events == ["visit x", "leave x"]


class UppercaseIdentifiers(Transformer):
    """Uppercases every identifier."""

    def leave_identifier(self, node):
        return self.text(node).upper()


class TestTransformer:
    """Tests for the rewriting Transformer."""

    def test_transform_splices_replacements(self):
        """
        Replacements are spliced into the source; the rest is untouched.
        """
        tree = parse("fn f() { let abc = 1;  // note\n}")
        new_tree = UppercaseIdentifiers().transform(tree)

        assert new_tree.unparse() == "fn F() { let ABC = 1;  // note\n}"

    def test_transform_without_changes_returns_same_tree(self):
        """
        A transformer that changes nothing returns the input tree.
        """
        tree = parse("fn f() {}")

        class NoOp(Transformer):
            pass

        assert NoOp().transform(tree) is tree

    def test_outer_replacement_discards_inner(self):
        """
        Replacing a node drops replacements recorded inside it.
        """

        class ReplaceLet(UppercaseIdentifiers):
            def leave_let_declaration(self, node):
                return "let replaced = 0;"

        tree = parse("fn f() { let abc = 1; }")
        new_tree = ReplaceLet().transform(tree)

        assert new_tree.unparse() == "fn F() { let replaced = 0; }"
