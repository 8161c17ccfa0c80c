"""
Tests for crowbar.core.diff - unified diffs of buffer rewrites.
"""
from __future__ import annotations

from crowbar.core.diff import generate_diff


class TestGenerateDiff:
    """Tests for generate_diff()."""

    def test_identical_is_empty(self):
        assert generate_diff("fn main() {}\n", "fn main() {}\n") == ""

    def test_headers_use_name(self):
        diff = generate_diff("let a: i32 = 1;\n", "let a: i32 = 2;\n", name="lib.rs")

        assert diff.startswith("--- a/lib.rs\n+++ b/lib.rs\n")
        assert "-let a: i32 = 1;\n" in diff
        assert "+let a: i32 = 2;\n" in diff

    def test_missing_trailing_newline(self):
        """
        The last line is terminated so every diff line ends in a newline.
        """
        diff = generate_diff("a\nb", "a\nc")

        assert all(line.endswith("\n") for line in diff.splitlines(keepends=True))
        assert "-b\n+c\n" in diff

    def test_context_lines(self):
        original = "".join(f"line {i}\n" for i in range(20))
        modified = original.replace("line 10\n", "line ten\n")

        narrow = generate_diff(original, modified, context_lines=1)

        assert "line 8\n" not in narrow
        assert " line 9\n" in narrow
        assert " line 11\n" in narrow
