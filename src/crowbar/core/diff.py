"""Unified diffs shown for injections, renames and saves."""
from __future__ import annotations

import difflib


def generate_diff(
    original: str,
    modified: str,
    name: str = "main.rs",
    context_lines: int = 3,
) -> str:
    """Describe a rewrite of a Rust source buffer as a unified diff.

    Parameters
    ----------
    original : str
        Source before an injection or rename (or the file on disk, for
        ``save()``).
    modified : str
        Source after it.
    name : str
        Shown as ``a/<name>`` and ``b/<name>`` in the header.
    context_lines : int
        Unchanged lines kept around each hunk.

    Returns
    -------
    str
        The diff, or ``""`` when the two buffers are equal.

    Examples
    --------
    >>> print(generate_diff("let x: i32 = 1;\\n", "let x: i32 = 2;\\n"), end="")
    --- a/main.rs
    +++ b/main.rs
    @@ -1 +1 @@
    -let x: i32 = 1;
    +let x: i32 = 2;
    """
    if original == modified:
        return ""

    return "".join(
        difflib.unified_diff(
            _terminated_lines(original),
            _terminated_lines(modified),
            fromfile=f"a/{name}",
            tofile=f"b/{name}",
            n=context_lines,
        )
    )


def _terminated_lines(text: str) -> list[str]:
    # an unterminated last line would run into the next diff line
    lines = text.splitlines(keepends=True)
    if lines and not lines[-1].endswith("\n"):
        lines[-1] += "\n"
    return lines
