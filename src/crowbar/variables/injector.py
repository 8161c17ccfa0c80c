"""Writing edited variable values back into source text.

Injection works on the text, never on a re-parsed tree. Variables are
processed in discovery order with a cursor that only moves forward, so a
later variable can never land inside text an earlier one rewrote.

Each variable is located in one of two ways:

1. By the byte offsets recorded at discovery, when the text at those
   offsets still holds the same declaration. Only the initializer
   expression is replaced.
2. Otherwise by searching forward for ``let [mut] name: Type =`` and
   replacing everything up to the statement's ``;``.

A variable that cannot be found is skipped. A declaration that is found but
has no terminating ``;`` aborts the whole injection.
"""
from __future__ import annotations

import logging
import re
from typing import Iterable

from crowbar.exceptions import MalformedDeclarationError
from crowbar.variables.literals import render_literal
from crowbar.variables.models import DiscoveredVariable

logger = logging.getLogger(__name__)

_TYPE_TOKEN = re.compile(r"'?[A-Za-z_][A-Za-z0-9_]*|::|\S")

_STRING = re.compile(rb'b?"(?:\\.|[^"\\])*"', re.DOTALL)
_RAW_STRING = re.compile(rb'[bc]?r(#*)".*?"\1', re.DOTALL)
_CHAR = re.compile(rb"b?'(?:\\[^']+|[^'\\\x80-\xff]|[\xc0-\xf7][\x80-\xbf]{1,3})'")
_LINE_COMMENT = re.compile(rb"//[^\n]*")
_BLOCK_COMMENT = re.compile(rb"/\*.*?\*/", re.DOTALL)


def inject(
    original_text: str,
    variables: Iterable[DiscoveredVariable],
    *,
    only_modified: bool = True,
    owned_text_constructor: str = "to_string",
) -> str:
    """Replace the initializers of edited variables.

    Parameters
    ----------
    original_text : str
        Source the variables were discovered in (or an edited copy of it).
    variables : Iterable[DiscoveredVariable]
        Variables in discovery order.
    only_modified : bool
        If True, variables whose value is unchanged since discovery are left
        alone. If False, every settable variable is rewritten, which
        normalizes literals such as ``1_000`` to ``1000`` and replaces
        computed initializers with the default value.
    owned_text_constructor : str
        How owned ``String`` values are written; see
        :func:`crowbar.variables.literals.render_literal`.

    Returns
    -------
    str
        The new source text. Everything outside the replaced spans is
        byte-identical to ``original_text``.

    Raises
    ------
    MalformedDeclarationError
        If a declaration located by search has no terminating ``;``.

    Examples
    --------
    >>> code = 'fn main() { let s: String = String::from("hi"); }'
    >>> variables = discover(parse(code))
    >>> variables[0].value = "bye"
    >>> inject(code, variables)
    'fn main() { let s: String = "bye".to_string(); }'
    """
    source = original_text.encode("utf-8")
    pieces: list[bytes] = []
    cursor = 0

    for variable in variables:
        if not _should_inject(variable, only_modified):
            continue

        literal = render_literal(variable, owned_text_constructor).encode("utf-8")
        span = _locate_by_site(source, variable, cursor)
        if span is not None:
            start, end = span
            replacement = literal
        else:
            span = _locate_by_search(source, variable, cursor)
            if span is None:
                logger.debug("Declaration of %s: %s not found; skipped", variable.name, variable.declared_type)
                continue
            start, end = span
            replacement = literal + b";"

        logger.debug("Injecting %s = %s", variable.name, literal.decode("utf-8"))
        pieces.append(source[cursor:start])
        pieces.append(replacement)
        cursor = end

    pieces.append(source[cursor:])
    return b"".join(pieces).decode("utf-8")


def _should_inject(variable: DiscoveredVariable, only_modified: bool) -> bool:
    if not variable.semantic_type.editable or variable.value is None:
        return False
    if variable.site is not None and not variable.site.has_initializer:
        return False
    if only_modified and not variable.is_modified:
        return False
    return True


def _locate_by_site(source: bytes, variable: DiscoveredVariable, cursor: int) -> tuple[int, int] | None:
    """Initializer span from the recorded site, if the text still matches it."""
    site = variable.site
    if site is None or site.value_start is None or site.value_end is None or site.start < cursor:
        return None
    if source[site.start : site.value_start] != site.prefix:
        return None
    if source[site.value_start : site.value_end] != site.initializer:
        return None
    return site.value_start, site.value_end


def declaration_pattern(name: str, declared_type: str) -> re.Pattern[bytes]:
    """Regex for ``let [mut] name: Type =``, tolerant of whitespace.

    Examples
    --------
    >>> bool(declaration_pattern("s", "&'static str").search(b"let mut s : & 'static str = x;"))
    True
    """
    type_pattern = rb"\s*".join(re.escape(token.encode("utf-8")) for token in _TYPE_TOKEN.findall(declared_type))
    return re.compile(
        rb"\blet\s+(?:mut\s+)?"
        + re.escape(name.encode("utf-8"))
        + rb"\s*:\s*"
        + type_pattern
        + rb"\s*=(?![=>])\s*"
    )


def _locate_by_search(source: bytes, variable: DiscoveredVariable, cursor: int) -> tuple[int, int] | None:
    """Span from the end of the declaration prefix through its ``;``."""
    match = declaration_pattern(variable.name, variable.declared_type).search(source, cursor)
    if match is None:
        return None
    delimiter = find_statement_end(source, match.end())
    if delimiter is None:
        raise MalformedDeclarationError(variable.name, match.start())
    return match.end(), delimiter + 1


def find_statement_end(source: bytes, start: int) -> int | None:
    """Offset of the first top-level ``;`` at or after ``start``.

    Strings, raw strings, character literals, comments and anything inside
    brackets are skipped. Returns None if the statement never ends.
    """
    depth = 0
    i = start
    length = len(source)
    while i < length:
        ch = source[i : i + 1]
        if ch in (b'"', b"'", b"/", b"b", b"r", b"c") and not _continues_identifier(source, i):
            skipped = _skip_token(source, i)
            if skipped is not None:
                i = skipped
                continue
        if ch in (b"(", b"[", b"{"):
            depth += 1
        elif ch in (b")", b"]", b"}"):
            depth -= 1
            if depth < 0:
                return None
        elif ch == b";" and depth == 0:
            return i
        i += 1
    return None


def _continues_identifier(source: bytes, i: int) -> bool:
    if i == 0 or source[i : i + 1] in (b'"', b"'", b"/"):
        return False
    prev = source[i - 1 : i]
    return prev.isalnum() or prev == b"_"


def _skip_token(source: bytes, i: int) -> int | None:
    for pattern in (_STRING, _RAW_STRING, _CHAR, _LINE_COMMENT, _BLOCK_COMMENT):
        match = pattern.match(source, i)
        if match is not None:
            return match.end()
    return None
