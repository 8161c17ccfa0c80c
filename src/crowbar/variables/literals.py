"""Reading literal initializers and writing replacement literals.

Extraction understands:
- integer, float and boolean literals (with ``-`` negation for numbers)
- string and raw string literals
- owned-text constructors: ``String::from("..")``, ``"..".to_string()``,
  ``"..".to_owned()``

Rendering produces Rust source for an edited value.
"""
from __future__ import annotations

import math
import re
from typing import TYPE_CHECKING

from crowbar.variables.models import SemanticType, Value
from crowbar.variables.types import I64_RANGE

if TYPE_CHECKING:
    from tree_sitter import Node

    from crowbar.syntax.tree import SyntaxTree
    from crowbar.variables.models import DiscoveredVariable


_FROM_FUNCTIONS = frozenset({"String::from", "std::string::String::from", "alloc::string::String::from"})
_TO_OWNED_METHODS = frozenset({"to_string", "to_owned"})
_COMMENT_TYPES = frozenset({"line_comment", "block_comment"})

_INTEGER_SUFFIX = re.compile(r"(?:[iu](?:8|16|32|64|128|size))$")
_FLOAT_SUFFIX = re.compile(r"f(?:32|64)$")
_SUFFIXED_FLOAT = re.compile(r"[0-9][0-9_]*f(?:32|64)$")
_RAW_STRING = re.compile(r'^r(#*)"(.*)"\1$', re.DOTALL)
_ESCAPE = re.compile(r"""\\(?:u\{([0-9A-Fa-f_]{1,8})\}|x([0-7][0-9A-Fa-f])|\n\s*|(.))""", re.DOTALL)

_SIMPLE_ESCAPES = {"n": "\n", "r": "\r", "t": "\t", "\\": "\\", "0": "\0", "'": "'", '"': '"'}
_RENDER_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r", "\t": "\\t", "\0": "\\0"}


def extract_literal(node: Node, tree: SyntaxTree, semantic_type: SemanticType) -> tuple[bool, Value]:
    """Read a literal value from an initializer expression.

    Parameters
    ----------
    node : tree_sitter.Node
        The ``value`` field of a ``let_declaration``.
    tree : SyntaxTree
        Tree the node belongs to.
    semantic_type : SemanticType
        Classification of the declared type; only literals of the matching
        kind are accepted.

    Returns
    -------
    tuple[bool, Value]
        ``(True, value)`` if a literal was recognized, otherwise
        ``(False, None)``.
    """
    negate = False
    if node.type == "unary_expression" and semantic_type in (SemanticType.INTEGER, SemanticType.FLOAT):
        operator, operand = node.children[0], node.children[-1]
        if tree.node_text(operator) != "-":
            return False, None
        negate, node = True, operand

    text = tree.node_text(node)

    if semantic_type is SemanticType.INTEGER and node.type == "integer_literal":
        value = parse_integer_literal(text)
        if value is None:
            return False, None
        value = -value if negate else value
        low, high = I64_RANGE
        return (True, value) if low <= value <= high else (False, None)

    # tree-sitter reads `1f32` as an integer literal with a float suffix
    if semantic_type is SemanticType.FLOAT and (
        node.type == "float_literal" or (node.type == "integer_literal" and _SUFFIXED_FLOAT.match(text))
    ):
        value = parse_float_literal(text)
        if value is None:
            return False, None
        return True, -value if negate else value

    if semantic_type is SemanticType.BOOLEAN and node.type == "boolean_literal":
        return True, text == "true"

    if semantic_type is SemanticType.TEXT:
        literal = _owned_text_argument(node, tree)
        if literal is not None:
            node, text = literal, tree.node_text(literal)
        if node.type in ("string_literal", "raw_string_literal"):
            value = decode_string_literal(text)
            if value is not None:
                return True, value

    return False, None


def _owned_text_argument(node: Node, tree: SyntaxTree) -> Node | None:
    """Return the string literal wrapped by an owned-text constructor call."""
    if node.type != "call_expression":
        return None
    function = node.child_by_field_name("function")
    arguments = node.child_by_field_name("arguments")
    if function is None or arguments is None:
        return None
    args = [child for child in arguments.named_children if child.type not in _COMMENT_TYPES]

    if function.type == "scoped_identifier" and len(args) == 1:
        if re.sub(r"\s+", "", tree.node_text(function)) in _FROM_FUNCTIONS:
            return args[0]

    if function.type == "field_expression" and not args:
        receiver = function.child_by_field_name("value")
        method = function.child_by_field_name("field")
        if receiver is not None and method is not None and tree.node_text(method) in _TO_OWNED_METHODS:
            return receiver

    return None


def parse_integer_literal(text: str) -> int | None:
    """Parse a Rust integer literal.

    Examples
    --------
    >>> parse_integer_literal("1_000i64")
    1000
    >>> parse_integer_literal("0xff")
    255
    """
    digits = text.replace("_", "")
    lowered = digits.lower()
    for prefix, base in (("0x", 16), ("0o", 8), ("0b", 2)):
        if lowered.startswith(prefix):
            try:
                return int(_INTEGER_SUFFIX.sub("", digits[2:]), base)
            except ValueError:
                return None
    try:
        return int(_INTEGER_SUFFIX.sub("", digits), 10)
    except ValueError:
        return None


def parse_float_literal(text: str) -> float | None:
    """Parse a Rust float literal (``2.``, ``1e10``, ``3.5f32``)."""
    try:
        return float(_FLOAT_SUFFIX.sub("", text.replace("_", "")))
    except ValueError:
        return None


def decode_string_literal(text: str) -> str | None:
    """Decode a (raw) string literal to its value.

    Byte and C strings are not text values and give None.

    Examples
    --------
    >>> decode_string_literal(r'"tab\\there"')
    'tab\\there'
    >>> decode_string_literal('r#"say "hi""#')
    'say "hi"'
    """
    raw = _RAW_STRING.match(text)
    if raw is not None:
        return raw.group(2)
    if len(text) < 2 or not (text.startswith('"') and text.endswith('"')):
        return None
    return _ESCAPE.sub(_decode_escape, text[1:-1])


def _decode_escape(match: re.Match[str]) -> str:
    unicode, byte, simple = match.groups()
    if unicode is not None:
        return chr(int(unicode.replace("_", ""), 16))
    if byte is not None:
        return chr(int(byte, 16))
    if simple is None:
        # line continuation
        return ""
    return _SIMPLE_ESCAPES.get(simple, "\\" + simple)


def quote_string(value: str) -> str:
    """Render ``value`` as a quoted Rust string literal."""
    out = []
    for ch in value:
        if ch in _RENDER_ESCAPES:
            out.append(_RENDER_ESCAPES[ch])
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\u{{{ord(ch):x}}}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


def render_literal(variable: DiscoveredVariable, owned_text_constructor: str = "to_string") -> str:
    """Synthesize the initializer expression for a variable's current value.

    Parameters
    ----------
    variable : DiscoveredVariable
        Variable with a set value.
    owned_text_constructor : str
        Wrapper for owned ``String`` declarations: ``"to_string"`` gives
        ``"..".to_string()``, ``"from"`` gives ``String::from("..")`` and
        ``"to_owned"`` gives ``"..".to_owned()``.

    Returns
    -------
    str
        Rust expression text, without the trailing ``;``.

    Raises
    ------
    ValueError
        If the variable is unset, unsupported, or the constructor style is
        unknown.
    """
    value = variable.value
    kind = variable.semantic_type
    if value is None or not kind.editable:
        raise ValueError(f"{variable.name} has no value to render")

    if kind is SemanticType.BOOLEAN:
        return "true" if value else "false"

    if kind is SemanticType.INTEGER:
        return str(int(value))

    if kind is SemanticType.FLOAT:
        number = float(value)
        if math.isnan(number):
            return f"{variable.declared_type}::NAN"
        if math.isinf(number):
            return f"{variable.declared_type}::{'INFINITY' if number > 0 else 'NEG_INFINITY'}"
        # repr always keeps a '.' or an exponent, so rustc reads a float
        return repr(number)

    quoted = quote_string(str(value))
    if not variable.is_owned_text:
        return quoted
    if owned_text_constructor == "to_string":
        return f"{quoted}.to_string()"
    if owned_text_constructor == "to_owned":
        return f"{quoted}.to_owned()"
    if owned_text_constructor == "from":
        return f"String::from({quoted})"
    raise ValueError(f"Unknown owned text constructor: {owned_text_constructor!r}")
