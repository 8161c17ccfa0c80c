"""Classification of Rust type annotations into semantic types."""
from __future__ import annotations

import math
import re
from typing import TYPE_CHECKING

from crowbar.variables.models import SemanticType, Value

if TYPE_CHECKING:
    from tree_sitter import Node

    from crowbar.syntax.tree import SyntaxTree


# Integer types whose whole range fits the i64 value model
INTEGER_RANGES: dict[str, tuple[int, int]] = {
    "i8": (-(2**7), 2**7 - 1),
    "i16": (-(2**15), 2**15 - 1),
    "i32": (-(2**31), 2**31 - 1),
    "i64": (-(2**63), 2**63 - 1),
    "isize": (-(2**63), 2**63 - 1),
    "u8": (0, 2**8 - 1),
    "u16": (0, 2**16 - 1),
    "u32": (0, 2**32 - 1),
}

FLOAT_TYPES = frozenset({"f32", "f64"})

OWNED_TEXT_TYPES = frozenset({"String", "std::string::String", "alloc::string::String"})

I64_RANGE = INTEGER_RANGES["i64"]

F32_MAX = 3.4028235e38

_WHITESPACE = re.compile(r"\s+")
_TIGHT = re.compile(r"\s*(::|&)\s*")


def normalize_type_text(text: str) -> str:
    """Collapse whitespace in a type annotation.

    Examples
    --------
    >>> normalize_type_text("std :: string :: String")
    'std::string::String'
    >>> normalize_type_text("& 'static   str")
    "&'static str"
    """
    return _TIGHT.sub(r"\1", _WHITESPACE.sub(" ", text.strip()))


def is_owned_text_type(declared_type: str) -> bool:
    return normalize_type_text(declared_type) in OWNED_TEXT_TYPES


def classify_type(node: Node, tree: SyntaxTree) -> SemanticType:
    """Map a type node from a ``let`` annotation to a SemanticType.

    Parameters
    ----------
    node : tree_sitter.Node
        The ``type`` field of a ``let_declaration``.
    tree : SyntaxTree
        Tree the node belongs to.

    Returns
    -------
    SemanticType
        UNSUPPORTED for anything outside the closed table.
    """
    if node.type == "primitive_type":
        name = tree.node_text(node)
        if name in INTEGER_RANGES:
            return SemanticType.INTEGER
        if name in FLOAT_TYPES:
            return SemanticType.FLOAT
        if name == "bool":
            return SemanticType.BOOLEAN
        return SemanticType.UNSUPPORTED

    if node.type in ("type_identifier", "scoped_type_identifier"):
        if normalize_type_text(tree.node_text(node)) in OWNED_TEXT_TYPES:
            return SemanticType.TEXT
        return SemanticType.UNSUPPORTED

    if node.type == "reference_type":
        # &str and &'a str, but not &mut str
        if any(child.type == "mutable_specifier" for child in node.children):
            return SemanticType.UNSUPPORTED
        inner = node.child_by_field_name("type")
        if inner is not None and inner.type == "primitive_type" and tree.node_text(inner) == "str":
            return SemanticType.TEXT

    return SemanticType.UNSUPPORTED


def coerce_value(semantic_type: SemanticType, declared_type: str, value: object) -> Value:
    """Convert ``value`` to the Python type backing ``semantic_type``.

    Raises
    ------
    TypeError
        If the value's kind cannot represent the declared type.
    ValueError
        If the value is malformed or out of range for the declared type.
    """
    if value is None:
        return None

    if semantic_type is SemanticType.INTEGER:
        if isinstance(value, bool):
            raise TypeError("expected an integer, got a boolean")
        if isinstance(value, str):
            value = int(value.strip().replace("_", ""), 10)
        elif isinstance(value, float):
            if not value.is_integer():
                raise ValueError("expected a whole number")
            value = int(value)
        elif not isinstance(value, int):
            raise TypeError(f"expected an integer, got {type(value).__name__}")
        low, high = INTEGER_RANGES.get(normalize_type_text(declared_type), I64_RANGE)
        if not low <= value <= high:
            raise ValueError(f"{value} is outside {low}..={high}")
        return value

    if semantic_type is SemanticType.FLOAT:
        if isinstance(value, bool):
            raise TypeError("expected a number, got a boolean")
        if isinstance(value, str):
            result = float(value.strip().replace("_", ""))
        elif isinstance(value, (int, float)):
            result = float(value)
        else:
            raise TypeError(f"expected a number, got {type(value).__name__}")
        if declared_type == "f32" and math.isfinite(result) and abs(result) > F32_MAX:
            raise ValueError(f"{value} overflows f32")
        return result

    if semantic_type is SemanticType.BOOLEAN:
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in ("true", "false"):
            return value.strip().lower() == "true"
        raise ValueError(f"expected true or false, got {value!r}")

    if semantic_type is SemanticType.TEXT:
        if isinstance(value, str):
            return value
        raise TypeError(f"expected text, got {type(value).__name__}")

    raise TypeError("type is not editable")
