"""
Typed local variables: discovery, value model and injection.

Example
-------
>>> from crowbar.syntax import parse
>>> from crowbar.variables import discover, inject
>>>
>>> code = "fn main() { let speed: f64 = 1.5; }"
>>> variables = discover(parse(code))
>>> result = variables[0].assign("2.25")
>>> inject(code, variables)
'fn main() { let speed: f64 = 2.25; }'
"""
from __future__ import annotations

from .discovery import VariableDiscoveryVisitor, discover
from .injector import inject
from .literals import render_literal
from .models import DeclarationSite, DiscoveredVariable, SemanticType
from .types import classify_type, coerce_value

__all__ = [
    "DeclarationSite",
    "DiscoveredVariable",
    "SemanticType",
    "VariableDiscoveryVisitor",
    "classify_type",
    "coerce_value",
    "discover",
    "inject",
    "render_literal",
]
