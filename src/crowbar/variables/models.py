"""Data models for discovered variables.

This module defines the structures produced by variable discovery and
consumed by value injection:
- SemanticType - the closed set of editable value kinds
- DeclarationSite - where a declaration sits in the source bytes
- DiscoveredVariable - one typed ``let`` binding and its current value
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from crowbar.core.results import ErrorResult, Result

# Tagged by DiscoveredVariable.semantic_type; None means "unset"
Value = Union[int, float, bool, str, None]


class SemanticType(Enum):
    """Kind of value a declared Rust type can hold."""

    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    TEXT = "text"
    UNSUPPORTED = "unsupported"

    @property
    def default(self) -> Value:
        """Value used when the initializer is not a recognized literal."""
        return _DEFAULTS[self]

    @property
    def editable(self) -> bool:
        return self is not SemanticType.UNSUPPORTED


_DEFAULTS: dict[SemanticType, Value] = {
    SemanticType.INTEGER: 0,
    SemanticType.FLOAT: 0.0,
    SemanticType.BOOLEAN: False,
    SemanticType.TEXT: "",
    SemanticType.UNSUPPORTED: None,
}


@dataclass(frozen=True)
class DeclarationSite:
    """Location of a ``let`` declaration in the source it was discovered in.

    Attributes
    ----------
    start : int
        Byte offset of the ``let`` keyword.
    prefix : bytes
        Source bytes from ``let`` up to the initializer (or to the end of
        the declaration when there is none).
    value_start : int | None
        Byte offset where the initializer expression starts.
    value_end : int | None
        Byte offset just past the initializer expression.
    initializer : bytes | None
        Source bytes of the initializer expression.
    line : int
        1-indexed line of the ``let`` keyword.
    """

    start: int
    prefix: bytes
    value_start: int | None = None
    value_end: int | None = None
    initializer: bytes | None = None
    line: int = 1

    @property
    def has_initializer(self) -> bool:
        return self.value_start is not None


@dataclass
class DiscoveredVariable:
    """A typed local variable found in the source.

    Discovery creates these fresh on every pass. Callers may edit ``value``
    (directly or through :meth:`assign`) before handing the list to
    :func:`crowbar.variables.injector.inject`.

    Parameters
    ----------
    name : str
        Identifier of the binding.
    semantic_type : SemanticType
        Classification of the declared type.
    declared_type : str
        The type annotation as written, with whitespace normalized
        (e.g. ``"i32"``, ``"String"``, ``"&'static str"``).
    value : int | float | bool | str | None
        Current value; ``None`` means unset and is never injected.
    mutable : bool
        Whether the binding was declared ``let mut``.
    has_literal : bool
        Whether ``value`` was read from a literal initializer, as opposed
        to being the type's default.
    site : DeclarationSite | None
        Where the declaration was found.

    Examples
    --------
    >>> variables = discover(parse('fn main() { let n: u8 = 7; }'))
    >>> variables[0].name, variables[0].value
    ('n', 7)
    >>> variables[0].assign("300").success
    False
    >>> variables[0].assign("42").success
    True
    >>> variables[0].is_modified
    True
    """

    name: str
    semantic_type: SemanticType
    declared_type: str
    value: Value = None
    mutable: bool = False
    has_literal: bool = False
    site: DeclarationSite | None = None
    initial_value: Value = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.initial_value = self.value

    @property
    def is_modified(self) -> bool:
        """True if ``value`` differs from what discovery found."""
        return type(self.value) is not type(self.initial_value) or self.value != self.initial_value

    @property
    def is_owned_text(self) -> bool:
        """True for owned ``String`` declarations (as opposed to ``&str``)."""
        from crowbar.variables.types import is_owned_text_type

        return self.semantic_type is SemanticType.TEXT and is_owned_text_type(self.declared_type)

    def assign(self, value: object) -> Result:
        """Set a new value, converting and validating it for the declared type.

        Strings are converted to the declared kind, so raw text from an input
        field can be passed straight through. ``None`` unsets the variable.

        Parameters
        ----------
        value : object
            The new value.

        Returns
        -------
        Result
            Success with the stored value in ``data``, or ErrorResult if the
            value does not fit the declared type.
        """
        from crowbar.variables.types import coerce_value

        try:
            self.value = coerce_value(self.semantic_type, self.declared_type, value)
        except (TypeError, ValueError) as e:
            return ErrorResult(
                message=f"Cannot assign {value!r} to {self.name}: {self.declared_type}: {e}",
                operation="assign",
                exception=e,
            )
        return Result(success=True, message=f"Set {self.name} to {self.value!r}", data=self.value)

    def reset(self) -> None:
        """Restore the value found by discovery."""
        self.value = self.initial_value
