from __future__ import annotations

from enum import Enum
from typing import Any

from ctxwire._internal.type_checks import is_runtime_class


class KeyKind(str, Enum):
    """Tag of a ``DependencyKey``."""

    TYPE = "type"
    """A runtime class. Compared by identity and constructible."""

    SYMBOL = "symbol"
    """Any other hashable token. Compared by value and never constructible."""


class DependencyKey:
    """Identity under which an instance is stored in contexts and registries.

    Raw keys are normalized with ``DependencyKey.of``: runtime classes become
    ``KeyKind.TYPE`` keys, anything else becomes a ``KeyKind.SYMBOL`` key.
    A type key never equals a symbol key, even when their values compare equal.

    Examples:
        .. code-block:: python

            DependencyKey.of(Database) == DependencyKey.of(Database)  # True
            DependencyKey.of("db") == DependencyKey.of("db")  # True
            DependencyKey.of("db").is_constructible  # False

    """

    __slots__ = ("_hash", "kind", "value")

    def __init__(self, kind: KeyKind, value: Any) -> None:
        self.kind = kind
        self.value = value
        if kind is KeyKind.TYPE:
            self._hash = hash((kind, id(value)))
        else:
            self._hash = hash((kind, value))

    @classmethod
    def of(cls, value: Any) -> DependencyKey:
        """Normalize a raw key, returning existing keys unchanged."""
        if isinstance(value, DependencyKey):
            return value
        if is_runtime_class(value):
            return cls(KeyKind.TYPE, value)
        return cls(KeyKind.SYMBOL, value)

    @property
    def is_constructible(self) -> bool:
        return self.kind is KeyKind.TYPE

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DependencyKey):
            return NotImplemented
        if self.kind is not other.kind:
            return False
        if self.kind is KeyKind.TYPE:
            return self.value is other.value
        return bool(self.value == other.value)

    def __hash__(self) -> int:
        return self._hash

    def __repr__(self) -> str:
        if self.kind is KeyKind.TYPE:
            return f"DependencyKey(type={self.value.__qualname__})"
        return f"DependencyKey(symbol={self.value!r})"

