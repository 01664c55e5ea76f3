from __future__ import annotations

from enum import Enum
from typing import Any


class UnboundReason(str, Enum):
    """Why an injected field could not find a context to resolve against."""

    CONSTRUCTING = "constructing"
    """The instance is still inside ``Context.instantiate`` and its binding is not complete."""

    NEVER_BOUND = "never_bound"
    """The instance was never bound and its class declares no context."""


class CtxWireError(Exception):
    """Represent a base class for all ctxwire-specific failures.

    Catch this type when you want to handle any ctxwire error path without
    matching each concrete exception class individually.
    """


class CtxWireUnboundContextError(CtxWireError):
    """Signal a read of an injected field on an instance without a usable context.

    Raised by ``inject()`` fields on first read. ``reason`` tells the two
    causes apart:

    - ``UnboundReason.CONSTRUCTING``: the field was read from the constructor
      of an instance built by ``Context.instantiate``. The binding is completed
      only after ``__init__`` returns.
    - ``UnboundReason.NEVER_BOUND``: the instance was created outside of any
      context and its class has no ``@declare_context`` declaration.

    Typical fixes include moving the read out of ``__init__``, creating the
    instance through ``Context.instantiate``/``Context.bind``, or decorating the
    class with ``@declare_context()``.
    """

    def __init__(self, *, owner: type[Any], field_name: str, reason: UnboundReason) -> None:
        self.owner = owner
        self.field_name = field_name
        self.reason = reason
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        field = f"{self.owner.__qualname__}.{self.field_name}"
        if self.reason is UnboundReason.CONSTRUCTING:
            return (
                f"Injected field '{field}' was read before context binding completed. "
                f"It was possibly read in the constructor of {self.owner.__qualname__}; "
                "injected fields become available once the instance is fully constructed."
            )
        return (
            f"Injected field '{field}' was read on an instance that has no context. "
            f"{self.owner.__qualname__} was never associated with a context: create it with "
            "Context.instantiate, bind it with Context.bind, provide it to create_context, "
            "or decorate the class with @declare_context()."
        )


class CtxWireUnresolvableSymbolError(CtxWireError):
    """Signal that a symbolic dependency key has no instance and cannot be constructed.

    Symbolic keys (strings, sentinels, ``Annotated`` aliases) need a ``provide``
    entry, an instance registration, or a type registration.
    """

    def __init__(
        self,
        *,
        key: Any,
        owner: type[Any] | None = None,
        field_name: str | None = None,
    ) -> None:
        self.key = key
        self.owner = owner
        self.field_name = field_name
        location = ""
        if owner is not None and field_name is not None:
            location = f" for injected field '{owner.__qualname__}.{field_name}'"
        super().__init__(
            f"Cannot resolve symbolic key {key!r}{location}. Symbolic keys cannot be "
            "constructed; provide an instance for the key in the context or register "
            "a type or instance for it.",
        )


class CtxWireEmptyContextWriteError(CtxWireError):
    """Signal a write into a context that owns no partial contexts.

    Contexts built by ctxwire always own at least one partial, so this points
    at direct manipulation of ``Context`` internals or a defect in ctxwire.
    """

    def __init__(self, *, key: Any) -> None:
        self.key = key
        super().__init__(
            f"Failed to set an instance for {key!r} because no partial contexts are bound "
            "to the context. Unless you are manipulating the context directly, this is a bug "
            "in ctxwire.",
        )


class CtxWireInvalidProvideEntryError(CtxWireError):
    """Signal a malformed entry in a ``provide`` list.

    Entries are either bare instances or ``(key, instance)`` pairs.
    """


class CtxWireRegistryFrozenError(CtxWireError):
    """Signal a registration attempt on a frozen ``Registry``.

    Registries are populated during application startup and frozen before
    resolution starts. Use ``Registry.clear()`` to reset one in tests.
    """


class CtxWireMissingAnnotationError(CtxWireError):
    """Signal an ``inject()`` field that has neither an explicit key nor an annotation."""
