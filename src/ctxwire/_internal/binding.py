from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from ctxwire.exceptions import CtxWireUnboundContextError, UnboundReason

if TYPE_CHECKING:
    from ctxwire.context import Context

BINDING_ATTR = "__ctxwire_binding__"
DECLARED_CONTEXT_ATTR = "__ctxwire_context__"


class BindingState(str, Enum):
    """Lifecycle of the binding between an instance and its context."""

    CONSTRUCTING = "constructing"
    """``Context.instantiate`` is running the instance constructor."""

    BOUND = "bound"
    """The instance resolves its injected fields through ``Binding.context``."""


@dataclass(slots=True)
class Binding:
    """Binding record stored in the instance ``__dict__``."""

    context: Context
    state: BindingState
    construction_scope: Context | None = None


def read_binding(instance: object) -> Binding | None:
    namespace = getattr(instance, "__dict__", None)
    if not isinstance(namespace, dict):
        return None
    return namespace.get(BINDING_ATTR)


def write_binding(instance: object, binding: Binding) -> None:
    # bypass __setattr__ so frozen dataclasses and custom setters can be bound
    instance.__dict__[BINDING_ATTR] = binding


def clear_binding(instance: object) -> None:
    instance.__dict__.pop(BINDING_ATTR, None)


def declared_context(cls: type[Any]) -> Context | None:
    """Return the context declared on ``cls`` or inherited from a base class."""
    return getattr(cls, DECLARED_CONTEXT_ATTR, None)


def owns_declared_context(cls: type[Any]) -> bool:
    return DECLARED_CONTEXT_ATTR in cls.__dict__


def set_declared_context(cls: type[Any], context: Context) -> None:
    setattr(cls, DECLARED_CONTEXT_ATTR, context)


def bound_context(instance: object) -> Context | None:
    """Return the context associated with ``instance`` without raising.

    Instances under construction report the context building them (or the
    construction scope of classes declaring their own context).
    """
    binding = read_binding(instance)
    if binding is not None:
        if binding.state is BindingState.CONSTRUCTING and binding.construction_scope is not None:
            return binding.construction_scope
        return binding.context
    return declared_context(type(instance))


def resolving_context(instance: object, *, field_name: str) -> Context:
    """Return the context an injected field read on ``instance`` resolves against.

    Raises:
        CtxWireUnboundContextError: If the instance is still being constructed by
            ``Context.instantiate`` without a construction scope, or if it has no
            binding and its class declares no context.

    """
    binding = read_binding(instance)
    if binding is not None:
        if binding.state is BindingState.BOUND:
            return binding.context
        if binding.construction_scope is not None:
            return binding.construction_scope
        raise CtxWireUnboundContextError(
            owner=type(instance),
            field_name=field_name,
            reason=UnboundReason.CONSTRUCTING,
        )

    declared = declared_context(type(instance))
    if declared is not None:
        return declared

    raise CtxWireUnboundContextError(
        owner=type(instance),
        field_name=field_name,
        reason=UnboundReason.NEVER_BOUND,
    )
