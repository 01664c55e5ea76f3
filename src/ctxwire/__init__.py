from ctxwire._internal.binding import BindingState
from ctxwire.context import (
    MISSING,
    Context,
    PartialContext,
    create_context,
    declare_context,
    get_context,
    is_context,
)
from ctxwire.exceptions import (
    CtxWireEmptyContextWriteError,
    CtxWireError,
    CtxWireInvalidProvideEntryError,
    CtxWireMissingAnnotationError,
    CtxWireRegistryFrozenError,
    CtxWireUnboundContextError,
    CtxWireUnresolvableSymbolError,
    UnboundReason,
)
from ctxwire.injection import InjectedField, inject
from ctxwire.keys import DependencyKey, KeyKind
from ctxwire.markers import Injected
from ctxwire.registration_decorators import provide, provide_instance, provide_raw_instance
from ctxwire.registry import Registry, default_registry

__all__ = [
    "MISSING",
    "BindingState",
    "Context",
    "CtxWireEmptyContextWriteError",
    "CtxWireError",
    "CtxWireInvalidProvideEntryError",
    "CtxWireMissingAnnotationError",
    "CtxWireRegistryFrozenError",
    "CtxWireUnboundContextError",
    "CtxWireUnresolvableSymbolError",
    "DependencyKey",
    "Injected",
    "InjectedField",
    "KeyKind",
    "PartialContext",
    "Registry",
    "UnboundReason",
    "create_context",
    "declare_context",
    "default_registry",
    "get_context",
    "inject",
    "is_context",
    "provide",
    "provide_instance",
    "provide_raw_instance",
]
