from __future__ import annotations

from collections.abc import Callable
from typing import Any, Literal, TypeVar, overload

from ctxwire.registry import Registry, default_registry

T = TypeVar("T")
C = TypeVar("C", bound=type[Any])


def _target_registry(registry: Registry | None) -> Registry:
    return registry if registry is not None else default_registry


@overload
def provide(
    concrete_type: C,
    *,
    key: Any | Literal["infer"] = "infer",
    registry: Registry | None = None,
) -> C: ...


@overload
def provide(
    concrete_type: Literal["from_decorator"] = "from_decorator",
    *,
    key: Any | Literal["infer"] = "infer",
    registry: Registry | None = None,
) -> Callable[[C], C]: ...


def provide(
    concrete_type: C | Literal["from_decorator"] = "from_decorator",
    *,
    key: Any | Literal["infer"] = "infer",
    registry: Registry | None = None,
) -> C | Callable[[C], C]:
    """Register a class in the type registry.

    Every context that resolves ``key`` without a local entry constructs its
    own instance of the class, bound to that context.

    Args:
        concrete_type: Class to register, or ``"from_decorator"`` to use the
            decorator form.
        key: Dependency key exposed by the registration. ``"infer"`` uses the
            class itself.
        registry: Target registry. Defaults to ``default_registry``.

    Returns:
        The class in direct form, or a decorator callable in decorator form.

    Raises:
        CtxWireRegistryFrozenError: If the registry is frozen.

    Examples:
        .. code-block:: python

            @provide(key=Repository)
            class SqlRepository(Repository): ...


            provide(Clock)

    """
    if concrete_type == "from_decorator":

        def decorator(decorated_concrete: C) -> C:
            provide(decorated_concrete, key=key, registry=registry)
            return decorated_concrete

        return decorator

    normalized_key = concrete_type if key == "infer" else key
    _target_registry(registry).add_type(normalized_key, concrete_type)
    return concrete_type


@overload
def provide_instance(
    concrete_type: type[T],
    *,
    key: Any | Literal["infer"] = "infer",
    registry: Registry | None = None,
) -> T: ...


@overload
def provide_instance(
    concrete_type: Literal["from_decorator"] = "from_decorator",
    *,
    key: Any | Literal["infer"] = "infer",
    registry: Registry | None = None,
) -> Callable[[C], C]: ...


def provide_instance(
    concrete_type: type[T] | Literal["from_decorator"] = "from_decorator",
    *,
    key: Any | Literal["infer"] = "infer",
    registry: Registry | None = None,
) -> T | Callable[[C], C]:
    """Construct a class now and register the instance as a process-wide singleton.

    The singleton is shared by every context and is never bound to any of
    them, so reading its own injected fields raises
    ``CtxWireUnboundContextError``. Use it for context-free shared resources
    and ``provide`` for anything that needs its caller's context.

    Args:
        concrete_type: Class to construct with no arguments, or
            ``"from_decorator"`` to use the decorator form.
        key: Dependency key exposed by the registration. ``"infer"`` uses the
            class itself.
        registry: Target registry. Defaults to ``default_registry``.

    Returns:
        The constructed instance in direct form. The decorator form returns
        the decorated class.

    Raises:
        CtxWireRegistryFrozenError: If the registry is frozen.

    """
    if concrete_type == "from_decorator":

        def decorator(decorated_concrete: C) -> C:
            provide_instance(decorated_concrete, key=key, registry=registry)
            return decorated_concrete

        return decorator

    normalized_key = concrete_type if key == "infer" else key
    return _target_registry(registry).construct_instance(normalized_key, concrete_type)


def provide_raw_instance(
    instance: T,
    *,
    key: Any | Literal["infer"] = "infer",
    registry: Registry | None = None,
) -> T:
    """Register a pre-built instance as a process-wide singleton.

    Args:
        instance: Instance to share between every context.
        key: Dependency key. ``"infer"`` uses ``type(instance)``.
        registry: Target registry. Defaults to ``default_registry``.

    Returns:
        ``instance``.

    Raises:
        CtxWireRegistryFrozenError: If the registry is frozen.

    """
    normalized_key = type(instance) if key == "infer" else key
    _target_registry(registry).add_instance(normalized_key, instance)
    return instance
