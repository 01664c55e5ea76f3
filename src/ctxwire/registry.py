from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any, TypeVar

from ctxwire.exceptions import CtxWireRegistryFrozenError
from ctxwire.keys import DependencyKey

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Registry:
    """Process-wide fallback store consulted when a key is absent from a context chain.

    A registry holds two mappings:

    - the type registry (key -> class). Each context that resolves the key
      constructs its own instance of the class, bound to that context.
    - the instance registry (key -> instance). The same instance is returned to
      every context and is never bound to any of them.

    Registries are populated during application startup. Call ``freeze`` once
    wiring is complete so late registrations fail loudly instead of racing
    with resolution.

    Examples:
        .. code-block:: python

            registry = Registry()
            registry.add_type(Repository, SqlRepository)
            registry.construct_instance(Clock)
            registry.freeze()

            context = create_context(registry=registry)

    """

    def __init__(self) -> None:
        self._types: dict[DependencyKey, type[Any]] = {}
        self._instances: dict[DependencyKey, Any] = {}
        self._frozen = False
        self._lock = threading.RLock()

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Reject any further registration on this registry."""
        with self._lock:
            self._frozen = True
        logger.info(
            "Registry frozen with %d type(s) and %d instance(s)",
            len(self._types),
            len(self._instances),
        )

    def clear(self) -> None:
        """Drop every registration and unfreeze the registry."""
        with self._lock:
            self._types.clear()
            self._instances.clear()
            self._frozen = False

    def add_type(self, key: Any, concrete_type: type[Any]) -> None:
        """Register a class constructed per resolving context for ``key``.

        Args:
            key: Dependency key, either a class or a symbolic token.
            concrete_type: Class instantiated by the resolving context.

        Raises:
            CtxWireRegistryFrozenError: If the registry is frozen.

        """
        dependency_key = DependencyKey.of(key)
        with self._lock:
            self._ensure_mutable(dependency_key)
            self._types[dependency_key] = concrete_type
        logger.debug("Registered type %s for %r", concrete_type.__qualname__, dependency_key)

    def add_instance(self, key: Any, instance: Any) -> None:
        """Register a process-wide singleton for ``key``.

        Raises:
            CtxWireRegistryFrozenError: If the registry is frozen.

        """
        dependency_key = DependencyKey.of(key)
        with self._lock:
            self._ensure_mutable(dependency_key)
            self._instances[dependency_key] = instance
        logger.debug("Registered instance of %s for %r", type(instance).__qualname__, dependency_key)

    def construct_instance(self, key: Any, concrete_type: type[T] | None = None) -> T:
        """Construct ``concrete_type`` now and register the result as a singleton.

        The instance is constructed with no arguments and is not bound to any
        context, so reading its own injected fields raises
        ``CtxWireUnboundContextError``.

        Args:
            key: Dependency key. Also the class to construct when
                ``concrete_type`` is omitted.
            concrete_type: Class to construct.

        Returns:
            The constructed instance.

        """
        target = concrete_type if concrete_type is not None else key
        self._ensure_mutable(DependencyKey.of(key))
        instance = target()
        self.add_instance(key, instance)
        return instance

    def get_or_create_instance(self, key: Any, factory: Callable[[], T]) -> T:
        """Return the singleton for ``key``, creating it with ``factory`` on first use.

        Lazily cached singletons are not registrations, so this works on a
        frozen registry.
        """
        dependency_key = DependencyKey.of(key)
        with self._lock:
            if dependency_key not in self._instances:
                self._instances[dependency_key] = factory()
                logger.debug("Created lazy singleton for %r", dependency_key)
            return self._instances[dependency_key]

    def has_type(self, key: Any) -> bool:
        return DependencyKey.of(key) in self._types

    def has_instance(self, key: Any) -> bool:
        return DependencyKey.of(key) in self._instances

    def get_type(self, key: Any) -> type[Any] | None:
        return self._types.get(DependencyKey.of(key))

    def get_instance(self, key: Any) -> Any | None:
        return self._instances.get(DependencyKey.of(key))

    def _ensure_mutable(self, key: DependencyKey) -> None:
        if self._frozen:
            msg = f"Cannot register {key!r}: the registry is frozen."
            raise CtxWireRegistryFrozenError(msg)

    def __repr__(self) -> str:
        return (
            f"Registry(types={len(self._types)}, instances={len(self._instances)}, "
            f"frozen={self._frozen})"
        )


default_registry = Registry()
"""Registry used by contexts and registration helpers when none is passed."""
