from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping, MutableMapping
from enum import Enum
from typing import Any, Final, TypeAlias, TypeVar

from ctxwire._internal.binding import (
    DECLARED_CONTEXT_ATTR,
    Binding,
    BindingState,
    bound_context,
    clear_binding,
    declared_context,
    owns_declared_context,
    read_binding,
    set_declared_context,
    write_binding,
)
from ctxwire._internal.type_checks import is_bindable_instance
from ctxwire.exceptions import (
    CtxWireEmptyContextWriteError,
    CtxWireInvalidProvideEntryError,
    CtxWireUnresolvableSymbolError,
)
from ctxwire.integrations.pydantic_settings import is_pydantic_settings_subclass
from ctxwire.keys import DependencyKey
from ctxwire.registry import Registry, default_registry

logger = logging.getLogger(__name__)

T = TypeVar("T")
C = TypeVar("C", bound=type[Any])

Provide: TypeAlias = "Iterable[Any] | Mapping[Any, Any]"

_PAIR_LENGTH = 2


class _Missing(Enum):
    MISSING = "MISSING"

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Final = _Missing.MISSING
"""Sentinel for "no value given" where ``None`` is a valid value."""


class PartialContext(MutableMapping[Any, Any]):
    """One link of a context chain: an ordered mapping from dependency key to instance.

    Raw keys (classes or symbolic tokens) are normalized to ``DependencyKey`` on
    every access. Iteration yields the raw key values.
    """

    def __init__(self, entries: Mapping[Any, Any] | Iterable[tuple[Any, Any]] = ()) -> None:
        self._entries: dict[DependencyKey, Any] = {}
        items = entries.items() if isinstance(entries, Mapping) else entries
        for key, instance in items:
            self[key] = instance

    def __getitem__(self, key: Any) -> Any:
        return self._entries[DependencyKey.of(key)]

    def __setitem__(self, key: Any, instance: Any) -> None:
        self._entries[DependencyKey.of(key)] = instance

    def __delitem__(self, key: Any) -> None:
        del self._entries[DependencyKey.of(key)]

    def __contains__(self, key: object) -> bool:
        return DependencyKey.of(key) in self._entries

    def __iter__(self) -> Iterator[Any]:
        for key in self._entries:
            yield key.value

    def __len__(self) -> int:
        return len(self._entries)

    def copy(self) -> PartialContext:
        partial = PartialContext()
        partial._entries = dict(self._entries)
        return partial

    def __repr__(self) -> str:
        return f"PartialContext({list(self._entries)!r})"


class Context:
    """Ordered chain of partial contexts resolving dependencies with scope fallthrough.

    The first partial is the innermost scope: lookups scan partials front to
    back and writes always land in the first one. Keys missing from the chain
    fall back to the context's ``Registry``.

    Contexts are usually created with ``create_context`` or
    ``@declare_context`` rather than directly.

    Examples:
        .. code-block:: python

            context = create_context(provide=[Config(debug=True)])
            app = context.instantiate(Application)
            assert get_context(app) is context

    """

    def __init__(
        self,
        partials: Iterable[PartialContext] = (),
        *,
        registry: Registry | None = None,
    ) -> None:
        self._partials: list[PartialContext] = list(partials)
        self._registry = registry if registry is not None else default_registry

    @property
    def partials(self) -> tuple[PartialContext, ...]:
        return tuple(self._partials)

    @property
    def registry(self) -> Registry:
        return self._registry

    def get(self, key: Any, default: Any = None) -> Any:
        """Return the first instance stored for ``key`` in the chain, or ``default``.

        Never constructs anything.
        """
        for partial in self._partials:
            if key in partial:
                return partial[key]
        return default

    def set(self, key: Any, instance: Any) -> None:
        """Store ``instance`` for ``key`` in the innermost partial.

        Raises:
            CtxWireEmptyContextWriteError: If the context owns no partials.

        """
        if not self._partials:
            raise CtxWireEmptyContextWriteError(key=key)
        self._partials[0][key] = instance

    def has(self, key: Any) -> bool:
        return any(key in partial for partial in self._partials)

    def __contains__(self, key: object) -> bool:
        return self.has(key)

    def extend(self, other: Context) -> None:
        """Append the partials of ``other`` that are not already in this chain."""
        added = [
            partial
            for partial in other._partials
            if not any(partial is existing for existing in self._partials)
        ]
        self._partials.extend(added)
        if added:
            logger.debug("Extended %r with %d partial(s)", self, len(added))

    def instantiate(self, concrete_type: type[T]) -> T:
        """Return the instance cached for ``concrete_type``, constructing it on first use.

        A new instance is bound to this context and cached under
        ``concrete_type`` in the innermost partial. Its constructor runs while
        the binding is still in the ``CONSTRUCTING`` state, so reading one of
        its own injected fields from ``__init__`` raises
        ``CtxWireUnboundContextError``.

        When ``concrete_type`` declares its own context with
        ``@declare_context``, the instance is constructed and bound under a
        scope made of a fresh partial, the declared partials and this
        context's partials. Instances resolved through that scope are cached
        in the fresh partial, so the declaration on the class is left untouched
        and other outer contexts never see them.

        Args:
            concrete_type: Class to construct with no arguments.

        Returns:
            The cached or newly constructed instance.

        """
        for partial in self._partials:
            if concrete_type in partial:
                return partial[concrete_type]

        scope = self._construction_scope(concrete_type)
        instance = concrete_type.__new__(concrete_type)
        tracked = is_bindable_instance(instance) and read_binding(instance) is None
        if tracked:
            write_binding(
                instance,
                Binding(
                    context=self,
                    state=BindingState.CONSTRUCTING,
                    construction_scope=scope,
                ),
            )

        try:
            if isinstance(instance, concrete_type):
                type(instance).__init__(instance)
        finally:
            if tracked:
                clear_binding(instance)

        if tracked:
            bound_to = scope if scope is not None else self
            write_binding(instance, Binding(context=bound_to, state=BindingState.BOUND))
        else:
            self.bind(instance)

        self.set(concrete_type, instance)
        logger.debug("Instantiated %s in %r", concrete_type.__qualname__, self)
        return instance

    def bind(self, instance: T) -> T:
        """Associate an already constructed instance with this context.

        An instance that already has a bound context keeps it, and that context
        is extended with this context's partials. An instance whose class
        declares a context gets its own context made of a fresh partial, the
        declared partials and this context's partials. Values that cannot
        carry a binding (builtins, ``__slots__`` instances, classes, modules)
        are left alone.

        Returns:
            ``instance``, so the call can be used inline.

        """
        if not is_bindable_instance(instance):
            logger.debug("Skipping binding for non-bindable %s", type(instance).__qualname__)
            return instance

        binding = read_binding(instance)
        if binding is not None:
            if binding.context is not self:
                binding.context.extend(self)
            return instance

        context = self
        declared = declared_context(type(instance))
        if declared is not None:
            context = self._merged_scope(declared)
        write_binding(instance, Binding(context=context, state=BindingState.BOUND))
        return instance

    def resolve(
        self,
        key: Any,
        default: Any = MISSING,
        *,
        owner: type[Any] | None = None,
        field_name: str | None = None,
    ) -> Any:
        """Return the instance for ``key``, constructing and caching it when needed.

        Resolution order:

        1. ``Context`` itself resolves to this context.
        2. An instance already stored in the chain.
        3. A singleton from the registry's instance registry, cached locally
           and left unbound.
        4. A class from the registry's type registry, constructed with
           ``instantiate``.
        5. A pydantic settings class, built once and shared through the
           registry's instance registry.
        6. A symbolic key resolves to ``default`` when given, cached like any
           other entry, and fails otherwise.
        7. A class key is constructed with ``instantiate``.

        Args:
            key: Class or symbolic token to resolve.
            default: Value returned for a symbolic key that nothing provides.
            owner: Class declaring the field being resolved, used in errors.
            field_name: Name of the field being resolved, used in errors.

        Raises:
            CtxWireUnresolvableSymbolError: If ``key`` is symbolic, unprovided
                and no ``default`` was given.

        """
        dependency_key = DependencyKey.of(key)
        if dependency_key.value is Context:
            return self

        for partial in self._partials:
            if dependency_key in partial:
                return partial[dependency_key]

        registry = self._registry
        if registry.has_instance(dependency_key):
            instance = registry.get_instance(dependency_key)
            self.set(dependency_key, instance)
            return instance

        concrete_type = registry.get_type(dependency_key)
        if concrete_type is not None:
            instance = self.instantiate(concrete_type)
            self.set(dependency_key, instance)
            return instance

        if is_pydantic_settings_subclass(dependency_key.value):
            settings = registry.get_or_create_instance(dependency_key, dependency_key.value)
            self.set(dependency_key, settings)
            return settings

        if not dependency_key.is_constructible:
            if default is not MISSING:
                self.set(dependency_key, default)
                return default
            raise CtxWireUnresolvableSymbolError(
                key=dependency_key.value,
                owner=owner,
                field_name=field_name,
            )

        return self.instantiate(dependency_key.value)

    def create_child(self, provide: Provide = ()) -> Context:
        """Return a nested context whose new innermost partial holds ``provide``.

        Lookups that miss the new partial fall through to this context's
        chain. The child shares this context's registry.
        """
        child = Context([PartialContext(), *self._partials], registry=self._registry)
        _populate(child, child._partials[0], provide)
        return child

    def _construction_scope(self, concrete_type: type[Any]) -> Context | None:
        declared = declared_context(concrete_type)
        if declared is None:
            return None
        return self._merged_scope(declared)

    def _merged_scope(self, declared: Context) -> Context:
        # writes land in the fresh partial, never in the class-level ones
        partials = [PartialContext()]
        for partial in (*declared._partials, *self._partials):
            if not any(partial is existing for existing in partials):
                partials.append(partial)
        return Context(partials, registry=self._registry)

    def __repr__(self) -> str:
        return f"Context(partials={len(self._partials)}, registry={self._registry!r})"


def _iter_provide_entries(provide: Provide) -> Iterator[tuple[Any, Any]]:
    if isinstance(provide, Mapping):
        yield from provide.items()
        return

    for entry in provide:
        # exact types only: namedtuples are bare instances
        if type(entry) in (tuple, list):
            if len(entry) != _PAIR_LENGTH:
                msg = (
                    f"Invalid provide entry {entry!r}: expected a (key, instance) pair "
                    "or a bare instance."
                )
                raise CtxWireInvalidProvideEntryError(msg)
            key, instance = entry
            yield key, instance
        else:
            yield type(entry), entry


def _populate(context: Context, partial: PartialContext, provide: Provide) -> None:
    for key, instance in _iter_provide_entries(provide):
        partial[key] = instance
        context.bind(instance)


def create_context(provide: Provide = (), *, registry: Registry | None = None) -> Context:
    """Create a context whose only partial holds the ``provide`` entries.

    Each entry is either a ``(key, instance)`` pair or a bare instance keyed by
    its own type. A mapping of key to instance is accepted as well. Every
    provided instance is bound to the new context immediately, so its injected
    fields resolve through it.

    Args:
        provide: Entries stored in the context.
        registry: Registry consulted for keys missing from the context.
            Defaults to ``default_registry``.

    Returns:
        The new context.

    Raises:
        CtxWireInvalidProvideEntryError: If a pair entry does not have exactly
            two items.

    Examples:
        .. code-block:: python

            context = create_context(provide=[("dsn", "sqlite://"), Application()])
            app = context.get(Application)

    """
    partial = PartialContext()
    context = Context([partial], registry=registry)
    _populate(context, partial, provide)
    return context


def declare_context(
    provide: Provide = (),
    *,
    registry: Registry | None = None,
) -> Callable[[C], C]:
    """Attach a context to a class so every instance resolves through it.

    Instances created with a plain ``cls()`` call resolve their injected fields
    through the declared context, including from ``__init__``. Stacking the
    decorator adds a new partial in front of the chain, so the outermost
    decorator wins ties. Subclasses inherit the declaration; decorating a
    subclass gives it its own chain that starts with copies of the base
    class's partials.

    Args:
        provide: Entries stored in the declared context.
        registry: Registry consulted for keys missing from the context.

    Returns:
        A class decorator returning the class unchanged.

    Examples:
        .. code-block:: python

            @declare_context(provide=[("greeting", "hello")])
            class Application:
                greeting: str = inject("greeting")

    """

    def decorator(cls: C) -> C:
        if owns_declared_context(cls):
            context: Context = cls.__dict__[DECLARED_CONTEXT_ATTR]
            if registry is not None:
                context._registry = registry
        else:
            inherited = declared_context(cls)
            if inherited is None:
                context = Context(registry=registry)
            else:
                context = Context(
                    [partial.copy() for partial in inherited._partials],
                    registry=registry if registry is not None else inherited._registry,
                )
            set_declared_context(cls, context)

        partial = PartialContext()
        context._partials.insert(0, partial)
        _populate(context, partial, provide)
        logger.debug("Declared context on %s with %d entries", cls.__qualname__, len(partial))
        return cls

    return decorator


def get_context(instance: object) -> Context | None:
    """Return the context bound to ``instance``, or ``None`` when it has none.

    Instances without their own binding report the context declared on their
    class.
    """
    return bound_context(instance)


def is_context(value: object) -> bool:
    """Return whether ``value`` is a ``Context``."""
    return isinstance(value, Context)
