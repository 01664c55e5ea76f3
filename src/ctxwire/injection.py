from __future__ import annotations

import functools
import inspect
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar, get_type_hints, overload

from ctxwire._internal.binding import resolving_context
from ctxwire.context import MISSING, Context
from ctxwire.exceptions import CtxWireMissingAnnotationError
from ctxwire.keys import DependencyKey
from ctxwire.markers import is_injected_annotation, strip_injected_annotation

if TYPE_CHECKING:
    from typing_extensions import Self

T = TypeVar("T")


class InjectedField(Generic[T]):
    """Lazy accessor resolving a dependency from the owning instance's context.

    The field stores nothing on the instance. Each read resolves the key
    against the instance's bound context, which caches the result, so repeated
    reads return the same object. Assigning to the attribute on an instance
    stores a plain value that shadows the field.

    Use ``inject()`` to declare fields; this class is public for
    introspection.
    """

    def __init__(self, key: Any = MISSING, *, default: Any = MISSING) -> None:
        self._key = key
        self._default = default
        self._dependency_key: DependencyKey | None = None
        if key is not MISSING:
            self._dependency_key = DependencyKey.of(key)
        self.owner: type[Any] | None = None
        self.name: str | None = None

    def __set_name__(self, owner: type[Any], name: str) -> None:
        self.owner = owner
        self.name = name

    @overload
    def __get__(self, instance: None, owner: type[Any] | None = None) -> Self: ...

    @overload
    def __get__(self, instance: object, owner: type[Any] | None = None) -> T: ...

    def __get__(self, instance: object | None, owner: type[Any] | None = None) -> Any:
        if instance is None:
            return self

        field_name = self.name or "<unnamed>"
        context = resolving_context(instance, field_name=field_name)
        return context.resolve(
            self.dependency_key,
            self._default,
            owner=type(instance),
            field_name=field_name,
        )

    @property
    def dependency_key(self) -> DependencyKey:
        """Key resolved by this field: the explicit key or the field annotation."""
        if self._dependency_key is None:
            self._dependency_key = DependencyKey.of(self._key_from_annotation())
        return self._dependency_key

    def _key_from_annotation(self) -> Any:
        if self.owner is None or self.name is None:
            msg = "inject() without a key must be assigned to an attribute in a class body."
            raise CtxWireMissingAnnotationError(msg)

        field = f"{self.owner.__qualname__}.{self.name}"
        try:
            hints = get_type_hints(self.owner, include_extras=True)
        except NameError as error:
            msg = f"Cannot evaluate the annotation of injected field '{field}': {error}"
            raise CtxWireMissingAnnotationError(msg) from error

        if self.name not in hints:
            msg = (
                f"Injected field '{field}' has no annotation. "
                "Annotate the field or pass the dependency key to inject()."
            )
            raise CtxWireMissingAnnotationError(msg)
        return strip_injected_annotation(hints[self.name])

    def __repr__(self) -> str:
        key = self._dependency_key if self._dependency_key is not None else "<annotation>"
        return f"InjectedField(name={self.name!r}, key={key!r})"


def inject(key: Any = MISSING, *, default: Any = MISSING) -> Any:
    """Declare a class attribute resolved lazily from the instance's context.

    Without ``key`` the field annotation is used as the dependency key
    (``Injected[T]`` and plain ``T`` are both accepted). The first read on an
    instance resolves the key through the instance's bound context, the
    registry, or by constructing the class; later reads return the same
    object.

    Args:
        key: Class or symbolic token to resolve. Defaults to the annotation.
        default: Value returned when a symbolic key is not provided anywhere.

    Returns:
        An ``InjectedField`` descriptor, typed as ``Any`` so the field keeps
        its annotated type.

    Raises:
        CtxWireUnboundContextError: On read, when the instance has no usable
            context.
        CtxWireUnresolvableSymbolError: On read, when a symbolic key is not
            provided and has no default.

    Examples:
        .. code-block:: python

            class Application:
                repository: Repository = inject()
                dsn: str = inject("dsn", default="sqlite://")
                context: Context = inject()

    """
    return InjectedField(key, default=default)


@dataclass(frozen=True, slots=True)
class InjectedParameter:
    """Injected parameter metadata for callable wrapper generation."""

    name: str
    dependency: Any


@dataclass(frozen=True, slots=True)
class InjectedCallableInspection:
    """Injection metadata derived from a callable signature and annotations."""

    signature: inspect.Signature
    injected_parameters: tuple[InjectedParameter, ...]
    public_signature: inspect.Signature


@dataclass(slots=True)
class InjectedCallableInspector:
    """Inspect callables for Injected[...] parameters and public signature filtering."""

    def inspect_callable(self, callable_obj: Callable[..., Any]) -> InjectedCallableInspection:
        """Build injection metadata and a public signature for a callable."""
        signature = inspect.signature(callable_obj)
        try:
            resolved_annotations = get_type_hints(callable_obj, include_extras=True)
        except (AttributeError, NameError, TypeError):
            resolved_annotations = {}

        injected_parameters = tuple(
            InjectedParameter(
                name=parameter.name,
                dependency=strip_injected_annotation(annotation),
            )
            for parameter in signature.parameters.values()
            if is_injected_annotation(
                annotation := resolved_annotations.get(parameter.name, parameter.annotation),
            )
        )
        hidden_parameter_names = {parameter.name for parameter in injected_parameters}
        public_signature = signature.replace(
            parameters=[
                parameter
                for parameter in signature.parameters.values()
                if parameter.name not in hidden_parameter_names
            ],
        )
        return InjectedCallableInspection(
            signature=signature,
            injected_parameters=injected_parameters,
            public_signature=public_signature,
        )


def wrap_injected_callable(
    context: Context,
    callable_obj: Callable[..., Any],
    injected_parameters: tuple[InjectedParameter, ...],
) -> Callable[..., Any]:
    """Return a wrapper that fills ``injected_parameters`` from ``context`` on each call.

    Explicitly passed keyword arguments win over resolved ones. Coroutine
    functions get a coroutine wrapper.
    """

    def _resolved_kwargs(kwargs: dict[str, Any]) -> dict[str, Any]:
        for parameter in injected_parameters:
            if parameter.name not in kwargs:
                kwargs[parameter.name] = context.resolve(parameter.dependency)
        return kwargs

    if inspect.iscoroutinefunction(callable_obj):

        @functools.wraps(callable_obj)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            return await callable_obj(*args, **_resolved_kwargs(kwargs))

        return async_wrapper

    @functools.wraps(callable_obj)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return callable_obj(*args, **_resolved_kwargs(kwargs))

    return wrapper
