from typing import TYPE_CHECKING, Annotated, Any, TypeVar, Union, get_args, get_origin

T = TypeVar("T")
_ANNOTATED_MARKER_MIN_ARGS = 2


class InjectedMarker:
    """A marker used to indicate a value should be resolved from a context.

    Used to identify annotations whose inner type is the dependency key.
    """


if TYPE_CHECKING:
    Injected = Union[T, T]  # noqa: UP007,PYI016
    """Mark an annotation as a context-resolved dependency.

    At runtime ``Injected[T]`` becomes ``Annotated[T, InjectedMarker()]``.

    Examples:
        .. code-block:: python

            class Application:
                service: Injected[Service] = inject()
    """

else:

    class Injected:
        """Mark an annotation as a context-resolved dependency.

        At runtime ``Injected[T]`` resolves to ``Annotated[T, InjectedMarker()]``.
        ``inject()`` fields and pytest test parameters unwrap it to ``T``.

        Examples:
            .. code-block:: python

                class Application:
                    service: Injected[Service] = inject()


                def test_service(service: Injected[Service]) -> None: ...

        """

        def __class_getitem__(cls, item: T) -> Annotated[T, InjectedMarker]:
            if get_origin(item) is Annotated:
                args = get_args(item)
                inner = args[0]
                metadata = args[1:]
                return _build_annotated((inner, *metadata, InjectedMarker()))
            return _build_annotated((item, InjectedMarker()))


def is_injected_annotation(annotation: Any) -> bool:
    """Return True when annotation is Annotated[..., InjectedMarker()]."""
    if get_origin(annotation) is not Annotated:
        return False
    annotation_args = get_args(annotation)
    if len(annotation_args) < _ANNOTATED_MARKER_MIN_ARGS:
        return False
    return any(isinstance(item, InjectedMarker) for item in annotation_args[1:])


def strip_injected_annotation(annotation: Any) -> Any:
    """Strip the Injected marker while preserving other Annotated metadata."""
    if not is_injected_annotation(annotation):
        return annotation

    annotation_args = get_args(annotation)
    parameter_type = annotation_args[0]
    filtered_metadata = tuple(
        item for item in annotation_args[1:] if not isinstance(item, InjectedMarker)
    )
    if not filtered_metadata:
        return parameter_type
    return _build_annotated((parameter_type, *filtered_metadata))


def _build_annotated(params: tuple[object, ...]) -> Any:
    """Return Annotated[...] with a pre-built params tuple (Py 3.10+ compatible)."""
    try:
        return Annotated.__class_getitem__(params)  # type: ignore[attr-defined]
    except AttributeError:
        return Annotated.__getitem__(params)  # type: ignore[attr-defined]
