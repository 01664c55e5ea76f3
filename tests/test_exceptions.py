"""Tests for the custom exception hierarchy."""

import pytest

from ctxwire import (
    CtxWireEmptyContextWriteError,
    CtxWireError,
    CtxWireInvalidProvideEntryError,
    CtxWireMissingAnnotationError,
    CtxWireRegistryFrozenError,
    CtxWireUnboundContextError,
    CtxWireUnresolvableSymbolError,
    UnboundReason,
)


class _Service:
    pass


@pytest.mark.parametrize(
    "error_type",
    [
        CtxWireEmptyContextWriteError,
        CtxWireInvalidProvideEntryError,
        CtxWireMissingAnnotationError,
        CtxWireRegistryFrozenError,
        CtxWireUnboundContextError,
        CtxWireUnresolvableSymbolError,
    ],
)
def test_all_errors_derive_from_base(error_type: type[Exception]) -> None:
    assert issubclass(error_type, CtxWireError)


class TestUnboundContextError:
    def test_constructing_message_points_at_the_constructor(self) -> None:
        error = CtxWireUnboundContextError(
            owner=_Service,
            field_name="repository",
            reason=UnboundReason.CONSTRUCTING,
        )

        assert "_Service.repository" in str(error)
        assert "before context binding completed" in str(error)
        assert "constructor of _Service" in str(error)

    def test_never_bound_message_lists_the_fixes(self) -> None:
        error = CtxWireUnboundContextError(
            owner=_Service,
            field_name="repository",
            reason=UnboundReason.NEVER_BOUND,
        )

        assert "never associated with a context" in str(error)
        assert "Context.instantiate" in str(error)
        assert "@declare_context()" in str(error)


class TestUnresolvableSymbolError:
    def test_message_names_key_and_field(self) -> None:
        error = CtxWireUnresolvableSymbolError(key="dsn", owner=_Service, field_name="dsn")

        assert "'dsn'" in str(error)
        assert "_Service.dsn" in str(error)

    def test_message_without_field(self) -> None:
        error = CtxWireUnresolvableSymbolError(key="dsn")

        assert error.owner is None
        assert "injected field" not in str(error)


def test_empty_context_write_reports_a_bug() -> None:
    error = CtxWireEmptyContextWriteError(key=_Service)

    assert error.key is _Service
    assert "this is a bug in ctxwire" in str(error)
