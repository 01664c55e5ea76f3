from __future__ import annotations

import pytest

from ctxwire import Context, Injected, Registry, create_context, get_context, inject


class _Service:
    pass


class _FakeService(_Service):
    pass


class _Consumer:
    service: _Service = inject()


@pytest.fixture()
def ctxwire_context(ctxwire_registry: Registry) -> Context:
    return create_context(provide=[(_Service, _FakeService())], registry=ctxwire_registry)


@pytest.fixture()
def value() -> int:
    return 42


def test_injected_parameters_are_resolved_from_ctxwire_context(
    value: int,
    service: Injected[_Service],
) -> None:
    assert value == 42
    assert isinstance(service, _FakeService)


def test_injected_instances_are_bound_to_the_test_context(
    consumer: Injected[_Consumer],
    ctxwire_context: Context,
) -> None:
    assert get_context(consumer) is ctxwire_context
    assert isinstance(consumer.service, _FakeService)


@pytest.mark.asyncio
async def test_async_test_functions_support_injected_parameters(
    service: Injected[_Service],
) -> None:
    assert isinstance(service, _FakeService)


def test_regular_fixture_resolution_still_works_without_injected_parameters(value: int) -> None:
    assert value == 42


def test_public_ctxwire_registry_fixture_backs_the_context(
    ctxwire_context: Context,
    ctxwire_registry: Registry,
) -> None:
    assert ctxwire_context.registry is ctxwire_registry
