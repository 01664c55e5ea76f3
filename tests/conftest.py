"""Shared pytest fixtures for ctxwire tests."""

from collections.abc import Generator

import pytest

from ctxwire.context import Context, create_context
from ctxwire.registry import Registry, default_registry


@pytest.fixture(autouse=True)
def _reset_default_registry() -> Generator[None, None, None]:
    """Isolate module-level registrations between tests."""
    default_registry.clear()
    try:
        yield
    finally:
        default_registry.clear()


@pytest.fixture()
def registry() -> Registry:
    """Fresh registry independent from ``default_registry``."""
    return Registry()


@pytest.fixture()
def context(registry: Registry) -> Context:
    """Empty context backed by the ``registry`` fixture."""
    return create_context(registry=registry)
