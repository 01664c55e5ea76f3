from __future__ import annotations

import inspect
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any, cast

import pytest

from ctxwire.context import Context, create_context
from ctxwire.injection import (
    InjectedCallableInspector,
    InjectedParameter,
    wrap_injected_callable,
)
from ctxwire.registry import Registry

_CTXWIRE_CONTEXT_ATTR = "_ctxwire_context"
_COLLECTED_INJECTION_ATTR = "__ctxwire_pytest_injection__"
_INJECTED_CALLABLE_INSPECTOR = InjectedCallableInspector()


@dataclass(frozen=True, slots=True)
class _CollectedInjection:
    """Injected parameters of a collected test function and its full signature."""

    parameters: tuple[InjectedParameter, ...]
    signature: inspect.Signature


@pytest.fixture()
def ctxwire_registry() -> Registry:
    """Create a per-test registry isolated from ``default_registry``.

    Returns:
        A new empty ``Registry``.

    """
    return Registry()


@pytest.fixture()
def ctxwire_context(ctxwire_registry: Registry) -> Context:
    """Create a per-test context backed by ``ctxwire_registry``.

    Test parameters annotated with ``Injected[...]`` resolve from this
    context. Override the fixture to provide fakes:

    .. code-block:: python

        @pytest.fixture()
        def ctxwire_context(ctxwire_registry: Registry) -> Context:
            return create_context(provide=[(Repository, FakeRepository())], registry=ctxwire_registry)

    Returns:
        A new ``Context``.

    """
    return create_context(registry=ctxwire_registry)


@pytest.fixture(autouse=True)
def _ctxwire_state(
    request: pytest.FixtureRequest,
    ctxwire_context: Context,
) -> None:
    """Store plugin state on the test node for hook access."""
    node = cast("Any", request.node)
    setattr(node, _CTXWIRE_CONTEXT_ATTR, ctxwire_context)


def _collected_injection(test_function: object) -> _CollectedInjection | None:
    collected = getattr(test_function, _COLLECTED_INJECTION_ATTR, None)
    return cast("_CollectedInjection | None", collected)


def pytest_pycollect_makeitem(
    collector: Any,
    name: str,
    obj: object,
) -> Any | None:
    """Hide ``Injected[...]`` parameters from pytest fixture name matching.

    Pytest treats every test function parameter as a fixture name. Test
    functions with ``Injected[...]`` parameters get a public signature without
    them, and the collected parameters are remembered for
    ``pytest_pyfunc_call``.

    Args:
        collector: Pytest collector instance.
        name: Collected object name.
        obj: Candidate object.

    Returns:
        ``None`` to continue default collection flow.

    """
    if not callable(obj) or not collector.istestfunction(obj, name):
        return None

    inspection = _INJECTED_CALLABLE_INSPECTOR.inspect_callable(obj)
    if inspection.injected_parameters:
        test_function = cast("Any", obj)
        setattr(
            test_function,
            _COLLECTED_INJECTION_ATTR,
            _CollectedInjection(
                parameters=inspection.injected_parameters,
                signature=inspection.signature,
            ),
        )
        test_function.__signature__ = inspection.public_signature
    return None


@pytest.hookimpl(hookwrapper=True, tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> Iterator[None]:
    """Resolve ``Injected[...]`` parameters from ``ctxwire_context`` for the test call.

    The test callable is swapped for a wrapper for the duration of the call
    and restored afterwards. Tests without injected parameters, or items the
    ``ctxwire_context`` fixture never reached, are left untouched.

    Args:
        pyfuncitem: Collected pytest function item.

    Yields:
        Control back to pytest around test execution.

    """
    test_function = cast("Callable[..., Any]", pyfuncitem.obj)
    collected = _collected_injection(test_function)
    context = cast("Context | None", getattr(pyfuncitem, _CTXWIRE_CONTEXT_ATTR, None))
    if collected is None or context is None:
        yield
        return

    wrapped = wrap_injected_callable(context, test_function, collected.parameters)
    # functools.wraps copied the public signature; expose the full one
    cast("Any", wrapped).__signature__ = collected.signature
    pyfuncitem.obj = wrapped
    try:
        yield
    finally:
        pyfuncitem.obj = test_function
