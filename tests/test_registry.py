from __future__ import annotations

import pytest

from ctxwire import CtxWireRegistryFrozenError, Registry
from ctxwire.keys import DependencyKey


class _Clock:
    pass


class _SystemClock(_Clock):
    pass


def test_add_type_and_instance(registry: Registry) -> None:
    clock = _Clock()

    registry.add_type(_Clock, _SystemClock)
    registry.add_instance("clock", clock)

    assert registry.has_type(_Clock) is True
    assert registry.get_type(_Clock) is _SystemClock
    assert registry.has_instance("clock") is True
    assert registry.get_instance("clock") is clock
    assert registry.get_type("clock") is None
    assert registry.get_instance(_Clock) is None


def test_keys_are_normalized(registry: Registry) -> None:
    registry.add_type(DependencyKey.of(_Clock), _SystemClock)

    assert registry.get_type(_Clock) is _SystemClock


def test_construct_instance_builds_target_now(registry: Registry) -> None:
    clock = registry.construct_instance(_Clock, _SystemClock)

    assert isinstance(clock, _SystemClock)
    assert registry.get_instance(_Clock) is clock


def test_construct_instance_defaults_to_key(registry: Registry) -> None:
    clock = registry.construct_instance(_Clock)

    assert type(clock) is _Clock


class TestFreeze:
    def test_frozen_registry_rejects_registrations(self, registry: Registry) -> None:
        registry.freeze()

        assert registry.frozen is True
        with pytest.raises(CtxWireRegistryFrozenError, match="frozen"):
            registry.add_type(_Clock, _SystemClock)
        with pytest.raises(CtxWireRegistryFrozenError):
            registry.add_instance(_Clock, _Clock())

    def test_frozen_registry_does_not_construct(self, registry: Registry) -> None:
        constructed: list[object] = []

        class Tracked:
            def __init__(self) -> None:
                constructed.append(self)

        registry.freeze()

        with pytest.raises(CtxWireRegistryFrozenError):
            registry.construct_instance(Tracked)

        assert constructed == []

    def test_lazy_singletons_work_while_frozen(self, registry: Registry) -> None:
        registry.freeze()

        first = registry.get_or_create_instance(_Clock, _Clock)
        second = registry.get_or_create_instance(_Clock, _SystemClock)

        assert first is second
        assert type(first) is _Clock

    def test_clear_resets_everything(self, registry: Registry) -> None:
        registry.add_type(_Clock, _SystemClock)
        registry.add_instance("clock", _Clock())
        registry.freeze()

        registry.clear()

        assert registry.frozen is False
        assert registry.has_type(_Clock) is False
        assert registry.has_instance("clock") is False
        registry.add_type(_Clock, _SystemClock)


def test_repr_reports_counts(registry: Registry) -> None:
    registry.add_type(_Clock, _SystemClock)

    assert repr(registry) == "Registry(types=1, instances=0, frozen=False)"
