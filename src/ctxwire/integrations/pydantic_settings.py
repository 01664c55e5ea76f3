from __future__ import annotations

import importlib
import warnings
from typing import Any

from ctxwire._internal.type_checks import is_runtime_class

_PYDANTIC_V1_WARNING_PATTERN = (
    r"Core Pydantic V1 functionality isn't compatible with Python 3\.14 or greater\."
)


def _load_pydantic_settings_base() -> type[Any] | None:
    return _load_base_settings("pydantic_settings")


def _load_pydantic_v1_base() -> type[Any] | None:
    with warnings.catch_warnings():
        warnings.filterwarnings(
            "ignore",
            message=_PYDANTIC_V1_WARNING_PATTERN,
            category=UserWarning,
        )
        return _load_base_settings("pydantic.v1")


def _load_base_settings(module_name: str) -> type[Any] | None:
    try:
        module = importlib.import_module(module_name)
    except ImportError:
        return None
    base_settings = getattr(module, "BaseSettings", None)
    if isinstance(base_settings, type):
        return base_settings
    return None


def _build_settings_bases() -> tuple[type[Any], ...]:
    bases: list[type[Any]] = []
    for candidate in (_load_pydantic_settings_base(), _load_pydantic_v1_base()):
        if candidate is None or candidate in bases:
            continue
        bases.append(candidate)
    return tuple(bases)


SETTINGS_BASES: tuple[type[Any], ...] = _build_settings_bases()


def is_pydantic_settings_subclass(candidate: object) -> bool:
    """Return whether a class is a supported Pydantic settings model.

    ctxwire checks ``pydantic_settings.BaseSettings`` and the legacy
    ``pydantic.v1.BaseSettings`` when available. If neither is installed, this
    function returns ``False`` for every candidate.

    Settings models are context-free configuration: when an injected field asks
    for a settings class that has no local or registry entry, it is built once
    from the environment and stored in the resolving registry's instance
    registry, so every context shares the same configuration object.

    Args:
        candidate: Object to test.

    Returns:
        ``True`` when ``candidate`` is a runtime class and subclasses any
        discovered settings base, excluding the bases themselves.

    """
    if not is_runtime_class(candidate) or candidate in SETTINGS_BASES:
        return False
    try:
        return any(issubclass(candidate, base) for base in SETTINGS_BASES)
    except TypeError:
        return False


__all__ = [
    "SETTINGS_BASES",
    "is_pydantic_settings_subclass",
]
