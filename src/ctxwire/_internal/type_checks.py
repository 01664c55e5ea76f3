from __future__ import annotations

import types
from typing import Any, TypeGuard


def is_runtime_class(candidate: object) -> TypeGuard[type[Any]]:
    """Return true when candidate is a runtime class safe for class-only operations.

    Args:
        candidate: Value being checked for eligibility or runtime type constraints.

    """
    return isinstance(candidate, type) and not isinstance(candidate, types.GenericAlias)


def is_bindable_instance(candidate: object) -> bool:
    """Return true when a context binding can be attached to candidate.

    Classes and modules are excluded because attributes set on them leak into
    every instance or importer. Builtins and ``__slots__`` instances without a
    ``__dict__`` cannot carry a binding.

    Args:
        candidate: Value being checked for eligibility or runtime type constraints.

    """
    if isinstance(candidate, (type, types.ModuleType)):
        return False
    return isinstance(getattr(candidate, "__dict__", None), dict)


__all__ = ["is_bindable_instance", "is_runtime_class"]
