from ctxwire.integrations.pytest_plugin.plugin import (
    _ctxwire_state,
    ctxwire_context,
    ctxwire_registry,
    pytest_pycollect_makeitem,
    pytest_pyfunc_call,
)

__all__ = [
    "_ctxwire_state",
    "ctxwire_context",
    "ctxwire_registry",
    "pytest_pycollect_makeitem",
    "pytest_pyfunc_call",
]
