"""Common errors and how to recognize them.

This module triggers representative error paths and prints exception type
names with the structured details each error carries.
"""

from __future__ import annotations

from ctxwire import (
    CtxWireRegistryFrozenError,
    CtxWireUnboundContextError,
    CtxWireUnresolvableSymbolError,
    Registry,
    create_context,
    inject,
)


class Database:
    pass


class EagerService:
    database: Database = inject()

    def __init__(self) -> None:
        self.database_in_init = self.database


class Service:
    database: Database = inject()
    token: str = inject("token")


def main() -> None:
    context = create_context()

    try:
        context.instantiate(EagerService)
    except CtxWireUnboundContextError as error:
        print(f"constructor_read={error.reason.value}")  # => constructor_read=constructing

    try:
        _ = Service().database
    except CtxWireUnboundContextError as error:
        print(f"unbound_read={error.reason.value}")  # => unbound_read=never_bound

    try:
        _ = context.instantiate(Service).token
    except CtxWireUnresolvableSymbolError as error:
        print(f"missing_symbol={error.key}")  # => missing_symbol=token

    registry = Registry()
    registry.freeze()
    try:
        registry.add_type(Database, Database)
    except CtxWireRegistryFrozenError as error:
        print(f"frozen={type(error).__name__}")  # => frozen=CtxWireRegistryFrozenError


if __name__ == "__main__":
    main()
