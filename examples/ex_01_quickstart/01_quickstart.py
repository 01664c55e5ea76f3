"""Quickstart: lazily injected fields resolved from a context.

Declare dependencies as class attributes with ``inject()``, create a context,
and instantiate only the top-level object. Each dependency is built on first
read and cached in the context.
"""

from __future__ import annotations

from ctxwire import create_context, get_context, inject


class Database:
    def __init__(self) -> None:
        self.host = "localhost"


class UserRepository:
    database: Database = inject()


class UserService:
    repository: UserRepository = inject()


def main() -> None:
    context = create_context()
    service = context.instantiate(UserService)

    print(f"db_host={service.repository.database.host}")  # => db_host=localhost

    chain = (
        f"{type(service).__name__}"
        f">{type(service.repository).__name__}"
        f">{type(service.repository.database).__name__}"
    )
    print(f"chain={chain}")  # => chain=UserService>UserRepository>Database

    same_database = service.repository.database is context.get(Database)
    print(f"cached_in_context={same_database}")  # => cached_in_context=True

    bound = get_context(service.repository.database) is context
    print(f"bound_to_context={bound}")  # => bound_to_context=True


if __name__ == "__main__":
    main()
