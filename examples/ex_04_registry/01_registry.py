"""Registry: process-wide fallbacks for keys missing from a context.

``provide`` registers a class constructed once per resolving context.
``provide_instance`` and ``provide_raw_instance`` register a singleton shared
by every context. Freeze the registry once startup wiring is complete.
"""

from __future__ import annotations

from ctxwire import Registry, create_context, inject, provide, provide_instance, provide_raw_instance

registry = Registry()


class Repository:
    pass


@provide(key=Repository, registry=registry)
class SqlRepository(Repository):
    pass


@provide_instance(registry=registry)
class Clock:
    pass


provide_raw_instance("sqlite://", key="dsn", registry=registry)


class Application:
    repository: Repository = inject()
    clock: Clock = inject()
    dsn: str = inject("dsn")


def main() -> None:
    registry.freeze()

    first = create_context(registry=registry).instantiate(Application)
    second = create_context(registry=registry).instantiate(Application)

    print(f"repository={type(first.repository).__name__}")  # => repository=SqlRepository
    per_context = first.repository is not second.repository
    print(f"repository_per_context={per_context}")  # => repository_per_context=True
    print(f"clock_shared={first.clock is second.clock}")  # => clock_shared=True
    print(f"dsn={first.dsn}")  # => dsn=sqlite://


if __name__ == "__main__":
    main()
