"""Declared contexts: classes that carry their own scope.

``@declare_context`` attaches a context to a class. Plain ``cls()`` calls
resolve through it, even from ``__init__``. When such a class is built by an
outer context, its declared entries shadow the outer ones and everything else
falls through to the outer context.
"""

from __future__ import annotations

from ctxwire import create_context, declare_context, inject


class Logger:
    def __init__(self, name: str) -> None:
        self.name = name


@declare_context(provide=[("greeting", "hello")])
class Greeter:
    greeting: str = inject("greeting")

    def __init__(self) -> None:
        self.message = f"{self.greeting}, world"


@declare_context(provide=[Logger("plugin")])
class Plugin:
    logger: Logger = inject()
    region: str = inject("region")


def main() -> None:
    greeter = Greeter()
    print(f"message={greeter.message}")  # => message=hello, world

    host = create_context(provide=[Logger("host"), ("region", "eu-west-1")])
    plugin = host.instantiate(Plugin)

    print(f"plugin_logger={plugin.logger.name}")  # => plugin_logger=plugin
    print(f"plugin_region={plugin.region}")  # => plugin_region=eu-west-1


if __name__ == "__main__":
    main()
