"""Pydantic settings as context-free configuration.

``BaseSettings`` subclasses that nothing provides are built once from the
environment and shared by every context through the registry.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings

from ctxwire import Registry, create_context, get_context, inject


class AppSettings(BaseSettings):
    value: str = "settings"


class Application:
    settings: AppSettings = inject()


def main() -> None:
    registry = Registry()

    first = create_context(registry=registry).instantiate(Application)
    second = create_context(registry=registry).instantiate(Application)

    print(f"settings_singleton={first.settings is second.settings}")  # => settings_singleton=True
    print(f"settings_value={first.settings.value}")  # => settings_value=settings
    print(f"settings_bound={get_context(first.settings) is not None}")  # => settings_bound=False


if __name__ == "__main__":
    main()
