"""Contexts: provided values, symbolic keys and nested scopes.

A context is a chain of partial contexts. Lookups scan the chain from the
innermost scope outward, so a child context can shadow values of its parent
while still seeing everything else.
"""

from __future__ import annotations

from ctxwire import Context, create_context, inject


class Config:
    def __init__(self, environment: str) -> None:
        self.environment = environment


class RequestHandler:
    config: Config = inject()
    request_id: str = inject("request_id")
    context: Context = inject()


def main() -> None:
    app_context = create_context(provide=[Config("production"), ("request_id", "none")])

    first = app_context.create_child(provide=[("request_id", "req-1")])
    second = app_context.create_child(provide=[("request_id", "req-2")])

    first_handler = first.instantiate(RequestHandler)
    second_handler = second.instantiate(RequestHandler)

    print(f"first_request={first_handler.request_id}")  # => first_request=req-1
    print(f"second_request={second_handler.request_id}")  # => second_request=req-2

    shared_config = first_handler.config is second_handler.config
    print(f"shared_config={shared_config}")  # => shared_config=True
    print(f"environment={first_handler.config.environment}")  # => environment=production

    print(f"sees_own_context={first_handler.context is first}")  # => sees_own_context=True
    print(f"parent_untouched={app_context.has(RequestHandler)}")  # => parent_untouched=False


if __name__ == "__main__":
    main()
