"""Overriding dependencies with fakes.

Provide a fake under the real class key, or assign the attribute directly on
an instance. Both leave the production classes untouched.
"""

from __future__ import annotations

from ctxwire import create_context, inject


class EmailSender:
    def send(self, to: str) -> str:
        return f"smtp:{to}"


class FakeEmailSender(EmailSender):
    def send(self, to: str) -> str:
        return f"fake:{to}"


class SignupService:
    sender: EmailSender = inject()

    def signup(self, email: str) -> str:
        return self.sender.send(email)


def main() -> None:
    context = create_context(provide=[(EmailSender, FakeEmailSender())])
    service = context.instantiate(SignupService)
    print(f"provided={service.signup('ada@example.com')}")  # => provided=fake:ada@example.com

    production = create_context().instantiate(SignupService)
    production.sender = FakeEmailSender()
    print(f"assigned={production.signup('alan@example.com')}")  # => assigned=fake:alan@example.com


if __name__ == "__main__":
    main()
