"""Opaque value wrappers threaded through every request.

``ApiKey`` is secret: its ``repr`` and ``str`` are masked so it can be passed
around (and accidentally logged) without leaking the key itself.
"""

import uuid
from dataclasses import dataclass, field

DEFAULT_ENDPOINT = "https://api.stripe.com"


@dataclass(frozen=True)
class ApiKey:
    """The Stripe secret API key."""

    value: str = field(repr=False)

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("API key must not be empty")

    def __repr__(self) -> str:
        return "ApiKey('***')"

    def __str__(self) -> str:
        return "***"


@dataclass(frozen=True)
class Endpoint:
    """The Stripe API base URL, stored without a trailing ``/``."""

    url: str = DEFAULT_ENDPOINT

    def __post_init__(self) -> None:
        object.__setattr__(self, "url", self.url.rstrip("/"))

    def join(self, path: str) -> str:
        """Build a full URL from a path, leaving absolute URLs untouched."""
        if path.startswith(("http://", "https://")):
            return path
        if not path.startswith("/"):
            path = f"/{path}"
        return f"{self.url}{path}"


@dataclass(frozen=True)
class IdempotencyKey:
    """Key that prevents duplicate side effects when a request is reissued.

    See: https://stripe.com/docs/api#idempotent_requests
    """

    key: str

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("Idempotency key must not be empty")

    @classmethod
    def generate(cls) -> "IdempotencyKey":
        """Mint a fresh key for one logical operation."""
        return cls(str(uuid.uuid4()))

    def __str__(self) -> str:
        return self.key
