"""Retry and idempotency control for logical Stripe calls.

Example:
    ```python
    from stripe_client_core.transport import handle_idempotent

    customer = await handle_idempotent(
        lambda key: client.post("/v1/customers", {"email": "a@example.com"}, Customer.from_json, idempotency_key=key),
        max_retries=3,
    )
    ```
"""

from stripe_client_core.transport.retry import (
    DEFAULT_MAX_RETRIES,
    RetryController,
    RetryState,
    handle,
    handle_idempotent,
    is_retryable,
)

__all__ = [
    "DEFAULT_MAX_RETRIES",
    "RetryController",
    "RetryState",
    "handle",
    "handle_idempotent",
    "is_retryable",
]
