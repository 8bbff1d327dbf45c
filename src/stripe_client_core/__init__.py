"""Stripe Client Core - request execution and error recovery for a Stripe API client.

This library provides the part shared by every resource operation:
- Request execution with Basic auth, idempotency and connected-account headers
- A closed error taxonomy for non-2xx responses
- Bounded retries that reuse one idempotency key per logical call
- Form encoding and strongly-typed JSON decoding, including union-typed fields

Example:
    ```python
    from stripe_client_core import StripeClient
    from stripe_client_core.models import Charge, ChargeInput, TokenSource

    async with StripeClient.from_env() as client:
        charge = await client.post_idempotent(
            "/v1/charges",
            ChargeInput(amount=2000, currency="eur", source=TokenSource("tok_visa")),
            Charge.from_json,
        )
    ```
"""

from stripe_client_core.client import StripeClient
from stripe_client_core.keys import ApiKey, Endpoint, IdempotencyKey

__version__ = "0.1.0"

__all__ = ["ApiKey", "Endpoint", "IdempotencyKey", "StripeClient", "__version__"]
