"""Testing utilities for code built on the Stripe client core.

Example:
    ```python
    import httpx

    from stripe_client_core import StripeClient
    from stripe_client_core.testing import RecordingHandler, create_error_response


    async def test_card_declined():
        handler = RecordingHandler([create_error_response(402, "card_error", code="card_declined")])
        client = StripeClient("sk_test_123", transport=httpx.MockTransport(handler))
        ...
    ```
"""

from stripe_client_core.testing.factories import RecordingHandler, create_error_response, create_list_payload

__all__ = ["RecordingHandler", "create_error_response", "create_list_payload"]
