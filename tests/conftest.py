"""Pytest configuration and shared fixtures for stripe-client-core tests."""

import httpx
import pytest

from stripe_client_core import StripeClient


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    """Auto-cleanup: Clear Stripe-related environment variables before each test.

    This prevents a developer's real key or endpoint from leaking into tests.
    """
    import os

    test_prefixes = ("TEST_", "STRIPE_")

    for key in list(os.environ.keys()):
        if any(key.startswith(prefix) for prefix in test_prefixes):
            monkeypatch.delenv(key, raising=False)

    yield


@pytest.fixture
def card_json():
    """A card as returned by the API."""
    return {
        "id": "card_123",
        "object": "card",
        "brand": "Visa",
        "exp_month": 8,
        "exp_year": 2030,
        "funding": "credit",
        "last4": "4242",
        "address_city": None,
        "country": "US",
        "customer": "cus_123",
        "cvc_check": "pass",
        "metadata": {},
    }


@pytest.fixture
def bitcoin_receiver_json():
    """A bitcoin receiver as returned by the API."""
    return {
        "id": "btcrcv_123",
        "object": "bitcoin_receiver",
        "active": True,
        "amount": 100,
        "amount_received": 0,
        "bitcoin_amount": 1757908,
        "bitcoin_amount_received": 0,
        "bitcoin_uri": "bitcoin:test_7i9Fo4b5wXcUAuoVBFrc7nc9HDxD1?amount=0.01757908",
        "created": 1700000000,
        "currency": "usd",
        "filled": False,
        "inbound_address": "test_7i9Fo4b5wXcUAuoVBFrc7nc9HDxD1",
        "livemode": False,
        "email": "test@example.com",
        "metadata": {"order": "6735"},
    }


@pytest.fixture
def charge_json(card_json):
    """A charge as returned by the API."""
    return {
        "id": "ch_123",
        "object": "charge",
        "amount": 2000,
        "amount_refunded": 0,
        "captured": True,
        "created": 1700000000,
        "currency": "eur",
        "livemode": False,
        "paid": True,
        "refunded": False,
        "status": "succeeded",
        "source": card_json,
        "fraud_details": {},
        "metadata": {"order": "6735"},
    }


@pytest.fixture
async def make_client():
    """Factory building a client whose requests go to a mock handler.

    Backoff is disabled so retry tests do not sleep.
    """
    clients = []

    def factory(handler, **kwargs) -> StripeClient:
        kwargs.setdefault("backoff_factor", 0.0)
        client = StripeClient("sk_test_123", transport=httpx.MockTransport(handler), **kwargs)
        clients.append(client)
        return client

    yield factory

    for client in clients:
        await client.aclose()
