"""Tests for payment source models."""

from datetime import UTC, datetime
from decimal import Decimal

import pytest

from stripe_client_core.codec.decoding import DecodeError
from stripe_client_core.codec.form import encode_form
from stripe_client_core.models import BitcoinReceiver, Card, CardSource, TokenSource


@pytest.mark.unit
def test_card_from_json(card_json):
    card = Card.from_json(card_json)

    assert card.id == "card_123"
    assert card.brand == "Visa"
    assert card.exp_month == 8
    assert card.exp_year == 2030
    assert card.country == "US"
    assert card.address_city is None
    # Empty metadata object means no metadata
    assert card.metadata is None


@pytest.mark.unit
def test_card_requires_last4(card_json):
    del card_json["last4"]

    with pytest.raises(DecodeError, match="last4: missing required field"):
        Card.from_json(card_json)


@pytest.mark.unit
def test_card_to_json_carries_discriminator(card_json):
    encoded = Card.from_json(card_json).to_json()

    assert encoded["object"] == "card"
    assert Card.from_json(encoded) == Card.from_json(card_json)


@pytest.mark.unit
def test_bitcoin_receiver_from_json(bitcoin_receiver_json):
    receiver = BitcoinReceiver.from_json(bitcoin_receiver_json)

    assert receiver.bitcoin_amount == Decimal("1757908")
    assert receiver.created == datetime(2023, 11, 14, 22, 13, 20, tzinfo=UTC)
    assert receiver.metadata == {"order": "6735"}
    assert receiver.transactions is None


@pytest.mark.unit
def test_bitcoin_receiver_with_transactions(bitcoin_receiver_json):
    bitcoin_receiver_json["transactions"] = {
        "object": "list",
        "url": "/v1/bitcoin/receivers/btcrcv_123/transactions",
        "has_more": False,
        "total_count": 1,
        "data": [
            {
                "id": "btctxn_1",
                "object": "bitcoin_transaction",
                "amount": 100,
                "bitcoin_amount": 1757908,
                "created": 1700000100,
                "currency": "usd",
                "receiver": "btcrcv_123",
            }
        ],
    }

    receiver = BitcoinReceiver.from_json(bitcoin_receiver_json)

    assert receiver.transactions is not None
    assert receiver.transactions.total_count == 1
    assert receiver.transactions.data[0].receiver == "btcrcv_123"


@pytest.mark.unit
def test_token_source_encodes_as_bare_id():
    assert encode_form({"source": TokenSource("tok_visa")}) == {"source": "tok_visa"}


@pytest.mark.unit
def test_card_source_encodes_nested_fields():
    params = encode_form({"source": CardSource(exp_month=12, exp_year=2030, number="4242424242424242", cvc="123")})

    assert params == {
        "source[object]": "card",
        "source[exp_month]": "12",
        "source[exp_year]": "2030",
        "source[number]": "4242424242424242",
        "source[cvc]": "123",
    }


@pytest.mark.unit
def test_card_source_repr_hides_number():
    source = CardSource(exp_month=12, exp_year=2030, number="4242424242424242", cvc="123")

    assert "4242424242424242" not in repr(source)
    assert "cvc" not in repr(source)
