"""Tests for top-level objects, charge input and list filters."""

from datetime import UTC, datetime

import pytest

from stripe_client_core.codec.decoding import DecodeError, UnknownVariantError
from stripe_client_core.codec.form import encode_form
from stripe_client_core.models import (
    Card,
    Charge,
    ChargeInput,
    Customer,
    DeleteResponse,
    Range,
    StatementDescriptorInvalidCharacterError,
    StatementDescriptorTooLongError,
    Timestamp,
    TokenSource,
    decode_list_filter,
    decode_stripe_object,
    list_filter_params,
    validate_statement_descriptor,
)

T0 = datetime(2023, 11, 14, 22, 13, 20, tzinfo=UTC)


class TestCharge:
    @pytest.mark.unit
    def test_from_json(self, charge_json):
        charge = Charge.from_json(charge_json)

        assert charge.amount == 2000
        assert charge.created == T0
        assert isinstance(charge.source, Card)
        assert charge.fraud_details is None
        assert charge.metadata == {"order": "6735"}

    @pytest.mark.unit
    def test_source_with_unknown_object_fails(self, charge_json, card_json):
        charge_json["source"] = {**card_json, "object": "ach_credit_transfer"}

        with pytest.raises(UnknownVariantError) as exc_info:
            Charge.from_json(charge_json)

        assert exc_info.value.path == ("source", "object")

    @pytest.mark.unit
    def test_stripe_object_registry(self, charge_json):
        assert isinstance(decode_stripe_object(charge_json), Charge)


class TestCustomer:
    @pytest.mark.unit
    def test_from_json_with_sources(self, card_json, bitcoin_receiver_json):
        customer = Customer.from_json(
            {
                "id": "cus_123",
                "object": "customer",
                "created": 1700000000,
                "livemode": False,
                "email": "jenny@example.com",
                "sources": {
                    "object": "list",
                    "url": "/v1/customers/cus_123/sources",
                    "has_more": False,
                    "data": [card_json, bitcoin_receiver_json],
                },
            }
        )

        assert customer.email == "jenny@example.com"
        assert customer.delinquent is False
        assert customer.account_balance == 0
        assert customer.sources is not None
        assert [type(source).__name__ for source in customer.sources] == ["Card", "BitcoinReceiver"]


class TestChargeInput:
    @pytest.mark.unit
    def test_form_encoding(self):
        charge_input = ChargeInput(
            amount=2000,
            currency="eur",
            source=TokenSource("tok_visa"),
            capture=False,
            statement_descriptor="ACME ORDER 6735",
            metadata={"order": "6735"},
        )

        assert encode_form(charge_input) == {
            "amount": "2000",
            "currency": "eur",
            "source": "tok_visa",
            "capture": "false",
            "statement_descriptor": "ACME ORDER 6735",
            "metadata[order]": "6735",
        }

    @pytest.mark.unit
    def test_negative_amount_rejected(self):
        with pytest.raises(ValueError, match="must not be negative"):
            ChargeInput(amount=-1, currency="eur", customer="cus_123")

    @pytest.mark.unit
    def test_source_or_customer_required(self):
        with pytest.raises(ValueError, match="source or a customer"):
            ChargeInput(amount=100, currency="eur")

    @pytest.mark.unit
    def test_descriptor_validated_on_construction(self):
        with pytest.raises(StatementDescriptorTooLongError):
            ChargeInput(amount=100, currency="eur", customer="cus_123", statement_descriptor="X" * 23)


class TestStatementDescriptor:
    @pytest.mark.unit
    def test_valid(self):
        assert validate_statement_descriptor("X" * 22) == "X" * 22
        assert validate_statement_descriptor(None) is None

    @pytest.mark.unit
    def test_too_long(self):
        with pytest.raises(StatementDescriptorTooLongError) as exc_info:
            validate_statement_descriptor("THIS DESCRIPTOR IS TOO LONG")

        assert exc_info.value.length == 27
        assert "22" in str(exc_info.value)

    @pytest.mark.unit
    @pytest.mark.parametrize("character", ["<", ">", '"', "'"])
    def test_invalid_characters(self, character):
        with pytest.raises(StatementDescriptorInvalidCharacterError) as exc_info:
            validate_statement_descriptor(f"ACME{character}")

        assert exc_info.value.character == character


class TestListFilters:
    @pytest.mark.unit
    def test_range_params(self):
        assert list_filter_params(Range(gte=T0), "created") == {"created[gte]": "1700000000"}

    @pytest.mark.unit
    def test_timestamp_params(self):
        assert list_filter_params(Timestamp(T0), "created") == {"created": "1700000000"}

    @pytest.mark.unit
    def test_decode_timestamp_filter(self):
        assert decode_list_filter(1700000000) == Timestamp(T0)
        assert decode_list_filter("1700000000") == Timestamp(T0)

    @pytest.mark.unit
    def test_decode_range_filter(self):
        assert decode_list_filter({"gt": 1700000000, "lte": 1700000100}).to_json() == {
            "gt": 1700000000,
            "lte": 1700000100,
        }

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["yesterday", True, None, [1700000000]])
    def test_decode_invalid_filter(self, value):
        with pytest.raises(DecodeError):
            decode_list_filter(value)


@pytest.mark.unit
def test_delete_response():
    response = DeleteResponse.from_json({"id": "cus_123", "deleted": True, "object": "customer"})

    assert response == DeleteResponse("cus_123", True)
    assert response.to_json() == {"id": "cus_123", "deleted": True}
