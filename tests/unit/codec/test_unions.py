"""Tests for structural and discriminated union decoding."""

import pytest

from stripe_client_core.codec.decoding import DecodeError, UnknownVariantError
from stripe_client_core.codec.unions import DiscriminatedUnion, structural_union
from stripe_client_core.models.payment_sources import (
    BitcoinReceiver,
    Card,
    CardSource,
    TokenSource,
    decode_charge_source,
    decode_payment_source,
)


class TestStructuralUnion:
    @pytest.mark.unit
    def test_string_decodes_to_reference(self):
        assert decode_charge_source("tok_123") == TokenSource("tok_123")

    @pytest.mark.unit
    def test_object_decodes_to_full_variant(self):
        source = decode_charge_source({"exp_month": 12, "exp_year": 2030, "number": "4242424242424242"})

        assert isinstance(source, CardSource)
        assert source.number == "4242424242424242"
        assert source.cvc is None

    @pytest.mark.unit
    @pytest.mark.parametrize("value", [42, None, ["tok_123"], True])
    def test_other_json_types_fail(self, value):
        with pytest.raises(DecodeError, match="invalid ChargeSource"):
            decode_charge_source(value)

    @pytest.mark.unit
    def test_custom_decoders(self):
        decode = structural_union(reference=str.upper, full=dict, name="Thing")

        assert decode("abc") == "ABC"
        assert decode({"a": 1}) == {"a": 1}


class TestDiscriminatedUnion:
    @pytest.mark.unit
    def test_card(self, card_json):
        source = decode_payment_source(card_json)

        assert isinstance(source, Card)
        assert source.last4 == "4242"

    @pytest.mark.unit
    def test_bitcoin_receiver(self, bitcoin_receiver_json):
        source = decode_payment_source(bitcoin_receiver_json)

        assert isinstance(source, BitcoinReceiver)
        assert source.inbound_address == "test_7i9Fo4b5wXcUAuoVBFrc7nc9HDxD1"

    @pytest.mark.unit
    def test_unknown_discriminator_never_falls_back(self, card_json):
        """An unregistered tag fails even when the rest of the object fits a known variant."""
        with pytest.raises(UnknownVariantError) as exc_info:
            decode_payment_source({**card_json, "object": "bank_account"})

        assert exc_info.value.value == "bank_account"
        assert exc_info.value.union == "PaymentSource"
        assert exc_info.value.path == ("object",)

    @pytest.mark.unit
    def test_missing_discriminator(self, card_json):
        data = dict(card_json)
        del data["object"]

        with pytest.raises(DecodeError) as exc_info:
            decode_payment_source(data)

        assert not isinstance(exc_info.value, UnknownVariantError)
        assert exc_info.value.path == ("object",)

    @pytest.mark.unit
    def test_non_string_discriminator(self, card_json):
        with pytest.raises(DecodeError) as exc_info:
            decode_payment_source({**card_json, "object": 1})

        assert exc_info.value.path == ("object",)

    @pytest.mark.unit
    def test_variant_errors_propagate(self, card_json):
        with pytest.raises(DecodeError) as exc_info:
            decode_payment_source({**card_json, "exp_month": "eight"})

        assert exc_info.value.path == ("exp_month",)

    @pytest.mark.unit
    def test_registry_is_read_only(self):
        union = DiscriminatedUnion("Pet", {"cat": dict})

        with pytest.raises(TypeError):
            union.variants["dog"] = dict  # type: ignore[index]
        assert list(union.variants) == ["cat"]

    @pytest.mark.unit
    def test_custom_discriminator_field(self):
        union = DiscriminatedUnion("Event", {"charge.succeeded": lambda data: data["id"]}, discriminator="type")

        assert union({"type": "charge.succeeded", "id": "evt_1"}) == "evt_1"
        with pytest.raises(UnknownVariantError):
            union({"type": "charge.failed", "id": "evt_2"})
