"""Payment source models and the unions built from them.

- ``PaymentSource`` (responses): a card or a bitcoin receiver, told apart by
  the ``"object"`` discriminator.
- ``ChargeSource`` (charge input): a token id string, or full card details.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any

from stripe_client_core.codec.decoding import (
    decode_bool,
    decode_decimal,
    decode_int,
    decode_map,
    decode_str,
    decode_timestamp,
    expect_object,
    optional,
    optional_non_empty,
    required,
)
from stripe_client_core.codec.unions import DiscriminatedUnion, structural_union
from stripe_client_core.pagination import ListEnvelope


@dataclass(frozen=True)
class Card:
    """A card attached to a customer or charge."""

    id: str
    brand: str
    exp_month: int
    exp_year: int
    funding: str
    last4: str
    address_city: str | None = None
    address_country: str | None = None
    address_line1: str | None = None
    address_line2: str | None = None
    address_state: str | None = None
    address_zip: str | None = None
    country: str | None = None
    customer: str | None = None
    cvc_check: str | None = None
    name: str | None = None
    metadata: dict[str, str] | None = None

    @classmethod
    def from_json(cls, data: Any) -> "Card":
        data = expect_object(data)
        return cls(
            id=required(data, "id", decode_str),
            brand=required(data, "brand", decode_str),
            exp_month=required(data, "exp_month", decode_int),
            exp_year=required(data, "exp_year", decode_int),
            funding=required(data, "funding", decode_str),
            last4=required(data, "last4", decode_str),
            address_city=optional(data, "address_city", decode_str),
            address_country=optional(data, "address_country", decode_str),
            address_line1=optional(data, "address_line1", decode_str),
            address_line2=optional(data, "address_line2", decode_str),
            address_state=optional(data, "address_state", decode_str),
            address_zip=optional(data, "address_zip", decode_str),
            country=optional(data, "country", decode_str),
            customer=optional(data, "customer", decode_str),
            cvc_check=optional(data, "cvc_check", decode_str),
            name=optional(data, "name", decode_str),
            metadata=optional_non_empty(data, "metadata", decode_map()),
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "object": "card",
            "brand": self.brand,
            "exp_month": self.exp_month,
            "exp_year": self.exp_year,
            "funding": self.funding,
            "last4": self.last4,
            "address_city": self.address_city,
            "address_country": self.address_country,
            "address_line1": self.address_line1,
            "address_line2": self.address_line2,
            "address_state": self.address_state,
            "address_zip": self.address_zip,
            "country": self.country,
            "customer": self.customer,
            "cvc_check": self.cvc_check,
            "name": self.name,
            "metadata": self.metadata,
        }


@dataclass(frozen=True)
class BitcoinTransaction:
    id: str
    amount: Decimal
    bitcoin_amount: Decimal
    created: datetime
    currency: str
    receiver: str

    @classmethod
    def from_json(cls, data: Any) -> "BitcoinTransaction":
        data = expect_object(data)
        return cls(
            id=required(data, "id", decode_str),
            amount=required(data, "amount", decode_decimal),
            bitcoin_amount=required(data, "bitcoin_amount", decode_decimal),
            created=required(data, "created", decode_timestamp),
            currency=required(data, "currency", decode_str),
            receiver=required(data, "receiver", decode_str),
        )


@dataclass(frozen=True)
class BitcoinReceiver:
    """A bitcoin receiver used as a payment source."""

    id: str
    active: bool
    amount: Decimal
    amount_received: Decimal
    bitcoin_amount: Decimal
    bitcoin_amount_received: Decimal
    bitcoin_uri: str
    created: datetime
    currency: str
    filled: bool
    inbound_address: str
    livemode: bool
    customer: str | None = None
    description: str | None = None
    email: str | None = None
    payment: str | None = None
    refund_address: str | None = None
    metadata: dict[str, str] | None = None
    transactions: ListEnvelope[BitcoinTransaction] | None = field(default=None, repr=False)

    @classmethod
    def from_json(cls, data: Any) -> "BitcoinReceiver":
        data = expect_object(data)
        return cls(
            id=required(data, "id", decode_str),
            active=required(data, "active", decode_bool),
            amount=required(data, "amount", decode_decimal),
            amount_received=required(data, "amount_received", decode_decimal),
            bitcoin_amount=required(data, "bitcoin_amount", decode_decimal),
            bitcoin_amount_received=required(data, "bitcoin_amount_received", decode_decimal),
            bitcoin_uri=required(data, "bitcoin_uri", decode_str),
            created=required(data, "created", decode_timestamp),
            currency=required(data, "currency", decode_str),
            filled=required(data, "filled", decode_bool),
            inbound_address=required(data, "inbound_address", decode_str),
            livemode=required(data, "livemode", decode_bool),
            customer=optional(data, "customer", decode_str),
            description=optional(data, "description", decode_str),
            email=optional(data, "email", decode_str),
            payment=optional(data, "payment", decode_str),
            refund_address=optional(data, "refund_address", decode_str),
            metadata=optional_non_empty(data, "metadata", decode_map()),
            transactions=optional(data, "transactions", ListEnvelope.decoder(BitcoinTransaction.from_json)),
        )


PaymentSource = Card | BitcoinReceiver

decode_payment_source: DiscriminatedUnion[PaymentSource] = DiscriminatedUnion(
    "PaymentSource",
    {
        "card": Card.from_json,
        "bitcoin_receiver": BitcoinReceiver.from_json,
    },
)

decode_payment_source_list = ListEnvelope.decoder(decode_payment_source)


@dataclass(frozen=True)
class TokenSource:
    """A charge source given by reference: a token or source id."""

    id: str

    def to_form(self) -> str:
        return self.id


@dataclass(frozen=True)
class CardSource:
    """Full card details used as a charge source."""

    exp_month: int
    exp_year: int
    number: str
    cvc: str | None = None
    name: str | None = None
    address_line1: str | None = None
    address_line2: str | None = None
    address_city: str | None = None
    address_state: str | None = None
    address_zip: str | None = None
    address_country: str | None = None

    @classmethod
    def from_json(cls, data: Any) -> "CardSource":
        data = expect_object(data)
        return cls(
            exp_month=required(data, "exp_month", decode_int),
            exp_year=required(data, "exp_year", decode_int),
            number=required(data, "number", decode_str),
            cvc=optional(data, "cvc", decode_str),
            name=optional(data, "name", decode_str),
            address_line1=optional(data, "address_line1", decode_str),
            address_line2=optional(data, "address_line2", decode_str),
            address_city=optional(data, "address_city", decode_str),
            address_state=optional(data, "address_state", decode_str),
            address_zip=optional(data, "address_zip", decode_str),
            address_country=optional(data, "address_country", decode_str),
        )

    def to_form(self) -> dict[str, Any]:
        return {
            "object": "card",
            "exp_month": self.exp_month,
            "exp_year": self.exp_year,
            "number": self.number,
            "cvc": self.cvc,
            "name": self.name,
            "address_line1": self.address_line1,
            "address_line2": self.address_line2,
            "address_city": self.address_city,
            "address_state": self.address_state,
            "address_zip": self.address_zip,
            "address_country": self.address_country,
        }

    def __repr__(self) -> str:
        return f"CardSource(last4={self.number[-4:]!r}, exp_month={self.exp_month}, exp_year={self.exp_year})"


ChargeSource = TokenSource | CardSource

decode_charge_source = structural_union(reference=TokenSource, full=CardSource.from_json, name="ChargeSource")
