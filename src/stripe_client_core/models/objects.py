"""Top-level Stripe objects and the ``StripeObject`` registry.

Only the fields the core needs to exercise are modelled; resource modules
extend these with their own fields.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from stripe_client_core.codec.decoding import (
    decode_bool,
    decode_int,
    decode_map,
    decode_str,
    decode_timestamp,
    expect_object,
    optional,
    optional_non_empty,
    required,
)
from stripe_client_core.codec.unions import DiscriminatedUnion
from stripe_client_core.models.common import validate_statement_descriptor
from stripe_client_core.models.payment_sources import (
    BitcoinReceiver,
    Card,
    ChargeSource,
    PaymentSource,
    decode_payment_source,
    decode_payment_source_list,
)
from stripe_client_core.pagination import ListEnvelope


@dataclass(frozen=True)
class Customer:
    id: str
    created: datetime
    livemode: bool
    delinquent: bool = False
    account_balance: int = 0
    currency: str | None = None
    default_source: str | None = None
    description: str | None = None
    email: str | None = None
    metadata: dict[str, str] | None = None
    sources: ListEnvelope[PaymentSource] | None = None

    @classmethod
    def from_json(cls, data: Any) -> "Customer":
        data = expect_object(data)
        return cls(
            id=required(data, "id", decode_str),
            created=required(data, "created", decode_timestamp),
            livemode=required(data, "livemode", decode_bool),
            delinquent=optional(data, "delinquent", decode_bool) or False,
            account_balance=optional(data, "account_balance", decode_int) or 0,
            currency=optional(data, "currency", decode_str),
            default_source=optional(data, "default_source", decode_str),
            description=optional(data, "description", decode_str),
            email=optional(data, "email", decode_str),
            metadata=optional_non_empty(data, "metadata", decode_map()),
            sources=optional(data, "sources", decode_payment_source_list),
        )


@dataclass(frozen=True)
class Charge:
    id: str
    amount: int
    amount_refunded: int
    captured: bool
    created: datetime
    currency: str
    livemode: bool
    paid: bool
    refunded: bool
    status: str
    source: PaymentSource | None = None
    customer: str | None = None
    description: str | None = None
    failure_code: str | None = None
    failure_message: str | None = None
    fraud_details: dict[str, str] | None = None
    metadata: dict[str, str] | None = None
    statement_descriptor: str | None = None

    @classmethod
    def from_json(cls, data: Any) -> "Charge":
        data = expect_object(data)
        return cls(
            id=required(data, "id", decode_str),
            amount=required(data, "amount", decode_int),
            amount_refunded=required(data, "amount_refunded", decode_int),
            captured=required(data, "captured", decode_bool),
            created=required(data, "created", decode_timestamp),
            currency=required(data, "currency", decode_str),
            livemode=required(data, "livemode", decode_bool),
            paid=required(data, "paid", decode_bool),
            refunded=required(data, "refunded", decode_bool),
            status=required(data, "status", decode_str),
            source=optional(data, "source", decode_payment_source),
            customer=optional(data, "customer", decode_str),
            description=optional(data, "description", decode_str),
            failure_code=optional(data, "failure_code", decode_str),
            failure_message=optional(data, "failure_message", decode_str),
            fraud_details=optional_non_empty(data, "fraud_details", decode_map()),
            metadata=optional_non_empty(data, "metadata", decode_map()),
            statement_descriptor=optional(data, "statement_descriptor", decode_str),
        )


@dataclass(frozen=True)
class ChargeInput:
    """Form input for creating a charge.

    The statement descriptor is validated on construction, so an invalid
    input never reaches the network.
    """

    amount: int
    currency: str
    source: ChargeSource | None = None
    customer: str | None = None
    capture: bool | None = None
    description: str | None = None
    receipt_email: str | None = None
    statement_descriptor: str | None = None
    metadata: dict[str, str] | None = None

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError(f"Charge amount must not be negative, got {self.amount}")
        if self.source is None and self.customer is None:
            raise ValueError("A charge needs a source or a customer")
        validate_statement_descriptor(self.statement_descriptor)


decode_stripe_object = DiscriminatedUnion(
    "StripeObject",
    {
        "card": Card.from_json,
        "bitcoin_receiver": BitcoinReceiver.from_json,
        "customer": Customer.from_json,
        "charge": Charge.from_json,
    },
)
