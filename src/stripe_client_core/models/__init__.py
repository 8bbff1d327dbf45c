"""Wire models shared across resources, including the union-typed fields."""

from stripe_client_core.models.common import (
    DeleteResponse,
    ListFilterInput,
    Range,
    StatementDescriptorInvalidCharacterError,
    StatementDescriptorTooLongError,
    Timestamp,
    decode_list_filter,
    list_filter_params,
    validate_statement_descriptor,
)
from stripe_client_core.models.objects import Charge, ChargeInput, Customer, decode_stripe_object
from stripe_client_core.models.payment_sources import (
    BitcoinReceiver,
    BitcoinTransaction,
    Card,
    CardSource,
    ChargeSource,
    PaymentSource,
    TokenSource,
    decode_charge_source,
    decode_payment_source,
    decode_payment_source_list,
)

__all__ = [
    "BitcoinReceiver",
    "BitcoinTransaction",
    "Card",
    "CardSource",
    "Charge",
    "ChargeInput",
    "ChargeSource",
    "Customer",
    "DeleteResponse",
    "ListFilterInput",
    "PaymentSource",
    "Range",
    "StatementDescriptorInvalidCharacterError",
    "StatementDescriptorTooLongError",
    "Timestamp",
    "TokenSource",
    "decode_charge_source",
    "decode_list_filter",
    "decode_payment_source",
    "decode_payment_source_list",
    "decode_stripe_object",
    "list_filter_params",
    "validate_statement_descriptor",
]
