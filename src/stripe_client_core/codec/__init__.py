"""Wire codec: form encoding for requests, typed JSON decoding for responses."""

from stripe_client_core.codec.decoding import (
    Decoder,
    DecodeError,
    UnknownVariantError,
    decode_bool,
    decode_decimal,
    decode_enum,
    decode_int,
    decode_list,
    decode_map,
    decode_str,
    decode_timestamp,
    encode_timestamp,
    expect_object,
    optional,
    optional_non_empty,
    required,
)
from stripe_client_core.codec.form import encode_form, format_scalar, prefix_params
from stripe_client_core.codec.unions import DiscriminatedUnion, structural_union

__all__ = [
    "DecodeError",
    "Decoder",
    "DiscriminatedUnion",
    "UnknownVariantError",
    "decode_bool",
    "decode_decimal",
    "decode_enum",
    "decode_int",
    "decode_list",
    "decode_map",
    "decode_str",
    "decode_timestamp",
    "encode_form",
    "encode_timestamp",
    "expect_object",
    "format_scalar",
    "optional",
    "optional_non_empty",
    "prefix_params",
    "required",
    "structural_union",
]
