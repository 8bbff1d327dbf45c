"""Form encoding for POST bodies.

Stripe takes ``application/x-www-form-urlencoded`` bodies with nested objects
flattened into bracket notation::

    {"legal_entity": {"address": {"city": "Berlin"}}}
    -> {"legal_entity[address][city]": "Berlin"}

``None`` is never sent: an absent optional field produces no key at all.
"""

import dataclasses
from collections.abc import Mapping
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from stripe_client_core.codec.decoding import encode_timestamp


def encode_form(value: Any) -> dict[str, str]:
    """Flatten a mapping, dataclass or ``to_form()`` object into form fields.

    Args:
        value: Top-level input. Must encode to a mapping.

    Returns:
        Flat ``key -> value`` pairs ready to be sent as form data.

    Raises:
        TypeError: If the value is a scalar or cannot be encoded.
    """
    fields = _to_mapping(value)
    if fields is None:
        raise TypeError(f"Cannot form-encode top-level value of type {type(value).__name__}")

    params: dict[str, str] = {}
    for key, item in fields.items():
        _flatten(str(key), item, params)
    return params


def prefix_params(prefix: str, params: Mapping[str, str] | None) -> dict[str, str]:
    """Nest already-flat params under ``prefix``.

    ``prefix_params("metadata", {"order": "6735"}) == {"metadata[order]": "6735"}``
    """
    if not params:
        return {}
    return {f"{prefix}[{key}]": value for key, value in params.items()}


def format_scalar(value: Any) -> str:
    """Render a scalar the way Stripe expects it in form data."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return str(encode_timestamp(value))
    if isinstance(value, Enum):
        return format_scalar(value.value)
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, (str, int, float)):
        return str(value)
    raise TypeError(f"Cannot form-encode value of type {type(value).__name__}")


def _to_mapping(value: Any) -> Mapping[str, Any] | None:
    to_form = getattr(value, "to_form", None)
    if callable(to_form):
        value = to_form()
    if isinstance(value, Mapping):
        return value
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
    return None


def _flatten(key: str, value: Any, params: dict[str, str]) -> None:
    if value is None:
        return

    to_form = getattr(value, "to_form", None)
    if callable(to_form):
        value = to_form()
        if value is None:
            return

    nested = _to_mapping(value)
    if nested is not None:
        for child_key, child in nested.items():
            _flatten(f"{key}[{child_key}]", child, params)
        return

    if isinstance(value, (list, tuple)):
        for index, child in enumerate(value):
            _flatten(f"{key}[{index}]", child, params)
        return

    params[key] = format_scalar(value)
