"""Small models shared by many resources."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from stripe_client_core.codec.decoding import (
    DecodeError,
    decode_bool,
    decode_str,
    decode_timestamp,
    encode_timestamp,
    expect_object,
    optional,
    required,
)
from stripe_client_core.codec.form import encode_form
from stripe_client_core.codec.unions import structural_union

STATEMENT_DESCRIPTOR_MAX_LENGTH = 22
STATEMENT_DESCRIPTOR_INVALID_CHARACTERS = ("<", ">", '"', "'")


@dataclass(frozen=True)
class DeleteResponse:
    """Response of every DELETE call."""

    id: str
    deleted: bool

    @classmethod
    def from_json(cls, data: Any) -> "DeleteResponse":
        data = expect_object(data)
        return cls(id=required(data, "id", decode_str), deleted=required(data, "deleted", decode_bool))

    def to_json(self) -> dict[str, Any]:
        return {"id": self.id, "deleted": self.deleted}


class StatementDescriptorTooLongError(ValueError):
    """Raised when a statement descriptor is longer than 22 characters."""

    def __init__(self, length: int):
        super().__init__(
            f"Statement Descriptor must not be longer than {STATEMENT_DESCRIPTOR_MAX_LENGTH} characters, "
            f"input was {length} characters"
        )
        self.length = length


class StatementDescriptorInvalidCharacterError(ValueError):
    """Raised when a statement descriptor contains ``<``, ``>``, ``"`` or ``'``."""

    def __init__(self, character: str):
        super().__init__(f"Statement Descriptor must not contain invalid characters, found {character}")
        self.character = character


def validate_statement_descriptor(value: str | None) -> str | None:
    """Check a statement descriptor before it is sent.

    Returns:
        The descriptor unchanged

    Raises:
        StatementDescriptorTooLongError: More than 22 characters
        StatementDescriptorInvalidCharacterError: Contains a forbidden character
    """
    if value is None:
        return None
    if len(value) > STATEMENT_DESCRIPTOR_MAX_LENGTH:
        raise StatementDescriptorTooLongError(len(value))
    for character in STATEMENT_DESCRIPTOR_INVALID_CHARACTERS:
        if character in value:
            raise StatementDescriptorInvalidCharacterError(character)
    return value


@dataclass(frozen=True)
class Timestamp:
    """List filter matching one exact instant."""

    timestamp: datetime

    def to_form(self) -> datetime:
        return self.timestamp

    def to_json(self) -> int:
        return encode_timestamp(self.timestamp)


@dataclass(frozen=True)
class Range:
    """List filter matching a range of instants. Unset bounds are not sent."""

    gt: datetime | None = None
    gte: datetime | None = None
    lt: datetime | None = None
    lte: datetime | None = None

    @classmethod
    def from_json(cls, data: Any) -> "Range":
        data = expect_object(data)
        return cls(
            gt=optional(data, "gt", decode_timestamp),
            gte=optional(data, "gte", decode_timestamp),
            lt=optional(data, "lt", decode_timestamp),
            lte=optional(data, "lte", decode_timestamp),
        )

    def to_json(self) -> dict[str, int]:
        bounds = {"gt": self.gt, "gte": self.gte, "lt": self.lt, "lte": self.lte}
        return {key: encode_timestamp(value) for key, value in bounds.items() if value is not None}


ListFilterInput = Timestamp | Range


def _decode_timestamp_filter(value: Any) -> Timestamp:
    if isinstance(value, str):
        if not value.isdigit():
            raise DecodeError(f"expected integer timestamp, got {value!r}")
        value = int(value)
    return Timestamp(decode_timestamp(value))


_decode_filter_object = structural_union(reference=_decode_timestamp_filter, full=Range.from_json, name="ListFilterInput")


def decode_list_filter(value: Any) -> ListFilterInput:
    """Decode a list filter: a number or numeric string is a ``Timestamp``, an object a ``Range``."""
    if isinstance(value, int) and not isinstance(value, bool):
        return _decode_timestamp_filter(value)
    return _decode_filter_object(value)


def list_filter_params(list_filter: ListFilterInput, key: str) -> dict[str, str]:
    """Query params for a list filter.

    ``list_filter_params(Range(gte=t), "created") == {"created[gte]": "1700000000"}``
    """
    return encode_form({key: list_filter})
