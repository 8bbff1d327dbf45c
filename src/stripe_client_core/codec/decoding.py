"""Strongly-typed JSON decoding helpers.

A decoder is any callable taking a parsed JSON value and returning a typed
value, raising :class:`DecodeError` when the value does not match. Field
helpers (``required``/``optional``) prefix the failing key onto the error path
so a nested failure reports where in the document it happened.

Example:
    ```python
    def decode_refund(data):
        data = expect_object(data)
        return Refund(
            id=required(data, "id", decode_str),
            created=required(data, "created", decode_timestamp),
            reason=optional(data, "reason", decode_str),
        )
    ```
"""

from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, TypeVar

T = TypeVar("T")
E = TypeVar("E", bound=Enum)

Decoder = Callable[[Any], T]


class DecodeError(ValueError):
    """Raised when a JSON value does not match the expected shape.

    Attributes:
        path: JSON path to the failing value, outermost key first.
        reason: Human-readable reason, without the path.
    """

    def __init__(self, reason: str, path: tuple[str | int, ...] = ()):
        self.reason = reason
        self.path = path
        super().__init__(self._format())

    def _format(self) -> str:
        if not self.path:
            return self.reason
        return f"{format_path(self.path)}: {self.reason}"

    def at(self, key: str | int) -> "DecodeError":
        """Return a copy of this error located one level deeper under ``key``."""
        error = self.__class__.__new__(self.__class__)
        error.__dict__.update(self.__dict__)
        error.path = (key, *self.path)
        ValueError.__init__(error, error._format())
        return error


class UnknownVariantError(DecodeError):
    """Raised when a discriminator value matches no registered variant."""

    def __init__(self, union: str, value: Any, path: tuple[str | int, ...] = ()):
        self.union = union
        self.value = value
        super().__init__(f"Unknown {union} variant {value!r}", path)


def format_path(path: tuple[str | int, ...]) -> str:
    """Render a path as ``data[0].source.object``."""
    rendered = ""
    for key in path:
        if isinstance(key, int):
            rendered += f"[{key}]"
        else:
            rendered += f".{key}" if rendered else key
    return rendered


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    return type(value).__name__


def expect_object(value: Any) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise DecodeError(f"expected object, got {_type_name(value)}")
    return value


def decode_str(value: Any) -> str:
    if not isinstance(value, str):
        raise DecodeError(f"expected string, got {_type_name(value)}")
    return value


def decode_bool(value: Any) -> bool:
    if not isinstance(value, bool):
        raise DecodeError(f"expected boolean, got {_type_name(value)}")
    return value


def decode_int(value: Any) -> int:
    # bool is an int subclass; JSON true/false is never a number
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"expected integer, got {_type_name(value)}")
    return value


def decode_decimal(value: Any) -> Decimal:
    """Decode a JSON number (or numeric string) into a ``Decimal``."""
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise DecodeError(f"expected number, got {_type_name(value)}")
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise DecodeError(f"expected number, got {value!r}") from None


def decode_timestamp(value: Any) -> datetime:
    """Decode integer seconds since the epoch into an aware UTC datetime.

    Stripe stores every timestamp in Unix time, see
    https://support.stripe.com/questions/what-timezone-does-the-dashboard-and-api-use
    """
    seconds = decode_int(value)
    try:
        return datetime.fromtimestamp(seconds, tz=UTC)
    except (OverflowError, OSError, ValueError):
        raise DecodeError(f"timestamp {seconds} out of range") from None


def encode_timestamp(value: datetime) -> int:
    """Encode a datetime back into integer seconds since the epoch.

    Naive datetimes are taken to be UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return int(value.timestamp())


def decode_enum(enum_cls: type[E], *, insensitive: bool = True) -> Decoder[E]:
    """Build a decoder for a string-valued enum."""

    def decode(value: Any) -> E:
        raw = decode_str(value)
        for member in enum_cls:
            member_value = member.value
            if member_value == raw or (insensitive and member_value.lower() == raw.lower()):
                return member
        raise DecodeError(f"unknown {enum_cls.__name__} value {raw!r}")

    return decode


def decode_list(item: Decoder[T]) -> Decoder[list[T]]:
    def decode(value: Any) -> list[T]:
        if not isinstance(value, list):
            raise DecodeError(f"expected array, got {_type_name(value)}")
        result = []
        for index, element in enumerate(value):
            try:
                result.append(item(element))
            except DecodeError as e:
                raise e.at(index) from None
        return result

    return decode


def decode_map(item: Decoder[T] = decode_str) -> Decoder[dict[str, T]]:
    """Build a decoder for a JSON object with uniformly-typed values (e.g. metadata)."""

    def decode(value: Any) -> dict[str, T]:
        data = expect_object(value)
        result = {}
        for key, element in data.items():
            try:
                result[key] = item(element)
            except DecodeError as e:
                raise e.at(key) from None
        return result

    return decode


def required(data: Mapping[str, Any], key: str, decoder: Decoder[T]) -> T:
    """Decode a field that must be present and not null."""
    if key not in data or data[key] is None:
        raise DecodeError("missing required field", (key,))
    try:
        return decoder(data[key])
    except DecodeError as e:
        raise e.at(key) from None


def optional(data: Mapping[str, Any], key: str, decoder: Decoder[T]) -> T | None:
    """Decode a field where absent and ``null`` both mean ``None``."""
    value = data.get(key)
    if value is None:
        return None
    try:
        return decoder(value)
    except DecodeError as e:
        raise e.at(key) from None


def optional_non_empty(data: Mapping[str, Any], key: str, decoder: Decoder[T]) -> T | None:
    """Like :func:`optional`, but an empty object or array also means ``None``.

    Stripe sends ``{}`` for unset nested objects such as ``fraud_details``.
    """
    value = data.get(key)
    if isinstance(value, (dict, list)) and not value:
        return None
    return optional(data, key, decoder)
