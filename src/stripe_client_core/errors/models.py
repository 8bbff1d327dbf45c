"""Stripe error envelope models.

Every handled error response has the shape::

    {"error": {"type": "card_error", "code": "card_declined", "message": "...", "param": "..."}}

See: https://stripe.com/docs/api#errors
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from stripe_client_core.codec.decoding import decode_enum, decode_str, expect_object, optional, required


class ErrorType(str, Enum):
    """The ``type`` of a Stripe error."""

    API_CONNECTION_ERROR = "api_connection_error"
    API_ERROR = "api_error"
    AUTHENTICATION_ERROR = "authentication_error"
    CARD_ERROR = "card_error"
    INVALID_REQUEST_ERROR = "invalid_request_error"
    RATE_LIMIT_ERROR = "rate_limit_error"


class ErrorCode(str, Enum):
    """The ``code`` of a Stripe error, mostly card and validation sub-reasons."""

    INVALID_NUMBER = "invalid_number"
    INVALID_EXPIRY_MONTH = "invalid_expiry_month"
    INVALID_EXPIRY_YEAR = "invalid_expiry_year"
    INVALID_CVC = "invalid_cvc"
    INCORRECT_NUMBER = "incorrect_number"
    EXPIRED_CARD = "expired_card"
    INCORRECT_CVC = "incorrect_cvc"
    INCORRECT_ZIP = "incorrect_zip"
    CARD_DECLINED = "card_declined"
    MISSING = "missing"
    PROCESSING_ERROR = "processing_error"


decode_error_type = decode_enum(ErrorType)
decode_error_code = decode_enum(ErrorCode)


@dataclass(frozen=True)
class ErrorBody:
    """The decoded ``error`` sub-object of an error response."""

    type: ErrorType
    code: ErrorCode | None = None
    message: str | None = None
    param: str | None = None

    @classmethod
    def from_json(cls, data: Any) -> "ErrorBody":
        data = expect_object(data)
        return cls(
            type=required(data, "type", decode_error_type),
            code=optional(data, "code", decode_error_code),
            message=optional(data, "message", decode_str),
            param=optional(data, "param", decode_str),
        )

    @classmethod
    def from_envelope(cls, data: Any) -> "ErrorBody":
        """Decode the full ``{"error": {...}}`` envelope."""
        envelope = expect_object(data)
        return required(envelope, "error", cls.from_json)

    def to_json(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "code": self.code.value if self.code else None,
            "message": self.message,
            "param": self.param,
        }

    def to_exception_message(self) -> str:
        """Convert the error body to an exception message."""
        parts = [self.message or self.type.value]
        if self.code:
            parts.append(f"code: {self.code.value}")
        if self.param:
            parts.append(f"param: {self.param}")
        return "; ".join(parts)

