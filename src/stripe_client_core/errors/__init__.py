"""Error taxonomy for Stripe API responses."""

from stripe_client_core.errors.exceptions import (
    ApiConnectionFailure,
    BadRequestError,
    FatalProtocolError,
    InvalidJsonModelError,
    MaxRetriesExceededError,
    NotFoundError,
    RequestFailedError,
    RetryCancelledError,
    StripeError,
    TooManyRequestsError,
    TransientServerError,
    TypedError,
    UnauthorizedError,
    UnhandledStatusError,
)
from stripe_client_core.errors.handler import classify_response, parse_retry_after, raise_for_status, transform_param
from stripe_client_core.errors.models import ErrorBody, ErrorCode, ErrorType

__all__ = [
    "ApiConnectionFailure",
    "BadRequestError",
    "ErrorBody",
    "ErrorCode",
    "ErrorType",
    "FatalProtocolError",
    "InvalidJsonModelError",
    "MaxRetriesExceededError",
    "NotFoundError",
    "RequestFailedError",
    "RetryCancelledError",
    "StripeError",
    "TooManyRequestsError",
    "TransientServerError",
    "TypedError",
    "UnauthorizedError",
    "UnhandledStatusError",
    "classify_response",
    "parse_retry_after",
    "raise_for_status",
    "transform_param",
]
