"""Structured exceptions for Stripe API errors.

The taxonomy is closed:

- :class:`TypedError` variants (400/401/402/404/429) carry the decoded error
  body and are surfaced to the caller.
- :class:`TransientServerError` (500/502/503/504) and
  :class:`ApiConnectionFailure` leave the effect of a request unknown and are
  retried by the retry controller.
- :class:`FatalProtocolError` (unknown status or undecodable body) is never
  retried.
"""

import json
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from stripe_client_core.errors.models import ErrorBody, ErrorCode, ErrorType

if TYPE_CHECKING:
    import httpx

    from stripe_client_core.codec.decoding import DecodeError


class StripeError(Exception):
    """Base exception for every error raised by the client."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response: "httpx.Response | None" = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response = response


class TypedError(StripeError):
    """An error response whose ``error`` body decoded successfully.

    The concrete subclass is determined by the HTTP status alone.
    """

    http_status: int = 0

    def __init__(self, body: ErrorBody, response: "httpx.Response | None" = None):
        super().__init__(body.to_exception_message(), status_code=self.http_status, response=response)
        self.body = body

    @property
    def type(self) -> ErrorType:
        return self.body.type

    @property
    def code(self) -> ErrorCode | None:
        return self.body.code

    @property
    def param(self) -> str | None:
        return self.body.param

    @property
    def error_message(self) -> str | None:
        """The ``message`` field of the error body, which may be absent."""
        return self.body.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.body!r})"


class BadRequestError(TypedError):
    """400 Bad Request, often a missing parameter."""

    http_status = 400


class UnauthorizedError(TypedError):
    """401 Unauthorized, no valid API key provided."""

    http_status = 401


class RequestFailedError(TypedError):
    """402 Request Failed, parameters were valid but the request failed."""

    http_status = 402


class NotFoundError(TypedError):
    """404 Not Found."""

    http_status = 404


class TooManyRequestsError(TypedError):
    """429 Too Many Requests."""

    http_status = 429

    def __init__(self, body: ErrorBody, response: "httpx.Response | None" = None, retry_after: float | None = None):
        super().__init__(body, response=response)
        self.retry_after = retry_after


TYPED_ERRORS: Mapping[int, type[TypedError]] = {
    cls.http_status: cls
    for cls in (BadRequestError, UnauthorizedError, RequestFailedError, NotFoundError, TooManyRequestsError)
}


class TransientServerError(StripeError):
    """500, 502, 503 or 504 from Stripe. The body is not decoded."""

    RETRYABLE_STATUS_CODES: frozenset[int] = frozenset([500, 502, 503, 504])

    def __init__(self, response: "httpx.Response"):
        super().__init__(
            f"Stripe server error, status code is {response.status_code}",
            status_code=response.status_code,
            response=response,
        )


class ApiConnectionFailure(StripeError):
    """The request never produced a response (connect error, timeout, ...)."""

    type = ErrorType.API_CONNECTION_ERROR

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message)
        self.url = url


class FatalProtocolError(StripeError):
    """The response cannot be interpreted. Never retried."""


class UnhandledStatusError(FatalProtocolError):
    """A non-2xx status outside the handled set.

    Attributes:
        url: The URL of the call.
        params: The request parameters (form fields or query), if any.
        body: The raw response body.
    """

    def __init__(
        self,
        response: "httpx.Response",
        url: str | None = None,
        params: Mapping[str, str] | None = None,
        body: str | None = None,
    ):
        super().__init__(
            f"Unhandled server error, status code is {response.status_code}",
            status_code=response.status_code,
            response=response,
        )
        self.url = url
        self.params = dict(params) if params is not None else None
        self.body = response.text if body is None else body


class InvalidJsonModelError(FatalProtocolError):
    """The response body could not be parsed or decoded into the expected model.

    Attributes:
        url: The URL of the call.
        params: The request parameters (form fields or query), if any.
        body: The raw response body.
        errors: The decode errors, outermost first.
    """

    def __init__(
        self,
        *,
        status_code: int,
        url: str,
        params: Mapping[str, str] | None,
        body: str,
        errors: "list[DecodeError | ValueError]",
        response: "httpx.Response | None" = None,
    ):
        super().__init__(
            f"Invalid JSON model, errors are {[str(e) for e in errors]}",
            status_code=status_code,
            response=response,
        )
        self.url = url
        self.params = dict(params) if params is not None else None
        self.body = body
        self.errors = errors

    @property
    def json_body(self) -> Any:
        """The raw body parsed as JSON, or ``None`` if it is not JSON."""
        try:
            return json.loads(self.body)
        except ValueError:
            return None


class MaxRetriesExceededError(StripeError):
    """The retry bound was exhausted without a definitive answer.

    ``number_of_retries`` counts the retries after the first attempt.
    """

    def __init__(self, number_of_retries: int, last_error: StripeError):
        super().__init__(f"Went over max number of retries, retries is {number_of_retries}")
        self.number_of_retries = number_of_retries
        self.last_error = last_error


class RetryCancelledError(StripeError):
    """Cancellation was requested before the call reached a final answer."""

    def __init__(self, attempts: int, last_error: StripeError | None = None):
        super().__init__(f"Retries cancelled after {attempts} attempt(s)")
        self.attempts = attempts
        self.last_error = last_error
