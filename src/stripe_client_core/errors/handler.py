"""Classification of HTTP responses into the error taxonomy."""

import json
import re
from collections.abc import Mapping
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime

import httpx

from stripe_client_core.errors.exceptions import (
    TYPED_ERRORS,
    InvalidJsonModelError,
    StripeError,
    TooManyRequestsError,
    TransientServerError,
    UnhandledStatusError,
)
from stripe_client_core.errors.models import ErrorBody

_SNAKE_SEGMENT = re.compile(r"_([a-z\d])")


def classify_response(
    response: httpx.Response,
    *,
    url: str | None = None,
    params: Mapping[str, str] | None = None,
) -> StripeError | None:
    """Map a response to the error it represents.

    | Status | Result |
    |---|---|
    | 2xx | ``None`` |
    | 400/401/402/404/429 | matching ``TypedError`` decoded from ``error`` |
    | 500/502/503/504 | ``TransientServerError`` |
    | other | ``UnhandledStatusError`` |

    A handled 4xx whose body does not decode becomes ``InvalidJsonModelError``.

    Args:
        response: HTTP response object
        url: Request URL, kept on protocol errors for debugging
        params: Request parameters, kept on protocol errors for debugging

    Returns:
        The classified error, or None for successful responses
    """
    if response.is_success:
        return None

    status_code = response.status_code
    if url is None and _has_request(response):
        url = str(response.request.url)

    if status_code in TYPED_ERRORS:
        exc_class = TYPED_ERRORS[status_code]
        try:
            body = ErrorBody.from_envelope(json.loads(response.text))
        except ValueError as e:
            # DecodeError for a wrong shape, JSONDecodeError for a non-JSON body
            return InvalidJsonModelError(
                status_code=status_code, url=url or "", params=params, body=response.text, errors=[e], response=response
            )

        if exc_class is TooManyRequestsError:
            return TooManyRequestsError(body, response=response, retry_after=parse_retry_after(response))
        return exc_class(body, response=response)

    if status_code in TransientServerError.RETRYABLE_STATUS_CODES:
        return TransientServerError(response)

    return UnhandledStatusError(response, url=url, params=params, body=response.text)


def raise_for_status(
    response: httpx.Response,
    *,
    url: str | None = None,
    params: Mapping[str, str] | None = None,
) -> None:
    """Raise the classified error for a non-2xx response.

    Raises:
        StripeError subclass based on status code and body
    """
    error = classify_response(response, url=url, params=params)
    if error is not None:
        raise error


def parse_retry_after(response: httpx.Response) -> float | None:
    """Parse the Retry-After header from a response.

    Supports both formats:
    - Delay-seconds: "120" (integer seconds)
    - HTTP-date: "Wed, 21 Oct 2015 07:28:00 GMT"

    Returns:
        Delay in seconds, or None if header is missing, negative or invalid
    """
    retry_after = response.headers.get("Retry-After")
    if not retry_after:
        return None

    try:
        delay = int(retry_after)
        return float(delay) if delay >= 0 else None
    except ValueError:
        pass

    try:
        retry_date = parsedate_to_datetime(retry_after)
    except (ValueError, TypeError):
        return None

    if retry_date.tzinfo is None:
        retry_date = retry_date.replace(tzinfo=UTC)
    delay = (retry_date - datetime.now(UTC)).total_seconds()
    # Clock skew can put the date in the past
    return delay if delay >= 0 else None


def transform_param(param: str) -> str:
    """Convert a snake case Stripe param name to camel case.

    Useful to map the ``param`` of an error (e.g. ``exp_month``) back to the
    field it refers to (``expMonth``).
    """
    return _SNAKE_SEGMENT.sub(lambda m: m.group(1).upper(), param)


def _has_request(response: httpx.Response) -> bool:
    try:
        response.request
    except RuntimeError:
        return False
    return True
