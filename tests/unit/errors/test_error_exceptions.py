"""Tests for the exception hierarchy."""

import httpx
import pytest

from stripe_client_core.errors.exceptions import (
    TYPED_ERRORS,
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
from stripe_client_core.errors.models import ErrorBody, ErrorType


@pytest.mark.unit
def test_all_errors_inherit_from_stripe_error():
    for exc_class in (
        TypedError,
        TransientServerError,
        ApiConnectionFailure,
        FatalProtocolError,
        MaxRetriesExceededError,
        RetryCancelledError,
    ):
        assert issubclass(exc_class, StripeError)

    assert issubclass(UnhandledStatusError, FatalProtocolError)
    assert issubclass(InvalidJsonModelError, FatalProtocolError)


@pytest.mark.unit
def test_typed_errors_table():
    assert TYPED_ERRORS == {
        400: BadRequestError,
        401: UnauthorizedError,
        402: RequestFailedError,
        404: NotFoundError,
        429: TooManyRequestsError,
    }


@pytest.mark.unit
def test_typed_error_exposes_body():
    body = ErrorBody(type=ErrorType.AUTHENTICATION_ERROR, message="Invalid API Key provided")
    error = UnauthorizedError(body)

    assert error.status_code == 401
    assert error.body is body
    assert error.type is ErrorType.AUTHENTICATION_ERROR
    assert error.error_message == "Invalid API Key provided"
    assert str(error) == "Invalid API Key provided"
    assert "UnauthorizedError" in repr(error)


@pytest.mark.unit
def test_connection_failure_has_connection_type():
    error = ApiConnectionFailure("connect timeout", url="https://api.stripe.com/v1/charges")

    assert error.type is ErrorType.API_CONNECTION_ERROR
    assert error.status_code is None
    assert error.url == "https://api.stripe.com/v1/charges"


@pytest.mark.unit
def test_transient_server_error_message():
    error = TransientServerError(httpx.Response(503))

    assert error.status_code == 503
    assert "503" in str(error)


@pytest.mark.unit
def test_invalid_json_model_error_keeps_context():
    error = InvalidJsonModelError(
        status_code=200,
        url="https://api.stripe.com/v1/charges/ch_123",
        params=None,
        body='{"id": 5}',
        errors=[ValueError("id: expected string, got int")],
    )

    assert error.json_body == {"id": 5}
    assert error.params is None
    assert "id: expected string, got int" in str(error)


@pytest.mark.unit
def test_invalid_json_model_error_non_json_body():
    error = InvalidJsonModelError(status_code=200, url="u", params={"a": "b"}, body="<html>", errors=[ValueError()])

    assert error.json_body is None
    assert error.params == {"a": "b"}


@pytest.mark.unit
def test_max_retries_exceeded_keeps_last_error():
    last = ApiConnectionFailure("reset")
    error = MaxRetriesExceededError(4, last)

    assert str(error) == "Went over max number of retries, retries is 4"
    assert error.last_error is last
