"""Retry controller that keeps one idempotency key per logical call.

Each logical call runs through a small state machine::

    ATTEMPTING(0) -> ATTEMPTING(1) -> ... -> SUCCEEDED | FAILED

A key is minted once, before the first attempt, and handed unchanged to every
physical attempt, so Stripe applies the side effect at most once however many
times the request is reissued.

## What gets retried

| Error | Retried |
|-------|---------|
| ``TypedError`` with type ``api_error`` / ``api_connection_error`` | ✅ |
| ``TooManyRequestsError`` (429) | ✅ honours ``Retry-After`` |
| ``TransientServerError`` (500/502/503/504) | ✅ |
| ``ApiConnectionFailure`` (no response) | ✅ |
| Card, authentication, invalid request errors | ❌ certain, not transient |
| ``FatalProtocolError`` | ❌ |

The table is keyed on the error's class and ``type``, never on the HTTP status
alone: a 402 with ``card_error`` is final, a 402 with ``api_error`` is not.

## Example

```python
from stripe_client_core.transport.retry import handle_idempotent

charge = await handle_idempotent(
    lambda key: client.post("/v1/charges", charge_input, Charge.from_json, idempotency_key=key),
    max_retries=3,
)
```
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Generic, TypeVar

from stripe_client_core.errors.exceptions import (
    ApiConnectionFailure,
    MaxRetriesExceededError,
    RetryCancelledError,
    StripeError,
    TooManyRequestsError,
    TransientServerError,
    TypedError,
)
from stripe_client_core.errors.models import ErrorType
from stripe_client_core.keys import IdempotencyKey

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_RETRIES = 3

RETRYABLE_ERROR_TYPES: frozenset[ErrorType] = frozenset([ErrorType.API_ERROR, ErrorType.API_CONNECTION_ERROR])


class RetryState(Enum):
    ATTEMPTING = "attempting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


def is_retryable(error: StripeError) -> bool:
    """Whether an error leaves the request's effect unknown, so it may be reissued."""
    if isinstance(error, TooManyRequestsError):
        return True
    if isinstance(error, TypedError):
        return error.type in RETRYABLE_ERROR_TYPES
    return isinstance(error, (TransientServerError, ApiConnectionFailure))


class RetryController(Generic[T]):
    """Bounded, strictly sequential retry loop for one logical call.

    A controller is single-use: once it reaches ``SUCCEEDED`` or ``FAILED``
    it refuses to run again, and a new logical operation needs a new
    controller (and therefore a new idempotency key).

    Args:
        max_retries: Retries after the first attempt; ``max_retries + 1``
            attempts at most (default: 3)
        idempotency_key: Key to reuse; minted here when not supplied
        idempotent: Whether the request has side effects. When False no key
            is minted and attempts receive ``None``
        backoff_factor: Multiplier for exponential backoff, 0 disables
            sleeping (default: 0.5)
        max_backoff: Maximum backoff time in seconds (default: 20)
        cancel_event: When set, no further attempt is started

    Example:
        ```python
        controller = RetryController(max_retries=5)
        customer = await controller.run(
            lambda key: client.post("/v1/customers", form, Customer.from_json, idempotency_key=key)
        )
        assert controller.state is RetryState.SUCCEEDED
        ```
    """

    def __init__(
        self,
        max_retries: int = DEFAULT_MAX_RETRIES,
        *,
        idempotency_key: IdempotencyKey | None = None,
        idempotent: bool = True,
        backoff_factor: float = 0.5,
        max_backoff: float = 20.0,
        cancel_event: asyncio.Event | None = None,
    ) -> None:
        if max_retries < 0:
            raise ValueError("max_retries must be non-negative")
        if idempotency_key is not None and not idempotent:
            raise ValueError("idempotency_key given for a request without side effects")
        self.max_retries = max_retries
        self.idempotency_key: IdempotencyKey | None = None
        if idempotent:
            self.idempotency_key = idempotency_key or IdempotencyKey.generate()
        self.backoff_factor = backoff_factor
        self.max_backoff = max_backoff
        self.cancel_event = cancel_event
        self.state = RetryState.ATTEMPTING
        self.attempts = 0
        self.last_error: StripeError | None = None

    @property
    def finished(self) -> bool:
        return self.state is not RetryState.ATTEMPTING

    async def run(self, request: Callable[[IdempotencyKey | None], Awaitable[T]]) -> T:
        """Run ``request`` until it succeeds, fails for certain, or the bound is hit.

        Args:
            request: Performs one physical attempt with the given key, which is
                ``None`` for a controller built with ``idempotent=False``

        Returns:
            The value of the first successful attempt

        Raises:
            MaxRetriesExceededError: Every allowed attempt failed transiently
            RetryCancelledError: ``cancel_event`` was set between attempts
            StripeError: The first error that is not retryable
        """
        if self.finished:
            raise RuntimeError(f"Retry controller already finished ({self.state.value})")

        retries = 0
        while True:
            if self._cancelled():
                self.state = RetryState.FAILED
                raise RetryCancelledError(self.attempts, self.last_error)

            self.attempts += 1
            try:
                value = await request(self.idempotency_key)
            except StripeError as e:
                self.last_error = e
                if not is_retryable(e):
                    self.state = RetryState.FAILED
                    raise
            else:
                self.state = RetryState.SUCCEEDED
                return value

            retries += 1
            if retries > self.max_retries:
                self.state = RetryState.FAILED
                raise MaxRetriesExceededError(self.max_retries, self.last_error) from self.last_error

            delay = self._calculate_delay(self.last_error, retries)
            logger.warning(
                f"Request failed with {self.last_error.__class__.__name__}: {self.last_error}, "
                f"retrying in {delay}s (attempt {retries}/{self.max_retries})"
            )
            await self._wait(delay)

    def _cancelled(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()

    async def _wait(self, delay: float) -> None:
        if delay <= 0:
            return
        if self.cancel_event is None:
            await asyncio.sleep(delay)
            return
        # Wake up early when cancellation is requested during backoff
        try:
            await asyncio.wait_for(self.cancel_event.wait(), timeout=delay)
        except TimeoutError:
            pass

    def _calculate_delay(self, error: StripeError, retry_number: int) -> float:
        """Backoff before the next attempt.

        ``Retry-After`` on a 429 wins, otherwise
        ``min(backoff_factor * (2 ** (retry_number - 1)), max_backoff)``.
        Default sequence: 0.5, 1, 2, 4, 8 seconds.
        """
        if isinstance(error, TooManyRequestsError) and error.retry_after is not None:
            return min(error.retry_after, self.max_backoff)
        delay = self.backoff_factor * (2 ** (retry_number - 1))
        return min(delay, self.max_backoff)


async def handle(
    request: Callable[[], Awaitable[T]],
    max_retries: int = DEFAULT_MAX_RETRIES,
    **controller_options,
) -> T:
    """Run a request without side effects (GET) under the retry policy.

    No idempotency key is minted since nothing is sent with it.
    """
    controller: RetryController[T] = RetryController(max_retries, idempotent=False, **controller_options)
    return await controller.run(lambda _key: request())


async def handle_idempotent(
    request: Callable[[IdempotencyKey], Awaitable[T]],
    max_retries: int = DEFAULT_MAX_RETRIES,
    *,
    idempotency_key: IdempotencyKey | None = None,
    **controller_options,
) -> T:
    """Run a request with side effects under the retry policy.

    One idempotency key (``idempotency_key`` or a fresh one) is passed to
    every attempt, so duplicate side effects such as two charges cannot
    happen.
    """
    controller: RetryController[T] = RetryController(
        max_retries, idempotency_key=idempotency_key, **controller_options
    )
    return await controller.run(request)
