"""Request executor for the Stripe API.

``StripeClient`` holds the explicit context every call needs: the API key, the
endpoint and a pooled ``httpx.AsyncClient``. Each call either returns a value
decoded with the caller's decoder or raises a classified
:class:`~stripe_client_core.errors.StripeError`.

Example:
    ```python
    async with StripeClient.from_env() as client:
        charge = await client.post_idempotent(
            "/v1/charges",
            ChargeInput(amount=2000, currency="eur", source=TokenSource("tok_visa")),
            Charge.from_json,
        )
    ```
"""

import asyncio
import json
import logging
from collections.abc import Mapping
from typing import Any, TypeVar

import httpx

from stripe_client_core.auth.credentials import CredentialResolver
from stripe_client_core.codec.decoding import Decoder
from stripe_client_core.codec.form import encode_form
from stripe_client_core.errors.exceptions import ApiConnectionFailure, InvalidJsonModelError
from stripe_client_core.errors.handler import raise_for_status
from stripe_client_core.keys import ApiKey, Endpoint, IdempotencyKey
from stripe_client_core.models.common import DeleteResponse, ListFilterInput, list_filter_params
from stripe_client_core.pagination import ListEnvelope
from stripe_client_core.transport.retry import DEFAULT_MAX_RETRIES, handle, handle_idempotent

logger = logging.getLogger(__name__)

T = TypeVar("T")

IDEMPOTENCY_KEY_HEADER = "Idempotency-Key"
STRIPE_ACCOUNT_HEADER = "Stripe-Account"
STRIPE_VERSION_HEADER = "Stripe-Version"

DEFAULT_TIMEOUT = 30.0

# Form fields whose values never appear in logs
_REDACTED_PARAMS = ("number", "cvc")


class StripeClient:
    """Issues GET/POST/DELETE requests against the Stripe API.

    The underlying ``httpx.AsyncClient`` pools connections and is safe to
    share between many concurrent logical calls. Calls share no other mutable
    state.

    Args:
        api_key: Secret key, sent as the Basic auth username
        endpoint: API base URL (default: https://api.stripe.com)
        http_client: Client to use instead of creating one; not closed by us
        transport: Transport for the created client, e.g. ``httpx.MockTransport``
        timeout: Request timeout in seconds
        stripe_version: Value for the ``Stripe-Version`` header, if any
        max_retries: Retry bound used by the ``*_idempotent``/``*_with_retries`` helpers
        backoff_factor: Backoff multiplier used by those helpers
    """

    def __init__(
        self,
        api_key: ApiKey | str,
        endpoint: Endpoint | str | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        stripe_version: str | None = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
        backoff_factor: float = 0.5,
    ) -> None:
        self.api_key = api_key if isinstance(api_key, ApiKey) else ApiKey(api_key)
        if endpoint is None:
            endpoint = Endpoint()
        self.endpoint = endpoint if isinstance(endpoint, Endpoint) else Endpoint(endpoint)
        self.stripe_version = stripe_version
        self.max_retries = max_retries
        self.backoff_factor = backoff_factor

        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(transport=transport, timeout=timeout)

    @classmethod
    def from_env(
        cls,
        *,
        api_key: str | None = None,
        endpoint: str | None = None,
        max_retries: int | None = None,
        resolver: CredentialResolver | None = None,
        **kwargs,
    ) -> "StripeClient":
        """Build a client from explicit values, environment variables or .env.

        Raises:
            CredentialNotFoundError: No API key could be resolved
        """
        resolver = resolver or CredentialResolver()
        return cls(
            resolver.resolve_api_key(api_key),
            resolver.resolve_endpoint(endpoint),
            max_retries=resolver.resolve_max_retries(max_retries),
            **kwargs,
        )

    async def __aenter__(self) -> "StripeClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._http_client.aclose()

    def __repr__(self) -> str:
        return f"StripeClient(endpoint={self.endpoint.url!r})"

    # Single attempts

    async def get(
        self,
        url: str,
        decoder: Decoder[T],
        *,
        params: Mapping[str, str] | None = None,
        stripe_account: str | None = None,
    ) -> T:
        """GET ``url`` and decode the body with ``decoder``."""
        final_url = self.endpoint.join(url)
        headers = self._build_headers(stripe_account, None)
        response = await self._send("GET", final_url, headers=headers, params=params)
        return self._parse(response, decoder, final_url, params)

    async def post(
        self,
        url: str,
        form_fields: Any,
        decoder: Decoder[T],
        *,
        idempotency_key: IdempotencyKey | None = None,
        stripe_account: str | None = None,
    ) -> T:
        """POST form-encoded ``form_fields`` and decode the body with ``decoder``.

        ``form_fields`` is anything :func:`encode_form` accepts: a mapping, a
        dataclass or an object with ``to_form()``.
        """
        final_url = self.endpoint.join(url)
        params = encode_form(form_fields)
        headers = self._build_headers(stripe_account, idempotency_key)
        response = await self._send("POST", final_url, headers=headers, data=params)
        return self._parse(response, decoder, final_url, params)

    async def delete(
        self,
        url: str,
        *,
        idempotency_key: IdempotencyKey | None = None,
        stripe_account: str | None = None,
        decoder: Decoder[T] = DeleteResponse.from_json,
    ) -> T:
        """DELETE ``url``. Every Stripe DELETE answers with a ``DeleteResponse``."""
        final_url = self.endpoint.join(url)
        headers = self._build_headers(stripe_account, idempotency_key)
        response = await self._send("DELETE", final_url, headers=headers)
        return self._parse(response, decoder, final_url, None)

    async def get_list(
        self,
        url: str,
        item_decoder: Decoder[T],
        *,
        limit: int | None = None,
        starting_after: str | None = None,
        ending_before: str | None = None,
        filters: Mapping[str, ListFilterInput] | None = None,
        params: Mapping[str, str] | None = None,
        stripe_account: str | None = None,
    ) -> ListEnvelope[T]:
        """GET one page of a list endpoint.

        ``filters`` maps a filter name (``created``, ``date``, ...) to a
        timestamp or range and is sent as ``created[gte]=...`` query params.
        """
        query: dict[str, str] = dict(params or {})
        if limit is not None:
            query["limit"] = str(limit)
        if starting_after is not None:
            query["starting_after"] = starting_after
        if ending_before is not None:
            query["ending_before"] = ending_before
        for key, list_filter in (filters or {}).items():
            query.update(list_filter_params(list_filter, key))

        return await self.get(
            url, ListEnvelope.decoder(item_decoder), params=query or None, stripe_account=stripe_account
        )

    # Retried logical calls

    async def get_with_retries(
        self,
        url: str,
        decoder: Decoder[T],
        *,
        params: Mapping[str, str] | None = None,
        stripe_account: str | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> T:
        return await handle(
            lambda: self.get(url, decoder, params=params, stripe_account=stripe_account),
            self.max_retries,
            backoff_factor=self.backoff_factor,
            cancel_event=cancel_event,
        )

    async def post_idempotent(
        self,
        url: str,
        form_fields: Any,
        decoder: Decoder[T],
        *,
        idempotency_key: IdempotencyKey | None = None,
        stripe_account: str | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> T:
        """POST with retries, reusing one idempotency key for every attempt."""
        return await handle_idempotent(
            lambda key: self.post(url, form_fields, decoder, idempotency_key=key, stripe_account=stripe_account),
            self.max_retries,
            idempotency_key=idempotency_key,
            backoff_factor=self.backoff_factor,
            cancel_event=cancel_event,
        )

    async def delete_idempotent(
        self,
        url: str,
        *,
        idempotency_key: IdempotencyKey | None = None,
        stripe_account: str | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> DeleteResponse:
        return await handle_idempotent(
            lambda key: self.delete(url, idempotency_key=key, stripe_account=stripe_account),
            self.max_retries,
            idempotency_key=idempotency_key,
            backoff_factor=self.backoff_factor,
            cancel_event=cancel_event,
        )

    # Internals

    def _build_headers(self, stripe_account: str | None, idempotency_key: IdempotencyKey | None) -> dict[str, str]:
        headers = {}
        if stripe_account is not None:
            headers[STRIPE_ACCOUNT_HEADER] = stripe_account
        if idempotency_key is not None:
            headers[IDEMPOTENCY_KEY_HEADER] = idempotency_key.key
        if self.stripe_version is not None:
            headers[STRIPE_VERSION_HEADER] = self.stripe_version
        return headers

    async def _send(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str],
        params: Mapping[str, str] | None = None,
        data: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        logger.debug(f"{method} {url} params={_redact(params or data)}")
        try:
            response = await self._http_client.request(
                method,
                url,
                params=params,
                data=data,
                headers=headers,
                auth=httpx.BasicAuth(self.api_key.value, ""),
            )
        except httpx.TransportError as e:
            raise ApiConnectionFailure(f"{method} {url} failed: {e!r}", url=url) from e
        logger.debug(f"Response status code is {response.status_code} for {method} {url}")
        return response

    def _parse(
        self,
        response: httpx.Response,
        decoder: Decoder[T],
        url: str,
        params: Mapping[str, str] | None,
    ) -> T:
        raise_for_status(response, url=url, params=params)
        try:
            return decoder(json.loads(response.text))
        except ValueError as e:
            # JSONDecodeError or DecodeError: never substitute a default value
            raise InvalidJsonModelError(
                status_code=response.status_code,
                url=url,
                params=params,
                body=response.text,
                errors=[e],
                response=response,
            ) from e


def _redact(params: Mapping[str, str] | None) -> dict[str, str]:
    if not params:
        return {}
    return {
        key: "***" if any(key == name or key.endswith(f"[{name}]") for name in _REDACTED_PARAMS) else value
        for key, value in params.items()
    }
