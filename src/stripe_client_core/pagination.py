"""The list envelope shared by every Stripe list endpoint.

Stripe returns collections as::

    {"object": "list", "url": "/v1/customers", "has_more": true, "data": [...], "total_count": 3}

A :class:`ListEnvelope` is an immutable snapshot of one page. It performs no
I/O: ``has_more`` and the cursor helpers tell the caller what to send on the
next list call.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from stripe_client_core.codec.decoding import (
    Decoder,
    decode_bool,
    decode_int,
    decode_list,
    decode_str,
    expect_object,
    optional,
    required,
)

T = TypeVar("T")


@dataclass(frozen=True)
class ListEnvelope(Generic[T]):
    """One page of a Stripe list."""

    url: str
    has_more: bool
    data: tuple[T, ...]
    total_count: int | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.data, tuple):
            object.__setattr__(self, "data", tuple(self.data))

    def __len__(self) -> int:
        return len(self.data)

    def __iter__(self):
        return iter(self.data)

    @classmethod
    def decoder(cls, item: Decoder[T]) -> Decoder["ListEnvelope[T]"]:
        """Build a decoder for a list of ``item``."""
        decode_items = decode_list(item)

        def decode(value: Any) -> "ListEnvelope[T]":
            data = expect_object(value)
            return cls(
                url=required(data, "url", decode_str),
                has_more=required(data, "has_more", decode_bool),
                data=tuple(required(data, "data", decode_items)),
                total_count=optional(data, "total_count", decode_int),
            )

        return decode

    def to_json(self, item: Callable[[T], Any]) -> dict[str, Any]:
        return {
            "object": "list",
            "url": self.url,
            "has_more": self.has_more,
            "data": [item(element) for element in self.data],
            "total_count": self.total_count,
        }

    def next_page_params(self, limit: int | None = None) -> dict[str, str] | None:
        """Query params for the page after this one, or ``None`` on the last page."""
        if not self.has_more or not self.data:
            return None
        return _cursor_params("starting_after", _object_id(self.data[-1]), limit)

    def previous_page_params(self, limit: int | None = None) -> dict[str, str] | None:
        """Query params for the page before this one, or ``None`` when empty."""
        if not self.data:
            return None
        return _cursor_params("ending_before", _object_id(self.data[0]), limit)


def _object_id(item: Any) -> str:
    item_id = item.get("id") if isinstance(item, dict) else getattr(item, "id", None)
    if not isinstance(item_id, str):
        raise ValueError(f"List item {item!r} has no string id to page from")
    return item_id


def _cursor_params(name: str, cursor: str, limit: int | None) -> dict[str, str]:
    params = {name: cursor}
    if limit is not None:
        params["limit"] = str(limit)
    return params
