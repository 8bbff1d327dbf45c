"""Decoders for fields whose JSON value is one of several distinct shapes.

Two dispatch strategies are used by the API:

- Structural: the JSON type alone selects the variant. A string is a
  reference (a token or object id), an object is the fully expanded variant.
- Discriminated: the value is an object whose ``"object"`` field names its
  type. The name is looked up in a fixed registry; unknown names fail with
  :class:`UnknownVariantError` rather than falling back to any default.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Generic, TypeVar

from stripe_client_core.codec.decoding import Decoder, DecodeError, UnknownVariantError, decode_str, expect_object

T = TypeVar("T")
R = TypeVar("R")
F = TypeVar("F")


def structural_union(*, reference: Decoder[R], full: Decoder[F], name: str = "union") -> Decoder[R | F]:
    """Build a decoder that picks a variant from the JSON type of the value.

    Args:
        reference: Decoder applied when the value is a JSON string.
        full: Decoder applied when the value is a JSON object.
        name: Union name used in error messages.
    """

    def decode(value: Any) -> R | F:
        if isinstance(value, str):
            return reference(value)
        if isinstance(value, Mapping):
            return full(value)
        raise DecodeError(f"invalid {name}: expected string or object, got {type(value).__name__}")

    return decode


class DiscriminatedUnion(Generic[T]):
    """Decoder dispatching on a discriminator field against a fixed registry.

    Example:
        ```python
        payment_source = DiscriminatedUnion(
            "PaymentSource",
            {"card": Card.from_json, "bitcoin_receiver": BitcoinReceiver.from_json},
        )
        source = payment_source(response_json["source"])
        ```
    """

    def __init__(self, name: str, registry: Mapping[str, Decoder[T]], *, discriminator: str = "object"):
        self.name = name
        self.discriminator = discriminator
        self._registry = MappingProxyType(dict(registry))

    @property
    def variants(self) -> Mapping[str, Decoder[T]]:
        return self._registry

    def __call__(self, value: Any) -> T:
        data = expect_object(value)
        if self.discriminator not in data:
            raise DecodeError(f"missing {self.name} discriminator", (self.discriminator,))
        try:
            tag = decode_str(data[self.discriminator])
        except DecodeError as e:
            raise e.at(self.discriminator) from None

        decoder = self._registry.get(tag)
        if decoder is None:
            raise UnknownVariantError(self.name, tag, (self.discriminator,))
        return decoder(data)

    def __repr__(self) -> str:
        return f"DiscriminatedUnion({self.name!r}, variants={sorted(self._registry)})"
