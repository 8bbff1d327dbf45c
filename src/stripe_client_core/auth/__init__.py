"""API key and settings resolution (value → env → .env → default)."""

from stripe_client_core.auth.credentials import CredentialResolver
from stripe_client_core.auth.exceptions import (
    CredentialError,
    CredentialFileError,
    CredentialNotFoundError,
)

__all__ = [
    "CredentialError",
    "CredentialFileError",
    "CredentialNotFoundError",
    "CredentialResolver",
]
