"""Credential and settings resolution for the Stripe client.

Resolution order (highest to lowest priority):
1. Explicitly provided value
2. Environment variable
3. .env file (python-dotenv, loaded into the environment on first use)
4. Default value

Example:
    ```python
    from stripe_client_core.auth import CredentialResolver

    resolver = CredentialResolver()
    api_key = resolver.resolve_api_key()  # STRIPE_API_KEY
    endpoint = resolver.resolve_endpoint()  # STRIPE_ENDPOINT or https://api.stripe.com
    ```

Security Considerations:
    - The API key is never logged; only its source is (``***`` in place of the value)
    - File-based credentials have whitespace stripped
    - Thread-safe dotenv loading with lock
"""

import logging
import os
from pathlib import Path
from threading import Lock

from dotenv import load_dotenv

from stripe_client_core.auth.exceptions import CredentialError, CredentialFileError, CredentialNotFoundError
from stripe_client_core.keys import DEFAULT_ENDPOINT, ApiKey, Endpoint

logger = logging.getLogger(__name__)

API_KEY_ENV_VAR = "STRIPE_API_KEY"
API_KEY_FILE_ENV_VAR = "STRIPE_API_KEY_FILE"
ENDPOINT_ENV_VAR = "STRIPE_ENDPOINT"
MAX_RETRIES_ENV_VAR = "STRIPE_MAX_RETRIES"


class CredentialResolver:
    """Resolve the API key and client settings from several sources.

    Args:
        dotenv_path: Path to .env file. If None, python-dotenv searches
            parent directories.
        load_dotenv: Whether to load the .env file at all. Disable in tests.
    """

    def __init__(self, dotenv_path: str | None = None, load_dotenv: bool = True):
        self._dotenv_loaded = False
        self._dotenv_lock = Lock()
        self._dotenv_path = dotenv_path

        if load_dotenv:
            self._ensure_dotenv_loaded()

    def _ensure_dotenv_loaded(self) -> None:
        if self._dotenv_loaded:
            return

        with self._dotenv_lock:
            if self._dotenv_loaded:
                return
            # Existing environment variables win over .env values
            load_dotenv(dotenv_path=self._dotenv_path, override=False)
            self._dotenv_loaded = True
            logger.debug("Loaded .env file for credential resolution")

    def resolve(
        self,
        *,
        value: str | None = None,
        env_var_name: str | None = None,
        default: str | None = None,
        required: bool = False,
        secret: bool = True,
    ) -> str | None:
        """Resolve a single value, first match wins.

        Args:
            value: Explicit value (highest priority).
            env_var_name: Environment variable to check.
            default: Fallback when nothing else is set.
            required: Raise instead of returning None when unresolved.
            secret: Mask the value in log messages.

        Raises:
            CredentialNotFoundError: If required=True and nothing matched.
        """
        result = None
        source = None

        if value is not None:
            result = value
            source = "explicit parameter"
        elif env_var_name and env_var_name in os.environ:
            result = os.environ[env_var_name]
            source = f"environment variable '{env_var_name}'"
        elif default is not None:
            result = default
            source = "default value"

        if result is not None:
            shown = "***" if secret else result
            logger.debug(f"Resolved {env_var_name or 'value'} from {source}: {shown}")

        if required and result is None:
            error_msg = "Required credential not found"
            if env_var_name:
                error_msg += f" (checked env var: {env_var_name})"
            raise CredentialNotFoundError(error_msg, env_var_name=env_var_name)

        return result

    def resolve_from_file(
        self,
        *,
        file_path: str | Path | None = None,
        env_var_name: str | None = None,
        required: bool = False,
    ) -> str | None:
        """Read a credential from a file whose path is given or taken from ``env_var_name``.

        ``~`` and ``$VAR`` in the path are expanded; the content is stripped.

        Raises:
            CredentialFileError: If required=True and the file cannot be read.
        """
        path_to_use = str(file_path) if file_path is not None else None
        if path_to_use is None and env_var_name:
            path_to_use = self.resolve(env_var_name=env_var_name, secret=False)

        if path_to_use is None:
            if required:
                error_msg = "No file path provided for credential resolution"
                if env_var_name:
                    error_msg += f" (env var '{env_var_name}' not set)"
                raise CredentialFileError(error_msg)
            return None

        path_obj = Path(os.path.expanduser(os.path.expandvars(path_to_use)))

        try:
            content = path_obj.read_text().strip()
        except FileNotFoundError:
            error_msg = f"Credential file not found: {path_obj}"
            if required:
                raise CredentialFileError(error_msg) from None
            logger.debug(error_msg)
            return None
        except PermissionError:
            error_msg = f"Permission denied reading credential file: {path_obj}"
            if required:
                raise CredentialFileError(error_msg) from None
            logger.warning(error_msg)
            return None

        logger.debug(f"Resolved credential from file: {path_obj} (***)")
        return content

    def resolve_api_key(self, value: str | None = None) -> ApiKey:
        """Resolve the Stripe API key.

        Checks ``value``, then ``STRIPE_API_KEY``, then the file named by
        ``STRIPE_API_KEY_FILE``.

        Raises:
            CredentialNotFoundError: If no source provides a key.
        """
        key = self.resolve(value=value, env_var_name=API_KEY_ENV_VAR)
        if key is None:
            key = self.resolve_from_file(env_var_name=API_KEY_FILE_ENV_VAR)
        if not key:
            raise CredentialNotFoundError(
                f"Stripe API key not found (checked env vars: {API_KEY_ENV_VAR}, {API_KEY_FILE_ENV_VAR})",
                env_var_name=API_KEY_ENV_VAR,
            )
        return ApiKey(key)

    def resolve_endpoint(self, value: str | None = None) -> Endpoint:
        url = self.resolve(value=value, env_var_name=ENDPOINT_ENV_VAR, default=DEFAULT_ENDPOINT, secret=False)
        return Endpoint(url)

    def resolve_max_retries(self, value: int | None = None, default: int = 3) -> int:
        """Resolve the retry bound, rejecting non-integer or negative values."""
        if value is not None:
            raw = str(value)
        else:
            raw = self.resolve(env_var_name=MAX_RETRIES_ENV_VAR, default=str(default), secret=False)
        try:
            max_retries = int(raw)
        except ValueError:
            raise CredentialError(f"{MAX_RETRIES_ENV_VAR} must be an integer, got {raw!r}") from None
        if max_retries < 0:
            raise CredentialError(f"{MAX_RETRIES_ENV_VAR} must be non-negative, got {max_retries}")
        return max_retries
