"""Secret provider abstraction and implementations.

Providers resolve a secret locator into its string value. Failures are raised
as SecretError subclasses and are never retried here.

Providers:
    - SecretProvider: Abstract base class defining the provider interface
    - SecretManagerProvider: Google Secret Manager REST API (httpx)
    - EnvVarSecretProvider: Reads secrets from environment variables (YAML_SECRET_*)

Example:
    >>> provider = SecretManagerProvider(access_token=os.environ["GOOGLE_OAUTH_ACCESS_TOKEN"])
    >>> value = await provider.get_secret("my-project/db-password/3")
"""

import base64
import binascii
import logging
import os
import re
from abc import ABC, abstractmethod
from typing import Any

import httpx

from ..reference import resolve_self_link
from .exceptions import SecretAccessDeniedError, SecretNotFoundError, SecretProviderError

logger = logging.getLogger(__name__)

DEFAULT_SECRET_MANAGER_ENDPOINT = "https://secretmanager.googleapis.com"


class SecretProvider(ABC):
    """Abstract base class for secret providers.

    All methods are async so remote providers never block the event loop.

    Example:
        >>> class MyProvider(SecretProvider):
        ...     async def get_secret(self, locator: str) -> str:
        ...         return await fetch_from_source(locator)
    """

    @abstractmethod
    async def get_secret(self, locator: str) -> str:
        """Retrieve a secret value by locator.

        Args:
            locator: Opaque secret locator from a SecretReference

        Returns:
            The secret value as a string

        Raises:
            SecretNotFoundError: If the secret does not exist
            SecretAccessDeniedError: If the caller may not read the secret
            SecretProviderError: If the provider encounters an error
        """
        pass

    @property
    def name(self) -> str:
        """Provider name used in logs and error messages."""
        return self.__class__.__name__


class SecretManagerProvider(SecretProvider):
    """Secret provider for Google Secret Manager.

    Accesses secret versions through the REST API:

        GET {endpoint}/v1/projects/{p}/secrets/{s}/versions/{v}:access

    and decodes the base64 ``payload.data`` field as UTF-8.

    Status mapping:
        404       -> SecretNotFoundError
        401, 403  -> SecretAccessDeniedError
        other     -> SecretProviderError (as are timeouts and network errors)

    Attributes:
        endpoint: API base URL (no trailing slash)
        access_token: OAuth2 bearer token; requests are unauthenticated if None
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        access_token: str | None = None,
        endpoint: str = DEFAULT_SECRET_MANAGER_ENDPOINT,
        timeout: float = 30.0,
    ) -> None:
        self.access_token = access_token
        self.endpoint = endpoint.rstrip("/")
        self.timeout = timeout

    def access_url(self, locator: str) -> str:
        """Build the ``:access`` URL for a locator.

        Raises:
            MalformedReferenceError: If the locator is not a Secret Manager name
        """
        return f"{self.endpoint}/v1/{resolve_self_link(locator)}:access"

    async def get_secret(self, locator: str) -> str:
        """Access one secret version.

        Raises:
            MalformedReferenceError: If the locator is not a Secret Manager name
            SecretNotFoundError: HTTP 404
            SecretAccessDeniedError: HTTP 401 or 403
            SecretProviderError: Any other HTTP error, transport failure or bad payload
        """
        url = self.access_url(locator)

        headers = {"Accept": "application/json"}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        else:
            logger.warning("No access token configured, calling Secret Manager unauthenticated")

        logger.debug(f"Accessing secret {locator}")

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                response = await client.get(url, headers=headers)
            except httpx.TimeoutException as e:
                raise SecretProviderError(
                    self.name, f"request timeout after {self.timeout}s: {url}", locator=locator
                ) from e
            except httpx.HTTPError as e:
                raise SecretProviderError(
                    self.name, f"network error for {url}: {e}", locator=locator
                ) from e

        if response.status_code == 404:
            raise SecretNotFoundError(
                locator=locator,
                provider_hint="Check that the secret and version exist and are enabled",
            )
        if response.status_code in (401, 403):
            raise SecretAccessDeniedError(
                locator=locator,
                reason=f"HTTP {response.status_code}: {self._error_message(response)}",
            )
        if not 200 <= response.status_code < 300:
            raise SecretProviderError(
                self.name,
                f"HTTP {response.status_code}: {self._error_message(response)}",
                locator=locator,
            )

        return self._decode_payload(response, locator)

    def _decode_payload(self, response: httpx.Response, locator: str) -> str:
        try:
            body: dict[str, Any] = response.json()
            encoded = body["payload"]["data"]
            return base64.b64decode(encoded, validate=True).decode("utf-8")
        except (ValueError, KeyError, TypeError, binascii.Error) as e:
            # json and unicode decode errors are ValueError subclasses
            raise SecretProviderError(
                self.name, f"malformed access response: {type(e).__name__}", locator=locator
            ) from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Extract the API error message, falling back to the reason phrase."""
        try:
            return str(response.json()["error"]["message"])
        except (ValueError, KeyError, TypeError):
            return response.reason_phrase or "unknown error"


class EnvVarSecretProvider(SecretProvider):
    """Secret provider that reads from environment variables.

    The locator is turned into a variable name by upper-casing it and
    replacing every character outside [A-Z0-9] with an underscore, then
    adding the prefix.

    Environment Variable Format:
        YAML_SECRET_{SANITIZED_LOCATOR} = secret_value

    Examples:
        locator "my-project/db-password" -> YAML_SECRET_MY_PROJECT_DB_PASSWORD

    Attributes:
        prefix: Environment variable prefix (default: "YAML_SECRET_")
    """

    def __init__(self, prefix: str = "YAML_SECRET_") -> None:
        self.prefix = prefix

    def _get_env_var_name(self, locator: str) -> str:
        return self.prefix + re.sub(r"[^A-Z0-9]", "_", locator.strip().upper())

    async def get_secret(self, locator: str) -> str:
        env_var_name = self._get_env_var_name(locator)
        value = os.environ.get(env_var_name)

        if value is None:
            raise SecretNotFoundError(
                locator=locator,
                provider_hint=f"Set environment variable: {env_var_name}=<secret_value>",
            )

        return value
