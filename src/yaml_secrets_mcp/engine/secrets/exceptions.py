"""Errors raised while fetching secret values.

    SecretError
    ├── SecretNotFoundError       secret or version does not exist
    ├── SecretAccessDeniedError   caller may not read the secret (HTTP 401/403)
    └── SecretProviderError       transport failure, unexpected status, bad payload

Messages name the locator but never contain a secret value.
"""


class SecretError(Exception):
    """Base class for secret access failures.

    Attributes:
        locator: Locator being fetched, when known
    """

    locator: str | None = None


class SecretNotFoundError(SecretError):
    """The locator does not resolve to an accessible secret version.

    Attributes:
        locator: Locator that was requested
        provider_hint: Provider-specific advice appended to the message
    """

    def __init__(self, locator: str, provider_hint: str | None = None) -> None:
        self.locator = locator
        self.provider_hint = provider_hint
        suffix = f". {provider_hint}" if provider_hint else ""
        super().__init__(f"Secret '{locator}' not found{suffix}")


class SecretAccessDeniedError(SecretError):
    """Authentication or authorization failure for one locator."""

    def __init__(self, locator: str, reason: str) -> None:
        self.locator = locator
        self.reason = reason
        super().__init__(f"Access denied for secret '{locator}': {reason}")


class SecretProviderError(SecretError):
    """The provider could not complete the request.

    Attributes:
        provider_name: Class name of the failing provider
        details: What went wrong (status, timeout, decode error)
        locator: Locator being fetched, if the failure is tied to one
    """

    def __init__(self, provider_name: str, details: str, locator: str | None = None) -> None:
        self.provider_name = provider_name
        self.details = details
        self.locator = locator
        super().__init__(f"Secret provider '{provider_name}' error: {details}")
