"""Secret access and masking for yaml-secrets-mcp.

Core Components:
    - SecretProvider: Abstract base class for secret sources
    - SecretManagerProvider: Google Secret Manager over REST
    - EnvVarSecretProvider: Environment variable-based secrets
    - SecretMasker: Line-wise masking and redaction of resolved values
    - Custom exceptions: Structured error handling

Example:
    >>> from yaml_secrets_mcp.engine.secrets import SecretManagerProvider, SecretMasker
    >>>
    >>> provider = SecretManagerProvider(access_token=token)
    >>> masker = SecretMasker(min_length=4, sink=add_mask)
    >>>
    >>> value = await provider.get_secret("my-project/db-password")
    >>> masker.mask(value)
"""

from .exceptions import (
    SecretAccessDeniedError,
    SecretError,
    SecretNotFoundError,
    SecretProviderError,
)
from .provider import (
    DEFAULT_SECRET_MANAGER_ENDPOINT,
    EnvVarSecretProvider,
    SecretManagerProvider,
    SecretProvider,
)
from .redactor import SecretMasker

__all__ = [
    # Exceptions
    "SecretError",
    "SecretNotFoundError",
    "SecretAccessDeniedError",
    "SecretProviderError",
    # Providers
    "DEFAULT_SECRET_MANAGER_ENDPOINT",
    "SecretProvider",
    "SecretManagerProvider",
    "EnvVarSecretProvider",
    # Masking
    "SecretMasker",
]
