"""Shared test secrets configuration.

Single source of truth for test secrets used across conftest.py fixtures and
the test modules:
- TEST_SECRETS: environment variables read by EnvVarSecretProvider
- FakeSecretProvider: in-memory provider recording every fetch
"""

from yaml_secrets_mcp.engine.reference import resolve_self_link
from yaml_secrets_mcp.engine.secrets import SecretNotFoundError, SecretProvider

TEST_SECRETS = {
    # Basic tests
    "YAML_SECRET_TEST_PROJECT_DB_PASSWORD": "db-secure-password",
    "YAML_SECRET_TEST_PROJECT_API_KEY": "sk-test-key-456",
    # Multi-line payloads (private keys, certificates)
    "YAML_SECRET_TEST_PROJECT_TLS_KEY": "-----BEGIN KEY-----\nMIIEvQIBADANBg\n-----END KEY-----",
}


def setup_test_secrets() -> None:
    """Configure test secrets in environment variables."""
    import os

    for key, value in TEST_SECRETS.items():
        os.environ[key] = value


def teardown_test_secrets() -> None:
    """Remove test secrets from environment variables."""
    import os

    for key in TEST_SECRETS:
        os.environ.pop(key, None)


class FakeSecretProvider(SecretProvider):
    """In-memory provider. Values that are exceptions are raised instead of returned.

    Locators are looked up as given, then by their Secret Manager resource name.
    """

    def __init__(self, secrets: dict[str, str | Exception]) -> None:
        self.secrets = secrets
        self.calls: list[str] = []

    async def get_secret(self, locator: str) -> str:
        self.calls.append(locator)
        key = locator if locator in self.secrets else resolve_self_link(locator)
        if key not in self.secrets:
            raise SecretNotFoundError(locator=locator)
        value = self.secrets[key]
        if isinstance(value, Exception):
            raise value
        return value
