"""Shared test configuration for yaml-secrets-mcp tests.

Configures test environment including:
- Test secrets for the environment variable provider
- Fake in-memory secret provider
- YAML document fixtures
"""

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from test_secrets import FakeSecretProvider
from test_secrets import setup_test_secrets as _setup_secrets
from test_secrets import teardown_test_secrets as _teardown_secrets


@pytest.fixture(scope="session", autouse=True)
def setup_test_secrets() -> Iterator[None]:
    """Configure test secrets for all tests.

    The secrets are set as environment variables with the YAML_SECRET_ prefix,
    matching the env provider configuration pattern.
    """
    _setup_secrets()
    yield
    _teardown_secrets()


@pytest.fixture(autouse=True)
def clean_action_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove action inputs and provider settings inherited from the host."""
    for name in (
        "INPUT_SECRETS",
        "INPUT_HELM_VALUE_FILE",
        "INPUT_OUTPUT_FILE",
        "INPUT_MIN_MASK_LENGTH",
        "INPUT_VERBOSE",
        "GITHUB_OUTPUT",
        "GOOGLE_OAUTH_ACCESS_TOKEN",
        "YAML_SECRETS_PROVIDER",
        "YAML_SECRETS_ENDPOINT",
        "YAML_SECRETS_TIMEOUT",
        "YAML_SECRETS_ENV_PREFIX",
        "YAML_SECRETS_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fake_provider() -> FakeSecretProvider:
    """Provider resolving the locators used by the end-to-end scenarios."""
    return FakeSecretProvider(
        {
            "projects/p/secrets/s/versions/1": "s3cr3t",
            "projects/p/secrets/api/versions/latest": "sk-live-0123456789",
            "projects/p/secrets/multi/versions/2": "ab\ncdefgh",
        }
    )


@pytest.fixture
def write_document(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write YAML text to a file under tmp_path and return its path."""

    def _write(text: str, name: str = "values.yaml") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write
