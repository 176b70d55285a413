"""Configuration for the action runner and the MCP server.

Action inputs (GitHub Actions ``INPUT_*`` variables):
    INPUT_SECRETS           Secrets specification, ``<locator>:<OUTPUT_KEY>`` entries (required)
    INPUT_HELM_VALUE_FILE   YAML document to interpolate (required)
    INPUT_OUTPUT_FILE       Where to write the result (default: in place)
    INPUT_MIN_MASK_LENGTH   Minimum secret line length to mask (default: 4)
    INPUT_VERBOSE           Log every substitution path at INFO (default: false)

Provider settings (plain environment variables, shared with the MCP server):
    YAML_SECRETS_PROVIDER   "secretmanager" (default) or "env"
    YAML_SECRETS_ENDPOINT   Secret Manager API base URL
    YAML_SECRETS_TIMEOUT    Request timeout in seconds (default: 30)
    GOOGLE_OAUTH_ACCESS_TOKEN  Bearer token for Secret Manager
    YAML_SECRETS_ENV_PREFIX Prefix for the "env" provider (default: YAML_SECRET_)
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Literal, TypeVar

from pydantic import BaseModel, Field, ValidationError, field_validator

from .engine.exceptions import ConfigurationError
from .engine.secrets import (
    DEFAULT_SECRET_MANAGER_ENDPOINT,
    EnvVarSecretProvider,
    SecretManagerProvider,
    SecretProvider,
)
from .github import get_boolean_input, get_input

logger = logging.getLogger(__name__)

DEFAULT_MIN_MASK_LENGTH = 4


class ProviderSettings(BaseModel):
    """Secret provider selection and connection settings."""

    provider: Literal["secretmanager", "env"] = Field(
        default="secretmanager",
        description="Secret backend: Google Secret Manager or environment variables",
    )
    endpoint: str = Field(
        default=DEFAULT_SECRET_MANAGER_ENDPOINT,
        description="Secret Manager API base URL",
    )
    access_token: str | None = Field(
        default=None,
        description="OAuth2 bearer token for Secret Manager",
        repr=False,
    )
    timeout: float = Field(
        default=30.0,
        gt=0,
        le=600,
        description="Request timeout in seconds",
    )
    env_prefix: str = Field(
        default="YAML_SECRET_",
        min_length=1,
        description="Environment variable prefix for the env provider",
    )
    min_mask_length: int = Field(
        default=DEFAULT_MIN_MASK_LENGTH,
        ge=0,
        description="Secret lines shorter than this are not masked",
    )
    verbose: bool = Field(
        default=False,
        description="Log each substitution path at INFO instead of DEBUG",
    )

    def create_provider(self) -> SecretProvider:
        """Instantiate the configured secret provider."""
        if self.provider == "env":
            return EnvVarSecretProvider(prefix=self.env_prefix)
        return SecretManagerProvider(
            access_token=self.access_token,
            endpoint=self.endpoint,
            timeout=self.timeout,
        )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ProviderSettings:
        """Build settings from plain environment variables.

        Raises:
            ConfigurationError: If a value fails validation
        """
        env = os.environ if environ is None else environ
        return _validate(cls, _provider_fields(env))


class ActionConfig(ProviderSettings):
    """Inputs of one action run."""

    secrets: str = Field(
        min_length=1,
        description="Secrets specification (<locator>:<OUTPUT_KEY> entries)",
    )
    document_path: Path = Field(description="YAML document to interpolate")
    output_path: Path | None = Field(
        default=None,
        description="Output file (defaults to document_path, rewritten in place)",
    )

    @field_validator("secrets")
    @classmethod
    def validate_secrets_not_blank(cls, v: str) -> str:
        """Reject specifications that contain only whitespace."""
        if not v.strip():
            raise ValueError("secrets specification is empty")
        return v

    @property
    def resolved_output_path(self) -> Path:
        """Path the interpolated document is written to."""
        return self.output_path or self.document_path

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ActionConfig:
        """Build the action configuration from ``INPUT_*`` and provider variables.

        Raises:
            ConfigurationError: If a required input is missing or a value is invalid
        """
        env = os.environ if environ is None else environ

        fields = _provider_fields(env)
        fields["secrets"] = get_input("secrets", required=True, environ=env)
        fields["document_path"] = get_input("helm_value_file", required=True, environ=env)
        fields["verbose"] = get_boolean_input("verbose", environ=env)

        output_file = get_input("output_file", environ=env)
        if output_file:
            fields["output_path"] = output_file

        min_mask_length = get_input("min_mask_length", environ=env)
        if min_mask_length:
            fields["min_mask_length"] = min_mask_length

        return _validate(cls, fields)


def configure_logging(environ: Mapping[str, str] | None = None) -> None:
    """Configure root logging on stderr from YAML_SECRETS_LOG_LEVEL (default INFO).

    stdout is reserved for workflow commands and the MCP stdio transport.
    """
    env = os.environ if environ is None else environ
    valid_log_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
    log_level_str = env.get("YAML_SECRETS_LOG_LEVEL", "INFO").upper()

    if log_level_str not in valid_log_levels:
        print(
            f"Warning: Invalid YAML_SECRETS_LOG_LEVEL '{log_level_str}'. "
            f"Valid levels: {', '.join(sorted(valid_log_levels))}. "
            "Using INFO.",
            file=sys.stderr,
        )
        log_level_str = "INFO"

    logging.basicConfig(
        level=getattr(logging, log_level_str),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def _provider_fields(env: Mapping[str, str]) -> dict[str, object]:
    fields: dict[str, object] = {}
    mapping = {
        "provider": "YAML_SECRETS_PROVIDER",
        "endpoint": "YAML_SECRETS_ENDPOINT",
        "timeout": "YAML_SECRETS_TIMEOUT",
        "access_token": "GOOGLE_OAUTH_ACCESS_TOKEN",
        "env_prefix": "YAML_SECRETS_ENV_PREFIX",
    }
    for field_name, env_name in mapping.items():
        value = env.get(env_name, "").strip()
        if value:
            fields[field_name] = value.lower() if field_name == "provider" else value
    return fields


C = TypeVar("C", bound="ProviderSettings")


def _validate(model: type[C], fields: dict[str, object]) -> C:
    try:
        return model.model_validate(fields)
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigurationError(f"Invalid configuration: {errors}") from e
