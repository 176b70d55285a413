"""Tests for action and provider configuration."""

import logging
from pathlib import Path

import pytest

from yaml_secrets_mcp.config import ActionConfig, ProviderSettings, configure_logging
from yaml_secrets_mcp.engine.exceptions import ConfigurationError, YamlSecretsError
from yaml_secrets_mcp.engine.secrets import EnvVarSecretProvider, SecretManagerProvider

MINIMAL_INPUTS = {
    "INPUT_SECRETS": "p/s/1:DB_PASS",
    "INPUT_HELM_VALUE_FILE": "values.yaml",
}


def test_action_config_minimal_inputs():
    config = ActionConfig.from_env(MINIMAL_INPUTS)

    assert config.secrets == "p/s/1:DB_PASS"
    assert config.document_path == Path("values.yaml")
    assert config.output_path is None
    assert config.resolved_output_path == Path("values.yaml")
    assert config.min_mask_length == 4
    assert config.verbose is False
    assert config.provider == "secretmanager"


def test_action_config_all_inputs():
    env = {
        **MINIMAL_INPUTS,
        "INPUT_OUTPUT_FILE": "out/rendered.yaml",
        "INPUT_MIN_MASK_LENGTH": "6",
        "INPUT_VERBOSE": "TRUE",
        "YAML_SECRETS_PROVIDER": "ENV",
        "YAML_SECRETS_ENV_PREFIX": "CI_SECRET_",
    }

    config = ActionConfig.from_env(env)

    assert config.resolved_output_path == Path("out/rendered.yaml")
    assert config.min_mask_length == 6
    assert config.verbose is True
    assert config.provider == "env"
    assert config.env_prefix == "CI_SECRET_"


@pytest.mark.parametrize("missing", ["INPUT_SECRETS", "INPUT_HELM_VALUE_FILE"])
def test_action_config_required_inputs(missing):
    env = {key: value for key, value in MINIMAL_INPUTS.items() if key != missing}

    with pytest.raises(ConfigurationError, match="Input required and not supplied"):
        ActionConfig.from_env(env)


def test_action_config_blank_secrets_rejected():
    with pytest.raises(ConfigurationError):
        ActionConfig.from_env({**MINIMAL_INPUTS, "INPUT_SECRETS": "   \n  "})


@pytest.mark.parametrize("value", ["-1", "four", "2.5"])
def test_action_config_invalid_min_mask_length(value):
    with pytest.raises(ConfigurationError) as exc_info:
        ActionConfig.from_env({**MINIMAL_INPUTS, "INPUT_MIN_MASK_LENGTH": value})

    assert "min_mask_length" in str(exc_info.value)


def test_action_config_invalid_boolean():
    with pytest.raises(ConfigurationError, match="verbose"):
        ActionConfig.from_env({**MINIMAL_INPUTS, "INPUT_VERBOSE": "yes"})


def test_configuration_error_is_yaml_secrets_error():
    with pytest.raises(YamlSecretsError):
        ActionConfig.from_env({})


def test_provider_settings_defaults():
    settings = ProviderSettings.from_env({})

    provider = settings.create_provider()

    assert isinstance(provider, SecretManagerProvider)
    assert provider.endpoint == "https://secretmanager.googleapis.com"
    assert provider.access_token is None
    assert provider.timeout == 30.0


def test_provider_settings_secret_manager_from_env():
    env = {
        "YAML_SECRETS_ENDPOINT": "http://localhost:8085/",
        "YAML_SECRETS_TIMEOUT": "5",
        "GOOGLE_OAUTH_ACCESS_TOKEN": "ya29.token",
    }

    provider = ProviderSettings.from_env(env).create_provider()

    assert isinstance(provider, SecretManagerProvider)
    assert provider.endpoint == "http://localhost:8085"
    assert provider.timeout == 5.0
    assert provider.access_token == "ya29.token"


def test_provider_settings_env_provider():
    provider = ProviderSettings.from_env(
        {"YAML_SECRETS_PROVIDER": "env", "YAML_SECRETS_ENV_PREFIX": "X_"}
    ).create_provider()

    assert isinstance(provider, EnvVarSecretProvider)
    assert provider.prefix == "X_"


def test_access_token_hidden_from_repr():
    settings = ProviderSettings(access_token="ya29.very-secret")

    assert "ya29.very-secret" not in repr(settings)


@pytest.mark.parametrize(
    "env",
    [
        {"YAML_SECRETS_PROVIDER": "vault"},
        {"YAML_SECRETS_TIMEOUT": "0"},
        {"YAML_SECRETS_TIMEOUT": "soon"},
    ],
)
def test_provider_settings_invalid_values(env):
    with pytest.raises(ConfigurationError, match="Invalid configuration"):
        ProviderSettings.from_env(env)


def test_from_env_reads_process_environment(monkeypatch):
    monkeypatch.setenv("INPUT_SECRETS", "p/s:S")
    monkeypatch.setenv("INPUT_HELM_VALUE_FILE", "chart/values.yaml")

    config = ActionConfig.from_env()

    assert config.document_path == Path("chart/values.yaml")


def test_configure_logging_invalid_level_warns(capsys, monkeypatch):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

    configure_logging({"YAML_SECRETS_LOG_LEVEL": "chatty"})

    assert "Invalid YAML_SECRETS_LOG_LEVEL 'CHATTY'" in capsys.readouterr().err
    assert calls[0]["level"] == logging.INFO


def test_configure_logging_level_from_env(monkeypatch):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

    configure_logging({"YAML_SECRETS_LOG_LEVEL": "debug"})

    assert calls[0]["level"] == logging.DEBUG
