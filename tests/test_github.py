"""Tests for GitHub Actions workflow commands and inputs."""

import pytest

from yaml_secrets_mcp import github
from yaml_secrets_mcp.engine.exceptions import ConfigurationError


def test_get_input_trims_and_normalizes_name():
    env = {"INPUT_HELM_VALUE_FILE": "  values.yaml \n"}

    assert github.get_input("helm_value_file", environ=env) == "values.yaml"
    assert github.get_input("helm value file", environ=env) == "values.yaml"


def test_get_input_missing_optional_is_empty():
    assert github.get_input("output_file", environ={}) == ""


def test_get_input_required():
    with pytest.raises(ConfigurationError, match="Input required and not supplied: secrets"):
        github.get_input("secrets", required=True, environ={"INPUT_SECRETS": "  "})


@pytest.mark.parametrize(
    "value, expected",
    [("true", True), ("True", True), ("TRUE", True), ("false", False), ("FALSE", False)],
)
def test_get_boolean_input(value, expected):
    assert github.get_boolean_input("verbose", environ={"INPUT_VERBOSE": value}) is expected


def test_get_boolean_input_default():
    assert github.get_boolean_input("verbose", default=True, environ={}) is True


@pytest.mark.parametrize("value", ["yes", "1", "tRuE"])
def test_get_boolean_input_rejects_other_forms(value):
    with pytest.raises(ConfigurationError, match="verbose"):
        github.get_boolean_input("verbose", environ={"INPUT_VERBOSE": value})


def test_add_mask_writes_workflow_command(capsys):
    github.add_mask("db-secure-password")

    assert capsys.readouterr().out == "::add-mask::db-secure-password\n"


def test_command_data_is_escaped(capsys):
    github.error("100% failed\r\nsee log")

    assert capsys.readouterr().out == "::error::100%25 failed%0D%0Asee log\n"


def test_escape_property():
    assert github.escape_property("a:b,c%\n") == "a%3Ab%2Cc%25%0A"


def test_set_output_appends_to_github_output_file(tmp_path):
    output_file = tmp_path / "github_output"
    output_file.write_text("previous=1\n")
    env = {"GITHUB_OUTPUT": str(output_file)}

    github.set_output("output_file", "values.yaml", environ=env)

    lines = output_file.read_text().splitlines()
    assert lines[0] == "previous=1"
    assert lines[1].startswith("output_file<<ghadelimiter_")
    assert lines[2] == "values.yaml"
    assert lines[3] == lines[1].split("<<", 1)[1]


def test_set_output_multiline_value(tmp_path):
    output_file = tmp_path / "github_output"
    github.set_output("report", "line one\nline two", environ={"GITHUB_OUTPUT": str(output_file)})

    lines = output_file.read_text().splitlines()
    assert lines[1:3] == ["line one", "line two"]


def test_set_output_legacy_command(capsys):
    github.set_output("output_file", "out.yaml", environ={})

    assert capsys.readouterr().out == "::set-output name=output_file::out.yaml\n"


def test_set_failed_exits_with_status_one(capsys):
    with pytest.raises(SystemExit) as exc_info:
        github.set_failed("yaml-secrets failed with: boom")

    assert exc_info.value.code == 1
    assert capsys.readouterr().out == "::error::yaml-secrets failed with: boom\n"
