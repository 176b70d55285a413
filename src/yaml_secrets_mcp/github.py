"""
GitHub Actions runtime helpers.

Reads action inputs from ``INPUT_*`` environment variables and emits workflow
commands on stdout:

- ``::add-mask::<value>`` registers a value for log redaction
- ``::error::<message>`` reports a failure annotation
- step outputs are appended to the ``$GITHUB_OUTPUT`` file, or written with
  the legacy ``::set-output`` command when that file is not available

Reference: https://docs.github.com/en/actions/using-workflows/workflow-commands-for-github-actions
"""

import logging
import os
import sys
import uuid
from collections.abc import Mapping
from typing import NoReturn, TextIO

from .engine.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"true", "True", "TRUE"}
_FALSE_VALUES = {"false", "False", "FALSE"}


def escape_data(value: str) -> str:
    """Escape a command value (``%``, ``\\r`` and ``\\n``)."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_property(value: str) -> str:
    """Escape a command property value (additionally ``:`` and ``,``)."""
    return escape_data(value).replace(":", "%3A").replace(",", "%2C")


def issue_command(
    command: str,
    message: str = "",
    properties: Mapping[str, str] | None = None,
    stream: TextIO | None = None,
) -> None:
    """Write a ``::command prop=value::message`` line to stdout."""
    params = ",".join(f"{key}={escape_property(val)}" for key, val in (properties or {}).items())
    line = f"::{command} {params}::" if params else f"::{command}::"
    print(line + escape_data(message), file=stream or sys.stdout, flush=True)


def get_input(
    name: str, required: bool = False, environ: Mapping[str, str] | None = None
) -> str:
    """
    Read an action input.

    Inputs are exposed by the runner as ``INPUT_<NAME>`` with spaces replaced
    by underscores and the name upper-cased. The value is trimmed.

    Args:
        name: Input name as declared in action.yml
        required: Raise when the input is missing or empty
        environ: Environment to read from (default: os.environ)

    Raises:
        ConfigurationError: If a required input is not supplied
    """
    env = os.environ if environ is None else environ
    value = env.get(f"INPUT_{name.replace(' ', '_').upper()}", "").strip()
    if required and not value:
        raise ConfigurationError(f"Input required and not supplied: {name}")
    return value


def get_boolean_input(
    name: str, default: bool = False, environ: Mapping[str, str] | None = None
) -> bool:
    """
    Read a boolean action input (``true``/``True``/``TRUE`` or the false forms).

    Raises:
        ConfigurationError: If the value is not one of the accepted forms
    """
    value = get_input(name, environ=environ)
    if not value:
        return default
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(
        f"Input does not meet YAML 1.2 \"Core Schema\" specification: {name}\n"
        "Support boolean input list: `true | True | TRUE | false | False | FALSE`"
    )


def add_mask(value: str) -> None:
    """Register a value for redaction in the workflow log."""
    issue_command("add-mask", value)


def set_output(name: str, value: str, environ: Mapping[str, str] | None = None) -> None:
    """
    Set a step output.

    Appends ``name<<delimiter`` / value / ``delimiter`` to the file named by
    ``GITHUB_OUTPUT`` when present, otherwise issues ``::set-output``.
    """
    env = os.environ if environ is None else environ
    output_file = env.get("GITHUB_OUTPUT", "")

    if not output_file:
        issue_command("set-output", value, {"name": name})
        return

    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    if delimiter in name or delimiter in value:
        raise ValueError("Unexpected input: output delimiter collides with name or value")

    with open(output_file, "a", encoding="utf-8") as f:
        f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")


def error(message: str) -> None:
    """Report an error annotation."""
    issue_command("error", message)


def set_failed(message: str) -> NoReturn:
    """Report the action as failed and exit with status 1."""
    error(message)
    logger.debug("Action marked as failed")
    sys.exit(1)
