"""Exceptions raised by the reference parser and the interpolation engine.

Exception Hierarchy:
    YamlSecretsError (base)
    ├── ConfigurationError (invalid or missing inputs)
    ├── SecretReferenceError (parser)
    │   ├── MalformedReferenceError (entry without locator or output key)
    │   │   └── DuplicateOutputKeyError (same output key used twice)
    │   └── InvalidOutputKeyError (output key unusable as a placeholder)
    ├── DocumentParseError (document is not valid YAML)
    └── InterpolationError (tree walk or re-serialization failed)

None of these are recoverable inside the engine. They are raised with the
original cause chained so the caller can report one actionable message.
"""

from __future__ import annotations


class YamlSecretsError(Exception):
    """Base exception for all yaml-secrets errors."""

    pass


class ConfigurationError(YamlSecretsError):
    """Raised when action inputs or server settings are missing or invalid."""

    pass


class SecretReferenceError(YamlSecretsError):
    """
    Base class for errors found while parsing the secrets specification.

    Attributes:
        entry: The raw entry (after trimming) that could not be parsed
    """

    def __init__(self, entry: str, message: str):
        self.entry = entry
        super().__init__(message)


class MalformedReferenceError(SecretReferenceError):
    """
    Entry does not resolve to exactly one locator and one output key.

    Example:
        >>> raise MalformedReferenceError(
        ...     entry="projects/p/secrets/s",
        ...     reason="missing ':<OUTPUT_KEY>' suffix",
        ... )
    """

    def __init__(self, entry: str, reason: str):
        self.reason = reason
        super().__init__(entry, f"Malformed secret reference '{entry}': {reason}")


class DuplicateOutputKeyError(MalformedReferenceError):
    """Two entries in the same specification share an output key."""

    def __init__(self, entry: str, output: str):
        self.output = output
        super().__init__(entry, f"output key '{output}' is already used by an earlier entry")


class InvalidOutputKeyError(SecretReferenceError):
    """
    Output key cannot be used as a ``$KEY`` / ``${KEY}`` placeholder.

    Output keys must start with a letter or underscore and contain only
    letters, digits and underscores.
    """

    def __init__(self, entry: str, output: str):
        self.output = output
        super().__init__(
            entry,
            f"Invalid output key '{output}' in secret reference '{entry}': "
            "keys must match [A-Za-z_][A-Za-z0-9_]*",
        )


class DocumentParseError(YamlSecretsError):
    """
    Document text could not be parsed as YAML.

    Attributes:
        source: Identifier of the document (file path or "<string>")
    """

    def __init__(self, source: str, details: str):
        self.source = source
        self.details = details
        super().__init__(f"Invalid YAML syntax in {source}: {details}")


class InterpolationError(YamlSecretsError):
    """
    Failure while walking or re-serializing a parsed document.

    Attributes:
        path: Document path of the offending node ("$" for the root), or None
            when the failure is not tied to a node (serialization)
    """

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        if path is not None:
            message = f"{message} (at {path})"
        super().__init__(f"Can't interpolate yaml data: {message}")

    def __repr__(self) -> str:
        """Developer-friendly representation."""
        return f"InterpolationError(path={self.path!r})"
