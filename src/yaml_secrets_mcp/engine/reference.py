"""Parsing of the user-supplied secrets specification.

The specification is a single string holding one or more secret references.
This is the only way users name resolved values, so the syntax is fixed:

- Entries are separated by newlines or commas.
- Each entry has the form ``<locator>:<OUTPUT_KEY>``. The output key is the
  text after the LAST colon, so a locator may itself contain colons.
- Whitespace around entries, locators and output keys is ignored.
- Empty entries (blank lines, trailing commas) are skipped.
- Output keys must match ``[A-Za-z_][A-Za-z0-9_]*`` so they can be used as
  ``$KEY`` and ``${KEY}`` placeholders in the document.
- Output keys must be unique within one specification.

Example:
    ```yaml
    secrets: |-
      projects/my-project/secrets/db-password/versions/3:DB_PASS
      my-project/api-token:API_TOKEN
    ```

The locator is opaque to the parser. Providers that understand Secret Manager
resource names resolve it with ``SecretReference.self_link()``.
"""

import re
from dataclasses import dataclass

from .exceptions import DuplicateOutputKeyError, InvalidOutputKeyError, MalformedReferenceError

# Entries are separated by newlines (any convention) or commas
ENTRY_SEPARATOR = re.compile(r"\r\n|\r|\n|,")

OUTPUT_KEY_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

_FULL_SELF_LINK = re.compile(r"^projects/([^/]+)/secrets/([^/]+)/versions/([^/]+)$")
_FULL_LATEST_LINK = re.compile(r"^projects/([^/]+)/secrets/([^/]+)$")
_SHORT_VERSIONED = re.compile(r"^([^/]+)/([^/]+)/([^/]+)$")
_SHORT_LATEST = re.compile(r"^([^/]+)/([^/]+)$")


@dataclass(frozen=True)
class SecretReference:
    """A parsed locator and the output key used to find its placeholder.

    Attributes:
        locator: Resource path of the secret in the backing store
        output: Substitution key (``$output`` / ``${output}`` in the document)
    """

    locator: str
    output: str

    def self_link(self) -> str:
        """Full Secret Manager version resource name for this reference."""
        return resolve_self_link(self.locator)

    def __str__(self) -> str:
        return f"{self.locator}:{self.output}"


def resolve_self_link(locator: str) -> str:
    """Resolve a locator into a full Secret Manager version resource name.

    Accepted forms:
        projects/<project>/secrets/<secret>/versions/<version>
        projects/<project>/secrets/<secret>      (version "latest")
        <project>/<secret>/<version>
        <project>/<secret>                       (version "latest")

    Raises:
        MalformedReferenceError: If the locator matches none of the forms

    Examples:
        >>> resolve_self_link("my-project/db-password")
        'projects/my-project/secrets/db-password/versions/latest'
    """
    normalized = locator.strip().strip("/")

    if match := _FULL_SELF_LINK.match(normalized):
        project, secret, version = match.groups()
    elif match := _FULL_LATEST_LINK.match(normalized):
        project, secret = match.groups()
        version = "latest"
    elif normalized.startswith("projects/"):
        raise MalformedReferenceError(
            entry=locator,
            reason="expected projects/<project>/secrets/<secret>[/versions/<version>]",
        )
    elif match := _SHORT_VERSIONED.match(normalized):
        project, secret, version = match.groups()
    elif match := _SHORT_LATEST.match(normalized):
        project, secret = match.groups()
        version = "latest"
    else:
        raise MalformedReferenceError(
            entry=locator,
            reason="expected <project>/<secret>[/<version>] or a full resource name",
        )

    return f"projects/{project}/secrets/{secret}/versions/{version}"


def parse_secret_reference(entry: str) -> SecretReference:
    """Parse a single ``<locator>:<OUTPUT_KEY>`` entry.

    Args:
        entry: One non-empty entry from the specification

    Returns:
        The parsed SecretReference

    Raises:
        MalformedReferenceError: If the colon, locator or output key is missing
        InvalidOutputKeyError: If the output key is not a valid identifier
    """
    entry = entry.strip()

    locator, sep, output = entry.rpartition(":")
    if not sep:
        raise MalformedReferenceError(entry=entry, reason="missing ':<OUTPUT_KEY>' suffix")

    locator = locator.strip()
    output = output.strip()

    if not output:
        raise MalformedReferenceError(entry=entry, reason="output key is empty")
    if not locator:
        raise MalformedReferenceError(entry=entry, reason="locator is empty")
    if not OUTPUT_KEY_PATTERN.match(output):
        raise InvalidOutputKeyError(entry=entry, output=output)

    return SecretReference(locator=locator, output=output)


def parse_secret_references(raw: str) -> list[SecretReference]:
    """
    Parse a secrets specification into an ordered list of references.

    Fails fast on the first bad entry; no partial list is ever returned.

    Args:
        raw: The raw specification (see module docstring for the syntax)

    Returns:
        References in the order they appear in ``raw``

    Raises:
        MalformedReferenceError: Entry lacks a locator or output key
        DuplicateOutputKeyError: An output key appears more than once
        InvalidOutputKeyError: Output key is not a valid placeholder identifier

    Examples:
        >>> parse_secret_references("projects/p/secrets/s/versions/1:DB_PASS")
        [SecretReference(locator='projects/p/secrets/s/versions/1', output='DB_PASS')]
        >>> len(parse_secret_references("p/a:A,\\n p/b:B,"))
        2
    """
    references: list[SecretReference] = []
    seen: set[str] = set()

    for entry in ENTRY_SEPARATOR.split(raw):
        entry = entry.strip()
        if not entry:
            continue

        reference = parse_secret_reference(entry)
        if reference.output in seen:
            raise DuplicateOutputKeyError(entry=entry, output=reference.output)

        seen.add(reference.output)
        references.append(reference)

    return references
