"""Masking of resolved secret values.

Before a resolved value enters the substitution map it is split on line
breaks (``\\r\\n``, ``\\r`` or ``\\n``) and every line that is at least
``min_length`` characters long is registered for redaction:

- with the host logging system through a sink callback (for GitHub Actions
  this is the ``::add-mask::`` workflow command), and
- with the masker itself, so messages this process produces can be redacted
  before they are printed or returned.

Very short lines are not masked. Masking a 1-2 character line would make
all log output unreadable, while multi-line payloads such as private keys
stay protected line by line.

Example:
    >>> masker = SecretMasker(min_length=3, sink=print)
    >>> masker.mask("ab\\ncdefgh")
    cdefgh
    ['cdefgh']
    >>> masker.redact({"error": "bad token cdefgh"})
    {'error': 'bad token ***REDACTED***'}
"""

import re
from collections.abc import Callable
from typing import Any

LINE_BREAK = re.compile(r"\r\n|\r|\n")


class SecretMasker:
    """Registers secret lines for redaction and redacts them from data.

    Attributes:
        min_length: Lines shorter than this are never masked
        sink: Callback receiving each masked line (log-redaction collaborator)
        masked_lines: Lines registered so far, in registration order
        REDACTION_MARKER: String used to replace redacted secrets ("***REDACTED***")
    """

    # Marker used to replace redacted secrets
    REDACTION_MARKER = "***REDACTED***"

    def __init__(self, min_length: int = 4, sink: Callable[[str], None] | None = None) -> None:
        """Initialize the masker.

        Args:
            min_length: Minimum line length to mask (must be >= 0)
            sink: Optional callback invoked once per masked line
        """
        if min_length < 0:
            raise ValueError(f"min_length must be >= 0, got {min_length}")
        self.min_length = min_length
        self.sink = sink
        self.masked_lines: list[str] = []
        self.redaction_patterns: list[re.Pattern[str]] = []

    def mask(self, value: str) -> list[str]:
        """
        Register every sufficiently long line of ``value`` for redaction.

        Args:
            value: Resolved secret value (may be multi-line)

        Returns:
            The lines that were newly registered, in order
        """
        registered: list[str] = []

        for line in LINE_BREAK.split(value):
            if not line or len(line) < self.min_length:
                continue
            if self.sink is not None:
                self.sink(line)
            if line not in self.masked_lines:
                self.masked_lines.append(line)
                registered.append(line)

        if registered:
            self._compile_redaction_patterns()

        return registered

    def _compile_redaction_patterns(self) -> None:
        """Compile escaped patterns, longest first so substrings never win."""
        self.redaction_patterns = [
            re.compile(re.escape(line)) for line in sorted(self.masked_lines, key=len, reverse=True)
        ]

    def redact(self, data: Any) -> Any:  # noqa: ANN401
        """
        Redact masked lines from any data structure.

        Strings have every masked line replaced by REDACTION_MARKER. Dicts,
        lists and tuples are redacted recursively with their structure kept;
        other types are returned as-is.

        Example:
            >>> masker.redact(["safe_value", "cdefgh", 123])
            ['safe_value', '***REDACTED***', 123]
        """
        if isinstance(data, str):
            return self._redact_string(data)

        if isinstance(data, dict):
            return {key: self.redact(value) for key, value in data.items()}

        if isinstance(data, list):
            return [self.redact(item) for item in data]

        if isinstance(data, tuple):
            return tuple(self.redact(item) for item in data)

        return data

    def _redact_string(self, text: str) -> str:
        redacted_text = text
        for pattern in self.redaction_patterns:
            redacted_text = pattern.sub(self.REDACTION_MARKER, redacted_text)
        return redacted_text
