"""Orchestration of one interpolation run.

Wires the reference parser, a secret provider, the masker and the
interpolation engine together:

1. Check the document exists (before any secret is fetched)
2. Parse the secrets specification
3. Fetch each secret in order, mask it, add it to the substitution map
4. Interpolate the document and write the result

Fetches are strictly sequential. Any failure aborts the run before the
output file is written, so a document is never partially interpolated.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .config import ActionConfig
from .engine.exceptions import ConfigurationError
from .engine.interpolation import Substitution, interpolate_with_report
from .engine.reference import SecretReference, parse_secret_references
from .engine.secrets import SecretMasker, SecretProvider

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Outcome of a successful run (no secret values)."""

    output_file: Path
    references: list[SecretReference] = field(default_factory=list)
    substitutions: list[Substitution] = field(default_factory=list)

    @property
    def unused_outputs(self) -> list[str]:
        """Output keys that matched no placeholder in the document."""
        used = {sub.key for sub in self.substitutions}
        return [ref.output for ref in self.references if ref.output not in used]

    def to_dict(self) -> dict[str, object]:
        return {
            "output_file": str(self.output_file),
            "references": [{"locator": r.locator, "output": r.output} for r in self.references],
            "substitutions": [{"path": s.path, "key": s.key} for s in self.substitutions],
            "unused_outputs": self.unused_outputs,
        }


async def resolve_secrets(
    references: list[SecretReference],
    provider: SecretProvider,
    masker: SecretMasker,
) -> dict[str, str]:
    """
    Fetch every referenced secret, masking each value before it is stored.

    Args:
        references: Parsed references, fetched in list order
        provider: Secret provider
        masker: Masker receiving every resolved value

    Returns:
        Substitution map (output key -> secret value)

    Raises:
        SecretError: Whatever the provider raises, unchanged
    """
    substitutions: dict[str, str] = {}

    for reference in references:
        logger.info(f"Accessing secret {reference.locator} as {reference.output}")
        value = await provider.get_secret(reference.locator)
        masked = masker.mask(value)
        logger.debug(f"Masked {len(masked)} line(s) of {reference.output}")
        substitutions[reference.output] = value

    return substitutions


def check_document_path(path: Path) -> None:
    """Raise ConfigurationError unless ``path`` is an existing file."""
    if not path.exists():
        raise ConfigurationError(f"File {path} does not exist")
    if not path.is_file():
        raise ConfigurationError(f"Path is not a file: {path}")


def interpolate_file(
    document_path: Path,
    output_path: Path,
    substitutions: Mapping[str, str],
    verbose: bool = False,
) -> list[Substitution]:
    """Interpolate a document file and write the result to ``output_path``."""
    check_document_path(document_path)
    try:
        document = document_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Failed to read file '{document_path}': {e}") from e

    report = interpolate_with_report(
        document, substitutions, verbose=verbose, source=str(document_path)
    )

    output_path.write_text(report.document, encoding="utf-8")
    logger.info(
        f"Wrote {output_path} ({len(report.substitutions)} substitution(s), "
        f"keys: {', '.join(report.substituted_keys) or 'none'})"
    )
    return report.substitutions


async def run_interpolation(
    config: ActionConfig,
    provider: SecretProvider,
    masker: SecretMasker | None = None,
) -> RunResult:
    """
    Run one complete interpolation.

    Args:
        config: Action configuration
        provider: Secret provider used for every reference
        masker: Masker for resolved values (default: a masker without a sink,
            using ``config.min_mask_length``)

    Returns:
        RunResult describing what was written

    Raises:
        ConfigurationError: Missing document
        SecretReferenceError: Malformed secrets specification
        SecretError: Provider failure
        DocumentParseError: Document is not valid YAML
        InterpolationError: Tree walk or serialization failure
    """
    if masker is None:
        masker = SecretMasker(min_length=config.min_mask_length)

    check_document_path(config.document_path)

    references = parse_secret_references(config.secrets)
    logger.info(f"Parsed {len(references)} secret reference(s)")

    substitutions = await resolve_secrets(references, provider, masker)

    applied = interpolate_file(
        config.document_path,
        config.resolved_output_path,
        substitutions,
        verbose=config.verbose,
    )

    result = RunResult(
        output_file=config.resolved_output_path,
        references=references,
        substitutions=applied,
    )
    for output in result.unused_outputs:
        logger.warning(f"Output key '{output}' matched no placeholder in {config.document_path}")

    return result
