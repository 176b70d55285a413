"""
Placeholder interpolation for YAML documents.

Given a substitution map (output key -> resolved secret value) and the raw
text of a YAML document, replaces every string scalar that references a key
and re-serializes the document.

Placeholder forms for a key ``KEY``:
    ${KEY}   braced form, matched anywhere in the scalar
    $KEY     bare form, matched only when not followed by [A-Za-z0-9_]

The bare form needs a token boundary so that ``$DB_PASS`` is never taken as a
reference to ``DB``. Keys are also processed longest first.

Replacement is whole-value: a scalar that contains a placeholder is replaced
entirely by the secret value, it is not a template string. Given
``{a: "$SECRET", b: "prefix-$SECRET"}`` and ``{SECRET: "xyz"}`` both ``a`` and
``b`` become ``"xyz"``.

Example:
    >>> interpolate("password: ${DB_PASS}\\nother: keep-me", {"DB_PASS": "s3cr3t"})
    'password: s3cr3t\\nother: keep-me\\n'
"""

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import yaml

from .document import (
    ROOT_PATH,
    MappingNode,
    Node,
    ScalarNode,
    SequenceNode,
    build_tree,
    child_path,
    item_path,
    to_data,
)
from .exceptions import DocumentParseError, InterpolationError
from .visit_result import VisitResult

logger = logging.getLogger(__name__)

# Characters that continue a bare $KEY token
_TOKEN_CONTINUATION = r"(?![A-Za-z0-9_])"


@dataclass(frozen=True)
class Substitution:
    """One replaced scalar. Never holds the secret value."""

    path: str
    key: str


@dataclass
class InterpolationReport:
    """Result of an interpolation pass.

    Attributes:
        document: Re-serialized YAML text
        substitutions: Replaced scalars in the order they were replaced
    """

    document: str
    substitutions: list[Substitution] = field(default_factory=list)

    @property
    def substituted_keys(self) -> list[str]:
        """Distinct keys that matched at least one scalar, in first-match order."""
        return list(dict.fromkeys(sub.key for sub in self.substitutions))


def placeholder_patterns(key: str) -> list[re.Pattern[str]]:
    """
    Build the braced and bare placeholder patterns for a key.

    Examples:
        >>> [p.pattern for p in placeholder_patterns("DB")]
        ['\\\\$\\\\{DB\\\\}', '\\\\$DB(?![A-Za-z0-9_])']
    """
    return [
        re.compile(re.escape("${" + key + "}")),
        re.compile(re.escape("$" + key) + _TOKEN_CONTINUATION),
    ]


class PlaceholderWalker:
    """
    Recursive visitor replacing scalars that match one placeholder pattern.

    The walker mutates ScalarNode values in place. Containers are only
    recursed into, so the shape of the tree never changes. A container shared
    through YAML aliases is walked once; its substitutions are reported under
    the path where it was first reached. Every visit returns a VisitResult;
    a failure carries the path of the offending node and is propagated to
    the caller without raising.
    """

    def __init__(self, key: str, pattern: re.Pattern[str], value: str, verbose: bool = False):
        self.key = key
        self.pattern = pattern
        self.value = value
        self.verbose = verbose
        self.substitutions: list[Substitution] = []
        self._visited: set[int] = set()

    def visit(self, node: Node, path: str) -> VisitResult[Node]:
        match node:
            case ScalarNode(value=str() as text, substituted=False):
                if self.pattern.search(text):
                    node.value = self.value
                    node.substituted = True
                    self._record(path)
                return VisitResult.success(node)

            case ScalarNode():
                return VisitResult.success(node)

            case SequenceNode() | MappingNode() if id(node) in self._visited:
                return VisitResult.success(node)

            case SequenceNode(items=items):
                self._visited.add(id(node))
                for index, item in enumerate(items):
                    result = self.visit(item, item_path(path, index))
                    if result.is_failure:
                        return result
                return VisitResult.success(node)

            case MappingNode(entries=entries):
                self._visited.add(id(node))
                for key, value in entries.items():
                    result = self.visit(value, child_path(path, key))
                    if result.is_failure:
                        return result
                return VisitResult.success(node)

        return VisitResult.failure(f"unsupported node type {type(node).__name__}", path)

    def _record(self, path: str) -> None:
        self.substitutions.append(Substitution(path=path, key=self.key))
        level = logging.INFO if self.verbose else logging.DEBUG
        logger.log(level, f"Substituted '{self.key}' at {path}")


def parse_documents(document: str, source: str = "<string>") -> list[Any]:
    """
    Parse YAML text into plain Python data, one entry per document in the stream.

    Raises:
        DocumentParseError: If the text is not valid YAML
    """
    try:
        return list(yaml.safe_load_all(document))
    except yaml.YAMLError as e:
        raise DocumentParseError(source, str(e)) from e
    except RecursionError as e:
        raise DocumentParseError(source, "document nesting is too deep") from e


def serialize_documents(documents: list[Any]) -> str:
    """
    Serialize parsed documents back to YAML text.

    A single document is written without a ``---`` marker; streams of several
    documents get one before each document.

    Raises:
        InterpolationError: If PyYAML cannot represent the data
    """
    options: dict[str, Any] = {
        "sort_keys": False,
        "allow_unicode": True,
        "default_flow_style": False,
    }
    try:
        if len(documents) == 1:
            return yaml.safe_dump(documents[0], **options)
        return yaml.safe_dump_all(documents, explicit_start=True, **options)
    except yaml.YAMLError as e:
        raise InterpolationError(f"failed to serialize document: {e}") from e
    except RecursionError as e:
        raise InterpolationError("document nesting is too deep") from e


def _root_path(index: int, count: int) -> str:
    return ROOT_PATH if count == 1 else f"{ROOT_PATH}{index}"


def _substitute(
    data: list[Any], substitutions: Mapping[str, str], verbose: bool
) -> tuple[list[Any], list[Substitution]]:
    """Apply every key to the parsed documents; returns new data and replaced paths."""
    trees: list[tuple[str, Node]] = []
    for index, item in enumerate(data):
        root = _root_path(index, len(data))
        built = build_tree(item, root)
        if built.is_failure:
            raise InterpolationError(built.error or "invalid document", path=built.path)
        trees.append((root, built.unwrap()))

    applied: list[Substitution] = []
    for key in sorted(substitutions, key=len, reverse=True):
        value = substitutions[key]
        for pattern in placeholder_patterns(key):
            walker = PlaceholderWalker(key, pattern, value, verbose=verbose)
            for root, tree in trees:
                result = walker.visit(tree, root)
                if result.is_failure:
                    raise InterpolationError(result.error or "walk failed", path=result.path)
            applied.extend(walker.substitutions)

    return [to_data(tree) for _, tree in trees], applied


def interpolate_with_report(
    document: str,
    substitutions: Mapping[str, str],
    *,
    verbose: bool = False,
    source: str = "<string>",
) -> InterpolationReport:
    """
    Replace placeholder scalars in a YAML document and report what changed.

    The document is parsed once. Every key is applied, longest first, to the
    same tree, and the tree is serialized once at the end. A scalar replaced
    by one key is never matched again by a later key. Containers shared
    through YAML aliases stay shared and are written back as anchors.

    Documents that contain no YAML content (empty text or only comments) are
    returned unchanged. Placeholders for keys missing from ``substitutions``
    are left untouched.

    Args:
        document: Raw YAML text
        substitutions: Output key -> resolved secret value
        verbose: Log each substitution at INFO instead of DEBUG
        source: Name of the document for error messages

    Returns:
        InterpolationReport with the new text and the replaced paths

    Raises:
        DocumentParseError: If ``document`` is not valid YAML
        InterpolationError: If the tree cannot be walked or re-serialized
    """
    data = parse_documents(document, source=source)
    if not data:
        logger.debug(f"No YAML content in {source}, leaving it unchanged")
        return InterpolationReport(document=document)

    try:
        documents, applied = _substitute(data, substitutions, verbose)
    except RecursionError as e:
        raise InterpolationError("document nesting is too deep") from e

    report = InterpolationReport(
        document=serialize_documents(documents),
        substitutions=applied,
    )

    logger.log(
        logging.INFO if verbose else logging.DEBUG,
        f"Interpolated {len(report.substitutions)} value(s) in {source} "
        f"using {len(substitutions)} key(s)",
    )
    return report


def interpolate(
    document: str,
    substitutions: Mapping[str, str],
    *,
    verbose: bool = False,
    source: str = "<string>",
) -> str:
    """
    Replace placeholder scalars in a YAML document.

    See interpolate_with_report() for the full contract.

    Returns:
        The re-serialized YAML text
    """
    return interpolate_with_report(
        document, substitutions, verbose=verbose, source=source
    ).document
