"""Core reference parsing and document interpolation.

Key Components:

- parse_secret_references: secrets specification -> list[SecretReference]
- interpolate / interpolate_with_report: placeholder substitution over a
  single parsed YAML tree
- Node tree (ScalarNode, SequenceNode, MappingNode): tagged variant walked by
  PlaceholderWalker
- VisitResult: error monad returned by every node visit
- secrets: providers and the SecretMasker
"""

from .document import MappingNode, Node, ScalarNode, SequenceNode, build_tree, to_data
from .exceptions import (
    ConfigurationError,
    DocumentParseError,
    DuplicateOutputKeyError,
    InterpolationError,
    InvalidOutputKeyError,
    MalformedReferenceError,
    SecretReferenceError,
    YamlSecretsError,
)
from .interpolation import (
    InterpolationReport,
    PlaceholderWalker,
    Substitution,
    interpolate,
    interpolate_with_report,
    placeholder_patterns,
)
from .reference import SecretReference, parse_secret_references, resolve_self_link
from .visit_result import VisitResult, VisitStatus

__all__ = [
    # Parser
    "SecretReference",
    "parse_secret_references",
    "resolve_self_link",
    # Interpolation
    "interpolate",
    "interpolate_with_report",
    "InterpolationReport",
    "Substitution",
    "PlaceholderWalker",
    "placeholder_patterns",
    # Document tree
    "Node",
    "ScalarNode",
    "SequenceNode",
    "MappingNode",
    "build_tree",
    "to_data",
    "VisitResult",
    "VisitStatus",
    # Exceptions
    "YamlSecretsError",
    "ConfigurationError",
    "SecretReferenceError",
    "MalformedReferenceError",
    "DuplicateOutputKeyError",
    "InvalidOutputKeyError",
    "DocumentParseError",
    "InterpolationError",
]
