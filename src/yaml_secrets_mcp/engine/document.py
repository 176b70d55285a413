"""Typed document tree for parsed YAML.

PyYAML produces plain dicts, lists and scalars. Before interpolation the
structure is converted into an explicit tagged variant:

    Node = ScalarNode | SequenceNode | MappingNode

so the walker can pattern-match on node kind and the shape of the document
(mapping keys, sequence lengths, nesting) is carried by the containers only.
Interpolation replaces ScalarNode values in place and never touches
containers.

Paths:
    Nodes are addressed with a dotted path from the document root, e.g.
    ``db.password`` or ``hosts[2].name``. The root itself is ``$``. In a
    multi-document stream the roots are ``$0``, ``$1`` and so on.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .visit_result import VisitResult

ROOT_PATH = "$"


@dataclass
class ScalarNode:
    """Leaf value: str, int, float, bool, None, date or any other YAML scalar.

    Attributes:
        value: The scalar value
        substituted: True once the value has been replaced by a secret, so
            later keys never re-match text that came from a secret value
    """

    value: Any
    substituted: bool = False


@dataclass
class SequenceNode:
    """Ordered YAML sequence."""

    items: list[Node] = field(default_factory=list)


@dataclass
class MappingNode:
    """Keyed YAML mapping (insertion order preserved)."""

    entries: dict[Any, Node] = field(default_factory=dict)


Node = ScalarNode | SequenceNode | MappingNode


def child_path(parent: str, key: Any) -> str:
    """Path of a mapping entry below ``parent``."""
    if parent == ROOT_PATH:
        return str(key)
    return f"{parent}.{key}"


def item_path(parent: str, index: int) -> str:
    """Path of a sequence item below ``parent``."""
    return f"{parent}[{index}]"


def build_tree(data: Any, path: str = ROOT_PATH) -> VisitResult[Node]:
    """
    Convert PyYAML output into a Node tree.

    Containers reached through several aliases (``base: &b {...}`` then
    ``a: *b``) become one shared Node, so the tree stays as small as the
    document text and ``to_data`` re-emits the anchor. Anchors that point to
    an ancestor produce a cyclic structure (``a: &x [*x]``) that cannot be
    serialized as a tree; such a document yields a failed result naming the
    path where the cycle closes.

    Args:
        data: Value returned by ``yaml.safe_load``
        path: Path of ``data`` in the document

    Returns:
        VisitResult with the root Node, or a failure with the offending path
    """
    return _build(data, path, frozenset(), {})


def _build(
    data: Any, path: str, ancestors: frozenset[int], built: dict[int, Node]
) -> VisitResult[Node]:
    # Only containers are shared; scalars are immutable and may be interned
    if isinstance(data, dict | list):
        if id(data) in ancestors:
            return VisitResult.failure("cyclic alias reference", path)
        if id(data) in built:
            return VisitResult.success(built[id(data)])

    match data:
        case dict():
            inner = ancestors | {id(data)}
            entries: dict[Any, Node] = {}
            for key, value in data.items():
                result = _build(value, child_path(path, key), inner, built)
                if result.is_failure:
                    return result
                entries[key] = result.unwrap()
            node: Node = MappingNode(entries=entries)

        case list():
            inner = ancestors | {id(data)}
            items: list[Node] = []
            for index, value in enumerate(data):
                result = _build(value, item_path(path, index), inner, built)
                if result.is_failure:
                    return result
                items.append(result.unwrap())
            node = SequenceNode(items=items)

        case _:
            return VisitResult.success(ScalarNode(value=data))

    built[id(data)] = node
    return VisitResult.success(node)


def to_data(node: Node) -> Any:  # noqa: ANN401
    """Convert a Node tree back into plain Python structures for PyYAML.

    A shared container Node maps to one shared object, which ``yaml.safe_dump``
    writes once with an anchor and then as aliases.
    """
    return _to_data(node, {})


def _to_data(node: Node, converted: dict[int, Any]) -> Any:  # noqa: ANN401
    if id(node) in converted:
        return converted[id(node)]

    match node:
        case ScalarNode(value=value):
            return value
        case SequenceNode(items=items):
            sequence: list[Any] = []
            converted[id(node)] = sequence
            sequence.extend(_to_data(item, converted) for item in items)
            return sequence
        case MappingNode(entries=entries):
            mapping: dict[Any, Any] = {}
            converted[id(node)] = mapping
            for key, value in entries.items():
                mapping[key] = _to_data(value, converted)
            return mapping
    raise TypeError(f"Unknown node type: {type(node).__name__}")
