"""Tests for the typed document tree and VisitResult."""

import pytest
import yaml

from yaml_secrets_mcp.engine.document import (
    MappingNode,
    ScalarNode,
    SequenceNode,
    build_tree,
    to_data,
)
from yaml_secrets_mcp.engine.visit_result import VisitResult, VisitStatus


def test_build_tree_tags_every_node_kind():
    data = {"name": "app", "ports": [80, 443], "tls": {"enabled": True}, "extra": None}

    tree = build_tree(data).unwrap()

    assert isinstance(tree, MappingNode)
    assert tree.entries["name"] == ScalarNode(value="app")
    assert isinstance(tree.entries["ports"], SequenceNode)
    assert [item.value for item in tree.entries["ports"].items] == [80, 443]
    assert isinstance(tree.entries["tls"], MappingNode)
    assert tree.entries["extra"] == ScalarNode(value=None)


def test_to_data_inverts_build_tree():
    data = yaml.safe_load(
        """
        image:
          repository: nginx
          tag: "1.25"
        replicas: 3
        hosts: [a.example.com, b.example.com]
        env:
          - name: DEBUG
            value: "false"
        """
    )

    assert to_data(build_tree(data).unwrap()) == data


def test_scalar_root_document():
    tree = build_tree("just a string").unwrap()

    assert tree == ScalarNode(value="just a string")


def test_shared_alias_is_one_node():
    """The same anchored mapping used twice is shared, not rejected or copied."""
    data = yaml.safe_load("base: &b {x: 1}\na: *b\nc: [*b]\n")

    tree = build_tree(data).unwrap()

    assert tree.entries["a"] is tree.entries["base"]
    assert tree.entries["c"].items[0] is tree.entries["base"]
    restored = to_data(tree)
    assert restored == {"base": {"x": 1}, "a": {"x": 1}, "c": [{"x": 1}]}
    assert restored["a"] is restored["base"]
    assert restored["c"][0] is restored["base"]


def test_aliased_scalars_stay_independent():
    tree = build_tree(yaml.safe_load("a: &s text\nb: *s\n")).unwrap()

    assert tree.entries["a"] == tree.entries["b"]
    assert tree.entries["a"] is not tree.entries["b"]


def test_cyclic_sequence_alias_reports_path():
    data = yaml.safe_load("outer:\n  items: &loop [1, *loop]\n")

    result = build_tree(data)

    assert result.is_failure
    assert result.path == "outer.items[1]"
    assert "cyclic" in result.error


def test_cyclic_mapping_alias_reports_path():
    data = yaml.safe_load("root: &r\n  child: *r\n")

    result = build_tree(data)

    assert result.is_failure
    assert result.path == "root.child"


def test_visit_result_states():
    ok = VisitResult.success(ScalarNode(value=1))
    failed: VisitResult[ScalarNode] = VisitResult.failure("boom", "a.b")

    assert ok and ok.status == VisitStatus.SUCCESS
    assert not failed and failed.is_failure
    with pytest.raises(ValueError, match="a.b"):
        failed.unwrap()


def test_visit_result_rejects_inconsistent_state():
    with pytest.raises(ValueError):
        VisitResult(status=VisitStatus.SUCCESS)
    with pytest.raises(ValueError):
        VisitResult(status=VisitStatus.FAILED, error="no path")
