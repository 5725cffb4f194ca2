import logging

import pytest

from bst.bst_context import EngineContext
from bst.bst_model import BSTNode, TreeState
from bst.bst_recorder import (
    InvariantError,
    StepRecorder,
    check_bst_property,
    check_links,
    make_invariant_checks,
)


def broken_order_tree():
    nodes = {
        "a": BSTNode("a", 5, left="b"),
        "b": BSTNode("b", 9, parent="a"),
    }
    return TreeState(root="a", nodes=nodes)


def test_bst_property_accepts_valid_tree(build_tree):
    assert check_bst_property(build_tree([8, 3, 10, 1, 6, 14])) == (True, None)


def test_bst_property_uses_ancestor_bounds():
    # 9 is a valid right child of 3 but sits in the left subtree of 8
    nodes = {
        "r": BSTNode("r", 8, left="l"),
        "l": BSTNode("l", 3, parent="r", right="x"),
        "x": BSTNode("x", 9, parent="l"),
    }
    passed, detail = check_bst_property(TreeState(root="r", nodes=nodes))

    assert passed is False
    assert detail == "9 is above its upper bound 8"


def test_parent_link_mismatch_is_reported():
    nodes = {
        "a": BSTNode("a", 5, left="b"),
        "b": BSTNode("b", 3, parent=None),
    }
    parents, owners = check_links(TreeState(root="a", nodes=nodes))

    assert parents.passed is False
    assert owners.passed is True


def test_shared_child_is_reported():
    nodes = {
        "a": BSTNode("a", 5, left="b", right="b"),
        "b": BSTNode("b", 5, parent="a"),
    }
    _, owners = check_links(TreeState(root="a", nodes=nodes))

    assert owners.passed is False
    assert "more than one referrer" in owners.detail


def test_invariant_check_names(build_tree):
    checks = make_invariant_checks(build_tree([2, 1, 3]))
    assert [check.name for check in checks] == ["BST property", "Parent links", "Single owner"]
    assert all(check.passed for check in checks)


def test_recorder_assigns_contiguous_indices(build_tree):
    tree = build_tree([2, 1])
    recorder = StepRecorder("search", EngineContext())
    for _ in range(3):
        recorder.record("compare", "look", tree)

    steps = recorder.finish()
    assert [step.index for step in steps] == [0, 1, 2]
    assert [step.id for step in steps] == ["search-1", "search-2", "search-3"]


def test_recorded_snapshot_is_isolated(build_tree):
    tree = build_tree([2, 1])
    recorder = StepRecorder("insert", EngineContext())
    step = recorder.record("compare", "before change", tree)

    tree.nodes[tree.root].key = 100

    assert step.tree_snapshot.key_of(step.tree_snapshot.root) == 2
    assert step.tree_snapshot.config is tree.config


def test_failed_check_is_recorded_and_logged(caplog):
    recorder = StepRecorder("insert", EngineContext())
    with caplog.at_level(logging.WARNING, logger="bst.bst_recorder"):
        step = recorder.record("compare", "broken", broken_order_tree())

    assert step.passed is False
    assert "failed checks" in caplog.text


def test_strict_context_raises():
    recorder = StepRecorder("insert", EngineContext(strict_invariants=True))
    with pytest.raises(InvariantError):
        recorder.record("compare", "broken", broken_order_tree())


def test_unknown_action_and_operation():
    with pytest.raises(ValueError):
        StepRecorder("rotate")
    recorder = StepRecorder("insert", EngineContext())
    with pytest.raises(ValueError):
        recorder.record("rotate-left", "no balancing", TreeState())


def test_highlights_drop_missing_nodes(build_tree):
    tree = build_tree([2])
    recorder = StepRecorder("delete", EngineContext())
    step = recorder.record("transplant", "leaf", tree, nodes=(tree.root, None))

    assert step.highlights.nodes == (tree.root,)
