import pytest

from bst.bst_context import default_context
from bst.bst_engine import BSTEngine
from bst.bst_history import OperationHistory
from bst.bst_insert import insert
from bst.bst_metrics import inorder_keys
from bst.bst_model import create_initial_tree


def test_run_wraps_results_into_entries(engine):
    tree = create_initial_tree()
    entry, next_tree = engine.run(tree, "insert", 8)

    assert entry.op_id == "op-1"
    assert entry.op_type == "insert"
    assert entry.steps[0].action == "create-node"
    assert len(entry.pre_tree) == 0
    assert entry.post_tree == next_tree
    # entries keep their own copies
    assert entry.post_tree is not next_tree


def test_non_mutating_operations_return_same_tree(engine):
    _, tree = engine.run(create_initial_tree(), "insert", 8)

    search_entry, after_search = engine.run(tree, "search", 8)
    traverse_entry, after_traverse = engine.run(tree, "traverse", "in")

    assert after_search is tree
    assert after_traverse is tree
    assert search_entry.op_type == "search"
    assert traverse_entry.steps[-1].action == "visit-node"


def test_run_rejects_unknown_operation(engine):
    with pytest.raises(ValueError):
        engine.run(create_initial_tree(), "rotate", 1)


def test_build_inserts_in_order(engine):
    entries, tree = engine.build(create_initial_tree(), [8, 3, 10])

    assert [entry.op_type for entry in entries] == ["insert"] * 3
    assert inorder_keys(tree) == [3, 8, 10]
    assert entries[1].pre_tree == entries[0].post_tree


def test_undo_and_redo(engine):
    tree = create_initial_tree()
    history = OperationHistory(tree)
    for value in [8, 3, 10]:
        entry, tree = engine.run(history.tree, "insert", value)
        history.apply(entry)

    assert inorder_keys(history.tree) == [3, 8, 10]
    assert history.can_undo() and not history.can_redo()

    assert inorder_keys(history.undo()) == [3, 8]
    assert history.current_steps == []
    assert inorder_keys(history.undo()) == [8]
    assert history.can_redo()

    assert inorder_keys(history.redo()) == [3, 8]
    assert history.current_steps == history.current_entry.steps
    assert history.index == 1


def test_apply_after_undo_drops_redo_tail(engine):
    history = OperationHistory(create_initial_tree())
    for value in [8, 3, 10]:
        entry, _ = engine.run(history.tree, "insert", value)
        history.apply(entry)

    history.undo()
    history.undo()
    entry, _ = engine.run(history.tree, "insert", 20)
    history.apply(entry)

    assert len(history) == 2
    assert not history.can_redo()
    assert inorder_keys(history.tree) == [8, 20]


def test_undo_on_empty_history_is_noop():
    tree = create_initial_tree()
    history = OperationHistory(tree)

    assert history.undo() is tree
    assert history.redo() is tree
    assert history.current_entry is None


def test_reset_and_policy_switch(engine):
    initial = create_initial_tree()
    history = OperationHistory(initial)
    entry, _ = engine.run(initial, "insert", 5)
    history.apply(entry)

    history.set_duplicate_policy("multiset")
    assert history.tree.config.duplicate_policy == "multiset"

    history.reset()
    assert history.tree is initial
    assert len(history) == 0
    assert history.index == -1


def test_engines_without_context_share_the_default_counters():
    assert BSTEngine().context is default_context()

    tree = create_initial_tree(duplicate_policy="allow-right")
    tree = BSTEngine().insert(tree, 5).next
    tree = insert(tree, 5).next
    steps, tree = BSTEngine().insert(tree, 5)

    assert len(tree) == 3
    assert all(node.parent != node.id for node in tree.nodes.values())
    assert all(step.passed for step in steps)
