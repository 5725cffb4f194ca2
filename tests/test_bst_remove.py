import random

from bst.bst_insert import insert
from bst.bst_metrics import inorder_keys, tree_shape
from bst.bst_model import create_initial_tree
from bst.bst_recorder import check_bst_property
from bst.bst_remove import remove


def test_remove_from_empty_tree(context):
    tree = create_initial_tree()
    steps, next_tree = remove(tree, 5, context)

    assert next_tree is tree
    assert len(steps) == 1
    assert steps[0].reason == "Tree is empty; nothing to delete."


def test_remove_missing_key_returns_original(build_tree, context):
    tree = build_tree([8, 3, 10])
    steps, next_tree = remove(tree, 4, context)

    assert next_tree is tree
    assert [step.action for step in steps] == ["compare", "move-left", "compare", "move-right"]
    assert steps[-1].reason == "No right child from 3; 4 not present."


def test_remove_leaf(build_tree, context):
    tree = build_tree([5, 3, 8])
    three_id = tree.find_id(3)
    steps, next_tree = remove(tree, 3, context)

    assert inorder_keys(next_tree) == [5, 8]
    assert three_id not in next_tree.nodes
    assert next_tree.nodes[next_tree.root].left is None
    assert steps[-1].action == "delete-node"
    assert steps[-1].payload == {"removed": three_id}
    assert [step.action for step in steps].count("transplant") == 1


def test_remove_node_with_only_left_child(build_tree, context):
    tree = build_tree([5, 3, 1])
    _, next_tree = remove(tree, 3, context)

    root = next_tree.nodes[next_tree.root]
    one_id = next_tree.find_id(1)
    assert root.left == one_id
    assert next_tree.nodes[one_id].parent == root.id


def test_remove_node_with_only_right_child(build_tree, context):
    tree = build_tree([5, 3, 4])
    _, next_tree = remove(tree, 3, context)

    root = next_tree.nodes[next_tree.root]
    four_id = next_tree.find_id(4)
    assert root.left == four_id
    assert next_tree.nodes[four_id].parent == root.id


def test_remove_root_with_single_child(build_tree, context):
    tree = build_tree([5, 8, 9])
    _, next_tree = remove(tree, 5, context)

    assert next_tree.key_of(next_tree.root) == 8
    assert next_tree.nodes[next_tree.root].parent is None


def test_remove_two_children_uses_inorder_successor(build_tree, context):
    tree = build_tree([5, 3, 8, 1, 4, 7, 9])
    steps, next_tree = remove(tree, 5, context)

    assert inorder_keys(next_tree) == [1, 3, 4, 7, 8, 9]
    assert next_tree.key_of(next_tree.root) == 7
    root = next_tree.nodes[next_tree.root]
    assert root.parent is None
    assert next_tree.key_of(root.left) == 3
    assert next_tree.key_of(root.right) == 8
    assert next_tree.nodes[root.right].left is None
    assert next_tree.nodes[root.left].parent == root.id
    assert next_tree.nodes[root.right].parent == root.id

    successor_step = [step for step in steps if step.action == "visit-node"][-1]
    assert successor_step.reason == "Successor identified: 7."


def test_remove_with_immediate_right_successor(build_tree, context):
    tree = build_tree([5, 3, 8, 9])
    steps, next_tree = remove(tree, 5, context)

    assert tree_shape(next_tree) == (8, (3, None, None), (9, None, None))
    # no lift is needed when the successor is the right child
    assert not any(step.reason.startswith("Lift successor") for step in steps)


def test_remove_with_deep_successor(build_tree, context):
    tree = build_tree([10, 5, 20, 15, 25, 17])
    steps, next_tree = remove(tree, 10, context)

    assert tree_shape(next_tree) == (
        15,
        (5, None, None),
        (20, (17, None, None), (25, None, None)),
    )
    assert any(step.reason == "Lift successor 15; connect its right child upwards." for step in steps)
    seventeen = next_tree.nodes[next_tree.find_id(17)]
    assert next_tree.key_of(seventeen.parent) == 20


def test_every_delete_step_keeps_links_consistent(build_tree, context):
    tree = build_tree([10, 5, 20, 15, 25, 17, 3, 7])
    steps, _ = remove(tree, 10, context)

    assert [step.index for step in steps] == list(range(len(steps)))
    for step in steps:
        assert step.passed, step.invariant_checks


def test_remove_does_not_mutate_input(build_tree, context):
    tree = build_tree([5, 3, 8, 1, 4, 7, 9])
    before = tree.snapshot()

    remove(tree, 5, context)
    remove(tree, 1, context)

    assert tree.snapshot() == before


def test_multiset_remove_decrements_before_removing(build_tree, context):
    tree = build_tree([5, 5, 5], policy="multiset")

    steps, tree = remove(tree, 5, context)
    assert steps[-1].action == "replace-value"
    assert len(tree) == 1
    assert tree.nodes[tree.root].count == 2

    _, tree = remove(tree, 5, context)
    assert tree.nodes[tree.root].count == 1

    steps, tree = remove(tree, 5, context)
    assert steps[-1].action == "delete-node"
    assert len(tree) == 0
    assert tree.root is None


def test_insert_then_remove_restores_shape(build_tree, context):
    tree = build_tree([8, 3, 10, 1, 6, 14])
    shape = tree_shape(tree)

    inserted = insert(tree, 7, context).next
    assert len(inserted) == len(tree) + 1

    restored = remove(inserted, 7, context).next
    assert tree_shape(restored) == shape


def test_random_inserts_and_deletes_keep_invariants(context):
    rng = random.Random(1234)
    values = list(range(40))
    rng.shuffle(values)

    tree = create_initial_tree()
    for value in values:
        tree = insert(tree, value, context).next

    rng.shuffle(values)
    remaining = set(values)
    for value in values:
        steps, tree = remove(tree, value, context)
        remaining.discard(value)
        assert all(step.passed for step in steps)
        assert check_bst_property(tree)[0]
        assert inorder_keys(tree) == sorted(remaining)

    assert len(tree) == 0


def test_two_child_delete_narrates_successor_choice(build_tree, context):
    tree = build_tree([5, 3, 8, 1, 4, 7, 9])
    steps, _ = remove(tree, 5, context)

    reasons = [step.reason for step in steps]
    chosen = reasons.index("Successor 7 selected to replace 5.")
    assert reasons[chosen - 1] == "Successor identified: 7."
    assert steps[chosen].action == "transplant"
    assert steps[chosen].highlights.nodes == (tree.find_id(5), tree.find_id(7))


def test_counted_node_decrements_after_policy_change(build_tree, context):
    tree = build_tree([5, 5], policy="multiset").with_policy("reject")
    steps, tree = remove(tree, 5, context)

    assert steps[-1].action == "replace-value"
    assert steps[-1].payload == {"count": 1}
    assert len(tree) == 1

    steps, tree = remove(tree, 5, context)
    assert steps[-1].action == "delete-node"
    assert len(tree) == 0
