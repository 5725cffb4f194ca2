import logging
from typing import Optional

from bst.bst_model import NodeID, TreeState
from bst.bst_pseudocode import DeleteLine
from bst.bst_recorder import RemoveResult, StepRecorder

logger = logging.getLogger(__name__)


def remove(tree: TreeState, key, context=None) -> RemoveResult:
    """
    Delete one occurrence of `key`.

    Structural removal always goes through `_transplant`; the 0/1/2-child
    cases only differ in which subtrees they hand to it. An empty tree or a
    missing key returns the caller's tree object unchanged.
    """
    recorder = StepRecorder("delete", context)
    compare = tree.config.comparator

    if tree.root is None:
        recorder.record(
            "compare",
            "Tree is empty; nothing to delete.",
            tree,
            code_lines=[DeleteLine.START],
        )
        return RemoveResult(recorder.finish(), tree)

    working = tree.copy()
    current_id = working.root

    while True:
        node = working.nodes[current_id]
        cmp = compare(key, node.key)
        if cmp == 0:
            reason = f"Found node {node.key} to delete."
        elif cmp < 0:
            reason = f"{key} < {node.key}; traverse left."
        else:
            reason = f"{key} > {node.key}; traverse right."
        recorder.record(
            "compare", reason, working, code_lines=[DeleteLine.SEARCH], nodes=(current_id,)
        )
        if cmp == 0:
            break

        go_left = cmp < 0
        side = "left" if go_left else "right"
        action = "move-left" if go_left else "move-right"
        child_id = node.left if go_left else node.right
        if child_id is None:
            recorder.record(
                action,
                f"No {side} child from {node.key}; {key} not present.",
                working,
                code_lines=[DeleteLine.SEARCH, DeleteLine.NOT_FOUND],
                nodes=(current_id,),
            )
            logger.debug(f"delete {key!r}: key not present")
            return RemoveResult(recorder.finish(), tree)

        recorder.record(
            action,
            f"Moving {side} to {working.key_of(child_id)}.",
            working,
            code_lines=[DeleteLine.SEARCH],
            nodes=(child_id,),
            edges=((current_id, child_id),),
        )
        current_id = child_id

    target_id = current_id
    target = working.nodes[target_id]

    # counts outlive a policy change, so any counted node decrements first
    if (target.count or 1) > 1:
        target.count -= 1
        recorder.record(
            "replace-value",
            f"Node {target.key} holds several copies; decrementing its count to {target.count}.",
            working,
            code_lines=[DeleteLine.MULTISET],
            nodes=(target_id,),
            payload={"count": target.count},
        )
        return RemoveResult(recorder.finish(), working)

    if target.left is None:
        replacement_id = target.right
        if replacement_id is None:
            reason = f"Node {target.key} is a leaf; unlink it from its parent."
        else:
            reason = f"Node {target.key} has no left child; replace with right subtree."
        _transplant(
            working,
            recorder,
            target_id,
            replacement_id,
            reason,
            [DeleteLine.NO_LEFT, DeleteLine.REPLACE_WITH_RIGHT],
        )
    elif target.right is None:
        replacement_id = target.left
        _transplant(
            working,
            recorder,
            target_id,
            replacement_id,
            f"Node {target.key} has no right child; replace with left subtree.",
            [DeleteLine.NO_RIGHT, DeleteLine.REPLACE_WITH_LEFT],
        )
    else:
        replacement_id = _find_successor(working, recorder, target_id)
        successor = working.nodes[replacement_id]
        recorder.record(
            "transplant",
            f"Successor {successor.key} selected to replace {target.key}.",
            working,
            code_lines=[DeleteLine.FIND_SUCCESSOR],
            nodes=(target_id, replacement_id),
        )
        lines = [DeleteLine.TRANSPLANT_SUCCESSOR]

        if successor.parent != target_id:
            _transplant(
                working,
                recorder,
                replacement_id,
                successor.right,
                f"Lift successor {successor.key}; connect its right child upwards.",
                [DeleteLine.SUCCESSOR_DEEP, DeleteLine.LIFT_SUCCESSOR],
            )
            _adopt(working, replacement_id, "right", target.right)
            lines = [DeleteLine.LINK_RIGHT, DeleteLine.TRANSPLANT_SUCCESSOR]

        _transplant(
            working,
            recorder,
            target_id,
            replacement_id,
            f"Transplant successor {successor.key} into the position of {target.key}.",
            lines,
        )
        _adopt(working, replacement_id, "left", target.left)
        recorder.record(
            "transplant",
            f"Left subtree of {target.key} now hangs under {successor.key}.",
            working,
            code_lines=[DeleteLine.LINK_LEFT],
            nodes=(replacement_id, target.left),
            edges=((replacement_id, target.left),),
        )

    del working.nodes[target_id]
    recorder.record(
        "delete-node",
        f"Node {target.key} removed from tree.",
        working,
        code_lines=[DeleteLine.FREE],
        nodes=(replacement_id,),
        payload={"removed": target_id},
    )
    return RemoveResult(recorder.finish(), working)


def _transplant(
    working: TreeState,
    recorder: StepRecorder,
    old_id: NodeID,
    new_id: Optional[NodeID],
    reason: str,
    code_lines,
):
    """
    Replace the subtree rooted at `old_id` with the one rooted at `new_id`
    (possibly empty), fixing both the parent's child slot and the
    replacement's back-reference.
    """
    old = working.nodes[old_id]
    parent_id = old.parent
    if parent_id is None:
        working.root = new_id
    else:
        parent = working.nodes[parent_id]
        if parent.left == old_id:
            parent.left = new_id
        else:
            parent.right = new_id
    if new_id is not None:
        working.nodes[new_id].parent = parent_id

    edges = ()
    if parent_id is not None and new_id is not None:
        edges = ((parent_id, new_id),)
    recorder.record(
        "transplant",
        reason,
        working,
        code_lines=code_lines,
        nodes=(old_id, new_id),
        edges=edges,
    )


def _adopt(working: TreeState, parent_id: NodeID, side: str, child_id: Optional[NodeID]):
    setattr(working.nodes[parent_id], side, child_id)
    if child_id is not None:
        working.nodes[child_id].parent = parent_id


def _find_successor(working: TreeState, recorder: StepRecorder, target_id: NodeID) -> NodeID:
    start_id = working.nodes[target_id].right
    recorder.record(
        "compare",
        f"Find successor: start at right child {working.key_of(start_id)}.",
        working,
        code_lines=[DeleteLine.TWO_CHILDREN, DeleteLine.FIND_SUCCESSOR],
        nodes=(start_id,),
        edges=((target_id, start_id),),
    )

    current_id = start_id
    while working.nodes[current_id].left is not None:
        next_id = working.nodes[current_id].left
        recorder.record(
            "move-left",
            f"Successor search: move left to {working.key_of(next_id)}.",
            working,
            code_lines=[DeleteLine.FIND_SUCCESSOR],
            nodes=(next_id,),
            edges=((current_id, next_id),),
        )
        current_id = next_id

    recorder.record(
        "visit-node",
        f"Successor identified: {working.key_of(current_id)}.",
        working,
        code_lines=[DeleteLine.FIND_SUCCESSOR],
        nodes=(current_id,),
    )
    return current_id
