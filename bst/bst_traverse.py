from collections import deque
from typing import List

from bst.bst_model import TreeState
from bst.bst_pseudocode import TraverseLine
from bst.bst_recorder import Step, StepRecorder

TRAVERSE_KINDS = ("pre", "in", "post", "level")

_VISIT_LINE = {
    "pre": TraverseLine.VISIT_PRE,
    "in": TraverseLine.VISIT_IN,
    "post": TraverseLine.VISIT_POST,
}


def traverse(tree: TreeState, kind: str, context=None) -> List[Step]:
    """
    Walk the tree in `kind` order. Every visit step carries the ids visited
    so far, in order, as its order tag.
    """
    if kind not in TRAVERSE_KINDS:
        raise ValueError(f"unknown traversal kind: {kind!r}")

    recorder = StepRecorder("traverse", context)
    if tree.root is None:
        recorder.record(
            "visit-node",
            "Tree is empty; traversal yields no nodes.",
            tree,
            code_lines=[TraverseLine.EMPTY],
        )
        return recorder.finish()

    if kind == "level":
        _level_order(tree, recorder)
    else:
        _depth_first(tree, recorder, kind)
    return recorder.finish()


def _depth_first(tree: TreeState, recorder: StepRecorder, kind: str):
    visited = []

    def record_visit(node_id):
        visited.append(node_id)
        recorder.record(
            "visit-node",
            f"Visit {tree.key_of(node_id)} during {kind}-order traversal.",
            tree,
            code_lines=[_VISIT_LINE[kind]],
            nodes=(node_id,),
            order_tag=visited,
        )

    # Explicit stack of (node_id, ready); a ready entry is visited when popped.
    pending = [(tree.root, False)]
    while pending:
        node_id, ready = pending.pop()
        if ready:
            record_visit(node_id)
            continue

        node = tree.nodes[node_id]
        if kind == "pre":
            order = (node.right, False), (node.left, False), (node_id, True)
        elif kind == "in":
            order = (node.right, False), (node_id, True), (node.left, False)
        else:
            order = (node_id, True), (node.right, False), (node.left, False)
        pending.extend(entry for entry in order if entry[0] is not None)


def _level_order(tree: TreeState, recorder: StepRecorder):
    visited = []
    queue = deque([tree.root])
    recorder.record(
        "enqueue",
        f"Level-order traversal starts by enqueuing root {tree.key_of(tree.root)}.",
        tree,
        code_lines=[TraverseLine.ENQUEUE_ROOT],
        nodes=(tree.root,),
        payload={"queue": list(queue)},
    )

    while queue:
        current_id = queue.popleft()
        recorder.record(
            "dequeue",
            f"Dequeued {tree.key_of(current_id)} for visitation.",
            tree,
            code_lines=[TraverseLine.DEQUEUE],
            nodes=(current_id,),
            payload={"queue": list(queue)},
        )
        visited.append(current_id)
        recorder.record(
            "visit-node",
            f"Visit {tree.key_of(current_id)} in level-order.",
            tree,
            code_lines=[TraverseLine.VISIT_LEVEL],
            nodes=(current_id,),
            order_tag=visited,
        )

        node = tree.nodes[current_id]
        for side, child_id in (("left", node.left), ("right", node.right)):
            if child_id is None:
                continue
            queue.append(child_id)
            recorder.record(
                "enqueue",
                f"Enqueue {side} child {tree.key_of(child_id)}.",
                tree,
                code_lines=[TraverseLine.ENQUEUE_CHILDREN],
                nodes=(child_id,),
                edges=((current_id, child_id),),
                payload={"queue": list(queue)},
            )
