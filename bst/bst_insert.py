import logging

from bst.bst_model import BSTNode, TreeState
from bst.bst_pseudocode import InsertLine
from bst.bst_recorder import InsertResult, StepRecorder

logger = logging.getLogger(__name__)


def insert(tree: TreeState, key, context=None) -> InsertResult:
    """
    Insert `key`, recording every comparison and pointer move.

    Returns the trace and the next tree. When nothing changes (full tree,
    rejected duplicate) the caller's tree object itself is returned.
    """
    recorder = StepRecorder("insert", context)
    config = tree.config
    compare = config.comparator
    policy = config.duplicate_policy

    if len(tree) >= config.max_nodes:
        recorder.record(
            "compare",
            f"Maximum node limit ({config.max_nodes}) reached; insertion of {key} skipped.",
            tree,
            code_lines=[InsertLine.CAPACITY],
            nodes=(tree.root,),
        )
        logger.info(f"insert {key!r} skipped: tree holds {len(tree)} nodes")
        return InsertResult(recorder.finish(), tree)

    working = tree.copy()
    new_count = 1 if policy == "multiset" else None

    if working.root is None:
        new_id = _mint_id(recorder.context, working, key)
        working.nodes[new_id] = BSTNode(id=new_id, key=key, count=new_count)
        working.root = new_id
        recorder.record(
            "create-node",
            f"Tree is empty; creating root node {key}.",
            working,
            code_lines=[InsertLine.CHECK_EMPTY],
            nodes=(new_id,),
        )
        return InsertResult(recorder.finish(), working)

    current_id = working.root
    while True:
        current = working.nodes[current_id]
        cmp = compare(key, current.key)
        if cmp < 0:
            reason = f"{key} < {current.key}; prepare to move left."
            lines = [InsertLine.LOOP, InsertLine.COMPARE_LESS]
        elif cmp > 0:
            reason = f"{key} > {current.key}; prepare to move right."
            lines = [InsertLine.LOOP, InsertLine.COMPARE_GREATER]
        else:
            reason = f"{key} equals {current.key}; duplicate policy applies."
            lines = [InsertLine.LOOP, InsertLine.DUPLICATE]
        recorder.record("compare", reason, working, code_lines=lines, nodes=(current_id,))

        if cmp == 0:
            recorder.record(
                "compare",
                f"Duplicate encountered. Policy: {policy}.",
                working,
                code_lines=[InsertLine.DUPLICATE, InsertLine.APPLY_POLICY],
                nodes=(current_id,),
            )
            if policy == "reject":
                recorder.record(
                    "visit-node",
                    f"Rejecting duplicate key {key}; tree unchanged.",
                    working,
                    code_lines=[InsertLine.APPLY_POLICY],
                    nodes=(current_id,),
                )
                return InsertResult(recorder.finish(), tree)
            if policy == "multiset":
                current.count = (current.count or 1) + 1
                recorder.record(
                    "replace-value",
                    f"Incrementing count for {key} to {current.count}.",
                    working,
                    code_lines=[InsertLine.APPLY_POLICY],
                    nodes=(current_id,),
                    payload={"count": current.count},
                )
                return InsertResult(recorder.finish(), working)
            go_left = policy == "allow-left"
        else:
            go_left = cmp < 0

        side = "left" if go_left else "right"
        child_id = current.left if go_left else current.right
        if child_id is None:
            break

        if cmp == 0:
            reason = f"Policy allows duplicates on the {side}; continue {side} from {current.key}."
            lines = [InsertLine.APPLY_POLICY]
        else:
            reason = f"Moving {side} from {current.key} to {working.key_of(child_id)}."
            lines = [InsertLine.GO_LEFT if go_left else InsertLine.GO_RIGHT]
        recorder.record(
            "move-left" if go_left else "move-right",
            reason,
            working,
            code_lines=lines,
            nodes=(child_id,),
            edges=((current_id, child_id),),
        )
        current_id = child_id

    parent = working.nodes[current_id]
    new_id = _mint_id(recorder.context, working, key)
    working.nodes[new_id] = BSTNode(id=new_id, key=key, parent=current_id, count=new_count)
    if go_left:
        parent.left = new_id
    else:
        parent.right = new_id

    recorder.record(
        "create-node",
        f"Attaching {key} as {side} child of {parent.key}.",
        working,
        code_lines=[InsertLine.ATTACH_LEFT if go_left else InsertLine.ATTACH_RIGHT],
        nodes=(new_id,),
        edges=((current_id, new_id),),
    )
    return InsertResult(recorder.finish(), working)


def _mint_id(context, working: TreeState, key):
    new_id = context.next_node_id(key)
    if new_id in working.nodes:
        # the tree came from another context; move past everything it holds
        logger.warning(f"node id {new_id} already in use; advancing the node counter")
        context.skip_past(working.nodes)
        new_id = context.next_node_id(key)
    return new_id
