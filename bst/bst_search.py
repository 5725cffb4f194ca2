from bst.bst_model import TreeState
from bst.bst_pseudocode import SearchLine
from bst.bst_recorder import SearchResult, StepRecorder


def search(tree: TreeState, key, context=None) -> SearchResult:
    """Root-to-leaf walk; never mutates `tree`."""
    recorder = StepRecorder("search", context)
    compare = tree.config.comparator
    current_id = tree.root

    if current_id is None:
        recorder.record(
            "compare",
            "Tree is empty; nothing to search.",
            tree,
            code_lines=[SearchLine.START],
        )
        return SearchResult(recorder.finish(), False)

    while True:
        node = tree.nodes[current_id]
        cmp = compare(key, node.key)
        if cmp == 0:
            reason = f"Key {key} equals {node.key}; search successful."
        elif cmp < 0:
            reason = f"Key {key} < {node.key}; move left."
        else:
            reason = f"Key {key} > {node.key}; move right."
        recorder.record(
            "compare", reason, tree, code_lines=[SearchLine.LOOP], nodes=(current_id,)
        )

        if cmp == 0:
            recorder.record(
                "visit-node",
                f"Found node {node.key}; returning result.",
                tree,
                code_lines=[SearchLine.FOUND],
                nodes=(current_id,),
            )
            return SearchResult(recorder.finish(), True)

        go_left = cmp < 0
        side = "left" if go_left else "right"
        action = "move-left" if go_left else "move-right"
        line = SearchLine.GO_LEFT if go_left else SearchLine.GO_RIGHT
        child_id = node.left if go_left else node.right

        if child_id is None:
            recorder.record(
                action,
                f"No {side} child from {node.key}; search terminates unsuccessfully.",
                tree,
                code_lines=[line, SearchLine.NOT_FOUND],
                nodes=(current_id,),
                payload={"found": False},
            )
            return SearchResult(recorder.finish(), False)

        recorder.record(
            action,
            f"Moving {side} to {tree.key_of(child_id)}.",
            tree,
            code_lines=[line],
            nodes=(child_id,),
            edges=((current_id, child_id),),
        )
        current_id = child_id
