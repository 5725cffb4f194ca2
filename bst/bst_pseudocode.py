"""
Reference pseudocode shown next to an animation. Steps cite 1-based line
numbers from these blocks in `Step.code_lines`.
"""
from typing import Dict, List

PSEUDOCODE: Dict[str, Dict] = {
    "insert": {
        "title": "INSERT(x)",
        "lines": [
            "INSERT(x):",
            "  if size ≥ capacity: return",
            "  if root = ∅: root ← new(x); return",
            "  cur ← root",
            "  loop:",
            "    if x < cur.key:",
            "      if cur.left = ∅: cur.left ← new(x); return",
            "      cur ← cur.left",
            "    else if x > cur.key:",
            "      if cur.right = ∅: cur.right ← new(x); return",
            "      cur ← cur.right",
            "    else:",
            "      apply duplicate policy",
        ],
    },
    "search": {
        "title": "SEARCH(x)",
        "lines": [
            "SEARCH(x):",
            "  cur ← root",
            "  while cur ≠ ∅:",
            "    if x = cur.key: return cur",
            "    if x < cur.key: cur ← cur.left",
            "    else: cur ← cur.right",
            "  return ∅",
        ],
    },
    "delete": {
        "title": "DELETE(x)",
        "lines": [
            "DELETE(x):",
            "  node ← SEARCH(x)",
            "  if node = ∅: return",
            "  if node.count > 1: node.count ← node.count − 1; return",
            "  if node.left = ∅:",
            "    TRANSPLANT(node, node.right)",
            "  else if node.right = ∅:",
            "    TRANSPLANT(node, node.left)",
            "  else:",
            "    succ ← MIN(node.right)",
            "    if succ.parent ≠ node:",
            "      TRANSPLANT(succ, succ.right)",
            "      succ.right ← node.right",
            "    TRANSPLANT(node, succ)",
            "    succ.left ← node.left",
            "  free(node)",
        ],
    },
    "traverse": {
        "title": "TRAVERSE(kind)",
        "lines": [
            "TRAVERSE(node, kind):",
            "  if node = ∅: return",
            "  if kind = PRE: visit(node)",
            "  TRAVERSE(node.left, kind)",
            "  if kind = IN: visit(node)",
            "  TRAVERSE(node.right, kind)",
            "  if kind = POST: visit(node)",
            "LEVEL-ORDER(root):",
            "  enqueue(root)",
            "  while queue ≠ ∅:",
            "    node ← dequeue()",
            "    visit(node)",
            "    enqueue children if present",
        ],
    },
}


class InsertLine:
    CAPACITY = 2
    CHECK_EMPTY = 3
    SET_CUR = 4
    LOOP = 5
    COMPARE_LESS = 6
    ATTACH_LEFT = 7
    GO_LEFT = 8
    COMPARE_GREATER = 9
    ATTACH_RIGHT = 10
    GO_RIGHT = 11
    DUPLICATE = 12
    APPLY_POLICY = 13


class SearchLine:
    START = 2
    LOOP = 3
    FOUND = 4
    GO_LEFT = 5
    GO_RIGHT = 6
    NOT_FOUND = 7


class DeleteLine:
    START = 1
    SEARCH = 2
    NOT_FOUND = 3
    MULTISET = 4
    NO_LEFT = 5
    REPLACE_WITH_RIGHT = 6
    NO_RIGHT = 7
    REPLACE_WITH_LEFT = 8
    TWO_CHILDREN = 9
    FIND_SUCCESSOR = 10
    SUCCESSOR_DEEP = 11
    LIFT_SUCCESSOR = 12
    LINK_RIGHT = 13
    TRANSPLANT_SUCCESSOR = 14
    LINK_LEFT = 15
    FREE = 16


class TraverseLine:
    START = 1
    EMPTY = 2
    VISIT_PRE = 3
    RECURSE_LEFT = 4
    VISIT_IN = 5
    RECURSE_RIGHT = 6
    VISIT_POST = 7
    LEVEL_START = 8
    ENQUEUE_ROOT = 9
    LEVEL_LOOP = 10
    DEQUEUE = 11
    VISIT_LEVEL = 12
    ENQUEUE_CHILDREN = 13


def block_for_step(step) -> str:
    return step.op if step is not None else ""


def lines_for_step(step) -> List[str]:
    """The pseudocode lines a step points at, in the order it cites them."""
    if step is None or not step.code_lines:
        return []
    lines = PSEUDOCODE[step.op]["lines"]
    return [lines[number - 1] for number in step.code_lines if 0 < number <= len(lines)]
