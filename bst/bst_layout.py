from typing import Dict

from PyQt5.QtCore import QPointF

from bst.bst_metrics import preorder_ids
from bst.bst_model import NodeID, TreeState
from bst.bst_settings import H_GAP, NODE_WIDTH, SINGLE_CHILD_OFFSET, V_GAP


def compute_layout(
    tree: TreeState,
    h_gap: float = H_GAP,
    v_gap: float = V_GAP,
    node_width: float = NODE_WIDTH,
) -> Dict[NodeID, QPointF]:
    """
    Subtree-width layout: a node with two children is centred between them
    and sibling subtrees never overlap. A single child is offset by a fixed
    amount towards its side.

    Positions are node centres; the root sits at (0, 0).
    """
    if tree.root is None:
        return {}

    positions: Dict[NodeID, QPointF] = {}
    subtree_width: Dict[NodeID, float] = {}

    # First pass, children before parents: width of every subtree.
    for node_id in reversed(preorder_ids(tree)):
        node = tree.nodes[node_id]
        left_width = subtree_width.get(node.left, 0)
        right_width = subtree_width.get(node.right, 0)

        if left_width == 0 and right_width == 0:
            width = node_width
        elif left_width > 0 and right_width > 0:
            width = left_width + right_width + h_gap
        else:
            child_width = left_width or right_width
            width = max(
                node_width / 2 + SINGLE_CHILD_OFFSET,
                child_width + node_width / 2 + h_gap / 2,
            )
        subtree_width[node_id] = width

    # Second pass, parents before children: place every node.
    pending = [(tree.root, 0.0, 0)]
    while pending:
        node_id, x_center, depth = pending.pop()
        node = tree.nodes[node_id]
        positions[node_id] = QPointF(x_center, depth * v_gap)

        if node.left is not None and node.right is not None:
            left_w = subtree_width[node.left]
            right_w = subtree_width[node.right]
            pending.append((node.left, x_center - h_gap / 2 - left_w / 2, depth + 1))
            pending.append((node.right, x_center + h_gap / 2 + right_w / 2, depth + 1))
        elif node.left is not None:
            pending.append((node.left, x_center - SINGLE_CHILD_OFFSET, depth + 1))
        elif node.right is not None:
            pending.append((node.right, x_center + SINGLE_CHILD_OFFSET, depth + 1))

    return positions
