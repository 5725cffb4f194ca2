"""
Structural queries over a tree snapshot, used by inspectors and narration.

Height and subtree size walk with an explicit stack so a degenerate
(linked-list shaped) tree cannot exhaust the interpreter's recursion limit.
"""
from typing import List, Optional

from bst.bst_model import NodeID, TreeState


def get_depth(tree: TreeState, node_id: Optional[NodeID]) -> int:
    node = tree.node(node_id)
    depth = 0
    while node is not None and node.parent is not None:
        depth += 1
        node = tree.node(node.parent)
    return depth


def get_subtree_size(tree: TreeState, node_id: Optional[NodeID]) -> int:
    size = 0
    pending = [node_id]
    while pending:
        node = tree.node(pending.pop())
        if node is None:
            continue
        size += 1
        pending.extend((node.left, node.right))
    return size


def get_height(tree: TreeState, node_id: Optional[NodeID]) -> int:
    """Number of nodes on the longest downward path; 0 for an empty subtree."""
    height = 0
    pending = [(node_id, 1)]
    while pending:
        current_id, level = pending.pop()
        node = tree.node(current_id)
        if node is None:
            continue
        height = max(height, level)
        pending.append((node.left, level + 1))
        pending.append((node.right, level + 1))
    return height


def find_min(tree: TreeState, node_id: NodeID) -> NodeID:
    current = node_id
    while tree.nodes[current].left is not None:
        current = tree.nodes[current].left
    return current


def find_max(tree: TreeState, node_id: NodeID) -> NodeID:
    current = node_id
    while tree.nodes[current].right is not None:
        current = tree.nodes[current].right
    return current


def get_successor(tree: TreeState, node_id: Optional[NodeID]) -> Optional[NodeID]:
    node = tree.node(node_id)
    if node is None:
        return None
    if node.right is not None:
        return find_min(tree, node.right)
    while node.parent is not None:
        parent = tree.nodes[node.parent]
        if parent.left == node.id:
            return parent.id
        node = parent
    return None


def get_predecessor(tree: TreeState, node_id: Optional[NodeID]) -> Optional[NodeID]:
    node = tree.node(node_id)
    if node is None:
        return None
    if node.left is not None:
        return find_max(tree, node.left)
    while node.parent is not None:
        parent = tree.nodes[node.parent]
        if parent.right == node.id:
            return parent.id
        node = parent
    return None


def inorder_ids(tree: TreeState) -> List[NodeID]:
    order = []
    pending = []
    current = tree.root
    while pending or current is not None:
        while current is not None:
            pending.append(current)
            current = tree.nodes[current].left
        current = pending.pop()
        order.append(current)
        current = tree.nodes[current].right
    return order


def inorder_keys(tree: TreeState) -> list:
    return [tree.nodes[node_id].key for node_id in inorder_ids(tree)]


def tree_shape(tree: TreeState, node_id: Optional[NodeID] = None):
    """
    Nested (key, left, right) tuples from `node_id` (the root by default).
    Two trees with equal shapes hold the same keys in the same structure.
    """
    if node_id is None:
        node_id = tree.root
    if tree.node(node_id) is None:
        return None

    shapes = {None: None}
    for current_id in reversed(preorder_ids(tree, node_id)):
        node = tree.nodes[current_id]
        shapes[current_id] = (node.key, shapes[node.left], shapes[node.right])
    return shapes[node_id]


def preorder_ids(tree: TreeState, node_id: Optional[NodeID] = None) -> List[NodeID]:
    """Ids below `node_id` (the root by default), parents before children."""
    if node_id is None:
        node_id = tree.root
    order = []
    pending = [node_id] if node_id is not None else []
    while pending:
        current_id = pending.pop()
        order.append(current_id)
        node = tree.nodes[current_id]
        if node.right is not None:
            pending.append(node.right)
        if node.left is not None:
            pending.append(node.left)
    return order
