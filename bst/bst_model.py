import copy
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Iterator, Optional

from bst.bst_settings import DEFAULT_DUPLICATE_POLICY, DEFAULT_MAX_NODES

DUPLICATE_POLICIES = ("reject", "allow-left", "allow-right", "multiset")

NodeID = str


def default_comparator(a, b) -> int:
    if a == b:
        return 0
    if a > b:
        return 1
    return -1


@dataclass
class BSTNode:
    """
    A tree node. The parent owns the parent -> child edges; `parent` is a
    back-reference kept for navigation only.
    """

    id: NodeID
    key: Any
    left: Optional[NodeID] = None
    right: Optional[NodeID] = None
    parent: Optional[NodeID] = None
    count: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "key": self.key,
            "left": self.left,
            "right": self.right,
            "parent": self.parent,
            "count": self.count,
        }

    @classmethod
    def from_dict(cls, info: Dict[str, Any]) -> "BSTNode":
        return cls(
            id=info["id"],
            key=info["key"],
            left=info.get("left"),
            right=info.get("right"),
            parent=info.get("parent"),
            count=info.get("count"),
        )


@dataclass(frozen=True)
class TreeConfig:
    comparator: Callable[[Any, Any], int] = default_comparator
    duplicate_policy: str = DEFAULT_DUPLICATE_POLICY
    max_nodes: int = DEFAULT_MAX_NODES

    def __post_init__(self):
        if self.duplicate_policy not in DUPLICATE_POLICIES:
            raise ValueError(f"unknown duplicate policy: {self.duplicate_policy!r}")
        if self.max_nodes <= 0:
            raise ValueError("max_nodes must be positive")


@dataclass
class TreeState:
    """
    Keyed node graph plus its configuration.

    Algorithms treat a TreeState as a value: they work on `copy()` and never
    touch the instance they were given.
    """

    root: Optional[NodeID] = None
    nodes: Dict[NodeID, BSTNode] = field(default_factory=dict)
    config: TreeConfig = field(default_factory=TreeConfig)

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, node_id) -> bool:
        return node_id in self.nodes

    def __iter__(self) -> Iterator[BSTNode]:
        return iter(self.nodes.values())

    def copy(self) -> "TreeState":
        # The config is immutable and can be shared.
        return TreeState(
            root=self.root,
            nodes={node_id: copy.copy(node) for node_id, node in self.nodes.items()},
            config=self.config,
        )

    def with_policy(self, policy: str) -> "TreeState":
        clone = self.copy()
        clone.config = replace(self.config, duplicate_policy=policy)
        return clone

    def node(self, node_id: Optional[NodeID]) -> Optional[BSTNode]:
        if node_id is None:
            return None
        return self.nodes.get(node_id)

    def key_of(self, node_id: Optional[NodeID]):
        node = self.node(node_id)
        return node.key if node else None

    def find_id(self, key) -> Optional[NodeID]:
        compare = self.config.comparator
        current_id = self.root
        while current_id is not None:
            node = self.nodes[current_id]
            cmp = compare(key, node.key)
            if cmp == 0:
                return current_id
            current_id = node.left if cmp < 0 else node.right
        return None

    def snapshot(self) -> Dict[str, Any]:
        return {
            "root": self.root,
            "nodes": [node.to_dict() for node in self.nodes.values()],
            "config": {
                "duplicatePolicy": self.config.duplicate_policy,
                "maxNodes": self.config.max_nodes,
            },
        }

    @classmethod
    def from_snapshot(cls, snapshot, comparator=default_comparator) -> "TreeState":
        rebuilt = {}
        for info in snapshot.get("nodes", []):
            node = BSTNode.from_dict(info)
            rebuilt[node.id] = node

        config_info = snapshot.get("config", {})
        config = TreeConfig(
            comparator=comparator,
            duplicate_policy=config_info.get("duplicatePolicy", DEFAULT_DUPLICATE_POLICY),
            max_nodes=config_info.get("maxNodes", DEFAULT_MAX_NODES),
        )
        root = snapshot.get("root")
        return cls(
            root=root if root in rebuilt else None,
            nodes=rebuilt,
            config=config,
        )


def create_initial_tree(
    duplicate_policy: str = DEFAULT_DUPLICATE_POLICY,
    max_nodes: int = DEFAULT_MAX_NODES,
    comparator=default_comparator,
) -> TreeState:
    return TreeState(
        config=TreeConfig(
            comparator=comparator,
            duplicate_policy=duplicate_policy,
            max_nodes=max_nodes,
        )
    )
