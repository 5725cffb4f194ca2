from dataclasses import dataclass
from typing import List, Optional

from bst.bst_model import TreeState
from bst.bst_recorder import Step


@dataclass(frozen=True)
class OperationHistoryEntry:
    op_id: str
    op_type: str
    steps: List[Step]
    pre_tree: TreeState
    post_tree: TreeState


def make_entry(op_id: str, op_type: str, steps, pre_tree: TreeState, post_tree: TreeState):
    return OperationHistoryEntry(
        op_id=op_id,
        op_type=op_type,
        steps=list(steps),
        pre_tree=pre_tree.copy(),
        post_tree=post_tree.copy(),
    )


class OperationHistory:
    """
    Linear undo/redo list of applied operations. Applying a new entry after
    an undo drops every entry that could have been redone.
    """

    def __init__(self, tree: TreeState):
        self._initial = tree
        self._tree = tree
        self._entries: List[OperationHistoryEntry] = []
        self._index = -1
        self._current_steps: List[Step] = []

    def __len__(self):
        return len(self._entries)

    @property
    def tree(self) -> TreeState:
        return self._tree

    @property
    def entries(self) -> List[OperationHistoryEntry]:
        return list(self._entries)

    @property
    def index(self) -> int:
        return self._index

    @property
    def current_steps(self) -> List[Step]:
        return self._current_steps

    @property
    def current_entry(self) -> Optional[OperationHistoryEntry]:
        if self._index < 0:
            return None
        return self._entries[self._index]

    def can_undo(self) -> bool:
        return self._index >= 0

    def can_redo(self) -> bool:
        return self._index + 1 < len(self._entries)

    def apply(self, entry: OperationHistoryEntry) -> TreeState:
        del self._entries[self._index + 1:]
        self._entries.append(entry)
        self._index = len(self._entries) - 1
        self._tree = entry.post_tree
        self._current_steps = entry.steps
        return self._tree

    def undo(self) -> TreeState:
        if not self.can_undo():
            return self._tree
        entry = self._entries[self._index]
        self._index -= 1
        self._tree = entry.pre_tree
        self._current_steps = []
        return self._tree

    def redo(self) -> TreeState:
        if not self.can_redo():
            return self._tree
        self._index += 1
        entry = self._entries[self._index]
        self._tree = entry.post_tree
        self._current_steps = entry.steps
        return self._tree

    def reset(self, tree: Optional[TreeState] = None):
        self._tree = tree if tree is not None else self._initial
        self._entries = []
        self._index = -1
        self._current_steps = []

    def set_duplicate_policy(self, policy: str) -> TreeState:
        self._tree = self._tree.with_policy(policy)
        return self._tree
