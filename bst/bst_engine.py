import logging
from typing import List, Tuple

from bst.bst_context import EngineContext, resolve
from bst.bst_history import OperationHistoryEntry, make_entry
from bst.bst_insert import insert
from bst.bst_model import TreeState
from bst.bst_recorder import InsertResult, RemoveResult, SearchResult, Step
from bst.bst_remove import remove
from bst.bst_search import search
from bst.bst_traverse import traverse

logger = logging.getLogger(__name__)


class BSTEngine:
    """
    Binds the four algorithms to one EngineContext and wraps their results
    into history entries for the playback side. Without an explicit context
    it shares the process-wide default one, so ids never collide with the
    module-level functions.
    """

    def __init__(self, context: EngineContext = None):
        self.context = resolve(context)

    # ---------- Algorithms ----------

    def insert(self, tree: TreeState, key) -> InsertResult:
        return insert(tree, key, self.context)

    def remove(self, tree: TreeState, key) -> RemoveResult:
        return remove(tree, key, self.context)

    def search(self, tree: TreeState, key) -> SearchResult:
        return search(tree, key, self.context)

    def traverse(self, tree: TreeState, kind: str) -> List[Step]:
        return traverse(tree, kind, self.context)

    # ---------- History entries ----------

    def run(self, tree: TreeState, op: str, argument) -> Tuple[OperationHistoryEntry, TreeState]:
        """
        Run one operation and return its history entry with the tree that
        follows it. Non-mutating operations hand back `tree` itself.
        """
        if op == "insert":
            steps, next_tree = self.insert(tree, argument)
        elif op == "delete":
            steps, next_tree = self.remove(tree, argument)
        elif op == "search":
            steps, _ = self.search(tree, argument)
            next_tree = tree
        elif op == "traverse":
            steps = self.traverse(tree, argument)
            next_tree = tree
        else:
            raise ValueError(f"unknown operation: {op!r}")

        entry = make_entry(self.context.next_op_id(), op, steps, tree, next_tree)
        logger.debug(f"{entry.op_id}: {op} {argument!r} produced {len(steps)} steps")
        return entry, next_tree

    def build(self, tree: TreeState, values) -> Tuple[List[OperationHistoryEntry], TreeState]:
        entries = []
        for value in values:
            entry, tree = self.run(tree, "insert", value)
            entries.append(entry)
        return entries, tree
