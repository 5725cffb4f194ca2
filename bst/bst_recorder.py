import logging
from dataclasses import dataclass, field, replace
from typing import Any, List, NamedTuple, Optional, Tuple

from bst.bst_context import resolve
from bst.bst_model import NodeID, TreeState

logger = logging.getLogger(__name__)

OPERATIONS = ("insert", "delete", "search", "traverse")

ACTIONS = (
    "compare",
    "move-left",
    "move-right",
    "create-node",
    "visit-node",
    "transplant",
    "replace-value",
    "delete-node",
    "enqueue",
    "dequeue",
)


class InvariantError(RuntimeError):
    """Raised by a strict context when a recorded step breaks a tree invariant."""


@dataclass(frozen=True)
class InvariantCheck:
    name: str
    passed: bool
    detail: Optional[str] = None


@dataclass(frozen=True)
class Highlight:
    nodes: Tuple[NodeID, ...] = ()
    edges: Tuple[Tuple[NodeID, NodeID], ...] = ()
    order_tag: Tuple[NodeID, ...] = ()


@dataclass(frozen=True)
class Step:
    """
    One semantic event of an operation, with the tree as it stood at that
    instant. `index` is the position inside the trace; it is only final once
    the recorder that produced the step has finished.
    """

    id: str
    op: str
    action: str
    reason: str
    tree_snapshot: TreeState
    index: int = 0
    invariant_checks: Tuple[InvariantCheck, ...] = ()
    code_lines: Optional[Tuple[int, ...]] = None
    highlights: Highlight = field(default_factory=Highlight)
    payload: Any = None

    @property
    def passed(self) -> bool:
        return all(check.passed for check in self.invariant_checks)


class InsertResult(NamedTuple):
    steps: List[Step]
    next: TreeState


class RemoveResult(NamedTuple):
    steps: List[Step]
    next: TreeState


class SearchResult(NamedTuple):
    steps: List[Step]
    found: bool


# ---------- Invariant checks ----------


def check_bst_property(tree: TreeState) -> Tuple[bool, Optional[str]]:
    """
    Range validation: every key must lie within the closed bounds set by its
    ancestors. Equal keys are tolerated on both sides so that the directional
    duplicate policies validate.
    """
    compare = tree.config.comparator
    missing = object()
    pending = [(tree.root, missing, missing)]
    while pending:
        node_id, low, high = pending.pop()
        node = tree.node(node_id)
        if node is None:
            continue
        if low is not missing and compare(node.key, low) < 0:
            return False, f"{node.key} is below its lower bound {low}"
        if high is not missing and compare(node.key, high) > 0:
            return False, f"{node.key} is above its upper bound {high}"
        pending.append((node.left, low, node.key))
        pending.append((node.right, node.key, high))
    return True, None


def check_links(tree: TreeState) -> Tuple[InvariantCheck, InvariantCheck]:
    """Parent back-references and single ownership over the reachable nodes."""
    parent_detail = None
    owner_detail = None

    root = tree.node(tree.root)
    if root is not None and root.parent is not None:
        parent_detail = f"root {root.key} still points at parent {root.parent}"

    seen = set()
    pending = [tree.root] if tree.root is not None else []
    while pending:
        node_id = pending.pop()
        if node_id in seen:
            owner_detail = owner_detail or f"node {node_id} has more than one referrer"
            continue
        seen.add(node_id)
        node = tree.nodes.get(node_id)
        if node is None:
            owner_detail = owner_detail or f"dangling reference to {node_id}"
            continue
        for child_id in (node.left, node.right):
            if child_id is None:
                continue
            child = tree.nodes.get(child_id)
            if child is not None and child.parent != node_id and parent_detail is None:
                parent_detail = (
                    f"{child.key} points at {child.parent} but is a child of {node.key}"
                )
            pending.append(child_id)

    return (
        InvariantCheck("Parent links", parent_detail is None, parent_detail),
        InvariantCheck("Single owner", owner_detail is None, owner_detail),
    )


def make_invariant_checks(tree: TreeState) -> Tuple[InvariantCheck, ...]:
    passed, detail = check_bst_property(tree)
    return (InvariantCheck("BST property", passed, detail),) + check_links(tree)


# ---------- Recorder ----------


class StepRecorder:
    """
    Accumulates the steps of one operation.

    Every recorded step carries its own copy of the tree, so later pointer
    surgery on the working tree never leaks into earlier steps.
    """

    def __init__(self, op: str, context=None):
        if op not in OPERATIONS:
            raise ValueError(f"unknown operation: {op!r}")
        self.op = op
        self.context = resolve(context)
        self._steps: List[Step] = []

    def __len__(self):
        return len(self._steps)

    def record(
        self,
        action: str,
        reason: str,
        tree: TreeState,
        code_lines=None,
        nodes=(),
        edges=(),
        order_tag=(),
        payload=None,
    ) -> Step:
        if action not in ACTIONS:
            raise ValueError(f"unknown step action: {action!r}")

        checks = make_invariant_checks(tree)
        step = Step(
            id=self.context.next_step_id(self.op),
            op=self.op,
            action=action,
            reason=reason,
            tree_snapshot=tree.copy(),
            invariant_checks=checks,
            code_lines=tuple(code_lines) if code_lines else None,
            highlights=Highlight(
                nodes=tuple(node_id for node_id in nodes if node_id is not None),
                edges=tuple(tuple(edge) for edge in edges),
                order_tag=tuple(order_tag),
            ),
            payload=payload,
        )
        if not step.passed:
            self._report(step)
        self._steps.append(step)
        return step

    def _report(self, step: Step):
        failed = [check for check in step.invariant_checks if not check.passed]
        summary = "; ".join(f"{check.name}: {check.detail}" for check in failed)
        logger.warning(f"{step.op} step {step.id} ({step.action}) failed checks: {summary}")
        if self.context.strict_invariants:
            raise InvariantError(f"{step.id}: {summary}")

    def finish(self) -> List[Step]:
        """Return the trace with contiguous, zero-based indices."""
        return [replace(step, index=index) for index, step in enumerate(self._steps)]
