"""
Session documents: the current tree plus the full operation history, as a
JSON-compatible dict.

Comparators are code and are not stored; `load_session` re-attaches the one
it is given to every tree in the document.
"""
import json
from datetime import datetime, timezone
from typing import Any, Dict, List, NamedTuple

from bst.bst_context import resolve
from bst.bst_history import OperationHistoryEntry
from bst.bst_model import TreeState, default_comparator
from bst.bst_recorder import Highlight, InvariantCheck, Step


class SessionError(ValueError):
    pass


class Session(NamedTuple):
    tree: TreeState
    history: List[OperationHistoryEntry]
    exported_at: str


# ---------- Steps ----------


def step_to_dict(step: Step) -> Dict[str, Any]:
    return {
        "id": step.id,
        "op": step.op,
        "index": step.index,
        "action": step.action,
        "reason": step.reason,
        "invariantChecks": [
            {"name": check.name, "passed": check.passed, "detail": check.detail}
            for check in step.invariant_checks
        ],
        "codeLines": list(step.code_lines) if step.code_lines else None,
        "highlights": {
            "nodes": list(step.highlights.nodes),
            "edges": [list(edge) for edge in step.highlights.edges],
            "orderTag": list(step.highlights.order_tag),
        },
        "treeSnapshot": step.tree_snapshot.snapshot(),
        "payload": step.payload,
    }


def step_from_dict(info: Dict[str, Any], comparator=default_comparator) -> Step:
    highlights = info.get("highlights") or {}
    code_lines = info.get("codeLines")
    return Step(
        id=info["id"],
        op=info["op"],
        index=info["index"],
        action=info["action"],
        reason=info["reason"],
        tree_snapshot=TreeState.from_snapshot(info["treeSnapshot"], comparator),
        invariant_checks=tuple(
            InvariantCheck(check["name"], check["passed"], check.get("detail"))
            for check in info.get("invariantChecks", [])
        ),
        code_lines=tuple(code_lines) if code_lines else None,
        highlights=Highlight(
            nodes=tuple(highlights.get("nodes", [])),
            edges=tuple(tuple(edge) for edge in highlights.get("edges", [])),
            order_tag=tuple(highlights.get("orderTag", [])),
        ),
        payload=info.get("payload"),
    )


# ---------- Documents ----------


def export_session(tree: TreeState, history, exported_at: str = None) -> Dict[str, Any]:
    if exported_at is None:
        exported_at = datetime.now(timezone.utc).isoformat()
    return {
        "tree": tree.snapshot(),
        "history": [
            {
                "opId": entry.op_id,
                "opType": entry.op_type,
                "steps": [step_to_dict(step) for step in entry.steps],
                "preTreeSnapshot": entry.pre_tree.snapshot(),
                "postTreeSnapshot": entry.post_tree.snapshot(),
            }
            for entry in history
        ],
        "exportedAt": exported_at,
    }


def load_session(document: Dict[str, Any], comparator=default_comparator, context=None) -> Session:
    """
    Rebuild a session. The node counter of `context` (the default context
    when none is given) is moved past every id in the document, so later
    inserts cannot reuse one.
    """
    try:
        tree = TreeState.from_snapshot(document["tree"], comparator)
        history = [
            OperationHistoryEntry(
                op_id=info["opId"],
                op_type=info["opType"],
                steps=[step_from_dict(step, comparator) for step in info["steps"]],
                pre_tree=TreeState.from_snapshot(info["preTreeSnapshot"], comparator),
                post_tree=TreeState.from_snapshot(info["postTreeSnapshot"], comparator),
            )
            for info in document.get("history", [])
        ]
    except (KeyError, TypeError, AttributeError, ValueError) as exc:
        raise SessionError(f"malformed session document: {exc!r}") from exc

    node_ids = set(tree.nodes)
    for entry in history:
        node_ids.update(entry.pre_tree.nodes)
        node_ids.update(entry.post_tree.nodes)
    resolve(context).skip_past(node_ids)
    return Session(tree, history, document.get("exportedAt", ""))


def dumps_session(tree: TreeState, history, indent: int = 2) -> str:
    return json.dumps(export_session(tree, history), indent=indent, ensure_ascii=False)


def loads_session(text: str, comparator=default_comparator, context=None) -> Session:
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SessionError(f"session is not valid JSON: {exc.msg}") from exc
    if not isinstance(document, dict):
        raise SessionError("session document must be a JSON object")
    return load_session(document, comparator, context)
