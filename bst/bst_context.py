import itertools


class EngineContext:
    """
    Owns the counters used to mint node, step and operation ids.

    Ids are never reused for the lifetime of a context, even after the node
    they named was deleted. Minting is not atomic: a context must not be
    shared between threads without external locking.
    """

    def __init__(self, start: int = 1, strict_invariants: bool = False):
        self._start = start
        self.strict_invariants = strict_invariants
        self._node_iter = itertools.count(start)
        self._step_iter = itertools.count(start)
        self._op_iter = itertools.count(start)

    def reset(self):
        self._node_iter = itertools.count(self._start)
        self._step_iter = itertools.count(self._start)
        self._op_iter = itertools.count(self._start)

    def next_node_id(self, key) -> str:
        return f"node-{key}-{next(self._node_iter)}"

    def next_step_id(self, op: str) -> str:
        return f"{op}-{next(self._step_iter)}"

    def next_op_id(self) -> str:
        return f"op-{next(self._op_iter)}"

    def skip_past(self, node_ids):
        """
        Advance the node counter beyond every numeric suffix in `node_ids`,
        so a tree loaded from a snapshot never sees an id minted twice.
        """
        highest = self._start - 1
        for node_id in node_ids:
            suffix = str(node_id).rsplit("-", 1)[-1]
            if suffix.isdigit():
                highest = max(highest, int(suffix))
        current = next(self._node_iter)
        self._node_iter = itertools.count(max(current, highest + 1))


_default_context = EngineContext()


def default_context() -> EngineContext:
    return _default_context


def resolve(context=None) -> EngineContext:
    return context if context is not None else _default_context
