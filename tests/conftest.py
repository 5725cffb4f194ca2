import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from bst.bst_context import EngineContext
from bst.bst_engine import BSTEngine
from bst.bst_insert import insert
from bst.bst_model import create_initial_tree


@pytest.fixture
def context():
    return EngineContext()


@pytest.fixture
def engine(context):
    return BSTEngine(context)


@pytest.fixture
def build_tree(context):
    def _build(values, policy="reject", max_nodes=256):
        tree = create_initial_tree(duplicate_policy=policy, max_nodes=max_nodes)
        for value in values:
            tree = insert(tree, value, context).next
        return tree

    return _build
