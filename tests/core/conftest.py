"""Pytest fixtures for tree tests."""

import pytest


class RecordingRenderer:
    """Renderer that records the root ids of every render call."""

    def __init__(self):
        self.calls = []

    def render_nodes(self, model):
        self.calls.append([node.id for node in model])

    @property
    def count(self):
        return len(self.calls)

    def reset(self):
        self.calls.clear()


def sample_nodes():
    """a -> [a1, a2 -> [a2x]], b"""
    return [
        {
            "id": "a",
            "text": "Alpha",
            "children": [
                {"id": "a1", "text": "A one"},
                {"id": "a2", "text": "A two", "children": [{"id": "a2x", "text": "Deep"}]},
            ],
        },
        {"id": "b", "text": "Beta"},
    ]


@pytest.fixture
def renderer():
    """Fresh recording renderer."""
    return RecordingRenderer()


@pytest.fixture
def emitter():
    """Event emitter with history enabled."""
    from treestate.tree import EventEmitter

    return EventEmitter(history=True)


@pytest.fixture
def tree(renderer, emitter):
    """Empty TreeState wired to the recording collaborators."""
    from treestate.tree import TreeState

    return TreeState(renderer=renderer, notifier=emitter)


@pytest.fixture
def loaded_tree(tree, renderer, emitter):
    """TreeState loaded with sample_nodes(), collaborators reset."""
    tree.load(sample_nodes()).result()
    renderer.reset()
    emitter.log.clear()
    return tree


@pytest.fixture
def model():
    """Bare TreeModel built from sample_nodes()."""
    from treestate.tree.identity import normalize_many
    from treestate.tree.merge import merge_all
    from treestate.tree.model import TreeModel

    model = TreeModel()
    merge_all(model, normalize_many(sample_nodes()))
    return model
