"""Tests for loading data into a TreeState."""

import asyncio
from concurrent.futures import CancelledError, Future

import pytest

from treestate.tree import Deferred, MalformedNodeError, NodeState, Resolved, TreeModel
from treestate.tree.loader import as_load_source


class TestAsLoadSource:
    def test_list_is_resolved(self):
        source = as_load_source([{"id": "a"}])
        assert isinstance(source, Resolved)

    def test_future_is_deferred(self):
        source = as_load_source(Future())
        assert isinstance(source, Deferred)

    def test_tagged_passthrough(self):
        source = Resolved([])
        assert as_load_source(source) is source

    def test_unsupported(self):
        with pytest.raises(TypeError, match="Cannot load from dict"):
            as_load_source({"id": "a"})


class TestLoadResolved:
    def test_root_and_child_scenario(self, tree):
        completion = tree.load([{"name": "root", "children": [{"name": "child"}]}])
        model = completion.result(timeout=0)

        assert isinstance(model, TreeModel)
        root = model[0]
        (child,) = model.children_of(root)
        assert root.id and child.id and root.id != child.id
        assert model.parent_of(child) is root
        assert root.state == NodeState(collapsed=True, hidden=False, selected=False)
        assert child.state == NodeState(collapsed=True, hidden=False, selected=False)

    def test_replaces_model_wholesale(self, loaded_tree):
        old = loaded_tree.model
        loaded_tree.load([{"id": "only"}]).result()
        assert loaded_tree.model is not old
        assert [n.id for n in loaded_tree.model] == ["only"]
        assert loaded_tree.get_node_by_id("a") is None

    def test_renders_once(self, tree, renderer, emitter):
        tree.load([{"id": "a"}, {"id": "b"}]).result()
        assert renderer.calls == [["a", "b"]]
        assert len(emitter.log) == 0

    def test_duplicate_ids_merged(self, tree):
        model = tree.load([{"id": "a", "children": [{"id": "x"}]}, {"id": "a", "children": [{"id": "y"}]}]).result()
        assert len(model) == 1
        assert model[0].child_ids == ["x", "y"]

    def test_malformed_rejects_and_keeps_model(self, loaded_tree, renderer):
        old = loaded_tree.model
        completion = loaded_tree.load([{"id": "z"}, "bad"])
        with pytest.raises(MalformedNodeError):
            completion.result()
        assert loaded_tree.model is old
        assert renderer.count == 0

    def test_loaded_nodes_start_unselected(self, tree):
        model = tree.load(
            [
                {"id": "a", "state": {"selected": True}},
                {"id": "b", "state": {"selected": True}, "children": [{"id": "c", "state": {"selected": True}}]},
            ]
        ).result()
        assert [n.id for n in model.all_nodes() if n.state.selected] == []

    def test_unsupported_source_raises(self, tree):
        with pytest.raises(TypeError):
            tree.load("nodes.json")


class TestLoadDeferred:
    def test_waits_for_future(self, tree):
        source: Future = Future()
        completion = tree.load(source)
        assert not completion.done()
        assert len(tree.model) == 0

        source.set_result([{"id": "late"}])
        assert completion.done()
        assert [n.id for n in completion.result()] == ["late"]
        assert tree.model is completion.result()

    def test_failure_propagates(self, loaded_tree):
        old = loaded_tree.model
        source: Future = Future()
        completion = loaded_tree.load(source)
        source.set_exception(ConnectionError("unreachable"))
        with pytest.raises(ConnectionError, match="unreachable"):
            completion.result()
        assert loaded_tree.model is old

    def test_cancelled_source(self, loaded_tree):
        source: Future = Future()
        completion = loaded_tree.load(Deferred(source))
        source.cancel()
        assert isinstance(completion.exception(), CancelledError)

    def test_malformed_deferred_data(self, loaded_tree):
        source: Future = Future()
        completion = loaded_tree.load(source)
        source.set_result({"not": "a list"})
        assert isinstance(completion.exception(), MalformedNodeError)
        assert loaded_tree.get_node_by_id("a") is not None

    def test_asyncio_future(self, tree):
        async def scenario():
            loop = asyncio.get_running_loop()
            source = loop.create_future()
            completion = tree.load(source)
            loop.call_soon(source.set_result, [{"id": "async"}])
            return await asyncio.wrap_future(completion)

        model = asyncio.run(scenario())
        assert [n.id for n in model] == ["async"]


class TestLoadAsync:
    def test_coroutine_source(self, tree, renderer):
        async def fetch():
            return [{"id": "fetched", "children": [{"id": "kid"}]}]

        model = asyncio.run(tree.load_async(fetch()))
        assert tree.model is model
        assert model.find_by_id("kid").parent_id == "fetched"
        assert renderer.count == 1

    def test_list_source(self, tree):
        model = asyncio.run(tree.load_async([{"id": "a"}]))
        assert [n.id for n in model] == ["a"]

    def test_concurrent_future_source(self, tree):
        source: Future = Future()
        source.set_result([{"id": "done"}])
        model = asyncio.run(tree.load_async(Deferred(source)))
        assert [n.id for n in model] == ["done"]

    def test_failure_keeps_model(self, loaded_tree):
        old = loaded_tree.model

        async def broken():
            raise TimeoutError("slow")

        with pytest.raises(TimeoutError):
            asyncio.run(loaded_tree.load_async(broken()))
        assert loaded_tree.model is old

    def test_unsupported_source(self, tree):
        with pytest.raises(TypeError):
            asyncio.run(tree.load_async(42))
