"""Tests for dict export and text rendering."""

import io

from treestate.tree import TextRenderer
from treestate.tree.serialize import node_label, serialize_model, serialize_node, to_text


class TestSerializeNode:
    def test_includes_state_and_children(self, model):
        data = serialize_node(model, model.find_by_id("a2"))
        assert data == {
            "id": "a2",
            "text": "A two",
            "state": {"collapsed": True, "hidden": False, "selected": False},
            "children": [
                {
                    "id": "a2x",
                    "text": "Deep",
                    "state": {"collapsed": True, "hidden": False, "selected": False},
                }
            ],
        }

    def test_without_state_or_children(self, model):
        data = serialize_node(model, model.find_by_id("a"), include_state=False, include_children=False)
        assert data == {"id": "a", "text": "Alpha"}

    def test_empty_children_container_kept(self, tree):
        tree.add_node({"id": "p", "children": []})
        assert serialize_node(tree.model, tree.model[0])["children"] == []

    def test_serialize_model(self, model):
        data = serialize_model(model, include_state=False)
        assert [d["id"] for d in data] == ["a", "b"]
        assert "parent" not in data[0]["children"][0]


class TestNodeLabel:
    def test_label_fallbacks(self, tree):
        n1 = tree.add_node({"id": "n1", "title": "T"})
        n2 = tree.add_node({"id": "n2", "name": "N"})
        n3 = tree.add_node({"id": "n3", "text": ""})
        assert node_label(n1, "title") == "T"
        assert node_label(n2) == "N"
        assert node_label(n3) == "n3"


class TestToText:
    def test_collapsed_tree_shows_roots_only(self, model):
        assert to_text(model) == "▸ Alpha\n  Beta"

    def test_expanded_branch(self, loaded_tree):
        loaded_tree.expand_node("a")
        loaded_tree.select_node("a1")
        assert to_text(loaded_tree.model) == "\n".join(
            [
                "▾ Alpha",
                "    A one *",
                "  ▸ A two",
                "  Beta",
            ]
        )

    def test_hidden_nodes(self, loaded_tree):
        loaded_tree.hide_node("b")
        assert to_text(loaded_tree.model) == "▸ Alpha"
        assert to_text(loaded_tree.model, show_hidden=True) == "▸ Alpha\n  Beta"

    def test_indent(self, loaded_tree):
        loaded_tree.expand_node("a")
        lines = to_text(loaded_tree.model, indent=4).splitlines()
        assert lines[1] == "      A one"


class TestTextRenderer:
    def test_writes_on_render(self):
        from treestate.tree import TreeState

        stream = io.StringIO()
        tree = TreeState(renderer=TextRenderer(stream))
        tree.add_node({"id": "x", "text": "X"})
        assert stream.getvalue() == "  X\n"
