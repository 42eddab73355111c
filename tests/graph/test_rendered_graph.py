"""Tests for the rendered graph model."""

import pytest

from relnet.graph import DIMMED, HIGHLIGHTED, SELECTED, RenderedGraph, project_store
from relnet.graph.rendered import GraphDestroyed


@pytest.fixture
def graph(store):
    return RenderedGraph(project_store(store))


class TestRenderedGraph:
    """Elements, classes, events and teardown."""

    def test_neighbors_follow_edges_in_both_directions(self, graph):
        assert graph.neighbors("alice") == {"bob", "kim"}
        assert graph.neighbors("bob") == {"alice"}

    def test_connected_edges(self, graph):
        assert {e.data.target for e in graph.connected_edges("bob")} == {"bob"}
        assert len(graph.connected_edges("alice")) == 2

    def test_classes(self, graph):
        graph.add_class("alice", SELECTED)
        assert graph.with_class(SELECTED) == {"alice"}

        graph.remove_class("alice", SELECTED)
        assert graph.with_class(SELECTED) == set()

    def test_clear_classes(self, graph):
        graph.add_class("alice", HIGHLIGHTED)
        graph.add_class("bob", DIMMED)
        graph.add_class("kim", SELECTED)

        graph.clear_classes(HIGHLIGHTED, DIMMED)
        assert graph.with_class(SELECTED) == {"kim"}

        graph.clear_classes()
        assert graph.with_class(SELECTED) == set()

    def test_tap_dispatches_to_handlers(self, graph):
        tapped = []
        graph.on_tap(tapped.append)

        graph.tap("bob")
        assert tapped == ["bob"]

    def test_tap_unknown_node(self, graph):
        with pytest.raises(KeyError):
            graph.tap("nobody")

    def test_destroyed_graph_cannot_be_used(self, graph):
        graph.destroy()

        assert graph.destroyed
        with pytest.raises(GraphDestroyed):
            graph.nodes()
        with pytest.raises(GraphDestroyed):
            graph.tap("alice")

    def test_to_dot(self, graph):
        graph.add_class("bob", DIMMED)
        dot = graph.to_dot()

        assert dot.startswith('digraph "network" {')
        assert '"alice" -> "bob"' in dot
        assert 'label="likes"' in dot
        assert '#e0e0e0' in dot

    def test_to_dot_escapes_quotes(self, empty_store):
        empty_store.insert_character("the_boss", 'The "Boss"', "#000")
        dot = RenderedGraph(project_store(empty_store)).to_dot()
        assert 'label="The \\"Boss\\""' in dot
