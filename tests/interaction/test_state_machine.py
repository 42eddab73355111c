"""Tests for mode switching, taps and the relationship picker."""

import pytest

from relnet.errors import InvalidTransition, SelfRelationship, UnknownType
from relnet.graph import DIMMED, HIGHLIGHTED, SELECTED
from relnet.interaction import (
    EditIdle,
    EditPendingTarget,
    RelationshipPicker,
    ViewMode,
    cancel_picker,
    save_relationship,
    start_session,
    tap_node,
    toggle_mode,
)
from relnet.models import RelationType
from tests.conftest import relationship_map


@pytest.fixture
def session(store):
    """Session over alice/bob/kim plus an isolated node."""
    store.insert_character("zed", "Zed", "#999")
    return start_session(store)


@pytest.fixture
def edit_session(session):
    return toggle_mode(session)


def _edge_id(session, source, target):
    return next(
        e.id for e in session.graph.edges()
        if e.data.source == source and e.data.target == target
    )


# =============================================================================
# Mode toggling
# =============================================================================


class TestToggleMode:
    """View <-> Edit-Idle."""

    def test_starts_in_view_mode(self, session):
        assert session.state == ViewMode()
        assert not session.is_edit_mode

    def test_toggle_flips(self, session):
        toggle_mode(session)
        assert session.state == EditIdle()
        toggle_mode(session)
        assert session.state == ViewMode()

    def test_toggle_clears_pending_selection(self, edit_session):
        tap_node(edit_session, "alice")
        assert edit_session.graph.with_class(SELECTED) == {"alice"}

        toggle_mode(edit_session)

        assert edit_session.state == ViewMode()
        assert edit_session.graph.with_class(SELECTED) == set()
        assert edit_session.pending_source is None

    def test_toggle_ignored_while_modal(self, edit_session):
        tap_node(edit_session, "alice")
        tap_node(edit_session, "bob")

        toggle_mode(edit_session)
        assert isinstance(edit_session.state, RelationshipPicker)


# =============================================================================
# View mode highlighting
# =============================================================================


class TestViewHighlight:
    """Neighborhood highlighting on tap."""

    def test_tap_highlights_neighborhood(self, session):
        tap_node(session, "alice")
        graph = session.graph

        incident = {_edge_id(session, "alice", "bob"), _edge_id(session, "kim", "alice")}
        assert graph.with_class(HIGHLIGHTED) == {"alice", "bob", "kim"} | incident
        assert graph.with_class(DIMMED) == {"zed"}

    def test_second_tap_replaces_highlight(self, session):
        tap_node(session, "alice")
        tap_node(session, "bob")
        graph = session.graph

        assert graph.with_class(HIGHLIGHTED) == {"bob", "alice", _edge_id(session, "alice", "bob")}
        assert graph.with_class(DIMMED) == {"kim", "zed", _edge_id(session, "kim", "alice")}

    def test_isolated_node_dims_everything_else(self, session):
        tap_node(session, "zed")
        graph = session.graph

        assert graph.with_class(HIGHLIGHTED) == {"zed"}
        assert len(graph.with_class(DIMMED)) == len(graph.elements()) - 1

    def test_tap_through_rendered_graph(self, session):
        session.graph.tap("kim")
        assert "kim" in session.graph.with_class(HIGHLIGHTED)

    def test_view_tap_does_not_mutate_store(self, session):
        before = relationship_map(session.store)
        tap_node(session, "alice")
        assert relationship_map(session.store) == before


# =============================================================================
# Edit mode and picker
# =============================================================================


class TestEditSelection:
    """Source/target selection in edit mode."""

    def test_first_tap_selects_source(self, edit_session):
        tap_node(edit_session, "bob")

        assert edit_session.state == EditPendingTarget(source="bob")
        assert edit_session.graph.with_class(SELECTED) == {"bob"}

    def test_second_tap_opens_picker_for_pair(self, edit_session):
        tap_node(edit_session, "bob")
        tap_node(edit_session, "kim")

        assert edit_session.state == RelationshipPicker(source="bob", target="kim")
        assert edit_session.state.rel_type is RelationType.NEUTRAL
        assert edit_session.graph.with_class(SELECTED) == set()

    def test_tapping_source_again_is_rejected(self, edit_session):
        tap_node(edit_session, "bob")
        tap_node(edit_session, "bob")

        assert edit_session.state == EditIdle()
        assert edit_session.graph.with_class(SELECTED) == set()
        notices = edit_session.drain_notices()
        assert isinstance(notices[-1].error, SelfRelationship)

    @pytest.mark.parametrize("edit", [False, True])
    def test_unknown_node_rejected_in_every_state(self, session, edit):
        if edit:
            toggle_mode(session)
        state = session.state

        with pytest.raises(KeyError):
            tap_node(session, "nobody")

        assert session.state == state
        assert session.graph.with_class(DIMMED) == set()
        assert session.graph.with_class(SELECTED) == set()

    def test_taps_ignored_while_picker_open(self, edit_session):
        tap_node(edit_session, "bob")
        tap_node(edit_session, "kim")
        tap_node(edit_session, "alice")

        assert edit_session.state == RelationshipPicker(source="bob", target="kim")


class TestRelationshipPicker:
    """Saving and cancelling the picker."""

    @pytest.fixture
    def picker_session(self, edit_session):
        tap_node(edit_session, "bob")
        tap_node(edit_session, "kim")
        return edit_session

    def test_cancel_leaves_store_unchanged(self, picker_session):
        before = relationship_map(picker_session.store)
        cancel_picker(picker_session)

        assert picker_session.state == EditIdle()
        assert relationship_map(picker_session.store) == before

    def test_save_adds_relationship(self, picker_session):
        save_relationship(picker_session, "despises", "")

        assert picker_session.state == EditIdle()
        assert relationship_map(picker_session.store)[("bob", "kim")] == ("despises", -3, "")

    def test_save_replaces_existing_pair(self, edit_session):
        tap_node(edit_session, "alice")
        tap_node(edit_session, "bob")
        save_relationship(edit_session, RelationType.IN_LOVE_WITH, "it grew")

        rels = relationship_map(edit_session.store)
        assert rels[("alice", "bob")] == ("in_love_with", 3, "it grew")
        assert len(rels) == 2

    def test_save_rebuilds_graph(self, picker_session):
        old_graph = picker_session.graph
        save_relationship(picker_session, "likes", "")

        assert old_graph.destroyed
        assert picker_session.graph is not old_graph
        edges = {(e.data.source, e.data.target): e.data.label for e in picker_session.graph.edges()}
        assert edges[("bob", "kim")] == "likes"

    def test_new_graph_accepts_taps(self, picker_session):
        save_relationship(picker_session, "likes", "")
        picker_session.graph.tap("alice")

        assert picker_session.state == EditPendingTarget(source="alice")

    def test_unknown_type_keeps_picker_open(self, picker_session):
        before = relationship_map(picker_session.store)
        save_relationship(picker_session, "adores", "keep me")

        assert picker_session.state == RelationshipPicker(source="bob", target="kim", notes="keep me")
        assert relationship_map(picker_session.store) == before
        assert isinstance(picker_session.drain_notices()[-1].error, UnknownType)

    def test_save_outside_picker_is_invalid(self, edit_session):
        with pytest.raises(InvalidTransition):
            save_relationship(edit_session, "likes", "")

    def test_cancel_outside_picker_is_invalid(self, session):
        with pytest.raises(InvalidTransition):
            cancel_picker(session)
