"""
Interaction state machine.

Consumes user gestures (toggle, node taps, modal actions), reads and
writes the snapshot store, and keeps the rendered graph in sync by
re-projecting and rebuilding it after every mutation.

Each transition takes the Session and returns it. Store failures are
caught here, reported as notices, and leave the session in the state it
held before the action.
"""

import logging
from dataclasses import replace
from typing import Optional, Union

from ..config.settings import settings
from ..errors import (
    DuplicateId,
    InvalidTransition,
    RelnetError,
    SelfRelationship,
    UnknownType,
)
from ..graph.projection import project_store
from ..graph.rendered import DIMMED, HIGHLIGHTED, SELECTED, RenderedGraph
from ..models.entities import make_character_id
from ..models.relationships import DEFAULT_RELATION_TYPE, RelationType
from ..publish.workflow import PublishResult, publish
from ..store.connection import SnapshotStore
from .session import (
    CharacterWizard,
    EditIdle,
    EditPendingTarget,
    RelationshipPicker,
    Session,
    ViewMode,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Session lifecycle
# =============================================================================


def start_session(store: SnapshotStore) -> Session:
    """Create a session in View mode with a freshly rendered graph."""
    session = Session(store=store)
    return render(session)


def render(session: Session) -> Session:
    """
    Re-project the store and rebuild the rendered graph from scratch.

    The previous graph is destroyed; there is no incremental update.
    """
    if session.graph is not None:
        session.graph.destroy()

    graph = RenderedGraph(project_store(session.store))
    graph.on_tap(lambda node_id: tap_node(session, node_id))
    session.graph = graph
    return session


def _report(session: Session, error: RelnetError) -> None:
    logger.warning(f"[Interaction] {type(error).__name__}: {error}")
    session.notify("error", str(error), error)


def _require(session: Session, state_type):
    if not isinstance(session.state, state_type):
        raise InvalidTransition(
            f"Cannot do this while in {type(session.state).__name__}"
        )
    return session.state


# =============================================================================
# Mode and taps
# =============================================================================


def toggle_mode(session: Session) -> Session:
    """Flip between View and Edit; a pending source selection is dropped."""
    state = session.state
    if session.is_modal:
        logger.debug("[Interaction] toggle ignored while a modal is open")
        return session

    if isinstance(state, ViewMode):
        session.state = EditIdle()
    else:
        if isinstance(state, EditPendingTarget):
            session.graph.remove_class(state.source, SELECTED)
        session.state = ViewMode()

    logger.info(f"[Interaction] mode -> {type(session.state).__name__}")
    return session


def tap_node(session: Session, node_id: str) -> Session:
    """
    Handle a tap on a node according to the current state.

    Raises:
        KeyError: If the node is not in the rendered graph
    """
    if not session.graph.has_node(node_id):
        raise KeyError(node_id)
    state = session.state

    if isinstance(state, ViewMode):
        highlight(session.graph, node_id)

    elif isinstance(state, EditIdle):
        session.graph.add_class(node_id, SELECTED)
        session.state = EditPendingTarget(source=node_id)
        logger.debug(f"[Interaction] source selected: {node_id}")

    elif isinstance(state, EditPendingTarget):
        session.graph.remove_class(state.source, SELECTED)
        if node_id == state.source:
            _report(session, SelfRelationship(node_id))
            session.state = EditIdle()
        else:
            session.state = RelationshipPicker(source=state.source, target=node_id)
            logger.info(f"[Interaction] picker opened: {state.source} -> {node_id}")

    else:
        logger.debug(f"[Interaction] tap on {node_id} ignored while a modal is open")

    return session


def highlight(graph: RenderedGraph, node_id: str) -> None:
    """
    Highlight a node, its neighbors and its incident edges; dim everything else.

    Replaces any previous highlight.
    """
    graph.clear_classes(HIGHLIGHTED, DIMMED)

    keep = {node_id} | graph.neighbors(node_id)
    keep |= {edge.id for edge in graph.connected_edges(node_id)}

    for element in graph.elements():
        element.classes.add(HIGHLIGHTED if element.id in keep else DIMMED)


# =============================================================================
# Relationship picker
# =============================================================================


def save_relationship(
    session: Session,
    rel_type: Union[RelationType, str],
    notes: str = "",
) -> Session:
    """
    Save the picker's relationship and return to Edit-Idle.

    An unknown type keeps the picker open with the entered notes.
    """
    picker = _require(session, RelationshipPicker)

    try:
        rel_type = RelationType.parse(rel_type)
        session.store.upsert_relationship(picker.source, picker.target, rel_type, notes)
    except UnknownType as e:
        _report(session, e)
        session.state = replace(picker, notes=notes)
        return session
    except RelnetError as e:
        _report(session, e)
        session.state = EditIdle()
        return session

    render(session)
    session.state = EditIdle()
    session.notify("info", f"Saved: {picker.source} {rel_type.value} {picker.target}")
    return session


def cancel_picker(session: Session) -> Session:
    """Close the picker without touching the store."""
    _require(session, RelationshipPicker)
    session.state = EditIdle()
    logger.debug("[Interaction] picker cancelled")
    return session


# =============================================================================
# Character wizard
# =============================================================================


def start_character_wizard(
    session: Session,
    name: Optional[str],
    color: Optional[str] = None,
) -> Session:
    """
    Insert a new character and open the wizard for its relationships.

    A missing or blank name aborts silently. A duplicate id is reported
    and leaves the session unchanged.
    """
    if session.is_modal:
        logger.debug("[Interaction] wizard start ignored while a modal is open")
        return session

    name = (name or "").strip()
    if not name:
        logger.debug("[Interaction] wizard aborted: no name")
        return session

    color = color or settings.DEFAULT_CHARACTER_COLOR
    character_id = make_character_id(name)

    try:
        session.store.insert_character(character_id, name, color)
    except DuplicateId as e:
        _report(session, e)
        return session

    render(session)
    others = tuple(session.store.list_active_characters(exclude=character_id))
    session.state = CharacterWizard(
        character_id=character_id,
        name=name,
        others=others,
        selections={other.id: DEFAULT_RELATION_TYPE for other in others},
    )
    logger.info(f"[Interaction] wizard opened for {character_id} ({len(others)} others)")
    return session


def bulk_apply(session: Session, rel_type: Union[RelationType, str]) -> Session:
    """Set every wizard selector to one type; selectors stay editable."""
    wizard = _require(session, CharacterWizard)
    try:
        rel_type = RelationType.parse(rel_type)
    except UnknownType as e:
        _report(session, e)
        return session

    session.state = replace(
        wizard, selections={other_id: rel_type for other_id in wizard.selections}
    )
    return session


def set_selector(
    session: Session,
    other_id: str,
    rel_type: Union[RelationType, str],
) -> Session:
    """Override one wizard selector."""
    wizard = _require(session, CharacterWizard)
    if other_id not in wizard.selections:
        raise KeyError(other_id)
    try:
        rel_type = RelationType.parse(rel_type)
    except UnknownType as e:
        _report(session, e)
        return session

    selections = dict(wizard.selections)
    selections[other_id] = rel_type
    session.state = replace(wizard, selections=selections)
    return session


def complete_wizard(session: Session) -> Session:
    """
    Write one outgoing relationship per other character, then publish.

    All relationships are written in one transaction; on failure none are
    written and the wizard stays open.
    """
    wizard = _require(session, CharacterWizard)

    try:
        with session.store.transaction():
            for other_id, rel_type in wizard.selections.items():
                session.store.upsert_relationship(wizard.character_id, other_id, rel_type, "")
    except RelnetError as e:
        _report(session, e)
        return session

    render(session)
    session.state = EditIdle()
    logger.info(
        f"[Interaction] wizard completed for {wizard.character_id}: "
        f"{len(wizard.selections)} relationships"
    )
    publish_snapshot(session, message=f"Added {wizard.name}!")
    return session


def cancel_wizard(session: Session) -> Session:
    """Close the wizard; the character stays, no relationships are written."""
    wizard = _require(session, CharacterWizard)
    session.state = EditIdle()
    logger.info(f"[Interaction] wizard closed without relationships for {wizard.character_id}")
    return session


# =============================================================================
# Publish
# =============================================================================


def publish_snapshot(session: Session, message: str = "Snapshot exported.") -> PublishResult:
    """Export the current store state and record the result on the session."""
    result = publish(session.store, message=message)
    session.published.append(result)
    session.notify("info", result.render())
    return result
