"""
Streamlit UI for the relationship network editor.

Run with: streamlit run relnet/ui/streamlit_app.py
"""

import logging
import sys
from pathlib import Path

import streamlit as st

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from relnet.config.settings import settings
from relnet.errors import CorruptSnapshot
from relnet.interaction import (
    CharacterWizard,
    RelationshipPicker,
    bulk_apply,
    cancel_picker,
    cancel_wizard,
    complete_wizard,
    publish_snapshot,
    save_relationship,
    set_selector,
    start_character_wizard,
    start_session,
    toggle_mode,
)
from relnet.models.relationships import DEFAULT_RELATION_TYPE, RelationType
from relnet.store import open_snapshot

# ============================================================================
# Configuration
# ============================================================================

RELATION_TYPES = list(RelationType)

BULK_ACTIONS = [
    ("All Neutral", RelationType.NEUTRAL),
    ("All Like", RelationType.LIKES),
    ("All Dislike", RelationType.DISLIKES),
]

NOTICE_RENDERERS = {
    "info": st.info,
    "warning": st.warning,
    "error": st.error,
}

# ============================================================================
# Session State Initialization
# ============================================================================


def init_session_state():
    """Load the canonical snapshot once per browser session."""
    if "session" in st.session_state:
        return

    try:
        store = open_snapshot()
    except FileNotFoundError:
        st.error(f"Snapshot not found: {settings.SNAPSHOT_PATH}")
        st.stop()
    except CorruptSnapshot as e:
        st.error(f"Snapshot could not be loaded: {e}")
        st.stop()

    st.session_state.session = start_session(store)


def get_session():
    return st.session_state.session


# ============================================================================
# UI Components
# ============================================================================


def render_sidebar():
    """Render the three top-level actions."""
    session = get_session()

    with st.sidebar:
        if session.is_edit_mode:
            st.markdown(":red[**EDIT MODE**]")
        else:
            st.markdown(":green[**View Mode**]")

        if st.button("Toggle Edit Mode", disabled=session.is_modal):
            toggle_mode(session)
            st.rerun()

        st.divider()

        st.subheader("Add Character")
        with st.form("add_character", clear_on_submit=True):
            name = st.text_input("Character name")
            color = st.color_picker("Color", value=settings.DEFAULT_CHARACTER_COLOR)
            if st.form_submit_button("Add", disabled=session.is_modal):
                start_character_wizard(session, name, color)
                st.rerun()

        st.divider()

        st.subheader("Snapshot")
        if st.button("Export Snapshot"):
            publish_snapshot(session)
            st.rerun()

        render_download(session)


def render_download(session):
    """Offer the most recent export for download with publish instructions."""
    result = session.last_published
    if result is None:
        return

    st.download_button(
        label=f"Download {result.artifact.filename}",
        data=result.artifact.data,
        file_name=result.artifact.filename,
        mime=result.artifact.media_type,
    )
    st.caption(result.message)
    for i, step in enumerate(result.instructions, 1):
        st.caption(f"{i}. {step}")


def render_notices(session):
    for notice in session.drain_notices():
        NOTICE_RENDERERS.get(notice.level, st.info)(notice.message)


def render_graph(session):
    """Render the graph and one tap button per node."""
    graph = session.graph
    st.graphviz_chart(graph.to_dot())

    nodes = graph.nodes()
    if not nodes:
        st.caption("No characters yet.")
        return

    if session.pending_source:
        st.caption(f"Source: {session.pending_source}. Tap a target.")

    cols = st.columns(min(len(nodes), 6))
    for i, element in enumerate(nodes):
        with cols[i % len(cols)]:
            if st.button(element.data.label, key=f"tap_{element.id}", disabled=session.is_modal):
                graph.tap(element.id)
                st.rerun()


def render_picker(session, picker: RelationshipPicker):
    """Relationship picker modal."""
    labels = {node.data.id: node.data.label for node in session.graph.nodes()}
    st.subheader(
        f"Relationship: {labels.get(picker.source, picker.source)} → "
        f"{labels.get(picker.target, picker.target)}"
    )

    with st.form("relationship_picker"):
        rel_type = st.selectbox(
            "Type",
            RELATION_TYPES,
            index=RELATION_TYPES.index(picker.rel_type),
            format_func=lambda t: t.label,
        )
        notes = st.text_area("Context notes", value=picker.notes, height=80)
        col_save, col_cancel = st.columns(2)
        with col_save:
            save = st.form_submit_button("Save")
        with col_cancel:
            cancel = st.form_submit_button("Cancel")

    if save:
        save_relationship(session, rel_type, notes)
        st.rerun()
    if cancel:
        cancel_picker(session)
        st.rerun()


def render_wizard(session, wizard: CharacterWizard):
    """Bulk relationship wizard for a newly added character."""
    st.subheader(f"Set relationships for {wizard.name}")
    st.write("Quick-set all, then adjust exceptions:")

    cols = st.columns(len(BULK_ACTIONS))
    for col, (label, rel_type) in zip(cols, BULK_ACTIONS):
        with col:
            if st.button(label, key=f"bulk_{rel_type.value}"):
                bulk_apply(session, rel_type)
                st.rerun()

    for other in wizard.others:
        current = wizard.selections.get(other.id, DEFAULT_RELATION_TYPE)
        chosen = st.selectbox(
            other.name,
            RELATION_TYPES,
            index=RELATION_TYPES.index(current),
            format_func=lambda t: t.label,
            key=f"wizard_{other.id}_{current.value}",
        )
        if chosen != current:
            set_selector(session, other.id, chosen)
            st.rerun()

    col_done, col_close = st.columns(2)
    with col_done:
        if st.button("Complete & Download", type="primary"):
            complete_wizard(session)
            st.rerun()
    with col_close:
        if st.button("Close without relationships"):
            cancel_wizard(session)
            st.rerun()


# ============================================================================
# Main App
# ============================================================================


def main():
    """Main Streamlit app."""
    st.set_page_config(
        page_title="Relationship Network",
        layout="wide",
    )
    logging.basicConfig(level=settings.LOG_LEVEL)

    init_session_state()
    session = get_session()

    st.title("Relationship Network")

    render_sidebar()
    render_notices(session)

    state = session.state
    if isinstance(state, RelationshipPicker):
        render_picker(session, state)
    elif isinstance(state, CharacterWizard):
        render_wizard(session, state)

    render_graph(session)


if __name__ == "__main__":
    main()
