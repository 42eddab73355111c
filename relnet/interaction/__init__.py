"""
Interaction module.

This module provides:
- Session: Explicit context (store, rendered graph, state, notices)
- State types: ViewMode, EditIdle, EditPendingTarget, RelationshipPicker, CharacterWizard
- Transitions: toggle_mode, tap_node, save_relationship, cancel_picker,
  start_character_wizard, bulk_apply, set_selector, complete_wizard,
  cancel_wizard, publish_snapshot
"""

from .session import (
    CharacterWizard,
    EditIdle,
    EditPendingTarget,
    Notice,
    RelationshipPicker,
    Session,
    ViewMode,
)
from .machine import (
    bulk_apply,
    cancel_picker,
    cancel_wizard,
    complete_wizard,
    highlight,
    publish_snapshot,
    render,
    save_relationship,
    set_selector,
    start_character_wizard,
    start_session,
    tap_node,
    toggle_mode,
)

__all__ = [
    "CharacterWizard",
    "EditIdle",
    "EditPendingTarget",
    "Notice",
    "RelationshipPicker",
    "Session",
    "ViewMode",
    "bulk_apply",
    "cancel_picker",
    "cancel_wizard",
    "complete_wizard",
    "highlight",
    "publish_snapshot",
    "render",
    "save_relationship",
    "set_selector",
    "start_character_wizard",
    "start_session",
    "tap_node",
    "toggle_mode",
]
