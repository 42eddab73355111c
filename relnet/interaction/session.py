"""
Session context and interaction states.

A Session holds everything one editing session needs: the snapshot
store, the rendered graph, the current interaction state and the
messages waiting to be shown to the user.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

from ..errors import RelnetError
from ..graph.rendered import RenderedGraph
from ..models.entities import Character
from ..models.relationships import DEFAULT_RELATION_TYPE, RelationType
from ..publish.workflow import PublishResult
from ..store.connection import SnapshotStore


# =============================================================================
# States
# =============================================================================


@dataclass(frozen=True)
class ViewMode:
    """Browsing; taps highlight a node's neighborhood."""


@dataclass(frozen=True)
class EditIdle:
    """Editing, no node selected."""


@dataclass(frozen=True)
class EditPendingTarget:
    """Editing, source node selected and waiting for a target tap."""

    source: str


@dataclass(frozen=True)
class RelationshipPicker:
    """Modal: choose type and notes for source -> target."""

    source: str
    target: str
    rel_type: RelationType = DEFAULT_RELATION_TYPE
    notes: str = ""


@dataclass(frozen=True)
class CharacterWizard:
    """Modal: set relationships from a new character to every other active one."""

    character_id: str
    name: str
    others: Tuple[Character, ...]
    selections: Dict[str, RelationType] = field(default_factory=dict)


State = Union[ViewMode, EditIdle, EditPendingTarget, RelationshipPicker, CharacterWizard]

MODAL_STATES = (RelationshipPicker, CharacterWizard)


# =============================================================================
# Session
# =============================================================================


@dataclass(frozen=True)
class Notice:
    """A message for the user."""

    level: str  # "info", "warning" or "error"
    message: str
    error: Optional[RelnetError] = None


@dataclass
class Session:
    """Explicit context for one editing session."""

    store: SnapshotStore
    graph: Optional[RenderedGraph] = None
    state: State = field(default_factory=ViewMode)
    notices: List[Notice] = field(default_factory=list)
    published: List[PublishResult] = field(default_factory=list)

    @property
    def is_modal(self) -> bool:
        return isinstance(self.state, MODAL_STATES)

    @property
    def is_edit_mode(self) -> bool:
        return not isinstance(self.state, ViewMode)

    @property
    def pending_source(self) -> Optional[str]:
        if isinstance(self.state, EditPendingTarget):
            return self.state.source
        return None

    def notify(self, level: str, message: str, error: Optional[RelnetError] = None) -> None:
        self.notices.append(Notice(level=level, message=message, error=error))

    def drain_notices(self) -> List[Notice]:
        """Return and clear pending notices."""
        notices, self.notices = self.notices, []
        return notices

    @property
    def last_published(self) -> Optional[PublishResult]:
        return self.published[-1] if self.published else None
