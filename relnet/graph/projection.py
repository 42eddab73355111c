"""
Graph projection.

Derives the node/edge view model from store rows. The view is always
re-derived in full after a mutation; there is no incremental patching.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from ..models.entities import Character
from ..models.relationships import Relationship

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NodeData:
    """Renderable character node."""

    id: str
    label: str
    color: Optional[str]
    group: Optional[str]

    def to_dict(self) -> dict:
        return {"id": self.id, "label": self.label, "color": self.color, "group": self.group}


@dataclass(frozen=True)
class EdgeData:
    """Renderable relationship edge."""

    id: str
    source: str
    target: str
    label: str
    strength: int
    notes: Optional[str]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "label": self.label,
            "strength": self.strength,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class GraphView:
    """Projected view model: nodes and edges with their data attributes."""

    nodes: List[NodeData] = field(default_factory=list)
    edges: List[EdgeData] = field(default_factory=list)

    def node_ids(self) -> set:
        return {node.id for node in self.nodes}

    def to_dict(self) -> dict:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
        }


def edge_id(relationship: Relationship) -> str:
    """Element id of a relationship edge."""
    return f"e{relationship.id}"


def project(
    characters: Iterable[Character],
    relationships: Iterable[Relationship],
) -> GraphView:
    """
    Project characters and relationships into a GraphView.

    Edges whose endpoints are not among the given (active) characters are
    left out, so deactivated characters hide their relationships.

    Args:
        characters: Active characters
        relationships: All relationships

    Returns:
        GraphView with one node per character and one edge per visible relationship
    """
    nodes = [
        NodeData(id=c.id, label=c.name, color=c.color, group=c.group)
        for c in characters
    ]
    visible = {node.id for node in nodes}

    edges = []
    hidden = 0
    for rel in relationships:
        if rel.source_id not in visible or rel.target_id not in visible:
            hidden += 1
            continue
        edges.append(
            EdgeData(
                id=edge_id(rel),
                source=rel.source_id,
                target=rel.target_id,
                label=rel.rel_type.value,
                strength=rel.strength,
                notes=rel.notes,
            )
        )

    logger.debug(
        f"[Projection] {len(nodes)} nodes, {len(edges)} edges ({hidden} hidden)"
    )
    return GraphView(nodes=nodes, edges=edges)


def project_store(store) -> GraphView:
    """Project the current contents of a SnapshotStore."""
    return project(store.list_active_characters(), store.list_relationships())
