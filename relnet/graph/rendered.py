"""
Rendered graph model.

Stands at the rendering boundary: holds the node/edge elements built from
a GraphView, per-element style classes toggled by the interaction layer,
and tap dispatch. There is no partial-update API; a changed view model is
shown by destroying the graph and building a new one.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Set, Union

from .projection import EdgeData, GraphView, NodeData

logger = logging.getLogger(__name__)


# Style classes
SELECTED = "selected"
HIGHLIGHTED = "highlighted"
DIMMED = "dimmed"

STYLE_CLASSES = (SELECTED, HIGHLIGHTED, DIMMED)

# Default styling (DOT attributes)
NODE_STYLE = {"shape": "circle", "style": "filled", "fontsize": "10", "width": "0.5"}
EDGE_STYLE = {"color": "#999999", "fontsize": "8", "arrowhead": "normal"}
DIMMED_COLOR = "#e0e0e0"
SELECTED_COLOR = "#dd0000"


@dataclass
class Element:
    """A node or edge element with its style classes."""

    data: Union[NodeData, EdgeData]
    classes: Set[str] = field(default_factory=set)

    @property
    def id(self) -> str:
        return self.data.id

    @property
    def is_node(self) -> bool:
        return isinstance(self.data, NodeData)


TapHandler = Callable[[str], None]


class GraphDestroyed(RuntimeError):
    """Raised when a destroyed graph is used."""


class RenderedGraph:
    """Renderable graph built from one GraphView."""

    def __init__(self, view: GraphView):
        self.view = view
        self._elements: Dict[str, Element] = {}
        for node in view.nodes:
            self._elements[node.id] = Element(node)
        for edge in view.edges:
            self._elements[edge.id] = Element(edge)
        self._tap_handlers: List[TapHandler] = []
        self.destroyed = False
        logger.debug(
            f"[Render] built graph: {len(view.nodes)} nodes, {len(view.edges)} edges"
        )

    # =========================================================================
    # Elements
    # =========================================================================

    def _check(self) -> None:
        if self.destroyed:
            raise GraphDestroyed("Graph has been destroyed")

    def element(self, element_id: str) -> Element:
        self._check()
        return self._elements[element_id]

    def has_node(self, node_id: str) -> bool:
        element = self._elements.get(node_id)
        return element is not None and element.is_node

    def nodes(self) -> List[Element]:
        self._check()
        return [e for e in self._elements.values() if e.is_node]

    def edges(self) -> List[Element]:
        self._check()
        return [e for e in self._elements.values() if not e.is_node]

    def elements(self) -> List[Element]:
        self._check()
        return list(self._elements.values())

    def connected_edges(self, node_id: str) -> List[Element]:
        """Edges incident to a node, in either direction."""
        return [
            e for e in self.edges()
            if e.data.source == node_id or e.data.target == node_id
        ]

    def neighbors(self, node_id: str) -> Set[str]:
        """Ids of nodes joined to node_id by an edge, in either direction."""
        result = set()
        for edge in self.connected_edges(node_id):
            result.add(edge.data.source)
            result.add(edge.data.target)
        result.discard(node_id)
        return result

    # =========================================================================
    # Style classes
    # =========================================================================

    def add_class(self, element_id: str, cls: str) -> None:
        self.element(element_id).classes.add(cls)

    def remove_class(self, element_id: str, cls: str) -> None:
        self.element(element_id).classes.discard(cls)

    def clear_classes(self, *classes: str) -> None:
        """Remove the given classes (all style classes by default) from every element."""
        classes = classes or STYLE_CLASSES
        for element in self.elements():
            element.classes.difference_update(classes)

    def with_class(self, cls: str) -> Set[str]:
        """Ids of elements carrying a class."""
        return {e.id for e in self.elements() if cls in e.classes}

    # =========================================================================
    # Events
    # =========================================================================

    def on_tap(self, handler: TapHandler) -> None:
        """Register a handler called with the id of each tapped node."""
        self._check()
        self._tap_handlers.append(handler)

    def tap(self, node_id: str) -> None:
        """Emit a tap event for a node."""
        self._check()
        if not self.has_node(node_id):
            raise KeyError(node_id)
        for handler in list(self._tap_handlers):
            handler(node_id)

    def destroy(self) -> None:
        """Tear the graph down; it cannot be used afterwards."""
        self._elements.clear()
        self._tap_handlers.clear()
        self.destroyed = True
        logger.debug("[Render] graph destroyed")

    # =========================================================================
    # Output
    # =========================================================================

    def to_dot(self, name: str = "network") -> str:
        """Render the graph as Graphviz DOT source."""
        self._check()
        lines = [f"digraph {_quote(name)} {{"]
        lines.append(f"  node [{_attrs(NODE_STYLE)}];")
        lines.append(f"  edge [{_attrs(EDGE_STYLE)}];")

        for element in self.nodes():
            node = element.data
            attrs = {"label": node.label, "fillcolor": node.color or "#cccccc"}
            if DIMMED in element.classes:
                attrs["fillcolor"] = DIMMED_COLOR
                attrs["fontcolor"] = "#aaaaaa"
            if HIGHLIGHTED in element.classes:
                attrs["penwidth"] = "3"
            if SELECTED in element.classes:
                attrs["color"] = SELECTED_COLOR
                attrs["penwidth"] = "3"
            lines.append(f"  {_quote(node.id)} [{_attrs(attrs)}];")

        for element in self.edges():
            edge = element.data
            attrs = {"label": edge.label, "tooltip": edge.notes or ""}
            if DIMMED in element.classes:
                attrs["color"] = DIMMED_COLOR
                attrs["fontcolor"] = "#aaaaaa"
            if HIGHLIGHTED in element.classes:
                attrs["penwidth"] = "2"
                attrs["color"] = "#333333"
            lines.append(
                f"  {_quote(edge.source)} -> {_quote(edge.target)} [{_attrs(attrs)}];"
            )

        lines.append("}")
        return "\n".join(lines)


def _quote(value: Optional[str]) -> str:
    text = "" if value is None else str(value)
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _attrs(attrs: dict) -> str:
    return ", ".join(f"{key}={_quote(value)}" for key, value in attrs.items())
