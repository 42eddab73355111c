"""
Graph view module.

This module provides:
- project: Derive the node/edge view model from store rows
- GraphView: Projected nodes and edges
- RenderedGraph: Renderable graph with style classes and tap events
"""

from .projection import GraphView, NodeData, EdgeData, project, project_store
from .rendered import RenderedGraph, SELECTED, HIGHLIGHTED, DIMMED

__all__ = [
    "GraphView",
    "NodeData",
    "EdgeData",
    "project",
    "project_store",
    "RenderedGraph",
    "SELECTED",
    "HIGHLIGHTED",
    "DIMMED",
]
