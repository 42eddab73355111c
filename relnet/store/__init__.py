"""
Snapshot store module.

This module provides:
- SnapshotStore: In-memory SQLite image of characters and relationships
- open_snapshot: Load the canonical snapshot from disk
"""

from .connection import SnapshotStore, open_snapshot, SCHEMA

__all__ = ["SnapshotStore", "open_snapshot", "SCHEMA"]
