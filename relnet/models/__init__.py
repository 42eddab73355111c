"""
Data models for the relationship network.

This module provides:
- Entities: Character, make_character_id
- Relationships: Relationship, RelationType, RELATIONSHIP_SCALE
"""

from .entities import Character, make_character_id
from .relationships import (
    Relationship,
    RelationType,
    RELATIONSHIP_SCALE,
    DEFAULT_RELATION_TYPE,
)

__all__ = [
    # Entities
    "Character",
    "make_character_id",
    # Relationships
    "Relationship",
    "RelationType",
    "RELATIONSHIP_SCALE",
    "DEFAULT_RELATION_TYPE",
]
