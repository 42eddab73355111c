"""
Relationship models for the relationship network.

Defines the closed set of relationship types and their signed strength.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Union

from ..errors import UnknownType


class RelationType(str, Enum):
    """Types of directed relationships, ordered from hostile to affectionate."""

    DESPISES = "despises"
    HATES = "hates"
    DISLIKES = "dislikes"
    NEUTRAL = "neutral"
    LIKES = "likes"
    LIKES_A_LOT = "likes_a_lot"
    IN_LOVE_WITH = "in_love_with"

    @property
    def strength(self) -> int:
        return RELATIONSHIP_SCALE[self]

    @property
    def label(self) -> str:
        """Human readable label, e.g. 'Likes a lot (+2)'."""
        text = self.value.replace("_", " ").capitalize()
        return f"{text} ({self.strength:+d})" if self.strength else f"{text} (0)"

    @classmethod
    def parse(cls, value: Union["RelationType", str]) -> "RelationType":
        """
        Resolve a relationship type from its value.

        Raises:
            UnknownType: If the value is not one of the enumerated types
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnknownType(value) from None


# Symmetric around neutral
RELATIONSHIP_SCALE = {
    RelationType.DESPISES: -3,
    RelationType.HATES: -2,
    RelationType.DISLIKES: -1,
    RelationType.NEUTRAL: 0,
    RelationType.LIKES: 1,
    RelationType.LIKES_A_LOT: 2,
    RelationType.IN_LOVE_WITH: 3,
}

DEFAULT_RELATION_TYPE = RelationType.NEUTRAL


@dataclass(frozen=True)
class Relationship:
    """A directed relationship between two characters."""

    id: int
    source_id: str
    target_id: str
    rel_type: RelationType
    notes: Optional[str] = None

    @property
    def strength(self) -> int:
        return self.rel_type.strength

    @property
    def key(self) -> tuple:
        """Natural key: the ordered character pair."""
        return (self.source_id, self.target_id)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Relationship":
        """Build a Relationship from a `relationships` row."""
        return cls(
            id=row["id"],
            source_id=row["source_id"],
            target_id=row["target_id"],
            rel_type=RelationType.parse(row["type"]),
            notes=row["notes"],
        )
