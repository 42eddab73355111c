"""
Entity models for the relationship network.

Defines the Character dataclass and the id derivation used when a
character is created from its display name.
"""

import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional


_NON_WORD = re.compile(r"\W+")

# Accepted names for the optional group tag column, preferred first
GROUP_COLUMNS = ("group_name", "group")


def make_character_id(name: str) -> str:
    """
    Derive a stable character id from a display name.

    Lower-cases the name and collapses every run of non-word characters
    into a single underscore, e.g. "Mary Jane" -> "mary_jane".
    """
    return _NON_WORD.sub("_", name.lower())


@dataclass(frozen=True)
class Character:
    """Character node of the relationship network."""

    id: str
    name: str
    color: Optional[str] = None
    group: Optional[str] = None
    active: bool = True

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Character":
        """Build a Character from a `characters` row."""
        keys = row.keys()
        return cls(
            id=row["id"],
            name=row["name"],
            color=row["color"],
            group=next((row[name] for name in GROUP_COLUMNS if name in keys), None),
            active=bool(row["is_active"]),
        )
