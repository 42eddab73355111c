"""Error kinds raised by the snapshot store and the interaction layer."""


class RelnetError(Exception):
    """Base class for all relnet errors."""


class CorruptSnapshot(RelnetError):
    """The byte sequence is not a valid relational image."""


class DuplicateId(RelnetError):
    """A character with this id already exists (active or not)."""

    def __init__(self, character_id: str):
        super().__init__(f"Character id already exists: {character_id}")
        self.character_id = character_id


class UnknownType(RelnetError, ValueError):
    """Relationship type outside the enumerated set."""

    def __init__(self, value):
        super().__init__(f"Unknown relationship type: {value!r}")
        self.value = value


class SelfRelationship(RelnetError, ValueError):
    """Source and target of a relationship are the same character."""

    def __init__(self, character_id: str):
        super().__init__(f"A character cannot have a relationship with itself: {character_id}")
        self.character_id = character_id


class InvalidTransition(RelnetError):
    """An action was requested in a state that does not accept it."""
