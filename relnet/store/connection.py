"""
Snapshot store over an in-memory SQLite image.

Owns the relational representation of characters and relationships,
executes queries and mutations, and serializes the full image to bytes.
"""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence, Union

from ..errors import CorruptSnapshot, DuplicateId, SelfRelationship, UnknownType
from ..models.entities import GROUP_COLUMNS, Character
from ..models.relationships import Relationship, RelationType

logger = logging.getLogger(__name__)


SCHEMA = """
CREATE TABLE IF NOT EXISTS characters (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    color TEXT,
    is_active INTEGER NOT NULL DEFAULT 1,
    group_name TEXT
);

CREATE TABLE IF NOT EXISTS relationships (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    source_id TEXT NOT NULL,
    target_id TEXT NOT NULL,
    type TEXT NOT NULL,
    strength INTEGER NOT NULL CHECK (strength BETWEEN -3 AND 3),
    notes TEXT,
    UNIQUE (source_id, target_id)
);
"""

REQUIRED_COLUMNS = {
    "characters": {"id", "name", "color", "is_active"},
    "relationships": {"id", "source_id", "target_id", "type", "strength", "notes"},
}


class SnapshotStore:
    """Relational store for one loaded snapshot."""

    def __init__(self, conn: sqlite3.Connection):
        """
        Wrap an open SQLite connection.

        Use `load`, `create` or `from_file` instead of calling this directly.

        Args:
            conn: In-memory SQLite connection holding the snapshot image
        """
        conn.row_factory = sqlite3.Row
        self._conn = conn
        self._in_transaction = False
        self._group_column = self._find_group_column()

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def load(cls, data: bytes) -> "SnapshotStore":
        """
        Deserialize a snapshot.

        Args:
            data: Serialized SQLite database image

        Returns:
            SnapshotStore holding the image in memory

        Raises:
            CorruptSnapshot: If the bytes are not a valid relational image
        """
        if not data:
            raise CorruptSnapshot("Snapshot is empty")

        conn = sqlite3.connect(":memory:")
        try:
            conn.deserialize(bytes(data))
            store = cls(conn)
            store._validate()
        except sqlite3.Error as e:
            conn.close()
            raise CorruptSnapshot(f"Snapshot is not a valid SQLite image: {e}") from e
        except CorruptSnapshot:
            conn.close()
            raise

        logger.info(f"[Store] loaded snapshot: {len(data)} bytes, {store.stats()}")
        return store

    @classmethod
    def create(cls) -> "SnapshotStore":
        """Create an empty store with the snapshot schema."""
        conn = sqlite3.connect(":memory:")
        conn.executescript(SCHEMA)
        return cls(conn)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "SnapshotStore":
        """Load a snapshot from a file on disk."""
        path = Path(path)
        logger.info(f"[Store] reading snapshot from {path}")
        return cls.load(path.read_bytes())

    def _find_group_column(self) -> Optional[str]:
        """Name of the optional group tag column, if the snapshot has one."""
        found = {row["name"] for row in self.query("PRAGMA table_info(characters)")}
        return next((name for name in GROUP_COLUMNS if name in found), None)

    def _validate(self) -> None:
        """Check that both row-sets exist with their columns and valid types."""
        for table, columns in REQUIRED_COLUMNS.items():
            rows = self.query(f"PRAGMA table_info({table})")
            found = {row["name"] for row in rows}
            if not found:
                raise CorruptSnapshot(f"Snapshot has no '{table}' table")
            missing = columns - found
            if missing:
                raise CorruptSnapshot(
                    f"Snapshot table '{table}' is missing columns: {sorted(missing)}"
                )

        for row in self.query("SELECT DISTINCT type FROM relationships"):
            try:
                RelationType.parse(row["type"])
            except UnknownType as e:
                raise CorruptSnapshot(str(e)) from e

    # =========================================================================
    # Raw access
    # =========================================================================

    def query(self, sql: str, params: Sequence[Any] = ()) -> List[sqlite3.Row]:
        """
        Run a read query and return its rows.

        Args:
            sql: SQL statement
            params: Positional parameters

        Returns:
            List of rows in store-native order
        """
        return self._conn.execute(sql, tuple(params)).fetchall()

    def execute(self, sql: str, params: Sequence[Any] = ()) -> None:
        """
        Run a mutating statement, committing unless inside `transaction()`.

        Args:
            sql: SQL statement
            params: Positional parameters
        """
        self._conn.execute(sql, tuple(params))
        if not self._in_transaction:
            self._conn.commit()

    @contextmanager
    def transaction(self) -> Iterator["SnapshotStore"]:
        """
        Group several mutations so they apply all together or not at all.

        Yields:
            The store itself
        """
        if self._in_transaction:
            yield self
            return

        self._in_transaction = True
        try:
            yield self
        except BaseException:
            self._conn.rollback()
            raise
        else:
            self._conn.commit()
        finally:
            self._in_transaction = False

    # =========================================================================
    # Characters
    # =========================================================================

    def list_active_characters(self, exclude: Optional[str] = None) -> List[Character]:
        """
        List active characters in store-native order.

        Args:
            exclude: Optional character id to leave out

        Returns:
            List of Character values
        """
        if exclude is None:
            rows = self.query("SELECT * FROM characters WHERE is_active = 1")
        else:
            rows = self.query(
                "SELECT * FROM characters WHERE is_active = 1 AND id != ?", [exclude]
            )
        return [Character.from_row(row) for row in rows]

    def list_characters(self) -> List[Character]:
        """List every character, active or not, in store-native order."""
        return [Character.from_row(row) for row in self.query("SELECT * FROM characters")]

    def get_character(self, character_id: str) -> Optional[Character]:
        """Get a character by id, active or not."""
        rows = self.query("SELECT * FROM characters WHERE id = ?", [character_id])
        return Character.from_row(rows[0]) if rows else None

    def insert_character(
        self,
        character_id: str,
        name: str,
        color: Optional[str],
        group: Optional[str] = None,
    ) -> Character:
        """
        Insert a new active character.

        Raises:
            DuplicateId: If the id exists among active or inactive rows
        """
        if self.get_character(character_id) is not None:
            raise DuplicateId(character_id)

        character = Character(id=character_id, name=name, color=color, group=group)
        columns = ["id", "name", "color", "is_active"]
        values = [character.id, character.name, character.color, 1]
        if self._group_column:
            columns.append(f'"{self._group_column}"')
            values.append(character.group)

        try:
            self.execute(
                f"INSERT INTO characters ({', '.join(columns)}) "
                f"VALUES ({', '.join('?' for _ in values)})",
                values,
            )
        except sqlite3.IntegrityError as e:
            raise DuplicateId(character_id) from e

        logger.info(f"[Store] inserted character: {character_id} ({name})")
        return character

    def set_character_active(self, character_id: str, active: bool) -> None:
        """
        Soft delete or restore a character.

        Relationships are kept; inactive endpoints only hide them from the view.

        Raises:
            KeyError: If no character has this id
        """
        if self.get_character(character_id) is None:
            raise KeyError(character_id)
        self.execute(
            "UPDATE characters SET is_active = ? WHERE id = ?",
            [1 if active else 0, character_id],
        )
        logger.info(f"[Store] set character {character_id} active={active}")

    # =========================================================================
    # Relationships
    # =========================================================================

    def list_relationships(self) -> List[Relationship]:
        """List all relationships regardless of endpoint activity."""
        rows = self.query("SELECT * FROM relationships")
        return [Relationship.from_row(row) for row in rows]

    def get_relationship(self, source_id: str, target_id: str) -> Optional[Relationship]:
        """Get the relationship for an ordered pair, if any."""
        rows = self.query(
            "SELECT * FROM relationships WHERE source_id = ? AND target_id = ?",
            [source_id, target_id],
        )
        return Relationship.from_row(rows[0]) if rows else None

    def upsert_relationship(
        self,
        source_id: str,
        target_id: str,
        rel_type: Union[RelationType, str],
        notes: Optional[str] = "",
    ) -> None:
        """
        Create or replace the relationship for an ordered character pair.

        Strength is always derived from the type.

        Raises:
            UnknownType: If rel_type is not an enumerated type
            SelfRelationship: If source and target are the same character
        """
        rel_type = RelationType.parse(rel_type)
        if source_id == target_id:
            raise SelfRelationship(source_id)

        with self.transaction():
            self.execute(
                "DELETE FROM relationships WHERE source_id = ? AND target_id = ?",
                [source_id, target_id],
            )
            self.execute(
                "INSERT INTO relationships (source_id, target_id, type, strength, notes) "
                "VALUES (?, ?, ?, ?, ?)",
                [source_id, target_id, rel_type.value, rel_type.strength, notes],
            )

        logger.info(
            f"[Store] upserted relationship: {source_id} -> {target_id} "
            f"({rel_type.value}, {rel_type.strength:+d})"
        )

    # =========================================================================
    # Snapshot
    # =========================================================================

    def export(self) -> bytes:
        """Serialize the full current relational image."""
        data = self._conn.serialize()
        logger.debug(f"[Store] exported snapshot: {len(data)} bytes")
        return data

    def stats(self) -> Dict[str, int]:
        """Get row counts for the snapshot."""
        return {
            "characters": self.query("SELECT count(*) AS n FROM characters")[0]["n"],
            "active_characters": self.query(
                "SELECT count(*) AS n FROM characters WHERE is_active = 1"
            )[0]["n"],
            "relationships": self.query("SELECT count(*) AS n FROM relationships")[0]["n"],
        }

    def close(self) -> None:
        """Discard the in-memory image."""
        self._conn.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
        return False


def open_snapshot(path: Optional[Union[str, Path]] = None) -> SnapshotStore:
    """Factory function to load the canonical snapshot."""
    from ..config.settings import settings

    return SnapshotStore.from_file(path or settings.SNAPSHOT_PATH)
