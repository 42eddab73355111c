"""
Export and publish workflow.

Turns the current store image into a downloadable snapshot artifact and
tells the user how to publish it. Publishing itself is manual: the user
replaces the canonical snapshot file and commits it.
"""

import logging
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Union

from ..config.settings import settings

logger = logging.getLogger(__name__)


MEDIA_TYPE = "application/x-sqlite3"

_token_lock = threading.Lock()
_last_token = 0


def next_export_token(clock: Callable[[], int] = time.time_ns) -> int:
    """
    Get a millisecond timestamp token, strictly increasing within the process.

    Args:
        clock: Nanosecond clock

    Returns:
        Token distinct from every token handed out before
    """
    global _last_token
    with _token_lock:
        token = max(clock() // 1_000_000, _last_token + 1)
        _last_token = token
        return token


@dataclass(frozen=True)
class SnapshotArtifact:
    """A downloadable snapshot blob."""

    filename: str
    data: bytes
    media_type: str = MEDIA_TYPE

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class PublishResult:
    """An exported artifact and the manual publish steps that go with it."""

    artifact: SnapshotArtifact
    instructions: List[str]
    message: str

    def render(self) -> str:
        """Message plus numbered instructions as plain text."""
        steps = "\n".join(f"{i}. {step}" for i, step in enumerate(self.instructions, 1))
        return f"{self.message}\n\n{steps}"


def export_filename(token: int, prefix: Optional[str] = None, suffix: Optional[str] = None) -> str:
    """Build an export filename such as `network-1700000000000.sqlite`."""
    prefix = prefix or settings.EXPORT_PREFIX
    suffix = suffix or settings.EXPORT_SUFFIX
    return f"{prefix}-{token}{suffix}"


def publish_instructions(canonical_path: Optional[Union[str, Path]] = None) -> List[str]:
    """Manual steps that turn an exported artifact into the published snapshot."""
    canonical_path = canonical_path or settings.SNAPSHOT_PATH
    return [
        "Save the downloaded file",
        f"Replace {Path(canonical_path).as_posix()} with it",
        "git add/commit/push",
    ]


def publish(
    store,
    message: str = "Snapshot exported.",
    clock: Callable[[], int] = time.time_ns,
) -> PublishResult:
    """
    Export the current store state as a downloadable artifact.

    Performs no network or filesystem write; the host hands the artifact
    to the user.

    Args:
        store: SnapshotStore to export
        message: Headline shown above the instructions
        clock: Nanosecond clock used for the filename token

    Returns:
        PublishResult with the artifact and manual publish instructions
    """
    data = store.export()
    artifact = SnapshotArtifact(filename=export_filename(next_export_token(clock)), data=data)
    logger.info(f"[Publish] exported {artifact.filename} ({artifact.size} bytes)")
    return PublishResult(
        artifact=artifact,
        instructions=publish_instructions(),
        message=message,
    )


def save_artifact(artifact: SnapshotArtifact, directory: Optional[Union[str, Path]] = None) -> Path:
    """
    Write an artifact into a directory, for hosts without a download mechanism.

    Args:
        artifact: Artifact to write
        directory: Target directory (default: settings.EXPORT_DIR)

    Returns:
        Path of the written file
    """
    directory = Path(directory or settings.EXPORT_DIR)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / artifact.filename
    path.write_bytes(artifact.data)
    logger.info(f"[Publish] saved {path}")
    return path
