"""
Export/publish workflow.

This module provides:
- publish: Export the current snapshot with manual publish instructions
- SnapshotArtifact: Downloadable snapshot blob
- save_artifact: Write an artifact to the export directory
"""

from .workflow import (
    PublishResult,
    SnapshotArtifact,
    export_filename,
    publish,
    publish_instructions,
    save_artifact,
)

__all__ = [
    "PublishResult",
    "SnapshotArtifact",
    "export_filename",
    "publish",
    "publish_instructions",
    "save_artifact",
]
