"""
Snapshot Persistence

Reads and writes the record of the last successful run: the configuration
fingerprint and the content hash of every source file it used.

Author: filecopy Project
License: MIT
"""

import json
import logging
from typing import Dict, Optional

from pydantic import BaseModel, Field, ValidationError

from ..core.errors import SnapshotCorruptionError
from ..utils.file_ops import write_json_atomic
from ..utils.logger import get_logger

logger = get_logger(__name__)

SNAPSHOT_VERSION = 1


class CacheSnapshot(BaseModel):
    """Persistent incremental state (one file per copy task)."""

    version: int = Field(default=SNAPSHOT_VERSION)
    config_fingerprint: str = Field(description="Fingerprint of the copy operations")
    input_file_versions: Dict[str, str] = Field(
        default_factory=dict,
        description="source path -> content hash"
    )


def load_snapshot(snapshot_path: str) -> CacheSnapshot:
    """
    Load a snapshot, failing loudly.

    Raises:
        FileNotFoundError: If no snapshot exists
        SnapshotCorruptionError: If the file can't be read or parsed
    """
    try:
        with open(snapshot_path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise SnapshotCorruptionError(snapshot_path, str(e)) from e

    try:
        snapshot = CacheSnapshot.model_validate(data)
    except ValidationError as e:
        raise SnapshotCorruptionError(snapshot_path, str(e)) from e

    if snapshot.version != SNAPSHOT_VERSION:
        raise SnapshotCorruptionError(snapshot_path, f"unsupported version {snapshot.version}")
    return snapshot


def try_read_snapshot(
    snapshot_path: str,
    sink: Optional[logging.Logger] = None
) -> Optional[CacheSnapshot]:
    """
    Load a snapshot, treating a missing or corrupt file as no prior state.

    Args:
        snapshot_path: Snapshot location
        sink: Logger that receives the corruption warning

    Returns:
        CacheSnapshot or None
    """
    try:
        return load_snapshot(snapshot_path)
    except FileNotFoundError:
        return None
    except SnapshotCorruptionError as e:
        (sink or logger).warning(f"{e}. Discarding incremental state.")
        return None


def write_snapshot(snapshot: CacheSnapshot, snapshot_path: str) -> None:
    """Replace the snapshot file atomically."""
    write_json_atomic(snapshot_path, snapshot.model_dump(mode="json"))
