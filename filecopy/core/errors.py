"""
Error Taxonomy

Exceptions raised by the copy engine. Every fatal error derives from
CopyFilesError and carries the path(s) needed to diagnose it.

Author: filecopy Project
License: MIT
"""

from typing import Optional


class CopyFilesError(Exception):
    """Base class for failures that abort a copy run."""


class ConfigurationConflictError(CopyFilesError):
    """Two copy descriptors claim the same destination with different inputs."""

    def __init__(
        self,
        destination_path: str,
        existing_source: Optional[str] = None,
        conflicting_source: Optional[str] = None
    ):
        self.destination_path = destination_path
        self.existing_source = existing_source
        self.conflicting_source = conflicting_source
        message = f'Cannot copy multiple files to the same destination "{destination_path}".'
        if existing_source and conflicting_source:
            message += f' Sources: "{existing_source}" and "{conflicting_source}".'
        super().__init__(message)


class ConflictingDestinationError(ConfigurationConflictError):
    """Raised by descriptor resolution when a destination is claimed twice."""


class SourceUnavailableError(CopyFilesError):
    """A source file could not be read or hashed."""

    def __init__(self, source_path: str, reason: str = ""):
        self.source_path = source_path
        message = f'Unable to read source file "{source_path}"'
        super().__init__(f"{message}: {reason}" if reason else message)


class TransferError(CopyFilesError):
    """Copying or hardlinking a file failed."""

    def __init__(self, source_path: str, destination_path: str, reason: str = ""):
        self.source_path = source_path
        self.destination_path = destination_path
        message = f'Failed to transfer "{source_path}" to "{destination_path}"'
        super().__init__(f"{message}: {reason}" if reason else message)


class SnapshotCorruptionError(CopyFilesError):
    """The stored snapshot could not be parsed. Recovered by treating it as absent."""

    def __init__(self, snapshot_path: str, reason: str = ""):
        self.snapshot_path = snapshot_path
        message = f'Snapshot file "{snapshot_path}" is unreadable'
        super().__init__(f"{message}: {reason}" if reason else message)


class ConfigError(ValueError):
    """The configuration file is missing, unparsable or invalid."""
