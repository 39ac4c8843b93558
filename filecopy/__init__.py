"""
filecopy

Incremental, content-addressed file copies: declarative copy operations are
resolved into per-file transfers, and only files whose source content or
configuration changed since the last successful run are copied or linked.

Author: filecopy Project
License: MIT
"""

from .core import (
    ConfigError,
    ConfigurationConflictError,
    ConflictingDestinationError,
    CopyEngine,
    CopyFilesError,
    CopyRunResult,
    SnapshotCorruptionError,
    SourceUnavailableError,
    TransferError,
    copy_files,
    copy_files_async,
)
from .config.schema import CopyOperation

__version__ = "0.1.0"
__all__ = [
    'ConfigError',
    'ConfigurationConflictError',
    'ConflictingDestinationError',
    'CopyEngine',
    'CopyFilesError',
    'CopyOperation',
    'CopyRunResult',
    'SnapshotCorruptionError',
    'SourceUnavailableError',
    'TransferError',
    'copy_files',
    'copy_files_async',
]
