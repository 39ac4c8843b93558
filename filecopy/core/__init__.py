"""
filecopy Core Module

Error taxonomy and the copy engine that runs the incremental pipeline.

Author: filecopy Project
License: MIT
"""

# errors first: the sync_engine modules import it while this package loads
from .errors import (
    ConfigError,
    ConfigurationConflictError,
    ConflictingDestinationError,
    CopyFilesError,
    SnapshotCorruptionError,
    SourceUnavailableError,
    TransferError,
)
from .copy_engine import CopyEngine, CopyRunResult, copy_files, copy_files_async

__version__ = "0.1.0"
__all__ = [
    'ConfigError',
    'ConfigurationConflictError',
    'ConflictingDestinationError',
    'CopyEngine',
    'CopyFilesError',
    'CopyRunResult',
    'SnapshotCorruptionError',
    'SourceUnavailableError',
    'TransferError',
    'copy_files',
    'copy_files_async',
]
