"""
Sync Engine Module

Descriptor resolution, configuration fingerprinting, content hashing,
transfers and snapshot persistence.

Author: filecopy Project
License: MIT
"""

from .content_cache import ContentHashCache
from .descriptors import CopyDescriptor, get_destination_path, resolve_copy_descriptors
from .fingerprint import compute_config_fingerprint
from .selection import EntryKind, get_file_selection_paths
from .snapshot import CacheSnapshot, try_read_snapshot, write_snapshot
from .transfer import TransferCounts, TransferExecutor

__all__ = [
    'CacheSnapshot',
    'ContentHashCache',
    'CopyDescriptor',
    'EntryKind',
    'TransferCounts',
    'TransferExecutor',
    'compute_config_fingerprint',
    'get_destination_path',
    'get_file_selection_paths',
    'resolve_copy_descriptors',
    'try_read_snapshot',
    'write_snapshot',
]
