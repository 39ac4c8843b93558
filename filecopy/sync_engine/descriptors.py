"""
Copy Descriptor Resolution

Turns copy operations into one descriptor per destination file, collapsing
identical re-declarations and rejecting conflicting ones before any file is
touched.

Author: filecopy Project
License: MIT
"""

import asyncio
import os
from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from ..config.schema import CopyOperation
from ..core.errors import ConfigError, ConflictingDestinationError
from ..utils.concurrency import MAX_PARALLELISM, for_each_async
from ..utils.logger import get_logger
from .selection import EntryKind, SelectionResolver, get_file_selection_paths

logger = get_logger(__name__)


@dataclass(frozen=True)
class CopyDescriptor:
    """One resolved source file to destination file transfer."""
    source_path: str
    destination_path: str
    hardlink: bool


def get_destination_path(operation: CopyOperation, destination_folder: str, source_file: str) -> str:
    """
    Compute where ``source_file`` lands inside ``destination_folder``.

    Flattened operations keep only the file name; otherwise the path relative
    to the operation's source folder is preserved.
    """
    if operation.flatten:
        relative_path = os.path.basename(source_file)
    else:
        relative_path = os.path.relpath(source_file, operation.source_path)
    return os.path.normpath(os.path.join(destination_folder, relative_path))


async def resolve_copy_descriptors(
    operations: Iterable[CopyOperation],
    selection_resolver: Optional[SelectionResolver] = None,
    max_parallelism: int = MAX_PARALLELISM
) -> Dict[str, CopyDescriptor]:
    """
    Resolve copy operations into descriptors keyed by destination path.

    Args:
        operations: Copy operations with absolute paths
        selection_resolver: Callable returning the matched paths of an
            operation (defaults to glob matching on the local filesystem)
        max_parallelism: Maximum number of operations resolved at once

    Returns:
        Mapping of absolute destination path to CopyDescriptor

    Raises:
        ConflictingDestinationError: If one destination is claimed by different
            sources or with different hardlink modes
        ConfigError: If an operation still holds relative paths
    """
    resolver = selection_resolver or get_file_selection_paths
    descriptors: Dict[str, CopyDescriptor] = {}
    lock = asyncio.Lock()

    async def _claim(descriptor: CopyDescriptor) -> None:
        async with lock:
            existing = descriptors.get(descriptor.destination_path)
            if existing is None:
                descriptors[descriptor.destination_path] = descriptor
            elif existing != descriptor:
                raise ConflictingDestinationError(
                    descriptor.destination_path,
                    existing_source=existing.source_path,
                    conflicting_source=descriptor.source_path
                )

    async def _resolve_operation(operation: CopyOperation) -> None:
        if not operation.is_absolute():
            raise ConfigError(
                f"Copy operation paths must be absolute: {operation.source_path} -> "
                f"{operation.destination_folders}"
            )

        source_entries = await asyncio.to_thread(resolver, operation)

        for destination_folder in operation.destination_folders:
            for source_file, kind in source_entries.items():
                if kind != EntryKind.FILE:
                    # Folders are recreated implicitly by their files
                    logger.debug(f"Skipping {kind.value} entry {source_file}")
                    continue
                await _claim(CopyDescriptor(
                    source_path=source_file,
                    destination_path=get_destination_path(operation, destination_folder, source_file),
                    hardlink=operation.hardlink
                ))

    await for_each_async(list(operations), _resolve_operation, max_parallelism)

    logger.debug(f"Resolved {len(descriptors)} copy descriptors")
    return descriptors
