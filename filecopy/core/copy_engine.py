"""
Copy Engine

Coordinates an incremental copy run: resolve descriptors, hash sources,
diff against the previous snapshot, transfer what changed, and persist the
new snapshot.

Author: filecopy Project
License: MIT
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from ..config.schema import CopyOperation
from ..sync_engine.content_cache import ContentHashCache
from ..sync_engine.descriptors import resolve_copy_descriptors
from ..sync_engine.fingerprint import compute_config_fingerprint
from ..sync_engine.selection import SelectionResolver
from ..sync_engine.snapshot import CacheSnapshot, try_read_snapshot, write_snapshot
from ..sync_engine.transfer import TransferExecutor
from ..utils.concurrency import MAX_PARALLELISM
from ..utils.logger import get_logger
from .errors import CopyFilesError

logger = get_logger(__name__)

NOTHING_TO_DO_MESSAGE = "All requested file copy operations are up to date. Nothing to do."
NO_MATCHES_MESSAGE = "No files matched the configured copy operations."


def _files(count: int) -> str:
    return f"{count} file{'' if count == 1 else 's'}"


def format_summary(copied_file_count: int, linked_file_count: int) -> str:
    """Human-readable summary, e.g. "Copied 2 files and linked 1 file"."""
    return f"Copied {_files(copied_file_count)} and linked {_files(linked_file_count)}"


@dataclass
class CopyRunResult:
    """Outcome of one engine run."""
    descriptor_count: int = 0
    copied_file_count: int = 0
    linked_file_count: int = 0
    skipped_file_count: int = 0
    snapshot_written: bool = False

    @property
    def transferred_file_count(self) -> int:
        return self.copied_file_count + self.linked_file_count

    @property
    def summary(self) -> str:
        return format_summary(self.copied_file_count, self.linked_file_count)


class CopyEngine:
    """
    Incremental copy engine.

    The phases run strictly in order; each fans out under its own bound of
    max_parallelism. The snapshot is only written once every transfer of the
    run has succeeded.
    """

    def __init__(
        self,
        state_path: str,
        max_parallelism: int = MAX_PARALLELISM,
        selection_resolver: Optional[SelectionResolver] = None,
        sink: Optional[logging.Logger] = None
    ):
        """
        Initialize the engine.

        Args:
            state_path: Snapshot file location
            max_parallelism: Maximum in-flight filesystem operations per phase
            selection_resolver: Override for matching files of an operation
            sink: Logger receiving the summary and per-file lines
        """
        if max_parallelism < 1:
            raise ValueError(f"max_parallelism must be at least 1, got {max_parallelism}")
        self.state_path = state_path
        self.max_parallelism = max_parallelism
        self.selection_resolver = selection_resolver
        self.sink = sink or logger

    async def run_async(self, operations: Iterable[CopyOperation]) -> CopyRunResult:
        """
        Bring every destination up to date.

        Args:
            operations: Copy operations with absolute paths, in order

        Returns:
            CopyRunResult with counts

        Raises:
            ConfigurationConflictError: If two descriptors claim one destination
            SourceUnavailableError: If a source file can't be hashed
            TransferError: If a copy or link fails
            CopyFilesError: If the snapshot can't be written
        """
        operations = list(operations)
        config_fingerprint = compute_config_fingerprint(operations)

        descriptors = await resolve_copy_descriptors(
            operations,
            selection_resolver=self.selection_resolver,
            max_parallelism=self.max_parallelism
        )
        result = CopyRunResult(descriptor_count=len(descriptors))

        if not descriptors:
            self.sink.info(NO_MATCHES_MESSAGE)
            return result

        previous = await asyncio.to_thread(try_read_snapshot, self.state_path, self.sink)
        if previous and previous.config_fingerprint != config_fingerprint:
            self.sink.debug("File copy configuration changed, discarding incremental state.")
            previous = None

        cache = ContentHashCache(self.max_parallelism)
        current_versions = await cache.hash_sources(
            ContentHashCache.collect_sources(descriptors.values())
        )
        work, skipped = cache.select_work(descriptors.values(), current_versions, previous)

        for descriptor in skipped:
            self.sink.debug(
                f'Skipped "{descriptor.source_path}" to "{descriptor.destination_path}" (up to date).'
            )
        result.skipped_file_count = len(skipped)

        snapshot = CacheSnapshot(
            config_fingerprint=config_fingerprint,
            input_file_versions=current_versions
        )

        if not work:
            self.sink.info(NOTHING_TO_DO_MESSAGE)
            # Sources that stopped matching still need dropping from the record
            if previous is None or previous.input_file_versions != current_versions:
                await self._write_snapshot(snapshot)
                result.snapshot_written = True
            return result

        counts = await TransferExecutor(self.max_parallelism, self.sink).execute(work)
        result.copied_file_count = counts.copied
        result.linked_file_count = counts.linked
        self.sink.info(result.summary)

        await self._write_snapshot(snapshot)
        result.snapshot_written = True
        return result

    def run(self, operations: Iterable[CopyOperation]) -> CopyRunResult:
        """Blocking wrapper around run_async()."""
        return asyncio.run(self.run_async(operations))

    async def _write_snapshot(self, snapshot: CacheSnapshot) -> None:
        try:
            await asyncio.to_thread(write_snapshot, snapshot, self.state_path)
        except OSError as e:
            raise CopyFilesError(f'Failed to write snapshot "{self.state_path}": {e}') from e
        self.sink.debug(
            f"Saved snapshot with {len(snapshot.input_file_versions)} entries to {self.state_path}"
        )


async def copy_files_async(
    operations: Iterable[CopyOperation],
    state_path: str,
    max_parallelism: int = MAX_PARALLELISM,
    sink: Optional[logging.Logger] = None
) -> CopyRunResult:
    """Run the copy engine once inside an existing event loop."""
    engine = CopyEngine(state_path, max_parallelism=max_parallelism, sink=sink)
    return await engine.run_async(operations)


def copy_files(
    operations: Iterable[CopyOperation],
    state_path: str,
    max_parallelism: int = MAX_PARALLELISM,
    sink: Optional[logging.Logger] = None
) -> CopyRunResult:
    """Run the copy engine once."""
    engine = CopyEngine(state_path, max_parallelism=max_parallelism, sink=sink)
    return engine.run(operations)
