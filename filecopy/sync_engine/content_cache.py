"""
Content-Hash Cache

Hashes every source file referenced by the descriptors and decides which
descriptors need a transfer by comparing against the previous snapshot.

Staleness is keyed on source content only. A destination deleted outside
of filecopy is not recreated until its source or the configuration changes.

Author: filecopy Project
License: MIT
"""

import asyncio
from typing import Dict, Iterable, List, Optional, Tuple

from ..core.errors import SourceUnavailableError
from ..utils.concurrency import MAX_PARALLELISM, for_each_async
from ..utils.file_ops import calculate_file_hash
from ..utils.logger import get_logger
from .descriptors import CopyDescriptor
from .snapshot import CacheSnapshot

logger = get_logger(__name__)


class ContentHashCache:
    """
    Source fingerprinting and change detection.

    Features:
    - Concurrent hashing, bounded by max_parallelism
    - Each distinct source hashed once, however many descriptors use it
    - Work selection against the previous run's hashes
    """

    HASH_ALGORITHM = 'sha256'

    def __init__(self, max_parallelism: int = MAX_PARALLELISM):
        """
        Initialize the cache.

        Args:
            max_parallelism: Maximum number of files hashed at once
        """
        self.max_parallelism = max_parallelism

    @staticmethod
    def collect_sources(descriptors: Iterable[CopyDescriptor]) -> List[str]:
        """Distinct source paths, in first-seen order."""
        return list(dict.fromkeys(descriptor.source_path for descriptor in descriptors))

    async def hash_sources(self, source_paths: Iterable[str]) -> Dict[str, str]:
        """
        Hash the content of every source path.

        Args:
            source_paths: Files to hash

        Returns:
            Mapping of source path to content hash, sorted by path

        Raises:
            SourceUnavailableError: If any file is missing or unreadable
        """
        versions: Dict[str, str] = {}

        async def _hash(source_path: str) -> None:
            try:
                versions[source_path] = await asyncio.to_thread(
                    calculate_file_hash, source_path, self.HASH_ALGORITHM
                )
            except OSError as e:
                raise SourceUnavailableError(source_path, e.strerror or str(e)) from e

        await for_each_async(source_paths, _hash, self.max_parallelism)

        logger.debug(f"Hashed {len(versions)} source files")
        return dict(sorted(versions.items()))

    def select_work(
        self,
        descriptors: Iterable[CopyDescriptor],
        current_versions: Dict[str, str],
        previous: Optional[CacheSnapshot]
    ) -> Tuple[List[CopyDescriptor], List[CopyDescriptor]]:
        """
        Split descriptors into those needing a transfer and those up to date.

        Args:
            descriptors: Resolved copy descriptors
            current_versions: Hashes from hash_sources()
            previous: Snapshot of the last run, or None when it doesn't apply

        Returns:
            Tuple of (work, skipped)
        """
        previous_versions = previous.input_file_versions if previous else {}
        work: List[CopyDescriptor] = []
        skipped: List[CopyDescriptor] = []

        for descriptor in descriptors:
            current_hash = current_versions.get(descriptor.source_path)
            if current_hash is None:
                raise SourceUnavailableError(descriptor.source_path, "missing content hash")

            if previous_versions.get(descriptor.source_path) == current_hash:
                skipped.append(descriptor)
            else:
                work.append(descriptor)

        return work, skipped
