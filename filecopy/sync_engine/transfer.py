"""
Transfer Executor

Copies or hardlinks each descriptor that needs work. Destination folders
are always created as real directories; only files are ever hardlinked.

Author: filecopy Project
License: MIT
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from ..core.errors import TransferError
from ..utils.concurrency import MAX_PARALLELISM, for_each_async
from ..utils.file_ops import copy_file, create_hard_link
from ..utils.logger import get_logger
from .descriptors import CopyDescriptor

logger = get_logger(__name__)


@dataclass
class TransferCounts:
    """Number of files written by a transfer batch."""
    copied: int = 0
    linked: int = 0


class TransferExecutor:
    """Runs copy and hardlink transfers under bounded concurrency."""

    def __init__(self, max_parallelism: int = MAX_PARALLELISM, sink: Optional[logging.Logger] = None):
        """
        Initialize the executor.

        Args:
            max_parallelism: Maximum number of transfers in flight
            sink: Logger for per-file lines (defaults to the module logger)
        """
        self.max_parallelism = max_parallelism
        self.sink = sink or logger

    async def execute(self, descriptors: Iterable[CopyDescriptor]) -> TransferCounts:
        """
        Transfer every descriptor.

        The first failure cancels transfers that have not started yet and
        propagates; transfers already finished stay on disk.

        Returns:
            TransferCounts for the batch

        Raises:
            TransferError: If any copy or link fails
        """
        counts = TransferCounts()

        async def _transfer(descriptor: CopyDescriptor) -> None:
            await self.transfer(descriptor)
            if descriptor.hardlink:
                counts.linked += 1
            else:
                counts.copied += 1

        await for_each_async(descriptors, _transfer, self.max_parallelism)
        return counts

    async def transfer(self, descriptor: CopyDescriptor) -> None:
        """Copy or link a single descriptor, overwriting the destination."""
        source = descriptor.source_path
        destination = descriptor.destination_path
        try:
            if descriptor.hardlink:
                await asyncio.to_thread(create_hard_link, source, destination)
            else:
                await asyncio.to_thread(copy_file, source, destination)
        except OSError as e:
            raise TransferError(source, destination, e.strerror or str(e)) from e

        verb = "Linked" if descriptor.hardlink else "Copied"
        self.sink.debug(f'{verb} "{source}" to "{destination}".')
