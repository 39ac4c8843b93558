"""
Source Folder Watcher

Monitors the source folders of the copy operations with watchdog and
re-runs the copy engine once a burst of changes has settled. Deciding what
to copy stays with the engine's content hashes; events only trigger runs.

Author: filecopy Project
License: MIT
"""

import os
import time
from threading import Event, Lock
from typing import Callable, Iterable, List, Optional, Set

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from ..config.schema import CopyOperation
from ..core.copy_engine import CopyEngine, CopyRunResult
from ..core.errors import CopyFilesError
from ..utils.file_ops import atomic_temp_path
from ..utils.logger import get_logger

logger = get_logger(__name__)

# Event types that never change file content
IGNORED_EVENT_TYPES = {"opened", "closed_no_write"}


class ChangeHandler(FileSystemEventHandler):
    """
    Records filesystem events and reports them once they have settled.

    Implements debouncing so a run starts only after writes have stopped.
    """

    def __init__(self, ignored_paths: Iterable[str] = ()):
        """
        Initialize the change handler.

        Args:
            ignored_paths: Files or folders whose events are dropped
                (destination folders and the snapshot file)
        """
        super().__init__()
        self._ignored = tuple(os.path.normpath(path) for path in ignored_paths)
        self._changed_paths: Set[str] = set()
        self._last_event_time: Optional[float] = None
        self._lock = Lock()

    def is_ignored(self, path: str) -> bool:
        """True when ``path`` is, or lies under, an ignored path."""
        path = os.path.normpath(path)
        return any(
            path == ignored or path.startswith(ignored + os.sep)
            for ignored in self._ignored
        )

    def on_any_event(self, event):
        """Record every content-affecting event outside the ignored paths."""
        if event.event_type in IGNORED_EVENT_TYPES:
            return

        paths = [os.fsdecode(event.src_path)]
        dest_path = getattr(event, "dest_path", "")
        if dest_path:
            paths.append(os.fsdecode(dest_path))

        relevant = [path for path in paths if not self.is_ignored(path)]
        if not relevant:
            return

        with self._lock:
            self._changed_paths.update(relevant)
            self._last_event_time = time.monotonic()
        logger.debug(f"Change detected ({event.event_type}): {relevant[0]}")

    def has_pending(self) -> bool:
        with self._lock:
            return bool(self._changed_paths)

    def pop_settled_changes(self, debounce_seconds: float, now: Optional[float] = None) -> Set[str]:
        """
        Return and clear the recorded changes if none arrived for ``debounce_seconds``.

        Args:
            debounce_seconds: Required quiet period
            now: Current monotonic time (defaults to time.monotonic())

        Returns:
            Changed paths, or an empty set while changes are still arriving
        """
        current_time = time.monotonic() if now is None else now
        with self._lock:
            if not self._changed_paths or self._last_event_time is None:
                return set()
            if current_time - self._last_event_time < debounce_seconds:
                return set()
            changes = self._changed_paths
            self._changed_paths = set()
            self._last_event_time = None
            return changes


class CopyFilesWatcher:
    """
    Watches source folders and re-runs the copy engine on change.

    A failed run is logged and the watcher keeps going; the snapshot is left
    untouched by the engine, so the next run starts from the last good state.
    """

    def __init__(
        self,
        engine: CopyEngine,
        operations: Iterable[CopyOperation],
        debounce_seconds: float = 1.0,
        observer_factory: Callable[[], Observer] = Observer
    ):
        """
        Initialize the watcher.

        Args:
            engine: Engine invoked for each settled burst of changes
            operations: Copy operations whose source folders are watched
            debounce_seconds: Quiet period before a run starts
            observer_factory: Creates the watchdog observer
        """
        self.engine = engine
        self.operations = list(operations)
        self.debounce_seconds = debounce_seconds
        self._observer_factory = observer_factory
        self._observer: Optional[Observer] = None

        ignored = [engine.state_path, atomic_temp_path(engine.state_path)]
        for operation in self.operations:
            ignored.extend(operation.destination_folders)
        self.handler = ChangeHandler(ignored)

        logger.info("CopyFilesWatcher initialized")

    def get_watched_folders(self) -> List[str]:
        """Distinct source folders that exist on disk."""
        folders = dict.fromkeys(operation.source_path for operation in self.operations)
        return [folder for folder in folders if os.path.isdir(folder)]

    def start(self):
        """Start watching source folders."""
        if self._observer is not None:
            logger.warning("CopyFilesWatcher already running")
            return

        observer = self._observer_factory()
        folders = self.get_watched_folders()
        for folder in folders:
            if self.handler.is_ignored(folder):
                logger.warning(
                    f"Source folder {folder} lies inside a destination folder; "
                    f"its changes will not trigger copies"
                )
            observer.schedule(self.handler, folder, recursive=True)
            logger.debug(f"Added watch path: {folder}")
        observer.start()
        self._observer = observer

        logger.info(f"CopyFilesWatcher started, monitoring {len(folders)} folders")

    def stop(self):
        """Stop watching folders."""
        if self._observer is None:
            return

        self._observer.stop()
        self._observer.join(timeout=5.0)
        self._observer = None

        logger.info("CopyFilesWatcher stopped")

    def process_pending(self, now: Optional[float] = None) -> Optional[CopyRunResult]:
        """
        Run the engine if changes have settled.

        Should be called periodically.

        Returns:
            Result of the triggered run, or None if nothing ran or the run failed
        """
        changes = self.handler.pop_settled_changes(self.debounce_seconds, now=now)
        if not changes:
            return None

        logger.info(f"Detected {len(changes)} changed paths, running copy")
        try:
            return self.engine.run(self.operations)
        except CopyFilesError as e:
            logger.error(f"Copy run failed: {e}")
            return None

    def run_forever(self, poll_interval: float = 0.5, stop_event: Optional[Event] = None):
        """
        Watch until ``stop_event`` is set (or forever).

        Args:
            poll_interval: Seconds between checks for settled changes
            stop_event: Event that ends the loop
        """
        stop_event = stop_event or Event()
        self.start()
        try:
            while not stop_event.is_set():
                self.process_pending()
                stop_event.wait(poll_interval)
        finally:
            self.stop()

