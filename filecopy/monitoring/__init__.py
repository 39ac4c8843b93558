"""
Monitoring Module

Watchdog-based trigger that re-runs copies when source folders change.

Author: filecopy Project
License: MIT
"""

from .watcher import ChangeHandler, CopyFilesWatcher

__all__ = ['ChangeHandler', 'CopyFilesWatcher']
