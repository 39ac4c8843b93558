"""
File Selection

Default resolver that turns a copy operation's source folder and glob
patterns into the set of matching paths. The engine accepts any callable
with the same signature, so callers can plug in their own enumeration.

Author: filecopy Project
License: MIT
"""

from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Set

from ..config.schema import CopyOperation
from ..utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_INCLUDE_GLOBS = ["**/*"]


class EntryKind(str, Enum):
    """Kind of filesystem entry a selection matched."""
    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"


SelectionResolver = Callable[[CopyOperation], Mapping[str, EntryKind]]


def get_include_globs(operation: CopyOperation) -> List[str]:
    """
    Build the include patterns for an operation.

    Each file extension adds ``**/*<ext>``. With neither globs nor extensions
    everything under the source folder is included.
    """
    patterns = list(operation.include_globs)
    patterns.extend(f"**/*{ext}" for ext in operation.file_extensions)
    return patterns or list(DEFAULT_INCLUDE_GLOBS)


def _entry_kind(path: Path) -> EntryKind:
    if path.is_dir():
        return EntryKind.DIRECTORY
    if path.is_file():
        return EntryKind.FILE
    # Dangling link
    return EntryKind.SYMLINK


def _is_excluded(path: Path, excluded: Set[Path]) -> bool:
    if path in excluded:
        return True
    return any(parent in excluded for parent in path.parents)


def get_file_selection_paths(operation: CopyOperation) -> Dict[str, EntryKind]:
    """
    Resolve an operation's selection into matching paths.

    Args:
        operation: Copy operation with an absolute source_path

    Returns:
        Mapping of absolute path to entry kind, sorted by path. A missing
        source folder yields an empty mapping.
    """
    root = Path(operation.source_path)
    if not root.is_dir():
        logger.warning(f"Source folder does not exist: {root}")
        return {}

    excluded: Set[Path] = set()
    for pattern in operation.exclude_globs:
        excluded.update(root.glob(pattern))

    matches: Dict[Path, EntryKind] = {}
    for pattern in get_include_globs(operation):
        for path in root.glob(pattern):
            if path in matches or _is_excluded(path, excluded):
                continue
            matches[path] = _entry_kind(path)

    logger.debug(f"Selection under {root} matched {len(matches)} entries")
    return {str(path): kind for path, kind in sorted(matches.items())}
