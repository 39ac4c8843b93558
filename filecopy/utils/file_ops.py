"""
File Operation Utilities

Provides the filesystem primitives used by the copy engine: content hashing,
copy and hardlink with overwrite semantics, and atomic JSON writes.

Author: filecopy Project
License: MIT
"""

import base64
import hashlib
import json
import os
import shutil
from pathlib import Path
from typing import Any, Dict

from .logger import get_logger

logger = get_logger(__name__)

CHUNK_SIZE = 65536  # 64KB chunks for hashing


def calculate_file_hash(file_path: str, algorithm: str = "sha256", chunk_size: int = CHUNK_SIZE) -> str:
    """
    Calculate hash of a file.

    Args:
        file_path: Path to the file
        algorithm: Hash algorithm (md5, sha1, sha256, etc.)
        chunk_size: Size of chunks to read (bytes)

    Returns:
        Hexadecimal hash string

    Raises:
        FileNotFoundError: If file doesn't exist
        IsADirectoryError: If the path is a directory
        ValueError: If algorithm is unsupported
    """
    try:
        hash_func = hashlib.new(algorithm)
    except ValueError:
        raise ValueError(f"Unsupported hash algorithm: {algorithm}")

    with open(file_path, 'rb') as f:
        while chunk := f.read(chunk_size):
            hash_func.update(chunk)

    return hash_func.hexdigest()


def digest_text(parts, algorithm: str = "sha256") -> str:
    """Hash a sequence of strings and return the digest base64-encoded."""
    hash_func = hashlib.new(algorithm)
    for part in parts:
        hash_func.update(part.encode('utf-8'))
    return base64.b64encode(hash_func.digest()).decode('ascii')


def remove_existing_entry(path: str) -> bool:
    """
    Remove a file or link at ``path`` so a new entry can take its place.

    Directories are left alone; replacing one is an error for the caller.

    Returns:
        True if something was removed
    """
    try:
        os.unlink(path)
        return True
    except FileNotFoundError:
        return False


def _entry_path(path: str) -> str:
    # Resolve the parent folder only; a symlink entry stays itself
    directory, name = os.path.split(os.path.abspath(path))
    return os.path.join(os.path.realpath(directory), name)


def is_same_entry(source: str, destination: str) -> bool:
    """True when both paths name the same directory entry."""
    return _entry_path(source) == _entry_path(destination)


def is_linked_to(source: str, destination: str) -> bool:
    """True when ``destination`` is an existing hardlink to ``source`` (or the same entry)."""
    try:
        return os.path.samestat(os.stat(source), os.lstat(destination))
    except FileNotFoundError:
        return False


def copy_file(source: str, destination: str) -> None:
    """
    Copy file bytes and metadata, replacing whatever is at the destination.

    The existing destination is unlinked first, so a destination that is a
    hardlink to the source is never written through.

    Raises:
        shutil.SameFileError: If the destination is the source itself
            (checked before anything is removed)
    """
    if is_same_entry(source, destination):
        raise shutil.SameFileError(f"{source} and {destination} are the same file")
    Path(destination).parent.mkdir(parents=True, exist_ok=True)
    remove_existing_entry(destination)
    shutil.copy2(source, destination)


def create_hard_link(source: str, destination: str) -> None:
    """
    Hardlink ``destination`` to ``source``, replacing an existing entry.

    A destination already linked to the source (including the source
    itself) is left as is. Parent folders are created as real directories;
    only the file is linked.
    """
    if is_linked_to(source, destination):
        return
    Path(destination).parent.mkdir(parents=True, exist_ok=True)
    try:
        os.link(source, destination)
    except FileExistsError:
        remove_existing_entry(destination)
        os.link(source, destination)


def atomic_temp_path(path: str) -> str:
    """Temp file used while atomically replacing ``path``."""
    target = Path(path)
    return str(target.with_name(f".{target.name}.tmp"))


def write_json_atomic(path: str, data: Dict[str, Any]) -> None:
    """
    Write JSON to ``path`` through a temp file and an atomic replace.

    Args:
        path: Target file path
        data: JSON-serializable mapping
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp = atomic_temp_path(path)
    try:
        with open(tmp, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, sort_keys=True)
        os.replace(tmp, target)
    except BaseException:
        remove_existing_entry(tmp)
        raise
    logger.debug(f"Wrote {target}")
