"""
Configuration Fingerprint

Digest of the declared copy operations. Any change to an operation, or to
their order, yields a different fingerprint and invalidates the snapshot.

Author: filecopy Project
License: MIT
"""

import json
from typing import Iterable

from ..config.schema import CopyOperation
from ..utils.file_ops import digest_text


def serialize_copy_operation(operation: CopyOperation) -> str:
    """Canonical JSON form of one operation."""
    return json.dumps(
        operation.model_dump(mode="json"),
        sort_keys=True,
        separators=(",", ":")
    )


def compute_config_fingerprint(operations: Iterable[CopyOperation]) -> str:
    """
    Fingerprint an ordered sequence of copy operations.

    Returns:
        Base64-encoded sha256 digest
    """
    return digest_text(serialize_copy_operation(operation) for operation in operations)
