"""
filecopy Utilities

Logging setup, filesystem primitives and bounded concurrency helpers.

Author: filecopy Project
License: MIT
"""

from .logger import get_logger, setup_logging
from .concurrency import MAX_PARALLELISM, for_each_async

__all__ = ['get_logger', 'setup_logging', 'MAX_PARALLELISM', 'for_each_async']
