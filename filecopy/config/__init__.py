"""
filecopy Configuration Module

Pydantic schema for copy operations and application settings, and the YAML
loader that applies environment overrides and resolves relative paths.

Author: filecopy Project
License: MIT
"""

from .schema import AppConfig, Config, CopyOperation, LogLevel, WatchConfig
from .config_loader import ConfigLoader, load_config

__all__ = [
    'AppConfig',
    'Config',
    'ConfigLoader',
    'CopyOperation',
    'LogLevel',
    'WatchConfig',
    'load_config',
]
