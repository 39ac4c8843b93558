"""
Configuration Loader

Handles loading and parsing the YAML configuration, merging environment
variable overrides, and resolving relative paths against the folder that
holds the configuration file.

Author: filecopy Project
License: MIT
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from ..core.errors import ConfigError
from .schema import Config

DEFAULT_CONFIG_NAME = "filecopy.yaml"
DEFAULT_STATE_PATH = ".filecopy/state.json"


class ConfigLoader:
    """
    Configuration loader.

    Loads configuration from a YAML file, merges environment variables,
    validates the structure, and makes every path absolute.
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize the configuration loader.

        Args:
            config_path: Path to the configuration file. If None, uses
                FILECOPY_CONFIG or ./filecopy.yaml.
        """
        # Load environment variables from .env if present
        load_dotenv()

        self.config_path = config_path or os.getenv(
            "FILECOPY_CONFIG",
            DEFAULT_CONFIG_NAME
        )
        self._config: Optional[Config] = None

    @property
    def root_folder(self) -> Path:
        """Folder that relative paths in the configuration are resolved against."""
        return Path(self.config_path).resolve().parent

    def load(self) -> Config:
        """
        Load and validate configuration.

        Returns:
            Validated Config object with absolute paths

        Raises:
            ConfigError: If the file is missing, unparsable or invalid
        """
        config_data = self._load_yaml()
        config_data = self._merge_env_vars(config_data)

        try:
            config = Config(**config_data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration in {self.config_path}: {e}") from e

        self._config = self._normalize_paths(config)
        return self._config

    def _load_yaml(self) -> Dict[str, Any]:
        """
        Load YAML configuration file.

        Returns:
            Dictionary with configuration data
        """
        config_file = Path(self.config_path)

        if not config_file.exists():
            raise ConfigError(f"Configuration file not found: {config_file}")

        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse YAML config: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Configuration root must be a mapping: {config_file}")
        return data

    def _merge_env_vars(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge environment variables into configuration.

        Environment variables override config file values.

        Args:
            config_data: Configuration dictionary from file

        Returns:
            Merged configuration dictionary
        """
        if os.getenv("FILECOPY_LOG_LEVEL"):
            config_data.setdefault("app", {})["log_level"] = os.getenv("FILECOPY_LOG_LEVEL").upper()
        if os.getenv("FILECOPY_MAX_PARALLELISM"):
            try:
                parallelism = int(os.getenv("FILECOPY_MAX_PARALLELISM"))
            except ValueError as e:
                raise ConfigError(f"FILECOPY_MAX_PARALLELISM must be an integer: {e}") from e
            config_data.setdefault("app", {})["max_parallelism"] = parallelism
        if os.getenv("FILECOPY_JSON_LOGS"):
            config_data.setdefault("app", {})["json_format"] = os.getenv("FILECOPY_JSON_LOGS").lower() == "true"
        if os.getenv("FILECOPY_STATE_PATH"):
            config_data["state_path"] = os.getenv("FILECOPY_STATE_PATH")

        return config_data

    def _normalize_paths(self, config: Config) -> Config:
        """
        Resolve relative folders against the configuration file's folder.

        Args:
            config: Validated configuration

        Returns:
            Configuration with absolute paths
        """
        root = self.root_folder
        state_path = root / (config.state_path or DEFAULT_STATE_PATH)
        updates: Dict[str, Any] = {
            "state_path": str(state_path.resolve()),
            "copy_operations": [
                operation.resolved(str(root)) for operation in config.copy_operations
            ],
        }

        if config.app.log_to_file:
            log_file = root / (config.app.log_file_path or state_path.with_name("filecopy.log"))
            config.app.log_file_path = str(log_file.resolve())

        return config.model_copy(update=updates)

    @property
    def config(self) -> Optional[Config]:
        """Get the current configuration object."""
        return self._config


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Convenience function to load configuration.

    Args:
        config_path: Optional path to config file

    Returns:
        Loaded and validated Config object
    """
    loader = ConfigLoader(config_path)
    return loader.load()
