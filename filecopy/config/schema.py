"""
Configuration Schema and Models

Defines Pydantic models for copy operations and the surrounding application
settings, providing validation, default values, and type checking.

Author: filecopy Project
License: MIT
"""

from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..utils.concurrency import MAX_PARALLELISM


class LogLevel(str, Enum):
    """Logging level options."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class CopyOperation(BaseModel):
    """
    A selection of files under one source folder, copied to one or more
    destination folders.

    Frozen: the engine fingerprints and resolves the same instance, so it
    must not change once a run starts.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    source_path: str = Field(
        description="Folder that matched files are taken from"
    )
    include_globs: List[str] = Field(
        default_factory=list,
        description="Glob patterns relative to source_path (empty means everything)"
    )
    exclude_globs: List[str] = Field(
        default_factory=list,
        description="Glob patterns removed from the selection"
    )
    file_extensions: List[str] = Field(
        default_factory=list,
        description="Extensions to include anywhere under source_path"
    )
    destination_folders: List[str] = Field(
        description="Folders the selection is copied into"
    )
    flatten: bool = Field(
        default=False,
        description="Copy by file name only, discarding the relative path"
    )
    hardlink: bool = Field(
        default=False,
        description="Hardlink files instead of copying their bytes"
    )

    @field_validator("destination_folders")
    @classmethod
    def validate_destinations(cls, v):
        """At least one destination is required."""
        if not v:
            raise ValueError("destination_folders must contain at least one folder")
        return v

    @field_validator("file_extensions")
    @classmethod
    def normalize_extensions(cls, v):
        """Normalize extensions to a single leading dot."""
        return ["." + ext.lstrip(".") for ext in v if ext.strip(".")]

    def is_absolute(self) -> bool:
        """True when the source and every destination are absolute paths."""
        return Path(self.source_path).is_absolute() and all(
            Path(folder).is_absolute() for folder in self.destination_folders
        )

    def resolved(self, root_folder: str) -> "CopyOperation":
        """
        Return a copy whose folders are absolute, resolved against ``root_folder``.
        """
        root = Path(root_folder)
        return self.model_copy(update={
            "source_path": str((root / self.source_path).resolve()),
            "destination_folders": [
                str((root / folder).resolve()) for folder in self.destination_folders
            ],
        })


class AppConfig(BaseModel):
    """Logging and execution settings."""

    model_config = ConfigDict(use_enum_values=True)

    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        validate_default=True,
        description="Application logging level"
    )
    log_to_file: bool = Field(
        default=False,
        description="Enable logging to file"
    )
    log_file_path: Optional[str] = Field(
        default=None,
        description="Log file location (defaults next to the state file)"
    )
    log_rotation_size: int = Field(
        default=10485760,  # 10MB
        description="Log file size before rotation (bytes)"
    )
    log_retention_count: int = Field(
        default=5,
        description="Number of rotated log files to keep"
    )
    json_format: bool = Field(
        default=False,
        description="Emit JSON log records"
    )
    max_parallelism: int = Field(
        default=MAX_PARALLELISM,
        ge=1,
        description="Maximum in-flight filesystem operations per phase"
    )


class WatchConfig(BaseModel):
    """Settings for re-running copies when source folders change."""

    enabled: bool = Field(
        default=False,
        description="Keep watching source folders after the first run"
    )
    debounce_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Quiet period required before a triggered run"
    )
    poll_interval: float = Field(
        default=0.5,
        gt=0,
        description="Seconds between checks for pending changes"
    )


class Config(BaseModel):
    """
    Root configuration model for filecopy.

    Loaded from a YAML file by ConfigLoader and optionally overridden by
    environment variables.
    """

    model_config = ConfigDict(use_enum_values=True, validate_assignment=True)

    app: AppConfig = Field(default_factory=AppConfig)
    watch: WatchConfig = Field(default_factory=WatchConfig)
    state_path: Optional[str] = Field(
        default=None,
        description="Where the incremental snapshot is stored"
    )
    copy_operations: List[CopyOperation] = Field(
        default_factory=list,
        description="Copy operations, applied in order"
    )
