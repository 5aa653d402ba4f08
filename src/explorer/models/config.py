"""
Configuration data models for the File Explorer.

This module defines the configuration sections for display, search,
file operations and logging, plus the top-level ExplorerConfig that the
configuration parser produces.
"""

import logging
from typing import Dict, List, Optional, Any
from pathlib import Path
from datetime import datetime
from pydantic import BaseModel, Field, ValidationError, field_validator


LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class DisplayConfig(BaseModel):
    """
    Configuration for the listing display.

    Attributes:
        color: Whether to colour the TYPE column
        time_format: strftime pattern for the MODIFIED column (ctime form if None)
    """

    color: bool = Field(True, description="Whether to colour listing output")
    time_format: Optional[str] = Field(None, description="strftime pattern for timestamps")

    @field_validator('time_format')
    @classmethod
    def validate_time_format(cls, v: Optional[str]) -> Optional[str]:
        """Reject blank patterns and patterns strftime cannot apply."""
        if v is None:
            return v
        if not v.strip():
            raise ValueError("time_format cannot be blank")
        try:
            datetime(2000, 1, 1).strftime(v)
        except ValueError as e:
            raise ValueError(f"Invalid time_format {v!r}: {e}")
        return v

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()


class SearchConfig(BaseModel):
    """
    Configuration for recursive name search.

    Attributes:
        follow_symlinks: Whether to descend into symlinked directories
        max_results: Maximum number of hits to report (unlimited if None)
    """

    follow_symlinks: bool = Field(False, description="Descend into symlinked directories")
    max_results: Optional[int] = Field(None, gt=0, description="Maximum number of hits")

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()


class OperationsConfig(BaseModel):
    """
    Configuration for mutating file operations.

    Attributes:
        cross_device_fallback: Copy then delete when a move crosses devices
        confirm_destructive: Ask before deleting (command loop only)
    """

    cross_device_fallback: bool = Field(True, description="Copy+delete fallback for cross-device moves")
    confirm_destructive: bool = Field(False, description="Ask for confirmation before deleting")

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()


class LoggingConfig(BaseModel):
    """Configuration for diagnostic logging."""

    level: str = Field("WARNING", description="Log level name")

    @field_validator('level', mode='before')
    @classmethod
    def validate_level(cls, v) -> str:
        """Normalize and validate the level name."""
        if not isinstance(v, str):
            raise ValueError(f"Log level must be a string, got {type(v).__name__}")
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v}")
        return level

    def get_level_number(self) -> int:
        """Get the numeric logging level."""
        return getattr(logging, self.level)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()


class ExplorerConfig(BaseModel):
    """
    Main configuration class for the File Explorer.

    Attributes:
        start_directory: Initial current directory (process working directory if None)
        display: Listing display settings
        search: Name search settings
        operations: File operation settings
        logging: Logging settings
    """

    start_directory: Optional[str] = Field(None, description="Initial current directory")
    display: DisplayConfig = Field(default_factory=DisplayConfig, description="Display settings")
    search: SearchConfig = Field(default_factory=SearchConfig, description="Search settings")
    operations: OperationsConfig = Field(default_factory=OperationsConfig, description="Operation settings")
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="Logging settings")

    @field_validator('start_directory')
    @classmethod
    def validate_start_directory(cls, v: Optional[str]) -> Optional[str]:
        """Expand the user directory; blank means unset."""
        if v is None or not v.strip():
            return None
        return str(Path(v.strip()).expanduser())

    def validate_configuration(self) -> List[str]:
        """
        Check the configuration against the live file system.

        Returns:
            List of warning messages (empty if nothing looks wrong)
        """
        warnings = []

        if self.start_directory is not None:
            start = Path(self.start_directory)
            if not start.exists():
                warnings.append(f"Start directory does not exist: {start}")
            elif not start.is_dir():
                warnings.append(f"Start directory is not a directory: {start}")

        if self.search.follow_symlinks:
            warnings.append("Following symlinks during search may visit the same directory more than once")

        return warnings

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary representation."""
        return {
            'start_directory': self.start_directory,
            'display': self.display.to_dict(),
            'search': self.search.to_dict(),
            'operations': self.operations.to_dict(),
            'logging': self.logging.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ExplorerConfig':
        """Create configuration from dictionary representation."""
        return cls.model_validate(data)

    def __str__(self) -> str:
        parts = [f"Start: {self.start_directory or 'cwd'}"]
        parts.append(f"Color: {self.display.color}")
        parts.append(f"Follow symlinks: {self.search.follow_symlinks}")
        parts.append(f"Log level: {self.logging.level}")
        return " | ".join(parts)


KNOWN_SECTIONS = {'start_directory', 'display', 'search', 'operations', 'logging'}


def validate_config_dict(config_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate a configuration dictionary using Pydantic.

    Args:
        config_data: Dictionary containing configuration data

    Returns:
        Validated and normalized configuration dictionary

    Raises:
        ValueError: If configuration is invalid
    """
    unknown = sorted(set(config_data) - KNOWN_SECTIONS)
    if unknown:
        raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")

    for section in KNOWN_SECTIONS - {'start_directory'}:
        value = config_data.get(section)
        if value is not None and not isinstance(value, dict):
            raise ValueError(f"Section '{section}' must be a mapping, got {type(value).__name__}")

    cleaned = {k: v for k, v in config_data.items() if v is not None}
    try:
        return ExplorerConfig.model_validate(cleaned).to_dict()
    except ValidationError as e:
        raise ValueError(str(e)) from e
