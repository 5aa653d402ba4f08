"""
Platform-specific metadata formatting for directory listings.

Permission bits and timestamps are rendered through a small capability
interface with one implementation per platform family. The navigator asks
get_metadata_formatter() for the implementation matching the running
interpreter instead of branching on the platform inline.
"""

import os
import stat
import time
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from ..models.entries import PERMISSIONS_PLACEHOLDER


_PERMISSION_BITS = (
    (stat.S_IRUSR, 'r'), (stat.S_IWUSR, 'w'), (stat.S_IXUSR, 'x'),
    (stat.S_IRGRP, 'r'), (stat.S_IWGRP, 'w'), (stat.S_IXGRP, 'x'),
    (stat.S_IROTH, 'r'), (stat.S_IWOTH, 'w'), (stat.S_IXOTH, 'x'),
)


class MetadataFormatter(ABC):
    """
    Renders stat results for the PERMS and MODIFIED listing columns.

    Args:
        time_format: strftime pattern for timestamps; the C ctime form
            (``Mon Oct 19 14:15:00 2026``) is used when None
    """

    placeholder = PERMISSIONS_PLACEHOLDER

    def __init__(self, time_format: Optional[str] = None):
        self.time_format = time_format

    @abstractmethod
    def permissions(self, stat_result: os.stat_result) -> str:
        """Return the nine-character rwx triad for a stat result."""

    def modified_time(self, stat_result: os.stat_result) -> datetime:
        """Return the local modification time."""
        return datetime.fromtimestamp(stat_result.st_mtime)

    def timestamp(self, stat_result: os.stat_result) -> str:
        """Return the formatted modification time."""
        if self.time_format:
            return self.modified_time(stat_result).strftime(self.time_format)
        return time.ctime(stat_result.st_mtime)


class PosixMetadataFormatter(MetadataFormatter):
    """Reads the owner/group/others bits straight from st_mode."""

    def permissions(self, stat_result: os.stat_result) -> str:
        mode = stat_result.st_mode
        return ''.join(char if mode & bit else '-' for bit, char in _PERMISSION_BITS)


class WindowsMetadataFormatter(MetadataFormatter):
    """
    Windows only exposes the read-only attribute through st_mode.

    Every entry is readable; write bits are set unless the entry is read-only,
    and execute bits follow the executable extensions Python reports.
    """

    def permissions(self, stat_result: os.stat_result) -> str:
        mode = stat_result.st_mode
        write = 'w' if mode & stat.S_IWRITE else '-'
        execute = 'x' if mode & stat.S_IEXEC else '-'
        return f"r{write}{execute}" * 3


def get_metadata_formatter(time_format: Optional[str] = None) -> MetadataFormatter:
    """
    Select the formatter for the running platform.

    Args:
        time_format: Optional strftime pattern passed to the formatter

    Returns:
        A MetadataFormatter implementation
    """
    if os.name == 'nt':
        return WindowsMetadataFormatter(time_format)
    return PosixMetadataFormatter(time_format)
