"""
File-system tools for the File Explorer.

This module contains the navigator operations, the recursive name search,
platform metadata formatting and the console listing renderer.
"""

from .fs_walker import FSWalker
from .metadata import MetadataFormatter, get_metadata_formatter
from .navigator import Navigator

__all__ = ['FSWalker', 'MetadataFormatter', 'Navigator', 'get_metadata_formatter']
