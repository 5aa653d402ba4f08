"""
Data models for the File Explorer.

This module contains all the core data structures used throughout the system.
"""

from .entries import DirectoryEntry, EntryKind
from .results import ErrorKind, OperationResult
from .search_query import SearchQuery
from .session import Session

__all__ = [
    'DirectoryEntry',
    'EntryKind',
    'ErrorKind',
    'OperationResult',
    'SearchQuery',
    'Session',
]
