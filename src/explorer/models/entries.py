"""
Directory listing data models for the File Explorer.

This module defines the structures produced by a directory listing: the kind of
each entry and the metadata shown in the listing table.
"""

from typing import Dict, Any, Optional
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, Field, field_validator


PERMISSIONS_PLACEHOLDER = "---------"


class EntryKind(Enum):
    """Enumeration of directory entry kinds."""
    DIRECTORY = "directory"
    FILE = "file"
    SYMLINK = "symlink"
    OTHER = "other"

    @property
    def label(self) -> str:
        """Label shown in the TYPE column of a listing."""
        return _KIND_LABELS[self]


_KIND_LABELS = {
    EntryKind.DIRECTORY: "[DIR]",
    EntryKind.SYMLINK: "[LNK]",
    EntryKind.FILE: "[FILE]",
    EntryKind.OTHER: "[FILE]",
}


class DirectoryEntry(BaseModel):
    """
    One immediate child of a listed directory.

    Entries are recomputed on every listing; metadata that could not be read
    falls back to the defaults below instead of failing the listing.

    Attributes:
        name: Final path component of the entry
        path: Full path of the entry
        kind: Directory, file, symbolic link or other
        permissions: Nine-character rwx triad string
        size: Size in bytes for regular files, 0 otherwise
        modified: Formatted modification time, empty when unavailable
        modified_time: Modification time as a datetime, if available
    """

    name: str = Field(..., description="Final path component")
    path: str = Field(..., description="Full path of the entry")
    kind: EntryKind = Field(..., description="Entry kind")
    permissions: str = Field(PERMISSIONS_PLACEHOLDER, description="rwx triad string")
    size: int = Field(0, ge=0, description="Size in bytes for regular files")
    modified: str = Field("", description="Formatted modification time")
    modified_time: Optional[datetime] = Field(None, description="Modification timestamp")

    @field_validator('permissions')
    @classmethod
    def validate_permissions(cls, v: str) -> str:
        """Permissions must be a nine-character triad string."""
        if len(v) != 9 or any(c not in "rwx-" for c in v):
            raise ValueError(f"Invalid permission string: {v!r}")
        return v

    def to_dict(self) -> Dict[str, Any]:
        """Convert entry to dictionary representation."""
        data = self.model_dump()
        data['kind'] = self.kind.value
        if self.modified_time:
            data['modified_time'] = self.modified_time.isoformat()
        return data
