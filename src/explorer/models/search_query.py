"""
Search query data model for the File Explorer.

A name search is parameterised by a root directory and a needle. The model
validates both before any directory is walked.
"""

from typing import Dict, Any, Optional
from pathlib import Path
from pydantic import BaseModel, Field, field_validator


class SearchQuery(BaseModel):
    """
    Represents a recursive name search.

    Attributes:
        root: Directory whose subtree is searched
        needle: Case-sensitive substring to look for in entry names; matched
            verbatim, so whitespace is significant
        max_results: Optional cap on the number of hits
    """

    root: str = Field(..., min_length=1, description="Root directory to search")
    needle: str = Field(..., min_length=1, description="Substring to match in names")
    max_results: Optional[int] = Field(None, gt=0, description="Maximum number of hits")

    @field_validator('root')
    @classmethod
    def validate_root(cls, v: str) -> str:
        """Normalize the root to an absolute path."""
        if not v.strip():
            raise ValueError("Search root cannot be empty")
        return str(Path(v).expanduser().absolute())

    def matches(self, name: str) -> bool:
        """Check whether an entry name contains the needle."""
        return self.needle in name

    def to_dict(self) -> Dict[str, Any]:
        """Convert the search query to a dictionary representation."""
        return self.model_dump()

    def __str__(self) -> str:
        parts = [f"Needle: '{self.needle}'", f"Root: {self.root}"]
        if self.max_results is not None:
            parts.append(f"Max results: {self.max_results}")
        return " | ".join(parts)
