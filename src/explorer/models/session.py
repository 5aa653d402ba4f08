"""
Session state for the File Explorer.

The session owns the only state carried between commands: the current
directory. The command loop holds a Session and passes it explicitly to the
navigator calls that need it.
"""

import os
from pathlib import Path
from typing import Optional, Union
from pydantic import BaseModel, Field, field_validator


class Session(BaseModel):
    """
    The running session's cursor into the file-system tree.

    Attributes:
        current_directory: Absolute, canonical path of the current directory
    """

    current_directory: Path = Field(..., description="Current directory")

    @field_validator('current_directory')
    @classmethod
    def validate_current_directory(cls, v: Path) -> Path:
        """Current directory must be absolute."""
        if not v.is_absolute():
            raise ValueError(f"Current directory must be absolute: {v}")
        return v

    @classmethod
    def start(cls, start_directory: Optional[Union[str, Path]] = None) -> 'Session':
        """
        Create a session seeded from a start directory.

        Args:
            start_directory: Directory to start in; the process working
                directory when None

        Returns:
            New Session positioned at the canonical start directory

        Raises:
            NotADirectoryError: If the start directory is not a directory
        """
        if start_directory is None:
            path = Path.cwd()
        else:
            path = Path(start_directory).expanduser()
        if not path.is_dir():
            raise NotADirectoryError(f"Start directory is not a directory: {path}")
        return cls(current_directory=path.resolve())

    def resolve(self, raw: str) -> Path:
        """
        Resolve user input to an absolute path.

        Absolute input is returned as-is; relative input is joined with the
        current directory. A leading ``~`` expands to the home directory.
        """
        path = Path(os.path.expanduser(raw))
        if path.is_absolute():
            return path
        return self.current_directory / path

    def change_to(self, path: Path) -> None:
        """Move the cursor to a new directory path."""
        self.current_directory = Path(path)

    def __str__(self) -> str:
        return str(self.current_directory)
