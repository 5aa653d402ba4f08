"""
Navigator: the file-system operations behind the File Explorer.

The navigator holds no current directory of its own. Callers pass the paths
they want to act on (resolved against their Session) and receive an
OperationResult for every call; file-system failures are reported through the
result and never raised.
"""

import errno
import os
import shutil
from pathlib import Path
from typing import Iterator, List, Optional, Union
import logging

from pydantic import ValidationError

from ..models.config import ExplorerConfig
from ..models.entries import DirectoryEntry, EntryKind, PERMISSIONS_PLACEHOLDER
from ..models.results import ErrorKind, OperationResult
from ..models.search_query import SearchQuery
from .fs_walker import FSWalker
from .metadata import MetadataFormatter, get_metadata_formatter


logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


def _raise(error: OSError) -> None:
    raise error


def _is_real_directory(path: Path) -> bool:
    return path.is_dir() and not path.is_symlink()


def _reject_unusable(*paths: PathLike, payload=None) -> Optional[OperationResult]:
    """Fail paths the OS cannot accept at all (embedded NUL bytes)."""
    for path in paths:
        text = os.fspath(path)
        if '\x00' in text:
            return OperationResult.failure(ErrorKind.INVALID_ARGUMENT,
                                           f"Path contains a NUL byte: {text!r}", payload)
    return None


def _is_within(child: Path, parent: Path) -> bool:
    try:
        child.resolve().relative_to(parent.resolve())
    except ValueError:
        return False
    return True


class Navigator:
    """
    Performs listing, navigation and mutation operations on the file system.

    Args:
        config: Explorer configuration (defaults when None)
        formatter: Metadata formatter; selected for the running platform
            when None
    """

    def __init__(self, config: Optional[ExplorerConfig] = None,
                 formatter: Optional[MetadataFormatter] = None):
        self.config = config or ExplorerConfig()
        self.formatter = formatter or get_metadata_formatter(self.config.display.time_format)
        self.walker = FSWalker(self.config.search)
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    # ------------------------------------------------------------------
    # Listing and navigation
    # ------------------------------------------------------------------

    def list_directory(self, directory: PathLike) -> OperationResult:
        """
        List the immediate children of a directory.

        Entries come back in file-system iteration order. Metadata that cannot
        be read for one entry is defaulted rather than failing the listing.

        Args:
            directory: Directory to list

        Returns:
            OperationResult whose payload is a list of DirectoryEntry; an empty
            list when the directory itself cannot be read
        """
        rejected = _reject_unusable(directory, payload=[])
        if rejected is not None:
            return rejected

        directory = Path(directory)
        entries: List[DirectoryEntry] = []
        try:
            with os.scandir(directory) as it:
                for dir_entry in it:
                    entries.append(self._build_entry(dir_entry))
        except OSError as e:
            self.logger.debug(f"Listing {directory} failed: {e}")
            return OperationResult.from_os_error(e, "Error listing directory", payload=[])

        return OperationResult.success(f"{len(entries)} entries in {directory}", entries)

    def _build_entry(self, dir_entry: os.DirEntry) -> DirectoryEntry:
        kind = self._classify(dir_entry)
        permissions = PERMISSIONS_PLACEHOLDER
        size = 0
        modified = ""
        modified_time = None

        try:
            st = os.stat(dir_entry.path)
        except OSError as e:
            self.logger.debug(f"Cannot stat {dir_entry.path}: {e}")
        else:
            permissions = self.formatter.permissions(st)
            modified = self.formatter.timestamp(st)
            modified_time = self.formatter.modified_time(st)
            if kind == EntryKind.FILE:
                size = st.st_size

        return DirectoryEntry(
            name=dir_entry.name,
            path=dir_entry.path,
            kind=kind,
            permissions=permissions,
            size=size,
            modified=modified,
            modified_time=modified_time
        )

    @staticmethod
    def _classify(dir_entry: os.DirEntry) -> EntryKind:
        # is_* on DirEntry swallow OSError and return False
        if dir_entry.is_symlink():
            return EntryKind.SYMLINK
        if dir_entry.is_dir(follow_symlinks=False):
            return EntryKind.DIRECTORY
        if dir_entry.is_file(follow_symlinks=False):
            return EntryKind.FILE
        return EntryKind.OTHER

    def enter_directory(self, current: PathLike, name_or_path: str) -> OperationResult:
        """
        Resolve a child (or absolute) directory to become the new current directory.

        Args:
            current: The current directory
            name_or_path: Directory name relative to ``current`` or an absolute path

        Returns:
            OperationResult whose payload is the canonical new directory, or
            ``current`` unchanged on failure
        """
        current = Path(current)
        if not name_or_path or not name_or_path.strip():
            return OperationResult.success("No directory given", current)
        rejected = _reject_unusable(name_or_path, payload=current)
        if rejected is not None:
            return rejected

        candidate = Path(os.path.expanduser(name_or_path))
        if not candidate.is_absolute():
            candidate = current / candidate

        if not candidate.is_dir():
            return OperationResult.failure(ErrorKind.NOT_A_DIRECTORY,
                                           f"Not a directory: {candidate}", current)
        try:
            resolved = candidate.resolve(strict=True)
        except OSError as e:
            return OperationResult.from_os_error(e, "Cannot enter directory", payload=current)

        return OperationResult.success(f"Entered {resolved}", resolved)

    def go_up(self, current: PathLike) -> OperationResult:
        """
        Move to the parent directory.

        At a file-system root the current directory is returned unchanged.
        """
        current = Path(current)
        parent = current.parent
        if parent == current:
            return OperationResult.success(f"Already at root: {current}", current)
        return OperationResult.success(f"Moved up to {parent}", parent)

    # ------------------------------------------------------------------
    # Create and delete
    # ------------------------------------------------------------------

    def create_file(self, path: PathLike) -> OperationResult:
        """Create an empty regular file; missing parents are not created."""
        rejected = _reject_unusable(path)
        if rejected is not None:
            return rejected

        path = Path(path)
        if os.path.lexists(path):
            return OperationResult.failure(ErrorKind.ALREADY_EXISTS, f"Path already exists: {path}")
        try:
            with open(path, 'x'):
                pass
        except OSError as e:
            return OperationResult.from_os_error(e, "Failed to create file")

        resolved = path.resolve()
        self.logger.info(f"Created file {resolved}")
        return OperationResult.success(f"File created: {resolved}", resolved)

    def create_directory(self, path: PathLike) -> OperationResult:
        """Create a directory along with any missing intermediate directories."""
        rejected = _reject_unusable(path)
        if rejected is not None:
            return rejected

        path = Path(path)
        if os.path.lexists(path):
            return OperationResult.failure(ErrorKind.ALREADY_EXISTS, f"Path already exists: {path}")
        try:
            os.makedirs(path)
        except OSError as e:
            return OperationResult.from_os_error(e, "Failed to create directory")

        self.logger.info(f"Created directory {path}")
        return OperationResult.success(f"Directory created: {path}", path)

    def delete_path(self, path: PathLike) -> OperationResult:
        """
        Delete a file, link or directory tree.

        A directory is removed bottom-up and every removed entry is counted,
        including the directory itself. A symlink to a directory removes only
        the link.

        Returns:
            OperationResult whose payload is the number of removed entries;
            on failure, the number removed before the error
        """
        rejected = _reject_unusable(path, payload=0)
        if rejected is not None:
            return rejected

        path = Path(path)
        if not os.path.lexists(path):
            return OperationResult.failure(ErrorKind.NOT_FOUND, f"Path does not exist: {path}")

        removed = 0
        try:
            if _is_real_directory(path):
                for _ in self._remove_tree(path):
                    removed += 1
            else:
                try:
                    os.unlink(path)
                    removed = 1
                except FileNotFoundError:
                    self.logger.debug(f"{path} vanished before removal")
        except OSError as e:
            self.logger.warning(f"Delete of {path} stopped after {removed} entries: {e}")
            return OperationResult.from_os_error(e, f"Delete failed after removing {removed} entries",
                                                 payload=removed)

        self.logger.info(f"Deleted {path} ({removed} entries)")
        return OperationResult.success(f"Deleted entries: {removed}", removed)

    @staticmethod
    def _remove_tree(root: Path) -> Iterator[str]:
        """Remove a directory tree bottom-up, yielding each path once it is gone."""
        for current_dir, subdirs, files in os.walk(root, topdown=False, onerror=_raise):
            for name in files:
                child = os.path.join(current_dir, name)
                os.unlink(child)
                yield child
            for name in subdirs:
                child = os.path.join(current_dir, name)
                if os.path.islink(child):
                    os.unlink(child)
                else:
                    os.rmdir(child)
                yield child
        os.rmdir(root)
        yield os.fspath(root)

    # ------------------------------------------------------------------
    # Copy and move
    # ------------------------------------------------------------------

    def copy_path(self, src: PathLike, dst: PathLike) -> OperationResult:
        """
        Copy a file or directory tree, overwriting existing files at the destination.

        Returns:
            OperationResult whose payload is the destination path
        """
        rejected = _reject_unusable(src, dst)
        if rejected is not None:
            return rejected

        src, dst = Path(src), Path(dst)
        if not src.exists():
            return OperationResult.failure(ErrorKind.NOT_FOUND, f"Source does not exist: {src}")

        if src.is_dir() and _is_within(dst, src):
            return OperationResult.failure(ErrorKind.INVALID_ARGUMENT,
                                           f"Cannot copy {src} into itself ({dst})")
        try:
            destination = self._copy(src, dst)
        except OSError as e:
            return OperationResult.from_os_error(e, "Copy failed")

        self.logger.info(f"Copied {src} to {destination}")
        return OperationResult.success(f"Copied to: {destination}", destination)

    @staticmethod
    def _copy(src: Path, dst: Path) -> Path:
        if src.is_dir():
            return Path(shutil.copytree(src, dst, dirs_exist_ok=True))
        return Path(shutil.copy2(src, dst))

    def move_path(self, src: PathLike, dst: PathLike) -> OperationResult:
        """
        Move or rename a path.

        An atomic rename is tried first. When it fails because source and
        destination are on different devices, the entry is copied and the
        source removed (if ``operations.cross_device_fallback`` is enabled).
        A failed copy removes any partial destination and leaves the source
        in place.

        Returns:
            OperationResult whose payload is the destination path
        """
        rejected = _reject_unusable(src, dst)
        if rejected is not None:
            return rejected

        src, dst = Path(src), Path(dst)
        if not os.path.lexists(src):
            return OperationResult.failure(ErrorKind.NOT_FOUND, f"Source does not exist: {src}")

        try:
            os.rename(src, dst)
        except OSError as e:
            if e.errno != errno.EXDEV:
                return OperationResult.from_os_error(e, "Move failed")
            if not self.config.operations.cross_device_fallback:
                return OperationResult.failure(ErrorKind.CROSS_DEVICE,
                                               f"Cannot move across devices: {src} -> {dst}")
            return self._move_across_devices(src, dst)

        self.logger.info(f"Moved {src} to {dst}")
        return OperationResult.success(f"Moved/Renamed to: {dst}", dst)

    def _move_across_devices(self, src: Path, dst: Path) -> OperationResult:
        self.logger.info(f"{src} and {dst} are on different devices, copying instead")
        existed = os.path.lexists(dst)
        try:
            if src.is_symlink():
                os.symlink(os.readlink(src), dst)
            elif src.is_dir():
                shutil.copytree(src, dst, symlinks=True)
            else:
                shutil.copy2(src, dst)
        except OSError as e:
            if not existed:
                self._discard_partial(dst)
            return OperationResult.failure(ErrorKind.CROSS_DEVICE,
                                           f"Cross-device move failed, source left in place: {e}")

        removal = self.delete_path(src)
        if not removal.ok:
            return OperationResult.failure(ErrorKind.CROSS_DEVICE,
                                           f"Copied to {dst} but could not remove source: {removal.message}",
                                           dst)

        self.logger.info(f"Moved {src} to {dst} by copying")
        return OperationResult.success(f"Moved/Renamed to: {dst}", dst)

    def _discard_partial(self, dst: Path) -> None:
        if not os.path.lexists(dst):
            return
        result = self.delete_path(dst)
        if not result.ok:
            self.logger.warning(f"Could not remove partial copy {dst}: {result.message}")

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def search_by_name(self, root: PathLike, needle: str) -> OperationResult:
        """
        Search a directory tree for entries whose name contains ``needle``.

        Matching is a case-sensitive substring test on the final path
        component. Subtrees that cannot be read are skipped.

        Returns:
            OperationResult whose payload is a lazy iterator of matching paths
        """
        rejected = _reject_unusable(root)
        if rejected is not None:
            return rejected

        try:
            query = SearchQuery(root=str(root), needle=needle)
        except ValidationError as e:
            return OperationResult.failure(ErrorKind.INVALID_ARGUMENT,
                                           f"Invalid search: {e.errors()[0]['msg']}")

        root_path = Path(query.root)
        if not root_path.exists():
            return OperationResult.failure(ErrorKind.NOT_FOUND, f"Search root does not exist: {root_path}")
        if not root_path.is_dir():
            return OperationResult.failure(ErrorKind.NOT_A_DIRECTORY, f"Not a directory: {root_path}")

        return OperationResult.success(f"Searching {root_path} for '{needle}'",
                                       self.walker.find_by_name(query))
