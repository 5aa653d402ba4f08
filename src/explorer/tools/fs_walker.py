"""
Filesystem walker for the File Explorer.

This module provides the recursive name search: a depth-first traversal of a
directory tree that lazily yields every entry whose name contains a needle.
Subtrees that cannot be listed are skipped and counted instead of aborting
the walk.
"""

import os
from pathlib import Path
from typing import Dict, FrozenSet, Iterator, Optional, Tuple
import logging

from ..models.config import SearchConfig
from ..models.search_query import SearchQuery


logger = logging.getLogger(__name__)


class FSWalker:
    """
    Filesystem walker that searches a directory tree by entry name.

    Traversal is top-down and depth-first, with child names visited in sorted
    order so that two walks over an unchanged tree yield the same sequence.
    Both directories and files are matched. Symlinked directories are matched
    by name but only descended into when ``follow_symlinks`` is set; a link
    back to one of its own ancestor directories is never descended into.
    """

    def __init__(self, config: Optional[SearchConfig] = None):
        """
        Initialize the filesystem walker.

        Args:
            config: Search settings (defaults when None)
        """
        self.config = config or SearchConfig()
        self._stats = self._empty_stats()

    @staticmethod
    def _empty_stats() -> Dict[str, int]:
        return {
            'directories_traversed': 0,
            'entries_scanned': 0,
            'entries_matched': 0,
            'permission_denied': 0,
            'links_pruned': 0,
            'errors': 0
        }

    def find_by_name(self, query: SearchQuery) -> Iterator[Path]:
        """
        Walk the query root and yield matching paths.

        Args:
            query: Validated search query (root, needle, optional cap)

        Yields:
            Full paths whose final component contains the needle
        """
        limit = query.max_results or self.config.max_results
        follow = self.config.follow_symlinks
        matched = 0
        # pending directory -> (st_dev, st_ino) keys of the directories above it and itself
        ancestry: Dict[str, FrozenSet[Tuple[int, int]]] = {}
        if follow:
            root_key = self._directory_key(query.root)
            ancestry[query.root] = frozenset([root_key] if root_key else [])

        logger.info(f"Searching {query.root} for names containing {query.needle!r}")

        for current_dir, subdirs, files in os.walk(query.root,
                                                   onerror=self._on_walk_error,
                                                   followlinks=follow):
            current_path = Path(current_dir)
            self._stats['directories_traversed'] += 1

            subdirs.sort()
            names = sorted(subdirs + files)
            if follow:
                chain = ancestry.pop(current_dir, frozenset())
                subdirs[:] = [d for d in subdirs
                              if self._descend(os.path.join(current_dir, d), chain, ancestry)]

            for name in names:
                self._stats['entries_scanned'] += 1
                if not query.matches(name):
                    continue

                self._stats['entries_matched'] += 1
                matched += 1
                yield current_path / name

                if limit is not None and matched >= limit:
                    logger.info(f"Reached maximum result count: {limit}")
                    return

    @staticmethod
    def _directory_key(path) -> Optional[Tuple[int, int]]:
        try:
            st = os.stat(path)
        except OSError:
            return None
        return st.st_dev, st.st_ino

    def _descend(self, path: str, chain: FrozenSet[Tuple[int, int]],
                 ancestry: Dict[str, FrozenSet[Tuple[int, int]]]) -> bool:
        """
        Decide whether to walk into ``path`` when following symlinks.

        A directory that is one of its own ancestors (a link pointing back up
        the tree) is not descended into, so link cycles end after one pass.
        The same directory reached through two unrelated paths is still
        walked under each of them.
        """
        key = self._directory_key(path)
        if key is None:
            ancestry[path] = chain
            return True
        if key in chain:
            self._stats['links_pruned'] += 1
            logger.debug(f"Not descending into {path}: link cycle")
            return False
        ancestry[path] = chain | {key}
        return True

    def _on_walk_error(self, error: OSError) -> None:
        """
        Record a subtree that could not be listed; the walk skips it.

        Permission errors are expected on system trees and logged at debug.
        Anything else (a directory vanishing mid-walk, I/O errors) is logged
        as a warning.
        """
        if isinstance(error, PermissionError):
            self._stats['permission_denied'] += 1
            logger.debug(f"Skipping unreadable directory {error.filename}")
        else:
            self._stats['errors'] += 1
            logger.warning(f"Skipping directory {error.filename}: {error}")

    def get_stats(self) -> Dict[str, int]:
        """
        Get statistics about the filesystem walking operation.

        Returns:
            Dictionary containing operation statistics
        """
        return self._stats.copy()

    def reset_stats(self) -> None:
        """Reset the statistics counters."""
        self._stats = self._empty_stats()
