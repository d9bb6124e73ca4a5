"""
Abstract interfaces for tree walking operations.
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from pathlib import Path

from .models import FileRecord, WalkEntry


class TreeWalkerInterface(ABC):
    """
    Abstract interface for filtered directory traversal.

    Implementations visit a directory tree depth-first in a deterministic
    order and report every kept file.
    """

    @abstractmethod
    def iter_entries(self, root_path: Path) -> AsyncIterator[WalkEntry]:
        """
        Walk a directory tree, yielding kept files and recoverable errors.

        Args:
            root_path: Root directory to walk

        Yields:
            FileRecord for each kept file, WalkError for each inaccessible entry

        Raises:
            RootNotFoundError: If root_path does not exist
            RootNotADirectoryError: If root_path is not a directory
        """
        pass

    @abstractmethod
    async def walk(self, root_path: Path) -> list[FileRecord]:
        """
        Walk a directory tree and return kept files in traversal order.
        """
        pass
