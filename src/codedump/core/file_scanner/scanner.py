"""
Tree walker implementation for filtered, deterministic directory traversal.
"""

import logging
import os
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from codedump.core.filter_policy import FilterConfig, FilterPolicy
from codedump.core.gitignore_manager import IgnoreRuleStore
from codedump.core.io_utils import run_blocking
from codedump.core.path_utils import ensure_dump_root

from .classifier import classify_file_type
from .interfaces import TreeWalkerInterface
from .language_registry import LanguageRegistry, get_default_registry
from .models import FileRecord, WalkEntry, WalkError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _DirEntry:
    """Snapshot of one directory entry, taken off the event loop."""

    name: str
    is_dir: bool
    is_file: bool
    canonical: Path


def _entry_sort_key(entry: _DirEntry) -> tuple[bool, str]:
    # Directories first, then plain code-point order of names
    return (not entry.is_dir, entry.name)


def _list_directory(directory: Path) -> list[_DirEntry]:
    """
    List and sort a directory.

    Symlinks are followed when classifying entries; a broken link is neither
    a file nor a directory and is dropped by the walker.
    """
    entries = []
    with os.scandir(directory) as it:
        for entry in it:
            try:
                is_dir = entry.is_dir()
                is_file = not is_dir and entry.is_file()
            except OSError:
                is_dir = is_file = False
            entries.append(
                _DirEntry(
                    name=entry.name,
                    is_dir=is_dir,
                    is_file=is_file,
                    canonical=Path(os.path.realpath(entry.path)),
                )
            )
    entries.sort(key=_entry_sort_key)
    return entries


@dataclass
class _WalkState:
    """Mutable state owned by exactly one walk."""

    store: IgnoreRuleStore
    policy: FilterPolicy
    visited: set[Path] = field(default_factory=set)


class TreeWalker(TreeWalkerInterface):
    """
    Concrete implementation of TreeWalkerInterface.

    Provides:
    - Depth-first traversal, directories before files, names in code-point order
    - Lazy per-directory .gitignore loading before any child is judged
    - Static allow/deny filtering via FilterPolicy
    - Symlink cycle and duplicate suppression by canonical path
    - Per-entry error recovery; only a bad root aborts the walk
    """

    def __init__(
        self,
        filter_config: Optional[FilterConfig] = None,
        language_registry: Optional[LanguageRegistry] = None,
    ):
        """
        Initialize the TreeWalker.

        Args:
            filter_config: Filtering configuration. Built-in defaults when None.
            language_registry: Registry used for language detection.
                              If None, uses the global default registry.
        """
        self._filter_config = filter_config or FilterConfig.from_options()
        self._language_registry = language_registry or get_default_registry()

    @property
    def filter_config(self) -> FilterConfig:
        return self._filter_config

    def _new_state(self) -> _WalkState:
        store = IgnoreRuleStore()
        return _WalkState(store=store, policy=FilterPolicy(self._filter_config, store))

    async def iter_entries(self, root_path: Path | str) -> AsyncIterator[WalkEntry]:
        """
        Walk ``root_path`` yielding kept files and recoverable errors in order.

        Raises:
            RootNotFoundError: If the root does not exist
            RootNotADirectoryError: If the root is not a directory
        """
        root_path = ensure_dump_root(root_path)

        state = self._new_state()
        state.visited.add(Path(os.path.realpath(root_path)))

        async for entry in self._walk_directory(state, root_path):
            yield entry

        if logger.isEnabledFor(logging.DEBUG):
            state.store.log_verbose_summary()

    async def _walk_directory(
        self, state: _WalkState, directory: Path
    ) -> AsyncIterator[WalkEntry]:
        """
        Visit one directory and, recursively, its kept subdirectories.

        Args:
            state: Walk state (rule store, policy, visited set)
            directory: Directory being visited
        """
        # Rules must be in place before any child of this directory is judged
        await run_blocking(state.store.load, directory)

        try:
            entries = await run_blocking(_list_directory, directory)
        except PermissionError as e:
            logger.warning(f"Permission denied accessing directory: {directory} - {e}")
            yield WalkError(path=directory, message=str(e), is_dir=True)
            return
        except OSError as e:
            logger.warning(f"Error accessing directory: {directory} - {e}")
            yield WalkError(path=directory, message=str(e), is_dir=True)
            return

        for entry in entries:
            if entry.canonical in state.visited:
                logger.debug(f"Skipping already visited path: {directory / entry.name} -> {entry.canonical}")
                continue
            state.visited.add(entry.canonical)

            entry_path = directory / entry.name

            if entry.is_dir:
                if state.policy.should_skip(entry_path, is_dir=True):
                    logger.debug(f"Skipping directory: {entry_path}")
                    continue
                async for item in self._walk_directory(state, entry_path):
                    yield item

            elif entry.is_file:
                if state.policy.should_skip(entry_path, is_dir=False):
                    continue
                try:
                    record = await run_blocking(self._build_record, entry_path)
                except OSError as e:
                    logger.warning(f"Error reading file metadata: {entry_path} - {e}")
                    yield WalkError(path=entry_path, message=str(e), is_dir=False)
                    continue
                yield record

    def _build_record(self, file_path: Path) -> FileRecord:
        """Build a FileRecord from stat data; file content is never read here."""
        stat = file_path.stat()
        return FileRecord(
            path=file_path,
            size=stat.st_size,
            modified_time=stat.st_mtime,
            language=self._language_registry.detect_from_path(file_path),
            file_type=classify_file_type(file_path),
        )

    async def walk(self, root_path: Path | str) -> list[FileRecord]:
        """Walk ``root_path`` and return kept files in traversal order."""
        return [
            entry async for entry in self.iter_entries(root_path) if isinstance(entry, FileRecord)
        ]

    async def largest_files(self, root_path: Path | str, top_n: int = 10) -> list[tuple[int, Path]]:
        """
        Rank kept files by size with an independent walk.

        Files whose metadata cannot be read are omitted.

        Args:
            root_path: Root directory to walk
            top_n: Number of entries to return

        Returns:
            (size, path) pairs, largest first; ties keep traversal order
        """
        if top_n <= 0:
            return []

        sizes = [
            (entry.size, entry.path)
            async for entry in self.iter_entries(root_path)
            if isinstance(entry, FileRecord)
        ]
        sizes.sort(key=lambda item: item[0], reverse=True)
        return sizes[:top_n]
