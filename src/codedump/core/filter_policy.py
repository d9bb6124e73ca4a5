"""
Filter policy for codedump.

Combines the static allow/deny configuration with the per-walk ignore rule
store into a single keep/skip decision per path.
"""

import logging
import os
import re
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Iterable, Optional

from codedump.core.config import FilterOptions
from codedump.core.gitignore_manager import IgnoreRuleStore

logger = logging.getLogger(__name__)


def _compile_patterns(patterns: Iterable[str], kind: str) -> tuple[re.Pattern, ...]:
    """Compile regex patterns, dropping (and logging) the malformed ones."""
    compiled = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as e:
            logger.warning(f"Ignoring malformed {kind} pattern '{pattern}': {e}")
    return tuple(compiled)


@dataclass(frozen=True)
class FilterConfig:
    """
    Immutable filter configuration for one run.

    Attributes:
        allowed_extensions: Dotted, lower-case extensions that are kept
        allowed_filenames: Lower-case filenames kept regardless of extension
        skip_directories: Directory names never descended into
        skip_directory_patterns: Regexes searched in directory names
        skip_filenames: Lower-case filenames always skipped
        skip_patterns: Regexes searched in lower-case filenames
        output_path: The dump's own output file, always skipped
    """

    allowed_extensions: frozenset[str]
    allowed_filenames: frozenset[str]
    skip_directories: frozenset[str]
    skip_directory_patterns: tuple[re.Pattern, ...]
    skip_filenames: frozenset[str]
    skip_patterns: tuple[re.Pattern, ...]
    output_path: Optional[Path] = None

    @classmethod
    def from_options(
        cls,
        options: Optional[FilterOptions] = None,
        output_path: Optional[Path | str] = None,
    ) -> "FilterConfig":
        """
        Build the run configuration from defaults overlaid with overrides.

        Args:
            options: Filter options; built-in defaults when None
            output_path: Output file to exclude from the walk

        Returns:
            FilterConfig instance
        """
        options = options or FilterOptions()
        return cls(
            allowed_extensions=frozenset(ext.lower() for ext in options.allowed_extensions),
            allowed_filenames=frozenset(name.lower() for name in options.allowed_filenames),
            skip_directories=frozenset(options.skip_directories),
            skip_directory_patterns=_compile_patterns(
                options.skip_directory_patterns, "directory"
            ),
            skip_filenames=frozenset(name.lower() for name in options.skip_filenames),
            skip_patterns=_compile_patterns(options.skip_patterns, "filename"),
            output_path=Path(os.path.realpath(output_path)) if output_path else None,
        )

    def with_output_path(self, output_path: Optional[Path | str]) -> "FilterConfig":
        """Return a copy excluding ``output_path`` instead."""
        resolved = Path(os.path.realpath(output_path)) if output_path else None
        return replace(self, output_path=resolved)


class FilterPolicy:
    """
    Decides whether a path is skipped during a walk.

    Decision order:
    1. The configured output file is always skipped
    2. Paths ignored by loaded .gitignore rules are skipped
    3. Directories: skipped by exact name or name pattern
    4. Files: skipped by exact (case-insensitive) name or name pattern
    5. Files: dotfiles are skipped unless their name is allow-listed
    6. Files: skipped unless the extension or the name is allow-listed

    A directory ignored by .gitignore is still descended into while a
    negation rule is in scope, so that rule can re-include files beneath it;
    those files are then judged individually.
    """

    def __init__(self, config: FilterConfig, store: IgnoreRuleStore):
        self._config = config
        self._store = store

    @property
    def config(self) -> FilterConfig:
        return self._config

    def is_output_file(self, path: Path | str) -> bool:
        output_path = self._config.output_path
        if output_path is None:
            return False
        return Path(os.path.realpath(path)) == output_path

    def _gitignored(self, path: Path, is_dir: bool) -> bool:
        if not self._store.is_ignored(path, is_dir):
            return False
        if is_dir and self._store.has_negations_in_scope(path):
            logger.debug(f"Descending into ignored directory with negations in scope: {path}")
            return False
        return True

    def should_skip(self, path: Path | str, is_dir: Optional[bool] = None) -> bool:
        """
        Decide whether ``path`` is excluded from the dump.

        Args:
            path: Path to check
            is_dir: Whether the path is a directory; looked up when None

        Returns:
            True if the path should be skipped
        """
        path = Path(path)
        if is_dir is None:
            is_dir = path.is_dir()

        if self.is_output_file(path):
            return True

        if self._gitignored(path, is_dir):
            return True

        config = self._config
        name = path.name

        if is_dir:
            return name in config.skip_directories or any(
                pattern.search(name) for pattern in config.skip_directory_patterns
            )

        name_lower = name.lower()

        if name_lower in config.skip_filenames:
            return True

        if any(pattern.search(name_lower) for pattern in config.skip_patterns):
            return True

        if name.startswith(".") and name_lower not in config.allowed_filenames:
            return True

        extension = os.path.splitext(name)[1].lower()
        return extension not in config.allowed_extensions and name_lower not in config.allowed_filenames
