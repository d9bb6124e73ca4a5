"""
Ignore rule store for codedump.

Holds the rules of every .gitignore file met during one walk, keyed by the
absolute path of the directory that contains it. Rules are loaded lazily the
first time the walk enters a directory and are never removed during a run.

Matching semantics:
- A rule only applies to paths below the directory that defines it
- Within one .gitignore the last matching rule wins
- Across directories the nearest directory's matching rule wins; a farther
  directory decides only when no nearer rule matches
- Negation rules (!) re-include previously ignored paths
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from codedump.core.ignore_pattern import CompiledPattern, compile_pattern

logger = logging.getLogger(__name__)

GITIGNORE_FILENAME = ".gitignore"


def _absolute(path: Path | str) -> Path:
    """Absolute, normalised path without resolving symlinks."""
    return Path(os.path.abspath(path))


@dataclass(frozen=True)
class IgnoreRule:
    """
    One parsed line of a .gitignore file.

    Attributes:
        pattern: Pattern text with the leading "!" removed
        negated: True if the line started with "!" (re-includes paths)
    """

    pattern: str
    negated: bool = False
    matcher: CompiledPattern = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "matcher", compile_pattern(self.pattern))

    @classmethod
    def parse(cls, line: str) -> "IgnoreRule | None":
        """
        Parse a raw .gitignore line.

        Returns None for blank lines, comments and lines that carry no
        pattern once the negation marker is removed.
        """
        line = line.strip()
        if not line or line.startswith("#"):
            return None

        negated = line.startswith("!")
        pattern = line[1:] if negated else line
        if not pattern.strip("/"):
            return None

        return cls(pattern=pattern, negated=negated)

    def matches(self, relative_path: str, is_dir: bool) -> bool:
        return self.matcher.matches(relative_path, is_dir)


class IgnoreRuleStore:
    """
    Per-directory ordered lists of ignore rules for a single walk.

    Each walk owns its own store so that concurrent or repeated runs never
    share rule state.
    """

    def __init__(self, filename: str = GITIGNORE_FILENAME):
        self._filename = filename
        self._rules: dict[Path, tuple[IgnoreRule, ...]] = {}
        self._loaded: set[Path] = set()

    def load(self, directory: Path | str) -> int:
        """
        Read the ignore file in ``directory`` once per run.

        Repeated calls for the same directory are no-ops. A missing or
        unreadable file means "no rules" and is never fatal.

        Args:
            directory: Directory whose ignore file should be loaded

        Returns:
            Number of rules loaded by this call
        """
        directory = _absolute(directory)
        if directory in self._loaded:
            return 0
        self._loaded.add(directory)

        ignore_path = directory / self._filename
        try:
            # is_file() raises for a directory without search permission
            if not ignore_path.is_file():
                logger.debug(f"Gitignore file not found: {ignore_path}")
                return 0
            content = ignore_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            logger.warning(f"Invalid UTF-8 encoding in {ignore_path}: {e}")
            return 0
        except PermissionError as e:
            logger.warning(f"Permission denied reading {ignore_path}: {e}")
            return 0
        except OSError as e:
            logger.warning(f"Error reading {ignore_path}: {e}")
            return 0

        rules = []
        for line in content.splitlines():
            rule = IgnoreRule.parse(line)
            if rule is None:
                continue
            if not rule.matcher.valid:
                # Kept so line order is preserved; it simply never matches
                logger.warning(f"Pattern '{line.strip()}' in {ignore_path} will never match")
            rules.append(rule)

        if rules:
            self._rules[directory] = tuple(rules)
            logger.debug(f"Loaded {len(rules)} patterns from {ignore_path}")

        return len(rules)

    def rules_for(self, directory: Path | str) -> tuple[IgnoreRule, ...]:
        """Return the ordered rules defined in ``directory`` (empty if none)."""
        return self._rules.get(_absolute(directory), ())

    def is_loaded(self, directory: Path | str) -> bool:
        return _absolute(directory) in self._loaded

    @property
    def pattern_count(self) -> int:
        """Return the total number of loaded rules."""
        return sum(len(rules) for rules in self._rules.values())

    def _scoped_rules(self, path: Path) -> list[tuple[Path, tuple[IgnoreRule, ...]]]:
        """Ancestors of ``path`` that own rules, farthest first."""
        scoped = []
        for ancestor in path.parents:
            rules = self._rules.get(ancestor)
            if rules:
                scoped.append((ancestor, rules))
        scoped.reverse()
        return scoped

    def is_ignored(self, path: Path | str, is_dir: bool) -> bool:
        """
        Decide whether the loaded rules ignore ``path``.

        Every rule of every ancestor directory is evaluated against the path
        relative to that ancestor. Ancestors are scanned farthest first and
        each matching rule overwrites the running decision, so the nearest
        directory's last matching rule is the final answer.

        Args:
            path: Path to check
            is_dir: True if the path is a directory

        Returns:
            True if the path should be ignored
        """
        path = _absolute(path)
        ignored = False

        for ancestor, rules in self._scoped_rules(path):
            relative = path.relative_to(ancestor).as_posix()
            for rule in rules:
                if rule.matches(relative, is_dir):
                    ignored = not rule.negated

        return ignored

    def has_negations_in_scope(self, path: Path | str) -> bool:
        """True if any ancestor of ``path`` (or the path itself) defines a negation rule."""
        path = _absolute(path)
        candidates = [path, *path.parents]
        return any(
            rule.negated for directory in candidates for rule in self._rules.get(directory, ())
        )

    def get_loaded_gitignore_summary(self) -> dict[Path, int]:
        """Return a mapping of ignore file path to number of rules loaded from it."""
        return {
            directory / self._filename: len(rules) for directory, rules in self._rules.items()
        }

    def log_verbose_summary(self) -> None:
        """Log which ignore files contributed rules during this run."""
        summary = self.get_loaded_gitignore_summary()
        if not summary:
            logger.info("No .gitignore files loaded")
            return

        for ignore_path, count in summary.items():
            noun = "pattern" if count == 1 else "patterns"
            logger.info(f"{ignore_path}: {count} {noun}")
