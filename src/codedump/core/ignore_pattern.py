"""
Gitignore-style pattern compilation for codedump.

Translates one pattern line into a predicate over a path relative to the
directory that owns the rule. Supported syntax:
- Directory-only patterns (trailing /)
- Anchored patterns (leading /)
- Single-segment wildcards (* and ?)
- Cross-segment wildcards (**)

Bracket classes and backslash escapes are not interpreted; regex
metacharacters in the pattern are escaped and matched literally.
"""

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, Optional

logger = logging.getLogger(__name__)

PathPredicate = Callable[[str, bool], bool]

# Escaped before any wildcard is reinterpreted. Backslash is left alone, so a
# dangling escape produces an invalid regex and the pattern never matches.
_REGEX_SPECIALS = re.compile(r"[.+^$|()\[\]{}]")

_DOUBLE_STAR_TOKEN = "\x00DOUBLE_STAR\x00"


def pattern_to_regex(pattern: str) -> str:
    """
    Translate a pattern body into an unterminated regular expression.

    The returned string matches from the start of a relative path up to the
    end of the pattern; callers append the terminator that decides whether
    deeper paths match too.

    Args:
        pattern: Pattern text with any trailing "/" already removed

    Returns:
        Regular expression source
    """
    regex = _REGEX_SPECIALS.sub(lambda m: "\\" + m.group(0), pattern)

    regex = regex.replace("**", _DOUBLE_STAR_TOKEN)
    regex = regex.replace("*", "[^/]*")
    regex = regex.replace(_DOUBLE_STAR_TOKEN, ".*")
    regex = regex.replace("?", "[^/]")

    if regex.startswith("/"):
        return "^" + regex[1:]
    return "(?:^|.*/)" + regex


@dataclass(frozen=True)
class CompiledPattern:
    """
    A compiled ignore pattern.

    Attributes:
        pattern: Pattern text as written in the ignore file (without "!")
        directory_only: True if the pattern ended with "/"
        exact: Matches the path itself or anything beneath it
        subtree: Matches only paths strictly beneath a matching directory
    """

    pattern: str
    directory_only: bool
    exact: Optional[re.Pattern]
    subtree: Optional[re.Pattern]

    @property
    def valid(self) -> bool:
        return self.exact is not None

    def matches(self, relative_path: str, is_dir: bool) -> bool:
        """
        Check a path relative to the rule's directory against this pattern.

        A directory-only pattern never matches a plain file by name, but it
        still matches files that live under a matching directory.
        """
        if self.exact is None or self.subtree is None:
            return False

        if self.directory_only and not is_dir:
            return self.subtree.match(relative_path) is not None
        return self.exact.match(relative_path) is not None

    __call__ = matches


@lru_cache(maxsize=4096)
def compile_pattern(pattern: str) -> CompiledPattern:
    """
    Compile a gitignore-style pattern into a path predicate.

    A pattern that does not translate into a valid regular expression is
    logged and compiled into a predicate that never matches.

    Args:
        pattern: Pattern text without a leading "!"

    Returns:
        CompiledPattern usable as ``predicate(relative_path, is_dir)``
    """
    directory_only = pattern.endswith("/")
    body = pattern[:-1] if directory_only else pattern

    regex = pattern_to_regex(body)
    if regex.endswith("/"):
        exact_source = subtree_source = regex + ".*$"
    else:
        exact_source = regex + "(?:/.*)?$"
        subtree_source = regex + "/.*$"

    try:
        exact = re.compile(exact_source)
        subtree = re.compile(subtree_source)
    except re.error as e:
        logger.warning(f"Malformed ignore pattern '{pattern}': {e}")
        return CompiledPattern(pattern, directory_only, None, None)

    return CompiledPattern(pattern, directory_only, exact, subtree)
