"""
Property-based tests for gitignore-style pattern compilation.
"""

import logging

from hypothesis import assume, given, settings
from hypothesis import strategies as st

from codedump.core.ignore_pattern import compile_pattern, pattern_to_regex


# =============================================================================
# Strategies for generating test data
# =============================================================================

# Name characters that carry no pattern meaning
name_chars = st.sampled_from(
    list("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_-.")
)

simple_name = st.text(name_chars, min_size=1, max_size=20).filter(
    lambda s: s not in (".", "..")
)

directory_segments = st.lists(simple_name, min_size=1, max_size=4)


# =============================================================================
# Property Tests
# =============================================================================


@given(name=simple_name, parents=directory_segments)
@settings(max_examples=100, deadline=None)
def test_unanchored_pattern_matches_at_any_depth(name, parents):
    """An unanchored name matches the entry itself at the root and at any depth."""
    predicate = compile_pattern(name)

    assert predicate(name, False)
    assert predicate("/".join([*parents, name]), False)
    assert predicate("/".join([*parents, name]), True)


@given(name=simple_name, parents=directory_segments)
@settings(max_examples=100, deadline=None)
def test_anchored_pattern_matches_only_at_rule_directory(name, parents):
    """A leading slash anchors the pattern to the directory owning the rule."""
    assume(parents[0] != name)
    predicate = compile_pattern(f"/{name}")

    assert predicate(name, False)
    assert predicate(f"{name}/child.txt", False)
    assert not predicate("/".join([*parents, name]), False)


@given(name=simple_name, parents=st.lists(simple_name, min_size=0, max_size=3))
@settings(max_examples=100, deadline=None)
def test_directory_only_pattern_never_matches_file_of_same_name(name, parents):
    """A trailing slash excludes plain files named like the pattern."""
    assume(name not in parents)
    predicate = compile_pattern(f"{name}/")
    path = "/".join([*parents, name])

    assert not predicate(path, False)
    assert predicate(path, True)
    assert predicate(f"{path}/inner.txt", False)


@given(name=simple_name, suffix=simple_name)
@settings(max_examples=100, deadline=None)
def test_pattern_is_matched_literally_not_as_prefix(name, suffix):
    """A plain pattern never matches a longer name that merely starts with it."""
    predicate = compile_pattern(name)

    assert not predicate(f"{name}{suffix}x", False)


class TestWildcards:
    """Wildcard translation."""

    def test_star_matches_within_one_segment(self):
        predicate = compile_pattern("*.log")

        assert predicate("debug.log", False)
        assert predicate("logs/debug.log", False)
        assert not predicate("debug.log.txt", False)
        assert not predicate("debug.logs", False)

    def test_question_mark_matches_exactly_one_character(self):
        predicate = compile_pattern("file?.txt")

        assert predicate("file1.txt", False)
        assert not predicate("file.txt", False)
        assert not predicate("file12.txt", False)
        assert not predicate("file/.txt", False)

    def test_double_star_crosses_segments(self):
        predicate = compile_pattern("docs/**/draft.md")

        assert predicate("docs/a/b/c/draft.md", False)
        assert predicate("project/docs/x/draft.md", False)
        assert not predicate("docs/draft.txt", False)

    def test_star_does_not_cross_segments(self):
        predicate = compile_pattern("/src/*.py")

        assert predicate("src/main.py", False)
        assert not predicate("src/pkg/main.py", False)

    def test_regex_metacharacters_are_literal(self):
        predicate = compile_pattern("file(1)+[a].txt")

        assert predicate("file(1)+[a].txt", False)
        assert not predicate("file1a.txt", False)
        assert not predicate("fileX1)+[a]Xtxt", False)

    def test_dot_is_not_a_wildcard(self):
        predicate = compile_pattern("a.b")

        assert predicate("a.b", False)
        assert not predicate("axb", False)


class TestPatternToRegex:
    """Raw translation output."""

    def test_unanchored_prefix(self):
        assert pattern_to_regex("foo") == "(?:^|.*/)foo"

    def test_anchored_prefix(self):
        assert pattern_to_regex("/foo") == "^foo"

    def test_wildcards(self):
        assert pattern_to_regex("**/*.?s") == "(?:^|.*/).*/[^/]*\\.[^/]s"


class TestMalformedPatterns:
    """Patterns that do not translate into a valid regular expression."""

    def test_trailing_backslash_never_matches(self, caplog):
        with caplog.at_level(logging.WARNING):
            predicate = compile_pattern("broken\\")

        assert not predicate.valid
        assert not predicate("broken\\", False)
        assert not predicate("broken", False)

    def test_brackets_are_escaped_not_classes(self):
        predicate = compile_pattern("[ab].txt")

        assert predicate.valid
        assert predicate("[ab].txt", False)
        assert not predicate("a.txt", False)

    def test_compiled_patterns_are_cached(self):
        assert compile_pattern("*.pyc") is compile_pattern("*.pyc")
