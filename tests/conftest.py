"""Shared fixtures for codedump tests."""

from pathlib import Path
from typing import Callable

import pytest

from codedump.core.filter_policy import FilterConfig


def _write_tree(root: Path, files: dict[str, str | bytes]) -> Path:
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def make_tree(tmp_path) -> Callable[..., Path]:
    """Create files under a fresh ``project`` directory from a {relative path: content} mapping."""

    def _make(files: dict[str, str | bytes], name: str = "project") -> Path:
        root = tmp_path / name
        root.mkdir(exist_ok=True)
        return _write_tree(root, files)

    return _make


@pytest.fixture
def make_filter_config() -> Callable[..., FilterConfig]:
    """
    Build a small, explicit filter configuration.

    Unlike the built-in defaults it keeps .log files, does not skip build/
    directories and skips .gitignore files as ordinary dotfiles.
    """

    def _make(**overrides) -> FilterConfig:
        values = dict(
            allowed_extensions=frozenset({".py", ".txt", ".log", ".md", ".js"}),
            allowed_filenames=frozenset({"makefile"}),
            skip_directories=frozenset({"node_modules"}),
            skip_directory_patterns=(),
            skip_filenames=frozenset(),
            skip_patterns=(),
            output_path=None,
        )
        values.update(overrides)
        return FilterConfig(**values)

    return _make
