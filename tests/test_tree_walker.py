"""
Tests for TreeWalker traversal order, filtering and error recovery.
"""

import os
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from codedump.core.errors import RootNotADirectoryError, RootNotFoundError
from codedump.core.file_scanner import FileRecord, TreeWalker, WalkError
from codedump.core.file_scanner import scanner as scanner_module

symlinks_supported = pytest.mark.skipif(
    sys.platform == "win32", reason="Symlinks need elevated privileges on Windows"
)


def relative_paths(root: Path, records: list[FileRecord]) -> list[str]:
    return [record.path.relative_to(root).as_posix() for record in records]


class TestTraversalOrder:
    """Depth-first, directories before files, code-point name order."""

    @pytest.mark.asyncio
    async def test_directories_first_then_files(self, make_tree, make_filter_config):
        root = make_tree(
            {
                "b.py": "",
                "A.py": "",
                "a.py": "",
                "z/x.py": "",
                "B/y.py": "",
                "B/inner/deep.py": "",
            }
        )
        walker = TreeWalker(make_filter_config())

        records = await walker.walk(root)

        assert relative_paths(root, records) == [
            "B/inner/deep.py",
            "B/y.py",
            "z/x.py",
            "A.py",
            "a.py",
            "b.py",
        ]

    @pytest.mark.asyncio
    async def test_repeated_walks_are_identical(self, make_tree, make_filter_config):
        root = make_tree({f"pkg{i % 3}/mod{i}.py": "x" * i for i in range(12)})
        walker = TreeWalker(make_filter_config())

        first = await walker.walk(root)
        second = await walker.walk(root)

        assert [r.path for r in first] == [r.path for r in second]

    @pytest.mark.asyncio
    async def test_paths_keep_root_prefix(self, make_tree, make_filter_config):
        root = make_tree({"src/app.py": ""})

        records = await TreeWalker(make_filter_config()).walk(root)

        assert records[0].path == root / "src" / "app.py"


class TestFiltering:
    """Static filters and .gitignore rules applied during the walk."""

    @pytest.mark.asyncio
    async def test_skipped_directories_not_descended(self, make_tree):
        root = make_tree(
            {
                "node_modules/lib/index.js": "",
                "pkg.egg-info/PKG-INFO.txt": "",
                "src/index.js": "",
                "README.md": "",
            }
        )

        records = await TreeWalker().walk(root)

        assert relative_paths(root, records) == ["src/index.js", "README.md"]

    @pytest.mark.asyncio
    async def test_root_gitignore_round_trip(self, make_tree, make_filter_config):
        root = make_tree(
            {
                ".gitignore": "*.log\n",
                "app.log": "",
                "keep.log": "",
                "main.py": "",
                "sub/.gitignore": "!keep.log\n",
                "sub/keep.log": "",
                "sub/other.log": "",
                "sub/deep/keep.log": "",
                "other/keep.log": "",
            }
        )

        records = await TreeWalker(make_filter_config()).walk(root)

        assert relative_paths(root, records) == ["sub/deep/keep.log", "sub/keep.log", "main.py"]

    @pytest.mark.asyncio
    async def test_negated_file_inside_ignored_directory(self, make_tree, make_filter_config):
        root = make_tree(
            {
                ".gitignore": "build/\n!build/keep.txt\n",
                "build/keep.txt": "",
                "build/drop.txt": "",
                "build/nested/drop.txt": "",
                "main.py": "",
            }
        )

        records = await TreeWalker(make_filter_config()).walk(root)

        assert relative_paths(root, records) == ["build/keep.txt", "main.py"]

    @pytest.mark.asyncio
    async def test_nested_gitignore_loaded_before_children_judged(self, make_tree, make_filter_config):
        root = make_tree(
            {
                "a/.gitignore": "secret.txt\n",
                "a/secret.txt": "",
                "a/public.txt": "",
                "b/secret.txt": "",
            }
        )

        records = await TreeWalker(make_filter_config()).walk(root)

        assert relative_paths(root, records) == ["a/public.txt", "b/secret.txt"]

    @pytest.mark.asyncio
    async def test_output_file_excluded(self, make_tree, make_filter_config):
        root = make_tree({"main.py": "", "project.txt": "old dump"})
        config = make_filter_config(output_path=None).with_output_path(root / "project.txt")

        records = await TreeWalker(config).walk(root)

        assert relative_paths(root, records) == ["main.py"]

    @pytest.mark.asyncio
    async def test_each_walk_has_its_own_rules(self, make_tree, make_filter_config):
        root = make_tree({".gitignore": "a.txt\n", "a.txt": "", "b.txt": ""})
        walker = TreeWalker(make_filter_config())

        assert relative_paths(root, await walker.walk(root)) == ["b.txt"]

        (root / ".gitignore").write_text("b.txt\n", encoding="utf-8")
        assert relative_paths(root, await walker.walk(root)) == ["a.txt"]


@symlinks_supported
class TestSymlinks:
    """Cycle and duplicate suppression by canonical path."""

    @pytest.mark.asyncio
    async def test_symlink_to_ancestor_terminates(self, make_tree, make_filter_config):
        root = make_tree({"a.py": "", "sub/b.py": ""})
        os.symlink(root, root / "sub" / "loop", target_is_directory=True)

        records = await TreeWalker(make_filter_config()).walk(root)

        paths = relative_paths(root, records)
        assert paths == ["sub/b.py", "a.py"]
        assert len(set(paths)) == len(paths)

    @pytest.mark.asyncio
    async def test_symlinked_file_emitted_once(self, make_tree, make_filter_config):
        root = make_tree({"a.py": "print(1)"})
        os.symlink(root / "a.py", root / "b.py")

        records = await TreeWalker(make_filter_config()).walk(root)

        assert relative_paths(root, records) == ["a.py"]

    @pytest.mark.asyncio
    async def test_broken_symlink_ignored(self, make_tree, make_filter_config):
        root = make_tree({"a.py": ""})
        os.symlink(root / "missing.py", root / "dangling.py")

        records = await TreeWalker(make_filter_config()).walk(root)

        assert relative_paths(root, records) == ["a.py"]


class TestErrors:
    """Fatal root errors and recoverable per-entry errors."""

    @pytest.mark.asyncio
    async def test_missing_root(self, tmp_path):
        with pytest.raises(RootNotFoundError):
            await TreeWalker().walk(tmp_path / "missing")

    @pytest.mark.asyncio
    async def test_root_is_a_file(self, tmp_path):
        target = tmp_path / "file.py"
        target.write_text("", encoding="utf-8")

        with pytest.raises(RootNotADirectoryError):
            await TreeWalker().walk(target)

    @pytest.mark.asyncio
    async def test_unreadable_directory_reported_and_walk_continues(
        self, make_tree, make_filter_config, caplog
    ):
        root = make_tree({"locked/inner.py": "", "open/ok.py": "", "top.py": ""})
        real_list_directory = scanner_module._list_directory

        def flaky_list_directory(directory):
            if directory.name == "locked":
                raise PermissionError(13, "Permission denied", str(directory))
            return real_list_directory(directory)

        walker = TreeWalker(make_filter_config())
        with patch.object(scanner_module, "_list_directory", side_effect=flaky_list_directory):
            entries = [entry async for entry in walker.iter_entries(root)]

        errors = [entry for entry in entries if isinstance(entry, WalkError)]
        files = [entry for entry in entries if isinstance(entry, FileRecord)]

        assert len(errors) == 1
        assert errors[0].path == root / "locked"
        assert errors[0].is_dir
        assert "Permission denied" in errors[0].message
        assert relative_paths(root, files) == ["open/ok.py", "top.py"]
        assert any("Permission denied" in r.message for r in caplog.records)

    @pytest.mark.asyncio
    async def test_unsearchable_directory_gitignore_check_does_not_abort(
        self, make_tree, make_filter_config
    ):
        root = make_tree({"locked/inner.py": "", "top.py": ""})
        real_is_file = Path.is_file
        real_list_directory = scanner_module._list_directory

        def denied_is_file(self, *args, **kwargs):
            if self.parent.name == "locked":
                raise PermissionError(13, "Permission denied", str(self))
            return real_is_file(self, *args, **kwargs)

        def denied_list_directory(directory):
            if directory.name == "locked":
                raise PermissionError(13, "Permission denied", str(directory))
            return real_list_directory(directory)

        walker = TreeWalker(make_filter_config())
        with patch.object(Path, "is_file", denied_is_file), patch.object(
            scanner_module, "_list_directory", side_effect=denied_list_directory
        ):
            entries = [entry async for entry in walker.iter_entries(root)]

        errors = [entry for entry in entries if isinstance(entry, WalkError)]
        files = [entry for entry in entries if isinstance(entry, FileRecord)]

        assert [error.path for error in errors] == [root / "locked"]
        assert relative_paths(root, files) == ["top.py"]


class TestRecords:
    """Stat-only metadata on each kept file."""

    @pytest.mark.asyncio
    async def test_record_metadata(self, make_tree, make_filter_config):
        root = make_tree({"src/app.py": "import os\n", "tests/test_app.py": ""})

        records = await TreeWalker(make_filter_config()).walk(root)
        by_name = {record.path.name: record for record in records}

        app = by_name["app.py"]
        assert app.size == len("import os\n")
        assert app.language == "Python"
        assert app.file_type == "Source"
        assert app.line_count is None
        assert app.imports is None
        assert by_name["test_app.py"].file_type == "Test"


class TestLargestFiles:
    """Independent size ranking."""

    @pytest.mark.asyncio
    async def test_sorted_by_size_descending(self, make_tree, make_filter_config):
        root = make_tree({"small.py": "x", "big.py": "x" * 100, "mid/mid.py": "x" * 10})

        ranking = await TreeWalker(make_filter_config()).largest_files(root, top_n=10)

        assert [(size, path.name) for size, path in ranking] == [
            (100, "big.py"),
            (10, "mid.py"),
            (1, "small.py"),
        ]

    @pytest.mark.asyncio
    async def test_ties_keep_traversal_order(self, make_tree, make_filter_config):
        root = make_tree({"b.py": "xx", "a.py": "xx", "dir/c.py": "xx", "z.py": "xxx"})

        ranking = await TreeWalker(make_filter_config()).largest_files(root, top_n=3)

        assert [path.name for _, path in ranking] == ["z.py", "c.py", "a.py"]

    @pytest.mark.asyncio
    async def test_non_positive_top_n(self, make_tree, make_filter_config):
        root = make_tree({"a.py": "x"})

        assert await TreeWalker(make_filter_config()).largest_files(root, top_n=0) == []
