"""
Dump Service for codedump.

Coordinates one dump run: root validation, output path resolution, the
largest-files pass, rendering every kept file and writing the result once.
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from codedump.core.config import FilterOptions
from codedump.core.emitter import ContentEmitter, OutputFormat
from codedump.core.errors import OutputWriteError
from codedump.core.file_scanner import (
    ImportExtractorRegistry,
    LanguageRegistry,
    TreeWalker,
    WalkError,
)
from codedump.core.filter_policy import FilterConfig
from codedump.core.io_utils import run_blocking
from codedump.core.path_utils import ensure_dump_root, resolve_output_path

logger = logging.getLogger(__name__)


@dataclass
class DumpResult:
    """Result of a dump run."""

    root: Path
    output_path: Path
    output_type: OutputFormat
    file_count: int = 0
    error_count: int = 0
    largest_files: list[tuple[int, Path]] = field(default_factory=list)
    duration_seconds: float = 0.0


@dataclass
class _Rendered:
    text: str
    file_count: int
    error_count: int


def _write_output(output_path: Path, text: str) -> None:
    # Undecodable file names come back out as their original bytes
    output_path.write_text(text, encoding="utf-8", errors="surrogateescape")


class DumpService:
    """
    Service for dumping a directory tree into one text document.

    Each call builds its own walker state, so one service instance can serve
    any number of runs.
    """

    def __init__(
        self,
        filter_options: Optional[FilterOptions] = None,
        language_registry: Optional[LanguageRegistry] = None,
        import_registry: Optional[ImportExtractorRegistry] = None,
    ):
        """
        Initialize the dump service.

        Args:
            filter_options: Filter overrides (default: built-in filter sets)
            language_registry: Registry for language detection (default: global)
            import_registry: Registry for import detection (default: global)
        """
        self._filter_config = FilterConfig.from_options(filter_options)
        self._language_registry = language_registry
        self._import_registry = import_registry

    @property
    def filter_config(self) -> FilterConfig:
        return self._filter_config

    def _create_walker(self, output_path: Optional[Path | str]) -> TreeWalker:
        return TreeWalker(
            filter_config=self._filter_config.with_output_path(output_path),
            language_registry=self._language_registry,
        )

    async def _render(
        self,
        root: Path | str,
        fmt: OutputFormat,
        output_path: Optional[Path | str],
    ) -> _Rendered:
        walker = self._create_walker(output_path)
        emitter = ContentEmitter(fmt, import_registry=self._import_registry)

        fragments = []
        file_count = 0
        error_count = 0
        async for entry in walker.iter_entries(root):
            if isinstance(entry, WalkError):
                error_count += 1
            else:
                file_count += 1
            fragments.append(await emitter.emit(entry))

        return _Rendered(
            text=emitter.join(fragments),
            file_count=file_count,
            error_count=error_count,
        )

    async def concatenate(
        self,
        root: Path | str,
        fmt: OutputFormat | str = OutputFormat.NORMAL,
        output_path: Optional[Path | str] = None,
    ) -> str:
        """
        Render every kept file under ``root``.

        Args:
            root: Directory to dump
            fmt: Output format
            output_path: Output file excluded from the walk

        Returns:
            The full document, to be written verbatim

        Raises:
            RootNotFoundError: If the root does not exist
            RootNotADirectoryError: If the root is not a directory
        """
        rendered = await self._render(root, OutputFormat(fmt), output_path)
        return rendered.text

    async def largest_files(
        self,
        root: Path | str,
        top_n: int = 10,
        output_path: Optional[Path | str] = None,
    ) -> list[tuple[int, Path]]:
        """
        Rank kept files by size with an independent, stat-only walk.

        Returns:
            (size, path) pairs, largest first; ties keep traversal order
        """
        walker = self._create_walker(output_path)
        return await walker.largest_files(root, top_n)

    async def run(
        self,
        root: Path | str,
        output: Optional[Path | str] = None,
        fmt: OutputFormat | str = OutputFormat.NORMAL,
        top_n: int = 10,
        show_largest_files: bool = True,
        cwd: Optional[Path] = None,
    ) -> DumpResult:
        """
        Dump ``root`` into a file.

        Args:
            root: Directory to dump
            output: Output file; ``<root name>.txt`` in ``cwd`` when empty
            fmt: Output format
            top_n: Number of largest files to rank
            show_largest_files: Whether to run the largest-files pass
            cwd: Base for relative paths (default: current working directory)

        Returns:
            DumpResult with the written path, counts and largest files

        Raises:
            RootNotFoundError: If the root does not exist
            RootNotADirectoryError: If the root is not a directory
            OutputWriteError: If the output file cannot be written
        """
        start_time = time.time()
        fmt = OutputFormat(fmt)
        root_path = ensure_dump_root(root)
        output_path = resolve_output_path(root_path, output, cwd)

        logger.info(f"Dumping {root_path} to {output_path} ({fmt.value} format)")

        largest = []
        if show_largest_files:
            largest = await self.largest_files(root_path, top_n, output_path)

        rendered = await self._render(root_path, fmt, output_path)

        try:
            await run_blocking(_write_output, output_path, rendered.text)
        except OSError as e:
            raise OutputWriteError(f"Failed to write output file {output_path}: {e}") from e

        result = DumpResult(
            root=root_path,
            output_path=output_path,
            output_type=fmt,
            file_count=rendered.file_count,
            error_count=rendered.error_count,
            largest_files=largest,
            duration_seconds=time.time() - start_time,
        )
        logger.info(
            f"Wrote {result.file_count} file(s) to {output_path} "
            f"with {result.error_count} error(s) in {result.duration_seconds:.2f}s"
        )
        return result
