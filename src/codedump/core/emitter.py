"""
Content emitter for codedump.

Renders kept files into one of four output formats:
- list: paths only, file content is never read
- normal: banner, path, banner, raw content
- verbose: like normal with a metadata block inside the banner
- minify: lighter banner, path, whitespace-minified content
"""

import logging
import re
from dataclasses import replace
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional

from codedump.core.file_scanner import (
    FileRecord,
    ImportExtractorRegistry,
    WalkEntry,
    WalkError,
    get_import_registry,
    is_binary_extension,
)
from codedump.core.io_utils import run_blocking

logger = logging.getLogger(__name__)

# Files strictly larger than this are replaced by TRUNCATION_NOTICE
MAX_CONTENT_BYTES = 1024 * 1024

TRUNCATION_NOTICE = "[File content truncated - file exceeds 1MB]"

BANNER = "=" * 60
MINIFY_BANNER = "=" * 10

_SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")

_BLANK_LINE_RUN_RE = re.compile(r"\n\s*\n\s*\n")
_HORIZONTAL_WS_RE = re.compile(r"[ \t]+")
_TRAILING_WS_RE = re.compile(r"[ \t]+$", re.MULTILINE)


class OutputFormat(str, Enum):
    """Output format, selected once per run."""

    LIST = "list"
    NORMAL = "normal"
    VERBOSE = "verbose"
    MINIFY = "minify"

    @property
    def reads_content(self) -> bool:
        return self is not OutputFormat.LIST


def format_size(size: float) -> str:
    """
    Format a byte count with two decimals and a binary unit.

    Example:
        >>> format_size(1536)
        '1.50 KB'
    """
    value = float(size)
    unit_index = 0
    while value >= 1024 and unit_index < len(_SIZE_UNITS) - 1:
        value /= 1024
        unit_index += 1
    return f"{value:.2f} {_SIZE_UNITS[unit_index]}"


def minify(content: str) -> str:
    """
    Minimise whitespace in file content.

    Collapses runs of blank lines to one blank line and runs of spaces/tabs to
    one space, strips trailing whitespace per line and trims the whole text.
    """
    content = _BLANK_LINE_RUN_RE.sub("\n\n", content)
    content = _HORIZONTAL_WS_RE.sub(" ", content)
    content = _TRAILING_WS_RE.sub("", content)
    return content.strip()


def _metadata_lines(record: FileRecord) -> list[str]:
    lines = [
        f"Size: {format_size(record.size)}",
        f"Language: {record.language or 'Unknown'}",
        f"Type: {record.file_type or 'Unknown'}",
    ]
    if record.line_count:
        lines.append(f"Lines: {record.line_count}")
    if record.imports:
        lines.append(f"Imports: {', '.join(record.imports)}")
    lines.append(f"Last Modified: {record.last_modified}")
    return lines


def render_record(
    fmt: OutputFormat,
    record: FileRecord,
    content: Optional[str] = None,
    read_error: Optional[str] = None,
) -> str:
    """
    Render one kept file.

    Args:
        fmt: Output format
        record: File being rendered
        content: Raw file content (unused for list format and oversized files)
        read_error: Read failure message, rendered in place of the content

    Returns:
        Text fragment for this file
    """
    path = str(record.path)

    if fmt is OutputFormat.LIST:
        return path

    if record.size > MAX_CONTENT_BYTES:
        body = TRUNCATION_NOTICE
    elif read_error is not None:
        body = f"Error reading file: {read_error}"
    else:
        body = content or ""
        if fmt is OutputFormat.MINIFY:
            body = minify(body)

    if fmt is OutputFormat.MINIFY:
        return f"\n\n{MINIFY_BANNER}\nFile: {path}\n{MINIFY_BANNER}\n{body}"

    header = [f"File: {path}"]
    if fmt is OutputFormat.VERBOSE:
        header.extend(_metadata_lines(record))

    return "\n".join(["", "", BANNER, *header, BANNER, "", body])


def render_error(error: WalkError) -> str:
    """Render an inline notice for an entry the walk could not access."""
    kind = "directory" if error.is_dir else "file"
    return f"Error accessing {kind} {error.path}: {error.message}"


def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="replace")


class ContentEmitter:
    """
    Turns walk entries into output fragments for a single format.

    File content is read lazily, one file at a time, and only for formats
    that include it.
    """

    def __init__(
        self,
        fmt: OutputFormat | str = OutputFormat.NORMAL,
        import_registry: Optional[ImportExtractorRegistry] = None,
    ):
        self._format = OutputFormat(fmt)
        self._import_registry = import_registry or get_import_registry()

    @property
    def format(self) -> OutputFormat:
        return self._format

    def _with_content_metadata(self, record: FileRecord, content: str) -> FileRecord:
        """Add line count and imports, computed only for small text files."""
        if record.size >= MAX_CONTENT_BYTES or is_binary_extension(record.path.suffix):
            return record

        imports = None
        language = record.language or ""
        if self._import_registry.supports(language):
            imports = tuple(self._import_registry.extract_imports(content, language))

        return replace(record, line_count=len(content.split("\n")), imports=imports)

    async def emit(self, entry: WalkEntry) -> str:
        """
        Render one walk entry, reading the file if the format needs it.

        Read failures become an inline notice rather than an exception.
        """
        if isinstance(entry, WalkError):
            return render_error(entry)

        record = entry
        if not self._format.reads_content or record.size > MAX_CONTENT_BYTES:
            return render_record(self._format, record)

        try:
            content = await run_blocking(_read_text, record.path)
        except OSError as e:
            logger.warning(f"Error reading file: {record.path} - {e}")
            return render_record(self._format, record, read_error=str(e))

        if self._format is OutputFormat.VERBOSE:
            record = self._with_content_metadata(record, content)

        return render_record(self._format, record, content=content)

    @staticmethod
    def join(fragments: Iterable[str]) -> str:
        """Combine rendered fragments into the final document."""
        return "\n".join(fragments)
