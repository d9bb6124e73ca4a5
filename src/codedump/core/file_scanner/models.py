"""
Data models for the tree walker.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_timestamp(timestamp: float) -> str:
    """Format a Unix timestamp as ``YYYY-MM-DD HH:MM:SS`` in UTC."""
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime(TIMESTAMP_FORMAT)


@dataclass(frozen=True)
class FileRecord:
    """
    A kept file, recomputed on every run.

    Attributes:
        path: Path as reached from the walk root (root-relative when the root is)
        size: File size in bytes
        modified_time: Modification timestamp (Unix epoch)
        language: Detected language display name
        file_type: Heuristic classification (Source, Test, Configuration, ...)
        line_count: Number of lines, when computed
        imports: Detected import/module names, when computed
    """

    path: Path
    size: int
    modified_time: float
    language: Optional[str] = None
    file_type: Optional[str] = None
    line_count: Optional[int] = None
    imports: Optional[tuple[str, ...]] = None

    @property
    def last_modified(self) -> str:
        return format_timestamp(self.modified_time)


@dataclass(frozen=True)
class WalkError:
    """
    A recoverable problem met during the walk.

    Attributes:
        path: Directory or file that could not be accessed
        message: Error description
        is_dir: True if a directory listing failed
    """

    path: Path
    message: str
    is_dir: bool = True


WalkEntry = Union[FileRecord, WalkError]
