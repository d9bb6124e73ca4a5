"""
Path utilities for codedump.

Root directory checks and output file naming, shared by the tree walker
and the service layer.
"""

import os
from pathlib import Path
from typing import Optional

from codedump.core.errors import RootNotADirectoryError, RootNotFoundError

OUTPUT_SUFFIX = ".txt"


def ensure_dump_root(path: str | Path) -> Path:
    """
    Check the walk precondition, raising on failure.

    Raises:
        RootNotFoundError: If the path does not exist
        RootNotADirectoryError: If the path is not a directory
    """
    p = Path(path)
    if not p.exists():
        raise RootNotFoundError(f"Directory '{path}' does not exist")
    if not p.is_dir():
        raise RootNotADirectoryError(f"Path '{path}' is not a directory")
    return p


def default_output_name(root: str | Path) -> str:
    """
    Derive the output filename from the dumped directory's name.

    ``src`` becomes ``src.txt``; a name already ending in .txt is kept.
    """
    name = Path(os.path.abspath(root)).name or "root"
    return name if name.endswith(OUTPUT_SUFFIX) else f"{name}{OUTPUT_SUFFIX}"


def resolve_output_path(
    root: str | Path,
    output: Optional[str | Path] = None,
    cwd: Optional[Path] = None,
) -> Path:
    """
    Resolve where the dump is written.

    Args:
        root: Directory being dumped
        output: Explicit output path; derived from ``root`` when empty
        cwd: Base for relative paths (default: current working directory)

    Returns:
        Absolute output path
    """
    base = cwd if cwd is not None else Path.cwd()
    target = Path(output) if output else Path(default_output_name(root))
    if not target.is_absolute():
        target = base / target
    return Path(os.path.abspath(target))
