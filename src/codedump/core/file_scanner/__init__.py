"""
Tree walker module for codedump.

Provides deterministic, filtered directory traversal with gitignore support,
symlink cycle protection and per-file metadata.
"""

from .classifier import classify_file_type, is_binary_extension
from .import_extractors import ImportExtractorRegistry, get_import_registry
from .interfaces import TreeWalkerInterface
from .language_registry import LanguageRegistry, get_default_registry
from .models import FileRecord, WalkEntry, WalkError, format_timestamp
from .scanner import TreeWalker

__all__ = [
    # Main classes
    "TreeWalker",
    "TreeWalkerInterface",
    "FileRecord",
    "WalkError",
    "WalkEntry",
    # Metadata helpers
    "LanguageRegistry",
    "get_default_registry",
    "ImportExtractorRegistry",
    "get_import_registry",
    "classify_file_type",
    "is_binary_extension",
    "format_timestamp",
]
