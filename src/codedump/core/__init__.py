"""
Core Layer - Pattern matching, gitignore rules, filtering, tree walking and rendering.
"""

from codedump.core.config import (
    CodeDumpConfig,
    DumpConfig,
    FilterOptions,
    LoggingConfig,
    find_config_file,
    load_config,
)
from codedump.core.emitter import (
    MAX_CONTENT_BYTES,
    TRUNCATION_NOTICE,
    ContentEmitter,
    OutputFormat,
    format_size,
    minify,
    render_record,
)
from codedump.core.errors import (
    CodeDumpError,
    OutputWriteError,
    RootNotADirectoryError,
    RootNotFoundError,
)
from codedump.core.file_scanner import (
    FileRecord,
    TreeWalker,
    TreeWalkerInterface,
    WalkEntry,
    WalkError,
)
from codedump.core.filter_policy import FilterConfig, FilterPolicy
from codedump.core.gitignore_manager import IgnoreRule, IgnoreRuleStore
from codedump.core.ignore_pattern import CompiledPattern, compile_pattern, pattern_to_regex
from codedump.core.path_utils import (
    default_output_name,
    ensure_dump_root,
    resolve_output_path,
)

__all__ = [
    # Config
    "CodeDumpConfig",
    "DumpConfig",
    "FilterOptions",
    "LoggingConfig",
    "find_config_file",
    "load_config",
    # Errors
    "CodeDumpError",
    "RootNotFoundError",
    "RootNotADirectoryError",
    "OutputWriteError",
    # Pattern matching and ignore rules
    "CompiledPattern",
    "compile_pattern",
    "pattern_to_regex",
    "IgnoreRule",
    "IgnoreRuleStore",
    # Filtering
    "FilterConfig",
    "FilterPolicy",
    # Tree walker
    "TreeWalker",
    "TreeWalkerInterface",
    "FileRecord",
    "WalkError",
    "WalkEntry",
    # Emitter
    "ContentEmitter",
    "OutputFormat",
    "MAX_CONTENT_BYTES",
    "TRUNCATION_NOTICE",
    "format_size",
    "minify",
    "render_record",
    # Paths
    "ensure_dump_root",
    "default_output_name",
    "resolve_output_path",
]
