"""
Configuration module for codedump.

Supports loading from YAML/JSON files with environment variable overrides.
Default values are loaded from defaults.yaml for maintainability.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)

# Path to the default configuration file
_DEFAULTS_CONFIG_PATH = Path(__file__).parent / "defaults.yaml"

# Config files looked up in the working directory, first match wins
CONFIG_FILENAMES = (
    "codedump.config.yaml",
    "codedump.config.yml",
    "codedump.config.json",
    ".codedump.config.yaml",
    ".codedump.config.yml",
    ".codedump.config.json",
)

OUTPUT_TYPES = ("list", "normal", "verbose", "minify")

# Cache for default values
_defaults_cache: dict[str, Any] | None = None


def _load_defaults() -> dict[str, Any]:
    """Load default configuration values from defaults.yaml."""
    global _defaults_cache

    if _defaults_cache is not None:
        return _defaults_cache

    if not _DEFAULTS_CONFIG_PATH.exists():
        logger.warning(f"Defaults config not found: {_DEFAULTS_CONFIG_PATH}")
        _defaults_cache = {}
        return _defaults_cache

    try:
        content = _DEFAULTS_CONFIG_PATH.read_text(encoding="utf-8")
        _defaults_cache = yaml.safe_load(content) or {}
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse defaults config: {e}")
        _defaults_cache = {}

    return _defaults_cache


def _get_default(section: str, key: str, fallback: Any = None) -> Any:
    """Get a default value from the defaults config."""
    defaults = _load_defaults()
    section_defaults = defaults.get(section) or {}
    value = section_defaults.get(key, fallback)
    # Lists are copied so callers can never mutate the shared defaults
    return list(value) if isinstance(value, list) else value


def _default_list(key: str) -> list[str]:
    return [str(item) for item in _get_default("filters", key, [])]


@dataclass
class DumpConfig:
    """Run settings: what to dump, where to, and in which format."""

    directory: str = field(default_factory=lambda: _get_default("dump", "directory", ""))
    output: str = field(default_factory=lambda: _get_default("dump", "output", ""))
    type: str = field(default_factory=lambda: _get_default("dump", "type", "normal"))
    show_largest_files: bool = field(
        default_factory=lambda: _get_default("dump", "show_largest_files", True)
    )
    top_n: int = field(default_factory=lambda: _get_default("dump", "top_n", 10))

    def __post_init__(self) -> None:
        if self.type not in OUTPUT_TYPES:
            raise ValueError(
                f"Invalid output type '{self.type}', expected one of: {', '.join(OUTPUT_TYPES)}"
            )


@dataclass
class FilterOptions:
    """
    File and directory filtering options.

    An empty list means "use the built-in default"; a non-empty list replaces
    the default wholesale.
    """

    allowed_extensions: list[str] = field(default_factory=lambda: _default_list("allowed_extensions"))
    allowed_filenames: list[str] = field(default_factory=lambda: _default_list("allowed_filenames"))
    skip_directories: list[str] = field(default_factory=lambda: _default_list("skip_directories"))
    skip_directory_patterns: list[str] = field(
        default_factory=lambda: _default_list("skip_directory_patterns")
    )
    skip_filenames: list[str] = field(default_factory=lambda: _default_list("skip_filenames"))
    skip_patterns: list[str] = field(default_factory=lambda: _default_list("skip_patterns"))

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None and not isinstance(value, (list, tuple)):
                raise ValueError(
                    f"Invalid '{f.name}' filter: expected a list, got {type(value).__name__}"
                )
            if not value:
                setattr(self, f.name, _default_list(f.name))
            else:
                setattr(self, f.name, [str(item) for item in value])


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = field(default_factory=lambda: _get_default("logging", "level", "WARNING"))
    format: str = field(
        default_factory=lambda: _get_default(
            "logging", "format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
    )


def _build_section(cls: type, data: Any, section: str) -> Any:
    """Instantiate a config section, dropping unknown keys with a warning."""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid '{section}' section: expected mapping, got {type(data).__name__}")

    known = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        logger.warning(f"Ignoring unknown keys in '{section}' section: {', '.join(unknown)}")
    return cls(**{k: v for k, v in data.items() if k in known})


@dataclass
class CodeDumpConfig:
    """Main configuration class for codedump."""

    dump: DumpConfig = field(default_factory=DumpConfig)
    filters: FilterOptions = field(default_factory=FilterOptions)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, path: Path | str) -> "CodeDumpConfig":
        """
        Load configuration from a YAML or JSON file.

        Args:
            path: Path to the configuration file (.yaml, .yml, or .json)

        Returns:
            CodeDumpConfig instance with loaded values

        Raises:
            FileNotFoundError: If the config file doesn't exist
            ValueError: If the file format is unsupported or malformed
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        content = path.read_text(encoding="utf-8")

        try:
            if path.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(content) or {}
            elif path.suffix == ".json":
                data = json.loads(content) if content.strip() else {}
            else:
                raise ValueError(f"Unsupported config file format: {path.suffix}")
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ValueError(f"Invalid configuration file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Invalid configuration file {path}: expected a mapping at top level")

        logger.info(f"Loaded configuration from {path.name}")
        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict) -> "CodeDumpConfig":
        """Create CodeDumpConfig from a dictionary."""
        config = cls()

        if "dump" in data:
            config.dump = _build_section(DumpConfig, data["dump"], "dump")
        if "filters" in data:
            config.filters = _build_section(FilterOptions, data["filters"], "filters")
        if "logging" in data:
            config.logging = _build_section(LoggingConfig, data["logging"], "logging")

        return config

    def apply_env_overrides(self) -> "CodeDumpConfig":
        """
        Apply environment variable overrides to the configuration.

        Environment variables follow the pattern: CODEDUMP_<SECTION>_<KEY>
        Examples:
            - CODEDUMP_DUMP_TYPE
            - CODEDUMP_DUMP_TOP_N
            - CODEDUMP_FILTERS_SKIP_DIRECTORIES (comma separated)
            - CODEDUMP_LOGGING_LEVEL

        Returns:
            Self with environment overrides applied
        """
        env_mappings = {
            # Dump config
            "CODEDUMP_DUMP_DIRECTORY": ("dump", "directory", str),
            "CODEDUMP_DUMP_OUTPUT": ("dump", "output", str),
            "CODEDUMP_DUMP_TYPE": ("dump", "type", _parse_output_type),
            "CODEDUMP_DUMP_SHOW_LARGEST_FILES": ("dump", "show_largest_files", _parse_bool),
            "CODEDUMP_DUMP_TOP_N": ("dump", "top_n", int),
            # Filter config
            "CODEDUMP_FILTERS_ALLOWED_EXTENSIONS": ("filters", "allowed_extensions", _parse_list),
            "CODEDUMP_FILTERS_ALLOWED_FILENAMES": ("filters", "allowed_filenames", _parse_list),
            "CODEDUMP_FILTERS_SKIP_DIRECTORIES": ("filters", "skip_directories", _parse_list),
            "CODEDUMP_FILTERS_SKIP_FILENAMES": ("filters", "skip_filenames", _parse_list),
            # Logging config
            "CODEDUMP_LOGGING_LEVEL": ("logging", "level", str),
        }

        for env_var, (section, key, converter) in env_mappings.items():
            value = os.environ.get(env_var)
            if value is None:
                continue
            converted = converter(value)
            if isinstance(converted, list) and not converted:
                continue
            section_obj = getattr(self, section)
            setattr(section_obj, key, converted)

        return self

    def to_dict(self) -> dict:
        """Convert configuration to a dictionary."""
        return asdict(self)

    def to_yaml(self) -> str:
        """Serialize configuration to YAML string."""
        return yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False)

    def to_json(self) -> str:
        """Serialize configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=2)

    def save(self, path: Path | str) -> None:
        """
        Save configuration to a file.

        Args:
            path: Path to save the configuration (.yaml, .yml, or .json)

        Raises:
            ValueError: If the file format is unsupported
        """
        path = Path(path)

        if path.suffix in (".yaml", ".yml"):
            content = self.to_yaml()
        elif path.suffix == ".json":
            content = self.to_json()
        else:
            raise ValueError(f"Unsupported config file format: {path.suffix}")

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


def _parse_bool(value: str) -> bool:
    """Parse a string to boolean."""
    return value.lower() in ("true", "1", "yes", "on")


def _parse_list(value: str) -> list[str]:
    """Parse a comma separated string into a list of non-empty items."""
    return [item.strip() for item in value.split(",") if item.strip()]


def _parse_output_type(value: str) -> str:
    value = value.strip().lower()
    if value not in OUTPUT_TYPES:
        raise ValueError(f"Invalid output type '{value}', expected one of: {', '.join(OUTPUT_TYPES)}")
    return value


def find_config_file(search_dir: Optional[Path | str] = None) -> Path | None:
    """
    Look for a configuration file in ``search_dir`` (default: cwd).

    Returns:
        Path of the first existing candidate, or None
    """
    base = Path(search_dir) if search_dir is not None else Path.cwd()
    for name in CONFIG_FILENAMES:
        candidate = base / name
        if candidate.is_file():
            return candidate
    return None


def load_config(
    config_path: Optional[Path | str] = None,
    apply_env: bool = True,
    search_dir: Optional[Path | str] = None,
) -> CodeDumpConfig:
    """
    Load configuration with optional environment variable overrides.

    Args:
        config_path: Optional path to config file. If None, the working
                     directory is searched for a known config filename.
        apply_env: Whether to apply environment variable overrides.
        search_dir: Directory to search when config_path is None.

    Returns:
        CodeDumpConfig instance
    """
    if config_path is None:
        config_path = find_config_file(search_dir)

    if config_path:
        config = CodeDumpConfig.from_file(config_path)
    else:
        config = CodeDumpConfig()

    if apply_env:
        config.apply_env_overrides()

    return config
