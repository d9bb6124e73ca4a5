"""
Extension to language-name lookup for the verbose metadata block.

Names are display strings ("TypeScript (React)", "C/C++ Header") rather than
parser identifiers; anything not listed reports as "Unknown".
"""

import logging
from pathlib import Path
from typing import Iterable

import yaml

logger = logging.getLogger(__name__)

_LANGUAGES_FILE = Path(__file__).parent / "languages.yaml"

UNKNOWN_LANGUAGE = "Unknown"


def load_language_table(path: Path | str) -> dict[str, str]:
    """
    Read a ``{display name: [extensions]}`` YAML file into an extension table.

    Entries whose value is not a list are logged and skipped.

    Raises:
        ValueError: If the file is not valid YAML or not a mapping
    """
    path = Path(path)
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid languages file {path}: expected mapping, got {type(data).__name__}")

    table: dict[str, str] = {}
    for language, extensions in data.items():
        if not isinstance(extensions, list):
            logger.warning(f"Skipping '{language}' in {path}: extensions must be a list")
            continue
        for ext in extensions:
            table[str(ext).lower()] = str(language)
    return table


class LanguageRegistry:
    """
    Maps lower-cased file extensions to language display names.

    Example:
        >>> registry = LanguageRegistry(load_defaults=False)
        >>> registry.register("Elixir", [".ex", ".exs"]).detect(".EX")
        'Elixir'
    """

    def __init__(self, load_defaults: bool = True):
        self._by_extension: dict[str, str] = {}
        if load_defaults:
            if _LANGUAGES_FILE.exists():
                self._by_extension.update(load_language_table(_LANGUAGES_FILE))
            else:
                logger.warning(f"Languages file not found: {_LANGUAGES_FILE}")

    @classmethod
    def from_yaml(cls, config_path: Path | str) -> "LanguageRegistry":
        """Build a registry from a languages file only, without the packaged defaults."""
        registry = cls(load_defaults=False)
        registry._by_extension.update(load_language_table(config_path))
        return registry

    def register(self, language: str, extensions: Iterable[str]) -> "LanguageRegistry":
        """Map ``extensions`` to ``language``, replacing earlier mappings. Returns self."""
        for ext in extensions:
            ext = ext.lower()
            previous = self._by_extension.get(ext)
            if previous is not None and previous != language:
                logger.debug(f"Extension {ext} remapped from {previous} to {language}")
            self._by_extension[ext] = language
        return self

    def detect(self, extension: str) -> str:
        """Language for a dotted extension such as ``.py``, or ``Unknown``."""
        return self._by_extension.get(extension.lower(), UNKNOWN_LANGUAGE)

    def detect_from_path(self, file_path: Path) -> str:
        return self.detect(file_path.suffix)


_default_registry = LanguageRegistry()


def get_default_registry() -> LanguageRegistry:
    """Shared registry loaded from the packaged languages.yaml."""
    return _default_registry
