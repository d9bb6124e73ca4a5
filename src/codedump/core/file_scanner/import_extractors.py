"""
Import extractors for the verbose metadata block.

Provides best-effort, line-oriented detection of the modules a file imports
and a registry keyed by language display name.
"""

import re
from abc import ABC, abstractmethod
from typing import List


class ImportExtractorInterface(ABC):
    """Extracts imported module names from file content."""

    @abstractmethod
    def extract(self, content: str) -> List[str]:
        pass


def _unique(items: List[str]) -> List[str]:
    """Drop duplicates, keeping first-seen order."""
    return list(dict.fromkeys(items))


class JavaScriptImportExtractor(ImportExtractorInterface):
    """Import extractor for JavaScript/TypeScript (ES imports and require calls)."""

    IMPORT_RE = re.compile(r"""import\s+(?:(?:\{[^}]*\})|(?:[^{}\s]+))\s+from\s+['"]([^'"]+)['"]""")
    REQUIRE_RE = re.compile(
        r"""(?:const|let|var)\s+(?:\{[^}]*\}|\w+)\s*=\s*require\s*\(\s*['"]([^'"]+)['"]\s*\)"""
    )

    def extract(self, content: str) -> List[str]:
        imports = self.IMPORT_RE.findall(content)
        imports.extend(self.REQUIRE_RE.findall(content))
        return _unique(imports)


class PythonImportExtractor(ImportExtractorInterface):
    """Import extractor for Python (``import a, b as c`` and ``from x import y``)."""

    STATEMENT_RE = re.compile(
        r"^[ \t]*(?:from[ \t]+(?P<source>\S+)[ \t]+import\b|import[ \t]+(?P<names>[^\n#;]+))",
        re.MULTILINE,
    )

    def extract(self, content: str) -> List[str]:
        imports = []
        for match in self.STATEMENT_RE.finditer(content):
            if match.group("source"):
                imports.append(match.group("source"))
                continue
            for name in match.group("names").split(","):
                module = name.split(" as ")[0].strip()
                if module:
                    imports.append(module)
        return _unique(imports)


class GoImportExtractor(ImportExtractorInterface):
    """Import extractor for Go (single imports and parenthesised blocks, aliases dropped)."""

    STATEMENT_RE = re.compile(
        r'^[ \t]*import[ \t]*(?:\((?P<block>.*?)\)|(?:[\w.]+[ \t]+)?"(?P<single>[^"]+)")',
        re.MULTILINE | re.DOTALL,
    )
    QUOTED_RE = re.compile(r'"([^"]+)"')

    def extract(self, content: str) -> List[str]:
        imports = []
        for match in self.STATEMENT_RE.finditer(content):
            if match.group("single"):
                imports.append(match.group("single"))
                continue
            for line in match.group("block").splitlines():
                line = line.strip()
                if line.startswith("//"):
                    continue
                quoted = self.QUOTED_RE.search(line)
                if quoted:
                    imports.append(quoted.group(1))
        return _unique(imports)


class NullImportExtractor(ImportExtractorInterface):
    """Null extractor for unsupported languages."""

    def extract(self, content: str) -> List[str]:
        return []


class ImportExtractorRegistry:
    """Registry for language-specific import extractors."""

    def __init__(self):
        self._extractors: dict[str, ImportExtractorInterface] = {}
        self._null_extractor = NullImportExtractor()

    def register(
        self, language: str, extractor: ImportExtractorInterface
    ) -> "ImportExtractorRegistry":
        self._extractors[language] = extractor
        return self

    def get(self, language: str) -> ImportExtractorInterface:
        return self._extractors.get(language, self._null_extractor)

    def supports(self, language: str) -> bool:
        return language in self._extractors

    def extract_imports(self, content: str, language: str) -> List[str]:
        """
        Extract imports using the appropriate extractor.

        Args:
            content: File content
            language: Language display name

        Returns:
            Imported module names (empty for unsupported languages)
        """
        return self.get(language).extract(content)


def _create_default_import_registry() -> ImportExtractorRegistry:
    """Create and configure the default import extractor registry."""
    javascript = JavaScriptImportExtractor()
    registry = ImportExtractorRegistry()
    registry.register("JavaScript", javascript)
    registry.register("JavaScript (React)", javascript)
    registry.register("TypeScript", javascript)
    registry.register("TypeScript (React)", javascript)
    registry.register("Python", PythonImportExtractor())
    registry.register("Go", GoImportExtractor())
    return registry


# Global default registry
_default_import_registry = _create_default_import_registry()


def get_import_registry() -> ImportExtractorRegistry:
    """Get the global default import extractor registry."""
    return _default_import_registry
