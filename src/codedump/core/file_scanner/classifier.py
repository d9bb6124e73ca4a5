"""
Heuristic file classification for the verbose metadata block.
"""

from pathlib import Path

CONFIG_EXTENSIONS = frozenset([".json", ".yaml", ".yml", ".toml", ".ini"])
DOC_EXTENSIONS = frozenset([".md", ".markdown", ".txt", ".doc", ".pdf"])
TEST_DIRECTORIES = frozenset(["test", "tests", "__tests__"])
SOURCE_DIRECTORIES = frozenset(["src", "app", "lib", "components", "services"])
PACKAGE_MANIFESTS = frozenset(["package.json", "requirements.txt", "cargo.toml", "go.mod"])

BINARY_EXTENSIONS = frozenset([
    ".exe",
    ".dll",
    ".so",
    ".dylib",
    ".bin",
    ".o",
    ".obj",
    ".zip",
    ".tar",
    ".gz",
    ".rar",
    ".7z",
    ".jpg",
    ".jpeg",
    ".png",
    ".gif",
    ".bmp",
    ".ico",
    ".pdf",
])


def is_binary_extension(extension: str) -> bool:
    return extension.lower() in BINARY_EXTENSIONS


def _is_rc_file(name: str) -> bool:
    # .eslintrc, .bashrc, .babelrc.json
    return name.startswith(".") and name.split(".")[1].endswith("rc")


def classify_file_type(path: Path) -> str:
    """
    Classify a file by its name and location.

    Returns one of: Configuration, Test, Documentation, Package Management,
    Source, Other. The first matching category wins.
    """
    name = path.name.lower()
    extension = path.suffix.lower()
    segments = path.parts[:-1]

    in_code_dir = any("src" in seg or "app" in seg for seg in segments)
    if (
        "config" in name
        or _is_rc_file(name)
        or name == ".env"
        or (extension in CONFIG_EXTENSIONS and not in_code_dir and name not in PACKAGE_MANIFESTS)
    ):
        return "Configuration"

    if ".test." in name or ".spec." in name or name.startswith("test_") or any(
        seg in TEST_DIRECTORIES for seg in segments
    ):
        return "Test"

    if extension in DOC_EXTENSIONS and name not in PACKAGE_MANIFESTS:
        return "Documentation"
    if name in ("contributing", "license"):
        return "Documentation"

    if name in PACKAGE_MANIFESTS:
        return "Package Management"

    if any(seg in SOURCE_DIRECTORIES for seg in segments):
        return "Source"

    return "Other"
