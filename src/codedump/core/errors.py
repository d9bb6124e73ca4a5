"""Exception types for codedump."""


class CodeDumpError(Exception):
    """Base exception for codedump errors."""

    pass


class RootNotFoundError(CodeDumpError, FileNotFoundError):
    """The directory to dump does not exist."""

    pass


class RootNotADirectoryError(CodeDumpError, NotADirectoryError):
    """The path to dump exists but is not a directory."""

    pass


class OutputWriteError(CodeDumpError):
    """Writing the rendered dump to disk failed.

    The walk itself never raises for per-entry problems; this is only raised
    by the final write step so the caller can report it and exit non-zero.
    """

    pass
