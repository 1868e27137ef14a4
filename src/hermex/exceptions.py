"""Exception hierarchy for hermex."""

from pathlib import Path


class HermexError(Exception):
    """Base class for all hermex errors."""


class SourceParseError(HermexError):
    """Raised when a source file cannot be parsed into a syntax tree."""

    def __init__(self, message: str, file_path: Path | None = None, line: int | None = None) -> None:
        self.file_path = file_path
        self.line = line

        location = str(file_path) if file_path else "<source>"
        if line is not None:
            location = f"{location}:{line}"

        super().__init__(f"{location}: {message}")


class LockfileError(HermexError):
    """Raised when a lockfile exists but cannot be read."""


class RepositoryError(HermexError):
    """Raised when a repository cannot be resolved or cloned."""

    def __init__(self, url: str, message: str) -> None:
        self.url = url
        super().__init__(f"{url}: {message}")


class ConfigError(HermexError):
    """Raised for invalid configuration values."""
