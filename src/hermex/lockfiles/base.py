"""Base class for lockfile parsers."""

import logging
from abc import ABC, abstractmethod
from pathlib import Path

logger = logging.getLogger(__name__)


class LockfileParser(ABC):
    """Abstract base class for package manager lockfile parsers."""

    lockfile_type: str = ""
    filename: str = ""

    def __init__(self, file_path: Path) -> None:
        """Initialize parser.

        Args:
            file_path: Path to the lockfile
        """
        self.file_path = file_path

        if not self.file_path.exists():
            raise FileNotFoundError(f"Lockfile not found: {file_path}")

    @abstractmethod
    def parse(self) -> dict[str, str]:
        """Parse the lockfile into installed versions.

        Returns:
            Mapping of package name to resolved version

        Raises:
            LockfileError: If the file cannot be read or decoded
        """

    def read_text(self) -> str:
        with open(self.file_path, "r", encoding="utf-8") as f:
            return f.read()

    @staticmethod
    def detect_parser(file_path: Path) -> type["LockfileParser"] | None:
        """Detect appropriate parser for a file.

        Args:
            file_path: Path to a lockfile

        Returns:
            Parser class or None if no suitable parser found
        """
        from hermex.lockfiles.npm import NpmLockParser
        from hermex.lockfiles.pnpm import PnpmLockParser
        from hermex.lockfiles.yarn import YarnLockParser

        for parser_class in (NpmLockParser, YarnLockParser, PnpmLockParser):
            if file_path.name == parser_class.filename:
                return parser_class

        logger.warning(f"No parser found for file: {file_path.name}")
        return None

    @staticmethod
    def auto_detect_in_directory(directory: Path) -> Path | None:
        """Find the lockfile of a project.

        npm is preferred over yarn and yarn over pnpm when several exist.

        Args:
            directory: Project root

        Returns:
            Lockfile path or None
        """
        for filename in ("package-lock.json", "yarn.lock", "pnpm-lock.yaml"):
            file_path = directory / filename
            if file_path.exists():
                return file_path
        return None
