"""File discovery for JavaScript and TypeScript projects."""

import fnmatch
import logging
from pathlib import Path

from hermex.config import get_config

logger = logging.getLogger(__name__)


class FileDiscovery:
    """Discovers source files in a project."""

    def __init__(
        self,
        project_root: Path,
        exclude_patterns: list[str] | None = None,
        extensions: list[str] | None = None,
    ) -> None:
        """Initialize file discovery.

        Args:
            project_root: Root directory of the project
            exclude_patterns: Glob patterns to exclude
            extensions: File extensions to include, e.g. ``[".tsx"]``
        """
        self.project_root = Path(project_root)
        config = get_config()

        if exclude_patterns is None:
            exclude_patterns = config.exclude_patterns
        if extensions is None:
            extensions = config.extensions

        self.exclude_patterns = exclude_patterns
        self.extensions = {ext.lower() for ext in extensions}

    def find_source_files(self, pattern: str = "**/*", max_files: int | None = None) -> list[Path]:
        """Find source files matching a glob pattern.

        Args:
            pattern: Glob relative to the project root
            max_files: Stop after this many files

        Returns:
            Sorted list of file paths
        """
        source_files: list[Path] = []

        for path in sorted(self.project_root.glob(pattern)):
            if not path.is_file() or path.suffix.lower() not in self.extensions:
                continue
            if self._should_exclude(path):
                continue
            source_files.append(path)

            if max_files is not None and len(source_files) >= max_files:
                logger.info(f"Reached file limit of {max_files}")
                break

        return source_files

    def _should_exclude(self, file_path: Path) -> bool:
        """Check if file should be excluded based on patterns.

        Args:
            file_path: Path to file

        Returns:
            True if file should be excluded
        """
        try:
            relative = file_path.relative_to(self.project_root)
            relative_str = relative.as_posix()
        except ValueError:
            return False

        for pattern in self.exclude_patterns:
            # "**/" also matches at the project root
            candidates = {pattern.replace("**", "*")}
            if pattern.startswith("**/"):
                candidates.add(pattern[3:].replace("**", "*"))

            for candidate in candidates:
                if fnmatch.fnmatch(relative_str, candidate):
                    return True

                for parent in relative.parents:
                    if fnmatch.fnmatch(parent.as_posix(), candidate.rstrip("/*")):
                        return True

        return False
