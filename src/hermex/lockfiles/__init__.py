"""Package manager lockfile parsers."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from hermex.exceptions import LockfileError
from hermex.lockfiles.base import LockfileParser
from hermex.lockfiles.npm import NpmLockParser
from hermex.lockfiles.pnpm import PnpmLockParser
from hermex.lockfiles.yarn import YarnLockParser

logger = logging.getLogger(__name__)


@dataclass
class LockfileVersions:
    """Resolved package versions of a project."""

    lockfile_type: str | None = None
    lockfile_path: Path | None = None
    packages: dict[str, str] = field(default_factory=dict)

    def version_of(self, package: str) -> str | None:
        """Version of a package, falling back to its base package.

        ``@mui/material/Button`` resolves through ``@mui/material`` and
        ``lodash/debounce`` through ``lodash``.
        """
        if package in self.packages:
            return self.packages[package]
        parts = package.split("/")
        base = "/".join(parts[:2]) if package.startswith("@") else parts[0]
        return self.packages.get(base)


def find_and_parse_lockfile(project_root: Path) -> LockfileVersions:
    """Locate and parse the lockfile of a project.

    A missing lockfile yields an empty result; an unreadable one logs a
    warning and yields no versions.

    Args:
        project_root: Directory containing the lockfile

    Returns:
        Lockfile versions
    """
    lockfile = LockfileParser.auto_detect_in_directory(project_root)
    if lockfile is None:
        logger.debug(f"No lockfile found in {project_root}")
        return LockfileVersions()

    parser_class = LockfileParser.detect_parser(lockfile)
    if parser_class is None:
        return LockfileVersions()

    result = LockfileVersions(lockfile_type=parser_class.lockfile_type, lockfile_path=lockfile)
    try:
        result.packages = parser_class(lockfile).parse()
    except LockfileError as e:
        logger.warning(str(e))

    logger.info(f"Loaded {len(result.packages)} package versions from {lockfile.name}")
    return result


__all__ = [
    "LockfileParser",
    "LockfileVersions",
    "NpmLockParser",
    "PnpmLockParser",
    "YarnLockParser",
    "find_and_parse_lockfile",
]
