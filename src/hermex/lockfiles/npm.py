"""npm package-lock.json parser."""

import json
import logging
from typing import Any

from hermex.exceptions import LockfileError
from hermex.lockfiles.base import LockfileParser

logger = logging.getLogger(__name__)

NODE_MODULES = "node_modules/"


class NpmLockParser(LockfileParser):
    """Parse package-lock.json files (lockfileVersion 1 to 3)."""

    lockfile_type = "npm"
    filename = "package-lock.json"

    def parse(self) -> dict[str, str]:
        """Parse package-lock.json.

        Returns:
            Mapping of package name to version
        """
        try:
            data = json.loads(self.read_text())
        except (OSError, json.JSONDecodeError) as e:
            raise LockfileError(f"Error parsing {self.file_path}: {e}") from e

        if isinstance(data.get("packages"), dict):
            return self._parse_packages(data["packages"])
        return self._parse_dependencies(data.get("dependencies", {}))

    @staticmethod
    def _parse_packages(packages: dict[str, Any]) -> dict[str, str]:
        """Read the flat ``packages`` map of lockfile v2 and v3.

        Top-level installs win over copies nested under another package.
        """
        versions: dict[str, str] = {}
        nested: dict[str, str] = {}

        for path, info in packages.items():
            if not path or not isinstance(info, dict) or "version" not in info:
                continue
            if NODE_MODULES not in path:
                continue
            name = path.rsplit(NODE_MODULES, 1)[1]
            target = versions if path.count(NODE_MODULES) == 1 else nested
            target.setdefault(name, str(info["version"]))

        for name, version in nested.items():
            versions.setdefault(name, version)
        return versions

    def _parse_dependencies(self, dependencies: dict[str, Any]) -> dict[str, str]:
        """Read the recursive ``dependencies`` tree of lockfile v1."""
        versions: dict[str, str] = {}

        for name, info in dependencies.items():
            if not isinstance(info, dict):
                continue
            if "version" in info:
                versions.setdefault(name, str(info["version"]))
            for child, version in self._parse_dependencies(info.get("dependencies", {})).items():
                versions.setdefault(child, version)

        return versions
