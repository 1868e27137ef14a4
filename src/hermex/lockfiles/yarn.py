"""yarn.lock parser for classic and berry formats."""

import logging
import re

import yaml

from hermex.exceptions import LockfileError
from hermex.lockfiles.base import LockfileParser

logger = logging.getLogger(__name__)

_VERSION_LINE = re.compile(r'^\s+version:?\s+"?([^"\s]+)"?\s*$')


def package_name(descriptor: str) -> str:
    """Package name from a descriptor such as ``@scope/pkg@npm:^1.0.0``."""
    descriptor = descriptor.strip().strip('"')
    at = descriptor.find("@", 1)
    return descriptor if at == -1 else descriptor[:at]


class YarnLockParser(LockfileParser):
    """Parse yarn.lock files."""

    lockfile_type = "yarn"
    filename = "yarn.lock"

    def parse(self) -> dict[str, str]:
        """Parse yarn.lock.

        Berry lockfiles are YAML with a ``__metadata`` entry; classic ones
        use yarn's own indented format.

        Returns:
            Mapping of package name to version
        """
        try:
            content = self.read_text()
        except OSError as e:
            raise LockfileError(f"Error reading {self.file_path}: {e}") from e

        if "__metadata:" in content:
            return self._parse_berry(content)
        return self._parse_classic(content)

    def _parse_berry(self, content: str) -> dict[str, str]:
        try:
            data = yaml.safe_load(content) or {}
        except yaml.YAMLError as e:
            raise LockfileError(f"Error parsing {self.file_path}: {e}") from e

        versions: dict[str, str] = {}
        for key, info in data.items():
            if key == "__metadata" or not isinstance(info, dict) or "version" not in info:
                continue
            for descriptor in str(key).split(","):
                versions.setdefault(package_name(descriptor), str(info["version"]))
        return versions

    @staticmethod
    def _parse_classic(content: str) -> dict[str, str]:
        versions: dict[str, str] = {}
        names: list[str] = []

        for line in content.splitlines():
            if not line.strip() or line.startswith("#"):
                continue

            if not line[0].isspace() and line.rstrip().endswith(":"):
                names = [package_name(part) for part in line.rstrip()[:-1].split(",")]
                continue

            match = _VERSION_LINE.match(line)
            if match and names and line.startswith("  ") and not line.startswith("   "):
                for name in names:
                    versions.setdefault(name, match.group(1))
                names = []

        return versions
