"""pnpm-lock.yaml parser."""

import logging
import re
from typing import Any

import yaml

from hermex.exceptions import LockfileError
from hermex.lockfiles.base import LockfileParser

logger = logging.getLogger(__name__)

# "18.2.0(react@18.2.0)" or "18.2.0_react@18.2.0"
_PEER_SUFFIX = re.compile(r"[(_].*$")


def _clean_version(version: Any) -> str:
    return _PEER_SUFFIX.sub("", str(version))


def split_package_key(key: str) -> tuple[str, str] | None:
    """Split a ``packages`` key into name and version.

    Handles ``/react@18.2.0`` (v6+), ``/react/18.2.0`` (v5) and
    ``react@18.2.0`` (v9), scoped names included.
    """
    key = _PEER_SUFFIX.sub("", key.lstrip("/"))
    at = key.find("@", 1)
    if at != -1:
        return key[:at], key[at + 1:]

    match = re.match(r"^(.+?)/(\d+\.\d+\.\d+.*)$", key)
    if match:
        return match.group(1), match.group(2)
    return None


class PnpmLockParser(LockfileParser):
    """Parse pnpm-lock.yaml files."""

    lockfile_type = "pnpm"
    filename = "pnpm-lock.yaml"

    def parse(self) -> dict[str, str]:
        """Parse pnpm-lock.yaml.

        Direct dependencies of the root importer take precedence; the
        ``packages`` section fills in everything else.

        Returns:
            Mapping of package name to version
        """
        try:
            data = yaml.safe_load(self.read_text()) or {}
        except (OSError, yaml.YAMLError) as e:
            raise LockfileError(f"Error parsing {self.file_path}: {e}") from e

        versions: dict[str, str] = {}

        root_importer = data.get("importers", {}).get(".", {})
        for section in (root_importer, data):
            for group in ("dependencies", "devDependencies", "optionalDependencies"):
                for name, info in (section.get(group) or {}).items():
                    version = info.get("version") if isinstance(info, dict) else info
                    if version is not None and not str(version).startswith("link:"):
                        versions.setdefault(name, _clean_version(version))

        for key in data.get("packages") or {}:
            parsed = split_package_key(str(key))
            if parsed:
                versions.setdefault(parsed[0], parsed[1])

        return versions
