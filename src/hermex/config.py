"""Configuration management for hermex."""

import logging
from pathlib import Path
from typing import Any

import toml

from hermex.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = ".hermex.toml"


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class Config:
    """Application configuration."""

    def __init__(self, config_file: Path | None = None) -> None:
        """Initialize configuration.

        Args:
            config_file: Optional path to a TOML configuration file
        """
        self.config_file = config_file
        self._config: dict[str, Any] = self._load_config()

    def _load_config(self) -> dict[str, Any]:
        """Load configuration from file or defaults."""
        config: dict[str, Any] = self._get_defaults()

        if self.config_file and self.config_file.exists():
            try:
                file_config = toml.load(self.config_file)
                config = _deep_merge(config, file_config)
                logger.debug(f"Loaded config from {self.config_file}")
            except toml.TomlDecodeError as e:
                logger.warning(f"Invalid TOML in config file {self.config_file}: {e}")
            except OSError as e:
                logger.warning(f"Error loading config file {self.config_file}: {e}")

        return config

    @staticmethod
    def _get_defaults() -> dict[str, Any]:
        """Get default configuration values."""
        return {
            "scan": {
                "pattern": "**/*",
                "extensions": [".js", ".jsx", ".ts", ".tsx"],
                "exclude_patterns": [
                    "**/node_modules/**",
                    "**/dist/**",
                    "**/build/**",
                    "**/.git/**",
                    "**/coverage/**",
                    "**/*.d.ts",
                    "**/*.min.js",
                ],
                "max_files": None,  # Unlimited
                "jobs": 1,
                "strict_parse": True,
            },
            "complexity": {
                "thresholds": {
                    "simple": 10,
                    "moderate": 30,
                    "complex": 60,
                    "very_complex": 100,
                },
                "max_instances_per_pattern": 10,
                "examples_per_pattern": 3,
            },
            "output": {
                "directory": "reports-outputs",
                "color": True,
            },
            "github": {
                "api_url": "https://api.github.com",
                "branch": None,
                "depth": 1,
                "timeout": 120,
            },
        }

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation.

        Args:
            key: Configuration key (e.g., "scan.max_files")
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split(".")
        value: Any = self._config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    @property
    def extensions(self) -> list[str]:
        """File extensions considered source files."""
        return list(self.get("scan.extensions", []))

    @property
    def exclude_patterns(self) -> list[str]:
        """Get file exclusion patterns."""
        return list(self.get("scan.exclude_patterns", []))

    @property
    def max_files(self) -> int | None:
        value = self.get("scan.max_files")
        return int(value) if value else None

    @property
    def jobs(self) -> int:
        jobs = int(self.get("scan.jobs", 1))
        if jobs < 1:
            raise ConfigError(f"scan.jobs must be at least 1, got {jobs}")
        return jobs

    @property
    def strict_parse(self) -> bool:
        return bool(self.get("scan.strict_parse", True))

    @property
    def complexity_thresholds(self) -> dict[str, int]:
        """Inclusive upper bounds for each complexity level."""
        thresholds = self.get("complexity.thresholds", {})
        try:
            return {name: int(bound) for name, bound in thresholds.items()}
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid complexity thresholds: {e}") from e

    @property
    def max_instances_per_pattern(self) -> int:
        """Count at which a single category saturates its complexity weight."""
        return int(self.get("complexity.max_instances_per_pattern", 10))

    @property
    def examples_per_pattern(self) -> int:
        return int(self.get("complexity.examples_per_pattern", 3))

    @property
    def output_dir(self) -> Path:
        """Directory where saved reports are written."""
        return Path(self.get("output.directory", "reports-outputs")).expanduser()

    @property
    def color(self) -> bool:
        return bool(self.get("output.color", True))


# Global config instance
_config: Config | None = None


def get_config(config_file: Path | None = None) -> Config:
    """Get or create global configuration instance.

    When no file is given, ``.hermex.toml`` in the working directory is used
    if present.

    Args:
        config_file: Optional path to configuration file

    Returns:
        Config instance
    """
    global _config

    if _config is None or config_file is not None:
        if config_file is None:
            candidate = Path.cwd() / DEFAULT_CONFIG_FILE
            config_file = candidate if candidate.exists() else None
        _config = Config(config_file)

    return _config


def reset_config() -> None:
    """Drop the cached global configuration."""
    global _config
    _config = None
