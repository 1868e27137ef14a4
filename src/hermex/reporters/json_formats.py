"""JSON output formatter."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from hermex import __version__
from hermex.config import get_config

logger = logging.getLogger(__name__)


class JSONReporter:
    """Generates JSON format reports with a metadata block."""

    def __init__(self, output_dir: Path | None = None) -> None:
        """Initialize JSON reporter.

        Args:
            output_dir: Directory for relative output paths, config default otherwise
        """
        self.output_dir = output_dir or get_config().output_dir

    def generate_report(
        self,
        data: dict[str, Any],
        command: str,
        output_file: Path | None = None,
        options: dict[str, Any] | None = None,
    ) -> str:
        """Generate JSON report.

        Args:
            data: Report body
            command: Command that produced the report
            output_file: Optional path to save the report; relative paths
                land in the output directory
            options: Command options recorded in the metadata

        Returns:
            JSON string
        """
        document = {
            "metadata": {
                "tool": "hermex",
                "version": __version__,
                "command": command,
                "generatedAt": datetime.now(timezone.utc).isoformat(),
                "options": options or {},
            },
            **data,
        }

        json_str = json.dumps(document, indent=2, default=str)

        if output_file:
            path = self.resolve_output_path(output_file)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json_str, encoding="utf-8")
            logger.info(f"Report saved to {path}")

        return json_str

    def resolve_output_path(self, output_file: Path) -> Path:
        """Place relative paths under the output directory."""
        if output_file.is_absolute():
            return output_file
        return self.output_dir / output_file
