"""Usage mapper that analyzes many files and isolates per-file failures."""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from hermex.classifier import UsageClassifier
from hermex.config import get_config
from hermex.models import FileError, FileResult
from hermex.scanner.ast_analyzer import ASTAnalyzer
from hermex.scanner.file_discovery import FileDiscovery

logger = logging.getLogger(__name__)


@dataclass
class ScanResult:
    """Per-file reports plus the files that failed."""

    results: list[FileResult] = field(default_factory=list)
    errors: list[FileError] = field(default_factory=list)

    @property
    def files_analyzed(self) -> int:
        return len(self.results) + len(self.errors)


class UsageMapper:
    """Maps component usage across a codebase."""

    def __init__(
        self,
        project_root: Path,
        exclude_patterns: list[str] | None = None,
        strict: bool | None = None,
        classifier: UsageClassifier | None = None,
    ) -> None:
        """Initialize usage mapper.

        Args:
            project_root: Root directory of the project
            exclude_patterns: Glob patterns to exclude, config defaults otherwise
            strict: Reject files with syntax errors, config default otherwise
            classifier: When given, every report is also classified
        """
        self.project_root = Path(project_root)
        self.file_discovery = FileDiscovery(self.project_root, exclude_patterns)
        self.strict = get_config().strict_parse if strict is None else strict
        self.classifier = classifier

    def analyze_file(self, file_path: Path, library: str | None = None) -> FileResult | FileError:
        """Analyze one file, returning an error record instead of raising.

        Args:
            file_path: File to analyze
            library: Optional package to restrict the report to

        Returns:
            File result, or file error when the file could not be analyzed
        """
        try:
            report = ASTAnalyzer(file_path, strict=self.strict).analyze(library)
        except Exception as e:
            logger.warning(f"Skipping {file_path}: {e}")
            return FileError(file=self._display_path(file_path), error=str(e))

        analysis = self.classifier.analyze(report) if self.classifier else None
        return FileResult(file_path=file_path, report=report, analysis=analysis)

    def analyze_files(
        self,
        files: list[Path],
        library: str | None = None,
        jobs: int = 1,
    ) -> ScanResult:
        """Analyze files, optionally in parallel.

        Each file gets its own parser state, so results do not depend on
        the number of workers. Output order follows the input order.

        Args:
            files: Files to analyze
            library: Optional package to restrict reports to
            jobs: Number of worker threads

        Returns:
            Scan result with successes and failures
        """
        scan = ScanResult()

        if jobs > 1 and len(files) > 1:
            with ThreadPoolExecutor(max_workers=jobs) as executor:
                outcomes = list(executor.map(lambda path: self.analyze_file(path, library), files))
        else:
            outcomes = [self.analyze_file(path, library) for path in files]

        for outcome in outcomes:
            if isinstance(outcome, FileError):
                scan.errors.append(outcome)
            else:
                scan.results.append(outcome)

        logger.debug(f"Analyzed {len(scan.results)} files, {len(scan.errors)} failed")
        return scan

    def scan(
        self,
        pattern: str = "**/*",
        library: str | None = None,
        max_files: int | None = None,
        jobs: int = 1,
    ) -> ScanResult:
        """Discover and analyze every matching file under the project root."""
        files = self.file_discovery.find_source_files(pattern, max_files=max_files)
        logger.info(f"Found {len(files)} source files in {self.project_root}")
        return self.analyze_files(files, library=library, jobs=jobs)

    def _display_path(self, file_path: Path) -> str:
        try:
            return file_path.relative_to(self.project_root).as_posix()
        except ValueError:
            return str(file_path)
