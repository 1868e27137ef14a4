"""CLI interface using Typer."""

import logging
import shutil
import tempfile
import time
from datetime import datetime
from enum import Enum
from pathlib import Path

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from hermex.aggregator import AggregatedReport, aggregate_reports, compare_libraries
from hermex.classifier import UsageClassifier
from hermex.config import get_config
from hermex.exceptions import HermexError
from hermex.github import RepositoryFetcher, get_repo_stats, load_repositories_from_config
from hermex.lockfiles import LockfileVersions, find_and_parse_lockfile
from hermex.reporters.json_formats import JSONReporter
from hermex.reporters.markdown import MarkdownReporter
from hermex.reporters.terminal import TerminalReporter
from hermex.scanner.ast_analyzer import ASTAnalyzer
from hermex.scanner.usage_mapper import ScanResult, UsageMapper

# Set up logging
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = typer.Typer(
    name="hermex",
    help="Analyze how a React codebase uses its component libraries",
    add_completion=False,
)

console = Console()


class DisplayMode(str, Enum):
    """How a section of the scan output is shown."""
    table = "table"
    chart = "chart"
    none = "none"


class OutputFormat(str, Enum):
    """Output format options."""
    console = "console"
    json = "json"
    both = "both"


def _set_verbosity(verbose: bool) -> None:
    logging.getLogger().setLevel(logging.DEBUG if verbose else logging.INFO)


def _exclude_patterns(ignore: list[str] | None) -> list[str]:
    return get_config().exclude_patterns + list(ignore or [])


def _default_report_name(command: str) -> Path:
    return Path(f"{command}-{datetime.now().strftime('%Y%m%d-%H%M%S')}.json")


def _run_scan(
    project_path: Path,
    pattern: str,
    ignore: list[str] | None,
    library: str | None,
    max_files: int | None,
    jobs: int | None,
    complexity: bool,
    show_progress: bool,
) -> tuple[ScanResult, AggregatedReport, LockfileVersions, float]:
    """Discover, analyze and aggregate a project's files."""
    config = get_config()
    started = time.perf_counter()

    mapper = UsageMapper(
        project_path,
        exclude_patterns=_exclude_patterns(ignore),
        classifier=UsageClassifier() if complexity else None,
    )
    max_files = max_files or config.max_files
    jobs = jobs or config.jobs

    if show_progress:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task("[green]Analyzing source files...", total=None)
            scan = mapper.scan(pattern, library=library, max_files=max_files, jobs=jobs)
    else:
        scan = mapper.scan(pattern, library=library, max_files=max_files, jobs=jobs)

    versions = find_and_parse_lockfile(project_path)
    aggregated = aggregate_reports(scan.results, versions)
    return scan, aggregated, versions, time.perf_counter() - started


def _scan_document(scan: ScanResult, aggregated: AggregatedReport, versions: LockfileVersions, summary_only: bool) -> dict:
    data = aggregated.to_dict(include_files=not summary_only)
    data["lockfile"] = {
        "type": versions.lockfile_type,
        "path": str(versions.lockfile_path) if versions.lockfile_path else None,
    }
    data["errors"] = [error.to_dict() for error in scan.errors]
    return data


@app.callback()
def main(
    config_file: Path = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to a TOML configuration file (default: ./.hermex.toml)",
    ),
) -> None:
    """Analyze how a React codebase uses its component libraries."""
    if config_file is not None and not config_file.exists():
        console.print(f"[red]Error: Config file not found: {config_file}[/red]")
        raise typer.Exit(1)
    get_config(config_file)


@app.command()
def scan(
    project_path: Path = typer.Option(
        ".",
        "--project",
        "-p",
        help="Path to project root directory",
    ),
    pattern: str = typer.Option(
        "**/*",
        "--pattern",
        help="Glob pattern for source files, relative to the project",
    ),
    ignore: list[str] = typer.Option(
        None,
        "--ignore",
        help="Extra glob patterns to exclude (can be repeated)",
    ),
    library: str = typer.Option(
        None,
        "--library",
        "-l",
        help="Only count usage of this package",
    ),
    components: DisplayMode = typer.Option(
        DisplayMode.table,
        "--components",
        help="Show top components as table, chart or none",
    ),
    packages: DisplayMode = typer.Option(
        DisplayMode.table,
        "--packages",
        help="Show package distribution as table, chart or none",
    ),
    patterns: DisplayMode = typer.Option(
        DisplayMode.none,
        "--patterns",
        help="Show usage patterns as table, chart or none",
    ),
    details: bool = typer.Option(
        False,
        "--details",
        help="Show per-file counters",
    ),
    summary: bool = typer.Option(
        True,
        "--summary/--no-summary",
        help="Show the summary panel",
    ),
    max_files: int = typer.Option(
        None,
        "--max-files",
        help="Analyze at most this many files",
    ),
    jobs: int = typer.Option(
        None,
        "--jobs",
        "-j",
        help="Number of files analyzed in parallel",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logging",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
) -> None:
    """Scan a project and summarize its component usage."""
    _set_verbosity(verbose)
    project_path = project_path.resolve()

    if not project_path.is_dir():
        console.print(f"[red]Error: Project path not found: {project_path}[/red]")
        raise typer.Exit(1)

    try:
        console.print(f"\n[bold cyan]🔍 Scanning {project_path}[/bold cyan]")
        scan_result, aggregated, versions, elapsed = _run_scan(
            project_path, pattern, ignore, library, max_files, jobs, details, show_progress=True
        )

        if scan_result.files_analyzed == 0:
            console.print("\n[yellow]ℹ️  No source files found[/yellow]")
            raise typer.Exit(0)

        if versions.lockfile_type:
            console.print(f"[dim]Versions from {versions.lockfile_path.name}[/dim]")  # type: ignore[union-attr]

        reporter = TerminalReporter(color=not no_color)
        if summary:
            reporter.print_summary(aggregated, elapsed)
        if packages != DisplayMode.none:
            reporter.print_packages(aggregated, packages.value)
        if components != DisplayMode.none:
            reporter.print_components(aggregated, components.value)
        if patterns != DisplayMode.none:
            reporter.print_patterns(aggregated, patterns.value)
        if details:
            reporter.print_details(aggregated)
        reporter.print_errors(scan_result.errors)

    except typer.Exit:
        raise
    except Exception as e:
        if verbose:
            logger.exception("Scan failed")
        console.print(f"\n[red]Error during scan: {str(e)}[/red]")
        raise typer.Exit(1)


@app.command()
def analyze(
    project_path: Path = typer.Option(
        ".",
        "--project",
        "-p",
        help="Path to project root directory",
    ),
    library: str = typer.Option(
        None,
        "--library",
        "-l",
        help="Only count usage of this package",
    ),
    pattern: str = typer.Option(
        "**/*",
        "--pattern",
        help="Glob pattern for source files, relative to the project",
    ),
    output: Path = typer.Option(
        None,
        "--output",
        "-o",
        help="JSON output file; relative paths go under the reports directory",
    ),
    output_format: OutputFormat = typer.Option(
        OutputFormat.console,
        "--format",
        "-f",
        help="Output format (console, json, both)",
    ),
    complexity: bool = typer.Option(
        False,
        "--complexity",
        help="Classify each file and score its complexity",
    ),
    ignore: list[str] = typer.Option(
        None,
        "--ignore",
        help="Extra glob patterns to exclude (can be repeated)",
    ),
    max_files: int = typer.Option(
        None,
        "--max-files",
        help="Analyze at most this many files",
    ),
    summary_only: bool = typer.Option(
        False,
        "--summary-only",
        help="Leave per-file reports out of JSON output",
    ),
    markdown: Path = typer.Option(
        None,
        "--markdown",
        help="Also write a Markdown report to this path",
    ),
    jobs: int = typer.Option(
        None,
        "--jobs",
        "-j",
        help="Number of files analyzed in parallel",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logging",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
) -> None:
    """Analyze component usage and produce a detailed report."""
    _set_verbosity(verbose)
    project_path = project_path.resolve()

    if not project_path.is_dir():
        console.print(f"[red]Error: Project path not found: {project_path}[/red]")
        raise typer.Exit(1)

    show_console = output_format in (OutputFormat.console, OutputFormat.both)

    try:
        if show_console:
            target = f" for {library}" if library else ""
            console.print(f"\n[bold cyan]🔍 Analyzing {project_path}{target}[/bold cyan]")

        scan_result, aggregated, versions, elapsed = _run_scan(
            project_path, pattern, ignore, library, max_files, jobs, complexity, show_progress=show_console
        )

        if scan_result.files_analyzed == 0:
            if show_console:
                console.print("\n[yellow]ℹ️  No source files found[/yellow]")
            raise typer.Exit(0)

        if show_console:
            reporter = TerminalReporter(color=not no_color)
            reporter.print_summary(aggregated, elapsed)
            if not summary_only:
                reporter.print_packages(aggregated)
                reporter.print_components(aggregated)
                reporter.print_patterns(aggregated)
                if complexity:
                    reporter.print_details(aggregated)
            reporter.print_errors(scan_result.errors)

        if output_format in (OutputFormat.json, OutputFormat.both):
            if output is None and output_format == OutputFormat.both:
                output = _default_report_name("analysis")

            json_reporter = JSONReporter()
            json_output = json_reporter.generate_report(
                _scan_document(scan_result, aggregated, versions, summary_only),
                command="analyze",
                output_file=output,
                options={"library": library, "pattern": pattern, "complexity": complexity},
            )
            if output is None:
                console.print_json(json_output)
            elif show_console:
                console.print(f"[green]✅ Report saved to: {json_reporter.resolve_output_path(output)}[/green]")

        if markdown:
            MarkdownReporter().generate_report(aggregated, markdown, library, scan_result.errors)
            if show_console:
                console.print(f"[green]✅ Markdown report saved to: {markdown}[/green]")

    except typer.Exit:
        raise
    except Exception as e:
        if verbose:
            logger.exception("Analysis failed")
        console.print(f"\n[red]Error during analysis: {str(e)}[/red]")
        raise typer.Exit(1)


@app.command()
def inspect(
    file_path: Path = typer.Argument(
        ...,
        help="Source file to inspect",
    ),
    library: str = typer.Option(
        None,
        "--library",
        "-l",
        help="Only count usage of this package",
    ),
    output: Path = typer.Option(
        None,
        "--output",
        "-o",
        help="Also save the report and classification as JSON",
    ),
    lenient: bool = typer.Option(
        False,
        "--lenient",
        help="Analyze files with syntax errors instead of rejecting them",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logging",
    ),
) -> None:
    """Classify the usage patterns of a single file."""
    _set_verbosity(verbose)

    if not file_path.is_file():
        console.print(f"[red]Error: File not found: {file_path}[/red]")
        raise typer.Exit(1)

    try:
        report = ASTAnalyzer(file_path, strict=not lenient).analyze(library)
        analysis = UsageClassifier().analyze(report)

        TerminalReporter().print_usage_analysis(file_path.name, report, analysis)

        if output:
            json_reporter = JSONReporter()
            json_reporter.generate_report(
                {"file": str(file_path), "report": report.to_dict(), "analysis": analysis.to_dict()},
                command="inspect",
                output_file=output,
                options={"library": library},
            )
            console.print(f"[green]✅ Report saved to: {json_reporter.resolve_output_path(output)}[/green]")

    except HermexError as e:
        if verbose:
            logger.exception("Inspection failed")
        console.print(f"\n[red]Error: {str(e)}[/red]")
        raise typer.Exit(1)


@app.command()
def compare(
    libraries: list[str] = typer.Option(
        ...,
        "--library",
        "-l",
        help="Package to compare (repeat for each library)",
    ),
    project_path: Path = typer.Option(
        ".",
        "--project",
        "-p",
        help="Path to project root directory",
    ),
    pattern: str = typer.Option(
        "**/*",
        "--pattern",
        help="Glob pattern for source files, relative to the project",
    ),
    ignore: list[str] = typer.Option(
        None,
        "--ignore",
        help="Extra glob patterns to exclude (can be repeated)",
    ),
    output: Path = typer.Option(
        None,
        "--output",
        "-o",
        help="Also save the comparison as JSON",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logging",
    ),
) -> None:
    """Compare how much several libraries are used."""
    _set_verbosity(verbose)
    project_path = project_path.resolve()

    if len(libraries) < 2:
        console.print("[red]Error: compare needs at least two --library options[/red]")
        raise typer.Exit(1)

    try:
        mapper = UsageMapper(project_path, exclude_patterns=_exclude_patterns(ignore))
        files = mapper.file_discovery.find_source_files(pattern, max_files=get_config().max_files)

        if not files:
            console.print("\n[yellow]ℹ️  No source files found[/yellow]")
            raise typer.Exit(0)

        results_by_library = {}
        for library in libraries:
            results_by_library[library] = mapper.analyze_files(files, library=library, jobs=get_config().jobs).results

        comparisons = compare_libraries(results_by_library)
        TerminalReporter().print_comparison(comparisons)

        if output:
            json_reporter = JSONReporter()
            json_reporter.generate_report(
                {
                    "ranking": [
                        {
                            "library": c.library,
                            "uniqueComponents": c.unique_components,
                            "totalImports": c.total_imports,
                            "totalUsagePatterns": c.total_usage_patterns,
                            "filesWithUsage": c.files_with_usage,
                        }
                        for c in comparisons
                    ]
                },
                command="compare",
                output_file=output,
                options={"libraries": libraries, "pattern": pattern},
            )
            console.print(f"[green]✅ Report saved to: {json_reporter.resolve_output_path(output)}[/green]")

    except typer.Exit:
        raise
    except Exception as e:
        if verbose:
            logger.exception("Comparison failed")
        console.print(f"\n[red]Error during comparison: {str(e)}[/red]")
        raise typer.Exit(1)


@app.command()
def github(
    repositories: list[str] = typer.Argument(
        None,
        help="Repositories as owner/repo or GitHub URLs",
    ),
    repos_file: Path = typer.Option(
        None,
        "--repos-file",
        help="JSON file listing repositories",
    ),
    library: str = typer.Option(
        None,
        "--library",
        "-l",
        help="Only count usage of this package",
    ),
    branch: str = typer.Option(
        None,
        "--branch",
        "-b",
        help="Branch to clone (default branch otherwise)",
    ),
    depth: int = typer.Option(
        None,
        "--depth",
        help="Clone depth",
    ),
    pattern: str = typer.Option(
        "**/*",
        "--pattern",
        help="Glob pattern for source files, relative to each repository",
    ),
    complexity: bool = typer.Option(
        False,
        "--complexity",
        help="Classify each file and score its complexity",
    ),
    keep_repos: bool = typer.Option(
        False,
        "--keep-repos",
        help="Keep cloned repositories after analysis",
    ),
    output: Path = typer.Option(
        None,
        "--output",
        "-o",
        help="Also save the results as JSON",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logging",
    ),
) -> None:
    """Clone GitHub repositories and analyze each of them."""
    _set_verbosity(verbose)
    config = get_config()

    urls = list(repositories or [])
    work_dir: Path | None = None

    try:
        if repos_file:
            urls += load_repositories_from_config(repos_file)
        if not urls:
            console.print("[red]Error: No repositories given[/red]")
            raise typer.Exit(1)

        work_dir = Path(tempfile.mkdtemp(prefix="hermex-"))
        with RepositoryFetcher(depth=depth) as fetcher:
            console.print(f"\n[bold cyan]📥 Cloning {len(urls)} repositories[/bold cyan]")
            clones = fetcher.clone_all(urls, work_dir, branch or config.get("github.branch"))

        for url, error in clones.errors.items():
            console.print(f"[red]✗ {url}: {error}[/red]")

        if not clones.cloned:
            console.print("[red]Error: No repositories could be cloned[/red]")
            raise typer.Exit(1)

        reporter = TerminalReporter()
        repo_documents = []
        for repo in clones.cloned:
            repo_path = repo.local_path or work_dir / f"{repo.owner}__{repo.name}"
            console.print(f"\n[bold]📦 {repo.shorthand}[/bold] [dim]({repo.branch})[/dim]")

            scan_result, aggregated, versions, elapsed = _run_scan(
                repo_path, pattern, None, library, None, None, complexity, show_progress=True
            )
            reporter.print_summary(aggregated, elapsed)
            reporter.print_packages(aggregated)
            reporter.print_components(aggregated, limit=10)
            reporter.print_errors(scan_result.errors)

            stats = get_repo_stats(repo_path)
            document = _scan_document(scan_result, aggregated, versions, summary_only=not complexity)
            document["repository"] = {
                "name": repo.shorthand,
                "branch": repo.branch,
                "packageName": stats.package_name,
                "packageVersion": stats.package_version,
                "fileTypes": stats.file_types,
            }
            repo_documents.append(document)

        if output:
            json_reporter = JSONReporter()
            json_reporter.generate_report(
                {
                    "repositories": repo_documents,
                    "failed": clones.errors,
                },
                command="github",
                output_file=output,
                options={"library": library, "branch": branch, "pattern": pattern},
            )
            console.print(f"\n[green]✅ Report saved to: {json_reporter.resolve_output_path(output)}[/green]")

    except typer.Exit:
        raise
    except Exception as e:
        if verbose:
            logger.exception("GitHub analysis failed")
        console.print(f"\n[red]Error during GitHub analysis: {str(e)}[/red]")
        raise typer.Exit(1)
    finally:
        if work_dir is not None:
            if keep_repos:
                console.print(f"[dim]Repositories kept in {work_dir}[/dim]")
            else:
                shutil.rmtree(work_dir, ignore_errors=True)


@app.command()
def version() -> None:
    """Show version information."""

    from hermex import __version__

    console.print(f"[bold]hermex[/bold] v{__version__}")
    console.print("\n[dim]Features:[/dim]")
    console.print("  • Import, JSX and props analysis with tree-sitter")
    console.print("  • Aliases, mappings, lazy loading and HOC detection")
    console.print("  • Complexity scoring and recommendations")
    console.print("  • npm, yarn and pnpm lockfile versions")


if __name__ == "__main__":
    app()
