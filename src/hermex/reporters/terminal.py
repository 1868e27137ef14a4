"""Terminal reporter using Rich library."""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from hermex.aggregator import AggregatedReport, LibraryComparison
from hermex.classifier import LEVEL_ICONS, PATTERN_CATALOG, UsageClassifier, usage_intensity, weight_icon
from hermex.models import ComplexityLevel, FileError, UsageAnalysis, UsageReport

TABLE = "table"
CHART = "chart"


def create_bar(percentage: float, length: int = 20) -> str:
    """Horizontal bar for a percentage."""
    filled = max(0, min(length, int(percentage / 100 * length + 0.5)))
    return "█" * filled + "░" * (length - filled)


class TerminalReporter:
    """Generates terminal output using Rich."""

    def __init__(self, color: bool = True, console: Console | None = None) -> None:
        """Initialize terminal reporter.

        Args:
            color: If True, use colored output
            console: Console to print to, a new one otherwise
        """
        self.console = console or Console(color_system="auto" if color else None)

    def print_summary(self, report: AggregatedReport, elapsed: float | None = None) -> None:
        """Print overall counters."""
        stats = Text()
        stats.append("📊 Summary: ", style="bold")
        stats.append(f"{report.files_analyzed} files | ")
        stats.append(f"{report.total_imports} imports | ")
        stats.append(f"{report.total_components} components | ")
        stats.append(f"{report.total_usage_patterns} usage patterns")
        if elapsed is not None:
            stats.append(f" | {elapsed:.2f}s", style="dim")

        self.console.print(Panel(stats, border_style="blue"))

    def print_components(self, report: AggregatedReport, mode: str = TABLE, limit: int = 20) -> None:
        """Print the most rendered components.

        Args:
            report: Aggregated report
            mode: ``table`` or ``chart``
            limit: Maximum number of components
        """
        top = report.top_components[:limit]
        if not top:
            self.console.print("[yellow]No component usage found[/yellow]")
            return

        if mode == CHART:
            self.console.print("\n[bold]🧩 Top Components[/bold]")
            highest = top[0].count
            width = max(len(usage.name) for usage in top)
            for usage in top:
                bar = create_bar(usage.count / highest * 100)
                self.console.print(f"  {usage.name:<{width}} {bar} {usage.count}")
            return

        table = Table(title="🧩 Top Components", show_header=True, header_style="bold cyan")
        table.add_column("Component", style="bold")
        table.add_column("Package")
        table.add_column("Uses", justify="right")
        table.add_column("Files", justify="right")
        table.add_column("Intensity", justify="center")

        for usage in top:
            table.add_row(
                usage.name,
                usage.source,
                str(usage.count),
                str(len(usage.files)),
                usage_intensity(usage.count),
            )

        self.console.print(table)

    def print_packages(self, report: AggregatedReport, mode: str = TABLE) -> None:
        """Print how component usage splits across packages."""
        if not report.package_distribution:
            self.console.print("[yellow]No packages resolved (is there a lockfile?)[/yellow]")
            return

        if mode == CHART:
            self.console.print("\n[bold]📦 Package Distribution[/bold]")
            width = max(len(p.package_name) for p in report.package_distribution)
            for package in report.package_distribution:
                bar = create_bar(package.percentage)
                self.console.print(f"  {package.package_name:<{width}} {bar} {package.percentage:.1f}%")
            return

        table = Table(title="📦 Package Distribution", show_header=True, header_style="bold cyan")
        table.add_column("Package", style="bold")
        table.add_column("Version", justify="center")
        table.add_column("Components", justify="right")
        table.add_column("Uses", justify="right")
        table.add_column("Share", justify="right")

        for package in report.package_distribution:
            table.add_row(
                package.package_name,
                package.version,
                str(package.component_count),
                str(package.usage_count),
                f"{package.percentage:.1f}%",
            )

        self.console.print(table)

    def print_patterns(self, report: AggregatedReport, mode: str = TABLE) -> None:
        """Print pattern counts."""
        counts = [p for p in report.pattern_counts if p.count > 0]
        if not counts:
            self.console.print("[yellow]No usage patterns found[/yellow]")
            return

        total = sum(p.count for p in counts)

        if mode == CHART:
            self.console.print("\n[bold]🔍 Usage Patterns[/bold]")
            width = max(len(p.display_name) for p in counts)
            for pattern in counts:
                bar = create_bar(pattern.count / total * 100)
                self.console.print(f"  {pattern.display_name:<{width}} {bar} {pattern.count}")
            return

        table = Table(title="🔍 Usage Patterns", show_header=True, header_style="bold cyan")
        table.add_column("Pattern", style="bold")
        table.add_column("Count", justify="right")
        table.add_column("Share", justify="right")

        for pattern in counts:
            table.add_row(pattern.display_name, str(pattern.count), f"{pattern.count / total:.1%}")

        self.console.print(table)

    def print_details(self, report: AggregatedReport) -> None:
        """Print per-file counters and complexity."""
        table = Table(title="📄 Files", show_header=True, header_style="bold cyan")
        table.add_column("File", style="bold")
        table.add_column("Imports", justify="right")
        table.add_column("Components", justify="right")
        table.add_column("Patterns", justify="right")
        table.add_column("Complexity", justify="center")

        for result in report.results:
            summary = result.report.summary
            complexity = "-"
            if result.analysis is not None:
                level = result.analysis.complexity.level
                complexity = f"{LEVEL_ICONS[level]} {level.value} ({result.analysis.complexity.score})"
            table.add_row(
                str(result.file_path),
                str(summary.total_imports),
                str(summary.total_components),
                str(summary.total_usage_patterns),
                complexity,
            )

        self.console.print(table)

    def print_errors(self, errors: list[FileError]) -> None:
        if not errors:
            return
        self.console.print(f"\n[bold red]⚠️  {len(errors)} file(s) could not be analyzed:[/bold red]")
        for error in errors:
            self.console.print(f"  • {error.file}: {error.error}", style="dim")

    def print_usage_analysis(self, file_label: str, report: UsageReport, analysis: UsageAnalysis) -> None:
        """Print the focused classification report for one file.

        Args:
            file_label: File name shown in the header
            report: The file's usage report
            analysis: Classification of the report
        """
        complexity = analysis.complexity
        color = self._get_level_color(complexity.level)

        self.console.print(f"\n[bold]🎯 Component usage analysis: {file_label}[/bold]")
        self.console.print(
            Panel(
                f"[{color}]{LEVEL_ICONS[complexity.level]} {complexity.level.value}[/{color}]\n"
                f"Score: {complexity.score}/{complexity.max_possible} ({complexity.percentage}%)\n"
                f"Components: {report.summary.total_components} | "
                f"Pattern coverage: {UsageClassifier.pattern_coverage(analysis.found_patterns)}%",
                title="Complexity",
                border_style=color,
            )
        )

        if analysis.found_patterns:
            table = Table(title="Patterns Found", show_header=True, header_style="bold cyan")
            table.add_column("Pattern", style="bold")
            table.add_column("Weight", justify="center")
            table.add_column("Count", justify="right")
            table.add_column("Description", style="dim")
            table.add_column("Example", style="green")

            for name, found in analysis.found_patterns.items():
                table.add_row(
                    name,
                    f"{weight_icon(found.complexity)} {found.complexity}",
                    str(found.count),
                    PATTERN_CATALOG[name].description,
                    Text(PATTERN_CATALOG[name].example),
                )
            self.console.print(table)

        if analysis.recommendations:
            self.console.print("\n[bold]💡 Recommendations:[/bold]")
            for rec in analysis.recommendations:
                style = "red" if rec.priority == "High" else "yellow"
                self.console.print(f"  • [{style}]{rec.type} ({rec.priority})[/{style}]: {rec.message}")
                self.console.print(f"    {rec.action}", style="dim")

        self.console.print("")

    def print_comparison(self, comparisons: list[LibraryComparison]) -> None:
        """Print libraries ranked by unique components."""
        table = Table(title="🏆 Library Comparison", show_header=True, header_style="bold cyan")
        table.add_column("Rank", justify="right")
        table.add_column("Library", style="bold")
        table.add_column("Components", justify="right")
        table.add_column("Imports", justify="right")
        table.add_column("Patterns", justify="right")
        table.add_column("Files", justify="right")

        for rank, comparison in enumerate(comparisons, start=1):
            table.add_row(
                str(rank),
                comparison.library,
                str(comparison.unique_components),
                str(comparison.total_imports),
                str(comparison.total_usage_patterns),
                str(comparison.files_with_usage),
            )

        self.console.print(table)

    @staticmethod
    def _get_level_color(level: ComplexityLevel) -> str:
        colors = {
            ComplexityLevel.SIMPLE: "green",
            ComplexityLevel.MODERATE: "blue",
            ComplexityLevel.COMPLEX: "yellow",
            ComplexityLevel.VERY_COMPLEX: "red",
            ComplexityLevel.EXTREMELY_COMPLEX: "bold red",
        }
        return colors.get(level, "white")
