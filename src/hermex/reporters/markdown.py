"""Markdown report generator."""

from pathlib import Path

from hermex.aggregator import AggregatedReport
from hermex.classifier import LEVEL_ICONS
from hermex.models import FileError


class MarkdownReporter:
    """Generates Markdown reports."""

    def generate_report(
        self,
        report: AggregatedReport,
        output_file: Path,
        library: str | None = None,
        errors: list[FileError] | None = None,
    ) -> None:
        """Generate markdown report.

        Args:
            report: Aggregated report
            output_file: Path to output file
            library: Library the analysis was restricted to, if any
            errors: Files that could not be analyzed
        """
        lines: list[str] = []

        title = f"# 🧩 Component Usage Report: {library}" if library else "# 🧩 Component Usage Report"
        lines.append(title + "\n")
        lines.append(f"**Files Analyzed:** {report.files_analyzed}\n")

        lines.append("## 📊 Summary\n")
        lines.append("| Metric | Value |")
        lines.append("|--------|-------|")
        lines.append(f"| Imports | {report.total_imports} |")
        lines.append(f"| Components | {report.total_components} |")
        lines.append(f"| Usage patterns | {report.total_usage_patterns} |")
        lines.append("")

        if report.package_distribution:
            lines.append("## 📦 Packages\n")
            lines.append("| Package | Version | Components | Uses | Share |")
            lines.append("|---------|---------|------------|------|-------|")
            for package in report.package_distribution:
                lines.append(
                    f"| {package.package_name} | {package.version} | "
                    f"{package.component_count} | {package.usage_count} | {package.percentage:.1f}% |"
                )
            lines.append("")

        if report.component_usage:
            lines.append("## 🧩 Components\n")
            lines.append("| Component | Package | Uses | Files |")
            lines.append("|-----------|---------|------|-------|")
            for usage in report.top_components:
                lines.append(f"| `{usage.name}` | {usage.source} | {usage.count} | {len(usage.files)} |")
            lines.append("")

        patterns = [p for p in report.pattern_counts if p.count > 0]
        if patterns:
            lines.append("## 🔍 Patterns\n")
            for pattern in patterns:
                lines.append(f"- **{pattern.display_name}:** {pattern.count}")
            lines.append("")

        analyzed = [r for r in report.results if r.analysis is not None]
        if analyzed:
            lines.append("## 📈 Complexity\n")
            lines.append("| File | Level | Score |")
            lines.append("|------|-------|-------|")
            for result in analyzed:
                complexity = result.analysis.complexity  # type: ignore[union-attr]
                lines.append(
                    f"| {result.file_path} | {LEVEL_ICONS[complexity.level]} {complexity.level.value} "
                    f"| {complexity.score} |"
                )
            lines.append("")

        if errors:
            lines.append("## ⚠️ Errors\n")
            for error in errors:
                lines.append(f"- `{error.file}`: {error.error}")
            lines.append("")

        output_file.parent.mkdir(parents=True, exist_ok=True)
        with open(output_file, "w", encoding="utf-8") as f:
            f.write("\n".join(lines))
