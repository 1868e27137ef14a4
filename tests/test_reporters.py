"""Tests for report generators."""

import json
from pathlib import Path

import pytest
from rich.console import Console

from hermex import __version__
from hermex.aggregator import aggregate_reports, compare_libraries
from hermex.classifier import UsageClassifier
from hermex.lockfiles import LockfileVersions
from hermex.models import FileError, FileResult
from hermex.reporters import JSONReporter, MarkdownReporter, TerminalReporter
from hermex.reporters.terminal import create_bar
from hermex.scanner.ast_analyzer import analyze_source

SOURCE = """
import { Button } from "@acme/ui";
import * as Icons from "@acme/icons";
import { createPortal } from "react-dom";

const registry = [Button];

export const Page = () => createPortal(
  <div>
    <Button onClick={() => {}} />
    <Icons.Star />
  </div>,
  document.body,
);
"""


@pytest.fixture
def aggregated():
    """Aggregated report for one classified file."""
    report = analyze_source(SOURCE)
    result = FileResult(
        file_path=Path("src/Page.tsx"),
        report=report,
        analysis=UsageClassifier().analyze(report),
    )
    versions = LockfileVersions(packages={"@acme/ui": "2.4.0", "@acme/icons": "1.1.0"})
    return aggregate_reports([result], versions)


@pytest.fixture
def recorder():
    """Terminal reporter printing to a recording console."""
    return TerminalReporter(console=Console(record=True, width=200, color_system=None))


class TestCreateBar:
    """Test chart bars."""

    def test_bounds(self):
        assert create_bar(0, length=10) == "░" * 10
        assert create_bar(100, length=10) == "█" * 10
        assert create_bar(50, length=10) == "█" * 5 + "░" * 5
        assert create_bar(250, length=4) == "█" * 4


class TestJSONReporter:
    """Test JSON output."""

    def test_metadata_block(self, tmp_path: Path):
        output = JSONReporter(tmp_path).generate_report(
            {"summary": {"filesAnalyzed": 1}}, command="analyze", options={"library": "@acme/ui"}
        )

        data = json.loads(output)
        assert data["metadata"]["tool"] == "hermex"
        assert data["metadata"]["version"] == __version__
        assert data["metadata"]["command"] == "analyze"
        assert data["metadata"]["options"] == {"library": "@acme/ui"}
        assert "generatedAt" in data["metadata"]
        assert data["summary"] == {"filesAnalyzed": 1}

    def test_relative_path_goes_to_output_dir(self, tmp_path: Path):
        reporter = JSONReporter(tmp_path / "reports")

        reporter.generate_report({"a": 1}, command="scan", output_file=Path("nested/out.json"))

        saved = tmp_path / "reports" / "nested" / "out.json"
        assert json.loads(saved.read_text())["a"] == 1

    def test_absolute_path_kept(self, tmp_path: Path):
        target = tmp_path / "elsewhere" / "out.json"

        JSONReporter(tmp_path / "reports").generate_report({}, command="scan", output_file=target)

        assert target.exists()
        assert not (tmp_path / "reports").exists()

    def test_default_output_dir_from_config(self):
        assert JSONReporter().output_dir == Path("reports-outputs")


class TestMarkdownReporter:
    """Test markdown output."""

    def test_sections(self, tmp_path: Path, aggregated):
        output = tmp_path / "report.md"
        errors = [FileError(file="src/Broken.tsx", error="syntax error")]

        MarkdownReporter().generate_report(aggregated, output, library="@acme/ui", errors=errors)

        content = output.read_text()
        assert content.startswith("# 🧩 Component Usage Report: @acme/ui")
        assert "| @acme/ui | 2.4.0 |" in content
        assert "| `Button` | @acme/ui | 1 | 1 |" in content
        assert "## 📈 Complexity" in content
        assert "`src/Broken.tsx`: syntax error" in content

    def test_without_optional_sections(self, tmp_path: Path):
        output = tmp_path / "empty.md"

        MarkdownReporter().generate_report(aggregate_reports([]), output)

        content = output.read_text()
        assert "## 📦 Packages" not in content
        assert "## ⚠️ Errors" not in content


class TestTerminalReporter:
    """Test rich console output."""

    def test_summary(self, recorder, aggregated):
        recorder.print_summary(aggregated, elapsed=0.5)

        text = recorder.console.export_text()
        assert "1 files" in text
        assert "0.50s" in text

    @pytest.mark.parametrize("mode", ["table", "chart"])
    def test_components_and_packages(self, recorder, aggregated, mode):
        recorder.print_components(aggregated, mode)
        recorder.print_packages(aggregated, mode)
        recorder.print_patterns(aggregated, mode)

        text = recorder.console.export_text()
        assert "Button" in text
        assert "Icons.Star" in text
        assert "@acme/icons" in text
        assert "JSX Usage" in text

    def test_empty_report(self, recorder):
        empty = aggregate_reports([])

        recorder.print_components(empty)
        recorder.print_packages(empty)
        recorder.print_patterns(empty)

        text = recorder.console.export_text()
        assert "No component usage found" in text
        assert "No packages resolved" in text

    def test_details_and_errors(self, recorder, aggregated):
        recorder.print_details(aggregated)
        recorder.print_errors([FileError(file="src/Broken.tsx", error="syntax error")])

        text = recorder.console.export_text()
        assert "src/Page.tsx" in text
        assert "1 file(s) could not be analyzed" in text

    def test_usage_analysis(self, recorder):
        report = analyze_source(SOURCE)
        analysis = UsageClassifier().analyze(report)

        recorder.print_usage_analysis("Page.tsx", report, analysis)

        text = recorder.console.export_text()
        assert "Component usage analysis: Page.tsx" in text
        assert "Portal Usage" in text
        assert "Array Mapping" in text
        assert "[Button, Input].map" in text
        assert "Performance (High)" in text

    def test_comparison(self, recorder):
        results = {
            "@acme/ui": [FileResult(Path("a.tsx"), analyze_source(SOURCE, library="@acme/ui"))],
            "@acme/icons": [FileResult(Path("a.tsx"), analyze_source(SOURCE, library="@acme/icons"))],
        }

        recorder.print_comparison(compare_libraries(results))

        text = recorder.console.export_text()
        assert "Library Comparison" in text
        # Equal component counts rank alphabetically
        assert text.index("@acme/icons") < text.index("@acme/ui")
