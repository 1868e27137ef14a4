"""Tests for CLI commands."""

import json
from pathlib import Path
from unittest.mock import patch

from typer.testing import CliRunner

from hermex.cli import app
from hermex.github import CloneResult, GitHubRepo


runner = CliRunner()


class TestCLIVersion:
    """Test version command."""

    def test_version_command(self):
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert "hermex" in result.stdout


class TestCLIHelp:
    """Test help output."""

    def test_help_command(self):
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for command in ("scan", "analyze", "inspect", "compare", "github"):
            assert command in result.stdout

    def test_analyze_help(self):
        result = runner.invoke(app, ["analyze", "--help"])

        assert result.exit_code == 0
        assert "--library" in result.stdout


class TestCLIScan:
    """Test scan command."""

    def test_scan_project(self, sample_project_dir: Path, sample_tsx_file: Path, sample_package_lock: Path):
        result = runner.invoke(
            app, ["scan", "--project", str(sample_project_dir), "--patterns", "chart", "--details"]
        )

        assert result.exit_code == 0
        assert "Button" in result.stdout
        assert "package-lock.json" in result.stdout

    def test_scan_missing_project(self, tmp_path: Path):
        result = runner.invoke(app, ["scan", "--project", str(tmp_path / "missing")])

        assert result.exit_code == 1
        assert "not found" in result.stdout

    def test_scan_empty_project(self, sample_project_dir: Path):
        result = runner.invoke(app, ["scan", "--project", str(sample_project_dir)])

        assert result.exit_code == 0
        assert "No source files found" in result.stdout

    def test_scan_reports_broken_files(self, sample_project_dir: Path, sample_tsx_file: Path):
        (sample_project_dir / "src" / "Broken.tsx").write_text("const = ;\n")

        result = runner.invoke(app, ["scan", "--project", str(sample_project_dir)])

        assert result.exit_code == 0
        assert "could not be analyzed" in result.stdout


class TestCLIAnalyze:
    """Test analyze command."""

    def test_json_output_file(self, tmp_path: Path, sample_project_dir: Path, sample_tsx_file: Path,
                              sample_package_lock: Path):
        output = tmp_path / "analysis.json"

        result = runner.invoke(
            app,
            [
                "analyze",
                "--project", str(sample_project_dir),
                "--format", "json",
                "--output", str(output),
                "--complexity",
            ],
        )

        assert result.exit_code == 0
        data = json.loads(output.read_text())
        assert data["metadata"]["command"] == "analyze"
        assert data["summary"]["filesAnalyzed"] == 1
        assert data["lockfile"]["type"] == "npm"
        assert data["files"][0]["analysis"]["complexity"]["level"]
        packages = {p["packageName"]: p for p in data["packages"]}
        assert packages["@acme/ui"]["version"] == "2.4.0"

    def test_library_and_summary_only(self, tmp_path: Path, sample_project_dir: Path, sample_tsx_file: Path):
        output = tmp_path / "icons.json"

        result = runner.invoke(
            app,
            [
                "analyze",
                "--project", str(sample_project_dir),
                "--library", "@acme/icons",
                "--format", "json",
                "--output", str(output),
                "--summary-only",
            ],
        )

        assert result.exit_code == 0
        data = json.loads(output.read_text())
        assert "files" not in data
        assert [c["name"] for c in data["components"]] == ["Icons.Star"]
        assert data["metadata"]["options"]["library"] == "@acme/icons"

    def test_console_with_markdown(self, tmp_path: Path, sample_project_dir: Path, sample_tsx_file: Path):
        markdown = tmp_path / "report.md"

        result = runner.invoke(
            app,
            ["analyze", "--project", str(sample_project_dir), "--markdown", str(markdown)],
        )

        assert result.exit_code == 0
        assert "Summary" in result.stdout
        assert markdown.read_text().startswith("# 🧩 Component Usage Report")

    def test_config_option(self, tmp_path: Path, sample_project_dir: Path, sample_tsx_file: Path):
        config_file = tmp_path / "custom.toml"
        config_file.write_text('[scan]\nextensions = [".js"]\n')

        result = runner.invoke(
            app, ["--config", str(config_file), "scan", "--project", str(sample_project_dir)]
        )

        assert result.exit_code == 0
        assert "No source files found" in result.stdout

    def test_missing_config(self, tmp_path: Path):
        result = runner.invoke(app, ["--config", str(tmp_path / "nope.toml"), "version"])

        assert result.exit_code == 1


class TestCLIInspect:
    """Test inspect command."""

    def test_inspect_file(self, tmp_path: Path, sample_tsx_file: Path):
        output = tmp_path / "inspect.json"

        result = runner.invoke(app, ["inspect", str(sample_tsx_file), "--output", str(output)])

        assert result.exit_code == 0
        assert "Component usage analysis: App.tsx" in result.stdout
        data = json.loads(output.read_text())
        assert "Lazy Loading" in data["analysis"]["foundPatterns"]
        assert data["report"]["summary"]["totalImports"] == 7

    def test_inspect_syntax_error(self, tmp_path: Path):
        broken = tmp_path / "Broken.tsx"
        broken.write_text("const = ;\n")

        strict = runner.invoke(app, ["inspect", str(broken)])
        lenient = runner.invoke(app, ["inspect", str(broken), "--lenient"])

        assert strict.exit_code == 1
        assert "syntax" in strict.stdout
        assert lenient.exit_code == 0

    def test_inspect_missing_file(self, tmp_path: Path):
        result = runner.invoke(app, ["inspect", str(tmp_path / "Missing.tsx")])

        assert result.exit_code == 1


class TestCLICompare:
    """Test compare command."""

    def test_compare(self, tmp_path: Path, sample_project_dir: Path, sample_tsx_file: Path):
        output = tmp_path / "compare.json"

        result = runner.invoke(
            app,
            [
                "compare",
                "--project", str(sample_project_dir),
                "--library", "@acme/icons",
                "--library", "@acme/ui",
                "--output", str(output),
            ],
        )

        assert result.exit_code == 0
        ranking = json.loads(output.read_text())["ranking"]
        assert ranking[0]["library"] == "@acme/ui"
        assert ranking[0]["uniqueComponents"] > ranking[1]["uniqueComponents"]

    def test_compare_needs_two_libraries(self, sample_project_dir: Path):
        result = runner.invoke(
            app, ["compare", "--project", str(sample_project_dir), "--library", "@acme/ui"]
        )

        assert result.exit_code == 1


class TestCLIGitHub:
    """Test github command."""

    def test_no_repositories(self):
        result = runner.invoke(app, ["github"])

        assert result.exit_code == 1
        assert "No repositories given" in result.stdout

    def test_clone_failures(self):
        clones = CloneResult(errors={"acme/web": "acme/web: not found"})

        with patch("hermex.cli.RepositoryFetcher.clone_all", return_value=clones):
            result = runner.invoke(app, ["github", "acme/web"])

        assert result.exit_code == 1
        assert "No repositories could be cloned" in result.stdout

    def test_analyze_cloned_repository(self, tmp_path: Path, sample_project_dir: Path, sample_tsx_file: Path):
        repo = GitHubRepo("acme", "web", local_path=sample_project_dir, branch="main")
        output = tmp_path / "github.json"

        with patch("hermex.cli.RepositoryFetcher.clone_all", return_value=CloneResult(cloned=[repo])):
            result = runner.invoke(app, ["github", "acme/web", "--output", str(output)])

        assert result.exit_code == 0
        data = json.loads(output.read_text())
        assert data["repositories"][0]["repository"]["name"] == "acme/web"
        assert data["repositories"][0]["summary"]["filesAnalyzed"] == 1
        assert data["failed"] == {}
