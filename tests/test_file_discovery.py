"""Tests for source file discovery."""

from pathlib import Path

from hermex.scanner.file_discovery import FileDiscovery


def touch(root: Path, relative: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("export {};\n")
    return path


class TestFileDiscovery:
    """Test discovery and exclusion rules."""

    def test_finds_source_extensions(self, tmp_path: Path):
        touch(tmp_path, "src/App.tsx")
        touch(tmp_path, "src/util.js")
        touch(tmp_path, "src/types.ts")
        touch(tmp_path, "src/Legacy.jsx")
        touch(tmp_path, "README.md")
        touch(tmp_path, "src/styles.css")

        files = FileDiscovery(tmp_path).find_source_files()

        assert [f.relative_to(tmp_path).as_posix() for f in files] == [
            "src/App.tsx",
            "src/Legacy.jsx",
            "src/types.ts",
            "src/util.js",
        ]

    def test_default_exclusions(self, tmp_path: Path):
        """Dependencies, build output and generated files are skipped."""
        touch(tmp_path, "src/App.tsx")
        touch(tmp_path, "node_modules/lib/index.js")
        touch(tmp_path, "packages/web/node_modules/lib/index.js")
        touch(tmp_path, "dist/bundle.js")
        touch(tmp_path, "src/global.d.ts")
        touch(tmp_path, "public/vendor.min.js")

        files = FileDiscovery(tmp_path).find_source_files()

        assert [f.relative_to(tmp_path).as_posix() for f in files] == ["src/App.tsx"]

    def test_custom_exclusions(self, tmp_path: Path):
        touch(tmp_path, "src/App.tsx")
        touch(tmp_path, "src/App.test.tsx")
        touch(tmp_path, "stories/Button.stories.tsx")

        discovery = FileDiscovery(tmp_path, exclude_patterns=["**/*.test.tsx", "stories/**"])
        files = discovery.find_source_files()

        assert [f.relative_to(tmp_path).as_posix() for f in files] == ["src/App.tsx"]

    def test_custom_extensions(self, tmp_path: Path):
        touch(tmp_path, "src/App.tsx")
        touch(tmp_path, "src/util.js")

        files = FileDiscovery(tmp_path, extensions=[".TSX"]).find_source_files()

        assert [f.name for f in files] == ["App.tsx"]

    def test_pattern_and_limit(self, tmp_path: Path):
        touch(tmp_path, "src/a.tsx")
        touch(tmp_path, "src/b.tsx")
        touch(tmp_path, "src/c.tsx")
        touch(tmp_path, "lib/d.tsx")

        discovery = FileDiscovery(tmp_path)

        assert len(discovery.find_source_files("src/**/*")) == 3
        assert [f.name for f in discovery.find_source_files("src/**/*", max_files=2)] == [
            "a.tsx",
            "b.tsx",
        ]

    def test_empty_directory(self, tmp_path: Path):
        assert FileDiscovery(tmp_path).find_source_files() == []
