"""Tests for parsing and the file-level analyzer."""

from pathlib import Path

import pytest

from hermex.exceptions import SourceParseError
from hermex.scanner.ast_analyzer import ASTAnalyzer, ParseOptions, analyze_source, parse_source


class TestParseOptions:
    """Tests for grammar selection."""

    def test_defaults(self) -> None:
        options = ParseOptions()

        assert options.syntax == "typescript"
        assert options.tsx is True
        assert options.strict is True

    @pytest.mark.parametrize(
        "name,tsx",
        [("App.tsx", True), ("App.jsx", True), ("util.js", True), ("types.ts", False), ("TYPES.TS", False)],
    )
    def test_for_file(self, name: str, tsx: bool) -> None:
        assert ParseOptions.for_file(Path(name)).uses_tsx_grammar is tsx

    def test_javascript_files_use_ecmascript(self) -> None:
        assert ParseOptions.for_file(Path("util.js")).syntax == "ecmascript"
        assert ParseOptions.for_file(Path("App.tsx")).syntax == "typescript"

    def test_for_file_strictness(self) -> None:
        assert ParseOptions.for_file(Path("a.tsx"), strict=False).strict is False


class TestParseSource:
    """Tests for parsing source text."""

    def test_valid_source(self) -> None:
        tree = parse_source("const a = <div />;\n")

        assert tree.root_node.type == "program"
        assert not tree.root_node.has_error

    def test_strict_rejects_syntax_errors(self) -> None:
        with pytest.raises(SourceParseError) as exc_info:
            parse_source("const ok = 1;\nconst = ;\n", file_path=Path("Broken.tsx"))

        assert exc_info.value.file_path == Path("Broken.tsx")
        assert exc_info.value.line == 2
        assert str(exc_info.value).startswith("Broken.tsx:2")

    def test_lenient_keeps_partial_tree(self) -> None:
        tree = parse_source("const = ;\n", ParseOptions(strict=False))

        assert tree.root_node.has_error

    def test_type_assertion_in_ts_grammar(self) -> None:
        """Angle-bracket assertions are only valid outside TSX."""
        code = "const value = <any>input;\n"

        parse_source(code, ParseOptions(tsx=False))
        with pytest.raises(SourceParseError):
            parse_source(code, ParseOptions(tsx=True))

    def test_ecmascript_always_accepts_jsx(self) -> None:
        """Plain JavaScript is parsed with the TSX grammar whatever the tsx flag says."""
        tree = parse_source("const a = <div />;\n", ParseOptions(syntax="ecmascript", tsx=False))

        assert not tree.root_node.has_error

    def test_unsupported_syntax(self) -> None:
        with pytest.raises(ValueError, match="Unsupported syntax"):
            ParseOptions(syntax="flow")

    def test_empty_source(self) -> None:
        report = analyze_source("")

        assert report.summary.total_usage_patterns == 0
        assert report.components == []


class TestASTAnalyzer:
    """Tests for file analysis."""

    def test_analyze_file(self, sample_tsx_file: Path) -> None:
        report = ASTAnalyzer(sample_tsx_file).analyze()

        assert report.summary.total_imports == 7
        assert {"Button", "Card", "Field", "Settings", "Star", "TextInput"} <= set(report.components)
        jsx = {item["component"]: item for item in report.patterns["usage"]["jsx"]}
        assert jsx["Button"]["count"] == 2
        assert jsx["Button"]["propsAnalysis"]["hasSpread"] is True
        assert report.patterns["advanced"]["lazy"] == [{"source": "./Settings", "line": 8}]

    def test_analyze_with_library(self, sample_tsx_file: Path) -> None:
        report = ASTAnalyzer(sample_tsx_file).analyze(library="@acme/ui")

        assert report.summary.total_imports == 3
        rendered = {item["component"] for item in report.patterns["usage"]["jsx"]}
        assert rendered == {"Button", "Card", "Field"}

    def test_plain_typescript_file(self, tmp_path: Path) -> None:
        file = tmp_path / "registry.ts"
        file.write_text(
            'import { Button } from "@acme/ui";\n'
            "export const registry = { primary: Button };\n"
            "const legacy = <any>registry;\n"
        )

        report = ASTAnalyzer(file).analyze()

        assert report.patterns["usage"]["objects"][0]["variable"] == "registry"

    def test_syntax_error(self, tmp_path: Path) -> None:
        file = tmp_path / "Broken.jsx"
        file.write_text("export default function () { return <div>; }\n")

        with pytest.raises(SourceParseError):
            ASTAnalyzer(file).analyze()

    def test_lenient(self, tmp_path: Path) -> None:
        file = tmp_path / "Broken.jsx"
        file.write_text('import Button from "lib";\nconst = ;\n')

        report = ASTAnalyzer(file, strict=False).analyze()

        assert "Button" in report.components

    def test_invalid_utf8(self, tmp_path: Path) -> None:
        file = tmp_path / "Binary.js"
        file.write_bytes(b"const a = '\xff\xfe';\n")

        with pytest.raises(SourceParseError, match="UTF-8"):
            ASTAnalyzer(file).analyze()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            ASTAnalyzer(tmp_path / "Missing.tsx").analyze()
