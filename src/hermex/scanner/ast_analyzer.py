"""Parse JavaScript and TypeScript sources and analyze component usage."""

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

import tree_sitter_typescript as tstypescript
from tree_sitter import Language, Parser, Tree

from hermex.exceptions import SourceParseError
from hermex.models import UsageReport
from hermex.scanner.nodes import first_error_line
from hermex.scanner.report import filter_report_by_library, generate_report
from hermex.scanner.visitor import UsageVisitor

logger = logging.getLogger(__name__)


SYNTAXES = ("typescript", "ecmascript")
ECMASCRIPT_SUFFIXES = {".js", ".jsx", ".mjs", ".cjs"}


@dataclass
class ParseOptions:
    """How source text is handed to the parser.

    ``syntax`` is ``"typescript"`` or ``"ecmascript"``. Plain JavaScript may
    contain JSX, so ``ecmascript`` always uses the TSX grammar. For
    ``typescript`` the ``tsx`` flag picks between the TSX and TypeScript
    grammars. ``strict`` turns any syntax error into
    :class:`SourceParseError`; otherwise the partial tree is analyzed.
    """

    syntax: str = "typescript"
    tsx: bool = True
    strict: bool = True

    def __post_init__(self) -> None:
        if self.syntax not in SYNTAXES:
            raise ValueError(f"Unsupported syntax {self.syntax!r}, expected one of {', '.join(SYNTAXES)}")

    @property
    def uses_tsx_grammar(self) -> bool:
        return self.syntax == "ecmascript" or self.tsx

    @classmethod
    def for_file(cls, file_path: Path, strict: bool = True) -> "ParseOptions":
        """Pick syntax and grammar from a file extension."""
        suffix = file_path.suffix.lower()
        if suffix in ECMASCRIPT_SUFFIXES:
            return cls(syntax="ecmascript", tsx=suffix == ".jsx", strict=strict)
        return cls(tsx=suffix != ".ts", strict=strict)


@lru_cache(maxsize=2)
def _language(tsx: bool) -> Language:
    if tsx:
        return Language(tstypescript.language_tsx())
    return Language(tstypescript.language_typescript())


def parse_source(code: str, options: ParseOptions | None = None, file_path: Path | None = None) -> Tree:
    """Parse source text into a syntax tree.

    Args:
        code: Source text
        options: Parser options, TSX and strict by default
        file_path: Path used in error messages

    Returns:
        tree-sitter syntax tree

    Raises:
        SourceParseError: If the source has syntax errors in strict mode
    """
    options = options or ParseOptions()
    parser = Parser(_language(options.uses_tsx_grammar))
    tree = parser.parse(code.encode("utf-8"))

    if tree.root_node.has_error:
        error_line = first_error_line(tree.root_node)
        if options.strict:
            raise SourceParseError("syntax error", file_path=file_path, line=error_line)
        logger.debug(f"Analyzing partial tree for {file_path or '<source>'} (error at line {error_line})")

    return tree


def analyze_source(
    code: str,
    options: ParseOptions | None = None,
    library: str | None = None,
    file_path: Path | None = None,
) -> UsageReport:
    """Analyze source text and return its usage report.

    Args:
        code: Source text
        options: Parser options
        library: Optional package name to restrict the report to
        file_path: Path used in error messages

    Returns:
        Usage report
    """
    tree = parse_source(code, options, file_path)
    state = UsageVisitor().visit(tree.root_node)
    report = generate_report(state)

    if library:
        report = filter_report_by_library(report, library)
    return report


class ASTAnalyzer:
    """Analyzes one source file for component usage."""

    def __init__(self, file_path: Path, strict: bool = True) -> None:
        """Initialize AST analyzer.

        Args:
            file_path: Path to the JavaScript or TypeScript file
            strict: Reject files with syntax errors
        """
        self.file_path = file_path
        self.options = ParseOptions.for_file(file_path, strict=strict)
        self._tree: Tree | None = None

    def _parse_file(self) -> Tree:
        """Parse the file, caching the tree.

        Raises:
            SourceParseError: If the file cannot be read or parsed
        """
        if self._tree is not None:
            return self._tree

        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                code = f.read()
        except UnicodeDecodeError as e:
            raise SourceParseError(f"not valid UTF-8: {e}", file_path=self.file_path) from e

        self._tree = parse_source(code, self.options, self.file_path)
        return self._tree

    def analyze(self, library: str | None = None) -> UsageReport:
        """Analyze the file.

        Args:
            library: Optional package name to restrict the report to

        Returns:
            Usage report
        """
        tree = self._parse_file()
        state = UsageVisitor().visit(tree.root_node)
        report = generate_report(state)

        if library:
            report = filter_report_by_library(report, library)
        return report
