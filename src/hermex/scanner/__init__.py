"""Codebase usage scanner package."""

from hermex.scanner.ast_analyzer import ASTAnalyzer, ParseOptions, analyze_source, parse_source
from hermex.scanner.file_discovery import FileDiscovery
from hermex.scanner.usage_mapper import ScanResult, UsageMapper

__all__ = [
    "ASTAnalyzer",
    "FileDiscovery",
    "ParseOptions",
    "ScanResult",
    "UsageMapper",
    "analyze_source",
    "parse_source",
]
