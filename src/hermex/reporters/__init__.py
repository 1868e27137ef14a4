"""Reporters package."""

from hermex.reporters.json_formats import JSONReporter
from hermex.reporters.markdown import MarkdownReporter
from hermex.reporters.terminal import TerminalReporter

__all__ = [
    "TerminalReporter",
    "MarkdownReporter",
    "JSONReporter",
]
