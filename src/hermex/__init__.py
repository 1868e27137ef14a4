"""hermex: static analysis of React component-library usage."""

__version__ = "0.1.0"
