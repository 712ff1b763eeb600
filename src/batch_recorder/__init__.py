"""Batch recording of web pages with an external recorder command."""

__version__ = "0.1.0"
