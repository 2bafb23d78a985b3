"""Pitch Fund extraction service - episode page metadata and QuickPaste memo parsing."""

__version__ = "1.0.0"
