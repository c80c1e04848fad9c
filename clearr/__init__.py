"""Clearr backend: mode-scoped message translation service."""

__version__ = "1.0.0"
