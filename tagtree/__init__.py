"""Incremental tag/file graph built from inline annotations."""

__version__ = "0.1.0"
