"""Quill — a local-first diary with writing analytics."""

__version__ = "0.1.0"
