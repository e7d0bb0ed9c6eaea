"""
Storage backends for quill.

Async key/value byte storage with a pluggable backend interface
(local filesystem by default). The journal's file repository sits on top.
"""

from .base import (
    StorageBackend,
    StorageError,
    StorageKeyError,
    StoragePermissionError,
)
from .local import LocalStorage

__all__ = [
    "LocalStorage",
    "StorageBackend",
    "StorageError",
    "StorageKeyError",
    "StoragePermissionError",
]
