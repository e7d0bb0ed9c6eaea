"""
Quill exception hierarchy.

All quill exceptions inherit from QuillError, making it easy for consumers
to catch library-level errors while still distinguishing specific failure modes.
"""


class QuillError(Exception):
    """Base exception class for all quill errors."""


class ConfigurationError(QuillError):
    """Raised for configuration errors (missing keys, invalid values)."""


class APIError(QuillError):
    """Raised for remote API communication errors."""


class SyncError(APIError):
    """Raised by remote sync adapters when a mirror write is rejected."""


class EntryNotFoundError(QuillError, KeyError):
    """Raised when an entry id is not present in the store."""

    def __init__(self, entry_id: str):
        super().__init__(f"Entry not found: {entry_id}")
        self.entry_id = entry_id

    def __str__(self) -> str:
        return f"Entry not found: {self.entry_id}"


class DuplicateEntryError(QuillError):
    """Raised when a change would put two entries on the same day."""


class LoadError(QuillError):
    """Raised when the entry collection cannot be loaded at startup."""
