"""
Error taxonomy for paste operations.
"""
from typing import Any


class PasteError(Exception):
    """Base class for paste errors."""


class ValidationError(PasteError):
    """Malformed input: empty content, non-positive TTL or view limit."""

    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.details = details if details is not None else message


class NotFoundError(PasteError):
    """Paste is unknown, expired, or has used up its views."""

    def __init__(self, paste_id: str):
        super().__init__("Paste not found")
        self.paste_id = paste_id


class StorageError(PasteError):
    """The key-value backend is unreachable or rejected a write."""
