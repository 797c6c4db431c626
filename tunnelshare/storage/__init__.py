"""Flat-directory file storage with filename validation."""

from .file_store import FileStore
from .path_guard import InvalidFilenameError, validate_filename

__all__ = ["FileStore", "InvalidFilenameError", "validate_filename"]
