"""Filename validation for the flat serving directory."""

PARENT_MARKER = ".."
SEPARATORS = ("/", "\\")


class InvalidFilenameError(ValueError):
    """Requested filename could escape or nest inside the serving directory."""


def validate_filename(candidate: str) -> str:
    """Return ``candidate`` unchanged if it names a direct child of the root.

    Raises:
        InvalidFilenameError: If the name is empty, contains ``..`` or
            contains a path separator.
    """
    if not candidate:
        raise InvalidFilenameError("Filename is empty")
    if PARENT_MARKER in candidate:
        raise InvalidFilenameError(f"Filename contains '{PARENT_MARKER}'")
    if any(sep in candidate for sep in SEPARATORS):
        raise InvalidFilenameError("Filename contains a path separator")
    return candidate
