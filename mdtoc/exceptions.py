"""Package-specific exception types."""

from __future__ import annotations

from pathlib import Path


class TocFileError(Exception):
    """Raised when a document cannot be read, decoded, or written back.

    Args:
        filepath: Path of the offending document.
        reason: Human-readable description of the failure.
    """

    def __init__(self, filepath: Path | str, reason: str):
        self.filepath = Path(filepath)
        self.reason = reason
        super().__init__(f"{self.filepath}: {self.reason}")

    def __str__(self) -> str:
        return f"{self.filepath}: {self.reason}"


class MarkerNotFoundError(LookupError):
    """Raised when an update requires an existing TOC marker and none is present.

    Args:
        marker: Marker literal that was searched for.
    """

    def __init__(self, marker: str):
        self.marker = marker
        super().__init__(f"TOC marker {marker!r} not found")
