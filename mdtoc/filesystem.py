"""Filesystem helpers for reading and rewriting Markdown documents."""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path

from .exceptions import TocFileError
from .logging import get_logger

logger = get_logger("filesystem")


def collect_file_stat(filepath: Path) -> os.stat_result:
    """Return stat information for a regular file.

    Args:
        filepath: Path to the file.

    Returns:
        os.stat_result: File metadata.

    Raises:
        TocFileError: If the path is inaccessible or not a regular file.

    Examples:
        stat_result = collect_file_stat(Path("README.md"))
    """
    try:
        stat_result = os.stat(filepath)
    except OSError as error:
        raise TocFileError(filepath, f"cannot access file: {error.strerror or error}") from error

    if not stat.S_ISREG(stat_result.st_mode):
        raise TocFileError(filepath, "not a regular file")

    return stat_result


def _fingerprint(stat_result: os.stat_result) -> tuple:
    return (
        getattr(stat_result, "st_ino", None),
        getattr(stat_result, "st_dev", None),
        stat_result.st_size,
        stat_result.st_mtime_ns,
    )


def ensure_file_unchanged(
    expected_stat: os.stat_result, current_stat: os.stat_result, filepath: Path
):
    """Refuse to continue when inode, device, size, or mtime moved between snapshots."""
    if _fingerprint(expected_stat) != _fingerprint(current_stat):
        raise TocFileError(filepath, "changed during processing; refusing to overwrite")


def read_document(filepath: Path) -> tuple[str, os.stat_result]:
    """Read a Markdown document as UTF-8 without newline translation.

    Args:
        filepath: Path to the document.

    Returns:
        tuple[str, os.stat_result]: Document text and the stat captured before
            reading, for `write_document`.

    Raises:
        TocFileError: If the file is missing, unreadable, or not valid UTF-8.

    Examples:
        content, snapshot = read_document(Path("README.md"))
    """
    filepath = Path(filepath)
    snapshot = collect_file_stat(filepath)
    try:
        with open(filepath, "r", encoding="UTF-8", newline="") as stream:
            content = stream.read()
    except UnicodeDecodeError as error:
        raise TocFileError(filepath, f"not valid UTF-8 ({error.reason})") from error
    except OSError as error:
        raise TocFileError(filepath, f"cannot read file: {error.strerror or error}") from error
    return content, snapshot


def write_document(filepath: Path, content: str, expected_stat: os.stat_result):
    """Atomically replace a document with new content.

    The text is written to a temporary file in the same directory, flushed to
    disk, given the original permissions (and ownership where permitted), then
    moved over the original. The write is refused when the file changed since
    `expected_stat` was captured.

    Args:
        filepath: Path of the document to replace.
        content: New document text, written without newline translation.
        expected_stat: Stat captured when the document was read.

    Raises:
        TocFileError: If the file changed in the meantime or cannot be replaced.

    Examples:
        content, snapshot = read_document(path)
        write_document(path, content.replace("old", "new"), snapshot)
    """
    filepath = Path(filepath)
    # Replace the file a symlink points to, not the link itself.
    target = filepath.resolve()
    current_stat = collect_file_stat(filepath)
    ensure_file_unchanged(expected_stat, current_stat, filepath)

    permissions = stat.S_IMODE(expected_stat.st_mode)
    uid = getattr(expected_stat, "st_uid", None)
    gid = getattr(expected_stat, "st_gid", None)

    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w", encoding="UTF-8", newline="", delete=False, dir=target.parent
        ) as tmp_file:
            temp_path = Path(tmp_file.name)
            tmp_file.write(content)
            tmp_file.flush()
            os.fsync(tmp_file.fileno())
            os.chmod(tmp_file.name, permissions)

            # Ownership needs privileges and platform support.
            if uid is not None and gid is not None and hasattr(os, "chown"):
                try:
                    os.chown(tmp_file.name, uid, gid)
                except PermissionError:
                    logger.warning(
                        "Could not preserve file ownership for %s (requires elevated privileges)",
                        filepath.name,
                    )

        os.replace(temp_path, target)
        temp_path = None
    except OSError as error:
        raise TocFileError(filepath, f"cannot write file: {error.strerror or error}") from error
    finally:
        if temp_path is not None:
            try:
                temp_path.unlink(missing_ok=True)
            except OSError:
                pass
