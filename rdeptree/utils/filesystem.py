"""
Filesystem utilities for rdeptree.

This module provides safe helpers for reading metadata files and
discovering installed distribution metadata inside a site-packages
directory. All filesystem errors are normalized to ``FileOperationError``.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Union

from rdeptree.utils.logger import get_logger
from rdeptree.exceptions import FileOperationError
from rdeptree.constants import MAX_FILE_SIZE, METADATA_LOCATIONS


logger = get_logger("filesystem")

PathLike = Union[str, Path]


def _validated_file(path: Path) -> Path:
    """Validate and resolve an existing file path."""
    if not path.exists():
        raise FileOperationError(
            f"File not found: {path}",
            file_path=str(path),
            operation="read",
        )
    if not path.is_file():
        raise FileOperationError(
            f"Not a file: {path}",
            file_path=str(path),
            operation="read",
        )
    return path.resolve()


def safe_read_file(
    file_path: PathLike,
    *,
    max_size: Optional[int] = MAX_FILE_SIZE,
    encoding: str = "utf-8",
) -> str:
    """Safely read a text file with optional size limits.

    Undecodable bytes are replaced rather than failing the read; metadata
    written by old tools is not always clean UTF-8.

    Args:
        file_path: Path to the file.
        max_size: Maximum allowed file size in bytes (None disables limit).
        encoding: Text encoding.

    Returns:
        File contents as a string.
    """
    path = _validated_file(Path(file_path))
    size = path.stat().st_size

    if max_size is not None and size > max_size:
        raise FileOperationError(
            f"File too large: {size} bytes (max {max_size})",
            file_path=str(path),
            operation="read",
        )

    try:
        return path.read_text(encoding=encoding, errors="replace")
    except Exception as exc:
        raise FileOperationError(
            f"Failed to read file: {exc}",
            file_path=str(path),
            operation="read",
            original_error=exc,
        ) from exc


def read_header_lines(file_path: PathLike) -> List[str]:
    """Return the header block of a metadata file.

    Core metadata uses RFC 822 style headers followed by a blank line and
    a free-form description. Only the header lines are returned, with
    line terminators removed, so a description mentioning ``Name:`` never
    reaches the row grammar.
    """
    header: List[str] = []
    for line in safe_read_file(file_path).splitlines():
        if not line.strip():
            break
        header.append(line)
    return header


def find_metadata_files(directory: PathLike) -> List[Path]:
    """Find installed distribution metadata files inside *directory*.

    Looks for ``*.dist-info/METADATA`` and ``*.egg-info/PKG-INFO``.

    Raises:
        FileOperationError: *directory* does not exist or cannot be listed.
    """
    root = Path(directory)
    if not root.is_dir():
        raise FileOperationError(
            f"Not a directory: {root}",
            file_path=str(root),
            operation="scan",
        )

    matches: List[Path] = []
    try:
        for suffix, file_name in METADATA_LOCATIONS:
            for entry in root.glob(f"*{suffix}"):
                candidate = entry / file_name
                if candidate.is_file():
                    matches.append(candidate)
    except OSError as exc:
        raise FileOperationError(
            f"Failed to scan directory: {exc}",
            file_path=str(root),
            operation="scan",
            original_error=exc,
        ) from exc

    logger.debug("Found %d metadata file(s) in %s", len(matches), root)
    return sorted(matches)
