"""Locate and load installed distribution metadata.

This is the thin I/O layer around the grammar: it finds the site-packages
directory of a Python interpreter, reads the header block of every
metadata file in it, and hands the lines to the record builder.

Interpreter selection order:

1. An explicit interpreter path.
2. ``$VIRTUAL_ENV``'s interpreter, when a virtual environment is active.
3. The interpreter running rdeptree (``sys.executable``).
"""

from __future__ import annotations

import os
import sys
import json
import subprocess
from pathlib import Path
from typing import List, Optional, Union

from rdeptree.core.builder import DuplicatePolicy, build_record
from rdeptree.constants import INTERPRETER_TIMEOUT, SITE_PACKAGES_SNIPPET
from rdeptree.exceptions import FileOperationError, LocatorError, ParseError
from rdeptree.models.record import MetadataRecord
from rdeptree.utils.filesystem import find_metadata_files, read_header_lines
from rdeptree.utils.logger import get_logger

logger = get_logger("locator")


def find_interpreter(python: Optional[str] = None) -> str:
    """Return the interpreter whose environment should be inspected."""
    if python:
        return python

    virtual_env = os.environ.get("VIRTUAL_ENV")
    if virtual_env:
        if sys.platform == "win32":
            candidate = Path(virtual_env) / "Scripts" / "python.exe"
        else:
            candidate = Path(virtual_env) / "bin" / "python"
        if candidate.exists():
            return str(candidate)
        logger.warning("VIRTUAL_ENV is set but %s does not exist", candidate)

    return sys.executable


def find_site_packages(python: Optional[str] = None) -> Path:
    """Return the first existing site-packages directory of an interpreter.

    Args:
        python: Interpreter path; see :func:`find_interpreter`.

    Raises:
        LocatorError: The interpreter cannot be run or reports no usable
            site-packages directory.
    """
    interpreter = find_interpreter(python)
    logger.debug("Querying site-packages of %s", interpreter)

    try:
        completed = subprocess.run(
            [interpreter, "-c", SITE_PACKAGES_SNIPPET],
            capture_output=True,
            text=True,
            timeout=INTERPRETER_TIMEOUT,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        raise LocatorError(
            f"Cannot run Python interpreter: {exc}",
            python=interpreter,
        ) from exc

    if completed.returncode != 0:
        raise LocatorError(
            "Python interpreter failed to report site-packages",
            python=interpreter,
            output=completed.stderr,
        )

    try:
        candidates = json.loads(completed.stdout)
    except ValueError as exc:
        raise LocatorError(
            "Unexpected output while locating site-packages",
            python=interpreter,
            output=completed.stdout,
        ) from exc

    for candidate in candidates:
        path = Path(candidate)
        if path.is_dir():
            logger.debug("Using site-packages %s", path)
            return path

    raise LocatorError(
        "No existing site-packages directory reported",
        python=interpreter,
        output=completed.stdout,
    )


def load_record(
    metadata_file: Union[str, Path],
    *,
    duplicate_policy: Union[DuplicatePolicy, str] = DuplicatePolicy.LAST,
    on_error: str = "raise",
) -> MetadataRecord:
    """Read one metadata file and build its record."""
    return build_record(
        read_header_lines(metadata_file),
        duplicate_policy=duplicate_policy,
        on_error=on_error,
        source=str(metadata_file),
    )


def load_environment(
    directory: Union[str, Path],
    *,
    duplicate_policy: Union[DuplicatePolicy, str] = DuplicatePolicy.LAST,
    on_error: str = "raise",
) -> List[MetadataRecord]:
    """Build a record for every distribution installed in *directory*.

    Args:
        directory: A site-packages directory.
        duplicate_policy: Passed to the record builder.
        on_error: ``"raise"`` aborts on the first bad file or row.
            ``"skip"`` logs bad rows and unreadable files and carries on.

    Returns:
        Records in metadata-file order.
    """
    records: List[MetadataRecord] = []

    for metadata_file in find_metadata_files(directory):
        try:
            records.append(
                load_record(
                    metadata_file,
                    duplicate_policy=duplicate_policy,
                    on_error=on_error,
                )
            )
        except (ParseError, FileOperationError) as exc:
            if on_error == "raise":
                raise
            logger.warning("Skipping %s: %s", metadata_file.parent.name, exc)

    logger.info("Loaded %d distribution(s) from %s", len(records), directory)
    return records
