"""
Utility helpers for rdeptree.

This package provides reusable utilities used across rdeptree, including:

- Console output helpers (Rich-based)
- Logging configuration and retrieval
- Filesystem safety helpers
- Version satisfaction helpers

Only symbols listed in ``__all__`` are considered part of the public API.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Logging utilities
# ---------------------------------------------------------------------------

from rdeptree.utils.logger import get_logger, setup_logging, verbosity_to_level

# ---------------------------------------------------------------------------
# Filesystem utilities
# ---------------------------------------------------------------------------

from rdeptree.utils.filesystem import (
    find_metadata_files,
    read_header_lines,
    safe_read_file,
)

# ---------------------------------------------------------------------------
# Console utilities
# ---------------------------------------------------------------------------

from rdeptree.utils.console import (
    get_raw_console,
    print_dependency_tree,
    print_error,
    print_success,
    print_table,
    print_warning,
    reconfigure_console,
)

# ---------------------------------------------------------------------------
# Version utilities
# ---------------------------------------------------------------------------

from rdeptree.utils.version_utils import satisfies

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    # Console
    "print_error",
    "print_table",
    "print_success",
    "print_warning",
    "print_dependency_tree",
    "get_raw_console",
    "reconfigure_console",
    # Logging
    "get_logger",
    "setup_logging",
    "verbosity_to_level",
    # Filesystem
    "safe_read_file",
    "read_header_lines",
    "find_metadata_files",
    # Version utilities
    "satisfies",
]
