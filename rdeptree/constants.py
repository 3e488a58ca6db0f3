"""
Centralized constants for rdeptree.

This module defines immutable configuration values used across rdeptree,
including metadata keywords, file patterns, configuration defaults, and
logging formats. All values are intended to be treated as read-only.
"""

from typing import Final, Sequence

# ---------------------------------------------------------------------------
# Metadata row keywords (compared case-insensitively)
# ---------------------------------------------------------------------------

#: Keyword introducing the distribution name row.
NAME_KEYWORD: Final[str] = "Name"

#: Keyword introducing the distribution version row.
VERSION_KEYWORD: Final[str] = "Version"

#: Keyword introducing a dependency requirement row.
REQUIRES_DIST_KEYWORD: Final[str] = "Requires-Dist"

#: Separator between a row keyword and its value.
ROW_SEPARATOR: Final[str] = ":"

# ---------------------------------------------------------------------------
# Installed metadata discovery
# ---------------------------------------------------------------------------

#: (directory suffix, metadata file name) pairs searched in site-packages.
METADATA_LOCATIONS: Final[Sequence[Sequence[str]]] = (
    (".dist-info", "METADATA"),
    (".egg-info", "PKG-INFO"),
)

#: Snippet run inside the target interpreter to list its site-packages.
SITE_PACKAGES_SNIPPET: Final[str] = (
    "import json, site; print(json.dumps(site.getsitepackages()))"
)

#: Seconds to wait for the interpreter query before giving up.
INTERPRETER_TIMEOUT: Final[int] = 30

# ---------------------------------------------------------------------------
# Configuration defaults
# ---------------------------------------------------------------------------

#: Which occurrence of a repeated Name/Version row is kept.
DEFAULT_DUPLICATE_FIELDS: Final[str] = "last"

#: Whether malformed Requires-Dist rows are skipped instead of fatal.
DEFAULT_SKIP_INVALID_ROWS: Final[bool] = True

#: Whether requirements gated by an ``extra`` marker become graph edges.
DEFAULT_INCLUDE_EXTRAS: Final[bool] = False

# ---------------------------------------------------------------------------
# Security constraints
# ---------------------------------------------------------------------------

#: Maximum allowed file size (in bytes) when reading metadata files.
MAX_FILE_SIZE: Final[int] = 10 * 1024 * 1024  # 10 MB

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
