"""Configuration file loader for rdeptree.

Handles discovery, loading, parsing, and validation of configuration files.
Supports two formats:

- ``rdeptree.toml``: settings under ``[rdeptree]`` table
- ``pyproject.toml``: settings under ``[tool.rdeptree]`` table

Discovery order:

1. Explicit path from ``--config`` or ``RDEPTREE_CONFIG``
2. ``rdeptree.toml`` in current directory
3. ``pyproject.toml`` with ``[tool.rdeptree]`` section

Configuration precedence: defaults < config file < CLI args.

Example (``rdeptree.toml``)::

    [rdeptree]
    duplicate_fields = "error"
    skip_invalid_rows = false
    include_extras = true
"""

from __future__ import annotations

import tomli as tomllib
from pathlib import Path
from typing import Any, Dict, Optional
from dataclasses import dataclass, field

from rdeptree.core.builder import DuplicatePolicy
from rdeptree.exceptions import ConfigError
from rdeptree.utils.logger import get_logger
from rdeptree.constants import (
    DEFAULT_DUPLICATE_FIELDS,
    DEFAULT_INCLUDE_EXTRAS,
    DEFAULT_SKIP_INVALID_ROWS,
)

logger = get_logger("config")

_BOOLEAN_OPTIONS = ("skip_invalid_rows", "include_extras")


@dataclass
class RDepTreeConfig:
    """Parsed and validated rdeptree configuration.

    All fields have defaults, so empty config files are valid.

    Attributes:
        duplicate_fields: Which repeated ``Name``/``Version`` row wins
            (``first``, ``last``) or whether repetition is an ``error``.
        skip_invalid_rows: Log and skip malformed ``Requires-Dist`` rows
            and unreadable metadata files instead of aborting.
        include_extras: Draw requirements gated by ``extra == "..."``
            markers as tree edges.
        source_path: Path to loaded config file, or ``None`` if using defaults.
    """

    duplicate_fields: DuplicatePolicy = DuplicatePolicy(DEFAULT_DUPLICATE_FIELDS)
    skip_invalid_rows: bool = DEFAULT_SKIP_INVALID_ROWS
    include_extras: bool = DEFAULT_INCLUDE_EXTRAS

    # Metadata (not a user-facing option)
    source_path: Optional[Path] = field(default=None, repr=False)

    @property
    def on_error(self) -> str:
        """Builder error policy derived from :attr:`skip_invalid_rows`."""
        return "skip" if self.skip_invalid_rows else "raise"

    def to_log_dict(self) -> Dict[str, Any]:
        """Return configuration as dictionary for debug logging.

        Excludes ``source_path`` metadata.
        """
        return {
            "duplicate_fields": self.duplicate_fields.value,
            "skip_invalid_rows": self.skip_invalid_rows,
            "include_extras": self.include_extras,
        }


def discover_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Find the configuration file to load.

    Search order:

    1. ``explicit_path`` (from ``--config`` or ``RDEPTREE_CONFIG``)
    2. ``rdeptree.toml`` in current directory
    3. ``pyproject.toml`` with ``[tool.rdeptree]`` section in current directory

    Args:
        explicit_path: Explicit config path. If provided, must exist.

    Returns:
        Resolved path to config file, or ``None`` if not found.

    Raises:
        ConfigError: Explicit path provided but does not exist.
    """
    if explicit_path is not None:
        resolved = explicit_path.resolve()
        if not resolved.is_file():
            raise ConfigError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        logger.debug("Using explicit config: %s", resolved)
        return resolved

    cwd = Path.cwd()

    rdeptree_toml = cwd / "rdeptree.toml"
    if rdeptree_toml.is_file():
        logger.debug("Found rdeptree.toml: %s", rdeptree_toml)
        return rdeptree_toml

    pyproject_toml = cwd / "pyproject.toml"
    if pyproject_toml.is_file() and _pyproject_has_rdeptree_section(pyproject_toml):
        logger.debug("Found [tool.rdeptree] in pyproject.toml: %s", pyproject_toml)
        return pyproject_toml

    logger.debug("No configuration file found")
    return None


def _pyproject_has_rdeptree_section(path: Path) -> bool:
    """Check if pyproject.toml contains a [tool.rdeptree] section.

    A pyproject.toml that cannot be parsed is treated as having no section;
    it belongs to the project, not to rdeptree.
    """
    try:
        raw = _read_toml(path)
    except ConfigError as exc:
        logger.debug("Ignoring unreadable pyproject.toml: %s", exc)
        return False
    return "rdeptree" in raw.get("tool", {})


def load_config(config_path: Optional[Path] = None) -> RDepTreeConfig:
    """Load and validate rdeptree configuration.

    Args:
        config_path: Explicit path to config file. If ``None``, uses
            auto-discovery (see :func:`discover_config_file`).

    Returns:
        Validated :class:`RDepTreeConfig` with values from file or defaults.

    Raises:
        ConfigError: File cannot be parsed, has unknown keys, or invalid values.
    """
    resolved = discover_config_file(config_path)

    if resolved is None:
        logger.debug("No config file found, using defaults")
        return RDepTreeConfig()

    logger.info("Loading configuration from %s", resolved)
    raw = _read_toml(resolved)

    if resolved.name == "pyproject.toml":
        section = raw.get("tool", {}).get("rdeptree", {})
    else:
        section = raw.get("rdeptree", {})

    if not section:
        logger.debug("Config file found but no rdeptree section, using defaults")
        return RDepTreeConfig(source_path=resolved)

    config = _parse_section(section, config_path=str(resolved))
    config.source_path = resolved

    logger.debug("Loaded configuration: %s", config.to_log_dict())
    return config


def _read_toml(path: Path) -> Dict[str, Any]:
    """Read and parse a TOML file.

    Raises:
        ConfigError: File cannot be read or is not valid TOML.
    """
    try:
        with open(path, "rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Invalid TOML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except OSError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}",
            config_path=str(path),
        ) from exc


def _parse_section(
    section: Dict[str, Any],
    *,
    config_path: str,
) -> RDepTreeConfig:
    """Parse and validate an ``[rdeptree]`` / ``[tool.rdeptree]`` table.

    Raises:
        ConfigError: Unknown keys or values of the wrong type.
    """
    config = RDepTreeConfig()

    known_top = {"duplicate_fields", *_BOOLEAN_OPTIONS}
    unknown_top = set(section.keys()) - known_top
    if unknown_top:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(sorted(unknown_top))}",
            config_path=config_path,
        )

    if "duplicate_fields" in section:
        val = section["duplicate_fields"]
        choices = [policy.value for policy in DuplicatePolicy]
        if not isinstance(val, str) or val.lower() not in choices:
            raise ConfigError(
                f"duplicate_fields must be one of {', '.join(choices)}, got {val!r}",
                config_path=config_path,
                option="duplicate_fields",
            )
        config.duplicate_fields = DuplicatePolicy(val.lower())

    for option in _BOOLEAN_OPTIONS:
        if option not in section:
            continue
        val = section[option]
        if not isinstance(val, bool):
            raise ConfigError(
                f"{option} must be a boolean, got {type(val).__name__}",
                config_path=config_path,
                option=option,
            )
        setattr(config, option, val)

    return config
