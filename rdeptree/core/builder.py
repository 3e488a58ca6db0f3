"""Assemble metadata lines into a :class:`MetadataRecord`.

The builder classifies each line by the keyword before its first ``:``,
routes ``Name``, ``Version`` and ``Requires-Dist`` rows to their grammar,
and ignores every other row (``Metadata-Version``, ``Summary``,
``Classifier``, continuation lines, ...).

Two policies are configurable:

- :class:`DuplicatePolicy` decides what a second ``Name``/``Version`` row
  does (keep the last one, keep the first one, or raise).
- ``on_error`` decides whether a malformed ``Requires-Dist`` row aborts the
  record (``"raise"``) or is logged and skipped (``"skip"``). Malformed
  ``Name``/``Version`` rows always raise.

Typical usage::

    from rdeptree.core.builder import build_record

    record = build_record([
        "Metadata-Version: 2.1",
        "Name: requests",
        "Version: 2.31.0",
        "Requires-Dist: urllib3>=1.21.1,<3",
    ])
    record.requirements[0].name   # 'urllib3'
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, List, Optional, Union

from rdeptree.core.grammar import ROW_PARSERS
from rdeptree.constants import (
    NAME_KEYWORD,
    REQUIRES_DIST_KEYWORD,
    ROW_SEPARATOR,
    VERSION_KEYWORD,
)
from rdeptree.exceptions import (
    DuplicateFieldError,
    MissingFieldError,
    RowKind,
    RowParseError,
)
from rdeptree.models.record import MetadataRecord
from rdeptree.models.specifier import DependencySpecifier
from rdeptree.utils.logger import get_logger

logger = get_logger("builder")

_KEYWORDS = {
    NAME_KEYWORD.lower(): RowKind.NAME,
    VERSION_KEYWORD.lower(): RowKind.VERSION,
    REQUIRES_DIST_KEYWORD.lower(): RowKind.REQUIRES_DIST,
}

ON_ERROR_CHOICES = ("raise", "skip")


class DuplicatePolicy(str, Enum):
    """What to do when ``Name`` or ``Version`` appears more than once."""

    FIRST = "first"
    LAST = "last"
    ERROR = "error"


def classify_row(line: str) -> Optional[RowKind]:
    """Return the row kind of *line*, or ``None`` if it is not handled.

    The keyword is the text before the first ``:`` with trailing spaces
    removed; comparison ignores case. Lines starting with whitespace are
    header continuations and never classified.

    Example::

        >>> classify_row("requires-dist: foo")
        <RowKind.REQUIRES_DIST: 'Requires-Dist'>
        >>> classify_row("Metadata-Version: 2.1") is None
        True
    """
    if not line or line[0] in " \t":
        return None

    keyword, separator, _ = line.partition(ROW_SEPARATOR)
    if not separator:
        return None
    return _KEYWORDS.get(keyword.rstrip(" \t").lower())


class MetadataRecordBuilder:
    """Incrementally build one :class:`MetadataRecord`.

    A builder is single use: feed it the lines of one metadata block and
    call :meth:`build`.

    Args:
        duplicate_policy: Handling of repeated ``Name``/``Version`` rows.
        on_error: ``"raise"`` to propagate malformed ``Requires-Dist`` rows,
            ``"skip"`` to log them, keep them in :attr:`errors` and continue.
        source: File path used for error context and stored on the record.

    Example::

        >>> builder = MetadataRecordBuilder(on_error="skip")
        >>> for line in lines:
        ...     builder.feed(line)
        >>> record = builder.build()
        >>> builder.errors  # rows that were skipped
        []
    """

    def __init__(
        self,
        *,
        duplicate_policy: Union[DuplicatePolicy, str] = DuplicatePolicy.LAST,
        on_error: str = "raise",
        source: Optional[str] = None,
    ) -> None:
        if on_error not in ON_ERROR_CHOICES:
            raise ValueError(
                f"on_error must be one of {ON_ERROR_CHOICES}, got {on_error!r}"
            )

        self.duplicate_policy = DuplicatePolicy(duplicate_policy)
        self.on_error = on_error
        self.source = source

        self.errors: List[RowParseError] = []
        self._name: Optional[str] = None
        self._version: Optional[str] = None
        self._requirements: List[DependencySpecifier] = []
        self._line_number = 0

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def feed(self, line: str) -> None:
        """Consume one metadata line (terminator already removed)."""
        self._line_number += 1

        row_kind = classify_row(line)
        if row_kind is None:
            return

        try:
            value = self._parse(ROW_PARSERS[row_kind], line)
        except RowParseError as exc:
            if row_kind is not RowKind.REQUIRES_DIST or self.on_error == "raise":
                raise
            logger.warning("Skipping requirement row: %s", exc)
            self.errors.append(exc)
            return

        if row_kind is RowKind.REQUIRES_DIST:
            self._requirements.append(value)
        elif row_kind is RowKind.NAME:
            self._name = self._store_field(self._name, value, NAME_KEYWORD, line)
        else:
            self._version = self._store_field(
                self._version, value, VERSION_KEYWORD, line
            )

    def feed_lines(self, lines: Iterable[str]) -> "MetadataRecordBuilder":
        """Feed every line of *lines* and return ``self``."""
        for line in lines:
            self.feed(line)
        return self

    def build(self) -> MetadataRecord:
        """Return the assembled record.

        Raises:
            MissingFieldError: No ``Name`` or no ``Version`` row was seen.
        """
        if self._name is None:
            raise MissingFieldError(
                "Metadata has no Name row",
                field=NAME_KEYWORD,
                file_path=self.source,
            )
        if self._version is None:
            raise MissingFieldError(
                "Metadata has no Version row",
                field=VERSION_KEYWORD,
                file_path=self.source,
            )

        logger.debug(
            "Built record %s==%s with %d requirement(s)",
            self._name,
            self._version,
            len(self._requirements),
        )
        return MetadataRecord(
            name=self._name,
            version=self._version,
            requirements=tuple(self._requirements),
            source=self.source,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _parse(self, parser, line: str):
        try:
            return parser(line)
        except RowParseError as exc:
            raise exc.with_context(
                line_number=self._line_number, file_path=self.source
            )

    def _store_field(
        self,
        current: Optional[str],
        value: str,
        field: str,
        line: str,
    ) -> str:
        if current is None:
            return value

        if self.duplicate_policy is DuplicatePolicy.ERROR:
            raise DuplicateFieldError(
                f"Duplicate {field} row",
                field=field,
                line_number=self._line_number,
                line_content=line,
                file_path=self.source,
            )

        keep = current if self.duplicate_policy is DuplicatePolicy.FIRST else value
        logger.debug(
            "Duplicate %s row on line %d; keeping %r",
            field,
            self._line_number,
            keep,
        )
        return keep


def build_record(
    lines: Union[str, Iterable[str]],
    *,
    duplicate_policy: Union[DuplicatePolicy, str] = DuplicatePolicy.LAST,
    on_error: str = "raise",
    source: Optional[str] = None,
) -> MetadataRecord:
    """Build a :class:`MetadataRecord` from a metadata block.

    Args:
        lines: Either the block as one string (split with
            :meth:`str.splitlines`) or an iterable of lines. Trailing
            ``\\n``/``\\r`` on individual lines are stripped.
        duplicate_policy: See :class:`MetadataRecordBuilder`.
        on_error: See :class:`MetadataRecordBuilder`.
        source: File path used for error context.

    Returns:
        The assembled record.

    Raises:
        RowParseError: A row is malformed (subject to ``on_error``).
        MissingFieldError: ``Name`` or ``Version`` is absent.
        DuplicateFieldError: Repeated field under ``DuplicatePolicy.ERROR``.
    """
    if isinstance(lines, str):
        lines = lines.splitlines()

    builder = MetadataRecordBuilder(
        duplicate_policy=duplicate_policy,
        on_error=on_error,
        source=source,
    )
    builder.feed_lines(line.rstrip("\r\n") for line in lines)
    return builder.build()
