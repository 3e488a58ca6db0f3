"""Row grammars for installed distribution metadata.

Three row shapes are recognised, each anchored at the start of the line
and required to consume it entirely:

- ``Name: <name>``
- ``Version: <version>``
- ``Requires-Dist: <name>[extras] <comparison> ; <marker>``

Keywords are matched case-insensitively and must be followed directly by
``:``. In ``Requires-Dist`` rows whitespace between tokens is skipped; in
``Name``/``Version`` rows only the whitespace after the colon is.

Grammar of the requirement part::

    specifier  := name extras? comparison? (";" marker)?
    extras     := "[" (name ("," name)*)? "]"
    comparison := clause ("," clause)?  |  "(" clause ("," clause)? ")"
    clause     := operator version
    marker     := variable operator string

Every failure raises a :class:`~rdeptree.exceptions.RowParseError`
subclass; a partial :class:`DependencySpecifier` is never returned.

Typical usage::

    from rdeptree.core.grammar import parse_requirement_row

    spec = parse_requirement_row("Requires-Dist: urllib3>=1.21.1,<3")
    spec.name          # 'urllib3'
    str(spec.comparison)  # '>=1.21.1,<3'
"""

from __future__ import annotations

from typing import Callable, Dict, NoReturn, Optional, Tuple, Type

from rdeptree.core.lexer import (
    Cursor,
    OPERATOR_PATTERN,
    read_identifier,
    read_name,
    read_operator,
    read_string_literal,
    read_version,
    read_word_operator,
    split_operator,
)
from rdeptree.constants import (
    NAME_KEYWORD,
    REQUIRES_DIST_KEYWORD,
    ROW_SEPARATOR,
    VERSION_KEYWORD,
)
from rdeptree.exceptions import (
    InvalidEnvironmentVariableError,
    InvalidOperatorError,
    MalformedRowError,
    RowKind,
    RowParseError,
    UnexpectedTrailingInputError,
)
from rdeptree.models.specifier import (
    ComparisonOperator,
    DependencySpecifier,
    EnvironmentMarker,
    EnvironmentVariable,
    VersionClause,
    VersionComparison,
)

__all__ = [
    "ROW_PARSERS",
    "parse_environment_marker",
    "parse_name_row",
    "parse_requirement",
    "parse_requirement_row",
    "parse_version_comparison",
    "parse_version_row",
]


# ---------------------------------------------------------------------------
# Field rows
# ---------------------------------------------------------------------------


def parse_name_row(line: str) -> str:
    """Parse a ``Name: <name>`` row.

    Args:
        line: One metadata line without its terminator.

    Returns:
        The distribution name, exactly as written.

    Raises:
        MalformedRowError: Keyword missing or value invalid.
        UnexpectedTrailingInputError: Characters follow the name.

    Example::

        >>> parse_name_row("Name: requests")
        'requests'
    """
    return _parse_field_row(line, NAME_KEYWORD, read_name, RowKind.NAME)


def parse_version_row(line: str) -> str:
    """Parse a ``Version: <version>`` row.

    Same rules as :func:`parse_name_row`, with the version token class.

    Example::

        >>> parse_version_row("Version:2014.04")
        '2014.04'
    """
    return _parse_field_row(line, VERSION_KEYWORD, read_version, RowKind.VERSION)


def _parse_field_row(
    line: str,
    keyword: str,
    read_value: Callable[[Cursor], Optional[str]],
    row_kind: RowKind,
) -> str:
    cursor = Cursor(line)
    _expect_keyword(cursor, keyword, row_kind)
    cursor.skip_whitespace()

    value = read_value(cursor)
    if value is None:
        _fail(
            MalformedRowError,
            f"Missing or invalid {keyword.lower()} value",
            cursor,
            row_kind,
        )

    _expect_end(cursor, row_kind)
    return value


# ---------------------------------------------------------------------------
# Requirement rows
# ---------------------------------------------------------------------------


def parse_requirement_row(line: str) -> DependencySpecifier:
    """Parse a ``Requires-Dist:`` row into a :class:`DependencySpecifier`.

    Args:
        line: One metadata line without its terminator.

    Returns:
        Fully populated specifier.

    Raises:
        MalformedRowError: Keyword missing or structure does not match.
        InvalidOperatorError: Comparison operator is not recognised.
        InvalidEnvironmentVariableError: Marker variable is not recognised.
        UnexpectedTrailingInputError: Content remains after a complete match,
            including a third comma-separated version clause.

    Example::

        >>> spec = parse_requirement_row('Requires-Dist: pytest>=8.3.2; extra == "test"')
        >>> spec.name, str(spec.comparison), str(spec.marker)
        ('pytest', '>=8.3.2', 'extra == "test"')
    """
    cursor = Cursor(line)
    _expect_keyword(cursor, REQUIRES_DIST_KEYWORD, RowKind.REQUIRES_DIST)
    return _parse_specifier(cursor, RowKind.REQUIRES_DIST)


def parse_requirement(text: str) -> DependencySpecifier:
    """Parse the value part of a requirement row (no keyword).

    Example::

        >>> str(parse_requirement("virtualenv<21,>=20.26.4"))
        'virtualenv<21,>=20.26.4'
    """
    return _parse_specifier(Cursor(text), RowKind.REQUIRES_DIST)


def parse_version_comparison(text: str) -> VersionComparison:
    """Parse a standalone comparison such as ``>=1.0,<2.0``.

    The whole text must be consumed.
    """
    cursor = Cursor(text)
    cursor.skip_whitespace()
    comparison = _parse_comparison(cursor, RowKind.REQUIRES_DIST)
    cursor.skip_whitespace()
    _expect_end(cursor, RowKind.REQUIRES_DIST)
    return comparison


def parse_environment_marker(text: str) -> EnvironmentMarker:
    """Parse a standalone marker clause, with or without the leading ``;``.

    Example::

        >>> str(parse_environment_marker("; python_version < '3.11'"))
        'python_version < "3.11"'
    """
    cursor = Cursor(text)
    cursor.skip_whitespace()
    if cursor.take_literal(";"):
        cursor.skip_whitespace()
    marker = _parse_marker(cursor, RowKind.REQUIRES_DIST)
    cursor.skip_whitespace()
    _expect_end(cursor, RowKind.REQUIRES_DIST)
    return marker


def _parse_specifier(cursor: Cursor, row_kind: RowKind) -> DependencySpecifier:
    cursor.skip_whitespace()
    name = read_name(cursor)
    if name is None:
        _fail(MalformedRowError, "Missing distribution name", cursor, row_kind)

    cursor.skip_whitespace()
    extras = _parse_extras(cursor, row_kind)

    cursor.skip_whitespace()
    comparison = _parse_optional_comparison(cursor, row_kind)

    cursor.skip_whitespace()
    marker: Optional[EnvironmentMarker] = None
    if cursor.take_literal(";"):
        cursor.skip_whitespace()
        marker = _parse_marker(cursor, row_kind)
        cursor.skip_whitespace()

    _expect_end(cursor, row_kind)
    return DependencySpecifier(
        name=name,
        comparison=comparison,
        marker=marker,
        extras=extras,
    )


def _parse_extras(cursor: Cursor, row_kind: RowKind) -> Tuple[str, ...]:
    if not cursor.take_literal("["):
        return ()

    extras = []
    cursor.skip_whitespace()
    if cursor.take_literal("]"):
        return ()

    while True:
        cursor.skip_whitespace()
        extra = read_name(cursor)
        if extra is None:
            _fail(MalformedRowError, "Expected an extra name", cursor, row_kind)
        extras.append(extra)

        cursor.skip_whitespace()
        if cursor.take_literal(","):
            continue
        if cursor.take_literal("]"):
            return tuple(extras)
        _fail(MalformedRowError, "Unterminated extras list", cursor, row_kind)


def _parse_optional_comparison(
    cursor: Cursor, row_kind: RowKind
) -> Optional[VersionComparison]:
    if cursor.take_literal("("):
        cursor.skip_whitespace()
        comparison = _parse_comparison(cursor, row_kind)
        cursor.skip_whitespace()
        if not cursor.take_literal(")"):
            _fail(MalformedRowError, "Expected ')'", cursor, row_kind)
        return comparison

    if cursor.lookahead(OPERATOR_PATTERN) is None:
        return None
    return _parse_comparison(cursor, row_kind)


def _parse_comparison(cursor: Cursor, row_kind: RowKind) -> VersionComparison:
    first = _parse_clause(cursor, row_kind)
    cursor.skip_whitespace()

    second: Optional[VersionClause] = None
    if cursor.take_literal(","):
        cursor.skip_whitespace()
        second = _parse_clause(cursor, row_kind)
        cursor.skip_whitespace()
        if cursor.peek() == ",":
            _fail(
                UnexpectedTrailingInputError,
                "At most two version clauses are supported",
                cursor,
                row_kind,
            )

    return VersionComparison(first=first, second=second)


def _parse_clause(cursor: Cursor, row_kind: RowKind) -> VersionClause:
    operator = _parse_operator(cursor, row_kind)
    cursor.skip_whitespace()

    version = read_version(cursor)
    if version is None:
        _fail(
            MalformedRowError,
            f"Expected a version after '{operator.value}'",
            cursor,
            row_kind,
        )
    return VersionClause(operator=operator, version=version)


def _parse_operator(cursor: Cursor, row_kind: RowKind) -> ComparisonOperator:
    start = cursor.pos
    run = read_operator(cursor)
    if run is None:
        word = read_word_operator(cursor)
        if word is not None:
            raise InvalidOperatorError(
                f"Unsupported comparison operator '{word}'",
                line_content=cursor.text,
                row_kind=row_kind,
                position=start,
            )
        _fail(MalformedRowError, "Expected a comparison operator", cursor, row_kind)

    operator, leftover = split_operator(run)
    if operator is None or leftover:
        raise InvalidOperatorError(
            f"Unknown comparison operator '{run}'",
            line_content=cursor.text,
            row_kind=row_kind,
            position=start,
        )
    return operator


def _parse_marker(cursor: Cursor, row_kind: RowKind) -> EnvironmentMarker:
    start = cursor.pos
    identifier = read_identifier(cursor)
    if identifier is None:
        _fail(
            MalformedRowError,
            "Expected an environment variable after ';'",
            cursor,
            row_kind,
        )

    try:
        variable = EnvironmentVariable(identifier)
    except ValueError:
        raise InvalidEnvironmentVariableError(
            f"Unknown environment variable '{identifier}'",
            line_content=cursor.text,
            row_kind=row_kind,
            position=start,
        ) from None

    cursor.skip_whitespace()
    operator = _parse_operator(cursor, row_kind)

    cursor.skip_whitespace()
    value = read_string_literal(cursor)
    if value is None:
        _fail(
            MalformedRowError,
            "Expected a quoted value with matching quotes",
            cursor,
            row_kind,
        )
    return EnvironmentMarker(variable=variable, operator=operator, value=value)


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _expect_keyword(cursor: Cursor, keyword: str, row_kind: RowKind) -> None:
    if not cursor.take_literal(f"{keyword}{ROW_SEPARATOR}", ignore_case=True):
        _fail(
            MalformedRowError,
            f"Expected '{keyword}{ROW_SEPARATOR}' keyword",
            cursor,
            row_kind,
        )


def _expect_end(cursor: Cursor, row_kind: RowKind) -> None:
    if not cursor.at_end:
        _fail(
            UnexpectedTrailingInputError,
            f"Unexpected trailing input '{cursor.rest}'",
            cursor,
            row_kind,
        )


def _fail(
    error_cls: Type[RowParseError],
    message: str,
    cursor: Cursor,
    row_kind: RowKind,
) -> NoReturn:
    raise error_cls(
        message,
        line_content=cursor.text,
        row_kind=row_kind,
        position=cursor.pos,
    )


#: Row parser for each recognised keyword.
ROW_PARSERS: Dict[RowKind, Callable[[str], object]] = {
    RowKind.NAME: parse_name_row,
    RowKind.VERSION: parse_version_row,
    RowKind.REQUIRES_DIST: parse_requirement_row,
}
