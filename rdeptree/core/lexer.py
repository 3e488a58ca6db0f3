"""Lexical primitives for metadata rows.

Token rules shared by the row grammars:

- distribution names: ``[A-Za-z0-9._-]+``
- version tokens: ``[A-Za-z0-9._*+!-]+`` (also the body of a string literal)
- identifiers (environment variable position): ``[A-Za-z_][A-Za-z0-9_.]*``
- operator runs: ``[<>=!~]+``, resolved longest literal first
- word operators: ``in`` and ``not in``, recognised only so they can be
  rejected as unsupported operators
- string literals: a version token between matching ``'`` or ``"`` quotes

Only spaces and tabs count as skippable whitespace; line terminators are
expected to have been stripped by the caller.

All readers operate on a :class:`Cursor` and either consume a token and
return it, or return ``None`` without raising. Deciding whether a missing
token is an error is left to the grammar.
"""

from __future__ import annotations

import re
from typing import Optional, Pattern, Tuple

from rdeptree.models.specifier import ComparisonOperator

NAME_PATTERN: Pattern[str] = re.compile(r"[A-Za-z0-9._-]+")
VERSION_PATTERN: Pattern[str] = re.compile(r"[A-Za-z0-9._*+!-]+")
IDENTIFIER_PATTERN: Pattern[str] = re.compile(r"[A-Za-z_][A-Za-z0-9_.]*")
OPERATOR_PATTERN: Pattern[str] = re.compile(r"[<>=!~]+")
WORD_OPERATOR_PATTERN: Pattern[str] = re.compile(r"(?:not[ \t]+)?in\b")
WHITESPACE_PATTERN: Pattern[str] = re.compile(r"[ \t]+")

QUOTE_CHARACTERS: Tuple[str, ...] = ("'", '"')

_OPERATORS_LONGEST_FIRST: Tuple[ComparisonOperator, ...] = (
    ComparisonOperator.by_length()
)


class Cursor:
    """Read position over a single line of text."""

    __slots__ = ("text", "pos")

    def __init__(self, text: str, pos: int = 0) -> None:
        self.text = text
        self.pos = pos

    @property
    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    @property
    def rest(self) -> str:
        """Unconsumed remainder of the line."""
        return self.text[self.pos :]

    def peek(self) -> str:
        """Return the next character, or ``""`` at end of input."""
        return self.text[self.pos : self.pos + 1]

    def advance(self, count: int = 1) -> None:
        self.pos = min(self.pos + count, len(self.text))

    def skip_whitespace(self) -> None:
        self.take(WHITESPACE_PATTERN)

    def take(self, pattern: Pattern[str]) -> Optional[str]:
        """Consume and return a match of *pattern* anchored at the cursor."""
        match = pattern.match(self.text, self.pos)
        if match is None:
            return None
        self.pos = match.end()
        return match.group()

    def lookahead(self, pattern: Pattern[str]) -> Optional[str]:
        """Return a match of *pattern* at the cursor without consuming it."""
        match = pattern.match(self.text, self.pos)
        return match.group() if match else None

    def take_literal(self, literal: str, *, ignore_case: bool = False) -> bool:
        """Consume *literal* if the input continues with it."""
        segment = self.text[self.pos : self.pos + len(literal)]
        if ignore_case:
            matched = segment.lower() == literal.lower()
        else:
            matched = segment == literal
        if matched:
            self.pos += len(literal)
        return matched

    def __repr__(self) -> str:
        return f"Cursor(pos={self.pos}, rest={self.rest!r})"


def read_name(cursor: Cursor) -> Optional[str]:
    """Consume a distribution name token."""
    return cursor.take(NAME_PATTERN)


def read_version(cursor: Cursor) -> Optional[str]:
    """Consume a version token."""
    return cursor.take(VERSION_PATTERN)


def read_identifier(cursor: Cursor) -> Optional[str]:
    """Consume an identifier (used for environment variable names)."""
    return cursor.take(IDENTIFIER_PATTERN)


def read_operator(cursor: Cursor) -> Optional[str]:
    """Consume the whole run of operator characters at the cursor.

    The run is returned verbatim; use :func:`split_operator` to resolve it.
    Taking the whole run means ``>=1.0`` can never leave a stray ``=``
    behind for the version reader.
    """
    return cursor.take(OPERATOR_PATTERN)


def read_word_operator(cursor: Cursor) -> Optional[str]:
    """Consume a PEP 508 word comparator (``in`` or ``not in``)."""
    return cursor.take(WORD_OPERATOR_PATTERN)


def split_operator(run: str) -> Tuple[Optional[ComparisonOperator], str]:
    """Match the longest known operator at the start of *run*.

    Args:
        run: Operator-character run as returned by :func:`read_operator`.

    Returns:
        ``(operator, leftover)``. ``operator`` is ``None`` if no operator
        prefixes the run; ``leftover`` is whatever the operator did not cover.

    Example::

        >>> split_operator(">=")
        (<ComparisonOperator.GREATER_EQUAL: '>='>, '')
        >>> split_operator("=>")
        (None, '=>')
    """
    for operator in _OPERATORS_LONGEST_FIRST:
        if run.startswith(operator.value):
            return operator, run[len(operator.value) :]
    return None, run


def read_string_literal(cursor: Cursor) -> Optional[str]:
    """Consume a quoted literal and return its body.

    The body uses the version-token character class and the closing quote
    must be the same character as the opening one. On failure ``None`` is
    returned; the cursor may have moved past the opening quote.
    """
    quote = cursor.peek()
    if quote not in QUOTE_CHARACTERS:
        return None
    cursor.advance()

    body = cursor.take(VERSION_PATTERN)
    if body is None:
        return None

    if cursor.peek() != quote:
        return None
    cursor.advance()
    return body
