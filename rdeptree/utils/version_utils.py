"""
Version comparison utilities for rdeptree.

This module checks an installed version against a parsed version
comparison using PEP 440 semantics from :mod:`packaging`. It answers a
single membership question; no candidate search or resolution happens
here.
"""

from __future__ import annotations

from typing import Iterable, Optional

from packaging.specifiers import InvalidSpecifier, SpecifierSet
from packaging.version import InvalidVersion, Version

from rdeptree.models.specifier import VersionClause


def to_specifier_set(clauses: Iterable[VersionClause]) -> Optional[SpecifierSet]:
    """Convert parsed clauses into a :class:`SpecifierSet`.

    Args:
        clauses: Version clauses in their original order.

    Returns:
        The specifier set, or ``None`` if a clause is not valid PEP 440
        (e.g. ``~=1`` or a wildcard used with ``>=``).
    """
    text = ",".join(str(clause) for clause in clauses)
    try:
        return SpecifierSet(text)
    except InvalidSpecifier:
        return None


def satisfies(
    installed_version: Optional[str],
    clauses: Iterable[VersionClause],
) -> Optional[bool]:
    """Return whether *installed_version* meets every clause.

    Pre-releases are accepted: an installed pre-release is what it is, and
    the question is only whether it falls inside the range.

    Args:
        installed_version: Version string of the installed distribution.
        clauses: Version clauses from a requirement; empty means "any".

    Returns:
        ``True`` or ``False``, or ``None`` when either side cannot be
        interpreted as PEP 440.

    Examples:
        >>> from rdeptree.core.grammar import parse_version_comparison
        >>> satisfies("2.31.0", parse_version_comparison(">=2.0,<3"))
        True
        >>> satisfies("1.0", parse_version_comparison(">=2.0"))
        False
        >>> satisfies("not-a-version", parse_version_comparison(">=2.0"))
    """
    if installed_version is None:
        return None

    specifier_set = to_specifier_set(clauses)
    if specifier_set is None:
        return None

    try:
        version = Version(installed_version)
    except InvalidVersion:
        return None

    return specifier_set.contains(version, prereleases=True)
