"""
Dependency specifier data model for rdeptree.

This module defines the structured, immutable value produced for a single
``Requires-Dist`` row: the required distribution name, optional extras,
up to two version clauses, and an optional single-clause environment
marker.

Closed vocabularies (comparison operators and environment variables) are
modelled as enums so that an unrecognised value cannot be represented once
a row has been parsed.
"""

from __future__ import annotations

from enum import Enum
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional, Tuple


class ComparisonOperator(str, Enum):
    """Version comparison operators accepted by the grammar.

    Members are declared longest-literal first; :meth:`by_length` relies on
    this so that ``===`` is tried before ``==`` and ``>=`` before ``>``.
    """

    ARBITRARY_EQUAL = "==="
    EQUAL = "=="
    COMPATIBLE = "~="
    NOT_EQUAL = "!="
    GREATER_EQUAL = ">="
    LESS_EQUAL = "<="
    GREATER = ">"
    LESS = "<"

    @classmethod
    def by_length(cls) -> Tuple["ComparisonOperator", ...]:
        """Return all operators ordered longest literal first."""
        return tuple(sorted(cls, key=lambda op: len(op.value), reverse=True))

    def __str__(self) -> str:
        return self.value


class EnvironmentVariable(str, Enum):
    """Environment marker variables recognised in a marker clause."""

    PYTHON_VERSION = "python_version"
    PYTHON_FULL_VERSION = "python_full_version"
    OS_NAME = "os_name"
    SYS_PLATFORM = "sys_platform"
    PLATFORM_RELEASE = "platform_release"
    PLATFORM_SYSTEM = "platform_system"
    PLATFORM_VERSION = "platform_version"
    PLATFORM_MACHINE = "platform_machine"
    PLATFORM_PYTHON_IMPLEMENTATION = "platform_python_implementation"
    IMPLEMENTATION_NAME = "implementation_name"
    IMPLEMENTATION_VERSION = "implementation_version"
    EXTRA = "extra"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class VersionClause:
    """A single ``operator version`` pair, e.g. ``>=1.21.1``."""

    operator: ComparisonOperator
    version: str

    def __str__(self) -> str:
        return f"{self.operator.value}{self.version}"


@dataclass(frozen=True)
class VersionComparison:
    """One or two comma-separated version clauses.

    The second clause is an optional field rather than a list entry, so
    the "at most two clauses" rule is carried by the type itself.

    Attributes:
        first: The leading clause.
        second: The optional clause following a comma.
    """

    first: VersionClause
    second: Optional[VersionClause] = None

    @property
    def clauses(self) -> Tuple[VersionClause, ...]:
        """Return the clauses in their original order."""
        if self.second is None:
            return (self.first,)
        return (self.first, self.second)

    def __iter__(self) -> Iterator[VersionClause]:
        return iter(self.clauses)

    def __len__(self) -> int:
        return len(self.clauses)

    def __str__(self) -> str:
        return ",".join(str(clause) for clause in self.clauses)


@dataclass(frozen=True)
class EnvironmentMarker:
    """A single ``variable operator "value"`` condition.

    Attributes:
        variable: The environment variable being tested.
        operator: Comparison operator.
        value: Body of the quoted string literal, without quotes.
    """

    variable: EnvironmentVariable
    operator: ComparisonOperator
    value: str

    @property
    def is_extra(self) -> bool:
        """Return True if the marker gates an optional ``extra`` feature."""
        return self.variable is EnvironmentVariable.EXTRA

    def __str__(self) -> str:
        return f'{self.variable.value} {self.operator.value} "{self.value}"'


@dataclass(frozen=True)
class DependencySpecifier:
    """Structured result of one ``Requires-Dist`` row.

    A specifier is always fully populated: parsing either produces this
    value or raises, never something in between.

    Attributes:
        name: Required distribution name, case preserved.
        comparison: Version constraint, or ``None`` for any version.
        marker: Environment condition, or ``None`` if unconditional.
        extras: Optional features requested from the distribution.

    Example::

        >>> spec = DependencySpecifier(
        ...     name="urllib3",
        ...     comparison=VersionComparison(
        ...         VersionClause(ComparisonOperator.GREATER_EQUAL, "1.21.1"),
        ...         VersionClause(ComparisonOperator.LESS, "3"),
        ...     ),
        ... )
        >>> spec.to_row()
        'Requires-Dist: urllib3>=1.21.1,<3'
    """

    name: str
    comparison: Optional[VersionComparison] = None
    marker: Optional[EnvironmentMarker] = None
    extras: Tuple[str, ...] = ()

    @property
    def clauses(self) -> Tuple[VersionClause, ...]:
        """Return version clauses, empty when the requirement is unpinned."""
        if self.comparison is None:
            return ()
        return self.comparison.clauses

    @property
    def specifier_string(self) -> str:
        """Return the comparison as a PEP 440 specifier string (may be empty)."""
        return str(self.comparison) if self.comparison is not None else ""

    def to_string(self) -> str:
        """Render the canonical requirement text (without row keyword).

        Returns:
            Text such as ``name[extra]>=1.0,<2; python_version < "3.11"``.
        """
        result = self.name

        if self.extras:
            result += f"[{','.join(self.extras)}]"

        if self.comparison is not None:
            result += str(self.comparison)

        if self.marker is not None:
            result += f"; {self.marker}"

        return result

    def to_json(self) -> Dict[str, Any]:
        """Serialize the specifier to a JSON-compatible dictionary."""
        entry: Dict[str, Any] = {"name": self.name}
        if self.extras:
            entry["extras"] = list(self.extras)
        entry["clauses"] = [
            {"operator": clause.operator.value, "version": clause.version}
            for clause in self.clauses
        ]
        if self.marker is not None:
            entry["marker"] = {
                "variable": self.marker.variable.value,
                "operator": self.marker.operator.value,
                "value": self.marker.value,
            }
        return entry

    def to_row(self) -> str:
        """Render the full ``Requires-Dist`` metadata row."""
        return f"Requires-Dist: {self.to_string()}"

    def __str__(self) -> str:
        return self.to_string()
