"""
Unified data model exports for rdeptree.

This module re-exports all core data models to provide a stable and
convenient public API. Users can import models directly from
``rdeptree.models`` instead of individual submodules.

Example:
    >>> from rdeptree.models import DependencySpecifier, MetadataRecord
"""

from __future__ import annotations

from rdeptree.models.record import MetadataRecord
from rdeptree.models.specifier import (
    ComparisonOperator,
    DependencySpecifier,
    EnvironmentMarker,
    EnvironmentVariable,
    VersionClause,
    VersionComparison,
)

__all__ = [
    "ComparisonOperator",
    "DependencySpecifier",
    "EnvironmentMarker",
    "EnvironmentVariable",
    "MetadataRecord",
    "VersionClause",
    "VersionComparison",
]
