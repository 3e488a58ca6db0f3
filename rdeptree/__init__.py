"""
rdeptree: dependency trees from installed package metadata

rdeptree reads the ``METADATA`` files of an installed Python environment,
parses their ``Name``, ``Version`` and ``Requires-Dist`` rows into
structured values, and links them into a dependency graph.

The row grammar is usable on its own::

    >>> from rdeptree import parse_requirement_row
    >>> spec = parse_requirement_row("Requires-Dist: urllib3>=1.21.1,<3")
    >>> [str(clause) for clause in spec.clauses]
    ['>=1.21.1', '<3']
"""

from __future__ import annotations

from rdeptree.__version__ import __version__
from rdeptree.core import (
    DependencyGraph,
    build_record,
    parse_name_row,
    parse_requirement_row,
    parse_version_row,
)
from rdeptree.models import DependencySpecifier, MetadataRecord

# ---------------------------------------------------------------------------
# Package Metadata
# ---------------------------------------------------------------------------

__author__ = "rdeptree Contributors"
__license__ = "MIT"
__description__ = "Dependency trees from installed Python package metadata."

__all__ = [
    "__version__",
    "DependencyGraph",
    "DependencySpecifier",
    "MetadataRecord",
    "build_record",
    "parse_name_row",
    "parse_requirement_row",
    "parse_version_row",
]
