"""
Core functionality exports for rdeptree.

This module provides convenient access to the core subsystems of rdeptree.
Importing from here keeps user-facing imports clean and stable:

    from rdeptree.core import parse_requirement_row, build_record
"""

from __future__ import annotations

from rdeptree.core.grammar import (
    parse_environment_marker,
    parse_name_row,
    parse_requirement,
    parse_requirement_row,
    parse_version_comparison,
    parse_version_row,
)
from rdeptree.core.builder import (
    DuplicatePolicy,
    MetadataRecordBuilder,
    build_record,
    classify_row,
)
from rdeptree.core.graph import DependencyEdge, DependencyGraph, TreeNode
from rdeptree.core.locator import find_site_packages, load_environment, load_record

__all__ = [
    "parse_name_row",
    "parse_version_row",
    "parse_requirement_row",
    "parse_requirement",
    "parse_version_comparison",
    "parse_environment_marker",
    "DuplicatePolicy",
    "MetadataRecordBuilder",
    "build_record",
    "classify_row",
    "DependencyEdge",
    "DependencyGraph",
    "TreeNode",
    "find_site_packages",
    "load_environment",
    "load_record",
]
