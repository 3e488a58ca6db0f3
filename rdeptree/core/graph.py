"""Dependency graph over one set of installed distributions.

Records are keyed by their PEP 503 normalized name so that a requirement
on ``Typing_Extensions`` links to the record named ``typing-extensions``.
The graph only links what is already installed; it never looks for other
candidate versions.

Typical usage::

    from rdeptree.core.graph import DependencyGraph

    graph = DependencyGraph.from_records(records)
    for root in graph.roots():
        for node in graph.walk(root.key):
            print("  " * node.depth, node.edge.specifier.name)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Set

from packaging.utils import canonicalize_name

from rdeptree.models.record import MetadataRecord
from rdeptree.models.specifier import DependencySpecifier
from rdeptree.utils.logger import get_logger
from rdeptree.utils.version_utils import satisfies

logger = get_logger("graph")

__all__ = ["DependencyEdge", "DependencyGraph", "TreeNode"]


@dataclass(frozen=True)
class DependencyEdge:
    """A requirement of *source*, linked to the installed *target* if any.

    Attributes:
        source: The record declaring the requirement.
        specifier: The parsed requirement.
        target: Installed record satisfying the name, or ``None`` if missing.
    """

    source: MetadataRecord
    specifier: DependencySpecifier
    target: Optional[MetadataRecord] = None

    @property
    def target_key(self) -> str:
        return canonicalize_name(self.specifier.name)

    @property
    def is_missing(self) -> bool:
        return self.target is None

    @property
    def is_satisfied(self) -> Optional[bool]:
        """Whether the installed target version matches the comparison.

        ``None`` when the target is missing or a version is not PEP 440.
        """
        if self.target is None:
            return None
        return satisfies(self.target.version, self.specifier.clauses)


@dataclass(frozen=True)
class TreeNode:
    """One step of a depth-first walk.

    Attributes:
        depth: Distance from the starting record (direct requirements are 1).
        edge: The requirement leading to this node.
        cycle: True when the target is already on the current path; the
            walk does not descend into it.
    """

    depth: int
    edge: DependencyEdge
    cycle: bool = False


class DependencyGraph:
    """Directed requirement graph over installed distributions.

    Args:
        include_extras: Keep requirements gated by an ``extra == "..."``
            marker. They describe optional features, so they are dropped
            by default.
    """

    def __init__(self, *, include_extras: bool = False) -> None:
        self.include_extras = include_extras
        self._records: Dict[str, MetadataRecord] = {}

    @classmethod
    def from_records(
        cls,
        records: Iterable[MetadataRecord],
        *,
        include_extras: bool = False,
    ) -> "DependencyGraph":
        graph = cls(include_extras=include_extras)
        for record in records:
            graph.add(record)
        return graph

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def add(self, record: MetadataRecord) -> None:
        """Add *record*, replacing any record with the same normalized name."""
        previous = self._records.get(record.key)
        if previous is not None:
            logger.warning(
                "Duplicate distribution %s: %s replaces %s",
                record.key,
                record.version,
                previous.version,
            )
        self._records[record.key] = record

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and canonicalize_name(name) in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[MetadataRecord]:
        return iter(self.records())

    def get(self, name: str) -> Optional[MetadataRecord]:
        """Return the record for *name* (any spelling), or ``None``."""
        return self._records.get(canonicalize_name(name))

    def records(self) -> List[MetadataRecord]:
        """Return all records sorted by normalized name."""
        return [self._records[key] for key in sorted(self._records)]

    def requirements_of(self, name: str) -> List[DependencyEdge]:
        """Return the outgoing edges of *name* in declaration order.

        Raises:
            KeyError: *name* is not in the graph.
        """
        record = self._records[canonicalize_name(name)]
        return [
            DependencyEdge(
                source=record,
                specifier=specifier,
                target=self._records.get(canonicalize_name(specifier.name)),
            )
            for specifier in record.requirements
            if self._keeps(specifier)
        ]

    def edges(self) -> Iterator[DependencyEdge]:
        for record in self.records():
            yield from self.requirements_of(record.key)

    def dependents(self, name: str) -> List[DependencyEdge]:
        """Return edges from every record that requires *name*."""
        key = canonicalize_name(name)
        return [edge for edge in self.edges() if edge.target_key == key]

    def missing(self) -> List[DependencyEdge]:
        """Return edges whose required distribution is not installed."""
        return [edge for edge in self.edges() if edge.is_missing]

    def roots(self) -> List[MetadataRecord]:
        """Return top-level distributions, i.e. ones nothing else requires.

        A cycle that no top-level distribution reaches would otherwise never
        be printed, so its first record (by normalized name) is added as an
        extra root. Every record is reachable from the result.
        """
        required: Set[str] = {
            edge.target_key
            for edge in self.edges()
            if edge.target_key != edge.source.key
        }
        roots = [record for record in self.records() if record.key not in required]

        reached: Set[str] = set()
        for record in roots:
            self._mark_reachable(record.key, reached)
        for record in self.records():
            if record.key not in reached:
                roots.append(record)
                self._mark_reachable(record.key, reached)
        return roots

    def walk(
        self,
        name: str,
        *,
        max_depth: Optional[int] = None,
    ) -> Iterator[TreeNode]:
        """Yield the requirements below *name* depth first.

        Args:
            name: Starting distribution.
            max_depth: Stop descending below this depth (``None`` = no limit).

        Raises:
            KeyError: *name* is not in the graph.
        """
        start = self._records[canonicalize_name(name)]
        yield from self._walk(start, 1, [start.key], max_depth)

    def _walk(
        self,
        record: MetadataRecord,
        depth: int,
        path: List[str],
        max_depth: Optional[int],
    ) -> Iterator[TreeNode]:
        if max_depth is not None and depth > max_depth:
            return

        for edge in self.requirements_of(record.key):
            cycle = edge.target_key in path
            yield TreeNode(depth=depth, edge=edge, cycle=cycle)

            if edge.target is not None and not cycle:
                path.append(edge.target_key)
                yield from self._walk(edge.target, depth + 1, path, max_depth)
                path.pop()

    def _mark_reachable(self, key: str, reached: Set[str]) -> None:
        stack = [key]
        while stack:
            current = stack.pop()
            if current in reached:
                continue
            reached.add(current)
            stack.extend(
                edge.target_key
                for edge in self.requirements_of(current)
                if edge.target is not None and edge.target_key not in reached
            )

    def _keeps(self, specifier: DependencySpecifier) -> bool:
        if specifier.marker is not None and specifier.marker.is_extra:
            return self.include_extras
        return True
