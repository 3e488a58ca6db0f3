from __future__ import annotations

from typing import List

import pytest

from rdeptree.core.builder import build_record
from rdeptree.core.graph import DependencyEdge, DependencyGraph, TreeNode
from rdeptree.core.grammar import parse_requirement
from rdeptree.models import MetadataRecord


def _record(name: str, version: str, *requires: str) -> MetadataRecord:
    lines = [f"Name: {name}", f"Version: {version}"]
    lines.extend(f"Requires-Dist: {requirement}" for requirement in requires)
    return build_record(lines)


@pytest.fixture
def records() -> List[MetadataRecord]:
    """Provide a small environment with one missing and one stale requirement.

    Returns:
        Records for app, requests, urllib3, idna and click.
    """
    return [
        _record("app", "1.0", "requests>=2.0", "Click"),
        _record("requests", "2.31.0", "urllib3<3,>=1.21.1", "idna>=2.5", "certifi"),
        _record("urllib3", "2.0.7"),
        _record("idna", "1.0"),
        _record("click", "8.1.7", 'colorama; extra == "windows"'),
    ]


@pytest.fixture
def graph(records: List[MetadataRecord]) -> DependencyGraph:
    """Provide the graph built from ``records``.

    Returns:
        DependencyGraph without extras.
    """
    return DependencyGraph.from_records(records)


@pytest.mark.unit
class TestDependencyEdge:
    """Tests for DependencyEdge satisfaction checks."""

    def test_missing_target(self) -> None:
        """Test an edge without target is missing and undecided."""
        edge = DependencyEdge(
            source=_record("a", "1"), specifier=parse_requirement("b>=1")
        )

        assert edge.is_missing is True
        assert edge.is_satisfied is None
        assert edge.target_key == "b"

    @pytest.mark.parametrize(
        "requirement,installed,expected",
        [
            ("b>=1.0", "1.5", True),
            ("b>=1.0,<2", "2.0", False),
            ("b", "0.1", True),
            ("b~=1.4", "1.9", True),
            ("b!=1.5", "1.5", False),
            ("b>=1.0", "2.0rc1", True),
            ("b>=1.0", "not-a-version", None),
        ],
    )
    def test_is_satisfied(self, requirement: str, installed: str, expected) -> None:
        """Test the installed version is checked against the comparison."""
        edge = DependencyEdge(
            source=_record("a", "1"),
            specifier=parse_requirement(requirement),
            target=_record("b", installed),
        )

        assert edge.is_satisfied is expected

    def test_target_key_is_normalized(self) -> None:
        """Test the requirement name is normalized for lookup."""
        edge = DependencyEdge(
            source=_record("a", "1"),
            specifier=parse_requirement("Typing_Extensions>=4"),
        )

        assert edge.target_key == "typing-extensions"


@pytest.mark.unit
class TestDependencyGraphQueries:
    """Tests for lookup and iteration."""

    def test_len_and_iteration_sorted(self, graph: DependencyGraph) -> None:
        """Test records iterate in normalized-name order."""
        assert len(graph) == 5
        assert [record.name for record in graph] == [
            "app",
            "click",
            "idna",
            "requests",
            "urllib3",
        ]

    @pytest.mark.parametrize("name", ["requests", "Requests", "REQUESTS"])
    def test_contains_any_spelling(self, graph: DependencyGraph, name: str) -> None:
        """Test membership ignores case and separators."""
        assert name in graph
        assert graph.get(name).version == "2.31.0"

    def test_contains_rejects_non_strings(self, graph: DependencyGraph) -> None:
        """Test non-string membership is simply False."""
        assert 42 not in graph
        assert "certifi" not in graph
        assert graph.get("certifi") is None

    def test_requirements_of(self, graph: DependencyGraph) -> None:
        """Test outgoing edges keep declaration order and link targets."""
        edges = graph.requirements_of("requests")

        assert [edge.specifier.name for edge in edges] == [
            "urllib3",
            "idna",
            "certifi",
        ]
        assert edges[0].target is graph.get("urllib3")
        assert edges[0].is_satisfied is True
        assert edges[1].is_satisfied is False
        assert edges[2].is_missing is True

    def test_requirements_of_links_differently_spelled_names(
        self, graph: DependencyGraph
    ) -> None:
        """Test ``Click`` links to the record named ``click``."""
        edges = graph.requirements_of("app")

        assert edges[1].specifier.name == "Click"
        assert edges[1].target is graph.get("click")

    def test_requirements_of_unknown(self, graph: DependencyGraph) -> None:
        """Test asking for an absent record raises KeyError."""
        with pytest.raises(KeyError):
            graph.requirements_of("certifi")

    def test_extras_dropped_by_default(self, graph: DependencyGraph) -> None:
        """Test extra-gated requirements are not edges by default."""
        assert graph.requirements_of("click") == []

    def test_extras_included_on_request(self, records) -> None:
        """Test include_extras keeps extra-gated requirements."""
        graph = DependencyGraph.from_records(records, include_extras=True)

        edges = graph.requirements_of("click")
        assert [edge.specifier.name for edge in edges] == ["colorama"]
        assert edges[0].is_missing is True

    def test_non_extra_markers_are_kept(self) -> None:
        """Test platform markers do not hide a requirement."""
        graph = DependencyGraph.from_records(
            [_record("a", "1", 'b; sys_platform == "win32"'), _record("b", "1")]
        )

        assert len(graph.requirements_of("a")) == 1

    def test_dependents(self, graph: DependencyGraph) -> None:
        """Test reverse lookup of requiring records."""
        sources = [edge.source.name for edge in graph.dependents("REQUESTS")]

        assert sources == ["app"]

    def test_missing(self, graph: DependencyGraph) -> None:
        """Test edges to uninstalled distributions are reported."""
        missing = graph.missing()

        assert [(e.source.name, e.specifier.name) for e in missing] == [
            ("requests", "certifi")
        ]

    def test_edges_cover_all_records(self, graph: DependencyGraph) -> None:
        """Test edges() iterates every record's requirements."""
        assert len(list(graph.edges())) == 5


@pytest.mark.unit
class TestDependencyGraphBuilding:
    """Tests for adding records."""

    def test_duplicate_replaces(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test a second record with the same normalized name wins."""
        graph = DependencyGraph()
        graph.add(_record("Foo_Bar", "1.0"))

        with caplog.at_level("WARNING"):
            graph.add(_record("foo-bar", "2.0"))

        assert len(graph) == 1
        assert graph.get("foo.bar").version == "2.0"
        assert "Duplicate distribution" in caplog.text


@pytest.mark.unit
class TestRoots:
    """Tests for top-level distribution selection."""

    def test_roots(self, graph: DependencyGraph) -> None:
        """Test only records nothing requires are roots."""
        assert [record.name for record in graph.roots()] == ["app"]

    def test_self_requirement_does_not_hide_root(self) -> None:
        """Test a record requiring itself is still a root."""
        graph = DependencyGraph.from_records(
            [_record("a", "1", "a[extra]"), _record("b", "1")]
        )

        assert [record.name for record in graph.roots()] == ["a", "b"]

    def test_pure_cycle_starts_from_first_record(self) -> None:
        """Test a graph made only of a cycle is entered at its first record."""
        graph = DependencyGraph.from_records(
            [_record("a", "1", "b"), _record("b", "1", "a")]
        )

        assert [record.name for record in graph.roots()] == ["a"]

    def test_detached_cycle_gets_a_root(self) -> None:
        """Test a cycle nothing else requires is still reachable."""
        graph = DependencyGraph.from_records(
            [_record("c", "1"), _record("a", "1", "b"), _record("b", "1", "a")]
        )

        roots = graph.roots()

        assert [record.name for record in roots] == ["c", "a"]
        reachable = {record.key for record in roots} | {
            node.edge.target_key for root in roots for node in graph.walk(root.key)
        }
        assert reachable == {"a", "b", "c"}

    def test_cycle_below_a_root_adds_nothing(self) -> None:
        """Test a cycle reached from a top-level record needs no extra root."""
        graph = DependencyGraph.from_records(
            [
                _record("app", "1", "a"),
                _record("a", "1", "b"),
                _record("b", "1", "a"),
            ]
        )

        assert [record.name for record in graph.roots()] == ["app"]

    def test_empty_graph(self) -> None:
        """Test an empty graph has no roots."""
        assert DependencyGraph().roots() == []


@pytest.mark.unit
class TestWalk:
    """Tests for depth-first traversal."""

    def test_depth_first_order(self, graph: DependencyGraph) -> None:
        """Test nodes are yielded parent before children."""
        nodes = list(graph.walk("app"))

        assert [(n.depth, n.edge.specifier.name) for n in nodes] == [
            (1, "requests"),
            (2, "urllib3"),
            (2, "idna"),
            (2, "certifi"),
            (1, "Click"),
        ]
        assert all(isinstance(node, TreeNode) for node in nodes)
        assert not any(node.cycle for node in nodes)

    def test_max_depth(self, graph: DependencyGraph) -> None:
        """Test max_depth stops descending."""
        nodes = list(graph.walk("app", max_depth=1))

        assert [n.edge.specifier.name for n in nodes] == ["requests", "Click"]

    def test_cycle_is_marked_not_followed(self) -> None:
        """Test a requirement back onto the path is marked and not expanded."""
        graph = DependencyGraph.from_records(
            [
                _record("a", "1", "b"),
                _record("b", "1", "c"),
                _record("c", "1", "A"),
            ]
        )

        nodes = list(graph.walk("a"))

        assert [(n.depth, n.edge.specifier.name, n.cycle) for n in nodes] == [
            (1, "b", False),
            (2, "c", False),
            (3, "A", True),
        ]

    def test_shared_dependency_is_not_a_cycle(self) -> None:
        """Test a diamond visits the shared node under both parents."""
        graph = DependencyGraph.from_records(
            [
                _record("top", "1", "left", "right"),
                _record("left", "1", "base"),
                _record("right", "1", "base"),
                _record("base", "1"),
            ]
        )

        nodes = list(graph.walk("top"))

        assert [n.edge.specifier.name for n in nodes] == [
            "left",
            "base",
            "right",
            "base",
        ]
        assert not any(node.cycle for node in nodes)

    def test_walk_unknown(self, graph: DependencyGraph) -> None:
        """Test walking from an absent record raises KeyError."""
        with pytest.raises(KeyError):
            list(graph.walk("certifi"))
