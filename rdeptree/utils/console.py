"""
Console output utilities for rdeptree using Rich.

This module provides user-facing output helpers for CLI commands.
For diagnostic or debug output, use :mod:`rdeptree.utils.logger`.

Guidelines:
- print_* functions: user-facing status messages
- print_table / print_dependency_tree: structured CLI output
- Logging should never go through this module
"""

from __future__ import annotations

import os
import sys
import threading
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, List, Optional

from rich.markup import escape
from rich.table import Table
from rich.theme import Theme
from rich.tree import Tree
from rich.console import Console

if TYPE_CHECKING:
    from rdeptree.core.graph import DependencyEdge, DependencyGraph
    from rdeptree.models.record import MetadataRecord

# ---------------------------------------------------------------------------
# Theme configuration
# ---------------------------------------------------------------------------

RDEPTREE_THEME = Theme(
    {
        "success": "bold green",
        "error": "bold red",
        "warning": "bold yellow",
        "info": "bold cyan",
        "dim": "dim",
        "highlight": "bold magenta",
    }
)

# ---------------------------------------------------------------------------
# Console lifecycle management
# ---------------------------------------------------------------------------

_console: Optional[Console] = None
_console_lock = threading.Lock()


def _should_use_color() -> bool:
    """Return True if colored output should be enabled."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("CI"):
        return False
    try:
        return sys.stdout.isatty()
    except (AttributeError, OSError):
        return False


def _get_console() -> Console:
    """Return a singleton Rich Console instance."""
    global _console

    if _console is None:
        with _console_lock:
            if _console is None:
                use_color = _should_use_color()
                _console = Console(
                    theme=RDEPTREE_THEME,
                    no_color=not use_color,
                    highlight=use_color,
                )
    return _console


def reconfigure_console() -> None:
    """Reset the global console instance.

    Useful if environment variables (e.g. NO_COLOR) change at runtime.
    """
    global _console
    with _console_lock:
        _console = None


# ---------------------------------------------------------------------------
# Status message helpers
# ---------------------------------------------------------------------------


def print_success(message: str, *, prefix: str = "[OK]") -> None:
    """Print a success message."""
    _get_console().print(f"{escape(prefix)} {escape(message)}", style="success")


def print_error(message: str, *, prefix: str = "[ERROR]") -> None:
    """Print an error message."""
    _get_console().print(f"{escape(prefix)} {escape(message)}", style="error")


def print_warning(message: str, *, prefix: str = "[WARNING]") -> None:
    """Print a warning message."""
    _get_console().print(f"{escape(prefix)} {escape(message)}", style="warning")


# ---------------------------------------------------------------------------
# Structured output
# ---------------------------------------------------------------------------


def print_table(
    data: List[Dict[str, Any]],
    *,
    headers: Optional[List[str]] = None,
    title: Optional[str] = None,
    caption: Optional[str] = None,
    column_styles: Optional[Dict[str, Dict[str, Any]]] = None,
    row_styler: Optional[Callable[[Dict[str, Any]], Optional[str]]] = None,
    show_row_lines: bool = False,
) -> None:
    """Render structured data as a Rich table.

    Args:
        data: List of row dictionaries.
        headers: Column order. Defaults to keys of the first row.
        title: Optional table title.
        caption: Optional table caption.
        column_styles: Per-column style configuration.
        row_styler: Optional callback returning a row style.
        show_row_lines: Whether to draw horizontal lines between rows.
    """
    if not data:
        return

    if headers is None:
        headers = list(data[0].keys())

    table = Table(
        title=title,
        caption=caption,
        show_header=True,
        header_style="bold",
        show_lines=show_row_lines,
    )

    column_styles = column_styles or {}
    for header in headers:
        config = column_styles.get(header, {})
        table.add_column(
            header,
            style=config.get("style"),
            justify=config.get("justify", "default"),
            no_wrap=config.get("no_wrap", False),
            width=config.get("width"),
            overflow=config.get("overflow", "fold"),
        )

    for row in data:
        values = [escape(str(row.get(h, ""))) for h in headers]
        style = row_styler(row) if row_styler else None
        table.add_row(*values, style=style)

    _get_console().print(table)


# ---------------------------------------------------------------------------
# Dependency tree rendering
# ---------------------------------------------------------------------------


def format_edge_label(edge: DependencyEdge, *, cycle: bool = False) -> str:
    """Return the Rich-markup label for one requirement in the tree.

    Shape: ``name [required: >=1.0, installed: 2.0]`` with the installed
    part colored by whether it satisfies the requirement.
    """
    required = edge.specifier.specifier_string or "Any"
    label = f"[bold]{escape(edge.specifier.name)}[/bold]"

    if edge.target is None:
        status = "[error]not installed[/error]"
    else:
        satisfied = edge.is_satisfied
        color = {True: "green", False: "red"}.get(satisfied, "yellow")
        status = f"installed: [{color}]{escape(edge.target.version)}[/{color}]"

    label += f" [dim]\\[required: {escape(required)}, {status}][/dim]"
    if edge.specifier.marker is not None:
        label += f" [dim]; {escape(str(edge.specifier.marker))}[/dim]"
    if cycle:
        label += " [warning](cycle)[/warning]"
    return label


def build_dependency_tree(
    graph: DependencyGraph,
    root: MetadataRecord,
    *,
    max_depth: Optional[int] = None,
) -> Tree:
    """Build a :class:`rich.tree.Tree` for *root* and its requirements."""
    tree = Tree(
        f"[highlight]{escape(root.name)}[/highlight]=={escape(root.version)}"
    )
    branches: List[Tree] = [tree]

    for node in graph.walk(root.key, max_depth=max_depth):
        # The walk is depth first, so the parent branch is at depth - 1
        del branches[node.depth :]
        branch = branches[-1].add(format_edge_label(node.edge, cycle=node.cycle))
        branches.append(branch)

    return tree


def print_dependency_tree(
    graph: DependencyGraph,
    roots: Optional[Iterable[MetadataRecord]] = None,
    *,
    max_depth: Optional[int] = None,
) -> None:
    """Print one tree per root distribution.

    Args:
        graph: Assembled dependency graph.
        roots: Distributions to start from; defaults to ``graph.roots()``.
        max_depth: Limit on requirement depth (``None`` = unlimited).
    """
    console = _get_console()
    for root in roots if roots is not None else graph.roots():
        console.print(build_dependency_tree(graph, root, max_depth=max_depth))


# ---------------------------------------------------------------------------
# Advanced / internal helpers
# ---------------------------------------------------------------------------


def get_raw_console() -> Console:
    """Return the underlying Rich Console instance."""
    return _get_console()
