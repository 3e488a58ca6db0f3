"""Tree command implementation for rdeptree.

Renders the dependency tree of an installed Python environment.

The command orchestrates three core components:

1. **Locator**: finds the site-packages directory (or uses ``--path``)
   and reads the header block of each distribution's metadata file.
2. **Record builder**: turns ``Name``/``Version``/``Requires-Dist`` rows
   into :class:`MetadataRecord` values.
3. **DependencyGraph**: links requirements to installed distributions
   and picks the top-level ones to start each tree from.

Typical usage::

    # Whole environment of the active interpreter / virtualenv
    $ rdeptree tree

    # A specific site-packages directory, two levels deep
    $ rdeptree tree --path .venv/lib/python3.12/site-packages --depth 2

    # Only the tree below requests, with optional extras drawn
    $ rdeptree tree --package requests --include-extras
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple

import click

from rdeptree.context import pass_context, RDepTreeContext
from rdeptree.core import DependencyGraph, find_site_packages, load_environment
from rdeptree.exceptions import RDepTreeError
from rdeptree.models import MetadataRecord
from rdeptree.utils import (
    get_logger,
    print_dependency_tree,
    print_success,
    print_warning,
)

logger = get_logger("commands.tree")


@click.command()
@click.option(
    "--path",
    "site_packages",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="site-packages directory to inspect (default: located automatically).",
)
@click.option(
    "--python",
    "python",
    type=str,
    default=None,
    help="Interpreter whose environment is inspected.",
)
@click.option(
    "--package",
    "-p",
    "packages",
    multiple=True,
    help="Only show the tree below these distributions (repeatable).",
)
@click.option(
    "--depth",
    "-d",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum requirement depth to display.",
)
@click.option(
    "--include-extras/--no-include-extras",
    default=None,
    help="Draw requirements that only apply to an optional extra.",
)
@click.option(
    "--strict",
    is_flag=True,
    help="Fail on the first malformed row or unreadable metadata file.",
)
@pass_context
def tree(
    ctx: RDepTreeContext,
    site_packages: Optional[Path],
    python: Optional[str],
    packages: Tuple[str, ...],
    depth: Optional[int],
    include_extras: Optional[bool],
    strict: bool,
) -> None:
    """Show the dependency tree of installed distributions.

    Each top-level distribution (one that nothing else requires) starts a
    tree. Requirements show the required range and the installed version;
    missing and out-of-range requirements are highlighted and reported in
    a summary line.

    Exits:
        0 if every requirement is installed within range, 1 otherwise or
        on error.
    """
    directory = site_packages or find_site_packages(python)
    logger.info("Inspecting %s", directory)

    records = load_environment(
        directory,
        duplicate_policy=ctx.config.duplicate_fields,
        on_error=ctx.on_error(strict),
    )
    graph = DependencyGraph.from_records(
        records, include_extras=ctx.include_extras(include_extras)
    )

    roots = _select_roots(graph, packages)
    print_dependency_tree(graph, roots, max_depth=depth)

    problems = _report_problems(graph)
    if problems:
        click.get_current_context().exit(1)

    print_success(f"{len(graph)} distribution(s), all requirements satisfied")


def _select_roots(
    graph: DependencyGraph, packages: Tuple[str, ...]
) -> List[MetadataRecord]:
    if not packages:
        return graph.roots()

    roots: List[MetadataRecord] = []
    for name in packages:
        record = graph.get(name)
        if record is None:
            raise RDepTreeError(
                f"Distribution not installed: {name}",
                details={"package": name},
            )
        roots.append(record)
    return roots


def _report_problems(graph: DependencyGraph) -> int:
    """Print missing and out-of-range requirements; return how many.

    A missing requirement only counts when it is unconditional; one behind
    an environment marker may simply not apply to this interpreter.
    """
    problems = 0

    for edge in graph.missing():
        if edge.specifier.marker is not None:
            logger.debug("Conditional requirement not installed: %s", edge.specifier)
            continue
        print_warning(
            f"{edge.source.name} requires {edge.specifier.to_string()}, "
            "which is not installed"
        )
        problems += 1

    for edge in graph.edges():
        if edge.is_satisfied is False:
            print_warning(
                f"{edge.source.name} requires {edge.specifier.to_string()}, "
                f"but {edge.target.version} is installed"
            )
            problems += 1

    return problems
