"""Show command implementation for rdeptree.

Parses a single ``METADATA`` / ``PKG-INFO`` file and prints the resulting
record. Useful for checking how individual ``Requires-Dist`` rows are
understood without scanning a whole environment.

Typical usage::

    $ rdeptree show site-packages/requests-2.31.0.dist-info/METADATA

    # Machine-readable output
    $ rdeptree show PKG-INFO --format json | jq '.requirements[].name'
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import click
from rich.markup import escape

from rdeptree.context import pass_context, RDepTreeContext
from rdeptree.core import load_record
from rdeptree.models import DependencySpecifier, MetadataRecord
from rdeptree.utils import get_logger, get_raw_console, print_table, print_warning

logger = get_logger("commands.show")


@click.command()
@click.argument(
    "metadata_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@click.option(
    "--strict",
    is_flag=True,
    help="Fail on the first malformed Requires-Dist row.",
)
@pass_context
def show(
    ctx: RDepTreeContext,
    metadata_file: Path,
    format: str,
    strict: bool,
) -> None:
    """Show the parsed contents of one metadata file.

    Args:
        ctx: rdeptree context with configuration and verbosity settings.
        metadata_file: Path to a ``METADATA`` or ``PKG-INFO`` file.
        format: Output format (``table`` or ``json``).
        strict: Abort on malformed rows even if the configuration skips them.
    """
    logger.info("Reading %s", metadata_file)
    record = load_record(
        metadata_file,
        duplicate_policy=ctx.config.duplicate_fields,
        on_error=ctx.on_error(strict),
    )

    if format.lower() == "json":
        click.echo(json.dumps(record.to_json(), indent=2))
    else:
        _display_table(record)


def _display_table(record: MetadataRecord) -> None:
    console = get_raw_console()
    console.print(
        f"[highlight]{escape(record.name)}[/highlight] {escape(record.version)}"
    )

    if not record.requirements:
        print_warning("No Requires-Dist rows")
        return

    print_table(
        [_requirement_row(spec) for spec in record.requirements],
        headers=["Requirement", "Extras", "Required", "Marker"],
        column_styles={
            "Requirement": {"style": "bold cyan", "no_wrap": True},
            "Required": {"style": "green"},
            "Marker": {"style": "dim"},
        },
    )


def _requirement_row(spec: DependencySpecifier) -> Dict[str, Any]:
    return {
        "Requirement": spec.name,
        "Extras": ", ".join(spec.extras),
        "Required": spec.specifier_string or "Any",
        "Marker": str(spec.marker) if spec.marker is not None else "",
    }
