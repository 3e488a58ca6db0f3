"""
Command-line interface for rdeptree.

The ``rdeptree`` group sets up logging, loads the configuration file and
builds the shared :class:`~rdeptree.context.RDepTreeContext`; the
``tree`` and ``show`` subcommands live in :mod:`rdeptree.commands`.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Optional

import click

from rdeptree.config import load_config
from rdeptree.__version__ import __version__
from rdeptree.context import RDepTreeContext
from rdeptree.exceptions import ConfigError, RDepTreeError, RowKind, RowParseError
from rdeptree.utils.logger import get_logger, setup_logging
from rdeptree.utils.console import print_error, print_warning, reconfigure_console

logger = get_logger("cli")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to rdeptree.toml or a pyproject.toml with [tool.rdeptree].",
    envvar="RDEPTREE_CONFIG",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v progress, -vv per-record debug output).",
)
@click.option(
    "--color/--no-color",
    default=True,
    help="Enable or disable colored output.",
    envvar="RDEPTREE_COLOR",
)
@click.version_option(
    version=__version__,
    prog_name="rdeptree",
    message="%(prog)s %(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: int,
    color: bool,
) -> None:
    """rdeptree: dependency trees from installed package metadata.

    \b
    Available commands:
      rdeptree tree                Show the installed dependency tree
      rdeptree show FILE           Show one parsed METADATA file

    \b
    Examples:
      rdeptree tree
      rdeptree tree --package requests --depth 2
      rdeptree -v show site-packages/requests-2.31.0.dist-info/METADATA

    Use ``rdeptree COMMAND --help`` for command-specific options.
    """
    setup_logging(verbose)

    # The console reads NO_COLOR when it is (re)created
    if color:
        os.environ.pop("NO_COLOR", None)
    else:
        os.environ["NO_COLOR"] = "1"
    reconfigure_console()

    try:
        loaded_config = load_config(config)
    except ConfigError as exc:
        print_error(str(exc))
        raise SystemExit(1) from exc

    ctx.obj = RDepTreeContext(
        loaded_config,
        config_path=config,
        verbose=verbose,
        color=color,
    )

    logger.debug("rdeptree v%s", __version__)
    logger.debug("Config path: %s", ctx.obj.config_path)
    logger.debug("Config: %s", loaded_config.to_log_dict())


# Register CLI subcommands
try:
    from rdeptree.commands.show import show
    from rdeptree.commands.tree import tree

    cli.add_command(show)
    cli.add_command(tree)

except ImportError as exc:
    sys.stderr.write(f"FATAL: Failed to import CLI commands: {exc}\n")
    sys.exit(1)


def main() -> int:
    """Main entry point for the rdeptree CLI.

    Returns:
        Exit code:
            0   Success, every requirement satisfied
            1   Unsatisfied requirements or an application error
            2   Usage error (Click)
            130 Interrupted by user (Ctrl+C)
    """
    try:
        result = cli(standalone_mode=False)
        return result if isinstance(result, int) else 0

    except (click.exceptions.Abort, KeyboardInterrupt):
        print_warning("\nOperation cancelled by user")
        return 130

    except click.ClickException as exc:
        exc.show()
        return exc.exit_code

    except RowParseError as exc:
        print_error(str(exc))
        if exc.row_kind is RowKind.REQUIRES_DIST:
            print_warning(
                "Run without --strict (or set skip_invalid_rows = true) "
                "to skip rows that cannot be parsed"
            )
        logger.debug("Parse failure details: %s", exc.details, exc_info=True)
        return 1

    except RDepTreeError as exc:
        print_error(str(exc))
        logger.debug(
            "RDepTreeError details: %s",
            exc.details or "<none>",
            exc_info=True,
        )
        return 1

    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        logger.exception("Unhandled exception in CLI")
        return 1


if __name__ == "__main__":
    sys.exit(main())
