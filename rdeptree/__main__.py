"""
Executable module for rdeptree.

``python -m rdeptree`` behaves like the ``rdeptree`` console script. It is
handy for inspecting an environment whose scripts directory is not on
``PATH``, e.g. ``.venv/bin/python -m rdeptree tree``.
"""

from __future__ import annotations

import sys


def main() -> int:
    """Run the CLI and return its exit code.

    The CLI is imported here so that a broken installation (for example a
    missing ``rich``) is reported on stderr instead of as a traceback.
    """
    try:
        from rdeptree.cli import main as cli_main
    except ImportError as exc:
        sys.stderr.write(
            f"rdeptree could not start on Python {sys.version.split()[0]}: {exc}\n"
        )
        return 1

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
