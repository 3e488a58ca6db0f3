"""
Shared context object for rdeptree CLI commands.

The group callback in :mod:`rdeptree.cli` builds one
:class:`RDepTreeContext` per invocation; subcommands receive it through
:data:`pass_context` and use it to merge their own flags with the loaded
configuration.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from rdeptree.config import RDepTreeConfig


class RDepTreeContext:
    """Per-invocation state shared by CLI commands.

    Attributes:
        config_path: Configuration file in effect, if any.
        config: Loaded configuration (defaults until the group callback runs).
        verbose: Number of ``-v`` flags.
        color: Whether colored terminal output is enabled.
    """

    __slots__ = ("config_path", "config", "verbose", "color")

    def __init__(
        self,
        config: Optional[RDepTreeConfig] = None,
        *,
        config_path: Optional[Path] = None,
        verbose: int = 0,
        color: bool = True,
    ) -> None:
        self.config: RDepTreeConfig = config or RDepTreeConfig()
        self.config_path = config_path or self.config.source_path
        self.verbose = verbose
        self.color = color

    def on_error(self, strict: bool = False) -> str:
        """Return the row error mode, ``"raise"`` whenever *strict* is set."""
        return "raise" if strict else self.config.on_error

    def include_extras(self, override: Optional[bool] = None) -> bool:
        """Return *override* if a flag was given, else the configured value."""
        if override is None:
            return self.config.include_extras
        return override


#: Click decorator for injecting :class:`RDepTreeContext` into commands.
pass_context = click.make_pass_decorator(RDepTreeContext, ensure=True)
