from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import click
import pytest

from rdeptree.config import RDepTreeConfig
from rdeptree.context import RDepTreeContext, pass_context


@pytest.mark.unit
class TestRDepTreeContext:
    """Tests for RDepTreeContext class."""

    def test_default_initialization(self) -> None:
        """Test RDepTreeContext initializes with correct default values."""
        ctx = RDepTreeContext()

        assert ctx.config_path is None
        assert ctx.verbose == 0
        assert ctx.color is True
        assert ctx.config == RDepTreeConfig()

    def test_instances_are_independent(self) -> None:
        """Test multiple RDepTreeContext instances are independent."""
        ctx1 = RDepTreeContext()
        ctx2 = RDepTreeContext()

        ctx1.verbose = 2
        ctx1.color = False
        ctx1.config.include_extras = True

        assert ctx2.verbose == 0
        assert ctx2.color is True
        assert ctx2.config.include_extras is False

    def test_all_attributes_can_be_set(self) -> None:
        """Test all context attributes can be set and retrieved."""
        ctx = RDepTreeContext()
        test_path = Path("/path/to/config.toml")
        mock_config = MagicMock(spec=RDepTreeConfig)

        ctx.config_path = test_path
        ctx.verbose = 2
        ctx.color = False
        ctx.config = mock_config

        assert ctx.config_path == test_path
        assert ctx.verbose == 2
        assert ctx.color is False
        assert ctx.config is mock_config

    def test_slots_prevents_arbitrary_attributes(self) -> None:
        """Test __slots__ prevents setting undefined attributes."""
        ctx = RDepTreeContext()

        with pytest.raises(AttributeError):
            ctx.arbitrary_attribute = "value"  # type: ignore

    def test_constructor_arguments(self, tmp_path: Path) -> None:
        """Test the config source path is used when no path is given."""
        config = RDepTreeConfig(source_path=tmp_path / "rdeptree.toml")

        ctx = RDepTreeContext(config, verbose=2, color=False)

        assert ctx.config is config
        assert ctx.config_path == tmp_path / "rdeptree.toml"
        assert ctx.verbose == 2
        assert ctx.color is False

    @pytest.mark.parametrize(
        "skip_invalid_rows,strict,expected",
        [
            (True, False, "skip"),
            (False, False, "raise"),
            (True, True, "raise"),
        ],
    )
    def test_on_error(
        self, skip_invalid_rows: bool, strict: bool, expected: str
    ) -> None:
        """Test --strict always wins over the configured row policy."""
        ctx = RDepTreeContext(RDepTreeConfig(skip_invalid_rows=skip_invalid_rows))

        assert ctx.on_error(strict) == expected

    @pytest.mark.parametrize(
        "configured,override,expected",
        [(False, None, False), (True, None, True), (True, False, False)],
    )
    def test_include_extras(
        self, configured: bool, override, expected: bool
    ) -> None:
        """Test an explicit flag overrides the configured value."""
        ctx = RDepTreeContext(RDepTreeConfig(include_extras=configured))

        assert ctx.include_extras(override) is expected


@pytest.mark.unit
class TestPassContextDecorator:
    """Tests for pass_context decorator."""

    def test_pass_context_injects_existing_context(self) -> None:
        """Test pass_context decorator injects existing RDepTreeContext."""

        @click.command()
        @pass_context
        def test_command(ctx: RDepTreeContext) -> RDepTreeContext:
            return ctx

        click_ctx = click.Context(click.Command("test"))
        rdeptree_ctx = RDepTreeContext()
        click_ctx.obj = rdeptree_ctx

        result = click_ctx.invoke(test_command)

        assert result is rdeptree_ctx

    def test_pass_context_creates_context_when_missing(self) -> None:
        """Test pass_context creates RDepTreeContext when none exists."""

        @click.command()
        @pass_context
        def test_command(ctx: RDepTreeContext) -> RDepTreeContext:
            return ctx

        click_ctx = click.Context(click.Command("test"))

        result = click_ctx.invoke(test_command)

        assert isinstance(result, RDepTreeContext)
        assert result.verbose == 0
        assert result.color is True
