from __future__ import annotations

import pytest

from rdeptree.core.lexer import (
    Cursor,
    VERSION_PATTERN,
    read_identifier,
    read_name,
    read_operator,
    read_string_literal,
    read_version,
    read_word_operator,
    split_operator,
)
from rdeptree.models.specifier import ComparisonOperator


@pytest.mark.unit
class TestCursor:
    """Tests for the Cursor read position."""

    def test_initial_state(self) -> None:
        """Test a fresh cursor is at the start of the text."""
        cursor = Cursor("abc")

        assert cursor.pos == 0
        assert cursor.rest == "abc"
        assert cursor.peek() == "a"
        assert cursor.at_end is False

    def test_empty_text_is_at_end(self) -> None:
        """Test an empty line starts at end of input."""
        cursor = Cursor("")

        assert cursor.at_end is True
        assert cursor.peek() == ""

    def test_advance_is_clamped(self) -> None:
        """Test advancing never moves past the end."""
        cursor = Cursor("ab")
        cursor.advance(10)

        assert cursor.pos == 2
        assert cursor.at_end is True

    def test_skip_whitespace_spaces_and_tabs_only(self) -> None:
        """Test only spaces and tabs are skipped."""
        cursor = Cursor(" \t x")
        cursor.skip_whitespace()
        assert cursor.rest == "x"

        cursor = Cursor("\nx")
        cursor.skip_whitespace()
        assert cursor.pos == 0

    def test_take_consumes_match(self) -> None:
        """Test take returns the anchored match and advances."""
        cursor = Cursor("1.0,<2")

        assert cursor.take(VERSION_PATTERN) == "1.0"
        assert cursor.rest == ",<2"

    def test_take_is_anchored(self) -> None:
        """Test take does not search ahead for a match."""
        cursor = Cursor(",1.0")

        assert cursor.take(VERSION_PATTERN) is None
        assert cursor.pos == 0

    def test_lookahead_does_not_consume(self) -> None:
        """Test lookahead leaves the position unchanged."""
        cursor = Cursor("1.0")

        assert cursor.lookahead(VERSION_PATTERN) == "1.0"
        assert cursor.pos == 0

    @pytest.mark.parametrize(
        "text,ignore_case,expected",
        [
            ("Name: x", False, True),
            ("name: x", False, False),
            ("NAME: x", True, True),
            ("Nam", True, False),
        ],
    )
    def test_take_literal(self, text: str, ignore_case: bool, expected: bool) -> None:
        """Test literal matching with and without case folding."""
        cursor = Cursor(text)

        assert cursor.take_literal("Name:", ignore_case=ignore_case) is expected
        assert cursor.pos == (5 if expected else 0)


@pytest.mark.unit
class TestTokenReaders:
    """Tests for the token readers."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("requests", "requests"),
            ("zope.interface", "zope.interface"),
            ("typing_extensions>=4", "typing_extensions"),
            ("ruamel.yaml.clib-0.2", "ruamel.yaml.clib-0.2"),
            ("foo[bar]", "foo"),
            ("[bar]", None),
        ],
    )
    def test_read_name(self, text: str, expected) -> None:
        """Test distribution name token boundaries."""
        assert read_name(Cursor(text)) == expected

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("2.31.0", "2.31.0"),
            ("1!1.0", "1!1.0"),
            ("1.0+local.7", "1.0+local.7"),
            ("2.*", "2.*"),
            ("1.0rc1-post2", "1.0rc1-post2"),
            ("3,<4", "3"),
            ("3 ", "3"),
            ("3;", "3"),
        ],
    )
    def test_read_version(self, text: str, expected: str) -> None:
        """Test version token boundaries."""
        assert read_version(Cursor(text)) == expected

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("python_version", "python_version"),
            ("extra==", "extra"),
            ("_private", "_private"),
            ("9lives", None),
        ],
    )
    def test_read_identifier(self, text: str, expected) -> None:
        """Test identifiers must not start with a digit."""
        assert read_identifier(Cursor(text)) == expected

    def test_read_operator_takes_whole_run(self) -> None:
        """Test the whole operator character run is consumed."""
        cursor = Cursor(">==1.0")

        assert read_operator(cursor) == ">=="
        assert cursor.rest == "1.0"

    def test_read_operator_none(self) -> None:
        """Test no operator characters yields None."""
        assert read_operator(Cursor("1.0")) is None

    @pytest.mark.parametrize("text", ["in 'a'", "not in 'a'", "not \t in'a'"])
    def test_read_word_operator(self, text: str) -> None:
        """Test in and not in are consumed up to the value."""
        cursor = Cursor(text)

        assert read_word_operator(cursor) is not None
        assert cursor.rest.lstrip() == "'a'"

    @pytest.mark.parametrize("text", ["inside", "not", "nothing in", "== 'a'"])
    def test_read_word_operator_none(self, text: str) -> None:
        """Test other words are left for the grammar to reject."""
        cursor = Cursor(text)

        assert read_word_operator(cursor) is None
        assert cursor.pos == 0


@pytest.mark.unit
class TestSplitOperator:
    """Tests for longest-match operator resolution."""

    @pytest.mark.parametrize("operator", list(ComparisonOperator))
    def test_each_operator_matches_exactly(self, operator) -> None:
        """Test every operator is recognised with no leftover."""
        assert split_operator(operator.value) == (operator, "")

    @pytest.mark.parametrize(
        "run,expected,leftover",
        [
            ("===", ComparisonOperator.ARBITRARY_EQUAL, ""),
            ("====", ComparisonOperator.ARBITRARY_EQUAL, "="),
            (">==", ComparisonOperator.GREATER_EQUAL, "="),
            ("<>", ComparisonOperator.LESS, ">"),
            ("=>", None, "=>"),
            ("=", None, "="),
            ("!", None, "!"),
            ("~", None, "~"),
        ],
    )
    def test_longest_prefix_wins(self, run: str, expected, leftover: str) -> None:
        """Test the longest operator prefix is chosen."""
        assert split_operator(run) == (expected, leftover)


@pytest.mark.unit
class TestReadStringLiteral:
    """Tests for quoted literal reading."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ('"3.11"', "3.11"),
            ("'win32'", "win32"),
            ('"socks" trailing', "socks"),
        ],
    )
    def test_matching_quotes(self, text: str, expected: str) -> None:
        """Test a body between matching quotes is returned."""
        assert read_string_literal(Cursor(text)) == expected

    @pytest.mark.parametrize(
        "text",
        [
            "\"3.11'",
            "'3.11\"",
            '"3.11',
            '""',
            "3.11",
            '"Windows NT"',
        ],
    )
    def test_invalid_literals(self, text: str) -> None:
        """Test mismatched, unterminated, empty or unquoted literals fail."""
        assert read_string_literal(Cursor(text)) is None

    def test_cursor_after_literal(self) -> None:
        """Test the closing quote is consumed."""
        cursor = Cursor("'x' rest")
        read_string_literal(cursor)

        assert cursor.rest == " rest"
