"""Unit tests for sqlrender.patterns."""

from __future__ import annotations

import pytest

from sqlrender.errors import PatternError
from sqlrender.patterns import Block, compile_pattern


class TestCompilePattern:
    """Verify the blocks produced for valid patterns."""

    def test_literals_and_variable(self) -> None:
        pattern = compile_pattern("a = @x and")
        assert list(pattern) == [
            Block("a"),
            Block("="),
            Block("@x", is_variable=True),
            Block("and"),
        ]

    def test_literals_are_lower_cased(self) -> None:
        pattern = compile_pattern("SELECT TOP 1")
        assert [block.text for block in pattern] == ["select", "top", "1"]

    def test_variable_names_are_lower_cased(self) -> None:
        pattern = compile_pattern("f(@Value)")
        assert pattern.variables == ("@value",)

    def test_lone_at_sign_is_literal(self) -> None:
        pattern = compile_pattern("a @ b")
        assert pattern[1] == Block("@", is_variable=False)

    def test_keeps_source_text(self) -> None:
        pattern = compile_pattern("ISNULL(@a,@b)")
        assert pattern.text == "ISNULL(@a,@b)"
        assert len(pattern) == 6
        assert pattern.variables == ("@a", "@b")

    def test_comments_in_pattern_are_ignored(self) -> None:
        pattern = compile_pattern("a /* note */ b")
        assert [block.text for block in pattern] == ["a", "b"]


class TestInvalidPatterns:
    """Verify that malformed patterns raise PatternError."""

    @pytest.mark.parametrize(
        "text",
        [
            "@x = 1",
            "a = @x",
            "@x",
        ],
    )
    def test_variable_at_either_end(self, text: str) -> None:
        with pytest.raises(PatternError, match="cannot start or end with a variable"):
            compile_pattern(text)

    @pytest.mark.parametrize("text", ["", "   "])
    def test_empty_pattern(self, text: str) -> None:
        with pytest.raises(PatternError, match="empty"):
            compile_pattern(text)

    def test_pattern_without_tokens(self) -> None:
        with pytest.raises(PatternError, match="no tokens"):
            compile_pattern("-- nothing here")

    def test_adjacent_variables(self) -> None:
        with pytest.raises(PatternError, match="must be separated by a literal"):
            compile_pattern("a @x @y b")

    def test_error_carries_pattern_and_is_value_error(self) -> None:
        with pytest.raises(ValueError) as excinfo:
            compile_pattern("@x = 1")
        assert isinstance(excinfo.value, PatternError)
        assert excinfo.value.pattern == "@x = 1"
