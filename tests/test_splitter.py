"""Unit tests for sqlrender.splitter."""

from __future__ import annotations

from sqlrender.splitter import split_sql, split_sql_with_lines


class TestSplitSql:
    """Verify splitting scripts into statements."""

    def test_simple_statements(self) -> None:
        assert split_sql("SELECT 1; SELECT 2;") == ["SELECT 1", "SELECT 2"]

    def test_last_statement_without_semicolon(self) -> None:
        assert split_sql("SELECT 1;\nSELECT 2") == ["SELECT 1", "SELECT 2"]

    def test_semicolon_inside_string(self) -> None:
        assert split_sql("SELECT 'a;b' FROM t; SELECT 2;") == ["SELECT 'a;b' FROM t", "SELECT 2"]

    def test_empty_statements_are_dropped(self) -> None:
        assert split_sql(";;SELECT 1;;") == ["SELECT 1"]

    def test_empty_script(self) -> None:
        assert split_sql("") == []
        assert split_sql("   \n") == []

    def test_begin_end_block_kept_together(self) -> None:
        script = "BEGIN SELECT 1; SELECT 2; END; SELECT 3;"
        assert split_sql(script) == ["BEGIN SELECT 1; SELECT 2; END", "SELECT 3"]

    def test_case_end_does_not_close_block(self) -> None:
        script = "BEGIN SELECT CASE WHEN a = 1 THEN 2 END; SELECT 3; END; SELECT 4;"
        assert split_sql(script) == [
            "BEGIN SELECT CASE WHEN a = 1 THEN 2 END; SELECT 3; END",
            "SELECT 4",
        ]

    def test_begin_transaction_is_not_a_block(self) -> None:
        script = "BEGIN TRANSACTION; DELETE FROM t; COMMIT;"
        assert split_sql(script) == ["BEGIN TRANSACTION", "DELETE FROM t", "COMMIT"]

    def test_bare_begin_is_not_a_block(self) -> None:
        script = "BEGIN; DELETE FROM t; COMMIT;"
        assert split_sql(script) == ["BEGIN", "DELETE FROM t", "COMMIT"]

    def test_begin_at_end_of_script(self) -> None:
        assert split_sql("SELECT 1; BEGIN") == ["SELECT 1", "BEGIN"]

    def test_untokenizable_script_is_one_statement(self) -> None:
        assert split_sql("  SELECT 'abc; SELECT 2  ") == ["SELECT 'abc; SELECT 2"]


class TestSplitSqlWithLines:
    """Verify line numbers reported for statements."""

    def test_line_numbers(self) -> None:
        script = "SELECT 1;\n\n  SELECT 2;\nSELECT\n3;"
        assert split_sql_with_lines(script) == [
            ("SELECT 1", 1),
            ("SELECT 2", 3),
            ("SELECT\n3", 4),
        ]
