"""
Unit tests for statement_builder.py
"""

import pytest

from mysql_data_dump.models import ColumnInfo, TableDescriptor
from mysql_data_dump.statement_builder import StatementBuilder, sqlparse_formatter


@pytest.fixture
def users_table():
    return TableDescriptor(
        name="users",
        columns=(ColumnInfo("id", "int"), ColumnInfo("name", "varchar(20)"))
    )


class TestBuild:
    """Tests for plain (unformatted) statements."""

    def test_insert(self, users_table):
        """Test a multi-row INSERT."""
        builder = StatementBuilder()
        sql = builder.build(users_table, [("1", "'a'"), ("2", "'b'")])
        assert sql == "INSERT INTO `users` (`id`,`name`) VALUES (1,'a'),(2,'b');"

    def test_replace(self, users_table):
        """Test REPLACE keyword."""
        builder = StatementBuilder(use_replace=True)
        sql = builder.build(users_table, [("3", "'c'")])
        assert sql == "REPLACE INTO `users` (`id`,`name`) VALUES (3,'c');"

    def test_keyword(self):
        """Test keyword selection."""
        assert StatementBuilder().keyword == "INSERT"
        assert StatementBuilder(use_replace=True).keyword == "REPLACE"

    def test_no_wrapping_without_formatter(self, users_table):
        """Test hex literals are left alone when not formatting."""
        builder = StatementBuilder()
        sql = builder.build(users_table, [("X'00ff'", "b'101'")])
        assert "NOFORMAT_WRAP" not in sql
        assert "(X'00ff',b'101')" in sql

    def test_empty_batch_rejected(self, users_table):
        """Test an empty batch is a programming error."""
        with pytest.raises(ValueError):
            StatementBuilder().build(users_table, [])


class TestFormatting:
    """Tests for formatter integration."""

    def test_formatter_receives_wrapped_literals(self, users_table):
        """Test hex and bit literals are wrapped before formatting."""
        seen = []

        def formatter(sql):
            seen.append(sql)
            return sql

        builder = StatementBuilder(formatter=formatter)
        sql = builder.build(users_table, [("X'00ff'", "b'0101'")])

        assert 'NOFORMAT_WRAP("##X\'00ff\'##")' in seen[0]
        assert 'NOFORMAT_WRAP("##b\'0101\'##")' in seen[0]
        assert sql == "INSERT INTO `users` (`id`,`name`) VALUES (X'00ff',b'0101');"

    def test_regular_strings_not_wrapped(self, users_table):
        """Test quoted strings starting with x are not mistaken for hex literals."""
        seen = []
        builder = StatementBuilder(formatter=lambda sql: seen.append(sql) or sql)
        builder.build(users_table, [("1", "'xavier'")])
        assert "NOFORMAT_WRAP" not in seen[0]

    def test_formatter_output_is_returned(self, users_table):
        """Test formatter output replaces the raw statement."""
        builder = StatementBuilder(formatter=lambda sql: sql.replace(" VALUES ", "\nVALUES\n"))
        sql = builder.build(users_table, [("1", "'a'")])
        assert sql == "INSERT INTO `users` (`id`,`name`)\nVALUES\n(1,'a');"

    def test_sqlparse_keeps_hex_literal(self, users_table):
        """Test hex literals survive sqlparse formatting."""
        builder = StatementBuilder.for_options(use_replace=False, format=True)
        sql = builder.build(users_table, [("1", "X'00ff'")])
        assert "X'00ff'" in sql
        assert "NOFORMAT_WRAP" not in sql
        assert sql.startswith("INSERT INTO")

    def test_for_options_without_format(self):
        """Test no formatter is set when formatting is off."""
        builder = StatementBuilder.for_options(use_replace=True, format=False)
        assert builder.formatter is None
        assert builder.use_replace is True

    def test_sqlparse_formatter_uppercases_keywords(self):
        """Test the default formatter normalizes keyword case."""
        assert "SELECT" in sqlparse_formatter("select 1")
