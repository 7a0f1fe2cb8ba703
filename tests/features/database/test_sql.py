"""Tests for SQL parameter compilation and command tag parsing."""

import pytest

from redisync.features.database.utils.sql import affected_rows, compile_params, is_mutation


class TestCompileParams:
    """Test named to positional placeholder translation."""

    def test_named_params_become_positional(self):
        """Each name gets the next $n slot in order of appearance."""
        sql, args = compile_params(
            "INSERT INTO users (name, email) VALUES (:name, :email)",
            {"email": "ada@example.com", "name": "Ada"},
        )
        assert sql == "INSERT INTO users (name, email) VALUES ($1, $2)"
        assert args == ["Ada", "ada@example.com"]

    def test_repeated_name_reuses_slot(self):
        """A name used twice is bound once."""
        sql, args = compile_params("SELECT * FROM t WHERE a = :v OR b = :v", {"v": 3})
        assert sql == "SELECT * FROM t WHERE a = $1 OR b = $1"
        assert args == [3]

    def test_casts_and_literals_are_left_alone(self):
        """``::type`` casts and quoted text are not placeholders."""
        sql, args = compile_params(
            "SELECT :id::int, ':not_a_param', \"col:x\" FROM t",
            {"id": "7"},
        )
        assert sql == "SELECT $1::int, ':not_a_param', \"col:x\" FROM t"
        assert args == ["7"]

    def test_missing_name_raises(self):
        """Unbound placeholders are reported before reaching the driver."""
        with pytest.raises(KeyError):
            compile_params("SELECT :missing", {})

    @pytest.mark.parametrize("params, expected", [(None, []), ([1, "a"], [1, "a"]), ((2,), [2])])
    def test_positional_params_pass_through(self, params, expected):
        """Sequences and None are passed to the driver unchanged."""
        sql, args = compile_params("SELECT $1", params)
        assert sql == "SELECT $1"
        assert args == expected


class TestCommandTags:
    """Test helpers reading statement results."""

    @pytest.mark.parametrize(
        "status, expected",
        [
            ("INSERT 0 1", 1),
            ("UPDATE 12", 12),
            ("DELETE 0", 0),
            ("CREATE TABLE", 0),
            ("", 0),
            (None, 0),
        ],
    )
    def test_affected_rows(self, status, expected):
        """The trailing count of a command tag is the affected row count."""
        assert affected_rows(status) == expected

    @pytest.mark.parametrize(
        "sql, expected",
        [
            ("INSERT INTO t VALUES (1)", True),
            ("  update t set a = 1", True),
            ("-- remove stale\nDELETE FROM t", True),
            ("/* bulk */ insert into t select 1", True),
            ("SELECT * FROM t", False),
            ("CREATE TABLE t (id int)", False),
            ("WITH x AS (SELECT 1) SELECT * FROM x", False),
        ],
    )
    def test_is_mutation(self, sql, expected):
        """Only INSERT, UPDATE and DELETE trigger invalidation."""
        assert is_mutation(sql) is expected
