"""Tests for the psycopg2 transaction helper - no real DB needed."""

from unittest.mock import MagicMock, patch

import pytest

from familiar.db import txn
from familiar.executors import DirectionalExecutor, cursor_statement_runner


def _mock_conn():
    conn = MagicMock()
    cur = MagicMock()
    conn.cursor.return_value.__enter__.return_value = cur
    return conn, cur


class TestTxn:
    def test_commits_on_success(self):
        conn, cur = _mock_conn()

        with txn(conn) as yielded:
            yielded.execute("SELECT 1")

        assert yielded is cur
        conn.commit.assert_called_once()
        conn.rollback.assert_not_called()
        conn.close.assert_not_called()

    def test_rolls_back_and_reraises(self):
        conn, _ = _mock_conn()

        with pytest.raises(ValueError, match="rollback test"):
            with txn(conn):
                raise ValueError("rollback test")

        conn.rollback.assert_called_once()
        conn.commit.assert_not_called()
        conn.close.assert_not_called()

    def test_opens_and_closes_own_connection(self):
        conn, _ = _mock_conn()

        with patch("familiar.db.get_conn", return_value=conn) as mock_get_conn:
            with txn():
                pass

        mock_get_conn.assert_called_once_with()
        conn.commit.assert_called_once()
        conn.close.assert_called_once()

    def test_closes_own_connection_after_failure(self):
        conn, _ = _mock_conn()

        with patch("familiar.db.get_conn", return_value=conn):
            with pytest.raises(RuntimeError):
                with txn():
                    raise RuntimeError("cannot drop view chickens")

        conn.rollback.assert_called_once()
        conn.close.assert_called_once()

    def test_failed_statement_rolls_back_plan(self):
        conn, cur = _mock_conn()
        cur.execute.side_effect = [None, RuntimeError("relation already exists")]

        with pytest.raises(RuntimeError, match="already exists"):
            with txn(conn) as c:
                executor = DirectionalExecutor(cursor_statement_runner(c))
                executor.execute(['DROP VIEW "chickens"', 'CREATE VIEW "chickens" AS SELECT 1'])

        assert cur.execute.call_count == 2
        conn.rollback.assert_called_once()
        conn.commit.assert_not_called()
