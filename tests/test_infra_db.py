"""Tests for database layer."""

import os
from unittest.mock import MagicMock, patch

import psycopg2
import pytest

from stayhub.domain.errors import StorageError


class TestGetConn:
    def test_connects_with_database_url(self):
        from stayhub.infra.db import get_conn

        env = {"DATABASE_URL": "postgresql://u:p@h/db"}
        with patch.dict(os.environ, env, clear=True), \
             patch("stayhub.infra.db.psycopg2.connect", return_value=MagicMock()) as mock_connect:
            get_conn()
            mock_connect.assert_called_once_with("postgresql://u:p@h/db")

    def test_raises_without_database_url(self, monkeypatch):
        from stayhub.infra.db import get_conn

        monkeypatch.delenv("DATABASE_URL", raising=False)
        with pytest.raises(RuntimeError, match="DATABASE_URL"):
            get_conn()


class TestTxnErrorTranslation:
    """Driver errors leave txn() as StorageError; everything else passes through."""

    def test_connect_failure_is_storage_error(self):
        from stayhub.infra.db import txn

        with patch(
            "stayhub.infra.db.get_conn",
            side_effect=psycopg2.OperationalError("could not connect to server"),
        ):
            with pytest.raises(StorageError) as exc_info:
                with txn():
                    pass

        assert exc_info.value.message == "Database unavailable"
        assert "could not connect" not in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, psycopg2.OperationalError)

    def test_statement_failure_rolls_back(self):
        from stayhub.infra.db import txn

        conn = MagicMock()
        with patch("stayhub.infra.db.get_conn", return_value=conn):
            with pytest.raises(StorageError, match="Database operation failed"):
                with txn() as cur:
                    raise psycopg2.IntegrityError("duplicate key")

        conn.rollback.assert_called_once()
        conn.commit.assert_not_called()
        conn.close.assert_called_once()

    def test_other_exceptions_propagate_unchanged(self):
        from stayhub.infra.db import txn

        conn = MagicMock()
        with pytest.raises(ValueError):
            with txn(conn):
                raise ValueError("boom")

        conn.rollback.assert_called_once()
        # Caller-owned connection stays open
        conn.close.assert_not_called()

    def test_commits_on_success(self):
        from stayhub.infra.db import txn

        conn = MagicMock()
        with patch("stayhub.infra.db.get_conn", return_value=conn):
            with txn() as cur:
                cur.execute("SELECT 1")

        conn.commit.assert_called_once()
        conn.close.assert_called_once()


# Skip integration tests if DATABASE_URL is not set
_skip_no_db = pytest.mark.skipif(
    not os.environ.get("DATABASE_URL"),
    reason="DATABASE_URL not set - skipping DB integration tests",
)


@_skip_no_db
class TestHelpers:
    def test_fetchone(self):
        from stayhub.infra.db import fetchone, txn

        with txn() as cur:
            row = fetchone(cur, "SELECT %s::text", ("hello",))
            assert row[0] == "hello"

    def test_fetchall(self):
        from stayhub.infra.db import fetchall, txn

        with txn() as cur:
            rows = fetchall(cur, "SELECT generate_series(1, 3)")
            assert [r[0] for r in rows] == [1, 2, 3]
