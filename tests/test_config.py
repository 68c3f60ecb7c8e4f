"""Tests for settings loading and the migrations database URL."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from familiar.config import Settings, load_settings, sqlalchemy_url


class TestLoadSettings:
    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = load_settings()
        assert settings.definitions_dir == Path("db")
        assert settings.database_url is None

    def test_from_env(self):
        env = {"FAMILIAR_DEFINITIONS_DIR": "/srv/defs", "DATABASE_URL": "postgresql://u:p@h/db"}
        with patch.dict(os.environ, env, clear=True):
            settings = load_settings()
        assert settings.definitions_dir == Path("/srv/defs")
        assert settings.database_url == "postgresql://u:p@h/db"

    def test_empty_database_url_is_unset(self):
        with patch.dict(os.environ, {"DATABASE_URL": ""}, clear=True):
            assert load_settings().database_url is None


class TestSqlalchemyUrl:
    def _url(self, url, **env):
        with patch.dict(os.environ, env, clear=True):
            return sqlalchemy_url(Settings(definitions_dir=Path("db"), database_url=url))

    def test_missing_raises(self):
        with pytest.raises(RuntimeError, match="DATABASE_URL is required"):
            self._url(None)

    def test_dsn_rejected(self):
        with pytest.raises(RuntimeError, match="postgresql:// URL"):
            self._url("dbname=db user=u host=h")

    def test_postgres_scheme_normalized(self):
        assert self._url("postgres://u:p@h/db") == "postgresql+psycopg2://u:p@h/db"

    def test_postgresql_scheme_gets_driver(self):
        assert self._url("postgresql://u:p@h/db") == "postgresql+psycopg2://u:p@h/db"

    def test_already_has_driver_not_doubled(self):
        result = self._url("postgresql+psycopg2://u:p@h/db")
        assert result.count("+psycopg2") == 1

    def test_db_password_fallback(self):
        result = self._url("postgresql://u@h:5433/db", DB_PASSWORD="s3cr@t")
        assert result == "postgresql+psycopg2://u:s3cr%40t@h:5433/db"

    def test_db_password_not_used_when_url_has_password(self):
        result = self._url("postgresql://u:p@h/db", DB_PASSWORD="from-env")
        assert "from-env" not in result


class TestGetConn:
    def test_connects_with_database_url(self):
        from familiar.db import get_conn

        settings = Settings(definitions_dir=Path("db"), database_url="dbname=db user=u host=h")
        with patch("familiar.db.psycopg2.connect", return_value=MagicMock()) as mock_connect:
            get_conn(settings)
        mock_connect.assert_called_once_with("dbname=db user=u host=h")

    def test_raises_without_database_url(self):
        from familiar.db import get_conn

        with pytest.raises(RuntimeError, match="DATABASE_URL"):
            get_conn(Settings(definitions_dir=Path("db")))
