"""Unit tests for application settings."""

import pytest
from pydantic import ValidationError

from infrastructure.settings import (
    AuthSettings,
    DatabaseSettings,
    IAMSettings,
    Settings,
)


class TestDatabaseSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("DESKFLOW_DB_HOST", raising=False)
        settings = DatabaseSettings(_env_file=None)

        assert settings.host == "localhost"
        assert settings.port == 5432
        assert settings.pool_max_connections >= settings.pool_min_connections

    def test_reads_prefixed_env(self, monkeypatch):
        monkeypatch.setenv("DESKFLOW_DB_HOST", "db.internal")
        monkeypatch.setenv("DESKFLOW_DB_PORT", "6543")

        settings = DatabaseSettings(_env_file=None)

        assert settings.host == "db.internal"
        assert settings.port == 6543

    def test_pool_max_must_not_be_below_min(self):
        with pytest.raises(ValidationError):
            DatabaseSettings(
                _env_file=None, pool_min_connections=5, pool_max_connections=2
            )

    def test_connection_string_omits_password(self):
        settings = DatabaseSettings(
            _env_file=None,
            username="deskflow",
            password="s3cret",
            host="db",
            port=5432,
            database="deskflow",
        )

        assert settings.connection_string == "postgresql://deskflow@db:5432/deskflow"
        assert "s3cret" not in settings.connection_string


def test_auth_user_header(monkeypatch):
    monkeypatch.setenv("DESKFLOW_AUTH_USER_HEADER", "X-Forwarded-User")

    assert AuthSettings(_env_file=None).user_header == "X-Forwarded-User"


def test_iam_bootstrap_disabled_by_default(monkeypatch):
    monkeypatch.delenv("DESKFLOW_IAM_BOOTSTRAP_SUPER_ADMIN_ID", raising=False)

    settings = IAMSettings(_env_file=None)

    assert settings.bootstrap_super_admin_id is None
    assert settings.bootstrap_super_admin_username == "admin"


def test_app_settings(monkeypatch):
    monkeypatch.setenv("DESKFLOW_LOG_LEVEL", "DEBUG")

    assert Settings(_env_file=None).log_level == "DEBUG"
