"""Unit tests for infrastructure settings."""

import pytest
from pydantic import ValidationError

from infrastructure.settings import BoardSettings, DatabaseSettings, Settings


class TestDatabaseSettingsPoolConfiguration:
    """Tests for connection pool configuration."""

    def test_default_pool_settings(self):
        """Should have sensible pool defaults."""
        settings = DatabaseSettings()
        assert settings.pool_min_connections >= 1
        assert settings.pool_max_connections >= settings.pool_min_connections
        assert settings.pool_max_connections <= 20

    def test_pool_max_must_be_greater_than_or_equal_to_min(self):
        """Should validate max >= min."""
        with pytest.raises(ValidationError) as exc_info:
            DatabaseSettings(pool_min_connections=10, pool_max_connections=5)

        assert "pool_max_connections" in str(exc_info.value)

    def test_pool_max_equal_to_min_is_valid(self):
        settings = DatabaseSettings(pool_min_connections=5, pool_max_connections=5)
        assert settings.pool_min_connections == 5
        assert settings.pool_max_connections == 5

    def test_pool_min_must_be_positive(self):
        with pytest.raises(ValidationError):
            DatabaseSettings(pool_min_connections=0)

    def test_pool_max_respects_upper_limit(self):
        with pytest.raises(ValidationError):
            DatabaseSettings(pool_max_connections=101)

    def test_connection_string_omits_password(self):
        settings = DatabaseSettings(
            host="db", port=5433, database="boards", username="app", password="secret"
        )

        assert settings.connection_string == "postgresql://app@db:5433/boards"
        assert "secret" not in settings.connection_string


class TestBoardSettings:
    """Tests for board engine settings."""

    def test_defaults(self):
        settings = BoardSettings()

        assert settings.lock_timeout_seconds == 5.0
        assert settings.subscriber_queue_size == 100
        assert settings.storage_backend == "memory"
        assert settings.elevated_member_role == "board_admin"
        assert settings.default_group_title == "Main Group"
        assert settings.default_column_title == "Status"
        assert settings.default_status_options == ["To Do", "In Progress", "Done"]

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("TABLERO_BOARD_LOCK_TIMEOUT_SECONDS", "0.5")
        monkeypatch.setenv("TABLERO_BOARD_STORAGE_BACKEND", "postgres")
        monkeypatch.setenv("TABLERO_BOARD_DEFAULT_STATUS_OPTIONS", '["Open", "Closed"]')

        settings = BoardSettings()

        assert settings.lock_timeout_seconds == 0.5
        assert settings.storage_backend == "postgres"
        assert settings.default_status_options == ["Open", "Closed"]

    @pytest.mark.parametrize("timeout", [0, -1, 301])
    def test_lock_timeout_bounds(self, timeout):
        with pytest.raises(ValidationError):
            BoardSettings(lock_timeout_seconds=timeout)

    def test_queue_size_must_be_positive(self):
        with pytest.raises(ValidationError):
            BoardSettings(subscriber_queue_size=0)

    def test_unknown_storage_backend_is_rejected(self):
        with pytest.raises(ValidationError):
            BoardSettings(storage_backend="redis")

    def test_blank_elevated_role_disables_elevation(self):
        settings = BoardSettings(elevated_member_role="  ")

        assert settings.elevated_member_role is None

    def test_default_titles_must_not_be_empty(self):
        with pytest.raises(ValidationError):
            BoardSettings(default_group_title="")


class TestSettings:
    """Tests for application settings."""

    def test_defaults(self):
        settings = Settings()

        assert settings.app_name == "Tablero API"
        assert settings.debug is False
        assert settings.log_level == "INFO"
        assert settings.log_format == "auto"

    def test_log_level_is_case_insensitive(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level_is_rejected(self):
        with pytest.raises(ValidationError):
            Settings(log_level="chatty")

    def test_unknown_log_format_is_rejected(self):
        with pytest.raises(ValidationError):
            Settings(log_format="xml")

    def test_exposes_sections(self):
        settings = Settings()

        assert isinstance(settings.database, DatabaseSettings)
        assert isinstance(settings.boards, BoardSettings)
