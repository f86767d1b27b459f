"""
Test suite for configuration settings.

System role: Verification of environment variable mapping
"""

from pathlib import Path

import pytest
from pydantic import ValidationError as PydanticValidationError

from histograph.configs.database import DatabaseSettings
from histograph.configs.document_store import DocumentStoreSettings
from histograph.configs.router import RouterSettings
from histograph.configs.settings import get_settings


class TestDocumentStoreSettings:
    """Test suite for DocumentStoreSettings."""

    def test_settings_should_read_prefixed_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test ELASTICSEARCH_ variables override defaults."""
        monkeypatch.setenv("ELASTICSEARCH_HOST", "search.internal")
        monkeypatch.setenv("ELASTICSEARCH_PORT", "9300")
        monkeypatch.setenv("ELASTICSEARCH_INDEX", "pits")

        settings = DocumentStoreSettings()

        assert settings.base_url == "http://search.internal:9300"
        assert settings.index == "pits"

    def test_mapping_file_should_live_under_elasticsearch_dir(self) -> None:
        """Test the schema file path is derived from schema_dir."""
        settings = DocumentStoreSettings(schema_dir=Path("/etc/histograph"))

        assert settings.mapping_file == Path("/etc/histograph/elasticsearch/pit.json")


class TestDatabaseSettings:
    """Test suite for DatabaseSettings."""

    def test_database_url_should_use_psycopg_driver(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test POSTGRES_ variables are assembled into a SQLAlchemy URL."""
        monkeypatch.setenv("POSTGRES_HOST", "db")
        monkeypatch.setenv("POSTGRES_USER", "hg")
        monkeypatch.setenv("POSTGRES_PASSWORD", "secret")
        monkeypatch.setenv("POSTGRES_DB", "histograph")

        settings = DatabaseSettings()

        assert settings.database_url == "postgresql+psycopg://hg:secret@db:5432/histograph"


class TestRouterSettings:
    """Test suite for RouterSettings."""

    def test_router_settings_should_default_table_names(self) -> None:
        """Test bookkeeping tables have stable default names."""
        settings = RouterSettings()

        assert settings.pit_table == "pits"
        assert settings.relation_table == "relations"
        assert settings.rejected_relation_table == "rejected_relations"


class TestBaseSettings:
    """Test suite for the shared settings fields."""

    def test_log_level_should_be_normalized(self) -> None:
        assert RouterSettings(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level_should_be_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            RouterSettings(log_level="LOUD")


class TestDatabaseUrl:
    """Test suite for DatabaseSettings.database_url edge cases."""

    def test_password_should_be_escaped(self) -> None:
        settings = DatabaseSettings(user="hg", password="p@ss/word", host="db", db="histograph")

        assert settings.database_url == "postgresql+psycopg://hg:p%40ss%2Fword@db:5432/histograph"

    def test_sslmode_should_be_appended_when_set(self) -> None:
        settings = DatabaseSettings(host="db", sslmode="require")

        assert settings.database_url.endswith("/histograph?sslmode=require")


class TestGetSettings:
    """Test suite for get_settings()."""

    def test_settings_should_be_cached_until_cleared(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the environment is read once per cache lifetime."""
        # Arrange
        get_settings.cache_clear()
        monkeypatch.setenv("HISTOGRAPH_PIT_TABLE", "pit_rows")

        # Act
        first = get_settings()
        monkeypatch.setenv("HISTOGRAPH_PIT_TABLE", "other_rows")
        second = get_settings()
        get_settings.cache_clear()
        third = get_settings()
        get_settings.cache_clear()

        # Assert
        assert first is second
        assert first.router.pit_table == "pit_rows"
        assert third.router.pit_table == "other_rows"
