"""
Document store configuration settings.

Manages Elasticsearch connection parameters, index naming and the location
of the declarative index schema file.

Dependencies: pydantic, pydantic_settings
System role: Document/search index configuration
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from histograph.configs.base import BaseSettings


class DocumentStoreSettings(BaseSettings):
    """Elasticsearch configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="ELASTICSEARCH_",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Elasticsearch host")
    port: int = Field(default=9200, description="Elasticsearch HTTP port")
    index: str = Field(default="histograph", description="Index holding PIT documents")
    doc_type: str = Field(
        default="_doc",
        description="Document type path segment ('_doc' on typeless clusters)",
    )
    schema_dir: Path = Field(
        default=Path("schemas"),
        description="Directory containing elasticsearch/pit.json",
    )
    timeout: float = Field(default=10.0, description="HTTP timeout in seconds")

    @property
    def base_url(self) -> str:
        """
        Construct Elasticsearch base URL.

        Returns:
            str: Root URL of the HTTP API
        """
        return f"http://{self.host}:{self.port}"

    @property
    def mapping_file(self) -> Path:
        """Path of the index settings/mappings document sent on index creation."""
        return self.schema_dir / "elasticsearch" / "pit.json"
