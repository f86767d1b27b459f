"""
Relational store settings.

PostgreSQL address, credentials and pool sizing for the bookkeeping tables.

Dependencies: pydantic, pydantic_settings, sqlalchemy
System role: Relational store connection configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict
from sqlalchemy.engine import URL

from histograph.configs.base import BaseSettings


class DatabaseSettings(BaseSettings):
    """PostgreSQL settings read from POSTGRES_* variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="POSTGRES_",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = Field(default="localhost", description="PostgreSQL host")
    port: int = Field(default=5432, description="PostgreSQL port")
    user: str = Field(default="histograph", description="Role the replicator logs in as")
    password: str = Field(default="histograph", description="Password of that role")
    db: str = Field(default="histograph", description="Database holding the bookkeeping tables")
    sslmode: str | None = Field(default=None, description="libpq sslmode, omitted when unset")

    pool_size: int = Field(default=5, description="Persistent connections kept by the pool")
    max_overflow: int = Field(default=10, description="Extra connections allowed under load")
    pool_timeout: int = Field(default=30, description="Seconds to wait for a free connection")
    echo_sql: bool = Field(default=False, description="Log every emitted SQL statement")

    @property
    def database_url(self) -> str:
        """
        SQLAlchemy URL for the psycopg 3 driver.

        Credentials are escaped, so passwords may contain '@' or '/'.
        """
        url = URL.create(
            "postgresql+psycopg",
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.db,
            query={"sslmode": self.sslmode} if self.sslmode else {},
        )
        return url.render_as_string(hide_password=False)
