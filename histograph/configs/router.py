"""
Mutation router configuration settings.

Names of the relational bookkeeping tables records are replicated into.

Dependencies: pydantic, pydantic_settings
System role: Routing configuration for the replication service
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from histograph.configs.base import BaseSettings


class RouterSettings(BaseSettings):
    """Bookkeeping table names."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="HISTOGRAPH_",
        case_sensitive=False,
        extra="ignore",
    )

    pit_table: str = Field(default="pits", description="Table holding PIT bookkeeping rows")
    relation_table: str = Field(
        default="relations",
        description="Table holding relation bookkeeping rows",
    )
    rejected_relation_table: str = Field(
        default="rejected_relations",
        description="Table holding relations that failed endpoint resolution",
    )
