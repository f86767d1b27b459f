"""
Process settings.

Groups the per-backend settings under one object. Each group is read from
the environment when Settings is built, not when this module is imported.

Dependencies: pydantic, histograph.configs
System role: Central configuration aggregator
"""

from functools import lru_cache

from pydantic import Field

from histograph.configs.base import BaseSettings
from histograph.configs.database import DatabaseSettings
from histograph.configs.document_store import DocumentStoreSettings
from histograph.configs.router import RouterSettings


class Settings(BaseSettings):
    """All settings of a replicator process."""

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    document_store: DocumentStoreSettings = Field(default_factory=DocumentStoreSettings)
    router: RouterSettings = Field(default_factory=RouterSettings)


@lru_cache
def get_settings() -> Settings:
    """
    Return the process-wide Settings, built on first use.

    Call get_settings.cache_clear() after changing the environment to have
    the next call re-read it.
    """
    return Settings()
