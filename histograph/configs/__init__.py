"""
Configuration management module.

Provides centralized, type-safe configuration using Pydantic Settings.
All config modules support environment variable mapping with validation.
"""

from histograph.configs.database import DatabaseSettings
from histograph.configs.document_store import DocumentStoreSettings
from histograph.configs.router import RouterSettings
from histograph.configs.settings import Settings, get_settings

__all__ = [
    "DatabaseSettings",
    "DocumentStoreSettings",
    "RouterSettings",
    "Settings",
    "get_settings",
]
