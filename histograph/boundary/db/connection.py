"""
Database connection management.

Provides the SQLAlchemy engine and a RelationalStore bound to it.

Dependencies: sqlalchemy, histograph.configs
System role: Relational backend connection lifecycle management
"""

from sqlalchemy import Engine, create_engine
from sqlalchemy.pool import QueuePool

from histograph.boundary.db.relational_store import RelationalStore
from histograph.configs import get_settings


def get_engine() -> Engine:
    """
    Create SQLAlchemy engine with connection pooling and health checks.

    Configures QueuePool for efficient connection reuse. pool_pre_ping=True
    verifies connections before use to detect stale/broken connections early.

    Returns:
        Engine: Configured SQLAlchemy engine with active pooling

    Raises:
        ArgumentError: If database URL is invalid or engine creation fails
    """
    settings = get_settings()
    db_config = settings.database

    return create_engine(
        db_config.database_url,
        echo=db_config.echo_sql,
        poolclass=QueuePool,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_pre_ping=True,  # Verify connections before using
    )


def get_relational_store(engine: Engine | None = None) -> RelationalStore:
    """
    Build a RelationalStore over the given engine or a new configured one.

    Args:
        engine: Existing engine to reuse (None creates one from settings)

    Returns:
        RelationalStore: Adapter bound to the engine
    """
    return RelationalStore(engine if engine is not None else get_engine())
