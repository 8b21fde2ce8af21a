"""Vector store factory.

Centralizes creation of the pgvector store and its database handle so
callers don't depend on connection details.
"""

from typing import Any, Dict, Optional

import structlog

from memvec.common.config import VectorStoreConfig
from memvec.common.metrics import VectorStoreMetrics

from .base import DatabaseOps
from .database import AsyncpgDatabase
from .pgvector import DEFAULT_TABLE_NAME, PgVectorStore

logger = structlog.get_logger("vector_store.factory")


def create_pgvector_store(db: DatabaseOps, table_name: str = DEFAULT_TABLE_NAME) -> PgVectorStore:
    """Create a PgVector store bound to an existing database handle."""
    return PgVectorStore(db, table_name=table_name)


def create_database_from_config(
    config: VectorStoreConfig,
    metrics: Optional[VectorStoreMetrics] = None,
    **kwargs: Any
) -> AsyncpgDatabase:
    """Create the asyncpg database handle described by ``config``."""
    if not config.memvec_db_dsn:
        raise ValueError("PgVector requires 'memvec_db_dsn' in config")

    if metrics is None and config.memvec_metrics_enabled:
        metrics = VectorStoreMetrics()

    return AsyncpgDatabase(
        dsn=config.memvec_db_dsn,
        pool_size=config.memvec_pool_size,
        max_queries=config.memvec_max_queries,
        command_timeout=config.memvec_command_timeout,
        vector_schema=config.memvec_vector_schema,
        metrics=metrics,
        **kwargs
    )


def create_vector_store_from_config(
    config: VectorStoreConfig,
    metrics: Optional[VectorStoreMetrics] = None,
) -> PgVectorStore:
    """Create a PgVector store and its database handle from typed config."""
    db = create_database_from_config(config, metrics=metrics)
    logger.info(
        "Created PgVector store",
        table=config.memvec_vector_table,
        pool_size=config.memvec_pool_size,
        metrics_enabled=db.metrics is not None,
    )
    return PgVectorStore(db, table_name=config.memvec_vector_table)


def create_vector_store_from_env(env_config: Dict[str, str]) -> PgVectorStore:
    """Create a vector store from environment configuration.

    Parameters
    - env_config: A flat mapping of environment variable names to values

    Returns
    - A ``PgVectorStore`` configured to talk to the backing database
    """
    dsn = env_config.get("MEMVEC_DB_DSN")
    if not dsn:
        raise ValueError("MEMVEC_DB_DSN environment variable is required")

    config = VectorStoreConfig(
        memvec_db_dsn=dsn,
        memvec_pool_size=int(env_config.get("MEMVEC_POOL_SIZE", "10")),
        memvec_max_queries=int(env_config.get("MEMVEC_MAX_QUERIES", "50000")),
        memvec_command_timeout=int(env_config.get("MEMVEC_COMMAND_TIMEOUT", "60")),
        memvec_vector_table=env_config.get("MEMVEC_VECTOR_TABLE", DEFAULT_TABLE_NAME),
        memvec_vector_schema=env_config.get("MEMVEC_VECTOR_SCHEMA", "public"),
        memvec_metrics_enabled=env_config.get("MEMVEC_METRICS_ENABLED", "true").lower() == "true",
    )
    return create_vector_store_from_config(config)
