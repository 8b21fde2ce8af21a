"""Table bootstrap for the pgvector store.

Creates the pgvector extension and the vector table if they are missing.
Indexes are left to the operator; nothing here tunes or builds them.
"""

from typing import Optional

import structlog

from .base import DatabaseOps
from .pgvector import DEFAULT_TABLE_NAME

logger = structlog.get_logger("vector_store.schema")


def vector_table_ddl(table_name: str = DEFAULT_TABLE_NAME, vector_dimension: Optional[int] = None) -> str:
    """Build the ``CREATE TABLE`` statement for the vector table."""
    vector_type = f"vector({vector_dimension})" if vector_dimension else "vector"
    return f"""
        CREATE TABLE IF NOT EXISTS {table_name} (
            id TEXT NOT NULL,
            sector TEXT NOT NULL,
            user_id TEXT,
            agent_id TEXT,
            session_id TEXT,
            v {vector_type} NOT NULL,
            dim INTEGER NOT NULL,
            PRIMARY KEY (id, sector)
        )
    """


async def ensure_schema(
    db: DatabaseOps,
    table_name: str = DEFAULT_TABLE_NAME,
    vector_dimension: Optional[int] = None,
) -> None:
    """Create the pgvector extension and vector table when absent."""
    await db.execute("CREATE EXTENSION IF NOT EXISTS vector")
    await db.execute(vector_table_ddl(table_name, vector_dimension))
    logger.info("Vector table ready", table=table_name, vector_dimension=vector_dimension)
