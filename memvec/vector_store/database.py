"""asyncpg-backed database handle for SQL vector stores.

Implements the ``DatabaseOps`` primitives on top of a shared asyncpg pool.

Connection management
- The pool is created on demand under a lock and reused across calls
- Every query is funneled through ``_run`` for uniform logging and metrics
- Query errors are logged and re-raised as-is; only pool creation failures
  are wrapped in ``VectorStoreConnectionError``
"""

import asyncio
from typing import Any, Mapping, Optional, Sequence

import asyncpg
from asyncpg import Connection, Pool
import structlog

from memvec.common.metrics import VectorStoreMetrics

from .base import VectorStoreConnectionError
from .pgvector import format_vector

logger = structlog.get_logger("vector_store.database")


class AsyncpgDatabase:
    """Pooled asyncpg implementation of ``DatabaseOps``."""

    def __init__(
        self,
        dsn: str,
        pool_size: int = 10,
        max_queries: int = 50000,
        command_timeout: int = 60,
        register_vector_codec: bool = True,
        vector_schema: str = "public",
        metrics: Optional[VectorStoreMetrics] = None,
    ):
        """Configure the database handle.

        Parameters
        - dsn: PostgreSQL DSN including database and credentials
        - pool_size: Max size of asyncpg connection pool
        - max_queries: Queries per connection before recycling
        - command_timeout: Seconds to allow per DB command
        - register_vector_codec: Install the text codec for ``vector`` on each
          connection; disable when the extension may not exist yet
        - vector_schema: Schema the pgvector extension was installed into
        - metrics: Optional collector for query counts and latencies
        """
        self.dsn = dsn
        self.pool_size = pool_size
        self.max_queries = max_queries
        self.command_timeout = command_timeout
        self.register_vector_codec = register_vector_codec
        self.vector_schema = vector_schema
        self.metrics = metrics
        self._pool: Optional[Pool] = None
        self._pool_lock = asyncio.Lock()

    async def _init_connection(self, conn: Connection) -> None:
        """Exchange ``vector`` values as pgvector text on this connection."""
        if not self.register_vector_codec:
            return

        def _encoder(value: Any) -> str:
            if isinstance(value, str):
                return value
            return format_vector(value)

        await conn.set_type_codec(
            "vector",
            encoder=_encoder,
            decoder=str,
            schema=self.vector_schema,
            format="text",
        )

    async def _get_pool(self) -> Pool:
        """Get or create connection pool.

        Concurrent first calls share one pool; ``_pool`` is re-checked under
        the lock.
        """
        if self._pool is not None:
            return self._pool

        async with self._pool_lock:
            if self._pool is None:
                try:
                    self._pool = await asyncpg.create_pool(
                        self.dsn,
                        min_size=1,
                        max_size=self.pool_size,
                        max_queries=self.max_queries,
                        command_timeout=self.command_timeout,
                        init=self._init_connection,
                    )
                    logger.info("Created vector database pool", pool_size=self.pool_size)
                except Exception as e:
                    logger.error("Failed to create vector database pool", error=str(e))
                    raise VectorStoreConnectionError(f"Failed to create connection pool: {e}") from e

        return self._pool

    async def _run(self, operation: str, sql: str, params: Sequence[Any]) -> Any:
        pool = await self._get_pool()
        try:
            async with pool.acquire() as conn:
                if self.metrics is not None:
                    with self.metrics.track(operation):
                        return await getattr(conn, operation)(sql, *params)
                return await getattr(conn, operation)(sql, *params)
        except Exception as e:
            logger.error("Query execution failed", operation=operation, query=sql, error=str(e))
            raise

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> None:
        await self._run("execute", sql, params)

    async def fetch_one(self, sql: str, params: Sequence[Any] = ()) -> Optional[Mapping[str, Any]]:
        return await self._run("fetchrow", sql, params)

    async def fetch_all(self, sql: str, params: Sequence[Any] = ()) -> Sequence[Mapping[str, Any]]:
        return await self._run("fetch", sql, params)

    async def health_check(self) -> bool:
        """Check if the database answers ``SELECT 1``."""
        try:
            await self.fetch_one("SELECT 1")
            return True
        except Exception as e:
            logger.error("Health check failed", error=str(e))
            return False

    async def close(self) -> None:
        """Close the connection pool."""
        if self._pool:
            await self._pool.close()
            self._pool = None
            logger.info("Closed vector database pool")
