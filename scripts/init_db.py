#!/usr/bin/env python3
"""Initialize the vector table with the configured name and dimension."""

import asyncio

from memvec.common.config import VectorStoreConfig
from memvec.common.logging import configure_logging_from_config
from memvec.vector_store.factory import create_database_from_config
from memvec.vector_store.schema import ensure_schema


async def init_database():
    """Create the pgvector extension and vector table."""
    config = VectorStoreConfig()
    configure_logging_from_config("memvec-init-db", config)

    print(f"Initializing table '{config.memvec_vector_table}' "
          f"(vector dimension: {config.memvec_vector_dimension or 'unconstrained'})")

    # The extension may not exist yet, so skip the per-connection vector codec.
    db = create_database_from_config(config, register_vector_codec=False)
    try:
        await ensure_schema(
            db,
            table_name=config.memvec_vector_table,
            vector_dimension=config.memvec_vector_dimension,
        )
        print("Database initialization completed successfully!")
    finally:
        await db.close()


if __name__ == "__main__":
    asyncio.run(init_database())
