"""Common utilities shared by the vector store.

Includes:
- ``config``: Pydantic-based configuration from environment variables.
- ``logging``: structured logging setup with structlog.
- ``metrics``: Prometheus counters and histograms for database round trips.

Import pattern:
- from memvec.common.config import VectorStoreConfig
- from memvec.common.logging import configure_logging
"""
