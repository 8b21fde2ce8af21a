"""memvec: pgvector-backed storage for memory embeddings.

Subpackages:
- ``memvec.common``: configuration, logging, and metrics.
- ``memvec.vector_store``: the vector store contract and its PostgreSQL backend.

Usage:
- Build a store with ``memvec.vector_store.factory`` and keep callers typed
  against ``memvec.vector_store.base.VectorStore``.
"""
