"""Vector store adapters and utilities.

Primary components:
- ``base``: abstract ``VectorStore`` interface, result records, the
  ``DatabaseOps`` collaborator protocol, and common exceptions.
- ``pgvector``: PostgreSQL/pgvector implementation of the interface.
- ``database``: pooled asyncpg implementation of ``DatabaseOps``.
- ``schema``: creates the extension and vector table.
- ``factory``: helpers to construct a store from typed config or env.

Guidance:
- Prefer constructing via ``factory.create_vector_store_from_env`` so callers
  stay decoupled from connection details.
"""
