"""Integration tests against a live PostgreSQL + pgvector database.

Skipped unless ``MEMVEC_TEST_DSN`` points at a disposable database.
"""
