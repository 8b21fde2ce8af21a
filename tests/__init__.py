"""Tests for memvec.

Unit tests drive the vector store through in-memory database stand-ins;
integration tests need a real PostgreSQL with pgvector.
"""
