"""Shared fixtures: in-memory stand-ins for the ``DatabaseOps`` collaborator."""

import re
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
import pytest

from memvec.vector_store.pgvector import PgVectorStore, parse_vector


class RecordingDatabase:
    """Records every call and replays canned results."""

    def __init__(self):
        self.calls: List[Tuple[str, str, List[Any]]] = []
        self.fetch_one_result: Optional[Dict[str, Any]] = None
        self.fetch_all_result: List[Dict[str, Any]] = []

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> None:
        self.calls.append(("execute", sql, list(params)))

    async def fetch_one(self, sql: str, params: Sequence[Any] = ()) -> Optional[Dict[str, Any]]:
        self.calls.append(("fetch_one", sql, list(params)))
        return self.fetch_one_result

    async def fetch_all(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        self.calls.append(("fetch_all", sql, list(params)))
        return self.fetch_all_result

    @property
    def last_call(self) -> Tuple[str, str, List[Any]]:
        return self.calls[-1]


_PREDICATE = re.compile(r"(\w+)\s*=\s*\$(\d+)")
_LIMIT = re.compile(r"limit\s+\$(\d+)")


def _cosine_distance(a: np.ndarray, b: np.ndarray) -> float:
    return 1.0 - float(np.dot(a, b) / (np.linalg.norm(a) * np.linalg.norm(b)))


class InMemoryVectorTable:
    """Emulates the vector table for the statements ``PgVectorStore`` issues.

    Rows are keyed on ``(id, sector)``; ``v`` is kept in its text form the way
    pgvector returns it from ``v::text``.
    """

    def __init__(self):
        self.rows: Dict[Tuple[str, str], Dict[str, Any]] = {}

    def _matches(self, row: Dict[str, Any], sql: str, params: Sequence[Any]) -> bool:
        where = sql.split("where", 1)[1].split("order by", 1)[0]
        return all(
            row[column] == params[int(position) - 1]
            for column, position in _PREDICATE.findall(where)
        )

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> None:
        statement = sql.strip().lower()
        if statement.startswith("insert into"):
            id, sector, user_id, agent_id, session_id, v, dim = params
            self.rows[(id, sector)] = {
                "id": id,
                "sector": sector,
                "user_id": user_id,
                "agent_id": agent_id,
                "session_id": session_id,
                "v": v,
                "dim": dim,
            }
        elif statement.startswith("delete from"):
            for key in [k for k, row in self.rows.items() if self._matches(row, sql, params)]:
                del self.rows[key]
        else:
            raise AssertionError(f"unexpected statement: {sql}")

    async def fetch_one(self, sql: str, params: Sequence[Any] = ()) -> Optional[Dict[str, Any]]:
        rows = await self.fetch_all(sql, params)
        return rows[0] if rows else None

    async def fetch_all(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        matching = [row for row in self.rows.values() if self._matches(row, sql, params)]

        if "<=>" in sql:
            query = np.asarray(parse_vector(params[0]))
            scored = sorted(
                (_cosine_distance(np.asarray(parse_vector(row["v"])), query), row["id"])
                for row in matching
            )
            limit = params[int(_LIMIT.search(sql).group(1)) - 1]
            return [{"id": id, "score": 1 - distance} for distance, id in scored[:limit]]

        return [
            {"id": row["id"], "sector": row["sector"], "v_text": row["v"], "dim": row["dim"]}
            for row in matching
        ]


@pytest.fixture
def recording_db():
    """A database that records SQL and parameters."""
    return RecordingDatabase()


@pytest.fixture
def recording_store(recording_db):
    return PgVectorStore(recording_db)


@pytest.fixture
def table():
    """An in-memory vector table."""
    return InMemoryVectorTable()


@pytest.fixture
def store(table):
    """A store backed by the in-memory vector table."""
    return PgVectorStore(table)
