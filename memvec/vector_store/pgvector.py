"""PgVector implementation of vector store.

Vectors live in a PostgreSQL table with a pgvector ``vector`` column and are
exchanged in pgvector's text form (``[1,2,3]``). Nearest-neighbour ranking is
done by the database with the cosine distance operator ``<=>``; the distance
is converted to a ``score`` of ``1 - distance`` so higher means closer.

Expected table layout::

    id text, sector text, user_id text, agent_id text, session_id text,
    v vector, dim integer, unique (id, sector)

The store does no validation, retries, or transactions: database errors
reach the caller unchanged. Pooling and timeouts belong to the injected
``DatabaseOps`` (see ``memvec.vector_store.database``).
"""

import math
import re
from typing import Any, Iterable, List, Optional, Sequence, Tuple

import numpy as np
import structlog

from .base import (
    DatabaseOps,
    IdVector,
    SearchHit,
    SectorVector,
    StoredVector,
    VectorStore,
)

logger = structlog.get_logger("vector_store.pgvector")

DEFAULT_TABLE_NAME = "vectors"
ANONYMOUS_USER = "anonymous"

_LEADING_FLOAT = re.compile(r"\s*([+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))")


def format_vector(values: Iterable[float]) -> str:
    """Render values as a pgvector literal: ``[n1,n2,...]`` without spaces."""
    array = np.asarray(list(values), dtype=np.float64)
    return "[" + ",".join(repr(v) for v in array.tolist()) + "]"


def _parse_number(text: str) -> float:
    # Longest numeric prefix wins; no prefix at all yields nan.
    match = _LEADING_FLOAT.match(text)
    if match is None:
        return math.nan
    return float(match.group(1))


def parse_vector(text: str) -> List[float]:
    """Parse pgvector's text form back into floats.

    The first and last characters are dropped as brackets and the rest is
    split on commas. Malformed elements become ``nan`` rather than raising.
    """
    return [_parse_number(part) for part in text[1:-1].split(",")]


class PgVectorStore(VectorStore):
    """PgVector implementation of vector store."""

    def __init__(self, db: DatabaseOps, table_name: str = DEFAULT_TABLE_NAME):
        """Bind the store to a database handle.

        Parameters
        - db: Anything providing ``execute``/``fetch_one``/``fetch_all``
        - table_name: Name of the pre-existing vector table
        """
        self._db = db
        self._table = table_name

    @property
    def table_name(self) -> str:
        return self._table

    async def store_vector(
        self,
        id: str,
        sector: str,
        vector: Sequence[float],
        dim: int,
        user_id: Optional[str] = None,
        agent_id: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> None:
        """Upsert the vector for ``(id, sector)``, overwriting every other column."""
        logger.debug("Storing vector", id=id, sector=sector, dim=dim)

        query = (
            f"insert into {self._table}(id,sector,user_id,agent_id,session_id,v,dim) "
            f"values($1,$2,$3,$4,$5,$6::vector,$7) "
            f"on conflict(id,sector) do update set "
            f"user_id=excluded.user_id,agent_id=excluded.agent_id,"
            f"session_id=excluded.session_id,v=excluded.v,dim=excluded.dim"
        )
        await self._db.execute(
            query,
            [
                id,
                sector,
                user_id or ANONYMOUS_USER,
                agent_id or None,
                session_id or None,
                format_vector(vector),
                dim,
            ],
        )

    async def delete_vector(self, id: str, sector: str) -> None:
        await self._db.execute(
            f"delete from {self._table} where id=$1 and sector=$2", [id, sector]
        )

    async def delete_vectors(self, id: str) -> None:
        await self._db.execute(f"delete from {self._table} where id=$1", [id])

    async def search_similar(
        self,
        sector: str,
        query_vector: Sequence[float],
        top_k: int,
        user_id: Optional[str] = None,
        agent_id: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> List[SearchHit]:
        """Search a sector by cosine distance, optionally scoped by identity.

        ``$1`` is always the query vector. Filters follow in order, and the
        limit takes the next free position.
        """
        filters: List[Tuple[str, Any]] = [("sector", sector)]
        for column, value in (
            ("user_id", user_id),
            ("agent_id", agent_id),
            ("session_id", session_id),
        ):
            if value:
                filters.append((column, value))

        conditions = [f"{column} = ${position}" for position, (column, _) in enumerate(filters, start=2)]
        limit_position = len(filters) + 2
        params = [format_vector(query_vector)] + [value for _, value in filters] + [top_k]

        query = f"""
            select id, 1 - (v <=> $1::vector) as score
            from {self._table}
            where {' and '.join(conditions)}
            order by v <=> $1::vector
            limit ${limit_position}
        """

        logger.debug(
            "Searching vectors",
            sector=sector,
            user_id=user_id or "all",
            agent_id=agent_id or "all",
            session_id=session_id or "all",
            top_k=top_k,
        )

        rows = await self._db.fetch_all(query, params)
        return [SearchHit(id=row["id"], score=float(row["score"])) for row in rows]

    async def get_vector(self, id: str, sector: str) -> Optional[StoredVector]:
        row = await self._db.fetch_one(
            f"select v::text as v_text,dim from {self._table} where id=$1 and sector=$2",
            [id, sector],
        )
        if row is None:
            return None
        return StoredVector(vector=parse_vector(row["v_text"]), dim=row["dim"])

    async def get_vectors_by_id(self, id: str) -> List[SectorVector]:
        rows = await self._db.fetch_all(
            f"select sector,v::text as v_text,dim from {self._table} where id=$1", [id]
        )
        return [
            SectorVector(sector=row["sector"], vector=parse_vector(row["v_text"]), dim=row["dim"])
            for row in rows
        ]

    async def get_vectors_by_sector(self, sector: str) -> List[IdVector]:
        rows = await self._db.fetch_all(
            f"select id,v::text as v_text,dim from {self._table} where sector=$1", [sector]
        )
        return [
            IdVector(id=row["id"], vector=parse_vector(row["v_text"]), dim=row["dim"])
            for row in rows
        ]
