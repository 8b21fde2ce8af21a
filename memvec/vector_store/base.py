"""Base vector store interface.

Defines the abstract contract the memory layer depends on, independent of
the backing implementation, plus the database collaborator a SQL-backed
store consumes.

All methods are asynchronous; each call is one independent round trip.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Protocol, Sequence


@dataclass(frozen=True)
class SearchHit:
    """A nearest-neighbour match; higher ``score`` means more similar."""
    id: str
    score: float


@dataclass(frozen=True)
class StoredVector:
    """A vector read back for a known ``(id, sector)``."""
    vector: List[float]
    dim: int


@dataclass(frozen=True)
class SectorVector:
    """A vector read back for a known id, tagged with its sector."""
    sector: str
    vector: List[float]
    dim: int


@dataclass(frozen=True)
class IdVector:
    """A vector read back for a known sector, tagged with its id."""
    id: str
    vector: List[float]
    dim: int


class DatabaseOps(Protocol):
    """The three primitives a SQL-backed store needs from its connection.

    Parameters are positional (``$1``, ``$2``, ...). Rows are mappings keyed
    by column name.
    """

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> None:
        ...

    async def fetch_one(self, sql: str, params: Sequence[Any] = ()) -> Optional[Mapping[str, Any]]:
        ...

    async def fetch_all(self, sql: str, params: Sequence[Any] = ()) -> Sequence[Mapping[str, Any]]:
        ...


class VectorStore(ABC):
    """Abstract base class for vector stores.

    Records are keyed on ``(id, sector)``; writes are upserts on that pair.
    Optional identity fields (``user_id``, ``agent_id``, ``session_id``) are
    stored with each record and act as equality filters on search.
    """

    @abstractmethod
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
        """Insert or overwrite the vector for ``(id, sector)``."""
        pass

    @abstractmethod
    async def delete_vector(self, id: str, sector: str) -> None:
        """Delete the vector for ``(id, sector)``; no-op when absent."""
        pass

    @abstractmethod
    async def delete_vectors(self, id: str) -> None:
        """Delete the vectors of ``id`` in every sector; no-op when absent."""
        pass

    @abstractmethod
    async def search_similar(
        self,
        sector: str,
        query_vector: Sequence[float],
        top_k: int,
        user_id: Optional[str] = None,
        agent_id: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> List[SearchHit]:
        """Search a sector for the nearest vectors.

        Returns
        - At most ``top_k`` hits sorted by descending score
        """
        pass

    @abstractmethod
    async def get_vector(self, id: str, sector: str) -> Optional[StoredVector]:
        """Get the vector for ``(id, sector)``, or ``None``."""
        pass

    @abstractmethod
    async def get_vectors_by_id(self, id: str) -> List[SectorVector]:
        """Get the vectors of ``id`` across all sectors."""
        pass

    @abstractmethod
    async def get_vectors_by_sector(self, sector: str) -> List[IdVector]:
        """Get every vector stored in ``sector``."""
        pass


class VectorStoreError(Exception):
    """Base exception for vector store operations."""
    pass


class VectorStoreConnectionError(VectorStoreError):
    """Connection error to vector store."""
    pass
