"""
Vector store interface and the records it returns.

The store owns persistence and similarity ranking. Callers never re-rank or
filter hits beyond what search() returns.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence


@dataclass(frozen=True)
class SearchHit:
    id: str
    score: float                  # cosine similarity, higher is closer
    text: str
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class StoredDocument:
    id: str
    text: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    created_at: Optional[str] = None


@dataclass(frozen=True)
class CollectionInfo:
    status: str                   # "green" | "red"
    vectors_count: int
    indexed_vectors_count: int
    points_count: int
    config: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "vectorsCount": self.vectors_count,
            "indexedVectorsCount": self.indexed_vectors_count,
            "pointsCount": self.points_count,
            "config": dict(self.config),
        }


class VectorStore(ABC):
    """Persist (id, text, vector, metadata) records and search them by cosine similarity."""

    dimension: int

    @abstractmethod
    def init(self) -> None:
        """Create the collection/table and index if missing. Safe to repeat."""

    @abstractmethod
    def upsert(
        self,
        doc_id: str,
        text: str,
        vector: Sequence[float],
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Insert or replace one record."""

    @abstractmethod
    def search(
        self,
        vector: Sequence[float],
        limit: int = 5,
        threshold: Optional[float] = None,
    ) -> List[SearchHit]:
        """Top `limit` hits by descending similarity; hits at or below `threshold` are dropped."""

    @abstractmethod
    def delete(self, doc_id: str) -> None:
        ...

    @abstractmethod
    def delete_many(self, doc_ids: Sequence[str]) -> int:
        """Delete several records; returns how many ids were submitted."""

    @abstractmethod
    def list_documents(self, limit: int = 100, offset: int = 0) -> List[StoredDocument]:
        ...

    @abstractmethod
    def info(self) -> CollectionInfo:
        ...

    def close(self) -> None:
        """Release connections. Default: nothing to release."""
