"""
Chroma vector store backend.

Dual-mode client:
- If an HTTP URL is configured (CHROMA_HTTP_URL) -> HttpClient against a Chroma server
- Else -> PersistentClient writing under CHROMA_PERSIST_DIRECTORY

We always supply embeddings explicitly; the collection has no embedding
function of its own. Cosine space, similarity = 1 - distance.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence
from urllib.parse import urlparse

import chromadb
from chromadb.config import Settings

from docrag.errors import StoreError
from docrag.logging_config import get_logger
from docrag.metadata import utc_now_iso

from .base import CollectionInfo, SearchHit, StoredDocument, VectorStore

logger = get_logger(__name__)

_CREATED_AT = "createdAt"


@contextmanager
def _store_errors(action: str) -> Iterator[None]:
    try:
        yield
    except StoreError:
        raise
    except Exception as e:
        raise StoreError(f"Chroma {action} failed: {e}") from e


@dataclass
class ChromaVectorStore(VectorStore):
    persist_dir: Path = Path("./indexes/chroma")
    collection_name: str = "documents"
    dimension: int = 768
    http_url: Optional[str] = None

    _client: Optional[Any] = field(default=None, repr=False)
    _collection: Optional[Any] = field(default=None, repr=False)

    @staticmethod
    def _normalize_host(host: str) -> str:
        h = (host or "").strip().lower()
        if h in ("127.0.0.1", "localhost", "::1", ""):
            return "localhost"
        return h

    @property
    def mode(self) -> str:
        return "http" if self.http_url else "persistent"

    def _ensure_client(self):
        if self._client is not None:
            return self._client

        settings = Settings(anonymized_telemetry=False)
        if self.http_url:
            parsed = urlparse(self.http_url)
            host = self._normalize_host(parsed.hostname or "localhost")
            port = parsed.port or 8000
            logger.info("Connecting to Chroma server at %s:%d", host, port)
            self._client = chromadb.HttpClient(host=host, port=port, settings=settings)
        else:
            self.persist_dir.mkdir(parents=True, exist_ok=True)
            logger.info("Opening local Chroma store at %s", self.persist_dir)
            self._client = chromadb.PersistentClient(path=str(self.persist_dir), settings=settings)
        return self._client

    def _ensure_collection(self):
        if self._collection is not None:
            return self._collection
        client = self._ensure_client()
        self._collection = client.get_or_create_collection(
            name=self.collection_name,
            metadata={"hnsw:space": "cosine"},
            embedding_function=None,
        )
        return self._collection

    # ---- Lifecycle ----

    def init(self) -> None:
        with _store_errors("init"):
            self._ensure_collection()
        logger.info("Chroma collection %r ready", self.collection_name)

    # ---- Writes ----

    def upsert(
        self,
        doc_id: str,
        text: str,
        vector: Sequence[float],
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> None:
        if len(vector) != self.dimension:
            raise StoreError(f"Vector has {len(vector)} dims, collection expects {self.dimension}")
        meta: Dict[str, Any] = {k: v for k, v in dict(metadata or {}).items() if v is not None}
        meta.setdefault(_CREATED_AT, utc_now_iso())
        with _store_errors("upsert"):
            self._ensure_collection().upsert(
                ids=[doc_id],
                documents=[text],
                embeddings=[[float(x) for x in vector]],
                metadatas=[meta],
            )

    def delete(self, doc_id: str) -> None:
        with _store_errors("delete"):
            self._ensure_collection().delete(ids=[doc_id])

    def delete_many(self, doc_ids: Sequence[str]) -> int:
        ids = [d for d in doc_ids if d]
        if not ids:
            return 0
        with _store_errors("delete"):
            self._ensure_collection().delete(ids=ids)
        return len(ids)

    # ---- Reads ----

    def search(
        self,
        vector: Sequence[float],
        limit: int = 5,
        threshold: Optional[float] = None,
    ) -> List[SearchHit]:
        with _store_errors("query"):
            col = self._ensure_collection()
            if col.count() == 0:
                return []
            res = col.query(
                query_embeddings=[[float(x) for x in vector]],
                n_results=int(limit),
                include=["documents", "metadatas", "distances"],
            )

        ids = (res.get("ids") or [[]])[0]
        docs = (res.get("documents") or [[]])[0]
        metas = (res.get("metadatas") or [[]])[0]
        dists = (res.get("distances") or [[]])[0]

        hits: List[SearchHit] = []
        for i, hid in enumerate(ids):
            score = 1.0 - float(dists[i]) if i < len(dists) else 0.0
            if threshold is not None and score <= threshold:
                continue
            hits.append(SearchHit(
                id=str(hid),
                score=score,
                text=(docs[i] if i < len(docs) else None) or "",
                metadata=dict((metas[i] if i < len(metas) else None) or {}),
            ))
        hits.sort(key=lambda h: h.score, reverse=True)
        return hits

    def list_documents(self, limit: int = 100, offset: int = 0) -> List[StoredDocument]:
        # Chroma has no ordering on get(); sort newest first here.
        with _store_errors("get"):
            res = self._ensure_collection().get(include=["documents", "metadatas"])
        ids = res.get("ids") or []
        docs = res.get("documents") or []
        metas = res.get("metadatas") or []

        out: List[StoredDocument] = []
        for i, did in enumerate(ids):
            meta = dict((metas[i] if i < len(metas) else None) or {})
            created = meta.pop(_CREATED_AT, None)
            out.append(StoredDocument(
                id=str(did),
                text=(docs[i] if i < len(docs) else None) or "",
                metadata=meta,
                created_at=str(created) if created else None,
            ))
        out.sort(key=lambda d: d.created_at or "", reverse=True)
        offset = max(0, int(offset))
        return out[offset:offset + max(0, int(limit))]

    def info(self) -> CollectionInfo:
        with _store_errors("count"):
            n = int(self._ensure_collection().count())
        return CollectionInfo(
            status="green",
            vectors_count=n,
            indexed_vectors_count=n,
            points_count=n,
            config={
                "database": "Chroma",
                "mode": self.mode,
                "collection": self.collection_name,
                "vectorDimension": self.dimension,
                "distanceMetric": "cosine",
            },
        )

