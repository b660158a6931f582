"""
PostgreSQL + pgvector store backend.

One table holds text, JSONB metadata and the embedding:

    documents(id TEXT PK, title, content, content_type, metadata JSONB,
              embedding vector(D), created_at)

Similarity search uses pgvector's <=> operator (cosine distance) over an
HNSW index; similarity = 1 - distance.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, List, Mapping, Optional, Sequence

import psycopg2
from psycopg2 import sql
from psycopg2.extras import Json, RealDictCursor
from psycopg2.pool import SimpleConnectionPool

from docrag.config import redacted_database_url
from docrag.errors import StoreError
from docrag.logging_config import get_logger

from .base import CollectionInfo, SearchHit, StoredDocument, VectorStore

logger = get_logger(__name__)


def to_vector_literal(vector: Sequence[float]) -> str:
    """pgvector text input format: '[0.1,0.2,...]'."""
    return "[" + ",".join(repr(float(x)) for x in vector) + "]"


class PgVectorStore(VectorStore):
    """
    Connections come from a small pool and go back to it after every call,
    so the store can be shared by the whole process.
    """

    def __init__(
        self,
        dsn: str,
        *,
        dimension: int = 1536,
        table: str = "documents",
        pool_size: int = 20,
        connect_timeout: int = 2,
        hnsw_m: int = 16,
        hnsw_ef_construction: int = 64,
    ) -> None:
        self.dsn = dsn
        self.dimension = dimension
        self.table = table
        self.pool_size = pool_size
        self.connect_timeout = connect_timeout
        self.hnsw_m = hnsw_m
        self.hnsw_ef_construction = hnsw_ef_construction
        self._pool: Optional[SimpleConnectionPool] = None

    # ---- Connection handling ----

    def _ensure_pool(self) -> SimpleConnectionPool:
        if self._pool is None:
            logger.info("Connecting to PostgreSQL at %s", redacted_database_url(self.dsn))
            try:
                self._pool = SimpleConnectionPool(
                    1, self.pool_size, dsn=self.dsn, connect_timeout=self.connect_timeout,
                )
            except psycopg2.Error as e:
                raise StoreError(f"Could not connect to PostgreSQL: {e}") from e
        return self._pool

    @contextmanager
    def _cursor(self, action: str) -> Iterator[Any]:
        pool = self._ensure_pool()
        try:
            conn = pool.getconn()
        except psycopg2.Error as e:
            raise StoreError(f"PostgreSQL {action} failed: {e}") from e
        try:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                yield cur
            conn.commit()
        except psycopg2.Error as e:
            conn.rollback()
            raise StoreError(f"PostgreSQL {action} failed: {e}") from e
        finally:
            pool.putconn(conn)

    def close(self) -> None:
        if self._pool is not None:
            self._pool.closeall()
            self._pool = None

    # ---- Schema ----

    def init(self) -> None:
        t = sql.Identifier(self.table)
        with self._cursor("init") as cur:
            cur.execute("CREATE EXTENSION IF NOT EXISTS vector")
            cur.execute(
                sql.SQL("""
                    CREATE TABLE IF NOT EXISTS {t} (
                        id TEXT PRIMARY KEY,
                        title TEXT,
                        content TEXT NOT NULL,
                        content_type TEXT,
                        metadata JSONB DEFAULT '{{}}',
                        embedding vector({dim}),
                        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                    )
                """).format(t=t, dim=sql.Literal(int(self.dimension)))
            )
            # HNSW index for cosine search
            cur.execute(
                sql.SQL("""
                    CREATE INDEX IF NOT EXISTS {idx} ON {t}
                    USING hnsw (embedding vector_cosine_ops)
                    WITH (m = {m}, ef_construction = {ef})
                """).format(
                    idx=sql.Identifier(f"{self.table}_embedding_hnsw_idx"),
                    t=t,
                    m=sql.Literal(int(self.hnsw_m)),
                    ef=sql.Literal(int(self.hnsw_ef_construction)),
                )
            )
            cur.execute(
                sql.SQL("CREATE INDEX IF NOT EXISTS {idx} ON {t} (content_type)").format(
                    idx=sql.Identifier(f"{self.table}_content_type_idx"), t=t)
            )
            cur.execute(
                sql.SQL("CREATE INDEX IF NOT EXISTS {idx} ON {t} (created_at)").format(
                    idx=sql.Identifier(f"{self.table}_created_at_idx"), t=t)
            )
            cur.execute(
                sql.SQL("CREATE INDEX IF NOT EXISTS {idx} ON {t} USING gin (metadata)").format(
                    idx=sql.Identifier(f"{self.table}_metadata_idx"), t=t)
            )
        logger.info("pgvector table %r ready (dim=%d)", self.table, self.dimension)

    # ---- Writes ----

    def upsert(
        self,
        doc_id: str,
        text: str,
        vector: Sequence[float],
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> None:
        if len(vector) != self.dimension:
            raise StoreError(f"Vector has {len(vector)} dims, table expects {self.dimension}")
        meta = dict(metadata or {})
        query = sql.SQL("""
            INSERT INTO {t} (id, title, content, content_type, metadata, embedding)
            VALUES (%s, %s, %s, %s, %s, %s::vector)
            ON CONFLICT (id) DO UPDATE SET
                title = EXCLUDED.title,
                content = EXCLUDED.content,
                content_type = EXCLUDED.content_type,
                metadata = EXCLUDED.metadata,
                embedding = EXCLUDED.embedding,
                created_at = CURRENT_TIMESTAMP
        """).format(t=sql.Identifier(self.table))
        with self._cursor("upsert") as cur:
            cur.execute(query, (
                doc_id,
                meta.get("filename") or doc_id,
                text,
                meta.get("fileType"),
                Json(meta),
                to_vector_literal(vector),
            ))
        logger.debug("Upserted %s (%d chars)", doc_id, len(text))

    def delete(self, doc_id: str) -> None:
        with self._cursor("delete") as cur:
            cur.execute(
                sql.SQL("DELETE FROM {t} WHERE id = %s").format(t=sql.Identifier(self.table)),
                (doc_id,),
            )

    def delete_many(self, doc_ids: Sequence[str]) -> int:
        ids = [d for d in doc_ids if d]
        if not ids:
            return 0
        with self._cursor("delete") as cur:
            cur.execute(
                sql.SQL("DELETE FROM {t} WHERE id = ANY(%s)").format(t=sql.Identifier(self.table)),
                (ids,),
            )
        return len(ids)

    # ---- Reads ----

    def search(
        self,
        vector: Sequence[float],
        limit: int = 5,
        threshold: Optional[float] = None,
    ) -> List[SearchHit]:
        q = to_vector_literal(vector)
        where = sql.SQL("")
        params: List[Any] = [q]
        if threshold is not None:
            where = sql.SQL("WHERE 1 - (embedding <=> %s::vector) > %s")
            params += [q, float(threshold)]
        params += [q, int(limit)]
        query = sql.SQL("""
            SELECT id, content, metadata, 1 - (embedding <=> %s::vector) AS similarity
            FROM {t}
            {where}
            ORDER BY embedding <=> %s::vector
            LIMIT %s
        """).format(t=sql.Identifier(self.table), where=where)

        with self._cursor("search") as cur:
            cur.execute(query, params)
            rows = cur.fetchall()
        logger.debug("pgvector search: %d rows (threshold=%s)", len(rows), threshold)
        return [
            SearchHit(
                id=str(r["id"]),
                score=float(r["similarity"]),
                text=r["content"] or "",
                metadata=dict(r["metadata"] or {}),
            )
            for r in rows
        ]

    def list_documents(self, limit: int = 100, offset: int = 0) -> List[StoredDocument]:
        query = sql.SQL("""
            SELECT id, content, metadata, created_at
            FROM {t}
            ORDER BY created_at DESC
            LIMIT %s OFFSET %s
        """).format(t=sql.Identifier(self.table))
        with self._cursor("list") as cur:
            cur.execute(query, (int(limit), max(0, int(offset))))
            rows = cur.fetchall()
        return [
            StoredDocument(
                id=str(r["id"]),
                text=r["content"] or "",
                metadata=dict(r["metadata"] or {}),
                created_at=r["created_at"].isoformat() if r["created_at"] else None,
            )
            for r in rows
        ]

    def info(self) -> CollectionInfo:
        """Counts and index presence. An unreachable database reports status "red"."""
        t = sql.Identifier(self.table)
        try:
            with self._cursor("stats") as cur:
                cur.execute(sql.SQL("SELECT COUNT(*) AS total FROM {t}").format(t=t))
                total = int(cur.fetchone()["total"])
                cur.execute(sql.SQL("SELECT COUNT(*) AS total FROM {t} WHERE embedding IS NOT NULL").format(t=t))
                with_vectors = int(cur.fetchone()["total"])
                cur.execute(
                    "SELECT indexname FROM pg_indexes WHERE tablename = %s AND indexname LIKE %s",
                    (self.table, "%hnsw%"),
                )
                has_index = bool(cur.fetchall())
        except StoreError as e:
            logger.error("Collection info unavailable: %s", e)
            return CollectionInfo(status="red", vectors_count=0, indexed_vectors_count=0, points_count=0)

        return CollectionInfo(
            status="green",
            vectors_count=with_vectors,
            indexed_vectors_count=with_vectors if has_index else 0,
            points_count=total,
            config={
                "database": "PostgreSQL",
                "extension": "pgvector",
                "vectorDimension": self.dimension,
                "distanceMetric": "cosine",
            },
        )
