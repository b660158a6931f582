"""
Vector store backends.

- VectorStore: the interface the pipeline depends on
- ChromaVectorStore (vector_chroma): local or HTTP Chroma
- PgVectorStore (pgvector): PostgreSQL with the pgvector extension

Backends are imported from their modules so that chromadb and psycopg2
stay optional at import time.
"""

from .base import CollectionInfo, SearchHit, StoredDocument, VectorStore

__all__ = ["CollectionInfo", "SearchHit", "StoredDocument", "VectorStore"]
