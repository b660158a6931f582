"""In-memory stand-ins for the embedder, store and chat runner."""

from typing import Dict, List, Optional

from docrag.embeddings import Embedder
from docrag.errors import StoreError
from docrag.generation import ChatRunner, GenerationResult
from docrag.store import CollectionInfo, SearchHit, StoredDocument, VectorStore


class FakeEmbedder(Embedder):
    model_name = "fake"
    dimension = 3

    def __init__(self):
        self.documents: List[str] = []
        self.queries: List[str] = []

    def embed_document(self, text):
        self.documents.append(text)
        return [float(len(text)), 1.0, 0.0]

    def embed_query(self, text):
        self.queries.append(text)
        return [0.0, 1.0, 0.0]


class FakeStore(VectorStore):
    dimension = 3

    def __init__(self, hits: Optional[List[SearchHit]] = None, fail_at: Optional[int] = None, status: str = "green"):
        self.records: Dict[str, dict] = {}
        self.upsert_order: List[str] = []
        self.hits = list(hits or [])
        self.fail_at = fail_at
        self.status = status
        self.search_calls: List[dict] = []
        self.deleted: List[str] = []
        self.closed = False

    def init(self):
        pass

    def upsert(self, doc_id, text, vector, metadata=None):
        if self.fail_at is not None and len(self.upsert_order) + 1 == self.fail_at:
            raise StoreError(f"upsert {doc_id} failed")
        self.records[doc_id] = {"text": text, "vector": list(vector), "metadata": dict(metadata or {})}
        self.upsert_order.append(doc_id)

    def search(self, vector, limit=5, threshold=None):
        self.search_calls.append({"limit": limit, "threshold": threshold})
        hits = [h for h in self.hits if threshold is None or h.score > threshold]
        return sorted(hits, key=lambda h: h.score, reverse=True)[:limit]

    def delete(self, doc_id):
        self.deleted.append(doc_id)
        self.records.pop(doc_id, None)

    def delete_many(self, doc_ids):
        for d in doc_ids:
            self.delete(d)
        return len(doc_ids)

    def list_documents(self, limit=100, offset=0):
        docs = [StoredDocument(id=k, text=v["text"], metadata=v["metadata"]) for k, v in self.records.items()]
        return docs[offset:offset + limit]

    def info(self):
        n = len(self.records) if self.status != "red" else 0
        return CollectionInfo(status=self.status, vectors_count=n, indexed_vectors_count=n, points_count=n)

    def close(self):
        self.closed = True


class FakeRunner(ChatRunner):
    def __init__(self, answer: str = "Stacks are LIFO (Source 1).", tokens: int = 42, error: Optional[Exception] = None):
        self.answer = answer
        self.tokens = tokens
        self.error = error
        self.calls: List[list] = []

    def chat(self, messages, *, temperature=0.2, max_tokens=1500):
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        return GenerationResult(text=self.answer, tokens_used=self.tokens)
