# docrag/pipeline/rag.py
"""
End-to-end RAG pipeline used by the CLI.

What lives here:
- process_file(): extract → chunk → file metadata, with scoped cleanup of the
  uploaded file.
- RagPipeline.ingest_file(): process_file, then per chunk (sequentially)
  embed → upsert under "<filename>_chunk_<i>".
- RagPipeline.ask(): validate → embed query → search with threshold →
  grounded prompt → chat model → answer + sources.
- list / stats / delete helpers over the store.

Design notes
- Every collaborator (embedder, store, chat runner) is passed in; the
  pipeline never builds clients itself. See factory.build_pipeline().
- Nothing is batched or retried. If chunk k fails during ingestion, chunks
  1..k-1 stay in the store.
"""

from __future__ import annotations

import time
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from docrag.chunking import chunk_text
from docrag.config import Config
from docrag.embeddings import Embedder
from docrag.errors import EmptyDocumentError, GenerationError, ValidationError
from docrag.generation import ChatRunner, build_messages
from docrag.loaders import extract_text
from docrag.logging_config import get_logger
from docrag.metadata import ChunkMetadata, FileMetadata, parse_question, parse_upsert, utc_now_iso
from docrag.store import CollectionInfo, SearchHit, StoredDocument, VectorStore
from docrag.utils import chunk_id, preview

logger = get_logger(__name__)

NO_RELEVANT_INFO_ANSWER = (
    "I could not find any relevant information in the uploaded documents to answer "
    "this question. Try rephrasing it or upload documents that cover the topic."
)

STATS_SAMPLE_SIZE = 1000


# =============================================================================
# Data models returned by the pipeline
# =============================================================================

@dataclass
class ProcessedFile:
    filename: str
    chunks: List[str]
    metadata: FileMetadata


@dataclass
class SavedChunk:
    id: str
    text: str
    metadata: Dict[str, Any]


@dataclass
class IngestResult:
    """Summary returned by ingest_file()."""
    filename: str
    total_chunks: int
    chunks: List[SavedChunk]
    metadata: FileMetadata

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filename": self.filename,
            "totalChunks": self.total_chunks,
            "chunks": [{"id": c.id, "text": preview(c.text), "metadata": c.metadata} for c in self.chunks],
            "metadata": self.metadata.to_dict(),
        }


@dataclass
class Source:
    id: str
    score: float
    text: str
    chunk_preview: str

    @classmethod
    def from_hit(cls, hit: SearchHit) -> "Source":
        return cls(id=hit.id, score=hit.score, text=hit.text, chunk_preview=preview(hit.text))


@dataclass
class AskResult:
    """Summary returned by ask()."""
    question: str
    answer: str
    sources: List[Source] = field(default_factory=list)
    response_time_ms: int = 0
    tokens_used: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "question": self.question,
            "answer": self.answer,
            "sources": [
                {"id": s.id, "score": s.score, "text": s.text, "chunkPreview": s.chunk_preview}
                for s in self.sources
            ],
            "responseTimeMs": self.response_time_ms,
            "tokensUsed": self.tokens_used,
        }


# =============================================================================
# Extraction
# =============================================================================

def process_file(
    path: str | Path,
    filename: str,
    content_type: str,
    *,
    chunk_size: int = 1500,
    overlap_size: int = 150,
    hard_limit: bool = False,
    max_file_size: Optional[int] = None,
    delete_after: bool = True,
) -> ProcessedFile:
    """
    Extract text from an uploaded file and split it into chunks.

    Args:
        path: file on disk
        filename: user-facing name; becomes the chunk id prefix
        content_type: MIME type used to pick the extractor
        max_file_size: reject files larger than this many bytes (None: no cap)
        delete_after: remove `path` when done, on success and on failure

    Raises:
        ValidationError: a required argument is missing or the file is too large
        ExtractionError / UnsupportedFormatError: the file could not be read
        EmptyDocumentError: the text is blank or produced no chunks
    """
    if not path or not filename or not content_type:
        raise ValidationError("path, filename and content_type are required")

    p = Path(path)
    try:
        logger.info("Processing %s (%s)", filename, content_type)
        original_size = p.stat().st_size if p.exists() else 0
        if max_file_size is not None and original_size > max_file_size:
            raise ValidationError(
                f"File too large: {filename} is {original_size} bytes (max {max_file_size})"
            )
        text = extract_text(p, content_type)
        if not text.strip():
            raise EmptyDocumentError(f"No text could be extracted from {filename}")

        chunks = chunk_text(text, chunk_size, overlap_size, hard_limit=hard_limit)
        if not chunks:
            raise EmptyDocumentError(f"No chunks were produced from {filename}")

        logger.info("Split %s into %d chunks", filename, len(chunks))
        return ProcessedFile(
            filename=filename,
            chunks=chunks,
            metadata=FileMetadata(
                file_type=content_type,
                original_size=original_size,
                processed_at=utc_now_iso(),
                total_chunks=len(chunks),
            ),
        )
    finally:
        if delete_after:
            try:
                p.unlink(missing_ok=True)
            except OSError as e:
                logger.warning("Could not remove temporary file %s: %s", p, e)


# =============================================================================
# Pipeline
# =============================================================================

class RagPipeline:
    def __init__(
        self,
        config: Config,
        embedder: Embedder,
        store: VectorStore,
        generator: Optional[ChatRunner] = None,
    ) -> None:
        self.config = config
        self.embedder = embedder
        self.store = store
        self.generator = generator

    # ---- Lifecycle ----

    def init(self) -> None:
        self.store.init()

    def close(self) -> None:
        self.store.close()
        if self.generator is not None:
            self.generator.close()

    # ---- Ingest ----

    def ingest_file(
        self,
        path: str | Path,
        filename: str,
        content_type: str,
        *,
        delete_after: bool = True,
    ) -> IngestResult:
        processed = process_file(
            path,
            filename,
            content_type,
            chunk_size=self.config.chunk_size,
            overlap_size=self.config.chunk_overlap,
            hard_limit=self.config.hard_chunk_limit,
            max_file_size=self.config.max_file_size,
            delete_after=delete_after,
        )

        saved: List[SavedChunk] = []
        for i, text in enumerate(processed.chunks, start=1):
            cid = chunk_id(processed.filename, i)
            meta = ChunkMetadata.for_chunk(processed.metadata, filename=processed.filename, chunk_index=i).to_dict()
            vector = self.embedder.embed_document(text)
            self.store.upsert(cid, text, vector, meta)
            saved.append(SavedChunk(id=cid, text=text, metadata=meta))
            logger.debug("Stored %s (%d/%d)", cid, i, len(processed.chunks))

        logger.info("Ingested %s: %d chunks", processed.filename, len(saved))
        return IngestResult(
            filename=processed.filename,
            total_chunks=len(saved),
            chunks=saved,
            metadata=processed.metadata,
        )

    def upsert_text(self, doc_id: str, text: str) -> str:
        data = parse_upsert(doc_id, text)
        vector = self.embedder.embed_document(data.text)
        self.store.upsert(data.id, data.text, vector)
        logger.info("Upserted %s", data.id)
        return data.id

    # ---- Retrieval ----

    def search(self, query: str, limit: int = 5, threshold: Optional[float] = None) -> List[SearchHit]:
        vector = self.embedder.embed_query(query)
        return self.store.search(vector, limit=limit, threshold=threshold)

    def ask(self, question: str, max_sources: Optional[int] = None) -> AskResult:
        """
        Answer a question from the stored chunks.

        Hits at or below the configured threshold are ignored. When nothing is
        left, the fixed NO_RELEVANT_INFO_ANSWER is returned without calling the
        model.
        """
        started = time.perf_counter()
        data = parse_question(question, self.config.max_sources if max_sources is None else max_sources)
        q = data.question

        hits = self.search(q, limit=data.max_sources, threshold=self.config.search_threshold)
        logger.info("Question %r: %d relevant chunks", q[:60], len(hits))

        if not hits:
            return AskResult(
                question=q,
                answer=NO_RELEVANT_INFO_ANSWER,
                sources=[],
                response_time_ms=_elapsed_ms(started),
            )

        if self.generator is None:
            raise GenerationError("No language model is configured for this pipeline")

        messages = build_messages(q, hits)
        try:
            result = self.generator.chat(
                messages,
                temperature=self.config.temperature,
                max_tokens=self.config.max_tokens,
            )
        except GenerationError:
            raise
        except Exception as e:
            raise GenerationError(f"Answer generation failed: {e}") from e

        return AskResult(
            question=q,
            answer=result.text,
            sources=[Source.from_hit(h) for h in hits],
            response_time_ms=_elapsed_ms(started),
            tokens_used=result.tokens_used,
        )

    # ---- Admin ----

    def list_documents(self, limit: int = 50, offset: int = 0) -> List[StoredDocument]:
        return self.store.list_documents(limit=limit, offset=offset)

    def stats(self) -> Dict[str, Any]:
        """Collection info plus a per-file-type count over a sample of stored chunks."""
        info: CollectionInfo = self.store.info()
        by_type: Counter = Counter()
        if info.status != "red":
            for doc in self.store.list_documents(limit=STATS_SAMPLE_SIZE, offset=0):
                by_type[ChunkMetadata.from_dict(doc.metadata).file_type or "unknown"] += 1
        return {
            "collection": info.to_dict(),
            "totalDocuments": info.points_count,
            "fileTypes": dict(by_type),
        }

    def delete_document(self, doc_id: str) -> None:
        if not (doc_id or "").strip():
            raise ValidationError("document id is required")
        self.store.delete(doc_id)
        logger.info("Deleted %s", doc_id)

    def delete_documents(self, doc_ids: Sequence[str]) -> int:
        ids = [d for d in (doc_ids or []) if (d or "").strip()]
        if not ids:
            raise ValidationError("no document ids given")
        n = self.store.delete_many(ids)
        logger.info("Deleted %d documents", n)
        return n


def _elapsed_ms(started: float) -> int:
    return int(round((time.perf_counter() - started) * 1000.0))
