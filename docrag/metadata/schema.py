"""
Metadata records attached to processed files and stored chunks.

Defines:
- FileMetadata: one per processed upload
- ChunkMetadata: file metadata + position of one chunk, stored with it

Payload keys are camelCase, the same shape the CLI prints for ingested chunks.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


@dataclass(frozen=True)
class FileMetadata:
    file_type: str
    original_size: int
    processed_at: str
    total_chunks: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fileType": self.file_type,
            "originalSize": self.original_size,
            "processedAt": self.processed_at,
            "totalChunks": self.total_chunks,
        }


@dataclass(frozen=True)
class ChunkMetadata:
    file_type: Optional[str] = None
    original_size: Optional[int] = None
    processed_at: Optional[str] = None
    total_chunks: Optional[int] = None
    chunk_index: Optional[int] = None
    source_file: Optional[str] = None
    filename: Optional[str] = None

    @classmethod
    def for_chunk(cls, file_meta: FileMetadata, *, filename: str, chunk_index: int) -> "ChunkMetadata":
        return cls(
            file_type=file_meta.file_type,
            original_size=file_meta.original_size,
            processed_at=file_meta.processed_at,
            total_chunks=file_meta.total_chunks,
            chunk_index=chunk_index,
            source_file=filename,
            filename=filename,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Payload for the store; None values are dropped."""
        d = {
            "fileType": self.file_type,
            "originalSize": self.original_size,
            "processedAt": self.processed_at,
            "totalChunks": self.total_chunks,
            "chunkIndex": self.chunk_index,
            "sourceFile": self.source_file,
            "filename": self.filename,
        }
        return {k: v for k, v in d.items() if v is not None}

    @classmethod
    def from_dict(cls, d: Optional[Mapping[str, Any]]) -> "ChunkMetadata":
        d = d or {}

        def _int(v):
            try:
                return int(v) if v is not None else None
            except (TypeError, ValueError):
                return None

        return cls(
            file_type=d.get("fileType"),
            original_size=_int(d.get("originalSize")),
            processed_at=d.get("processedAt"),
            total_chunks=_int(d.get("totalChunks")),
            chunk_index=_int(d.get("chunkIndex")),
            source_file=d.get("sourceFile"),
            filename=d.get("filename"),
        )
