"""
Pipeline facade for DOCRAG.

Callers (the CLI, benchmarks, tests) import from here instead of deep modules:

    from docrag.pipeline import build_pipeline, process_file

- build_pipeline : construct embedder, store and chat runner from a Config
- RagPipeline    : ingest / upsert / search / ask / list / stats / delete
- process_file   : extraction + chunking of one file, with temp-file cleanup
"""

from .rag import (
    NO_RELEVANT_INFO_ANSWER,
    AskResult,
    IngestResult,
    ProcessedFile,
    RagPipeline,
    SavedChunk,
    Source,
    process_file,
)
from .factory import build_pipeline

__all__ = [
    "NO_RELEVANT_INFO_ANSWER",
    "AskResult",
    "IngestResult",
    "ProcessedFile",
    "RagPipeline",
    "SavedChunk",
    "Source",
    "process_file",
    "build_pipeline",
]
