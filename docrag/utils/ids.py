"""
ID helpers for stored chunks.

Chunks are keyed by the uploaded file name and their 1-based position:
    report.pdf_chunk_1, report.pdf_chunk_2, ...

Re-ingesting the same file name therefore overwrites the same records.
"""

from __future__ import annotations


def chunk_id(filename: str, index: int) -> str:
    """Return the id of chunk `index` (1-based) of `filename`."""
    if index < 1:
        raise ValueError(f"chunk index is 1-based, got {index}")
    return f"{filename}_chunk_{index}"
