"""
Expose chunking utilities for splitting text into smaller pieces.

Includes:
- chunk_text: split text into overlapping chunks
- split_paragraphs / split_sentences: the two splitting passes
- add_overlap: the overlap pass on its own
- chunk_stats: size summary of a chunk list
"""

from .chunker import (
    chunk_text,
    split_paragraphs,
    split_sentences,
    add_overlap,
    chunk_stats,
)

__all__ = [
    "chunk_text",
    "split_paragraphs",
    "split_sentences",
    "add_overlap",
    "chunk_stats",
]
