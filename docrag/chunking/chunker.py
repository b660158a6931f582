"""
Paragraph- and sentence-aware text chunking with character overlap.

Functions provided:
- split_paragraphs: split text on blank lines
- split_sentences: split a paragraph on terminal punctuation (Latin + full-width)
- add_overlap: prepend the tail of each chunk to the next one
- chunk_text: the full algorithm (paragraphs -> sentences -> overlap)
- chunk_stats: size summary used for logging

Sizes are counted in characters of the Python string, not tokens or bytes.
"""

from __future__ import annotations

import logging
import re
import time
from typing import Dict, List, Sequence

from docrag.logging_config import get_logger

logger = get_logger(__name__)

PARAGRAPH_SEPARATOR = "\n\n"
SENTENCE_SEPARATOR = " "
OVERLAP_SEPARATOR = "\n\n"

# One or more lines that hold only whitespace
_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")

# A sentence is any run of non-terminal characters followed by a run of terminals.
# The prefix may be empty so that stray leading punctuation is kept, not dropped.
_TERMINALS = ".!?。！？"
_SENTENCE = re.compile(rf"[^{_TERMINALS}]*[{_TERMINALS}]+")


# ------------------------------
# Splitting
# ------------------------------

def split_paragraphs(text: str) -> List[str]:
    """Split text into trimmed, non-empty paragraphs."""
    if not text:
        return []
    return [p.strip() for p in _PARAGRAPH_BREAK.split(text) if p.strip()]


def split_sentences(text: str) -> List[str]:
    """
    Split a paragraph into trimmed sentences.
    Trailing text without terminal punctuation becomes the last sentence.
    """
    if not text:
        return []
    sentences: List[str] = []
    end = 0
    for m in _SENTENCE.finditer(text):
        sentences.append(m.group(0))
        end = m.end()
    rest = text[end:].strip()
    if rest:
        sentences.append(rest)
    return [s.strip() for s in sentences if s.strip()]


def _hard_split(sentence: str, size: int) -> List[str]:
    """Cut an oversized sentence into size-character pieces."""
    pieces = [sentence[i:i + size].strip() for i in range(0, len(sentence), size)]
    return [p for p in pieces if p]


# ------------------------------
# Chunking
# ------------------------------

def _pack_sentences(
    paragraph: str,
    chunks: List[str],
    *,
    chunk_size: int,
    hard_limit: bool,
) -> str:
    """
    Greedily pack the sentences of one oversized paragraph.
    Completed buffers are appended to `chunks`; the last partial buffer is
    returned so that the caller can keep accumulating into it.
    """
    sentences = split_sentences(paragraph)
    if hard_limit and chunk_size > 0:
        expanded: List[str] = []
        for s in sentences:
            expanded.extend(_hard_split(s, chunk_size) if len(s) > chunk_size else [s])
        sentences = expanded

    buf = ""
    for sentence in sentences:
        # The separator is counted even for an empty buffer
        if len(buf + SENTENCE_SEPARATOR + sentence) <= chunk_size:
            buf = buf + SENTENCE_SEPARATOR + sentence if buf else sentence
        else:
            if buf.strip():
                chunks.append(buf.strip())
            # May exceed chunk_size on its own: soft bound
            buf = sentence
    return buf.strip()


def add_overlap(chunks: Sequence[str], overlap_size: int) -> List[str]:
    """
    Prepend the last `overlap_size` characters of chunk i-1 (pre-overlap)
    to chunk i, separated by a blank line. The first chunk is unchanged.
    """
    out: List[str] = []
    for i, chunk in enumerate(chunks):
        if i > 0 and overlap_size > 0:
            prev = chunks[i - 1]
            tail = prev[max(0, len(prev) - overlap_size):]
            chunk = tail + OVERLAP_SEPARATOR + chunk
        out.append(chunk)
    return out


def chunk_text(
    text: str,
    chunk_size: int = 1000,
    overlap_size: int = 100,
    *,
    hard_limit: bool = False,
) -> List[str]:
    """
    Split text into ordered, overlapping chunks of at most `chunk_size`
    characters (before overlap).

    Paragraphs are packed together while they fit. A paragraph that is
    longer than `chunk_size` on its own is packed sentence by sentence, and
    the leftover sentences seed the next buffer. A single sentence longer
    than `chunk_size` is kept whole unless `hard_limit` is set.

    Never raises; empty or whitespace-only text gives an empty list.
    """
    started = time.perf_counter()
    if not text or not text.strip():
        logger.debug("chunk_text: empty input")
        return []

    paragraphs = split_paragraphs(text)
    chunks: List[str] = []
    current = ""

    for paragraph in paragraphs:
        # The separator is counted even for an empty buffer
        if len(current + PARAGRAPH_SEPARATOR + paragraph) <= chunk_size:
            current = current + PARAGRAPH_SEPARATOR + paragraph if current else paragraph
            continue

        if current.strip():
            chunks.append(current.strip())

        if len(paragraph) > chunk_size:
            current = _pack_sentences(paragraph, chunks, chunk_size=chunk_size, hard_limit=hard_limit)
        else:
            current = paragraph

    if current.strip():
        chunks.append(current.strip())

    if overlap_size > 0 and len(chunks) > 1:
        final = add_overlap(chunks, overlap_size)
    else:
        final = [c for c in chunks if c.strip()]

    if logger.isEnabledFor(logging.DEBUG):
        stats = chunk_stats(chunks)
        logger.debug(
            "chunk_text: %d chars, %d paragraphs -> %d chunks (avg %d, max %d) in %.1fms",
            len(text), len(paragraphs), stats["count"], stats["avg_chars"], stats["max_chars"],
            (time.perf_counter() - started) * 1000.0,
        )
    return final


def chunk_stats(chunks: Sequence[str]) -> Dict[str, int]:
    """Return count, average and maximum chunk length in characters."""
    if not chunks:
        return {"count": 0, "avg_chars": 0, "max_chars": 0}
    sizes = [len(c) for c in chunks]
    return {
        "count": len(sizes),
        "avg_chars": round(sum(sizes) / len(sizes)),
        "max_chars": max(sizes),
    }
