"""
Unified text extraction interface.

Public:
    infer_content_type(path) -> str | None
    is_supported_content_type(content_type) -> bool
    extract_text(path, content_type) -> str

Supported content types:
    - application/pdf   (pypdf)
    - text/plain
    - text/markdown

Every failure surfaces as ExtractionError (or its UnsupportedFormatError
subclass); the chunker only ever sees the returned string.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from docrag.errors import ExtractionError, UnsupportedFormatError

from .pdf_loader import load_pdf_text
from .text_loader import load_md_text, load_txt_text

PDF = "application/pdf"
TEXT = "text/plain"
MARKDOWN = "text/markdown"

SUPPORTED_CONTENT_TYPES = (PDF, TEXT, MARKDOWN)

_EXTENSIONS = {
    "pdf": PDF,
    "txt": TEXT,
    "text": TEXT,
    "md": MARKDOWN,
    "markdown": MARKDOWN,
}


def infer_content_type(path: str | Path) -> Optional[str]:
    ext = Path(path).suffix.lower().lstrip(".")
    return _EXTENSIONS.get(ext)


def is_supported_content_type(content_type: Optional[str]) -> bool:
    return (content_type or "").strip().lower() in SUPPORTED_CONTENT_TYPES


def extract_text(path: str | Path, content_type: str) -> str:
    """
    Route to the loader for `content_type` and return the full text.
    Raises ExtractionError for missing/empty/unreadable files and
    UnsupportedFormatError for unknown content types.
    """
    p = Path(path).expanduser()
    if not p.exists():
        raise ExtractionError(f"File not found: {p}")
    if p.stat().st_size == 0:
        raise ExtractionError(f"File is empty: {p.name}")

    ct = (content_type or "").strip().lower()
    if ct == PDF:
        return load_pdf_text(p)
    if ct == TEXT:
        return load_txt_text(p)
    if ct == MARKDOWN:
        return load_md_text(p)
    raise UnsupportedFormatError(f"Unsupported file type: {content_type}")


__all__ = [
    "PDF",
    "TEXT",
    "MARKDOWN",
    "SUPPORTED_CONTENT_TYPES",
    "infer_content_type",
    "is_supported_content_type",
    "extract_text",
]
