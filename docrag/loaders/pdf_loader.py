"""
PDF loader.

Extracts per-page text via pypdf and joins the pages with a blank line so
that page breaks also act as paragraph breaks for the chunker.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Tuple

from pypdf import PdfReader
from pypdf.errors import PyPdfError

from docrag.errors import ExtractionError
from docrag.logging_config import get_logger
from docrag.utils.text import normalize_text

logger = get_logger(__name__)


def load_pdf_pages(path: str | Path) -> List[Tuple[int, str]]:
    """Return (page_number, text) for every page that has text."""
    p = Path(path)
    try:
        reader = PdfReader(str(p))
        pages = list(reader.pages)
    except (PyPdfError, OSError, ValueError) as e:
        raise ExtractionError(f"Failed to read PDF {p.name}: {e}") from e

    out: List[Tuple[int, str]] = []
    for i, page in enumerate(pages, start=1):
        try:
            txt = page.extract_text() or ""
        except (PyPdfError, KeyError, ValueError) as e:
            # One broken page should not sink the whole document
            logger.warning("Skipping page %d of %s: %s", i, p.name, e)
            continue
        txt = normalize_text(txt)
        if txt:
            out.append((i, txt))
    return out


def load_pdf_text(path: str | Path) -> str:
    p = Path(path)
    pages = load_pdf_pages(p)
    if not pages:
        raise ExtractionError(f"Could not extract any text from PDF {p.name}")
    text = "\n\n".join(t for _, t in pages)
    logger.info("PDF %s: %d pages with text, %d chars", p.name, len(pages), len(text))
    return text
