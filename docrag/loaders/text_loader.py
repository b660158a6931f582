"""
Plain text and Markdown loaders.

- TXT: read as UTF-8, undecodable bytes ignored.
- MD: same, minus a leading YAML front matter block. Markup is kept;
      blank lines between blocks are what the chunker splits on.
"""

from __future__ import annotations

import re
from pathlib import Path

from docrag.errors import ExtractionError
from docrag.logging_config import get_logger

logger = get_logger(__name__)

_FRONT_MATTER_RE = re.compile(r"^---\s*\n(.*?)\n---\s*\n?", re.DOTALL)


def _read(p: Path) -> str:
    try:
        return p.read_text(encoding="utf-8", errors="ignore")
    except OSError as e:
        raise ExtractionError(f"Failed to read {p.name}: {e}") from e


def _strip_front_matter(text: str) -> str:
    m = _FRONT_MATTER_RE.match(text)
    if m:
        return text[m.end():]
    return text


def load_txt_text(path: str | Path) -> str:
    p = Path(path)
    content = _read(p)
    if not content.strip():
        raise ExtractionError(f"Text file is empty: {p.name}")
    logger.info("Text %s: %d chars", p.name, len(content))
    return content


def load_md_text(path: str | Path) -> str:
    p = Path(path)
    content = _strip_front_matter(_read(p))
    if not content.strip():
        raise ExtractionError(f"Markdown file is empty: {p.name}")
    logger.info("Markdown %s: %d chars", p.name, len(content))
    return content
