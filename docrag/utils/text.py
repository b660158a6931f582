"""
Lightweight text helpers.
"""

from __future__ import annotations

import re


_WS_RE = re.compile(r"[ \t]+")
_NL_RE = re.compile(r"\n{3,}")


def normalize_text(text: str) -> str:
    """
    Normalize whitespace:
      - collapse consecutive spaces/tabs
      - trim lines
      - collapse 3+ newlines to one blank line
      - strip leading/trailing whitespace
    Blank lines survive, so paragraph boundaries are kept for the chunker.
    """
    if not text:
        return ""
    lines = [_WS_RE.sub(" ", line).strip() for line in text.splitlines()]
    out = "\n".join(lines)
    out = _NL_RE.sub("\n\n", out)
    return out.strip()


def preview(text: str, limit: int = 150) -> str:
    """First `limit` characters, with "..." appended when the text was cut."""
    text = text or ""
    return text[:limit] + "..." if len(text) > limit else text
