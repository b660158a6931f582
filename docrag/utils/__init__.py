from .text import normalize_text, preview
from .ids import chunk_id

__all__ = [
    "normalize_text",
    "preview",
    "chunk_id",
]
