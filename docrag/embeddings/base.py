"""
Embedding provider interface.

An embedder turns one text into one fixed-dimension vector. Documents and
queries go through separate methods because some models (E5) expect
different prefixes for each; providers without that distinction use the
same call for both.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List


class Embedder(ABC):
    model_name: str
    dimension: int

    @abstractmethod
    def embed_document(self, text: str) -> List[float]:
        """Vector for a stored chunk."""

    @abstractmethod
    def embed_query(self, text: str) -> List[float]:
        """Vector for a search query."""
