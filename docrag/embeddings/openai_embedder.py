"""OpenAI Embeddings API provider (text-embedding-3-small, 1536 dims)."""

from __future__ import annotations

from typing import List, Optional

from openai import OpenAI, OpenAIError

from docrag.errors import EmbeddingError
from docrag.logging_config import get_logger

from .base import Embedder

logger = get_logger(__name__)


class OpenAIEmbedder(Embedder):
    """
    One API call per text. No retries: a failed call surfaces as
    EmbeddingError and the caller decides what to do.
    """

    def __init__(
        self,
        api_key: str,
        model_name: str = "text-embedding-3-small",
        dimension: int = 1536,
        client: Optional[OpenAI] = None,
    ) -> None:
        self.model_name = model_name
        self.dimension = dimension
        self.client = client or OpenAI(api_key=api_key)

    def _embed(self, text: str) -> List[float]:
        try:
            response = self.client.embeddings.create(model=self.model_name, input=text)
        except OpenAIError as e:
            raise EmbeddingError(f"OpenAI embedding failed: {e}") from e
        vec = list(response.data[0].embedding)
        logger.debug("Embedded %d chars -> %d dims", len(text), len(vec))
        return vec

    def embed_document(self, text: str) -> List[float]:
        return self._embed(text)

    def embed_query(self, text: str) -> List[float]:
        return self._embed(text)
