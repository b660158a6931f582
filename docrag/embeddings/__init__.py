"""
Embedding providers.

Provides:
- Embedder: the text -> vector interface the pipeline depends on
- SentenceTransformerEmbedder: local model (default multilingual-e5-base)
- OpenAIEmbedder: OpenAI Embeddings API

Concrete providers are imported from their modules by the pipeline factory,
so importing this package does not pull in torch or the OpenAI client.
"""

from .base import Embedder

__all__ = ["Embedder"]
