"""
Local embeddings with SentenceTransformers (default: intfloat/multilingual-e5-base).

Key behaviors:
- Formats inputs with the E5 prefixes ("query: " / "passage: ") when the
  model name says it is an E5 model.
- L2 normalizes embeddings so cosine similarity in the store is meaningful.
- No fail-on-import; the model loads lazily on first use.
- One text per call; the pipeline embeds chunks one by one.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import numpy as np
from sentence_transformers import SentenceTransformer

from docrag.errors import EmbeddingError
from docrag.logging_config import get_logger

from .base import Embedder

logger = get_logger(__name__)


def _resolve_cache_dir() -> Optional[str]:
    """
    Pick a directory for caching downloaded models.
    Priority:
      1) SENTENCE_TRANSFORMERS_HOME
      2) HUGGINGFACE_HUB_CACHE
      3) HF_HOME
    """
    for key in ("SENTENCE_TRANSFORMERS_HOME", "HUGGINGFACE_HUB_CACHE", "HF_HOME"):
        v = os.getenv(key)
        if v and v.strip():
            p = Path(v).expanduser().resolve()
            p.mkdir(parents=True, exist_ok=True)
            return str(p)
    return None


def _l2_normalize(vec: np.ndarray) -> np.ndarray:
    norm = float(np.linalg.norm(vec))
    if norm == 0.0:
        return vec
    return vec / norm


@dataclass
class SentenceTransformerEmbedder(Embedder):
    model_name: str = "intfloat/multilingual-e5-base"
    dimension: int = 768
    device: Optional[str] = None      # e.g. "cuda", "cpu"; None lets ST pick
    normalize: bool = True

    _model: Optional[SentenceTransformer] = field(default=None, repr=False)

    def _ensure_model(self) -> SentenceTransformer:
        if self._model is None:
            kwargs = {"device": self.device}
            cache_dir = _resolve_cache_dir()
            if cache_dir:
                kwargs["cache_folder"] = cache_dir
            logger.info("Loading embedding model %s", self.model_name)
            self._model = SentenceTransformer(self.model_name, **kwargs)
            model_dim = self._model.get_sentence_embedding_dimension()
            if model_dim and model_dim != self.dimension:
                logger.warning(
                    "Embedding dimension mismatch: configured %d, model %s gives %d; using %d",
                    self.dimension, self.model_name, model_dim, model_dim,
                )
                self.dimension = int(model_dim)
        return self._model

    @property
    def _is_e5(self) -> bool:
        return "e5" in self.model_name.lower()

    def _encode(self, text: str) -> List[float]:
        try:
            model = self._ensure_model()
            vec = model.encode(
                text,
                convert_to_numpy=True,
                normalize_embeddings=False,  # normalized below
                show_progress_bar=False,
            )
        except (OSError, RuntimeError, ValueError) as e:
            raise EmbeddingError(f"Embedding failed ({self.model_name}): {e}") from e
        vec = np.asarray(vec, dtype="float32")
        if self.normalize:
            vec = _l2_normalize(vec)
        return vec.tolist()

    def embed_document(self, text: str) -> List[float]:
        t = text.strip()
        return self._encode(f"passage: {t}" if self._is_e5 else t)

    def embed_query(self, text: str) -> List[float]:
        t = text.strip()
        return self._encode(f"query: {t}" if self._is_e5 else t)
