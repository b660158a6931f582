"""
Wrapper for llama-cpp-python to load and run local GGUF chat models.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, List, Optional

from llama_cpp import Llama

from docrag.errors import GenerationError
from docrag.logging_config import get_logger

from .base import ChatRunner, GenerationResult

logger = get_logger(__name__)


class LlamaCppRunner(ChatRunner):
    """
    Simple wrapper around llama_cpp.Llama.
    Provides:
    - model loading
    - chat completion with token usage
    """

    def __init__(
        self,
        model_path: str,
        *,
        n_ctx: int = 4096,
        n_gpu_layers: Optional[int] = None,
        seed: int = 42,
        verbose: bool = False,
    ) -> None:
        """
        Load a GGUF model.

        Args:
            model_path: path to the model file
            n_ctx: context window size
            n_gpu_layers: number of layers on GPU (None → LLAMA_GPU_LAYERS env or 0)
            seed: random seed
            verbose: show llama-cpp logs
        """
        p = Path(model_path).expanduser().resolve()
        if not p.exists():
            raise GenerationError(f"Model file not found: {p}")

        gpu_layers = n_gpu_layers
        if gpu_layers is None:
            gpu_layers = int(os.getenv("LLAMA_GPU_LAYERS", "0"))

        logger.info("Loading llama.cpp model %s (n_ctx=%d, gpu_layers=%d)", p.name, n_ctx, gpu_layers)
        try:
            self.model = Llama(
                model_path=str(p),
                n_ctx=n_ctx,
                n_gpu_layers=gpu_layers,
                seed=seed,
                verbose=verbose,
            )
        except (ValueError, RuntimeError) as e:
            raise GenerationError(f"Could not load model {p}: {e}") from e

    def chat(
        self,
        messages: List[Dict[str, str]],
        *,
        temperature: float = 0.2,
        max_tokens: int = 1500,
    ) -> GenerationResult:
        try:
            res = self.model.create_chat_completion(
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except (ValueError, RuntimeError) as e:
            raise GenerationError(f"llama.cpp generation failed: {e}") from e

        text = (res["choices"][0]["message"].get("content") or "").strip()
        usage = res.get("usage") or {}
        return GenerationResult(text=text, tokens_used=usage.get("total_tokens"))
