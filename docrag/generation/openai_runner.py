"""OpenAI chat completions runner (default model gpt-4)."""

from __future__ import annotations

from typing import Dict, List, Optional

from openai import OpenAI, OpenAIError

from docrag.errors import GenerationError
from docrag.logging_config import get_logger

from .base import ChatRunner, GenerationResult

logger = get_logger(__name__)


class OpenAIChatRunner(ChatRunner):
    def __init__(self, api_key: str, model: str = "gpt-4", client: Optional[OpenAI] = None) -> None:
        self.model = model
        self.client = client or OpenAI(api_key=api_key)

    def chat(
        self,
        messages: List[Dict[str, str]],
        *,
        temperature: float = 0.2,
        max_tokens: int = 1500,
    ) -> GenerationResult:
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except OpenAIError as e:
            raise GenerationError(f"OpenAI chat completion failed: {e}") from e

        text = (response.choices[0].message.content or "").strip()
        tokens = response.usage.total_tokens if response.usage else None
        logger.debug("OpenAI %s answered with %d chars (%s tokens)", self.model, len(text), tokens)
        return GenerationResult(text=text, tokens_used=tokens)
