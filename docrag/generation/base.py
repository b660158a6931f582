"""Chat runner interface and its result record."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass(frozen=True)
class GenerationResult:
    text: str
    tokens_used: Optional[int] = None


class ChatRunner(ABC):
    """Send role/content messages to a chat model, get one answer back."""

    @abstractmethod
    def chat(
        self,
        messages: List[Dict[str, str]],
        *,
        temperature: float = 0.2,
        max_tokens: int = 1500,
    ) -> GenerationResult:
        ...

    def close(self) -> None:
        """Release the model or client. Default: nothing to release."""
