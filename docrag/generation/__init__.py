"""
Expose generation-related utilities.

Includes:
- ChatRunner / GenerationResult: the chat interface and its answer record
- build_messages / format_context_blocks: prompt building from retrieved hits

LlamaCppRunner and OpenAIChatRunner live in their own modules and are
imported by the pipeline factory.
"""

from .base import ChatRunner, GenerationResult
from .prompting import BLOCK_SEPARATOR, SYSTEM_PROMPT, build_messages, format_context_blocks

__all__ = [
    "ChatRunner",
    "GenerationResult",
    "BLOCK_SEPARATOR",
    "SYSTEM_PROMPT",
    "build_messages",
    "format_context_blocks",
]
