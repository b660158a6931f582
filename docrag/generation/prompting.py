"""
Helpers for building prompts for the language model.
Includes:
- format_context_blocks: turn retrieved hits into numbered context text
- build_messages: system + user messages for a grounded answer
"""

from __future__ import annotations

from typing import Dict, List, Sequence

from docrag.store.base import SearchHit


BLOCK_SEPARATOR = "\n\n---\n\n"

SYSTEM_PROMPT = (
    "You are a helpful assistant that answers questions about the user's documents.\n"
    "Rules:\n"
    "1. Use the provided information first.\n"
    "2. If it is incomplete, you may complement it with general knowledge, "
    "but say clearly which part comes from general knowledge.\n"
    "3. Cite the information you use as \"Source N\".\n"
    "4. Do not speculate. If you do not know, say so.\n"
    "5. Give a clear, structured answer."
)


def format_context_blocks(hits: Sequence[SearchHit]) -> str:
    """
    Number the hits and label each with its relevance.

    Args:
        hits: retrieved hits in rank order

    Returns:
        "[Source N] (relevance: XX.X%)\\n<text>" blocks joined by BLOCK_SEPARATOR
    """
    blocks: List[str] = []
    for i, hit in enumerate(hits, start=1):
        blocks.append(f"[Source {i}] (relevance: {hit.score * 100:.1f}%)\n{hit.text}")
    return BLOCK_SEPARATOR.join(blocks)


def build_messages(question: str, hits: Sequence[SearchHit]) -> List[Dict[str, str]]:
    """
    Build a grounded prompt (context + question).

    Returns:
        A list of role/content dicts for the model
    """
    user = (
        f"Available information:\n\n{format_context_blocks(hits)}\n\n"
        f"Question: {question}\n\n"
        "Answer using the information above and cite the sources you use."
    )
    return [{"role": "system", "content": SYSTEM_PROMPT}, {"role": "user", "content": user}]
