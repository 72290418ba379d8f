"""Client-side token budgeting."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

# Roughly four characters per token for English text.
_CHARS_PER_TOKEN = 4


def _content_of(message: Any) -> str:
    if isinstance(message, Mapping):
        return message["content"]
    return message.content


def estimate_token_count(messages: Iterable[Any]) -> int:
    """Approximate the prompt size of *messages* in tokens.

    Accepts :class:`~completion_gateway.llm.types.ChatMessage` objects or plain
    mappings; only ``content`` is read, so a role is not required.

    Contents are joined with single spaces and the character count is divided
    by four, rounding up. This is a heuristic for budgeting only; it is not a
    tokenizer and will disagree with the usage counts the provider reports.
    """
    text = " ".join(_content_of(m) for m in messages)
    return -(-len(text) // _CHARS_PER_TOKEN)
