"""Normalized request and response types for the completion gateway."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["system", "user", "assistant"]


class ChatMessage(BaseModel):
    """A single message of a chat conversation."""

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str


class GenerationOptions(BaseModel):
    """Per-call generation overrides. Unset fields fall back to configuration."""

    model: str | None = None
    temperature: float | None = None
    max_tokens: int | None = None
    top_p: float | None = None
    frequency_penalty: float | None = None
    presence_penalty: float | None = None
    stream: bool | None = None


class Usage(BaseModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class CompletionResult(BaseModel):
    """Normalized result of a non-streaming chat completion."""

    content: str
    usage: Usage = Field(default_factory=Usage)
    model: str
    finish_reason: str = ""


class EmbeddingUsage(BaseModel):
    prompt_tokens: int = 0
    total_tokens: int = 0


class EmbeddingResult(BaseModel):
    """One vector per input, in input order."""

    embeddings: list[list[float]]
    usage: EmbeddingUsage = Field(default_factory=EmbeddingUsage)
    model: str


class ModelInfo(BaseModel):
    id: str
    owned_by: str
    created: datetime
