"""Builders for fake SDK responses and errors.

The gateway is exercised against an in-memory stand-in for ``AsyncOpenAI`` so
no test touches the network.
"""

from __future__ import annotations

import asyncio
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock

import httpx
import openai

API_URL = "https://api.openai.com/v1/chat/completions"


def make_status_error(status: int, message: str) -> openai.APIStatusError:
    """Build the SDK exception the client raises for an HTTP *status* reply."""
    request = httpx.Request("POST", API_URL)
    response = httpx.Response(status, request=request)
    classes: dict[int, type[openai.APIStatusError]] = {
        400: openai.BadRequestError,
        401: openai.AuthenticationError,
        404: openai.NotFoundError,
        429: openai.RateLimitError,
    }
    cls = classes.get(status, openai.InternalServerError if status >= 500 else openai.APIStatusError)
    return cls(message, response=response, body={"error": {"message": message}})


def make_connection_error() -> openai.APIConnectionError:
    return openai.APIConnectionError(request=httpx.Request("POST", API_URL))


def make_completion(
    content: str | None = "Test response",
    *,
    model: str = "gpt-4-turbo-preview",
    finish_reason: str | None = "stop",
    usage: tuple[int, int, int] | None = (10, 20, 30),
) -> SimpleNamespace:
    return SimpleNamespace(
        id="chatcmpl-123",
        model=model,
        choices=[
            SimpleNamespace(
                index=0,
                message=SimpleNamespace(role="assistant", content=content),
                finish_reason=finish_reason,
            )
        ],
        usage=(
            SimpleNamespace(prompt_tokens=usage[0], completion_tokens=usage[1], total_tokens=usage[2])
            if usage
            else None
        ),
    )


def make_chunk(
    content: str | None,
    *,
    finish_reason: str | None = None,
    model: str = "gpt-4-turbo-preview",
) -> SimpleNamespace:
    return SimpleNamespace(
        model=model,
        choices=[
            SimpleNamespace(
                index=0,
                delta=SimpleNamespace(role="assistant", content=content),
                finish_reason=finish_reason,
            )
        ],
    )


class FakeStream:
    """Mimics ``openai.AsyncStream``: async-iterable chunks plus ``close()``.

    With a *gate*, every chunk after the first waits for the event, which lets
    a test park the consumer mid-stream.
    """

    def __init__(
        self,
        chunks: list[Any],
        error: BaseException | None = None,
        *,
        gate: asyncio.Event | None = None,
    ) -> None:
        self._chunks = chunks
        self._error = error
        self._gate = gate
        self.close = AsyncMock()
        self.consumed = 0

    async def _iterate(self):  # type: ignore[no-untyped-def]
        for chunk in self._chunks:
            if self._gate is not None and self.consumed > 0:
                await self._gate.wait()
            self.consumed += 1
            yield chunk
        if self._error is not None:
            raise self._error

    def __aiter__(self):  # type: ignore[no-untyped-def]
        return self._iterate()


class FakeAsyncOpenAI:
    """Just the slice of ``AsyncOpenAI`` the gateway calls."""

    def __init__(self) -> None:
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=AsyncMock()))
        self.embeddings = SimpleNamespace(create=AsyncMock())
        self.models = SimpleNamespace(list=AsyncMock())
        self.close = AsyncMock()
