"""Cancellable async iterator over a streaming chat completion."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from types import TracebackType
from typing import Any

from completion_gateway.llm.errors import log_and_classify

logger = logging.getLogger(__name__)


class ChatCompletionStream:
    """Single-pass sequence of text deltas from the provider.

    Iterate with ``async for``; concatenating the chunks yields the full reply.
    The stream cannot be restarted. Once it is exhausted, closed, cancelled or
    has failed, the underlying HTTP connection is released and further
    iteration ends immediately.

    Reading happens inside an async generator, so a cancelled consumer runs
    the release path on its way out, and a stream dropped mid-way is closed by
    the event loop's async-generator finalizer. ``async with`` (or
    :meth:`aclose`) releases the connection deterministically.
    """

    def __init__(self, raw: Any) -> None:
        self._raw = raw
        self._chunks = self._read()
        self._closed = False
        self.model: str | None = None
        self.finish_reason: str | None = None

    @property
    def closed(self) -> bool:
        return self._closed

    def __aiter__(self) -> ChatCompletionStream:
        return self

    async def __anext__(self) -> str:
        if self._closed:
            raise StopAsyncIteration
        return await self._chunks.__anext__()

    async def _read(self) -> AsyncGenerator[str, None]:
        try:
            async for chunk in self._raw:
                text = self._consume(chunk)
                if text:
                    yield text
        except Exception as exc:
            raise log_and_classify(exc, operation="streaming chat completion") from exc
        finally:
            await self._release()

    def _consume(self, chunk: Any) -> str:
        model = getattr(chunk, "model", None)
        if model:
            self.model = model
        choices = getattr(chunk, "choices", None) or []
        if not choices:
            return ""
        choice = choices[0]
        if choice.finish_reason:
            self.finish_reason = choice.finish_reason
        delta = choice.delta
        return (delta.content if delta is not None else None) or ""

    async def _release(self) -> None:
        if self._closed:
            return
        self._closed = True
        close = getattr(self._raw, "close", None)
        if close is not None:
            await close()
        logger.debug("chat completion stream closed (finish_reason=%s)", self.finish_reason)

    async def aclose(self) -> None:
        """Release the transport connection. Safe to call more than once."""
        await self._chunks.aclose()
        # an unstarted generator skips its finally block
        await self._release()

    async def __aenter__(self) -> ChatCompletionStream:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
