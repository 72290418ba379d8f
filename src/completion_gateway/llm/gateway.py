"""Completion gateway around the OpenAI SDK.

Shapes requests from configured defaults, dispatches them through one shared
async client and normalizes both responses and failures.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from datetime import UTC, datetime
from types import TracebackType
from typing import Any

from openai import AsyncOpenAI, DefaultAioHttpClient

from completion_gateway.config import GatewaySettings
from completion_gateway.llm.errors import log_and_classify
from completion_gateway.llm.stream import ChatCompletionStream
from completion_gateway.llm.tokens import estimate_token_count
from completion_gateway.llm.types import (
    ChatMessage,
    CompletionResult,
    EmbeddingResult,
    EmbeddingUsage,
    GenerationOptions,
    ModelInfo,
    Usage,
)

logger = logging.getLogger(__name__)

MessageLike = ChatMessage | Mapping[str, str]

# Options forwarded only when the caller sets them.
_OPTIONAL_PARAMS = ("top_p", "frequency_penalty", "presence_penalty")


def _to_message(message: MessageLike) -> ChatMessage:
    if isinstance(message, ChatMessage):
        return message
    return ChatMessage.model_validate(message)


class CompletionGateway:
    """Chat completions, embeddings and model catalog behind one client handle.

    The gateway keeps no per-call state, so one instance can serve concurrent
    callers. Each call makes exactly one attempt; retry policy belongs to the
    caller.
    """

    def __init__(
        self,
        settings: GatewaySettings | None = None,
        *,
        client: AsyncOpenAI | None = None,
    ) -> None:
        self._settings = settings if settings is not None else GatewaySettings()
        if client is None:
            client = AsyncOpenAI(
                api_key=self._settings.require_api_key(),
                base_url=self._settings.base_url,
                http_client=DefaultAioHttpClient(),
                timeout=self._settings.timeout,
                max_retries=0,
            )
        self._client = client

        logger.info(
            "completion gateway initialized (model=%s, max_tokens=%s, temperature=%s)",
            self._settings.model,
            self._settings.max_tokens,
            self._settings.temperature,
        )

    @property
    def settings(self) -> GatewaySettings:
        return self._settings

    # ------------------------------------------------------------------
    # Request shaping
    # ------------------------------------------------------------------

    def build_chat_params(
        self,
        messages: Iterable[MessageLike],
        options: GenerationOptions | None = None,
        *,
        stream: bool,
    ) -> dict[str, Any]:
        """Merge *options* over the configured defaults into SDK keyword arguments.

        Messages keep the order they were given in. ``stream`` always wins over
        ``options.stream``.
        """
        opts = options or GenerationOptions()
        params: dict[str, Any] = {
            "model": opts.model or self._settings.model,
            "messages": [_to_message(m).model_dump() for m in messages],
            "temperature": (
                opts.temperature if opts.temperature is not None else self._settings.temperature
            ),
            "max_tokens": (
                opts.max_tokens if opts.max_tokens is not None else self._settings.max_tokens
            ),
        }
        for name in _OPTIONAL_PARAMS:
            value = getattr(opts, name)
            if value is not None:
                params[name] = value
        params["stream"] = stream
        return params

    # ------------------------------------------------------------------
    # Chat
    # ------------------------------------------------------------------

    async def create_chat_completion(
        self,
        messages: Iterable[MessageLike],
        options: GenerationOptions | None = None,
    ) -> CompletionResult:
        """Send a chat completion and return a normalised :class:`CompletionResult`."""
        params = self.build_chat_params(messages, options, stream=False)
        logger.debug(
            "creating chat completion (model=%s, messages=%d)",
            params["model"],
            len(params["messages"]),
        )
        try:
            response = await self._client.chat.completions.create(**params)
        except Exception as exc:
            raise log_and_classify(exc, operation="chat completion") from exc

        choice = response.choices[0] if response.choices else None
        content = ""
        finish_reason = ""
        if choice is not None:
            if choice.message is not None:
                content = choice.message.content or ""
            finish_reason = choice.finish_reason or ""

        usage = response.usage
        result = CompletionResult(
            content=content,
            usage=Usage(
                prompt_tokens=usage.prompt_tokens if usage else 0,
                completion_tokens=usage.completion_tokens if usage else 0,
                total_tokens=usage.total_tokens if usage else 0,
            ),
            model=response.model,
            finish_reason=finish_reason,
        )
        logger.info(
            "chat completion created (model=%s, total_tokens=%d, finish_reason=%s)",
            result.model,
            result.usage.total_tokens,
            result.finish_reason,
        )
        return result

    async def create_streaming_chat_completion(
        self,
        messages: Iterable[MessageLike],
        options: GenerationOptions | None = None,
    ) -> ChatCompletionStream:
        """Open a streaming chat completion.

        Failures while opening the stream are raised here; failures while
        reading it are raised from the returned iterator.
        """
        params = self.build_chat_params(messages, options, stream=True)
        logger.debug(
            "creating streaming chat completion (model=%s, messages=%d)",
            params["model"],
            len(params["messages"]),
        )
        try:
            raw = await self._client.chat.completions.create(**params)
        except Exception as exc:
            raise log_and_classify(exc, operation="streaming chat completion") from exc
        return ChatCompletionStream(raw)

    # ------------------------------------------------------------------
    # Embeddings
    # ------------------------------------------------------------------

    async def create_embedding(
        self,
        input: str | Sequence[str],
        *,
        model: str | None = None,
    ) -> EmbeddingResult:
        """Embed one string or an ordered list of strings."""
        resolved = model or self._settings.embedding_model
        payload: str | list[str] = input if isinstance(input, str) else list(input)
        logger.debug(
            "creating embeddings (model=%s, inputs=%d)",
            resolved,
            1 if isinstance(payload, str) else len(payload),
        )
        try:
            response = await self._client.embeddings.create(model=resolved, input=payload)
        except Exception as exc:
            raise log_and_classify(exc, operation="embedding") from exc

        items = sorted(response.data, key=lambda d: getattr(d, "index", 0) or 0)
        usage = response.usage
        result = EmbeddingResult(
            embeddings=[list(d.embedding) for d in items],
            usage=EmbeddingUsage(
                prompt_tokens=usage.prompt_tokens if usage else 0,
                total_tokens=usage.total_tokens if usage else 0,
            ),
            model=response.model,
        )
        logger.info(
            "embeddings created (model=%s, vectors=%d)", result.model, len(result.embeddings)
        )
        return result

    # ------------------------------------------------------------------
    # Model catalog
    # ------------------------------------------------------------------

    async def validate_api_key(self) -> bool:
        """Probe the model catalog. Returns ``False`` on any failure, never raises."""
        try:
            await self._client.models.list()
        except Exception as exc:  # noqa: BLE001
            logger.warning("API key validation failed: %s", type(exc).__name__)
            return False
        logger.info("API key validated")
        return True

    def _is_chat_model(self, model_id: str) -> bool:
        return any(marker in model_id for marker in self._settings.chat_model_markers)

    async def get_available_models(self) -> list[ModelInfo]:
        """List chat-capable models in the order the provider returns them."""
        try:
            page = await self._client.models.list()
        except Exception as exc:
            raise log_and_classify(exc, operation="model listing") from exc

        models = [
            ModelInfo(
                id=m.id,
                owned_by=m.owned_by,
                created=datetime.fromtimestamp(m.created, tz=UTC),
            )
            for m in page.data
            if self._is_chat_model(m.id)
        ]
        logger.info("retrieved available models (count=%d)", len(models))
        return models

    # ------------------------------------------------------------------
    # Budgeting
    # ------------------------------------------------------------------

    def estimate_token_count(self, messages: Iterable[Any]) -> int:
        """Rough prompt size; see :func:`completion_gateway.llm.tokens.estimate_token_count`."""
        return estimate_token_count(messages)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.close()

    async def __aenter__(self) -> CompletionGateway:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()


def completion_gateway(
    settings: GatewaySettings | None = None,
    *,
    client: AsyncOpenAI | None = None,
) -> CompletionGateway:
    """Convenience factory. Equivalent to ``CompletionGateway(...)``."""
    return CompletionGateway(settings, client=client)
