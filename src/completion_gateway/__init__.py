"""completion_gateway – a thin, typed gateway to OpenAI-compatible chat APIs."""

from completion_gateway.config import GatewaySettings
from completion_gateway.llm import (
    ChatCompletionStream,
    ChatMessage,
    CompletionGateway,
    CompletionResult,
    EmbeddingResult,
    ErrorKind,
    GatewayError,
    GenerationOptions,
    ModelInfo,
    completion_gateway,
    estimate_token_count,
)
from completion_gateway.version import __version__

__all__ = [
    "ChatCompletionStream",
    "ChatMessage",
    "CompletionGateway",
    "CompletionResult",
    "EmbeddingResult",
    "ErrorKind",
    "GatewayError",
    "GatewaySettings",
    "GenerationOptions",
    "ModelInfo",
    "__version__",
    "completion_gateway",
    "estimate_token_count",
]
