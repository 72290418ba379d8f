"""Chat-completion gateway."""

from completion_gateway.llm.errors import ErrorKind, GatewayError, classify_error
from completion_gateway.llm.gateway import CompletionGateway, completion_gateway
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

__all__ = [
    "ChatCompletionStream",
    "ChatMessage",
    "CompletionGateway",
    "CompletionResult",
    "EmbeddingResult",
    "EmbeddingUsage",
    "ErrorKind",
    "GatewayError",
    "GenerationOptions",
    "ModelInfo",
    "Usage",
    "classify_error",
    "completion_gateway",
    "estimate_token_count",
]
