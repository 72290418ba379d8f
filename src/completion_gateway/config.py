"""Environment-driven configuration using pydantic-settings."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class GatewaySettings(BaseSettings):
    """Gateway defaults. All values can be overridden via env vars prefixed ``OPENAI_``.

    Read once at startup and handed to :class:`~completion_gateway.llm.CompletionGateway`
    explicitly; nothing in the package reads the environment behind the caller's back.
    """

    model_config = SettingsConfigDict(
        env_prefix="OPENAI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # --- credentials / transport ---
    api_key: str = ""
    base_url: str | None = None
    timeout: float = 30.0

    # --- chat defaults ---
    model: str = "gpt-4-turbo-preview"
    max_tokens: int = 1000
    temperature: float = 0.7

    # --- embeddings ---
    embedding_model: str = "text-embedding-ada-002"

    # --- model catalog ---
    chat_model_markers: list[str] = ["gpt"]

    def require_api_key(self) -> str:
        """Return the API key or fail loudly when none is configured."""
        if not self.api_key:
            raise RuntimeError("No OpenAI API key configured. Set OPENAI_API_KEY.")
        return self.api_key
