"""Common test fixtures."""

from __future__ import annotations

import pytest

from completion_gateway.config import GatewaySettings
from completion_gateway.llm.gateway import CompletionGateway
from tests.helpers import FakeAsyncOpenAI


@pytest.fixture()
def settings() -> GatewaySettings:
    return GatewaySettings(
        api_key="sk-test-key-000000000000000000",
        model="gpt-4-turbo-preview",
        max_tokens=1000,
        temperature=0.7,
        embedding_model="text-embedding-ada-002",
        chat_model_markers=["gpt"],
    )


@pytest.fixture()
def fake_client() -> FakeAsyncOpenAI:
    return FakeAsyncOpenAI()


@pytest.fixture()
def gateway(settings: GatewaySettings, fake_client: FakeAsyncOpenAI) -> CompletionGateway:
    return CompletionGateway(settings, client=fake_client)  # type: ignore[arg-type]
