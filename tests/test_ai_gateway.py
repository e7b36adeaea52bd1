"""Tests for the AI gateway client and per-purpose model settings."""

import json

import httpx
import pytest

from jenifer_api.core.config import settings
from jenifer_api.core.errors import GenerationError
from jenifer_api.services.ai_gateway import GatewayAIClient, get_ai_config


def _client(handler) -> GatewayAIClient:
    return GatewayAIClient(
        gateway_url="http://gateway.test/",
        gateway_key="test-key",
        timeout=5.0,
        transport=httpx.MockTransport(handler),
    )


async def _generate(client: GatewayAIClient) -> str:
    return await client.generate(
        model="claude-sonnet-4-20250514",
        system="You are a test.",
        prompt="Say hello",
        max_tokens=100,
        temperature=0.5,
        task_type="meeting_brief",
    )


class TestGatewayAIClient:
    @pytest.mark.asyncio
    async def test_posts_completion_request(self):
        seen: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"content": "  Hello there  "})

        text = await _generate(_client(handler))

        assert text == "Hello there"
        assert seen["url"] == "http://gateway.test/v1/completions"
        assert seen["auth"] == "Bearer test-key"
        assert seen["body"]["messages"] == [
            {"role": "system", "content": "You are a test."},
            {"role": "user", "content": "Say hello"},
        ]
        assert seen["body"]["max_tokens"] == 100
        assert seen["body"]["task_type"] == "meeting_brief"

    @pytest.mark.asyncio
    async def test_server_error_raises_generation_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503, json={"detail": "overloaded"})

        with pytest.raises(GenerationError):
            await _generate(_client(handler))

    @pytest.mark.asyncio
    async def test_empty_content_raises_generation_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"content": "   "})

        with pytest.raises(GenerationError):
            await _generate(_client(handler))

    @pytest.mark.asyncio
    async def test_non_json_body_raises_generation_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>bad gateway</html>")

        with pytest.raises(GenerationError):
            await _generate(_client(handler))

    @pytest.mark.asyncio
    async def test_transport_error_raises_generation_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(GenerationError):
            await _generate(_client(handler))


class TestAIConfig:
    def test_generation_settings(self):
        config = get_ai_config("generation")

        assert config.model == settings.AI_GENERATION_MODEL
        assert config.max_tokens == settings.AI_GENERATION_MAX_TOKENS
        assert config.temperature == settings.AI_GENERATION_TEMPERATURE

    def test_purposes_differ(self):
        assert get_ai_config("analysis").temperature < get_ai_config("chat").temperature
