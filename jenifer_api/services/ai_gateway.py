"""Text generation through the AI gateway.

All model calls leave this service as a single POST to
``{AI_GATEWAY_URL}/v1/completions``; provider selection, streaming and token
accounting live in the gateway. Callers see one awaited string.
"""

from __future__ import annotations

from typing import Any, Literal, Protocol

import httpx
import structlog
from pydantic import BaseModel

from jenifer_api.core.config import settings
from jenifer_api.core.errors import GenerationError

logger = structlog.get_logger()

AIPurpose = Literal["chat", "analysis", "generation"]


class AIProviderConfig(BaseModel):
    model: str
    max_tokens: int
    temperature: float


def get_ai_config(purpose: AIPurpose) -> AIProviderConfig:
    """Model settings for one purpose, read from the environment-backed settings."""
    prefix = f"AI_{purpose.upper()}"
    return AIProviderConfig(
        model=getattr(settings, f"{prefix}_MODEL"),
        max_tokens=getattr(settings, f"{prefix}_MAX_TOKENS"),
        temperature=getattr(settings, f"{prefix}_TEMPERATURE"),
    )


class TextGenerator(Protocol):
    async def generate(
        self,
        *,
        model: str,
        system: str,
        prompt: str,
        max_tokens: int,
        temperature: float,
        task_type: str = ...,
    ) -> str: ...


class GatewayAIClient:
    """Thin adapter that calls the AI gateway completions endpoint."""

    def __init__(
        self,
        gateway_url: str | None = None,
        gateway_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = (gateway_url or settings.AI_GATEWAY_URL).rstrip("/")
        self._key = gateway_key if gateway_key is not None else settings.AI_GATEWAY_API_KEY
        self._timeout = timeout or settings.AI_GATEWAY_TIMEOUT
        self._transport = transport

    async def generate(
        self,
        *,
        model: str,
        system: str,
        prompt: str,
        max_tokens: int,
        temperature: float,
        task_type: str = "generation",
    ) -> str:
        payload: dict[str, Any] = {
            "model": model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            "max_tokens": max_tokens,
            "temperature": temperature,
            "task_type": task_type,
        }
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                resp = await client.post(
                    f"{self._url}/v1/completions",
                    json=payload,
                    headers={"Authorization": f"Bearer {self._key}"},
                )
                resp.raise_for_status()
                data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("ai_gateway.request_failed", task_type=task_type, error=str(exc))
            raise GenerationError(f"AI gateway request failed: {exc}") from exc

        content = (data.get("content") or "").strip() if isinstance(data, dict) else ""
        if not content:
            logger.warning("ai_gateway.empty_completion", task_type=task_type, model=model)
            raise GenerationError("AI gateway returned an empty completion")
        return content


def get_text_generator() -> TextGenerator:
    return GatewayAIClient()
