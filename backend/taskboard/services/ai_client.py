"""OpenAI-compatible chat completions client (DeepSeek or OpenRouter)."""

import json
import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Any

import httpx

from taskboard.config import Settings, get_settings
from taskboard.exceptions import AIServiceError

logger = logging.getLogger(__name__)

DEEPSEEK_API_URL = "https://api.deepseek.com/chat/completions"
OPENROUTER_API_URL = "https://openrouter.ai/api/v1/chat/completions"


@dataclass(frozen=True)
class Provider:
    name: str
    url: str
    api_key: str
    model: str
    extra_headers: dict[str, str]


def resolve_provider(settings: Settings) -> Provider:
    if settings.ai_provider == "openrouter":
        return Provider(
            name="openrouter",
            url=OPENROUTER_API_URL,
            api_key=settings.openrouter_api_key,
            model=settings.openrouter_model,
            extra_headers={"HTTP-Referer": settings.app_url, "X-Title": settings.app_name},
        )
    return Provider(
        name="deepseek",
        url=DEEPSEEK_API_URL,
        api_key=settings.deepseek_api_key,
        model=settings.deepseek_model,
        extra_headers={},
    )


def parse_ai_json(response: str) -> Any:
    """Parse JSON from a model reply, tolerating a markdown code fence."""
    cleaned = response.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return json.loads(cleaned.strip())


class AIClient:
    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.provider = resolve_provider(self.settings)
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.settings.ai_timeout_seconds, transport=self._transport)

    def _headers(self) -> dict[str, str]:
        if not self.provider.api_key:
            raise AIServiceError(401, f"{self.provider.name} API key not configured")
        return {
            "Authorization": f"Bearer {self.provider.api_key}",
            "Content-Type": "application/json",
            **self.provider.extra_headers,
        }

    def _payload(
        self, messages: list[dict[str, str]], temperature: float, max_tokens: int, stream: bool
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "model": self.provider.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if stream:
            payload["stream"] = True
        return payload

    async def chat_completion(
        self,
        messages: list[dict[str, str]],
        *,
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ) -> str:
        """Send a chat completion request and return the assistant text."""
        headers = self._headers()
        try:
            async with self._client() as client:
                response = await client.post(
                    self.provider.url,
                    headers=headers,
                    json=self._payload(messages, temperature, max_tokens, stream=False),
                )
        except httpx.TimeoutException:
            logger.error(f"{self.provider.name} API timeout")
            raise AIServiceError(504, "timeout")

        if response.status_code != 200:
            logger.error(f"{self.provider.name} API error: {response.status_code} - {response.text}")
            raise AIServiceError(response.status_code, response.text)

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError):
            content = None
        if not content:
            raise AIServiceError(500, "Invalid response from AI")
        return content

    async def stream_chat_completion(
        self,
        messages: list[dict[str, str]],
        *,
        temperature: float = 0.7,
        max_tokens: int = 2000,
    ) -> AsyncIterator[str]:
        """Yield text deltas from a streamed chat completion."""
        headers = self._headers()
        async with self._client() as client:
            async with client.stream(
                "POST",
                self.provider.url,
                headers=headers,
                json=self._payload(messages, temperature, max_tokens, stream=True),
            ) as response:
                if response.status_code != 200:
                    body = (await response.aread()).decode(errors="replace")
                    logger.error(f"{self.provider.name} API error: {response.status_code} - {body}")
                    raise AIServiceError(response.status_code, body)

                async for line in response.aiter_lines():
                    if not line.startswith("data:"):
                        continue
                    data = line[5:].strip()
                    if data == "[DONE]":
                        break
                    try:
                        chunk = json.loads(data)
                    except json.JSONDecodeError:
                        logger.warning(f"Skipping malformed stream chunk: {data[:200]}")
                        continue
                    choices = chunk.get("choices") or []
                    if not choices:
                        continue
                    delta = (choices[0].get("delta") or {}).get("content")
                    if delta:
                        yield delta


def get_ai_client() -> AIClient:
    return AIClient()
