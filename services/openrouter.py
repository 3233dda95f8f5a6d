# services/openrouter.py
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List

import httpx

from config import settings
from core.prompt import RESPONSE_FORMAT, SYSTEM_MESSAGE

_LOG = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[Any]]


class ModelRequestError(RuntimeError):
    """The chat-completions call failed (after retries, where retried)."""


class ModelConfigError(ModelRequestError):
    """Client cannot even try – e.g. no API key. Never retried."""


# ───────────── Backoff schedule ─────────────
def backoff_delay(attempt: int, base_delay: float) -> float:
    """Seconds to wait after failed `attempt` (1-based): base, 2·base, 4·base …"""
    return base_delay * 2 ** (attempt - 1)


def backoff_schedule(retry_count: int, base_delay: float) -> List[float]:
    """Every wait the retry loop can perform for `retry_count` attempts."""
    return [backoff_delay(a, base_delay) for a in range(1, retry_count)]


# ───────────── Client ─────────────
class OpenRouterClient:
    def __init__(
        self,
        api_key: str | None,
        endpoint: str = "https://openrouter.ai/api/v1",
        model: str = "openai/gpt-4o-mini",
        temperature: float = 0.7,
        top_p: float = 1.0,
        retry_count: int = 3,
        retry_delay: float = 1.0,
        timeout: float = 120.0,
        system_message: str = SYSTEM_MESSAGE,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Sleep = asyncio.sleep,
        log: logging.Logger = _LOG,
    ) -> None:
        self._api_key = api_key
        self.endpoint = endpoint.rstrip("/")
        self.model = model
        self.temperature = temperature
        self.top_p = top_p
        self.retry_count = retry_count
        self.retry_delay = retry_delay
        self.timeout = timeout
        self.system_message = system_message
        self._transport = transport
        self._sleep = sleep
        self._log = log

    @classmethod
    def from_settings(cls) -> "OpenRouterClient":
        return cls(
            api_key=settings.openrouter_api_key,
            endpoint=settings.openrouter_endpoint,
            model=settings.openrouter_model,
            temperature=settings.model_temperature,
            top_p=settings.model_top_p,
            retry_count=settings.model_retry_count,
            retry_delay=settings.model_retry_delay,
            timeout=settings.model_timeout,
        )

    def build_payload(self, prompt: str) -> Dict[str, Any]:
        return {
            "messages": [
                {"role": "system", "content": self.system_message},
                {"role": "user", "content": prompt},
            ],
            "model": self.model,
            "response_format": RESPONSE_FORMAT,
            "temperature": self.temperature,
            "top_p": self.top_p,
        }

    async def request_completion(self, prompt: str) -> Dict[str, Any]:
        """POST the prompt to /chat/completions and return the decoded response.

        Non-2xx statuses, empty bodies and network errors are retried up to
        `retry_count` attempts in total with a doubling delay in between; the
        last failure is raised as ModelRequestError.
        """
        if not self._api_key:
            raise ModelConfigError("OPENROUTER_API_KEY is not set")

        payload = self.build_payload(prompt)
        last_error: Exception | None = None

        for attempt in range(1, self.retry_count + 1):
            try:
                return await self._send(payload)
            except (httpx.HTTPError, ModelRequestError) as exc:
                last_error = exc
                if attempt == self.retry_count:
                    break
                delay = backoff_delay(attempt, self.retry_delay)
                self._log.warning(
                    "model call failed (attempt %d/%d): %s – retrying in %.1fs",
                    attempt, self.retry_count, exc, delay,
                )
                await self._sleep(delay)

        self._log.error("model call failed after %d attempts: %s", self.retry_count, last_error)
        raise ModelRequestError(f"API request failed: {last_error}") from last_error

    async def _send(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        headers = {"Authorization": f"Bearer {self._api_key}"}
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as http:
            r = await http.post(f"{self.endpoint}/chat/completions", json=payload, headers=headers)

        if r.is_error:
            raise ModelRequestError(
                f"Status: {r.status_code} {r.reason_phrase} | Raw response: {r.text[:500]}"
            )
        if not r.content:
            raise ModelRequestError("API returned empty response")
        try:
            data = r.json()
        except ValueError as exc:
            raise ModelRequestError(f"API returned non-JSON body: {exc}") from exc
        if not data:
            raise ModelRequestError("API returned empty response")
        return data


def get_model_client() -> OpenRouterClient:
    """FastAPI dependency; tests override it with a fake."""
    return OpenRouterClient.from_settings()
