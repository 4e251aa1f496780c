"""
Ollama LLM provider implementation.

HTTP client for the Ollama generate and tags endpoints.
"""

import time
from typing import Any

import httpx

from shelfwise.config import get_logger, get_settings
from shelfwise.core.exceptions import (
    LLMResponseError,
    LLMUnavailableError,
    ModelNotFoundError,
)
from shelfwise.core.interfaces import HealthStatus, LLMResponse
from shelfwise.infrastructure.llm.base import BaseLLMProvider

logger = get_logger(__name__)


class OllamaProvider(BaseLLMProvider):
    """Ollama HTTP API provider for text generation."""

    provider_name = "ollama"

    def __init__(self) -> None:
        super().__init__()
        settings = get_settings()
        self.host = settings.llm.host.rstrip("/")
        self.model = settings.llm.model_name
        self.timeout = settings.llm.timeout
        self.max_tokens = settings.llm.max_tokens
        self.temperature = settings.llm.temperature

    async def _make_request(
        self,
        endpoint: str,
        payload: dict[str, Any],
        timeout: int | None = None,
    ) -> dict[str, Any]:
        """Make HTTP request to Ollama API."""
        url = f"{self.host}/{endpoint}"
        timeout = timeout or self.timeout

        try:
            async with httpx.AsyncClient(timeout=timeout + 5) as client:
                response = await client.post(url, json=payload, timeout=timeout)
        except httpx.TimeoutException as e:
            raise TimeoutError(str(e)) from e
        except httpx.TransportError as e:
            raise ConnectionError(str(e) or type(e).__name__) from e

        if response.status_code == 404:
            raise ModelNotFoundError(payload.get("model", "unknown"), "ollama")

        if response.status_code != 200:
            error_text = response.text[:200]
            raise LLMUnavailableError("ollama", f"HTTP {response.status_code}: {error_text}")

        return response.json()

    async def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        stop: list[str] | None = None,
    ) -> LLMResponse:
        """Generate text completion."""
        temperature = temperature if temperature is not None else self.temperature
        max_tokens = max_tokens or self.max_tokens

        payload: dict[str, Any] = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "options": {
                "temperature": temperature,
                "num_predict": max_tokens,
            },
        }

        if system_prompt:
            payload["system"] = system_prompt

        if stop:
            payload["options"]["stop"] = stop

        async def _do_generate() -> LLMResponse:
            start_time = time.time()
            result = await self._make_request("api/generate", payload)
            elapsed = time.time() - start_time

            response_text = result.get("response", "")
            if not response_text.strip():
                raise LLMResponseError(
                    f"Empty response (done_reason={result.get('done_reason')})",
                    response_text,
                )

            logger.info(
                "ollama_generate",
                model=self.model,
                prompt_len=len(prompt),
                response_len=len(response_text),
                elapsed_ms=int(elapsed * 1000),
            )

            prompt_tokens = result.get("prompt_eval_count", 0)
            completion_tokens = result.get("eval_count", 0)
            return LLMResponse(
                text=response_text,
                model=self.model,
                done=result.get("done", True),
                done_reason=result.get("done_reason"),
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=prompt_tokens + completion_tokens,
            )

        return await self._with_resilience(_do_generate)

    async def check_health(self) -> HealthStatus:
        """Check that Ollama is reachable and the configured model is installed."""
        start_time = time.time()

        try:
            async with httpx.AsyncClient(timeout=10) as client:
                response = await client.get(f"{self.host}/api/tags")
        except httpx.ConnectError:
            status = HealthStatus(
                available=False,
                provider="ollama",
                error=f"Cannot connect to Ollama at {self.host}. Is 'ollama serve' running?",
            )
            self._update_health_cache(status)
            return status
        except httpx.HTTPError as e:
            status = HealthStatus(available=False, provider="ollama", error=str(e))
            self._update_health_cache(status)
            return status

        if response.status_code != 200:
            status = HealthStatus(
                available=False,
                provider="ollama",
                error=f"HTTP {response.status_code}",
            )
            self._update_health_cache(status)
            return status

        models = [m.get("name", "") for m in response.json().get("models", [])]
        if self.model not in models and not any(self.model in m for m in models):
            status = HealthStatus(
                available=False,
                provider="ollama",
                model=self.model,
                error=f"Model '{self.model}' not installed. Run: ollama pull {self.model}",
            )
            self._update_health_cache(status)
            return status

        status = HealthStatus(
            available=True,
            provider="ollama",
            model=self.model,
            response_time_ms=(time.time() - start_time) * 1000,
        )
        self._update_health_cache(status)
        return status


# Singleton
_ollama_provider: OllamaProvider | None = None


def get_ollama_provider() -> OllamaProvider:
    """Get or create the Ollama provider singleton."""
    global _ollama_provider
    if _ollama_provider is None:
        _ollama_provider = OllamaProvider()
    return _ollama_provider


def reset_ollama_provider() -> None:
    """Drop the singleton so the next call picks up fresh settings."""
    global _ollama_provider
    _ollama_provider = None
