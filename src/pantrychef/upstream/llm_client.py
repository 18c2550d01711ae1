"""Generative text client for Gemini and OpenAI/Ollama-compatible endpoints."""

from __future__ import annotations

import logging
from typing import Any, NoReturn, Optional

import httpx

from pantrychef import metrics
from pantrychef.config import Settings, get_settings
from pantrychef.errors import UpstreamUnavailable

logger = logging.getLogger(__name__)

LLM_TIMEOUT = 30.0
SUPPORTED_PROVIDERS = ("gemini", "openai", "ollama")


class GenerativeTextClient:
    """Send a single prompt and return the raw completion text.

    The reply is not checked against any schema; callers treat it as untrusted.
    """

    def __init__(
        self,
        *,
        base_url: str,
        model: str,
        provider: str = "gemini",
        api_key: Optional[str] = None,
        temperature: float = 0.4,
        max_tokens: int = 2048,
        timeout: float = LLM_TIMEOUT,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._model = model
        self._provider = (provider or "gemini").strip().lower()
        if self._provider not in SUPPORTED_PROVIDERS:
            raise ValueError(f"Unsupported LLM provider {provider!r}")
        self._api_key = api_key
        self._temperature = max(0.0, float(temperature))
        self._max_tokens = max(1, int(max_tokens))
        self._timeout = timeout
        self._client = client

    def generate(self, prompt: str) -> str:
        if self._provider == "gemini":
            return self._generate_gemini(prompt)
        if self._provider == "ollama":
            return self._generate_ollama(prompt)
        return self._generate_openai(prompt)

    def _generate_gemini(self, prompt: str) -> str:
        endpoint = f"{self._base_url}/models/{self._model}:generateContent"
        payload = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self._temperature,
                "maxOutputTokens": self._max_tokens,
            },
        }
        params = {"key": self._api_key} if self._api_key else None
        body = self._post(endpoint, payload, params=params)
        candidate = self._first_object(body.get("candidates"), "Gemini returned no candidates.")
        content = self._object(candidate.get("content"), "Gemini candidate has no content.")
        parts = content.get("parts") or []
        if not isinstance(parts, list):
            self._fail("Gemini content parts are malformed.")
        text = ""
        if parts:
            text = self._object(parts[0], "Gemini content part is malformed.").get("text") or ""
        return self._require_text(text, "Gemini returned an empty response.")

    def _generate_openai(self, prompt: str) -> str:
        endpoint = self._base_url
        if not endpoint.endswith("/chat/completions"):
            endpoint = f"{endpoint}/chat/completions"
        payload = {
            "model": self._model,
            "temperature": self._temperature,
            "max_tokens": self._max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        headers = {"Authorization": f"Bearer {self._api_key}"} if self._api_key else None
        body = self._post(endpoint, payload, headers=headers)
        choice = self._first_object(body.get("choices"), "LLM returned no choices.")
        message = self._object(choice.get("message"), "LLM choice has no message.")
        return self._require_text(message.get("content") or "", "LLM returned an empty response.")

    def _generate_ollama(self, prompt: str) -> str:
        endpoint = self._base_url
        if not endpoint.endswith("/api/chat"):
            endpoint = f"{endpoint}/api/chat"
        payload = {
            "model": self._model,
            "messages": [{"role": "user", "content": prompt}],
            "stream": False,
            "options": {
                "temperature": self._temperature,
                "num_predict": self._max_tokens,
            },
        }
        body = self._post(endpoint, payload)
        message = self._object(body.get("message"), "Ollama response did not include a message.")
        return self._require_text(
            message.get("content") or "", "Ollama response did not include content."
        )

    def _post(
        self,
        endpoint: str,
        payload: dict[str, Any],
        *,
        params: Optional[dict[str, str]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> dict[str, Any]:
        try:
            if self._client is not None:
                response = self._client.post(endpoint, json=payload, params=params, headers=headers)
            else:
                with httpx.Client(timeout=self._timeout) as client:
                    response = client.post(endpoint, json=payload, params=params, headers=headers)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as exc:
            self._fail(f"Generative text request failed with status {exc.response.status_code}")
        except httpx.HTTPError as exc:
            self._fail(f"Generative text request failed: {exc}")
        except ValueError as exc:
            self._fail(f"Generative text endpoint returned a non-JSON body: {exc}")
        if not isinstance(body, dict):
            self._fail("Generative text endpoint returned an unexpected body.")
        return body

    def _object(self, value: Any, message: str) -> dict[str, Any]:
        if not isinstance(value, dict):
            self._fail(message)
        return value

    def _first_object(self, values: Any, message: str) -> dict[str, Any]:
        if not isinstance(values, list) or not values:
            self._fail(message)
        return self._object(values[0], message)

    def _require_text(self, text: str, message: str) -> str:
        if not isinstance(text, str) or not text.strip():
            self._fail(message)
        return text.strip()

    @staticmethod
    def _fail(message: str) -> NoReturn:
        metrics.UPSTREAM_FAILURES.labels(upstream="llm").inc()
        logger.warning("Generative upstream failure: %s", message, extra={"upstream": "llm"})
        raise UpstreamUnavailable("llm", message)


def build_text_generator(settings: Optional[Settings] = None) -> GenerativeTextClient:
    """Create a generative text client from settings."""

    settings = settings or get_settings()
    if settings.llm_provider.strip().lower() == "gemini" and not settings.llm_api_key:
        raise UpstreamUnavailable("llm", "Gemini API key is not configured.")
    return GenerativeTextClient(
        base_url=settings.llm_base_url,
        model=settings.llm_model,
        provider=settings.llm_provider,
        api_key=settings.llm_api_key,
        temperature=settings.llm_temperature,
        max_tokens=settings.llm_max_tokens,
        timeout=settings.http_timeout,
    )


__all__ = ["GenerativeTextClient", "SUPPORTED_PROVIDERS", "build_text_generator"]
