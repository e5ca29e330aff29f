"""Content provider backed by a local Ollama server.

Asks the model for JSON copy matching ``IndustryContent`` and caches one
response per industry. Transport and parse failures are raised as
``ContentProviderError`` so ``fetch_content`` can fall back to default copy.

Typical usage::

    provider = OllamaContentProvider(model="llama3.1:8b")
    result = await fetch_content(provider, "technology", timeout=30.0)
"""

from __future__ import annotations

import asyncio
import json

import httpx
from pydantic import ValidationError

from pwaforge.config import OllamaConfig
from pwaforge.content.industries import normalise_industry
from pwaforge.content.models import IndustryContent
from pwaforge.content.provider import ContentProviderError

SYSTEM_PROMPT = (
    "You write concise, friendly marketing copy for small-business websites. "
    "Respond with a single JSON object and nothing else."
)


class OllamaContentProvider:
    """``ContentProvider`` that sources copy from the Ollama ``/api/generate`` endpoint."""

    name = "ollama"

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        model: str = "llama3.1:8b",
        timeout: int = 60,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self._cache: dict[str, IndustryContent] = {}
        self._lock = asyncio.Lock()

    @classmethod
    def from_config(cls, config: OllamaConfig) -> "OllamaContentProvider":
        return cls(base_url=config.url, model=config.model, timeout=config.timeout)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout, connect=10.0),
        )

    @staticmethod
    def _build_prompt(industry: str) -> str:
        return (
            f"Write website copy for a business in the '{industry}' industry.\n"
            "Use the literal token {business} wherever the business name belongs.\n"
            "Return JSON with exactly these keys:\n"
            '  "hero": {"title": str, "subtitle": str},\n'
            '  "services": [{"title": str, "description": str}] (3 to 5 items),\n'
            '  "testimonials": [{"name": str, "text": str, "rating": 1-5}] (3 items),\n'
            '  "about_text": str,\n'
            '  "cta_texts": [str] (2 items)'
        )

    @staticmethod
    def _parse(text: str) -> IndustryContent:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ContentProviderError(f"Ollama response is not valid JSON: {exc}") from exc
        try:
            return IndustryContent.model_validate(data)
        except ValidationError as exc:
            raise ContentProviderError(
                f"Ollama response does not match the content schema: {exc.error_count()} error(s)"
            ) from exc

    async def _request(self, industry: str) -> IndustryContent:
        payload = {
            "model": self.model,
            "prompt": self._build_prompt(industry),
            "system": SYSTEM_PROMPT,
            "format": "json",
            "stream": False,
        }
        try:
            async with self._client() as client:
                response = await client.post("/api/generate", json=payload)
                response.raise_for_status()
                data = response.json()
        except httpx.ConnectError as exc:
            raise ContentProviderError(
                f"Cannot connect to Ollama at {self.base_url}. Is the server running?"
            ) from exc
        except httpx.TimeoutException as exc:
            raise ContentProviderError(
                f"Request to Ollama timed out after {self.timeout}s."
            ) from exc
        except httpx.HTTPStatusError as exc:
            raise ContentProviderError(
                f"Ollama returned HTTP {exc.response.status_code}: {exc.response.text[:500]}"
            ) from exc
        except ValueError as exc:
            raise ContentProviderError(f"Ollama returned a non-JSON envelope: {exc}") from exc

        return self._parse(data.get("response", ""))

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def get_content_for_industry(self, industry: str) -> IndustryContent:
        """Return copy for ``industry``, requesting it from Ollama at most once.

        Raises:
            ContentProviderError: On transport failure or unusable output.
        """
        key = normalise_industry(industry) or "default"
        async with self._lock:
            cached = self._cache.get(key)
            if cached is None:
                cached = await self._request(key)
                self._cache[key] = cached
        return cached.model_copy(deep=True)

    def clear_cache(self) -> None:
        self._cache.clear()
