"""Unit tests for OllamaContentProvider (pwaforge.content.ollama).

Tests cover:
- Construction and from_config
- Successful generation, request payload, caching
- Transport failures (connect error, timeout, HTTP error) -> ContentProviderError
- Unusable model output -> ContentProviderError
- fetch_content fallback when Ollama is unreachable
"""

from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

import httpx
import pytest

from pwaforge.config import OllamaConfig
from pwaforge.content import (
    ContentProvider,
    ContentProviderError,
    OllamaContentProvider,
    default_content,
    fetch_content,
)


class TestOllamaProviderInit:
    @pytest.mark.unit
    def test_defaults(self):
        provider = OllamaContentProvider()
        assert provider.base_url == "http://localhost:11434"
        assert provider.model == "llama3.1:8b"
        assert provider.name == "ollama"

    @pytest.mark.unit
    def test_trailing_slash_stripped(self):
        assert OllamaContentProvider(base_url="http://host:1234/").base_url == "http://host:1234"

    @pytest.mark.unit
    def test_from_config(self):
        provider = OllamaContentProvider.from_config(
            OllamaConfig(url="http://gpu:11434", model="mistral", timeout=15)
        )
        assert provider.base_url == "http://gpu:11434"
        assert provider.model == "mistral"
        assert provider.timeout == 15

    @pytest.mark.unit
    def test_satisfies_protocol(self):
        assert isinstance(OllamaContentProvider(), ContentProvider)


class TestOllamaGenerate:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_successful_generation(self, mock_http_client, ollama_copy):
        client = mock_http_client(payload={"response": json.dumps(ollama_copy)})
        with patch("httpx.AsyncClient", return_value=client):
            content = await OllamaContentProvider().get_content_for_industry("technology")

        assert content.hero.title == "Welcome to {business}"
        assert [s.title for s in content.services] == ["Consulting", "Support"]
        assert content.personalize("Acme").about_text.startswith("Acme")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_request_payload(self, mock_http_client, ollama_copy):
        client = mock_http_client(payload={"response": json.dumps(ollama_copy)})
        with patch("httpx.AsyncClient", return_value=client):
            await OllamaContentProvider(model="mistral").get_content_for_industry("Cyber Security")

        args, kwargs = client.post.call_args
        assert args[0] == "/api/generate"
        payload = kwargs["json"]
        assert payload["model"] == "mistral"
        assert payload["format"] == "json"
        assert payload["stream"] is False
        assert "cyber-security" in payload["prompt"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_responses_are_cached_per_industry(self, mock_http_client, ollama_copy):
        client = mock_http_client(payload={"response": json.dumps(ollama_copy)})
        provider = OllamaContentProvider()
        with patch("httpx.AsyncClient", return_value=client):
            first = await provider.get_content_for_industry("retail")
            second = await provider.get_content_for_industry("Retail")
        assert client.post.await_count == 1
        assert first == second
        assert first is not second

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_clear_cache(self, mock_http_client, ollama_copy):
        client = mock_http_client(payload={"response": json.dumps(ollama_copy)})
        provider = OllamaContentProvider()
        with patch("httpx.AsyncClient", return_value=client):
            await provider.get_content_for_industry("retail")
            provider.clear_cache()
            await provider.get_content_for_industry("retail")
        assert client.post.await_count == 2


class TestOllamaFailures:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_connect_error(self, mock_http_client):
        client = mock_http_client(side_effect=httpx.ConnectError("Connection refused"))
        with patch("httpx.AsyncClient", return_value=client):
            with pytest.raises(ContentProviderError, match="Cannot connect"):
                await OllamaContentProvider().get_content_for_industry("retail")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_timeout(self, mock_http_client):
        client = mock_http_client(side_effect=httpx.TimeoutException("timed out"))
        with patch("httpx.AsyncClient", return_value=client):
            with pytest.raises(ContentProviderError, match="timed out"):
                await OllamaContentProvider().get_content_for_industry("retail")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_http_error(self, mock_http_client):
        request = httpx.Request("POST", "http://localhost:11434/api/generate")
        response = httpx.Response(500, request=request, text="model not loaded")
        client = mock_http_client(payload={})
        failing = MagicMock()
        failing.raise_for_status = MagicMock(
            side_effect=httpx.HTTPStatusError("boom", request=request, response=response)
        )
        client.post.return_value = failing
        with patch("httpx.AsyncClient", return_value=client):
            with pytest.raises(ContentProviderError, match="HTTP 500"):
                await OllamaContentProvider().get_content_for_industry("retail")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_invalid_json_output(self, mock_http_client):
        client = mock_http_client(payload={"response": "Sure! Here is some copy:"})
        with patch("httpx.AsyncClient", return_value=client):
            with pytest.raises(ContentProviderError, match="not valid JSON"):
                await OllamaContentProvider().get_content_for_industry("retail")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_schema_mismatch(self, mock_http_client):
        bad = {"hero": "just a string", "services": 3}
        client = mock_http_client(payload={"response": json.dumps(bad)})
        with patch("httpx.AsyncClient", return_value=client):
            with pytest.raises(ContentProviderError, match="content schema"):
                await OllamaContentProvider().get_content_for_industry("retail")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_failures_are_not_cached(self, mock_http_client, ollama_copy):
        provider = OllamaContentProvider()
        broken = mock_http_client(side_effect=httpx.ConnectError("down"))
        with patch("httpx.AsyncClient", return_value=broken):
            with pytest.raises(ContentProviderError):
                await provider.get_content_for_industry("retail")

        healthy = mock_http_client(payload={"response": json.dumps(ollama_copy)})
        with patch("httpx.AsyncClient", return_value=healthy):
            content = await provider.get_content_for_industry("retail")
        assert content.is_complete

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_fetch_content_falls_back(self, mock_http_client):
        client = mock_http_client(side_effect=httpx.ConnectError("Connection refused"))
        with patch("httpx.AsyncClient", return_value=client):
            result = await fetch_content(OllamaContentProvider(), "retail")
        assert result.success is False
        assert result.source == "default"
        assert result.content == default_content()
