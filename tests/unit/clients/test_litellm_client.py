"""Tests for LiteLLMClient."""

import base64
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from tutor_reports.clients.litellm_client import (
    LiteLLMClient,
    _provider_from_model,
    build_image_message,
)


@pytest.fixture
def client():
    """Create a LiteLLMClient instance."""
    return LiteLLMClient(model="gemini/gemini-2.5-flash", api_key="test-key")


def _response(content):
    resp = MagicMock()
    resp.choices = [MagicMock()]
    resp.choices[0].message.content = content
    resp.usage = MagicMock(prompt_tokens=10, completion_tokens=5, total_tokens=15)
    return resp


class TestProviderParsing:
    """Tests for provider name extraction from model string."""

    def test_gemini_provider(self, client):
        assert client.provider_name == "gemini"

    def test_model_without_prefix(self):
        assert _provider_from_model("gpt-4o-mini") == "openai"

    def test_model_property(self, client):
        assert client.model == "gemini/gemini-2.5-flash"


class TestBuildImageMessage:
    def test_image_part_precedes_prompt(self):
        message = build_image_message(b"\xff\xd8jpeg", "分析")

        image_part, text_part = message["content"]
        assert message["role"] == "user"
        assert image_part["type"] == "image_url"
        url = image_part["image_url"]["url"]
        assert url.startswith("data:image/jpeg;base64,")
        assert base64.b64decode(url.split(",", 1)[1]) == b"\xff\xd8jpeg"
        assert text_part == {"type": "text", "text": "分析"}


class TestGenerateCompletion:
    """Tests for completion calls."""

    @pytest.mark.asyncio
    async def test_completion_returns_content(self, client):
        with patch("tutor_reports.clients.litellm_client.litellm.acompletion", new_callable=AsyncMock) as mock:
            mock.return_value = _response("Hello there!")
            result = await client.generate_completion([{"role": "user", "content": "hi"}])

        assert result == "Hello there!"
        kwargs = mock.call_args.kwargs
        assert kwargs["model"] == "gemini/gemini-2.5-flash"
        assert kwargs["api_key"] == "test-key"
        assert kwargs["temperature"] == 0.4
        assert kwargs["max_tokens"] == 2048
        assert "timeout" not in kwargs

    @pytest.mark.asyncio
    async def test_none_content_becomes_empty(self, client):
        with patch("tutor_reports.clients.litellm_client.litellm.acompletion", new_callable=AsyncMock) as mock:
            mock.return_value = _response(None)
            assert await client.generate_completion([]) == ""

    @pytest.mark.asyncio
    async def test_api_key_omitted_when_unset(self):
        client = LiteLLMClient(model="openai/gpt-4o-mini")
        with patch("tutor_reports.clients.litellm_client.litellm.acompletion", new_callable=AsyncMock) as mock:
            mock.return_value = _response("ok")
            await client.generate_completion([])

        assert "api_key" not in mock.call_args.kwargs

    @pytest.mark.asyncio
    async def test_errors_propagate_without_retry(self, client):
        with patch("tutor_reports.clients.litellm_client.litellm.acompletion", new_callable=AsyncMock) as mock:
            mock.side_effect = RuntimeError("boom")
            with pytest.raises(RuntimeError):
                await client.generate_completion([])

        assert mock.await_count == 1


class TestAnalyzeImage:
    @pytest.mark.asyncio
    async def test_sends_single_multimodal_message(self, client):
        with patch("tutor_reports.clients.litellm_client.litellm.acompletion", new_callable=AsyncMock) as mock:
            mock.return_value = _response("分析結果")
            result = await client.analyze_image(b"img", "prompt")

        assert result == "分析結果"
        messages = mock.call_args.kwargs["messages"]
        assert len(messages) == 1
        assert messages[0]["content"][1]["text"] == "prompt"
