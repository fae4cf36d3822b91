"""LiteLLM-based LLM client with unified multi-provider support.

Routes to any LiteLLM-supported provider via model prefix (e.g.
gemini/gemini-2.5-flash, openai/gpt-4o-mini). Images are sent inline as
base64 data URIs in OpenAI content-part format; LiteLLM translates them for
the target provider.

Calls are made once: no client-side timeout and no retry.
"""

import base64
from typing import Any

import litellm
from openai.types.chat import ChatCompletionMessageParam

from tutor_reports.clients.base_llm_client import BaseLLMClient
from tutor_reports.utils.logger import get_logger, truncate

log = get_logger(__name__)


def _provider_from_model(model: str) -> str:
    """Extract provider prefix from a LiteLLM model string."""
    return model.split("/", 1)[0] if "/" in model else "openai"


def build_image_message(image: bytes, prompt: str, mime_type: str = "image/jpeg") -> dict[str, Any]:
    """Build a user message carrying one inline image followed by the instruction text."""
    encoded = base64.b64encode(image).decode("ascii")
    return {
        "role": "user",
        "content": [
            {"type": "image_url", "image_url": {"url": f"data:{mime_type};base64,{encoded}"}},
            {"type": "text", "text": prompt},
        ],
    }


class LiteLLMClient(BaseLLMClient):
    """Unified LLM client backed by LiteLLM.

    Supports any provider that LiteLLM handles via model prefix routing.
    """

    def __init__(
        self,
        model: str = "gemini/gemini-2.5-flash",
        api_key: str | None = None,
        temperature: float = 0.4,
        max_tokens: int = 2048,
    ):
        self._model = model
        self._api_key = api_key or None
        self.temperature = temperature
        self.max_tokens = max_tokens

    @property
    def provider_name(self) -> str:
        return _provider_from_model(self._model)

    @property
    def model(self) -> str:
        return self._model

    async def generate_completion(
        self,
        messages: list[ChatCompletionMessageParam],
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        model_to_use = model or self._model
        call_kwargs: dict[str, Any] = {
            "model": model_to_use,
            "messages": messages,
            "temperature": self.temperature if temperature is None else temperature,
            "max_tokens": self.max_tokens if max_tokens is None else max_tokens,
        }
        if self._api_key:
            call_kwargs["api_key"] = self._api_key

        log.debug(
            "litellm request",
            model=model_to_use,
            messages=len(messages),
            temperature=call_kwargs["temperature"],
            max_tokens=call_kwargs["max_tokens"],
        )

        response = await litellm.acompletion(**call_kwargs)  # type: ignore[arg-type]

        content = response.choices[0].message.content or ""  # type: ignore[union-attr]
        usage = getattr(response, "usage", None)

        log.debug(
            "litellm response",
            model=model_to_use,
            content=truncate(content, 2000),
            prompt_tokens=usage.prompt_tokens if usage else None,
            completion_tokens=usage.completion_tokens if usage else None,
            total_tokens=usage.total_tokens if usage else None,
        )

        return content

    async def analyze_image(
        self,
        image: bytes,
        prompt: str,
        mime_type: str = "image/jpeg",
        model: str | None = None,
    ) -> str:
        log.debug("litellm image request", mime_type=mime_type, image_bytes=len(image))
        message = build_image_message(image, prompt, mime_type)
        return await self.generate_completion([message], model=model)  # type: ignore[list-item]
