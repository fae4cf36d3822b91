"""Factory functions for external clients and devices."""

from functools import lru_cache

from tutor_reports.config import get_settings
from tutor_reports.clients.base_llm_client import BaseLLMClient
from tutor_reports.clients.litellm_client import LiteLLMClient
from tutor_reports.services.enrichment.capture import BaseCaptureDevice, DirectoryCaptureDevice


@lru_cache(maxsize=1)
def get_llm_client() -> BaseLLMClient:
    """
    Create singleton vision-capable LLM client.

    Returns:
        BaseLLMClient instance configured from settings
    """
    settings = get_settings()
    return LiteLLMClient(
        model=settings.vision_model,
        api_key=settings.gemini_api_key or None,
        temperature=settings.vision_temperature,
        max_tokens=settings.vision_max_tokens,
    )


@lru_cache(maxsize=1)
def get_capture_device() -> BaseCaptureDevice:
    """Create singleton capture device."""
    return DirectoryCaptureDevice(get_settings().capture_device_dir)
