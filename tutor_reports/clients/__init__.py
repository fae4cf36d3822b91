"""External API clients."""

from tutor_reports.clients.base_llm_client import BaseLLMClient
from tutor_reports.clients.litellm_client import LiteLLMClient

__all__ = [
    "BaseLLMClient",
    "LiteLLMClient",
]
