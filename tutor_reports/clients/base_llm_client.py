"""Abstract base class for LLM providers."""

from abc import ABC, abstractmethod
from typing import List, Optional
from openai.types.chat import ChatCompletionMessageParam


class BaseLLMClient(ABC):
    """Abstract base class for LLM providers."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return provider name (e.g., 'gemini', 'openai')."""
        pass

    @property
    @abstractmethod
    def model(self) -> str:
        """Return current model name."""
        pass

    @abstractmethod
    async def generate_completion(
        self,
        messages: List[ChatCompletionMessageParam],
        model: Optional[str] = None,
        temperature: float = 0.4,
        max_tokens: int = 2048,
    ) -> str:
        """
        Generate completion from LLM.

        Args:
            messages: List of chat completion messages (text or multimodal parts)
            model: Model to use (overrides default)
            temperature: Sampling temperature (0-1)
            max_tokens: Maximum tokens to generate

        Returns:
            Completion text (may be empty)
        """
        pass

    @abstractmethod
    async def analyze_image(
        self,
        image: bytes,
        prompt: str,
        mime_type: str = "image/jpeg",
        model: Optional[str] = None,
    ) -> str:
        """
        Send one inline image plus an instruction and return the model's text.

        Args:
            image: Encoded image bytes
            prompt: Instruction sent alongside the image
            mime_type: MIME type of the image payload
            model: Model to use (overrides default)

        Returns:
            Completion text (may be empty)
        """
        pass
