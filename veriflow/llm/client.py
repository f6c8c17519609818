"""Thin async LLM client over LiteLLM.

LiteLLM gives one call signature for OpenAI, Azure OpenAI, Anthropic,
Google and Cerebras models.
"""

from __future__ import annotations

import logging

import litellm

from veriflow.errors import LLMError
from veriflow.llm.detection import get_default_model

logger = logging.getLogger(__name__)


class LLM:
    """Async chat-completion client.

    Examples:
        >>> llm = LLM()  # auto-detected model
        >>> llm = LLM(model="gpt-4o-mini", temperature=0)
        >>> sql = await llm.generate("Write a SELECT over Customers")
    """

    def __init__(
        self,
        model: str | None = None,
        temperature: float = 0.2,
        max_tokens: int | None = None,
        timeout: float | None = 60.0,
    ):
        """Initialize the client.

        Args:
            model: LiteLLM model string. Auto-detected if not provided.
            temperature: Sampling temperature
            max_tokens: Optional completion token cap
            timeout: Request timeout in seconds
        """
        self.model = model or get_default_model()
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout

    async def generate(self, prompt: str, system: str | None = None) -> str:
        """Send one prompt and return the reply text.

        Args:
            prompt: User message
            system: Optional system message

        Returns:
            Completion text

        Raises:
            LLMError: If the provider call fails or returns no content
        """
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        kwargs = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
            "timeout": self.timeout,
        }
        if self.max_tokens is not None:
            kwargs["max_tokens"] = self.max_tokens

        logger.debug("Calling %s (%d chars)", self.model, len(prompt))
        try:
            response = await litellm.acompletion(**kwargs)
        except Exception as e:
            raise LLMError(f"{self.model} call failed: {e}") from e

        content = response.choices[0].message.content
        if not content:
            raise LLMError(f"{self.model} returned an empty response")
        return content


__all__ = ["LLM"]
