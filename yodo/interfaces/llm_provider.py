"""Abstract base class for LLM service providers.

Defines the contract for the generative-model backend that invents
captions and visual themes.  Implementations wrap OpenAI (or any
OpenAI-compatible API), Anthropic, or a local Ollama server; callers stay
provider-agnostic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementations: OpenAILLMProvider, AnthropicLLMProvider, OllamaLLMProvider
# Located in: yodo/providers/llm/
class ILLMProvider(ABC):
    """Contract for text-completion LLM services."""

    @abstractmethod
    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.7,
        max_tokens: int = 4000,
        json_mode: bool = False,
    ) -> str:
        """Generate a text completion from the model.

        Parameters
        ----------
        system_prompt:
            The system/instruction message that sets the model's behaviour.
        user_prompt:
            The user-facing prompt containing the actual request.
        temperature:
            Sampling temperature.  The enhancement prompts run this high on
            purpose, which is why their output goes through the defensive
            decoder.
        max_tokens:
            Upper bound on the number of tokens in the response.
        json_mode:
            Ask the backend to constrain output to a JSON object where it
            supports that.  Backends without such a mode ignore the flag.

        Returns
        -------
        str
            The model's raw text response.

        Raises
        ------
        yodo.utils.errors.LLMError
            If the API call fails or returns an empty response.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier for this provider, e.g. ``"openai"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider is configured.

        Implementations check that credentials are present without making
        a network call.
        """

    @abstractmethod
    async def validate_credentials(self) -> bool:
        """Perform a lightweight API call to confirm credentials are valid."""
