"""LLM provider adapters.

Three concrete implementations of ILLMProvider (yodo/interfaces/llm_provider.py):
    - OpenAILLMProvider    -- gpt-4o-mini (also any OpenAI-compatible API)
    - AnthropicLLMProvider -- Claude Sonnet
    - OllamaLLMProvider    -- local models via an Ollama server

main.py picks the first configured one, in that order.
"""

from yodo.providers.llm.anthropic_provider import AnthropicLLMProvider
from yodo.providers.llm.ollama_provider import OllamaLLMProvider
from yodo.providers.llm.openai_provider import OpenAILLMProvider

__all__ = ["OpenAILLMProvider", "AnthropicLLMProvider", "OllamaLLMProvider"]
