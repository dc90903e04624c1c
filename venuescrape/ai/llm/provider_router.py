"""
Provider router: selects the structured-completion client by provider name.

Supported providers:
  "ollama" : Local models (Llama, Qwen, etc.) via Ollama + Instructor (JSON mode)
  "llama"  : Alias for "ollama"
  "openai" : GPT via OpenAI SDK + Instructor (TOOLS mode)
"""

import logging

from venuescrape.ai.llm.base_llm_client import BaseLLMClient

logger = logging.getLogger(__name__)


def get_llm_client(
    provider: str = "ollama",
    model_name: str | None = None,
    temperature: float = 0.1,
    max_tokens: int = 2000,
    **kwargs,
) -> BaseLLMClient:
    """
    Factory: returns the appropriate LLM client for the given provider.

    Args:
        provider: "ollama" | "llama" | "openai"
        model_name: Model identifier. Defaults per provider:
                    ollama → llama3:latest
                    openai → gpt-4o-mini
        temperature: Sampling temperature
        max_tokens: Max response tokens
        **kwargs: Additional provider-specific args (base_url for ollama, api_key for openai)

    Returns:
        Concrete BaseLLMClient instance (may report is_available=False if
        the provider is unreachable or missing an API key)
    """
    provider = provider.lower().strip()

    if provider == "openai":
        from venuescrape.ai.llm.openai_client import OpenAILLMClient

        return OpenAILLMClient(
            model_name=model_name or "gpt-4o-mini",
            api_key=kwargs.get("api_key"),
            temperature=temperature,
            max_tokens=max_tokens,
        )

    if provider not in ("ollama", "llama"):
        logger.warning(
            f"Unknown LLM provider '{provider}'. Supported: ollama, llama, openai. Defaulting to ollama."
        )

    from venuescrape.ai.llm.ollama_client import OllamaLLMClient

    return OllamaLLMClient(
        model_name=model_name or "llama3:latest",
        base_url=kwargs.get("base_url") or "http://localhost:11434/v1",
        temperature=temperature,
        max_tokens=max_tokens,
    )
