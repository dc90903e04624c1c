from venuescrape.ai.llm.base_llm_client import BaseLLMClient
from venuescrape.ai.llm.ollama_client import OllamaLLMClient
from venuescrape.ai.llm.provider_router import get_llm_client

__all__ = ["BaseLLMClient", "get_llm_client", "OllamaLLMClient"]
