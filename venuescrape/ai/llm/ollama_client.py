"""
Ollama LLM client: runs Llama (and other models) locally via Ollama.

Ollama exposes an OpenAI-compatible REST API at http://localhost:11434/v1,
so this client reuses the OpenAI SDK + Instructor with a custom base_url.

Setup:
  1. Install Ollama: https://ollama.com
  2. Pull a model: ollama pull llama3
  3. Ollama starts automatically on port 11434

Structured output:
  Uses instructor.Mode.JSON: more reliable than TOOLS mode for local models.
  JSON mode injects a system instruction to return valid JSON matching the schema.

No API key required: Ollama runs entirely locally.
"""

import logging
from typing import TypeVar

from pydantic import BaseModel

from venuescrape.ai.llm.base_llm_client import BaseLLMClient

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

_DEFAULT_MODEL = "llama3:latest"
_OLLAMA_BASE_URL = "http://localhost:11434/v1"
_OLLAMA_API_KEY = "ollama"  # Ollama requires any non-empty string


class OllamaLLMClient(BaseLLMClient):
    """
    Llama (and other models) via Ollama's OpenAI-compatible API.

    Uses Instructor in JSON mode for structured output extraction.
    Lazy initialization: the client is only created on first use.
    """

    provider = "ollama"

    def __init__(
        self,
        model_name: str = _DEFAULT_MODEL,
        base_url: str = _OLLAMA_BASE_URL,
        temperature: float = 0.1,
        max_tokens: int = 2000,
    ):
        self.model_name = model_name
        self.base_url = base_url
        self.temperature = temperature
        self.max_tokens = max_tokens

        self._instructor_client = None
        self._last_usage: dict[str, int] = self._empty_usage()
        self._available: bool | None = None

    @property
    def is_available(self) -> bool:
        """Check if Ollama is reachable."""
        if self._available is not None:
            return self._available
        self._available = self._check_ollama()
        return self._available

    def _check_ollama(self) -> bool:
        """Ping Ollama's tag listing to verify it's running."""
        import httpx

        root = self.base_url.rstrip("/").removesuffix("/v1")
        try:
            resp = httpx.get(f"{root}/api/tags", timeout=3.0)
        except httpx.HTTPError:
            logger.warning(
                f"OllamaLLMClient: Ollama not reachable at {root}. Start Ollama: https://ollama.com"
            )
            return False

        if resp.status_code != 200:
            return False

        model_names = [m.get("name", "") for m in resp.json().get("models", [])]
        base_model = self.model_name.split(":")[0]
        if not any(base_model in m for m in model_names):
            logger.warning(
                f"OllamaLLMClient: model '{self.model_name}' not found in Ollama. "
                f"Install with: ollama pull {self.model_name}"
            )
        return True

    def _get_instructor_client(self):
        if self._instructor_client is not None:
            return self._instructor_client

        import instructor
        from openai import AsyncOpenAI

        raw = AsyncOpenAI(base_url=self.base_url, api_key=_OLLAMA_API_KEY)
        # JSON mode is more reliable than TOOLS for local models
        self._instructor_client = instructor.from_openai(raw, mode=instructor.Mode.JSON)
        return self._instructor_client

    async def complete_structured(
        self,
        system_prompt: str,
        user_prompt: str,
        output_schema: type[T],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> T:
        """
        Structured output via Instructor JSON mode.

        Injects the Pydantic schema description into the system prompt so the
        model knows exactly what JSON structure to return.
        """
        enriched_system = f"{system_prompt}\n\n{build_schema_hint(output_schema)}"
        return await self._create_with_completion(
            self._get_instructor_client(),
            enriched_system,
            user_prompt,
            output_schema,
            temperature,
            max_tokens,
        )


def build_schema_hint(schema: type[BaseModel]) -> str:
    """
    Build a compact schema description to inject into the system prompt.

    Nested models are flattened one level ("selectors.venue").
    """
    json_schema = schema.model_json_schema()
    defs = json_schema.get("$defs", {})

    lines = ["You MUST respond with a valid JSON object matching this schema:"]

    def _describe(props: dict, required: list, prefix: str = "") -> None:
        for field_name, field_info in props.items():
            ref = field_info.get("$ref")
            if ref:
                nested = defs.get(ref.rsplit("/", 1)[-1], {})
                _describe(
                    nested.get("properties", {}),
                    nested.get("required", []),
                    prefix=f"{prefix}{field_name}.",
                )
                continue

            field_type = field_info.get("type") or "string"
            description = field_info.get("description", "")
            req = "required" if field_name in required else "optional"
            if description:
                lines.append(f'  "{prefix}{field_name}": {field_type}  # {description} ({req})')
            else:
                lines.append(f'  "{prefix}{field_name}": {field_type}  # {req}')

    _describe(json_schema.get("properties", {}), json_schema.get("required", []))
    lines.append("Return ONLY the JSON object, no markdown, no explanation.")
    return "\n".join(lines)
