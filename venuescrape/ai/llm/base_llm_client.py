"""
Abstract structured-completion client interface.

Provider implementations (Ollama, OpenAI) extend BaseLLMClient.
The interface is async-first and returns validated Pydantic outputs;
any failure is raised as StructuredCompletionError.
"""

import logging
from abc import ABC, abstractmethod
from typing import TypeVar

from pydantic import BaseModel

from venuescrape.runtime.results import StructuredCompletionError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class BaseLLMClient(ABC):
    """
    Abstract async LLM client.

    Providers implement complete_structured() for Pydantic-constrained output.
    """

    provider: str = "base"

    @abstractmethod
    async def complete_structured(
        self,
        system_prompt: str,
        user_prompt: str,
        output_schema: type[T],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> T:
        """Structured output completion: returns validated Pydantic model."""
        ...

    def get_token_usage(self) -> dict[str, int]:
        """Returns {'prompt_tokens': N, 'completion_tokens': N, 'total': N} for last call."""
        return self._last_usage if hasattr(self, "_last_usage") else self._empty_usage()

    @property
    def is_available(self) -> bool:
        """Returns True if the client can make calls."""
        return False

    def _empty_usage(self) -> dict[str, int]:
        return {"prompt_tokens": 0, "completion_tokens": 0, "total": 0}

    def _record_usage(self, completion) -> None:
        usage = getattr(completion, "usage", None)
        if usage:
            self._last_usage = {
                "prompt_tokens": usage.prompt_tokens,
                "completion_tokens": usage.completion_tokens,
                "total": usage.total_tokens,
            }

    async def _create_with_completion(
        self,
        instructor_client,
        system_prompt: str,
        user_prompt: str,
        output_schema: type[T],
        temperature: float | None,
        max_tokens: int | None,
    ) -> T:
        """
        Shared Instructor call for OpenAI-compatible providers.

        Subclasses set model_name, temperature and max_tokens.
        """
        try:
            result, completion = await instructor_client.chat.completions.create_with_completion(
                model=self.model_name,
                response_model=output_schema,
                temperature=temperature if temperature is not None else self.temperature,
                max_tokens=max_tokens or self.max_tokens,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
            )
        except Exception as e:
            raise StructuredCompletionError(
                f"{type(self).__name__} structured output failed: {e}"
            ) from e

        self._record_usage(completion)
        return result
