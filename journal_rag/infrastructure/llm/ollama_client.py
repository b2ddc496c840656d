
import logging
from typing import Optional

from openai import AsyncOpenAI, APIError

from journal_rag.core.models.provider import (
    CompletionResult,
    ProviderError,
    ProviderErrorKind,
)
from journal_rag.infrastructure.openai_errors import provider_error_from_exception

logger = logging.getLogger(__name__)


class OllamaClient:
    """Single-prompt completion against Ollama (OpenAI-compatible API)."""

    name = "ollama"

    def __init__(
        self,
        base_url: str = "http://localhost:11434/v1",
        model: str = "llama3.1:8b",
        timeout: float = 60.0,
    ):
        """Initialize Ollama client.

        Args:
            base_url: Ollama API URL.
            model: Default model name.
            timeout: Request timeout in seconds.
        """
        self._client = AsyncOpenAI(
            base_url=base_url, api_key="ollama", timeout=timeout, max_retries=0
        )
        self._model = model

    async def complete(
        self,
        prompt: str,
        model: Optional[str] = None,
        temperature: float = 0.3,
        max_tokens: int = 1000,
        system_prompt: Optional[str] = None,
    ) -> CompletionResult:
        """Generate a completion from a single prompt.

        A system instruction, if any, is folded into the prompt text.
        """
        model = self._model if not model or model == "default" else model
        if system_prompt:
            prompt = f"System: {system_prompt}\n\n{prompt}"

        try:
            response = await self._client.completions.create(
                model=model,
                prompt=prompt,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except APIError as e:
            error = provider_error_from_exception(self.name, e)
            logger.warning(f"[ollama] Completion failed ({error})")
            return CompletionResult.failure(error)

        if not response.choices or response.choices[0].text is None:
            return CompletionResult.failure(
                ProviderError(self.name, ProviderErrorKind.BAD_RESPONSE, "no choices")
            )

        return CompletionResult(text=response.choices[0].text.strip(), model=model)
