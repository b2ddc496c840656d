
import logging
from typing import Optional

from openai import AsyncOpenAI, APIError

from journal_rag.core.models.provider import (
    CompletionResult,
    ProviderError,
    ProviderErrorKind,
)
from journal_rag.infrastructure.openai_errors import (
    is_placeholder_key,
    provider_error_from_exception,
)

logger = logging.getLogger(__name__)


class OpenAIClient:
    """Chat completion against the OpenAI API."""

    name = "openai"

    def __init__(
        self,
        api_key: str = "",
        model: str = "gpt-4o-mini",
        base_url: str | None = None,
        timeout: float = 60.0,
    ):
        """Initialize OpenAI client.

        Args:
            api_key: API key. Empty or placeholder keys leave the client
                unconfigured; every call then fails without network access.
            model: Default model name.
            base_url: Alternative API URL.
            timeout: Request timeout in seconds.
        """
        self._client = (
            None
            if is_placeholder_key(api_key)
            else AsyncOpenAI(api_key=api_key, base_url=base_url, timeout=timeout, max_retries=1)
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
        if self._client is None:
            return CompletionResult.failure(
                ProviderError(self.name, ProviderErrorKind.NOT_CONFIGURED, "OPENAI_API_KEY not set")
            )

        model = self._model if not model or model == "default" else model
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        try:
            response = await self._client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except APIError as e:
            error = provider_error_from_exception(self.name, e)
            logger.warning(f"[openai] Chat completion failed ({error})")
            return CompletionResult.failure(error)

        if not response.choices or response.choices[0].message.content is None:
            return CompletionResult.failure(
                ProviderError(self.name, ProviderErrorKind.BAD_RESPONSE, "no message content")
            )

        return CompletionResult(text=response.choices[0].message.content.strip(), model=model)
