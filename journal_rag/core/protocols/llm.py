"""LLM protocol for dependency injection."""
from typing import Optional, Protocol, runtime_checkable

from ..models.provider import CompletionResult


@runtime_checkable
class LLMProtocol(Protocol):
    """Protocol for completion providers."""

    name: str

    async def complete(
        self,
        prompt: str,
        model: Optional[str] = None,
        temperature: float = 0.3,
        max_tokens: int = 1000,
        system_prompt: Optional[str] = None,
    ) -> CompletionResult:
        """Generate a completion for a grounded prompt.

        Args:
            prompt: User prompt with context.
            model: Model name. None or "default" selects the provider default.
            temperature: Sampling temperature.
            max_tokens: Max response tokens.
            system_prompt: System instruction for chat-style providers.

        Returns:
            Completion result. Failures are reported through
            ``CompletionResult.error``, never raised.
        """
        ...
