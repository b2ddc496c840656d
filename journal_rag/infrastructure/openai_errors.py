"""Map openai SDK exceptions to provider errors."""
import openai

from journal_rag.core.models.provider import ProviderError, ProviderErrorKind

PLACEHOLDER_API_KEYS = {"", "your-openai-api-key", "sk-..."}


def is_placeholder_key(api_key: str | None) -> bool:
    return api_key is None or api_key.strip() in PLACEHOLDER_API_KEYS


def provider_error_from_exception(provider: str, exc: Exception) -> ProviderError:
    """Classify an exception raised by an openai client call."""
    if isinstance(exc, openai.APITimeoutError):
        kind = ProviderErrorKind.TIMEOUT
    elif isinstance(exc, openai.APIConnectionError):
        kind = ProviderErrorKind.UNAVAILABLE
    elif isinstance(exc, openai.AuthenticationError):
        kind = ProviderErrorKind.NOT_CONFIGURED
    elif isinstance(exc, openai.APIStatusError):
        return ProviderError(
            provider, ProviderErrorKind.HTTP_STATUS, f"status {exc.status_code}"
        )
    else:
        kind = ProviderErrorKind.BAD_RESPONSE
    return ProviderError(provider, kind, str(exc)[:200])
