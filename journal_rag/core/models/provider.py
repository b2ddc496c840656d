"""Provider call results.

Embedding and completion adapters never raise for provider-side problems.
They return a result carrying either a value or a ``ProviderError`` so the
services can pick their fallback path explicitly.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np


class Provider(str, Enum):
    """Language model provider."""
    OLLAMA = "ollama"
    OPENAI = "openai"


class ProviderErrorKind(str, Enum):
    NOT_CONFIGURED = "not_configured"  # missing or placeholder credential, unknown provider
    UNAVAILABLE = "unavailable"        # connection refused, DNS, ...
    HTTP_STATUS = "http_status"        # non-success status code
    BAD_RESPONSE = "bad_response"      # unparseable payload
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class ProviderError:
    provider: str
    kind: ProviderErrorKind
    message: str = ""

    def __str__(self) -> str:
        return f"{self.provider}: {self.kind.value} {self.message}".strip()


@dataclass
class EmbeddingResult:
    """Embedding call outcome.

    ``fallback`` marks a synthetic vector substituted for a failed provider
    call; such vectors are not comparable with real ones.
    """
    vector: Optional[np.ndarray] = None
    model: str = ""
    error: Optional[ProviderError] = None
    fallback: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None and self.vector is not None

    @classmethod
    def failure(cls, error: ProviderError) -> "EmbeddingResult":
        return cls(error=error, model=error.provider)


@dataclass
class CompletionResult:
    """Completion call outcome. Empty ``text`` without error is a valid reply."""
    text: str = ""
    model: str = ""
    error: Optional[ProviderError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, error: ProviderError) -> "CompletionResult":
        return cls(error=error, model=error.provider)
