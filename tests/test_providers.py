"""
Tests for provider adapters that need no network, and container wiring.

Run with: pytest tests/test_providers.py -v
"""

import asyncio

import httpx
import openai
import pytest

from journal_rag.config.settings import Settings
from journal_rag.container import build_embedder, configure_container, container
from journal_rag.core.models.provider import ProviderErrorKind
from journal_rag.core.protocols.embedder import EmbedderProtocol
from journal_rag.core.protocols.llm import LLMProtocol
from journal_rag.core.services.rag_service import RagService
from journal_rag.core.services.search_service import SearchService
from journal_rag.infrastructure.embeddings.mock import MockEmbedder
from journal_rag.infrastructure.embeddings.openai_embedder import OllamaEmbedder, OpenAIEmbedder
from journal_rag.infrastructure.llm.ollama_client import OllamaClient
from journal_rag.infrastructure.llm.openai_client import OpenAIClient
from journal_rag.infrastructure.openai_errors import (
    is_placeholder_key,
    provider_error_from_exception,
)


@pytest.fixture(autouse=True)
def clean_container():
    container.reset()
    yield
    container.reset()


class TestOpenAIWithoutKey:
    """Unconfigured OpenAI adapters fail fast."""

    @pytest.mark.parametrize("key", ["", "your-openai-api-key", "  "])
    def test_placeholder_keys(self, key):
        assert is_placeholder_key(key)

    def test_real_looking_key(self):
        assert not is_placeholder_key("sk-test-123")

    def test_completion_not_configured(self):
        result = asyncio.run(OpenAIClient(api_key="your-openai-api-key").complete("hi"))
        assert not result.ok
        assert result.error.kind == ProviderErrorKind.NOT_CONFIGURED
        assert result.error.provider == "openai"

    def test_embedding_not_configured(self):
        result = asyncio.run(OpenAIEmbedder(api_key="").embed("hi"))
        assert not result.ok
        assert result.error.kind == ProviderErrorKind.NOT_CONFIGURED


class TestErrorMapping:
    """openai SDK exceptions to provider error kinds."""

    REQUEST = httpx.Request("POST", "http://localhost:11434/v1/completions")

    def _status_error(self, cls, status):
        response = httpx.Response(status, request=self.REQUEST)
        return cls("failed", response=response, body=None)

    def test_timeout(self):
        error = provider_error_from_exception("ollama", openai.APITimeoutError(request=self.REQUEST))
        assert error.kind == ProviderErrorKind.TIMEOUT

    def test_connection(self):
        error = provider_error_from_exception("ollama", openai.APIConnectionError(request=self.REQUEST))
        assert error.kind == ProviderErrorKind.UNAVAILABLE

    def test_authentication(self):
        exc = self._status_error(openai.AuthenticationError, 401)
        assert provider_error_from_exception("openai", exc).kind == ProviderErrorKind.NOT_CONFIGURED

    def test_http_status(self):
        exc = self._status_error(openai.InternalServerError, 500)
        error = provider_error_from_exception("ollama", exc)
        assert error.kind == ProviderErrorKind.HTTP_STATUS
        assert "500" in error.message

    def test_other(self):
        error = provider_error_from_exception("ollama", ValueError("bad json"))
        assert error.kind == ProviderErrorKind.BAD_RESPONSE


class TestAdapters:
    """Adapters satisfy the provider protocols."""

    def test_protocols(self):
        assert isinstance(OllamaClient(), LLMProtocol)
        assert isinstance(OpenAIClient(), LLMProtocol)
        assert isinstance(OllamaEmbedder(), EmbedderProtocol)
        assert isinstance(MockEmbedder(), EmbedderProtocol)


class TestContainer:
    """Dependency wiring."""

    def test_build_mock_embedder(self):
        assert isinstance(build_embedder(Settings(embedding_provider="mock")), MockEmbedder)

    def test_build_openai_embedder(self):
        embedder = build_embedder(Settings(embedding_provider="openai"))
        assert embedder.name == "openai"

    def test_unknown_provider_uses_ollama(self):
        assert isinstance(build_embedder(Settings(embedding_provider="bogus")), OllamaEmbedder)

    def test_resolves_services(self, tmp_path):
        settings = Settings(database_path=str(tmp_path / "journal.db"), embedding_provider="mock")
        configure_container(settings)
        rag = container.resolve(RagService)
        assert rag is container.resolve(RagService)
        assert isinstance(container.resolve(SearchService), SearchService)

    def test_offline_search_on_empty_store(self, tmp_path):
        settings = Settings(database_path=str(tmp_path / "journal.db"), embedding_provider="mock")
        configure_container(settings)
        results = asyncio.run(container.resolve(SearchService).search("anything"))
        assert results == []
