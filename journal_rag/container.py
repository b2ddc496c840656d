import logging
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

from .config.settings import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class Container:
    _factories: dict[type, Callable[[], Any]] = field(default_factory=dict)
    _singletons: dict[type, Any] = field(default_factory=dict)
    _singleton_flags: set[type] = field(default_factory=set)

    def register(
        self, interface: type[T], factory: Callable[[], T], singleton: bool = False
    ) -> None:
        """Register factory for interface.

        Args:
            interface: Interface type.
            factory: Factory function.
            singleton: Whether to cache instance.
        """
        self._factories[interface] = factory
        if singleton:
            self._singleton_flags.add(interface)

    def resolve(self, interface: type[T]) -> T:
        if interface in self._singletons:
            return self._singletons[interface]

        if interface not in self._factories:
            raise KeyError(f"No factory registered for {interface}")

        instance = self._factories[interface]()

        if interface in self._singleton_flags:
            self._singletons[interface] = instance

        return instance

    def reset(self) -> None:
        """Reset singletons (for testing)."""
        self._singletons.clear()


container = Container()


def build_embedder(settings: Settings):
    """Create the embedding provider named by ``settings.embedding_provider``."""
    from .infrastructure.embeddings.mock import MockEmbedder
    from .infrastructure.embeddings.openai_embedder import OllamaEmbedder, OpenAIEmbedder

    provider = settings.embedding_provider.lower()

    if provider == "openai":
        return OpenAIEmbedder(
            api_key=settings.openai_api_key,
            model=settings.openai_embedding_model,
            base_url=settings.openai_base_url,
            timeout=settings.provider_timeout,
        )
    if provider == "local":
        from .infrastructure.embeddings.sentence_transformer import (
            SentenceTransformerEmbedder,
        )

        return SentenceTransformerEmbedder(settings.embedding_model)
    if provider == "mock":
        return MockEmbedder(settings.mock_embedding_dimension)
    if provider != "ollama":
        logger.warning(f"Unknown embedding provider '{provider}', using ollama")

    return OllamaEmbedder(
        base_url=settings.ollama_base_url,
        model=settings.ollama_embedding_model,
        timeout=settings.provider_timeout,
    )


def configure_container(settings: Settings) -> Container:
    """Configure container with all dependencies.

    Args:
        settings: Application settings.

    Returns:
        Configured container.
    """
    from .core.models.provider import Provider
    from .core.protocols.embedder import EmbedderProtocol
    from .core.protocols.entry_store import EntryStoreProtocol
    from .core.services.answer_service import AnswerGenerator
    from .core.services.embedding_service import EmbeddingService
    from .core.services.lexical_search import LexicalSearcher
    from .core.services.rag_service import RagService
    from .core.services.search_service import SearchService
    from .core.services.semantic_search import SemanticSearcher
    from .infrastructure.llm.ollama_client import OllamaClient
    from .infrastructure.llm.openai_client import OpenAIClient
    from .infrastructure.stores.sqlite_store import SQLiteEntryStore

    container.register(
        EntryStoreProtocol,
        lambda: SQLiteEntryStore(settings.database_path),
        singleton=True,
    )

    container.register(EmbedderProtocol, lambda: build_embedder(settings), singleton=True)

    container.register(
        EmbeddingService,
        lambda: EmbeddingService(
            provider=container.resolve(EmbedderProtocol),
            timeout=settings.provider_timeout,
            concurrency=settings.embedding_concurrency,
            synthetic_fallback=settings.embedding_synthetic_fallback,
            fallback_dimension=settings.mock_embedding_dimension,
        ),
        singleton=True,
    )

    container.register(
        SearchService,
        lambda: SearchService(
            lexical=LexicalSearcher(container.resolve(EntryStoreProtocol)),
            semantic=SemanticSearcher(
                container.resolve(EntryStoreProtocol),
                container.resolve(EmbeddingService),
            ),
            rrf_k=settings.rag_rrf_k,
        ),
        singleton=True,
    )

    container.register(
        AnswerGenerator,
        lambda: AnswerGenerator(
            providers={
                Provider.OLLAMA.value: OllamaClient(
                    base_url=settings.ollama_base_url,
                    model=settings.ollama_chat_model,
                    timeout=settings.provider_timeout,
                ),
                Provider.OPENAI.value: OpenAIClient(
                    api_key=settings.openai_api_key,
                    model=settings.openai_chat_model,
                    base_url=settings.openai_base_url,
                    timeout=settings.provider_timeout,
                ),
            },
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
            timeout=settings.provider_timeout,
        ),
        singleton=True,
    )

    container.register(
        RagService,
        lambda: RagService(
            search_service=container.resolve(SearchService),
            answer_generator=container.resolve(AnswerGenerator),
            min_score=settings.rag_min_score,
            default_max_context_entries=settings.rag_max_context_entries,
        ),
        singleton=True,
    )

    logger.info("Container configured")
    return container
