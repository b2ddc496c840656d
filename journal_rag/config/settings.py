
from pydantic_settings import BaseSettings


class Settings(BaseSettings):

    database_path: str = "./journal.db"

    ollama_base_url: str = "http://localhost:11434/v1"
    ollama_chat_model: str = "llama3.1:8b"
    ollama_embedding_model: str = "nomic-embed-text"

    openai_api_key: str = ""
    openai_base_url: str | None = None
    openai_chat_model: str = "gpt-4o-mini"
    openai_embedding_model: str = "text-embedding-3-small"

    llm_max_tokens: int = 1000
    llm_temperature: float = 0.3
    provider_timeout: float = 30.0

    # Embeddings
    embedding_provider: str = "ollama"  # ollama | openai | local | mock
    embedding_model: str = "intfloat/multilingual-e5-base"
    embedding_concurrency: int = 8
    embedding_synthetic_fallback: bool = True
    mock_embedding_dimension: int = 768

    rag_max_context_entries: int = 5
    rag_min_score: float = 0.3
    rag_rrf_k: float = 60.0

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
