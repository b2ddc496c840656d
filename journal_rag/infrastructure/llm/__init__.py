"""Completion provider implementations."""
from .ollama_client import OllamaClient
from .openai_client import OpenAIClient

__all__ = ["OllamaClient", "OpenAIClient"]
