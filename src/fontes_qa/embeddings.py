"""Embedding providers — turn text into fixed-length vectors."""

import logging
from typing import Protocol

import ollama
from chromadb.utils import embedding_functions

from fontes_qa.config import EmbeddingConfig
from fontes_qa.errors import ProviderError

logger = logging.getLogger(__name__)

# Module-level cache to avoid loading the same model repeatedly.
_embedding_fn_cache: dict[str, object] = {}


class EmbeddingProvider(Protocol):
    """Anything that can embed a single text."""

    def embed(self, text: str) -> list[float]: ...


def get_embedding_function(
    model_name: str = "all-MiniLM-L6-v2",
) -> embedding_functions.SentenceTransformerEmbeddingFunction:
    """Return a cached SentenceTransformer embedding function.

    Embedding functions are cached at module level so the model is
    loaded only once per model name, regardless of how many times
    this function is called.

    Args:
        model_name: HuggingFace model identifier for the embedding model.

    Returns:
        A SentenceTransformerEmbeddingFunction instance (cached).
    """
    if model_name not in _embedding_fn_cache:
        _embedding_fn_cache[model_name] = (
            embedding_functions.SentenceTransformerEmbeddingFunction(
                model_name=model_name,
            )
        )
    return _embedding_fn_cache[model_name]  # type: ignore[return-value]


class SentenceTransformerEmbeddings:
    """Local embeddings through a SentenceTransformer model."""

    name = "sentence-transformers"

    def __init__(self, model_name: str = "all-MiniLM-L6-v2") -> None:
        self.model_name = model_name

    def embed(self, text: str) -> list[float]:
        try:
            vectors = get_embedding_function(self.model_name)([text])
        except Exception as exc:
            raise ProviderError(self.name, str(exc) or type(exc).__name__) from exc
        return [float(x) for x in vectors[0]]


class OllamaEmbeddings:
    """Embeddings served by a local Ollama model."""

    name = "ollama"

    def __init__(self, model: str = "nomic-embed-text") -> None:
        self.model = model

    def embed(self, text: str) -> list[float]:
        try:
            response = ollama.embed(model=self.model, input=text)
        except Exception as exc:
            raise ProviderError(self.name, str(exc) or type(exc).__name__) from exc
        return [float(x) for x in response["embeddings"][0]]


def get_embedding_provider(config: EmbeddingConfig | None = None) -> EmbeddingProvider:
    """Build the embedding provider selected in the configuration."""
    cfg = config or EmbeddingConfig()
    if cfg.provider == "ollama":
        logger.info("Using Ollama embeddings (%s)", cfg.ollama_model)
        return OllamaEmbeddings(cfg.ollama_model)
    logger.info("Using SentenceTransformer embeddings (%s)", cfg.model)
    return SentenceTransformerEmbeddings(cfg.model)
