"""Centralized configuration for the question-answering service."""

from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CorpusConfig(BaseSettings):
    """Document corpus location and embedding validity rules."""

    model_config = SettingsConfigDict(env_prefix="CORPUS_", frozen=True)

    documents_dir: str = "./data"
    # Shorter embeddings are treated as absent and regenerated.
    min_embedding_dim: int = Field(default=10, gt=0)


class RetrievalConfig(BaseSettings):
    """Ranking limits applied to every question."""

    model_config = SettingsConfigDict(env_prefix="RETRIEVAL_", frozen=True)

    max_results: int = Field(default=4, gt=0)
    min_score: float = Field(default=0.12, ge=-1.0, lt=1.0)


class EmbeddingConfig(BaseSettings):
    """Embedding provider settings."""

    model_config = SettingsConfigDict(env_prefix="EMBEDDING_", frozen=True)

    provider: Literal["sentence-transformers", "ollama"] = "sentence-transformers"
    model: str = "all-MiniLM-L6-v2"
    ollama_model: str = "nomic-embed-text"

    @model_validator(mode="after")
    def _model_not_blank(self) -> "EmbeddingConfig":
        active = self.ollama_model if self.provider == "ollama" else self.model
        if not active.strip():
            msg = f"an embedding model name is required for provider {self.provider!r}"
            raise ValueError(msg)
        return self


class LLMConfig(BaseSettings):
    """Ollama completion settings."""

    model_config = SettingsConfigDict(env_prefix="LLM_", frozen=True)

    model: str = "gemma3:1b"
    temperature: float = Field(default=0.0, ge=0.0, le=2.0)
    max_tokens: int = Field(default=600, gt=0)


class AppConfig(BaseSettings):
    """Top-level application configuration."""

    model_config = SettingsConfigDict(frozen=True)

    corpus: CorpusConfig = Field(default_factory=CorpusConfig)
    retrieval: RetrievalConfig = Field(default_factory=RetrievalConfig)
    embedding: EmbeddingConfig = Field(default_factory=EmbeddingConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
