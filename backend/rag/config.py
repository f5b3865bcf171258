"""
Runtime configuration.

All settings come from environment variables; defaults suit a local
Qdrant instance and the Gemini APIs.
"""

import os
from dataclasses import dataclass, field


def _get_float(name: str, default: float) -> float:
    value = os.getenv(name)
    return float(value) if value else default


def _get_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value else default


def _get_list(name: str, default: list[str]) -> list[str]:
    value = os.getenv(name)
    if not value:
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    """Application settings."""

    # Generation
    google_api_key: str | None = None
    google_model: str = "gemini-2.5-flash"
    groq_api_key: str | None = None
    groq_model: str = "llama-3.3-70b-versatile"
    deepseek_api_key: str | None = None
    deepseek_model: str = "deepseek-chat"
    deepseek_base_url: str = "https://api.deepseek.com"
    llm_provider: str | None = None  # Preferred provider, auto-selected if unset
    llm_temperature: float = 0.7
    llm_max_tokens: int = 4096

    # Embeddings
    embedding_provider: str = "google"
    embedding_model: str = "models/gemini-embedding-001"
    embedding_dim: int = 768

    # Vector store
    qdrant_url: str | None = None
    qdrant_host: str = "localhost"
    qdrant_port: int = 6333
    qdrant_api_key: str | None = None
    qdrant_collection: str = "f1_documents"

    # Retrieval
    retrieval_limit: int = 5
    retrieval_min_score: float = 0.7

    # API
    seed_api_key: str | None = None
    scrape_api_key: str | None = None
    cors_origins: list[str] = field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"]
    )

    # Observability
    sentry_dsn: str | None = None
    environment: str = "development"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""
        defaults = cls()
        return cls(
            google_api_key=os.getenv("GOOGLE_API_KEY"),
            google_model=os.getenv("GOOGLE_MODEL", defaults.google_model),
            groq_api_key=os.getenv("GROQ_API_KEY"),
            groq_model=os.getenv("GROQ_MODEL", defaults.groq_model),
            deepseek_api_key=os.getenv("DEEPSEEK_API_KEY"),
            deepseek_model=os.getenv("DEEPSEEK_MODEL", defaults.deepseek_model),
            llm_provider=os.getenv("LLM_PROVIDER") or None,
            llm_temperature=_get_float("LLM_TEMPERATURE", defaults.llm_temperature),
            embedding_provider=os.getenv("EMBEDDING_PROVIDER", defaults.embedding_provider),
            embedding_model=os.getenv("EMBEDDING_MODEL", defaults.embedding_model),
            embedding_dim=_get_int("EMBEDDING_DIM", defaults.embedding_dim),
            qdrant_url=os.getenv("QDRANT_URL") or None,
            qdrant_host=os.getenv("QDRANT_HOST", defaults.qdrant_host),
            qdrant_port=_get_int("QDRANT_PORT", defaults.qdrant_port),
            qdrant_api_key=os.getenv("QDRANT_API_KEY") or None,
            qdrant_collection=os.getenv("QDRANT_COLLECTION", defaults.qdrant_collection),
            retrieval_limit=_get_int("RETRIEVAL_LIMIT", defaults.retrieval_limit),
            retrieval_min_score=_get_float("RETRIEVAL_MIN_SCORE", defaults.retrieval_min_score),
            seed_api_key=os.getenv("SEED_API_KEY") or None,
            scrape_api_key=os.getenv("SCRAPE_API_KEY") or None,
            cors_origins=_get_list("CORS_ORIGINS", defaults.cors_origins),
            sentry_dsn=os.getenv("SENTRY_DSN") or None,
            environment=os.getenv("ENVIRONMENT", defaults.environment),
        )
