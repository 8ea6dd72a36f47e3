from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings validated via Pydantic.

    Values are loaded from environment variables and/or a .env file.
    """

    # API Keys
    openai_api_key: str = ""

    # Supabase (vector index)
    supabase_url: str = ""
    supabase_key: str = ""

    # Corpus
    corpus_dir: str = "data/knowledge_base"

    # Embeddings / semantic search
    embedding_model: str = "text-embedding-3-small"
    embedding_dimensions: int = 1536
    semantic_match_count: int = 5
    semantic_timeout_seconds: float = 10.0
    index_chunk_size: int = 800

    # Context assembly
    max_context_chars: int = 12000
    sample_seed: int = 0

    # App config
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Gracefully handles missing .env files (e.g. in CI/testing) by falling
    back to environment variables and defaults.
    """
    try:
        return Settings()
    except Exception:
        # If .env is missing or unreadable, build settings from env vars only.
        return Settings(_env_file=None)  # type: ignore[call-arg]


settings = get_settings()
