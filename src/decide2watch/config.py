"""Application settings via pydantic-settings. Loads from environment and .env file."""

from __future__ import annotations

from pydantic import model_validator
from pydantic_settings import BaseSettings

# Value shipped in .env.example; treated the same as a missing key.
_PLACEHOLDER_API_KEY = "your_api_key_here"


class Settings(BaseSettings):
    """decide2watch application configuration.

    All values can be overridden via environment variables or .env file.
    """

    # TMDB catalog
    tmdb_api_key: str = ""
    tmdb_base_url: str = "https://api.themoviedb.org/3"
    tmdb_language: str = "en-US"
    tmdb_region: str = "US"  # preferred watch-provider region
    tmdb_timeout_seconds: float = 10.0

    # Environment
    decide2watch_env: str = "development"

    # Loading
    decide2watch_enrich: bool = True
    decide2watch_enrich_batch_size: int = 5

    # Logging
    decide2watch_log_level: str = "INFO"

    model_config = {"env_prefix": "", "env_file": ".env", "extra": "ignore"}

    @model_validator(mode="after")
    def _check_batch_size(self) -> Settings:
        """Batch size below 1 would stall enrichment."""
        if self.decide2watch_enrich_batch_size < 1:
            msg = (
                "DECIDE2WATCH_ENRICH_BATCH_SIZE must be at least 1, "
                f"got {self.decide2watch_enrich_batch_size}"
            )
            raise ValueError(msg)
        return self

    def tmdb_api_key_set(self) -> bool:
        """Return True if a TMDB key is configured and is not the placeholder."""
        return bool(self.tmdb_api_key) and self.tmdb_api_key != _PLACEHOLDER_API_KEY
