"""Settings loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv


def _load_env() -> None:
    """Load .env from project root if it exists."""
    env_path = Path(__file__).resolve().parent.parent / ".env"
    if env_path.exists():
        load_dotenv(env_path)


_load_env()

# Fixed search constants
MIN_QUERY_LENGTH = 2
LOCAL_SUFFICIENT_RESULTS = 20
MAX_LOCAL_RESULTS = 100
QUOTA_WINDOW_SECONDS = 24 * 60 * 60
KEYWORD_MAX_AGE_SECONDS = 6 * 60 * 60
PLACEHOLDER_POSTER = "https://via.placeholder.com/300x450?text=No+Image"

# Storage keys
CACHE_KEY = "movieCache"
API_LIMIT_KEY = "apiLimit"
HISTORY_KEY = "searchHistory"
KEYWORDS_KEY = "trendingKeywords"
KEYWORDS_TIME_KEY = "trendingKeywordsTime"

KNOWN_BACKENDS = ("omdb", "cinelink")


@dataclass(frozen=True)
class Settings:
    # Remote API
    omdb_api_key: str = field(default_factory=lambda: os.environ.get("OMDB_API_KEY", ""))
    omdb_url: str = field(
        default_factory=lambda: os.environ.get("OMDB_URL", "https://www.omdbapi.com/")
    )
    backend_url: str = field(
        default_factory=lambda: os.environ.get(
            "CINELINK_API_URL", "https://cinelink-backend-production.up.railway.app/api"
        )
    )
    search_backend: str = field(default_factory=lambda: os.environ.get("SEARCH_BACKEND", "omdb"))
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30"))
    )

    # Local storage
    storage_dir: str = field(
        default_factory=lambda: os.environ.get("STORAGE_DIR", ".cache/cinelink")
    )

    # Limits
    max_calls_per_day: int = field(
        default_factory=lambda: int(os.environ.get("MAX_CALLS_PER_DAY", "900"))
    )
    max_cache_size: int = field(
        default_factory=lambda: int(os.environ.get("MAX_CACHE_SIZE", "1500"))
    )
    page_size: int = field(default_factory=lambda: int(os.environ.get("PAGE_SIZE", "10")))

    # Suggestions
    debounce_ms: int = field(
        default_factory=lambda: int(os.environ.get("SUGGESTION_DEBOUNCE_MS", "200"))
    )

    log_level: str = field(default_factory=lambda: os.environ.get("LOG_LEVEL", "WARNING"))

    def available_backends(self) -> list[str]:
        """Return list of backends that have valid configuration."""
        backends = []
        if self.omdb_api_key:
            backends.append("omdb")
        backends.append("cinelink")  # Own backend, no key needed
        return backends

    def backend_kwargs(self) -> dict:
        """Constructor kwargs for the selected search backend."""
        if self.search_backend == "omdb":
            return {
                "api_key": self.omdb_api_key,
                "base_url": self.omdb_url,
                "timeout": self.request_timeout,
            }
        return {"base_url": self.backend_url, "timeout": self.request_timeout}

    def validate(self) -> list[str]:
        """Return list of validation errors. Empty list means valid."""
        errors = []
        if self.search_backend not in KNOWN_BACKENDS:
            errors.append(
                f"SEARCH_BACKEND must be one of {', '.join(KNOWN_BACKENDS)},"
                f" got '{self.search_backend}'"
            )
        if self.search_backend == "omdb" and not self.omdb_api_key:
            errors.append("OMDB_API_KEY is required when SEARCH_BACKEND is 'omdb'")
        if self.max_calls_per_day < 1:
            errors.append("MAX_CALLS_PER_DAY must be >= 1")
        if self.max_cache_size < 1:
            errors.append("MAX_CACHE_SIZE must be >= 1")
        if self.page_size < 1:
            errors.append("PAGE_SIZE must be >= 1")
        if self.debounce_ms < 0:
            errors.append("SUGGESTION_DEBOUNCE_MS must be >= 0")
        if self.request_timeout <= 0:
            errors.append("REQUEST_TIMEOUT must be > 0")
        return errors


def get_settings() -> Settings:
    """Create Settings from current environment."""
    return Settings()
