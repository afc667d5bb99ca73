"""
Central configuration loaded from environment variables with sensible defaults.
Nothing here is secret; every knob has a default that works out of the box.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path


@dataclass(frozen=True)
class SearchConfig:
    default_limit: int = int(os.getenv("SEARCH_DEFAULT_LIMIT", "20"))
    max_limit: int = int(os.getenv("SEARCH_MAX_LIMIT", "100"))
    max_query_length: int = int(os.getenv("SEARCH_MAX_QUERY_LENGTH", "100"))
    suggestions_default_limit: int = int(os.getenv("SUGGESTIONS_DEFAULT_LIMIT", "10"))
    suggestions_max_limit: int = int(os.getenv("SUGGESTIONS_MAX_LIMIT", "20"))
    autocomplete_default_limit: int = int(os.getenv("AUTOCOMPLETE_DEFAULT_LIMIT", "8"))
    autocomplete_max_limit: int = int(os.getenv("AUTOCOMPLETE_MAX_LIMIT", "15"))
    state_default_limit: int = int(os.getenv("STATE_SEARCH_DEFAULT_LIMIT", "50"))
    state_max_limit: int = int(os.getenv("STATE_SEARCH_MAX_LIMIT", "200"))


@dataclass(frozen=True)
class CacheConfig:
    enabled: bool = os.getenv("CACHE_ENABLED", "true").lower() == "true"
    ttl_seconds: float = float(os.getenv("CACHE_TTL_SECONDS", "900"))
    max_size: int = int(os.getenv("CACHE_MAX_SIZE", "1000"))
    # Independent expiry sweep, on top of TTL-on-read
    sweep_seconds: int = int(os.getenv("CACHE_SWEEP_SECONDS", "300"))


@dataclass(frozen=True)
class DataConfig:
    data_dir: Path = Path(
        os.getenv("WEATHER_GEO_DATA_DIR", str(Path(__file__).resolve().parent / "data"))
    )

    @property
    def us_cities_file(self) -> Path:
        return self.data_dir / "us_cities.json"

    @property
    def international_cities_file(self) -> Path:
        return self.data_dir / "international_cities.jsonl"

    @property
    def countries_file(self) -> Path:
        return self.data_dir / "countries.jsonl"


@dataclass(frozen=True)
class APIConfig:
    host: str = os.getenv("API_HOST", "0.0.0.0")
    port: int = int(os.getenv("API_PORT", "8000"))


@dataclass(frozen=True)
class Settings:
    search: SearchConfig = field(default_factory=SearchConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    data: DataConfig = field(default_factory=DataConfig)
    api: APIConfig = field(default_factory=APIConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    env: str = os.getenv("APP_ENV", "development")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Singleton settings instance."""
    return Settings()
