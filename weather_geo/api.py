"""
FastAPI service exposing location search.

Endpoints:
  GET /search/cities              - Ranked city candidates for a free-text query
  GET /search/cities/us/{state}   - Cities of one US state, capital first
  GET /search/suggestions         - Short suggestion list for a query
  GET /search/autocomplete        - Autocomplete payloads (with priority)
  GET /search/stats               - Dataset statistics
  GET /health                     - Liveness + cache status
"""

from __future__ import annotations

import logging
import re
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from weather_geo.cache import SearchCache
from weather_geo.config import get_settings
from weather_geo.models import (
    HealthResponse,
    SearchResponse,
    StateCitiesResponse,
    StatsResponse,
)
from weather_geo.resolver import get_resolver
from weather_geo.scheduler import start_scheduler, stop_scheduler

logger = logging.getLogger(__name__)

_settings = get_settings()
_limits = _settings.search

search_cache = SearchCache(
    max_size=_settings.cache.max_size,
    ttl_seconds=_settings.cache.ttl_seconds,
)

_STATE_RE = re.compile(r"^[A-Za-z]{2}$")


# ── Lifespan ──────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: load datasets + start cache sweep. Shutdown: stop the sweep."""
    logger.info("Starting up API server...")
    resolver = get_resolver()
    logger.info(
        "Datasets ready: %d US cities, %d international cities, %d countries",
        len(resolver.us), len(resolver.intl), len(resolver.countries),
    )
    start_scheduler(search_cache)
    yield
    stop_scheduler()
    logger.info("API server shut down.")


# ── App ───────────────────────────────────────────────────────────────

app = FastAPI(
    title="Weather Geo API",
    description="Resolve free-text location queries into ranked city candidates",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # tighten in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Helpers ───────────────────────────────────────────────────────────

def _sanitize_query(q: Optional[str]) -> str:
    """Trim and drop angle brackets."""
    if not q:
        return ""
    return re.sub(r"[<>]", "", q).strip()


def _require_query(q: Optional[str]) -> str:
    query = _sanitize_query(q)
    if not query:
        raise HTTPException(400, "Search query 'q' is required")
    if len(query) > _limits.max_query_length:
        raise HTTPException(400, f"Search query must be {_limits.max_query_length} characters or fewer")
    return query


def _cached(key: str):
    if not _settings.cache.enabled:
        return None
    return search_cache.get(key)


def _store(key: str, data: list[dict]) -> None:
    if _settings.cache.enabled:
        search_cache.set(key, data)


def _resolve(route: str, query: str, limit: int, country: Optional[str] = None,
             include_priority: bool = False) -> SearchResponse:
    key = SearchCache.make_key(route, query, limit, country)
    data = _cached(key)
    if data is not None:
        return SearchResponse(data=data, query=query, count=len(data), limit=limit,
                              country=country, cached=True)

    results = get_resolver().resolve_candidates(
        query, limit, country_filter=country, include_priority=include_priority,
    )
    data = [s.to_payload() for s in results]
    _store(key, data)
    return SearchResponse(data=data, query=query, count=len(data), limit=limit, country=country)


# ══════════════════════════════════════════════════════════════════════
# ENDPOINTS
# ══════════════════════════════════════════════════════════════════════

@app.get("/search/cities", response_model=SearchResponse)
async def search_cities(
    q: Optional[str] = Query(None, description="City, 'City, ST', 'City, Country' or a country code"),
    limit: int = Query(_limits.default_limit, ge=1, le=_limits.max_limit),
    country: Optional[str] = Query(None, min_length=2, max_length=3, description="Restrict to one ISO country"),
):
    """
    Resolve a free-text location query.

    US cities come first unless the query names a country ("London, Canada")
    or is an ambiguous major city ("London", "Paris").
    """
    query = _require_query(q)
    return _resolve("cities", query, limit, country=country.upper() if country else None)


@app.get("/search/cities/us/{state}", response_model=StateCitiesResponse)
async def search_state_cities(
    state: str,
    q: Optional[str] = Query(None, description="Optional substring filter"),
    limit: int = Query(_limits.state_default_limit, ge=1, le=_limits.state_max_limit),
):
    """Cities of one US state, state capital first."""
    if not _STATE_RE.match(state or ""):
        raise HTTPException(400, "State must be a two-letter code")

    query = _sanitize_query(q)
    results = get_resolver().cities_in_state(state.upper(), query=query or None, limit=limit)
    if results is None:
        raise HTTPException(404, f"State '{state.upper()}' not found")

    data = [s.to_payload() for s in results]
    return StateCitiesResponse(data=data, state=state.upper(), query=query, count=len(data), limit=limit)


@app.get("/search/suggestions", response_model=SearchResponse)
async def search_suggestions(
    q: Optional[str] = Query(None),
    limit: int = Query(_limits.suggestions_default_limit, ge=1, le=_limits.suggestions_max_limit),
):
    query = _require_query(q)
    return _resolve("suggestions", query, limit)


@app.get("/search/autocomplete", response_model=SearchResponse)
async def autocomplete(
    q: Optional[str] = Query(None),
    limit: int = Query(_limits.autocomplete_default_limit, ge=1, le=_limits.autocomplete_max_limit),
):
    """Autocomplete payloads; a blank query gives an empty list rather than an error."""
    query = _sanitize_query(q)
    if not query:
        return SearchResponse(data=[], query="", count=0, limit=limit)
    if len(query) > _limits.max_query_length:
        raise HTTPException(400, f"Search query must be {_limits.max_query_length} characters or fewer")
    return _resolve("autocomplete", query, limit, include_priority=True)


@app.get("/search/stats", response_model=StatsResponse)
async def search_stats():
    return StatsResponse(**get_resolver().stats())


@app.get("/health", response_model=HealthResponse)
async def health_check():
    resolver = get_resolver()
    return HealthResponse(
        status="ok",
        cache_size=len(search_cache),
        cache_max_size=search_cache.max_size,
        countries_loaded=len(resolver.countries),
    )
