"""
Scheduler module using APScheduler.
Sweeps expired entries out of the search cache at a fixed interval.
Embedded in the FastAPI app through its lifespan.
"""

from __future__ import annotations

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from weather_geo.cache import SearchCache
from weather_geo.config import get_settings

logger = logging.getLogger(__name__)

_scheduler: AsyncIOScheduler | None = None


def _sweep_job(cache: SearchCache) -> None:
    """Wrapper that catches exceptions so the scheduler doesn't die on failure."""
    try:
        removed = cache.sweep()
        logger.debug("Cache sweep finished: %d removed, %d remaining", removed, len(cache))
    except Exception as e:
        logger.error("Cache sweep failed: %s", e, exc_info=True)


def create_scheduler(cache: SearchCache) -> AsyncIOScheduler:
    """Create and configure the APScheduler instance."""
    global _scheduler
    settings = get_settings().cache

    _scheduler = AsyncIOScheduler()
    _scheduler.add_job(
        _sweep_job,
        trigger=IntervalTrigger(seconds=settings.sweep_seconds),
        args=[cache],
        id="weather_geo_cache_sweep",
        name="Search cache sweep",
        replace_existing=True,
        max_instances=1,
    )

    logger.info("Scheduler configured: cache sweep every %d seconds", settings.sweep_seconds)
    return _scheduler


def start_scheduler(cache: SearchCache) -> None:
    """Start the sweep scheduler (non-blocking). Needs a running event loop."""
    settings = get_settings().cache
    if not settings.enabled:
        logger.info("Cache disabled via config; no sweep scheduled")
        return

    scheduler = create_scheduler(cache)
    scheduler.start()
    logger.info("Scheduler started")


def stop_scheduler() -> None:
    """Stop the scheduler gracefully."""
    global _scheduler
    if _scheduler is not None:
        _scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
        _scheduler = None
