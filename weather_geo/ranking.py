"""
Prioritization and ranking of merged candidates.

Tier order is fixed:

    [lead] + [country cities] + exact international + exact US + partial US
        + partial international

so a US city outranks a non-prioritized international partial match, while an
exact international match (or one from the explicitly requested country)
outranks every US result. Major ambiguous city names ("london", "paris")
promote their preferred countries when the query carries no country.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence, TypeVar

from weather_geo.aliases import canonical_key

logger = logging.getLogger(__name__)

T = TypeVar("T")

# canonical city key -> preferred ISO-2 codes, highest priority first
MAJOR_CITY_PRIORITIES: dict[str, tuple[str, ...]] = {
    "london": ("GB", "CA"),
    "paris": ("FR",),
    "berlin": ("DE",),
    "amsterdam": ("NL",),
    "madrid": ("ES",),
    "rome": ("IT",),
    "budapest": ("HU",),
    "moscow": ("RU",),
    "manchester": ("GB",),
    "rio": ("BR",),
    "rio de janeiro": ("BR",),
    "sao paulo": ("BR",),
    "tokyo": ("JP",),
    "osaka": ("JP",),
    "beijing": ("CN",),
    "sydney": ("AU",),
    "mumbai": ("IN",),
    "cairo": ("EG",),
}


def _country(entry) -> Optional[str]:
    value = getattr(entry, "country", None)
    return value.upper() if isinstance(value, str) else None


def promote_major_city_matches(
    exact_intl: list[T], partial_intl: list[T], codes: Sequence[str]
) -> tuple[list[T], list[T]]:
    """
    For each preferred code missing from the exact list, move the first partial
    match from that country to the front of the exact list. With several
    promotions the last one promoted ends up first.
    """
    exact, partial = list(exact_intl), list(partial_intl)
    for code in codes:
        if any(_country(e) == code for e in exact):
            continue
        for i, entry in enumerate(partial):
            if _country(entry) == code:
                exact.insert(0, partial.pop(i))
                break
    return exact, partial


def sort_by_priority(entries: Sequence[T], priority: Sequence[str]) -> list[T]:
    """Stable sort: listed countries first in list order, everything else keeps its order."""
    if not priority:
        return list(entries)
    rank = {code: i for i, code in enumerate(priority)}
    fallback = len(priority)
    return sorted(entries, key=lambda e: rank.get(_country(e), fallback))


def dedupe_by_name(entries: Sequence[T]) -> list[T]:
    seen: set[str] = set()
    out: list[T] = []
    for e in entries:
        name = getattr(e, "name", None)
        if name is not None:
            if name in seen:
                continue
            seen.add(name)
        out.append(e)
    return out


def partition_by_country(entries: Sequence[T], country: str) -> list[T]:
    inside = [e for e in entries if _country(e) == country]
    if not inside:
        return list(entries)
    return inside + [e for e in entries if _country(e) != country]


def rank_candidates(
    exact_us: Sequence[T],
    partial_us: Sequence[T],
    exact_intl: Sequence[T],
    partial_intl: Sequence[T],
    city_name: str,
    explicit_country: Optional[str] = None,
    capital: Optional[T] = None,
    country_cities: Sequence[T] = (),
    limit: Optional[int] = None,
) -> list[T]:
    """
    Merge provider results into one ranked list.

    `capital` is the lead entry (a country or US state capital); `country_cities`
    follow it unsorted when the query named a country.
    """
    explicit = explicit_country.upper() if explicit_country else None
    major_codes = MAJOR_CITY_PRIORITIES.get(canonical_key(city_name), ())

    exact_i, partial_i = list(exact_intl), list(partial_intl)
    if explicit is None and major_codes:
        exact_i, partial_i = promote_major_city_matches(exact_i, partial_i, major_codes)

    priority: list[str] = [explicit] if explicit else []
    for code in major_codes:
        if code not in priority:
            priority.append(code)

    merged: list[T] = []
    if capital is not None:
        merged.append(capital)
    merged.extend(country_cities)
    merged.extend(sort_by_priority(exact_i, priority))
    merged.extend(exact_us)
    merged.extend(partial_us)
    merged.extend(sort_by_priority(partial_i, priority))

    ranked = dedupe_by_name(merged)
    if explicit:
        ranked = partition_by_country(ranked, explicit)

    logger.debug(
        "Ranked %d candidates for %r (explicit=%s, priority=%s)",
        len(ranked), city_name, explicit, priority,
    )
    return ranked[:limit] if limit is not None else ranked
