"""
Suggestion payload building and signature-based deduplication.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any, Iterable, Optional

from pydantic import BaseModel

from weather_geo.countries import region_display_name
from weather_geo.models import Suggestion, SuggestionType

logger = logging.getLogger(__name__)


# ISO-2 -> display name, checked before pycountry
COUNTRY_DISPLAY_OVERRIDES: dict[str, str] = {
    "GB": "UK",
    "US": "United States",
    "BR": "Brazil",
    "GR": "Greece",
}

TYPE_PRIORITY: dict[str, int] = {
    SuggestionType.CAPITAL.value: 3,
    SuggestionType.US.value: 2,
    SuggestionType.INTERNATIONAL.value: 1,
}

US_SUFFIX = "USA"

_US_SUFFIX_RE = re.compile(
    r"(?:^|[\s,])(?:usa|u\.s\.a\.?|united states(?: of america)?|us|u\.s\.?)\s*$",
    re.IGNORECASE,
)


def as_suggestion(candidate: Any) -> Suggestion:
    """Coerce a mapping, a CityRecord or a Suggestion into a Suggestion."""
    if isinstance(candidate, Suggestion):
        return candidate
    if isinstance(candidate, BaseModel):
        return Suggestion.model_validate(candidate.model_dump())
    if isinstance(candidate, Mapping):
        return Suggestion.model_validate(dict(candidate))
    raise TypeError(f"Cannot build a suggestion from {type(candidate).__name__}")


def format_country_for_display(code: Optional[str]) -> str:
    if not isinstance(code, str) or not code.strip():
        return ""
    value = code.strip()
    upper = value.upper()
    if upper in COUNTRY_DISPLAY_OVERRIDES:
        return COUNTRY_DISPLAY_OVERRIDES[upper]
    name = region_display_name(upper)
    if name:
        return name
    return upper if len(value) <= 2 else value


def has_us_suffix(name: str) -> bool:
    return bool(_US_SUFFIX_RE.search(name or ""))


def ensure_us_suffix(name: str) -> str:
    """Append ", USA" unless the name already ends in a US spelling."""
    if not name:
        return name
    if has_us_suffix(name):
        return name
    return f"{name.rstrip(' ,')}, {US_SUFFIX}"


# ── Payload ───────────────────────────────────────────────────────────

def build_suggestion_payload(candidate: Any, include_priority: bool = False) -> Suggestion:
    """
    Fill the display fields of a candidate.

    Existing values (name, type, badge, id) are kept; missing ones are derived
    from city/state/country. US entries always get a display name ending in a
    US suffix. `priority` is set only when asked for, otherwise it is dropped.
    """
    s = as_suggestion(candidate)

    raw_country = (s.country or s.country_code or "").strip().upper() or None
    is_us = raw_country == "US"

    base = s.name
    if not base:
        parts = [p for p in (s.city, s.state) if p]
        if raw_country and not is_us and parts:
            parts.append(format_country_for_display(raw_country))
        base = ", ".join(parts)

    if s.type:
        kind = s.type
    elif s.is_capital:
        kind = SuggestionType.CAPITAL.value
    elif is_us:
        kind = SuggestionType.US.value
    else:
        kind = SuggestionType.INTERNATIONAL.value

    badge = s.badge or ("US" if is_us else raw_country)
    display = ensure_us_suffix(base) if is_us else base
    ident = s.id or f"{s.city or s.name or ''}-{s.state or raw_country or 'UNK'}"

    return s.model_copy(
        update={
            "id": ident,
            "country": raw_country,
            "name": base or None,
            "display_name": display or None,
            "search_value": s.search_value or s.city or base or None,
            "type": kind,
            "badge": badge,
            "priority": (1 if is_us else 2) if include_priority else None,
        }
    )


# ── Signatures & dedup ────────────────────────────────────────────────

def compute_signature(candidate: Any) -> Optional[str]:
    """`city|state|country` in lowercase, or the lowercased display name without a city."""
    s = as_suggestion(candidate)
    if s.city:
        country = s.country or s.country_code or s.alpha2 or s.alpha3 or ""
        return f"{s.city}|{s.state or ''}|{country}".lower()
    fallback = s.display_name or s.name
    return fallback.lower() if fallback else None


def type_rank(candidate: Suggestion) -> int:
    return TYPE_PRIORITY.get(candidate.type or "", 0)


def dedupe_suggestions(candidates: Iterable[Any]) -> list[Suggestion]:
    """
    Collapse entries sharing a signature, keeping the higher type rank (ties keep
    the first seen). Unsigned entries are appended after all signed ones.
    """
    signed: dict[str, Suggestion] = {}
    unsigned: list[Suggestion] = []

    for candidate in candidates:
        s = as_suggestion(candidate)
        signature = compute_signature(s)
        if signature is None:
            unsigned.append(s)
            continue
        current = signed.get(signature)
        if current is None:
            signed[signature] = s
        elif type_rank(s) > type_rank(current):
            # replacing keeps the slot of the first occurrence
            signed[signature] = s

    return list(signed.values()) + unsigned
