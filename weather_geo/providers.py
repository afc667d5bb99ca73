"""
Candidate providers backed by the static city datasets.

USCityProvider:            state-keyed US city lists, tiered exact / prefix / substring search
InternationalCityProvider: flat CityRecord collection with substring filtering

Both are loaded once and never mutated afterwards.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, Optional

from weather_geo.aliases import canonical_key
from weather_geo.models import CityRecord

logger = logging.getLogger(__name__)


STATE_CAPITALS: dict[str, str] = {
    "AL": "Montgomery", "AK": "Juneau", "AZ": "Phoenix", "AR": "Little Rock",
    "CA": "Sacramento", "CO": "Denver", "CT": "Hartford", "DE": "Dover",
    "FL": "Tallahassee", "GA": "Atlanta", "HI": "Honolulu", "ID": "Boise",
    "IL": "Springfield", "IN": "Indianapolis", "IA": "Des Moines", "KS": "Topeka",
    "KY": "Frankfort", "LA": "Baton Rouge", "ME": "Augusta", "MD": "Annapolis",
    "MA": "Boston", "MI": "Lansing", "MN": "St. Paul", "MS": "Jackson",
    "MO": "Jefferson City", "MT": "Helena", "NE": "Lincoln", "NV": "Carson City",
    "NH": "Concord", "NJ": "Trenton", "NM": "Santa Fe", "NY": "Albany",
    "NC": "Raleigh", "ND": "Bismarck", "OH": "Columbus", "OK": "Oklahoma City",
    "OR": "Salem", "PA": "Harrisburg", "RI": "Providence", "SC": "Columbia",
    "SD": "Pierre", "TN": "Nashville", "TX": "Austin", "UT": "Salt Lake City",
    "VT": "Montpelier", "VA": "Richmond", "WA": "Olympia", "WV": "Charleston",
    "WI": "Madison", "WY": "Cheyenne", "DC": "Washington",
}


def _dedupe_by_name(records: Iterable[CityRecord]) -> list[CityRecord]:
    seen: set[str] = set()
    out: list[CityRecord] = []
    for r in records:
        if r.name in seen:
            continue
        seen.add(r.name)
        out.append(r)
    return out


def split_exact(records: Iterable[CityRecord], city_name: str) -> tuple[list[CityRecord], list[CityRecord]]:
    """Partition into (exact, partial) on a case-insensitive city match; order is kept."""
    target = (city_name or "").strip().lower()
    exact: list[CityRecord] = []
    partial: list[CityRecord] = []
    for r in records:
        (exact if r.city.lower() == target else partial).append(r)
    return exact, partial


# ── US ────────────────────────────────────────────────────────────────

class USCityProvider:
    def __init__(self, cities_by_state: dict[str, list[str]]):
        self._by_state: dict[str, list[CityRecord]] = {}
        self._records: list[CityRecord] = []
        for state, cities in cities_by_state.items():
            state = state.upper()
            rows = _dedupe_by_name(
                CityRecord(city=city, state=state, country="US", name=f"{city}, {state}")
                for city in cities
                if city and city.strip()
            )
            self._by_state[state] = rows
            self._records.extend(rows)
        self._lower = [(r.city.lower(), r) for r in self._records]

    def __len__(self) -> int:
        return len(self._records)

    def states(self) -> list[str]:
        return list(self._by_state)

    def state_counts(self) -> dict[str, int]:
        return {state: len(rows) for state, rows in self._by_state.items()}

    def search(self, fragment: str, limit: int = 20) -> list[CityRecord]:
        """Exact matches first, then prefix matches, then substring matches."""
        needle = (fragment or "").strip().lower()
        if not needle or limit <= 0:
            return []

        exact, prefix, contains = [], [], []
        for city, record in self._lower:
            if city == needle:
                exact.append(record)
            elif city.startswith(needle):
                prefix.append(record)
            elif needle in city:
                contains.append(record)

        return _dedupe_by_name(exact + prefix + contains)[:limit]

    def cities_in_state(self, state_code: str) -> Optional[list[CityRecord]]:
        """All cities of a state with its capital first; None for an unknown state."""
        state = (state_code or "").strip().upper()
        rows = self._by_state.get(state)
        if rows is None:
            return None
        capital = STATE_CAPITALS.get(state)
        if not capital:
            return list(rows)
        head = [r for r in rows if r.city == capital]
        tail = [r for r in rows if r.city != capital]
        return head + tail

    def state_capital(self, state_code: str) -> Optional[CityRecord]:
        state = (state_code or "").replace(".", "").strip().upper()
        capital = STATE_CAPITALS.get(state)
        for r in self._by_state.get(state, ()):
            if r.city == capital:
                return r
        return None


# ── International ─────────────────────────────────────────────────────

class InternationalCityProvider:
    def __init__(self, records: Iterable[CityRecord]):
        self._records: list[CityRecord] = list(records)
        # (lower city, lower name, diacritic-free city, diacritic-free name)
        self._keys = [
            (r.city.lower(), r.name.lower(), canonical_key(r.city), canonical_key(r.name))
            for r in self._records
        ]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self):
        return iter(self._records)

    def country_codes(self) -> list[str]:
        codes: list[str] = []
        for r in self._records:
            if r.country not in codes:
                codes.append(r.country)
        return codes

    def cities_in_country(self, country_code: str) -> list[CityRecord]:
        """Every record of one country, in dataset order."""
        code = (country_code or "").strip().upper()
        if not code:
            return []
        return [r for r in self._records if r.country == code]

    def filter(self, fragment: str, country: Optional[str] = None) -> list[CityRecord]:
        needle = (fragment or "").strip().lower()
        if not needle:
            return []
        folded = canonical_key(needle)
        wanted = country.strip().upper() if country else None

        out: list[CityRecord] = []
        for record, keys in zip(self._records, self._keys):
            if wanted and record.country != wanted:
                continue
            city, name, city_folded, name_folded = keys
            if needle in city or needle in name or folded in city_folded or folded in name_folded:
                out.append(record)
        return out


# ── Loaders ───────────────────────────────────────────────────────────

def load_us_provider(path: Path) -> USCityProvider:
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    provider = USCityProvider(data)
    logger.info("Loaded %d US cities across %d states from %s", len(provider), len(provider.states()), path)
    return provider


def load_international_provider(path: Path) -> InternationalCityProvider:
    records: list[CityRecord] = []
    with path.open("r", encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            if not line.strip():
                continue
            row = json.loads(line)
            if not row.get("city") or not row.get("country"):
                logger.warning("Skipping international row %d without city/country", line_no)
                continue
            if not row.get("name"):
                row["name"] = row["city"]
            records.append(CityRecord(**row))
    logger.info("Loaded %d international cities from %s", len(records), path)
    return InternationalCityProvider(records)
