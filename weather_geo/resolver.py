"""
Location query resolution.

Pipeline for one query:

  raw text
    → normalize_query
    → extract bare city (state/country suffixes stripped)
    → lead entry: country capital, or the capital of a state-only query
    → explicit country: caller filter, named country, US for a state, trailing alias
    → cities of a named country
    → US + international providers
    → exact/partial split → rank_candidates
    → suggestion payloads → signature dedup → limit

Everything here is synchronous and side-effect free; the alias tables,
country directory and providers are built once and shared read-only.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path
from typing import Optional

from weather_geo.aliases import AliasTables, build_alias_tables
from weather_geo.capitals import effective_search_city, inject_capital
from weather_geo.config import DataConfig, get_settings
from weather_geo.countries import COUNTRY_CODE_ALIASES, CountryDirectory
from weather_geo.extract import (
    LocationComponents,
    detect_explicit_country,
    extract_city,
    extract_location_components,
)
from weather_geo.models import CityRecord, Suggestion
from weather_geo.normalize import normalize_query
from weather_geo.providers import (
    InternationalCityProvider,
    USCityProvider,
    load_international_provider,
    load_us_provider,
    split_exact,
)
from weather_geo.ranking import rank_candidates
from weather_geo.suggestions import build_suggestion_payload, dedupe_suggestions

logger = logging.getLogger(__name__)


def _normalize_country_filter(country: Optional[str]) -> Optional[str]:
    if not isinstance(country, str) or not country.strip():
        return None
    code = country.strip().upper()
    return COUNTRY_CODE_ALIASES.get(code, code)


class LocationResolver:
    def __init__(
        self,
        aliases: AliasTables,
        countries: CountryDirectory,
        us_provider: USCityProvider,
        intl_provider: InternationalCityProvider,
    ):
        self.aliases = aliases
        self.countries = countries
        self.us = us_provider
        self.intl = intl_provider

    @classmethod
    def build(cls, data_dir: Optional[Path] = None) -> "LocationResolver":
        """Load the shipped datasets (or the ones under `data_dir`) and wire a resolver."""
        data = DataConfig(data_dir=Path(data_dir)) if data_dir else get_settings().data
        countries = CountryDirectory.from_jsonl(data.countries_file)
        us_provider = load_us_provider(data.us_cities_file)
        intl_provider = load_international_provider(data.international_cities_file)
        aliases = build_alias_tables(intl_provider.country_codes())
        return cls(aliases, countries, us_provider, intl_provider)

    # ── Core operations ───────────────────────────────────────────────

    def normalize(self, text) -> str:
        return normalize_query(text)

    def extract_city(self, normalized: str) -> str:
        return extract_city(normalized, self.aliases)

    def parse(self, text: str) -> LocationComponents:
        return extract_location_components(normalize_query(text), self.aliases)

    def detect_explicit_country(self, text: str) -> Optional[str]:
        return detect_explicit_country(text, self.aliases)

    def resolve_candidates(
        self,
        raw_query,
        limit: int = 20,
        country_filter: Optional[str] = None,
        include_priority: bool = False,
    ) -> list[Suggestion]:
        if not isinstance(raw_query, str) or not raw_query.strip() or limit <= 0:
            return []

        normalized = normalize_query(raw_query)
        components = extract_location_components(normalized, self.aliases)
        if not components.city:
            return []

        filter_code = _normalize_country_filter(country_filter)
        injection = inject_capital(raw_query, self.countries, self.aliases)
        if injection is not None and filter_code and injection.country_code != filter_code:
            injection = None

        lead = injection.suggestion if injection else None
        city = effective_search_city(components.city, injection)
        state_capital = None if injection else self._state_capital_for(components, filter_code)
        if state_capital is not None:
            lead = state_capital
            city = state_capital.city

        if filter_code:
            explicit = filter_code
        elif injection is not None:
            explicit = injection.country_code
        elif state_capital is not None:
            explicit = "US"
        else:
            explicit = detect_explicit_country(normalized, self.aliases)

        country_cities = []
        named_country = self._named_country(components, injection)
        if named_country and filter_code in (None, named_country):
            country_cities = self.intl.cities_in_country(named_country)

        us_records, intl_records = [], []
        if filter_code is None or filter_code == "US":
            us_records = self.us.search(city, limit)
        if filter_code != "US":
            intl_records = self.intl.filter(city, country=filter_code)

        exact_us, partial_us = split_exact(us_records, city)
        exact_intl, partial_intl = split_exact(intl_records, city)

        ranked = rank_candidates(
            exact_us,
            partial_us,
            exact_intl,
            partial_intl,
            city_name=city,
            explicit_country=explicit,
            capital=lead,
            country_cities=country_cities,
        )
        payloads = [build_suggestion_payload(c, include_priority=include_priority) for c in ranked]
        results = dedupe_suggestions(payloads)[:limit]

        logger.debug(
            "Resolved %r -> city=%r explicit=%s: %d US, %d intl, %d results",
            raw_query, city, explicit, len(us_records), len(intl_records), len(results),
        )
        return results

    def _state_capital_for(
        self, components: LocationComponents, filter_code: Optional[str]
    ) -> Optional[CityRecord]:
        """Capital of the state a query names and nothing else ("Texas", "NY, USA")."""
        if not components.alias_only or not components.state_code:
            return None
        if components.country_code not in (None, "US") or filter_code not in (None, "US"):
            return None
        return self.us.state_capital(components.state_code)

    @staticmethod
    def _named_country(components: LocationComponents, injection) -> Optional[str]:
        if injection is not None:
            return injection.country_code
        if components.alias_only and components.country_code and not components.state_code:
            return components.country_code
        return None

    # ── Extras ────────────────────────────────────────────────────────

    def autocomplete(self, query, limit: int = 8) -> list[Suggestion]:
        return self.resolve_candidates(query, limit, include_priority=True)

    def cities_in_state(
        self, state: str, query: Optional[str] = None, limit: int = 50
    ) -> Optional[list[Suggestion]]:
        """Cities of one US state, capital first, optionally narrowed by a substring."""
        records = self.us.cities_in_state(state)
        if records is None:
            return None
        needle = (query or "").strip().lower()
        if needle:
            records = [r for r in records if needle in r.city.lower()]
        return [build_suggestion_payload(r) for r in records[:limit]]

    def stats(self) -> dict:
        by_state = self.us.state_counts()
        return {
            "total_us_cities": len(self.us),
            "total_international_cities": len(self.intl),
            "total_cities": len(self.us) + len(self.intl),
            "us_states_count": len(by_state),
            "cities_by_state": by_state,
            "last_updated": datetime.now(timezone.utc),
        }


@lru_cache(maxsize=1)
def get_resolver() -> LocationResolver:
    """Process-wide resolver over the configured datasets."""
    return LocationResolver.build()
