"""
Capital injection: a query that names a country directly ("fr", "JPN",
"France", "uk") yields a synthesized suggestion for that country's capital.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from weather_geo.aliases import AliasTables
from weather_geo.countries import CountryDirectory
from weather_geo.models import CountryMetadata, Suggestion, SuggestionType

logger = logging.getLogger(__name__)

_BARE_CODE_RE = re.compile(r"^[A-Za-z]{2,3}$")


@dataclass(frozen=True)
class CapitalInjection:
    country: CountryMetadata
    suggestion: Suggestion

    @property
    def country_code(self) -> str:
        return self.country.alpha2

    @property
    def search_city(self) -> str:
        """Capital name up to the first comma ("Washington, D.C." -> "Washington")."""
        return self.country.capital.split(",")[0].strip()


def is_bare_code(value: str) -> bool:
    return isinstance(value, str) and bool(_BARE_CODE_RE.match(value.strip()))


def _resolve_country(raw: str, countries: CountryDirectory, aliases: AliasTables) -> Optional[CountryMetadata]:
    if is_bare_code(raw):
        found = countries.get(raw)
        if found is not None:
            return found

    found = countries.lookup(raw)
    if found is not None:
        return found

    code = aliases.country_for(raw)
    return countries.get(code) if code else None


def build_capital_suggestion(country: CountryMetadata) -> Suggestion:
    capital = country.capital
    return Suggestion(
        city=capital,
        state="DC" if country.alpha2 == "US" else None,
        country=country.alpha2,
        alpha2=country.alpha2,
        alpha3=country.alpha3,
        numeric=country.numeric,
        country_name=country.name,
        name=f"{capital}, {country.name}",
        badge=country.alpha2,
        type=SuggestionType.CAPITAL.value,
        is_capital=True,
        source="countryMetadata",
    )


def inject_capital(raw: str, countries: CountryDirectory, aliases: AliasTables) -> Optional[CapitalInjection]:
    """Capital suggestion for a raw query that names a country, else None."""
    if not isinstance(raw, str) or not raw.strip():
        return None

    country = _resolve_country(raw.strip(), countries, aliases)
    if country is None or not (country.capital or "").strip():
        return None

    logger.debug("Capital injection for %r -> %s (%s)", raw, country.capital, country.alpha2)
    return CapitalInjection(country=country, suggestion=build_capital_suggestion(country))


def effective_search_city(extracted: str, injection: Optional[CapitalInjection]) -> str:
    """Search term for the providers: the capital replaces an empty or bare-code city."""
    if injection is None:
        return extracted
    if not extracted or not extracted.strip() or is_bare_code(extracted):
        return injection.search_city
    return extracted
