"""
City/country extraction from a normalized query.

Trailing country aliases are stripped first (window of up to 4 tokens), then
trailing US state aliases (window of up to 3). "Paris, Texas, US" loses "US"
and then "Texas", leaving "Paris". A query made only of aliases ("Texas",
"New York, NY") keeps its full text as the city and is flagged `alias_only`.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from weather_geo.aliases import AliasTables, canonical_key

logger = logging.getLogger(__name__)

COUNTRY_WINDOW = 4
STATE_WINDOW = 3

# Punctuation that separates tokens. Apostrophes stay inside words (O'Fallon).
_TOKEN_RE = re.compile(r"[^\s\-.,/#!$%^&*;:{}=+_`~()?<>\[\]|\\\"]+")


@dataclass(frozen=True)
class Token:
    text: str
    start: int
    end: int


@dataclass(frozen=True)
class LocationComponents:
    city: str
    state_code: Optional[str] = None
    country_code: Optional[str] = None
    alias_only: bool = False


def tokenize(text: str) -> list[Token]:
    return [Token(m.group(0), m.start(), m.end()) for m in _TOKEN_RE.finditer(text)]


def _suffix_key(tokens: list[Token], size: int) -> str:
    return canonical_key(" ".join(t.text for t in tokens[-size:]))


def _strip_suffixes(
    tokens: list[Token], table, window: int
) -> tuple[list[Token], Optional[str]]:
    """
    Repeatedly drop the longest trailing run of tokens found in `table`.

    Returns the remaining tokens and the code of the first alias stripped.
    """
    first_code: Optional[str] = None
    while True:
        stripped = False
        for size in range(min(window, len(tokens)), 0, -1):
            key = _suffix_key(tokens, size)
            if key in table:
                if first_code is None:
                    first_code = table[key]
                tokens = tokens[:-size]
                stripped = True
                break
        if not stripped:
            return tokens, first_code


def extract_location_components(normalized: str, aliases: AliasTables) -> LocationComponents:
    """Split a normalized query into bare city plus the stripped state/country codes."""
    if not isinstance(normalized, str) or not normalized.strip():
        return LocationComponents(city="")

    text = normalized.strip()
    tokens = tokenize(text)
    if not tokens:
        return LocationComponents(city="")

    tokens, country_code = _strip_suffixes(tokens, aliases.country_map, COUNTRY_WINDOW)
    tokens, state_code = _strip_suffixes(tokens, aliases.state_map, STATE_WINDOW)

    if not tokens:
        return LocationComponents(
            city=text, state_code=state_code, country_code=country_code, alias_only=True
        )

    # Slice the original text so in-name punctuation survives ("St. Louis").
    city = text[: tokens[-1].end].strip(" ,.")
    return LocationComponents(
        city=city or text,
        state_code=state_code,
        country_code=country_code,
    )


def extract_city(normalized: str, aliases: AliasTables) -> str:
    """Bare city name of a normalized query; empty only when it has no word tokens."""
    return extract_location_components(normalized, aliases).city


def detect_explicit_country(text: str, aliases: AliasTables) -> Optional[str]:
    """
    ISO-2 code named by the trailing tokens of `text`, longest match first.

    Works on the query as typed (not the extracted city) so that country
    intent survives even when the extractor used those tokens elsewhere.
    """
    if not isinstance(text, str):
        return None
    tokens = tokenize(text)
    for size in range(min(COUNTRY_WINDOW, len(tokens)), 0, -1):
        code = aliases.country_map.get(_suffix_key(tokens, size))
        if code:
            return code
    return None
