"""
Country metadata provider.

Country rows (name, capital, alternate names) ship in data/countries.jsonl.
ISO-3 and numeric codes, and the English region names used for display and
for alias registration, come from pycountry.

Lookups accept an ISO-2 code, an ISO-3 code, the informal "UK", or a
free-text country name / alternate name. A failed lookup returns None; it
never raises.
"""

from __future__ import annotations

import json
import logging
import re
import unicodedata
from pathlib import Path
from typing import Iterable, Optional

import pycountry

from weather_geo.models import CountryMetadata

logger = logging.getLogger(__name__)

# Informal codes that are not ISO but show up in user input
COUNTRY_CODE_ALIASES: dict[str, str] = {
    "UK": "GB",
}

_CODE_RE = re.compile(r"^[A-Za-z]{2,3}$")


def _name_key(value: str) -> str:
    """Diacritic-free, lowercase, alphanumeric-only form used for name matching."""
    decomposed = unicodedata.normalize("NFD", value)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return re.sub(r"[^a-z0-9]", "", stripped.lower())


def _pycountry_entry(alpha2: str):
    try:
        return pycountry.countries.get(alpha_2=alpha2)
    except (KeyError, LookupError):
        # older pycountry releases raise instead of returning None
        return None


def region_display_name(code: str) -> Optional[str]:
    """English short name for an ISO-2 code, or None when it cannot be resolved."""
    if not isinstance(code, str):
        return None
    code = code.strip().upper()
    if len(code) != 2:
        return None
    entry = _pycountry_entry(code)
    if entry is None:
        return None
    return getattr(entry, "common_name", None) or entry.name


class CountryDirectory:
    """Read-only index of CountryMetadata by code and by name."""

    def __init__(self, rows: Iterable[CountryMetadata]):
        self._by_alpha2: dict[str, CountryMetadata] = {}
        self._by_alpha3: dict[str, CountryMetadata] = {}
        self._by_name: dict[str, CountryMetadata] = {}

        for row in rows:
            code = row.alpha2.upper()
            if code in self._by_alpha2:
                logger.warning("Duplicate country row for %s ignored", code)
                continue
            self._by_alpha2[code] = row
            if row.alpha3:
                self._by_alpha3[row.alpha3.upper()] = row
            for name in (row.name, *row.alt_names):
                key = _name_key(name)
                if key and key not in self._by_name:
                    self._by_name[key] = row

    @classmethod
    def from_jsonl(cls, path: Path) -> "CountryDirectory":
        rows: list[CountryMetadata] = []
        with path.open("r", encoding="utf-8") as f:
            for line in f:
                if not line.strip():
                    continue
                rows.append(cls._enrich(json.loads(line)))
        logger.info("Loaded %d countries from %s", len(rows), path)
        return cls(rows)

    @staticmethod
    def _enrich(row: dict) -> CountryMetadata:
        """Fill alpha3/numeric from pycountry when the row does not carry them."""
        alpha2 = row["alpha2"].upper()
        entry = _pycountry_entry(alpha2)
        return CountryMetadata(
            alpha2=alpha2,
            alpha3=row.get("alpha3") or (entry.alpha_3 if entry else None),
            numeric=row.get("numeric") or (entry.numeric if entry else None),
            name=row["name"],
            capital=row.get("capital") or None,
            alt_names=tuple(row.get("alt_names") or ()),
        )

    def __len__(self) -> int:
        return len(self._by_alpha2)

    def codes(self) -> list[str]:
        return list(self._by_alpha2)

    def get(self, code: str) -> Optional[CountryMetadata]:
        """Resolve an ISO-2 / ISO-3 / informal code."""
        if not isinstance(code, str):
            return None
        normalized = re.sub(r"[^A-Z]", "", code.strip().upper())
        if not normalized:
            return None
        normalized = COUNTRY_CODE_ALIASES.get(normalized, normalized)
        if len(normalized) == 2:
            return self._by_alpha2.get(normalized)
        if len(normalized) == 3:
            return self._by_alpha3.get(normalized)
        return None

    def lookup(self, value: str) -> Optional[CountryMetadata]:
        """Resolve a code, or an exact country name / alternate name."""
        if not isinstance(value, str) or not value.strip():
            return None
        if _CODE_RE.match(value.strip()):
            found = self.get(value)
            if found is not None:
                return found
        key = _name_key(value)
        return self._by_name.get(key) if key else None

    def display_name(self, code: str) -> Optional[str]:
        row = self.get(code)
        return row.name if row else None
