"""
Country and state alias tables.

Built once at startup and then frozen; the resolver receives the tables by
reference, so tests can inject small fixture tables.

Country aliases are registered in a fixed order and the first registration of
a canonical key wins:
  1. ISO-2 codes seen in the international dataset, then the codes of the
     curated table
  2. English region names for those codes (pycountry)
  3. The curated alternate names below
so a real code can never be shadowed by a curated alias.
"""

from __future__ import annotations

import logging
import unicodedata
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Iterable, Mapping, Optional

from weather_geo.countries import region_display_name

logger = logging.getLogger(__name__)


def canonical_key(value) -> str:
    """Unicode-decompose, drop diacritics, lowercase and trim. Non-strings give ''."""
    if not isinstance(value, str):
        return ""
    decomposed = unicodedata.normalize("NFD", value)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.lower().strip()


# ── Curated tables ────────────────────────────────────────────────────

# ISO-2 code -> common alternate names and abbreviations
CURATED_COUNTRY_ALIASES: dict[str, tuple[str, ...]] = {
    "US": ("usa", "u.s.", "u.s", "u s", "u s a", "america", "united states", "united states of america"),
    "GB": ("uk", "u.k.", "u k", "great britain", "britain", "england", "scotland", "wales"),
    "NL": ("netherlands", "the netherlands", "nederland", "holland"),
    "RU": ("russia", "russian federation"),
    "CA": ("canada", "can"),
    "MX": ("mexico",),
    "BR": ("brazil", "brasil"),
    "AR": ("argentina",),
    "CL": ("chile",),
    "CO": ("colombia",),
    "PE": ("peru",),
    "VE": ("venezuela",),
    "FR": ("france",),
    "DE": ("germany", "deutschland", "ger"),
    "IT": ("italy", "italia"),
    "ES": ("spain", "españa", "espana"),
    "PT": ("portugal",),
    "IE": ("ireland",),
    "BE": ("belgium",),
    "CH": ("switzerland", "swiss"),
    "AT": ("austria",),
    "SE": ("sweden",),
    "NO": ("norway",),
    "FI": ("finland",),
    "DK": ("denmark",),
    "HU": ("hungary", "magyarorszag"),
    "PL": ("poland",),
    "CZ": ("czech republic", "czechia"),
    "SK": ("slovakia",),
    "UA": ("ukraine",),
    "RO": ("romania",),
    "BG": ("bulgaria",),
    "HR": ("croatia",),
    "SI": ("slovenia",),
    "RS": ("serbia",),
    "BA": ("bosnia and herzegovina", "bosnia"),
    "MK": ("north macedonia", "macedonia"),
    "GR": ("greece",),
    "TR": ("turkey", "turkiye"),
    "IL": ("israel",),
    "EG": ("egypt",),
    "ZA": ("south africa",),
    "MA": ("morocco",),
    "DZ": ("algeria",),
    "TN": ("tunisia",),
    "NG": ("nigeria",),
    "GH": ("ghana",),
    "KE": ("kenya",),
    "ET": ("ethiopia",),
    "CN": ("china", "prc", "p.r.c"),
    "JP": ("japan", "nippon", "nihon", "jpn"),
    "KR": ("south korea", "republic of korea", "korea republic", "rok"),
    "IN": ("india", "bharat"),
    "PK": ("pakistan",),
    "BD": ("bangladesh",),
    "NP": ("nepal",),
    "LK": ("sri lanka",),
    "VN": ("vietnam", "viet nam"),
    "TH": ("thailand",),
    "SG": ("singapore",),
    "PH": ("philippines",),
    "MY": ("malaysia",),
    "ID": ("indonesia",),
    "KH": ("cambodia",),
    "LA": ("laos", "lao"),
    "MM": ("myanmar", "burma"),
    "AU": ("australia", "aus"),
    "NZ": ("new zealand",),
    "SA": ("saudi arabia", "kingdom of saudi arabia", "ksa"),
    "AE": ("united arab emirates", "uae", "u.a.e"),
    "QA": ("qatar",),
    "KW": ("kuwait",),
    "BH": ("bahrain",),
    "OM": ("oman",),
    "JO": ("jordan",),
    "LB": ("lebanon",),
    "SY": ("syria",),
    "IR": ("iran", "islamic republic of iran"),
    "IQ": ("iraq",),
    "HK": ("hong kong",),
    "MO": ("macao", "macau", "macau sar", "macao special administrative region"),
    "TW": ("taiwan", "republic of china", "roc"),
    "MV": ("maldives", "republic of maldives"),
    "UY": ("uruguay",),
    "PY": ("paraguay",),
    "BO": ("bolivia", "plurinational state of bolivia"),
    "EC": ("ecuador",),
    "CR": ("costa rica",),
    "PA": ("panama",),
    "CU": ("cuba",),
    "DO": ("dominican republic",),
    "JM": ("jamaica",),
    "HT": ("haiti",),
    "CV": ("cape verde", "cabo verde"),
}

US_STATES: dict[str, str] = {
    "AL": "Alabama", "AK": "Alaska", "AZ": "Arizona", "AR": "Arkansas",
    "CA": "California", "CO": "Colorado", "CT": "Connecticut", "DE": "Delaware",
    "FL": "Florida", "GA": "Georgia", "HI": "Hawaii", "ID": "Idaho",
    "IL": "Illinois", "IN": "Indiana", "IA": "Iowa", "KS": "Kansas",
    "KY": "Kentucky", "LA": "Louisiana", "ME": "Maine", "MD": "Maryland",
    "MA": "Massachusetts", "MI": "Michigan", "MN": "Minnesota", "MS": "Mississippi",
    "MO": "Missouri", "MT": "Montana", "NE": "Nebraska", "NV": "Nevada",
    "NH": "New Hampshire", "NJ": "New Jersey", "NM": "New Mexico", "NY": "New York",
    "NC": "North Carolina", "ND": "North Dakota", "OH": "Ohio", "OK": "Oklahoma",
    "OR": "Oregon", "PA": "Pennsylvania", "RI": "Rhode Island", "SC": "South Carolina",
    "SD": "South Dakota", "TN": "Tennessee", "TX": "Texas", "UT": "Utah",
    "VT": "Vermont", "VA": "Virginia", "WA": "Washington", "WV": "West Virginia",
    "WI": "Wisconsin", "WY": "Wyoming",
}

DC_ALIASES: tuple[str, ...] = (
    "dc", "d.c.", "d c", "district of columbia",
    "washington dc", "washington d.c.", "washington d c",
)


# ── Tables ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class AliasTables:
    country_map: Mapping[str, str]
    country_keys: frozenset[str]
    state_map: Mapping[str, str]
    state_keys: frozenset[str]

    def country_for(self, text: str) -> Optional[str]:
        return self.country_map.get(canonical_key(text))

    def state_for(self, text: str) -> Optional[str]:
        return self.state_map.get(canonical_key(text))


def _register(table: dict[str, str], alias: str, code: str) -> None:
    key = canonical_key(alias)
    if key and key not in table:
        table[key] = code


def _ordered_codes(dataset_codes: Iterable[str], curated: Mapping[str, Iterable[str]]) -> list[str]:
    codes: list[str] = []
    for code in [*dataset_codes, *curated]:
        if not isinstance(code, str) or not code.strip():
            continue
        code = code.strip().upper()
        if code not in codes:
            codes.append(code)
    return codes


def build_country_aliases(
    dataset_codes: Iterable[str],
    region_name: Callable[[str], Optional[str]] = region_display_name,
    curated: Mapping[str, Iterable[str]] = CURATED_COUNTRY_ALIASES,
) -> dict[str, str]:
    table: dict[str, str] = {}
    codes = _ordered_codes(dataset_codes, curated)

    for code in codes:
        _register(table, code, code)

    for code in codes:
        try:
            display = region_name(code)
        except (LookupError, ValueError) as e:
            logger.debug("No region name for %s: %s", code, e)
            continue
        if display and display.upper() != code:
            _register(table, display, code)

    for code, aliases in curated.items():
        for alias in aliases:
            _register(table, alias, code.upper())

    return table


def build_state_aliases() -> dict[str, str]:
    table: dict[str, str] = {}
    for code, name in US_STATES.items():
        _register(table, name, code)
        _register(table, code, code)
    for alias in DC_ALIASES:
        _register(table, alias, "DC")
    return table


def build_alias_tables(
    dataset_codes: Iterable[str],
    region_name: Callable[[str], Optional[str]] = region_display_name,
    curated: Mapping[str, Iterable[str]] = CURATED_COUNTRY_ALIASES,
) -> AliasTables:
    """Build the immutable alias tables from dataset codes plus the curated lists."""
    country = build_country_aliases(dataset_codes, region_name=region_name, curated=curated)
    state = build_state_aliases()
    logger.info("Alias tables built: %d country keys, %d state keys", len(country), len(state))
    return AliasTables(
        country_map=MappingProxyType(country),
        country_keys=frozenset(country),
        state_map=MappingProxyType(state),
        state_keys=frozenset(state),
    )
