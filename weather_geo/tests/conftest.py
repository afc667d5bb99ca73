"""
Shared fixtures: a small hand-built world for unit tests, plus the resolver
over the shipped datasets for end-to-end checks.
"""

from __future__ import annotations

import pytest

from weather_geo.aliases import build_alias_tables
from weather_geo.countries import CountryDirectory
from weather_geo.models import CityRecord, CountryMetadata
from weather_geo.providers import InternationalCityProvider, USCityProvider
from weather_geo.resolver import LocationResolver

FIXTURE_REGION_NAMES = {
    "GB": "United Kingdom",
    "CA": "Canada",
    "FR": "France",
    "AU": "Australia",
    "JP": "Japan",
    "BR": "Brazil",
    "US": "United States",
}


def fixture_region_name(code: str):
    return FIXTURE_REGION_NAMES.get(code)


@pytest.fixture(scope="module")
def aliases():
    return build_alias_tables(["GB", "CA", "FR", "AU", "JP", "BR"], region_name=fixture_region_name)


@pytest.fixture(scope="module")
def countries():
    return CountryDirectory([
        CountryMetadata(alpha2="FR", alpha3="FRA", numeric="250", name="France", capital="Paris"),
        CountryMetadata(alpha2="GB", alpha3="GBR", numeric="826", name="United Kingdom", capital="London",
                        alt_names=("Great Britain",)),
        CountryMetadata(alpha2="US", alpha3="USA", numeric="840", name="United States",
                        capital="Washington, D.C."),
        CountryMetadata(alpha2="CA", alpha3="CAN", numeric="124", name="Canada", capital="Ottawa"),
        CountryMetadata(alpha2="JP", alpha3="JPN", numeric="392", name="Japan", capital="Tokyo"),
        CountryMetadata(alpha2="AQ", alpha3="ATA", numeric="010", name="Antarctica", capital=None),
    ])


@pytest.fixture(scope="module")
def us_provider():
    return USCityProvider({
        "IL": ["Chicago", "Springfield", "Springfield Center"],
        "KY": ["London", "Frankfort"],
        "MO": ["Kansas City", "Springfield"],
        "NH": ["Londonderry", "Concord"],
        "NV": ["Reno", "Carson City"],
        "TX": ["Austin", "Paris"],
        "DC": ["Washington"],
    })


@pytest.fixture(scope="module")
def intl_provider():
    return InternationalCityProvider([
        CityRecord(city="Londonderry", country="GB", name="Londonderry, UK"),
        CityRecord(city="London", state="ON", country="CA", name="London, ON, Canada"),
        CityRecord(city="London", country="GB", name="London, UK"),
        CityRecord(city="Paris", country="FR", name="Paris, France"),
        CityRecord(city="Ottawa", state="ON", country="CA", name="Ottawa, ON, Canada"),
        CityRecord(city="Springfield Lakes", state="QLD", country="AU", name="Springfield Lakes, QLD, Australia"),
        CityRecord(city="Tokyo", country="JP", name="Tokyo, Japan"),
        CityRecord(city="São Paulo", country="BR", name="São Paulo, Brazil"),
    ])


@pytest.fixture(scope="module")
def resolver(aliases, countries, us_provider, intl_provider):
    return LocationResolver(aliases, countries, us_provider, intl_provider)


@pytest.fixture(scope="session")
def shipped_resolver():
    return LocationResolver.build()
