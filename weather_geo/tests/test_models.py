"""
Tests for Pydantic model validation and the country directory.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from weather_geo.config import DataConfig
from weather_geo.countries import CountryDirectory, region_display_name
from weather_geo.models import CityRecord, StatsResponse, Suggestion


class TestCityRecord:
    def test_country_uppercased(self):
        r = CityRecord(city="Paris", country=" fr ", name="Paris, France")
        assert r.country == "FR"

    def test_frozen(self):
        r = CityRecord(city="Paris", country="FR", name="Paris, France")
        with pytest.raises(ValidationError):
            r.city = "Lyon"

    def test_name_required(self):
        with pytest.raises(ValidationError):
            CityRecord(city="Paris", country="FR")


class TestSuggestion:
    def test_alias_fields(self):
        s = Suggestion.model_validate({"displayName": "Reno, NV, USA", "isCapital": False, "countryCode": "US"})
        assert s.display_name == "Reno, NV, USA"
        assert s.is_capital is False
        assert s.country_code == "US"

    def test_unknown_fields_ignored(self):
        s = Suggestion.model_validate({"city": "Reno", "population": 264165})
        assert s.city == "Reno"

    def test_payload_drops_none(self):
        assert Suggestion(city="Reno").to_payload() == {"city": "Reno"}


class TestStatsResponse:
    def test_camel_case_dump(self):
        stats = StatsResponse(
            total_us_cities=1, total_international_cities=2, total_cities=3,
            us_states_count=1, cities_by_state={"NV": 1}, last_updated="2024-01-01T00:00:00Z",
        )
        dumped = stats.model_dump(by_alias=True)
        assert dumped["totalUSCities"] == 1
        assert dumped["citiesByState"] == {"NV": 1}


class TestCountryDirectory:
    @pytest.fixture(scope="class")
    def directory(self):
        return CountryDirectory.from_jsonl(DataConfig().countries_file)

    def test_lookup_by_codes(self, directory):
        assert directory.get("FR").capital == "Paris"
        assert directory.get("fra").alpha2 == "FR"
        assert directory.get("UK").alpha2 == "GB"
        assert directory.get("U.S.").alpha2 == "US"

    def test_enriched_from_pycountry(self, directory):
        fr = directory.get("FR")
        assert fr.alpha3 == "FRA"
        assert fr.numeric == "250"

    def test_lookup_by_name(self, directory):
        assert directory.lookup("France").alpha2 == "FR"
        assert directory.lookup("  japan ").capital == "Tokyo"

    def test_lookup_misses(self, directory):
        assert directory.get("ZZ") is None
        assert directory.lookup("Atlantis") is None
        assert directory.lookup("") is None
        assert directory.get(None) is None

    def test_display_name(self, directory):
        assert directory.display_name("US") == "United States"


class TestRegionDisplayName:
    def test_known(self):
        assert region_display_name("DE") == "Germany"
        assert region_display_name("gb") == "United Kingdom"

    def test_unknown(self):
        assert region_display_name("XX") is None
        assert region_display_name("GBR") is None
        assert region_display_name(None) is None
