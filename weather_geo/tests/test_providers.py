"""
Tests for the city providers and the shipped datasets.
"""

from __future__ import annotations

from weather_geo.config import DataConfig
from weather_geo.models import CityRecord
from weather_geo.providers import load_international_provider, load_us_provider, split_exact


class TestUSCityProvider:
    def test_tiers(self, us_provider):
        names = [r.name for r in us_provider.search("springfield", 10)]
        assert names == ["Springfield, IL", "Springfield, MO", "Springfield Center, IL"]

    def test_contains_tier_last(self, us_provider):
        names = [r.name for r in us_provider.search("city", 10)]
        assert names == ["Kansas City, MO", "Carson City, NV"]

    def test_limit(self, us_provider):
        assert len(us_provider.search("springfield", 1)) == 1

    def test_records_are_us(self, us_provider):
        (reno,) = us_provider.search("Reno", 5)
        assert reno.country == "US"
        assert reno.state == "NV"
        assert reno.name == "Reno, NV"

    def test_empty_fragment(self, us_provider):
        assert us_provider.search("", 10) == []
        assert us_provider.search("   ", 10) == []

    def test_cities_in_state_capital_first(self, us_provider):
        names = [r.city for r in us_provider.cities_in_state("ky")]
        assert names == ["Frankfort", "London"]

    def test_unknown_state(self, us_provider):
        assert us_provider.cities_in_state("ZZ") is None

    def test_state_capital(self, us_provider):
        assert us_provider.state_capital("tx").name == "Austin, TX"
        assert us_provider.state_capital("D.C.").city == "Washington"

    def test_state_capital_not_first_in_list(self, us_provider):
        assert us_provider.state_capital("IL").city == "Springfield"

    def test_state_capital_unknown(self, us_provider):
        assert us_provider.state_capital("MN") is None
        assert us_provider.state_capital("") is None


class TestInternationalCityProvider:
    def test_substring_on_city_and_name(self, intl_provider):
        assert [r.name for r in intl_provider.filter("london")] == [
            "Londonderry, UK", "London, ON, Canada", "London, UK",
        ]
        assert [r.city for r in intl_provider.filter("canada")] == ["London", "Ottawa"]

    def test_diacritic_insensitive(self, intl_provider):
        assert [r.city for r in intl_provider.filter("sao paulo")] == ["São Paulo"]
        assert [r.city for r in intl_provider.filter("SÃO")] == ["São Paulo"]

    def test_country_filter(self, intl_provider):
        assert [r.name for r in intl_provider.filter("london", country="ca")] == ["London, ON, Canada"]

    def test_country_codes_in_order(self, intl_provider):
        assert intl_provider.country_codes() == ["GB", "CA", "FR", "AU", "JP", "BR"]

    def test_cities_in_country(self, intl_provider):
        assert [r.city for r in intl_provider.cities_in_country("gb")] == ["Londonderry", "London"]
        assert [r.city for r in intl_provider.cities_in_country("CA")] == ["London", "Ottawa"]
        assert intl_provider.cities_in_country("DE") == []
        assert intl_provider.cities_in_country(None) == []


class TestSplitExact:
    def test_partition_keeps_order(self):
        records = [
            CityRecord(city="Londonderry", country="GB", name="Londonderry, UK"),
            CityRecord(city="London", country="GB", name="London, UK"),
            CityRecord(city="New London", state="CT", country="US", name="New London, CT"),
            CityRecord(city="LONDON", state="ON", country="CA", name="London, ON, Canada"),
        ]
        exact, partial = split_exact(records, "london")
        assert [r.name for r in exact] == ["London, UK", "London, ON, Canada"]
        assert [r.name for r in partial] == ["Londonderry, UK", "New London, CT"]


class TestShippedData:
    def test_datasets_load(self):
        data = DataConfig()
        us = load_us_provider(data.us_cities_file)
        intl = load_international_provider(data.international_cities_file)
        assert len(us.states()) == 51
        assert len(us) > 500
        assert len(intl) > 100
        assert "GB" in intl.country_codes()

    def test_springfield_in_several_states(self):
        us = load_us_provider(DataConfig().us_cities_file)
        states = {r.state for r in us.search("Springfield", 20) if r.city == "Springfield"}
        assert {"IL", "MA", "MO", "OH", "OR"} <= states
