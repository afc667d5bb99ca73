"""
Tests for suggestion payloads, US suffixes and signature dedup.
"""

from __future__ import annotations

import pytest

from weather_geo.models import CityRecord, Suggestion
from weather_geo.suggestions import (
    build_suggestion_payload,
    compute_signature,
    dedupe_suggestions,
    ensure_us_suffix,
    format_country_for_display,
    has_us_suffix,
)


class TestCountryDisplay:
    def test_overrides(self):
        assert format_country_for_display("GB") == "UK"
        assert format_country_for_display("us") == "United States"
        assert format_country_for_display("GR") == "Greece"

    def test_region_names(self):
        assert format_country_for_display("FR") == "France"
        assert format_country_for_display("jp") == "Japan"

    def test_unknown_codes(self):
        assert format_country_for_display("xx") == "XX"
        assert format_country_for_display("Atlantis") == "Atlantis"
        assert format_country_for_display("") == ""


class TestUSSuffix:
    @pytest.mark.parametrize("name", [
        "Reno, NV, USA", "Reno, NV USA", "Reno, U.S.A.", "Reno, United States",
        "Reno, united states of america", "Reno, US", "Reno, U.S.",
    ])
    def test_recognised(self, name):
        assert has_us_suffix(name)
        assert ensure_us_suffix(name) == name

    def test_appended(self):
        assert ensure_us_suffix("Reno, NV") == "Reno, NV, USA"
        assert ensure_us_suffix("Columbus") == "Columbus, USA"


class TestBuildSuggestionPayload:
    def test_reno_gets_suffix(self):
        s = build_suggestion_payload({"city": "Reno", "country": "US"})
        assert has_us_suffix(s.display_name)
        assert s.display_name == "Reno, USA"
        assert s.type == "us"
        assert s.badge == "US"
        assert s.id == "Reno-US"

    def test_existing_suffix_unchanged(self):
        s = build_suggestion_payload({"city": "Reno", "country": "US", "name": "Reno, NV, USA"})
        assert s.display_name == "Reno, NV, USA"

    def test_us_record(self):
        record = CityRecord(city="Reno", state="NV", country="US", name="Reno, NV")
        s = build_suggestion_payload(record)
        assert s.display_name == "Reno, NV, USA"
        assert s.id == "Reno-NV"
        assert s.search_value == "Reno"

    def test_international_composed_name(self):
        s = build_suggestion_payload({"city": "London", "country": "gb"})
        assert s.country == "GB"
        assert s.display_name == "London, UK"
        assert s.type == "international"
        assert s.badge == "GB"

    def test_country_code_field(self):
        s = build_suggestion_payload({"city": "Kyoto", "countryCode": "JP"})
        assert s.country == "JP"
        assert s.display_name == "Kyoto, Japan"

    def test_capital_flag(self):
        s = build_suggestion_payload({"city": "Paris", "country": "FR", "isCapital": True})
        assert s.type == "capital"

    def test_existing_fields_kept(self):
        s = build_suggestion_payload({"id": "x1", "city": "Paris", "country": "FR",
                                      "type": "international", "badge": "EU"})
        assert (s.id, s.type, s.badge) == ("x1", "international", "EU")

    def test_id_without_location(self):
        assert build_suggestion_payload({"city": "Nowhere"}).id == "Nowhere-UNK"

    def test_priority_only_when_requested(self):
        plain = build_suggestion_payload({"city": "Reno", "country": "US"})
        assert "priority" not in plain.to_payload()

        us = build_suggestion_payload({"city": "Reno", "country": "US"}, include_priority=True)
        intl = build_suggestion_payload({"city": "Paris", "country": "FR"}, include_priority=True)
        assert us.to_payload()["priority"] == 1
        assert intl.to_payload()["priority"] == 2

    def test_payload_uses_camel_case(self):
        payload = build_suggestion_payload({"city": "Reno", "country": "US"}).to_payload()
        assert payload["displayName"] == "Reno, USA"
        assert payload["searchValue"] == "Reno"
        assert "display_name" not in payload


class TestSignature:
    def test_city_state_country(self):
        s = Suggestion(city="Paris", state="TX", country="US")
        assert compute_signature(s) == "paris|tx|us"

    def test_country_fallbacks(self):
        assert compute_signature({"city": "Paris", "alpha2": "FR"}) == "paris||fr"

    def test_name_fallback(self):
        assert compute_signature({"displayName": "Somewhere, UK"}) == "somewhere, uk"

    def test_unsigned(self):
        assert compute_signature({}) is None


class TestDedupe:
    def test_keeps_best_type(self):
        intl = Suggestion(city="Paris", country="FR", type="international", name="Paris, France")
        capital = Suggestion(city="Paris", country="FR", type="capital", name="Paris (capital)")
        out = dedupe_suggestions([intl, capital])
        assert out == [capital]

    def test_us_beats_international(self):
        a = Suggestion(city="Reno", state="NV", country="US", type="international")
        b = Suggestion(city="Reno", state="NV", country="US", type="us")
        assert dedupe_suggestions([a, b]) == [b]

    def test_tie_keeps_first(self):
        a = Suggestion(city="Reno", country="US", type="us", id="a")
        b = Suggestion(city="reno", country="us", type="us", id="b")
        assert [s.id for s in dedupe_suggestions([a, b])] == ["a"]

    def test_order_and_unsigned_last(self):
        unsigned = Suggestion(id="u")
        a = Suggestion(city="A", country="US", type="us", id="a")
        b = Suggestion(city="B", country="FR", type="international", id="b")
        a_capital = Suggestion(city="A", country="US", type="capital", id="a2")
        out = dedupe_suggestions([unsigned, a, b, a_capital])
        assert [s.id for s in out] == ["a2", "b", "u"]
