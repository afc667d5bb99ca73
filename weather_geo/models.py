"""
Pydantic models used across the resolver for validation and serialization.
These are pure data objects, built fresh per request and never persisted.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


# ── Enums ──────────────────────────────────────────────────────────────

class SuggestionType(str, Enum):
    US = "us"
    INTERNATIONAL = "international"
    CAPITAL = "capital"


# ── Dataset records ───────────────────────────────────────────────────

class CityRecord(BaseModel):
    """One row of the US or international city datasets."""
    city: str
    state: Optional[str] = None
    country: str = Field(..., description="ISO-2 country code")
    name: str = Field(..., description="Precomposed display string, e.g. 'Reno, NV'")
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    model_config = {"frozen": True}

    @field_validator("country", mode="before")
    @classmethod
    def upper_country(cls, v):
        return v.strip().upper() if isinstance(v, str) else v


class CountryMetadata(BaseModel):
    """Country row keyed by ISO-2; alpha3/numeric are filled from pycountry."""
    alpha2: str
    alpha3: Optional[str] = None
    numeric: Optional[str] = None
    name: str
    capital: Optional[str] = None
    alt_names: tuple[str, ...] = ()

    model_config = {"frozen": True}


# ── Suggestions ───────────────────────────────────────────────────────

class Suggestion(BaseModel):
    """
    A display-ready candidate. Accepts both snake_case and the camelCase keys
    of the wire payload; `to_payload()` emits camelCase and drops None fields.
    """
    id: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    country_code: Optional[str] = Field(None, alias="countryCode")
    alpha2: Optional[str] = None
    alpha3: Optional[str] = None
    numeric: Optional[str] = None
    country_name: Optional[str] = Field(None, alias="countryName")
    name: Optional[str] = None
    display_name: Optional[str] = Field(None, alias="displayName")
    search_value: Optional[str] = Field(None, alias="searchValue")
    type: Optional[str] = None
    badge: Optional[str] = None
    priority: Optional[int] = None
    is_capital: Optional[bool] = Field(None, alias="isCapital")
    source: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    model_config = {"populate_by_name": True, "extra": "ignore"}

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ── API response models ───────────────────────────────────────────────

class SearchResponse(BaseModel):
    success: bool = True
    data: list[dict[str, Any]] = Field(default_factory=list)
    query: str
    count: int = 0
    limit: int
    country: Optional[str] = None
    cached: bool = False


class StateCitiesResponse(BaseModel):
    success: bool = True
    data: list[dict[str, Any]] = Field(default_factory=list)
    state: str
    query: str = ""
    count: int = 0
    limit: int


class StatsResponse(BaseModel):
    success: bool = True
    total_us_cities: int = Field(..., serialization_alias="totalUSCities")
    total_international_cities: int = Field(..., serialization_alias="totalInternationalCities")
    total_cities: int = Field(..., serialization_alias="totalCities")
    us_states_count: int = Field(..., serialization_alias="usStatesCount")
    cities_by_state: dict[str, int] = Field(default_factory=dict, serialization_alias="citiesByState")
    last_updated: datetime = Field(..., serialization_alias="lastUpdated")


class HealthResponse(BaseModel):
    status: str = "ok"
    cache_size: int = 0
    cache_max_size: int = 0
    countries_loaded: int = 0
