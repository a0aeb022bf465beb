"""Typed views of the Open-Meteo geocoding and forecast payloads.

Missing arrays and fields fall back to empty/None defaults so that a partial
response renders with placeholders instead of failing validation.
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

Units = Literal["metric", "imperial"]
UNIT_SYSTEMS: tuple[str, ...] = ("metric", "imperial")

# Query parameters sent to the forecast endpoint for each unit system.
UNIT_PARAMS: Dict[str, Dict[str, str]] = {
    "metric": {
        "temperature_unit": "celsius",
        "windspeed_unit": "kmh",
        "precipitation_unit": "mm",
    },
    "imperial": {
        "temperature_unit": "fahrenheit",
        "windspeed_unit": "mph",
        "precipitation_unit": "inch",
    },
}

UNIT_LABELS: Dict[str, Dict[str, str]] = {
    "metric": {"temp": "°C", "wind": "km/h", "precip": "mm"},
    "imperial": {"temp": "°F", "wind": "mph", "precip": "inch"},
}


def check_units(units: str) -> str:
    if units not in UNIT_SYSTEMS:
        raise ValueError(f"Unknown unit system: {units!r} (expected one of {UNIT_SYSTEMS})")
    return units


class Place(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int | str = ""
    name: str
    country: str = ""
    admin1: Optional[str] = None
    latitude: float
    longitude: float
    timezone: Optional[str] = None

    @property
    def label(self) -> str:
        """Text mirrored into the search box after selection."""
        return self.name

    @property
    def region_line(self) -> str:
        return f"{self.admin1}, {self.country}" if self.admin1 else self.country


class _Payload(BaseModel):
    """Forecast sections: unknown keys ignored, explicit nulls fall back to defaults."""

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class CurrentWeather(_Payload):
    time: str = ""
    temperature: Optional[float] = None
    windspeed: Optional[float] = None
    winddirection: Optional[float] = None
    weathercode: Optional[int] = None
    is_day: Optional[int] = None


class HourlySeries(_Payload):
    """Parallel arrays sharing the index space of `time`."""

    time: List[str] = Field(default_factory=list)
    temperature_2m: List[Optional[float]] = Field(default_factory=list)
    apparent_temperature: List[Optional[float]] = Field(default_factory=list)
    relative_humidity_2m: List[Optional[float]] = Field(default_factory=list)
    precipitation: List[Optional[float]] = Field(default_factory=list)
    windspeed_10m: List[Optional[float]] = Field(default_factory=list)
    surface_pressure: List[Optional[float]] = Field(default_factory=list)
    cloudcover: List[Optional[float]] = Field(default_factory=list)


class DailySeries(_Payload):
    """Parallel arrays sharing the index space of `time` (one entry per day)."""

    time: List[str] = Field(default_factory=list)
    temperature_2m_max: List[Optional[float]] = Field(default_factory=list)
    temperature_2m_min: List[Optional[float]] = Field(default_factory=list)
    apparent_temperature_max: List[Optional[float]] = Field(default_factory=list)
    apparent_temperature_min: List[Optional[float]] = Field(default_factory=list)
    precipitation_sum: List[Optional[float]] = Field(default_factory=list)
    uv_index_max: List[Optional[float]] = Field(default_factory=list)
    windspeed_10m_max: List[Optional[float]] = Field(default_factory=list)
    sunrise: List[Optional[str]] = Field(default_factory=list)
    sunset: List[Optional[str]] = Field(default_factory=list)
    weathercode: List[Optional[int]] = Field(default_factory=list)


class Forecast(_Payload):
    latitude: float = 0.0
    longitude: float = 0.0
    timezone: str = ""
    utc_offset_seconds: int = 0
    current_weather: CurrentWeather = Field(default_factory=CurrentWeather)
    hourly: HourlySeries = Field(default_factory=HourlySeries)
    daily: DailySeries = Field(default_factory=DailySeries)
