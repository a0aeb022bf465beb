import asyncio
from datetime import datetime, timedelta

import pytest

from src.dashboard.settings import DashboardSettings
from src.weather.client import WeatherAPIError
from src.weather.models import Forecast, Place

DAILY_CODES = [0, 3, 61, 95, 71, 45, 2]

LONDON = {
    "id": 2643743,
    "name": "London",
    "latitude": 51.50853,
    "longitude": -0.12574,
    "elevation": 25.0,
    "country_code": "GB",
    "timezone": "Europe/London",
    "country": "United Kingdom",
    "admin1": "England",
}

LONDON_ONTARIO = {
    "id": 6058560,
    "name": "London",
    "latitude": 42.98339,
    "longitude": -81.23304,
    "country": "Canada",
    "admin1": "Ontario",
    "timezone": "America/Toronto",
}


def make_forecast_payload(start: datetime, hours: int = 24, days: int = 7) -> dict:
    times = [(start + timedelta(hours=i)).strftime("%Y-%m-%dT%H:%M") for i in range(hours)]
    dates = [(start.date() + timedelta(days=d)).isoformat() for d in range(days)]
    return {
        "latitude": 51.5,
        "longitude": -0.119999886,
        "timezone": "Europe/London",
        "timezone_abbreviation": "GMT",
        "utc_offset_seconds": 0,
        "current_weather": {
            "time": times[0] if times else "",
            "temperature": 12.6,
            "windspeed": 14.4,
            "winddirection": 250,
            "weathercode": 3,
            "is_day": 1,
        },
        "hourly": {
            "time": times,
            "temperature_2m": [10.0 + i for i in range(hours)],
            "apparent_temperature": [8.0 + i for i in range(hours)],
            "relative_humidity_2m": [50 + i for i in range(hours)],
            "precipitation": [round(0.1 * i, 1) for i in range(hours)],
            "windspeed_10m": [5.0 + i for i in range(hours)],
            "surface_pressure": [1010.0] * hours,
            "cloudcover": [20] * hours,
        },
        "daily": {
            "time": dates,
            "temperature_2m_max": [20.4 + d for d in range(days)],
            "temperature_2m_min": [10.6 + d for d in range(days)],
            "apparent_temperature_max": [19.0 + d for d in range(days)],
            "apparent_temperature_min": [9.0 + d for d in range(days)],
            "precipitation_sum": [0.0] * days,
            "uv_index_max": [5.25 + d for d in range(days)],
            "windspeed_10m_max": [20.0] * days,
            "sunrise": [f"{d}T06:12" for d in dates],
            "sunset": [f"{d}T18:45" for d in dates],
            "weathercode": [DAILY_CODES[d % len(DAILY_CODES)] for d in range(days)],
        },
    }


class FakeClient:
    """Stands in for OpenMeteoClient; records calls and cancellations."""

    def __init__(self, places=None, forecast=None, delays=None, search_delay=0.0):
        self.places = places if places is not None else {}
        self.forecast = forecast
        self.delays = delays or {}
        self.search_delay = search_delay
        self.fail_search = False
        self.fail_forecast = False
        self.search_calls = []
        self.forecast_calls = []
        self.cancelled = []
        self.closed = False

    async def search_places(self, name, *, count=6, language="en"):
        self.search_calls.append(name)
        try:
            await asyncio.sleep(self.search_delay)
        except asyncio.CancelledError:
            self.cancelled.append(("search", name))
            raise
        if self.fail_search:
            raise WeatherAPIError("geocoding down")
        return list(self.places.get(name, []))

    async def fetch_forecast(self, place, units="metric"):
        self.forecast_calls.append((place, units))
        try:
            await asyncio.sleep(self.delays.get(units, 0.0))
        except asyncio.CancelledError:
            self.cancelled.append(("forecast", units))
            raise
        if self.fail_forecast:
            raise WeatherAPIError("forecast down")
        if callable(self.forecast):
            return self.forecast(place, units)
        return self.forecast

    async def aclose(self):
        self.closed = True


@pytest.fixture
def forecast_payload():
    return make_forecast_payload


@pytest.fixture
def london():
    return Place.model_validate(LONDON)


@pytest.fixture
def geocode_results():
    return [LONDON, LONDON_ONTARIO]


@pytest.fixture
def forecast(forecast_payload):
    return Forecast.model_validate(forecast_payload(datetime(2030, 1, 1, 0, 0)))


@pytest.fixture
def fast_settings():
    return DashboardSettings(debounce_seconds=0.01, selection_guard_seconds=0.1)


@pytest.fixture
def fake_client(forecast):
    def _make(**kwargs):
        kwargs.setdefault("forecast", forecast)
        return FakeClient(**kwargs)

    return _make
