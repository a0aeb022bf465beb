"""Async Open-Meteo client (geocoding + forecast), no API key required.

Requests run on an `httpx.AsyncClient`; cancelling the awaiting task aborts
the request in flight. Every non-cancellation failure surfaces as
`WeatherAPIError`.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from src.weather.models import UNIT_PARAMS, Forecast, Place, check_units

log = logging.getLogger(__name__)

GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"
FORECAST_URL = "https://api.open-meteo.com/v1/forecast"
USER_AGENT = "weather-dashboard/1.0"

HOURLY_VARS = [
    "temperature_2m",
    "apparent_temperature",
    "relative_humidity_2m",
    "precipitation",
    "windspeed_10m",
    "surface_pressure",
    "cloudcover",
]
DAILY_VARS = [
    "temperature_2m_max",
    "temperature_2m_min",
    "apparent_temperature_max",
    "apparent_temperature_min",
    "precipitation_sum",
    "uv_index_max",
    "windspeed_10m_max",
    "sunrise",
    "sunset",
    "weathercode",
]


class WeatherAPIError(RuntimeError):
    """Network, HTTP, decoding or payload failure talking to Open-Meteo."""


def geocode_params(name: str, *, count: int = 6, language: str = "en") -> Dict[str, str]:
    return {
        "name": name,
        "count": str(int(count)),
        "language": language,
        "format": "json",
    }


def forecast_params(latitude: float, longitude: float, units: str = "metric") -> Dict[str, str]:
    params = {
        "latitude": str(latitude),
        "longitude": str(longitude),
        "current_weather": "true",
        "hourly": ",".join(HOURLY_VARS),
        "daily": ",".join(DAILY_VARS),
        "timezone": "auto",
    }
    params.update(UNIT_PARAMS[check_units(units)])
    return params


class OpenMeteoClient:
    def __init__(
        self,
        *,
        geocoding_url: str = GEOCODING_URL,
        forecast_url: str = FORECAST_URL,
        timeout: float = 15.0,
        user_agent: str = USER_AGENT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.geocoding_url = geocoding_url
        self.forecast_url = forecast_url
        self._http = httpx.AsyncClient(
            timeout=timeout,
            headers={"User-Agent": user_agent},
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings, **kwargs) -> "OpenMeteoClient":
        return cls(
            geocoding_url=settings.geocoding_url,
            forecast_url=settings.forecast_url,
            timeout=settings.timeout_seconds,
            user_agent=settings.user_agent,
            **kwargs,
        )

    async def __aenter__(self) -> "OpenMeteoClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _get_json(self, url: str, params: Dict[str, str]) -> Dict[str, Any]:
        log.debug("GET %s %s", url, params)
        try:
            resp = await self._http.get(url, params=params)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as e:
            raise WeatherAPIError(f"Request to {url} failed: {e}") from e
        except ValueError as e:
            raise WeatherAPIError(f"Invalid JSON from {url}: {e}") from e

        if not isinstance(data, dict):
            raise WeatherAPIError(f"Unexpected payload from {url}: {type(data).__name__}")
        if data.get("error"):
            raise WeatherAPIError(data.get("reason", "Open-Meteo error"))
        return data

    async def search_places(self, name: str, *, count: int = 6, language: str = "en") -> List[Place]:
        """Return up to `count` geocoding matches for `name` (may be empty)."""
        data = await self._get_json(self.geocoding_url, geocode_params(name, count=count, language=language))
        results = data.get("results")
        if not isinstance(results, list):
            return []
        out: List[Place] = []
        for r in results:
            if not (isinstance(r, dict) and "latitude" in r and "longitude" in r):
                continue
            try:
                out.append(Place.model_validate(r))
            except ValidationError as e:
                log.debug("Skipping malformed geocoding result %r: %s", r, e)
        return out

    async def fetch_forecast(self, place: Place, units: str = "metric") -> Forecast:
        data = await self._get_json(
            self.forecast_url,
            forecast_params(place.latitude, place.longitude, units),
        )
        try:
            return Forecast.model_validate(data)
        except ValidationError as e:
            raise WeatherAPIError(f"Malformed forecast payload: {e}") from e
