import asyncio
from datetime import datetime

import httpx
import pytest

from src.weather.client import (
    DAILY_VARS,
    HOURLY_VARS,
    OpenMeteoClient,
    WeatherAPIError,
    forecast_params,
    geocode_params,
)


def _client(handler) -> OpenMeteoClient:
    return OpenMeteoClient(transport=httpx.MockTransport(handler))


def test_geocode_params():
    assert geocode_params("Lond") == {"name": "Lond", "count": "6", "language": "en", "format": "json"}


def test_forecast_params_metric_and_imperial():
    metric = forecast_params(51.5, -0.12, "metric")
    assert metric["current_weather"] == "true"
    assert metric["timezone"] == "auto"
    assert metric["hourly"].split(",") == HOURLY_VARS
    assert metric["daily"].split(",") == DAILY_VARS
    assert (metric["temperature_unit"], metric["windspeed_unit"], metric["precipitation_unit"]) == (
        "celsius", "kmh", "mm",
    )
    imperial = forecast_params(51.5, -0.12, "imperial")
    assert (imperial["temperature_unit"], imperial["windspeed_unit"], imperial["precipitation_unit"]) == (
        "fahrenheit", "mph", "inch",
    )
    with pytest.raises(ValueError):
        forecast_params(0, 0, "kelvin")


def test_search_places_parses_results_and_skips_bad_entries(geocode_results):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = dict(request.url.params)
        seen["host"] = request.url.host
        return httpx.Response(200, json={"results": geocode_results + [{"name": "Nowhere"}]})

    async def main():
        async with _client(handler) as client:
            return await client.search_places("Lond")

    places = asyncio.run(main())
    assert seen["host"] == "geocoding-api.open-meteo.com"
    assert seen["params"]["name"] == "Lond"
    assert seen["params"]["count"] == "6"
    assert [p.country for p in places] == ["United Kingdom", "Canada"]
    assert places[0].region_line == "England, United Kingdom"


def test_search_places_without_results_key_is_empty():
    async def main():
        async with _client(lambda r: httpx.Response(200, json={"generationtime_ms": 0.5})) as client:
            return await client.search_places("zzzz")

    assert asyncio.run(main()) == []


def test_fetch_forecast_sends_coordinates_and_units(london, forecast_payload):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(request.url.params)
        return httpx.Response(200, json=forecast_payload(datetime(2030, 1, 1)))

    async def main():
        async with _client(handler) as client:
            return await client.fetch_forecast(london, "imperial")

    fc = asyncio.run(main())
    assert seen["latitude"] == "51.50853"
    assert seen["longitude"] == "-0.12574"
    assert seen["temperature_unit"] == "fahrenheit"
    assert len(fc.hourly.time) == 24
    assert fc.daily.weathercode[2] == 61
    assert fc.current_weather.weathercode == 3


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, text="boom"),
        httpx.Response(200, text="not json"),
        httpx.Response(400, json={"error": True, "reason": "Latitude must be in range"}),
        httpx.Response(200, json={"error": True, "reason": "Cannot initialize"}),
        httpx.Response(200, json=[1, 2, 3]),
        httpx.Response(200, json={"hourly": {"time": "not-a-list"}}),
    ],
)
def test_fetch_forecast_failures_raise_weather_api_error(london, response):
    async def main():
        async with _client(lambda r: response) as client:
            await client.fetch_forecast(london)

    with pytest.raises(WeatherAPIError):
        asyncio.run(main())


def test_transport_error_is_wrapped(london):
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    async def main():
        async with _client(handler) as client:
            await client.search_places("Paris")

    with pytest.raises(WeatherAPIError):
        asyncio.run(main())


def test_error_body_reason_is_kept(london):
    async def main():
        async with _client(lambda r: httpx.Response(200, json={"error": True, "reason": "bad coords"})) as client:
            await client.fetch_forecast(london)

    with pytest.raises(WeatherAPIError, match="bad coords"):
        asyncio.run(main())


@pytest.mark.parametrize("results", [5, "London", {"name": "London"}, None])
def test_search_places_non_list_results_mean_no_matches(results):
    async def main():
        async with _client(lambda r: httpx.Response(200, json={"results": results})) as client:
            return await client.search_places("Lond")

    assert asyncio.run(main()) == []
