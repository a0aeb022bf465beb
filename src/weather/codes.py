"""WMO weather interpretation codes -> label + icon."""

from typing import NamedTuple, Optional


class WeatherCode(NamedTuple):
    label: str
    icon: str


DEFAULT_ICON = "☀️"
UNKNOWN = WeatherCode("Unknown", DEFAULT_ICON)

WEATHER_CODE_MAP: dict[int, WeatherCode] = {
    0: WeatherCode("Clear sky", "☀️"),
    1: WeatherCode("Mainly clear", "🌤️"),
    2: WeatherCode("Partly cloudy", "⛅"),
    3: WeatherCode("Overcast", "☁️"),
    45: WeatherCode("Fog", "🌫️"),
    48: WeatherCode("Rime fog", "🌫️"),
    51: WeatherCode("Light drizzle", "🌦️"),
    53: WeatherCode("Drizzle", "🌦️"),
    55: WeatherCode("Dense drizzle", "🌧️"),
    61: WeatherCode("Slight rain", "🌦️"),
    63: WeatherCode("Rain", "🌧️"),
    65: WeatherCode("Heavy rain", "🌧️"),
    71: WeatherCode("Slight snow", "🌨️"),
    73: WeatherCode("Snow", "🌨️"),
    75: WeatherCode("Heavy snow", "❄️"),
    77: WeatherCode("Snow grains", "❄️"),
    80: WeatherCode("Rain showers", "🌦️"),
    81: WeatherCode("Heavy showers", "🌧️"),
    82: WeatherCode("Violent showers", "⛈️"),
    85: WeatherCode("Snow showers", "🌨️"),
    86: WeatherCode("Heavy snow showers", "❄️"),
    95: WeatherCode("Thunderstorm", "⛈️"),
    96: WeatherCode("Thunder w/ hail", "⛈️"),
    99: WeatherCode("Heavy hail", "⛈️"),
}


def describe_code(code: Optional[int]) -> WeatherCode:
    """Look up a WMO code; anything unknown (including None) maps to UNKNOWN."""
    try:
        return WEATHER_CODE_MAP.get(int(code), UNKNOWN)
    except (TypeError, ValueError):
        return UNKNOWN

