"""Dashboard settings built from configs/project.yaml."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from src.utils.io import load_project_config
from src.weather.client import FORECAST_URL, GEOCODING_URL, USER_AGENT
from src.weather.models import Place, check_units

DEFAULT_CITY = Place(
    id=1261481,
    name="New Delhi",
    country="India",
    admin1="Delhi",
    latitude=28.6139,
    longitude=77.209,
    timezone="Asia/Kolkata",
)


@dataclass
class DashboardSettings:
    title: str = "AI Weather"
    geocoding_url: str = GEOCODING_URL
    forecast_url: str = FORECAST_URL
    timeout_seconds: float = 15.0
    user_agent: str = USER_AGENT
    debounce_seconds: float = 0.35
    min_query_length: int = 2
    max_results: int = 6
    language: str = "en"
    selection_guard_seconds: float = 0.5
    hourly_points: int = 24
    default_units: str = "metric"
    default_city: Place = field(default_factory=lambda: DEFAULT_CITY)
    log_level: str = "INFO"
    log_file: Optional[str] = "logs/app.log"

    @classmethod
    def from_config(cls, cfg: Optional[Dict[str, Any]]) -> "DashboardSettings":
        """Build settings from a parsed project config; absent keys keep their defaults."""
        cfg = cfg or {}
        api = cfg.get("api") or {}
        search = cfg.get("search") or {}
        forecast = cfg.get("forecast") or {}
        logging_cfg = cfg.get("logging") or {}
        base = cls()

        city = cfg.get("default_city")
        default_city = Place.model_validate(city) if city else base.default_city

        return cls(
            title=(cfg.get("project") or {}).get("title", base.title),
            geocoding_url=api.get("geocoding_url", base.geocoding_url),
            forecast_url=api.get("forecast_url", base.forecast_url),
            timeout_seconds=float(api.get("timeout_seconds", base.timeout_seconds)),
            user_agent=api.get("user_agent", base.user_agent),
            debounce_seconds=float(search.get("debounce_ms", base.debounce_seconds * 1000)) / 1000,
            min_query_length=int(search.get("min_query_length", base.min_query_length)),
            max_results=int(search.get("max_results", base.max_results)),
            language=search.get("language", base.language),
            selection_guard_seconds=float(
                search.get("selection_guard_ms", base.selection_guard_seconds * 1000)
            ) / 1000,
            hourly_points=int(forecast.get("hourly_points", base.hourly_points)),
            default_units=check_units(forecast.get("default_units", base.default_units)),
            default_city=default_city,
            log_level=logging_cfg.get("level", base.log_level),
            log_file=logging_cfg.get("file", base.log_file),
        )


def load_settings() -> DashboardSettings:
    try:
        cfg = load_project_config()
    except FileNotFoundError:
        cfg = {}
    return DashboardSettings.from_config(cfg)
