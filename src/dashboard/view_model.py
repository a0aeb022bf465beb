"""Render-ready values derived from the view state."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from src.dashboard.state import ViewState
from src.weather.codes import describe_code
from src.weather.derive import (
    DASH,
    fmt,
    fmt_round,
    hourly_slice,
    iso_to_hour,
    iso_to_weekday,
    location_now,
    nearest_hour_value,
)
from src.weather.models import UNIT_LABELS


@dataclass
class DetailBox:
    label: str
    value: str
    icon: str


@dataclass
class HourCard:
    time: str
    hour: str
    temperature: str


@dataclass
class DayRow:
    date: str
    weekday: str
    icon: str
    label: str
    low: str
    high: str


@dataclass
class DashboardView:
    title: str = ""
    region: str = ""
    condition: Optional[str] = None
    temperature: Optional[str] = None
    icon: Optional[str] = None
    details: List[DetailBox] = field(default_factory=list)
    sunrise: str = DASH
    sunset: str = DASH
    hours: List[HourCard] = field(default_factory=list)
    days: List[DayRow] = field(default_factory=list)
    units: Dict[str, str] = field(default_factory=dict)
    loading: bool = False
    error: Optional[str] = None
    has_data: bool = False


def _first(seq):
    return seq[0] if seq else None


def build_view(state: ViewState, now: Optional[datetime] = None, hourly_points: int = 24) -> DashboardView:
    """Flatten `state` into display strings; `now` defaults to the location's wall clock."""
    units = UNIT_LABELS[state.units]
    place = state.selected
    view = DashboardView(
        title=place.name if place else "",
        region=place.region_line if place else "",
        units=dict(units),
        loading=state.loading,
        error=state.error,
    )

    data = state.forecast
    if data is None:
        return view

    now = now or location_now(data)
    cw = data.current_weather
    code = describe_code(cw.weathercode)

    feels_like = nearest_hour_value(data.hourly.time, data.hourly.apparent_temperature, now)
    humidity = nearest_hour_value(data.hourly.time, data.hourly.relative_humidity_2m, now)

    view.has_data = True
    view.condition = code.label
    view.temperature = f"{fmt_round(cw.temperature)}°"
    view.icon = code.icon
    view.details = [
        DetailBox("FEELS LIKE", f"{fmt_round(feels_like)}°", "🌡️"),
        DetailBox("HUMIDITY", f"{fmt_round(humidity)}%", "💧"),
        DetailBox("WIND", f"{fmt_round(cw.windspeed)} {units['wind']}", "💨"),
        DetailBox("UV INDEX", fmt(_first(data.daily.uv_index_max)), "☀️"),
    ]
    view.sunrise = iso_to_hour(_first(data.daily.sunrise))
    view.sunset = iso_to_hour(_first(data.daily.sunset))

    view.hours = [
        HourCard(time=h.time, hour=iso_to_hour(h.time), temperature=f"{fmt_round(h.temperature)}°")
        for h in hourly_slice(data.hourly, hourly_points, now)
    ]

    daily = data.daily
    for i, day in enumerate(daily.time):
        day_code = describe_code(daily.weathercode[i] if i < len(daily.weathercode) else None)
        low = daily.temperature_2m_min[i] if i < len(daily.temperature_2m_min) else None
        high = daily.temperature_2m_max[i] if i < len(daily.temperature_2m_max) else None
        view.days.append(
            DayRow(
                date=day,
                weekday=iso_to_weekday(day),
                icon=day_code.icon,
                label=day_code.label,
                low=f"{fmt_round(low)}°",
                high=f"{fmt_round(high)}°",
            )
        )
    return view
