"""Derived readings and display formatting for a forecast payload."""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from typing import Any, List, Mapping, NamedTuple, Optional, Sequence

import numpy as np
import pandas as pd

from src.weather.client import HOURLY_VARS
from src.weather.models import Forecast, HourlySeries

DASH = "–"


class HourlyPoint(NamedTuple):
    time: str
    temperature: float
    apparent: float
    wind: float
    humidity: float
    precip: float


def parse_iso(value: Any) -> Optional[datetime]:
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def _align(ts: datetime, now: datetime) -> datetime:
    # Open-Meteo returns naive local timestamps with timezone=auto; only
    # strip/keep tzinfo so the two sides are comparable.
    if ts.tzinfo is not None and now.tzinfo is None:
        return ts.replace(tzinfo=None)
    if ts.tzinfo is None and now.tzinfo is not None:
        return ts.replace(tzinfo=now.tzinfo)
    return ts


def location_now(forecast: Optional[Forecast], now_utc: Optional[datetime] = None) -> datetime:
    """Naive wall-clock time at the forecast location."""
    now_utc = now_utc or datetime.now(timezone.utc)
    offset = forecast.utc_offset_seconds if forecast is not None else 0
    return (now_utc + timedelta(seconds=offset)).replace(tzinfo=None)


def _num(value: Any, default: float = 0.0) -> float:
    if isinstance(value, bool) or value is None:
        return default
    try:
        f = float(value)
    except (TypeError, ValueError):
        return default
    return f if math.isfinite(f) else default


def nearest_hour_value(
    times: Optional[Sequence[str]] = None,
    values: Optional[Sequence[Any]] = None,
    now: Optional[datetime] = None,
) -> float:
    """Value whose timestamp is closest to `now` (ties -> earliest index); 0 when empty."""
    times = times or []
    values = values or []
    if not times or not values:
        return 0
    now = now or datetime.now()

    best_idx = 0
    best_delta = math.inf
    for i, raw in enumerate(times):
        ts = parse_iso(raw)
        if ts is None:
            continue
        delta = abs((_align(ts, now) - now).total_seconds())
        if delta < best_delta:
            best_delta = delta
            best_idx = i
    return _num(values[min(best_idx, len(values) - 1)])


def _column(hourly: Any, key: str) -> List[Any]:
    if isinstance(hourly, Mapping):
        return list(hourly.get(key) or [])
    return list(getattr(hourly, key, None) or [])


def _at(seq: List[Any], i: int) -> Any:
    return seq[i] if i < len(seq) else None


def hourly_slice(hourly: HourlySeries | Mapping | None, n: int, now: Optional[datetime] = None) -> List[HourlyPoint]:
    """Up to `n` upcoming hourly entries.

    Falls back to the first `n` entries when no timestamp is >= now
    (e.g. a stale payload).
    """
    if hourly is None or n <= 0:
        return []
    now = now or datetime.now()

    time = _column(hourly, "time")
    temperature = _column(hourly, "temperature_2m")
    apparent = _column(hourly, "apparent_temperature")
    wind = _column(hourly, "windspeed_10m")
    humidity = _column(hourly, "relative_humidity_2m")
    precip = _column(hourly, "precipitation")

    def point(i: int) -> HourlyPoint:
        temp = _num(_at(temperature, i))
        return HourlyPoint(
            time=time[i],
            temperature=temp,
            apparent=_num(_at(apparent, i), temp),
            wind=_num(_at(wind, i)),
            humidity=_num(_at(humidity, i)),
            precip=_num(_at(precip, i)),
        )

    upcoming: List[HourlyPoint] = []
    for i, raw in enumerate(time):
        if len(upcoming) >= n:
            break
        ts = parse_iso(raw)
        if ts is not None and _align(ts, now) >= now:
            upcoming.append(point(i))

    if upcoming:
        return upcoming
    return [point(i) for i in range(min(n, len(time)))]


def fmt(x: Any, digits: int = 0) -> str:
    """Fixed-decimal formatting; dash placeholder for missing/non-finite input."""
    if isinstance(x, bool) or not isinstance(x, (int, float, np.integer, np.floating)):
        return DASH
    if not np.isfinite(x):
        return DASH
    return f"{float(x):.{digits}f}"


def fmt_round(x: Any) -> str:
    """Round half up to an integer string (-0.5 -> "0", 2.5 -> "3")."""
    if fmt(x) == DASH:
        return DASH
    return str(int(math.floor(float(x) + 0.5)))


def iso_to_hour(iso: Any) -> str:
    ts = parse_iso(iso)
    return ts.strftime("%H:%M") if ts else DASH


def iso_to_weekday(iso: Any) -> str:
    ts = parse_iso(iso)
    return ts.strftime("%a") if ts else DASH


def hourly_frame(forecast: Optional[Forecast], vars_: Sequence[str] = HOURLY_VARS) -> pd.DataFrame:
    """Hourly series as a time-indexed DataFrame (columns of mismatched length are dropped)."""
    if forecast is None or not forecast.hourly.time:
        return pd.DataFrame()
    times = forecast.hourly.time
    df = pd.DataFrame({"time": pd.to_datetime(times, errors="coerce")})
    for v in vars_:
        col = getattr(forecast.hourly, v, None)
        if col is not None and len(col) == len(times):
            df[v] = pd.to_numeric(pd.Series(col, dtype="object"), errors="coerce")
    return df.dropna(subset=["time"]).set_index("time")
