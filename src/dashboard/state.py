"""View state owned by one dashboard session."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional

from src.weather.models import Forecast, Place


class ForecastStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class ViewState:
    query: str = ""
    suggestions: List[Place] = field(default_factory=list)
    active_index: int = -1  # highlighted suggestion, -1 = none
    selected: Optional[Place] = None
    forecast: Optional[Forecast] = None
    status: ForecastStatus = ForecastStatus.IDLE
    loading: bool = False
    error: Optional[str] = None
    units: str = "metric"
    is_dark: bool = False
    blur_requested: bool = False

    def copy(self) -> "ViewState":
        # Places and forecasts are replaced wholesale, never mutated, so a
        # shallow copy with a fresh suggestion list is enough.
        return replace(self, suggestions=list(self.suggestions))
