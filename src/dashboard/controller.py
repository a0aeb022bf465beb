"""
Dashboard controller: owns the view state and the effects that feed it.

Effects:
  - search text  -> debounce -> geocoding lookup -> suggestion list
  - place/units  -> forecast fetch -> forecast + loading/error flags

Every effect keeps a handle to its asyncio task and cancels it as soon as
its inputs change, so only the request matching the current inputs can
commit a result. Cancellation is never surfaced to the user.

All methods must be called on the event loop that runs the controller.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from src.dashboard.debounce import Debouncer
from src.dashboard.settings import DashboardSettings
from src.dashboard.state import ForecastStatus, ViewState
from src.weather.client import OpenMeteoClient, WeatherAPIError
from src.weather.models import Place, check_units

log = logging.getLogger(__name__)

FORECAST_ERROR = "Failed to fetch weather data."


class DashboardController:
    def __init__(self, client: OpenMeteoClient, settings: Optional[DashboardSettings] = None):
        self.client = client
        self.settings = settings or DashboardSettings()
        self.state = ViewState(units=self.settings.default_units)
        self._debouncer = Debouncer(self.settings.debounce_seconds, self._on_debounced_query)
        self._geocode_task: Optional[asyncio.Task] = None
        self._forecast_task: Optional[asyncio.Task] = None
        self._guard_handle: Optional[asyncio.TimerHandle] = None
        self._selecting = False

    # ── Lifecycle ───────────────────────────────────────────────

    def start(self) -> None:
        """Show the fallback city until the user picks one."""
        if self.state.selected is None:
            self.state.selected = self.settings.default_city
            log.info("Starting with default city %s", self.settings.default_city.name)
            self._refresh_forecast()

    async def aclose(self, close_client: bool = True) -> None:
        """Cancel every pending effect (and close the HTTP client)."""
        self._debouncer.cancel()
        if self._guard_handle is not None:
            self._guard_handle.cancel()
            self._guard_handle = None
        tasks = [t for t in (self._geocode_task, self._forecast_task) if t is not None]
        for t in tasks:
            t.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._geocode_task = self._forecast_task = None
        if close_client:
            await self.client.aclose()

    @property
    def busy(self) -> bool:
        """True while a debounce, lookup or fetch is still outstanding."""
        return (
            self._debouncer.pending
            or _running(self._geocode_task)
            or _running(self._forecast_task)
        )

    @property
    def selection_guard_active(self) -> bool:
        return self._selecting

    def snapshot(self) -> ViewState:
        return self.state.copy()

    # ── Search ──────────────────────────────────────────────────

    def set_query(self, text: str) -> None:
        self.state.query = text or ""
        self._debouncer.push(self.state.query)

    def clear_query(self) -> None:
        self.set_query("")

    def _on_debounced_query(self, text: str) -> None:
        trimmed = (text or "").strip()
        _cancel(self._geocode_task)
        self._geocode_task = None

        if len(trimmed) < self.settings.min_query_length or self._selecting:
            self.state.suggestions = []
            return

        self._geocode_task = asyncio.get_running_loop().create_task(self._search(trimmed))

    async def _search(self, query: str) -> None:
        try:
            places = await self.client.search_places(
                query,
                count=self.settings.max_results,
                language=self.settings.language,
            )
        except asyncio.CancelledError:
            raise
        except WeatherAPIError as e:
            log.warning("Geocoding failed for %r: %s", query, e)
            self.state.suggestions = []
            return
        except Exception:
            log.exception("Unexpected geocoding error for %r", query)
            self.state.suggestions = []
            return
        log.debug("Geocoding %r -> %d matches", query, len(places))
        self.state.suggestions = places
        self.state.active_index = -1

    def move_highlight(self, step: int) -> None:
        """Arrow-key navigation through the suggestion list, clamped to its ends."""
        n = len(self.state.suggestions)
        if n == 0:
            return
        i = self.state.active_index
        if step > 0:
            self.state.active_index = i + 1 if i < n - 1 else i
        elif step < 0:
            self.state.active_index = i - 1 if i > 0 else 0

    def dismiss_suggestions(self) -> None:
        self.state.suggestions = []
        self.state.active_index = -1

    # ── Selection ───────────────────────────────────────────────

    def select_place(self, place: Place) -> None:
        self._start_guard()
        self._debouncer.cancel()
        _cancel(self._geocode_task)
        self._geocode_task = None

        self.state.selected = place
        self.state.query = place.label
        self.state.suggestions = []
        self.state.active_index = -1
        self.state.blur_requested = True
        log.info("Selected %s (%s, %s)", place.name, place.latitude, place.longitude)
        self._refresh_forecast()

    def select_first_match(self) -> Optional[Place]:
        """Select the highlighted suggestion, or the first one when none is highlighted."""
        suggestions = self.state.suggestions
        if not suggestions:
            return None
        i = self.state.active_index
        target = suggestions[i] if 0 <= i < len(suggestions) else suggestions[0]
        self.select_place(target)
        return target

    def consume_blur(self) -> bool:
        requested = self.state.blur_requested
        self.state.blur_requested = False
        return requested

    def _start_guard(self) -> None:
        self._selecting = True
        if self._guard_handle is not None:
            self._guard_handle.cancel()
        self._guard_handle = asyncio.get_running_loop().call_later(
            self.settings.selection_guard_seconds, self._release_guard
        )

    def _release_guard(self) -> None:
        self._selecting = False
        self._guard_handle = None

    # ── Units / theme ───────────────────────────────────────────

    def set_units(self, units: str) -> None:
        self.state.units = check_units(units)
        self._refresh_forecast()

    def toggle_theme(self) -> None:
        self.state.is_dark = not self.state.is_dark

    # ── Forecast ────────────────────────────────────────────────

    def _refresh_forecast(self) -> None:
        place = self.state.selected
        if place is None:
            return
        _cancel(self._forecast_task)
        self.state.loading = True
        self.state.error = None
        self.state.status = ForecastStatus.LOADING
        self._forecast_task = asyncio.get_running_loop().create_task(
            self._load_forecast(place, self.state.units)
        )

    async def _load_forecast(self, place: Place, units: str) -> None:
        # A superseded request is cancelled inside the await below and never
        # reaches the commits; the newer request owns the loading flag.
        try:
            forecast = await self.client.fetch_forecast(place, units)
        except asyncio.CancelledError:
            raise
        except WeatherAPIError as e:
            log.warning("Forecast fetch failed for %s: %s", place.name, e)
            self._forecast_failed()
            return
        except Exception:
            log.exception("Unexpected forecast error for %s", place.name)
            self._forecast_failed()
            return
        self.state.forecast = forecast
        self.state.status = ForecastStatus.SUCCESS
        self.state.loading = False
        log.info("Forecast loaded for %s (%s)", place.name, units)

    def _forecast_failed(self) -> None:
        self.state.error = FORECAST_ERROR
        self.state.status = ForecastStatus.ERROR
        self.state.loading = False


def _running(task: Optional[asyncio.Task]) -> bool:
    return task is not None and not task.done()


def _cancel(task: Optional[asyncio.Task]) -> None:
    if task is not None and not task.done():
        task.cancel()
