"""
Weather Dashboard — Streamlit page.

Run (from repo root):
    streamlit run app/app.py
"""

import html
import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

import altair as alt
import pandas as pd
import streamlit as st
import streamlit.components.v1 as components

from src.dashboard.controller import DashboardController
from src.dashboard.runtime import LoopRunner
from src.dashboard.settings import load_settings
from src.dashboard.view_model import DashboardView, build_view
from src.ui.theme import theme_css
from src.utils.logging_config import setup_logging
from src.weather.client import OpenMeteoClient
from src.weather.derive import hourly_frame, location_now

SETTINGS = load_settings()
setup_logging(SETTINGS.log_level, SETTINGS.log_file)

# ── Page config ──────────────────────────────────────────────────────────
st.set_page_config(
    page_title=SETTINGS.title,
    page_icon="⛅",
    layout="wide",
    initial_sidebar_state="collapsed",
)

CSS_PATH = Path(__file__).parent / "style.css"
SETTLE_TIMEOUT = SETTINGS.timeout_seconds + SETTINGS.debounce_seconds + 1.0


# ── Session wiring ───────────────────────────────────────────────────────
@st.cache_resource(show_spinner=False)
def get_runner() -> LoopRunner:
    return LoopRunner()


RUNNER = get_runner()


@st.cache_resource(show_spinner=False)
def get_client() -> OpenMeteoClient:
    # One HTTP connection pool shared by every session; sessions never close it.
    return RUNNER.call(OpenMeteoClient.from_settings, SETTINGS)


CLIENT = get_client()


def _new_controller() -> DashboardController:
    controller = DashboardController(CLIENT, SETTINGS)
    controller.start()
    return controller


if "controller" not in st.session_state:
    st.session_state["controller"] = RUNNER.call(_new_controller)
    st.session_state["query_input"] = ""

controller: DashboardController = st.session_state["controller"]


def settle(timeout: float = SETTLE_TIMEOUT) -> None:
    """Block the script run until debounce/lookup/fetch have finished (or timeout)."""
    deadline = time.monotonic() + timeout
    while RUNNER.call(lambda: controller.busy) and time.monotonic() < deadline:
        time.sleep(0.05)


# ── Widget callbacks (run before the script body on rerun) ──────────────
def on_query_change():
    RUNNER.call(controller.set_query, st.session_state["query_input"])


def on_clear_query():
    st.session_state["query_input"] = ""
    RUNNER.call(controller.clear_query)


def on_select(index: int):
    suggestions = RUNNER.call(lambda: list(controller.state.suggestions))
    if index >= len(suggestions):
        return
    place = suggestions[index]
    RUNNER.call(controller.select_place, place)
    st.session_state["query_input"] = place.label


def on_first_match():
    place = RUNNER.call(controller.select_first_match)
    if place is not None:
        st.session_state["query_input"] = place.label


def on_dismiss():
    RUNNER.call(controller.dismiss_suggestions)


def on_units_change():
    RUNNER.call(controller.set_units, st.session_state["units_choice"])


def on_theme_change():
    RUNNER.call(controller.toggle_theme)


# ── Small utilities ──────────────────────────────────────────────────────
def inject_css(is_dark: bool) -> None:
    base = CSS_PATH.read_bytes().decode("utf-8", errors="replace") if CSS_PATH.exists() else ""
    st.markdown("<style>" + theme_css(is_dark) + base + "</style>", unsafe_allow_html=True)


def blur_search_input() -> None:
    components.html(
        """
        <script>
            const el = window.parent.document.activeElement;
            if (el && el.tagName === "INPUT") { el.blur(); }
        </script>
        """,
        height=0,
    )


def card(title: str, body: str) -> None:
    st.markdown(
        f"""
        <div class="wx-card">
          <div class="wx-card-title">{title}</div>
          {body}
        </div>
        """,
        unsafe_allow_html=True,
    )


def render_current(view: DashboardView) -> None:
    e = html.escape
    badge = f'<div class="wx-badge">{e(view.condition)}</div>' if view.condition else ""
    head = f"""
        <div class="wx-place">{e(view.title)}</div>
        <div class="wx-region">{e(view.region)}</div>
        {badge}
    """
    if view.loading and not view.has_data:
        body = head + '<p class="wx-region">Loading forecast…</p>'
    elif view.has_data:
        tiles = "".join(
            f'<div class="wx-tile"><div class="wx-tile-label">{d.icon} {d.label}</div>'
            f'<div class="wx-tile-value">{e(d.value)}</div></div>'
            for d in view.details
        )
        body = head + f"""
            <div style="display:flex;align-items:center;gap:1.5rem;padding:1rem 0;">
              <div class="wx-temp">{view.temperature}</div>
              <div class="wx-icon">{view.icon}</div>
            </div>
            <div class="wx-grid">{tiles}</div>
        """
    else:
        body = head
    card("Current conditions", body)


def render_astronomical(view: DashboardView) -> None:
    card(
        "Astronomical",
        f"""
        <div class="wx-grid">
          <div class="wx-tile"><div class="wx-tile-label">Sunrise</div>
            <div class="wx-tile-value wx-sunrise">{view.sunrise}</div></div>
          <div class="wx-tile"><div class="wx-tile-label">Sunset</div>
            <div class="wx-tile-value wx-sunset">{view.sunset}</div></div>
        </div>
        """,
    )


def render_hourly(view: DashboardView) -> None:
    strip = "".join(
        f'<div class="wx-hour"><div class="wx-hour-time">{h.hour}</div>'
        f'<div>🌡️</div><div class="wx-hour-temp">{h.temperature}</div></div>'
        for h in view.hours
    )
    card("Hourly forecast", f'<div class="wx-strip">{strip}</div>')


def render_hourly_chart(state, view: DashboardView) -> None:
    df = hourly_frame(state.forecast)
    if df.empty or not view.hours:
        return
    start = pd.Timestamp(view.hours[0].time)
    window = df[df.index >= start].head(len(view.hours)).reset_index()
    if window.empty:
        return
    unit = view.units.get("temp", "")
    long = window.melt(
        id_vars="time",
        value_vars=[c for c in ("temperature_2m", "apparent_temperature") if c in window.columns],
        var_name="series",
        value_name="value",
    )
    c = (
        alt.Chart(long)
        .mark_line(point=True)
        .encode(
            x=alt.X("time:T", title="Time (local)"),
            y=alt.Y("value:Q", title=f"Temperature ({unit})"),
            color=alt.Color("series:N", title=None),
            tooltip=[
                alt.Tooltip("time:T", title="Time"),
                alt.Tooltip("series:N", title="Series"),
                alt.Tooltip("value:Q", title="Value", format=".1f"),
            ],
        )
        .properties(height=240)
        .interactive()
    )
    with st.expander("Temperature chart"):
        st.altair_chart(c, use_container_width=True)


def render_daily(view: DashboardView) -> None:
    rows = "".join(
        f"""<div class="wx-day">
              <span class="wx-day-name">{d.weekday}</span>
              <span>{d.icon}</span>
              <span class="wx-day-label">{html.escape(d.label)}</span>
              <span class="wx-day-low">{d.low}</span>
              <span class="wx-day-high">{d.high}</span>
            </div>"""
        for d in view.days
    )
    card("7-day outlook", rows)


# ═════════════════════════════════════════════════════════════════════════
# HEADER
# ═════════════════════════════════════════════════════════════════════════
settle()
state = RUNNER.call(controller.snapshot)
inject_css(state.is_dark)

col_brand, col_units, col_theme = st.columns([3, 1, 1])
with col_brand:
    st.markdown(f'<div class="wx-brand">{html.escape(SETTINGS.title)}</div>', unsafe_allow_html=True)
with col_units:
    st.radio(
        "Units",
        options=["metric", "imperial"],
        index=0 if state.units == "metric" else 1,
        format_func=lambda u: "°C" if u == "metric" else "°F",
        horizontal=True,
        key="units_choice",
        on_change=on_units_change,
        label_visibility="collapsed",
    )
with col_theme:
    st.toggle("Dark mode", value=state.is_dark, key="dark_mode", on_change=on_theme_change)


# ═════════════════════════════════════════════════════════════════════════
# SEARCH
# ═════════════════════════════════════════════════════════════════════════
col_search, col_clear = st.columns([12, 1])
with col_search:
    st.text_input(
        "Search city",
        key="query_input",
        on_change=on_query_change,
        placeholder="Search city",
        label_visibility="collapsed",
    )
with col_clear:
    if state.query:
        st.button("✕", key="clear_query", on_click=on_clear_query, help="Clear search")

if RUNNER.call(controller.consume_blur):
    blur_search_input()

if state.suggestions:
    for idx, s in enumerate(state.suggestions):
        marker = "▸ " if idx == state.active_index else "📍 "
        st.button(
            f"{marker}{s.name} — {s.region_line}",
            key=f"suggestion_{idx}_{s.id}",
            on_click=on_select,
            args=(idx,),
            use_container_width=True,
        )
    c1, c2 = st.columns(2)
    with c1:
        st.button("Use first match", on_click=on_first_match, use_container_width=True)
    with c2:
        st.button("Close suggestions", on_click=on_dismiss, use_container_width=True)


# ═════════════════════════════════════════════════════════════════════════
# FORECAST CARDS
# ═════════════════════════════════════════════════════════════════════════
view = build_view(
    state,
    now=location_now(state.forecast) if state.forecast is not None else None,
    hourly_points=SETTINGS.hourly_points,
)

if view.error:
    st.markdown(f'<p class="wx-error">{html.escape(view.error)}</p>', unsafe_allow_html=True)

left, right = st.columns([4, 8])
with left:
    render_current(view)
    render_astronomical(view)
with right:
    render_hourly(view)
    render_hourly_chart(state, view)
    render_daily(view)

if state.forecast is not None and state.forecast.timezone:
    st.caption(f"Timezone: `{state.forecast.timezone}` · Data: Open-Meteo")
