#!/usr/bin/env python3
"""fetch_forecast.py — Geocode a city and save its forecast as a JSON snapshot.

Usage:
    python scripts/fetch_forecast.py [city] [--units imperial]
"""

import argparse
import asyncio
import re
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from src.dashboard.settings import load_settings
from src.utils.io import ensure_dirs, load_project_config, save_json
from src.utils.logging_config import setup_logging
from src.weather.client import OpenMeteoClient


async def fetch_snapshot(city: str, units: str) -> dict:
    settings = load_settings()
    async with OpenMeteoClient.from_settings(settings) as client:
        if city:
            matches = await client.search_places(city, count=1, language=settings.language)
            if not matches:
                raise SystemExit(f"[fetch_forecast] No match for {city!r}")
            place = matches[0]
        else:
            place = settings.default_city
        forecast = await client.fetch_forecast(place, units)
    return {
        "place": place.model_dump(),
        "units": units,
        "forecast": forecast.model_dump(),
    }


def slug(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-") or "place"


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("city", nargs="?", default="", help="Place name (defaults to the configured city)")
    parser.add_argument("--units", choices=["metric", "imperial"], default="metric")
    args = parser.parse_args()

    cfg = load_project_config()
    setup_logging(cfg.get("logging", {}).get("level", "INFO"), log_file=None)
    ensure_dirs()

    snapshot = asyncio.run(fetch_snapshot(args.city, args.units))
    out = ROOT / cfg["paths"]["snapshots"] / f"{slug(snapshot['place']['name'])}_{args.units}.json"
    save_json(snapshot, out)
    n_hours = len(snapshot["forecast"]["hourly"]["time"])
    print(f"[fetch_forecast] {snapshot['place']['name']}: {n_hours} hourly points → {out}")
