#!/usr/bin/env python3
"""run_app.py — Launch the weather dashboard (extra args go to `streamlit run`)."""

import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]

if __name__ == "__main__":
    subprocess.run(
        [sys.executable, "-m", "streamlit", "run", str(ROOT / "app" / "app.py"), *sys.argv[1:]],
        check=True,
    )
