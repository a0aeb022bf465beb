"""I/O utilities for loading configs, saving snapshots, and managing paths."""

import json
from pathlib import Path
from typing import Any, Dict

import yaml


ROOT = Path(__file__).resolve().parents[2]


def load_yaml(path: str | Path) -> Dict[str, Any]:
    with open(path) as f:
        return yaml.safe_load(f) or {}


def load_project_config() -> Dict[str, Any]:
    return load_yaml(ROOT / "configs" / "project.yaml")


def save_json(data: dict, path: str | Path) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(data, f, indent=2, default=str)


def ensure_dirs() -> None:
    """Create all directories listed under `paths` in the project config."""
    cfg = load_project_config()
    for key, p in cfg.get("paths", {}).items():
        full = ROOT / p
        if full.suffix:
            full.parent.mkdir(parents=True, exist_ok=True)
        else:
            full.mkdir(parents=True, exist_ok=True)
