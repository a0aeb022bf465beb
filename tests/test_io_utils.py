import json
from pathlib import Path

from src.utils import io


def test_save_json_creates_parent_dir(tmp_path: Path):
    target = tmp_path / "nested" / "payload.json"
    payload = {"a": 1, "b": "x", "c": [1, 2, 3]}
    io.save_json(payload, target)
    assert target.exists()
    assert json.loads(target.read_text()) == payload


def test_load_yaml_empty_file_is_empty_dict(tmp_path: Path):
    target = tmp_path / "empty.yaml"
    target.write_text("")
    assert io.load_yaml(target) == {}


def test_project_config_has_required_sections():
    cfg = io.load_project_config()
    assert isinstance(cfg, dict)
    for key in ("artifacts", "snapshots", "logs"):
        assert key in cfg["paths"]
    assert cfg["search"]["min_query_length"] == 2
    assert cfg["default_city"]["name"] == "New Delhi"
    assert cfg["forecast"]["default_units"] in ("metric", "imperial")
