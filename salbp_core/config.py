# salbp_core/config.py
from __future__ import annotations
import json
import os
import textwrap
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from .constants import CATALOG_FILE, INSTANCE_DIR, INSTANCE_SUFFIX, SOLUTION_DIR, SOLUTION_SUFFIX
from .errors import ConfigError
from .models import AppConfig

CONFIG_ENV_VAR = "SALBP_CONFIG"
DEFAULT_CONFIG_PATH = "assets/config.yaml"

# ===== App defaults =====
DEFAULT_CONFIG = {
    "catalog_kind": "directory",     # directory | http
    "catalog_root": "assets",        # holds instance/ and soluce/
    "base_url": "",                  # only for catalog_kind: http
    "request_timeout": 10.0,
    "default_instance": "i1",
    "random_seed": None,             # None -> new graph picks are not reproducible
    "log_level": "INFO",
    "log_file": None,
}


def load_config(path: Optional[str] = None) -> AppConfig:
    """
    Defaults overlaid with the YAML mapping at `path` (or $SALBP_CONFIG,
    or assets/config.yaml). A missing file yields the defaults.
    """
    path = path or os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH
    merged = dict(DEFAULT_CONFIG)
    p = Path(path)
    if p.exists():
        try:
            with open(p, "r", encoding="utf-8") as f:
                obj = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {p}: {e}") from e
        if not isinstance(obj, dict):
            raise ConfigError(f"{p} must contain a mapping of settings.")
        unknown = sorted(set(obj) - set(DEFAULT_CONFIG))
        if unknown:
            raise ConfigError(f"Unknown settings in {p}: {unknown}")
        merged.update(obj)
    try:
        return AppConfig(**merged)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


# ===== Bundled sample catalog =====
SAMPLE_INSTANCES = {
    "i1": textwrap.dedent("""\
        <number of tasks>
        6

        <cycle time>
        10

        <task times>
        1 4
        2 5
        3 3
        4 6
        5 2
        6 4

        <precedence relations>
        1,3
        2,4
        3,5
        4,5
        5,6

        <end>
        """),
    "i2": textwrap.dedent("""\
        <number of tasks>
        8

        <cycle time>
        12

        <task times>
        1 5
        2 3
        3 4
        4 6
        5 2
        6 5
        7 4
        8 3

        <precedence relations>
        1,2
        1,3
        2,4
        3,5
        4,6
        5,6
        6,7
        6,8

        <end>
        """),
}

SAMPLE_SOLUTIONS = {
    "i1": "station_1: 1 2\nstation_2: 3 4\nstation_3: 5 6\n",
    "i2": "station_1: 1 2 3\nstation_2: 4 5\nstation_3: 6 7 8\n",
}


def ensure_assets_exist(root: str = "assets"):
    base = Path(root)
    (base / INSTANCE_DIR).mkdir(parents=True, exist_ok=True)
    (base / SOLUTION_DIR).mkdir(parents=True, exist_ok=True)
    for name, text in SAMPLE_INSTANCES.items():
        path = base / INSTANCE_DIR / f"{name}{INSTANCE_SUFFIX}"
        if not path.exists():
            path.write_text(text, encoding="utf-8")
    for name, text in SAMPLE_SOLUTIONS.items():
        path = base / SOLUTION_DIR / f"{name}{SOLUTION_SUFFIX}"
        if not path.exists():
            path.write_text(text, encoding="utf-8")
    listing = base / INSTANCE_DIR / CATALOG_FILE
    if not listing.exists():
        names = [f"{n}{INSTANCE_SUFFIX}" for n in SAMPLE_INSTANCES]
        listing.write_text(json.dumps(names, indent=2), encoding="utf-8")


# ===== Visual theme (wrapped in <style>) =====
def ui_css() -> str:
    return """
<style>
:root{
  --line:#2a3142; --sub:#B7C2D3;
  --good:#25d790; --warn:#ffb547; --danger:#ff6b6b;
  --radius:14px;
}
.block-container { padding-top: 1rem; max-width: 1200px; }
.station{
  border:1px solid var(--line); border-radius:var(--radius);
  padding:10px 12px; margin-bottom:6px;
}
.station.full{ border-color: var(--warn); }
.station.reference{ border:2px solid var(--good); }
.chip{
  display:inline-block; padding:4px 10px; margin:2px;
  border:1px solid var(--line); border-radius:999px;
}
.caption { color: var(--sub); font-size: 12px; margin-top: 6px }
</style>
"""
