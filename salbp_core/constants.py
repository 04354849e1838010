from __future__ import annotations
import re
from typing import Dict

# -----------------------------
# Instance (.alb) section tags
# -----------------------------
TAG_NUMBER_OF_TASKS = "<number of tasks>"
TAG_CYCLE_TIME = "<cycle time>"
TAG_TASK_TIMES = "<task times>"
TAG_PRECEDENCE = "<precedence relations>"
TAG_END = "<end>"

DEFAULT_CYCLE_TIME = 1000

# -----------------------------
# Reference solution (.sol)
# -----------------------------
STATION_LINE_RE = re.compile(r"^station_(\d+):\s*(.+)$", re.IGNORECASE)

# -----------------------------
# Catalog layout
# -----------------------------
INSTANCE_DIR = "instance"
SOLUTION_DIR = "soluce"
CATALOG_FILE = "list.json"
INSTANCE_SUFFIX = ".alb"
SOLUTION_SUFFIX = ".sol"

# -----------------------------
# Verdicts
# -----------------------------
VERDICT_MATCH = "station-count-match"
VERDICT_MISMATCH = "station-count-mismatch"

# -----------------------------
# Graph colours (DOT rendering)
# -----------------------------
NODE_COLORS: Dict[str, str] = {
    "assigned": "#444444",
    "selected": "#f39c12",
    "ready": "#9CA8B3",
    "blocked": "#d5dae0",
}
EDGE_COLOR = "#b22222"


def strip_suffix(name: str, suffix: str = INSTANCE_SUFFIX) -> str:
    name = (name or "").strip()
    if name.endswith(suffix):
        return name[: -len(suffix)]
    return name
