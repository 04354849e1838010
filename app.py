from __future__ import annotations
import random
from typing import List, Tuple

import streamlit as st

from salbp_core.alb_io import export_solution_text
from salbp_core.catalog import catalog_from_config, fetch_first_available, pick_other_instance
from salbp_core.config import ensure_assets_exist, load_config, ui_css
from salbp_core.engine import is_fully_assigned, line_metrics, missing_predecessors, station_load, unassigned_tasks
from salbp_core.errors import ConfigError, SalbpError
from salbp_core.export_pdf import render_solution_pdf
from salbp_core.game import (
    new_session, select_task, clear_selection, add_station, remove_station,
    reset_all_stations, assign_selected, unassign_task, attach_reference, verdict,
)
from salbp_core.logger import setup_logging
from salbp_core.models import PuzzleSession
from salbp_core.ui_helpers import (
    instance_to_dot, metrics_table, station_title, stations_dataframe, task_label,
)

# -----------------------------
# Page config
# -----------------------------
st.set_page_config(layout="wide", page_title="SALBP-1 Trainer")
st.markdown(ui_css(), unsafe_allow_html=True)

try:
    cfg = load_config()
except ConfigError as e:
    st.error(str(e))
    st.stop()

log = setup_logging(cfg.log_level, cfg.log_file)
if cfg.catalog_kind == "directory":
    ensure_assets_exist(cfg.catalog_root)
catalog = catalog_from_config(cfg)

# -----------------------------
# Session state init
# -----------------------------
def _ensure_state():
    ss = st.session_state
    ss.setdefault("puzzle", None)          # PuzzleSession for the current graph
    ss.setdefault("instance_names", None)  # cached catalog listing
    ss.setdefault("flash", [])             # [(level, message)] shown after rerun
    ss.setdefault("rng", random.Random(cfg.random_seed))

_ensure_state()

def _puzzle() -> PuzzleSession:
    return st.session_state["puzzle"]

def _flash(level: str, msg: str):
    st.session_state["flash"].append((level, msg))

def _show_flash():
    msgs: List[Tuple[str, str]] = st.session_state["flash"]
    for level, msg in msgs:
        getattr(st, level, st.info)(msg)
    st.session_state["flash"] = []

# --- compatibility rerun helper (Streamlit >=1.31 uses st.rerun) ---
def _safe_rerun():
    """Rerun compatible with both new and older Streamlit versions."""
    if hasattr(st, "rerun"):
        st.rerun()
    else:  # fallback for older releases
        st.experimental_rerun()

def _instance_names() -> List[str]:
    if st.session_state["instance_names"] is None:
        try:
            st.session_state["instance_names"] = catalog.list_instances()
        except SalbpError as e:
            _flash("error", f"Error loading instance list: {e}")
            st.session_state["instance_names"] = []
    return st.session_state["instance_names"]

def _load_puzzle(name: str) -> bool:
    # fetch first: a failed fetch leaves the current puzzle untouched
    try:
        text = catalog.instance_text(name)
    except SalbpError as e:
        _flash("error", str(e))
        return False
    st.session_state["puzzle"] = new_session(name, text)
    return True

def _report(violation):
    if violation is not None:
        _flash("warning", violation.message())

if _puzzle() is None:
    candidates = [cfg.default_instance] + [n for n in _instance_names() if n != cfg.default_instance]
    try:
        first, text = fetch_first_available(catalog, candidates)
    except SalbpError as e:
        _flash("error", str(e))
        _show_flash()
        st.stop()
    if first != cfg.default_instance:
        _flash("warning", f"Graph {cfg.default_instance} is unavailable; loaded {first} instead.")
    st.session_state["puzzle"] = new_session(first, text)

# -----------------------------
# Sidebar: instance choice
# -----------------------------
with st.sidebar:
    st.header("Instance")
    names = _instance_names()
    current = _puzzle().name
    if names:
        idx = names.index(current) if current in names else 0
        choice = st.selectbox("Graph", names, index=idx)
        if st.button("Load graph", disabled=(choice == current)):
            _load_puzzle(choice)
            _safe_rerun()
    if st.button("🔄 Change to random graph"):
        try:
            _load_puzzle(pick_other_instance(names, current, st.session_state["rng"]))
        except SalbpError as e:
            _flash("error", str(e))
        _safe_rerun()
    st.divider()
    st.caption(f"Catalog: {cfg.catalog_kind} ({cfg.base_url or cfg.catalog_root})")

# -----------------------------
# Header
# -----------------------------
puzzle = _puzzle()
instance, state = puzzle.instance, puzzle.state

st.title("SALBP-1 Game - Task Assignment")
_show_flash()

h1, h2, h3 = st.columns(3)
h1.markdown(f"**Current graph:** {puzzle.name}.alb")
h2.markdown(f"**Cycle time:** {instance.cycle_time}")
h3.markdown(f"**Assigned:** {len(state.assigned)} / {len(instance.tasks)}")

if instance.dangling_edges():
    st.warning("Some precedence relations name tasks missing from the task list; "
               "their successors can never be assigned.")

# -----------------------------
# Task selection
# -----------------------------
open_tasks = unassigned_tasks(instance, state)

def _option_label(tid: str) -> str:
    if tid == "(none)":
        return tid
    blocked = " (waiting on predecessors)" if missing_predecessors(instance, state, tid) else ""
    return task_label(instance, tid) + blocked

options = ["(none)"] + open_tasks
sel_idx = options.index(puzzle.selected_task) if puzzle.selected_task in options else 0
pick = st.selectbox("Selected task", options, index=sel_idx, format_func=_option_label)
if pick == "(none)" and puzzle.selected_task is not None:
    clear_selection(puzzle)
elif pick != "(none)" and pick != puzzle.selected_task:
    _report(select_task(puzzle, pick))

st.graphviz_chart(instance_to_dot(instance, state, puzzle.selected_task), use_container_width=True)

# -----------------------------
# Station controls
# -----------------------------
full = bool(instance.tasks) and is_fully_assigned(instance, state)
b1, b2, b3 = st.columns(3)
with b1:
    if st.button("Reset stations"):
        reset_all_stations(puzzle)
        _safe_rerun()
with b2:
    if st.button("+ Add a station"):
        add_station(puzzle)
        _safe_rerun()
with b3:
    if st.button("✅ Validate solution", type="primary", disabled=not full,
                 help="Show optimal solution" if full else "Assign all tasks first"):
        try:
            attach_reference(puzzle, catalog.solution_text(puzzle.name))
        except SalbpError as e:
            log.warning("Reference solution for %s unavailable: %s", puzzle.name, e)
            _flash("error", "Could not load optimal solution.")
        _safe_rerun()

st.subheader(f"Your solution ({len(state.stations)} stations)")
COLS = 4
for row_start in range(0, len(state.stations), COLS):
    cols = st.columns(COLS)
    for col, station in zip(cols, state.stations[row_start:row_start + COLS]):
        with col:
            load = station_load(instance, station)
            cls = "station full" if load == instance.cycle_time else "station"
            st.markdown(f"<div class='{cls}'><b>{station_title(instance, station)}</b></div>",
                        unsafe_allow_html=True)
            st.progress(min(1.0, load / instance.cycle_time))
            if st.button("Assign selected here", key=f"assign_{station.id}",
                         disabled=puzzle.selected_task is None):
                _report(assign_selected(puzzle, station.id))
                _safe_rerun()
            if not station.tasks:
                st.caption("(Select a task, then assign it here)")
            for tid in list(station.tasks):
                t1, t2 = st.columns([4, 1])
                t1.write(task_label(instance, tid))
                if t2.button("🗑️", key=f"unassign_{station.id}_{tid}", help="Remove task"):
                    _report(unassign_task(puzzle, station.id, tid))
                    _safe_rerun()
            if st.button("Delete station", key=f"delete_{station.id}"):
                _report(remove_station(puzzle, station.id))
                _safe_rerun()

# -----------------------------
# Reference solution & verdict
# -----------------------------
if puzzle.reference is not None:
    st.divider()
    ref = puzzle.reference
    v = verdict(puzzle)
    mark = "" if v is None else (" ✅" if v.matched else " ❌")
    st.subheader(f"Optimal solution ({ref.station_count} stations){mark}")
    if v is None:
        st.info("Assign every task again to compare with the optimal solution.")
    elif v.matched:
        st.success(f"You matched the optimal station count ({v.reference_count}).")
    else:
        st.error(f"You used {v.player_count} stations; the optimum needs {v.reference_count}.")
    st.dataframe(stations_dataframe(instance, ref.stations), hide_index=True, use_container_width=True)

# -----------------------------
# Metrics & downloads
# -----------------------------
st.divider()
with st.expander("Line metrics"):
    for k, val in metrics_table(line_metrics(instance, state.stations)).items():
        st.write(f"**{k}:** {val}")

d1, d2 = st.columns(2)
with d1:
    st.download_button("Download my solution (.sol)", data=export_solution_text(state.stations).encode("utf-8"),
                       file_name=f"{puzzle.name}.sol", mime="text/plain", disabled=not state.stations)
with d2:
    st.download_button("Download solution sheet (PDF)",
                       data=render_solution_pdf(puzzle.name, instance, state.stations),
                       file_name=f"{puzzle.name}.pdf", mime="application/pdf", disabled=not state.stations)
