"""
Small, UI-agnostic helpers shared by app.py and pages/.
Everything here only reads the session; nothing mutates it.
"""
from __future__ import annotations
from typing import Dict, Iterable, Optional

import pandas as pd

from .constants import EDGE_COLOR, NODE_COLORS
from .engine import missing_predecessors, station_load
from .models import AssignmentState, Instance, LineMetrics, Station


def _q(s: str) -> str:
    return '"' + str(s).replace("\\", "\\\\").replace('"', '\\"') + '"'

def task_status(instance: Instance, state: AssignmentState, task_id: str,
                selected: Optional[str] = None) -> str:
    if task_id in state.assigned:
        return "assigned"
    if task_id == selected:
        return "selected"
    if missing_predecessors(instance, state, task_id):
        return "blocked"
    return "ready"

def instance_to_dot(instance: Instance, state: AssignmentState, selected: Optional[str] = None) -> str:
    out = ["digraph G {", "  rankdir=LR;",
           '  node [shape=circle, style=filled, fontname="Helvetica", fontsize=11];',
           f'  edge [color="{EDGE_COLOR}", arrowhead=normal];']
    for t in instance.tasks:
        status = task_status(instance, state, t.id, selected)
        font = "#cccccc" if status == "assigned" else "#111111"
        out.append(f'  {_q(t.id)} [label={_q(f"{t.id} ({t.duration})")}, '
                   f'fillcolor="{NODE_COLORS[status]}", fontcolor="{font}"];')
    known = set(instance.task_ids())
    for e in instance.edges:
        for end in (e.predecessor, e.successor):
            if end not in known:
                out.append(f'  {_q(end)} [label={_q(f"{end} (?)")}, style=dashed, fillcolor=white];')
                known.add(end)
        out.append(f"  {_q(e.predecessor)} -> {_q(e.successor)};")
    out.append("}")
    return "\n".join(out)

def tasks_dataframe(instance: Instance, state: AssignmentState, selected: Optional[str] = None) -> pd.DataFrame:
    rows = []
    for t in instance.tasks:
        rows.append({
            "Task": t.id,
            "Duration": t.duration,
            "Predecessors": ", ".join(instance.predecessors(t.id)),
            "Successors": ", ".join(instance.successors(t.id)),
            "Station": state.station_of(t.id),
            "Status": task_status(instance, state, t.id, selected),
        })
    return pd.DataFrame(rows, columns=["Task", "Duration", "Predecessors", "Successors", "Station", "Status"])

def edges_dataframe(instance: Instance) -> pd.DataFrame:
    known = set(instance.task_ids())
    rows = [{
        "Predecessor": e.predecessor,
        "Successor": e.successor,
        "Dangling": e.predecessor not in known or e.successor not in known,
    } for e in instance.edges]
    return pd.DataFrame(rows, columns=["Predecessor", "Successor", "Dangling"])

def stations_dataframe(instance: Instance, stations: Iterable[Station]) -> pd.DataFrame:
    rows = []
    for s in stations:
        load = station_load(instance, s)
        rows.append({
            "Station": s.id,
            "Tasks": " ".join(s.tasks),
            "Load": load,
            "Idle": instance.cycle_time - load,
        })
    return pd.DataFrame(rows, columns=["Station", "Tasks", "Load", "Idle"])

def metrics_table(m: LineMetrics) -> Dict[str, str]:
    return {
        "Total work content": str(m.total_work),
        "Cycle time": str(m.cycle_time),
        "Theoretical minimum stations": str(m.min_stations),
        "Stations used": str(m.actual_stations),
        "Idle time": str(m.idle_time),
        "Efficiency": f"{m.efficiency:.2f}%",
        "Balance delay": f"{m.balance_delay:.2f}%",
    }

def task_label(instance: Instance, task_id: str) -> str:
    dur = instance.duration_of(task_id)
    return f"Task {task_id} ({dur if dur is not None else '?'})"

def station_title(instance: Instance, station: Station) -> str:
    return f"Station {station.id} - {station_load(instance, station)} / {instance.cycle_time}"
