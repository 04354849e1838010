from __future__ import annotations
import math
from typing import Iterable, List, Optional

from .models import AssignmentState, Instance, LineMetrics, Station, Violation

# -----------------------
# Core convenience lookups
# -----------------------
def station_load(instance: Instance, station: Station) -> int:
    # unknown ids count 0 so reference stations always render
    return sum(instance.duration_of(t) or 0 for t in station.tasks)

def missing_predecessors(instance: Instance, state: AssignmentState, task_id: str) -> List[str]:
    return [p for p in instance.predecessors(task_id) if p not in state.assigned]

def unassigned_tasks(instance: Instance, state: AssignmentState) -> List[str]:
    return [tid for tid in instance.task_ids() if tid not in state.assigned]

def ready_tasks(instance: Instance, state: AssignmentState) -> List[str]:
    """Unassigned tasks whose predecessors are all assigned, in instance order."""
    return [tid for tid in unassigned_tasks(instance, state)
            if not missing_predecessors(instance, state, tid)]

# -----------------------
# Feasibility rules
# -----------------------
def check_assign(instance: Instance, state: AssignmentState, task_id: str, station_id: int) -> Optional[Violation]:
    """
    None when `task_id` may go into `station_id` right now, otherwise the
    first failing rule: unknown task/station, already assigned, precedence,
    then capacity (load == cycle time is allowed).
    """
    duration = instance.duration_of(task_id)
    if duration is None:
        return Violation(kind="unknown_task", task_id=task_id, station_id=station_id)
    station = state.station(station_id)
    if station is None:
        return Violation(kind="unknown_station", task_id=task_id, station_id=station_id)
    if task_id in state.assigned:
        return Violation(kind="already_assigned", task_id=task_id, station_id=station_id)

    missing = missing_predecessors(instance, state, task_id)
    if missing:
        return Violation(kind="precedence", task_id=task_id, station_id=station_id,
                         missing_predecessors=missing)

    total = station_load(instance, station) + duration
    if total > instance.cycle_time:
        return Violation(kind="capacity", task_id=task_id, station_id=station_id,
                         load=total, duration=duration, cycle_time=instance.cycle_time)
    return None

def can_assign(instance: Instance, state: AssignmentState, task_id: str, station_id: int) -> bool:
    return check_assign(instance, state, task_id, station_id) is None

def check_remove_station(state: AssignmentState, station_id: int) -> Optional[Violation]:
    station = state.station(station_id)
    if station is None:
        return Violation(kind="unknown_station", station_id=station_id)
    if station.tasks:
        return Violation(kind="station_not_empty", station_id=station_id)
    return None

def can_remove_station(state: AssignmentState, station_id: int) -> bool:
    return check_remove_station(state, station_id) is None

def is_fully_assigned(instance: Instance, state: AssignmentState) -> bool:
    return all(tid in state.assigned for tid in instance.task_ids())

# -----------------------
# Scoring
# -----------------------
def line_metrics(instance: Instance, stations: Iterable[Station]) -> LineMetrics:
    stations = list(stations)
    total = instance.total_work()
    ct = instance.cycle_time
    loads = {s.id: station_load(instance, s) for s in stations}
    n = len(stations)
    idle = sum(ct - load for load in loads.values())
    eff = (sum(loads.values()) / (n * ct)) * 100 if n else 0.0
    return LineMetrics(
        total_work=total,
        cycle_time=ct,
        min_stations=max(1, math.ceil(total / ct)),
        actual_stations=n,
        idle_time=idle,
        efficiency=eff,
        balance_delay=(100 - eff) if n else 0.0,
        station_loads=loads,
    )
