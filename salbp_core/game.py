from __future__ import annotations
import logging
from typing import Optional

from .alb_io import parse_instance_text, parse_solution_text
from .comparator import compare_station_counts
from .engine import check_assign, check_remove_station, is_fully_assigned
from .models import AssignmentState, PuzzleSession, Station, Verdict, Violation

logger = logging.getLogger(__name__)


# -----------------------
# Session lifecycle
# -----------------------
def new_session(name: str, instance_text: str) -> PuzzleSession:
    """
    Fresh context for one puzzle: parsed instance, empty stations, no
    selection, no reference. Callers replace their previous session with the
    returned object as a whole.
    """
    instance = parse_instance_text(instance_text)
    logger.info("Loaded instance %s: %d tasks, %d precedence edges, cycle time %d",
                name, len(instance.tasks), len(instance.edges), instance.cycle_time)
    return PuzzleSession(name=name, instance=instance)


# -----------------------
# Selection
# -----------------------
def select_task(session: PuzzleSession, task_id: str) -> Optional[Violation]:
    with session.lock:
        if not session.instance.has_task(task_id):
            return Violation(kind="unknown_task", task_id=task_id)
        if task_id in session.state.assigned:
            return Violation(kind="already_assigned", task_id=task_id)
        session.selected_task = task_id
        return None

def clear_selection(session: PuzzleSession):
    with session.lock:
        session.selected_task = None


# -----------------------
# Station mutators
# -----------------------
def add_station(session: PuzzleSession) -> Station:
    with session.lock:
        state = session.state
        next_id = max((s.id for s in state.stations), default=0) + 1
        station = Station(id=next_id)
        state.stations.append(station)
        logger.debug("Added station %d", next_id)
        return station

def remove_station(session: PuzzleSession, station_id: int) -> Optional[Violation]:
    with session.lock:
        state = session.state
        violation = check_remove_station(state, station_id)
        if violation:
            logger.debug("Refused to remove station %s: %s", station_id, violation.kind)
            return violation
        state.stations = [s for s in state.stations if s.id != station_id]
        logger.debug("Removed station %d", station_id)
        return None

def reset_all_stations(session: PuzzleSession):
    with session.lock:
        session.state = AssignmentState()
        logger.info("Reset all stations for %s", session.name)


# -----------------------
# Task mutators
# -----------------------
def assign_task(session: PuzzleSession, task_id: str, station_id: int) -> Optional[Violation]:
    with session.lock:
        state = session.state
        violation = check_assign(session.instance, state, task_id, station_id)
        if violation:
            logger.debug("Refused task %s -> station %s: %s", task_id, station_id, violation.kind)
            return violation
        state.station(station_id).tasks.append(task_id)
        state.assigned.add(task_id)
        session.selected_task = None
        logger.debug("Assigned task %s to station %d", task_id, station_id)
        return None

def assign_selected(session: PuzzleSession, station_id: int) -> Optional[Violation]:
    """Assign the pending selection; a click with nothing selected does nothing."""
    with session.lock:
        if session.selected_task is None:
            return None
        return assign_task(session, session.selected_task, station_id)

def unassign_task(session: PuzzleSession, station_id: int, task_id: str) -> Optional[Violation]:
    # successors already placed elsewhere are not re-checked
    with session.lock:
        state = session.state
        station = state.station(station_id)
        if station is None:
            return Violation(kind="unknown_station", task_id=task_id, station_id=station_id)
        if task_id not in station.tasks:
            return Violation(kind="not_in_station", task_id=task_id, station_id=station_id)
        station.tasks.remove(task_id)
        state.assigned.discard(task_id)
        logger.debug("Unassigned task %s from station %d", task_id, station_id)
        return None


# -----------------------
# Reference solution
# -----------------------
def attach_reference(session: PuzzleSession, solution_text: str):
    reference = parse_solution_text(solution_text)
    with session.lock:
        session.reference = reference
    logger.info("Reference solution for %s: %d stations", session.name, reference.station_count)
    return reference

def verdict(session: PuzzleSession) -> Optional[Verdict]:
    """Station-count verdict, or None until every task is assigned and a reference is attached."""
    with session.lock:
        if session.reference is None or not is_fully_assigned(session.instance, session.state):
            return None
        return compare_station_counts(session.state.stations, session.reference)
