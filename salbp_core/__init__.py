"""
salbp_core package: instance/solution parsing, constraint engine, puzzle
sessions, solution comparison, catalog retrieval, config and exports.
"""
from .alb_io import parse_instance_text, parse_solution_text, export_solution_text
from .comparator import compare_station_counts
from .engine import can_assign, can_remove_station, check_assign, check_remove_station, is_fully_assigned
from .errors import CatalogEmptyError, ConfigError, ResourceUnavailableError, SalbpError
from .game import (
    new_session, select_task, clear_selection, add_station, remove_station,
    reset_all_stations, assign_task, assign_selected, unassign_task, attach_reference, verdict,
)
from .models import (
    AppConfig, AssignmentState, Instance, PrecedenceEdge, PuzzleSession,
    ReferenceSolution, Station, Task, Verdict, Violation,
)
