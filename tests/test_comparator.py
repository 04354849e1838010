from __future__ import annotations
from salbp_core.alb_io import parse_solution_text
from salbp_core.comparator import compare_station_counts
from salbp_core.models import Station

def test_match_ignores_task_placement():
    ref = parse_solution_text("station_1: 1 3\nstation_2: 2")
    player = [Station(id=1, tasks=["2"]), Station(id=5, tasks=["1", "3"])]
    v = compare_station_counts(player, ref)
    assert v.kind == "station-count-match"
    assert v.matched

def test_mismatch_reports_both_counts():
    ref = parse_solution_text("station_1: 1 2 3")
    player = [Station(id=1, tasks=["1"]), Station(id=2, tasks=["2", "3"])]
    v = compare_station_counts(player, ref)
    assert v.kind == "station-count-mismatch"
    assert not v.matched
    assert (v.player_count, v.reference_count) == (2, 1)
